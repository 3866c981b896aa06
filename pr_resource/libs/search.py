"""Search query composition for pull request polling."""

from __future__ import annotations

from pr_resource.libs.models import PullRequestState, Source

STATE_QUALIFIERS: dict[PullRequestState, str] = {
    PullRequestState.OPEN: "is:open",
    PullRequestState.MERGED: "is:merged",
    PullRequestState.CLOSED: "is:closed is:unmerged",
}


def build_search_query(source: Source) -> str:
    """
    Compose the GitHub search query for the pull requests a source tracks.

    Search cannot OR state qualifiers, so a state qualifier is only added when exactly
    one state is allowed. Callers filter on `PullRequest.state` otherwise.

    Args:
        source: Validated resource configuration

    Returns:
        Search query string for `GitHubAPI.search_pull_requests`
    """
    terms = ["is:pr", f"repo:{source.repository}"]

    if source.base_branch:
        terms.append(f"base:{source.base_branch}")

    for label in source.labels:
        terms.append(f'label:"{label}"')

    states = set(source.pull_request_states)
    if len(states) == 1:
        terms.append(STATE_QUALIFIERS[states.pop()])

    if source.ignore_drafts:
        terms.append("draft:false")

    terms.append("sort:updated")
    return " ".join(terms)
