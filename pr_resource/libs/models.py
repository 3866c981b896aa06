"""Pydantic models for the pull request resource.

Provides the data structures shared between the GitHub access layer and its callers:
- Source configuration and its validation
- Pull request, commit, label and changed file records decoded from GraphQL responses
- Version records emitted to the pipeline and build Metadata
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from pr_resource.libs.exceptions import SourceValidationError
from pr_resource.utils.constants import VALID_PULL_REQUEST_STATES


class PullRequestState(str, Enum):  # noqa: UP042
    """Pull request lifecycle state as reported by GitHub."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"


class Source(BaseModel):
    """Resource configuration supplied by the pipeline.

    Immutable once constructed. Call `validate_config` (or build through `from_dict`)
    before handing it to the GitHub access layer.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    repository: str = ""
    access_token: str = ""
    v3_endpoint: str = ""
    v4_endpoint: str = ""
    paths: list[str] = Field(default_factory=list)
    ignore_paths: list[str] = Field(default_factory=list)
    disable_ci_skip: bool = False
    disable_git_lfs: bool = False
    skip_ssl_verification: bool = False
    disable_forks: bool = False
    ignore_drafts: bool = False
    git_crypt_key: str = ""
    base_branch: str = ""
    required_review_approvals: int = 0
    labels: list[str] = Field(default_factory=list)
    # Kept as raw text so an unknown literal is reported by validate_config
    states: list[str] = Field(default_factory=list)

    def validate_config(self) -> None:
        """
        Validate the source configuration.

        Rules are checked in order and the first failure is raised.

        Raises:
            SourceValidationError: If a rule fails
        """
        if not self.access_token:
            raise SourceValidationError("access_token must be set")

        if not self.repository:
            raise SourceValidationError("repository must be set")

        if self.v3_endpoint and not self.v4_endpoint:
            raise SourceValidationError("v4_endpoint must be set together with v3_endpoint")

        if self.v4_endpoint and not self.v3_endpoint:
            raise SourceValidationError("v3_endpoint must be set together with v4_endpoint")

        for state in self.states:
            if state not in VALID_PULL_REQUEST_STATES:
                raise SourceValidationError(f'states value "{state}" must be one of: OPEN, MERGED, CLOSED')

    @property
    def pull_request_states(self) -> list[PullRequestState]:
        """Allowed states as enum members. Only meaningful after validation."""
        return [PullRequestState(state) for state in self.states]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Source:
        """Create and validate a Source from its JSON mapping."""
        try:
            source = cls.model_validate(data)
        except ValidationError as ex:
            raise SourceValidationError(f"invalid source configuration: {ex}") from ex

        source.validate_config()
        return source


class GraphQLModel(BaseModel):
    """Base for records decoded from GitHub GraphQL nodes (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CommitAuthorUser(GraphQLModel):
    login: str = ""


class CommitAuthor(GraphQLModel):
    email: str = ""
    # None when the commit author is not linked to a GitHub account
    user: CommitAuthorUser | None = None

    @property
    def login(self) -> str:
        return self.user.login if self.user else ""


class CommitObject(GraphQLModel):
    """A GraphQL `Commit` node."""

    id: str = ""
    oid: str
    committed_date: datetime | None = None
    message: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)


class RepositoryObject(GraphQLModel):
    url: str = ""


class PullRequestObject(GraphQLModel):
    """A GraphQL `PullRequest` node without its connections."""

    id: str
    number: int
    title: str = ""
    url: str = ""
    base_ref_name: str = ""
    head_ref_name: str = ""
    repository: RepositoryObject = Field(default_factory=RepositoryObject)
    is_cross_repository: bool = False
    is_draft: bool = False
    state: PullRequestState
    updated_at: datetime


class LabelObject(GraphQLModel):
    """A GraphQL `Label` node."""

    name: str


class ChangedFileObject(GraphQLModel):
    """A GraphQL `PullRequestChangedFile` node."""

    path: str


class PullRequest(PullRequestObject):
    """
    A pull request together with the commit treated as its tip.

    `approved_review_count` and `labels` are only populated by a search; a lookup by
    commit ref fills the pull request fields and the tip only.
    """

    tip: CommitObject
    approved_review_count: int = 0
    labels: list[LabelObject] = Field(default_factory=list)


class Version(BaseModel):
    """The unit of change emitted to the pipeline for a pull request snapshot."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pr: str
    commit: str
    updated_time: datetime | None = Field(default=None, alias="updated")
    approved_review_count: str
    state: PullRequestState

    @classmethod
    def from_pull_request(cls, pull_request: PullRequest) -> Version:
        return cls(
            pr=str(pull_request.number),
            commit=pull_request.tip.oid,
            updated_time=pull_request.updated_at,
            approved_review_count=str(pull_request.approved_review_count),
            state=pull_request.state,
        )

    @property
    def sort_key(self) -> tuple[str, str, str]:
        # Versions without a timestamp sort first
        return (self.updated_time.isoformat() if self.updated_time else "", self.pr, self.commit)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON mapping sent to the pipeline."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Version:
        return cls.model_validate(data)


def new_version(pull_request: PullRequest) -> Version:
    """Derive the Version for a pull request."""
    return Version.from_pull_request(pull_request)


class MetadataField(BaseModel):
    name: str
    value: str


class Metadata(BaseModel):
    """Ordered name/value pairs reported with a build result. Duplicate names are kept."""

    entries: list[MetadataField] = Field(default_factory=list)

    def add(self, name: str, value: str) -> None:
        self.entries.append(MetadataField(name=name, value=value))

    def to_list(self) -> list[dict[str, str]]:
        return [field.model_dump() for field in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_pull_request(cls, pull_request: PullRequest) -> Metadata:
        metadata = cls()
        metadata.add("pr", str(pull_request.number))
        metadata.add("title", pull_request.title)
        metadata.add("url", pull_request.url)
        metadata.add("head_name", pull_request.head_ref_name)
        metadata.add("head_sha", pull_request.tip.oid)
        metadata.add("base_name", pull_request.base_ref_name)
        metadata.add("message", pull_request.tip.message)
        metadata.add("author", pull_request.tip.author.login)
        metadata.add("author_email", pull_request.tip.author.email)
        metadata.add("state", pull_request.state.value)
        return metadata
