class PrResourceError(Exception):
    """Base class for errors raised by the pull request resource."""

    pass


class ConfigurationError(PrResourceError, ValueError):
    """Raised when the source configuration is missing or malformed."""

    pass


class SourceValidationError(ConfigurationError):
    """Raised when a source configuration fails validation."""

    pass


class MalformedRepositoryError(ConfigurationError):
    """Raised when a repository identifier is not in `owner/name` form."""

    pass


class PullRequestNumberError(PrResourceError, ValueError):
    """Raised when a pull request number cannot be converted to an integer."""

    pass


class CommitRefNotFoundError(PrResourceError, LookupError):
    """Raised when a commit ref is not among the fetched commits of a pull request.

    Only the most recent commits of a pull request are fetched, so this can also mean
    the ref is older than the fetched window.
    """

    def __init__(self, commit_ref: str) -> None:
        self.commit_ref = commit_ref
        super().__init__(f"commit with ref '{commit_ref}' does not exist")


class PaginationError(PrResourceError, RuntimeError):
    """Raised when a paginated listing returns a continuation that does not advance."""

    pass
