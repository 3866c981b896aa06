GITHUB_GRAPHQL_URL: str = "https://api.github.com/graphql"

DEFAULT_BASE_CONTEXT: str = "concourse-ci"
DEFAULT_STATUS_CONTEXT: str = "status"
DEFAULT_STATUS_DESCRIPTION: str = "Concourse CI build {status}"

# Page sizes and fetch windows
PAGE_SIZE: int = 100
SEARCH_COMMITS_LAST: int = 1
PULL_REQUEST_COMMITS_LAST: int = 100
PULL_REQUEST_LABELS_FIRST: int = 100
PULL_REQUEST_COMMENTS_LAST: int = 100

# Environment variables
EXTERNAL_URL_ENV: str = "ATC_EXTERNAL_URL"
BUILD_ID_ENV: str = "BUILD_ID"
LOG_LEVEL_ENV: str = "PR_RESOURCE_LOG_LEVEL"
LOG_FILE_ENV: str = "PR_RESOURCE_LOG_FILE"

VALID_PULL_REQUEST_STATES: tuple[str, ...] = ("OPEN", "CLOSED", "MERGED")
