from __future__ import annotations

import os
from logging import Logger

from simple_logger.logger import get_logger

from pr_resource.libs.exceptions import MalformedRepositoryError, PullRequestNumberError
from pr_resource.utils.constants import LOG_FILE_ENV, LOG_LEVEL_ENV


def get_logger_with_params(name: str = "pr-resource") -> Logger:
    mask_sensitive_patterns: list[str] = [
        # Tokens and API keys
        "token",
        "access_token",
        "access-token",
        "github_token",
        "GITHUB_TOKEN",
        "apikey",
        "api_key",
        # Secrets and keys
        "password",
        "secret",
        "private_key",
        "git_crypt_key",
    ]

    log_level: str = os.environ.get(LOG_LEVEL_ENV, "INFO")
    log_file: str | None = os.environ.get(LOG_FILE_ENV) or None

    return get_logger(
        name=name,
        filename=log_file,
        level=log_level,
        file_max_bytes=1024 * 1024 * 10,
        mask_sensitive=True,
        mask_sensitive_patterns=mask_sensitive_patterns,
        console=True,
    )


def parse_repository(repository: str) -> tuple[str, str]:
    """
    Split a repository identifier into owner and name.

    Args:
        repository: Repository identifier in `owner/name` form

    Returns:
        Tuple of (owner, name)

    Raises:
        MalformedRepositoryError: If the identifier does not split into exactly two non-empty parts
    """
    parts = repository.split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedRepositoryError(f"malformed repository: {repository!r}")
    return parts[0], parts[1]


def parse_pull_request_number(pr_number: str | int) -> int:
    """
    Convert a pull request number received as text to an integer.

    Raises:
        PullRequestNumberError: If the value is not a decimal integer
    """
    if isinstance(pr_number, int):
        return pr_number

    try:
        return int(pr_number)
    except (TypeError, ValueError) as ex:
        raise PullRequestNumberError(f"failed to convert pull request number to int: {ex}") from ex
