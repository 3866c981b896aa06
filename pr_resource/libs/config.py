from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from logging import Logger
from typing import Any

import yaml
from simple_logger.logger import get_logger

from pr_resource.libs.exceptions import ConfigurationError
from pr_resource.libs.models import Source
from pr_resource.utils.constants import BUILD_ID_ENV, EXTERNAL_URL_ENV


@dataclass(frozen=True)
class BuildEnvironment:
    """Pipeline values used to link commit statuses back to the build."""

    external_url: str = ""
    build_id: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildEnvironment:
        environ = os.environ if environ is None else environ
        return cls(
            external_url=environ.get(EXTERNAL_URL_ENV, ""),
            build_id=environ.get(BUILD_ID_ENV, ""),
        )

    @property
    def build_url(self) -> str:
        return "/".join([self.external_url, "builds", self.build_id])


def load_source(payload: dict[str, Any]) -> Source:
    """
    Build a validated Source from a resource request.

    The source is read from the `source` key when present, otherwise the whole
    payload is treated as the source mapping.

    Raises:
        ConfigurationError: If the payload is not a mapping or the source is invalid
    """
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Expected a mapping, got {type(payload).__name__}")

    data = payload.get("source", payload)
    if not isinstance(data, dict):
        raise ConfigurationError(f"`source` must be a mapping, got {type(data).__name__}")

    return Source.from_dict(data)


def load_source_file(path: str, logger: Logger | None = None) -> Source:
    """
    Load a validated Source from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid JSON/YAML
        ConfigurationError: If the source is invalid
    """
    logger = logger or get_logger(name="config")

    try:
        with open(path) as fd:
            payload = yaml.safe_load(fd) or {}
    except FileNotFoundError:
        logger.exception(f"Source file not found: {path}")
        raise
    except yaml.YAMLError:
        logger.exception(f"Source file has invalid syntax: {path}")
        raise

    return load_source(payload)
