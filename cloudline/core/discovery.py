"""
Service context discovery for cloudline.

When no service name is configured, the name is taken from the project
manifest (``pyproject.toml``) in the working directory. The version comes from
the ``VERSION`` environment variable.
"""

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from cloudline.errors import ServiceContextError
from cloudline.schemas.service_context import ServiceContext
from cloudline.utils.logger import get_logger

logger = get_logger(__name__)

MANIFEST_NAME = "pyproject.toml"
VERSION_ENV_VAR = "VERSION"
DEFAULT_VERSION = "latest"


def read_project_name(manifest_path: Path) -> str:
    """
    Read the project name from a pyproject.toml file.

    Both the PEP 621 ``[project]`` table and Poetry's ``[tool.poetry]`` table
    are understood. Scoped names are reduced to their last path segment.

    Args:
        manifest_path: Path to pyproject.toml

    Returns:
        The project name

    Raises:
        FileNotFoundError: If the manifest doesn't exist
        tomllib.TOMLDecodeError: If the manifest is not valid TOML
        ValueError: If the manifest declares no name
    """
    with manifest_path.open("rb") as f:
        data = tomllib.load(f)

    name = data.get("project", {}).get("name") or (
        data.get("tool", {}).get("poetry", {}).get("name")
    )
    if not name or not isinstance(name, str):
        raise ValueError(f"No project name declared in {manifest_path}")

    return name.rstrip("/").rsplit("/", 1)[-1]


def default_service_context(
    service: str | None = None, cwd: Path | None = None
) -> ServiceContext:
    """
    Build the service context used for error reporting.

    Args:
        service: Explicit service name; discovered from the manifest if omitted
        cwd: Directory holding the manifest (default: current directory)

    Returns:
        ServiceContext with the service name and version

    Raises:
        ServiceContextError: If no name was given and none can be discovered
    """
    if not service:
        manifest_path = (cwd or Path.cwd()) / MANIFEST_NAME
        try:
            service = read_project_name(manifest_path)
        except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
            raise ServiceContextError(
                f"Cannot determine service context name: {e}"
            ) from e

        logger.info(
            f"Discovered service name {service!r}",
            extra={"context": {"manifest": str(manifest_path)}},
        )

    version = os.getenv(VERSION_ENV_VAR) or DEFAULT_VERSION

    try:
        return ServiceContext(service=service, version=version)
    except ValidationError as e:
        raise ServiceContextError(
            f"Cannot determine service context name: {e}"
        ) from e
