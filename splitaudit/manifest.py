"""Locate and parse package.json and the npm lockfile for a project."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from splitaudit.errors import JsonParseError, NoLockfileError, NoManifestError
from splitaudit.utils.constants import PACKAGE_JSON, PACKAGE_LOCK_JSON, SHRINKWRAP_JSON
from splitaudit.utils.logging import logger


@dataclass
class ProjectFiles:
    """Parsed manifest and lockfile of one npm project."""
    root: Path
    package_json: dict[str, Any]
    lockfile: dict[str, Any]
    lockfile_name: str


def maybe_read_json(path: Path) -> dict[str, Any] | None:
    """Parse a JSON file, returning None when it does not exist.

    Raises:
        JsonParseError: If the file exists but is not valid JSON
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonParseError(f"Failed to parse JSON in {path}: {e}", file=path) from e

    if not isinstance(data, dict):
        raise JsonParseError(f"Expected a JSON object in {path}", file=path)
    return data


def read_project(root: str | Path = ".") -> ProjectFiles:
    """
    Read package.json plus npm-shrinkwrap.json or package-lock.json.

    The shrinkwrap takes precedence when both lockfiles exist.

    Raises:
        NoManifestError: No package.json in root
        NoLockfileError: Neither lockfile in root
        JsonParseError: Any of the files is malformed
    """
    root = Path(root)
    shrinkwrap = maybe_read_json(root / SHRINKWRAP_JSON)
    lockfile = maybe_read_json(root / PACKAGE_LOCK_JSON)
    package_json = maybe_read_json(root / PACKAGE_JSON)

    if package_json is None:
        raise NoManifestError(
            "No package.json found: Cannot audit a project without a package.json"
        )
    if shrinkwrap is None and lockfile is None:
        raise NoLockfileError(
            "Neither npm-shrinkwrap.json nor package-lock.json found: "
            "Cannot audit a project without a lockfile"
        )
    if shrinkwrap is not None and lockfile is not None:
        logger.warning(
            "Both npm-shrinkwrap.json and package-lock.json exist, using npm-shrinkwrap.json."
        )

    if shrinkwrap is not None:
        return ProjectFiles(root, package_json, shrinkwrap, SHRINKWRAP_JSON)
    return ProjectFiles(root, package_json, lockfile, PACKAGE_LOCK_JSON)


def merged_requires(package_json: dict[str, Any]) -> dict[str, str]:
    """Top-level dependencies with devDependencies overriding dependencies."""
    requires: dict[str, str] = {}
    requires.update(package_json.get("dependencies") or {})
    requires.update(package_json.get("devDependencies") or {})
    return requires
