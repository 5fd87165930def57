"""Check that the npm lockfile agrees with package.json.

Only presence and exact-version pins are verified. Range specs are accepted
as long as the dependency is locked at all.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from splitaudit.manifest import read_project

# Exact semver pin, optionally prefixed with "=" or "v"
_EXACT_VERSION = re.compile(r"^=?v?(\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)$")

_DEP_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


@dataclass
class LockVerifyResult:
    """Outcome of a lockfile consistency check."""
    status: bool
    errors: list[str] = field(default_factory=list)


def verify_lock(root: str | Path = ".") -> LockVerifyResult:
    """Read the project at ``root`` and verify its lockfile."""
    project = read_project(root)
    return check_lock(project.package_json, project.lockfile)


def check_lock(package_json: dict[str, Any], lockfile: dict[str, Any]) -> LockVerifyResult:
    """
    Compare every manifest dependency against the lockfile.

    Returns:
        LockVerifyResult with one message per missing or mismatched dependency
    """
    errors = []
    seen = set()
    for section in _DEP_SECTIONS:
        for name, spec in (package_json.get(section) or {}).items():
            if name in seen:
                continue
            seen.add(name)

            locked = locked_version(lockfile, name)
            if locked is None:
                errors.append(f"Missing: {name}@{spec}")
                continue

            pinned = exact_version(spec)
            if pinned is not None and _strip_v(locked) != pinned:
                errors.append(
                    f"Invalid: lock file's {name}@{locked} does not satisfy {name}@{spec}"
                )

    return LockVerifyResult(status=not errors, errors=errors)


def locked_version(lockfile: dict[str, Any], name: str) -> str | None:
    """Version of a top-level dependency in a v1, v2 or v3 lockfile."""
    packages = lockfile.get("packages")
    if isinstance(packages, dict):
        entry = packages.get(f"node_modules/{name}")
        if isinstance(entry, dict) and entry.get("version"):
            return str(entry["version"])

    dependencies = lockfile.get("dependencies")
    if isinstance(dependencies, dict):
        entry = dependencies.get(name)
        if isinstance(entry, dict) and entry.get("version"):
            return str(entry["version"])
    return None


def exact_version(spec: Any) -> str | None:
    """Return the pinned version if ``spec`` is an exact semver, else None."""
    if not isinstance(spec, str):
        return None
    match = _EXACT_VERSION.match(spec.strip())
    return match.group(1) if match else None


def _strip_v(version: str) -> str:
    return version[1:] if version.startswith("v") else version
