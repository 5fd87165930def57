"""Build the bulk audit request body from a lockfile and manifest requires.

Local paths, git URLs and tarball URLs never leave the machine: they are
replaced by salted hashes before the request is submitted.
"""

import copy
import hashlib
import os
import secrets
import shutil
import subprocess
import sys
from typing import Any

from splitaudit.utils.constants import (
    DEFAULT_NODE_VERSION,
    DEFAULT_NPM_VERSION,
    ENV_NODE_VERSION,
    ENV_NPM_VERSION,
)
from splitaudit.utils.logging import logger

_FILE_PREFIXES = ("file:", "link:", "./", "../", "/", "~/")
_GIT_PREFIXES = ("git:", "git+", "github:", "gitlab:", "bitbucket:", "gist:")
_REMOTE_PREFIXES = ("http://", "https://")

# Node's process.platform names
_PLATFORMS = {"win32": "win32", "darwin": "darwin", "cygwin": "win32"}


def generate_request(
    lockfile: dict[str, Any],
    requires: dict[str, str],
    install: list[str] | None = None,
    remove: list[str] | None = None,
) -> dict[str, Any]:
    """
    Create the full audit request for a project.

    Args:
        lockfile: Parsed npm-shrinkwrap.json or package-lock.json
        requires: Merged dependencies/devDependencies from package.json
        install: Package specs being installed (informational)
        remove: Package names being removed (informational)

    Returns:
        Audit request dict with requires, dependencies, install, remove, metadata
    """
    salt = secrets.token_hex(16)
    request = copy.deepcopy(lockfile)
    request.pop("lockfileVersion", None)

    packages = request.pop("packages", None)
    if "dependencies" not in request and isinstance(packages, dict):
        request["dependencies"] = packages_to_dependencies(packages)

    request["requires"] = scrub_requires(requires, salt)
    scrub_dependencies(request.get("dependencies"), salt)
    request["install"] = [scrub_arg(arg, salt) for arg in (install or [])]
    request["remove"] = [scrub_arg(arg, salt) for arg in (remove or [])]
    request["metadata"] = generate_metadata()
    return request


def generate_metadata() -> dict[str, str]:
    """Client metadata sent alongside the request."""
    metadata = {
        "npm_version": _tool_version(ENV_NPM_VERSION, "npm", DEFAULT_NPM_VERSION),
        "node_version": _tool_version(ENV_NODE_VERSION, "node", DEFAULT_NODE_VERSION),
        "platform": _PLATFORMS.get(sys.platform, sys.platform),
    }
    node_env = os.environ.get("NODE_ENV")
    if node_env:
        metadata["node_env"] = node_env
    return metadata


def packages_to_dependencies(packages: dict[str, Any]) -> dict[str, Any]:
    """Convert a lockfile v3 ``packages`` map to the nested v1 ``dependencies`` tree."""
    tree: dict[str, Any] = {}
    chains = []
    for path, entry in packages.items():
        if not path.startswith("node_modules/") or not isinstance(entry, dict):
            continue
        names = [part.rstrip("/") for part in path.split("node_modules/")[1:]]
        chains.append((names, entry))

    # Parents before children so nested entries attach to a real parent
    for names, entry in sorted(chains, key=lambda item: len(item[0])):
        node = tree
        for parent in names[:-1]:
            node = node.setdefault(parent, {}).setdefault("dependencies", {})
        converted = _convert_package(entry)
        existing = node.get(names[-1])
        if existing:
            converted.update(existing)
        node[names[-1]] = converted
    return tree


def _convert_package(entry: dict[str, Any]) -> dict[str, Any]:
    converted = {"version": entry.get("version", "")}
    for key in ("resolved", "integrity", "dev", "optional"):
        if key in entry:
            converted[key] = entry[key]
    requires = {}
    requires.update(entry.get("dependencies") or {})
    requires.update(entry.get("optionalDependencies") or {})
    if requires:
        converted["requires"] = requires
    return converted


def scrub_requires(requires: dict[str, str], salt: str) -> dict[str, str]:
    """Copy of ``requires`` with non-registry specs replaced by hashes."""
    return {name: scrub_spec(spec, salt) for name, spec in requires.items()}


def scrub_dependencies(dependencies: Any, salt: str) -> None:
    """Scrub non-registry versions in a v1 dependency tree, in place."""
    if not isinstance(dependencies, dict):
        return
    for entry in dependencies.values():
        if not isinstance(entry, dict):
            continue
        version = entry.get("version")
        if isinstance(version, str) and should_scrub(version):
            entry["version"] = scrub_spec(version, salt)
            entry.pop("resolved", None)
            entry.pop("integrity", None)
        for key in ("from", "resolved"):
            value = entry.get(key)
            if isinstance(value, str) and should_scrub(value) and not _is_registry_tarball(value):
                entry[key] = scrub_spec(value, salt)
        scrub_dependencies(entry.get("dependencies"), salt)


def scrub_arg(arg: str, salt: str) -> str:
    """Scrub the spec half of a ``name@spec`` install argument."""
    name, sep, spec = arg.rpartition("@")
    if not sep or not name:
        return scrub_spec(arg, salt)
    return f"{name}@{scrub_spec(spec, salt)}"


def should_scrub(spec: str) -> bool:
    """True for specs that can reveal local paths or private hosts."""
    return spec.startswith(_FILE_PREFIXES + _GIT_PREFIXES + _REMOTE_PREFIXES) or _is_hosted_shorthand(spec)


def scrub_spec(spec: Any, salt: str) -> Any:
    """Replace a non-registry spec with ``<type>:<salted sha256>``."""
    if not isinstance(spec, str) or not should_scrub(spec):
        return spec
    if spec.startswith(_FILE_PREFIXES):
        kind = "file"
    elif spec.startswith(_REMOTE_PREFIXES):
        kind = "remote"
    else:
        kind = "git"
    return f"{kind}:{_hash(spec, salt)}"


def _hash(value: str, salt: str) -> str:
    return hashlib.sha256(f"{salt} {value}".encode()).hexdigest()


def _is_hosted_shorthand(spec: str) -> bool:
    # "user/repo" or "user/repo#ref"; scoped names and ranges never look like this
    head = spec.split("#", 1)[0]
    parts = head.split("/")
    return (
        len(parts) == 2
        and all(parts)
        and not head.startswith("@")
        and not any(ch in head for ch in " <>=^~*:")
    )


def _is_registry_tarball(url: str) -> bool:
    return "/-/" in url and url.endswith(".tgz")


def _tool_version(env_var: str, binary: str, default: str) -> str:
    """Version from env, then ``<binary> --version``, then the default."""
    override = os.environ.get(env_var)
    if override:
        return override

    path = shutil.which(binary)
    if not path:
        return default
    try:
        proc = subprocess.run(
            [path, "--version"], capture_output=True, text=True, timeout=5, shell=False
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Could not run {binary} --version: {e}")
        return default
    version = proc.stdout.strip()
    return version if proc.returncode == 0 and version else default
