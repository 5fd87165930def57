"""Pytest configuration and fixtures."""
import json

import pytest


def make_advisory(
    module_name,
    severity,
    version,
    paths,
    dev=False,
    overview="Prototype pollution",
):
    """Advisory in the shape returned by the registry bulk audit endpoint."""
    return {
        "module_name": module_name,
        "severity": severity,
        "overview": overview,
        "findings": [{"version": version, "dev": dev, "paths": list(paths)}],
    }


def make_report(*advisories, actions=None):
    """Registry audit report; one action per advisory unless given explicitly."""
    if actions is None:
        actions = [{"action": "update", "module": a["module_name"]} for a in advisories]
    return {
        "actions": actions,
        "advisories": {str(1000 + i): advisory for i, advisory in enumerate(advisories)},
    }


@pytest.fixture
def npm_project(tmp_path):
    """
    Factory writing a minimal npm project into a temp directory.

    Usage:
        root = npm_project(dependencies={"a": "1.0.0"}, locked={"a": "1.0.0"})
    """

    def _make(
        dependencies=None,
        dev_dependencies=None,
        locked=None,
        lock_name="package-lock.json",
        write_manifest=True,
    ):
        dependencies = dependencies or {}
        dev_dependencies = dev_dependencies or {}
        if write_manifest:
            manifest = {"name": "fixture-app", "version": "1.0.0", "dependencies": dependencies}
            if dev_dependencies:
                manifest["devDependencies"] = dev_dependencies
            (tmp_path / "package.json").write_text(json.dumps(manifest))

        if locked is not None and lock_name:
            lock = {
                "name": "fixture-app",
                "version": "1.0.0",
                "lockfileVersion": 1,
                "requires": True,
                "dependencies": {
                    name: {
                        "version": version,
                        "resolved": f"https://registry.npmjs.org/{name}/-/{name}-{version}.tgz",
                        "integrity": "sha512-deadbeef",
                        **({"dev": True} if name in dev_dependencies else {}),
                    }
                    for name, version in locked.items()
                },
            }
            (tmp_path / lock_name).write_text(json.dumps(lock))
        return tmp_path

    return _make


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep host configuration and toolchain lookups out of the tests."""
    for var in (
        "SPLITAUDIT_AUDIT_CONCURRENCY",
        "SPLITAUDIT_AUDIT_RETRIES",
        "SPLITAUDIT_AUDIT_RETRY_DELAY",
        "SPLITAUDIT_REGISTRY_URL",
        "SPLITAUDIT_REGISTRY_TIMEOUT",
        "NODE_ENV",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SPLITAUDIT_NPM_VERSION", "6.14.18")
    monkeypatch.setenv("SPLITAUDIT_NODE_VERSION", "v14.21.3")
