"""Tests for locating and parsing package.json and lockfiles."""

import json

import pytest

from splitaudit.errors import JsonParseError, NoLockfileError, NoManifestError
from splitaudit.manifest import merged_requires, read_project


class TestReadProject:
    def test_reads_package_lock(self, npm_project):
        root = npm_project(dependencies={"a": "1.0.0"}, locked={"a": "1.0.0"})
        project = read_project(root)

        assert project.lockfile_name == "package-lock.json"
        assert project.package_json["dependencies"] == {"a": "1.0.0"}
        assert project.lockfile["dependencies"]["a"]["version"] == "1.0.0"

    def test_shrinkwrap_takes_precedence(self, npm_project):
        root = npm_project(dependencies={"a": "1.0.0"}, locked={"a": "1.0.0"})
        (root / "npm-shrinkwrap.json").write_text(
            json.dumps({"lockfileVersion": 1, "dependencies": {"a": {"version": "1.0.0"}}, "marker": True})
        )
        project = read_project(root)

        assert project.lockfile_name == "npm-shrinkwrap.json"
        assert project.lockfile["marker"] is True

    def test_missing_manifest(self, npm_project):
        root = npm_project(locked={"a": "1.0.0"}, write_manifest=False)
        with pytest.raises(NoManifestError) as exc:
            read_project(root)
        assert exc.value.code == "EAUDITNOPJSON"

    def test_missing_lockfile(self, npm_project):
        root = npm_project(dependencies={"a": "1.0.0"})
        with pytest.raises(NoLockfileError) as exc:
            read_project(root)
        assert exc.value.code == "EAUDITNOLOCK"

    def test_malformed_json(self, npm_project):
        root = npm_project(dependencies={"a": "1.0.0"}, locked={"a": "1.0.0"})
        (root / "package-lock.json").write_text("{not json")
        with pytest.raises(JsonParseError) as exc:
            read_project(root)
        assert exc.value.code == "EJSONPARSE"
        assert exc.value.file.name == "package-lock.json"

    def test_non_object_json(self, npm_project):
        root = npm_project(dependencies={"a": "1.0.0"}, locked={"a": "1.0.0"})
        (root / "package.json").write_text("[]")
        with pytest.raises(JsonParseError):
            read_project(root)


class TestMergedRequires:
    def test_dev_dependencies_override(self):
        merged = merged_requires({
            "dependencies": {"a": "^1.0.0", "b": "2.0.0"},
            "devDependencies": {"b": "3.0.0", "jest": "^29.0.0"},
        })
        assert merged == {"a": "^1.0.0", "b": "3.0.0", "jest": "^29.0.0"}

    def test_missing_sections(self):
        assert merged_requires({"name": "empty"}) == {}
