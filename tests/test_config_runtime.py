"""Tests for runtime configuration loading."""

import json

from splitaudit.config_runtime import DEFAULTS, load_runtime_config


def _write_config(root, data):
    state = root / ".splitaudit"
    state.mkdir()
    (state / "config.json").write_text(json.dumps(data))


def test_defaults(tmp_path):
    cfg = load_runtime_config(str(tmp_path))
    assert cfg == DEFAULTS
    assert cfg is not DEFAULTS
    assert cfg["audit"]["concurrency"] == 20
    assert cfg["audit"]["retries"] == 2
    assert cfg["audit"]["retry_delay"] == 1.0


def test_file_overrides_defaults(tmp_path):
    _write_config(tmp_path, {
        "audit": {"concurrency": 5, "retries": "many", "bogus": 1},
        "registry": {"url": "https://mirror.example.com", "timeout": 10},
    })
    cfg = load_runtime_config(str(tmp_path))

    assert cfg["audit"]["concurrency"] == 5
    assert cfg["audit"]["retries"] == 2
    assert "bogus" not in cfg["audit"]
    assert cfg["registry"]["url"] == "https://mirror.example.com"
    assert cfg["registry"]["timeout"] == 10


def test_env_overrides_file(tmp_path, monkeypatch):
    _write_config(tmp_path, {"audit": {"concurrency": 5}})
    monkeypatch.setenv("SPLITAUDIT_AUDIT_CONCURRENCY", "3")
    monkeypatch.setenv("SPLITAUDIT_AUDIT_RETRY_DELAY", "0.25")

    cfg = load_runtime_config(str(tmp_path))
    assert cfg["audit"]["concurrency"] == 3
    assert cfg["audit"]["retry_delay"] == 0.25


def test_invalid_env_value_keeps_previous(tmp_path, monkeypatch):
    monkeypatch.setenv("SPLITAUDIT_AUDIT_RETRIES", "lots")
    cfg = load_runtime_config(str(tmp_path))
    assert cfg["audit"]["retries"] == 2


def test_malformed_config_file_falls_back(tmp_path):
    state = tmp_path / ".splitaudit"
    state.mkdir()
    (state / "config.json").write_text("{broken")
    assert load_runtime_config(str(tmp_path)) == DEFAULTS
