"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from svmd.config import DEFAULT_CONFIG, load_config, validate_config


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SVMD_HOSTNAME", raising=False)
    cfg = load_config()
    assert cfg["hostname"] == "localhost"
    assert cfg["extension"] == ".svelte.md"
    assert Path(cfg["source_dir"]).is_absolute()


def test_file_is_deep_merged(monkeypatch):
    monkeypatch.delenv("SVMD_HOSTNAME", raising=False)
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "svmd.yaml"
        path.write_text("hostname: example.com\nwatch:\n  debounce: 0.2\nmarkdown_options:\n  breaks: true\n")
        cfg = load_config(path)
        assert cfg["hostname"] == "example.com"
        assert cfg["watch"] == {"debounce": 0.2}
        assert cfg["markdown_options"] == {"breaks": True}
    assert DEFAULT_CONFIG["markdown_options"] == {}


def test_env_overrides_hostname(monkeypatch):
    monkeypatch.setenv("SVMD_HOSTNAME", "docs.example.org")
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "svmd.yaml"
        path.write_text("hostname: example.com\n")
        assert load_config(path)["hostname"] == "docs.example.org"


def test_invalid_settings_are_rejected(monkeypatch):
    monkeypatch.delenv("SVMD_HOSTNAME", raising=False)
    bad_files = [
        'extension: ""\n',
        "extension: md\n",
        "hostname: ''\n",
        "markdown_options: [breaks]\n",
        "watch:\n  debounce: -1\n",
    ]
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "svmd.yaml"
        for text in bad_files:
            path.write_text(text)
            with pytest.raises(ValueError):
                load_config(path)


def test_validate_config_accepts_defaults():
    validate_config(DEFAULT_CONFIG)
