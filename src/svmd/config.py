"""Configuration management for svmd."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "extension": ".svelte.md",
    "hostname": "localhost",
    "include_default_styles": False,
    "markdown_options": {},
    "source_dir": "src/routes",
    "output_dir": "build/svmd",
    "watch": {"debounce": 1.0},
}


def _find_config_file() -> Path | None:
    """Look for svmd.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "svmd.yaml",
        Path.cwd() / "svmd.yaml",
        Path.home() / ".svmd" / "svmd.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if hostname := os.environ.get("SVMD_HOSTNAME"):
        cfg["hostname"] = hostname

    validate_config(cfg)

    # Expand paths
    for key in ("source_dir", "output_dir"):
        cfg[key] = str(Path(cfg[key]).expanduser().resolve())

    return cfg


def validate_config(cfg: dict[str, Any]) -> None:
    """Reject settings the preprocessor cannot work with.

    Raises:
        ValueError: naming the offending key.
    """
    extension = cfg.get("extension")
    if not isinstance(extension, str) or not extension.startswith(".") or len(extension) < 2:
        raise ValueError(f'extension must be a file suffix like ".svelte.md", got {extension!r}')
    hostname = cfg.get("hostname")
    if not isinstance(hostname, str) or not hostname.strip():
        raise ValueError(f"hostname must be a non-empty string, got {hostname!r}")
    if not isinstance(cfg.get("markdown_options"), dict):
        raise ValueError("markdown_options must be a mapping of markdown-it options")
    watch = cfg.get("watch")
    if not isinstance(watch, dict):
        raise ValueError("watch must be a mapping with a debounce key")
    debounce = watch.get("debounce")
    if not isinstance(debounce, (int, float)) or debounce < 0:
        raise ValueError(f"watch.debounce must be a non-negative number, got {debounce!r}")


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
