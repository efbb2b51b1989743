"""Write transformed .svelte.md files to the output directory."""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from .transform.preprocessor import process_markup

logger = logging.getLogger(__name__)

HASHES_FILE = ".svmd_hashes.json"


def compute_hash(content: str, config: dict[str, Any]) -> str:
    """SHA256 of the source plus the settings that affect its output."""
    settings = {k: config.get(k) for k in ("extension", "hostname", "markdown_options")}
    payload = content + "\0" + json.dumps(settings, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def find_sources(source_dir: Path, extension: str) -> list[Path]:
    """All hybrid markdown files under ``source_dir``, skipping hidden ones."""
    if not source_dir.exists():
        return []
    return [
        p for p in sorted(source_dir.rglob(f"*{extension}"))
        if p.is_file() and not p.name.startswith(".")
    ]


class OutputWriter:
    """Transforms sources and writes ``.svelte`` files (and maps) to ``output_dir``.

    Keeps a hash per source so untouched files are not rebuilt.
    """

    def __init__(self, source_dir: str | Path, output_dir: str | Path, config: dict[str, Any], write_maps: bool = True):
        self.source_dir = Path(source_dir)
        self.output_dir = Path(output_dir)
        self.config = config
        self.extension = config.get("extension", ".svelte.md")
        self.write_maps = write_maps
        self._hashes_file = self.output_dir / HASHES_FILE
        self._hashes = self._load_hashes()

    def _load_hashes(self) -> dict[str, str]:
        if self._hashes_file.exists():
            return json.loads(self._hashes_file.read_text())
        return {}

    def _save_hashes(self) -> None:
        self._hashes_file.parent.mkdir(parents=True, exist_ok=True)
        self._hashes_file.write_text(json.dumps(self._hashes, indent=2))

    def output_path(self, source: Path) -> Path:
        """``<source_dir>/a/page.svelte.md`` -> ``<output_dir>/a/page.svelte``."""
        rel = source.relative_to(self.source_dir)
        stem = rel.name[: -len(self.extension)]
        return self.output_dir / rel.parent / f"{stem}.svelte"

    @staticmethod
    def map_path(target: Path) -> Path:
        return target.with_name(target.name + ".map")

    def is_current(self, key: str, content_hash: str, target: Path) -> bool:
        """Output exists and was built from this exact source and settings."""
        if self._hashes.get(key) != content_hash or not target.exists():
            return False
        return not self.write_maps or self.map_path(target).exists()

    def write(self, source: Path, force: bool = False) -> Path | None:
        """Transform and write one source file.

        Returns the written path, or None if the file was unchanged or is
        not a hybrid markdown file. Transform errors propagate and nothing
        is written for that file.
        """
        content = source.read_text(encoding="utf-8")
        key = str(source.relative_to(self.source_dir))
        content_hash = compute_hash(content, self.config)
        target = self.output_path(source)

        if not force and self.is_current(key, content_hash, target):
            logger.debug(f"Unchanged, skipping {key}")
            return None

        result = process_markup(content, str(source), self.config)
        if result is None:
            return None

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.code, encoding="utf-8")
        if self.write_maps:
            self.map_path(target).write_text(result.source_map.to_json(), encoding="utf-8")

        self._hashes[key] = content_hash
        self._save_hashes()
        return target

    def remove(self, source: Path) -> list[Path]:
        """Delete the outputs of a source that no longer exists.

        Returns the paths that were removed.
        """
        target = self.output_path(source)
        removed = []
        for path in (target, self.map_path(target)):
            if path.exists():
                path.unlink()
                removed.append(path)
        if self._hashes.pop(str(source.relative_to(self.source_dir)), None) is not None:
            self._save_hashes()
        return removed

    def write_many(self, sources: list[Path], force: bool = False) -> dict[str, Any]:
        """Write several files, collecting failures instead of stopping.

        Returns:
            Stats dict with ``written`` paths, ``skipped`` count and
            ``failed`` (path, error) pairs.
        """
        stats: dict[str, Any] = {"written": [], "skipped": 0, "failed": []}
        for source in sources:
            try:
                path = self.write(source, force=force)
            except Exception as e:
                stats["failed"].append((source, e))
                continue
            if path:
                stats["written"].append(path)
            else:
                stats["skipped"] += 1
        return stats
