"""Markdown preprocessor for .svelte.md files - the heart of svmd."""

import logging
from typing import Any

from ..config import DEFAULT_CONFIG
from ..models import OutputDocument, RawDocument
from .assembler import assemble
from .components import extract_components, restore_components
from .frontmatter import extract_frontmatter
from .renderer import render_markdown

logger = logging.getLogger(__name__)

PREPROCESSOR_KEYS = ("extension", "hostname", "include_default_styles", "markdown_options")


def handles(filename: str | None, config: dict[str, Any] | None = None) -> bool:
    """Whether ``filename`` carries the hybrid markdown extension."""
    extension = (config or {}).get("extension", DEFAULT_CONFIG["extension"])
    return bool(filename) and filename.endswith(extension)


def process_markup(content: str, filename: str, config: dict[str, Any] | None = None) -> OutputDocument | None:
    """Transform one .svelte.md file into a Svelte component.

    Args:
        content: Source text of the file.
        filename: Path of the file, used for dispatch and the source map.
        config: Preprocessor settings (hostname, markdown_options, extension).

    Returns:
        OutputDocument, or None if the file is not a .svelte.md file.
    """
    cfg = {k: DEFAULT_CONFIG[k] for k in PREPROCESSOR_KEYS}
    cfg.update({k: v for k, v in (config or {}).items() if k in PREPROCESSOR_KEYS})

    if not handles(filename, cfg):
        return None

    document = RawDocument(text=content, filename=filename)
    try:
        metadata, body = extract_frontmatter(document.text)
        extracted = extract_components(body)

        hostname = metadata.get("hostname") or cfg["hostname"]
        html = render_markdown(extracted.body, hostname=hostname, markdown_options=cfg["markdown_options"])
        html = restore_components(html, extracted.occurrences)

        logger.debug(f"{filename}: {len(metadata)} front matter key(s), {len(extracted.occurrences)} component(s)")
        return assemble(document, metadata, html)
    except Exception:
        logger.exception(f"Error processing {filename}")
        raise


class MarkdownPreprocessor:
    """Preprocessor group handed to the host build tool.

    Holds only configuration; every ``markup`` call is independent.
    """

    name = "svelte-markdown"

    def __init__(self, config: dict[str, Any] | None = None, **options: Any):
        self.config = {**(config or {}), **options}

    def markup(self, content: str, filename: str) -> OutputDocument | None:
        return process_markup(content, filename, self.config)


def create_preprocessor(**options: Any) -> MarkdownPreprocessor:
    """Build a preprocessor with custom options (hostname, markdown_options, ...)."""
    return MarkdownPreprocessor(**options)
