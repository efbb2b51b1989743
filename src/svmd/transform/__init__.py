"""The .svelte.md transform pipeline."""

from .assembler import assemble, build_preamble, resolve_bindings
from .components import (
    MissingPlaceholderError,
    UnbalancedComponentError,
    extract_components,
    restore_components,
)
from .frontmatter import extract_frontmatter
from .preprocessor import MarkdownPreprocessor, create_preprocessor, handles, process_markup
from .renderer import create_markdown, is_external_link, render_markdown

__all__ = [
    "MarkdownPreprocessor",
    "MissingPlaceholderError",
    "UnbalancedComponentError",
    "assemble",
    "build_preamble",
    "create_markdown",
    "create_preprocessor",
    "extract_components",
    "extract_frontmatter",
    "handles",
    "is_external_link",
    "process_markup",
    "render_markdown",
    "resolve_bindings",
    "restore_components",
]
