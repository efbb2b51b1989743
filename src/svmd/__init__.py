"""svmd - markdown with embedded Svelte components, rendered at build time."""

from .transform import MarkdownPreprocessor, create_preprocessor, process_markup

__version__ = "0.1.0"

__all__ = ["MarkdownPreprocessor", "create_preprocessor", "process_markup"]
