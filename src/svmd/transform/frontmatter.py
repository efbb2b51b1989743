"""Front matter extraction for .svelte.md documents."""

import logging
import re

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---(?:\r?\n|\Z)", re.DOTALL)

_QUOTES = ("'", '"')


def extract_frontmatter(text: str) -> tuple[dict[str, str], str]:
    """Split a leading ``---`` header from the markdown body.

    Only flat ``key: value`` lines are understood. Blank lines, ``#`` comments
    and lines without a colon are skipped. A header that fails to parse is
    logged and ignored: the caller gets empty metadata and the original text.

    Returns:
        (metadata, body). Without a header, ``({}, text)``.
    """
    fm_match = FRONTMATTER_RE.match(text)
    if not fm_match:
        return {}, text

    try:
        metadata = _parse_header(fm_match.group(1))
    except Exception as e:
        logger.warning(f"Failed to parse front matter: {e}")
        return {}, text

    return metadata, text[fm_match.end():]


def _parse_header(header: str) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for line in header.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        metadata[key] = _unquote(value.strip())
    return metadata


def _unquote(value: str) -> str:
    """Strip one matching pair of surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value
