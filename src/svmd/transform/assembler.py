"""Assemble the final Svelte component from metadata and rendered HTML."""

import json
import re
from pathlib import PurePath
from typing import Any

from ..models import OutputDocument, RawDocument, SourceMap

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Names that cannot be destructured into a `let` binding.
RESERVED_NAMES = frozenset({
    "frontMatter", "props",
    "await", "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "implements", "import", "in",
    "instanceof", "interface", "let", "new", "null", "package", "private",
    "protected", "public", "return", "static", "super", "switch", "this",
    "throw", "true", "try", "typeof", "var", "void", "while", "with", "yield",
})

_BASE64_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def binding_names(metadata: dict[str, str]) -> list[str]:
    """Metadata keys that can be exposed as individual bindings, in source order."""
    return [k for k in metadata if IDENTIFIER_RE.match(k) and k not in RESERVED_NAMES]


def resolve_bindings(metadata: dict[str, str], props: dict[str, Any] | None = None) -> dict[str, Any]:
    """Values the preamble's bindings take at runtime: props win over metadata."""
    merged = {**metadata, **(props or {})}
    return {name: merged[name] for name in binding_names(metadata)}


def build_preamble(metadata: dict[str, str]) -> str:
    """Render the ``<script>`` block exposing front matter to the component."""
    # No "</" may appear inside the script block.
    fm_json = json.dumps(metadata, indent=2, ensure_ascii=False).replace("</", "<\\/").replace("\n", "\n  ")
    lines = [
        "<script>",
        f"  let {{ frontMatter = {fm_json}, ...props }} = $props();",
    ]
    names = binding_names(metadata)
    if names:
        lines.append("")
        lines.append(f"  let {{ {', '.join(names)} }} = {{ ...frontMatter, ...props }};")
    lines.append("</script>")
    return "\n".join(lines)


def assemble(document: RawDocument, metadata: dict[str, str], html: str) -> OutputDocument:
    """Join preamble and HTML, replacing the whole source file."""
    code = f"{build_preamble(metadata)}\n\n{html}"
    return OutputDocument(
        code=code,
        source_map=whole_file_map(document, code),
        metadata=dict(metadata),
    )


def whole_file_map(document: RawDocument, code: str) -> SourceMap:
    """Source map for a whole-file overwrite.

    Every generated line opens with a segment pointing at line 0, column 0
    of the original file. Finer positions are not tracked.
    """
    segment = "".join(encode_vlq(v) for v in (0, 0, 0, 0))
    line_count = code.count("\n") + 1
    return SourceMap(
        file=PurePath(document.filename).name,
        sources=[document.filename],
        sources_content=[document.text],
        mappings=";".join([segment] * line_count),
    )


def encode_vlq(value: int) -> str:
    """Base64 VLQ encoding used by source map ``mappings``."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    digits = []
    while True:
        digit = vlq & 31
        vlq >>= 5
        if vlq:
            digit |= 32
        digits.append(_BASE64_DIGITS[digit])
        if not vlq:
            return "".join(digits)
