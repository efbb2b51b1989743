"""Pull embedded Svelte components out of markdown and put them back after rendering.

Component tags are any element whose name starts with an uppercase ASCII
letter, either self-closing (``<Chart data={rows} />``) or paired
(``<Callout type="info">...</Callout>``). Each one is swapped for an opaque
placeholder so the markdown engine never sees it, then restored verbatim once
the HTML has been produced.
"""

import re

from ..models import ComponentOccurrence, ExtractedBody

TAG_RE = re.compile(r"<(/?)([A-Z][A-Za-z0-9]*)(?=[\s/>])")
CLOSE_TAIL_RE = re.compile(r"\s*>")

PLACEHOLDER_PREFIX = "__COMPONENT_"
PLACEHOLDER_RE = re.compile(r"__COMPONENT_\d+__")

FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[^\n]*\n.*?(?:^ {0,3}\1[ \t]*$|\Z)", re.DOTALL | re.MULTILINE)
CODE_SPAN_RE = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)", re.DOTALL)


class UnbalancedComponentError(ValueError):
    """A component tag has no partner, or never finishes."""

    def __init__(self, tag_name: str, line: int, reason: str):
        self.tag_name = tag_name
        self.line = line
        super().__init__(f"<{tag_name}> on line {line}: {reason}")


class MissingPlaceholderError(LookupError):
    """A recorded placeholder did not survive rendering."""


def make_placeholder(index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{index}__"


def extract_components(body: str) -> ExtractedBody:
    """Replace every top-level component tag in ``body`` with a placeholder.

    Scanning is left to right and never overlaps. A paired tag extends to the
    close tag that balances it, so same-name nesting stays inside the outer
    occurrence. Children are kept raw and are not scanned further.

    Inside fenced code and code spans an unbalanced uppercase tag is plain
    text (``Promise<T>``), not an error.

    Raises:
        UnbalancedComponentError: on a missing or stray close tag, or an open
            tag that never reaches ``>``, outside code.
    """
    occurrences: list[ComponentOccurrence] = []
    parts: list[str] = []
    code_regions = _code_regions(body)
    last = 0
    pos = 0

    while (match := TAG_RE.search(body, pos)) is not None:
        name = match.group(2)
        start = match.start()

        if match.group(1):
            if CLOSE_TAIL_RE.match(body, match.end()) is None:
                pos = match.end()
                continue
            if _in_regions(code_regions, start):
                pos = match.end()
                continue
            raise UnbalancedComponentError(name, _line_of(body, start), "closing tag without an opening tag")

        try:
            attributes, self_closing, open_end = _read_open_tag(body, match.end(), name, start)
            if self_closing:
                children = None
                end = open_end
            else:
                children_end, end = _find_close(body, name, open_end, start)
                children = body[open_end:children_end]
        except UnbalancedComponentError:
            if not _in_regions(code_regions, start):
                raise
            pos = match.end()
            continue

        index = len(occurrences)
        placeholder = make_placeholder(index)
        occurrences.append(
            ComponentOccurrence(
                index=index,
                tag_name=name,
                attributes_text=attributes.strip(),
                children_text=children,
                placeholder=placeholder,
                original_span=body[start:end],
            )
        )
        parts.append(body[last:start])
        parts.append(placeholder)
        last = pos = end

    parts.append(body[last:])
    return ExtractedBody(body="".join(parts), occurrences=occurrences)


def restore_components(html: str, occurrences: list[ComponentOccurrence]) -> str:
    """Swap each placeholder in ``html`` back for its component markup.

    Raises:
        MissingPlaceholderError: if a placeholder is absent from ``html``.
    """
    restored = html
    for occ in occurrences:
        if occ.placeholder not in restored:
            raise MissingPlaceholderError(
                f"Placeholder {occ.placeholder} for <{occ.tag_name}> not found in rendered HTML"
            )
        restored = restored.replace(occ.placeholder, occ.markup(), 1)
    return restored


def _read_open_tag(text: str, pos: int, name: str, start: int) -> tuple[str, bool, int]:
    """Read attributes from ``pos`` up to the end of an opening tag.

    ``>`` inside quoted values or ``{...}`` expressions does not end the tag.

    Returns:
        (attributes, self_closing, end offset just past the tag).
    """
    quote = ""
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if quote:
            # Quoted attribute values have no escapes; JS strings in {...} do.
            if ch == "\\" and depth > 0:
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in "\"'`":
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        elif depth == 0:
            if ch == "/" and text.startswith(">", i + 1):
                return text[pos:i], True, i + 2
            if ch == ">":
                return text[pos:i], False, i + 1
        i += 1
    raise UnbalancedComponentError(name, _line_of(text, start), "opening tag is never closed with '>'")


def _find_close(text: str, name: str, pos: int, start: int) -> tuple[int, int]:
    """Find the close tag balancing an open ``name`` tag.

    Returns:
        (start of the close tag, end offset just past it).
    """
    same_name = re.compile(rf"<(/?){name}(?=[\s/>])")
    depth = 1
    while (match := same_name.search(text, pos)) is not None:
        if match.group(1):
            tail = CLOSE_TAIL_RE.match(text, match.end())
            if tail is None:
                pos = match.end()
                continue
            depth -= 1
            if depth == 0:
                return match.start(), tail.end()
            pos = tail.end()
        else:
            _, self_closing, pos = _read_open_tag(text, match.end(), name, match.start())
            if not self_closing:
                depth += 1
    raise UnbalancedComponentError(name, _line_of(text, start), f"missing </{name}>")


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _code_regions(text: str) -> list[tuple[int, int]]:
    """Spans of fenced code blocks and inline code spans, in offset order."""
    regions = [m.span() for m in FENCE_RE.finditer(text)]
    # Blank out fences so their backticks cannot pair with a code span.
    masked = list(text)
    for begin, end in regions:
        masked[begin:end] = " " * (end - begin)
    regions.extend(m.span() for m in CODE_SPAN_RE.finditer("".join(masked)))
    return sorted(regions)


def _in_regions(regions: list[tuple[int, int]], offset: int) -> bool:
    return any(begin <= offset < end for begin, end in regions)
