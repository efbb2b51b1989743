"""Markdown to HTML rendering with markdown-it-py.

A fresh ``MarkdownIt`` instance is built for every call, so per-document
settings such as the hostname used for link classification never leak
between files.
"""

import re
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.rules_inline import StateInline

from .components import PLACEHOLDER_PREFIX, PLACEHOLDER_RE

LANG_RE = re.compile(r"^[a-zA-Z0-9_+-]+$")

DEFAULT_MARKDOWN_OPTIONS: dict[str, Any] = {
    "html": True,
    "linkify": True,
    "typographer": True,
    "breaks": False,
}

EXTERNAL_LINK_ATTRS = (("target", "_blank"), ("rel", "noopener noreferrer"))


def is_external_link(href: str, hostname: str = "localhost") -> bool:
    """An http(s) link is external unless it points at ``hostname``."""
    return href.startswith("http") and hostname not in href


def create_markdown(hostname: str = "localhost", markdown_options: dict[str, Any] | None = None) -> MarkdownIt:
    """Build a configured markdown-it instance.

    GitHub-flavoured syntax (tables, strikethrough, linkify) plus smart
    typography. Single newlines do not break lines. ``markdown_options`` is
    applied last and may override any of these.
    """
    options = {**DEFAULT_MARKDOWN_OPTIONS, **(markdown_options or {})}
    md = MarkdownIt("gfm-like", options)
    md.enable(["replacements", "smartquotes"])
    md.inline.ruler.before("emphasis", "component_placeholder", _placeholder_rule)

    def render_fence(self, tokens, idx, options, env):
        token = tokens[idx]
        info = unescapeAll(token.info).strip() if token.info else ""
        lang = info.split(maxsplit=1)[0] if info else ""
        lang_class = f' class="language-{lang}"' if lang and LANG_RE.match(lang) else ""
        # Code contents go back through the markdown renderer, not plain escaping.
        return f"<pre><code{lang_class}>{md.render(token.content)}</code></pre>\n"

    def render_link_open(self, tokens, idx, options, env):
        token = tokens[idx]
        if is_external_link(token.attrGet("href") or "", hostname):
            for name, value in EXTERNAL_LINK_ATTRS:
                token.attrSet(name, value)
        return self.renderToken(tokens, idx, options, env)

    md.add_render_rule("fence", render_fence)
    md.add_render_rule("link_open", render_link_open)
    return md


def render_markdown(text: str, hostname: str = "localhost", markdown_options: dict[str, Any] | None = None) -> str:
    """Render placeholder-bearing markdown to HTML."""
    return create_markdown(hostname, markdown_options).render(text)


def _placeholder_rule(state: StateInline, silent: bool) -> bool:
    """Emit component placeholders untouched so emphasis never claims their underscores."""
    if not state.src.startswith(PLACEHOLDER_PREFIX, state.pos):
        return False
    match = PLACEHOLDER_RE.match(state.src, state.pos)
    if match is None:
        return False
    if not silent:
        token = state.push("html_inline", "", 0)
        token.content = match.group(0)
    state.pos = match.end()
    return True
