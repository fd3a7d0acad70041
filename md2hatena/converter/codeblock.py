"""Code block renderers.

A renderer replaces the start and end of every fenced code block with its own
events, and may need a one-time preamble (``predoc``) at the top of the page.
The variant is picked once from configuration, see ``create_code_renderer``.
"""

from __future__ import annotations

import html
from typing import Protocol, runtime_checkable

from md2hatena.converter.events import CodeBlock, End, Event, Html, Start, Text
from md2hatena.converter.languages import HIGHLIGHTJS_LANGUAGES

FALLBACK_LANGUAGE = "txt"

HIGHLIGHTJS_PREDOC = """\
<script src="https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.6.0/highlight.min.js"></script>
<script src="//cdnjs.cloudflare.com/ajax/libs/highlightjs-line-numbers.js/2.8.0/highlightjs-line-numbers.min.js"></script>
<script>hljs.highlightAll(); hljs.initLineNumbersOnLoad({singleLine:true});</script>
<!-- You have to add `<link href="https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.6.0/styles/default.min.css">` -->
"""


@runtime_checkable
class CodeRenderer(Protocol):
    """Framing for fenced code blocks."""

    def codeblock_start(self, label: str) -> list[Event]: ...

    def codeblock_end(self, label: str) -> list[Event]: ...

    def predoc(self) -> str: ...


class PlainPassthrough:
    """Keeps markdown-it's own ``<pre><code>`` rendering.

    Use it when the blog theme already styles code blocks.
    """

    def codeblock_start(self, label: str) -> list[Event]:
        return [Start(CodeBlock(label))]

    def codeblock_end(self, label: str) -> list[Event]:
        return [End(CodeBlock(label))]

    def predoc(self) -> str:
        return ""


class SyntaxHighlighted:
    """highlight.js markup with a filename/title bar above each block."""

    def codeblock_start(self, label: str) -> list[Event]:
        return [
            Html('<div class="codeblock-title">'),
            Text(label),
            Html("</div>"),
            Html('<pre style="padding-top: 0; margin-top: 0;">'),
            Html(f'<code class="language-{html.escape(language_class(label))}">'),
        ]

    def codeblock_end(self, label: str) -> list[Event]:
        return [Html("</code>"), Html("</pre>\n")]

    def predoc(self) -> str:
        return HIGHLIGHTJS_PREDOC


def codename2extension(label: str) -> str:
    """``"main.rs"`` -> ``"rs"``; labels without a dot are returned as-is."""
    return label.rsplit(".", 1)[-1]


def language_class(label: str) -> str:
    """Language class for highlight.js, ``txt`` for anything it doesn't know."""
    extension = codename2extension(label)
    if extension in HIGHLIGHTJS_LANGUAGES:
        return extension
    return FALLBACK_LANGUAGE


_RENDERER_MAP: dict[str, type[PlainPassthrough] | type[SyntaxHighlighted]] = {
    "pure": PlainPassthrough,
    "highlightjs": SyntaxHighlighted,
    "highlight.js": SyntaxHighlighted,
}


def create_code_renderer(name: str) -> CodeRenderer:
    cls = _RENDERER_MAP.get(name)
    if cls is None:
        raise ValueError(
            f"Unsupported code block renderer: {name!r}. "
            f"Supported: {', '.join(_RENDERER_MAP)}"
        )
    return cls()
