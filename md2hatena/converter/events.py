"""Structural event stream over markdown-it-py tokens.

markdown-it produces a flat list of block tokens whose ``inline`` tokens hold
their own children, and images are single tokens whose children are the alt
text. ``DocumentEventSource.parse`` flattens that into start/end/text events
so each pass can walk the document as one sequence, and
``DocumentEventSource.render`` folds a (possibly rewritten) sequence back into
tokens for the markdown-it HTML renderer.
"""

from __future__ import annotations

import html
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin


@dataclass(frozen=True)
class Image:
    url: str
    title: str = ""


@dataclass(frozen=True)
class Heading:
    level: int


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code block. ``label`` is the full info string after the fence."""

    label: str


@dataclass(frozen=True)
class InlineRun:
    """A run of inline content (paragraph text, heading text, table cell, ...)."""


INLINE = InlineRun()

Tag = Image | Heading | CodeBlock | InlineRun


@dataclass(frozen=True)
class Start:
    tag: Tag
    token: Token | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class End:
    tag: Tag
    token: Token | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Html:
    content: str


@dataclass(frozen=True)
class Passthrough:
    """Any token the pipeline does not look at, rendered as-is."""

    token: Token = field(compare=False)


Event = Start | End | Text | Html | Passthrough


def create_markdown() -> MarkdownIt:
    """HackMD-flavoured parser: CommonMark plus GFM tables, strikethrough,
    task lists and footnotes."""
    md = MarkdownIt("commonmark", {"html": True})
    md.enable("table").enable("strikethrough")
    md.use(tasklists_plugin)
    md.use(footnote_plugin)
    return md


class DocumentEventSource:
    """Parses markdown into a replayable event list and renders events to HTML."""

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self._md = md or create_markdown()

    def parse(self, markdown: str) -> list[Event]:
        return list(self.iter_events(markdown))

    def iter_events(self, markdown: str) -> Iterator[Event]:
        for token in self._md.parse(markdown):
            if token.type == "heading_open":
                yield Start(Heading(int(token.tag[1:])), token)
            elif token.type == "heading_close":
                yield End(Heading(int(token.tag[1:])), token)
            elif token.type == "fence":
                tag = CodeBlock(token.info.strip())
                yield Start(tag, token)
                yield Text(token.content)
                yield End(tag, token)
            elif token.type == "inline":
                yield Start(INLINE, token)
                yield from _inline_events(token.children or [])
                yield End(INLINE, token)
            else:
                yield Passthrough(token)

    def render(self, events: Iterable[Event]) -> str:
        tokens = _TokenBuilder().build(events)
        return self._md.renderer.render(tokens, self._md.options, {})


def _inline_events(children: list[Token]) -> Iterator[Event]:
    # Escapes and entities inside an image are separate text_special tokens;
    # join them with their neighbours into one Text, as text_join does at the
    # top level.
    run: list[str] = []
    for child in children:
        if child.type in ("text", "text_special"):
            run.append(child.content)
            continue
        if run:
            yield Text("".join(run))
            run = []
        if child.type == "image":
            tag = Image(
                url=str(child.attrGet("src") or ""),
                title=str(child.attrGet("title") or ""),
            )
            yield Start(tag, child)
            yield from _inline_events(child.children or [])
            yield End(tag, child)
        else:
            yield Passthrough(child)
    if run:
        yield Text("".join(run))


class _TokenBuilder:
    """Folds an event sequence back into markdown-it block tokens."""

    def __init__(self) -> None:
        self.blocks: list[Token] = []
        self.inline: list[Token] | None = None
        self.inline_token: Token | None = None
        self.images: list[Token] = []
        self.code: Token | None = None
        self.code_parts: list[str] = []

    def build(self, events: Iterable[Event]) -> list[Token]:
        for event in events:
            if isinstance(event, Start):
                self._start(event)
            elif isinstance(event, End):
                self._end(event)
            elif isinstance(event, Text):
                self._text(event.content)
            elif isinstance(event, Html):
                self._html(event.content)
            else:
                self._append(event.token)
        return self.blocks

    def _start(self, event: Start) -> None:
        tag = event.tag
        if isinstance(tag, InlineRun):
            self.inline = []
            self.inline_token = event.token
        elif isinstance(tag, Image):
            attrs: dict[str, str | int | float] = {"src": tag.url, "alt": ""}
            if tag.title:
                attrs["title"] = tag.title
            if event.token is not None:
                image = event.token.copy(attrs=attrs, children=[])
            else:
                image = Token("image", "img", 0, attrs=attrs, children=[])
            self._append(image)
            self.images.append(image)
        elif isinstance(tag, Heading):
            self.blocks.append(_heading_token(event.token, tag.level, opening=True))
        elif isinstance(tag, CodeBlock):
            if event.token is not None:
                self.code = event.token.copy(info=tag.label)
            else:
                self.code = Token(
                    "fence", "code", 0, info=tag.label, markup="```", block=True
                )
            self.code_parts = []

    def _end(self, event: End) -> None:
        tag = event.tag
        if isinstance(tag, InlineRun):
            if self.inline_token is not None:
                inline = self.inline_token.copy(children=self.inline or [])
            else:
                inline = Token("inline", "", 0, children=self.inline or [])
            self.blocks.append(inline)
            self.inline = None
            self.inline_token = None
        elif isinstance(tag, Image):
            if self.images:
                self.images.pop()
        elif isinstance(tag, Heading):
            self.blocks.append(_heading_token(event.token, tag.level, opening=False))
        elif isinstance(tag, CodeBlock) and self.code is not None:
            self.code.content = "".join(self.code_parts)
            self.blocks.append(self.code)
            self.code = None

    def _text(self, content: str) -> None:
        if self.code is not None:
            self.code_parts.append(content)
        elif self.inline is not None:
            self._append(Token("text", "", 0, content=content))
        else:
            # Bare text between block-level HTML, e.g. highlighted code bodies
            self.blocks.append(
                Token("html_block", "", 0, content=html.escape(content), block=True)
            )

    def _html(self, content: str) -> None:
        if self.inline is not None:
            self._append(Token("html_inline", "", 0, content=content))
        else:
            self.blocks.append(Token("html_block", "", 0, content=content, block=True))

    def _append(self, token: Token) -> None:
        if self.images:
            self.images[-1].children.append(token)
        elif self.inline is not None:
            self.inline.append(token)
        else:
            self.blocks.append(token)


def _heading_token(original: Token | None, level: int, *, opening: bool) -> Token:
    tag = f"h{level}"
    if original is not None:
        return original.copy(tag=tag)
    if opening:
        return Token("heading_open", tag, 1, markup="#" * level, block=True)
    return Token("heading_close", tag, -1, markup="#" * level, block=True)
