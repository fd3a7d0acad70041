"""Second pass: rewrite a note into Hatena Blog HTML."""

from __future__ import annotations

import html
from collections.abc import Iterable, Iterator, Mapping

from md2hatena.converter.codeblock import CodeRenderer
from md2hatena.converter.events import (
    CodeBlock,
    DocumentEventSource,
    End,
    Event,
    Heading,
    Html,
    Image,
    Start,
    Text,
)
from md2hatena.converter.models import ResolvedImage
from md2hatena.converter.options import HeadingDepth


def figure_events(destination_url: str, alt_text: str) -> list[Event]:
    """Hatena Fotolife figure with a visible caption."""
    alt = html.escape(alt_text)
    return [
        Html(
            f'<figure class="figure-image figure-image-fotolife mceNonEditable" title="{alt}">'
        ),
        Html(
            f'<img src="{html.escape(destination_url)}" alt="{alt}" '
            'class="hatena-fotolife" loading="lazy" itemprop="image" title="">'
        ),
        Html('<figcaption class="mceEditable">'),
        Text(alt_text),
        Html("</figcaption>"),
        Html("</figure>"),
    ]


class RewriteEngine:
    """Replaces resolved images, remaps headings and frames code blocks."""

    def __init__(
        self,
        heading_depth: HeadingDepth,
        code_renderer: CodeRenderer,
        source: DocumentEventSource | None = None,
    ) -> None:
        self.heading_depth = heading_depth
        self.code_renderer = code_renderer
        self._source = source or DocumentEventSource()

    def rewrite(
        self,
        markdown: str,
        resolved: Iterable[ResolvedImage],
        alt_map: Mapping[str, str] | None = None,
    ) -> str:
        events = self.rewrite_events(
            self._source.iter_events(markdown), resolved, alt_map or {}
        )
        return self._source.render(events)

    def rewrite_events(
        self,
        events: Iterable[Event],
        resolved: Iterable[ResolvedImage],
        alt_map: Mapping[str, str],
    ) -> Iterator[Event]:
        destinations: dict[str, str] = {}
        for image in resolved:
            destinations.setdefault(image.original_url, image.destination_url)

        # Depth inside a replaced image; its alt text is already in the caption
        in_image = 0
        for event in events:
            if in_image:
                if isinstance(event, Start) and isinstance(event.tag, Image):
                    in_image += 1
                elif isinstance(event, End) and isinstance(event.tag, Image):
                    in_image -= 1
                continue

            if isinstance(event, Start):
                tag = event.tag
                if isinstance(tag, Image) and tag.url in destinations:
                    in_image = 1
                    alt_text = alt_map.get(tag.url, tag.title)
                    yield from figure_events(destinations[tag.url], alt_text)
                    continue
                if isinstance(tag, Heading):
                    yield Start(Heading(self.heading_depth.apply(tag.level)), event.token)
                    continue
                if isinstance(tag, CodeBlock):
                    yield from self.code_renderer.codeblock_start(tag.label)
                    continue
            elif isinstance(event, End):
                tag = event.tag
                if isinstance(tag, Heading):
                    yield End(Heading(self.heading_depth.apply(tag.level)), event.token)
                    continue
                if isinstance(tag, CodeBlock):
                    yield from self.code_renderer.codeblock_end(tag.label)
                    continue
            yield event
