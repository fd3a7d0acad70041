"""First pass: find the images a note references."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from md2hatena.converter.events import (
    DocumentEventSource,
    End,
    Event,
    Image,
    Start,
    Text,
)
from md2hatena.converter.models import ScanResult


class PreScanner:
    """Collects unresolved image URLs and their alt text.

    Only the first text event right after an image start is taken as its alt
    text, so rich alt text such as ``![**bold** rest](url)`` keeps just its
    first plain run.
    """

    def __init__(self, source: DocumentEventSource | None = None) -> None:
        self._source = source or DocumentEventSource()

    def scan(self, markdown: str, resolved: Collection[str] = ()) -> ScanResult:
        return self.scan_events(self._source.iter_events(markdown), resolved)

    @staticmethod
    def scan_events(events: Iterable[Event], resolved: Collection[str] = ()) -> ScanResult:
        result = ScanResult()
        seen: set[str] = set()
        image_url: str | None = None

        for event in events:
            if isinstance(event, Start) and isinstance(event.tag, Image):
                url = event.tag.url
                if url not in resolved and url not in seen:
                    seen.add(url)
                    result.pending.append(url)
                image_url = url
            elif isinstance(event, Text) and image_url is not None:
                result.alt_map.setdefault(image_url, event.content)
                image_url = None
            elif isinstance(event, End) and isinstance(event.tag, Image):
                image_url = None

        return result
