"""HackMD note to Hatena Blog HTML converter."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from md2hatena.config.models import Md2HatenaConfig
from md2hatena.converter.codeblock import CodeRenderer, create_code_renderer
from md2hatena.converter.events import DocumentEventSource
from md2hatena.converter.models import ResolvedImage, ScanResult
from md2hatena.converter.options import HeadingDepth
from md2hatena.converter.rewriter import RewriteEngine
from md2hatena.converter.scanner import PreScanner

logger = logging.getLogger(__name__)


class Converter:
    """Two-pass converter.

    ``parse`` scans the note for images, the caller resolves
    ``unresolved_images`` and hands them back through ``resolve_images``, and
    ``convert`` renders the final HTML. Each pass re-parses the markdown.
    """

    def __init__(
        self,
        heading_depth: HeadingDepth | None = None,
        code_renderer: CodeRenderer | None = None,
    ) -> None:
        self.heading_depth = heading_depth or HeadingDepth()
        self.code_renderer = code_renderer or create_code_renderer("pure")
        source = DocumentEventSource()
        self._scanner = PreScanner(source)
        self._engine = RewriteEngine(self.heading_depth, self.code_renderer, source)

        self.markdown = ""
        self.unresolved_images: list[str] = []
        self.resolved_images: list[ResolvedImage] = []
        self.alt_map: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: Md2HatenaConfig) -> Converter:
        return cls(
            heading_depth=HeadingDepth(config.heading_min),
            code_renderer=create_code_renderer(config.codeblock),
        )

    def parse(self, markdown: str) -> ScanResult:
        """Load a note and collect its images."""
        self.markdown = markdown
        self.resolved_images = []
        result = self._scanner.scan(markdown)
        self.unresolved_images = list(result.pending)
        self.alt_map = dict(result.alt_map)
        logger.debug("found %d image(s) to resolve", len(self.unresolved_images))
        return result

    def resolve_images(self, images: Iterable[ResolvedImage]) -> None:
        """Mark images as resolved. They are rewritten by ``convert``."""
        for image in images:
            if image.original_url in self.unresolved_images:
                self.unresolved_images.remove(image.original_url)
            if image not in self.resolved_images:
                self.resolved_images.append(image)

    def convert(self) -> str:
        """Render the loaded note, with the renderer's preamble on top."""
        body = self._engine.rewrite(self.markdown, self.resolved_images, self.alt_map)
        return self.code_renderer.predoc() + body
