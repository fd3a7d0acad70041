"""Turns pending image URLs into Hatena Fotolife URLs.

Images are resolved one at a time, in the order they appear in the note. Each
step leaves a durable trace (a staged file, then a cache line) so a failed run
can be re-invoked and only redo what did not finish.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import string
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from filetype import guess

from md2hatena.converter.image import ImageResolutionCache
from md2hatena.converter.models import ResolvedImage
from md2hatena.errors import FetchError

logger = logging.getLogger(__name__)

_ALPHANUMERIC = string.ascii_letters + string.digits


@runtime_checkable
class Fetcher(Protocol):
    """Downloads image bytes from the note's host."""

    def fetch(self, url: str) -> bytes: ...


@runtime_checkable
class Uploader(Protocol):
    """Uploads images to the blog's image host."""

    def upload(self, path: Path, title: str) -> str: ...

    def compute_public_url(self, identifier: str, extension: str) -> str: ...


def gen_uuid() -> str:
    """Random 32-character alphanumeric title for an upload."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(32))


def staging_name(url: str) -> str:
    """File name for a downloaded image: the URL's final path segment."""
    name = urlparse(url).path.rsplit("/", 1)[-1]
    if name in ("", ".", ".."):
        # Keep distinct URLs apart even when they end with a slash
        return hashlib.sha256(url.encode()).hexdigest()[:16]
    return name


def detect_extension(path: Path) -> str:
    """Image extension from the file name, or from its content signature."""
    if path.suffix:
        return path.suffix.lstrip(".").lower()
    kind = guess(str(path))
    if kind is not None and kind.mime.startswith("image/"):
        return "jpg" if kind.extension == "jpeg" else kind.extension
    return "png"


class ResolutionCoordinator:
    """Resolves pending images through the cache, a Fetcher and an Uploader."""

    def __init__(
        self,
        fetcher: Fetcher,
        uploader: Uploader,
        cache: ImageResolutionCache,
        staging_dir: str | Path,
        *,
        on_progress: Callable[[str], None] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.uploader = uploader
        self.cache = cache
        self.staging_dir = Path(staging_dir)
        self._on_progress = on_progress

    def resolve(self, pending: list[str]) -> list[ResolvedImage]:
        resolved: list[ResolvedImage] = []
        for url in pending:
            cached = self.cache.lookup(url)
            if cached is not None:
                logger.debug("cache hit for %s", url)
                resolved.append(cached)
            else:
                image = self._resolve_one(url)
                resolved.append(image)
                self.cache.add([image])
            if self._on_progress is not None:
                self._on_progress(url)
        return resolved

    def _resolve_one(self, url: str) -> ResolvedImage:
        staged = self.stage(url)
        identifier = self.uploader.upload(staged, gen_uuid())
        destination = self.uploader.compute_public_url(identifier, detect_extension(staged))
        logger.info("uploaded %s -> %s", url, destination)
        return ResolvedImage(original_url=url, destination_url=destination)

    def stage(self, url: str) -> Path:
        """Download ``url`` into the staging directory unless already there."""
        path = self.staging_dir / staging_name(url)
        if path.is_file():
            logger.debug("reusing downloaded %s", path)
            return path

        data = self.fetcher.fetch(url)
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise FetchError(url, e) from e
        logger.debug("downloaded %s (%d bytes)", path, len(data))
        return path
