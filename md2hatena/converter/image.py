"""On-disk cache of resolved images.

The cache is a plain text file with one ``<original_url> -> <destination_url>``
line per image. Lines are only ever appended; lookups return the first line
for a given original URL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from md2hatena.converter.models import ResolvedImage
from md2hatena.errors import CacheIOError, CacheParseError

logger = logging.getLogger(__name__)

SEPARATOR = " -> "


def restore_from(cache_path: str | Path) -> list[ResolvedImage]:
    """Read every mapping from the cache file. A missing file is an empty cache."""
    path = Path(cache_path)
    if not path.is_file():
        return []
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CacheIOError(str(path), e) from e

    images: list[ResolvedImage] = []
    for line_no, line in enumerate(contents.splitlines(), start=1):
        if not line.strip():
            continue
        original_url, sep, destination_url = line.partition(SEPARATOR)
        if not sep:
            raise CacheParseError(str(path), line_no, line)
        images.append(
            ResolvedImage(original_url=original_url, destination_url=destination_url)
        )
    return images


def _unseen(images: Iterable[ResolvedImage], seen: set[ResolvedImage]) -> list[ResolvedImage]:
    new_images: list[ResolvedImage] = []
    for image in images:
        if image in seen:
            continue
        seen.add(image)
        new_images.append(image)
    return new_images


def _append(images: list[ResolvedImage], path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            for image in images:
                f.write(f"{image.original_url}{SEPARATOR}{image.destination_url}\n")
    except OSError as e:
        raise CacheIOError(str(path), e) from e
    logger.debug("cached %d image(s) in %s", len(images), path)


def cache_to(images: Iterable[ResolvedImage], cache_path: str | Path) -> list[ResolvedImage]:
    """Append the mappings that are not in the cache file yet.

    Returns the images that were actually written.
    """
    path = Path(cache_path)
    new_images = _unseen(images, set(restore_from(path)))
    if new_images:
        _append(new_images, path)
    return new_images


class ImageResolutionCache:
    """Image cache bound to one file. An empty path disables caching.

    The file is read once, on first use; later additions are appended to it
    and kept in memory. One writer per cache file is assumed.
    """

    def __init__(self, path: str | Path | None) -> None:
        self.path = Path(path) if path else None
        self._images: list[ResolvedImage] | None = None
        self._first: dict[str, ResolvedImage] = {}

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def _load(self) -> list[ResolvedImage]:
        if self._images is None:
            self._images = restore_from(self.path) if self.path is not None else []
            self._first = {}
            self._remember(self._images)
        return self._images

    def _remember(self, images: Iterable[ResolvedImage]) -> None:
        for image in images:
            self._first.setdefault(image.original_url, image)

    def restore(self) -> list[ResolvedImage]:
        return list(self._load())

    def lookup(self, original_url: str) -> ResolvedImage | None:
        self._load()
        return self._first.get(original_url)

    def add(self, images: Iterable[ResolvedImage]) -> list[ResolvedImage]:
        if self.path is None:
            return []
        cached = self._load()
        new_images = _unseen(images, set(cached))
        if new_images:
            _append(new_images, self.path)
            cached.extend(new_images)
            self._remember(new_images)
        return new_images
