"""Error types raised by md2hatena.

Every error aborts the current run before any HTML is written. The CLI is the
only place that turns them into console output.
"""

from __future__ import annotations


class Md2HatenaError(Exception):
    """Base error. Wraps the underlying cause with the failing operation."""

    def __init__(self, operation: str, cause: Exception | str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {cause}")
        if isinstance(cause, Exception):
            self.__cause__ = cause


class FetchError(Md2HatenaError):
    """Downloading an image from its source host failed."""

    def __init__(self, url: str, cause: Exception | str) -> None:
        self.url = url
        super().__init__(f"fetch {url}", cause)


class UploadError(Md2HatenaError):
    """Uploading an image to Hatena Fotolife failed."""

    def __init__(self, path: str, cause: Exception | str) -> None:
        self.path = path
        super().__init__(f"upload {path}", cause)


class AuthenticationError(Md2HatenaError):
    """A remote service rejected our credentials."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service} authentication", message)


class CacheIOError(Md2HatenaError):
    """Reading or writing the image cache file failed."""

    def __init__(self, path: str, cause: Exception | str) -> None:
        self.path = path
        super().__init__(f"image cache {path}", cause)


class CacheParseError(Md2HatenaError):
    """A line of the image cache file is not an `a -> b` mapping."""

    def __init__(self, path: str, line_no: int, line: str) -> None:
        self.path = path
        self.line_no = line_no
        self.line = line
        super().__init__(
            f"image cache {path}",
            f"line {line_no} is not '<original> -> <destination>': {line!r}",
        )


class ConfigParseError(Md2HatenaError, ValueError):
    """The configuration file is not valid YAML or has invalid values."""

    def __init__(self, path: str, cause: Exception | str) -> None:
        self.path = path
        super().__init__(f"config {path}", cause)
