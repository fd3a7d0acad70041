"""Hatena Fotolife uploader over the AtomPub API."""

from __future__ import annotations

import base64
import hashlib
import logging
import re
import secrets
from datetime import datetime, timezone
from functools import cached_property
from pathlib import Path

import httpx
import lxml.etree as ET
from filetype import guess

from md2hatena.errors import AuthenticationError, UploadError

logger = logging.getLogger(__name__)

POST_URL = "https://f.hatena.ne.jp/atom/post"
FEED_URL = "https://f.hatena.ne.jp/atom/feed"
PUBLIC_URL_BASE = "https://cdn-ak.f.st-hatena.com/images/fotolife"

ATOM_NS = "http://purl.org/atom/ns#"
HATENA_NS = "http://www.hatena.ne.jp/info/xmlns#"

# f:id:<user>:<image id><type>:image, type being j/p/g for jpg/png/gif
_SYNTAX_RE = re.compile(r"f:id:(?P<user>[^:]+):(?P<id>\d+)[a-z]?:image")

_PARSER = ET.XMLParser(resolve_entities=False, no_network=True)


def wsse_header(username: str, api_key: str) -> str:
    """X-WSSE UsernameToken for one request."""
    nonce = secrets.token_bytes(20)
    created = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    digest = hashlib.sha1(nonce + created.encode() + api_key.encode()).digest()
    return (
        f'UsernameToken Username="{username}", '
        f'PasswordDigest="{base64.b64encode(digest).decode()}", '
        f'Nonce="{base64.b64encode(nonce).decode()}", '
        f'Created="{created}"'
    )


def build_entry(path: Path, title: str) -> bytes:
    """Atom entry carrying the image as base64 content."""
    kind = guess(str(path))
    mime = kind.mime if kind is not None else "image/png"

    entry = ET.Element(f"{{{ATOM_NS}}}entry", nsmap={None: ATOM_NS})
    ET.SubElement(entry, f"{{{ATOM_NS}}}title").text = title
    content = ET.SubElement(entry, f"{{{ATOM_NS}}}content", mode="base64", type=mime)
    content.text = base64.b64encode(path.read_bytes()).decode()
    return ET.tostring(entry, xml_declaration=True, encoding="utf-8")


def parse_image_id(body: bytes) -> str:
    """Image id (``20200101123456``) from the entry returned by a post."""
    root = ET.fromstring(body, _PARSER)
    syntax = root.findtext(f"{{{HATENA_NS}}}syntax") or ""
    match = _SYNTAX_RE.search(syntax)
    if match is None:
        raise ValueError(f"no image id in response syntax {syntax!r}")
    return match.group("id")


class FotolifeUploader:
    """Uploads images to Hatena Fotolife and builds their public CDN URLs.

    The account name in public URLs is looked up from the Fotolife feed on
    first use and kept for the lifetime of the uploader.
    """

    def __init__(
        self,
        username: str,
        api_key: str,
        timeout: float = 10,
        client: httpx.Client | None = None,
    ) -> None:
        if not username or not api_key:
            raise AuthenticationError("Hatena", "Hatena ID and API key are required")
        self._username = username
        self._api_key = api_key
        self.timeout = timeout
        self._client = client or httpx.Client()

    def upload(self, path: Path, title: str) -> str:
        """Post the image at ``path``; returns its Fotolife image id."""
        try:
            body = build_entry(path, title)
        except OSError as e:
            raise UploadError(str(path), e) from e

        try:
            resp = self._client.post(
                POST_URL,
                content=body,
                headers={
                    "X-WSSE": wsse_header(self._username, self._api_key),
                    "Content-Type": "application/atom+xml",
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise UploadError(str(path), e) from e

        if resp.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise AuthenticationError("Hatena", f"upload rejected ({resp.status_code})")
        try:
            resp.raise_for_status()
            image_id = parse_image_id(resp.content)
        except (httpx.HTTPStatusError, ET.XMLSyntaxError, ValueError) as e:
            raise UploadError(str(path), e) from e

        logger.debug("uploaded %s as %s", path, image_id)
        return image_id

    def compute_public_url(self, identifier: str, extension: str) -> str:
        name = self.account_name
        return f"{PUBLIC_URL_BASE}/{name[0]}/{name}/{identifier[:8]}/{identifier}.{extension}"

    @cached_property
    def account_name(self) -> str:
        try:
            resp = self._client.get(
                FEED_URL,
                headers={"X-WSSE": wsse_header(self._username, self._api_key)},
            )
        except httpx.HTTPError as e:
            raise UploadError(FEED_URL, e) from e
        if resp.status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            raise AuthenticationError("Hatena", f"feed rejected ({resp.status_code})")
        try:
            resp.raise_for_status()
            root = ET.fromstring(resp.content, _PARSER)
        except (httpx.HTTPStatusError, ET.XMLSyntaxError) as e:
            raise UploadError(FEED_URL, e) from e

        name = root.findtext(f".//{{{ATOM_NS}}}author/{{{ATOM_NS}}}name")
        if not name:
            logger.debug("feed has no author; using Hatena ID %s", self._username)
            return self._username
        return name.strip()
