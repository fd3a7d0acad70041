"""HackMD API client and image fetcher."""

from __future__ import annotations

import logging
from functools import cached_property

import httpx
from pydantic import ValidationError

from md2hatena.errors import AuthenticationError, FetchError
from md2hatena.hackmd.cookie import HackMDCookie
from md2hatena.hackmd.models import UserInfo

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.hackmd.io/v1"
UPLOADS_PREFIX = "https://hackmd.io/_uploads/"
USER_AGENT = "md2hatena"


class HackMD:
    """Reads user info and note images from HackMD.

    Images under ``https://hackmd.io/_uploads/`` redirect to a protected S3
    bucket and need the login cookie; any other URL is fetched anonymously.
    """

    def __init__(
        self,
        api_token: str,
        cookie: HackMDCookie | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_token:
            raise AuthenticationError("HackMD", "API token is empty")
        self._api_token = api_token
        self._cookie = cookie or HackMDCookie()
        self._injected_client = client

    @cached_property
    def _client(self) -> httpx.Client:
        if self._injected_client is not None:
            return self._injected_client
        return httpx.Client(headers={"User-Agent": USER_AGENT}, follow_redirects=True)

    def me(self) -> UserInfo:
        """Information about the token's owner."""
        resp = self._get(
            f"{API_BASE_URL}/me",
            headers={"Authorization": f"Bearer {self._api_token}"},
        )
        if resp.status_code == httpx.codes.UNAUTHORIZED:
            raise AuthenticationError("HackMD", "API token is invalid?")
        _raise_for_status(f"{API_BASE_URL}/me", resp)
        try:
            return UserInfo.model_validate_json(resp.content)
        except ValidationError as e:
            raise FetchError(f"{API_BASE_URL}/me", e) from e

    def fetch(self, url: str) -> bytes:
        """Download the image at ``url``."""
        if url.startswith(UPLOADS_PREFIX):
            return self._fetch_protected(url[len(UPLOADS_PREFIX):])
        resp = self._get(url)
        _raise_for_status(url, resp)
        return resp.content

    def _fetch_protected(self, photo_name: str) -> bytes:
        url = f"{UPLOADS_PREFIX}{photo_name}"
        resp = self._get(
            url,
            headers={
                "Authorization": f"Bearer {self._api_token}",
                "Cookie": self._cookie.get_cookie(),
            },
        )
        if resp.status_code == httpx.codes.UNAUTHORIZED:
            raise AuthenticationError("HackMD", "Cookie is invalid?")
        _raise_for_status(url, resp)
        return resp.content

    def _get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            return self._client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise FetchError(url, e) from e


def _raise_for_status(url: str, resp: httpx.Response) -> None:
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(url, e) from e
