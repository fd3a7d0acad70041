"""HackMD login cookie, needed to read images behind ``hackmd.io/_uploads``."""

from __future__ import annotations

import webbrowser
from collections.abc import Callable

from md2hatena.errors import AuthenticationError

COOKIE_NAME = "connect.sid"
LOGIN_URL = "https://hackmd.io"


def _normalize(cookie: str) -> str:
    cookie = cookie.strip()
    if cookie.startswith(COOKIE_NAME):
        return cookie
    return f"{COOKIE_NAME}={cookie}"


class HackMDCookie:
    """Holds the ``connect.sid`` cookie, asking the user for it when missing.

    ``prompt`` is called after a browser window with HackMD has been opened;
    it should return the cookie value copied from the browser's devtools.
    """

    def __init__(
        self,
        default_cookie: str | None = None,
        prompt: Callable[[], str] | None = None,
    ) -> None:
        self._cookie = _normalize(default_cookie) if default_cookie else None
        self._prompt = prompt

    def get_cookie(self, dont_use_cache: bool = False) -> str:
        if not dont_use_cache and self._cookie is not None:
            return self._cookie
        if self._prompt is None:
            raise AuthenticationError("HackMD", "no login cookie available")

        if not webbrowser.open(LOGIN_URL):
            raise AuthenticationError("HackMD", "could not open a browser to log in")
        cookie = self._prompt().strip()
        if not cookie:
            raise AuthenticationError("HackMD", "user did not provide a login cookie")

        self._cookie = _normalize(cookie)
        return self._cookie
