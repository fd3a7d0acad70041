"""HackMD client."""

import os

from md2hatena.config.models import HackMDConfig
from md2hatena.errors import AuthenticationError
from md2hatena.hackmd.client import HackMD
from md2hatena.hackmd.cookie import HackMDCookie
from md2hatena.hackmd.models import TeamInfo, UserInfo


def create_hackmd(config: HackMDConfig, prompt=None) -> HackMD:
    """Create a HackMD client from config.

    Resolves the API token and the optional login cookie from the
    environment variables named in config.
    """
    token = os.environ.get(config.api_token_env, "")
    if not token:
        raise AuthenticationError(
            "HackMD", f"set the {config.api_token_env} environment variable"
        )
    cookie = HackMDCookie(os.environ.get(config.cookie_env) or None, prompt=prompt)
    return HackMD(token, cookie=cookie)


__all__ = [
    "HackMD",
    "HackMDCookie",
    "TeamInfo",
    "UserInfo",
    "create_hackmd",
]
