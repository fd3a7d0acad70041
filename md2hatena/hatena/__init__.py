"""Hatena Fotolife uploader."""

import os

from md2hatena.config.models import HatenaConfig
from md2hatena.errors import AuthenticationError
from md2hatena.hatena.fotolife import FotolifeUploader


def create_uploader(config: HatenaConfig, timeout: float) -> FotolifeUploader:
    """Create a Fotolife uploader with credentials from the environment."""
    username = os.environ.get(config.username_env, "")
    api_key = os.environ.get(config.api_key_env, "")
    if not username or not api_key:
        raise AuthenticationError(
            "Hatena",
            f"set the {config.username_env} and {config.api_key_env} environment variables",
        )
    return FotolifeUploader(username, api_key, timeout=timeout)


__all__ = ["FotolifeUploader", "create_uploader"]
