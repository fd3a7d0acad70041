from .loader import load_config
from .models import (
    HackMDConfig,
    HatenaConfig,
    Md2HatenaConfig,
)

__all__ = [
    "HackMDConfig",
    "HatenaConfig",
    "Md2HatenaConfig",
    "load_config",
]
