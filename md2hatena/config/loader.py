"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from md2hatena.errors import ConfigParseError

from .models import Md2HatenaConfig


def load_config(cli_path: str | None = None) -> Md2HatenaConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path).expanduser() if cli_path else None,
        Path("./md2hatena.yaml"),
        Path.home() / ".md2hatena.config.yml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ConfigParseError(str(path), "top level must be a mapping")
                raw = _expand_env_vars(raw)
                return Md2HatenaConfig(**raw)
            except yaml.YAMLError as e:
                raise ConfigParseError(str(path), f"invalid YAML: {e}") from e
            except ValidationError as e:
                raise ConfigParseError(str(path), e) from e
            except OSError as e:
                raise ConfigParseError(str(path), e) from e

    return Md2HatenaConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `md2hatena config init`
DEFAULT_CONFIG_TEMPLATE = """\
# md2hatena.yaml

# Minimum heading level (1-6)
# eg: 3 converts `#` to `###` and `##` to `####`
heading_min: 1

# Code blocks
codeblock: "pure"              # pure | highlightjs

# Images
resolve: true                  # download from HackMD and upload to Fotolife
download_dir: "./.md2hatena-imgs"
image_cache: ""                # e.g. ".md2hatena-cache"; empty disables caching
timeout: 10                    # upload timeout in seconds

# Credentials (names of environment variables)
hackmd:
  api_token_env: "HACKMD_APITOKEN"
  cookie_env: "HACKMD_COOKIE"
hatena:
  username_env: "HATENA_ID"
  api_key_env: "HATENA_API_KEY"

# Logging
log_level: "warn"              # debug | info | warn | error
"""
