"""Writes converted HTML to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from md2hatena.errors import Md2HatenaError

logger = logging.getLogger(__name__)


def write_result_html(html: str, output_path: str | Path) -> Path:
    """Write ``html`` to ``output_path``, creating parent directories.

    Returns the Path of the written file.
    """
    dest = Path(output_path)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(html, encoding="utf-8")
    except OSError as e:
        raise Md2HatenaError(f"write {dest}", e) from e
    logger.info("wrote %s (%d bytes)", dest, len(html))
    return dest
