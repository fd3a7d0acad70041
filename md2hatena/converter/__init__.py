"""Markdown to Hatena HTML conversion pipeline."""

from md2hatena.converter.codeblock import (
    CodeRenderer,
    PlainPassthrough,
    SyntaxHighlighted,
    create_code_renderer,
)
from md2hatena.converter.converter import Converter
from md2hatena.converter.events import DocumentEventSource
from md2hatena.converter.image import ImageResolutionCache, cache_to, restore_from
from md2hatena.converter.models import ResolvedImage, ScanResult
from md2hatena.converter.options import HeadingDepth
from md2hatena.converter.rewriter import RewriteEngine
from md2hatena.converter.scanner import PreScanner

__all__ = [
    "CodeRenderer",
    "Converter",
    "DocumentEventSource",
    "HeadingDepth",
    "ImageResolutionCache",
    "PlainPassthrough",
    "PreScanner",
    "ResolvedImage",
    "RewriteEngine",
    "ScanResult",
    "SyntaxHighlighted",
    "cache_to",
    "create_code_renderer",
    "restore_from",
]
