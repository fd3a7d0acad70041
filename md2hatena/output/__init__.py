"""Output subsystem: writes converted HTML."""

from md2hatena.output.writer import write_result_html

__all__ = ["write_result_html"]
