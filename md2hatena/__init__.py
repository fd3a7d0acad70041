"""md2hatena: convert HackMD notes into Hatena Blog HTML."""

__version__ = "0.1.0"
