"""Tools for LucaSystem engine assets: CZ images, bitmap fonts and text encodings."""

__version__ = "2.0.3"