"""Detection and loading of CZ images."""

from __future__ import annotations

import os
from pathlib import Path

from lucatools.czimage.cz0 import Cz0Image
from lucatools.czimage.cz1 import Cz1Image
from lucatools.czimage.cz2 import Cz2Image
from lucatools.czimage.cz3 import Cz3Image
from lucatools.czimage.header import CzFormatError, CzImage, parse_header

__all__ = ["load_cz_image", "load_cz_image_file"]

_VARIANTS: dict[bytes, type[CzImage]] = {
    b"CZ0": Cz0Image,
    b"CZ1": Cz1Image,
    b"CZ2": Cz2Image,
    b"CZ3": Cz3Image,
}


def load_cz_image(data: bytes) -> CzImage:
    """Load a CZ image of any supported variant from bytes."""
    data = bytes(data)
    header = parse_header(data[:15])
    variant = _VARIANTS.get(header.magic[:3])
    if variant is None:
        raise CzFormatError("Unknown Cz image type")
    return variant(header, data)


def load_cz_image_file(path: str | os.PathLike[str]) -> CzImage:
    """Load a CZ image from a file."""
    return load_cz_image(Path(path).read_bytes())