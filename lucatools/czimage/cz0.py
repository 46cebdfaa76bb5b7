"""Uncompressed CZ0 images."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from lucatools.czimage.blocks import to_rgba
from lucatools.czimage.header import CzFormatError, CzHeader, CzImage, CzOutputInfo

__all__ = ["Cz0Header", "Cz0Image", "parse_cz0_header"]

_CZ0_HEADER = struct.Struct("<BHHHHHH")


@dataclass
class Cz0Header:
    """Placement fields that follow the common header."""

    flag: int
    x: int
    y: int
    width1: int
    height1: int
    width2: int
    height2: int

    def pack(self) -> bytes:
        return _CZ0_HEADER.pack(
            self.flag, self.x, self.y, self.width1, self.height1, self.width2, self.height2
        )


def parse_cz0_header(data: bytes) -> Cz0Header:
    """Parse the extra header from the bytes after the common header."""
    if len(data) < _CZ0_HEADER.size:
        raise CzFormatError("CZ0 header is truncated")
    return Cz0Header(*_CZ0_HEADER.unpack_from(data))


class Cz0Image(CzImage):
    """CZ0 image: raw RGBA pixels after the header."""

    def __init__(self, header: CzHeader, data: bytes) -> None:
        self.header = header
        self.raw = bytes(data)
        self.cz0_header = parse_cz0_header(self.raw[15:])
        self.output_info: CzOutputInfo | None = None
        self.image: Image.Image | None = None
        self.png_image: Image.Image | None = None

    def _decode(self) -> Image.Image:
        width, height = self.header.width, self.header.height
        if self.header.colorbits != 32:
            return Image.new("RGBA", (width, height), (0, 0, 0, 0))
        start = self.header.header_length
        end = start + width * height * 4
        if end > len(self.raw):
            raise CzFormatError("pixel data is truncated")
        return Image.frombytes("RGBA", (width, height), self.raw[start:end])

    def get_image(self) -> Image.Image:
        if self.image is None:
            self.image = self._decode()
        return self.image

    def export(self, stream: BinaryIO) -> None:
        """Write the decoded image to a stream as PNG."""
        self.get_image().save(stream, format="PNG")

    def import_png(self, stream: BinaryIO, fill_size: bool) -> None:
        self.png_image = to_rgba(Image.open(stream))

    def write(self, stream: BinaryIO) -> None:
        picture = to_rgba(self.png_image if self.png_image is not None else self.get_image())
        out = self.header.pack() + self.cz0_header.pack()
        if self.header.colorbits == 32:
            out += picture.tobytes()
        stream.write(out)