"""CZ3 images: row-delta coded RGBA pixels in LZW blocks."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from lucatools.czimage.blocks import compress, decompress, to_rgba
from lucatools.czimage.header import (
    CzFormatError,
    CzHeader,
    CzImage,
    CzOutputInfo,
    parse_output_info,
)
from lucatools.czimage.imagefix import diff_line, line_diff

__all__ = ["Cz3Header", "Cz3Image", "parse_cz3_header"]

_CZ3_HEADER = struct.Struct("<BHHHHHH")


@dataclass
class Cz3Header:
    """Placement fields that follow the common header."""

    flag: int
    x: int
    y: int
    width1: int
    height1: int
    width2: int
    height2: int

    def pack(self) -> bytes:
        return _CZ3_HEADER.pack(
            self.flag, self.x, self.y, self.width1, self.height1, self.width2, self.height2
        )


def parse_cz3_header(data: bytes) -> Cz3Header:
    """Parse the extra header from the bytes after the common header."""
    if len(data) < _CZ3_HEADER.size:
        raise CzFormatError("CZ3 header is truncated")
    return Cz3Header(*_CZ3_HEADER.unpack_from(data))


class Cz3Image(CzImage):
    """CZ3 image: block table followed by LZW-compressed row deltas."""

    def __init__(self, header: CzHeader, data: bytes) -> None:
        self.header = header
        self.raw = bytes(data)
        self.cz3_header = parse_cz3_header(self.raw[15:])
        self.output_info: CzOutputInfo = parse_output_info(self.raw[header.header_length :])
        self.image: Image.Image | None = None
        self.png_image: Image.Image | None = None

    def get_image(self) -> Image.Image:
        if self.image is None:
            start = self.header.header_length + self.output_info.offset
            buf = decompress(self.raw[start:], self.output_info)
            self.image = line_diff(self.header, buf)
        return self.image

    def export(self, stream: BinaryIO) -> None:
        """Write the decoded image to a stream as PNG."""
        self.get_image().save(stream, format="PNG")

    def import_png(self, stream: BinaryIO, fill_size: bool) -> None:
        """Replace the pixel data with a PNG of the same size."""
        self.png_image = to_rgba(Image.open(stream))
        data = diff_line(self.header, self.png_image)
        blocks = self.output_info.block_info
        block_size = blocks[0].compressed_size if blocks else 0
        self.raw, self.output_info = compress(data, block_size)

    def write(self, stream: BinaryIO) -> None:
        stream.write(
            self.header.pack() + self.cz3_header.pack() + self.output_info.pack() + self.raw
        )