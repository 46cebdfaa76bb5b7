"""CZ2 images with the variable-width LZW stream."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from lucatools.czimage.blocks import compress2, decompress2, to_rgba
from lucatools.czimage.cz1 import _alpha_data, _pack_palette, _palette_pixels, _read_palette
from lucatools.czimage.header import CzHeader, CzImage, CzOutputInfo, parse_output_info

__all__ = ["Cz2Header", "Cz2Image"]

_CZ2_HEADER = struct.Struct("<BBB")


@dataclass
class Cz2Header:
    """Three bytes of unknown meaning that follow the common header."""

    unknown1: int = 0
    unknown2: int = 0
    unknown3: int = 0

    def pack(self) -> bytes:
        return _CZ2_HEADER.pack(self.unknown1, self.unknown2, self.unknown3)


class Cz2Image(CzImage):
    """CZ2 image: palette followed by CZ2 LZW blocks."""

    def __init__(self, header: CzHeader, data: bytes) -> None:
        self.header = header
        self.raw = bytes(data)
        if header.header_length >= 15 + _CZ2_HEADER.size and len(self.raw) >= 15 + _CZ2_HEADER.size:
            self.cz2_header = Cz2Header(*_CZ2_HEADER.unpack_from(self.raw, 15))
        else:
            self.cz2_header = Cz2Header()
        self.color_panel, offset = _read_palette(self.raw, header.header_length, header.colorbits)
        self.output_info: CzOutputInfo = parse_output_info(self.raw[offset:])
        self.image: Image.Image | None = None
        self.png_image: Image.Image | None = None

    def _decode(self) -> Image.Image:
        width, height = self.header.width, self.header.height
        offset = self.header.header_length
        if self.header.colorbits in (4, 8):
            offset += 1 << (self.header.colorbits + 2)
        buf = decompress2(self.raw[offset + self.output_info.offset :], self.output_info)
        if self.header.colorbits != 8:
            return Image.new("RGBA", (width, height), (0, 0, 0, 0))
        pix = _palette_pixels(self.color_panel, buf, width * height)
        return Image.frombytes("RGBA", (width, height), pix)

    def get_image(self) -> Image.Image:
        if self.image is None:
            self.image = self._decode()
        return self.image

    def export(self, stream: BinaryIO) -> None:
        """Write the decoded image to a stream as PNG."""
        self.get_image().save(stream, format="PNG")

    def import_png(self, stream: BinaryIO, fill_size: bool) -> None:
        """Take the alpha channel of a PNG as the new palette indices."""
        self.png_image = to_rgba(Image.open(stream))
        data = _alpha_data(self.png_image, self.header, fill_size)
        blocks = self.output_info.block_info
        block_size = blocks[0].compressed_size if blocks else 0
        self.raw, self.output_info = compress2(data, block_size)

    def write(self, stream: BinaryIO) -> None:
        stream.write(
            self.header.pack()
            + self.cz2_header.pack()
            + _pack_palette(self.color_panel)
            + self.output_info.pack()
            + self.raw
        )