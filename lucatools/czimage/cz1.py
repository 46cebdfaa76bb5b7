"""LZW-compressed CZ1 images."""

from __future__ import annotations

from typing import BinaryIO

from PIL import Image

from lucatools.czimage.blocks import compress, decompress, fill_image, to_rgba
from lucatools.czimage.header import CzFormatError, CzHeader, CzImage, CzOutputInfo, parse_output_info

__all__ = ["Cz1Image"]

Color = tuple[int, int, int, int]


def _read_palette(raw: bytes, offset: int, colorbits: int) -> tuple[list[Color], int]:
    """Read a BGRA palette for 4- and 8-bit images; return it as RGBA tuples."""
    if colorbits not in (4, 8):
        return [], offset
    count = 1 << colorbits
    end = offset + count * 4
    if end > len(raw):
        raise CzFormatError("palette is truncated")
    palette = [
        (raw[i + 2], raw[i + 1], raw[i], raw[i + 3]) for i in range(offset, end, 4)
    ]
    return palette, end


def _pack_palette(palette: list[Color]) -> bytes:
    # Entries are stored back in R, G, B, A order.
    return b"".join(bytes(color) for color in palette)


def _palette_pixels(palette: list[Color], indices: bytes, count: int) -> bytes:
    if len(indices) < count:
        raise CzFormatError("decompressed data is shorter than the image")
    entries = [bytes(color) for color in palette]
    try:
        return b"".join(entries[i] for i in indices[:count])
    except IndexError as exc:
        raise CzFormatError("palette index out of range") from exc


def _alpha_data(picture: Image.Image, header: CzHeader, fill_size: bool) -> bytes:
    width, height = header.width, header.height
    if fill_size:
        picture = fill_image(picture, width, height)
    if picture.size != (width, height):
        raise CzFormatError(f"image size mismatch, expected w{width} h{height}")
    return picture.getchannel("A").tobytes()


class Cz1Image(CzImage):
    """CZ1 image: optional palette followed by LZW blocks."""

    def __init__(self, header: CzHeader, data: bytes) -> None:
        self.header = header
        self.raw = bytes(data)
        self.color_panel, offset = _read_palette(self.raw, header.header_length, header.colorbits)
        self.output_info: CzOutputInfo = parse_output_info(self.raw[offset:])
        self.image: Image.Image | None = None
        self.png_image: Image.Image | None = None

    def _decode(self) -> Image.Image:
        width, height = self.header.width, self.header.height
        count = width * height
        offset = self.header.header_length
        if self.header.colorbits in (4, 8):
            offset += 1 << (self.header.colorbits + 2)
        buf = decompress(self.raw[offset + self.output_info.offset :], self.output_info)
        bits = self.header.colorbits
        if bits == 4:
            if len(buf) < (count + 1) // 2:
                raise CzFormatError("decompressed data is shorter than the image")
            indices = bytes(
                (buf[i // 2] & 0x0F) if i % 2 == 0 else (buf[i // 2] >> 4) for i in range(count)
            )
            pix = _palette_pixels(self.color_panel, indices, count)
        elif bits == 8:
            pix = _palette_pixels(self.color_panel, buf, count)
        elif bits == 24:
            if len(buf) < count * 3:
                raise CzFormatError("decompressed data is shorter than the image")
            pix = b"".join(buf[i : i + 3] + b"\xff" for i in range(0, count * 3, 3))
        elif bits == 32:
            if len(buf) < count * 4:
                raise CzFormatError("decompressed data is shorter than the image")
            pix = buf[: count * 4]
        else:
            return Image.new("RGBA", (width, height), (0, 0, 0, 0))
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
        self.raw, self.output_info = compress(data, block_size)

    def write(self, stream: BinaryIO) -> None:
        stream.write(
            self.header.pack()
            + _pack_palette(self.color_panel)
            + self.output_info.pack()
            + self.raw
        )