"""Palette expansion and row-delta coding used by CZ images."""

from __future__ import annotations

import math
from typing import Sequence

from PIL import Image

from lucatools.czimage.header import CzFormatError, CzHeader

__all__ = ["panel_image", "diff_line", "line_diff"]


def panel_image(header: CzHeader, color_panel: Sequence[Sequence[int]], data: bytes) -> Image.Image:
    """Build an RGBA image from palette indices; palette entries are BGRA."""
    count = header.width * header.height
    pix = bytearray()
    for index in data[:count]:
        b, g, r, a = color_panel[index][:4]
        pix += bytes((r, g, b, a))
    if len(pix) < count * 4:
        raise CzFormatError("not enough palette indices for the image")
    return Image.frombytes("RGBA", (header.width, header.height), bytes(pix))


def _block_height(header: CzHeader) -> int:
    return int(math.ceil(header.height / header.colorblock)) & 0xFFFF


def diff_line(header: CzHeader, image: Image.Image) -> bytes:
    """Encode each row as the difference from the row above within a block."""
    width, height = header.width, header.height
    if image.size != (width, height):
        raise CzFormatError(f"image size mismatch, expected w{width} h{height}")
    pix = image.convert("RGBA").tobytes()
    colorblock = header.colorblock or 3
    block_height = int(math.ceil(height / colorblock)) & 0xFFFF
    line = width * (header.colorbits >> 3)
    data = bytearray(len(pix))
    prev = bytes(line)
    for y in range(height):
        start = y * line
        cur = pix[start : start + line]
        if y % block_height != 0:
            data[start : start + line] = bytes((c - p) & 0xFF for c, p in zip(cur, prev))
        else:
            data[start : start + line] = cur
        prev = cur
    return bytes(data)


def line_diff(header: CzHeader, data: bytes) -> Image.Image:
    """Rebuild an RGBA image from row-delta data; sets a zero colorblock to 3."""
    width, height = header.width, header.height
    if header.colorblock == 0:
        header.colorblock = 3
    block_height = _block_height(header)
    pixel_bytes = header.colorbits >> 3
    line = width * pixel_bytes
    if len(data) < line * height:
        raise CzFormatError("row data is shorter than the image")
    pix = bytearray(width * height * 4)
    prev = bytes(line)
    for y in range(height):
        start = y * line
        cur = bytes(data[start : start + line])
        if y % block_height != 0:
            cur = bytes((c + p) & 0xFF for c, p in zip(cur, prev))
        prev = cur
        if pixel_bytes == 4:
            pix[start : start + line] = cur
        elif pixel_bytes == 3:
            row = y * width * 4
            for x in range(width):
                pix[row + x * 4 : row + x * 4 + 4] = cur[x * 3 : x * 3 + 3] + b"\xff"
    return Image.frombytes("RGBA", (width, height), bytes(pix))