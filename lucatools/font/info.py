"""Font info tables: character placement and glyph metrics."""

from __future__ import annotations

import io
import math
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO

from PIL import ImageFont

__all__ = [
    "DrawSize",
    "CharSize",
    "FontInfo",
    "FontError",
    "load_font_info",
    "load_font_info_file",
    "create_font_info",
]

_UNICODE_COUNT = 0x10000
_EXTENDED_MARKER = 100
_EMPTY_CHAR = "□"
_SPACE = 32


class FontError(ValueError):
    """Raised for malformed font info or unusable font data."""


@dataclass
class DrawSize:
    """Offset and advance used when drawing one glyph cell."""

    x: int = 0
    w: int = 0
    y: int = 0


@dataclass
class CharSize:
    x: int = 0
    w: int = 0


def _load_face(font_file: Any, size: int) -> ImageFont.FreeTypeFont:
    if isinstance(font_file, ImageFont.FreeTypeFont):
        return font_file.font_variant(size=size)
    if isinstance(font_file, (bytes, bytearray, memoryview)):
        source: Any = io.BytesIO(bytes(font_file))
    elif isinstance(font_file, (str, os.PathLike)):
        source = os.fspath(font_file)
    else:
        source = io.BytesIO(font_file.read())
    try:
        return ImageFont.truetype(source, size=size)
    except (OSError, ValueError) as exc:
        raise FontError(f"cannot load font: {exc}") from exc


def _code_point(char: str | int) -> int:
    return ord(char) if isinstance(char, str) else int(char)


@dataclass
class FontInfo:
    """Maps characters to cells of a font image, with their metrics."""

    font_size: int
    block_size: int
    draw_size: list[DrawSize] = field(default_factory=list, repr=False)
    unicode_index: list[int] = field(
        default_factory=lambda: [0] * _UNICODE_COUNT, repr=False
    )
    unicode_size: list[CharSize] = field(
        default_factory=lambda: [CharSize() for _ in range(_UNICODE_COUNT)], repr=False
    )
    index_unicode: list[int] = field(default_factory=list, repr=False)
    font_face: ImageFont.FreeTypeFont | None = field(default=None, repr=False, compare=False)

    @property
    def char_num(self) -> int:
        return len(self.draw_size)

    def get(self, char: str | int) -> tuple[int, DrawSize, CharSize]:
        """Return the cell index, draw size and character size of ``char``."""
        cp = _code_point(char)
        if not 0 <= cp < _UNICODE_COUNT:
            raise FontError(f"character not in font: {chr(cp)!r}")
        index = self.unicode_index[cp]
        if cp != _SPACE and index == 0:
            raise FontError(f"character not in font: {chr(cp)!r}")
        return index, self.draw_size[index], self.unicode_size[cp]

    def set_chars(self, font_file: Any, all_chars: str, start_index: int, redraw: bool) -> None:
        """Place ``all_chars`` from ``start_index`` on, measured with ``font_file``.

        With no characters, a start of 0 and ``redraw`` set, the existing
        characters are measured again with the new font.
        """
        if not all_chars and start_index == 0 and not redraw:
            return
        self.font_face = _load_face(font_file, self.font_size)
        chars = [ord(c) for c in all_chars]
        if any(cp >= _UNICODE_COUNT for cp in chars):
            raise FontError("characters outside the basic multilingual plane are not supported")

        if not chars and start_index == 0:
            if self.char_num == 0:
                raise FontError("a font must be loaded first")
            chars = [cp or ord(_EMPTY_CHAR) for cp in self.index_unicode]
        else:
            while start_index > self.char_num or start_index + len(chars) > self.char_num:
                self.draw_size.append(DrawSize())
                self.index_unicode.append(0)

        end = start_index + len(chars)
        for index in range(self.char_num):
            if index < start_index or index >= end:
                if not redraw:
                    continue
                char = self.index_unicode[index]
            else:
                char = chars[index - start_index]
            self.unicode_index[self.index_unicode[index]] = 0
            self.unicode_index[char] = index
            self.index_unicode[index] = char
            self._measure(index, char)

    def _measure(self, index: int, char: int) -> None:
        face = self.font_face
        assert face is not None
        left, top, _right, _bottom = face.getbbox(chr(char), anchor="ls")
        width = math.ceil(face.getlength(chr(char))) & 0xFF
        if char == _SPACE or width == 0:
            width = self.font_size & 0xFF
        cell = self.draw_size[index]
        cell.x = math.floor(left) & 0xFF
        cell.w = width
        cell.y = math.floor(top) & 0xFF
        self.unicode_size[char].w = width

    def import_chars(self, font_file: Any, start_index: int, redraw: bool, all_chars: str) -> None:
        """Same as :meth:`set_chars` with the arguments in import order."""
        self.set_chars(font_file, all_chars, start_index, redraw)

    def export(self, stream: BinaryIO) -> None:
        """Write every cell's character as UTF-8, ``□`` for empty cells."""
        text = "".join(chr(cp) if cp else _EMPTY_CHAR for cp in self.index_unicode)
        stream.write(text.encode("utf-8"))

    def pack(self) -> bytes:
        """Return the binary form of the table."""
        count = self.char_num
        head = struct.pack("<HHH", self.font_size, self.block_size, count)
        if count == _EXTENDED_MARKER:
            head += struct.pack("<H", count)
        cells = b"".join(bytes((d.x & 0xFF, d.w & 0xFF, d.y & 0xFF)) for d in self.draw_size)
        index = struct.pack(f"<{len(self.unicode_index)}H", *self.unicode_index)
        sizes = bytes(v for s in self.unicode_size for v in (s.x & 0xFF, s.w & 0xFF))
        return head + cells + index + sizes

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.pack())


def load_font_info(data: bytes) -> FontInfo:
    """Parse a font info table."""
    data = bytes(data)
    if len(data) < 6:
        raise FontError("font info is truncated")
    font_size, block_size, count = struct.unpack_from("<HHH", data)
    offset = 6
    if count == _EXTENDED_MARKER:
        if len(data) < 8:
            raise FontError("font info is truncated")
        (count,) = struct.unpack_from("<H", data, offset)
        offset += 2
    if len(data) < offset + 3 * count + 4 * _UNICODE_COUNT:
        raise FontError("font info is truncated")

    draw_size = [DrawSize(*data[p : p + 3]) for p in range(offset, offset + 3 * count, 3)]
    offset += 3 * count
    unicode_index = list(struct.unpack_from(f"<{_UNICODE_COUNT}H", data, offset))
    offset += 2 * _UNICODE_COUNT
    sizes = data[offset : offset + 2 * _UNICODE_COUNT]
    unicode_size = [CharSize(x, w) for x, w in zip(sizes[0::2], sizes[1::2])]

    index_unicode = [0] * count
    for cp, index in enumerate(unicode_index):
        if index or cp == _SPACE:
            if index >= count:
                raise FontError(f"character {cp} points past the last cell")
            index_unicode[index] = cp

    return FontInfo(
        font_size=font_size,
        block_size=block_size,
        draw_size=draw_size,
        unicode_index=unicode_index,
        unicode_size=unicode_size,
        index_unicode=index_unicode,
    )


def load_font_info_file(path: str | os.PathLike[str]) -> FontInfo:
    return load_font_info(Path(path).read_bytes())


def create_font_info(font_size: int, block_size: int) -> FontInfo:
    """Return an empty table for glyphs of ``font_size`` in cells of ``block_size``."""
    return FontInfo(font_size=font_size, block_size=block_size)