"""Bitmap fonts: a CZ glyph sheet paired with a font info table."""

from __future__ import annotations

import io
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from PIL import Image, ImageDraw, ImageFont

from lucatools.czimage.blocks import to_rgba
from lucatools.czimage.header import CzImage
from lucatools.czimage.loader import load_cz_image
from lucatools.font.info import (
    DrawSize,
    FontError,
    FontInfo,
    create_font_info,
    load_font_info,
)

__all__ = ["LucaFont", "load_luca_font", "load_luca_font_file", "create_luca_font"]

_CHARS_PER_ROW = 100


def _rewind(font_file: Any) -> Any:
    """Seek a font stream back to its start so it can be read again."""
    seek = getattr(font_file, "seek", None)
    if callable(seek) and hasattr(font_file, "read"):
        seek(0)
    return font_file


def _render_glyph(face: ImageFont.FreeTypeFont, char: int) -> Image.Image | None:
    """Render one character as black ink whose alpha is the glyph coverage."""
    text = chr(char)
    left, top, right, bottom = face.getbbox(text)
    width, height = right - left, bottom - top
    if width <= 0 or height <= 0:
        return None
    mask = Image.new("L", (width, height), 0)
    ImageDraw.Draw(mask).text((-left, -top), text, font=face, fill=255)
    glyph = Image.new("RGBA", (width, height), (0, 0, 0, 255))
    glyph.putalpha(mask)
    return glyph


@dataclass
class LucaFont:
    """A font: glyph sheet image, its CZ container and the info table."""

    size: int
    info: FontInfo | None
    cz_image: CzImage | None = None
    image: Image.Image | None = None

    def _cell_box(self, index: int) -> tuple[int, int, int, int]:
        size = self.info.block_size
        y, x = divmod(index, _CHARS_PER_ROW)
        return x * size, y * size, (x + 1) * size, (y + 1) * size

    def get_char_image(self, char: str) -> tuple[Image.Image, DrawSize]:
        """Return the cell image of ``char`` and how to place it."""
        index, draw, _ = self.info.get(char)
        return self.image.crop(self._cell_box(index)), draw

    def get_string_image_list(self, text: str) -> tuple[list[Image.Image], list[DrawSize]]:
        """Return the cell images and placements of every character of ``text``."""
        pairs = [self.get_char_image(char) for char in text]
        return [img for img, _ in pairs], [draw for _, draw in pairs]

    def get_string_image(self, text: str) -> Image.Image:
        """Render ``text`` on one line using the glyph sheet."""
        cell = self.info.block_size
        images, draws = self.get_string_image_list(text)
        picture = Image.new("RGBA", (len(images) * cell, cell * 2), (0, 0, 0, 0))
        pen = 0
        for img, draw in zip(images, draws):
            picture.paste(img, (pen + draw.x, draw.y))
            pen += draw.w
        return picture

    def replace_chars(self, font_file: Any, all_chars: str, start_index: int, redraw: bool) -> None:
        """Draw ``all_chars`` with ``font_file`` into the cells from ``start_index`` on.

        With ``redraw`` set, every cell is drawn again with the new font.
        """
        if self.info is None:
            raise FontError("a font must be loaded or created first")
        if not all_chars and start_index == 0 and not redraw:
            return
        self.info.set_chars(_rewind(font_file), all_chars, start_index, redraw)
        face = self.info.font_face
        size = self.info.block_size
        image_w = size * _CHARS_PER_ROW + 4
        image_h = size * math.ceil(self.info.char_num / _CHARS_PER_ROW)
        old_h = size * math.ceil(start_index / _CHARS_PER_ROW)

        picture = Image.new("RGBA", (image_w, image_h), (0, 0, 0, 0))
        if not redraw and self.image is not None and old_h > 0:
            picture.paste(to_rgba(self.image).crop((0, 0, image_w, old_h)), (0, 0))

        blank = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        if redraw:
            start_index = 0
        first_row = start_index // _CHARS_PER_ROW
        for index in range(start_index, self.info.char_num):
            y, x = divmod(index, _CHARS_PER_ROW)
            origin = (x * size, y * size)
            if y == first_row:
                picture.paste(blank, origin)
            glyph = _render_glyph(face, self.info.index_unicode[index])
            if glyph is not None:
                picture.paste(glyph, origin)
        self.image = picture

    def export(self, stream: BinaryIO, all_char_file: str | os.PathLike[str] | None) -> None:
        """Write the glyph sheet as PNG and, if a path is given, the character list."""
        self.image.save(stream, format="PNG")
        if all_char_file:
            with Path(all_char_file).open("wb") as out:
                self.info.export(out)

    def import_font(
        self,
        font_file: Any,
        start_index: int,
        redraw: bool,
        all_char_file: str | os.PathLike[str] | None,
    ) -> None:
        """Add or replace characters listed in ``all_char_file``.

        A ``start_index`` of -1 appends after the last cell. Without a
        character file, ``redraw`` redraws the existing characters only.
        """
        if not all_char_file:
            if redraw:
                self.replace_chars(font_file, "", 0, True)
            return
        if start_index == -1:
            start_index = self.info.char_num
        text = Path(all_char_file).read_text(encoding="utf-8")
        self.replace_chars(font_file, text, start_index, redraw)

    def write(self, stream: BinaryIO, info_stream: BinaryIO | None) -> None:
        """Write the glyph sheet as CZ and, if given, the info table."""
        if self.cz_image is None:
            raise FontError("writing a newly created font is not supported")
        png = io.BytesIO()
        self.image.save(png, format="PNG")
        png.seek(0)
        self.cz_image.import_png(png, True)
        cz = io.BytesIO()
        self.cz_image.write(cz)
        stream.write(cz.getvalue())
        if info_stream is not None:
            self.info.write(info_stream)


def load_luca_font(info_data: bytes, image_data: bytes) -> LucaFont:
    """Load a font from its info table and CZ glyph sheet."""
    info = load_font_info(info_data)
    cz = load_cz_image(image_data)
    return LucaFont(size=info.font_size, info=info, cz_image=cz, image=to_rgba(cz.get_image()))


def load_luca_font_file(
    info_path: str | os.PathLike[str], image_path: str | os.PathLike[str]
) -> LucaFont:
    """Load a font from an info file and a CZ glyph sheet file."""
    return load_luca_font(Path(info_path).read_bytes(), Path(image_path).read_bytes())


def create_luca_font(font_size: int, font_file: Any, all_chars: str) -> LucaFont:
    """Create a new font holding ``all_chars`` drawn with ``font_file``."""
    font = LucaFont(size=font_size, info=create_font_info(font_size, font_size + 1))
    font.replace_chars(font_file, all_chars, 0, True)
    return font