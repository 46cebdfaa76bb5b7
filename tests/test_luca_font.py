import io

import pytest
from PIL import Image, ImageFont

from lucatools.czimage.blocks import compress
from lucatools.czimage.header import CzHeader
from lucatools.font.info import DrawSize, FontError, create_font_info
from lucatools.font.luca_font import (
    LucaFont,
    create_luca_font,
    load_luca_font,
    load_luca_font_file,
)

WIDTH = 404
HEIGHT = 4


def _cz1_bytes():
    header = CzHeader(b"CZ1\x00", 15, WIDTH, HEIGHT, 8, 0)
    palette = b"".join(bytes((0, 0, 0, i)) for i in range(256))
    indices = bytes((x + y) % 200 for y in range(HEIGHT) for x in range(WIDTH))
    raw, info = compress(indices, 0)
    return header.pack() + palette + info.pack() + raw


def _info_bytes():
    info = create_font_info(4, 4)
    info.draw_size = [DrawSize(0, 4, 0) for _ in range(3)]
    info.index_unicode = [32, 0, 65]
    info.unicode_index[65] = 2
    info.unicode_size[65].w = 4
    return info.pack()


@pytest.fixture
def font():
    return load_luca_font(_info_bytes(), _cz1_bytes())


@pytest.fixture
def face():
    return ImageFont.load_default(size=16)


def test_load_sets_size_and_image(font):
    assert font.size == 4
    assert font.image.size == (WIDTH, HEIGHT)
    assert font.info.char_num == 3


def test_load_from_files(tmp_path):
    info_path = tmp_path / "info4"
    image_path = tmp_path / "font4"
    info_path.write_bytes(_info_bytes())
    image_path.write_bytes(_cz1_bytes())
    font = load_luca_font_file(info_path, image_path)
    assert font.image.getpixel((10, 1)) == (0, 0, 0, 11)


def test_get_char_image_crops_cell(font):
    img, draw = font.get_char_image("A")
    assert img.size == (4, 4)
    assert img.getpixel((0, 0)) == (0, 0, 0, 8)
    assert img.getpixel((3, 3)) == (0, 0, 0, 14)
    assert draw == DrawSize(0, 4, 0)


def test_get_char_image_missing_char(font):
    with pytest.raises(FontError):
        font.get_char_image("Z")


def test_get_string_image_list(font):
    images, draws = font.get_string_image_list("A A")
    assert len(images) == 3
    assert len(draws) == 3
    assert images[1].getpixel((1, 1)) == (0, 0, 0, 2)


def test_get_string_image_places_cells(font):
    img = font.get_string_image("A ")
    assert img.size == (8, 8)
    assert img.getpixel((0, 0)) == (0, 0, 0, 8)
    assert img.getpixel((4, 0)) == (0, 0, 0, 0)
    assert img.getpixel((5, 1)) == (0, 0, 0, 2)
    assert img.getpixel((0, 6)) == (0, 0, 0, 0)


def test_export_writes_png_and_chars(font, tmp_path):
    out = io.BytesIO()
    chars = tmp_path / "chars.txt"
    font.export(out, chars)
    out.seek(0)
    png = Image.open(out)
    assert png.size == (WIDTH, HEIGHT)
    assert chars.read_text(encoding="utf-8") == " □A"


def test_write_round_trip(font):
    cz = io.BytesIO()
    info = io.BytesIO()
    font.write(cz, info)
    again = load_luca_font(info.getvalue(), cz.getvalue())
    assert again.info.index_unicode == [32, 0, 65]
    assert again.image.tobytes() == font.image.tobytes()


def test_import_without_chars_and_redraw_is_noop(font, face):
    before = font.image.tobytes()
    font.import_font(face, 0, False, "")
    assert font.image.tobytes() == before
    assert font.info.char_num == 3


def test_write_created_font_fails():
    font = LucaFont(size=4, info=create_font_info(4, 5), image=Image.new("RGBA", (504, 5)))
    with pytest.raises(FontError):
        font.write(io.BytesIO(), None)


def test_replace_chars_needs_info(face):
    font = LucaFont(size=4, info=None)
    with pytest.raises(FontError):
        font.replace_chars(face, "A", 0, False)


def test_create_luca_font(face):
    font = create_luca_font(16, face, " AB")
    assert font.info.char_num == 3
    assert font.info.block_size == 17
    assert font.image.size == (17 * 100 + 4, 17)
    assert font.info.get("B")[0] == 2
    cell = font.image.crop((17, 0, 34, 17))
    assert cell.getchannel("A").getextrema()[1] > 0


def test_import_appends_chars(font, face, tmp_path):
    chars = tmp_path / "add.txt"
    chars.write_text("B", encoding="utf-8")
    font.import_font(face, -1, False, chars)
    assert font.info.char_num == 4
    assert font.info.get("B")[0] == 3
    assert font.image.size == (WIDTH, HEIGHT)
    assert font.image.getpixel((8, 0)) == (0, 0, 0, 8)
    assert font.info.get("A")[0] == 2