import io

import pytest
from PIL import Image

from lucatools.czimage.blocks import compress
from lucatools.czimage.cz1 import Cz1Image
from lucatools.czimage.header import CzFormatError, CzHeader, parse_header

GRAY = b"".join(bytes((i, i, i, i)) for i in range(256))


def _cz1(width, height, pixel_data, colorbits=8, palette=GRAY):
    header = CzHeader(b"CZ1\x00", 15, width, height, colorbits, 0)
    raw, info = compress(pixel_data, 0)
    return header.pack() + palette + info.pack() + raw


def _load(data):
    return Cz1Image(parse_header(data), data)


def _png(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def test_load_reads_palette_and_blocks():
    cz = _load(_cz1(2, 2, bytes([0, 64, 128, 255])))
    assert len(cz.color_panel) == 256
    assert cz.output_info.file_count == 1
    assert cz.output_info.total_raw_size == 4


def test_palette_is_bgra():
    palette = bytes((10, 20, 30, 40)) + bytes(255 * 4)
    img = _load(_cz1(1, 1, bytes([0]), palette=palette)).get_image()
    assert img.getpixel((0, 0)) == (30, 20, 10, 40)


def test_8bit_decode():
    indices = bytes([0, 64, 128, 255])
    img = _load(_cz1(2, 2, indices)).get_image()
    assert [img.getpixel((x, y))[3] for y in range(2) for x in range(2)] == list(indices)


def test_4bit_decode_low_nibble_first():
    palette = b"".join(bytes((i, i, i, i)) for i in range(16))
    img = _load(_cz1(2, 1, bytes([0x21]), colorbits=4, palette=palette)).get_image()
    assert img.getpixel((0, 0)) == (1, 1, 1, 1)
    assert img.getpixel((1, 0)) == (2, 2, 2, 2)


def test_24bit_decode_is_opaque():
    img = _load(_cz1(1, 1, bytes([5, 6, 7]), colorbits=24, palette=b"")).get_image()
    assert img.getpixel((0, 0)) == (5, 6, 7, 255)


def test_32bit_decode():
    pix = bytes([1, 2, 3, 4, 5, 6, 7, 8])
    img = _load(_cz1(2, 1, pix, colorbits=32, palette=b"")).get_image()
    assert img.tobytes() == pix


def test_short_data_raises():
    with pytest.raises(CzFormatError):
        _load(_cz1(4, 4, bytes([1, 2]))).get_image()


def test_import_write_round_trip():
    cz = _load(_cz1(3, 2, bytes(6)))
    alphas = [0, 50, 100, 150, 200, 250]
    src = Image.new("RGBA", (3, 2))
    src.putdata([(9, 9, 9, a) for a in alphas])
    cz.import_png(_png(src), False)
    out = io.BytesIO()
    cz.write(out)
    img = _load(out.getvalue()).get_image()
    assert list(img.getchannel("A").getdata()) == alphas


def test_import_fill_size():
    cz = _load(_cz1(3, 2, bytes(6)))
    src = Image.new("RGBA", (2, 1))
    src.putdata([(0, 0, 0, 30), (0, 0, 0, 60)])
    cz.import_png(_png(src), True)
    out = io.BytesIO()
    cz.write(out)
    img = _load(out.getvalue()).get_image()
    assert list(img.getchannel("A").getdata()) == [30, 60, 0, 0, 0, 0]


def test_import_size_mismatch_raises():
    cz = _load(_cz1(3, 2, bytes(6)))
    with pytest.raises(CzFormatError):
        cz.import_png(_png(Image.new("RGBA", (2, 1))), False)