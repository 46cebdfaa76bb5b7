import io

import pytest
from PIL import Image

from lucatools.czimage.blocks import compress
from lucatools.czimage.cz3 import Cz3Header, Cz3Image, parse_cz3_header
from lucatools.czimage.header import CzFormatError, CzHeader, parse_header
from lucatools.czimage.imagefix import diff_line


def _pattern(width, height, seed=0):
    pix = bytes(
        (x * 37 + y * 11 + c * 53 + seed) % 256
        for y in range(height)
        for x in range(width)
        for c in range(4)
    )
    return Image.frombytes("RGBA", (width, height), pix)


def _cz3_bytes(image, stored_colorblock=3):
    width, height = image.size
    coding_header = CzHeader(b"CZ3\x00", 28, width, height, 32, 3)
    data = diff_line(coding_header, image)
    raw, info = compress(data, 0)
    header = CzHeader(b"CZ3\x00", 28, width, height, 32, stored_colorblock)
    extra = Cz3Header(0, 1, 2, width, height, width, height)
    return header.pack() + extra.pack() + info.pack() + raw


def _load(data):
    return Cz3Image(parse_header(data), data)


def test_header_round_trip():
    extra = Cz3Header(1, 10, 20, 30, 40, 50, 60)
    packed = extra.pack()
    assert len(packed) == 13
    assert parse_cz3_header(packed) == extra


def test_truncated_header_raises():
    with pytest.raises(CzFormatError):
        parse_cz3_header(b"\x00" * 5)


def test_decode_round_trip():
    image = _pattern(5, 6)
    cz = _load(_cz3_bytes(image))
    assert cz.get_image().tobytes() == image.tobytes()
    assert cz.get_image().size == (5, 6)


def test_export_writes_png():
    image = _pattern(4, 6)
    cz = _load(_cz3_bytes(image))
    out = io.BytesIO()
    cz.export(out)
    assert out.getvalue()[:4] == b"\x89PNG"
    out.seek(0)
    assert Image.open(out).convert("RGBA").tobytes() == image.tobytes()


def test_import_and_write_round_trip():
    original = _pattern(4, 6)
    cz = _load(_cz3_bytes(original))
    replacement = _pattern(4, 6, seed=99)
    png = io.BytesIO()
    replacement.save(png, format="PNG")
    png.seek(0)
    cz.import_png(png, False)
    out = io.BytesIO()
    cz.write(out)
    reloaded = _load(out.getvalue())
    assert reloaded.header == cz.header
    assert reloaded.cz3_header == cz.cz3_header
    assert reloaded.get_image().tobytes() == replacement.tobytes()


def test_import_keeps_block_limit():
    cz = _load(_cz3_bytes(_pattern(4, 6)))
    limit = cz.output_info.block_info[0].compressed_size
    png = io.BytesIO()
    _pattern(4, 6, seed=7).save(png, format="PNG")
    png.seek(0)
    cz.import_png(png, False)
    assert all(b.compressed_size <= limit for b in cz.output_info.block_info)
    assert cz.output_info.total_raw_size == 4 * 6 * 4


def test_import_wrong_size_raises():
    cz = _load(_cz3_bytes(_pattern(4, 6)))
    png = io.BytesIO()
    _pattern(3, 3).save(png, format="PNG")
    png.seek(0)
    with pytest.raises(CzFormatError):
        cz.import_png(png, False)


def test_zero_colorblock_defaults_to_three():
    image = _pattern(3, 6)
    cz = _load(_cz3_bytes(image, stored_colorblock=0))
    assert cz.get_image().tobytes() == image.tobytes()
    assert cz.header.colorblock == 3