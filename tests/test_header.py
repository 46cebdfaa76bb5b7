import io

import pytest
from PIL import Image

from lucatools.czimage.header import (
    CzBlockInfo,
    CzFormatError,
    CzHeader,
    CzImage,
    CzOutputInfo,
    parse_header,
    parse_output_info,
)


def test_header_round_trip():
    h = CzHeader(b"CZ3\x00", 28, 640, 480, 32, 3)
    packed = h.pack()
    assert len(packed) == 15
    assert packed[:4] == b"CZ3\x00"
    assert parse_header(packed + b"extra") == h


def test_header_too_short():
    with pytest.raises(CzFormatError):
        parse_header(b"CZ0")


def test_output_info_round_trip_and_totals():
    info = CzOutputInfo(block_info=[CzBlockInfo(10, 100), CzBlockInfo(5, 40)])
    parsed = parse_output_info(info.pack())
    assert parsed.file_count == 2
    assert parsed.block_info == info.block_info
    assert parsed.offset == 4 + 2 * 8
    assert parsed.total_raw_size == 140
    assert parsed.total_compressed_size == 15


def test_output_info_truncated():
    with pytest.raises(CzFormatError):
        parse_output_info(b"\x02\x00\x00\x00\x01")


class _Solid(CzImage):
    def __init__(self):
        self.header = CzHeader(b"CZ0\x00", 15, 2, 2, 32, 0)
        self.png_image = None

    def get_image(self):
        return Image.new("RGBA", (2, 2), (1, 2, 3, 4))

    def import_png(self, stream, fill_size):
        self.png_image = Image.open(stream)

    def write(self, stream):
        stream.write(self.header.pack())


def test_export_writes_png():
    buf = io.BytesIO()
    CzImage.export(_Solid(), buf)
    buf.seek(0)
    img = Image.open(buf)
    assert img.format == "PNG"
    assert img.convert("RGBA").getpixel((1, 1)) == (1, 2, 3, 4)