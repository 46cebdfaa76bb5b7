"""Block-wise compression of CZ pixel data and image helpers."""

from __future__ import annotations

import struct

from PIL import Image

from lucatools.czimage.header import CzBlockInfo, CzFormatError, CzOutputInfo
from lucatools.czimage.lzw import compress_lzw, compress_lzw2, decompress_lzw, decompress_lzw2

__all__ = ["decompress", "decompress2", "compress", "compress2", "fill_image", "to_rgba"]

DEFAULT_BLOCK_SIZE = 0xFEFD
DEFAULT_BLOCK_SIZE2 = 0x87BDF


def _output_info(blocks: list[CzBlockInfo]) -> CzOutputInfo:
    return CzOutputInfo(
        block_info=blocks,
        offset=4 + len(blocks) * 8,
        total_raw_size=sum(b.raw_size for b in blocks),
        total_compressed_size=sum(b.compressed_size for b in blocks),
    )


def decompress(data: bytes, output_info: CzOutputInfo) -> bytes:
    """Decompress blocks of 16-bit little-endian LZW codes."""
    out = bytearray()
    offset = 0
    for block in output_info.block_info:
        end = offset + block.compressed_size * 2
        if end > len(data):
            raise CzFormatError("compressed data is truncated")
        codes = list(struct.unpack_from(f"<{block.compressed_size}H", data, offset))
        out += decompress_lzw(codes, block.raw_size)
        offset = end
    return bytes(out)


def decompress2(data: bytes, output_info: CzOutputInfo) -> bytes:
    """Decompress blocks of the variable-width CZ2 bit stream."""
    out = bytearray()
    offset = 0
    for block in output_info.block_info:
        end = offset + block.compressed_size
        if end > len(data):
            raise CzFormatError("compressed data is truncated")
        out += decompress_lzw2(bytes(data[offset:end]), block.raw_size)
        offset = end
    return bytes(out)


def compress(data: bytes, size: int) -> tuple[bytes, CzOutputInfo]:
    """Compress ``data`` into blocks of at most ``size`` codes (0 for the default)."""
    size = size or DEFAULT_BLOCK_SIZE
    data = bytes(data)
    out = bytearray()
    blocks: list[CzBlockInfo] = []
    offset = 0
    last = b""
    while True:
        count, codes, last = compress_lzw(data[offset:], size, last)
        if count == 0:
            break
        offset += count
        out += struct.pack(f"<{len(codes)}H", *codes)
        blocks.append(CzBlockInfo(compressed_size=len(codes), raw_size=count))
    return bytes(out), _output_info(blocks)


def compress2(data: bytes, size: int) -> tuple[bytes, CzOutputInfo]:
    """Compress ``data`` into CZ2 blocks of about ``size`` bytes (0 for the default)."""
    size = size or DEFAULT_BLOCK_SIZE2
    data = bytes(data)
    out = bytearray()
    blocks: list[CzBlockInfo] = []
    offset = 0
    last = b""
    while True:
        count, part, last = compress_lzw2(data[offset:], size, last)
        if count == 0:
            break
        offset += count
        out += part
        blocks.append(CzBlockInfo(compressed_size=len(part), raw_size=count))
    return bytes(out), _output_info(blocks)


def fill_image(src: Image.Image, width: int, height: int) -> Image.Image:
    """Place ``src`` at the top-left of a transparent ``width`` x ``height`` canvas."""
    dst = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    dst.paste(to_rgba(src), (0, 0))
    return dst


def to_rgba(image: Image.Image) -> Image.Image:
    """Return ``image`` in non-premultiplied RGBA mode."""
    return image if image.mode == "RGBA" else image.convert("RGBA")