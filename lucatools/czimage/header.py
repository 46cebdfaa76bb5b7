"""CZ file header, block table and the common image interface."""

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO

from PIL import Image

__all__ = [
    "CzFormatError",
    "CzHeader",
    "CzBlockInfo",
    "CzOutputInfo",
    "CzImage",
    "parse_header",
    "parse_output_info",
]

_HEADER = struct.Struct("<4sIHHHB")
_BLOCK = struct.Struct("<II")


class CzFormatError(ValueError):
    """Raised for malformed CZ data."""


@dataclass
class CzHeader:
    """The 15-byte header shared by all CZ variants."""

    magic: bytes
    header_length: int
    width: int
    height: int
    colorbits: int
    colorblock: int

    def pack(self) -> bytes:
        return _HEADER.pack(
            self.magic, self.header_length, self.width, self.height, self.colorbits, self.colorblock
        )


def parse_header(data: bytes) -> CzHeader:
    if len(data) < _HEADER.size:
        raise CzFormatError("CZ header is shorter than 15 bytes")
    return CzHeader(*_HEADER.unpack_from(data))


@dataclass
class CzBlockInfo:
    compressed_size: int
    raw_size: int


@dataclass
class CzOutputInfo:
    """Table of compressed blocks."""

    block_info: list[CzBlockInfo] = field(default_factory=list)
    offset: int = 0
    total_raw_size: int = 0
    total_compressed_size: int = 0

    @property
    def file_count(self) -> int:
        return len(self.block_info)

    def pack(self) -> bytes:
        return struct.pack("<I", self.file_count) + b"".join(
            _BLOCK.pack(b.compressed_size, b.raw_size) for b in self.block_info
        )


def parse_output_info(data: bytes) -> CzOutputInfo:
    if len(data) < 4:
        raise CzFormatError("block table is truncated")
    (count,) = struct.unpack_from("<I", data)
    if len(data) < 4 + count * _BLOCK.size:
        raise CzFormatError("block table is truncated")
    blocks = [CzBlockInfo(*_BLOCK.unpack_from(data, 4 + i * _BLOCK.size)) for i in range(count)]
    return CzOutputInfo(
        block_info=blocks,
        offset=4 + count * _BLOCK.size,
        total_raw_size=sum(b.raw_size for b in blocks),
        total_compressed_size=sum(b.compressed_size for b in blocks),
    )


class CzImage(ABC):
    """Common behaviour of the CZ image variants."""

    header: CzHeader

    @abstractmethod
    def get_image(self) -> Image.Image:
        """Return the decoded image in RGBA mode."""

    def export(self, stream: BinaryIO) -> None:
        """Write the decoded image to ``stream`` as PNG."""
        self.get_image().save(stream, format="PNG")

    @abstractmethod
    def import_png(self, stream: BinaryIO, fill_size: bool) -> None:
        """Replace the image data with a PNG read from ``stream``."""

    @abstractmethod
    def write(self, stream: BinaryIO) -> None:
        """Write the image in CZ form to ``stream``."""