"""LZW block codecs used by CZ images."""

from __future__ import annotations

from lucatools.czimage.bitio import BitIO

__all__ = ["LzwError", "compress_lzw", "decompress_lzw", "compress_lzw2", "decompress_lzw2"]


class LzwError(ValueError):
    """Raised when compressed data holds an invalid code."""


def _initial_encoder() -> dict[bytes, int]:
    return {bytes([i]): i for i in range(256)}


def compress_lzw(data: bytes, size: int, last: bytes) -> tuple[int, list[int], bytes]:
    """Compress one block into at most ``size`` codes.

    Returns the number of input bytes used, the codes and the pending element
    to hand to the next block.
    """
    dictionary = _initial_encoder()
    next_code = len(dictionary) + 1
    element = bytes(last)
    compressed: list[int] = []
    count = 0
    for c in bytes(data):
        entry = element + bytes([c])
        if entry in dictionary:
            element = entry
        else:
            compressed.append(dictionary[element])
            dictionary[entry] = next_code
            element = bytes([c])
            next_code += 1
        count += 1
        if size > 0 and len(compressed) == size:
            break
    if not compressed:
        compressed.extend(dictionary[bytes([c])] for c in element)
        return count, compressed, b""
    if len(compressed) < size:
        if element:
            compressed.append(dictionary[element])
        return count, compressed, b""
    return count, compressed, element


def decompress_lzw(compressed: list[int], size: int) -> bytes:
    """Decompress one block of codes."""
    if not compressed:
        return b""
    dictionary = {i: bytes([i]) for i in range(256)}
    next_code = len(dictionary)
    if compressed[0] not in dictionary:
        raise LzwError(f"Bad compressed element: {compressed[0]}")
    w = dictionary[compressed[0]]
    out = bytearray()
    for element in compressed:
        if element in dictionary:
            entry = dictionary[element]
        elif element == next_code:
            entry = w + w[:1]
        else:
            raise LzwError(f"Bad compressed element: {element}")
        out += entry
        dictionary[next_code] = w + entry[:1]
        next_code += 1
        w = entry
    return bytes(out)


def decompress_lzw2(data: bytes, size: int) -> bytes:
    """Decompress one block of the variable-width CZ2 stream."""
    dictionary = {i: bytes([i]) for i in range(256)}
    next_code = len(dictionary)
    data_size = len(data)
    bits = BitIO(bytes(data) + b"\x00\x00\x00")
    w = dictionary[0]
    out = bytearray()
    while True:
        flag = bits.read_bit(1)
        element = bits.read_bit(15 if flag == 0 else 18)
        if bits.byte_offset > data_size:
            break
        if element in dictionary:
            entry = dictionary[element]
        elif element == next_code:
            entry = w + w[:1]
        else:
            raise LzwError(f"Bad compressed element: {element}")
        out += entry
        dictionary[next_code] = w + entry[:1]
        next_code += 1
        w = entry
    return bytes(out)


def compress_lzw2(data: bytes, size: int, last: bytes) -> tuple[int, bytes, bytes]:
    """Compress one CZ2 block of about ``size`` bytes."""
    dictionary = _initial_encoder()
    next_code = len(dictionary) + 1
    element = bytes(last)
    bits = BitIO(bytes(size + 2))

    def emit(code: int) -> None:
        if code > 0x7FFF:
            bits.write_bit(1, 1)
            bits.write_bit(code, 18)
        else:
            bits.write_bit(0, 1)
            bits.write_bit(code, 15)

    count = 0
    for c in bytes(data):
        entry = element + bytes([c])
        if entry in dictionary:
            element = entry
        else:
            emit(dictionary[element])
            dictionary[entry] = next_code
            element = bytes([c])
            next_code += 1
        count += 1
        if size > 0 and bits.byte_size >= size:
            break
    if bits.byte_size == 0:
        for c in element:
            emit(dictionary[bytes([c])])
        return count, bits.to_bytes(), b""
    if bits.byte_size < size:
        if element:
            emit(dictionary[element])
        return count, bits.to_bytes(), b""
    return count, bits.to_bytes(), element