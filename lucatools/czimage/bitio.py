"""Little-endian, least-significant-bit-first bit stream."""

from __future__ import annotations

__all__ = ["BitIO"]


class BitIO:
    """Reads and writes bit fields over a growable byte buffer."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._data = bytearray(data)
        self._byte_offset = 0
        self._bit_offset = 0
        self._byte_size = 0

    @property
    def byte_offset(self) -> int:
        return self._byte_offset

    @property
    def byte_size(self) -> int:
        return self._byte_size

    def to_bytes(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._data[: self._byte_size])

    def _ensure(self, length: int) -> None:
        if length > len(self._data):
            self._data.extend(bytes(length - len(self._data)))

    def read_bit(self, bit_len: int) -> int:
        if bit_len > 64:
            raise ValueError("at most 64 bits are supported")
        if bit_len % 8 == 0 and self._bit_offset == 0:
            return self.read(bit_len // 8)
        result = 0
        for i in range(bit_len):
            bit = (self._data[self._byte_offset] >> self._bit_offset) & 1
            self._bit_offset += 1
            if self._bit_offset == 8:
                self._byte_offset += 1
                self._bit_offset = 0
            result |= bit << i
        return result

    def read(self, byte_len: int) -> int:
        if byte_len > 8:
            raise ValueError("at most 64 bits are supported")
        end = self._byte_offset + byte_len
        if end > len(self._data):
            raise IndexError("read past end of data")
        chunk = self._data[self._byte_offset:end]
        self._byte_offset = end
        return int.from_bytes(chunk, "little")

    def write_bit(self, value: int, bit_len: int) -> None:
        if bit_len > 64:
            raise ValueError("at most 64 bits are supported")
        if bit_len % 8 == 0 and self._bit_offset == 0:
            self.write(value, bit_len // 8)
            return
        for i in range(bit_len):
            self._ensure(self._byte_offset + 1)
            bit = (value >> i) & 1
            mask = 1 << self._bit_offset
            self._data[self._byte_offset] = (self._data[self._byte_offset] & ~mask & 0xFF) | (
                bit << self._bit_offset
            )
            self._bit_offset += 1
            if self._bit_offset == 8:
                self._byte_offset += 1
                self._bit_offset = 0
        self._byte_size = self._byte_offset + (self._bit_offset + 7) // 8

    def write(self, value: int, byte_len: int) -> None:
        if byte_len > 8:
            raise ValueError("at most 64 bits are supported")
        end = self._byte_offset + byte_len
        self._ensure(end)
        self._data[self._byte_offset:end] = (value & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")[:byte_len]
        self._byte_offset = end
        self._byte_size = self._byte_offset + (self._bit_offset + 7) // 8