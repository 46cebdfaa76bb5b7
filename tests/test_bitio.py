import pytest

from lucatools.czimage.bitio import BitIO


def test_write_read_19_bits_four_times():
    val = 0xFF7F
    b = BitIO(bytes(100))
    for _ in range(4):
        b.write_bit(val, 19)
    b2 = BitIO(b.to_bytes())
    for _ in range(4):
        assert b2.read_bit(19) == val


def test_byte_size_tracks_partial_bytes():
    b = BitIO(bytes(4))
    b.write_bit(1, 3)
    assert b.byte_size == 1
    assert b.byte_offset == 0
    b.write_bit(0x1F, 5)
    assert b.byte_size == 1
    assert b.byte_offset == 1


def test_lsb_first_order():
    b = BitIO(bytes(2))
    b.write_bit(1, 1)
    b.write_bit(0, 1)
    b.write_bit(1, 1)
    assert b.to_bytes() == bytes([0b101])


def test_aligned_write_is_little_endian():
    b = BitIO(bytes(4))
    b.write(0x1234, 2)
    assert b.to_bytes() == b"\x34\x12"
    r = BitIO(b.to_bytes())
    assert r.read_bit(16) == 0x1234


def test_buffer_grows():
    b = BitIO(b"")
    b.write_bit(0x7FFF, 15)
    assert BitIO(b.to_bytes()).read_bit(15) == 0x7FFF


def test_too_many_bits():
    with pytest.raises(ValueError):
        BitIO(bytes(16)).read_bit(65)
    with pytest.raises(ValueError):
        BitIO(bytes(16)).write(0, 9)


def test_read_past_end():
    with pytest.raises(IndexError):
        BitIO(b"\x00").read(2)