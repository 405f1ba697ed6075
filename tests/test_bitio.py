import io

import pytest
from bitarray import bitarray

from bitio import CHUNK_SIZE, BitReader, BitWriter
from huffman_errors import InvalidInput, TruncatedStream


def test_writer_packs_msb_first():
    out = io.BytesIO()
    with BitWriter(out) as writer:
        for b in (1, 0, 1):
            writer.write_bit(b)
    assert out.getvalue() == b"\xa0"


def test_writer_counts_bits():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bits(bitarray("0110"))
    writer.write_bits([1, 1])
    assert writer.bits_written == 6
    writer.close()
    assert out.getvalue() == bytes([0b01101100])


def test_writer_close_twice():
    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_bit(1)
    writer.close()
    writer.close()
    assert out.getvalue() == b"\x80"


def test_writer_nothing_written():
    out = io.BytesIO()
    with BitWriter(out):
        pass
    assert out.getvalue() == b""


@pytest.mark.parametrize("bad", [2, -1, "1", None])
def test_writer_rejects_non_bits(bad):
    with pytest.raises(InvalidInput):
        BitWriter(io.BytesIO()).write_bit(bad)


def test_writer_rejects_non_bits_in_sequence():
    with pytest.raises(InvalidInput):
        BitWriter(io.BytesIO()).write_bits([0, 1, 3])


def test_writer_large_output():
    payload = bytes(i % 251 for i in range(CHUNK_SIZE * 3 + 17))
    bits = bitarray(endian="big")
    bits.frombytes(payload)
    out = io.BytesIO()
    with BitWriter(out) as writer:
        writer.write_bit(1)
        writer.write_bits(bits)
    expected = bitarray("1", endian="big") + bits
    expected.fill()
    assert out.getvalue() == expected.tobytes()


def test_reader_reads_msb_first():
    reader = BitReader(io.BytesIO(b"\xa0"))
    assert [reader.read_bit() for _ in range(8)] == [1, 0, 1, 0, 0, 0, 0, 0]
    assert reader.bits_read == 8


def test_reader_exhausted():
    reader = BitReader(io.BytesIO(b"\x01"))
    for _ in range(8):
        reader.read_bit()
    with pytest.raises(TruncatedStream):
        reader.read_bit()


def test_reader_empty_source():
    with pytest.raises(TruncatedStream):
        BitReader(io.BytesIO(b"")).read_bit()


def test_reader_crosses_chunks():
    payload = bytes(i % 256 for i in range(CHUNK_SIZE + 5))
    with BitReader(io.BytesIO(payload)) as reader:
        bits = bitarray([reader.read_bit() for _ in range(len(payload) * 8)], endian="big")
    assert bits.tobytes() == payload


def test_writer_reader_agree():
    out = io.BytesIO()
    pattern = [1, 1, 0, 1, 0, 0, 0, 1, 1, 0, 1]
    with BitWriter(out) as writer:
        writer.write_bits(pattern)
    reader = BitReader(io.BytesIO(out.getvalue()))
    assert [reader.read_bit() for _ in pattern] == pattern
