# filename: bitio.py
"""Bit-granularity reading and writing over octet streams.

Bits are packed most significant bit first: the first bit written lands in
the high bit of the first output byte. The last partial byte is padded with
zero bits when the writer is closed.
"""

from bitarray import bitarray

from huffman_errors import InvalidInput, TruncatedStream

CHUNK_SIZE = 4096  # bytes moved per read/write on the underlying stream


class BitWriter:
    def __init__(self, out):
        self.out = out
        self.bits = bitarray(endian="big")
        self.bits_written = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()

    def write_bit(self, b):
        if b not in (0, 1):
            raise InvalidInput(f"Got unexpected bit: {b!r}")
        self.bits.append(b)
        self.bits_written += 1
        if len(self.bits) >= CHUNK_SIZE * 8:
            self._drain()

    def write_bits(self, bits):
        """Write a sequence of bits in order.

        A ``bitarray`` is appended in one step; any other iterable goes
        through ``write_bit`` so every element is checked.
        """
        if not isinstance(bits, bitarray):
            for b in bits:
                self.write_bit(b)
            return
        self.bits.extend(bits)
        self.bits_written += len(bits)
        if len(self.bits) >= CHUNK_SIZE * 8:
            self._drain()

    def _drain(self):
        # Only whole bytes leave the buffer, the tail waits for more bits
        whole = len(self.bits) - len(self.bits) % 8
        self.out.write(self.bits[:whole].tobytes())
        del self.bits[:whole]

    def close(self):
        # If we have unwritten bits, pad with zeros, then write
        if len(self.bits):
            self.bits.fill()
            self.out.write(self.bits.tobytes())
            self.bits = bitarray(endian="big")


class BitReader:
    def __init__(self, input):
        self.input = input
        self.bits = bitarray(endian="big")
        self.pos = 0
        self.bits_read = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()

    def read_bit(self) -> int:
        """Return the next bit, raising TruncatedStream once the input is used up."""
        if self.pos >= len(self.bits):
            self._fill()
        bit = self.bits[self.pos]
        self.pos += 1
        self.bits_read += 1
        return bit

    def _fill(self):
        chunk = self.input.read(CHUNK_SIZE)
        if not chunk:
            raise TruncatedStream(f"bit stream exhausted after {self.bits_read} bits")
        self.bits = bitarray(endian="big")
        self.bits.frombytes(chunk)
        self.pos = 0

    def close(self):
        self.bits = bitarray(endian="big")
        self.pos = 0
