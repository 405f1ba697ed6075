# filename: huffman_service.py

import io
import itertools
import logging
import os

from bitio import CHUNK_SIZE, BitReader, BitWriter
from huffman_core import HuffmanLogic
from huffman_errors import HuffmanError
from huffman_header import read_header, write_header, write_text_header

log = logging.getLogger(__name__)


def _iter_bytes(stream):
    return itertools.chain.from_iterable(iter(lambda: stream.read(CHUNK_SIZE), b""))


class HuffmanService:
    """Compressed container: tree header followed directly by the coded data.

    Header and payload share one bit stream, zero-padded to a whole byte at
    the end.
    """

    def __init__(self):
        self.logic = HuffmanLogic()

    def compress(self, data):
        out = io.BytesIO()
        self._compress(self.logic.count_frequencies(data), data, out)
        return out.getvalue()

    def decompress(self, data):
        out = io.BytesIO()
        self._decompress(io.BytesIO(data), out)
        return out.getvalue()

    def compress_file(self, input_file_path, output_file_path):
        with open(input_file_path, "rb") as input_file, open(output_file_path, "wb") as output_file:
            frequencies = self.logic.count_frequencies(_iter_bytes(input_file))
            # Seek to the beginning to read again and encode
            input_file.seek(0)
            self._compress(frequencies, _iter_bytes(input_file), output_file)

    def decompress_file(self, input_file_path, output_file_path):
        with open(input_file_path, "rb") as input_file:
            try:
                with open(output_file_path, "wb") as output_file:
                    self._decompress(input_file, output_file)
            except HuffmanError:
                # A stream that failed to decode leaves no output behind
                os.remove(output_file_path)
                raise

    def describe(self, data):
        """Return the text form of the tree ``data`` would be compressed with."""
        tree = self.logic.build_tree(self.logic.count_frequencies(data))
        out = io.StringIO()
        write_text_header(tree, out)
        return out.getvalue()

    def _compress(self, frequencies, data, output):
        tree = self.logic.build_tree(frequencies)
        codes = self.logic.generate_codes(tree)
        with BitWriter(output) as writer:
            write_header(tree, writer)
            self.logic.encode(data, codes, writer)
            log.debug("compressed stream is %d bits before padding", writer.bits_written)
        return tree

    def _decompress(self, input, output):
        with BitReader(input) as reader:
            tree = read_header(reader)
            return self.logic.decode(reader, tree, output)
