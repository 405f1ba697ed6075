# filename: huffman_errors.py


class HuffmanError(Exception):
    """Base class for every failure raised by the Huffman engine."""


class InvalidInput(HuffmanError, ValueError):
    """Malformed frequencies, header data or bit values."""


class UnknownSymbol(HuffmanError, LookupError):
    """A byte has no code in the code table it is being encoded with."""

    def __init__(self, symbol):
        super().__init__(f"no Huffman code for symbol {symbol}")
        self.symbol = symbol


class TruncatedStream(HuffmanError, EOFError):
    """The bit source ran dry before the end-of-stream code was read."""
