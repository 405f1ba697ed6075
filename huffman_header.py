# filename: huffman_header.py
"""Serialized forms of a Huffman tree.

Binary form, written through a BitWriter in preorder::

    internal node:  0 <left subtree> <right subtree>
    leaf:           1 <symbol, 9 bits, least significant bit first>

Text form, two lines per leaf in left-to-right order::

    <decimal symbol>
    <path from the root as '0'/'1' characters>

Neither form stores weights, so reconstructed trees carry weight 0.
"""

import logging
from collections import Counter

from huffman_core import EOF, SYMBOL_BITS, HuffmanTree, Internal, Leaf
from huffman_errors import InvalidInput

log = logging.getLogger(__name__)

# A tree over 257 symbols is at most 256 levels deep
MAX_DEPTH = EOF


def write_header(tree, writer):
    start = writer.bits_written
    _write_node(tree.root, writer)
    log.debug("wrote %d-bit tree header", writer.bits_written - start)


def _write_node(node, writer):
    if isinstance(node, Internal):
        writer.write_bit(0)
        _write_node(node.left, writer)
        _write_node(node.right, writer)
    else:
        writer.write_bit(1)
        _write_symbol(writer, node.symbol)


def _write_symbol(writer, symbol):
    for i in range(SYMBOL_BITS):
        writer.write_bit((symbol >> i) & 1)


def read_header(reader):
    tree = HuffmanTree(_read_node(reader, 0))
    _check_symbols(tree)
    return tree


def _read_node(reader, depth):
    if depth > MAX_DEPTH:
        raise InvalidInput(f"tree header nests deeper than {MAX_DEPTH} levels")
    if reader.read_bit() == 1:
        return Leaf(_read_symbol(reader))
    left = _read_node(reader, depth + 1)
    right = _read_node(reader, depth + 1)
    return Internal(left, right)


def _read_symbol(reader):
    symbol = 0
    for i in range(SYMBOL_BITS):
        symbol |= reader.read_bit() << i
    if symbol > EOF:
        raise InvalidInput(f"symbol {symbol} in tree header is out of range")
    return symbol


def _check_symbols(tree):
    counts = Counter(tree.symbols())
    repeated = sorted(symbol for symbol, n in counts.items() if n > 1)
    if repeated:
        raise InvalidInput(f"symbols appear more than once in tree: {repeated}")
    if EOF not in counts:
        raise InvalidInput("tree has no end-of-stream leaf")


def write_text_header(tree, out):
    for symbol, path in tree.leaves():
        out.write(f"{symbol}\n{path}\n")


class _Slot:
    # Mutable node used only while a text header is being read
    __slots__ = ("symbol", "left", "right")

    def __init__(self):
        self.symbol = None
        self.left = None
        self.right = None


def read_text_header(source):
    """Rebuild a tree from the text form.

    ``source`` is a string, a text stream or any iterable of lines.
    """
    if isinstance(source, str):
        source = source.splitlines()
    lines = [line.rstrip("\r\n") for line in source]
    if not lines:
        raise InvalidInput("text header has no leaves")
    if len(lines) % 2:
        raise InvalidInput(f"text header has an odd number of lines ({len(lines)})")

    root = _Slot()
    for i in range(0, len(lines), 2):
        symbol = _parse_symbol(lines[i], i + 1)
        _attach(root, symbol, lines[i + 1], i + 2)

    tree = HuffmanTree(_freeze(root, ""))
    _check_symbols(tree)
    return tree


def _parse_symbol(line, lineno):
    if not (line.isascii() and line.isdigit()):
        raise InvalidInput(f"line {lineno}: expected a decimal symbol, got {line!r}")
    symbol = int(line)
    if symbol > EOF:
        raise InvalidInput(f"line {lineno}: symbol {symbol} is out of range")
    return symbol


def _attach(root, symbol, path, lineno):
    if len(path) > MAX_DEPTH:
        raise InvalidInput(f"line {lineno}: path longer than {MAX_DEPTH} steps")
    current = root
    for step in path:
        if current.symbol is not None:
            raise InvalidInput(f"line {lineno}: path runs through the leaf for symbol {current.symbol}")
        if step == "0":
            if current.left is None:
                current.left = _Slot()
            current = current.left
        elif step == "1":
            if current.right is None:
                current.right = _Slot()
            current = current.right
        else:
            raise InvalidInput(f"line {lineno}: path may only contain 0 and 1, got {path!r}")
    if current.symbol is not None or current.left is not None or current.right is not None:
        raise InvalidInput(f"line {lineno}: path {path!r} collides with another leaf")
    current.symbol = symbol


def _freeze(slot, path):
    if slot.symbol is not None:
        return Leaf(slot.symbol)
    if slot.left is None or slot.right is None:
        raise InvalidInput(f"node at path {path or '<root>'} has only one child")
    return Internal(_freeze(slot.left, path + "0"), _freeze(slot.right, path + "1"))
