# filename: huffman_core.py

import heapq
import logging
from collections import Counter
from collections.abc import Mapping

from bitarray import bitarray

from huffman_errors import InvalidInput, TruncatedStream, UnknownSymbol

log = logging.getLogger(__name__)

EOF = 256  # 1 greater than the possible values for input bytes
SYMBOL_LIMIT = 257  # byte values 0-255 plus the EOF symbol
SYMBOL_BITS = 9  # enough to hold every symbol up to and including EOF

DECODE_BUFFER = 4096


class Leaf:
    __slots__ = ("symbol", "weight")

    def __init__(self, symbol, weight=0):
        self.symbol = symbol
        self.weight = weight


class Internal:
    __slots__ = ("left", "right", "weight")

    def __init__(self, left, right, weight=0):
        self.left = left
        self.right = right
        self.weight = weight


class _QueueEntry:
    # Equal weights come out in the order they went in
    __slots__ = ("weight", "order", "node")

    def __init__(self, weight, order, node):
        self.weight = weight
        self.order = order
        self.node = node

    def __lt__(self, other):
        return (self.weight, self.order) < (other.weight, other.order)


class HuffmanTree:
    """A built or reconstructed Huffman tree.

    The tree is never modified after construction, so one instance can be
    shared by any number of encoders and decoders.
    """

    def __init__(self, root):
        self.root = root

    @property
    def weight(self):
        return self.root.weight

    def leaves(self):
        """Return ``(symbol, path)`` pairs in left-to-right order.

        ``path`` is a string of '0'/'1' characters, empty for a tree that is a
        single leaf.
        """
        found = []
        self._collect(self.root, "", found)
        return found

    def _collect(self, node, path, found):
        if isinstance(node, Leaf):
            found.append((node.symbol, path))
            return
        self._collect(node.left, path + "0", found)
        self._collect(node.right, path + "1", found)

    def symbols(self):
        return [symbol for symbol, _ in self.leaves()]

    def render(self):
        """Draw the tree sideways: right branches above, left branches below."""
        lines = []
        root = self.root
        if isinstance(root, Internal):
            _render_branch(root.right, True, "", lines)
        lines.append(_label(root))
        if isinstance(root, Internal):
            _render_branch(root.left, False, "", lines)
        return "\n".join(lines)


def _render_branch(node, is_right, indent, lines):
    if isinstance(node, Internal):
        _render_branch(node.right, True, indent + ("        " if is_right else " |      "), lines)
    lines.append(indent + (" /" if is_right else " \\") + "----- " + _label(node))
    if isinstance(node, Internal):
        _render_branch(node.left, False, indent + (" |      " if is_right else "        "), lines)


def _label(node):
    if isinstance(node, Internal):
        return str(node.weight)
    if node.symbol == EOF:
        return "<End Of File>"
    return f"{node.symbol} : {node.weight}"


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize_frequencies(frequencies):
    """Validate a frequency table and return its nonzero byte counts."""
    if isinstance(frequencies, Mapping):
        items = frequencies.items()
    else:
        frequencies = list(frequencies)
        if len(frequencies) > SYMBOL_LIMIT:
            raise InvalidInput(f"frequency table has {len(frequencies)} entries, at most {SYMBOL_LIMIT} allowed")
        items = enumerate(frequencies)

    weights = {}
    for symbol, count in items:
        if not _is_int(symbol) or not 0 <= symbol <= EOF:
            raise InvalidInput(f"symbol out of range: {symbol!r}")
        if not _is_int(count):
            raise InvalidInput(f"frequency of symbol {symbol} is not an integer: {count!r}")
        if count < 0:
            raise InvalidInput(f"negative frequency {count} for symbol {symbol}")
        if symbol == EOF:
            # EOF always gets weight 1, whatever the caller counted
            continue
        if count:
            weights[symbol] = count
    return weights


class HuffmanLogic:
    def count_frequencies(self, data):
        # Index 256 is the EOF marker, which always occurs exactly once
        counts = [0] * SYMBOL_LIMIT
        for symbol, count in Counter(data).items():
            counts[symbol] = count
        counts[EOF] = 1
        return counts

    def build_tree(self, frequencies):
        weights = _normalize_frequencies(frequencies)

        # Leaves go in by ascending symbol, EOF last; that order settles ties
        priority_queue = [_QueueEntry(weight, order, Leaf(symbol, weight))
                          for order, (symbol, weight) in enumerate(sorted(weights.items()))]
        priority_queue.append(_QueueEntry(1, len(priority_queue), Leaf(EOF, 1)))
        heapq.heapify(priority_queue)
        order = len(priority_queue)

        # Iteratively merge nodes to form the binary tree
        while len(priority_queue) > 1:
            left = heapq.heappop(priority_queue)
            right = heapq.heappop(priority_queue)
            merged = Internal(left.node, right.node, left.weight + right.weight)
            heapq.heappush(priority_queue, _QueueEntry(merged.weight, order, merged))
            order += 1

        tree = HuffmanTree(priority_queue[0].node)
        log.debug("built Huffman tree with %d leaves, total weight %d", len(weights) + 1, tree.weight)
        return tree

    def generate_codes(self, tree):
        """Map every symbol in ``tree`` to its path as a bitarray."""
        codes = {}
        self._assign(tree.root, bitarray(endian="big"), codes)
        return codes

    def _assign(self, node, path, codes):
        if isinstance(node, Leaf):
            codes[node.symbol] = path
            return
        left = path.copy()
        left.append(0)
        right = path.copy()
        right.append(1)
        self._assign(node.left, left, codes)
        self._assign(node.right, right, codes)

    def encode(self, data, codes, writer):
        """Write the code of every byte in ``data`` followed by the EOF code.

        ``data`` may be any iterable of byte values. Returns the number of
        bytes encoded.
        """
        table = {symbol: code for symbol, code in codes.items() if symbol != EOF}
        if EOF not in codes:
            raise UnknownSymbol(EOF)

        count = 0
        for byte in data:
            code = table.get(byte)
            if code is None:
                raise UnknownSymbol(byte)
            writer.write_bits(code)
            count += 1

        # Now we're at the end of the input, so write our EOF symbol
        writer.write_bits(codes[EOF])
        log.debug("encoded %d bytes", count)
        return count

    def decode(self, reader, tree, output):
        """Walk ``tree`` one bit at a time, writing bytes until the EOF leaf.

        Returns the number of bytes written to ``output``.
        """
        root = tree.root
        if isinstance(root, Leaf):
            if root.symbol != EOF:
                raise InvalidInput(f"single-leaf tree must hold the end-of-stream symbol, not {root.symbol}")
            return 0

        buf = bytearray()
        count = 0
        current = root
        try:
            while True:
                current = current.right if reader.read_bit() else current.left
                if not isinstance(current, Leaf):
                    continue
                if current.symbol == EOF:
                    break
                buf.append(current.symbol)
                current = root
                if len(buf) >= DECODE_BUFFER:
                    output.write(bytes(buf))
                    count += len(buf)
                    buf.clear()
        except TruncatedStream as err:
            raise TruncatedStream(
                f"stream ended after {count + len(buf)} decoded bytes without an end-of-stream code"
            ) from err

        output.write(bytes(buf))
        count += len(buf)
        log.debug("decoded %d bytes", count)
        return count
