import heapq
import itertools
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


DELIMITER = " " # separates the code of one character from the next
SINGLE_SYMBOL_CODE = "0" # code given to the only symbol of a one-leaf tree


# Errors

class HuffmanError(Exception):
    """Base class for every failure raised by this module."""


class InvalidInput(HuffmanError, ValueError):
    """The frequency table or a transcoding option is unusable."""


class UnknownSymbol(HuffmanError, KeyError):
    """A character to encode has no entry in the code table."""

    def __init__(self, symbol, position: int):
        super().__init__(symbol, position)
        self.symbol = symbol
        self.position = position

    def __str__(self):
        return f"symbol {self.symbol!r} at position {self.position} is not in the code table"


class TruncatedOrCorruptStream(HuffmanError, ValueError):
    """The encoded stream does not walk the tree to a leaf."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (offset {offset})")
        self.offset = offset


# Tree

class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # character, None on internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(None, {self.frequency}, left={self.left!r}, right={self.right!r})"


class HuffmanQueue:
    """
    Min-priority queue of tree nodes ordered by frequency.

    Nodes of equal frequency come out in the order they were pushed, so a node
    pushed later goes behind every node already waiting with the same weight.
    The insertion counter makes heapq honour that without comparing nodes.
    """

    def __init__(self, nodes: Iterable[HuffmanNode] = ()):
        self._heap: List[Tuple[int, int, HuffmanNode]] = []
        self._counter = itertools.count()
        for node in nodes:
            self.push(node)

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, node: HuffmanNode) -> None:
        heapq.heappush(self._heap, (node.frequency, next(self._counter), node))

    def pop_min(self) -> Optional[HuffmanNode]:
        if not self._heap:
            return None # empty
        return heapq.heappop(self._heap)[2]


def zip_frequency_table(symbols, frequencies) -> List[Tuple[str, int]]:
    """Pair up parallel symbol and frequency arrays."""
    symbols = list(symbols)
    frequencies = list(frequencies)
    if len(symbols) != len(frequencies):
        raise InvalidInput(
            f"got {len(symbols)} symbols but {len(frequencies)} frequencies"
        )
    return list(zip(symbols, frequencies))


def _table_items(frequency_table) -> List[Tuple[str, int]]:
    if isinstance(frequency_table, Mapping):
        items = list(frequency_table.items())
    else:
        try:
            items = [tuple(pair) for pair in frequency_table]
        except TypeError:
            raise InvalidInput(f"expected a mapping or (symbol, frequency) pairs, got {frequency_table!r}") from None

    if not items:
        raise InvalidInput("frequency table is empty")

    seen = set()
    for pair in items:
        if len(pair) != 2:
            raise InvalidInput(f"expected (symbol, frequency) pair, got {pair!r}")
        symbol, frequency = pair
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise InvalidInput(f"symbol must be a single character, got {symbol!r}")
        if symbol in seen:
            raise InvalidInput(f"duplicate symbol {symbol!r}")
        seen.add(symbol)
        if isinstance(frequency, bool) or not isinstance(frequency, int):
            raise InvalidInput(f"frequency of {symbol!r} must be an integer, got {frequency!r}")
        if frequency < 0:
            raise InvalidInput(f"frequency of {symbol!r} is negative ({frequency})")
    return items


def build_huffman_tree(frequency_table) -> HuffmanNode:
    """
    Build the code tree for a table of symbol -> frequency.

    The table is a mapping or a sequence of (symbol, frequency) pairs; its order
    decides ties. Raises InvalidInput instead of returning a root when the table
    is empty or malformed.
    """
    items = _table_items(frequency_table)
    priority_queue = HuffmanQueue(HuffmanNode(symbol, frequency) for symbol, frequency in items)

    while len(priority_queue) > 1:
        left = priority_queue.pop_min()
        right = priority_queue.pop_min()
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right)
        priority_queue.push(merged_node)

    return priority_queue.pop_min() # root of the tree


def count_nodes(root: HuffmanNode) -> Tuple[int, int]:
    """Return (leaves, internal nodes) below and including root."""
    leaves = internal = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node is None:
            continue
        if node.is_leaf:
            leaves += 1
        else:
            internal += 1
            stack.append(node.right)
            stack.append(node.left)
    return leaves, internal


# Code table

def generate_huffman_codes(root: HuffmanNode) -> Dict[str, str]:
    if root.is_leaf:
        # An empty path cannot be written or read back, so a lone symbol gets "0"
        return {root.symbol: SINGLE_SYMBOL_CODE} if root.symbol is not None else {}

    codes: Dict[str, str] = {}
    def generate_codes_helper(node, current_code):
        if node is None:
            return

        if node.is_leaf:
            if node.symbol is not None:
                codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes


def format_code_table(code_map: Dict[str, str]) -> List[str]:
    """`<symbol>: <bits>` lines in ascending character order."""
    return [f"{symbol}: {code_map[symbol]}" for symbol in sorted(code_map)]


def average_code_length(code_map: Dict[str, str], frequency_table) -> float:
    """Frequency-weighted mean code length, in bits per symbol."""
    items = frequency_table.items() if isinstance(frequency_table, Mapping) else frequency_table
    total = 0
    weighted = 0
    for symbol, frequency in items:
        total += frequency
        weighted += frequency * len(code_map[symbol])
    if total == 0:
        return 0.0
    return weighted / total


# Transcoding

def _check_delimiter(delimiter) -> None:
    # must be one character that cannot be mistaken for a bit
    if not isinstance(delimiter, str) or len(delimiter) != 1 or delimiter in "01":
        raise InvalidInput(f"delimiter must be a single character other than 0 or 1, got {delimiter!r}")


def iter_encoded_tokens(text: Iterable[str], code_map: Dict[str, str]) -> Iterator[str]:
    for position, symbol in enumerate(text):
        try:
            yield code_map[symbol]
        except KeyError:
            raise UnknownSymbol(symbol, position) from None


def huffman_encode(text: Iterable[str], code_map: Dict[str, str], delimiter: str = DELIMITER) -> str:
    """
    Encode text as delimiter-terminated codes, one per character.

    Raises UnknownSymbol for the first character missing from code_map; nothing
    is returned for the part encoded before it.
    """
    _check_delimiter(delimiter)
    out: List[str] = []
    for code in iter_encoded_tokens(text, code_map):
        out.append(code)
        out.append(delimiter)
    return ''.join(out)


class HuffmanDecoder:
    """
    Incremental decoder over a code tree.

    `feed` accepts the encoded stream in arbitrary chunks and returns the text
    completed so far; the tree cursor carries over between chunks. `close`
    checks that the stream did not stop part way down the tree.
    """

    def __init__(self, root: HuffmanNode, delimiter: str = DELIMITER):
        if root is None:
            raise InvalidInput("cannot decode without a code tree")
        _check_delimiter(delimiter)
        self.root = root
        self.delimiter = delimiter
        self._node = root
        self._offset = 0 # characters consumed across all chunks

    def feed(self, chunk: str) -> str:
        root = self.root
        node = self._node
        decoded: List[str] = []

        for ch in chunk:
            if ch == self.delimiter:
                self._offset += 1
                continue
            if ch == '0':
                # a lone leaf root answers "0" with its own symbol
                node = root if root.is_leaf else node.left
            elif ch == '1':
                node = None if root.is_leaf else node.right
            else:
                self._node = root
                raise TruncatedOrCorruptStream(f"unexpected character {ch!r}", self._offset)

            if node is None:
                self._node = root
                raise TruncatedOrCorruptStream("bit leads off the code tree", self._offset)

            # Reaching a leaf is the only emit condition
            if node.is_leaf:
                decoded.append(node.symbol)
                node = root
            self._offset += 1

        self._node = node
        return ''.join(decoded)

    def close(self) -> None:
        if self._node is not self.root:
            node = self._node
            self._node = self.root
            raise TruncatedOrCorruptStream(
                f"stream ended inside a code (at a node of weight {node.frequency})", self._offset
            )


def huffman_decode(encoded: str, root: HuffmanNode, delimiter: str = DELIMITER) -> str:
    decoder = HuffmanDecoder(root, delimiter)
    text = decoder.feed(encoded)
    decoder.close()
    return text
