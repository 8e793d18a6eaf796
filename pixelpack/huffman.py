"""Huffman entropy coder for text payloads."""

import heapq
import itertools
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class HuffmanNode:
    """A node of the prefix code tree.

    Leaves hold a symbol; internal nodes hold the summed frequency of their
    two children and own both of them.
    """
    freq: int
    symbol: Optional[str] = None
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


@dataclass(frozen=True)
class EncodedPayload:
    """Packed output of the entropy coder."""
    data: bytes
    bit_length: int
    codes: Dict[str, str] = field(default_factory=dict)

    @property
    def padding_bits(self) -> int:
        return len(self.data) * 8 - self.bit_length


def build_frequency_table(symbols: Iterable[str]) -> Dict[str, int]:
    """
    Count every occurrence of every symbol.

    Keys keep first-occurrence order, which drives merge tie-breaking.

    Args:
        symbols: Input sequence (a string iterates per code point)

    Returns:
        Mapping of symbol to count (empty for empty input)
    """
    return dict(Counter(symbols))


def build_code_tree(freq: Dict[str, int]) -> Optional[HuffmanNode]:
    """
    Build the prefix code tree by repeatedly merging the two lightest nodes.

    Ties are broken by insertion order: leaves in first-occurrence order,
    then merged nodes in creation order. The first node popped becomes the
    left child.

    Args:
        freq: Frequency table

    Returns:
        Root node, or None for an empty table
    """
    heap: List[tuple] = []
    counter = itertools.count()

    for symbol, count in freq.items():
        heapq.heappush(heap, (count, next(counter), HuffmanNode(freq=count, symbol=symbol)))

    if not heap:
        return None

    while len(heap) > 1:
        f1, _, left = heapq.heappop(heap)
        f2, _, right = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, left=left, right=right)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]


def build_code_table(root: Optional[HuffmanNode]) -> Dict[str, str]:
    """
    Assign each leaf its root-to-leaf path (left=0, right=1).

    A single-leaf tree gets the code "0" so no symbol has an empty code.
    """
    codes: Dict[str, str] = {}
    if root is None:
        return codes

    # Iterative DFS, left subtree first
    stack = [(root, "")]
    while stack:
        node, path = stack.pop()
        if node.is_leaf:
            codes[node.symbol] = path or "0"
            continue
        if node.right is not None:
            stack.append((node.right, path + "1"))
        if node.left is not None:
            stack.append((node.left, path + "0"))

    return codes


def pack_bits(codes: Iterable[str]) -> EncodedPayload:
    """
    Concatenate bit strings and pack them MSB-first into bytes.

    The final byte is zero-padded in its low-order bits.

    Args:
        codes: Bit strings made of "0" and "1", in output order

    Returns:
        EncodedPayload with ceil(bits / 8) bytes
    """
    out = bytearray()
    current = 0
    filled = 0
    total = 0

    for code in codes:
        for bit in code:
            current = (current << 1) | (bit == "1")
            filled += 1
            if filled == 8:
                out.append(current)
                current = 0
                filled = 0
        total += len(code)

    if filled:
        out.append(current << (8 - filled))

    return EncodedPayload(data=bytes(out), bit_length=total)


def huffman_encode(text: str) -> EncodedPayload:
    """
    Compress text with a Huffman code built from its own frequencies.

    The result is deterministic for a given input. The code table is
    returned alongside the packed bits but is not embedded in them.

    Args:
        text: Input text

    Returns:
        EncodedPayload (empty for empty text)
    """
    freq = build_frequency_table(text)
    root = build_code_tree(freq)
    codes = build_code_table(root)
    packed = pack_bits(codes[ch] for ch in text)

    logger.debug(
        "huffman: %d symbols, alphabet %d, %d bits -> %d bytes",
        len(text), len(freq), packed.bit_length, len(packed.data),
    )
    return EncodedPayload(data=packed.data, bit_length=packed.bit_length, codes=codes)
