import heapq
import itertools
from collections import Counter
from typing import Dict, Iterator, List, Tuple, Union

from errors import EmptyInputError

#: Edge labels taken from a node to reach one of its children.
LEFT = 0
RIGHT = 1

#: Secondary ordering keys 0-255 belong to leaves (their symbol), so
#: internal nodes are numbered from here on in creation order.
FIRST_INTERNAL_ORDER = 256

Codeword = Tuple[int, ...]


class Leaf:
    """Huffman tree leaf holding one byte value.

    :ivar symbol: Byte value (0-255) this leaf encodes.
    :type symbol: int
    :ivar weight: Occurrence count of ``symbol``. Trees rebuilt from a
        container carry no counts, so their leaves have weight 0.
    :type weight: int
    """

    __slots__ = ("symbol", "weight")

    def __init__(self, symbol: int, weight: int = 0):
        """Create a leaf.

        :param int symbol: Byte value, 0-255.
        :param int weight: Occurrence count of ``symbol``.
        :returns: None
        :rtype: None
        :raises ValueError: If ``symbol`` is not a byte value.
        """
        if not 0 <= symbol <= 0xFF:
            raise ValueError(f"Symbol out of byte range: {symbol}")
        self.symbol = symbol
        self.weight = weight

    def __repr__(self):
        return f"Leaf(symbol={self.symbol}, weight={self.weight})"


class Internal:
    """Huffman tree internal node with exactly two children.

    The weight is always derived from the children when the node is
    created and never supplied by the caller.

    :ivar left: Subtree reached with a ``0`` edge.
    :type left: Leaf | Internal
    :ivar right: Subtree reached with a ``1`` edge.
    :type right: Leaf | Internal
    :ivar weight: Sum of the leaf weights below this node.
    :type weight: int
    """

    __slots__ = ("left", "right", "weight")

    def __init__(self, left: "TreeNode", right: "TreeNode"):
        self.left = left
        self.right = right
        self.weight = left.weight + right.weight

    def __repr__(self):
        return f"Internal(weight={self.weight}, left={self.left!r}, right={self.right!r})"


TreeNode = Union[Leaf, Internal]


def count_frequencies(data: bytes) -> Dict[int, int]:
    """Count how often each byte value occurs in ``data``.

    :param data: Input bytes.
    :type data: bytes
    :returns: Mapping from byte value to occurrence count; only values that
        occur are present.
    :rtype: Dict[int, int]
    :raises EmptyInputError: If ``data`` is empty.
    """
    if not data:
        raise EmptyInputError("Cannot build a Huffman tree from empty input")
    return Counter(data)


def build_tree(frequencies: Dict[int, int]) -> TreeNode:
    """Build a Huffman tree by repeatedly merging the two lightest nodes.

    Nodes are ordered by ``(weight, order)`` where ``order`` is the symbol
    for leaves and ``256 + creation index`` for internal nodes, so equal
    weights always resolve the same way regardless of the iteration order
    of ``frequencies``. The first node popped becomes the left child.

    A table with a single symbol yields a lone :class:`Leaf` as the root.

    :param frequencies: Mapping from byte value to occurrence count.
    :type frequencies: Dict[int, int]
    :returns: Root of the tree.
    :rtype: Leaf | Internal
    :raises EmptyInputError: If no symbol has a positive count.
    """
    heap: List[Tuple[int, int, TreeNode]] = [
        (weight, symbol, Leaf(symbol, weight))
        for symbol, weight in sorted(frequencies.items())
        if weight > 0
    ]
    if not heap:
        raise EmptyInputError("Cannot build a Huffman tree without symbols")
    heapq.heapify(heap)

    order = itertools.count(FIRST_INTERNAL_ORDER)
    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = Internal(left, right)
        heapq.heappush(heap, (merged.weight, next(order), merged))

    return heap[0][2]


def iter_leaves(node: TreeNode) -> Iterator[Leaf]:
    """Yield the leaves of a tree from left to right."""
    if isinstance(node, Leaf):
        yield node
    else:
        yield from iter_leaves(node.left)
        yield from iter_leaves(node.right)


def leaf_count(node: TreeNode) -> int:
    return sum(1 for _ in iter_leaves(node))


class CodeTable:
    """Symbol to codeword mapping derived from a Huffman tree.

    A tree that is a single leaf gets the one-bit codeword ``(0,)``.

    :ivar codes: Mapping from symbol to its codeword (tuple of 0/1 values).
    :type codes: Dict[int, Tuple[int, ...]]
    :ivar symbols: Sorted list of symbols with a codeword.
    :type symbols: List[int]
    """

    def __init__(self, root: TreeNode):
        """Derive codewords by a depth-first walk of ``root``.

        :param root: Root of the Huffman tree.
        :type root: Leaf | Internal
        :returns: None
        :rtype: None
        """
        self.codes: Dict[int, Codeword] = {}
        if isinstance(root, Leaf):
            self.codes[root.symbol] = (LEFT,)
        else:
            self._collect(root, ())
        self.symbols: List[int] = sorted(self.codes)
        self._by_codeword: Dict[Codeword, int] = {
            code: symbol for symbol, code in self.codes.items()
        }

    def _collect(self, node: TreeNode, path: Codeword):
        if isinstance(node, Leaf):
            self.codes[node.symbol] = path
        else:
            self._collect(node.left, path + (LEFT,))
            self._collect(node.right, path + (RIGHT,))

    def __len__(self) -> int:
        return len(self.codes)

    def __contains__(self, symbol: int) -> bool:
        return symbol in self.codes

    def __eq__(self, other):
        if not isinstance(other, CodeTable):
            return NotImplemented
        return self.codes == other.codes

    def encode_symbol(self, symbol: int) -> Codeword:
        """Get the codeword for ``symbol``.

        :param symbol: Byte value to encode.
        :type symbol: int
        :returns: Codeword as a tuple of 0/1 values.
        :rtype: Tuple[int, ...]
        :raises KeyError: If ``symbol`` has no codeword in this table.
        """
        return self.codes[symbol]

    def decode_symbol(self, codeword: Codeword):
        """Return the symbol whose codeword is exactly ``codeword``, or ``None``."""
        return self._by_codeword.get(tuple(codeword))


def _symbol_label(symbol: int) -> str:
    if 0x20 < symbol < 0x7F:
        return repr(chr(symbol))
    return f"0x{symbol:02x}"


def format_tree(root: TreeNode, indent: str = " ") -> str:
    """Render a tree one node per line, indented by depth.

    Leaves are shown as ``symbol: weight`` and internal nodes as their
    weight, children listed left before right.

    :param root: Root of the tree to render.
    :type root: Leaf | Internal
    :param indent: String repeated once per level of depth.
    :type indent: str
    :returns: The rendered tree, without a trailing newline.
    :rtype: str
    """
    lines: List[str] = []

    def walk(node: TreeNode, depth: int):
        prefix = indent * depth
        if isinstance(node, Leaf):
            lines.append(f"{prefix}{_symbol_label(node.symbol)}: {node.weight}")
        else:
            lines.append(f"{prefix}{node.weight}")
            walk(node.left, depth + 1)
            walk(node.right, depth + 1)

    walk(root, 0)
    return "\n".join(lines)
