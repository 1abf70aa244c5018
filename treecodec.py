"""Tree (de)serialization.

A tree is written in preorder, one control bit per node: ``0`` for an
internal node (followed by its left then right subtree) and ``1`` for a
leaf (followed by its symbol as 8 bits, MSB first). The description is
self-terminating, so no length prefix is stored.
"""
from typing import Optional, Set

from bitops import BitReader, BitWriter
from errors import CorruptContainerError
from huffman import Internal, Leaf, TreeNode

INTERNAL_BIT = 0
LEAF_BIT = 1

#: A full binary tree with at most 256 leaves is at most 255 levels deep.
MAX_DEPTH = 255


def serialize_tree(root: TreeNode, writer: Optional[BitWriter] = None) -> BitWriter:
    """Append the preorder description of ``root`` to ``writer``.

    :param root: Tree to serialize.
    :type root: Leaf | Internal
    :param writer: Destination; a new :class:`BitWriter` is created if omitted.
    :type writer: BitWriter | None
    :returns: The writer the bits were appended to.
    :rtype: BitWriter
    """
    if writer is None:
        writer = BitWriter()
    if isinstance(root, Leaf):
        writer.write_bit(LEAF_BIT)
        writer.write_byte(root.symbol)
    else:
        writer.write_bit(INTERNAL_BIT)
        serialize_tree(root.left, writer)
        serialize_tree(root.right, writer)
    return writer


def deserialize_tree(reader: BitReader) -> TreeNode:
    """Read one tree description from the current position of ``reader``.

    Exactly the bits of the description are consumed; the reader is left
    on the first bit after it.

    :param reader: Bit source positioned at the start of a tree description.
    :type reader: BitReader
    :returns: Rebuilt tree. Leaves carry weight 0.
    :rtype: Leaf | Internal
    :raises CorruptContainerError: If the bits run out before the tree is
        complete, the tree nests too deep, or a symbol appears twice.
    """
    seen: Set[int] = set()
    try:
        return _read_node(reader, 0, seen)
    except EOFError as exc:
        raise CorruptContainerError("Tree description is truncated") from exc


def _read_node(reader: BitReader, depth: int, seen: Set[int]) -> TreeNode:
    if depth > MAX_DEPTH:
        raise CorruptContainerError("Tree description nests too deep")
    if reader.read_bit() == LEAF_BIT:
        symbol = reader.read_byte()
        if symbol in seen:
            raise CorruptContainerError(f"Symbol {symbol} appears twice in tree")
        seen.add(symbol)
        return Leaf(symbol)
    left = _read_node(reader, depth + 1, seen)
    right = _read_node(reader, depth + 1, seen)
    return Internal(left, right)
