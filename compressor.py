from typing import Callable, Optional

from bitops import BitReader, BitWriter
from errors import CorruptContainerError
from huffman import LEFT, CodeTable, Leaf, build_tree, count_frequencies
from treecodec import deserialize_tree, serialize_tree

ProgressCallback = Callable[[int, int], None]


class HuffmanCompressor:
    """Huffman compressor producing self-describing containers.

    Container layout:

    - Padding count ``P``: 1 byte, 0-7
    - Serialized tree (see :mod:`treecodec`)
    - Encoded payload, one codeword per input byte
    - ``P`` zero bits up to the byte boundary

    Instances keep no state between calls.

    :ivar PROGRESS_STEP: Number of units (input bytes when compressing,
        payload bits when decompressing) between progress reports.
    :type PROGRESS_STEP: int
    """

    PROGRESS_STEP = 4096

    def compress(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Compress ``data`` into a container.

        :param data: Input bytes to compress.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            reporting input bytes encoded so far.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Container bytes.
        :rtype: bytes
        :raises EmptyInputError: If ``data`` is empty.
        """
        frequencies = count_frequencies(data)
        root = build_tree(frequencies)
        table = CodeTable(root)

        output = serialize_tree(root, BitWriter())

        total = len(data)
        for done, byte in enumerate(data, 1):
            output.write_bits(table.encode_symbol(byte))
            if on_progress is not None and done % self.PROGRESS_STEP == 0:
                on_progress(done, total)

        pad_count = output.finalize()
        if on_progress is not None:
            on_progress(total, total)
        return bytes([pad_count]) + output.flush()

    def decompress(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Decompress a container produced by :meth:`compress`.

        :param data: Container bytes.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            reporting payload bits decoded so far.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Original bytes.
        :rtype: bytes
        :raises CorruptContainerError: If the container is too short, its
            padding count is invalid, the padding bits are not zero, the
            tree cannot be read, or the
            payload ends inside a codeword.
        """
        if len(data) < 2:
            raise CorruptContainerError(
                f"Container too short: {len(data)} byte(s)"
            )
        pad_count = data[0]
        if pad_count > 7:
            raise CorruptContainerError(f"Invalid padding count: {pad_count}")
        if data[-1] & ((1 << pad_count) - 1):
            raise CorruptContainerError("Padding bits are not zero")

        reader = BitReader(bytes(data[1:]), pad_count)
        root = deserialize_tree(reader)

        total = reader.remaining
        if total == 0:
            raise CorruptContainerError("Container holds no payload")

        output = bytearray()
        if isinstance(root, Leaf):
            for done in range(1, total + 1):
                if reader.read_bit() != LEFT:
                    raise CorruptContainerError(
                        "Invalid codeword for a single-symbol tree"
                    )
                output.append(root.symbol)
                if on_progress is not None and done % self.PROGRESS_STEP == 0:
                    on_progress(done, total)
        else:
            node = root
            for done in range(1, total + 1):
                node = node.left if reader.read_bit() == LEFT else node.right
                if isinstance(node, Leaf):
                    output.append(node.symbol)
                    node = root
                if on_progress is not None and done % self.PROGRESS_STEP == 0:
                    on_progress(done, total)
            if node is not root:
                raise CorruptContainerError("Payload ends inside a codeword")

        if on_progress is not None:
            on_progress(total, total)
        return bytes(output)


def compress(data: bytes) -> bytes:
    """Compress ``data`` into a Huffman container."""
    return HuffmanCompressor().compress(data)


def decompress(data: bytes) -> bytes:
    """Recover the bytes stored in a Huffman container."""
    return HuffmanCompressor().decompress(data)
