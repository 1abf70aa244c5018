class HuffmanError(ValueError):
    """Base class for every error raised by the compression core."""


class EmptyInputError(HuffmanError):
    """Raised by ``compress`` when the input holds no bytes.

    A Huffman tree needs at least one symbol, so there is nothing to encode.
    """


class CorruptContainerError(HuffmanError):
    """Raised by ``decompress`` when a container cannot be decoded.

    Covers containers that are too short, carry an invalid padding count,
    hold a tree description that does not fit in the declared bit range,
    or whose payload ends in the middle of a codeword.
    """
