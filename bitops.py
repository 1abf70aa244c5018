from typing import Iterable


class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits MSB-first into bytes. The first bit written
    is the first bit a :class:`BitReader` will return.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    :ivar pad_count: Zero bits appended by :meth:`finalize`, ``None`` before that.
    :type pad_count: int | None
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0
        self.pad_count = None

    def __len__(self) -> int:
        """Number of bits written so far, padding excluded."""
        if self.pad_count is not None:
            return len(self.buffer) * 8 - self.pad_count
        return len(self.buffer) * 8 + self.bit_count

    def write_bit(self, bit: int):
        """Append a single bit.

        :param bit: ``0`` or ``1``.
        :type bit: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``bit`` is not 0 or 1, or the writer is finalized.
        """
        if bit not in (0, 1):
            raise ValueError(f"Bit must be 0 or 1, got {bit!r}")
        if self.pad_count is not None:
            raise ValueError("Cannot write to a finalized BitWriter")
        self.bit_buffer = (self.bit_buffer << 1) | bit
        self.bit_count += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_bits(self, bits: Iterable[int]):
        """Append a sequence of bits in order, e.g. a codeword.

        :param bits: Iterable of ``0``/``1`` values.
        :type bits: Iterable[int]
        :returns: None
        :rtype: None
        """
        for bit in bits:
            self.write_bit(bit)

    def write_byte(self, value: int):
        """Append the 8 bits of ``value``, most-significant bit first.

        The byte is not aligned: it lands right after the last written bit.

        :param value: Byte value, 0-255.
        :type value: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``value`` does not fit in a byte.
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        for i in range(7, -1, -1):
            self.write_bit((value >> i) & 1)

    def finalize(self) -> int:
        """Pad the buffer with zero bits up to the next byte boundary.

        Calling it again is a no-op that returns the same count.

        :returns: Number of padding bits appended (0-7).
        :rtype: int
        """
        if self.pad_count is not None:
            return self.pad_count
        pad = 0
        if self.bit_count > 0:
            pad = 8 - self.bit_count
            self.buffer.append(self.bit_buffer << pad)
            self.bit_buffer = 0
            self.bit_count = 0
        self.pad_count = pad
        return pad

    def flush(self) -> bytes:
        """Finalize (if needed) and return the full byte buffer.

        :returns: The accumulated bytes, zero-padded to a byte boundary.
        :rtype: bytes
        """
        self.finalize()
        return bytes(self.buffer)


class BitReader:
    """Sequential bit reader over a byte buffer.

    Only the first ``len(data) * 8 - pad_count`` bits are readable; the
    trailing padding is never returned.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar bit_length: Number of valid bits in ``data``.
    :type bit_length: int
    :ivar position: Index of the next bit to read.
    :type position: int
    """

    def __init__(self, data: bytes, pad_count: int = 0):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :param pad_count: Number of padding bits at the end of ``data`` (0-7).
        :type pad_count: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``pad_count`` is outside 0-7 or exceeds the
            number of bits in ``data``.
        """
        if not 0 <= pad_count <= 7:
            raise ValueError(f"Padding count out of range: {pad_count}")
        if pad_count > len(data) * 8:
            raise ValueError("Padding count exceeds data length")
        self.data = data
        self.bit_length = len(data) * 8 - pad_count
        self.position = 0

    @property
    def remaining(self) -> int:
        """Number of valid bits not read yet."""
        return self.bit_length - self.position

    def read_bit(self) -> int:
        """Read the next bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If all valid bits have been consumed.
        """
        if self.position >= self.bit_length:
            raise EOFError("Unexpected end of data")
        byte = self.data[self.position >> 3]
        bit = (byte >> (7 - (self.position & 7))) & 1
        self.position += 1
        return bit

    def read_byte(self) -> int:
        """Read the next 8 bits as an integer, MSB first.

        :returns: Byte value, 0-255.
        :rtype: int
        :raises EOFError: If fewer than 8 valid bits remain.
        """
        if self.remaining < 8:
            raise EOFError("Unexpected end of data")
        value = 0
        for _ in range(8):
            value = (value << 1) | self.read_bit()
        return value
