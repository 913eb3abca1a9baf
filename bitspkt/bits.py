"""
BITS Bit Source

BitSequence is the immutable bit buffer produced once from the hex
transmission. BitCursor consumes it front to back, MSB-first, on top of
Kaitai Struct's big-endian bit reader.

Usage:
    bits = BitSequence.from_hex("D2FE28")
    cursor = bits.cursor()
    version = cursor.read(3, "version")     # 6
    cursor.open_region(27)                  # reads now bounded to 27 bits
"""

from __future__ import annotations

import io
from typing import Iterator

from kaitaistruct import KaitaiStream

from bitspkt.errors import FramingOverrun, MalformedInput, TruncatedStream


BITS_PER_HEX_DIGIT = 4

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class BitSequence:
    """An immutable, ordered sequence of bits.

    Bits are packed MSB-first into `data`; any bits past `length` in the
    final byte are zero. A sequence built from hex always has a length that
    is a multiple of 4. Slices may have any length.
    """

    __slots__ = ("_data", "_length")

    def __init__(self, data: bytes, length: int) -> None:
        if not 0 <= length <= 8 * len(data):
            raise ValueError(f"Bit length {length} does not fit in {len(data)} bytes")
        packed = bytearray(data[:-(-length // 8)])
        if length % 8:
            packed[-1] &= (0xFF << (8 - length % 8)) & 0xFF
        self._data = bytes(packed)
        self._length = length

    @classmethod
    def from_hex(cls, text: str) -> BitSequence:
        """Decode hex digits (any case, any count) into bits.

        Raises:
            MalformedInput: on the first character that is not a hex digit
        """
        for index, char in enumerate(text):
            if char not in _HEX_DIGITS:
                raise MalformedInput(char, index)
        # bytes.fromhex wants whole bytes; the pad nibble sits past `length`
        padded = text + "0" if len(text) % 2 else text
        return cls(bytes.fromhex(padded), BITS_PER_HEX_DIGIT * len(text))

    @classmethod
    def from_bitstring(cls, text: str) -> BitSequence:
        """Build a sequence from a string of '0' and '1' characters."""
        if any(c not in "01" for c in text):
            raise ValueError(f"Not a bit string: {text!r}")
        return cls._from_int(int(text, 2) if text else 0, len(text))

    @classmethod
    def _from_int(cls, value: int, length: int) -> BitSequence:
        pad = -length % 8
        return cls((value << pad).to_bytes((length + pad) // 8, "big"), length)

    @property
    def data(self) -> bytes:
        """The packed bytes, including zero padding in the last byte."""
        return self._data

    def _int_range(self, start: int, end: int) -> int:
        total = 8 * len(self._data)
        return (int.from_bytes(self._data, "big") >> (total - end)) & ((1 << (end - start)) - 1)

    def slice(self, start: int, end: int) -> BitSequence:
        """Return the contiguous sub-range [start, end) as a new sequence."""
        if not 0 <= start <= end <= self._length:
            raise IndexError(f"Slice [{start}:{end}] outside 0..{self._length}")
        return BitSequence._from_int(self._int_range(start, end), end - start)

    def to_bitstring(self) -> str:
        if not self._length:
            return ""
        return format(self._int_range(0, self._length), f"0{self._length}b")

    def to_hex(self) -> str:
        """Hex digits for the sequence, zero-filling the last nibble."""
        digits = -(-self._length // BITS_PER_HEX_DIGIT)
        return self._data.hex()[:digits].upper()

    def cursor(self, start: int = 0) -> BitCursor:
        return BitCursor(self, start)

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int) -> int:
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError(f"Bit index out of range: {index}")
        return (self._data[index // 8] >> (7 - index % 8)) & 1

    def __iter__(self) -> Iterator[int]:
        for index in range(self._length):
            yield self[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSequence):
            return NotImplemented
        return self._length == other._length and self._data == other._data

    def __hash__(self) -> int:
        return hash((self._data, self._length))

    def __repr__(self) -> str:
        return f"<BitSequence: {self._length} bits>"


class BitCursor:
    """Sequential reader over a BitSequence.

    Besides the end of the stream, reads can be bounded by nested regions
    (a total-bits operator declares how many bits its children occupy).
    Crossing a region boundary is a FramingOverrun; crossing the end of the
    stream outside any region is a TruncatedStream.
    """

    def __init__(self, bits: BitSequence, start: int = 0) -> None:
        if not 0 <= start <= len(bits):
            raise ValueError(f"Cursor start {start} outside 0..{len(bits)}")
        self._bits = bits
        self._stream = KaitaiStream(io.BytesIO(bits.data))
        self._position = start
        self._limits: list[int] = []
        if start:
            self._stream.seek(start // 8)
            if start % 8:
                self._stream.read_bits_int_be(start % 8)

    @property
    def bits(self) -> BitSequence:
        return self._bits

    @property
    def position(self) -> int:
        """Absolute bit offset of the next read."""
        return self._position

    @property
    def limit(self) -> int:
        """End offset of the innermost open region, or of the stream."""
        return self._limits[-1] if self._limits else len(self._bits)

    @property
    def remaining(self) -> int:
        return self.limit - self._position

    @property
    def region_depth(self) -> int:
        return len(self._limits)

    def require(self, n: int, what: str) -> None:
        if self._position + n <= self.limit:
            return
        if self._limits:
            raise FramingOverrun(
                f"{what} needs {n} bits but the enclosing region has {self.remaining} left",
                self._position,
            )
        raise TruncatedStream(
            f"{what} needs {n} bits but the stream has {self.remaining} left",
            self._position,
        )

    def read(self, n: int, what: str = "field") -> int:
        """Consume `n` bits and return them as an unsigned MSB-first integer."""
        self.require(n, what)
        if n == 0:
            return 0
        value = self._stream.read_bits_int_be(n)
        self._position += n
        return value

    def open_region(self, n: int, what: str = "region") -> int:
        """Bound all further reads to the next `n` bits. Returns the region end."""
        self.require(n, what)
        end = self._position + n
        self._limits.append(end)
        return end

    def close_region(self) -> int:
        return self._limits.pop()

    def __repr__(self) -> str:
        return f"<BitCursor: at {self._position}/{len(self._bits)} regions={len(self._limits)}>"
