"""
BITS Core: Transmission and the decode entry point

decode_and_evaluate() is the one-shot API: hex in, (version_sum, value)
out, or a single DecodeError. Transmission wraps a hex string together with
where it came from, parses it on first use and keeps the tree around for
inspection.

Usage:
    decode_and_evaluate("C200B40A82")          # DecodeResult(version_sum=14, value=3)

    tx = Transmission.load("input/transmission.txt")
    print(tx.version_sum, tx.value)
    print(tx.packet, tx.padding)
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional, Union

from bitspkt.bits import BitSequence
from bitspkt.evaluator import evaluate, version_sum
from bitspkt.packet import Packet, parse_bits


class DecodeResult(NamedTuple):
    version_sum: int
    value: int


def decode_and_evaluate(text: str) -> DecodeResult:
    """Decode a hex transmission and reduce it to its two aggregates.

    Raises:
        DecodeError: MalformedInput, TruncatedStream, FramingOverrun,
            ArityError or EmptyOperands. No partial result is returned.
    """
    packet = parse_bits(BitSequence.from_hex(text))
    return DecodeResult(version_sum(packet), evaluate(packet))


class Transmission:
    """A hex-encoded BITS transmission.

    Parsing happens on first access to `packet` (or anything derived from
    it) and raises the same DecodeError decode_and_evaluate() would.
    """

    def __init__(self, text: str, origin: str = "<hex>") -> None:
        self._text = text
        self._origin = origin
        self._bits: Optional[BitSequence] = None
        self._packet: Optional[Packet] = None

    @classmethod
    def from_hex(cls, text: str) -> Transmission:
        return cls(text)

    @classmethod
    def load(cls, source: Union[str, Path]) -> Transmission:
        """Read a transmission from a text file.

        Surrounding whitespace (typically a trailing newline) is stripped;
        anything else that is not a hex digit fails when the bits are built.
        """
        path = Path(source)
        return cls(path.read_text().strip(), origin=str(path))

    @property
    def text(self) -> str:
        return self._text

    @property
    def origin(self) -> str:
        return self._origin

    @property
    def bits(self) -> BitSequence:
        if self._bits is None:
            self._bits = BitSequence.from_hex(self._text)
        return self._bits

    @property
    def packet(self) -> Packet:
        """The outermost packet, starting at bit 0."""
        if self._packet is None:
            self._packet = parse_bits(self.bits)
        return self._packet

    @property
    def padding(self) -> int:
        """Bits after the outermost packet. Never validated."""
        return len(self.bits) - self.packet.bit_length

    @property
    def version_sum(self) -> int:
        return version_sum(self.packet)

    @property
    def value(self) -> int:
        return evaluate(self.packet)

    def result(self) -> DecodeResult:
        return DecodeResult(self.version_sum, self.value)

    def __len__(self) -> int:
        return len(self.bits)

    def __repr__(self) -> str:
        return f"<Transmission: {len(self._text)} hex digits from {self._origin}>"
