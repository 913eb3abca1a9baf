"""
BITS Packets

A Packet is a header plus one of two payloads:

    LiteralValue   a single unsigned integer (type id 4)
    Children       the ordered sub-packets of an operator (every other id)

Packets are immutable and built in one left-to-right pass over the bits.
The parser keeps its own stack of open operator frames rather than
recursing, so nesting depth is limited only by the input length.

Usage:
    packet = parse_transmission("38006F45291200")
    packet.type_id            # TypeId.LESS_THAN
    packet.bit_length         # 49
    [c.literal_value for c in packet.children]   # [10, 20]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from bitspkt.bits import BitCursor, BitSequence
from bitspkt.errors import ArityError
from bitspkt.framing import COMPARISON_ARITY, LENGTH_TYPE_BITS, LengthTypeId, OperatorFrame
from bitspkt.header import HEADER_BITS, TypeId, read_header
from bitspkt.literal import GROUP_BITS, NIBBLE_BITS, read_literal


MAX_VERSION = 7


@dataclass(frozen=True)
class LiteralValue:
    value: int
    groups: int = 1

    @property
    def bit_length(self) -> int:
        return GROUP_BITS * self.groups


@dataclass(frozen=True)
class Children:
    """Sub-packets of an operator, plus the framing they were written with."""
    packets: tuple[Packet, ...]
    length_type: LengthTypeId = LengthTypeId.PACKET_COUNT
    bit_length: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "packets", tuple(self.packets))
        object.__setattr__(
            self,
            "bit_length",
            LENGTH_TYPE_BITS + self.length_type.field_bits
            + sum(p.bit_length for p in self.packets),
        )

    def __len__(self) -> int:
        return len(self.packets)

    def __iter__(self) -> Iterator[Packet]:
        return iter(self.packets)

    def __getitem__(self, index: int) -> Packet:
        return self.packets[index]


Payload = Union[LiteralValue, Children]


@dataclass(frozen=True, eq=False)
class Packet:
    """One decoded packet.

    Attributes:
        version: 3-bit version field (0-7)
        type_id: what the packet is (literal or one of seven operators)
        payload: LiteralValue for literals, Children for operators
        offset: bit offset in the transmission where the packet starts

    Two packets are equal when their trees match field for field; offsets
    are not compared. Equality and hashing walk the tree with a work stack.
    """
    version: int
    type_id: TypeId
    payload: Payload
    offset: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.version <= MAX_VERSION:
            raise ValueError(f"Version must fit in 3 bits: {self.version}")
        object.__setattr__(self, "type_id", TypeId(self.type_id))
        if self.type_id.is_literal != isinstance(self.payload, LiteralValue):
            raise ValueError(
                f"{self.type_id.name} packet cannot carry a "
                f"{type(self.payload).__name__} payload"
            )
        if self.type_id.is_comparison and len(self.payload) != COMPARISON_ARITY:
            raise ArityError(
                f"{self.type_id.name} needs {COMPARISON_ARITY} sub-packets, "
                f"got {len(self.payload)}",
                self.offset,
            )

    @classmethod
    def literal(cls, version: int, value: int, offset: int = 0) -> Packet:
        """A literal packet using the fewest groups that hold `value`."""
        groups = max(1, -(-value.bit_length() // NIBBLE_BITS))
        return cls(version, TypeId.LITERAL, LiteralValue(value, groups), offset)

    @classmethod
    def operator(
        cls,
        version: int,
        type_id: TypeId,
        children: list[Packet],
        length_type: LengthTypeId = LengthTypeId.PACKET_COUNT,
        offset: int = 0,
    ) -> Packet:
        return cls(version, type_id, Children(tuple(children), length_type), offset)

    @property
    def is_literal(self) -> bool:
        return isinstance(self.payload, LiteralValue)

    @property
    def children(self) -> tuple[Packet, ...]:
        if isinstance(self.payload, Children):
            return self.payload.packets
        return ()

    @property
    def literal_value(self) -> Optional[int]:
        if isinstance(self.payload, LiteralValue):
            return self.payload.value
        return None

    @property
    def length_type(self) -> Optional[LengthTypeId]:
        if isinstance(self.payload, Children):
            return self.payload.length_type
        return None

    @property
    def bit_length(self) -> int:
        """Exact number of bits this packet occupies in the transmission."""
        return HEADER_BITS + self.payload.bit_length

    @property
    def end(self) -> int:
        return self.offset + self.bit_length

    def _shape(self) -> tuple:
        """This node's own fields, without its children's."""
        if isinstance(self.payload, LiteralValue):
            return (self.version, self.type_id, self.payload)
        return (self.version, self.type_id, self.payload.length_type, len(self.payload))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Packet):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if a is b:
                continue
            if a._shape() != b._shape():
                return False
            pairs.extend(zip(a.children, b.children))
        return True

    def __hash__(self) -> int:
        return hash(tuple((depth, node._shape()) for depth, node in walk(self)))

    def __repr__(self) -> str:
        if isinstance(self.payload, LiteralValue):
            body = f"= {self.payload.value}"
        else:
            body = f"{self.payload.length_type.name} x{len(self.payload)}"
        return f"<Packet v{self.version} {self.type_id.name} {body} [{self.offset}:{self.end}]>"


def _close(cursor: BitCursor, frame: OperatorFrame) -> Packet:
    children = frame.close(cursor)
    return Packet(
        frame.header.version,
        frame.header.type_id,
        Children(children, frame.length_type),
        frame.offset,
    )


def parse_packet(cursor: BitCursor) -> Packet:
    """Parse one complete packet starting at the cursor.

    Operators whose children are still pending sit on an explicit frame
    stack. Each finished packet is handed to the innermost frame, and every
    frame it completes is closed in turn, so siblings always start exactly
    where the previous one ended.

    Raises:
        TruncatedStream, FramingOverrun, ArityError
    """
    frames: list[OperatorFrame] = []
    while True:
        offset = cursor.position
        header = read_header(cursor)
        if header.type_id.is_literal:
            value, groups = read_literal(cursor)
            packet = Packet(header.version, header.type_id, LiteralValue(value, groups), offset)
        else:
            frame = OperatorFrame.open(cursor, header, offset)
            if not frame.is_complete(cursor):
                frames.append(frame)
                continue
            packet = _close(cursor, frame)

        while frames:
            frames[-1].add(packet)
            if not frames[-1].is_complete(cursor):
                break
            packet = _close(cursor, frames.pop())
        else:
            return packet


def parse_bits(bits: BitSequence) -> Packet:
    """Parse the outermost packet at bit 0. Trailing bits are not examined."""
    return parse_packet(bits.cursor())


def parse_transmission(text: str) -> Packet:
    """Parse a hex transmission into its outermost packet."""
    return parse_bits(BitSequence.from_hex(text))


def walk(packet: Packet) -> Iterator[tuple[int, Packet]]:
    """Yield (depth, packet) for every packet in the tree, pre-order."""
    stack = [(0, packet)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        stack.extend((depth + 1, child) for child in reversed(node.children))
