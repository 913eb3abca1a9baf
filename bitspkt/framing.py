"""
BITS Operator Framing

After an operator's header comes a 1-bit length type id choosing how its
children are delimited:

    0 (TOTAL_BITS)    15-bit field: exact number of bits the children occupy
    1 (PACKET_COUNT)  11-bit field: exact number of children

An OperatorFrame holds one operator while its children are being parsed.
It knows when the operator is complete and checks the comparison arity
when it is closed. The children themselves are parsed by the packet
parser, which keeps a stack of open frames.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional

from bitspkt.bits import BitCursor
from bitspkt.errors import ArityError
from bitspkt.header import Header

if TYPE_CHECKING:
    from bitspkt.packet import Packet


LENGTH_TYPE_BITS = 1
COMPARISON_ARITY = 2


class LengthTypeId(IntEnum):
    TOTAL_BITS = 0
    PACKET_COUNT = 1

    @property
    def field_bits(self) -> int:
        """Width of the length/count field that follows the selector."""
        return 15 if self is LengthTypeId.TOTAL_BITS else 11


@dataclass
class OperatorFrame:
    """An operator packet whose children are still being collected."""
    header: Header
    offset: int
    length_type: LengthTypeId
    declared: int  # bit length or child count, per length_type
    region_end: Optional[int] = None
    children: list[Packet] = field(default_factory=list)

    @classmethod
    def open(cls, cursor: BitCursor, header: Header, offset: int) -> OperatorFrame:
        """Read the framing fields following `header`.

        For TOTAL_BITS the cursor is bounded to the declared region until
        the frame is closed.
        """
        length_type = LengthTypeId(cursor.read(LENGTH_TYPE_BITS, "length type id"))
        declared = cursor.read(length_type.field_bits, f"{length_type.name.lower()} field")
        region_end = None
        if length_type is LengthTypeId.TOTAL_BITS:
            region_end = cursor.open_region(declared, "sub-packet region")
        return cls(header, offset, length_type, declared, region_end)

    @property
    def framing_bits(self) -> int:
        return LENGTH_TYPE_BITS + self.length_type.field_bits

    def is_complete(self, cursor: BitCursor) -> bool:
        if self.length_type is LengthTypeId.TOTAL_BITS:
            return cursor.position == self.region_end
        return len(self.children) == self.declared

    def add(self, child: Packet) -> None:
        self.children.append(child)

    def close(self, cursor: BitCursor) -> tuple[Packet, ...]:
        """Release the region (if any) and return the collected children."""
        if self.region_end is not None:
            cursor.close_region()
        if self.header.type_id.is_comparison and len(self.children) != COMPARISON_ARITY:
            raise ArityError(
                f"{self.header.type_id.name} needs {COMPARISON_ARITY} sub-packets, "
                f"got {len(self.children)}",
                self.offset,
            )
        return tuple(self.children)

    def __repr__(self) -> str:
        return (
            f"<OperatorFrame {self.header.type_id.name} @{self.offset} "
            f"{self.length_type.name}={self.declared} children={len(self.children)}>"
        )
