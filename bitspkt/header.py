"""
BITS Packet Header

Every packet opens with the same 6 bits: a 3-bit version followed by a
3-bit type id. All eight type ids are defined, so there is no "unknown
type" failure, only running out of bits.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from bitspkt.bits import BitCursor


VERSION_BITS = 3
TYPE_ID_BITS = 3
HEADER_BITS = VERSION_BITS + TYPE_ID_BITS


class TypeId(IntEnum):
    """Packet type ids. LITERAL carries a value, everything else is an operator."""
    SUM = 0
    PRODUCT = 1
    MINIMUM = 2
    MAXIMUM = 3
    LITERAL = 4
    GREATER_THAN = 5
    LESS_THAN = 6
    EQUAL = 7

    @property
    def is_literal(self) -> bool:
        return self is TypeId.LITERAL

    @property
    def is_comparison(self) -> bool:
        return self in (TypeId.GREATER_THAN, TypeId.LESS_THAN, TypeId.EQUAL)

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    TypeId.SUM: "+",
    TypeId.PRODUCT: "*",
    TypeId.MINIMUM: "min",
    TypeId.MAXIMUM: "max",
    TypeId.LITERAL: "lit",
    TypeId.GREATER_THAN: ">",
    TypeId.LESS_THAN: "<",
    TypeId.EQUAL: "==",
}


@dataclass(frozen=True)
class Header:
    version: int
    type_id: TypeId

    def __repr__(self) -> str:
        return f"<Header v{self.version} {self.type_id.name}>"


def read_header(cursor: BitCursor) -> Header:
    """Consume the 6 header bits at the cursor."""
    cursor.require(HEADER_BITS, "packet header")
    version = cursor.read(VERSION_BITS, "version")
    type_id = TypeId(cursor.read(TYPE_ID_BITS, "type id"))
    return Header(version, type_id)
