"""
BITS Literal Payload

A literal value is written as 5-bit groups: a continuation flag followed by
4 value bits. Groups run most-significant first; the first group with a 0
flag is the last one. Values are Python ints, so any number of groups is
accepted.
"""

from __future__ import annotations

from bitspkt.bits import BitCursor


GROUP_BITS = 5
NIBBLE_BITS = 4
CONTINUE_FLAG = 0b10000
NIBBLE_MASK = 0b01111


def read_literal(cursor: BitCursor) -> tuple[int, int]:
    """Read a literal payload at the cursor.

    Returns:
        (value, groups) where the payload occupied GROUP_BITS * groups bits

    Raises:
        TruncatedStream: the stream ended before the final group
        FramingOverrun: the enclosing total-bits region ended first
    """
    value = 0
    groups = 0
    while True:
        group = cursor.read(GROUP_BITS, "literal group")
        value = (value << NIBBLE_BITS) | (group & NIBBLE_MASK)
        groups += 1
        if not group & CONTINUE_FLAG:
            return value, groups


def encode_literal(value: int) -> str:
    """Encode a non-negative integer as literal groups, as a bit string.

    Uses the fewest groups that hold the value (one group for zero).
    """
    if value < 0:
        raise ValueError(f"Literal values are unsigned: {value}")
    nibbles = []
    while True:
        nibbles.append(value & NIBBLE_MASK)
        value >>= NIBBLE_BITS
        if not value:
            break
    nibbles.reverse()
    last = len(nibbles) - 1
    return "".join(
        format(nibble | (CONTINUE_FLAG if i < last else 0), f"0{GROUP_BITS}b")
        for i, nibble in enumerate(nibbles)
    )
