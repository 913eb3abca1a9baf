"""
BITS Decode Errors

Every failure the decoder can report is a DecodeError. Errors are raised at
the point of violation and carry the bit offset where it was detected; the
decode aborts and no partial tree is ever returned.
"""

from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """Base class for all BITS decoding failures."""

    def __init__(self, message: str, offset: Optional[int] = None):
        where = f" at bit {offset}" if offset is not None else ""
        super().__init__(f"{message}{where}")
        self.offset = offset


class MalformedInput(DecodeError):
    """The transmission contains a character that is not a hex digit."""

    def __init__(self, char: str, index: int):
        super().__init__(f"Invalid hex digit {char!r} at index {index}")
        self.char = char
        self.index = index


class TruncatedStream(DecodeError):
    """A field declares more bits than the stream has left."""


class FramingOverrun(DecodeError):
    """A child packet spills past its parent's declared total-bits region."""


class ArityError(DecodeError):
    """A comparison packet does not have exactly two children."""


class EmptyOperands(DecodeError):
    """Minimum or Maximum applied to no operands."""
