"""
bitspkt - BITS packet decoder
Decodes hex-encoded BITS transmissions into packet trees and evaluates them.

Bits:      hex -> BitSequence, MSB-first BitCursor with bounded regions
Packets:   header, literal groups, total-bits / packet-count operator framing
Evaluator: version sum and expression value over the packet tree
"""

__version__ = "0.1.0"

from bitspkt.errors import (
    DecodeError,
    MalformedInput,
    TruncatedStream,
    FramingOverrun,
    ArityError,
    EmptyOperands,
)
from bitspkt.bits import BitSequence, BitCursor
from bitspkt.header import Header, TypeId
from bitspkt.framing import LengthTypeId
from bitspkt.packet import Packet, LiteralValue, Children, parse_packet, parse_transmission, walk
from bitspkt.evaluator import evaluate, version_sum
from bitspkt.core import DecodeResult, Transmission, decode_and_evaluate

__all__ = [
    "DecodeError",
    "MalformedInput",
    "TruncatedStream",
    "FramingOverrun",
    "ArityError",
    "EmptyOperands",
    "BitSequence",
    "BitCursor",
    "Header",
    "TypeId",
    "LengthTypeId",
    "Packet",
    "LiteralValue",
    "Children",
    "parse_packet",
    "parse_transmission",
    "walk",
    "evaluate",
    "version_sum",
    "DecodeResult",
    "Transmission",
    "decode_and_evaluate",
]
