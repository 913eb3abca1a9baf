"""
BITS Evaluator

Reduces a packet tree to its two aggregates:

    version_sum   the version field summed over every packet
    value         the arithmetic result of the expression tree

Both traversals use an explicit work stack. Values are Python ints, so
products of large literals never wrap or overflow.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from bitspkt.errors import ArityError, EmptyOperands
from bitspkt.framing import COMPARISON_ARITY
from bitspkt.header import TypeId
from bitspkt.packet import Packet, walk


OPERATORS: dict[TypeId, Callable[[list[int]], int]] = {
    TypeId.SUM: sum,
    TypeId.PRODUCT: math.prod,
    TypeId.MINIMUM: min,
    TypeId.MAXIMUM: max,
    TypeId.GREATER_THAN: lambda ops: int(ops[0] > ops[1]),
    TypeId.LESS_THAN: lambda ops: int(ops[0] < ops[1]),
    TypeId.EQUAL: lambda ops: int(ops[0] == ops[1]),
}


def version_sum(packet: Packet) -> int:
    return sum(node.version for _, node in walk(packet))


def apply_operator(type_id: TypeId, operands: list[int], offset: Optional[int] = None) -> int:
    """Combine already-evaluated operands under an operator type id.

    SUM of nothing is 0 and PRODUCT of nothing is 1.

    Raises:
        EmptyOperands: MINIMUM or MAXIMUM of no operands
        ArityError: a comparison without exactly two operands
    """
    if type_id is TypeId.LITERAL:
        raise ValueError("LITERAL is not an operator")
    if type_id in (TypeId.MINIMUM, TypeId.MAXIMUM) and not operands:
        raise EmptyOperands(f"{type_id.name} of no operands", offset)
    if type_id.is_comparison and len(operands) != COMPARISON_ARITY:
        raise ArityError(
            f"{type_id.name} needs {COMPARISON_ARITY} operands, got {len(operands)}",
            offset,
        )
    return OPERATORS[type_id](operands)


def evaluate(packet: Packet) -> int:
    """Compute the value of a packet tree.

    Post-order over an explicit stack: an operator is visited once to push
    its children and once more to fold their values, which by then sit on
    top of the value stack in child order.
    """
    values: list[int] = []
    stack: list[tuple[Packet, bool]] = [(packet, False)]
    while stack:
        node, expanded = stack.pop()
        if node.is_literal:
            values.append(node.literal_value)
        elif not expanded:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
        else:
            split = len(values) - len(node.children)
            operands = values[split:]
            del values[split:]
            values.append(apply_operator(node.type_id, operands, node.offset))
    return values.pop()
