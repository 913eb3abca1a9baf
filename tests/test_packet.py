"""
Packet assembly tests

1. Literal packets
2. Golden tree shapes
3. Bit accounting: bit_length, declared lengths and counts
4. Construction invariants
5. Deep nesting without recursion
"""

import sys

import pytest

from bitspkt.bits import BitSequence
from bitspkt.errors import ArityError
from bitspkt.framing import LengthTypeId
from bitspkt.header import TypeId
from bitspkt.packet import Children, LiteralValue, Packet, parse_bits, parse_packet, parse_transmission, walk
from bitspkt.evaluator import evaluate, version_sum

from builders import build_literal, build_operator, to_hex


GOLDEN = [
    "8A004A801A8002F478",
    "620080001611562C8802118E34",
    "C0015000016115A2E0802F182340",
    "A0016C880162017C3686B18A3D4780",
    "C200B40A82",
    "04005AC33890",
    "880086C3E88112",
    "CE00C43D881120",
    "D8005AC2A8F0",
    "F600BC2D8F",
    "9C005AC2F8F0",
    "9C0141080250320F1802104A08",
    "38006F45291200",
    "EE00D40C823060",
]


# --- Test 1: Literal packets ---

def test_literal_packet():
    packet = parse_transmission("D2FE28")
    assert packet == Packet(6, TypeId.LITERAL, LiteralValue(2021, 3))
    assert packet == Packet.literal(6, 2021)
    assert packet.is_literal
    assert packet.literal_value == 2021
    assert packet.children == ()
    assert packet.length_type is None
    assert packet.bit_length == 21
    assert packet.offset == 0


def test_trailing_bits_are_ignored():
    assert parse_transmission("D2FE28FF") == parse_transmission("D2FE28")


# --- Test 2: Golden tree shapes ---

def test_nested_chain():
    packet = parse_transmission("8A004A801A8002F478")
    chain = list(walk(packet))
    assert [node.version for _, node in chain] == [4, 1, 5, 6]
    assert [depth for depth, _ in chain] == [0, 1, 2, 3]
    assert chain[-1][1].is_literal


@pytest.mark.parametrize("hex_text,length_type", [
    ("620080001611562C8802118E34", LengthTypeId.PACKET_COUNT),
    ("C0015000016115A2E0802F182340", LengthTypeId.TOTAL_BITS),
])
def test_two_operators_of_two_literals(hex_text, length_type):
    packet = parse_transmission(hex_text)
    assert packet.length_type is length_type
    assert len(packet.children) == 2
    for child in packet.children:
        assert not child.is_literal
        assert len(child.children) == 2
        assert all(grandchild.is_literal for grandchild in child.children)


def test_five_literals_three_deep():
    packet = parse_transmission("A0016C880162017C3686B18A3D4780")
    assert len(packet.children) == 1
    middle = packet.children[0]
    assert len(middle.children) == 1
    inner = middle.children[0]
    assert len(inner.children) == 5
    assert all(child.is_literal for child in inner.children)


def test_walk_is_pre_order():
    packet = parse_transmission("EE00D40C823060")
    visited = [(depth, node.literal_value) for depth, node in walk(packet)]
    assert visited == [(0, None), (1, 1), (1, 2), (1, 3)]


# --- Test 3: Bit accounting ---

@pytest.mark.parametrize("hex_text", GOLDEN)
def test_bit_length_matches_cursor(hex_text):
    bits = BitSequence.from_hex(hex_text)
    for _, node in walk(parse_bits(bits)):
        cursor = bits.cursor(node.offset)
        reparsed = parse_packet(cursor)
        assert cursor.position == node.end
        assert reparsed == node


@pytest.mark.parametrize("hex_text", GOLDEN)
def test_reparse_consumed_slice(hex_text):
    bits = BitSequence.from_hex(hex_text)
    for _, node in walk(parse_bits(bits)):
        region = bits.slice(node.offset, node.end)
        reparsed = parse_bits(region)
        assert reparsed == node
        assert reparsed.bit_length == len(region)


@pytest.mark.parametrize("hex_text", GOLDEN)
def test_declared_fields_match_children(hex_text):
    bits = BitSequence.from_hex(hex_text)
    for _, node in walk(parse_bits(bits)):
        if node.is_literal:
            continue
        field = bits.cursor(node.offset + 7).read(node.length_type.field_bits)
        if node.length_type is LengthTypeId.TOTAL_BITS:
            assert field == sum(child.bit_length for child in node.children)
        else:
            assert field == len(node.children)


@pytest.mark.parametrize("hex_text", GOLDEN)
def test_siblings_are_contiguous(hex_text):
    for _, node in walk(parse_transmission(hex_text)):
        children = node.children
        if not children:
            continue
        assert children[0].offset == node.offset + 6 + 1 + node.length_type.field_bits
        for left, right in zip(children, children[1:]):
            assert right.offset == left.end
        assert children[-1].end == node.end


def test_builders_round_trip():
    bits = build_operator(
        5, TypeId.PRODUCT,
        [
            build_literal(1, 7),
            build_operator(2, TypeId.MINIMUM, [build_literal(3, 300), build_literal(4, 12)],
                           LengthTypeId.TOTAL_BITS),
        ],
    )
    packet = parse_transmission(to_hex(bits))
    expected = Packet.operator(5, TypeId.PRODUCT, [
        Packet.literal(1, 7),
        Packet.operator(2, TypeId.MINIMUM, [Packet.literal(3, 300), Packet.literal(4, 12)],
                        LengthTypeId.TOTAL_BITS),
    ])
    assert packet == expected
    assert packet.bit_length == expected.bit_length == len(bits)


# --- Test 4: Construction invariants ---

def test_literal_needs_literal_payload():
    with pytest.raises(ValueError):
        Packet(0, TypeId.LITERAL, Children(()))
    with pytest.raises(ValueError):
        Packet(0, TypeId.SUM, LiteralValue(1))


def test_version_must_fit_three_bits():
    with pytest.raises(ValueError):
        Packet.literal(8, 1)


def test_comparison_arity_on_construction():
    with pytest.raises(ArityError):
        Packet.operator(0, TypeId.EQUAL, [Packet.literal(0, 1)])
    Packet.operator(0, TypeId.EQUAL, [Packet.literal(0, 1), Packet.literal(0, 1)])


def test_type_id_is_coerced():
    packet = Packet(1, 4, LiteralValue(9))
    assert packet.type_id is TypeId.LITERAL


def test_packets_are_immutable():
    packet = Packet.literal(1, 2)
    with pytest.raises(AttributeError):
        packet.version = 3


# --- Test 5: Deep nesting ---

def test_nesting_deeper_than_recursion_limit():
    depth = sys.getrecursionlimit() + 500
    bits = "000000" "1" "00000000001"
    stream = bits * depth + build_literal(7, 42)
    packet = parse_transmission(to_hex(stream))

    assert packet.bit_length == len(stream)
    assert max(d for d, _ in walk(packet)) == depth
    assert version_sum(packet) == 7
    assert evaluate(packet) == 42
    assert packet == parse_transmission(to_hex(stream))
    assert hash(packet) == hash(parse_transmission(to_hex(stream)))
    assert packet != parse_transmission(to_hex(bits * depth + build_literal(7, 43)))


def test_equality_ignores_offset():
    bits = BitSequence.from_hex("A0016C880162017C3686B18A3D4780")
    packet = parse_bits(bits)
    inner = packet.children[0]
    reparsed = parse_bits(bits.slice(inner.offset, inner.end))
    assert reparsed.offset == 0 != inner.offset
    assert reparsed == inner
    assert hash(reparsed) == hash(inner)
    assert inner != packet
    assert Packet.literal(1, 5) != Packet.operator(1, TypeId.SUM, [Packet.literal(1, 5)])
