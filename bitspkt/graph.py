"""
BITS Packet Graph

Exports a packet tree as a NetworkX DiGraph for inspection. Nodes are
numbered in discovery order (the root is 0) and carry the packet's fields,
including its bit offset; edges run parent -> child and carry the child's
position among its siblings.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

import networkx as nx

from bitspkt.header import TypeId
from bitspkt.packet import Packet


def to_graph(packet: Packet) -> nx.DiGraph:
    """Build a DiGraph of the tree rooted at `packet`."""
    graph = nx.DiGraph()
    graph.graph["root"] = 0
    next_key = 1
    stack = [(0, packet)]
    while stack:
        key, node = stack.pop()
        graph.add_node(
            key,
            offset=node.offset,
            version=node.version,
            type_id=node.type_id,
            bit_length=node.bit_length,
            value=node.literal_value,
            length_type=node.length_type,
        )
        for index, child in enumerate(node.children):
            graph.add_edge(key, next_key, index=index)
            stack.append((next_key, child))
            next_key += 1
    return graph


@dataclass
class TreeStats:
    packets: int
    literals: int
    operators: int
    depth: int
    bit_length: int
    by_type: dict[str, int] = field(default_factory=dict)
    by_length_type: dict[str, int] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"<TreeStats: {self.packets} packets ({self.literals} literal, "
            f"{self.operators} operator) depth={self.depth} bits={self.bit_length}>"
        )


def tree_stats(packet: Packet) -> TreeStats:
    """Summarize a packet tree: counts, nesting depth, framing usage."""
    graph = to_graph(packet)
    types = Counter(data["type_id"].name for _, data in graph.nodes(data=True))
    framing = Counter(
        data["length_type"].name
        for _, data in graph.nodes(data=True)
        if data["length_type"] is not None
    )
    literals = types.get(TypeId.LITERAL.name, 0)
    return TreeStats(
        packets=graph.number_of_nodes(),
        literals=literals,
        operators=graph.number_of_nodes() - literals,
        depth=nx.dag_longest_path_length(graph),
        bit_length=packet.bit_length,
        by_type=dict(types),
        by_length_type=dict(framing),
    )
