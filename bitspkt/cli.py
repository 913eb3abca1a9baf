#!/usr/bin/env python3
"""
bitspkt - BITS transmission decoder

Command-line interface for decoding and inspecting BITS packet trees.

Usage:
    bitspkt decode <source>           Print the version sum and the value
    bitspkt tree <source>             Print the packet tree
    bitspkt stats <source>            Summarize the packet tree

<source> is a file holding the hex transmission, or the hex itself.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import textwrap
from typing import Optional

from bitspkt import DecodeError, Transmission
from bitspkt.framing import LengthTypeId
from bitspkt.graph import tree_stats
from bitspkt.packet import Packet, walk


# ============================================================================
# Formatting helpers
# ============================================================================

class C:
    """ANSI colors."""
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def off():
        C.BOLD = C.DIM = C.RED = C.GREEN = C.YELLOW = ""
        C.CYAN = C.RESET = ""


def header(text: str) -> str:
    return f"\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}\n{C.BOLD}  {text}{C.RESET}\n{C.BOLD}{C.CYAN}{'─' * 60}{C.RESET}"


def ok(text: str) -> str:
    return f"  {C.GREEN}✓{C.RESET} {text}"


def warn(text: str) -> str:
    return f"  {C.YELLOW}⚠{C.RESET} {text}"


def fail(text: str) -> str:
    return f"  {C.RED}✗{C.RESET} {text}"


def dim(text: str) -> str:
    return f"{C.DIM}{text}{C.RESET}"


def describe(packet: Packet) -> str:
    """One-line summary of a packet, without its children."""
    span = dim(f"[{packet.offset}:{packet.end}]")
    if packet.is_literal:
        return f"{C.GREEN}{packet.literal_value}{C.RESET}  v{packet.version} {span}"
    framing = "bits" if packet.length_type is LengthTypeId.TOTAL_BITS else "count"
    return (
        f"{C.BOLD}{packet.type_id.symbol}{C.RESET}  v{packet.version} "
        f"{dim(f'{len(packet.children)} children by {framing}')} {span}"
    )


def render_tree(packet: Packet, max_depth: Optional[int] = None) -> list[str]:
    lines = []
    for depth, node in walk(packet):
        if max_depth is not None and depth > max_depth:
            continue
        line = f"  {'  ' * depth}{describe(node)}"
        if max_depth is not None and depth == max_depth and node.children:
            line += f" {C.YELLOW}…{C.RESET}"
        lines.append(line)
    return lines


# ============================================================================
# Input
# ============================================================================

def load_transmission(source: str) -> Transmission:
    """A regular file if one exists at `source`, otherwise the argument is the hex."""
    if os.path.isfile(source):
        return Transmission.load(source)
    return Transmission(source.strip(), origin="<argument>")


# ============================================================================
# Commands
# ============================================================================

def cmd_decode(args):
    """Decode a transmission and print its version sum and value."""
    tx = load_transmission(args.source)
    result = tx.result()

    if args.json:
        print(json.dumps({
            "origin": tx.origin,
            "bits": len(tx),
            "padding": tx.padding,
            "version_sum": result.version_sum,
            "value": result.value,
        }, indent=2))
        return

    print(header(f"DECODE: {tx.origin}"))
    print(f"  {C.DIM}Size: {len(tx.text)} hex digits ({len(tx)} bits)  |  "
          f"Packet: {tx.packet.bit_length} bits  |  Padding: {tx.padding} bits{C.RESET}")
    print(ok(f"Version sum: {C.BOLD}{result.version_sum}{C.RESET}"))
    print(ok(f"Value:       {C.BOLD}{result.value}{C.RESET}"))


def cmd_tree(args):
    """Print the decoded packet tree."""
    tx = load_transmission(args.source)
    packet = tx.packet

    print(header(f"TREE: {tx.origin}"))
    for line in render_tree(packet, args.max_depth):
        print(line)


def cmd_stats(args):
    """Summarize the decoded packet tree."""
    tx = load_transmission(args.source)
    stats = tree_stats(tx.packet)

    print(header(f"STATS: {tx.origin}"))
    print(f"  Packets:   {stats.packets} ({stats.literals} literal, {stats.operators} operator)")
    print(f"  Depth:     {stats.depth}")
    print(f"  Bits:      {stats.bit_length} (+{tx.padding} padding)")

    print(f"\n  {C.BOLD}By type{C.RESET}")
    for name, count in sorted(stats.by_type.items(), key=lambda kv: -kv[1]):
        print(f"    {name:13s} {count}")

    if stats.by_length_type:
        print(f"\n  {C.BOLD}Framing{C.RESET}")
        for name, count in sorted(stats.by_length_type.items()):
            print(f"    {name:13s} {count}")

    if tx.padding >= 8:
        print(warn(f"{tx.padding} trailing bits after the outermost packet"))


# ============================================================================
# CLI setup
# ============================================================================

def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(
        prog="bitspkt",
        description="bitspkt - BITS transmission decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
        examples:
          bitspkt decode 9C0141080250320F1802104A08
          bitspkt decode input/transmission.txt --json
          bitspkt tree A0016C880162017C3686B18A3D4780 --max-depth 2
          bitspkt stats input/transmission.txt
        """),
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    # decode
    p = sub.add_parser("decode", aliases=["dec"], help="Print version sum and value")
    p.add_argument("source", help="Hex transmission, or a file containing it")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of text")

    # tree
    p = sub.add_parser("tree", help="Print the packet tree")
    p.add_argument("source", help="Hex transmission, or a file containing it")
    p.add_argument("-d", "--max-depth", type=int, help="Stop descending below this depth")

    # stats
    p = sub.add_parser("stats", help="Summarize the packet tree")
    p.add_argument("source", help="Hex transmission, or a file containing it")

    args = parser.parse_args(argv)

    if args.no_color:
        C.off()

    if not args.command:
        parser.print_help()
        return

    # Dispatch
    commands = {
        "decode": cmd_decode, "dec": cmd_decode,
        "tree": cmd_tree,
        "stats": cmd_stats,
    }

    handler = commands.get(args.command)
    if handler:
        try:
            handler(args)
        except FileNotFoundError as e:
            print(fail(f"File not found: {e}"))
            sys.exit(1)
        except OSError as e:
            print(fail(f"Cannot read input: {e}"))
            sys.exit(1)
        except DecodeError as e:
            print(fail(f"{type(e).__name__}: {e}"))
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
