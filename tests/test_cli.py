"""
CLI tests

1. decode (text and JSON)
2. tree and stats
3. Input files and failures
"""

import json

import pytest

from bitspkt.cli import main


def run(capsys, *argv):
    main(["--no-color", *argv])
    return capsys.readouterr().out


# --- Test 1: decode ---

def test_decode_text(capsys):
    out = run(capsys, "decode", "C200B40A82")
    assert "DECODE: <argument>" in out
    assert "Version sum: 14" in out
    assert "Value:       3" in out


def test_decode_alias(capsys):
    out = run(capsys, "dec", "9C0141080250320F1802104A08")
    assert "Value:       1" in out


def test_decode_json(capsys):
    out = run(capsys, "decode", "D2FE28", "--json")
    data = json.loads(out)
    assert data == {
        "origin": "<argument>",
        "bits": 24,
        "padding": 3,
        "version_sum": 6,
        "value": 2021,
    }


# --- Test 2: tree and stats ---

def test_tree(capsys):
    out = run(capsys, "tree", "A0016C880162017C3686B18A3D4780")
    assert out.count("children by") == 3
    assert "[0:" in out
    assert "…" not in out


def test_tree_max_depth(capsys):
    out = run(capsys, "tree", "A0016C880162017C3686B18A3D4780", "--max-depth", "0")
    assert out.count("children by") == 1
    assert "…" in out


def test_stats(capsys):
    out = run(capsys, "stats", "A0016C880162017C3686B18A3D4780")
    assert "Packets:   8 (5 literal, 3 operator)" in out
    assert "Depth:     3" in out
    assert "LITERAL" in out


# --- Test 3: Files and failures ---

def test_source_file(capsys, tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("04005AC33890\n")
    out = run(capsys, "decode", str(path), "--json")
    data = json.loads(out)
    assert data["value"] == 54
    assert data["origin"] == str(path)


def test_decode_error_exits(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--no-color", "decode", "C200B4"])
    assert info.value.code == 1
    assert "TruncatedStream" in capsys.readouterr().out


def test_malformed_argument(capsys):
    with pytest.raises(SystemExit):
        main(["--no-color", "decode", "not-hex"])
    assert "MalformedInput" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    main([])
    assert "usage: bitspkt" in capsys.readouterr().out


def test_directory_is_not_a_source(capsys, tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["--no-color", "decode", str(tmp_path)])
    assert info.value.code == 1
    assert "MalformedInput" in capsys.readouterr().out
