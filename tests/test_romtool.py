"""
Tests for the ROM packing / disassembly tool.
"""

import pytest

from romtool import listing, main, parse_compiled


def test_parse_compiled():
    assert parse_compiled("0x00 0xE0\n0x12 0x00") == bytes([0x00, 0xE0, 0x12, 0x00])


def test_parse_compiled_bad_token():
    with pytest.raises(ValueError):
        parse_compiled("0x00 0xZZ")


def test_listing():
    assert listing(bytes([0x00, 0xE0, 0xA2, 0x0A, 0x01])) == [
        "200: 00E0  CLS",
        "202: A20A  LD I, 0x20a",
        "204: 01    DB 0x01",
    ]


def test_listing_unknown_word():
    assert listing(bytes([0xFF, 0xFF])) == ["200: FFFF  DW 0xFFFF"]


def test_pack_adds_extension(tmp_path):
    source = tmp_path / "game.txt"
    source.write_text("0x60 0x01 0x12 0x02")
    out = tmp_path / "game"
    assert main(["-c", str(source), str(out)]) == 0
    assert (tmp_path / "game.ch8").read_bytes() == bytes([0x60, 0x01, 0x12, 0x02])


def test_disassemble_to_file(tmp_path):
    rom = tmp_path / "game.ch8"
    rom.write_bytes(bytes([0x60, 0x01, 0x12, 0x02]))
    out = tmp_path / "game.asm"
    main(["-d", str(rom), str(out)])
    assert out.read_text() == "200: 6001  LD V0, 0x01\n202: 1202  JP 0x202\n"


def test_disassemble_to_stdout(tmp_path, capsys):
    rom = tmp_path / "game.ch8"
    rom.write_bytes(bytes([0x00, 0xEE]))
    main(["-d", str(rom)])
    assert capsys.readouterr().out == "200: 00EE  RET\n"


def test_pack_needs_output(tmp_path):
    source = tmp_path / "game.txt"
    source.write_text("0x00 0xE0")
    with pytest.raises(SystemExit):
        main(["-c", str(source)])
