import re

from gantt_player import colors
from gantt_player.colors import ColorTable, color_for, hash_code, hsl_to_hex, hue_for


def test_hash_code_matches_java_string_hash():
    assert hash_code("") == 0
    assert hash_code("a") == 97
    assert hash_code("P1") == 2529
    assert hash_code("hello") == 99162322


def test_hash_code_wraps_to_signed_32_bit():
    # "polygenelubricants".hashCode() == Integer.MIN_VALUE in Java.
    assert hash_code("polygenelubricants") == -2147483648
    value = hash_code("a fairly long process identifier string")
    assert -(2 ** 31) <= value < 2 ** 31


def test_hue_in_range():
    for pid in ("P1", "P2", "worker-17", "polygenelubricants"):
        assert 0 <= hue_for(pid) < 360


def test_color_for_is_deterministic_hex():
    assert color_for("P1") == color_for("P1")
    assert re.fullmatch(r"#[0-9a-f]{6}", color_for("P1"))


def test_hsl_to_hex_primary_hues():
    assert hsl_to_hex(0, 100, 50) == "#ff0000"
    assert hsl_to_hex(120, 100, 50) == "#00ff00"
    assert hsl_to_hex(240, 100, 50) == "#0000ff"


def test_hash_code_uses_utf16_code_units():
    # U+1F600 is the surrogate pair D83D DE00, as JavaScript's charCodeAt sees it.
    assert hash_code("\U0001F600") == 0xD83D * 31 + 0xDE00
    assert hash_code("P\U0001F600") == (ord("P") * 31 + 0xD83D) * 31 + 0xDE00


def test_color_table_memoizes_and_resets(monkeypatch):
    calls = []

    def counting_color_for(pid):
        calls.append(pid)
        return color_for(pid)

    monkeypatch.setattr(colors, "color_for", counting_color_for)

    table = ColorTable()
    first = table.color("P1")
    assert table.color("P1") == first
    table.color("P2")
    assert calls == ["P1", "P2"]

    table.reset()
    assert table.color("P1") == first
    assert calls == ["P1", "P2", "P1"]
