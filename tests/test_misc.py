import locale

import pytest

from boblight.misc import (
    clamp,
    convert_float_locale,
    get_word,
    hex_str_to_int,
    print_error,
    round32,
    str_to_bool,
    str_to_float,
    str_to_int,
    to_string,
)


def test_get_word_splits_first_word():
    assert get_word("set light 1") == ("set", " light 1")


def test_get_word_trailing_whitespace_is_dropped():
    assert get_word("  last   ") == ("last", "")


def test_get_word_empty_returns_none():
    assert get_word("   \t ") is None
    assert get_word("") is None


def test_get_word_walks_all_words():
    text = "  light  left scan 0.0 50.0  "
    words = []
    found = get_word(text)
    while found is not None:
        word, text = found
        words.append(word)
        found = get_word(text)
    assert words == ["light", "left", "scan", "0.0", "50.0"]


def test_convert_float_locale_replaces_separators():
    point = locale.localeconv()["decimal_point"]
    assert convert_float_locale("1,5 2.5") == f"1{point}5 2{point}5"


def test_to_string_values():
    assert to_string(True) == "1"
    assert to_string(False) == "0"
    assert to_string(42) == "42"
    assert to_string(0.5) == "0.5"
    assert to_string(100.0) == "100"
    assert to_string("two words") == "two"


def test_clamp():
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10
    assert clamp(0.5, 0.0, 1.0) == 0.5


def test_round32_halves_away_from_zero():
    assert round32(2.5) == 3
    assert round32(-2.5) == -3
    assert round32(0.4) == 0
    assert round32(7.0) == 7


def test_str_to_int_bases():
    assert str_to_int("42") == 42
    assert str_to_int("  -17 trailing") == -17
    assert str_to_int("0x1f") == 31
    assert str_to_int("010") == 8


def test_str_to_int_rejects_text():
    with pytest.raises(ValueError):
        str_to_int("abc")


def test_hex_str_to_int():
    assert hex_str_to_int("ff") == 255
    assert hex_str_to_int("0x10") == 16
    with pytest.raises(ValueError):
        hex_str_to_int("zz")


def test_str_to_float():
    assert str_to_float("1.5e3") == 1500.0
    assert str_to_float(" -0.25xyz") == -0.25
    with pytest.raises(ValueError):
        str_to_float("abc")


@pytest.mark.parametrize(
    "text,expected",
    [("yes", True), ("on", True), ("true", True), ("1", True), ("5", True),
     ("off", False), ("no", False), ("false", False), ("0 ", False)],
)
def test_str_to_bool(text, expected):
    assert str_to_bool(text) is expected


def test_str_to_bool_rejects_unknown():
    with pytest.raises(ValueError):
        str_to_bool("maybe")
    with pytest.raises(ValueError):
        str_to_bool("   ")


def test_print_error(capsys):
    print_error("boom")
    assert capsys.readouterr().err == "ERROR: boom\n"