import re

import pytest

from docbot.commands.cursor import TextCursor
from docbot.commands.parse import Ok, Err
from docbot.commands.parsers import (
    Parser, integer, literal, phrase, remaining, sequence, whitespace, word,
)


# --- TextCursor ---

def test_peek_does_not_advance():
    c = TextCursor("abc")
    assert c.peek(2) == "ab"
    assert c.peek(10) == "abc"
    assert c.position == 0


def test_peek_at_end_is_empty():
    c = TextCursor("ab")
    c.read_remaining()
    assert c.peek() == ""
    assert not c.can_read()


def test_read_chars_clamps_past_end():
    c = TextCursor("abc")
    c.read_char()
    assert c.read_chars(10) == "bc"
    assert c.position == 3


def test_read_while():
    c = TextCursor("   x")
    assert c.read_while(str.isspace) == "   "
    assert c.read_while(str.isspace) == ""
    assert c.position == 3


def test_read_regex_is_anchored():
    c = TextCursor("ab12")
    assert c.read_regex(re.compile(r"[0-9]+")) == ""
    assert c.position == 0
    c.read_chars(2)
    assert c.read_regex(re.compile(r"[0-9]+")) == "12"
    assert c.position == 4


# --- literal ---

@pytest.mark.parametrize("text,prefix", [
    ("doc String", "doc"),
    ("javadoc", "javadoc"),
    ("long  x", "long "),
    ("!", "!"),
    ("anything", ""),
])
def test_literal_prefix(text, prefix):
    c = TextCursor(text)
    result = literal(prefix).parse(c)
    assert result == Ok(prefix)
    assert c.position == len(prefix)


@pytest.mark.parametrize("text,prefix", [
    ("Doc", "doc"),
    ("do", "doc"),
    ("", "doc"),
    (" doc", "doc"),
])
def test_literal_mismatch_does_not_advance(text, prefix):
    c = TextCursor(text)
    result = literal(prefix).parse(c)
    assert result == Err(f"Expected <{prefix}>", 0)
    assert c.position == 0


# --- remaining / whitespace / word / integer ---

def test_remaining():
    c = TextCursor("doc ab")
    c.read_chars(4)
    assert remaining(2).parse(c) == Ok("ab")
    assert not c.can_read()


def test_remaining_too_short_consumes_nothing():
    c = TextCursor("a")
    result = remaining(2).parse(c)
    assert not result.ok
    assert result.message == "Expected at least 2 characters!"
    assert c.position == 0


def test_whitespace():
    c = TextCursor(" \t\nx")
    assert whitespace().parse(c) == Ok(" \t\n")
    assert whitespace().parse(c) == Err("Expected some whitespace", 3)


def test_word_stops_at_whitespace():
    c = TextCursor("String#strip() rest")
    assert word().parse(c) == Ok("String#strip()")
    assert c.peek() == " "


@pytest.mark.parametrize("text", ["", "   x"])
def test_word_needs_a_character(text):
    assert word().parse_text(text) == Err("Expected a word", 0)


@pytest.mark.parametrize("text,value,position", [
    ("0", 0, 1),
    ("42 rest", 42, 2),
    ("007x", 7, 3),
    ("2147483647", 2 ** 31 - 1, 10),
])
def test_integer(text, value, position):
    c = TextCursor(text)
    assert integer().parse(c) == Ok(value)
    assert c.position == position


def test_integer_requires_digits():
    assert integer().parse_text("-1") == Err("Expected an integer", 0)
    assert integer().parse_text("x") == Err("Expected an integer", 0)


def test_integer_overflow():
    result = integer().parse_text("2147483648")
    assert not result.ok
    assert result.message.startswith("Couldn't parse number")


def test_integer_far_too_long_is_an_error():
    result = integer().parse_text("9" * 5000)
    assert not result.ok
    assert result.message.startswith("Couldn't parse number")
    assert result.position == 5000


def test_integer_leading_zeros():
    assert integer().parse_text("0" * 5000 + "7").value == 7
    assert integer().parse_text("000").value == 0
    assert integer().parse_text("0002147483647").value == 2 ** 31 - 1


# --- phrase ---

@pytest.mark.parametrize("text", ["hello", "hello world", "a", "List#of(E...)", "  spaced  "])
def test_phrase_double_quotes_round_trip(text):
    assert phrase().parse_text(f'"{text}"') == Ok(text)


def test_phrase_single_quotes():
    c = TextCursor("'two words' tail")
    assert phrase().parse(c) == Ok("two words")
    assert c.peek(5) == " tail"


def test_phrase_other_quote_is_literal():
    assert phrase().parse_text("'it\"s'") == Ok('it"s')


def test_phrase_escaped_quote():
    assert phrase().parse_text(r'"a\"b"') == Ok('a"b')


def test_phrase_escaped_backslash():
    assert phrase().parse_text(r'"a\\b"') == Ok("a\\b")


def test_phrase_without_quotes_is_a_word():
    c = TextCursor("word rest")
    assert phrase().parse(c) == Ok("word")
    assert c.position == 4


def test_phrase_unterminated():
    result = phrase().parse_text('"never closed')
    assert not result.ok
    assert result.message == 'Expected a closing "'


def test_phrase_escape_at_end_is_unterminated():
    assert not phrase().parse_text('"abc\\"').ok


def test_phrase_empty():
    result = phrase().parse_text('""')
    assert result == Err("Expected some (optionally quoted) phrase", 2)


# --- combinators ---

def test_or_takes_first_success():
    keyword = literal("javadoc") | literal("doc")
    assert keyword.parse_text("javadoc x") == Ok("javadoc")
    assert keyword.parse_text("doc x") == Ok("doc")
    assert not keyword.parse_text("jdoc").ok


def test_or_rewinds_before_second_branch():
    # The first branch consumes "long" before failing on the missing whitespace
    long_then_space = sequence(literal("long"), whitespace())
    seen = []

    def spy(cursor):
        seen.append(cursor.position)
        return Ok(cursor.read_remaining())

    c = TextCursor("doc longValue")
    c.read_chars(4)
    result = long_then_space.or_(Parser(spy)).parse(c)
    assert seen == [4]
    assert result == Ok("longValue")


def test_or_returns_second_failure_unchanged():
    second = Parser(lambda cursor: Err("second", 99))
    assert (literal("a") | second).parse_text("b") == Err("second", 99)


def test_optional():
    c = TextCursor("long x")
    flag = sequence(literal("long"), whitespace()).optional()
    assert flag.parse(c) == Ok(["long", " "])
    c = TextCursor("longer")
    assert flag.parse(c) == Ok(None)
    assert c.position == 0


def test_sequence_stops_at_first_failure():
    c = TextCursor("short x sess")
    result = sequence(word(), whitespace(), integer()).parse(c)
    assert result == Err("Expected an integer", 6)


def test_map():
    number = integer().map(lambda n: n * 2)
    assert number.parse_text("21") == Ok(42)
    assert not number.parse_text("x").ok
