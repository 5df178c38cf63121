"""Argument parsers: small combinators for reading command arguments.

Each parser reads from a TextCursor and returns Ok(value) or Err(message,
position); none of them raise. They compose with `a | b` (try a, and if it
fails rewind and try b), `sequence(...)`, `.optional()` and `.map(fn)`.

Examples:
    >>> keyword = literal("javadoc") | literal("doc")
    >>> keyword.parse_text("doc String").value
    'doc'
    >>> phrase().parse_text('"a \\\\"quoted\\\\" word" rest').value
    'a "quoted" word'

Parsers used by the commands:
    literal(text)        exact, case-sensitive text
    remaining(n)         everything left, at least n characters
    whitespace()         one or more whitespace characters
    word()               one or more non-whitespace characters
    integer()            decimal digits, 0 .. 2**31 - 1
    phrase()             a quoted phrase with backslash escapes, or a word
"""

import re

from docbot.commands.cursor import TextCursor
from docbot.commands.parse import Ok, Err

_QUOTE_CHARS = ('"', "'")
_ESCAPE_CHAR = "\\"
_WORD_RE = re.compile(r"\S+")
_DIGITS_RE = re.compile(r"[0-9]+")
_MAX_INTEGER = 2 ** 31 - 1
_MAX_INTEGER_TEXT = str(_MAX_INTEGER)


class Parser:
    """Wraps a function cursor -> Ok | Err and adds the combinator methods."""

    def __init__(self, fn, name=None):
        self._fn = fn
        self.name = name or fn.__name__

    def __repr__(self):
        return f"Parser({self.name})"

    def parse(self, cursor):
        return self._fn(cursor)

    def parse_text(self, text):
        """Parse a fresh cursor over text. Handy for one-shot arguments."""
        return self.parse(TextCursor(text))

    def or_(self, other):
        """Try self; on failure put the cursor back where it was and try other."""
        def alternative(cursor):
            start = cursor.position
            result = self.parse(cursor)
            if result.ok:
                return result
            cursor.position = start
            return other.parse(cursor)
        return Parser(alternative, f"{self.name} | {other.name}")

    __or__ = or_

    def optional(self):
        """Succeed with None (and no input consumed) when self fails."""
        def maybe(cursor):
            start = cursor.position
            result = self.parse(cursor)
            if result.ok:
                return result
            cursor.position = start
            return Ok(None)
        return Parser(maybe, f"optional({self.name})")

    def map(self, fn):
        def mapped(cursor):
            result = self.parse(cursor)
            if result.ok:
                return Ok(fn(result.value))
            return result
        return Parser(mapped, self.name)


def parser(fn):
    """Decorator: turn a function cursor -> Ok | Err into a Parser."""
    return Parser(fn)


def sequence(*parsers):
    """Run parsers one after another. Ok(list of values) or the first Err."""
    def run(cursor):
        values = []
        for p in parsers:
            result = p.parse(cursor)
            if not result.ok:
                return result
            values.append(result.value)
        return Ok(values)
    return Parser(run, " ".join(p.name for p in parsers))


def literal(text):
    @parser
    def literal_parser(cursor):
        if cursor.peek(len(text)) == text:
            return Ok(cursor.read_chars(len(text)))
        return Err(f"Expected <{text}>", cursor.position)
    literal_parser.name = f"literal({text!r})"
    return literal_parser


def remaining(min_length=0):
    @parser
    def remaining_parser(cursor):
        if cursor.remaining_length() >= min_length:
            return Ok(cursor.read_remaining())
        return Err(f"Expected at least {min_length} characters!", cursor.position)
    return remaining_parser


@parser
def _whitespace(cursor):
    spaces = cursor.read_while(str.isspace)
    if spaces:
        return Ok(spaces)
    return Err("Expected some whitespace", cursor.position)


@parser
def _word(cursor):
    text = cursor.read_regex(_WORD_RE)
    if not text:
        return Err("Expected a word", cursor.position)
    return Ok(text)


@parser
def _integer(cursor):
    digits = cursor.read_regex(_DIGITS_RE)
    if not digits:
        return Err("Expected an integer", cursor.position)
    # Compare as text first: int() refuses very long digit strings
    significant = digits.lstrip("0") or "0"
    if (len(significant), significant) > (len(_MAX_INTEGER_TEXT), _MAX_INTEGER_TEXT):
        shown = significant if len(significant) <= 20 else significant[:20] + "..."
        return Err(f"Couldn't parse number: {shown} is too large", cursor.position)
    return Ok(int(significant))


@parser
def _phrase(cursor):
    if cursor.peek() not in _QUOTE_CHARS:
        return _word.parse(cursor)

    quote = cursor.read_char()
    chars = []
    escaped = False
    closed = False
    while cursor.can_read():
        ch = cursor.read_char()
        if escaped:
            escaped = False
            chars.append(ch)
        elif ch == _ESCAPE_CHAR:
            escaped = True
        elif ch == quote:
            closed = True
            break
        else:
            chars.append(ch)

    if not closed:
        return Err(f"Expected a closing {quote}", cursor.position)
    if not chars:
        return Err("Expected some (optionally quoted) phrase", cursor.position)
    return Ok("".join(chars))


def whitespace():
    return _whitespace


def word():
    """A single word, i.e. everything up to the next whitespace."""
    return _word


def integer():
    return _integer


def phrase():
    """A single word, or a phrase in single or double quotes.

    Inside quotes a backslash takes the next character literally, so both
    \\" and \\\\ work.
    """
    return _phrase
