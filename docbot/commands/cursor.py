"""Text cursor: a position-tracked view over a command's input string.

Every parser in parsers.py reads through a TextCursor. Reads consume from the
current position forward; only peek() looks ahead without moving. Alternation
rewinds by assigning the saved position back.

    >>> c = TextCursor("doc long String#trim")
    >>> c.read_chars(3)
    'doc'
    >>> c.read_while(str.isspace)
    ' '
    >>> c.read_remaining()
    'long String#trim'
"""


class TextCursor:

    def __init__(self, text):
        self.text = text
        self.position = 0

    def __repr__(self):
        return f"TextCursor({self.text!r}, position={self.position})"

    def can_read(self):
        return self.position < len(self.text)

    def remaining_length(self):
        return len(self.text) - self.position

    def peek(self, n=1):
        """Return up to n characters without advancing. Shorter near the end."""
        return self.text[self.position:self.position + n]

    def read_chars(self, n):
        """Advance by n characters and return them.

        Reading past the end clamps: whatever remains is returned and the
        position stops at the end of the text.
        """
        start = self.position
        self.position = min(start + n, len(self.text))
        return self.text[start:self.position]

    def read_char(self):
        """Read a single character. Returns "" at the end of the text."""
        return self.read_chars(1)

    def read_while(self, predicate):
        """Consume the longest run of characters satisfying predicate."""
        start = self.position
        end = start
        while end < len(self.text) and predicate(self.text[end]):
            end += 1
        self.position = end
        return self.text[start:end]

    def read_regex(self, pattern):
        """Match a compiled pattern anchored at the current position.

        On a match the cursor moves past it; otherwise it stays put and ""
        is returned.
        """
        m = pattern.match(self.text, self.position)
        if m is None:
            return ""
        self.position = m.end()
        return m.group(0)

    def read_remaining(self):
        start = self.position
        self.position = len(self.text)
        return self.text[start:]
