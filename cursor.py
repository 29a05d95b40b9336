import re

from errors import BasicSyntaxError

WHITESPACE = ' \t'

class Cursor:
    """A read position over a private copy of one line of program text."""

    # Token specification
    token_specification = {
        'NUMBER':  re.compile(r'[+\-]?\d+'),  # Signed integer literal
        'WORD':    re.compile(r'[^ \t]+'),    # Command word
    }
    # Characters that may not directly follow a numeric literal
    number_breakers = re.compile(r'[A-Za-z0-9_."]')

    def __init__(self, text, pos=0):
        self.text = str(text)
        self.pos = pos

    def __repr__(self):
        return f"Cursor({self.text!r}, pos={self.pos})"

    def at_end(self):
        return self.pos >= len(self.text)

    def peek(self):
        if self.at_end():
            return ''
        return self.text[self.pos]

    def advance(self, count=1):
        self.pos = min(len(self.text), self.pos + count)

    def rest(self):
        return self.text[self.pos:]

    def skip_whitespace(self):
        while not self.at_end() and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def read_word(self):
        """Reads the whitespace-delimited token at the cursor, upper-cased."""
        self.skip_whitespace()
        mo = self.token_specification['WORD'].match(self.text, self.pos)
        if not mo:
            return ''
        self.pos = mo.end()
        return mo.group().upper()

    def read_integer(self):
        """Reads an optionally signed decimal literal and returns its full value."""
        self.skip_whitespace()
        mo = self.token_specification['NUMBER'].match(self.text, self.pos)
        if not mo:
            raise BasicSyntaxError("EXPECTED NUMBER")
        if self.number_breakers.match(self.text, mo.end()):
            raise BasicSyntaxError("INVALID NUMBER")
        self.pos = mo.end()
        return int(mo.group())

    def match_keyword(self, keyword):
        """
        Consumes keyword (case-insensitive) if it sits at the cursor and is
        followed by whitespace or the end of the line. THENX does not match THEN.
        """
        end = self.pos + len(keyword)
        if self.text[self.pos:end].upper() != keyword.upper():
            return False
        if end < len(self.text) and not self.text[end].isspace():
            return False
        self.pos = end
        return True
