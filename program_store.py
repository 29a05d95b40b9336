import logging
import re

from errors import ResourceError, SemanticError

logger = logging.getLogger(__name__)

MIN_LINE_NUMBER = 1
MAX_LINE_NUMBER = 65535

LINE_PATTERN = re.compile(r'^\s*(\d+)\s*(.*)$')


class Line:
    def __init__(self, number, text):
        self.number = number
        self.text = text

    def __repr__(self):
        return f"Line({self.number}, {self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, Line):
            return NotImplemented
        return (self.number, self.text) == (other.number, other.text)

    def __str__(self):
        return f"{self.number} {self.text}"


def parse_line(line):
    """Splits '10 PRINT A' into (10, 'PRINT A'). Raises if there is no valid number."""
    match = LINE_PATTERN.match(line.rstrip('\r\n'))
    if not match:
        raise SemanticError("INVALID LINE NUMBER")
    number = int(match.group(1))
    if not MIN_LINE_NUMBER <= number <= MAX_LINE_NUMBER:
        raise SemanticError("INVALID LINE NUMBER")
    return number, match.group(2).rstrip()


class ProgramStore:
    """Program lines kept sorted ascending by line number, no duplicates."""

    def __init__(self, capacity=500, max_line_len=127):
        self.capacity = capacity
        self.max_line_len = max_line_len
        self.lines = []

    def __len__(self): return len(self.lines)
    def __getitem__(self, index): return self.lines[index]
    def __iter__(self): return iter(self.lines)

    def clear(self):
        self.lines = []

    def find(self, number):
        for i, line in enumerate(self.lines):
            if line.number == number:
                return i
            if line.number > number:
                # Sorted, so it cannot appear later
                return None
        return None

    def store(self, number, text):
        if not MIN_LINE_NUMBER <= number <= MAX_LINE_NUMBER:
            raise SemanticError("INVALID LINE NUMBER")

        text = text.lstrip()[:self.max_line_len - 1]
        index = self.find(number)

        if not text:
            if index is not None:
                logger.debug("Deleting line %d at index %d.", number, index)
                del self.lines[index]
            return

        if index is not None:
            logger.debug("Replacing line %d at index %d.", number, index)
            self.lines[index].text = text
            return

        if len(self.lines) >= self.capacity:
            raise ResourceError("PROGRAM MEMORY FULL")

        index = len(self.lines)
        for i, line in enumerate(self.lines):
            if line.number > number:
                index = i
                break
        logger.debug("Inserting line %d at index %d.", number, index)
        self.lines.insert(index, Line(number, text))

    def store_line(self, line):
        number, text = parse_line(line)
        self.store(number, text)

    def line_numbers(self):
        return [line.number for line in self.lines]

    def listing(self):
        return [str(line) for line in self.lines]
