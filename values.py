import string

from errors import BasicRuntimeError, SemanticError

LETTERS = string.ascii_uppercase
MAX_VALUE = 127


def wrap(value):
    """Narrows an integer into a signed 8-bit cell (two's complement)."""
    value = int(value) & 0xFF
    return value - 0x100 if value > MAX_VALUE else value


def divide(dividend, divisor):
    if divisor == 0:
        raise BasicRuntimeError("DIVISION BY ZERO")
    # Truncate toward zero before narrowing
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return wrap(quotient)


class VariableStore:
    """Variables A-Z, each holding a signed 8-bit value."""

    def __init__(self):
        self.slots = [0] * len(LETTERS)

    def _index(self, name):
        name = str(name).upper()
        if len(name) != 1 or name not in LETTERS:
            raise SemanticError("INVALID VARIABLE")
        return LETTERS.index(name)

    def __getitem__(self, name):
        return self.slots[self._index(name)]

    def __setitem__(self, name, value):
        self.slots[self._index(name)] = wrap(value)

    def __len__(self):
        return len(self.slots)

    def clear(self):
        self.slots = [0] * len(LETTERS)

    def items(self):
        return list(zip(LETTERS, self.slots))

    def __repr__(self):
        used = ", ".join(f"{k}={v}" for k, v in self.items() if v)
        return f"VariableStore({used})"
