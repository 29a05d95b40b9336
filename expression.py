from errors import BasicSyntaxError, SemanticError
from values import LETTERS, divide, wrap

OPERATORS = '+-*/'


class ExpressionEvaluator:
    def __init__(self, variables):
        self.variables = variables

    def evaluate(self, cursor):
        """
        Evaluates the expression at the cursor and leaves the cursor on the
        first character that is not part of it. Handles:
        - Variables A-Z
        - Signed integer literals
        - Parentheses for grouping: (A + B)
        - +, -, *, / applied strictly left to right, no precedence

        Every intermediate result is narrowed to a signed 8-bit value.
        """
        result = self._term(cursor)

        while True:
            cursor.skip_whitespace()
            op = cursor.peek()
            if not op or op not in OPERATORS:
                return result
            cursor.advance()

            operand = self._term(cursor)
            if op == '+': result = wrap(result + operand)
            elif op == '-': result = wrap(result - operand)
            elif op == '*': result = wrap(result * operand)
            elif op == '/': result = divide(result, operand)

    def _term(self, cursor):
        cursor.skip_whitespace()
        ch = cursor.peek()

        if ch.isalpha():
            cursor.advance()
            name = ch.upper()
            if name not in LETTERS:
                raise SemanticError("INVALID VARIABLE")
            return self.variables[name]

        if ch == '(':
            cursor.advance()
            value = self.evaluate(cursor)
            cursor.skip_whitespace()
            if cursor.peek() != ')':
                raise BasicSyntaxError("EXPECTED ')'")
            cursor.advance()
            return value

        return wrap(cursor.read_integer())
