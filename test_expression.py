import unittest

from cursor import Cursor
from errors import BasicRuntimeError, BasicSyntaxError, SemanticError
from expression import ExpressionEvaluator
from values import VariableStore


class TestExpression(unittest.TestCase):
    def setUp(self):
        self.variables = VariableStore()
        self.evaluator = ExpressionEvaluator(self.variables)

    def ev(self, text):
        return self.evaluator.evaluate(Cursor(text))

    def assertSyntaxError(self, text, message):
        with self.assertRaises(BasicSyntaxError) as cm:
            self.ev(text)
        self.assertEqual(message, cm.exception.message)

    def test_literals(self):
        self.assertEqual(42, self.ev("42"))
        self.assertEqual(-5, self.ev("-5"))
        self.assertEqual(7, self.ev("  +7"))
        self.assertEqual(-56, self.ev("200"))

    def test_no_precedence(self):
        self.assertEqual(20, self.ev("2 + 3 * 4"))
        self.assertEqual(14, self.ev("2 + (3 * 4)"))
        self.assertEqual(1, self.ev("10 - 4 - 5"))
        self.assertEqual(2, self.ev("9 / 2 - 2"))

    def test_without_spaces(self):
        self.assertEqual(3, self.ev("1+2"))
        self.assertEqual(4, self.ev("(1+1)*2"))

    def test_wraps_every_step(self):
        self.assertEqual(-56, self.ev("100 + 100"))
        # (100 + 100) wraps to -56 before the subtraction
        self.assertEqual(-106, self.ev("100 + 100 - 50"))

    def test_variables(self):
        self.variables['A'] = 16
        self.variables['B'] = 16
        self.assertEqual(0, self.ev("A * B"))
        self.assertEqual(17, self.ev("a + 1"))
        self.variables['A'] = 1
        self.assertEqual(6, self.ev("A - -5"))

    def test_division(self):
        self.assertEqual(3, self.ev("7 / 2"))
        self.assertEqual(-3, self.ev("-7 / 2"))

    def test_division_by_zero(self):
        self.variables['A'] = 9
        with self.assertRaises(BasicRuntimeError):
            self.ev("A / 0")
        with self.assertRaises(BasicRuntimeError):
            self.ev("A / (3 - 3)")

    def test_stops_at_first_non_operator(self):
        cursor = Cursor("1 + 2 THEN 5")
        self.assertEqual(3, self.evaluator.evaluate(cursor))
        self.assertEqual("THEN 5", cursor.rest())

        cursor = Cursor("4<>5")
        self.assertEqual(4, self.evaluator.evaluate(cursor))
        self.assertEqual("<>5", cursor.rest())

    def test_single_letter_variable(self):
        self.variables['A'] = 3
        cursor = Cursor("AB")
        self.assertEqual(3, self.evaluator.evaluate(cursor))
        self.assertEqual("B", cursor.rest())

    def test_errors(self):
        self.assertSyntaxError("(1 + 2", "EXPECTED ')'")
        self.assertSyntaxError("", "EXPECTED NUMBER")
        self.assertSyntaxError("+", "EXPECTED NUMBER")
        self.assertSyntaxError("1 + ", "EXPECTED NUMBER")
        self.assertSyntaxError("12AB", "INVALID NUMBER")
        self.assertSyntaxError("1.5", "INVALID NUMBER")

    def test_invalid_variable(self):
        with self.assertRaises(SemanticError):
            self.ev("é + 1")


class TestCursor(unittest.TestCase):
    def test_read_word(self):
        cursor = Cursor("  print 5")
        self.assertEqual("PRINT", cursor.read_word())
        self.assertEqual(" 5", cursor.rest())
        self.assertEqual("", Cursor("   ").read_word())

    def test_match_keyword(self):
        cursor = Cursor("then 10")
        self.assertTrue(cursor.match_keyword("THEN"))
        self.assertEqual(" 10", cursor.rest())
        self.assertTrue(Cursor("THEN").match_keyword("THEN"))
        self.assertFalse(Cursor("THENX").match_keyword("THEN"))
        self.assertFalse(Cursor("THE").match_keyword("THEN"))

    def test_read_integer_keeps_full_value(self):
        cursor = Cursor("300 ")
        self.assertEqual(300, cursor.read_integer())
        self.assertEqual(" ", cursor.rest())


if __name__ == '__main__':
    unittest.main()
