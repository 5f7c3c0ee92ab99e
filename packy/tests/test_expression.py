import unittest
from packy.logic.quantity.expression import (
    EXPRESSION_PARSER,
    ExpressionError,
    evaluate_expression,
    validate_expression,
)


class TestExpressionEvaluate(unittest.TestCase):

    def test_days_identity(self):
        for days in (1, 2, 5, 14, 30):
            self.assertEqual(evaluate_expression("d", days), days)

    def test_common_forms(self):
        self.assertEqual(evaluate_expression("2d+1", 5), 11)
        self.assertEqual(evaluate_expression("d+1", 3), 4)
        self.assertEqual(evaluate_expression("d*2", 4), 8)
        self.assertEqual(evaluate_expression("3d", 2), 6)

    def test_division_rounds_up(self):
        self.assertEqual(evaluate_expression("d/2", 5), 3)
        self.assertEqual(evaluate_expression("(d+1)/2", 5), 3)
        self.assertEqual(evaluate_expression("d/2", 4), 2)

    def test_whitespace_and_case_are_ignored(self):
        self.assertEqual(evaluate_expression(" 2D + 1 ", 5), 11)

    def test_result_is_at_least_one(self):
        self.assertEqual(evaluate_expression("d-1", 1), 1)
        self.assertEqual(evaluate_expression("d-10", 3), 1)

    def test_empty_or_missing_expression_is_one(self):
        self.assertEqual(evaluate_expression("", 7), 1)
        self.assertEqual(evaluate_expression(None, 7), 1)

    def test_plain_number(self):
        self.assertEqual(evaluate_expression("4", 10), 4)

    def test_parse_errors(self):
        for expr in ("d++", "(d+1", "d)", "x", "2d+", "d/0"):
            with self.subTest(expr=expr):
                with self.assertRaises(ExpressionError):
                    evaluate_expression(expr, 5)


class TestExpressionHelpers(unittest.TestCase):

    def test_validate(self):
        self.assertEqual(validate_expression("d+1"), {'valid': True})
        result = validate_expression("d++")
        self.assertFalse(result['valid'])
        self.assertTrue(result['error'])

    def test_describe(self):
        self.assertEqual(EXPRESSION_PARSER.describe("d"), "one per day")
        self.assertEqual(EXPRESSION_PARSER.describe("2d + 1"), "two per day plus one extra")
        self.assertEqual(EXPRESSION_PARSER.describe("5d-3"), "calculated (5d-3)")
        self.assertEqual(EXPRESSION_PARSER.describe(""), "single item")

    def test_get_example(self):
        self.assertEqual(EXPRESSION_PARSER.get_example("2d+1", 5), "2d+1 = 11 (for 5 days)")
        self.assertEqual(EXPRESSION_PARSER.get_example("d++", 5), "d++ = invalid")


if __name__ == '__main__':
    unittest.main()
