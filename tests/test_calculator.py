import unittest

import pytest

from unitcalc_pkg import config
from unitcalc_pkg.engine import Calculator
from unitcalc_pkg.types import ErrorKind
from unitcalc_pkg.types import EvaluationError
from unitcalc_pkg.types import ParseError


def _result(text, calc=None):
    calc = calc if calc is not None else Calculator()
    value = calc.execute(text)
    return value.as_string() if value is not None else None


class TestArithmetic(unittest.TestCase):
    def test_signs(self):
        self.assertEqual(_result("1+-2"), "-1")
        self.assertEqual(_result("45--6"), "51")
        self.assertEqual(_result("45-6"), "39")

    def test_division(self):
        calc = Calculator()
        self.assertEqual(_result("32/5", calc), "6.4")
        self.assertEqual(_result("30.2/5", calc), "6.04")
        value = calc.execute("30/5.0")
        self.assertEqual(value.as_string(), "6")
        self.assertTrue(value.is_float)
        value = calc.execute("30/5")
        self.assertTrue(value.is_integer)

    def test_mixed_multiplication(self):
        self.assertEqual(_result("5*6.2"), "31")

    def test_nested_groups(self):
        self.assertEqual(_result("4-(.5/(3+4))"), "3.928571429")

    def test_function_of_group(self):
        self.assertEqual(_result("6.*(9-1)/inv(10.0+2)-4.2"), "571.8")

    def test_implicit_multiplication(self):
        self.assertEqual(_result("3.4 5.3"), "18.02")

    def test_hex(self):
        self.assertEqual(_result("0x5A * 0x48"), "0x1950")

    def test_power_and_root(self):
        self.assertEqual(_result("2^10"), "1024")
        self.assertEqual(_result("27\\3"), "3")


class TestUnitsAndConversions(unittest.TestCase):
    def test_temperature(self):
        self.assertEqual(_result("25C::F"), "77F")
        self.assertEqual(_result("25:C::F"), "77F")
        self.assertEqual(_result("41F::C"), "5C")
        self.assertEqual(_result("23F::C"), "-5C")
        self.assertEqual(_result("-40F::C"), "-40C")
        self.assertEqual(_result("-40C::F"), "-40F")

    def test_length(self):
        self.assertEqual(_result("1in::cm"), "2.54cm")
        self.assertEqual(_result("12in::ft"), "1ft")

    def test_unit_arithmetic(self):
        self.assertEqual(_result("2cm+3cm"), "5cm")
        self.assertEqual(_result("2cm*3"), "6cm")

    def test_convert_after_expression(self):
        self.assertEqual(_result("1in+1in::cm"), "5.08cm")

    def test_angles(self):
        self.assertEqual(_result("2pi/180"), "0.034906585rad")
        self.assertEqual(_result("pi/180::deg"), "1deg")
        self.assertEqual(_result("2pi::deg"), "360deg")

    def test_trig(self):
        self.assertEqual(_result("30 sin"), "0.5")
        self.assertEqual(_result("sin(30)"), "0.5")
        self.assertEqual(_result("0.5rad asin"), "30deg")
        self.assertEqual(_result("pi/2 sin"), "1")

    def test_unsupported_conversion_leaves_both(self):
        calc = Calculator()
        self.assertIsNone(calc.execute("5C::cm"))
        self.assertTrue(calc.messages.has_kind(ErrorKind.CONVERSION_NOT_SUPPORTED))
        self.assertEqual([v.as_string() for v in calc.stack], ["5C", "0cm"])


class TestVariables(unittest.TestCase):
    def test_assign_then_use(self):
        calc = Calculator()
        self.assertIsNone(calc.execute("y=3.2"))
        self.assertFalse(calc.messages.has_errors())
        self.assertEqual(_result("2y", calc), "6.4")

    def test_assignment_inside_expression(self):
        calc = Calculator()
        self.assertEqual(_result("y=3.2 2pi*y+y", calc), "23.306192983")

    def test_assign_operator_then_reuse(self):
        calc = Calculator()
        self.assertEqual(_result("y=3.2 2pi*y+y=y 5.2-y", calc), "-18.106192983")
        self.assertEqual(_result("2y", calc), "46.612385966")

    def test_written_out_assignment(self):
        calc = Calculator()
        calc.execute("y = 3")
        self.assertEqual(calc.store.lookup("y").value, 3)

    def test_compound_assignment(self):
        calc = Calculator()
        calc.execute("y=2")
        self.assertEqual(_result("3+=y", calc), "5")
        self.assertEqual(_result("2*=y", calc), "10")
        self.assertEqual(calc.store.lookup("y").value, 10)

    def test_constant_cannot_be_assigned(self):
        calc = Calculator()
        self.assertIsNone(calc.execute("pi=3"))
        self.assertEqual(calc.messages.last_error().kind, ErrorKind.ASSIGNMENT_TARGET_INVALID)
        self.assertIsNone(calc.execute("3=pi"))
        self.assertEqual(calc.messages.last_error().kind, ErrorKind.ASSIGNMENT_TARGET_INVALID)
        self.assertAlmostEqual(calc.store.lookup("pi").value, 3.141592653589793)

    def test_prompt_for_unknown_variable(self):
        asked = []

        def prompt(name):
            asked.append(name)
            return "4"

        calc = Calculator(prompt=prompt)
        self.assertEqual(_result("x+1", calc), "5")
        self.assertEqual(asked, ["x"])
        # Stored, so not asked again
        self.assertEqual(_result("x*2", calc), "8")
        self.assertEqual(asked, ["x"])

    def test_unknown_variable_without_prompt(self):
        calc = Calculator()
        self.assertIsNone(calc.execute("x+1"))
        self.assertEqual(calc.messages.last_error().kind, ErrorKind.UNRESOLVED_VARIABLE)


class TestSession(unittest.TestCase):
    def test_division_by_zero_keeps_operands(self):
        calc = Calculator()
        self.assertIsNone(calc.execute("1/0"))
        self.assertEqual(calc.messages.last_error().kind, ErrorKind.DIVISION_BY_ZERO)
        self.assertEqual([v.as_string() for v in calc.stack], ["1", "0"])

    def test_stack_persists_between_lines(self):
        calc = Calculator()
        calc.execute("5")
        self.assertEqual(_result("+3", calc), "8")
        self.assertEqual(len(calc.stack), 1)

    def test_stack_operators(self):
        calc = Calculator()
        calc.execute("1")
        calc.execute("2")
        calc.execute("swap")
        self.assertEqual([v.value for v in calc.stack], [2, 1])
        calc.execute(";")
        self.assertEqual([v.value for v in calc.stack], [2])

    def test_messages_reset_per_line(self):
        calc = Calculator()
        calc.execute("1/0")
        calc.clear_stack()
        calc.execute("1+1")
        self.assertFalse(calc.messages.has_errors())

    def test_history(self):
        calc = Calculator()
        calc.execute("1+1")
        calc.execute("bad $")
        self.assertEqual(calc.history, ["1+1", "bad $"])

    def test_input_length_limit(self):
        calc = Calculator()
        self.assertFalse(calc.parse("1" * (config.MAX_INPUT_LENGTH + 1)))
        self.assertEqual(calc.messages.last_error().kind, ErrorKind.INPUT_TOO_LONG)
        self.assertFalse(calc.messages.has_kind(ErrorKind.MALFORMED_NUMBER))

    def test_format_stack(self):
        calc = Calculator()
        self.assertEqual(calc.format_stack(), "(stack is empty)")
        calc.execute("1")
        calc.execute("2cm")
        self.assertEqual(calc.format_stack(), "  1: 1\n  0: 2cm")

    def test_format_variables(self):
        calc = Calculator()
        self.assertEqual(calc.format_variables(include_constants=False), "(no variables)")
        calc.execute("y=2")
        self.assertEqual(calc.format_variables(include_constants=False), "y = 2")
        self.assertIn("(constant)", calc.format_variables())


def test_strict_evaluate_raises_parse_error():
    calc = Calculator()
    with pytest.raises(ParseError) as exc_info:
        calc.evaluate("2 $", strict=True)
    assert exc_info.value.kind is ErrorKind.UNKNOWN_FUNCTION


def test_strict_evaluate_raises_evaluation_error():
    calc = Calculator()
    with pytest.raises(EvaluationError) as exc_info:
        calc.evaluate("1/0", strict=True)
    assert exc_info.value.kind is ErrorKind.DIVISION_BY_ZERO


def test_non_strict_evaluate_returns_none():
    assert Calculator().evaluate("1/0") is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1km::mi", "0.621371192mi"),
        ("100kph::mph", "62.137119224mph"),
        ("2hrs::min", "120min"),
        ("1atm::kPa", "101.325kPa"),
        ("1500mA::A", "1.5A"),
    ],
)
def test_more_conversions(text, expected):
    assert _result(text) == expected


if __name__ == "__main__":
    unittest.main()
