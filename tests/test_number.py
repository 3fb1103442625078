import unittest

from unitcalc_pkg.dimensional_analysis import unit_for_key
from unitcalc_pkg.number import NumberFlag
from unitcalc_pkg.number import NumberValue
from unitcalc_pkg.number import parse_literal
from unitcalc_pkg.number import parse_unit_target
from unitcalc_pkg.number import parse_variable
from unitcalc_pkg.number import wrap_int
from unitcalc_pkg.types import ErrorKind
from unitcalc_pkg.types import MessageList
from unitcalc_pkg.utils.cursor import TextCursor
from unitcalc_pkg.variables import VariableStore


def _parse(text):
    messages = MessageList()
    cursor = TextCursor(text)
    return parse_literal(cursor, messages), cursor, messages


class TestLiteralParsing(unittest.TestCase):
    def test_integer_and_float(self):
        number, _, _ = _parse("42")
        self.assertTrue(number.is_integer)
        self.assertEqual(number.value, 42)

        number, _, _ = _parse("4.25")
        self.assertTrue(number.is_float)
        self.assertEqual(number.value, 4.25)

    def test_leading_point_and_sign(self):
        number, _, _ = _parse(".5")
        self.assertEqual(number.value, 0.5)
        number, _, _ = _parse("-12")
        self.assertEqual(number.value, -12)

    def test_trailing_point_makes_float(self):
        number, _, _ = _parse("6.")
        self.assertTrue(number.is_float)
        self.assertEqual(number.as_string(), "6")

    def test_hex_literal(self):
        number, cursor, _ = _parse("0x5A rest")
        self.assertEqual(number.value, 90)
        self.assertEqual(number.fmt, "0x%X")
        self.assertEqual(number.as_string(), "0x5A")
        self.assertEqual(cursor.remaining, " rest")

    def test_direct_unit(self):
        number, cursor, _ = _parse("25C::F")
        self.assertEqual(number.unit.key, "C")
        self.assertEqual(cursor.remaining, "::F")

    def test_colon_unit(self):
        number, cursor, _ = _parse("25:C::F")
        self.assertEqual(number.unit.key, "C")
        self.assertEqual(cursor.remaining, "::F")

    def test_unknown_colon_unit_is_an_error(self):
        number, _, messages = _parse("5:xyz")
        self.assertIsNone(number)
        self.assertTrue(messages.has_kind(ErrorKind.UNKNOWN_UNIT))

    def test_format_suffix(self):
        number, cursor, _ = _parse("3.14159:%.2f + 1")
        self.assertEqual(number.fmt, "%.2f")
        self.assertEqual(number.as_string(), "3.14")
        self.assertEqual(cursor.remaining, " + 1")

    def test_unit_needs_word_boundary(self):
        # "2pi" and "2max3" leave the name for the tree builder
        number, cursor, _ = _parse("2pi")
        self.assertTrue(number.unit.is_default())
        self.assertEqual(cursor.remaining, "pi")

        number, cursor, _ = _parse("2max3")
        self.assertTrue(number.unit.is_default())
        self.assertEqual(cursor.remaining, "max3")

    def test_minus_after_digits_is_not_read(self):
        number, cursor, _ = _parse("45-6")
        self.assertEqual(number.value, 45)
        self.assertEqual(cursor.remaining, "-6")

    def test_not_a_number(self):
        number, _, messages = _parse("abc")
        self.assertIsNone(number)
        self.assertTrue(messages.has_kind(ErrorKind.MALFORMED_NUMBER))

    def test_unit_target(self):
        messages = MessageList()
        target = parse_unit_target(TextCursor("cm"), messages)
        self.assertEqual(target.unit.key, "cm")
        target = parse_unit_target(TextCursor(":deg:%.1f"), messages)
        self.assertEqual(target.unit.key, "deg")
        self.assertEqual(target.fmt, "%.1f")
        self.assertIsNone(parse_unit_target(TextCursor("bogus"), messages))


class TestNumberValue(unittest.TestCase):
    def test_integers_wrap_to_64_bits(self):
        self.assertEqual(wrap_int(2**63), -(2**63))
        self.assertEqual(NumberValue(2**64 + 5).value, 5)

    def test_float_formatting_strips_zeros(self):
        self.assertEqual(NumberValue(6.0).as_string(), "6")
        self.assertEqual(NumberValue(0.1 + 0.2).as_string(), "0.3")
        self.assertEqual(NumberValue(-0.0000000001).as_string(), "0")

    def test_special_values(self):
        self.assertEqual(NumberValue(float("nan")).as_string(), "nan")
        self.assertEqual(NumberValue(float("-inf")).as_string(), "-inf")

    def test_negative_hex_shows_register(self):
        self.assertEqual(NumberValue(-1, fmt="0x%X").as_string(), "0xFFFFFFFFFFFFFFFF")

    def test_float_with_hex_format_falls_back(self):
        self.assertEqual(NumberValue(2.5, fmt="0x%X").as_string(), "2.5")

    def test_out_of_range_character_format_falls_back(self):
        self.assertEqual(NumberValue(2000000, fmt="%c").as_string(), "2000000")
        self.assertEqual(NumberValue(-1, fmt="%c").as_string(), "-1")
        self.assertEqual(NumberValue(65, fmt="%c").as_string(), "A")

    def test_display_round_trip(self):
        for value in (NumberValue(2.54, unit=unit_for_key("cm")), NumberValue(-40, unit=unit_for_key("F"))):
            text = value.as_string()
            parsed, cursor, _ = _parse(text)
            self.assertTrue(cursor.empty())
            self.assertEqual(parsed.as_string(), text)

    def test_unset_variable(self):
        value = NumberValue.unset_variable("x")
        self.assertTrue(value.is_variable)
        self.assertTrue(value.is_unset)
        self.assertFalse(value.is_constant)
        self.assertEqual(value.name, "x")


class TestParseVariable(unittest.TestCase):
    def setUp(self):
        self.store = VariableStore()
        self.messages = MessageList()

    def test_known_constant(self):
        ok, number = parse_variable(TextCursor("pi/180"), self.store, self.messages)
        self.assertTrue(ok)
        self.assertTrue(number.is_constant)
        self.assertEqual(number.unit.key, "rad")

    def test_unknown_name_is_unset(self):
        ok, number = parse_variable(TextCursor("x+1"), self.store, self.messages)
        self.assertTrue(ok)
        self.assertTrue(number.is_unset)
        self.assertFalse(self.messages.has_errors())

    def test_unit_override(self):
        ok, number = parse_variable(TextCursor("x:cm"), self.store, self.messages)
        self.assertTrue(ok)
        self.assertEqual(number.unit.key, "cm")

    def test_double_colon_left_for_builder(self):
        cursor = TextCursor("x::cm")
        ok, number = parse_variable(cursor, self.store, self.messages)
        self.assertTrue(ok)
        self.assertEqual(cursor.remaining, "::cm")

    def test_inline_assignment_produces_no_operand(self):
        ok, number = parse_variable(TextCursor("y=3.2"), self.store, self.messages)
        self.assertTrue(ok)
        self.assertIsNone(number)
        self.assertEqual(self.store.lookup("y").value, 3.2)
        self.assertEqual(self.store.lookup("y").flags, NumberFlag.VARIABLE)

    def test_inline_assignment_keeps_unit_override(self):
        parse_variable(TextCursor("d:cm=5"), self.store, self.messages)
        self.assertEqual(self.store.lookup("d").unit.key, "cm")

    def test_assigning_constant_fails(self):
        ok, number = parse_variable(TextCursor("pi=3"), self.store, self.messages)
        self.assertFalse(ok)
        self.assertTrue(self.messages.has_kind(ErrorKind.ASSIGNMENT_TARGET_INVALID))
        self.assertAlmostEqual(self.store.lookup("pi").value, 3.141592653589793)

    def test_no_name(self):
        ok, number = parse_variable(TextCursor("$"), self.store, self.messages)
        self.assertFalse(ok)
        self.assertTrue(self.messages.has_kind(ErrorKind.UNKNOWN_FUNCTION))


if __name__ == "__main__":
    unittest.main()
