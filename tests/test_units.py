import math
import unittest

from rui.units import (
    AUTO, AngleType, AngleUnit, SizeFunction, SizeType, SizeUnit,
    deg, em, percent, px, rad, size_function, to_angle, to_size,
)


class TestSizeUnit(unittest.TestCase):

    def test_parse_units(self):
        self.assertEqual(to_size("10px"), px(10))
        self.assertEqual(to_size("1.5em"), em(1.5))
        self.assertEqual(to_size("2rem"), em(2))
        self.assertEqual(to_size("50%"), percent(50))
        self.assertEqual(to_size(" 12 "), px(12))
        self.assertEqual(to_size(3), px(3))

    def test_auto_forms(self):
        for text in ("", "auto", "none", "AUTO"):
            self.assertIs(to_size(text), AUTO)
        self.assertTrue(AUTO.is_auto)
        self.assertEqual(AUTO.css(), "auto")
        self.assertEqual(AUTO.css("unset"), "unset")

    def test_text_and_css(self):
        self.assertEqual(str(px(10)), "10px")
        self.assertEqual(str(em(1.5)), "1.5em")
        self.assertEqual(em(1.5).css(), "1.5rem")
        self.assertEqual(px(0).css(), "0")
        self.assertEqual(str(percent(33.5)), "33.5%")

    def test_invalid_sizes(self):
        for value in ("abc", "10qq", True, None, [1]):
            with self.assertRaises(ValueError):
                to_size(value)

    def test_functions(self):
        size = to_size("min(10px, 20%)")
        self.assertEqual(size.type, SizeType.FUNCTION)
        self.assertEqual(size.css(), "min(10px, 20%)")

        self.assertEqual(size_function("sum", px(10), em(2)).css(), "calc(10px + 2rem)")
        self.assertEqual(to_size("calc(100% - 10px)").css(), "calc(100% - 10px)")
        self.assertEqual(to_size("max(calc(100% - 10px), 20px)").css(), "max(calc(100% - 10px), 20px)")

    def test_function_arguments_are_checked(self):
        with self.assertRaises(ValueError):
            SizeFunction("clamp", (px(1),))
        with self.assertRaises(ValueError):
            SizeFunction("nope", (px(1),))
        with self.assertRaises(ValueError):
            to_size("min(10px, )")

    def test_parse_back(self):
        for text in ("10px", "1.5em", "50%", "2pt", "3pc", "1in", "4mm", "2cm", "1fr", "auto"):
            size = SizeUnit.parse(text)
            self.assertEqual(SizeUnit.parse(str(size)), size)


class TestAngleUnit(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(to_angle("90deg"), deg(90))
        self.assertEqual(to_angle("2grad").type, AngleType.GRADIAN)
        self.assertEqual(to_angle("1.5rad"), rad(1.5))
        self.assertEqual(to_angle("0.5turn").type, AngleType.TURN)
        self.assertEqual(to_angle("pi"), AngleUnit(AngleType.PI, 1.0))
        self.assertEqual(to_angle(2), rad(2))

    def test_conversions(self):
        self.assertAlmostEqual(deg(180).to_radian().value, math.pi)
        self.assertAlmostEqual(rad(math.pi).to_degree().value, 180)
        self.assertAlmostEqual(deg(90).to_turn().value, 0.25)
        self.assertAlmostEqual(deg(90).to_gradian().value, 100)

    def test_css(self):
        self.assertEqual(deg(45).css(), "45deg")
        self.assertEqual(rad(0).css(), "0")
        self.assertEqual(AngleUnit(AngleType.PI, 0.5).css(), "1.5708rad")

    def test_invalid(self):
        for value in ("north", True, None):
            with self.assertRaises(ValueError):
                to_angle(value)


if __name__ == "__main__":
    unittest.main()
