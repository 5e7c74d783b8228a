import unittest

from rui.color import Color, color_name, to_color


class TestColor(unittest.TestCase):

    def test_hex_forms(self):
        self.assertEqual(Color.parse("#abc"), 0xFFAABBCC)
        self.assertEqual(Color.parse("#8abc"), 0x88AABBCC)
        self.assertEqual(Color.parse("#102030"), 0xFF102030)
        self.assertEqual(Color.parse("#80FF0000"), 0x80FF0000)

    def test_rgb_forms(self):
        self.assertEqual(Color.parse("rgb(255, 0, 0)"), 0xFFFF0000)
        self.assertEqual(Color.parse("rgba(0,0,255,0.5)"), 0x800000FF)
        self.assertEqual(Color.parse("rgb(100%, 0%, 0%)"), 0xFFFF0000)

    def test_names(self):
        self.assertEqual(to_color("red"), 0xFFFF0000)
        self.assertEqual(to_color("Transparent"), 0)
        self.assertEqual(color_name(Color(0xFF0000FF)), "blue")
        self.assertIsNone(color_name(Color(0xFF010203)))

    def test_components(self):
        color = Color.from_argb(0x80, 1, 2, 3)
        self.assertEqual(color.argb(), (0x80, 1, 2, 3))
        self.assertEqual(Color.from_rgb(1, 2, 3).alpha, 255)

    def test_text(self):
        color = Color(0xFF102030)
        self.assertEqual(str(color), "#FF102030")
        self.assertEqual(color.css(), "rgb(16,32,48)")
        self.assertEqual(Color(0x80FF0000).css(), "rgba(255,0,0,.50)")
        self.assertEqual(Color.parse(str(color)), color)

    def test_invalid(self):
        for text in ("", "#12345", "notacolor", "rgb(300,0,0)", "rgb(1,2)"):
            with self.assertRaises(ValueError):
                Color.parse(text)
        for value in (True, 1.5, None):
            with self.assertRaises(ValueError):
                to_color(value)


if __name__ == "__main__":
    unittest.main()
