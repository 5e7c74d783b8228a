import unittest

from rui.color import Color
from rui.css import value_css
from rui.properties import (
    ENUM_PROPERTIES, FAMILIES, Properties, coerce_value, constant_name, default_value, is_constant_name, is_known_tag,
)
from rui.units import AUTO, px


class TestCoercion(unittest.TestCase):

    def test_enum_index(self):
        info = ENUM_PROPERTIES["animation-direction"]
        self.assertEqual(info.index_of("alternate"), 2)
        self.assertEqual(info.index_of("REVERSE"), 1)
        self.assertEqual(info.index_of("3"), 3)
        self.assertEqual(info.index_of(0), 0)
        for bad in ("nonsense", 4, -1, True, 1.5):
            with self.assertRaises(ValueError):
                info.index_of(bad)

    def test_scalars(self):
        self.assertEqual(coerce_value("z-index", "3"), 3)
        self.assertIs(coerce_value("disabled", "yes"), True)
        self.assertIs(coerce_value("disabled", 0), False)
        self.assertEqual(coerce_value("opacity", "0.5"), 0.5)
        with self.assertRaises(ValueError):
            coerce_value("opacity", 1.5)
        with self.assertRaises(ValueError):
            coerce_value("disabled", "maybe")
        with self.assertRaises(KeyError):
            coerce_value("no-such-tag", 1)

    def test_defaults(self):
        self.assertIs(default_value("width"), AUTO)
        self.assertIs(default_value("disabled"), False)
        self.assertEqual(default_value("text-align"), 0)
        self.assertEqual(default_value("opacity"), 1.0)
        self.assertIsNone(default_value("text"))

    def test_known_tags(self):
        self.assertTrue(is_known_tag("padding-left"))
        self.assertTrue(is_known_tag("border-top-color"))
        self.assertFalse(is_known_tag("padding-middle"))
        self.assertTrue(is_known_tag("translate-z"))
        self.assertTrue(is_known_tag("backdrop-filter"))
        # shadow and filter parameters, not view tags
        for tag in ("x-offset", "blur-radius", "spread-radius", "hue-rotate"):
            self.assertFalse(is_known_tag(tag))

    def test_constant_names(self):
        self.assertTrue(is_constant_name("@ruiTextColor"))
        self.assertTrue(is_constant_name('@"with space"'))
        self.assertFalse(is_constant_name("@with space"))
        self.assertFalse(is_constant_name("@"))
        self.assertFalse(is_constant_name(12))
        self.assertEqual(constant_name('@"with space"'), "with space")
        self.assertEqual(constant_name("@gap"), "gap")


class TestProperties(unittest.TestCase):

    def setUp(self):
        self.props = Properties()

    def test_enum_writes(self):
        self.assertTrue(self.props.set("animation-direction", "alternate"))
        self.assertEqual(self.props.get("animation-direction"), 2)
        self.assertTrue(self.props.set("animation-direction", 3))
        self.assertEqual(self.props.get("animation-direction"), 3)
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.props.set("animation-direction", "nonsense"))
        self.assertEqual(self.props.get("animation-direction"), 3)

    def test_tag_is_normalized(self):
        self.assertTrue(self.props.set("  Text-Color ", "#FF0000"))
        self.assertEqual(self.props.get("TEXT-COLOR"), Color(0xFFFF0000))
        self.assertEqual(self.props.tags(), ["text-color"])

    def test_written_value_serializes_back(self):
        self.props.set("text-color", "#FF0000")
        self.assertEqual(value_css("text-color", self.props.get("text-color")), [("color", "rgb(255,0,0)")])
        self.props.set("text-weight", "bold")
        self.assertEqual(value_css("text-weight", self.props.get("text-weight")), [("font-weight", "bold")])
        self.props.set("width", "2.5em")
        self.assertEqual(value_css("width", self.props.get("width")), [("width", "2.5rem")])

    def test_auto_size_removes(self):
        self.props.set("width", "10px")
        self.assertEqual(self.props.get("width"), px(10))
        self.assertTrue(self.props.set("width", "auto"))
        self.assertIsNone(self.props.get("width"))
        self.assertEqual(self.props.tags(), [])

    def test_zero_color_removes(self):
        self.props.set("background-color", "red")
        self.assertTrue(self.props.set("background-color", Color(0)))
        self.assertIsNone(self.props.get("background-color"))
        self.props.set("background-color", "red")
        self.props.set("background-color", "transparent")
        self.assertIsNone(self.props.get("background-color"))

    def test_empty_text_removes(self):
        self.props.set("text", "hello")
        self.props.set("text", "")
        self.assertIsNone(self.props.get("text"))

    def test_equal_write_reports_no_change(self):
        changes = []
        self.props.property_changed = changes.append
        self.props.set("width", "10px")
        self.props.set("width", px(10))
        self.props.set("z-index", 2)
        self.props.set("z-index", "2")
        self.assertEqual(changes, ["width", "z-index"])

    def test_failed_write_keeps_map(self):
        self.props.set("width", "10px")
        self.props.set("opacity", 0.5)
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.props.set("width", "ten pixels"))
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.props.set("opacity", 2))
        self.assertEqual(self.props.tags(), ["opacity", "width"])
        self.assertEqual(self.props.get("width"), px(10))
        self.assertEqual(self.props.get("opacity"), 0.5)

    def test_unknown_tag(self):
        with self.assertLogs("rui.properties", "ERROR") as logs:
            self.assertFalse(self.props.set("no-such-tag", 1))
        self.assertIn("'no-such-tag' property is not supported by Properties", logs.output[0])
        self.assertEqual(self.props.tags(), [])

    def test_constants_are_stored_as_written(self):
        self.assertTrue(self.props.set("width", "@gap"))
        self.assertEqual(self.props.get("width"), "@gap")

    def test_set_params(self):
        with self.assertLogs("rui.properties", "ERROR"):
            result = self.props.set_params({"width": "5px", "height": "tall"})
        self.assertFalse(result)
        self.assertEqual(self.props.tags(), ["width"])

    def test_shorthand_drops_covered_members(self):
        self.props.set("padding-left", "10px")
        self.props.set("padding", "4px")
        self.assertEqual(self.props.tags(), ["padding"])

    def test_sub_tag_keeps_shorthand(self):
        self.props.set("padding", "4px")
        self.props.set("padding-left", "10px")
        self.assertEqual([tag for tag, _ in self.props.family_members(FAMILIES["padding"])], ["padding", "padding-left"])
        self.props.remove("padding-left")
        self.assertEqual(self.props.tags(), ["padding"])

    def test_removing_shorthand_removes_members(self):
        self.props.set("padding", "4px")
        self.props.set("padding-top", "1px")
        self.props.remove("padding")
        self.assertEqual(self.props.tags(), [])

    def test_rewriting_equal_shorthand_overrides_sub_tags(self):
        changes = []
        self.props.property_changed = changes.append
        self.props.set("padding", "4px")
        self.props.set("padding-top", "8px")
        self.props.set("padding", "4px")
        self.assertEqual(self.props.tags(), ["padding"])
        self.assertEqual(changes, ["padding", "padding-top", "padding"])
        self.props.set("padding", "4px")
        self.assertEqual(changes, ["padding", "padding-top", "padding"])

    def test_rewriting_older_member_makes_it_newest(self):
        family = FAMILIES["radius"]
        self.props.set("radius-x", "4px")
        self.props.set("radius-top-left", "8px")
        self.assertTrue(self.props.set("radius-x", "4px"))
        self.assertEqual([tag for tag, _ in self.props.family_members(family)], ["radius-top-left", "radius-x"])
        cells = family.effective_cells(self.props.family_members(family))
        self.assertEqual(cells[("top-left", "x")], px(4))
        self.assertEqual(cells[("top-left", "y")], px(8))


if __name__ == "__main__":
    unittest.main()
