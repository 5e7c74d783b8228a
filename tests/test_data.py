import unittest

from rui.data import DataObject, NodeType, parse_data_text, write_data_text
from rui.errors import DataParseError


class TestDataText(unittest.TestCase):

    def test_event_message(self):
        obj = parse_data_text('clickEvent{id=id000012, x=10, y="20", buttons=[1, 2], frame=_{width=10}}')
        self.assertEqual(obj.tag, "clickEvent")
        self.assertEqual(obj.property_count, 5)
        self.assertEqual(obj.property_value("id"), "id000012")
        self.assertEqual(obj.property_int("x"), 10)
        self.assertEqual(obj.property_float("y"), 20.0)

        buttons = obj.property_by_tag("buttons")
        self.assertEqual(buttons.type, NodeType.ARRAY)
        self.assertEqual(buttons.array, ["1", "2"])

        frame = obj.property_object("frame")
        self.assertIsInstance(frame, DataObject)
        self.assertEqual(frame.tag, "_")
        self.assertEqual(frame.property_value("width"), "10")

    def test_multiline_with_comments(self):
        obj = parse_data_text('obj {\n  // a comment\n  a = 1\n  /* b */ b = "x\\ny"\n}\n')
        self.assertEqual(obj.property_value("a"), "1")
        self.assertEqual(obj.property_value("b"), "x\ny")

    def test_backquoted_text(self):
        obj = parse_data_text("fileLoadingError{index=0, error=`File not found`}")
        self.assertEqual(obj.property_value("error"), "File not found")

    def test_empty_object(self):
        obj = parse_data_text("session-resume{}")
        self.assertEqual(obj.tag, "session-resume")
        self.assertEqual(obj.property_count, 0)

    def test_typed_accessors(self):
        obj = parse_data_text("x{n=3.0, f=abc, b=1, t=true, o=_{}}")
        self.assertEqual(obj.property_int("n"), 3)
        self.assertIsNone(obj.property_int("f"))
        self.assertIsNone(obj.property_float("f"))
        self.assertTrue(obj.property_bool("b"))
        self.assertTrue(obj.property_bool("t"))
        self.assertFalse(obj.property_bool("missing"))
        self.assertIsNone(obj.property_value("o"))
        self.assertIsNone(obj.property_object("f"))

    def test_errors(self):
        for text in ("obj{a=1", "obj{a}", "obj{a=}", 'obj{a="open}'):
            with self.assertRaises(DataParseError):
                parse_data_text(text)

    def test_error_is_value_error_with_line(self):
        with self.assertRaises(ValueError) as ctx:
            parse_data_text("obj{\na=1\nb}")
        self.assertEqual(ctx.exception.line, 3)

    def test_write(self):
        text = 'x{a=1, b="two words", c=[p, q], d=_{e=f}}'
        self.assertEqual(write_data_text(parse_data_text(text)), text)

    def test_edit_nodes(self):
        obj = DataObject("item")
        obj.set_property_value("a", "1")
        obj.set_property_value("a", "2")
        obj.set_property_array("list", ["x", "y"])
        self.assertEqual(obj.property_count, 2)
        self.assertEqual(obj.property_value("a"), "2")
        self.assertIsNotNone(obj.remove_property_by_tag("a"))
        self.assertIsNone(obj.remove_property_by_tag("a"))

    def test_to_params_drops_empty_values(self):
        obj = parse_data_text('x{a="", b=1, c=[], d=_{e=f}}')
        params = obj.to_params()
        self.assertEqual(sorted(params), ["b", "d"])
        self.assertIsInstance(params["d"], DataObject)


if __name__ == "__main__":
    unittest.main()
