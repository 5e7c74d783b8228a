import datetime
import unittest

from rui.color import Color
from rui.data import parse_data_text
from rui.events import FileInfo
from rui.pickers import ColorPicker, DatePicker, FilePicker, NumberPicker, TimePicker, to_date, to_time

from tests.fakes import make_session


def text_changed(view, text):
    return parse_data_text(f'textChanged{{id={view.html_id}, text="{text}"}}')


class TestNumberPicker(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.changes = []
        self.picker = NumberPicker(self.session, {
            "min": 0,
            "max": 10,
            "value": 5,
            "number-changed": lambda view, new, old: self.changes.append((new, old)),
        })

    def test_typed_value(self):
        self.picker.handle_command("textChanged", text_changed(self.picker, "7.5"))
        self.assertEqual(self.picker.value(), 7.5)
        self.assertEqual(self.changes, [(7.5, 5.0)])

    def test_invalid_text(self):
        with self.assertLogs("rui.pickers", "ERROR"):
            self.picker.handle_command("textChanged", text_changed(self.picker, "abc"))
        self.assertEqual(self.picker.value(), 5.0)
        self.assertEqual(self.changes, [])

    def test_html(self):
        html = self.picker.html()
        self.assertIn(' type="number" min="0" max="10" step="any" value="5"', html)
        self.assertIn(' onclick="stopEventPropagation(this, event)"', html)

    def test_slider(self):
        self.picker.html()
        self.picker.set("type", "slider")
        self.assertEqual(self.session.bridge.scripts,
                         [f"updateProperty('{self.picker.html_id}', 'type', 'range');"])

    def test_unbounded_defaults(self):
        picker = NumberPicker(self.session)
        self.assertEqual(picker.get("min"), float("-inf"))
        self.assertEqual(picker.get("max"), float("inf"))
        self.assertEqual(picker.value(), 0.0)


class TestColorPicker(unittest.TestCase):

    def test_typed_color(self):
        session = make_session()
        changes = []
        picker = ColorPicker(session, {"color-changed": lambda view, new, old: changes.append((new, old))})
        self.assertEqual(picker.value(), Color(0xFF000000))
        picker.handle_command("textChanged", text_changed(picker, "#ff0000"))
        self.assertEqual(changes, [(Color(0xFFFF0000), Color(0xFF000000))])
        self.assertIn(' type="color" value="#ff0000"', picker.html())


class TestMoments(unittest.TestCase):

    def test_date_forms(self):
        expected = datetime.date(2024, 3, 15)
        for text in ("20240315", "2024-03-15", "15-Mar-2024", "Mar-15-2024", "March 15, 2024",
                     "15 March 2024", "03/15/2024", "03/15/24"):
            self.assertEqual(to_date(text), expected, text)
        with self.assertRaises(ValueError):
            to_date("someday")

    def test_time_forms(self):
        self.assertEqual(to_time("13:45"), datetime.time(13, 45))
        self.assertEqual(to_time("13:45:10"), datetime.time(13, 45, 10))
        self.assertEqual(to_time("1:30 pm"), datetime.time(13, 30))
        with self.assertRaises(ValueError):
            to_time("noon")

    def test_date_picker(self):
        session = make_session()
        changes = []
        picker = DatePicker(session, {"value": "2024-03-15", "min": "2024-01-01"})
        picker.set("date-changed", lambda view, new, old: changes.append((new, old)))
        html = picker.html()
        self.assertIn(' type="date" min="2024-01-01" value="2024-03-15"', html)

        picker.handle_command("textChanged", text_changed(picker, "2024-04-01"))
        self.assertEqual(changes, [(datetime.date(2024, 4, 1), datetime.date(2024, 3, 15))])

        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(picker.set("value", "someday"))
        self.assertEqual(picker.value(), datetime.date(2024, 4, 1))

    def test_time_picker(self):
        session = make_session()
        picker = TimePicker(session, {"value": "08:30", "step": 60})
        self.assertEqual(picker.value(), datetime.time(8, 30))
        self.assertIn(' type="time" step="60" value="08:30:00"', picker.html())
        picker.html()
        picker.set("value", datetime.time(9, 0))
        self.assertEqual(session.bridge.scripts[-1], f"setInputValue('{picker.html_id}', '09:00:00');")


class TestFilePicker(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.selected = []
        self.picker = FilePicker(self.session, {
            "accept": "txt, image/png",
            "multiple": True,
            "file-selected-event": lambda view, files: self.selected.append(files),
        })
        self.picker.handle_command("fileSelected", parse_data_text(
            f"fileSelected{{id={self.picker.html_id}, files=["
            '_{name=a.txt, size=2, last-modified=5, mime-type="text/plain"}, _{name=b.txt, size=3}]}'))

    def test_selection(self):
        self.assertEqual(len(self.selected), 1)
        names = [info.name for info in self.picker.files()]
        self.assertEqual(names, ["a.txt", "b.txt"])
        self.assertEqual(self.picker.files()[0].mime_type, "text/plain")

    def test_html(self):
        html = self.picker.html()
        self.assertIn(' accept=".txt, image/png" type="file" multiple', html)

    def test_load_file(self):
        loaded = []
        info = self.picker.files()[0]
        self.assertTrue(self.picker.load_file(info, lambda file, data: loaded.append((file.name, data))))
        self.assertEqual(self.session.bridge.scripts[-1], f"loadSelectedFile('{self.picker.html_id}', 0);")
        self.picker.handle_command("fileLoaded", parse_data_text(
            f'fileLoaded{{id={self.picker.html_id}, index=0, name=a.txt, size=2, data="data:text/plain;base64,aGk="}}'))
        self.assertEqual(loaded, [("a.txt", b"hi")])

    def test_load_error(self):
        loaded = []
        self.picker.load_file(self.picker.files()[1], lambda file, data: loaded.append((file.name, data)))
        with self.assertLogs("rui.pickers", "ERROR"):
            self.picker.handle_command("fileLoadingError", parse_data_text(
                f"fileLoadingError{{id={self.picker.html_id}, index=1, error=`unreadable`}}"))
        self.assertEqual(loaded, [("b.txt", None)])

    def test_unknown_file(self):
        self.assertFalse(self.picker.load_file(FileInfo(name="c.txt"), lambda file, data: None))


if __name__ == "__main__":
    unittest.main()
