import unittest

from rui.data import parse_data_text
from rui.widgets import OLD_TEXT_TAG, DropDownList, EditView, ImageView, ProgressBar, TextView

from tests.fakes import make_session


def message(command, view, fields=""):
    text = f"{command}{{id={view.html_id}"
    if fields:
        text += ", " + fields
    return parse_data_text(text + "}")


class TestTextView(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_html_escapes_text(self):
        view = TextView(self.session, {"text": "a<b\nc"})
        self.assertTrue(view.html().endswith(">a&lt;b<br>c</div>"))

    def test_text_change_rewrites_inner_html(self):
        view = TextView(self.session, {"text": "one"})
        view.html()
        view.set("text", "two")
        self.assertEqual(self.session.bridge.scripts, [f"updateInnerHTML('{view.html_id}', 'two');"])


class TestEditView(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.changes = []
        self.edit = EditView(self.session, {
            "edit-text-changed": lambda view, new, old: self.changes.append((new, old)),
        })

    def test_typed_text(self):
        self.edit.handle_command("textChanged", message("textChanged", self.edit, "text=hello"))
        self.assertEqual(self.edit.text(), "hello")
        self.assertEqual(self.edit.old_text(), "")
        self.assertEqual(self.changes, [("hello", "")])
        self.edit.handle_command("textChanged", message("textChanged", self.edit, "text=hello"))
        self.assertEqual(len(self.changes), 1)

    def test_program_text(self):
        self.edit.html()
        self.edit.set("text", "bye")
        self.edit.set("value", "again")
        self.assertEqual(self.changes, [("bye", ""), ("again", "bye")])
        self.assertEqual(self.edit.old_text(), "bye")
        self.assertEqual(self.session.bridge.scripts[-1], f"setInputValue('{self.edit.html_id}', 'again');")

    def test_old_text_is_read_only(self):
        with self.assertLogs("rui.widgets", "ERROR"):
            self.assertFalse(self.edit.set(OLD_TEXT_TAG, "x"))

    def test_html(self):
        edit = EditView(self.session, {"type": "password", "hint": "Name", "text": "secret"})
        html = edit.html()
        self.assertTrue(html.startswith("<input "))
        self.assertIn(' type="password"', html)
        self.assertIn(' placeholder="Name"', html)
        self.assertIn(' value="secret"', html)
        self.assertIn(' tabindex="0"', html)
        self.assertFalse(html.endswith("</input>"))

    def test_multiline_html(self):
        edit = EditView(self.session, {"type": "multiline", "text": "a & b"})
        html = edit.html()
        self.assertTrue(html.startswith("<textarea "))
        self.assertTrue(html.endswith(">a &amp; b</textarea>"))


class TestDropDownList(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.calls = []
        self.drop_down = DropDownList(self.session, {"items": ["a", "b", "c"], "current": 0})
        self.drop_down.set("drop-down-event", lambda view, new, old: self.calls.append((view, new, old)))

    def test_item_selected(self):
        self.drop_down.handle_command("itemSelected", message("itemSelected", self.drop_down, "number=2"))
        self.assertEqual(self.drop_down.current(), 2)
        self.assertEqual(self.calls, [(self.drop_down, 2, 0)])

    def test_out_of_range_selection_is_ignored(self):
        self.drop_down.handle_command("itemSelected", message("itemSelected", self.drop_down, "number=7"))
        self.assertEqual(self.drop_down.current(), 0)
        self.assertEqual(self.calls, [])

    def test_program_selection(self):
        self.drop_down.set("current", 1)
        self.assertEqual(self.calls, [(self.drop_down, 1, 0)])
        self.drop_down.set("current", 1)
        self.assertEqual(len(self.calls), 1)

    def test_html(self):
        self.drop_down.set("disabled-items", "2")
        html = self.drop_down.html()
        self.assertTrue(html.startswith("<select "))
        self.assertIn("<option selected>a</option><option>b</option><option disabled>c</option></select>", html)

    def test_translated_items(self):
        self.session.add_strings("", {"a": "Alpha"})
        self.assertIn("<option selected>Alpha</option>", self.drop_down.html())


class TestImageView(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_loaded(self):
        loaded = []
        image = ImageView(self.session, {"source": "cat.png", "loaded-event": lambda: loaded.append(True)})
        image.handle_command("imageViewLoaded", message(
            "imageViewLoaded", image, 'natural-width=640, natural-height=480, current-src="http://host/cat.png"'))
        self.assertEqual(loaded, [True])
        self.assertEqual((image.natural_width, image.natural_height), (640.0, 480.0))
        self.assertEqual(image.current_src, "http://host/cat.png")

    def test_error(self):
        errors = []
        image = ImageView(self.session, {"src": "missing.png", "error-event": lambda view: errors.append(view)})
        self.assertIn(' onerror="imageError(this, event)"', image.html())
        image.handle_command("imageViewError", message("imageViewError", image))
        self.assertEqual(errors, [image])

    def test_html(self):
        image = ImageView(self.session, {"src": "cat.png", "alt": "A cat", "fit": "cover"})
        html = image.html()
        self.assertTrue(html.startswith("<img "))
        self.assertIn('style="object-fit: cover;"', html)
        self.assertIn(' src="cat.png" alt="A cat"', html)
        self.assertNotIn("</img>", html)

    def test_source_change(self):
        image = ImageView(self.session, {"src": "cat.png"})
        image.html()
        image.set("src", "dog.png")
        self.assertEqual(self.session.bridge.scripts, [f"updateProperty('{image.html_id}', 'src', 'dog.png');"])


class TestProgressBar(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_html(self):
        bar = ProgressBar(self.session, {"max": 10, "value": "2.5"})
        html = bar.html()
        self.assertTrue(html.startswith(f'<progress id="{bar.html_id}"'))
        self.assertIn(' max="10" value="2.5"', html)
        self.assertIn(' max="1" value="0"', ProgressBar(self.session).html())

    def test_update(self):
        bar = ProgressBar(self.session)
        bar.html()
        bar.set("progress-value", 0.5)
        self.assertEqual(self.session.bridge.scripts[-1], f"updateProperty('{bar.html_id}', 'value', '0.5');")
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(bar.set("value", -1))
        self.assertEqual(bar.get("progress-bar-value"), 0.5)


if __name__ == "__main__":
    unittest.main()
