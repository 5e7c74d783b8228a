import unittest

from rui.color import Color
from rui.containers import ListLayout
from rui.events import Frame
from rui.session import CTRL_KEY, ROOT_ID, SHIFT_KEY, Session, hot_key_code
from rui.theme import Theme
from rui.view import View

from tests.fakes import make_session


class TestMessages(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.bridge = self.session.bridge

    def test_pause_and_resume(self):
        events = []
        self.session.pause_listeners.append(lambda session: events.append("pause"))
        self.session.resume_listeners.append(lambda session: events.append("resume"))
        self.session.process_message("session-pause{session=1}")
        self.assertTrue(self.session.paused)
        self.session.process_message("session-resume{session=1}")
        self.assertFalse(self.session.paused)
        self.assertEqual(events, ["pause", "resume"])

    def test_invalid_message(self):
        with self.assertLogs("rui.session", "ERROR"):
            self.session.process_message("timer{timerID=1")

    def test_view_command(self):
        clicks = []
        view = View(self.session, {"click-event": lambda: clicks.append(True)})
        self.session.process_message(f"click-event{{id={view.html_id}, x=1, y=1}}")
        self.assertEqual(clicks, [True])

    def test_unknown_element(self):
        with self.assertLogs("rui.session", "WARNING"):
            self.session.process_message("click-event{id=id999999}")
        with self.assertLogs("rui.session", "ERROR"):
            self.session.process_message("click-event{x=1}")

    def test_root_size(self):
        self.session.process_message("root-size{width=1024, height=768}")
        self.assertEqual((self.session.screen_width, self.session.screen_height), (1024, 768))

    def test_resize(self):
        frames = []
        view = View(self.session, {"resize-event": lambda view, frame: frames.append(frame)})
        self.session.process_message(
            f"resize{{session=1, views=[_{{id={view.html_id}, x=1, y=2, width=30, height=40, scroll-width=30}}]}}")
        self.assertEqual(frames, [Frame(1.0, 2.0, 30.0, 40.0)])
        self.assertEqual(view.frame(), Frame(1.0, 2.0, 30.0, 40.0))
        self.assertEqual(view.scroll().width, 30.0)

    def test_session_info(self):
        self.session.set_color("ruiText", "#FF000000", "#FFFFFFFF")
        view = View(self.session, {"text-color": "@ruiText"})
        view.get("text-color")
        self.session.process_message(
            'sessionInfo{touch=1, user-agent="Mozilla/5.0", direction=rtl, language=de, languages="de,en",'
            ' dark=1, pixel-ratio=2, storage={theme=dark}}')
        self.assertTrue(self.session.touch_screen)
        self.assertEqual(self.session.user_agent, "Mozilla/5.0")
        self.assertEqual(self.session.text_direction, "rtl")
        self.assertEqual(self.session.language, "de")
        self.assertEqual(self.session.languages, ["de", "en"])
        self.assertTrue(self.session.dark_theme)
        self.assertEqual(self.session.pixel_ratio, 2.0)
        self.assertEqual(self.session.client_item("theme"), "dark")
        self.assertEqual(view.get("text-color"), Color(0xFFFFFFFF))

    def test_answer_is_routed_to_the_bridge(self):
        with self.assertLogs("rui.bridge", "WARNING"):
            self.session.process_message("answer{answerID=5}")

    def test_storage_error(self):
        with self.assertLogs("rui.session", "ERROR"):
            self.session.process_message("storageError{session=1, error=full}")


class TestConstants(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_touch_constants(self):
        self.session.set_constant("gap", "4px", "8px")
        self.assertEqual(self.session.constant("gap"), "4px")
        self.session.touch_screen = True
        self.assertEqual(self.session.constant("gap"), "8px")

    def test_chained_constants(self):
        self.session.set_constant("small", "3px")
        self.session.set_constant("gap", "@small")
        self.assertEqual(self.session.resolve_constant("width", "@gap").css(), "3px")

    def test_self_reference(self):
        self.session.set_constant("loop", "@loop")
        with self.assertLogs("rui.session", "ERROR"):
            self.assertIsNone(self.session.resolve_constant("width", "@loop"))

    def test_strings(self):
        self.session.add_strings("", {"hello": "Hello"})
        self.session.add_strings("de", {"hello": "Hallo"})
        self.assertEqual(self.session.get_string("hello"), "Hello")
        self.session.language = "de"
        self.assertEqual(self.session.get_string("@hello"), "Hallo")
        self.assertEqual(self.session.get_string("unknown"), "unknown")
        self.assertEqual(self.session.resolve_string("plain"), "plain")
        with self.assertLogs("rui.session", "ERROR"):
            self.assertEqual(self.session.resolve_string("@missing"), "")


class TestTimersAndKeys(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.bridge = self.session.bridge

    def test_timer(self):
        ticks = []
        timer_id = self.session.start_timer(250, lambda session: ticks.append(session))
        self.assertEqual(timer_id, 1)
        self.assertEqual(self.bridge.scripts, ["startTimer(250, 1);"])
        self.session.process_message("timer{session=1, timerID=1}")
        self.assertEqual(ticks, [self.session])
        self.session.stop_timer(timer_id)
        self.assertEqual(self.bridge.scripts[-1], "stopTimer(1);")
        with self.assertLogs("rui.session", "ERROR"):
            self.session.process_message("timer{session=1, timerID=1}")

    def test_timer_without_connection(self):
        self.assertEqual(Session().start_timer(100, lambda session: None), 0)

    def test_hot_key(self):
        self.assertEqual(hot_key_code("KeyA", CTRL_KEY | SHIFT_KEY), "keya-cs")
        self.assertEqual(hot_key_code("Enter"), "enter")
        pressed = []
        self.session.set_hot_key("KeyA", CTRL_KEY | SHIFT_KEY, lambda session: pressed.append(True))
        self.session.process_message("key-down-event{id=body, code=KeyA, ctrlKey=1, shiftKey=1}")
        self.session.process_message("key-down-event{id=body, code=KeyA, ctrlKey=1}")
        self.assertEqual(pressed, [True])
        self.session.set_hot_key("KeyA", CTRL_KEY | SHIFT_KEY, None)
        self.session.process_message("key-down-event{id=body, code=KeyA, ctrlKey=1, shiftKey=1}")
        self.assertEqual(pressed, [True])

    def test_client_storage(self):
        self.session.set_client_item("theme", "dark")
        self.assertEqual(self.session.client_item("theme"), "dark")
        self.session.remove_client_item("theme")
        self.assertIsNone(self.session.client_item("theme"))
        self.session.remove_all_client_items()
        self.assertEqual(self.bridge.scripts, [
            "localStorageSet('theme', 'dark');",
            "localStorageRemove('theme');",
            "localStorageClear();",
        ])


class TestPageAndClose(unittest.TestCase):

    def test_write_init_script(self):
        theme = Theme("test")
        theme.set_style("caption", {"text-weight": "bold"})
        session = Session(1, None, theme)
        session.set_root_view(View(session, {"width": "10px"}))
        lines = session.write_init_script().split("\n")
        self.assertEqual(lines[0], "setStyles('.caption { font-weight: bold; }');")
        self.assertEqual(lines[1], f"updateInnerHTML('{ROOT_ID}', "
                                   "'<div id=\"id000001\" class=\"ruiView\" style=\"width: 10px;\" data-disabled=\"0\">"
                                   "</div>');")
        self.assertEqual(lines[2], "scanElementsSize();")

    def test_set_root_view_on_connected_session(self):
        session = make_session()
        root = ListLayout(session, {"content": "hi"})
        session.set_root_view(root)
        self.assertTrue(session.bridge.scripts[0].startswith(f"updateInnerHTML('{ROOT_ID}', '<div id=\"{root.html_id}\""))
        self.assertEqual(session.bridge.scripts[-1], "scanElementsSize();")
        self.assertTrue(root.created)

    def test_close(self):
        session = make_session()
        bridge = session.bridge
        closed = []
        session.close_listeners.append(lambda s: closed.append(s))
        session.start_timer(10, lambda s: None)
        session.process_message("session-close{session=1}")
        self.assertTrue(session.closed)
        self.assertTrue(bridge.closed)
        self.assertIsNone(session.bridge)
        self.assertEqual(closed, [session])
        session.close()
        self.assertEqual(closed, [session])
        self.assertEqual(session.start_timer(10, lambda s: None), 0)

    def test_lost_connection_closes_session(self):
        session = make_session()
        session.bridge.close()
        with self.assertLogs("rui.session", "WARNING"):
            session.call_func("setTitle", "x")
        self.assertTrue(session.closed)


if __name__ == "__main__":
    unittest.main()
