import unittest

from rui.bounds import Bounds
from rui.color import Color
from rui.css import value_css
from rui.containers import ListLayout
from rui.data import parse_data_text
from rui.events import MouseEvent
from rui.units import AUTO, em, px
from rui.view import View, create_view, to_view
from rui.widgets import TextView

from tests.fakes import make_session


class TestViewProperties(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.view = View(self.session)

    def test_padding_shorthand_sides(self):
        self.assertTrue(self.view.set("padding", "4px,8px,12px,16px"))
        self.assertEqual(self.view.get("padding-top"), px(4))
        self.assertEqual(self.view.get("padding-right"), px(8))
        self.assertEqual(self.view.get("padding-bottom"), px(12))
        self.assertEqual(self.view.get("padding-left"), px(16))
        self.view.remove("padding")
        for side in ("top", "right", "bottom", "left"):
            self.assertIs(self.view.get(f"padding-{side}"), AUTO)

    def test_padding_falls_back_to_style(self):
        self.session.theme.set_style("padded", {"padding": "2px"})
        self.view.set("style", "padded")
        self.view.set("padding", "4px,8px,12px,16px")
        self.view.remove("padding")
        self.assertEqual(self.view.get("padding-top"), px(2))
        self.assertEqual(self.view.get("padding"), Bounds.all(px(2)))

    def test_sub_tag_then_remove_restores_shorthand(self):
        self.view.set("padding", "4px")
        self.view.set("padding-left", "10px")
        self.assertEqual(self.view.get("padding"), Bounds(px(4), px(4), px(4), px(10)))
        self.view.remove("padding-left")
        self.assertEqual(self.view.get("padding"), Bounds.all(px(4)))

    def test_equal_shorthand_write_resets_sides(self):
        self.view.set("padding", "4px")
        self.view.set("padding-top", "8px")
        self.view.set("padding", "4px")
        self.assertEqual(self.view.get("padding-top"), px(4))
        self.assertEqual(self.view.get("padding"), Bounds.all(px(4)))

    def test_tag_aliases(self):
        self.view.set("left-margin", "3px")
        self.assertEqual(self.view.get("margin-left"), px(3))

    def test_equal_write_does_not_fire_change_listener(self):
        calls = []
        self.assertTrue(self.view.set_change_listener("width", lambda view, tag: calls.append((view, tag))))
        self.view.set("width", "10px")
        self.view.set("width", px(10))
        self.assertEqual(calls, [(self.view, "width")])

    def test_failed_write_keeps_value(self):
        self.view.set("width", "10px")
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.view.set("width", "wide"))
        self.assertEqual(self.view.get("width"), px(10))

    def test_defaults(self):
        self.assertIs(self.view.get("height"), AUTO)
        self.assertIs(self.view.get("italic"), False)
        self.assertEqual(self.view.get("opacity"), 1.0)

    def test_constants(self):
        self.session.set_constant("gap", "8px")
        self.view.set("width", "@gap")
        self.assertEqual(self.view.get_raw("width"), "@gap")
        self.assertEqual(self.view.get("width"), px(8))

    def test_dark_colors(self):
        self.session.set_color("ruiText", "#FF000000", "#FFFFFFFF")
        self.view.set("text-color", "@ruiText")
        self.assertEqual(self.view.get("text-color"), Color(0xFF000000))
        self.session.set_dark_theme(True)
        self.assertEqual(self.view.get("text-color"), Color(0xFFFFFFFF))

    def test_unknown_constant(self):
        self.view.set("width", "@missing")
        with self.assertLogs("rui.session", "ERROR"):
            self.assertIs(self.view.get("width"), AUTO)

    def test_style_and_inheritance(self):
        self.session.theme.set_style("caption", {"text-size": "2em"})
        child = View(self.session)
        layout = ListLayout(self.session, {"text-color": "red", "content": [child]})
        child.set("style", "caption")
        self.assertEqual(child.get("text-size"), em(2))
        self.assertEqual(child.get("text-color"), layout.get("text-color"))
        self.assertIs(child.get("width"), AUTO)


class TestViewRendering(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.bridge = self.session.bridge

    def test_html(self):
        view = View(self.session, {"width": "10px", "tooltip": "a <b>"})
        self.assertEqual(
            view.html(),
            '<div id="id000001" class="ruiView" style="width: 10px;" data-disabled="0" title="a &lt;b&gt;"></div>',
        )
        self.assertTrue(view.created)

    def test_no_updates_before_rendering(self):
        view = View(self.session)
        view.set("width", "10px")
        self.assertEqual(self.bridge.scripts, [])

    def test_change_becomes_css_update(self):
        view = View(self.session)
        view.html()
        view.set("width", "20px")
        self.assertEqual(self.bridge.scripts, ["updateCSSProperty('id000001', 'width', '20px');"])
        view.remove("width")
        self.assertEqual(self.bridge.scripts[-1], "updateCSSProperty('id000001', 'width', '');")

    def test_update_script_batches(self):
        view = View(self.session)
        view.html()
        with view.update_script():
            view.set("width", "30px")
            view.set("height", "5px")
            self.assertEqual(self.bridge.scripts, [])
        self.assertEqual(len(self.bridge.scripts), 1)
        script = self.bridge.scripts[0]
        self.assertIn("element.style['width'] = '30px';", script)
        self.assertIn("element.style['height'] = '5px';", script)

    def test_set_params_is_one_script(self):
        view = View(self.session)
        view.html()
        view.set_params({"width": "1px", "height": "2px", "opacity": 0.5})
        self.assertEqual(len(self.bridge.scripts), 1)

    def test_ignored_updates(self):
        view = View(self.session)
        view.html()
        with self.session.view_updates_ignored():
            view.set("width", "1px")
        self.assertEqual(self.bridge.scripts, [])
        self.assertEqual(view.get("width"), px(1))

    def test_listener_attribute(self):
        view = View(self.session)
        view.html()
        view.set("click-event", lambda: None)
        self.assertEqual(self.bridge.scripts,
                         ["updateProperty('id000001', 'onclick', 'clickEvent(this, event)');"])
        view.remove("click-event")
        self.assertEqual(self.bridge.scripts[-1], "removeProperty('id000001', 'onclick');")


class TestViewEvents(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_click(self):
        events = []
        view = View(self.session, {"click-event": lambda view, event: events.append((view, event))})
        view.handle_command("click-event", parse_data_text(f"click-event{{id={view.html_id}, x=4, y=5}}"))
        self.assertEqual(len(events), 1)
        self.assertIs(events[0][0], view)
        self.assertIsInstance(events[0][1], MouseEvent)
        self.assertEqual((events[0][1].x, events[0][1].y), (4.0, 5.0))

    def test_listener_without_view(self):
        events = []

        def clicked(event: MouseEvent):
            events.append(event)

        view = View(self.session, {"click-event": clicked})
        view.handle_command("click-event", parse_data_text(f"click-event{{id={view.html_id}, x=1}}"))
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], MouseEvent)

    def test_binding_names(self):
        class Handler:
            def __init__(self):
                self.clicks = 0

            def clicked(self, view, event):
                self.clicks += 1

        handler = Handler()
        child = View(self.session, {"click-event": "clicked"})
        layout = ListLayout(self.session, {"binding": handler, "content": [child]})
        self.assertIs(layout.binding(), handler)
        self.assertIs(child.binding(), handler)
        child.handle_command("click-event", parse_data_text(f"click-event{{id={child.html_id}}}"))
        self.assertEqual(handler.clicks, 1)

    def test_missing_binding_method(self):
        view = View(self.session, {"binding": object(), "click-event": "clicked"})
        with self.assertLogs("rui.listeners", "ERROR"):
            view.handle_command("click-event", parse_data_text(f"click-event{{id={view.html_id}}}"))

    def test_invalid_listener(self):
        with self.assertLogs("rui.listeners", "ERROR"):
            view = View(self.session, {"click-event": lambda a, b, c: None})
        self.assertIsNone(view.get("click-event"))

    def test_focus(self):
        focused = []
        view = View(self.session, {"focus-event": lambda: focused.append(True)})
        view.handle_command("focus-event", parse_data_text(f"focus-event{{id={view.html_id}}}"))
        self.assertTrue(view.has_focus())
        self.assertEqual(focused, [True])

    def test_unknown_command(self):
        view = View(self.session)
        self.assertFalse(view.handle_command("noSuchCommand", parse_data_text("noSuchCommand{}")))


class TestTransitions(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.view = View(self.session)
        self.view.html()

    def test_set_transition(self):
        self.assertTrue(self.view.set_transition("background-color", {"duration": 0.5}))
        self.assertEqual(self.view.transition_css(), "background-color 0.5s ease")
        self.assertTrue(self.view.set_transition("background-color", None))
        self.assertEqual(self.view.transitions(), {})

    def test_animated_set_round_trip(self):
        self.view.set_transition("background-color", {"duration": 0.5})
        prior = self.view.transitions()["background-color"]
        self.view.set("background-color", "#FF000000")

        self.assertTrue(self.view.set_animated("background-color", "#FFFFFFFF", {"duration": 2}))
        self.assertIs(self.view._single_transition["background-color"], prior)
        self.assertEqual(self.view.transitions()["background-color"].duration(), 2.0)
        self.assertEqual(self.view.get("background-color"), Color(0xFFFFFFFF))
        self.assertIn("updateCSSProperty('id000001', 'transition', 'background-color 2s ease');",
                      self.session.bridge.scripts)

        self.view.handle_command("transition-end-event", parse_data_text(
            f"transition-end-event{{id={self.view.html_id}, property=background-color}}"))
        self.assertNotIn("background-color", self.view._single_transition)
        self.assertIs(self.view.transitions()["background-color"], prior)
        self.assertEqual(self.session.bridge.scripts[-1],
                         "updateCSSProperty('id000001', 'transition', 'background-color 0.5s ease');")

    def test_animated_set_without_prior_transition(self):
        self.view.set_animated("width", "100px", {"duration": 1})
        self.view.handle_command("transition-cancel-event", parse_data_text(
            f"transition-cancel-event{{id={self.view.html_id}, property=width}}"))
        self.assertEqual(self.view.transitions(), {})

    def test_failed_animated_set_restores(self):
        self.view.set_transition("width", {"duration": 0.5})
        prior = self.view.transitions()["width"]
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.view.set_animated("width", "wide", {"duration": 1}))
        self.assertIs(self.view.transitions()["width"], prior)
        self.assertEqual(self.view._single_transition, {})


class TestTransformsAndFilters(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_transform(self):
        view = View(self.session, {"translate-x": "10px", "scale-x": 2, "skew-y": "30deg"})
        self.assertIn("transform: skew(0, 30deg) translate(10px, 0) scale(2, 1);", view.inline_style())
        view.html()
        view.set("translate-y", "5px")
        self.assertEqual(self.session.bridge.scripts[-1],
                         "updateCSSProperty('id000001', 'transform', 'skew(0, 30deg) translate(10px, 5px) scale(2, 1)');")
        view.set("translate-z", "1px")
        self.assertIn("translate3d(10px, 5px, 1px)", self.session.bridge.scripts[-1])
        for tag in ("translate-x", "translate-y", "translate-z", "skew-y", "scale-x"):
            view.remove(tag)
        self.assertEqual(self.session.bridge.scripts[-1], "updateCSSProperty('id000001', 'transform', '');")

    def test_single_transform_value(self):
        self.assertEqual(value_css("translate-x", px(10)), [("transform", "translate(10px, 0)")])
        self.assertEqual(value_css("scale-y", 0.5), [("transform", "scale(1, 0.5)")])

    def test_origin_and_backface(self):
        view = View(self.session, {"origin-x": "0px", "backface-visibility": False})
        style = view.inline_style()
        self.assertIn("transform-origin: 0 50%;", style)
        self.assertIn("backface-visibility: hidden;", style)

    def test_transform_transition(self):
        view = View(self.session)
        view.html()
        view.set_transition("translate-x", {"duration": 1})
        self.assertEqual(view.transition_css(), "transform 1s ease")
        view.set_animated("scale-x", 2, {"duration": 0.5})
        view.handle_command("transition-end-event", parse_data_text(
            f"transition-end-event{{id={view.html_id}, property=transform}}"))
        self.assertEqual(view._single_transition, {})
        self.assertEqual(sorted(view.transitions()), ["translate-x"])

    def test_filter(self):
        view = View(self.session, {"filter": {
            "blur": 2, "sepia": "40%", "hue-rotate": "90deg",
            "drop-shadow": {"x-offset": "1px", "y-offset": "2px", "blur": "3px", "color": "#FF000000"},
        }})
        self.assertIn("filter: blur(2px) sepia(40%) hue-rotate(90deg) drop-shadow(1px 2px 3px rgb(0,0,0));",
                      view.inline_style())
        view.set("backdrop-filter", parse_data_text("_{grayscale = 100}"))
        self.assertIn("backdrop-filter: grayscale(100%);", view.inline_style())

    def test_invalid_filter(self):
        view = View(self.session)
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(view.set("filter", {"blur": -1}))
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(view.set("filter", {"glow": 1}))
        self.assertTrue(view.set("filter", {}))
        self.assertIsNone(view.get("filter"))


class TestViewFactories(unittest.TestCase):

    def setUp(self):
        self.session = make_session()

    def test_create_view(self):
        view = create_view(self.session, parse_data_text(
            "ListLayout{orientation = start-to-end, content = [TextView{text = Hi}, TextView{text = There}]}"))
        self.assertIsInstance(view, ListLayout)
        self.assertEqual(view.get("orientation"), 1)
        texts = [child.get("text") for child in view.views()]
        self.assertEqual(texts, ["Hi", "There"])

    def test_unknown_view_type(self):
        with self.assertLogs("rui.view", "ERROR"):
            self.assertIsNone(create_view(self.session, parse_data_text("Spinner{}")))

    def test_to_view(self):
        view = View(self.session)
        self.assertIs(to_view(self.session, view), view)
        text = to_view(self.session, "hello")
        self.assertIsInstance(text, TextView)
        self.assertEqual(text.get("text"), "hello")
        self.assertIsNone(to_view(self.session, 42))


if __name__ == "__main__":
    unittest.main()
