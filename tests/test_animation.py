import unittest

from rui.animation import (
    CANCEL_EVENT, END_EVENT, AnimatedProperty, Animation, KeyframeRegistry, cubic_bezier_timing, to_animation,
    validate_timing_function,
)
from rui.data import parse_data_text
from rui.units import px
from rui.view import View

from tests.fakes import make_session


def grow_animation(**params):
    params.setdefault("id", "grow")
    params.setdefault("duration", 2)
    params.setdefault("property", AnimatedProperty("width", "100px", "300px", {50: "200px"}))
    return Animation(params)


class TestTiming(unittest.TestCase):

    def test_timing_functions(self):
        self.assertEqual(validate_timing_function("Ease-In"), "ease-in")
        self.assertEqual(validate_timing_function("steps( 3 )"), "steps(3)")
        self.assertEqual(validate_timing_function("cubic-bezier(0.1, 0.2, 0.3, 0.4)"),
                         "cubic-bezier(0.1, 0.2, 0.3, 0.4)")
        for bad in ("bogus", "steps(0)", "cubic-bezier(1, 2)"):
            with self.assertRaises(ValueError):
                validate_timing_function(bad)

    def test_cubic_bezier_clamps_x(self):
        self.assertEqual(cubic_bezier_timing(-1, 0.5, 2, 1), "cubic-bezier(0, 0.5, 1, 1)")

    def test_defaults(self):
        animation = Animation()
        self.assertEqual(animation.duration(), 1.0)
        self.assertEqual(animation.delay(), 0.0)
        self.assertEqual(animation.timing_function(), "ease")
        self.assertEqual(animation.iteration_count(), 1)
        self.assertEqual(animation.direction(), "normal")

    def test_transition_css(self):
        animation = Animation({"duration": 0.5, "delay": 1, "timing-function": "linear"})
        self.assertEqual(animation.transition_css("width"), "width 0.5s linear 1s")

    def test_invalid_parameters(self):
        animation = Animation()
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(animation.set("timing-function", "wobbly"))
        with self.assertLogs("rui.animation", "ERROR"):
            self.assertFalse(animation.set("text-color", "red"))
        with self.assertRaises(ValueError):
            Animation.from_params({"duration": -1})

    def test_to_animation(self):
        animation = to_animation({"duration": 3, "direction": "alternate"})
        self.assertEqual(animation.duration(), 3.0)
        self.assertEqual(animation.direction(), "alternate")
        with self.assertRaises(ValueError):
            to_animation(42)


class TestAnimatedProperty(unittest.TestCase):

    def test_key_frame_bounds_fill_from_and_to(self):
        prop = AnimatedProperty("Width", key_frames={0: "1px", "50%": "2px", 100: "3px"})
        self.assertEqual(prop.tag, "width")
        self.assertEqual((prop.from_value, prop.to_value), (px(1), px(3)))
        self.assertEqual(prop.key_frames, {50: px(2)})

    def test_invalid(self):
        with self.assertRaises(ValueError):
            AnimatedProperty("width", "1px")
        with self.assertRaises(ValueError):
            AnimatedProperty("width", "@gap", "2px")
        with self.assertRaises(ValueError):
            AnimatedProperty("width", "1px", "2px", {150: "3px"})
        with self.assertRaises(ValueError):
            AnimatedProperty("no-such-tag", "1px", "2px")

    def test_keyframes_body(self):
        self.assertEqual(
            grow_animation().keyframes_body(),
            "{ from { width: 100px; } 50% { width: 200px; } to { width: 300px; } }",
        )


class TestKeyframeRegistry(unittest.TestCase):

    def test_shared_blocks(self):
        registry = KeyframeRegistry()
        first = registry.acquire("{ from { width: 1px; } to { width: 2px; } }")
        second = registry.acquire("{ from { width: 1px; } to { width: 2px; } }")
        other = registry.acquire("{ from { width: 5px; } to { width: 6px; } }")
        self.assertEqual(first, "kf000001")
        self.assertEqual(second, first)
        self.assertEqual(other, "kf000002")
        self.assertEqual(registry.use_count(first), 2)

        registry.release(first)
        self.assertEqual(registry.use_count(first), 1)
        registry.release(first)
        self.assertEqual(registry.names(), ["kf000002"])
        self.assertEqual(registry.css(), "@keyframes kf000002 { from { width: 5px; } to { width: 6px; } }")

    def test_release_unknown(self):
        with self.assertLogs("rui.animation", "WARNING"):
            KeyframeRegistry().release("kf999999")

    def test_last_release_clears_page_animations(self):
        session = make_session()
        name = session.keyframes.acquire("{ from { opacity: 0; } to { opacity: 1; } }")
        self.assertIn("styles.textContent += '@keyframes kf000001 ", session.bridge.scripts[-1])
        session.keyframes.release(name)
        self.assertIn("styles.textContent = '';", session.bridge.scripts[-1])


class TestAnimationRun(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.view = View(self.session)
        self.view.html()
        self.user_ends = []
        self.view.set("animation-end-event", lambda: self.user_ends.append(True))
        self.saved = {event: self.view.get_raw(event) for event in (
            "animation-start-event", "animation-end-event", "animation-iteration-event", "animation-cancel-event")}
        self.reports = []
        self.animation = grow_animation()

    def report(self, view, animation, event):
        self.reports.append((view, animation, event))

    def listeners(self):
        return {event: self.view.get_raw(event) for event in self.saved}

    def test_run_to_end(self):
        self.assertTrue(self.animation.start(self.view, self.report))
        self.assertEqual(self.session.keyframes.names(), ["kf000001"])
        self.assertEqual(
            self.session.keyframes.block("kf000001"),
            "@keyframes kf000001 { from { width: 100px; } 50% { width: 200px; } to { width: 300px; } }",
        )
        self.assertEqual(self.view.animations(), [self.animation])
        self.assertEqual(self.view.animation_css(), "kf000001 2s ease 0s 1 normal")
        self.assertEqual(len(self.view.get_raw("animation-end-event")), 2)

        self.view.handle_command(END_EVENT, parse_data_text(
            f"animation-end-event{{id={self.view.html_id}, name=kf000001}}"))

        self.assertEqual(self.user_ends, [True])
        self.assertEqual(self.view.get("width"), px(300))
        self.assertEqual(self.listeners(), self.saved)
        self.assertEqual(self.view.animations(), [])
        self.assertEqual(self.session.keyframes.names(), [])
        self.assertEqual(self.reports, [(self.view, self.animation, END_EVENT)])
        self.assertIsNone(self.animation.view())

    def test_stop_is_a_cancel(self):
        self.assertTrue(self.animation.start(self.view, self.report))
        self.animation.stop()
        self.assertEqual(self.view.get("width"), px(300))
        self.assertEqual(self.listeners(), self.saved)
        self.assertEqual(self.reports, [(self.view, self.animation, CANCEL_EVENT)])
        self.assertEqual(self.user_ends, [])
        self.animation.stop()
        self.assertEqual(len(self.reports), 1)

    def test_previous_animation_is_restored(self):
        previous = grow_animation(id="previous", property=AnimatedProperty("opacity", 0, 1))
        self.view.set("animation", previous)
        self.assertTrue(self.animation.start(self.view))
        self.assertEqual(self.view.animations(), [self.animation])
        self.animation.stop()
        self.assertEqual(self.view.animations(), [previous])
        self.assertEqual(len(self.session.keyframes.names()), 1)

    def test_restored_animation_keeps_keyframes_name(self):
        previous = grow_animation(id="previous", property=AnimatedProperty("opacity", 0, 1))
        self.view.set("animation", previous)
        name = previous.name
        self.assertTrue(self.animation.start(self.view))
        self.assertEqual(self.session.keyframes.use_count(name), 1)
        self.animation.stop()
        self.assertEqual(previous.name, name)
        self.assertEqual(self.session.keyframes.names(), [name])
        self.assertEqual(self.session.keyframes.use_count(name), 1)
        self.assertEqual(self.view.animation_css(), f"{name} 2s ease 0s 1 normal")

    def test_start_rejections(self):
        with self.assertLogs("rui.animation", "ERROR"):
            self.assertFalse(self.animation.start(None))
        with self.assertLogs("rui.animation", "ERROR"):
            self.assertFalse(Animation({"duration": 1}).start(self.view))
        self.assertTrue(self.animation.start(self.view))
        with self.assertLogs("rui.animation", "ERROR"):
            self.assertFalse(self.animation.start(self.view))

    def test_pause_and_resume(self):
        self.animation.start(self.view)
        self.animation.pause()
        self.assertIs(self.view.get("animation-paused"), True)
        self.animation.resume()
        self.assertIs(self.view.get("animation-paused"), False)

    def test_animation_event_reports_id(self):
        ids = []
        self.view.set("animation-start-event", lambda view, animation_id: ids.append(animation_id))
        self.animation.start(self.view)
        self.view.handle_command("animation-start-event", parse_data_text(
            f"animation-start-event{{id={self.view.html_id}, name=kf000001}}"))
        self.assertEqual(ids, ["grow"])


if __name__ == "__main__":
    unittest.main()
