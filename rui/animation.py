# rui/animation.py
"""
Animations and transitions.

An :class:`Animation` is a property map holding timing (``duration``,
``delay``, ``timing-function``, ``iteration-count``, ``direction``) and,
for keyframe animations, the animated properties. Without animated
properties the same object serves as a transition record.

Keyframe blocks are shared per session through a :class:`KeyframeRegistry`:
identical blocks get one generated ``kf######`` name and a use count, and
the block is dropped from the page style sheet when the count falls to zero.
"""
import logging
import re
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .color import Color
from .css import CSSBuilder, value_css
from .data import DataObject
from .listeners import EventListener
from .properties import (
    COLOR_PROPERTIES, ENUM_PROPERTIES, FAMILY_OF, REMOVE, Properties, coerce_value, default_value, family_css,
    invalid_property_value, is_constant_name, normalize_tag,
)
from .units import format_number

logger = logging.getLogger(__name__)

START_EVENT = "animation-start-event"
END_EVENT = "animation-end-event"
ITERATION_EVENT = "animation-iteration-event"
CANCEL_EVENT = "animation-cancel-event"

TIMING_FUNCTIONS = ("ease", "ease-in", "ease-out", "ease-in-out", "linear")

_FUNCTION_RE = re.compile(r"^([a-z-]+)\s*\((.*)\)$")


def steps_timing(count: int) -> str:
    return f"steps({int(count)})"


def cubic_bezier_timing(x1: float, y1: float, x2: float, y2: float) -> str:
    """A cubic Bezier timing function; x values are clamped to [0, 1]."""
    x1 = min(max(x1, 0.0), 1.0)
    x2 = min(max(x2, 0.0), 1.0)
    return f"cubic-bezier({format_number(x1)}, {format_number(y1)}, {format_number(x2)}, {format_number(y2)})"


def validate_timing_function(value: str) -> str:
    """
    Normalize a timing function.

    :raises ValueError: if the text is not a timing function name,
        ``steps(n)`` or ``cubic-bezier(x1, y1, x2, y2)``.
    """
    text = " ".join(str(value).strip().lower().split())
    if text in TIMING_FUNCTIONS:
        return text
    match = _FUNCTION_RE.match(text)
    if match:
        name, args = match.group(1), [arg.strip() for arg in match.group(2).split(",")]
        if name == "steps" and len(args) == 1 and args[0].isdigit() and int(args[0]) > 0:
            return steps_timing(int(args[0]))
        if name == "cubic-bezier" and len(args) == 4:
            try:
                return cubic_bezier_timing(*(float(arg) for arg in args))
            except ValueError:
                pass
    raise ValueError(f"{value!r} is not a timing function")


def _frame_value(tag: str, value: Any) -> Any:
    if is_constant_name(value):
        raise ValueError("constants are not allowed in animated properties")
    try:
        coerced = coerce_value(tag, value)
    except KeyError:
        raise ValueError(f"{tag!r} property can not be animated") from None
    if coerced is REMOVE:
        coerced = Color(0) if tag in COLOR_PROPERTIES else default_value(tag)
        if coerced is None:
            raise ValueError(f"{value!r} is not a value of {tag!r}")
    return coerced


def _percent(key: Any) -> int:
    text = str(key).strip().rstrip("%")
    percent = int(float(text))
    if percent < 0 or percent > 100:
        raise ValueError(f"key frame {key!r} is out of range")
    return percent


@dataclass
class AnimatedProperty:
    """
    Values of one property over the course of an animation.

    :param tag: The animated property.
    :param from_value: Value at 0%.
    :param to_value: Value at 100%.
    :param key_frames: Values at intermediate percentages; entries at 0 and
        100 stand for ``from_value`` and ``to_value`` when those are missing.
    :raises ValueError: if ``from_value`` or ``to_value`` is missing or a
        value does not fit the property.
    """
    tag: str
    from_value: Any = None
    to_value: Any = None
    key_frames: Dict[int, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.tag = normalize_tag(self.tag)
        frames = {_percent(key): value for key, value in self.key_frames.items()}
        if 0 in frames:
            first = frames.pop(0)
            if self.from_value is None:
                self.from_value = first
        if 100 in frames:
            last = frames.pop(100)
            if self.to_value is None:
                self.to_value = last
        if self.from_value is None or self.to_value is None:
            raise ValueError(f"animated property {self.tag!r} needs both 'from' and 'to' values")
        self.from_value = _frame_value(self.tag, self.from_value)
        self.to_value = _frame_value(self.tag, self.to_value)
        self.key_frames = {percent: _frame_value(self.tag, value) for percent, value in sorted(frames.items())}

    def declarations(self, value: Any) -> List[Tuple[str, str]]:
        family = FAMILY_OF.get(self.tag)
        if family is not None:
            return family_css(family, family.effective_cells([(self.tag, value)]))
        return value_css(self.tag, value)


def to_animated_property(value: Any) -> AnimatedProperty:
    """Accept an AnimatedProperty, or a dict / data object with tag, from, to and key-frames."""
    if isinstance(value, AnimatedProperty):
        return value
    if isinstance(value, DataObject):
        value = value.to_params()
    if not isinstance(value, dict):
        raise ValueError(f"{type(value).__name__} is not an animated property")
    params = {normalize_tag(key): item for key, item in value.items()}
    if "tag" not in params:
        raise ValueError("animated property needs a 'tag'")
    frames = params.get("key-frames") or {}
    if isinstance(frames, DataObject):
        frames = frames.to_params()
    if not isinstance(frames, dict):
        raise ValueError("'key-frames' must map percentages to values")
    return AnimatedProperty(str(params["tag"]), params.get("from"), params.get("to"), dict(frames))


class Animation(Properties):
    """
    A keyframe animation or a transition.

    :param params: ``id``, ``property`` (animated properties), ``duration``
        (seconds, default 1), ``delay``, ``timing-function`` (default ease),
        ``iteration-count`` (0 or less repeats forever, default 1) and
        ``direction``.
    """

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.name = ""
        self._view: Optional[Callable[[], Any]] = None
        self._listener: Optional[Callable[[Any, "Animation", str], None]] = None
        self._old_animation: Optional[List["Animation"]] = None
        self._old_listeners: Dict[str, List[EventListener]] = {}
        if params:
            self.set_params(params)

    def __repr__(self) -> str:
        return f"<Animation {self.get_raw('id') or self.name or hex(id(self))}>"

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "Animation":
        """Like the constructor, but raise ValueError if a parameter is rejected."""
        animation = cls()
        if not animation.set_params(params):
            raise ValueError(f"invalid animation parameters {params!r}")
        return animation

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        if tag == "direction":
            return "animation-direction"
        if tag == "properties":
            return "property"
        return tag

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag == "property" and value is not None:
            try:
                items = value if isinstance(value, (list, tuple)) else [value]
                properties = [to_animated_property(item) for item in items]
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
            if not properties:
                return self.remove_value(tag)
            self._properties[tag] = properties
            return [tag]
        if tag == "timing-function" and value is not None:
            try:
                value = validate_timing_function(value)
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
        if tag not in ("id", "property", "duration", "delay", "timing-function", "iteration-count",
                       "animation-direction"):
            logger.error("%r property is not supported by Animation", tag)
            return None
        return super().set_value(tag, value)

    # --- timing ---

    def animated_properties(self) -> List[AnimatedProperty]:
        return list(self.get_raw("property") or ())

    def duration(self) -> float:
        value = self.get_raw("duration")
        return 1.0 if value is None else value

    def delay(self) -> float:
        return self.get_raw("delay") or 0.0

    def timing_function(self) -> str:
        return self.get_raw("timing-function") or "ease"

    def iteration_count(self) -> int:
        value = self.get_raw("iteration-count")
        return 1 if value is None else value

    def direction(self) -> str:
        return ENUM_PROPERTIES["animation-direction"].values[self.get_raw("animation-direction") or 0]

    def transition_css(self, css_name: str) -> str:
        text = f"{css_name} {format_number(self.duration())}s {self.timing_function()}"
        if self.delay():
            text += f" {format_number(self.delay())}s"
        return text

    # --- keyframes ---

    def keyframes_body(self) -> str:
        """The ``{ from {...} NN% {...} to {...} }`` part of the ``@keyframes`` rule."""
        properties = self.animated_properties()
        if not properties:
            raise ValueError("the animation has no animated property")

        def frame(selector: str, values: List[Tuple[AnimatedProperty, Any]]) -> str:
            builder = CSSBuilder()
            for prop, value in values:
                builder.add_all(prop.declarations(value))
            return f"{selector} {{ {builder.finish()} }}"

        percents = sorted({percent for prop in properties for percent in prop.key_frames})
        frames = [frame("from", [(prop, prop.from_value) for prop in properties])]
        for percent in percents:
            frames.append(frame(f"{percent}%", [(prop, prop.key_frames[percent])
                                                 for prop in properties if percent in prop.key_frames]))
        frames.append(frame("to", [(prop, prop.to_value) for prop in properties]))
        return "{ " + " ".join(frames) + " }"

    def register(self, registry: "KeyframeRegistry") -> None:
        self.name = registry.acquire(self.keyframes_body())

    def unregister(self, registry: "KeyframeRegistry") -> None:
        if self.name:
            registry.release(self.name)

    def animation_css(self) -> str:
        count = self.iteration_count()
        iterations = "infinite" if count <= 0 else str(count)
        return (f"{self.name} {format_number(self.duration())}s {self.timing_function()} "
                f"{format_number(self.delay())}s {iterations} {self.direction()}")

    # --- lifecycle ---

    def view(self) -> Any:
        return self._view() if self._view is not None else None

    def _handlers(self) -> List[Tuple[str, Callable[[Any, str], None]]]:
        return [
            (START_EVENT, self._on_start),
            (END_EVENT, self._on_end),
            (CANCEL_EVENT, self._on_cancel),
            (ITERATION_EVENT, self._on_iteration),
        ]

    @staticmethod
    def _restore_listeners(view: Any, saved: Dict[str, List[EventListener]], events: List[str]) -> None:
        for event in events:
            if event in saved:
                view.set(event, saved[event])
            else:
                view.remove(event)

    @staticmethod
    def _release(registry: "KeyframeRegistry", animations: Optional[List["Animation"]]) -> None:
        for animation in animations or ():
            animation.unregister(registry)

    def start(self, view: Any, listener: Optional[Callable[[Any, "Animation", str], None]] = None) -> bool:
        """
        Run the animation on ``view``.

        The view's animation listeners and ``animation`` property are saved
        and restored when the animation ends or is stopped.

        :param listener: Called as ``listener(view, animation, event)`` for
            start, iteration, end and cancel.
        """
        if view is None:
            logger.error("Animation.start: the view is None")
            return False
        if not self.animated_properties():
            logger.error("Animation.start: %r has no animated property", self)
            return False
        if self.view() is not None:
            logger.error("Animation.start: %r is already running", self)
            return False

        old_animation = view.animations() or None
        old_listeners: Dict[str, List[EventListener]] = {}
        installed: List[str] = []
        for event, handler in self._handlers():
            current = list(view.get_raw(event) or ())
            if current:
                old_listeners[event] = current
            if not view.set(event, current + [EventListener(handler, 1)]):
                self._restore_listeners(view, old_listeners, installed)
                return False
            installed.append(event)

        # hold the saved keyframes so they keep their names until restored
        registry = view.session.keyframes
        for animation in old_animation or ():
            animation.register(registry)
        if not view.set("animation", self):
            self._release(registry, old_animation)
            self._restore_listeners(view, old_listeners, installed)
            return False

        self._view = weakref.ref(view)
        self._listener = listener
        self._old_animation = old_animation
        self._old_listeners = old_listeners
        return True

    def _finish(self, view: Any) -> None:
        self._restore_listeners(view, self._old_listeners, [event for event, _ in self._handlers()])
        view.set("animation", self._old_animation)
        self._release(view.session.keyframes, self._old_animation)
        self._old_animation = None
        self._old_listeners = {}
        self._view = None
        self._listener = None

    def _complete(self, event: str) -> None:
        view = self.view()
        if view is None:
            return
        listener = self._listener
        for prop in self.animated_properties():
            view.set(prop.tag, prop.to_value)
        self._finish(view)
        if listener is not None:
            listener(view, self, event)

    def stop(self) -> None:
        """Cancel a running animation; the cleanup is the same as at its end."""
        self._complete(CANCEL_EVENT)

    def pause(self) -> None:
        view = self.view()
        if view is not None:
            view.set("animation-paused", True)

    def resume(self) -> None:
        view = self.view()
        if view is not None:
            view.remove("animation-paused")

    def _on_start(self, view: Any, name: str) -> None:
        if self.view() is not None and self._listener is not None:
            self._listener(self.view(), self, START_EVENT)

    def _on_iteration(self, view: Any, name: str) -> None:
        if self.view() is not None and self._listener is not None:
            self._listener(self.view(), self, ITERATION_EVENT)

    def _on_end(self, view: Any, name: str) -> None:
        self._complete(END_EVENT)

    def _on_cancel(self, view: Any, name: str) -> None:
        self._complete(CANCEL_EVENT)


def to_animation(value: Any) -> Animation:
    """Accept an Animation, or a dict / data object of its parameters."""
    if isinstance(value, Animation):
        return value
    if isinstance(value, DataObject):
        value = value.to_params()
    if isinstance(value, dict):
        return Animation.from_params(value)
    raise ValueError(f"{type(value).__name__} is not an animation")


def to_animations(value: Any) -> List[Animation]:
    """Animations for the ``animation`` property; each needs animated properties."""
    items = value if isinstance(value, (list, tuple)) else [value]
    animations = [to_animation(item) for item in items]
    for animation in animations:
        if not animation.animated_properties():
            raise ValueError(f"{animation!r} has no animated property")
    return animations


def to_transitions(value: Any) -> Dict[str, Animation]:
    """Transitions for the ``transition`` property: a map of property tag to Animation."""
    if isinstance(value, DataObject):
        value = value.to_params()
    if not isinstance(value, dict):
        raise ValueError(f"{type(value).__name__} is not a map of transitions")
    return {normalize_tag(tag): to_animation(item) for tag, item in value.items()}


class KeyframeRegistry:
    """
    The session's ``@keyframes`` blocks.

    :param session: Receives ``add_animation_css`` and ``clear_animation``
        calls as blocks are added and removed; may be None.
    """

    def __init__(self, session: Any = None):
        self._session = session
        self._counter = 0
        self._names: Dict[str, str] = {}
        self._blocks: Dict[str, Tuple[str, int]] = {}

    def acquire(self, body: str) -> str:
        """Name of the block with ``body``, registering it on first use."""
        name = self._names.get(body)
        if name is not None:
            body, count = self._blocks[name]
            self._blocks[name] = (body, count + 1)
            return name

        self._counter += 1
        name = f"kf{self._counter:06d}"
        self._names[body] = name
        self._blocks[name] = (body, 1)
        if self._session is not None:
            self._session.add_animation_css(self.block(name))
        return name

    def release(self, name: str) -> None:
        entry = self._blocks.get(name)
        if entry is None:
            logger.warning("Keyframes %r are not registered", name)
            return
        body, count = entry
        if count > 1:
            self._blocks[name] = (body, count - 1)
            return

        del self._blocks[name]
        del self._names[body]
        logger.debug("Keyframes %s removed", name)
        if self._session is not None:
            self._session.clear_animation()
            css = self.css()
            if css:
                self._session.add_animation_css(css)

    def use_count(self, name: str) -> int:
        entry = self._blocks.get(name)
        return entry[1] if entry else 0

    def names(self) -> List[str]:
        return list(self._blocks)

    def block(self, name: str) -> str:
        return f"@keyframes {name} {self._blocks[name][0]}"

    def css(self) -> str:
        return "\n".join(self.block(name) for name in self._blocks)
