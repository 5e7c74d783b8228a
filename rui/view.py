# rui/view.py
"""
The view base.

A :class:`View` owns a property map, renders itself to HTML once and after
that turns every property change into the smallest DOM mutation: one CSS
property, one attribute or the inner HTML of just this element. Widgets
subclass it and override the hooks ``normalize_tag``, ``set_value``,
``changed``, ``html_tag``, ``html_properties``, ``html_subviews`` and
``handle_command``.
"""
import html
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, Iterator, List, Optional, Tuple

from .animation import Animation, to_animation, to_animations, to_transitions
from .css import COMPOSITE_OF, CSSBuilder, composite_css, css_name, tag_of_css_name, value_css
from .data import DataObject
from .events import Frame, KeyEvent, MouseEvent, PointerEvent, TouchEvent
from .listeners import EventListener, make_listeners
from .properties import (
    FAMILIES, FAMILY_OF, INHERITED_PROPERTIES, Properties, default_value, family_css,
    invalid_property_value, is_constant_name,
)
from .units import to_size

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


class EventInfo:
    """How an event tag is wired: DOM attribute, JS handler, arity and payload decoder."""

    def __init__(self, attribute: Optional[str], handler: Optional[str], arity: int,
                 decode: Optional[Callable[[DataObject], Any]] = None):
        self.attribute = attribute
        self.handler = handler
        self.arity = arity
        self.decode = decode


EVENTS: Dict[str, EventInfo] = {
    "focus-event": EventInfo("onfocus", "focusEvent", 0),
    "lost-focus-event": EventInfo("onblur", "blurEvent", 0),
    "key-down-event": EventInfo("onkeydown", "keyDownEvent", 1, KeyEvent.from_data),
    "key-up-event": EventInfo("onkeyup", "keyUpEvent", 1, KeyEvent.from_data),
    "click-event": EventInfo("onclick", "clickEvent", 1, MouseEvent.from_data),
    "double-click-event": EventInfo("ondblclick", "doubleClickEvent", 1, MouseEvent.from_data),
    "mouse-down": EventInfo("onmousedown", "mouseDownEvent", 1, MouseEvent.from_data),
    "mouse-up": EventInfo("onmouseup", "mouseUpEvent", 1, MouseEvent.from_data),
    "mouse-move": EventInfo("onmousemove", "mouseMoveEvent", 1, MouseEvent.from_data),
    "mouse-over": EventInfo("onmouseover", "mouseOverEvent", 1, MouseEvent.from_data),
    "mouse-out": EventInfo("onmouseout", "mouseOutEvent", 1, MouseEvent.from_data),
    "context-menu-event": EventInfo("oncontextmenu", "contextMenuEvent", 1, MouseEvent.from_data),
    "pointer-down": EventInfo("onpointerdown", "pointerDownEvent", 1, PointerEvent.from_data),
    "pointer-up": EventInfo("onpointerup", "pointerUpEvent", 1, PointerEvent.from_data),
    "pointer-move": EventInfo("onpointermove", "pointerMoveEvent", 1, PointerEvent.from_data),
    "pointer-cancel": EventInfo("onpointercancel", "pointerCancelEvent", 1, PointerEvent.from_data),
    "pointer-over": EventInfo("onpointerover", "pointerOverEvent", 1, PointerEvent.from_data),
    "pointer-out": EventInfo("onpointerout", "pointerOutEvent", 1, PointerEvent.from_data),
    "touch-start": EventInfo("ontouchstart", "touchStartEvent", 1, TouchEvent.from_data),
    "touch-end": EventInfo("ontouchend", "touchEndEvent", 1, TouchEvent.from_data),
    "touch-move": EventInfo("ontouchmove", "touchMoveEvent", 1, TouchEvent.from_data),
    "touch-cancel": EventInfo("ontouchcancel", "touchCancelEvent", 1, TouchEvent.from_data),
    "transition-run-event": EventInfo("ontransitionrun", "transitionRunEvent", 1),
    "transition-start-event": EventInfo("ontransitionstart", "transitionStartEvent", 1),
    "transition-end-event": EventInfo("ontransitionend", "transitionEndEvent", 1),
    "transition-cancel-event": EventInfo("ontransitioncancel", "transitionCancelEvent", 1),
    "animation-start-event": EventInfo("onanimationstart", "animationStartEvent", 1),
    "animation-end-event": EventInfo("onanimationend", "animationEndEvent", 1),
    "animation-iteration-event": EventInfo("onanimationiteration", "animationIterationEvent", 1),
    "animation-cancel-event": EventInfo("onanimationcancel", "animationCancelEvent", 1),
    "scroll-event": EventInfo("onscroll", "scrollEvent", 1),
    "resize-event": EventInfo(None, None, 1),
}

TRANSITION_EVENTS = ("transition-run-event", "transition-start-event", "transition-end-event",
                     "transition-cancel-event")
ANIMATION_EVENTS = ("animation-start-event", "animation-end-event", "animation-iteration-event",
                    "animation-cancel-event")

_TAG_ALIASES = {
    "top-margin": "margin-top", "right-margin": "margin-right",
    "bottom-margin": "margin-bottom", "left-margin": "margin-left",
    "top-padding": "padding-top", "right-padding": "padding-right",
    "bottom-padding": "padding-bottom", "left-padding": "padding-left",
    "font": "font-name",
}

# tags stored as given, without coercion
_RAW_TAGS = frozenset({"binding", "user-data"})


def escape(text: str) -> str:
    return html.escape(text, quote=True)


# view classes by lowercase tag name, for views described as data objects
VIEW_CLASSES: Dict[str, type] = {}


class View(Properties):
    """
    The base of all widgets.

    :param session: The session the view belongs to.
    :param params: Initial properties.
    """

    tag_name = "View"
    system_class = ""
    default_focusable = False
    close_html_tag = True
    # value-change events of the widget: tag -> number of values (new, old)
    value_events: Dict[str, int] = {}
    # value tags of the widget: tag -> the event fired with (new, old) when it changes
    value_tags: Dict[str, str] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "tag_name" in cls.__dict__:
            VIEW_CLASSES[cls.tag_name.lower()] = cls

    def __init__(self, session: "Session", params: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.session = session
        self.html_id = session.next_view_id()
        self.parent_id = ""
        self.created = False
        self._change_listeners: Dict[str, EventListener] = {}
        self._single_transition: Dict[str, Optional[Animation]] = {}
        self._frame = Frame()
        self._scroll = Frame()
        self._has_focus = False
        session.register_view(self)
        if params:
            self.set_init_params(params)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.html_id}>"

    def set_init_params(self, params: Dict[str, Any]) -> None:
        for tag, value in params.items():
            self.set(tag, value)

    # --- identity and tree ---

    @property
    def id(self) -> str:
        """The user id (``id`` property), used by :func:`rui.containers.view_by_id`."""
        return self.get_raw("id") or ""

    def parent(self) -> Optional["View"]:
        if not self.parent_id:
            return None
        return self.session.view_by_html_id(self.parent_id)

    def binding(self) -> Any:
        """The object whose methods named listeners are looked up on; inherited from the parent."""
        value = self.get_raw("binding")
        if value is not None:
            return value
        parent = self.parent()
        return parent.binding() if parent is not None else None

    def subviews(self) -> List["View"]:
        """Direct children, in document order."""
        return []

    def frame(self) -> Frame:
        return self._frame

    def scroll(self) -> Frame:
        return self._scroll

    def has_focus(self) -> bool:
        return self._has_focus

    def focusable(self) -> bool:
        value = self._lookup("focusable")
        return self.default_focusable if value is None else bool(value)

    def is_disabled(self) -> bool:
        if self._lookup("disabled"):
            return True
        parent = self.parent()
        return parent.is_disabled() if parent is not None else False

    # --- reads ---

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return _TAG_ALIASES.get(tag, tag)

    def get(self, tag: str) -> Any:
        """
        Read a property.

        The value is taken from the view itself, then from its style, then,
        for inherited text properties, from the parent chain; a tag nobody
        sets reads its default (``auto`` sizes, False, enum index 0).
        """
        tag = self.normalize_tag(tag)
        if tag in EVENTS or tag in self.value_events or tag in _RAW_TAGS \
                or tag in ("animation", "transition"):
            return self.get_raw(tag)

        family = FAMILY_OF.get(tag)
        if family is not None:
            return family.compose(tag, family.effective_cells(self.family_values(family)))

        value = self._lookup(tag)
        if value is not None:
            return value
        if tag in INHERITED_PROPERTIES:
            parent = self.parent()
            if parent is not None:
                return parent.get(tag)
        return default_value(tag)

    def _resolve(self, tag: str, value: Any) -> Any:
        if is_constant_name(value):
            return self.session.resolve_constant(tag, value)
        return value

    def _style_names(self, tag: str) -> List[str]:
        names = []
        if tag != "disabled" and self.is_disabled():
            disabled_style = self.get_raw("style-disabled")
            if disabled_style:
                names.append(disabled_style)
        style = self.get_raw("style")
        if style:
            names.append(style)
        return names

    def _styles(self, tag: str) -> List[Properties]:
        styles = []
        for name in self._style_names(tag):
            style = self.session.style(name)
            if style is not None:
                styles.append(style)
        return styles

    def _lookup(self, tag: str) -> Any:
        """Own value, then style value, with constants resolved; None if neither is set."""
        value = self.get_raw(tag)
        if value is not None:
            resolved = self._resolve(tag, value)
            if resolved is not None:
                return resolved
        for style in self._styles(tag):
            value = style.get_raw(tag)
            if value is not None:
                resolved = self._resolve(tag, value)
                if resolved is not None:
                    return resolved
        return None

    def family_values(self, family) -> List[Tuple[str, Any]]:
        """Resolved members of a shorthand family: style members first, then the view's own."""
        members: List[Tuple[str, Any]] = []
        for style in reversed(self._styles(family.name)):
            members.extend(style.family_members(family))
        members.extend(self.family_members(family))
        resolved = []
        for tag, value in members:
            value = self._resolve(tag, value)
            if value is not None:
                resolved.append((tag, value))
        return resolved

    def transitions(self) -> Dict[str, Animation]:
        return dict(self.get_raw("transition") or {})

    def animations(self) -> List[Animation]:
        return list(self.get_raw("animation") or ())

    # --- writes ---

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag in EVENTS:
            return self._set_listeners(tag, value, EVENTS[tag].arity)
        if tag in self.value_events:
            return self._set_listeners(tag, value, self.value_events[tag])
        if tag in _RAW_TAGS:
            return self.remove_value(tag) if value is None else self._store_raw(tag, value)
        if tag == "animation":
            return self._set_animation(value)
        if tag == "transition":
            if value is None:
                return self.remove_value(tag)
            try:
                transitions = to_transitions(value)
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
            if not transitions:
                return self.remove_value(tag)
            return self._store_raw(tag, transitions)
        return super().set_value(tag, value)

    def _store_raw(self, tag: str, value: Any) -> List[str]:
        if self._properties.get(tag) is value:
            return []
        self._properties[tag] = value
        return [tag]

    def _set_listeners(self, tag: str, value: Any, arity: int) -> Optional[List[str]]:
        if value is None:
            return self.remove_value(tag)
        listeners = make_listeners(value, arity)
        if listeners is None:
            logger.error("Invalid %r listener %r", tag, value)
            return None
        if not listeners:
            return self.remove_value(tag)
        return self.store(tag, listeners)

    def _set_animation(self, value: Any) -> Optional[List[str]]:
        old = self.animations()
        if value is None or value == "" or (isinstance(value, (list, tuple)) and not value):
            new: List[Animation] = []
        else:
            try:
                new = to_animations(value)
            except ValueError as e:
                invalid_property_value("animation", value, e)
                return None
        if new == old:
            return []
        registry = self.session.keyframes
        for animation in new:
            animation.register(registry)
        for animation in old:
            animation.unregister(registry)
        if new:
            self._properties["animation"] = new
        else:
            self._properties.pop("animation", None)
        return ["animation"]

    def set(self, tag: str, value: Any) -> bool:
        tag = self.normalize_tag(tag)
        event = self.value_tags.get(tag)
        if event is None:
            return super().set(tag, value)
        old = self.get(tag)
        if not super().set(tag, value):
            return False
        new = self.get(tag)
        if new != old:
            self.fire_event(event, new, old)
        return True

    def set_params(self, params: Dict[str, Any]) -> bool:
        """Set several properties; updates of a rendered view go out in one batch."""
        with self.update_script():
            return super().set_params(params)

    def set_change_listener(self, tag: str, listener: Any) -> bool:
        """
        Call ``listener`` after every change of ``tag``.

        :param listener: ``()``, ``(view)``, ``(tag)``, ``(view, tag)`` or a binding name; None removes it.
        """
        tag = self.normalize_tag(tag)
        if listener is None:
            self._change_listeners.pop(tag, None)
            return True
        listeners = make_listeners(listener, 1)
        if not listeners or len(listeners) != 1:
            return False
        self._change_listeners[tag] = listeners[0]
        return True

    def property_changed(self, tag: str) -> None:
        if self.created and not self.session.ignore_view_updates():
            self.changed(tag)
        self.run_change_listener(tag)

    def run_change_listener(self, tag: str) -> None:
        listener = self._change_listeners.get(tag)
        if listener is not None:
            listener(self, tag)

    def notify_value_changed(self, tag: str, event_tag: str, new: Any, old: Any) -> None:
        """
        Report a value the remote runtime changed.

        The value is already in the map and the DOM, so nothing is emitted;
        the change listener of ``tag`` and the ``event_tag`` listeners run.
        """
        self.run_change_listener(tag)
        self.fire_event(event_tag, new, old)

    def fire_event(self, tag: str, *args: Any) -> None:
        for listener in list(self.get_raw(tag) or ()):
            listener(self, *args)

    # --- transitions ---

    def set_transition(self, tag: str, animation: Any) -> bool:
        """
        Attach a transition (an :class:`Animation` with timing only) to ``tag``;
        None detaches it.
        """
        tag = self.normalize_tag(tag)
        transitions = self.transitions()
        if animation is None:
            transitions.pop(tag, None)
        else:
            try:
                transitions[tag] = to_animation(animation)
            except ValueError as e:
                invalid_property_value("transition", animation, e)
                return False
        return self.set("transition", transitions or None)

    def set_animated(self, tag: str, value: Any, animation: Any) -> bool:
        """
        Set ``tag`` to ``value`` through a one-off transition.

        The transition replaces the one attached to ``tag`` until the
        browser reports the end (or cancel) of this change.
        """
        tag = self.normalize_tag(tag)
        try:
            animation = to_animation(animation)
        except ValueError as e:
            invalid_property_value("transition", animation, e)
            return False

        if self.created:
            self.session.update_property(self.html_id, "ontransitionend", "transitionEndEvent(this, event)")
            self.session.update_property(self.html_id, "ontransitioncancel",
                                         "transitionCancelEvent(this, event)")

        transitions = self.transitions()
        prior = transitions.get(tag)
        self._single_transition[tag] = prior
        transitions[tag] = animation
        self._replace_transitions(transitions)

        if not self.set(tag, value):
            self._single_transition.pop(tag, None)
            self._restore_transition(tag, prior)
            return False
        return True

    def _replace_transitions(self, transitions: Dict[str, Animation]) -> None:
        if transitions:
            self._properties["transition"] = transitions
        else:
            self._properties.pop("transition", None)
        if self.created and not self.session.ignore_view_updates():
            self.session.update_css_property(self.html_id, "transition", self.transition_css())

    def _restore_transition(self, tag: str, prior: Optional[Animation]) -> None:
        transitions = self.transitions()
        if prior is None:
            transitions.pop(tag, None)
        else:
            transitions[tag] = prior
        self._replace_transitions(transitions)

    def transition_css(self) -> str:
        return ", ".join(animation.transition_css(css_name(tag))
                         for tag, animation in sorted(self.transitions().items()))

    def animation_css(self) -> str:
        return ", ".join(animation.animation_css() for animation in self.animations())

    # --- DOM helpers ---

    @contextmanager
    def update_script(self) -> Iterator[None]:
        """Batch the updates of this element made inside the block into one script."""
        started = self.created and self.session.start_update_script(self.html_id)
        try:
            yield
        finally:
            if started:
                self.session.finish_update_script(self.html_id)

    def _emit_css(self, declarations: List[Tuple[str, str]]) -> None:
        if len(declarations) == 1:
            name, value = declarations[0]
            self.session.update_css_property(self.html_id, name, value)
        elif declarations:
            with self.update_script():
                for name, value in declarations:
                    self.session.update_css_property(self.html_id, name, value)

    def update_inner_html(self) -> None:
        if self.created:
            buffer: List[str] = []
            self.html_subviews(buffer)
            self.session.update_inner_html(self.html_id, "".join(buffer))

    def focus(self) -> None:
        self.session.call_func("focus", self.html_id)

    def blur(self) -> None:
        self.session.call_func("blur", self.html_id)

    def scroll_to(self, x: float, y: float) -> None:
        self.session.call_func("scrollTo", self.html_id, float(x), float(y))

    def html_property_value(self, name: str) -> str:
        """Read a DOM property of the element from the browser; blocks until it answers."""
        return self.session.html_property_value(self.html_id, name)

    # --- CSS of the current state ---

    def tag_css(self, tag: str) -> List[Tuple[str, str]]:
        """CSS declarations of ``tag`` as the view currently resolves it."""
        family = FAMILY_OF.get(tag)
        if family is not None:
            return family_css(family, family.effective_cells(self.family_values(family)))
        if tag in COMPOSITE_OF:
            return [composite_css(COMPOSITE_OF[tag], self._lookup)]
        if tag == "transition":
            return [("transition", self.transition_css())]
        if tag == "animation":
            return [("animation", self.animation_css())]
        return value_css(tag, self._lookup(tag))

    def _css_tags(self) -> List[str]:
        tags = set(self._properties)
        for style in self._styles(""):
            tags.update(style.tags())
        return sorted(tags)

    def css_style(self, builder: CSSBuilder) -> None:
        """Add the inline style of the view; widgets extend it with their layout CSS."""
        done = set()
        for tag in self._css_tags():
            family = FAMILY_OF.get(tag)
            key = family.name if family is not None else COMPOSITE_OF.get(tag, tag)
            if key in done:
                continue
            done.add(key)
            builder.add_all(self.tag_css(tag))

    def inline_style(self) -> str:
        builder = CSSBuilder()
        self.css_style(builder)
        return builder.finish()

    def html_class(self, disabled: bool) -> str:
        cls = "ruiView"
        style = self.get_raw("style-disabled") if disabled else None
        style = style or self.get_raw("style")
        if style:
            cls += " " + style
        if self.system_class:
            cls = self.system_class + " " + cls
        return cls

    # --- HTML ---

    def html_tag(self) -> str:
        return "div"

    def html(self) -> str:
        buffer: List[str] = []
        self.view_html(buffer)
        return "".join(buffer)

    def view_html(self, buffer: List[str]) -> None:
        tag = self.html_tag()
        buffer.append(f'<{tag} id="{self.html_id}" class="{escape(self.html_class(self.is_disabled()))}"')
        style = self.inline_style()
        if style:
            buffer.append(f' style="{escape(style)}"')
        self.created = True
        self.html_properties(buffer)
        buffer.append(">")
        if self.close_html_tag:
            self.html_subviews(buffer)
            buffer.append(f"</{tag}>")

    def tab_index(self) -> Optional[int]:
        if self.is_disabled() or not self.focusable():
            return None
        return 0

    def html_properties(self, buffer: List[str]) -> None:
        disabled = self.is_disabled()
        buffer.append(' data-disabled="1"' if disabled else ' data-disabled="0"')
        tab_index = self.tab_index()
        if tab_index is not None:
            buffer.append(f' tabindex="{tab_index}"')
        tooltip = self._lookup("tooltip")
        if tooltip:
            buffer.append(f' title="{escape(tooltip)}"')
        if self._lookup("not-translate"):
            buffer.append(' translate="no"')
        own = self.own_attributes()
        for tag, info in EVENTS.items():
            if info.attribute and info.attribute not in own and self.get_raw(tag):
                buffer.append(f' {info.attribute}="{info.handler}(this, event)"')

    def own_attributes(self) -> FrozenSet[str]:
        """Event attributes the view writes itself in place of the generic handlers."""
        return frozenset()

    def html_subviews(self, buffer: List[str]) -> None:
        pass

    # --- change hook ---

    def changed(self, tag: str) -> None:
        """Emit the DOM update of a changed tag. Only called once the view is rendered."""
        session = self.session
        html_id = self.html_id

        if tag in EVENTS:
            info = EVENTS[tag]
            if info.attribute and info.attribute not in self.own_attributes():
                if self.get_raw(tag):
                    session.update_property(html_id, info.attribute, f"{info.handler}(this, event)")
                else:
                    session.remove_property(html_id, info.attribute)
        elif tag in self.value_events or tag in _RAW_TAGS:
            pass
        elif tag in ("style", "style-disabled", "disabled"):
            self._update_state()
        elif tag == "focusable":
            self._update_tab_index()
        elif tag == "tooltip":
            tooltip = self._lookup("tooltip")
            if tooltip:
                session.update_property(html_id, "title", tooltip)
            else:
                session.remove_property(html_id, "title")
        elif tag == "not-translate":
            if self._lookup("not-translate"):
                session.update_property(html_id, "translate", "no")
            else:
                session.remove_property(html_id, "translate")
        elif tag == "visibility":
            self._emit_css(self.tag_css(tag))
            if self.get("visibility") != 0:
                session.call_func("hideTooltip")
        else:
            self._emit_css(self.tag_css(tag))

    def _update_tab_index(self) -> None:
        tab_index = self.tab_index()
        if tab_index is None:
            self.session.remove_property(self.html_id, "tabindex")
        else:
            self.session.update_property(self.html_id, "tabindex", str(tab_index))

    def _update_state(self) -> None:
        session = self.session
        html_id = self.html_id
        disabled = self.is_disabled()
        with self.update_script():
            session.update_property(html_id, "data-disabled", "1" if disabled else "0")
            self._update_tab_index()
            session.update_property(html_id, "class", self.html_class(disabled))
            session.update_property(html_id, "style", self.inline_style())
            self.update_disabled_state(disabled)

    def update_disabled_state(self, disabled: bool) -> None:
        """Hook for widgets backed by form elements with a ``disabled`` attribute."""

    # --- commands from the browser ---

    def handle_command(self, command: str, data: DataObject) -> bool:
        """
        Handle a message the browser sent to this view.

        :return: False if the command is unknown to the view.
        """
        if command in ("key-down-event", "key-up-event"):
            if not self.is_disabled():
                self.fire_event(command, KeyEvent.from_data(data))
        elif command == "focus-event":
            self._has_focus = True
            self.fire_event(command)
        elif command == "lost-focus-event":
            self._has_focus = False
            self.fire_event(command)
        elif command in TRANSITION_EVENTS:
            self._handle_transition_event(command, data)
        elif command in ANIMATION_EVENTS:
            self._handle_animation_event(command, data)
        elif command in EVENTS and EVENTS[command].decode is not None:
            self.fire_event(command, EVENTS[command].decode(data))
        elif command == "scroll":
            self._scroll = Frame.from_data(data)
            self.fire_event("scroll-event", self._scroll)
        elif command in ("widthChanged", "heightChanged"):
            tag = "width" if command == "widthChanged" else "height"
            text = data.property_value(tag)
            if text:
                try:
                    self.set_raw(tag, to_size(text))
                except ValueError as e:
                    invalid_property_value(tag, text, e)
        else:
            return False
        return True

    def on_resize(self, frame: Frame) -> None:
        if frame != self._frame:
            self._frame = frame
            self.fire_event("resize-event", frame)

    def set_scroll(self, frame: Frame) -> None:
        """Record the scroll position and content size reported with a resize."""
        self._scroll = frame

    def _handle_transition_event(self, command: str, data: DataObject) -> None:
        name = data.property_value("property")
        if name is None:
            return
        tag = tag_of_css_name(name)
        if command in ("transition-end-event", "transition-cancel-event"):
            # several tags can share one CSS property, e.g. translate-x and scale-x in transform
            for single in [single for single in self._single_transition if css_name(single) == name]:
                self._restore_transition(single, self._single_transition.pop(single))
        self.fire_event(command, tag)

    def _handle_animation_event(self, command: str, data: DataObject) -> None:
        name = data.property_value("name") or ""
        animation_id = ""
        for animation in self.animations():
            if animation.name == name:
                animation_id = animation.get("id") or ""
        self.fire_event(command, animation_id)


VIEW_CLASSES[View.tag_name.lower()] = View


def create_view(session: "Session", obj: DataObject) -> Optional[View]:
    """
    Create a view from its data-text description, e.g.
    ``ListLayout{orientation = start-to-end, content = [TextView{text = Hi}]}``.
    """
    cls = VIEW_CLASSES.get(obj.tag.lower())
    if cls is None:
        logger.error("Unknown view type %r", obj.tag)
        return None
    return cls(session, obj.to_params())


def to_view(session: "Session", value: Any) -> Optional[View]:
    """Accept a view, a data object describing one, or text which becomes a :class:`rui.widgets.TextView`."""
    if isinstance(value, View):
        return value
    if isinstance(value, DataObject):
        return create_view(session, value)
    if isinstance(value, str):
        from .widgets import TextView

        return TextView(session, {"text": value})
    return None
