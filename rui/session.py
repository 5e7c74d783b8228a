# rui/session.py
"""
One connected browser.

The session owns the view tree of its client, numbers the views, resolves
``@name`` constants against the theme and routes runtime messages to the
views. Every DOM update goes through the session to its bridge; without a
bridge (or inside :meth:`Session.view_updates_ignored`) updates are dropped.
"""
import logging
import weakref
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .animation import KeyframeRegistry
from .bridge import Bridge, CanvasVar, TextMetrics, call_func_script
from .data import DataObject, NodeType, parse_data_text
from .errors import BridgeClosedError, DataParseError
from .events import Frame, KeyEvent
from .properties import (
    COLOR_PROPERTIES, REMOVE, Properties, coerce_value, constant_name, invalid_property_value,
    is_constant_name,
)
from .theme import Theme
from .view import View

logger = logging.getLogger(__name__)

ROOT_ID = "ruiRootView"

# control key masks of hot keys
ALT_KEY = 1
CTRL_KEY = 2
META_KEY = 4
SHIFT_KEY = 8

_MAX_CONSTANT_DEPTH = 8

SessionListener = Callable[["Session"], None]


def hot_key_code(code: str, control_keys: int = 0) -> str:
    """``keyA-cs`` style text of a key code with Alt/Ctrl/Meta/Shift."""
    text = code.lower()
    if control_keys:
        text += "-"
        for mask, letter in ((ALT_KEY, "a"), (CTRL_KEY, "c"), (META_KEY, "m"), (SHIFT_KEY, "s")):
            if control_keys & mask:
                text += letter
    return text


class Session:
    """
    :param session_id: Number of the session within its application.
    :param bridge: Transport to the browser runtime; None until connected.
    :param theme: Constants, colors and styles; an empty theme by default.
    :param debug: Log every incoming message.
    """

    def __init__(self, session_id: int = 0, bridge: Optional[Bridge] = None, theme: Optional[Theme] = None,
                 debug: bool = False):
        self.id = session_id
        self.bridge = bridge
        self.theme = theme or Theme()
        self.debug = debug
        self.keyframes = KeyframeRegistry(self)

        self.language = ""
        self.languages: List[str] = []
        self.dark_theme = False
        self.touch_screen = False
        self.user_agent = ""
        self.pixel_ratio = 1.0
        self.text_direction = "ltr"
        self.screen_width = 0
        self.screen_height = 0
        self.paused = False
        self.closed = False

        self._view_counter = 0
        self._views: "weakref.WeakValueDictionary[str, View]" = weakref.WeakValueDictionary()
        self._root: Optional[View] = None
        self._ignore_updates = False
        self._constant_cache: Dict[Tuple[str, str], Any] = {}
        self._strings: Dict[str, Dict[str, str]] = {}
        self._client_storage: Dict[str, str] = {}
        self._timers: Dict[int, SessionListener] = {}
        self._next_timer_id = 1
        self._hot_keys: Dict[str, SessionListener] = {}
        self.pause_listeners: List[SessionListener] = []
        self.resume_listeners: List[SessionListener] = []
        self.close_listeners: List[SessionListener] = []

    def __repr__(self) -> str:
        return f"<Session {self.id}>"

    # --- views ---

    def next_view_id(self) -> str:
        self._view_counter += 1
        return f"id{self._view_counter:06d}"

    def register_view(self, view: View) -> None:
        self._views[view.html_id] = view

    def view_by_html_id(self, html_id: str) -> Optional[View]:
        return self._views.get(html_id)

    def root_view(self) -> Optional[View]:
        return self._root

    def set_root_view(self, view: Optional[View]) -> None:
        """Replace the root view; a connected client gets the new tree at once."""
        if self._root is not None:
            self._root.parent_id = ""
        self._root = view
        if view is not None:
            view.parent_id = ROOT_ID
            if self.bridge is not None:
                self.update_inner_html(ROOT_ID, view.html())
                self.call_func("scanElementsSize")

    # --- update guard ---

    def ignore_view_updates(self) -> bool:
        return self.bridge is None or self._ignore_updates

    def set_ignore_view_updates(self, ignore: bool) -> None:
        self._ignore_updates = ignore

    @contextmanager
    def view_updates_ignored(self) -> Iterator[None]:
        """Drop the DOM updates made inside the block, e.g. while rendering HTML that is sent afterwards."""
        saved = self._ignore_updates
        self._ignore_updates = True
        try:
            yield
        finally:
            self._ignore_updates = saved

    # --- theme, constants and strings ---

    def set_theme(self, theme: Theme) -> None:
        self.theme = theme
        self._constant_cache.clear()
        if self.bridge is not None and self._root is not None:
            self.reload()

    def set_dark_theme(self, dark: bool) -> None:
        if dark != self.dark_theme:
            self.dark_theme = dark
            self._constant_cache.clear()

    def set_constant(self, tag: str, value: str, touch_value: str = "") -> None:
        self.theme.set_constant(tag, value, touch_value)
        self._constant_cache.clear()

    def set_color(self, tag: str, color: str, dark_color: str = "") -> None:
        self.theme.set_color(tag, color, dark_color)
        self._constant_cache.clear()

    def style(self, name: str) -> Optional[Properties]:
        return self.theme.style(name)

    def constant(self, name: str) -> Optional[str]:
        """Text of the constant ``name``: theme constants, then string resources."""
        value = self.theme.constant(name, self.touch_screen)
        if value is None:
            value = self._string(name)
        return value

    def _raw_constant(self, tag: str, name: str) -> Optional[str]:
        if tag in COLOR_PROPERTIES or tag.endswith("color"):
            value = self.theme.color(name, self.dark_theme)
            if value is not None:
                return value
        return self.constant(name)

    def resolve_constant(self, tag: str, value: str) -> Any:
        """
        The value of ``tag`` for the ``@name`` reference ``value``, converted
        to the type of the tag.

        :return: None if the constant is unknown or does not fit the tag.
        """
        key = (tag, value)
        if key in self._constant_cache:
            return self._constant_cache[key]

        text = value
        for _ in range(_MAX_CONSTANT_DEPTH):
            if not is_constant_name(text):
                break
            resolved = self._raw_constant(tag, constant_name(text))
            if resolved is None:
                logger.error("Constant %r not found", constant_name(text))
                return None
            text = resolved
        else:
            logger.error("Constant %r refers to itself", value)
            return None

        try:
            result = coerce_value(tag, text)
        except KeyError:
            result = text
        except ValueError as e:
            invalid_property_value(tag, text, e)
            return None
        if result is REMOVE:
            result = None
        self._constant_cache[key] = result
        return result

    def resolve_string(self, text: str) -> str:
        """``text`` with an ``@name`` reference replaced by the constant; "" for an unknown constant."""
        if not is_constant_name(text):
            return text
        value = self.constant(constant_name(text))
        if value is None:
            logger.error("Constant %r not found", constant_name(text))
            return ""
        return value

    def add_strings(self, language: str, strings: Dict[str, str]) -> None:
        """Add translations; the "" language is used when the client language has none."""
        self._strings.setdefault(language, {}).update(strings)

    def _string(self, tag: str) -> Optional[str]:
        for language in (self.language, *self.languages, ""):
            table = self._strings.get(language)
            if table and tag in table:
                return table[tag]
        return None

    def get_string(self, text: str) -> str:
        """The translation of ``text`` (or of the ``@name`` reference) in the client language."""
        tag = constant_name(text) if is_constant_name(text) else text
        value = self._string(tag)
        return text if value is None else value

    # --- bridge ---

    def _bridge_call(self, name: str, *args: Any) -> Any:
        if self.bridge is None:
            return None
        try:
            return getattr(self.bridge, name)(*args)
        except BridgeClosedError:
            logger.warning("Session %d: the connection is closed", self.id)
            self.close()
            return None

    def call_func(self, func: str, *args: Any) -> None:
        self._bridge_call("call_func", func, *args)

    def update_inner_html(self, html_id: str, html: str) -> None:
        self._bridge_call("update_inner_html", html_id, html)

    def append_to_inner_html(self, html_id: str, html: str) -> None:
        self._bridge_call("append_to_inner_html", html_id, html)

    def update_css_property(self, html_id: str, name: str, value: str) -> None:
        self._bridge_call("update_css_property", html_id, name, value)

    def update_property(self, html_id: str, name: str, value: Any) -> None:
        self._bridge_call("update_property", html_id, name, value)

    def remove_property(self, html_id: str, name: str) -> None:
        self._bridge_call("remove_property", html_id, name)

    def start_update_script(self, html_id: str) -> bool:
        return bool(self._bridge_call("start_update_script", html_id))

    def finish_update_script(self, html_id: str) -> None:
        self._bridge_call("finish_update_script", html_id)

    def add_animation_css(self, css: str) -> None:
        self._bridge_call("add_animation_css", css)

    def clear_animation(self) -> None:
        self._bridge_call("clear_animation")

    def canvas_start(self, html_id: str) -> None:
        self._bridge_call("canvas_start", html_id)

    def call_canvas_func(self, func: str, *args: Any) -> None:
        self._bridge_call("call_canvas_func", func, *args)

    def update_canvas_property(self, name: str, value: Any) -> None:
        self._bridge_call("update_canvas_property", name, value)

    def create_canvas_var(self, func: str, *args: Any) -> Optional[CanvasVar]:
        return self._bridge_call("create_canvas_var", func, *args)

    def create_path2d(self, arg: str = "") -> Optional[CanvasVar]:
        return self._bridge_call("create_path2d", arg)

    def call_canvas_var_func(self, var: Optional[CanvasVar], func: str, *args: Any) -> None:
        if var is not None:
            self._bridge_call("call_canvas_var_func", var, func, *args)

    def call_canvas_image_func(self, url: str, prop: str, func: str, *args: Any) -> None:
        self._bridge_call("call_canvas_image_func", url, prop, func, *args)

    def canvas_finish(self) -> None:
        self._bridge_call("canvas_finish")

    def canvas_text_metrics(self, html_id: str, font: str, text: str) -> Optional[TextMetrics]:
        return self._bridge_call("canvas_text_metrics", html_id, font, text)

    def html_property_value(self, html_id: str, name: str) -> str:
        return self._bridge_call("html_property_value", html_id, name) or ""

    def remote_addr(self) -> str:
        return self.bridge.remote_addr() if self.bridge is not None else ""

    # --- page ---

    def write_init_script(self) -> str:
        """The first script of a connection: theme styles, animations and the root view."""
        scripts = []
        css = self.theme.css_text()
        if css:
            scripts.append(call_func_script("setStyles", css))
        animations = self.keyframes.css()
        if animations:
            scripts.append(call_func_script("setAnimationStyles", animations))
        if self._root is not None:
            scripts.append(call_func_script("updateInnerHTML", ROOT_ID, self._root.html()))
            scripts.append("scanElementsSize();")
        return "\n".join(scripts)

    def start(self) -> None:
        """Send the page content to a newly connected client."""
        script = self.write_init_script()
        if script:
            self._bridge_call("send", script)

    def reload(self) -> None:
        """Send styles and the whole view tree again, e.g. after a theme change."""
        self.call_func("setStyles", self.theme.css_text())
        self.call_func("setAnimationStyles", self.keyframes.css())
        if self._root is not None:
            self.update_inner_html(ROOT_ID, self._root.html())
            self.call_func("scanElementsSize")

    def set_title(self, title: str) -> None:
        self.call_func("setTitle", self.get_string(title))

    # --- timers, hot keys and client storage ---

    def start_timer(self, ms: int, handler: SessionListener) -> int:
        """
        Call ``handler(session)`` every ``ms`` milliseconds.

        :return: The timer id for :meth:`stop_timer`; 0 without a connection.
        """
        if self.bridge is None:
            return 0
        timer_id = self._next_timer_id
        self._next_timer_id += 1
        self._timers[timer_id] = handler
        self.call_func("startTimer", int(ms), timer_id)
        return timer_id

    def stop_timer(self, timer_id: int) -> None:
        if self._timers.pop(timer_id, None) is not None:
            self.call_func("stopTimer", timer_id)

    def set_hot_key(self, code: str, control_keys: int, handler: Optional[SessionListener]) -> None:
        """Call ``handler(session)`` when the key is pressed anywhere in the page; None removes it."""
        key = hot_key_code(code, control_keys)
        if handler is None:
            self._hot_keys.pop(key, None)
        else:
            self._hot_keys[key] = handler

    def _hot_key(self, event: KeyEvent) -> None:
        control_keys = 0
        if event.alt_key:
            control_keys |= ALT_KEY
        if event.ctrl_key:
            control_keys |= CTRL_KEY
        if event.meta_key:
            control_keys |= META_KEY
        if event.shift_key:
            control_keys |= SHIFT_KEY
        handler = self._hot_keys.get(hot_key_code(event.code, control_keys))
        if handler is not None:
            handler(self)

    def client_item(self, key: str) -> Optional[str]:
        """A value of the browser local storage, as reported when the session started."""
        return self._client_storage.get(key)

    def set_client_item(self, key: str, value: str) -> None:
        self._client_storage[key] = value
        self.call_func("localStorageSet", key, value)

    def remove_client_item(self, key: str) -> None:
        self._client_storage.pop(key, None)
        self.call_func("localStorageRemove", key)

    def remove_all_client_items(self) -> None:
        self._client_storage.clear()
        self.call_func("localStorageClear")

    # --- messages from the runtime ---

    def process_message(self, text: str) -> None:
        """Parse and handle one message of the runtime."""
        if self.debug:
            logger.debug("-> %s", text)
        try:
            data = parse_data_text(text)
        except DataParseError as e:
            logger.error("Session %d: invalid message %r: %s", self.id, text, e)
            return
        self.handle_message(data)

    def handle_message(self, data: DataObject) -> None:
        command = data.tag
        if command == "answer":
            if self.bridge is not None:
                self.bridge.answer_received(data)
        elif command == "session-pause":
            self.paused = True
            self._notify(self.pause_listeners)
        elif command == "session-resume":
            self.paused = False
            self._notify(self.resume_listeners)
        elif command == "timer":
            self._handle_timer(data)
        elif command == "root-size":
            self._handle_root_size(data)
        elif command == "resize":
            self._handle_resize(data)
        elif command == "sessionInfo":
            self._handle_session_info(data)
        elif command == "storageError":
            logger.error("Client storage error: %s", data.property_value("error") or "")
        elif command == "session-close":
            self.close()
        else:
            self._handle_view_command(command, data)

    def _notify(self, listeners: List[SessionListener]) -> None:
        for listener in list(listeners):
            listener(self)

    def _handle_timer(self, data: DataObject) -> None:
        timer_id = data.property_int("timerID")
        if timer_id is None:
            logger.error('"timerID" property not found')
            return
        handler = self._timers.get(timer_id)
        if handler is None:
            logger.error("Timer (id = %d) does not exist", timer_id)
            return
        handler(self)

    def _handle_root_size(self, data: DataObject) -> None:
        width = data.property_float("width")
        height = data.property_float("height")
        if width is not None and width > 0:
            self.screen_width = int(width)
        if height is not None and height > 0:
            self.screen_height = int(height)

    def _handle_resize(self, data: DataObject) -> None:
        node = data.property_by_tag("views")
        if node is None or node.type != NodeType.ARRAY:
            logger.error('Resize event error: invalid "views" property')
            return
        for item in node.array:
            if not isinstance(item, DataObject):
                logger.error("Resize event error: views element is not an object")
                continue
            html_id = item.property_value("id")
            if not html_id:
                logger.error('"id" property not found')
                continue
            view = self.view_by_html_id(html_id)
            if view is None:
                logger.debug("View with id == %s not found", html_id)
                continue

            def value(tag: str) -> float:
                number = item.property_float(tag)
                return number if number is not None else 0.0

            view.on_resize(Frame(value("x"), value("y"), value("width"), value("height")))
            view.set_scroll(Frame(value("scroll-x"), value("scroll-y"),
                                  value("scroll-width"), value("scroll-height")))

    def _handle_session_info(self, data: DataObject) -> None:
        value = data.property_value("touch")
        if value is not None:
            self.touch_screen = value in ("1", "true")
        value = data.property_value("user-agent")
        if value is not None:
            self.user_agent = value
        value = data.property_value("direction")
        if value is not None:
            self.text_direction = "rtl" if value == "rtl" else "ltr"
        value = data.property_value("language")
        if value is not None:
            self.language = value
        value = data.property_value("languages")
        if value is not None:
            self.languages = [part.strip() for part in value.split(",") if part.strip()]
        value = data.property_value("dark")
        if value is not None:
            self.set_dark_theme(value in ("1", "true"))
        ratio = data.property_float("pixel-ratio")
        if ratio is not None:
            self.pixel_ratio = ratio
        storage = data.property_object("storage")
        if storage is not None:
            for node in storage:
                if node.type == NodeType.TEXT:
                    self._client_storage[node.tag] = node.text
        self._constant_cache.clear()

    def _handle_view_command(self, command: str, data: DataObject) -> None:
        html_id = data.property_value("id")
        if html_id is None:
            logger.error('"id" property not found. Event: %s', command)
            return
        if html_id != "body":
            view = self.view_by_html_id(html_id)
            if view is None:
                logger.warning("Session %d: %s for unknown element %s", self.id, command, html_id)
            elif not view.handle_command(command, data):
                logger.warning("%r: unknown command %r", view, command)
        if command == "key-down-event":
            self._hot_key(KeyEvent.from_data(data))

    # --- shutdown ---

    def close(self) -> None:
        """Close the connection; remote calls waiting for an answer return at once."""
        if self.closed:
            return
        self.closed = True
        self._timers.clear()
        bridge, self.bridge = self.bridge, None
        if bridge is not None:
            bridge.close()
        logger.info("Session %d closed", self.id)
        self._notify(self.close_listeners)
