# rui/bridge.py
"""
The command stream between a session and its browser runtime.

:class:`Bridge` turns view updates into JavaScript for the runtime helpers
(``updateInnerHTML``, ``updateCSSProperty``, ``getCanvasContext`` ...).
Transports subclass it and implement :meth:`Bridge.write_message` and, when
they can not block the calling thread, :meth:`Bridge.wait_answer`.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QCoreApplication, QEventLoop

from .data import DataObject

logger = logging.getLogger(__name__)

DEFAULT_ANSWER_TIMEOUT = 10.0


@dataclass(frozen=True)
class CanvasVar:
    """A variable of the canvas script (gradient, ``Path2D``, pattern ...)."""
    name: str


@dataclass
class TextMetrics:
    """
    Text measured by the browser in the current canvas font.

    ``ascent`` and ``descent`` are measured from the alphabetic baseline,
    ``left`` and ``right`` from the text start.
    """
    width: float = 0.0
    ascent: float = 0.0
    descent: float = 0.0
    left: float = 0.0
    right: float = 0.0


_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


def js_string(text: str) -> str:
    """A single-quoted JavaScript string literal of ``text``."""
    parts = ["'"]
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ch < " ":
            parts.append(f"\\x{ord(ch):02x}")
        else:
            parts.append(ch)
    parts.append("'")
    return "".join(parts)


def js_arg(arg: Any) -> Optional[str]:
    """
    The JavaScript literal of a call argument.

    :return: None for an unsupported type.
    """
    if isinstance(arg, str):
        return js_string(arg)
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, float):
        return "%g" % arg
    if isinstance(arg, int):
        return str(arg)
    if isinstance(arg, CanvasVar):
        return arg.name
    if isinstance(arg, (list, tuple)) and all(isinstance(item, (int, float)) and not isinstance(item, bool)
                                              for item in arg):
        return "[" + ",".join("%g" % item for item in arg) + "]"
    logger.error("Unsupported argument type %s", type(arg).__name__)
    return None


def call_func_script(func: str, *args: Any) -> Optional[str]:
    """``func(arg1, arg2);``, or None if an argument can not be written."""
    texts = []
    for arg in args:
        text = js_arg(arg)
        if text is None:
            return None
        texts.append(text)
    return f"{func}({', '.join(texts)});"


class _AnswerSlot:
    def __init__(self):
        self.event = threading.Event()
        self.answer: Optional[DataObject] = None


class Bridge:
    """
    Base of the transports.

    Outside an update script every call goes out as its own message. Between
    :meth:`start_update_script` and :meth:`finish_update_script` the updates
    of that element are collected and sent as one script.

    :param answer_timeout: Seconds to wait for the answer of a remote call.
    :param debug: Log every outgoing script.
    """

    def __init__(self, answer_timeout: float = DEFAULT_ANSWER_TIMEOUT, debug: bool = False):
        self.answer_timeout = answer_timeout
        self.debug = debug
        self.closed = False
        self._answers: Dict[int, _AnswerSlot] = {}
        self._answer_id = 1
        self._answer_lock = threading.Lock()
        self._update_scripts: Dict[str, List[str]] = {}
        self._canvas: List[str] = []
        self._canvas_var_number = 0

    # --- transport hooks ---

    def write_message(self, script: str) -> bool:
        """Send one script to the runtime. Transports raise :class:`rui.errors.BridgeClosedError` once closed."""
        raise NotImplementedError

    def wait_answer(self, slot: _AnswerSlot, timeout: float) -> bool:
        """Block until ``slot`` is answered or ``timeout`` seconds pass."""
        return slot.event.wait(timeout)

    def remote_addr(self) -> str:
        return ""

    def send(self, script: str) -> bool:
        if self.debug:
            logger.debug("<- %s", script)
        return self.write_message(script)

    # --- plain calls ---

    def call_func(self, func: str, *args: Any) -> bool:
        """
        Call ``func(args)`` in the runtime. A call whose first argument is an
        element with an open update script joins that script.
        """
        script = call_func_script(func, *args)
        if script is None:
            return False
        if args and isinstance(args[0], str):
            buffer = self._update_scripts.get(args[0])
            if buffer is not None:
                buffer.append(script + "\n")
                return True
        return self.send(script)

    def update_inner_html(self, html_id: str, html: str) -> None:
        buffer = self._update_scripts.get(html_id)
        if buffer is None:
            self.call_func("updateInnerHTML", html_id, html)
        else:
            buffer.append(f"element.innerHTML = {js_string(html)};\n")

    def append_to_inner_html(self, html_id: str, html: str) -> None:
        buffer = self._update_scripts.get(html_id)
        if buffer is None:
            self.call_func("appendToInnerHTML", html_id, html)
        else:
            buffer.append(f"element.insertAdjacentHTML('beforeend', {js_string(html)});\n")

    def update_css_property(self, html_id: str, name: str, value: str) -> None:
        buffer = self._update_scripts.get(html_id)
        if buffer is None:
            self.call_func("updateCSSProperty", html_id, name, value)
        else:
            buffer.append(f"element.style['{name}'] = {js_string(value)};\n")

    def update_property(self, html_id: str, name: str, value: Any) -> None:
        buffer = self._update_scripts.get(html_id)
        if buffer is None:
            self.call_func("updateProperty", html_id, name, value)
        else:
            text = js_arg(value)
            if text is not None:
                buffer.append(f"element.setAttribute('{name}', {text});\n")

    def remove_property(self, html_id: str, name: str) -> None:
        buffer = self._update_scripts.get(html_id)
        if buffer is None:
            self.call_func("removeProperty", html_id, name)
        else:
            buffer.append(f"if (element.hasAttribute('{name}')) {{ element.removeAttribute('{name}');}}\n")

    # --- update scripts ---

    def start_update_script(self, html_id: str) -> bool:
        """
        Start collecting the updates of ``html_id``.

        :return: False if a script for the element is already open; the
            caller then must not finish it.
        """
        if html_id in self._update_scripts:
            return False
        self._update_scripts[html_id] = [
            "{\nlet element = document.getElementById('", html_id, "');\nif (element) {\n",
        ]
        return True

    def finish_update_script(self, html_id: str) -> None:
        buffer = self._update_scripts.pop(html_id, None)
        if buffer is not None:
            buffer.append("scanElementsSize();\n}\n}\n")
            self.send("".join(buffer))

    # --- animation style sheet ---

    def _animation_script(self, css: str, operator: str) -> str:
        return ("{\n\tlet styles = document.getElementById('ruiAnimations');\n\tif (styles) {\n"
                f"\t\tstyles.textContent {operator} {js_string(css)};\n\t}}\n}}")

    def add_animation_css(self, css: str) -> None:
        self.send(self._animation_script(css, "+="))

    def clear_animation(self) -> None:
        self.send(self._animation_script("", "="))

    def set_animation_css(self, css: str) -> None:
        self.send(self._animation_script(css, "="))

    # --- canvas ---

    def _canvas_call(self, target: str, func: str, args: tuple) -> str:
        texts = [js_arg(arg) or "" for arg in args]
        return f"{target}.{func}({', '.join(texts)});"

    def canvas_start(self, html_id: str) -> None:
        self._canvas = ["{\nconst ctx = getCanvasContext('", html_id, "');"]

    def call_canvas_func(self, func: str, *args: Any) -> None:
        self._canvas.append("\n" + self._canvas_call("ctx", func, args))

    def update_canvas_property(self, name: str, value: Any) -> None:
        self._canvas.append(f"\nctx.{name} = {js_arg(value) or ''};")

    def _next_canvas_var(self) -> CanvasVar:
        self._canvas_var_number += 1
        return CanvasVar(f"v{self._canvas_var_number}")

    def create_canvas_var(self, func: str, *args: Any) -> CanvasVar:
        """``let vN = ctx.func(args);``"""
        var = self._next_canvas_var()
        self._canvas.append(f"\nlet {var.name} = " + self._canvas_call("ctx", func, args))
        return var

    def create_path2d(self, arg: str = "") -> CanvasVar:
        var = self._next_canvas_var()
        self._canvas.append(f"\nlet {var.name} = new Path2D({js_string(arg) if arg else ''});")
        return var

    def call_canvas_var_func(self, var: CanvasVar, func: str, *args: Any) -> None:
        if not isinstance(var, CanvasVar):
            logger.error("%r is not a canvas variable", var)
            return
        self._canvas.append("\n" + self._canvas_call(var.name, func, args))

    def call_canvas_image_func(self, url: str, prop: str, func: str, *args: Any) -> None:
        """Call ``ctx.func(img, args)`` with a loaded image; with ``prop`` the result is assigned to it."""
        buffer = [f"\nimg = images.get({js_string(url)});\nif (img) {{\n"]
        if prop:
            buffer.append(f"ctx.{prop} = ")
        buffer.append(f"ctx.{func}(img")
        for arg in args:
            buffer.append(", " + (js_arg(arg) or ""))
        buffer.append(");\n}")
        self._canvas.append("".join(buffer))

    def canvas_finish(self) -> None:
        self._canvas.append("\n}\n")
        script = "".join(self._canvas)
        self._canvas = []
        self.send(script)

    # --- calls with an answer ---

    def call_func_immediately(self, func: str, *args: Any) -> bool:
        return self.call_func(func, *args)

    def remote_value(self, func: str, *args: Any) -> Optional[DataObject]:
        """
        Call ``func(answerID, args)`` in the runtime and wait for its
        ``answer`` message.

        :return: The answer, or None on timeout or when the bridge closes.
        """
        if self.closed:
            return None
        slot = _AnswerSlot()
        with self._answer_lock:
            answer_id = self._answer_id
            self._answer_id += 1
            self._answers[answer_id] = slot

        try:
            if self.call_func_immediately(func, answer_id, *args):
                if not slot.event.is_set() and not self.wait_answer(slot, self.answer_timeout):
                    logger.warning("No answer to %s (answerID = %d) in %gs", func, answer_id, self.answer_timeout)
        finally:
            with self._answer_lock:
                self._answers.pop(answer_id, None)
        return slot.answer

    def canvas_text_metrics(self, html_id: str, font: str, text: str) -> Optional[TextMetrics]:
        data = self.remote_value("canvasTextMetrics", html_id, font, text)
        if data is None:
            return None
        return TextMetrics(**{name: data.property_float(name) or 0.0
                              for name in ("width", "ascent", "descent", "left", "right")})

    def html_property_value(self, html_id: str, name: str) -> str:
        data = self.remote_value("getPropertyValue", html_id, name)
        if data is None:
            return ""
        return data.property_value("value") or ""

    def answer_received(self, answer: DataObject) -> None:
        text = answer.property_value("answerID")
        if text is None:
            logger.error("answerID not found")
            return
        try:
            answer_id = int(text)
        except ValueError:
            logger.error("Invalid answerID = %s", text)
            return
        with self._answer_lock:
            slot = self._answers.pop(answer_id, None)
        if slot is None:
            logger.warning("Bad answerID = %d (no request is waiting)", answer_id)
            return
        slot.answer = answer
        slot.event.set()

    def close(self) -> None:
        """Mark the bridge closed and release every waiting remote call."""
        self.closed = True
        with self._answer_lock:
            slots = list(self._answers.values())
            self._answers.clear()
        for slot in slots:
            slot.event.set()


class QtEventLoopMixin:
    """
    Waits for answers by running the Qt event loop, for transports whose
    messages arrive on the thread that asked.
    """

    def wait_answer(self, slot: _AnswerSlot, timeout: float) -> bool:
        deadline = time.monotonic() + timeout
        while not slot.event.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            QCoreApplication.processEvents(QEventLoop.AllEvents, min(50, int(remaining * 1000) + 1))
        return slot.answer is not None
