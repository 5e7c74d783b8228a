# rui/widgets.py
"""
Text, edit, drop-down, image and progress widgets.
"""
import logging
from typing import Any, List, Optional

from .css import CSSBuilder
from .data import DataObject
from .properties import ENUM_PROPERTIES, invalid_property_value, to_int
from .units import format_number
from .view import View, escape

logger = logging.getLogger(__name__)


class TextView(View):
    """Shows the ``text`` property, HTML-escaped."""

    tag_name = "TextView"

    def html_subviews(self, buffer: List[str]) -> None:
        text = self.get("text")
        if text:
            buffer.append(escape(text).replace("\n", "<br>"))

    def changed(self, tag: str) -> None:
        if tag == "text":
            self.update_inner_html()
        else:
            super().changed(tag)


# edit-view-type indexes
SINGLE_LINE_TEXT = 0
PASSWORD_TEXT = 1
EMAIL_TEXT = 2
EMAILS_TEXT = 3
URL_TEXT = 4
PHONE_TEXT = 5
MULTI_LINE_TEXT = 6

_INPUT_TYPES = {
    SINGLE_LINE_TEXT: ' type="text" inputmode="text"',
    PASSWORD_TEXT: ' type="password" inputmode="text"',
    EMAIL_TEXT: ' type="email" inputmode="email"',
    EMAILS_TEXT: ' type="email" inputmode="email" multiple',
    URL_TEXT: ' type="url" inputmode="url"',
    PHONE_TEXT: ' type="tel" inputmode="tel"',
}

# the text before the last change
OLD_TEXT_TAG = "edit-view-old-text"


class EditView(View):
    """
    A single-line ``<input>`` or, for the ``multiline`` type, a ``<textarea>``.

    Every change of ``text``, typed in the browser or set by the program,
    fires ``edit-text-changed`` with the new and the old text.
    """

    tag_name = "EditView"
    default_focusable = True
    value_events = {"edit-text-changed": 2}
    value_tags = {"text": "edit-text-changed"}

    _ALIASES = {"type": "edit-view-type", "wrap": "edit-wrap", "value": "text", "placeholder": "hint"}

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def text(self) -> str:
        return self.get("text") or ""

    def old_text(self) -> str:
        return self.get_raw(OLD_TEXT_TAG) or ""

    def edit_type(self) -> int:
        return self.get("edit-view-type")

    @property
    def close_html_tag(self) -> bool:
        return self.edit_type() == MULTI_LINE_TEXT

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag == "text":
            return self._lookup(tag) or ""
        return super().get(tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag == "text":
            old = self.text()
            if value is not None and not isinstance(value, str):
                invalid_property_value(tag, value)
                return None
            changed = self.store(tag, value) if value else self.remove_value(tag)
            if changed:
                self._properties[OLD_TEXT_TAG] = old
            return changed
        if tag == OLD_TEXT_TAG:
            logger.error("%r property is read only", tag)
            return None
        return super().set_value(tag, value)

    def html_tag(self) -> str:
        return "textarea" if self.edit_type() == MULTI_LINE_TEXT else "input"

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        edit_type = self.edit_type()
        if edit_type == MULTI_LINE_TEXT:
            buffer.append(' wrap="soft"' if self.get("edit-wrap") else ' wrap="off"')
        else:
            buffer.append(_INPUT_TYPES[edit_type])
        if edit_type in (SINGLE_LINE_TEXT, MULTI_LINE_TEXT):
            buffer.append(' spellcheck="true"' if self.get("spellcheck") else ' spellcheck="false"')
        if self.get("readonly"):
            buffer.append(" readonly")
        max_length = self.get("max-length")
        if max_length and max_length > 0:
            buffer.append(f' maxlength="{max_length}"')
        hint = self.get("hint")
        if hint:
            buffer.append(f' placeholder="{escape(hint)}"')
        if self.is_disabled():
            buffer.append(" disabled")
        buffer.append(' oninput="editViewInputEvent(this)"')
        if edit_type != MULTI_LINE_TEXT:
            text = self.text()
            if text:
                buffer.append(f' value="{escape(text)}"')

    def html_subviews(self, buffer: List[str]) -> None:
        if self.edit_type() == MULTI_LINE_TEXT:
            buffer.append(escape(self.text()))

    def changed(self, tag: str) -> None:
        session = self.session
        html_id = self.html_id
        if tag == "text":
            session.call_func("setInputValue", html_id, self.text())
        elif tag == OLD_TEXT_TAG:
            pass
        elif tag == "hint":
            hint = self.get("hint")
            if hint:
                session.update_property(html_id, "placeholder", hint)
            else:
                session.remove_property(html_id, "placeholder")
        elif tag == "max-length":
            max_length = self.get("max-length")
            if max_length and max_length > 0:
                session.update_property(html_id, "maxlength", str(max_length))
            else:
                session.remove_property(html_id, "maxlength")
        elif tag == "readonly":
            if self.get("readonly"):
                session.update_property(html_id, "readonly", "")
            else:
                session.remove_property(html_id, "readonly")
        elif tag == "spellcheck":
            session.update_property(html_id, "spellcheck", "true" if self.get("spellcheck") else "false")
        elif tag == "edit-wrap":
            session.update_property(html_id, "wrap", "soft" if self.get("edit-wrap") else "off")
        elif tag == "edit-view-type":
            # input and textarea are different elements
            parent = self.parent()
            if parent is not None:
                parent.update_inner_html()
        else:
            super().changed(tag)

    def update_disabled_state(self, disabled: bool) -> None:
        if disabled:
            self.session.update_property(self.html_id, "disabled", "")
        else:
            self.session.remove_property(self.html_id, "disabled")

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "textChanged":
            text = data.property_value("text")
            if text is not None:
                old = self.text()
                if text != old:
                    self.set_raw("text", text or None)
                    self._properties[OLD_TEXT_TAG] = old
                    self.notify_value_changed("text", "edit-text-changed", text, old)
            return True
        return super().handle_command(command, data)


def _to_items(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if isinstance(item, DataObject):
                raise ValueError("items must be texts")
            items.append(item if isinstance(item, str) else str(item))
        return items
    raise ValueError(f"{type(value).__name__} is not a list of items")


def _to_indexes(value: Any) -> List[int]:
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    if isinstance(value, int):
        value = [value]
    if isinstance(value, (list, tuple)):
        return [to_int(item) for item in value]
    raise ValueError(f"{type(value).__name__} is not a list of indexes")


class DropDownList(View):
    """
    A ``<select>`` of text ``items``. ``current`` is the index of the chosen
    item; ``disabled-items`` lists indexes that can not be chosen.
    """

    tag_name = "DropDownList"
    default_focusable = True
    value_events = {"drop-down-event": 2}
    value_tags = {"current": "drop-down-event"}

    def items(self) -> List[str]:
        return list(self.get_raw("items") or ())

    def disabled_items(self) -> List[int]:
        return list(self.get_raw("disabled-items") or ())

    def current(self) -> int:
        value = self._lookup("current")
        return 0 if value is None else value

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag == "current":
            return self.current()
        if tag in ("items", "disabled-items"):
            return self.get_raw(tag) and list(self.get_raw(tag))
        return super().get(tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag in ("items", "disabled-items"):
            if value is None:
                return self.remove_value(tag)
            try:
                values = _to_items(value) if tag == "items" else _to_indexes(value)
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
            if not values:
                return self.remove_value(tag)
            return self.store(tag, values)
        return super().set_value(tag, value)

    def html_tag(self) -> str:
        return "select"

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        buffer.append(' size="1" onchange="dropDownListEvent(this, event)"')
        if self.is_disabled():
            buffer.append(" disabled")

    def html_subviews(self, buffer: List[str]) -> None:
        current = self.current()
        disabled = set(self.disabled_items())
        translate = not self.get("not-translate")
        for i, item in enumerate(self.items()):
            if i in disabled:
                buffer.append("<option disabled>")
            elif i == current:
                buffer.append("<option selected>")
            else:
                buffer.append("<option>")
            if translate:
                item = self.session.get_string(item)
            buffer.append(escape(item))
            buffer.append("</option>")

    def changed(self, tag: str) -> None:
        if tag == "current":
            self.session.call_func("selectDropDownListItem", self.html_id, self.current())
        elif tag in ("items", "disabled-items"):
            self.update_inner_html()
        else:
            super().changed(tag)

    def update_disabled_state(self, disabled: bool) -> None:
        if disabled:
            self.session.update_property(self.html_id, "disabled", "")
        else:
            self.session.remove_property(self.html_id, "disabled")

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "itemSelected":
            number = data.property_int("number")
            if number is None:
                logger.error("itemSelected: invalid number %r", data.property_value("number"))
                return True
            old = self.current()
            if number != old and 0 <= number < len(self.items()):
                self.set_raw("current", number)
                self.notify_value_changed("current", "drop-down-event", number, old)
            return True
        return super().handle_command(command, data)


class ImageView(View):
    """
    An ``<img>``. ``src`` may be a URL or an ``@name`` image constant;
    ``fit`` maps to ``object-fit``.
    """

    tag_name = "ImageView"
    close_html_tag = False
    value_events = {"loaded-event": 0, "error-event": 0}

    _ALIASES = {"source": "src", "alt-text": "alt"}

    def __init__(self, session, params=None):
        self.natural_width = 0.0
        self.natural_height = 0.0
        self.current_src = ""
        super().__init__(session, params)

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def html_tag(self) -> str:
        return "img"

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        src = self.get("src")
        if src:
            buffer.append(f' src="{escape(src)}"')
        alt = self.get("alt")
        if alt:
            buffer.append(f' alt="{escape(alt)}"')
        buffer.append(' onload="imageLoaded(this, event)"')
        if self.get_raw("error-event"):
            buffer.append(' onerror="imageError(this, event)"')

    def css_style(self, builder: CSSBuilder) -> None:
        builder.add("object-fit", ENUM_PROPERTIES["fit"].css(self.get("fit")))
        super().css_style(builder)

    def changed(self, tag: str) -> None:
        if tag in ("src", "alt"):
            value = self.get(tag)
            if value:
                self.session.update_property(self.html_id, tag, value)
            else:
                self.session.remove_property(self.html_id, tag)
        elif tag == "error-event":
            if self.get_raw(tag):
                self.session.update_property(self.html_id, "onerror", "imageError(this, event)")
            else:
                self.session.remove_property(self.html_id, "onerror")
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "imageViewLoaded":
            self.natural_width = data.property_float("natural-width") or 0.0
            self.natural_height = data.property_float("natural-height") or 0.0
            self.current_src = data.property_value("current-src") or ""
            self.fire_event("loaded-event")
        elif command == "imageViewError":
            self.fire_event("error-event")
        else:
            return super().handle_command(command, data)
        return True


class ProgressBar(View):
    """A ``<progress>`` element showing ``progress-bar-value`` out of ``progress-bar-max`` (1 by default)."""

    tag_name = "ProgressBar"

    _ALIASES = {
        "max": "progress-bar-max",
        "value": "progress-bar-value",
        "progress-max": "progress-bar-max",
        "progress-value": "progress-bar-value",
    }

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def html_tag(self) -> str:
        return "progress"

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        buffer.append(f' max="{format_number(self.get("progress-bar-max"))}"')
        buffer.append(f' value="{format_number(self.get("progress-bar-value") or 0.0)}"')

    def changed(self, tag: str) -> None:
        if tag == "progress-bar-max":
            self.session.update_property(self.html_id, "max", format_number(self.get(tag)))
        elif tag == "progress-bar-value":
            self.session.update_property(self.html_id, "value", format_number(self.get(tag) or 0.0))
        else:
            super().changed(tag)
