# rui/pickers.py
"""
Value pickers backed by ``<input>`` elements: number, color, date, time and file.

Each picker owns one value tag and fires its value-changed event with the
new and the old value, whether the value was typed in the browser
(``textChanged`` message) or set by the program.
"""
import base64
import binascii
import datetime
import logging
from typing import Any, Callable, Dict, List, Optional

from .color import Color, to_color
from .data import DataObject, NodeType
from .events import FileInfo
from .properties import invalid_property_value, to_int
from .units import format_number
from .view import View, escape

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


class InputView(View):
    """The ``<input>`` element shared by the pickers."""

    default_focusable = True
    close_html_tag = False
    # the picker's own tags: short alias -> tag
    aliases: Dict[str, str] = {}

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self.aliases.get(tag, tag)

    def html_tag(self) -> str:
        return "input"

    def input_properties(self, buffer: List[str]) -> None:
        """Attributes of the input type, written before the common ones."""

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        self.input_properties(buffer)
        if self.is_disabled():
            buffer.append(" disabled")
        if self.get_raw("click-event") is None:
            buffer.append(' onclick="stopEventPropagation(this, event)"')

    def update_disabled_state(self, disabled: bool) -> None:
        if disabled:
            self.session.update_property(self.html_id, "disabled", "")
        else:
            self.session.remove_property(self.html_id, "disabled")

    def update_attribute(self, name: str, value: str) -> None:
        if value:
            self.session.update_property(self.html_id, name, value)
        else:
            self.session.remove_property(self.html_id, name)


# number-picker-type indexes
NUMBER_EDITOR = 0
NUMBER_SLIDER = 1


class NumberPicker(InputView):
    """A number editor or, with ``number-picker-type = slider``, a range slider."""

    tag_name = "NumberPicker"
    value_events = {"number-changed": 2}
    value_tags = {"number-picker-value": "number-changed"}
    aliases = {
        "type": "number-picker-type",
        "min": "number-picker-min",
        "max": "number-picker-max",
        "step": "number-picker-step",
        "value": "number-picker-value",
    }

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag in ("number-picker-value", "number-picker-step"):
            value = self._lookup(tag)
            return 0.0 if value is None else value
        if tag == "number-picker-min":
            value = self._lookup(tag)
            return float("-inf") if value is None else value
        if tag == "number-picker-max":
            value = self._lookup(tag)
            return float("inf") if value is None else value
        return super().get(tag)

    def value(self) -> float:
        return self.get("number-picker-value")

    def input_properties(self, buffer: List[str]) -> None:
        if self.get("number-picker-type") == NUMBER_SLIDER:
            buffer.append(' type="range"')
        else:
            buffer.append(' type="number"')
        low = self.get("number-picker-min")
        if low != float("-inf"):
            buffer.append(f' min="{format_number(low)}"')
        high = self.get("number-picker-max")
        if high != float("inf"):
            buffer.append(f' max="{format_number(high)}"')
        step = self.get("number-picker-step")
        buffer.append(f' step="{format_number(step)}"' if step else ' step="any"')
        buffer.append(f' value="{format_number(self.value())}"')
        buffer.append(' oninput="editViewInputEvent(this)"')

    def changed(self, tag: str) -> None:
        if tag == "number-picker-value":
            self.session.call_func("setInputValue", self.html_id, format_number(self.value()))
        elif tag == "number-picker-type":
            slider = self.get("number-picker-type") == NUMBER_SLIDER
            self.session.update_property(self.html_id, "type", "range" if slider else "number")
        elif tag == "number-picker-min":
            low = self.get(tag)
            self.update_attribute("min", "" if low == float("-inf") else format_number(low))
        elif tag == "number-picker-max":
            high = self.get(tag)
            self.update_attribute("max", "" if high == float("inf") else format_number(high))
        elif tag == "number-picker-step":
            step = self.get(tag)
            self.session.update_property(self.html_id, "step", format_number(step) if step else "any")
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "textChanged":
            text = data.property_value("text")
            if text is not None:
                try:
                    value = float(text)
                except ValueError:
                    logger.error("NumberPicker: invalid number %r", text)
                    return True
                old = self.value()
                if value != old:
                    self.set_raw("number-picker-value", value)
                    self.notify_value_changed("number-picker-value", "number-changed", value, old)
            return True
        return super().handle_command(command, data)


def _rgb_text(color: Color) -> str:
    return f"#{int(color) & 0xFFFFFF:06x}"


class ColorPicker(InputView):
    """A color input; the value is a :class:`rui.color.Color`, black by default."""

    tag_name = "ColorPicker"
    value_events = {"color-changed": 2}
    value_tags = {"color-picker-value": "color-changed"}
    aliases = {"value": "color-picker-value", "color": "color-picker-value"}

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag == "color-picker-value":
            value = self._lookup(tag)
            return Color(0xFF000000) if value is None else value
        return super().get(tag)

    def value(self) -> Color:
        return self.get("color-picker-value")

    def input_properties(self, buffer: List[str]) -> None:
        buffer.append(f' type="color" value="{_rgb_text(self.value())}"')
        buffer.append(' oninput="editViewInputEvent(this)"')

    def changed(self, tag: str) -> None:
        if tag == "color-picker-value":
            self.session.call_func("setInputValue", self.html_id, _rgb_text(self.value()))
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "textChanged":
            text = data.property_value("text")
            if text is not None:
                try:
                    color = to_color(text)
                except ValueError as e:
                    logger.error("ColorPicker: %s", e)
                    return True
                old = self.value()
                if color != old:
                    self.set_raw("color-picker-value", color)
                    self.notify_value_changed("color-picker-value", "color-changed", color, old)
            return True
        return super().handle_command(command, data)


def _date_format(text: str) -> str:
    if "-" in text:
        parts = text.split("-")
        if len(parts) == 3:
            if parts[0] and not parts[0][0].isdigit():
                return "%b-%d-%y" if len(parts[2]) == 2 else "%b-%d-%Y"
            if parts[1] and not parts[1][0].isdigit():
                return "%d-%b-%Y"
            return DATE_FORMAT
    elif " " in text:
        parts = text.split(" ")
        if len(parts) == 3:
            if parts[0] and not parts[0][0].isdigit():
                return "%B %d, %Y"
            return "%d %B %Y"
    elif "/" in text:
        parts = text.split("/")
        if len(parts) == 3:
            return "%m/%d/%y" if len(parts[2]) == 2 else "%m/%d/%Y"
    elif len(text) == 6:
        return "%m%d%y"
    return "%Y%m%d"


def to_date(value: Any) -> datetime.date:
    """
    Convert a date, a datetime or a text in one of the accepted forms:
    ``YYYYMMDD``, ``YYYY-MM-DD``, ``DD-Mon-YYYY``, ``Mon-DD-YY``,
    ``Mon-DD-YYYY``, ``Month DD, YYYY``, ``DD Month YYYY``, ``MM/DD/YY``,
    ``MM/DD/YYYY`` and ``MMDDYY``. Raises ValueError.
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        return datetime.datetime.strptime(text, _date_format(text)).date()
    raise ValueError(f"{type(value).__name__} is not a date")


def to_time(value: Any) -> datetime.time:
    """
    Convert a time, a datetime or a text ``HH:MM``, ``HH:MM PM``,
    ``HH:MM:SS`` or ``HH:MM:SS PM``. Raises ValueError.
    """
    if isinstance(value, datetime.datetime):
        return value.time().replace(microsecond=0)
    if isinstance(value, datetime.time):
        return value
    if isinstance(value, str):
        text = value.strip()
        seconds = text.count(":") == 2
        if text[-2:].upper() in ("AM", "PM"):
            text = text[:-2].rstrip() + " " + text[-2:].upper()
            layout = "%I:%M:%S %p" if seconds else "%I:%M %p"
        else:
            layout = TIME_FORMAT if seconds else "%H:%M"
        return datetime.datetime.strptime(text, layout).time()
    raise ValueError(f"{type(value).__name__} is not a time")


class _MomentPicker(InputView):
    """Date and time pickers: a value with min, max and step."""

    input_type = ""
    wire_format = ""
    value_tag = ""
    min_tag = ""
    max_tag = ""
    step_tag = ""
    changed_event = ""

    def convert(self, value: Any) -> Any:
        raise NotImplementedError

    def default(self) -> Any:
        raise NotImplementedError

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag in (self.value_tag, self.min_tag, self.max_tag):
            if value is None:
                return self.remove_value(tag)
            try:
                moment = self.convert(value)
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
            return self.store(tag, moment)
        if tag == self.step_tag:
            if value is None:
                return self.remove_value(tag)
            try:
                step = to_int(value)
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
            return self.store(tag, step) if step > 0 else self.remove_value(tag)
        return super().set_value(tag, value)

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag == self.value_tag:
            value = self.get_raw(tag)
            return self.default() if value is None else value
        if tag in (self.min_tag, self.max_tag, self.step_tag):
            return self.get_raw(tag)
        return super().get(tag)

    def value(self) -> Any:
        return self.get(self.value_tag)

    def _text(self, value: Any) -> str:
        return value.strftime(self.wire_format) if value is not None else ""

    def input_properties(self, buffer: List[str]) -> None:
        buffer.append(f' type="{self.input_type}"')
        for name, tag in (("min", self.min_tag), ("max", self.max_tag)):
            value = self.get(tag)
            if value is not None:
                buffer.append(f' {name}="{self._text(value)}"')
        step = self.get(self.step_tag)
        if step:
            buffer.append(f' step="{step}"')
        buffer.append(f' value="{escape(self._text(self.value()))}"')
        buffer.append(' oninput="editViewInputEvent(this)"')

    def changed(self, tag: str) -> None:
        if tag == self.value_tag:
            self.session.call_func("setInputValue", self.html_id, self._text(self.value()))
        elif tag == self.min_tag:
            self.update_attribute("min", self._text(self.get(tag)))
        elif tag == self.max_tag:
            self.update_attribute("max", self._text(self.get(tag)))
        elif tag == self.step_tag:
            step = self.get(tag)
            self.update_attribute("step", str(step) if step else "")
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "textChanged":
            text = data.property_value("text")
            if text:
                try:
                    value = self.convert(text)
                except ValueError as e:
                    logger.error("%s: %s", type(self).__name__, e)
                    return True
                old = self.value()
                if value != old:
                    self.set_raw(self.value_tag, value)
                    self.notify_value_changed(self.value_tag, self.changed_event, value, old)
            return True
        return super().handle_command(command, data)


class DatePicker(_MomentPicker):
    """A date input. Values are :class:`datetime.date`; today by default."""

    tag_name = "DatePicker"
    input_type = "date"
    wire_format = DATE_FORMAT
    value_tag = "date-picker-value"
    min_tag = "date-picker-min"
    max_tag = "date-picker-max"
    step_tag = "date-picker-step"
    changed_event = "date-changed"
    value_events = {"date-changed": 2}
    value_tags = {"date-picker-value": "date-changed"}
    aliases = {
        "value": "date-picker-value",
        "min": "date-picker-min",
        "max": "date-picker-max",
        "step": "date-picker-step",
    }

    def convert(self, value: Any) -> datetime.date:
        return to_date(value)

    def default(self) -> datetime.date:
        return datetime.date.today()


class TimePicker(_MomentPicker):
    """A time input. Values are :class:`datetime.time`; the current time by default."""

    tag_name = "TimePicker"
    input_type = "time"
    wire_format = TIME_FORMAT
    value_tag = "time-picker-value"
    min_tag = "time-picker-min"
    max_tag = "time-picker-max"
    step_tag = "time-picker-step"
    changed_event = "time-changed"
    value_events = {"time-changed": 2}
    value_tags = {"time-picker-value": "time-changed"}
    aliases = {
        "value": "time-picker-value",
        "min": "time-picker-min",
        "max": "time-picker-max",
        "step": "time-picker-step",
    }

    def convert(self, value: Any) -> datetime.time:
        return to_time(value)

    def default(self) -> datetime.time:
        return datetime.datetime.now().time().replace(microsecond=0)


FileLoader = Callable[[FileInfo, Optional[bytes]], None]


class FilePicker(InputView):
    """
    A file input. ``accept`` lists extensions or MIME types, ``multiple``
    allows several files. Selected files are reported to
    ``file-selected-event`` listeners; :meth:`load_file` fetches the content
    of one of them from the browser.
    """

    tag_name = "FilePicker"
    value_events = {"file-selected-event": 1}

    def __init__(self, session, params=None):
        self._files: List[FileInfo] = []
        self._loaders: Dict[int, FileLoader] = {}
        super().__init__(session, params)

    def files(self) -> List[FileInfo]:
        return list(self._files)

    def accept_text(self) -> str:
        accept = self.get("accept") or ""
        values = []
        for value in accept.split(","):
            value = value.strip()
            if value:
                if not value.startswith(".") and "/" not in value:
                    value = "." + value
                values.append(value)
        return ", ".join(values)

    def input_properties(self, buffer: List[str]) -> None:
        accept = self.accept_text()
        if accept:
            buffer.append(f' accept="{escape(accept)}"')
        buffer.append(' type="file"')
        if self.get("multiple"):
            buffer.append(" multiple")
        buffer.append(' oninput="fileSelectedEvent(this)"')

    def changed(self, tag: str) -> None:
        if tag == "accept":
            self.update_attribute("accept", self.accept_text())
        elif tag == "multiple":
            if self.get("multiple"):
                self.session.update_property(self.html_id, "multiple", "")
            else:
                self.session.remove_property(self.html_id, "multiple")
        else:
            super().changed(tag)

    def load_file(self, file: FileInfo, callback: FileLoader) -> bool:
        """
        Request the content of a selected ``file``.

        ``callback(file, data)`` runs when the browser answers; ``data`` is
        None if the file could not be read.

        :return: False if ``file`` is not one of the selected files.
        """
        for i, info in enumerate(self._files):
            if info.name == file.name and info.size == file.size and info.last_modified == file.last_modified:
                self._loaders[i] = callback
                self.session.call_func("loadSelectedFile", self.html_id, i)
                return True
        return False

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "fileSelected":
            node = data.property_by_tag("files")
            if node is not None and node.type == NodeType.ARRAY:
                self._files = [FileInfo.from_data(item) for item in node.array
                               if isinstance(item, DataObject)]
                self.fire_event("file-selected-event", self.files())
        elif command == "fileLoaded":
            index = data.property_int("index")
            callback = self._loaders.pop(index, None) if index is not None else None
            if callback is not None:
                callback(FileInfo.from_data(data), self._decode(data.property_value("data")))
        elif command == "fileLoadingError":
            error = data.property_value("error")
            if error:
                logger.error("FilePicker: %s", error)
            index = data.property_int("index")
            callback = self._loaders.pop(index, None) if index is not None else None
            if callback is not None:
                file = self._files[index] if 0 <= index < len(self._files) else FileInfo()
                callback(file, None)
        else:
            return super().handle_command(command, data)
        return True

    @staticmethod
    def _decode(text: Optional[str]) -> Optional[bytes]:
        if text is None:
            return None
        # data URL: "data:<mime>;base64,<payload>"
        payload = text[text.rfind(",") + 1:]
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error("FilePicker: invalid file data: %s", e)
            return None
