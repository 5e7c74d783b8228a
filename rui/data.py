# rui/data.py
"""
Data-text objects.

The browser runtime reports events as data-text messages, and structured
property values (borders, shadows, gradients, animations...) may be given in
the same notation::

    clickEvent{id=id000012, x=10, y="20", buttons=[1, 2], frame=_{width=10}}

An object is a tag followed by ``{...}`` holding ``key=value`` nodes
separated by commas or new lines. A value is a text (bare word or a quoted
string), an object or an array ``[...]`` of texts and objects. ``//`` and
``/* */`` comments are skipped.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional, Union

from .errors import DataParseError


class NodeType(IntEnum):
    TEXT = 0
    OBJECT = 1
    ARRAY = 2


DataValue = Union[str, "DataObject"]


@dataclass
class DataNode:
    """A ``key=value`` pair of a :class:`DataObject`."""
    tag: str
    value: Optional[DataValue] = None
    array: Optional[List[DataValue]] = None

    @property
    def type(self) -> NodeType:
        if self.array is not None:
            return NodeType.ARRAY
        if isinstance(self.value, DataObject):
            return NodeType.OBJECT
        return NodeType.TEXT

    @property
    def text(self) -> str:
        return self.value if isinstance(self.value, str) else ""

    @property
    def object(self) -> Optional["DataObject"]:
        return self.value if isinstance(self.value, DataObject) else None

    def array_as_params(self) -> List[Dict[str, Any]]:
        """Return every object element of an array node converted with :meth:`DataObject.to_params`."""
        result = []
        for item in self.array or []:
            if isinstance(item, DataObject):
                params = item.to_params()
                if params:
                    result.append(params)
        return result


@dataclass
class DataObject:
    """A tagged, ordered list of :class:`DataNode`."""
    tag: str = "_"
    nodes: List[DataNode] = field(default_factory=list)

    @property
    def property_count(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[DataNode]:
        return iter(self.nodes)

    def property_by_tag(self, tag: str) -> Optional[DataNode]:
        for node in self.nodes:
            if node.tag == tag:
                return node
        return None

    def property_value(self, tag: str) -> Optional[str]:
        """Return the text of the node ``tag``, or None if it is absent or not a text."""
        node = self.property_by_tag(tag)
        if node is not None and node.type == NodeType.TEXT:
            return node.text
        return None

    def property_int(self, tag: str) -> Optional[int]:
        text = self.property_value(tag)
        if text is None:
            return None
        try:
            return int(text.strip())
        except ValueError:
            try:
                return int(float(text))
            except ValueError:
                return None

    def property_float(self, tag: str) -> Optional[float]:
        text = self.property_value(tag)
        if text is None:
            return None
        try:
            return float(text.strip())
        except ValueError:
            return None

    def property_bool(self, tag: str) -> bool:
        text = self.property_value(tag)
        return text is not None and text.strip().lower() in ("1", "true", "yes", "on")

    def property_object(self, tag: str) -> Optional["DataObject"]:
        node = self.property_by_tag(tag)
        if node is not None and node.type == NodeType.OBJECT:
            return node.object
        return None

    def _set_node(self, node: DataNode) -> None:
        for i, current in enumerate(self.nodes):
            if current.tag == node.tag:
                self.nodes[i] = node
                return
        self.nodes.append(node)

    def set_property_value(self, tag: str, value: str) -> None:
        self._set_node(DataNode(tag, value))

    def set_property_object(self, tag: str, obj: "DataObject") -> None:
        self._set_node(DataNode(tag, obj))

    def set_property_array(self, tag: str, array: List[DataValue]) -> None:
        self._set_node(DataNode(tag, None, list(array)))

    def remove_property_by_tag(self, tag: str) -> Optional[DataNode]:
        for i, node in enumerate(self.nodes):
            if node.tag == tag:
                return self.nodes.pop(i)
        return None

    def to_params(self) -> Dict[str, Any]:
        """
        Convert to a plain dict. Empty texts and empty arrays are dropped,
        nested objects are kept as :class:`DataObject`.
        """
        params: Dict[str, Any] = {}
        for node in self.nodes:
            node_type = node.type
            if node_type == NodeType.TEXT:
                if node.text:
                    params[node.tag] = node.text
            elif node_type == NodeType.OBJECT:
                params[node.tag] = node.object
            else:
                array = [item for item in node.array if isinstance(item, DataObject) or item]
                if array:
                    params[node.tag] = array
        return params

    def __str__(self) -> str:
        return write_data_text(self)


_STOP_SYMBOLS = frozenset("={}[],'\"`/")
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "'": "'", "\\": "\\"}


class _Parser:

    def __init__(self, text: str):
        if "\r" in text:
            text = text.replace("\r\n", "\n").replace("\r", "\n")
        self.data = text
        self.size = len(text)
        self.pos = 0
        self.line = 1
        self.line_start = 0

    def error(self, message: str) -> DataParseError:
        return DataParseError(message, self.line, self.pos - self.line_start)

    def current(self) -> str:
        return self.data[self.pos] if self.pos < self.size else "\0"

    def skip_spaces(self, skip_new_line: bool) -> None:
        while self.pos < self.size:
            ch = self.data[self.pos]
            if ch == "\n":
                if not skip_new_line:
                    return
                self.line += 1
                self.line_start = self.pos + 1
            elif ch == "/":
                following = self.data[self.pos + 1] if self.pos + 1 < self.size else ""
                if following == "/":
                    end = self.data.find("\n", self.pos)
                    self.pos = (self.size if end < 0 else end) - 1
                elif following == "*":
                    end = self.data.find("*/", self.pos + 2)
                    if end < 0:
                        raise self.error("unexpected end of comment")
                    comment = self.data[self.pos:end]
                    newlines = comment.count("\n")
                    if newlines:
                        self.line += newlines
                        self.line_start = self.pos + comment.rfind("\n") + 1
                    self.pos = end + 1
                else:
                    return
            elif not ch.isspace():
                return
            self.pos += 1

    def parse_tag(self) -> str:
        self.skip_spaces(True)
        ch = self.current()

        if ch == "`":
            end = self.data.find("`", self.pos + 1)
            if end < 0:
                raise self.error("unexpected end of text")
            text = self.data[self.pos + 1:end]
            self.pos = end + 1
            return text

        if ch in ("'", '"'):
            text = self.parse_quoted(ch)
            self.skip_spaces(False)
            return text

        start = self.pos
        while self.pos < self.size:
            ch = self.data[self.pos]
            if ch.isspace() or ch in _STOP_SYMBOLS:
                break
            self.pos += 1
        text = self.data[start:self.pos]
        self.skip_spaces(False)
        return text

    def parse_quoted(self, quote: str) -> str:
        self.pos += 1
        chars: List[str] = []
        while True:
            if self.pos >= self.size:
                raise self.error("unexpected end of text")
            ch = self.data[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(chars)
            if ch != "\\":
                chars.append(ch)
                self.pos += 1
                continue

            escape = self.data[self.pos + 1] if self.pos + 1 < self.size else ""
            self.pos += 2
            if escape in _ESCAPES:
                chars.append(_ESCAPES[escape])
            elif escape in ("x", "X", "u", "U"):
                count = 2 if escape in ("x", "X") else 4
                digits = self.data[self.pos:self.pos + count]
                try:
                    if len(digits) != count:
                        raise ValueError(digits)
                    chars.append(chr(int(digits, 16)))
                except ValueError:
                    raise self.error(f"invalid escape sequence \\{escape}{digits}") from None
                self.pos += count
            else:
                raise self.error(f"invalid escape sequence \\{escape}")

    def parse_node(self) -> DataNode:
        tag = self.parse_tag()
        self.skip_spaces(True)
        if self.current() != "=":
            raise self.error("expected '=' after a tag name")
        self.pos += 1
        self.skip_spaces(True)

        ch = self.current()
        if ch == "[":
            return DataNode(tag, None, self.parse_array())
        if ch == "{":
            return DataNode(tag, self.parse_object("_"))
        if ch in ("}", "]", "="):
            raise self.error("expected '[', '{' or a tag name after '='")

        text = self.parse_tag()
        if self.current() == "{":
            return DataNode(tag, self.parse_object(text))
        return DataNode(tag, text)

    def parse_object(self, tag: str) -> DataObject:
        if self.current() != "{":
            raise self.error("expected '{'")
        self.pos += 1

        obj = DataObject(tag)
        while self.pos < self.size:
            self.skip_spaces(True)
            if self.current() == "}":
                self.pos += 1
                self.skip_spaces(False)
                return obj

            obj.nodes.append(self.parse_node())
            ch = self.current()
            if ch == "}":
                self.pos += 1
                self.skip_spaces(True)
                return obj
            if ch not in (",", "\n"):
                raise self.error("expected '}', '\\n' or ','")
            if ch != "\n":
                self.pos += 1

            self.skip_spaces(True)
            while self.current() == ",":
                self.pos += 1
                self.skip_spaces(True)

        raise self.error("unexpected end of text")

    def parse_array(self) -> List[DataValue]:
        self.pos += 1
        array: List[DataValue] = []
        while self.pos < self.size:
            self.skip_spaces(True)
            while self.current() == ",":
                self.pos += 1
                self.skip_spaces(True)

            if self.pos >= self.size:
                break
            if self.current() == "]":
                self.pos += 1
                self.skip_spaces(True)
                return array

            text = self.parse_tag()
            if self.current() == "{":
                array.append(self.parse_object(text))
            else:
                array.append(text)

            if self.current() not in ("]", ",", "\n"):
                raise self.error("expected ']' or ','")

        raise self.error("unexpected end of text")


def parse_data_text(text: str) -> DataObject:
    """
    Parse a data-text object.

    :param text: The source text, e.g. ``answer{answerID=3, value="10px"}``.
    :raises DataParseError: if the text is ill-formed.
    """
    parser = _Parser(text)
    tag = parser.parse_tag()
    return parser.parse_object(tag)


def _quote(text: str) -> str:
    if text and not any(ch.isspace() or ch in _STOP_SYMBOLS or ch == "\\" for ch in text):
        return text
    escaped = (text.replace("\\", "\\\\").replace('"', '\\"')
               .replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t"))
    return f'"{escaped}"'


def write_data_text(obj: DataObject) -> str:
    """Serialize ``obj`` back to single-line data text."""
    def value_text(value: DataValue) -> str:
        if isinstance(value, DataObject):
            return write_data_text(value)
        return _quote(value)

    parts = []
    for node in obj.nodes:
        if node.array is not None:
            parts.append(f"{_quote(node.tag)}=[{', '.join(value_text(v) for v in node.array)}]")
        else:
            parts.append(f"{_quote(node.tag)}={value_text(node.value if node.value is not None else '')}")
    return f"{_quote(obj.tag)}{{{', '.join(parts)}}}"
