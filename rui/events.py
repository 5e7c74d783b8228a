# rui/events.py
"""Event objects delivered to listeners, decoded from runtime messages."""
from dataclasses import dataclass, field
from typing import List

from .data import DataObject, NodeType


def _float(data: DataObject, tag: str) -> float:
    value = data.property_float(tag)
    return value if value is not None else 0.0


def _int(data: DataObject, tag: str) -> int:
    value = data.property_int(tag)
    return value if value is not None else 0


@dataclass
class KeyEvent:
    """A key press or release."""
    timestamp: int = 0
    key: str = ""
    code: str = ""
    repeat: bool = False
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    meta_key: bool = False

    @classmethod
    def from_data(cls, data: DataObject) -> "KeyEvent":
        return cls(
            timestamp=_int(data, "timeStamp"),
            key=data.property_value("key") or "",
            code=data.property_value("code") or "",
            repeat=data.property_bool("repeat"),
            ctrl_key=data.property_bool("ctrlKey"),
            shift_key=data.property_bool("shiftKey"),
            alt_key=data.property_bool("altKey"),
            meta_key=data.property_bool("metaKey"),
        )


@dataclass
class MouseEvent:
    """A mouse event; coordinates ``x``/``y`` are relative to the view."""
    timestamp: int = 0
    button: int = 0
    buttons: int = 0
    x: float = 0.0
    y: float = 0.0
    client_x: float = 0.0
    client_y: float = 0.0
    screen_x: float = 0.0
    screen_y: float = 0.0
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    meta_key: bool = False

    @classmethod
    def _fields_from(cls, data: DataObject) -> dict:
        return dict(
            timestamp=_int(data, "timeStamp"),
            button=_int(data, "button"),
            buttons=_int(data, "buttons"),
            x=_float(data, "x"),
            y=_float(data, "y"),
            client_x=_float(data, "clientX"),
            client_y=_float(data, "clientY"),
            screen_x=_float(data, "screenX"),
            screen_y=_float(data, "screenY"),
            ctrl_key=data.property_bool("ctrlKey"),
            shift_key=data.property_bool("shiftKey"),
            alt_key=data.property_bool("altKey"),
            meta_key=data.property_bool("metaKey"),
        )

    @classmethod
    def from_data(cls, data: DataObject) -> "MouseEvent":
        return cls(**cls._fields_from(data))


@dataclass
class PointerEvent(MouseEvent):
    """A pointer (mouse, pen or touch contact) event."""
    pointer_id: int = 0
    width: float = 0.0
    height: float = 0.0
    pressure: float = 0.0
    tangential_pressure: float = 0.0
    tilt_x: float = 0.0
    tilt_y: float = 0.0
    twist: float = 0.0
    pointer_type: str = ""
    is_primary: bool = False

    @classmethod
    def from_data(cls, data: DataObject) -> "PointerEvent":
        return cls(
            **cls._fields_from(data),
            pointer_id=_int(data, "pointerId"),
            width=_float(data, "width"),
            height=_float(data, "height"),
            pressure=_float(data, "pressure"),
            tangential_pressure=_float(data, "tangentialPressure"),
            tilt_x=_float(data, "tiltX"),
            tilt_y=_float(data, "tiltY"),
            twist=_float(data, "twist"),
            pointer_type=data.property_value("pointerType") or "",
            is_primary=data.property_bool("isPrimary"),
        )


@dataclass
class Touch:
    """One contact point of a touch event."""
    identifier: int = 0
    x: float = 0.0
    y: float = 0.0
    client_x: float = 0.0
    client_y: float = 0.0
    screen_x: float = 0.0
    screen_y: float = 0.0
    radius_x: float = 0.0
    radius_y: float = 0.0
    rotation_angle: float = 0.0
    force: float = 0.0

    @classmethod
    def from_data(cls, data: DataObject) -> "Touch":
        return cls(
            identifier=_int(data, "identifier"),
            x=_float(data, "x"),
            y=_float(data, "y"),
            client_x=_float(data, "clientX"),
            client_y=_float(data, "clientY"),
            screen_x=_float(data, "screenX"),
            screen_y=_float(data, "screenY"),
            radius_x=_float(data, "radiusX"),
            radius_y=_float(data, "radiusY"),
            rotation_angle=_float(data, "rotationAngle"),
            force=_float(data, "force"),
        )


@dataclass
class TouchEvent:
    """A touch event with every active contact point."""
    timestamp: int = 0
    touches: List[Touch] = field(default_factory=list)
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    meta_key: bool = False

    @classmethod
    def from_data(cls, data: DataObject) -> "TouchEvent":
        touches = []
        node = data.property_by_tag("touches")
        if node is not None and node.type == NodeType.ARRAY:
            touches = [Touch.from_data(item) for item in node.array if isinstance(item, DataObject)]
        return cls(
            timestamp=_int(data, "timeStamp"),
            touches=touches,
            ctrl_key=data.property_bool("ctrlKey"),
            shift_key=data.property_bool("shiftKey"),
            alt_key=data.property_bool("altKey"),
            meta_key=data.property_bool("metaKey"),
        )


@dataclass
class Frame:
    """Position and size of a view, reported by resize and scroll events."""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @classmethod
    def from_data(cls, data: DataObject) -> "Frame":
        return cls(_float(data, "x"), _float(data, "y"), _float(data, "width"), _float(data, "height"))


@dataclass
class FileInfo:
    """A file chosen in a file picker."""
    name: str = ""
    last_modified: int = 0
    size: int = 0
    mime_type: str = ""

    @classmethod
    def from_data(cls, data: DataObject) -> "FileInfo":
        return cls(
            name=data.property_value("name") or "",
            last_modified=_int(data, "last-modified"),
            size=_int(data, "size"),
            mime_type=data.property_value("mime-type") or "",
        )
