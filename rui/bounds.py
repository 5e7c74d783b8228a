# rui/bounds.py
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .data import DataObject
from .units import AUTO, SizeUnit, to_size

SIDES = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class Bounds:
    """
    Four sizes, one per side, used by margin, padding and cell padding.

    :param top: Size of the top side.
    :param right: Size of the right side.
    :param bottom: Size of the bottom side.
    :param left: Size of the left side.
    """
    top: SizeUnit = AUTO
    right: SizeUnit = AUTO
    bottom: SizeUnit = AUTO
    left: SizeUnit = AUTO

    @classmethod
    def all(cls, size: Any) -> "Bounds":
        size = to_size(size)
        return cls(size, size, size, size)

    @property
    def all_the_same(self) -> bool:
        return self.top == self.right == self.bottom == self.left

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, side).is_auto for side in SIDES)

    def side(self, name: str) -> SizeUnit:
        return getattr(self, name)

    def with_side(self, name: str, size: SizeUnit) -> "Bounds":
        values = {side: getattr(self, side) for side in SIDES}
        values[name] = size
        return Bounds(**values)

    def __str__(self) -> str:
        if self.all_the_same:
            return str(self.top)
        return ",".join(str(getattr(self, side)) for side in SIDES)

    def css(self, text_for_auto: str = "0") -> str:
        if self.all_the_same:
            return self.top.css(text_for_auto)
        return " ".join(getattr(self, side).css(text_for_auto) for side in SIDES)

    @classmethod
    def parse(cls, text: str) -> "Bounds":
        """
        Parse ``"top,right,bottom,left"`` or one size used for all four sides.

        :raises ValueError: on malformed text.
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) == 1:
            return cls.all(parts[0])
        if len(parts) == 4:
            return cls(*(SizeUnit.parse(part) for part in parts))
        raise ValueError(f"invalid bounds {text!r}")


def to_bounds(value: Any) -> Bounds:
    """
    Convert a Bounds, a size, a text, a dict or a data object to Bounds.

    Dicts and data objects may hold ``top``, ``right``, ``bottom``, ``left``
    keys; missing sides are ``auto``.

    :raises ValueError: if the value cannot be converted.
    """
    if isinstance(value, Bounds):
        return value
    if isinstance(value, str):
        return Bounds.parse(value)
    if isinstance(value, DataObject):
        value = value.to_params()
    if isinstance(value, dict):
        unknown = set(value) - set(SIDES)
        if unknown:
            raise ValueError(f"invalid bounds keys {sorted(unknown)}")
        return Bounds(**{side: to_size(value[side]) for side in SIDES if side in value})
    if isinstance(value, (tuple, list)) and len(value) == 4:
        return Bounds(*(to_size(item) for item in value))
    return Bounds.all(value)


@dataclass(frozen=True)
class Range:
    """An integer interval, e.g. the grid rows a view spans."""
    first: int = 0
    last: int = 0

    def __str__(self) -> str:
        if self.first == self.last:
            return str(self.first)
        return f"{self.first}:{self.last}"

    @classmethod
    def parse(cls, text: str) -> "Range":
        """Parse ``"a:b"`` or ``"n"``. Raises ValueError on malformed text."""
        text = text.strip()
        if ":" in text:
            first, last = text.split(":", 1)
            return cls(int(first.strip()), int(last.strip()))
        number = int(text)
        return cls(number, number)


def to_range(value: Any) -> Range:
    """Convert a Range, an int, a ``(first, last)`` pair or a text to a Range."""
    if isinstance(value, Range):
        return value
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a range")
    if isinstance(value, int):
        return Range(value, value)
    if isinstance(value, str):
        return Range.parse(value)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Range(int(value[0]), int(value[1]))
    raise ValueError(f"{type(value).__name__} is not a range")


def params_of(value: Any) -> Optional[Dict[str, Any]]:
    """Return a dict for dict-like inputs (dicts and data objects), None otherwise."""
    if isinstance(value, DataObject):
        return value.to_params()
    if isinstance(value, dict):
        return value
    return None
