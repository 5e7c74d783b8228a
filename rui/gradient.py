# rui/gradient.py
"""
Background and mask elements: linear, radial and conic gradients and images.

A gradient is a list of :class:`GradientPoint` stops plus the geometry of its
kind. Linear and radial stops are positioned with sizes, conic stops with
angles.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .bounds import params_of
from .color import Color, to_color
from .data import DataObject
from .units import AUTO, AngleUnit, SizeUnit, to_angle, to_size

LINEAR_DIRECTIONS = (
    "to top", "to right top", "to right", "to right bottom",
    "to bottom", "to left bottom", "to left", "to left top",
)
RADIAL_SHAPES = ("ellipse", "circle")
RADIAL_EXTENTS = ("closest-side", "closest-corner", "farthest-side", "farthest-corner")

Position = Union[SizeUnit, AngleUnit, None]


@dataclass(frozen=True)
class GradientPoint:
    """A color stop. ``position`` is None for an evenly spaced stop."""
    color: Color
    position: Position = None

    def css(self) -> str:
        if self.position is None:
            return self.color.css()
        return f"{self.color.css()} {self.position.css()}"


def _parse_points(value: Any, angles: bool) -> Tuple[GradientPoint, ...]:
    """
    Convert stops given as text (``"red 0%, blue 100%"``), as a sequence of
    GradientPoint / ``(color, position)`` pairs, or as an array of data
    objects ``_{color=red, position=10%}``.
    """
    to_position = to_angle if angles else to_size
    if isinstance(value, str):
        items: List[Any] = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValueError(f"{type(value).__name__} is not a list of gradient points")

    points = []
    for item in items:
        if isinstance(item, GradientPoint):
            points.append(item)
        elif isinstance(item, str):
            parts = item.split()
            if len(parts) == 1:
                points.append(GradientPoint(to_color(parts[0])))
            elif len(parts) == 2:
                points.append(GradientPoint(to_color(parts[0]), to_position(parts[1])))
            else:
                raise ValueError(f"invalid gradient point {item!r}")
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            points.append(GradientPoint(to_color(item[0]), to_position(item[1])))
        else:
            params = params_of(item)
            if params is None or "color" not in params:
                raise ValueError(f"invalid gradient point {item!r}")
            position = params.get("position")
            points.append(GradientPoint(to_color(params["color"]),
                                        to_position(position) if position is not None else None))
    if len(points) < 2:
        raise ValueError("a gradient needs at least two points")
    return tuple(points)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class LinearGradient:
    """
    :param points: Color stops.
    :param direction: An angle, or one of :data:`LINEAR_DIRECTIONS`.
    :param repeating: Repeat the gradient to fill the element.
    """
    points: Tuple[GradientPoint, ...]
    direction: Union[AngleUnit, str] = "to bottom"
    repeating: bool = False

    def css(self) -> str:
        name = "repeating-linear-gradient" if self.repeating else "linear-gradient"
        direction = self.direction.css() if isinstance(self.direction, AngleUnit) \
            else self.direction
        stops = ", ".join(point.css() for point in self.points)
        return f"{name}({direction}, {stops})"


@dataclass(frozen=True)
class RadialGradient:
    """
    :param points: Color stops.
    :param shape: ``ellipse`` or ``circle``.
    :param radius: One of :data:`RADIAL_EXTENTS` or a size.
    :param center_x: Horizontal center; auto means 50%.
    :param center_y: Vertical center; auto means 50%.
    :param repeating: Repeat the gradient to fill the element.
    """
    points: Tuple[GradientPoint, ...]
    shape: str = "ellipse"
    radius: Union[str, SizeUnit] = "farthest-corner"
    center_x: SizeUnit = AUTO
    center_y: SizeUnit = AUTO
    repeating: bool = False

    def css(self) -> str:
        name = "repeating-radial-gradient" if self.repeating else "radial-gradient"
        radius = self.radius.css() if isinstance(self.radius, SizeUnit) else self.radius
        lead = f"{self.shape} {radius}"
        if not (self.center_x.is_auto and self.center_y.is_auto):
            lead += f" at {self.center_x.css('50%')} {self.center_y.css('50%')}"
        stops = ", ".join(point.css() for point in self.points)
        return f"{name}({lead}, {stops})"


@dataclass(frozen=True)
class ConicGradient:
    """
    :param points: Color stops positioned with angles.
    :param from_angle: Start angle.
    :param center_x: Horizontal center; auto means 50%.
    :param center_y: Vertical center; auto means 50%.
    :param repeating: Repeat the gradient to fill the element.
    """
    points: Tuple[GradientPoint, ...]
    from_angle: Optional[AngleUnit] = None
    center_x: SizeUnit = AUTO
    center_y: SizeUnit = AUTO
    repeating: bool = False

    def css(self) -> str:
        name = "repeating-conic-gradient" if self.repeating else "conic-gradient"
        lead = []
        if self.from_angle is not None:
            lead.append(f"from {self.from_angle.css()}")
        if not (self.center_x.is_auto and self.center_y.is_auto):
            lead.append(f"at {self.center_x.css('50%')} {self.center_y.css('50%')}")
        stops = ", ".join(point.css() for point in self.points)
        if lead:
            return f"{name}({' '.join(lead)}, {stops})"
        return f"{name}({stops})"


@dataclass(frozen=True)
class BackgroundImage:
    """An image layer; ``size`` and ``repeat`` are written as separate CSS properties by the caller."""
    src: str
    fit: str = ""
    repeat: str = ""

    def css(self) -> str:
        escaped = self.src.replace("'", "\\'")
        return f"url('{escaped}')"


BackgroundElement = Union[LinearGradient, RadialGradient, ConicGradient, BackgroundImage]
_ELEMENT_TYPES = (LinearGradient, RadialGradient, ConicGradient, BackgroundImage)


def _linear_from(params: Dict[str, Any]) -> LinearGradient:
    direction: Union[AngleUnit, str] = "to bottom"
    if "direction" in params:
        raw = params["direction"]
        try:
            direction = to_angle(raw)
        except ValueError:
            text = " ".join(str(raw).strip().lower().replace("-", " ").split())
            if not text.startswith("to "):
                text = "to " + text
            if text not in LINEAR_DIRECTIONS:
                raise ValueError(f"invalid linear gradient direction {raw!r}") from None
            direction = text
    return LinearGradient(_parse_points(params["gradient"], False), direction,
                          _to_bool(params.get("repeating", False)))


def _radial_from(params: Dict[str, Any]) -> RadialGradient:
    shape = str(params.get("shape", "ellipse")).strip().lower()
    if shape not in RADIAL_SHAPES:
        raise ValueError(f"invalid radial gradient shape {shape!r}")
    radius: Union[str, SizeUnit] = "farthest-corner"
    if "radius" in params:
        raw = params["radius"]
        if isinstance(raw, str) and raw.strip().lower() in RADIAL_EXTENTS:
            radius = raw.strip().lower()
        else:
            radius = to_size(raw)
    return RadialGradient(
        _parse_points(params["gradient"], False), shape, radius,
        to_size(params.get("center-x", AUTO)), to_size(params.get("center-y", AUTO)),
        _to_bool(params.get("repeating", False)),
    )


def _conic_from(params: Dict[str, Any]) -> ConicGradient:
    from_angle = to_angle(params["from"]) if "from" in params else None
    return ConicGradient(
        _parse_points(params["gradient"], True), from_angle,
        to_size(params.get("center-x", AUTO)), to_size(params.get("center-y", AUTO)),
        _to_bool(params.get("repeating", False)),
    )


_FACTORIES = {
    "linear-gradient": _linear_from,
    "radial-gradient": _radial_from,
    "conic-gradient": _conic_from,
    "image": lambda params: BackgroundImage(str(params["src"]), str(params.get("fit", "")),
                                             str(params.get("repeat", ""))),
}


def to_background_element(value: Any) -> BackgroundElement:
    """
    Convert a background element, a data object tagged ``linear-gradient``,
    ``radial-gradient``, ``conic-gradient`` or ``image``, or a dict holding
    the same tag under ``"type"``.

    :raises ValueError: if the value cannot be converted.
    """
    if isinstance(value, _ELEMENT_TYPES):
        return value
    if isinstance(value, DataObject):
        kind, params = value.tag, value.to_params()
    elif isinstance(value, dict):
        params = dict(value)
        kind = params.pop("type", "")
    else:
        raise ValueError(f"{type(value).__name__} is not a background element")

    factory = _FACTORIES.get(str(kind).lower())
    if factory is None:
        raise ValueError(f"unknown background element {kind!r}")
    try:
        return factory(params)
    except KeyError as e:
        raise ValueError(f"{kind} requires {e.args[0]!r}") from None


def to_background(value: Any) -> Tuple[BackgroundElement, ...]:
    """Convert one element or a sequence of elements to a tuple."""
    if isinstance(value, (list, tuple)):
        return tuple(to_background_element(item) for item in value)
    return (to_background_element(value),)


def background_css(elements: Sequence[BackgroundElement]) -> str:
    return ", ".join(element.css() for element in elements)
