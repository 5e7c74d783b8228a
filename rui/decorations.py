# rui/decorations.py
"""
Borders, outlines, corner radii, shadows and filters.

Each structured value can be built directly, from a dict, or from a data
object (``_{style=solid, width=1px, color=red}``), and knows how to write
itself as CSS.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .bounds import params_of
from .color import Color, to_color
from .data import DataObject
from .units import AUTO, AngleUnit, SizeUnit, format_number, to_angle, to_size

BORDER_STYLES = ("none", "solid", "dashed", "dotted", "double")
BORDER_SIDES = ("top", "right", "bottom", "left")
CORNERS = ("top-left", "top-right", "bottom-right", "bottom-left")


def border_style_index(value: Any) -> int:
    """Convert a border style name or index to its index. Raises ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a border style")
    if isinstance(value, int):
        if 0 <= value < len(BORDER_STYLES):
            return value
        raise ValueError(f"border style {value} is out of range")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in BORDER_STYLES:
            return BORDER_STYLES.index(text)
        if text.isdigit():
            return border_style_index(int(text))
    raise ValueError(f"{value!r} is not a border style")


@dataclass(frozen=True)
class ViewBorder:
    """One border line: style index, width and color."""
    style: int = 0
    width: SizeUnit = AUTO
    color: Color = Color(0)

    @property
    def is_empty(self) -> bool:
        return self.style == 0 and self.width.is_auto and self.color == 0

    def css(self) -> str:
        parts = [BORDER_STYLES[self.style]]
        if not self.width.is_auto:
            parts.append(self.width.css())
        if self.color != 0:
            parts.append(self.color.css())
        return " ".join(parts)


def to_view_border(value: Any) -> ViewBorder:
    """
    Convert a ViewBorder, a dict/data object (``style``, ``width``, ``color``)
    or a text ``"style width color"`` to a ViewBorder.

    :raises ValueError: if the value cannot be converted.
    """
    if isinstance(value, ViewBorder):
        return value
    params = params_of(value)
    if params is not None:
        unknown = set(params) - {"style", "width", "color"}
        if unknown:
            raise ValueError(f"invalid border keys {sorted(unknown)}")
        return ViewBorder(
            border_style_index(params.get("style", 0)),
            to_size(params["width"]) if "width" in params else AUTO,
            to_color(params["color"]) if "color" in params else Color(0),
        )
    if isinstance(value, str):
        parts = value.split()
        if not 1 <= len(parts) <= 3:
            raise ValueError(f"invalid border {value!r}")
        style = border_style_index(parts[0])
        width = to_size(parts[1]) if len(parts) > 1 else AUTO
        color = to_color(parts[2]) if len(parts) > 2 else Color(0)
        return ViewBorder(style, width, color)
    raise ValueError(f"{type(value).__name__} is not a border")


@dataclass(frozen=True)
class BorderProperty:
    """The four border lines of a view."""
    top: ViewBorder = ViewBorder()
    right: ViewBorder = ViewBorder()
    bottom: ViewBorder = ViewBorder()
    left: ViewBorder = ViewBorder()

    @classmethod
    def all(cls, border: ViewBorder) -> "BorderProperty":
        return cls(border, border, border, border)

    def side(self, name: str) -> ViewBorder:
        return getattr(self, name)

    @property
    def all_the_same(self) -> bool:
        return self.top == self.right == self.bottom == self.left

    @property
    def is_empty(self) -> bool:
        return all(self.side(side).is_empty for side in BORDER_SIDES)

    def css_properties(self, prefix: str = "border") -> List[Tuple[str, str]]:
        """Return the ``<prefix>-style``, ``-width`` and ``-color`` CSS pairs."""
        if self.is_empty:
            return [(f"{prefix}-style", ""), (f"{prefix}-width", ""), (f"{prefix}-color", "")]
        sides = [self.side(side) for side in BORDER_SIDES]

        def joined(values: List[str], empty: str) -> str:
            if all(value == values[0] for value in values):
                return "" if values[0] == empty else values[0]
            return " ".join(values)

        styles = [BORDER_STYLES[border.style] for border in sides]
        widths = [border.width.css("0") for border in sides]
        colors = [border.color.css() if border.color != 0 else "currentcolor" for border in sides]
        return [
            (f"{prefix}-style", joined(styles, "")),
            (f"{prefix}-width", joined(widths, "0")),
            (f"{prefix}-color", joined(colors, "currentcolor")),
        ]


def to_border(value: Any) -> BorderProperty:
    """
    Convert to a BorderProperty.

    Accepts a BorderProperty, a ViewBorder (all sides), a text (all sides),
    or a dict/data object with ``style``/``width``/``color`` for all sides
    and ``left``/``right``/``top``/``bottom`` (objects) or
    ``<side>-style``/``<side>-width``/``<side>-color`` overrides.

    :raises ValueError: if the value cannot be converted.
    """
    if isinstance(value, BorderProperty):
        return value
    if isinstance(value, (ViewBorder, str)):
        return BorderProperty.all(to_view_border(value))

    params = params_of(value)
    if params is None:
        raise ValueError(f"{type(value).__name__} is not a border")

    common = {key: params[key] for key in ("style", "width", "color") if key in params}
    base = to_view_border(common) if common else ViewBorder()
    sides: Dict[str, ViewBorder] = {side: base for side in BORDER_SIDES}
    for key, item in params.items():
        if key in common:
            continue
        if key in BORDER_SIDES:
            sides[key] = to_view_border(item)
            continue
        side, _, attr = key.partition("-")
        if side not in BORDER_SIDES or attr not in ("style", "width", "color"):
            raise ValueError(f"invalid border key {key!r}")
        sides[side] = with_border_attribute(sides[side], attr, item)
    return BorderProperty(**sides)


def with_border_attribute(border: ViewBorder, attr: str, value: Any) -> ViewBorder:
    """Return ``border`` with one of ``style``/``width``/``color`` replaced."""
    if attr == "style":
        return ViewBorder(border_style_index(value), border.width, border.color)
    if attr == "width":
        return ViewBorder(border.style, to_size(value), border.color)
    if attr == "color":
        return ViewBorder(border.style, border.width, to_color(value))
    raise ValueError(f"invalid border attribute {attr!r}")


@dataclass(frozen=True)
class BoxRadius:
    """Horizontal and vertical radius of every corner."""
    top_left_x: SizeUnit = AUTO
    top_left_y: SizeUnit = AUTO
    top_right_x: SizeUnit = AUTO
    top_right_y: SizeUnit = AUTO
    bottom_right_x: SizeUnit = AUTO
    bottom_right_y: SizeUnit = AUTO
    bottom_left_x: SizeUnit = AUTO
    bottom_left_y: SizeUnit = AUTO

    @classmethod
    def all(cls, size: Any) -> "BoxRadius":
        size = to_size(size)
        return cls(*([size] * 8))

    def corner(self, corner: str, axis: str) -> SizeUnit:
        return getattr(self, f"{corner.replace('-', '_')}_{axis}")

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name).is_auto for f in fields(self))

    def css(self) -> str:
        if self.is_empty:
            return ""
        xs = [self.corner(corner, "x").css("0") for corner in CORNERS]
        ys = [self.corner(corner, "y").css("0") for corner in CORNERS]
        if xs == ys:
            if all(x == xs[0] for x in xs):
                return xs[0]
            return " ".join(xs)
        return f"{' '.join(xs)} / {' '.join(ys)}"

    def __str__(self) -> str:
        return self.css()


def to_box_radius(value: Any) -> BoxRadius:
    """
    Convert to BoxRadius: a BoxRadius, a size (every corner), a text
    ``"x"`` or ``"x/y"``, or a dict/data object with ``x``, ``y``,
    ``<corner>``, ``<corner>-x`` and ``<corner>-y`` keys.

    :raises ValueError: if the value cannot be converted.
    """
    if isinstance(value, BoxRadius):
        return value
    if isinstance(value, str) and "/" in value:
        x_text, y_text = value.split("/", 1)
        x, y = to_size(x_text), to_size(y_text)
        return BoxRadius(*([x, y] * 4))

    params = params_of(value)
    if params is None:
        return BoxRadius.all(value)

    cells: Dict[str, SizeUnit] = {}
    for key in ("x", "y"):
        if key in params:
            for corner in CORNERS:
                cells[f"{corner}-{key}"] = to_size(params[key])
    for corner in CORNERS:
        if corner in params:
            size = to_size(params[corner])
            cells[f"{corner}-x"] = cells[f"{corner}-y"] = size
    for key, item in params.items():
        if key in ("x", "y") or key in CORNERS:
            continue
        corner, _, axis = key.rpartition("-")
        if corner not in CORNERS or axis not in ("x", "y"):
            raise ValueError(f"invalid radius key {key!r}")
        cells[key] = to_size(item)
    return BoxRadius(**{name.replace("-", "_"): size for name, size in cells.items()})


@dataclass(frozen=True)
class ShadowProperty:
    """
    A box or text shadow.

    :param offset_x: Horizontal offset.
    :param offset_y: Vertical offset.
    :param blur: Blur radius.
    :param spread: Spread radius (ignored for text shadows).
    :param color: Shadow color.
    :param inset: Draw inside the border.
    """
    offset_x: SizeUnit = AUTO
    offset_y: SizeUnit = AUTO
    blur: SizeUnit = AUTO
    spread: SizeUnit = AUTO
    color: Color = Color(0)
    inset: bool = False

    def visible(self, text: bool = False) -> bool:
        sizes = [self.offset_x, self.offset_y, self.blur]
        if not text:
            sizes.append(self.spread)
        if self.color.alpha == 0:
            return False
        return any(not size.is_auto and size.value != 0 or size.function for size in sizes)

    def css(self, text: bool = False) -> str:
        parts = []
        if self.inset and not text:
            parts.append("inset")
        parts += [self.offset_x.css("0"), self.offset_y.css("0"), self.blur.css("0")]
        if not text:
            parts.append(self.spread.css("0"))
        parts.append(self.color.css())
        return " ".join(parts)


_SHADOW_KEYS = {
    "x-offset": "offset_x", "offset-x": "offset_x",
    "y-offset": "offset_y", "offset-y": "offset_y",
    "blur": "blur", "blur-radius": "blur",
    "spread": "spread", "spread-radius": "spread",
    "color": "color", "inset": "inset",
}


def to_shadow(value: Any) -> ShadowProperty:
    """Convert a ShadowProperty or a dict/data object to a ShadowProperty. Raises ValueError."""
    if isinstance(value, ShadowProperty):
        return value
    params = params_of(value)
    if params is None:
        raise ValueError(f"{type(value).__name__} is not a shadow")

    kwargs: Dict[str, Any] = {}
    for key, item in params.items():
        name = _SHADOW_KEYS.get(key)
        if name is None:
            raise ValueError(f"invalid shadow key {key!r}")
        if name == "color":
            kwargs[name] = to_color(item)
        elif name == "inset":
            kwargs[name] = item if isinstance(item, bool) else str(item).lower() in ("1", "true", "yes", "on")
        else:
            kwargs[name] = to_size(item)
    return ShadowProperty(**kwargs)


def to_shadows(value: Any) -> Tuple[ShadowProperty, ...]:
    """Convert one shadow or a sequence of shadows to a tuple. Raises ValueError."""
    if isinstance(value, (list, tuple)):
        return tuple(to_shadow(item) for item in value)
    if isinstance(value, DataObject):
        return parse_shadow_objects(value)
    return (to_shadow(value),)


def shadows_css(shadows: Sequence[ShadowProperty], text: bool = False) -> str:
    """CSS of a shadow list; invisible shadows are skipped, ``none`` if nothing is left."""
    visible = [shadow.css(text) for shadow in shadows if shadow.visible(text)]
    return ", ".join(visible) if visible else "none"


def parse_shadow_objects(obj: DataObject) -> Tuple[ShadowProperty, ...]:
    """Return shadows from a data object holding either one shadow or an array ``shadows=[...]``."""
    node = obj.property_by_tag("shadows")
    if node is not None and node.array is not None:
        return tuple(to_shadow(item) for item in node.array if isinstance(item, DataObject))
    return (to_shadow(obj),)


# filter function -> (upper limit, unit written after the number)
_FILTER_NUMBERS = {
    "blur": (10000.0, "px"),
    "brightness": (10000.0, "%"),
    "contrast": (10000.0, "%"),
    "saturate": (10000.0, "%"),
    "grayscale": (100.0, "%"),
    "invert": (100.0, "%"),
    "opacity": (100.0, "%"),
    "sepia": (100.0, "%"),
}


@dataclass(frozen=True)
class FilterProperty:
    """
    Graphical effects of the ``filter`` and ``backdrop-filter`` properties.

    ``blur`` is in pixels, ``hue_rotate`` is an angle and the other numbers
    are percents; None leaves a function out.
    """
    blur: Optional[float] = None
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    saturate: Optional[float] = None
    grayscale: Optional[float] = None
    invert: Optional[float] = None
    opacity: Optional[float] = None
    sepia: Optional[float] = None
    hue_rotate: Optional[AngleUnit] = None
    drop_shadow: Tuple[ShadowProperty, ...] = ()

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) in (None, ()) for f in fields(self))

    def css(self) -> str:
        parts = []
        for name, (_, unit) in _FILTER_NUMBERS.items():
            value = getattr(self, name)
            if value is not None:
                parts.append(f"{name}({format_number(value)}{unit})")
        if self.hue_rotate is not None:
            parts.append(f"hue-rotate({self.hue_rotate.css()})")
        for shadow in self.drop_shadow:
            if shadow.visible(text=True):
                parts.append(f"drop-shadow({shadow.css(text=True)})")
        return " ".join(parts)


def _filter_number(name: str, value: Any) -> float:
    limit, unit = _FILTER_NUMBERS[name]
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a number")
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(unit):
            text = text[:-len(unit)]
        value = float(text)
    if not isinstance(value, (int, float)):
        raise ValueError(f"{type(value).__name__} is not a number")
    if not 0 <= value <= limit:
        raise ValueError(f"{name} {value:g} is out of range [0, {limit:g}]")
    return float(value)


def to_filter(value: Any) -> FilterProperty:
    """Convert a FilterProperty or a dict/data object such as ``_{blur=2, sepia=40}``. Raises ValueError."""
    if isinstance(value, FilterProperty):
        return value
    params = params_of(value)
    if params is None:
        raise ValueError(f"{type(value).__name__} is not a filter")

    kwargs: Dict[str, Any] = {}
    for key, item in params.items():
        key = key.strip().lower()
        if key in _FILTER_NUMBERS:
            kwargs[key] = _filter_number(key, item)
        elif key == "hue-rotate":
            kwargs["hue_rotate"] = to_angle(item)
        elif key == "drop-shadow":
            kwargs["drop_shadow"] = to_shadows(item)
        else:
            raise ValueError(f"invalid filter key {key!r}")
    return FilterProperty(**kwargs)
