# rui/properties.py
"""
The property engine.

Every widget stores its state in a :class:`Properties` map keyed by a
lowercase tag. ``set`` normalizes the tag, coerces the value with the rules
of the tables below and reports the tags whose stored value changed; the
widget then turns those tags into DOM updates.

Shorthand families (``padding`` and ``padding-top``, ``border`` and
``border-left-color``, ``radius`` and ``radius-top-left-x`` ...) are stored as
independent members and composed into per-side cells in write order, so a
sub-tag overrides only its own cells and removing it brings the coarser value
back.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .bounds import SIDES, Bounds, to_bounds, to_range
from .color import Color, to_color
from .decorations import (
    BORDER_SIDES, CORNERS, BorderProperty, BoxRadius, ViewBorder,
    border_style_index, to_border, to_box_radius, to_filter, to_shadows, to_view_border,
)
from .gradient import to_background
from .units import AUTO, to_angle, to_size

logger = logging.getLogger(__name__)

# Marker returned by a coercion that turns the write into a removal.
REMOVE = object()

INFINITY = math.inf


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def is_constant_name(value: Any) -> bool:
    """
    True for ``@name`` references to session constants.

    The name may not contain spaces or punctuation used by CSS values;
    ``@"any text"`` quotes a name with such characters.
    """
    if not isinstance(value, str) or len(value) < 2 or value[0] != "@":
        return False
    name = value[1:]
    if len(name) > 1 and name[0] == '"' and name[-1] == '"':
        return True
    return not any(ch in name for ch in ",;|\"'`+(){}[]<>/\\*&%! \t\n\r")


def constant_name(value: str) -> str:
    name = value[1:]
    if len(name) > 1 and name[0] == '"' and name[-1] == '"':
        return name[1:-1]
    return name


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

SIZE_PROPERTIES: Dict[str, Optional[str]] = {
    "width": "width",
    "height": "height",
    "min-width": "min-width",
    "min-height": "min-height",
    "max-width": "max-width",
    "max-height": "max-height",
    "left": "left",
    "right": "right",
    "top": "top",
    "bottom": "bottom",
    "text-size": "font-size",
    "text-indent": "text-indent",
    "letter-spacing": "letter-spacing",
    "word-spacing": "word-spacing",
    "line-height": "line-height",
    "text-line-thickness": "text-decoration-thickness",
    "outline-offset": "outline-offset",
    "grid-row-gap": "row-gap",
    "grid-column-gap": "column-gap",
    "list-row-gap": "row-gap",
    "list-column-gap": "column-gap",
    "column-width": "column-width",
    "column-gap": "column-gap",
    "perspective": "perspective",
    "tab-size": "tab-size",
    "translate-x": None,
    "translate-y": None,
    "translate-z": None,
    "origin-x": None,
    "origin-y": None,
    "origin-z": None,
    "cell-width": "grid-template-columns",
    "cell-height": "grid-template-rows",
}

ANGLE_PROPERTIES: Dict[str, Optional[str]] = {
    "rotate": "rotate",
    "skew-x": None,
    "skew-y": None,
}

COLOR_PROPERTIES: Dict[str, Optional[str]] = {
    "text-color": "color",
    "background-color": "background-color",
    "accent-color": "accent-color",
    "caret-color": "caret-color",
    "text-line-color": "text-decoration-color",
    "column-separator-color": "column-rule-color",
    "color-picker-value": None,
}


@dataclass(frozen=True)
class EnumInfo:
    """
    An enum property: its value names, the CSS property it maps to and the
    CSS text written for each index (an empty text writes nothing).
    """
    values: Tuple[str, ...]
    css_tag: Optional[str] = None
    css_values: Optional[Tuple[str, ...]] = None

    def css(self, index: int) -> str:
        values = self.css_values or self.values
        return values[index] if 0 <= index < len(values) else ""

    def index_of(self, value: Any) -> int:
        """
        Index of ``value``: an int index, an exact name, a numeric text or a
        case-insensitive name. Raises ValueError.
        """
        if isinstance(value, bool):
            raise ValueError(f"{value!r} is not an enum value")
        if isinstance(value, int):
            if 0 <= value < len(self.values):
                return value
            raise ValueError(f"index {value} is out of range")
        if not isinstance(value, str):
            raise ValueError(f"{type(value).__name__} is not an enum value")
        if value in self.values:
            return self.values.index(value)
        text = value.strip()
        if text.isdigit():
            return self.index_of(int(text))
        lowered = text.lower()
        if lowered in self.values:
            return self.values.index(lowered)
        raise ValueError(f"{value!r} is not one of {', '.join(self.values)}")


ENUM_PROPERTIES: Dict[str, EnumInfo] = {
    "visibility": EnumInfo(("visible", "invisible", "gone")),
    "overflow": EnumInfo(("hidden", "visible", "scroll", "auto"), "overflow"),
    "text-align": EnumInfo(("left", "right", "center", "justify"), "text-align"),
    "text-weight": EnumInfo(
        ("inherit", "thin", "extra-light", "light", "normal", "medium", "semi-bold", "bold", "extra-bold", "black"),
        "font-weight",
        ("", "100", "200", "300", "normal", "500", "600", "bold", "800", "900"),
    ),
    "white-space": EnumInfo(("normal", "nowrap", "pre", "pre-wrap", "pre-line", "break-spaces"), "white-space"),
    "word-break": EnumInfo(("normal", "break-all", "keep-all", "break-word"), "word-break"),
    "text-transform": EnumInfo(("none", "capitalize", "lowercase", "uppercase"), "text-transform"),
    "text-direction": EnumInfo(("system", "left-to-right", "right-to-left"), "direction", ("", "ltr", "rtl")),
    "writing-mode": EnumInfo(
        ("horizontal-top-to-bottom", "horizontal-bottom-to-top", "vertical-right-to-left", "vertical-left-to-right"),
        "writing-mode",
        ("horizontal-tb", "horizontal-bt", "vertical-rl", "vertical-lr"),
    ),
    "vertical-text-orientation": EnumInfo(("mixed", "upright"), "text-orientation"),
    "text-line-style": EnumInfo(("solid", "dashed", "dotted", "double", "wavy"), "text-decoration-style"),
    "animation-direction": EnumInfo(("normal", "reverse", "alternate", "alternate-reverse")),
    "selection-mode": EnumInfo(("none", "cell", "row")),
    "checkbox-horizontal-align": EnumInfo(("left", "right")),
    "edit-view-type": EnumInfo(("text", "password", "email", "emails", "url", "phone", "multiline")),
    "orientation": EnumInfo(
        ("up-down", "start-to-end", "bottom-up", "end-to-start"),
        "flex-direction",
        ("column", "row", "column-reverse", "row-reverse"),
    ),
    "list-wrap": EnumInfo(("off", "on", "reverse"), "flex-wrap", ("nowrap", "wrap", "wrap-reverse")),
    "number-picker-type": EnumInfo(("editor", "slider")),
    "fit": EnumInfo(("none", "contain", "cover", "fill", "scale-down"), "object-fit"),
    "cell-vertical-align": EnumInfo(("top", "bottom", "center", "stretch"), "align-items",
                                    ("start", "end", "center", "stretch")),
    "cell-horizontal-align": EnumInfo(("left", "right", "center", "stretch"), "justify-items",
                                      ("start", "end", "center", "stretch")),
    "table-vertical-align": EnumInfo(("top", "bottom", "center", "stretch", "baseline")),
    "resize": EnumInfo(("none", "both", "horizontal", "vertical"), "resize"),
    "cursor": EnumInfo(
        ("auto", "default", "none", "context-menu", "help", "pointer", "progress", "wait", "cell",
         "crosshair", "text", "vertical-text", "alias", "copy", "move", "no-drop", "not-allowed",
         "e-resize", "n-resize", "ne-resize", "nw-resize", "s-resize", "se-resize", "sw-resize",
         "w-resize", "ew-resize", "ns-resize", "nesw-resize", "nwse-resize", "col-resize",
         "row-resize", "all-scroll", "zoom-in", "zoom-out", "grab", "grabbing"),
        "cursor",
    ),
}

BOOL_PROPERTIES = frozenset({
    "disabled", "focusable", "italic", "small-caps", "strikethrough", "overline", "underline",
    "not-translate", "user-select", "inset", "expanded", "multiple", "edit-wrap", "readonly",
    "spellcheck", "animation-paused", "repeating", "hidden", "backface-visibility", "checked",
})

INT_PROPERTIES: Dict[str, Optional[str]] = {
    "z-index": "z-index",
    "order": "order",
    "column-count": "column-count",
    "max-length": None,
    "current": None,
    "iteration-count": None,
    "head-rows": None,
    "foot-rows": None,
}

FLOAT_PROPERTIES: Dict[str, Tuple[float, float]] = {
    "opacity": (0.0, 1.0),
    "duration": (0.0, INFINITY),
    "delay": (-INFINITY, INFINITY),
    "number-picker-min": (-INFINITY, INFINITY),
    "number-picker-max": (-INFINITY, INFINITY),
    "number-picker-step": (0.0, INFINITY),
    "number-picker-value": (-INFINITY, INFINITY),
    "progress-bar-max": (0.0, INFINITY),
    "progress-bar-value": (0.0, INFINITY),
    "scale-x": (-INFINITY, INFINITY),
    "scale-y": (-INFINITY, INFINITY),
    "scale-z": (-INFINITY, INFINITY),
}

STRING_PROPERTIES = frozenset({
    "id", "style", "style-disabled", "text", "hint", "tooltip", "font-name", "src", "alt",
    "title", "accept", "timing-function", "clip",
})

RANGE_PROPERTIES = frozenset({"row", "column"})

SHADOW_PROPERTIES: Dict[str, str] = {
    "shadow": "box-shadow",
    "text-shadow": "text-shadow",
}

BACKGROUND_PROPERTIES: Dict[str, str] = {
    "background": "background-image",
    "mask": "mask-image",
}

FILTER_PROPERTIES: Dict[str, str] = {
    "filter": "filter",
    "backdrop-filter": "backdrop-filter",
}

# Tags that read the parent's value when neither the view nor its style sets them.
INHERITED_PROPERTIES = frozenset({
    "text-color", "text-size", "text-weight", "text-align", "text-indent", "letter-spacing",
    "word-spacing", "line-height", "text-transform", "text-direction", "writing-mode",
    "vertical-text-orientation", "font-name", "not-translate", "user-select",
})

# CSS properties written for tags whose CSS name differs from the tag and that
# are not covered by the kind tables above.
CSS_NAMES: Dict[str, str] = {
    "clip": "clip-path",
    "column-separator": "column-rule",
    "font-name": "font-family",
}


# ---------------------------------------------------------------------------
# Shorthand families
# ---------------------------------------------------------------------------

Cell = Tuple[str, ...]


class ShorthandFamily:
    """
    A group of tags describing overlapping parts of one compound value.

    Each member tag covers a set of cells (e.g. ``padding-top`` covers the
    ``top`` cell of the ``padding`` family). Members are stored separately
    and the effective value of every cell is taken from the last written
    member covering it.
    """

    def __init__(self, name: str, cells: Sequence[Cell], defaults: Callable[[Cell], Any]):
        self.name = name
        self.cells = tuple(cells)
        self.default = defaults
        self.members: Dict[str, Tuple[Cell, ...]] = {}
        self._coercers: Dict[str, Callable[[Any], Any]] = {}
        self._expanders: Dict[str, Callable[[Any], Dict[Cell, Any]]] = {}
        self._composers: Dict[str, Callable[[Dict[Cell, Any]], Any]] = {}

    def add(self, tag: str, cells: Iterable[Cell], coerce: Callable[[Any], Any],
            expand: Callable[[Any], Dict[Cell, Any]], compose: Callable[[Dict[Cell, Any]], Any]) -> None:
        self.members[tag] = tuple(cells)
        self._coercers[tag] = coerce
        self._expanders[tag] = expand
        self._composers[tag] = compose

    def coerce(self, tag: str, value: Any) -> Any:
        return self._coercers[tag](value)

    def expand(self, tag: str, value: Any) -> Dict[Cell, Any]:
        return self._expanders[tag](value)

    def compose(self, tag: str, cells: Dict[Cell, Any]) -> Any:
        return self._composers[tag](cells)

    def covered(self, tag: str, by: str) -> bool:
        """True if every cell of ``tag`` is also a cell of ``by``."""
        return set(self.members[tag]) <= set(self.members[by])

    def effective_cells(self, members: Iterable[Tuple[str, Any]]) -> Dict[Cell, Any]:
        """Compose ``(tag, stored value)`` pairs, oldest first, into a value per cell."""
        cells = {cell: self.default(cell) for cell in self.cells}
        for tag, value in members:
            cells.update(self.expand(tag, value))
        return cells


def _uniform(values: List[Any]) -> Any:
    return values[0] if all(value == values[0] for value in values) else None


def _bounds_family(name: str) -> ShorthandFamily:
    family = ShorthandFamily(name, [(side,) for side in SIDES], lambda cell: AUTO)
    family.add(
        name, family.cells, to_bounds,
        lambda bounds: {(side,): bounds.side(side) for side in SIDES},
        lambda cells: Bounds(*(cells[(side,)] for side in SIDES)),
    )
    for side in SIDES:
        cell = (side,)
        family.add(
            f"{name}-{side}", [cell], _size_or_remove,
            lambda size, cell=cell: {cell: size},
            lambda cells, cell=cell: cells[cell],
        )
    return family


def _size_or_remove(value: Any) -> Any:
    size = to_size(value)
    return REMOVE if size.is_auto else size


_BORDER_DEFAULTS = {"style": 0, "width": AUTO, "color": Color(0)}
_BORDER_ATTRIBUTES = ("style", "width", "color")


def _border_attribute_coercer(attr: str) -> Callable[[Any], Any]:
    if attr == "style":
        return border_style_index
    if attr == "width":
        return to_size
    return to_color


def _border_family(name: str, sides: Sequence[str]) -> ShorthandFamily:
    """``border`` has four sides, ``outline`` one anonymous side ("")."""
    cells = [(side, attr) for side in sides for attr in _BORDER_ATTRIBUTES]
    family = ShorthandFamily(name, cells, lambda cell: _BORDER_DEFAULTS[cell[1]])

    def side_border(cells_: Dict[Cell, Any], side: str) -> ViewBorder:
        return ViewBorder(cells_[(side, "style")], cells_[(side, "width")], cells_[(side, "color")])

    def expand_side(border: ViewBorder, side: str) -> Dict[Cell, Any]:
        return {(side, "style"): border.style, (side, "width"): border.width, (side, "color"): border.color}

    if len(sides) > 1:
        family.add(
            name, cells, to_border,
            lambda border: {cell: v for side in sides for cell, v in expand_side(border.side(side), side).items()},
            lambda cells_: BorderProperty(*(side_border(cells_, side) for side in sides)),
        )
        for attr in _BORDER_ATTRIBUTES:
            family.add(
                f"{name}-{attr}", [(side, attr) for side in sides], _border_attribute_coercer(attr),
                lambda value, attr=attr: {(side, attr): value for side in sides},
                lambda cells_, attr=attr: _uniform([cells_[(side, attr)] for side in sides]),
            )
        for side in sides:
            family.add(
                f"{name}-{side}", [(side, attr) for attr in _BORDER_ATTRIBUTES], to_view_border,
                lambda border, side=side: expand_side(border, side),
                lambda cells_, side=side: side_border(cells_, side),
            )
            for attr in _BORDER_ATTRIBUTES:
                cell = (side, attr)
                family.add(
                    f"{name}-{side}-{attr}", [cell], _border_attribute_coercer(attr),
                    lambda value, cell=cell: {cell: value},
                    lambda cells_, cell=cell: cells_[cell],
                )
    else:
        side = sides[0]
        family.add(
            name, cells, to_view_border,
            lambda border: expand_side(border, side),
            lambda cells_: side_border(cells_, side),
        )
        for attr in _BORDER_ATTRIBUTES:
            cell = (side, attr)
            family.add(
                f"{name}-{attr}", [cell], _border_attribute_coercer(attr),
                lambda value, cell=cell: {cell: value},
                lambda cells_, cell=cell: cells_[cell],
            )
    return family


def _radius_family() -> ShorthandFamily:
    cells = [(corner, axis) for corner in CORNERS for axis in ("x", "y")]
    family = ShorthandFamily("radius", cells, lambda cell: AUTO)

    def compose_all(cells_: Dict[Cell, Any]) -> BoxRadius:
        return BoxRadius(**{f"{corner.replace('-', '_')}_{axis}": cells_[(corner, axis)]
                            for corner, axis in cells})

    family.add(
        "radius", cells, to_box_radius,
        lambda radius: {(corner, axis): radius.corner(corner, axis) for corner, axis in cells},
        compose_all,
    )
    for axis in ("x", "y"):
        family.add(
            f"radius-{axis}", [(corner, axis) for corner in CORNERS], to_size,
            lambda size, axis=axis: {(corner, axis): size for corner in CORNERS},
            lambda cells_, axis=axis: _uniform([cells_[(corner, axis)] for corner in CORNERS]),
        )
    for corner in CORNERS:
        family.add(
            f"radius-{corner}", [(corner, "x"), (corner, "y")], to_size,
            lambda size, corner=corner: {(corner, "x"): size, (corner, "y"): size},
            lambda cells_, corner=corner: _uniform([cells_[(corner, "x")], cells_[(corner, "y")]]),
        )
        for axis in ("x", "y"):
            cell = (corner, axis)
            family.add(
                f"radius-{corner}-{axis}", [cell], to_size,
                lambda size, cell=cell: {cell: size},
                lambda cells_, cell=cell: cells_[cell],
            )
    return family


FAMILIES: Dict[str, ShorthandFamily] = {
    family.name: family for family in (
        _bounds_family("margin"),
        _bounds_family("padding"),
        _bounds_family("cell-padding"),
        _border_family("border", BORDER_SIDES),
        _border_family("outline", ("",)),
        _radius_family(),
    )
}

# member tag -> family
FAMILY_OF: Dict[str, ShorthandFamily] = {
    tag: family for family in FAMILIES.values() for tag in family.members
}


def family_css(family: ShorthandFamily, cells: Dict[Cell, Any]) -> List[Tuple[str, str]]:
    """CSS properties of a family's effective cells. An empty value removes the CSS property."""
    name = family.name
    if name in ("margin", "padding"):
        bounds = Bounds(*(cells[(side,)] for side in SIDES))
        return [(name, "" if bounds.is_empty else bounds.css())]
    if name == "border":
        return family.compose("border", cells).css_properties("border")
    if name == "outline":
        border = family.compose("outline", cells)
        return BorderProperty.all(border).css_properties("outline")
    if name == "radius":
        return [("border-radius", family.compose("radius", cells).css())]
    return []


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def to_bool(value: Any) -> bool:
    """Convert a bool, 0/1 or one of true/yes/on/1/false/no/off/0. Raises ValueError."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{value} is not a bool")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "on", "1"):
            return True
        if text in ("false", "no", "off", "0"):
            return False
    raise ValueError(f"{value!r} is not a bool")


def to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an int")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"{value!r} is not an int")


def to_float(value: Any, limits: Tuple[float, float] = (-INFINITY, INFINITY)) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise ValueError(f"{value!r} is not a number")
    low, high = limits
    if math.isnan(number) or number < low or number > high:
        raise ValueError(f"{number:g} is out of range [{low:g}, {high:g}]")
    return number


def coerce_value(tag: str, value: Any) -> Any:
    """
    Convert ``value`` to the type of ``tag``.

    Returns the converted value, or :data:`REMOVE` when the value means
    "unset" (``auto`` sizes, the zero color).

    :raises ValueError: if the value does not fit the tag.
    :raises KeyError: if the tag is unknown.
    """
    family = FAMILY_OF.get(tag)
    if family is not None:
        return family.coerce(tag, value)

    if tag in SIZE_PROPERTIES:
        if isinstance(value, (list, tuple)):
            sizes = tuple(to_size(item) for item in value)
            return sizes if sizes else REMOVE
        size = to_size(value)
        return REMOVE if size.is_auto else size

    if tag in COLOR_PROPERTIES:
        color = to_color(value)
        return REMOVE if color == 0 else color

    if tag in ENUM_PROPERTIES:
        return ENUM_PROPERTIES[tag].index_of(value)

    if tag in BOOL_PROPERTIES:
        return to_bool(value)

    if tag in INT_PROPERTIES:
        return to_int(value)

    if tag in FLOAT_PROPERTIES:
        return to_float(value, FLOAT_PROPERTIES[tag])

    if tag in ANGLE_PROPERTIES:
        return to_angle(value)

    if tag in STRING_PROPERTIES:
        if not isinstance(value, str):
            raise ValueError(f"{type(value).__name__} is not a text")
        return value if value else REMOVE

    if tag in RANGE_PROPERTIES:
        return to_range(value)

    if tag in SHADOW_PROPERTIES:
        shadows = to_shadows(value)
        return shadows if shadows else REMOVE

    if tag in BACKGROUND_PROPERTIES:
        elements = to_background(value)
        return elements if elements else REMOVE

    if tag in FILTER_PROPERTIES:
        view_filter = to_filter(value)
        return REMOVE if view_filter.is_empty else view_filter

    if tag == "column-separator":
        border = to_view_border(value)
        return REMOVE if border.is_empty else border

    raise KeyError(tag)


def default_value(tag: str) -> Any:
    """The value read when nothing (view, style or parent) sets ``tag``."""
    if tag in SIZE_PROPERTIES:
        return AUTO
    if tag in BOOL_PROPERTIES:
        return False
    if tag in ENUM_PROPERTIES:
        return 0
    if tag in ("opacity", "progress-bar-max", "scale-x", "scale-y", "scale-z"):
        return 1.0
    family = FAMILY_OF.get(tag)
    if family is not None:
        return family.compose(tag, family.effective_cells(()))
    return None


def is_known_tag(tag: str) -> bool:
    return (
        tag in FAMILY_OF or tag in SIZE_PROPERTIES or tag in COLOR_PROPERTIES
        or tag in ENUM_PROPERTIES or tag in BOOL_PROPERTIES or tag in INT_PROPERTIES
        or tag in FLOAT_PROPERTIES or tag in ANGLE_PROPERTIES or tag in STRING_PROPERTIES
        or tag in RANGE_PROPERTIES or tag in SHADOW_PROPERTIES or tag in BACKGROUND_PROPERTIES
        or tag in FILTER_PROPERTIES
        or tag == "column-separator"
    )


def invalid_property_value(tag: str, value: Any, reason: Any = None) -> None:
    if reason:
        logger.error("Invalid value %r (%s) of %r property: %s", value, type(value).__name__, tag, reason)
    else:
        logger.error("Invalid value %r (%s) of %r property", value, type(value).__name__, tag)


# ---------------------------------------------------------------------------
# Property carrier
# ---------------------------------------------------------------------------

class Properties:
    """
    A tag-keyed value map.

    Subclasses override :meth:`normalize_tag` to add aliases,
    :meth:`set_value` to handle their own tags, and :meth:`property_changed`
    to react to changes.
    """

    def __init__(self):
        self._properties: Dict[str, Any] = {}

    def normalize_tag(self, tag: str) -> str:
        return normalize_tag(tag)

    def get(self, tag: str) -> Any:
        return self.get_raw(self.normalize_tag(tag))

    def get_raw(self, tag: str) -> Any:
        return self._properties.get(tag)

    def set_raw(self, tag: str, value: Any) -> None:
        if value is None:
            self._properties.pop(tag, None)
        else:
            self._properties[tag] = value

    def tags(self) -> List[str]:
        return sorted(self._properties)

    def clear(self) -> None:
        self._properties.clear()

    def set(self, tag: str, value: Any) -> bool:
        """
        Set a property.

        :param tag: Property tag; case and surrounding spaces are ignored.
        :param value: The new value; None removes the property.
        :return: False (and an error log) if the value does not fit the tag.
        """
        tag = self.normalize_tag(tag)
        changed = self.set_value(tag, value)
        if changed is None:
            return False
        for changed_tag in changed:
            self.property_changed(changed_tag)
        return True

    def remove(self, tag: str) -> None:
        self.set(tag, None)

    def set_params(self, params: Dict[str, Any]) -> bool:
        result = True
        for tag, value in params.items():
            if not self.set(tag, value):
                result = False
        return result

    def property_changed(self, tag: str) -> None:
        """Called for every tag whose stored value changed."""

    # --- storage ---

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        """
        Store ``value`` under ``tag``.

        :return: the changed tags (empty if nothing changed), None on failure.
        """
        if value is None:
            return self.remove_value(tag)
        if is_constant_name(value):
            return self.store(tag, value)

        try:
            coerced = coerce_value(tag, value)
        except KeyError:
            logger.error("%r property is not supported by %s", tag, type(self).__name__)
            return None
        except ValueError as e:
            invalid_property_value(tag, value, e)
            return None

        if coerced is REMOVE:
            return self.remove_value(tag)
        return self.store(tag, coerced)

    def store(self, tag: str, value: Any) -> List[str]:
        family = FAMILY_OF.get(tag)
        if family is not None:
            return self._store_member(family, tag, value)
        if tag in self._properties and self._properties[tag] == value \
                and type(self._properties[tag]) is type(value):
            return []
        self._properties[tag] = value
        return [tag]

    def remove_value(self, tag: str) -> List[str]:
        family = FAMILY_OF.get(tag)
        if family is not None and tag == family.name:
            removed = [member for member in family.members if member in self._properties]
            for member in removed:
                del self._properties[member]
            return [tag] if removed else []
        if tag in self._properties:
            del self._properties[tag]
            return [tag]
        return []

    def _store_member(self, family: ShorthandFamily, tag: str, value: Any) -> List[str]:
        members = [member for member in self._properties if FAMILY_OF.get(member) is family]
        covered = [member for member in members if member != tag and family.covered(member, tag)]
        if not covered and members and members[-1] == tag and self._properties[tag] == value:
            return []
        for member in covered:
            del self._properties[member]
        # re-insert so the member becomes the newest write of its family
        self._properties.pop(tag, None)
        self._properties[tag] = value
        return [tag]

    def family_members(self, family: ShorthandFamily) -> List[Tuple[str, Any]]:
        """Stored members of ``family`` in write order."""
        return [(tag, value) for tag, value in self._properties.items() if FAMILY_OF.get(tag) is family]
