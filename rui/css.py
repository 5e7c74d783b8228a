# rui/css.py
"""
CSS text of property values.

``value_css`` turns one stored (already coerced) value into the CSS
declarations it produces. Rendering a view, the per-tag update path and
keyframe blocks all use it, so a value is written the same way wherever it
appears. An empty declaration value removes the CSS property.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .bounds import Range
from .color import Color
from .decorations import FilterProperty, ViewBorder, shadows_css
from .gradient import BackgroundImage, background_css
from .properties import (
    ANGLE_PROPERTIES, BACKGROUND_PROPERTIES, COLOR_PROPERTIES, CSS_NAMES, ENUM_PROPERTIES, FAMILY_OF,
    FILTER_PROPERTIES, FLOAT_PROPERTIES, INT_PROPERTIES, SHADOW_PROPERTIES, SIZE_PROPERTIES, Properties, family_css,
)
from .units import AngleUnit, SizeUnit, format_number

Declaration = Tuple[str, str]

# bool tags written as a single CSS property: tag -> (css name, text for True, text for False)
BOOL_CSS: Dict[str, Tuple[str, str, str]] = {
    "italic": ("font-style", "italic", "normal"),
    "small-caps": ("font-variant", "small-caps", "normal"),
    "animation-paused": ("animation-play-state", "paused", "running"),
    "backface-visibility": ("backface-visibility", "visible", "hidden"),
}

TEXT_DECORATION_TAGS = ("strikethrough", "overline", "underline")
_TEXT_DECORATION_CSS = {"strikethrough": "line-through", "overline": "overline", "underline": "underline"}

_RANGE_CSS = {"row": "grid-row", "column": "grid-column"}

TRANSFORM_TAGS = ("skew-x", "skew-y", "translate-x", "translate-y", "translate-z", "scale-x", "scale-y", "scale-z")
ORIGIN_TAGS = ("origin-x", "origin-y", "origin-z")


def text_decoration_css(flags: Dict[str, Optional[bool]]) -> str:
    """
    ``text-decoration`` of the strikethrough/overline/underline flags.

    Unset flags (None) write nothing; if every set flag is False the
    decoration is ``none``.
    """
    if all(flags.get(tag) is None for tag in TEXT_DECORATION_TAGS):
        return ""
    lines = [_TEXT_DECORATION_CSS[tag] for tag in TEXT_DECORATION_TAGS if flags.get(tag)]
    return " ".join(lines) if lines else "none"


def _length(value: Any, text_for_unset: str) -> str:
    return value.css(text_for_unset) if isinstance(value, SizeUnit) else text_for_unset


def _scale(value: Any) -> str:
    return format_number(value) if isinstance(value, (int, float)) else "1"


def transform_css(values: Dict[str, Any]) -> str:
    """
    ``transform`` of the skew, translate and scale tags.

    A set ``translate-z`` or ``scale-z`` switches that step to its 3D function.
    """
    parts = []
    skew_x, skew_y = values.get("skew-x"), values.get("skew-y")
    if skew_x is not None or skew_y is not None:
        angles = [angle.css() if isinstance(angle, AngleUnit) else "0" for angle in (skew_x, skew_y)]
        parts.append(f"skew({angles[0]}, {angles[1]})")

    x, y, z = (values.get(f"translate-{axis}") for axis in "xyz")
    if z is not None:
        parts.append(f"translate3d({_length(x, '0')}, {_length(y, '0')}, {_length(z, '0')})")
    elif x is not None or y is not None:
        parts.append(f"translate({_length(x, '0')}, {_length(y, '0')})")

    x, y, z = (values.get(f"scale-{axis}") for axis in "xyz")
    if z is not None:
        parts.append(f"scale3d({_scale(x)}, {_scale(y)}, {_scale(z)})")
    elif x is not None or y is not None:
        parts.append(f"scale({_scale(x)}, {_scale(y)})")
    return " ".join(parts)


def origin_css(values: Dict[str, Any]) -> str:
    """``transform-origin`` of the origin tags; unset axes are the center and z = 0."""
    x, y, z = (values.get(tag) for tag in ORIGIN_TAGS)
    if x is None and y is None and z is None:
        return ""
    text = f"{_length(x, '50%')} {_length(y, '50%')}"
    return text if z is None else f"{text} {_length(z, '0')}"


# CSS properties composed from several tags: css name -> (tags, composer of the tag values)
COMPOSITE_CSS: Dict[str, Tuple[Tuple[str, ...], Callable[[Dict[str, Any]], str]]] = {
    "text-decoration": (TEXT_DECORATION_TAGS, text_decoration_css),
    "transform": (TRANSFORM_TAGS, transform_css),
    "transform-origin": (ORIGIN_TAGS, origin_css),
}

COMPOSITE_OF: Dict[str, str] = {tag: name for name, (tags, _) in COMPOSITE_CSS.items() for tag in tags}


def composite_css(name: str, lookup: Callable[[str], Any]) -> Declaration:
    """The declaration of the composite ``name`` with every member tag read through ``lookup``."""
    tags, compose = COMPOSITE_CSS[name]
    return name, compose({tag: lookup(tag) for tag in tags})


def css_names(tag: str) -> List[str]:
    """CSS properties written for ``tag``; empty if the tag has no CSS form."""
    if tag in COMPOSITE_OF:
        return [COMPOSITE_OF[tag]]
    if tag in SIZE_PROPERTIES:
        return [SIZE_PROPERTIES[tag]] if SIZE_PROPERTIES[tag] else []
    if tag in COLOR_PROPERTIES:
        return [COLOR_PROPERTIES[tag]] if COLOR_PROPERTIES[tag] else []
    if tag in ANGLE_PROPERTIES:
        return [ANGLE_PROPERTIES[tag]] if ANGLE_PROPERTIES[tag] else []
    if tag in ENUM_PROPERTIES:
        css_tag = ENUM_PROPERTIES[tag].css_tag
        return [css_tag] if css_tag else []
    if tag in BOOL_CSS:
        return [BOOL_CSS[tag][0]]
    if tag == "user-select":
        return ["-webkit-user-select", "user-select"]
    if tag == "visibility":
        return ["visibility", "display"]
    if tag in INT_PROPERTIES:
        return [INT_PROPERTIES[tag]] if INT_PROPERTIES[tag] else []
    if tag == "opacity":
        return ["opacity"]
    if tag in SHADOW_PROPERTIES:
        return [SHADOW_PROPERTIES[tag]]
    if tag == "background":
        return ["background-image", "background-size", "background-repeat"]
    if tag in BACKGROUND_PROPERTIES:
        return [BACKGROUND_PROPERTIES[tag]]
    if tag in FILTER_PROPERTIES:
        return [FILTER_PROPERTIES[tag]]
    if tag in _RANGE_CSS:
        return [_RANGE_CSS[tag]]
    if tag in CSS_NAMES:
        return [CSS_NAMES[tag]]
    return []


def css_name(tag: str) -> str:
    """The main CSS property of ``tag``, used in transitions; the tag itself if it has none."""
    names = css_names(tag)
    return names[-1] if names else tag


def tag_of_css_name(name: str) -> str:
    """Reverse of :func:`css_name` for property names reported by the browser."""
    for table in (SIZE_PROPERTIES, COLOR_PROPERTIES, ANGLE_PROPERTIES, INT_PROPERTIES,
                  SHADOW_PROPERTIES, BACKGROUND_PROPERTIES, FILTER_PROPERTIES, CSS_NAMES, _RANGE_CSS):
        for tag, css in table.items():
            if css == name:
                return tag
    for tag, info in ENUM_PROPERTIES.items():
        if info.css_tag == name:
            return tag
    return name


def _size_css(value: Any) -> str:
    if isinstance(value, SizeUnit):
        return value.css()
    if isinstance(value, (tuple, list)):
        return " ".join(size.css() for size in value)
    return str(value)


def _range_css(value: Range) -> str:
    return f"{value.first + 1} / {value.last + 2}"


def _background_pairs(elements: Sequence[Any]) -> List[Declaration]:
    images = [element for element in elements if isinstance(element, BackgroundImage)]
    size = repeat = ""
    if any(image.fit for image in images):
        size = ", ".join(element.fit or "auto" if isinstance(element, BackgroundImage) else "auto"
                         for element in elements)
    if any(image.repeat for image in images):
        repeat = ", ".join(element.repeat or "repeat" if isinstance(element, BackgroundImage) else "repeat"
                           for element in elements)
    return [("background-image", background_css(elements)), ("background-size", size),
            ("background-repeat", repeat)]


def value_css(tag: str, value: Any) -> List[Declaration]:
    """
    CSS declarations of a stored value.

    :param tag: A canonical, non-family tag.
    :param value: The coerced value, or None for an unset tag.
    :return: ``(css name, css value)`` pairs; an empty css value removes the property.
    """
    names = css_names(tag)
    if value is None or not names:
        return [(name, "") for name in names]

    if tag in COMPOSITE_OF:
        return [composite_css(names[0], {tag: value}.get)]
    if tag in SIZE_PROPERTIES:
        return [(names[0], _size_css(value))]
    if tag in COLOR_PROPERTIES:
        return [(names[0], Color(value).css())]
    if tag in ANGLE_PROPERTIES:
        return [(names[0], value.css())]
    if tag in ENUM_PROPERTIES:
        if tag == "visibility":
            if value == 1:
                return [("visibility", "hidden"), ("display", "")]
            if value == 2:
                return [("visibility", "hidden"), ("display", "none")]
            return [("visibility", ""), ("display", "")]
        return [(names[0], ENUM_PROPERTIES[tag].css(value))]
    if tag in BOOL_CSS:
        name, on, off = BOOL_CSS[tag]
        return [(name, on if value else off)]
    if tag == "user-select":
        text = "auto" if value else "none"
        return [(name, text) for name in names]
    if tag in INT_PROPERTIES:
        return [(names[0], str(value))]
    if tag in FLOAT_PROPERTIES:
        return [(names[0], format_number(value))]
    if tag in SHADOW_PROPERTIES:
        return [(names[0], shadows_css(value, text=(tag == "text-shadow")))]
    if tag == "background":
        return _background_pairs(value)
    if tag in BACKGROUND_PROPERTIES:
        return [(names[0], background_css(value))]
    if isinstance(value, FilterProperty):
        return [(names[0], value.css())]
    if tag in _RANGE_CSS:
        return [(names[0], _range_css(value))]
    if isinstance(value, ViewBorder):
        return [(names[0], value.css())]
    return [(names[0], str(value))]


class CSSBuilder:
    """Collects declarations into the text of a ``style`` attribute."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def add(self, name: str, value: str) -> None:
        if value:
            self._items[name] = value

    def add_all(self, declarations: Sequence[Declaration]) -> None:
        for name, value in declarations:
            self.add(name, value)

    def add_values(self, name: str, separator: str, *values: str) -> None:
        self.add(name, separator.join(value for value in values if value))

    def __bool__(self) -> bool:
        return bool(self._items)

    def finish(self) -> str:
        return " ".join(f"{name}: {value};" for name, value in self._items.items())


def properties_css(props: Properties) -> str:
    """Declarations of a bare property map, e.g. a style of the theme or a table row style."""
    builder = CSSBuilder()
    families = set()
    composites = set()
    for tag in props.tags():
        family = FAMILY_OF.get(tag)
        if family is not None:
            if family.name not in families:
                families.add(family.name)
                builder.add_all(family_css(family, family.effective_cells(props.family_members(family))))
        elif tag in COMPOSITE_OF:
            name = COMPOSITE_OF[tag]
            if name not in composites:
                composites.add(name)
                builder.add(*composite_css(name, props.get_raw))
        else:
            builder.add_all(value_css(tag, props.get_raw(tag)))
    return builder.finish()
