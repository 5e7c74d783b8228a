# rui/theme.py
"""
Themes: named constants, colors and styles shared by the views of a session.

A theme file is YAML::

    name: default
    constants:
      ruiButtonPadding: 4px
      smallGap: {value: 4px, touch: 8px}
    colors:
      ruiTextColor: {value: "#FF000000", dark: "#FFE0E0E0"}
    styles:
      caption:
        text-size: 1.5em
        text-weight: bold
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .css import properties_css
from .properties import Properties

logger = logging.getLogger(__name__)


def _variants(value: Any, alternate: str) -> Tuple[str, str]:
    if isinstance(value, dict):
        return str(value.get("value", "")).strip(), str(value.get(alternate, "")).strip()
    return str(value).strip(), ""


class Theme:
    """
    :param name: Theme name.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._constants: Dict[str, str] = {}
        self._touch_constants: Dict[str, str] = {}
        self._colors: Dict[str, str] = {}
        self._dark_colors: Dict[str, str] = {}
        self._styles: Dict[str, Properties] = {}

    def __repr__(self) -> str:
        return f"<Theme {self.name!r}>"

    # --- constants ---

    def set_constant(self, tag: str, value: str, touch_value: str = "") -> None:
        """Set a constant; an empty ``value`` removes it."""
        value = value.strip()
        if not value:
            self._constants.pop(tag, None)
            self._touch_constants.pop(tag, None)
            return
        self._constants[tag] = value
        touch_value = touch_value.strip()
        if touch_value:
            self._touch_constants[tag] = touch_value
        else:
            self._touch_constants.pop(tag, None)

    def constant(self, tag: str, touch: bool = False) -> Optional[str]:
        if touch and tag in self._touch_constants:
            return self._touch_constants[tag]
        return self._constants.get(tag)

    def constant_tags(self) -> List[str]:
        return sorted(self._constants)

    # --- colors ---

    def set_color(self, tag: str, color: str, dark_color: str = "") -> None:
        """Set a color constant; an empty ``color`` removes it."""
        color = color.strip()
        if not color:
            self._colors.pop(tag, None)
            self._dark_colors.pop(tag, None)
            return
        self._colors[tag] = color
        dark_color = dark_color.strip()
        if dark_color:
            self._dark_colors[tag] = dark_color
        else:
            self._dark_colors.pop(tag, None)

    def color(self, tag: str, dark: bool = False) -> Optional[str]:
        if dark and tag in self._dark_colors:
            return self._dark_colors[tag]
        return self._colors.get(tag)

    def color_tags(self) -> List[str]:
        return sorted(self._colors)

    # --- styles ---

    def set_style(self, tag: str, style: Union[Properties, Dict[str, Any], None]) -> None:
        if style is None:
            self._styles.pop(tag, None)
            return
        if isinstance(style, dict):
            params = style
            style = Properties()
            if not style.set_params(params):
                logger.warning("Style %r of theme %r has invalid properties", tag, self.name)
        self._styles[tag] = style

    def style(self, tag: str) -> Optional[Properties]:
        return self._styles.get(tag)

    def style_tags(self) -> List[str]:
        """Style names, the built-in ``rui*`` styles first."""
        rui = sorted(tag for tag in self._styles if tag.startswith("rui"))
        custom = sorted(tag for tag in self._styles if not tag.startswith("rui"))
        return rui + custom

    def css_text(self) -> str:
        """The style sheet of the theme: one ``.name { ... }`` rule per style."""
        rules = []
        for tag in self.style_tags():
            css = properties_css(self._styles[tag])
            if css:
                rules.append(f".{tag} {{ {css} }}")
        return "\n".join(rules)

    def copy(self) -> "Theme":
        """A theme with the same entries whose later changes stay separate."""
        theme = Theme(self.name)
        theme.append(self)
        return theme

    def append(self, other: "Theme") -> None:
        """Copy everything of ``other`` into this theme, replacing equal names."""
        self._constants.update(other._constants)
        self._touch_constants.update(other._touch_constants)
        self._colors.update(other._colors)
        self._dark_colors.update(other._dark_colors)
        self._styles.update(other._styles)

    # --- loading ---

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Theme":
        theme = cls(str(data.get("name", "")))
        for tag, value in (data.get("constants") or {}).items():
            theme.set_constant(tag, *_variants(value, "touch"))
        for tag, value in (data.get("colors") or {}).items():
            theme.set_color(tag, *_variants(value, "dark"))
        for tag, params in (data.get("styles") or {}).items():
            if isinstance(params, dict):
                theme.set_style(tag, params)
            else:
                logger.error("Style %r must be a mapping of properties", tag)
        return theme

    @classmethod
    def from_text(cls, text: str) -> "Theme":
        """
        :raises ValueError: if the text is not a YAML mapping.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"invalid theme: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("a theme must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Theme":
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            theme = cls.from_text(fh.read())
        if not theme.name:
            theme.name = path.stem
        logger.debug("Theme %r loaded from %s", theme.name, path)
        return theme
