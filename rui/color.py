# rui/color.py
"""32-bit ARGB colors and their text forms."""
import re
from typing import Any, Dict, Optional

_RGB_RE = re.compile(r"^rgba?\s*\((.*)\)$")


class Color(int):
    """
    A color packed as ``0xAARRGGBB``.

    ``Color(0)`` (fully transparent black) is the "no color" value: writing it
    to a color property removes the property.
    """

    def __new__(cls, value: int = 0):
        return super().__new__(cls, int(value) & 0xFFFFFFFF)

    @classmethod
    def from_argb(cls, alpha: int, red: int, green: int, blue: int) -> "Color":
        return cls(((alpha & 0xFF) << 24) | ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF))

    @classmethod
    def from_rgb(cls, red: int, green: int, blue: int) -> "Color":
        return cls.from_argb(255, red, green, blue)

    @property
    def alpha(self) -> int:
        return (self >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self & 0xFF

    def argb(self):
        return self.alpha, self.red, self.green, self.blue

    def __str__(self) -> str:
        return f"#{int(self):08X}"

    def __repr__(self) -> str:
        return f"Color({self})"

    def css(self) -> str:
        alpha = self.alpha
        if alpha == 255:
            return f"rgb({self.red},{self.green},{self.blue})"
        fraction = f"{alpha / 255:.2f}".lstrip("0")
        return f"rgba({self.red},{self.green},{self.blue},{fraction})"

    @classmethod
    def parse(cls, text: str) -> "Color":
        """
        Parse ``#RGB``, ``#ARGB``, ``#RRGGBB``, ``#AARRGGBB``, ``rgb(...)``,
        ``rgba(...)`` or a CSS color name.

        :raises ValueError: if the text is not a color.
        """
        text = text.strip().lower()
        if not text:
            raise ValueError("empty color")

        if text.startswith("#"):
            digits = text[1:]
            if len(digits) in (3, 4):
                digits = "".join(ch * 2 for ch in digits)
            if len(digits) == 6:
                return cls(0xFF000000 | int(digits, 16))
            if len(digits) == 8:
                return cls(int(digits, 16))
            raise ValueError(f"invalid color {text!r}")

        match = _RGB_RE.match(text)
        if match:
            return cls._parse_rgb(match.group(1), text)

        if text in NAMED_COLORS:
            return NAMED_COLORS[text]
        raise ValueError(f"invalid color {text!r}")

    @classmethod
    def _parse_rgb(cls, body: str, text: str) -> "Color":
        parts = [part.strip() for part in re.split(r"[,\s/]+", body.strip()) if part.strip()]
        if len(parts) not in (3, 4):
            raise ValueError(f"invalid color {text!r}")

        def component(part: str) -> int:
            if part.endswith("%"):
                number = float(part[:-1]) * 255 / 100
            else:
                number = float(part)
                if "." in part and 0 <= number <= 1:
                    number *= 255
            if not 0 <= number <= 255:
                raise ValueError(f"color component {part!r} is out of range")
            return int(round(number))

        red, green, blue = (component(part) for part in parts[:3])
        alpha = 255
        if len(parts) == 4:
            part = parts[3]
            if part.endswith("%"):
                alpha = component(part)
            else:
                number = float(part)
                alpha = int(round(number * 255)) if number <= 1 else int(number)
                if not 0 <= alpha <= 255:
                    raise ValueError(f"alpha {part!r} is out of range")
        return cls.from_argb(alpha, red, green, blue)


def to_color(value: Any) -> Color:
    """
    Convert a Color, an int or a text to a Color.

    :raises ValueError: if the value is not a color.
    """
    if isinstance(value, Color):
        return value
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a color")
    if isinstance(value, int):
        return Color(value)
    if isinstance(value, str):
        return Color.parse(value)
    raise ValueError(f"{type(value).__name__} is not a color")


_NAMED_RGB = {
    "aliceblue": 0xF0F8FF, "antiquewhite": 0xFAEBD7, "aqua": 0x00FFFF, "aquamarine": 0x7FFFD4,
    "azure": 0xF0FFFF, "beige": 0xF5F5DC, "bisque": 0xFFE4C4, "black": 0x000000,
    "blanchedalmond": 0xFFEBCD, "blue": 0x0000FF, "blueviolet": 0x8A2BE2, "brown": 0xA52A2A,
    "burlywood": 0xDEB887, "cadetblue": 0x5F9EA0, "chartreuse": 0x7FFF00, "chocolate": 0xD2691E,
    "coral": 0xFF7F50, "cornflowerblue": 0x6495ED, "cornsilk": 0xFFF8DC, "crimson": 0xDC143C,
    "cyan": 0x00FFFF, "darkblue": 0x00008B, "darkcyan": 0x008B8B, "darkgoldenrod": 0xB8860B,
    "darkgray": 0xA9A9A9, "darkgreen": 0x006400, "darkgrey": 0xA9A9A9, "darkkhaki": 0xBDB76B,
    "darkmagenta": 0x8B008B, "darkolivegreen": 0x556B2F, "darkorange": 0xFF8C00, "darkorchid": 0x9932CC,
    "darkred": 0x8B0000, "darksalmon": 0xE9967A, "darkseagreen": 0x8FBC8F, "darkslateblue": 0x483D8B,
    "darkslategray": 0x2F4F4F, "darkslategrey": 0x2F4F4F, "darkturquoise": 0x00CED1, "darkviolet": 0x9400D3,
    "deeppink": 0xFF1493, "deepskyblue": 0x00BFFF, "dimgray": 0x696969, "dimgrey": 0x696969,
    "dodgerblue": 0x1E90FF, "firebrick": 0xB22222, "floralwhite": 0xFFFAF0, "forestgreen": 0x228B22,
    "fuchsia": 0xFF00FF, "gainsboro": 0xDCDCDC, "ghostwhite": 0xF8F8FF, "gold": 0xFFD700,
    "goldenrod": 0xDAA520, "gray": 0x808080, "green": 0x008000, "greenyellow": 0xADFF2F,
    "grey": 0x808080, "honeydew": 0xF0FFF0, "hotpink": 0xFF69B4, "indianred": 0xCD5C5C,
    "indigo": 0x4B0082, "ivory": 0xFFFFF0, "khaki": 0xF0E68C, "lavender": 0xE6E6FA,
    "lavenderblush": 0xFFF0F5, "lawngreen": 0x7CFC00, "lemonchiffon": 0xFFFACD, "lightblue": 0xADD8E6,
    "lightcoral": 0xF08080, "lightcyan": 0xE0FFFF, "lightgoldenrodyellow": 0xFAFAD2, "lightgray": 0xD3D3D3,
    "lightgreen": 0x90EE90, "lightgrey": 0xD3D3D3, "lightpink": 0xFFB6C1, "lightsalmon": 0xFFA07A,
    "lightseagreen": 0x20B2AA, "lightskyblue": 0x87CEFA, "lightslategray": 0x778899, "lightslategrey": 0x778899,
    "lightsteelblue": 0xB0C4DE, "lightyellow": 0xFFFFE0, "lime": 0x00FF00, "limegreen": 0x32CD32,
    "linen": 0xFAF0E6, "magenta": 0xFF00FF, "maroon": 0x800000, "mediumaquamarine": 0x66CDAA,
    "mediumblue": 0x0000CD, "mediumorchid": 0xBA55D3, "mediumpurple": 0x9370DB, "mediumseagreen": 0x3CB371,
    "mediumslateblue": 0x7B68EE, "mediumspringgreen": 0x00FA9A, "mediumturquoise": 0x48D1CC,
    "mediumvioletred": 0xC71585, "midnightblue": 0x191970, "mintcream": 0xF5FFFA, "mistyrose": 0xFFE4E1,
    "moccasin": 0xFFE4B5, "navajowhite": 0xFFDEAD, "navy": 0x000080, "oldlace": 0xFDF5E6,
    "olive": 0x808000, "olivedrab": 0x6B8E23, "orange": 0xFFA500, "orangered": 0xFF4500,
    "orchid": 0xDA70D6, "palegoldenrod": 0xEEE8AA, "palegreen": 0x98FB98, "paleturquoise": 0xAFEEEE,
    "palevioletred": 0xDB7093, "papayawhip": 0xFFEFD5, "peachpuff": 0xFFDAB9, "peru": 0xCD853F,
    "pink": 0xFFC0CB, "plum": 0xDDA0DD, "powderblue": 0xB0E0E6, "purple": 0x800080,
    "rebeccapurple": 0x663399, "red": 0xFF0000, "rosybrown": 0xBC8F8F, "royalblue": 0x4169E1,
    "saddlebrown": 0x8B4513, "salmon": 0xFA8072, "sandybrown": 0xF4A460, "seagreen": 0x2E8B57,
    "seashell": 0xFFF5EE, "sienna": 0xA0522D, "silver": 0xC0C0C0, "skyblue": 0x87CEEB,
    "slateblue": 0x6A5ACD, "slategray": 0x708090, "slategrey": 0x708090, "snow": 0xFFFAFA,
    "springgreen": 0x00FF7F, "steelblue": 0x4682B4, "tan": 0xD2B48C, "teal": 0x008080,
    "thistle": 0xD8BFD8, "tomato": 0xFF6347, "turquoise": 0x40E0D0, "violet": 0xEE82EE,
    "wheat": 0xF5DEB3, "white": 0xFFFFFF, "whitesmoke": 0xF5F5F5, "yellow": 0xFFFF00,
    "yellowgreen": 0x9ACD32,
}

NAMED_COLORS: Dict[str, Color] = {name: Color(0xFF000000 | rgb) for name, rgb in _NAMED_RGB.items()}
NAMED_COLORS["transparent"] = Color(0)


def color_name(color: Color) -> Optional[str]:
    """Return the CSS name of ``color`` if it has one."""
    for name, value in NAMED_COLORS.items():
        if value == color:
            return name
    return None
