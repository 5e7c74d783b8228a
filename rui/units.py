# rui/units.py
"""
Size and angle values.

:class:`SizeUnit` is a number with a CSS length unit (or ``auto``, or a
CSS math function); :class:`AngleUnit` is a number with an angle unit.
Both parse their text forms (``"10px"``, ``"50%"``, ``"1.5em"``,
``"min(10px, 20%)"``, ``"90deg"``, ``"0.5turn"``) and serialize back to text
and to CSS.
"""
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Optional, Tuple, Union


def format_number(value: float) -> str:
    """Format a number the way every CSS value is written: shortest ``%g`` form."""
    return f"{value:g}"


class SizeType(IntEnum):
    AUTO = 0
    PX = 1
    EM = 2
    EX = 3
    PERCENT = 4
    PT = 5
    PC = 6
    INCH = 7
    MM = 8
    CM = 9
    FR = 10
    FUNCTION = 11


_SIZE_SUFFIXES = {
    SizeType.PX: "px",
    SizeType.EM: "em",
    SizeType.EX: "ex",
    SizeType.PERCENT: "%",
    SizeType.PT: "pt",
    SizeType.PC: "pc",
    SizeType.INCH: "in",
    SizeType.MM: "mm",
    SizeType.CM: "cm",
    SizeType.FR: "fr",
}

# "rem" must be tried before "em"
_SIZE_PARSE_ORDER: List[Tuple[str, SizeType]] = [("rem", SizeType.EM)] + [
    (suffix, size_type) for size_type, suffix in _SIZE_SUFFIXES.items()
]

SIZE_FUNCTIONS = ("calc", "min", "max", "clamp", "sum", "sub", "mul", "div", "rem", "mod", "round")


@dataclass(frozen=True)
class SizeFunction:
    """
    A CSS math function producing a length.

    ``calc`` carries a raw expression, ``min``/``max``/``clamp`` any number of
    sizes, ``sum``/``sub``/``mul``/``div`` are written as ``calc(a + b)`` etc.

    :param name: One of :data:`SIZE_FUNCTIONS`.
    :param args: Sizes, numbers or (for ``calc``) a raw expression string.
    """
    name: str
    args: Tuple[Any, ...] = ()

    def __post_init__(self):
        if self.name not in SIZE_FUNCTIONS:
            raise ValueError(f"unknown size function {self.name!r}")
        count = len(self.args)
        if self.name == "calc" and count != 1:
            raise ValueError("calc takes exactly one argument")
        if self.name == "clamp" and count != 3:
            raise ValueError("clamp takes exactly three arguments")
        if self.name in ("sub", "mul", "div", "rem", "mod", "round") and count != 2:
            raise ValueError(f"{self.name} takes exactly two arguments")
        if self.name in ("min", "max", "sum") and count < 1:
            raise ValueError(f"{self.name} takes at least one argument")

    def __str__(self) -> str:
        return f"{self.name}({', '.join(self._arg_text(arg, False) for arg in self.args)})"

    def css(self) -> str:
        args = [self._arg_text(arg, True) for arg in self.args]
        if self.name == "calc":
            return f"calc({args[0]})"
        operator = {"sum": " + ", "sub": " - ", "mul": " * ", "div": " / "}.get(self.name)
        if operator:
            return f"calc({operator.join(args)})"
        return f"{self.name}({', '.join(args)})"

    @staticmethod
    def _arg_text(arg: Any, css: bool) -> str:
        if isinstance(arg, SizeUnit):
            return arg.css() if css else str(arg)
        if isinstance(arg, SizeFunction):
            text = arg.css() if css else str(arg)
            # nested calc() reads better without its own wrapper
            if css and text.startswith("calc("):
                return text[4:]
            return text
        if isinstance(arg, (int, float)) and not isinstance(arg, bool):
            return format_number(arg)
        return str(arg)

    @classmethod
    def parse(cls, text: str) -> "SizeFunction":
        """Parse ``name(arg, ...)``. Raises ValueError on malformed input."""
        text = text.strip()
        open_index = text.find("(")
        if open_index <= 0 or not text.endswith(")"):
            raise ValueError(f"invalid size function {text!r}")
        name = text[:open_index].strip().lower()
        body = text[open_index + 1:-1]
        if name == "calc":
            return cls(name, (body.strip(),))

        args: List[Any] = []
        for part in _split_arguments(body):
            if not part:
                raise ValueError(f"empty argument in {text!r}")
            try:
                args.append(float(part))
            except ValueError:
                args.append(SizeUnit.parse(part))
        return cls(name, tuple(args))


def _split_arguments(body: str) -> List[str]:
    """Split on commas that are not nested inside parentheses."""
    parts, depth, start = [], 0, 0
    for i, ch in enumerate(body):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(body[start:i].strip())
            start = i + 1
    tail = body[start:].strip()
    if tail or parts:
        parts.append(tail)
    return parts


@dataclass(frozen=True)
class SizeUnit:
    """
    A length value.

    :param type: The unit, :attr:`SizeType.AUTO` for ``auto``.
    :param value: The number of units.
    :param function: The math function when ``type`` is :attr:`SizeType.FUNCTION`.
    """
    type: SizeType = SizeType.AUTO
    value: float = 0.0
    function: Optional[SizeFunction] = field(default=None, compare=True)

    @property
    def is_auto(self) -> bool:
        return self.type == SizeType.AUTO

    def __str__(self) -> str:
        if self.type == SizeType.AUTO:
            return "auto"
        if self.type == SizeType.FUNCTION:
            return str(self.function)
        return format_number(self.value) + _SIZE_SUFFIXES[self.type]

    def css(self, text_for_auto: str = "auto") -> str:
        if self.type == SizeType.AUTO:
            return text_for_auto
        if self.type == SizeType.FUNCTION:
            return self.function.css() if self.function else ""
        if self.value == 0:
            return "0"
        if self.type == SizeType.EM:
            return format_number(self.value) + "rem"
        return format_number(self.value) + _SIZE_SUFFIXES[self.type]

    @classmethod
    def parse(cls, text: str) -> "SizeUnit":
        """
        Parse the text form of a size.

        ``""``, ``"auto"`` and ``"none"`` give :data:`AUTO`; a bare number is
        pixels; a CSS math function gives a function size.

        :raises ValueError: if the text is not a size.
        """
        text = text.strip().lower()
        if text in ("", "auto", "none"):
            return AUTO
        if text == "0":
            return SizeUnit(SizeType.PX, 0.0)

        open_index = text.find("(")
        if open_index > 0 and text[:open_index].strip() in SIZE_FUNCTIONS:
            return SizeUnit(SizeType.FUNCTION, 0.0, SizeFunction.parse(text))

        for suffix, size_type in _SIZE_PARSE_ORDER:
            if text.endswith(suffix):
                return SizeUnit(size_type, float(text[:-len(suffix)].strip()))
        return SizeUnit(SizeType.PX, float(text))


AUTO = SizeUnit()


def px(value: float) -> SizeUnit:
    return SizeUnit(SizeType.PX, float(value))


def em(value: float) -> SizeUnit:
    return SizeUnit(SizeType.EM, float(value))


def ex(value: float) -> SizeUnit:
    return SizeUnit(SizeType.EX, float(value))


def percent(value: float) -> SizeUnit:
    return SizeUnit(SizeType.PERCENT, float(value))


def pt(value: float) -> SizeUnit:
    return SizeUnit(SizeType.PT, float(value))


def pc(value: float) -> SizeUnit:
    return SizeUnit(SizeType.PC, float(value))


def inch(value: float) -> SizeUnit:
    return SizeUnit(SizeType.INCH, float(value))


def mm(value: float) -> SizeUnit:
    return SizeUnit(SizeType.MM, float(value))


def cm(value: float) -> SizeUnit:
    return SizeUnit(SizeType.CM, float(value))


def fr(value: float) -> SizeUnit:
    return SizeUnit(SizeType.FR, float(value))


def size_function(name: str, *args: Any) -> SizeUnit:
    """Build a function size, e.g. ``size_function("min", px(10), percent(50))``."""
    return SizeUnit(SizeType.FUNCTION, 0.0, SizeFunction(name, tuple(args)))


def to_size(value: Any) -> SizeUnit:
    """
    Convert a SizeUnit, a number (pixels) or a text to a SizeUnit.

    :raises ValueError: if the value is not a size.
    """
    if isinstance(value, SizeUnit):
        return value
    if isinstance(value, SizeFunction):
        return SizeUnit(SizeType.FUNCTION, 0.0, value)
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a size")
    if isinstance(value, (int, float)):
        return px(value)
    if isinstance(value, str):
        return SizeUnit.parse(value)
    raise ValueError(f"{type(value).__name__} is not a size")


class AngleType(IntEnum):
    RADIAN = 0
    PI = 1
    DEGREE = 2
    GRADIAN = 3
    TURN = 4


_ANGLE_SUFFIXES = {
    AngleType.RADIAN: "rad",
    AngleType.PI: "π",
    AngleType.DEGREE: "deg",
    AngleType.GRADIAN: "grad",
    AngleType.TURN: "turn",
}

# "grad" must be tried before "rad"
_ANGLE_PARSE_ORDER = [
    ("deg", AngleType.DEGREE),
    ("°", AngleType.DEGREE),
    ("grad", AngleType.GRADIAN),
    ("rad", AngleType.RADIAN),
    ("pi", AngleType.PI),
    ("π", AngleType.PI),
    ("turn", AngleType.TURN),
]


@dataclass(frozen=True)
class AngleUnit:
    """An angle. ``AngleType.PI`` stores multiples of π."""
    type: AngleType = AngleType.RADIAN
    value: float = 0.0

    def __str__(self) -> str:
        return format_number(self.value) + _ANGLE_SUFFIXES[self.type]

    def css(self) -> str:
        if self.value == 0:
            return "0"
        if self.type == AngleType.PI:
            return format_number(self.value * math.pi) + "rad"
        return str(self)

    @classmethod
    def parse(cls, text: str) -> "AngleUnit":
        """
        Parse ``<number><suffix>``; a bare number is radians.

        :raises ValueError: if the text is not an angle.
        """
        text = text.strip().lower()
        for suffix, angle_type in _ANGLE_PARSE_ORDER:
            if text.endswith(suffix):
                number = text[:-len(suffix)].strip()
                if angle_type == AngleType.PI and number == "":
                    return cls(AngleType.PI, 1.0)
                return cls(angle_type, float(number))
        return cls(AngleType.RADIAN, float(text))

    def to_radian(self) -> "AngleUnit":
        factor = {
            AngleType.RADIAN: 1.0,
            AngleType.PI: math.pi,
            AngleType.DEGREE: math.pi / 180,
            AngleType.GRADIAN: math.pi / 200,
            AngleType.TURN: 2 * math.pi,
        }[self.type]
        return AngleUnit(AngleType.RADIAN, self.value * factor)

    def to_degree(self) -> "AngleUnit":
        return AngleUnit(AngleType.DEGREE, self.to_radian().value * 180 / math.pi)

    def to_gradian(self) -> "AngleUnit":
        return AngleUnit(AngleType.GRADIAN, self.to_radian().value * 200 / math.pi)

    def to_turn(self) -> "AngleUnit":
        return AngleUnit(AngleType.TURN, self.to_radian().value / (2 * math.pi))


def rad(value: float) -> AngleUnit:
    return AngleUnit(AngleType.RADIAN, float(value))


def deg(value: float) -> AngleUnit:
    return AngleUnit(AngleType.DEGREE, float(value))


def grad(value: float) -> AngleUnit:
    return AngleUnit(AngleType.GRADIAN, float(value))


def turn(value: float) -> AngleUnit:
    return AngleUnit(AngleType.TURN, float(value))


def to_angle(value: Union[AngleUnit, float, int, str]) -> AngleUnit:
    """
    Convert an AngleUnit, a number (radians) or a text to an AngleUnit.

    :raises ValueError: if the value is not an angle.
    """
    if isinstance(value, AngleUnit):
        return value
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an angle")
    if isinstance(value, (int, float)):
        return rad(value)
    if isinstance(value, str):
        return AngleUnit.parse(value)
    raise ValueError(f"{type(value).__name__} is not an angle")
