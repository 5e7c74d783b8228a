# rui/canvas.py
"""
Canvas view and its drawing context.

A :class:`CanvasView` calls its ``draw-function`` with a :class:`Canvas`
whenever it is redrawn (on request and after every resize). Every drawing
call becomes one canvas command of the bridge; the whole drawing goes to
the browser as a single script.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .bridge import CanvasVar, TextMetrics
from .color import to_color
from .data import DataObject
from .events import Frame
from .properties import invalid_property_value
from .units import SizeUnit, to_size
from .view import View

logger = logging.getLogger(__name__)

# line joins
MITER_JOIN = 0
ROUND_JOIN = 1
BEVEL_JOIN = 2

# line caps
BUTT_CAP = 0
ROUND_CAP = 1
SQUARE_CAP = 2

# text baselines
ALPHABETIC_BASELINE = 0
TOP_BASELINE = 1
MIDDLE_BASELINE = 2
BOTTOM_BASELINE = 3
HANGING_BASELINE = 4
IDEOGRAPHIC_BASELINE = 5

# text aligns
LEFT_ALIGN = 0
RIGHT_ALIGN = 1
CENTER_ALIGN = 2
START_ALIGN = 3
END_ALIGN = 4

# image pattern repeats
NO_REPEAT = 0
REPEAT = 1
REPEAT_X = 2
REPEAT_Y = 3

_JOINS = ("miter", "round", "bevel")
_CAPS = ("butt", "round", "square")
_BASELINES = ("alphabetic", "top", "middle", "bottom", "hanging", "ideographic")
_ALIGNS = ("left", "right", "center", "start", "end")
_REPEATS = ("no-repeat", "repeat", "repeat-x", "repeat-y")

# intermediate gradient stops: (offset 0..1, color)
Stops = Sequence[Tuple[float, Any]]


@dataclass
class FontParams:
    """Font attributes besides the name and size. ``weight`` is 1..9 (4 normal, 7 bold), 0 unset."""
    italic: bool = False
    small_caps: bool = False
    weight: int = 0
    line_height: Optional[SizeUnit] = None


def _font_names(name: str) -> str:
    names = []
    for font in name.split(","):
        font = font.strip(" \n\"'")
        if font:
            names.append(f'"{font}"' if " " in font else font)
    return ",".join(names)


def font_text(name: str, size: Any, params: Optional[FontParams] = None) -> str:
    """The CSS ``font`` shorthand used by the canvas context."""
    parts = []
    if params is not None:
        if params.italic:
            parts.append("italic")
        if params.small_caps:
            parts.append("small-caps")
        if 0 < params.weight <= 9:
            parts.append({4: "normal", 7: "bold"}.get(params.weight, str(params.weight * 100)))
    size_text = to_size(size).css("1rem")
    if params is not None and params.line_height is not None and not params.line_height.is_auto:
        size_text += "/" + params.line_height.css()
    parts.append(size_text)
    parts.append(_font_names(name))
    return " ".join(parts)


class Path:
    """
    A figure built from lines and curves, drawn with :meth:`Canvas.fill_path`,
    :meth:`Canvas.stroke_path` or used by :meth:`Canvas.clip_path`.
    """

    def __init__(self):
        self._commands: List[Tuple[str, Tuple[Any, ...]]] = []

    def _add(self, func: str, *args: Any) -> "Path":
        self._commands.append((func, args))
        return self

    def move_to(self, x: float, y: float) -> "Path":
        return self._add("moveTo", float(x), float(y))

    def line_to(self, x: float, y: float) -> "Path":
        return self._add("lineTo", float(x), float(y))

    def arc_to(self, x0: float, y0: float, x1: float, y1: float, radius: float) -> "Path":
        return self._add("arcTo", float(x0), float(y0), float(x1), float(y1), float(radius))

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float,
            clockwise: bool = True) -> "Path":
        """Angles are in radians."""
        return self._add("arc", float(x), float(y), float(radius), float(start_angle), float(end_angle),
                         not clockwise)

    def bezier_curve_to(self, cp0x: float, cp0y: float, cp1x: float, cp1y: float, x: float, y: float) -> "Path":
        return self._add("bezierCurveTo", float(cp0x), float(cp0y), float(cp1x), float(cp1y), float(x), float(y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> "Path":
        return self._add("quadraticCurveTo", float(cpx), float(cpy), float(x), float(y))

    def ellipse(self, x: float, y: float, radius_x: float, radius_y: float, rotation: float,
                start_angle: float, end_angle: float, clockwise: bool = True) -> "Path":
        return self._add("ellipse", float(x), float(y), float(radius_x), float(radius_y), float(rotation),
                         float(start_angle), float(end_angle), not clockwise)

    def rect(self, x: float, y: float, width: float, height: float) -> "Path":
        return self._add("rect", float(x), float(y), float(width), float(height))

    def close(self) -> "Path":
        return self._add("closePath")

    def commands(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        return list(self._commands)


class Canvas:
    """
    The drawing context of a :class:`CanvasView`, valid during one draw call.

    Coordinates and sizes are in pixels, angles in radians.
    """

    def __init__(self, view: "CanvasView"):
        self._view = view
        self._session = view.session

    def view(self) -> "CanvasView":
        return self._view

    def width(self) -> float:
        return self._view.frame().width

    def height(self) -> float:
        return self._view.frame().height

    def _call(self, func: str, *args: Any) -> None:
        self._session.call_canvas_func(func, *args)

    def _set(self, name: str, value: Any) -> None:
        self._session.update_canvas_property(name, value)

    # --- state and transformations ---

    def save(self) -> None:
        self._call("save")

    def restore(self) -> None:
        self._call("restore")

    def clip_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._call("beginPath")
        self._call("rect", float(x), float(y), float(width), float(height))
        self._call("clip")

    def clip_path(self, path: Path) -> None:
        self._call("clip", self._path_var(path))

    def set_scale(self, x: float, y: float) -> None:
        self._call("scale", float(x), float(y))

    def set_translation(self, x: float, y: float) -> None:
        self._call("translate", float(x), float(y))

    def set_rotation(self, angle: float) -> None:
        self._call("rotate", float(angle))

    def set_transformation(self, x_scale: float, y_scale: float, x_skew: float, y_skew: float,
                           dx: float, dy: float) -> None:
        self._call("transform", float(x_scale), float(x_skew), float(y_skew), float(y_scale), float(dx), float(dy))

    def reset_transformation(self) -> None:
        self._call("resetTransform")

    # --- styles ---

    def set_solid_color_fill_style(self, color: Any) -> None:
        self._set("fillStyle", to_color(color).css())

    def set_solid_color_stroke_style(self, color: Any) -> None:
        self._set("strokeStyle", to_color(color).css())

    def _gradient(self, func: str, args: Sequence[float], color0: Any, color1: Any,
                  stops: Stops) -> CanvasVar:
        gradient = self._session.create_canvas_var(func, *(float(arg) for arg in args))
        self._session.call_canvas_var_func(gradient, "addColorStop", 0.0, to_color(color0).css())
        for offset, color in stops or ():
            if 0 <= offset <= 1:
                self._session.call_canvas_var_func(gradient, "addColorStop", float(offset), to_color(color).css())
        self._session.call_canvas_var_func(gradient, "addColorStop", 1.0, to_color(color1).css())
        return gradient

    def set_linear_gradient_fill_style(self, x0: float, y0: float, color0: Any, x1: float, y1: float,
                                       color1: Any, stops: Stops = ()) -> None:
        self._set("fillStyle", self._gradient("createLinearGradient", (x0, y0, x1, y1), color0, color1, stops))

    def set_linear_gradient_stroke_style(self, x0: float, y0: float, color0: Any, x1: float, y1: float,
                                         color1: Any, stops: Stops = ()) -> None:
        self._set("strokeStyle", self._gradient("createLinearGradient", (x0, y0, x1, y1), color0, color1, stops))

    def set_radial_gradient_fill_style(self, x0: float, y0: float, r0: float, color0: Any,
                                       x1: float, y1: float, r1: float, color1: Any,
                                       stops: Stops = ()) -> None:
        self._set("fillStyle", self._gradient("createRadialGradient", (x0, y0, r0, x1, y1, r1),
                                              color0, color1, stops))

    def set_radial_gradient_stroke_style(self, x0: float, y0: float, r0: float, color0: Any,
                                         x1: float, y1: float, r1: float, color1: Any,
                                         stops: Stops = ()) -> None:
        self._set("strokeStyle", self._gradient("createRadialGradient", (x0, y0, r0, x1, y1, r1),
                                                color0, color1, stops))

    def set_conic_gradient_fill_style(self, x: float, y: float, start_angle: float, color0: Any, color1: Any,
                                      stops: Stops = ()) -> None:
        self._set("fillStyle", self._gradient("createConicGradient", (start_angle, x, y), color0, color1, stops))

    def set_image_fill_style(self, url: str, repeat: int = REPEAT) -> None:
        """Fill with a pattern of an image the browser has already loaded."""
        self._session.call_canvas_image_func(url, "fillStyle", "createPattern", _REPEATS[repeat])

    def set_line_width(self, width: float) -> None:
        if width > 0:
            self._set("lineWidth", float(width))

    def set_line_join(self, join: int) -> None:
        if 0 <= join < len(_JOINS):
            self._set("lineJoin", _JOINS[join])

    def set_line_cap(self, cap: int) -> None:
        if 0 <= cap < len(_CAPS):
            self._set("lineCap", _CAPS[cap])

    def set_line_dash(self, dash: Sequence[float], offset: float = -1) -> None:
        self._call("setLineDash", [float(d) for d in dash])
        if offset >= 0:
            self._set("lineDashOffset", float(offset))

    def set_font(self, name: str, size: Any, params: Optional[FontParams] = None) -> None:
        self._set("font", font_text(name, size, params))

    def text_metrics(self, text: str, font_name: str, font_size: Any,
                     params: Optional[FontParams] = None) -> Optional[TextMetrics]:
        """Measure ``text`` in the browser; None if it did not answer."""
        return self._session.canvas_text_metrics(self._view.html_id, font_text(font_name, font_size, params), text)

    def set_text_baseline(self, baseline: int) -> None:
        if 0 <= baseline < len(_BASELINES):
            self._set("textBaseline", _BASELINES[baseline])

    def set_text_align(self, align: int) -> None:
        if 0 <= align < len(_ALIGNS):
            self._set("textAlign", _ALIGNS[align])

    def set_shadow(self, offset_x: float, offset_y: float, blur: float, color: Any) -> None:
        color = to_color(color)
        if color.alpha > 0 and blur >= 0:
            self._set("shadowColor", color.css())
            self._set("shadowOffsetX", float(offset_x))
            self._set("shadowOffsetY", float(offset_y))
            self._set("shadowBlur", float(blur))

    def reset_shadow(self) -> None:
        self._set("shadowColor", "rgba(0,0,0,0)")
        self._set("shadowOffsetX", 0.0)
        self._set("shadowOffsetY", 0.0)
        self._set("shadowBlur", 0.0)

    # --- shapes ---

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._call("clearRect", float(x), float(y), float(width), float(height))

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._call("fillRect", float(x), float(y), float(width), float(height))

    def stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._call("strokeRect", float(x), float(y), float(width), float(height))

    def fill_and_stroke_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.fill_rect(x, y, width, height)
        self.stroke_rect(x, y, width, height)

    def _rounded_rect(self, x: float, y: float, width: float, height: float, radius: float,
                      *funcs: str) -> None:
        self._call("beginPath")
        self._call("roundRect", float(x), float(y), float(width), float(height), float(radius))
        for func in funcs:
            self._call(func)

    def fill_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None:
        self._rounded_rect(x, y, width, height, radius, "fill")

    def stroke_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None:
        self._rounded_rect(x, y, width, height, radius, "stroke")

    def fill_and_stroke_rounded_rect(self, x: float, y: float, width: float, height: float,
                                     radius: float) -> None:
        self._rounded_rect(x, y, width, height, radius, "fill", "stroke")

    def _ellipse(self, x: float, y: float, radius_x: float, radius_y: float, rotation: float,
                 *funcs: str) -> None:
        if radius_x < 0 or radius_y < 0:
            return
        self._call("beginPath")
        self._call("ellipse", float(x), float(y), float(radius_x), float(radius_y), float(rotation),
                   0.0, 2 * math.pi)
        for func in funcs:
            self._call(func)

    def fill_ellipse(self, x: float, y: float, radius_x: float, radius_y: float, rotation: float = 0) -> None:
        self._ellipse(x, y, radius_x, radius_y, rotation, "fill")

    def stroke_ellipse(self, x: float, y: float, radius_x: float, radius_y: float, rotation: float = 0) -> None:
        self._ellipse(x, y, radius_x, radius_y, rotation, "stroke")

    def fill_and_stroke_ellipse(self, x: float, y: float, radius_x: float, radius_y: float,
                                rotation: float = 0) -> None:
        self._ellipse(x, y, radius_x, radius_y, rotation, "fill", "stroke")

    def _path_var(self, path: Path) -> CanvasVar:
        handle = self._session.create_path2d()
        for func, args in path.commands():
            self._session.call_canvas_var_func(handle, func, *args)
        return handle

    def fill_path(self, path: Path) -> None:
        self._call("fill", self._path_var(path))

    def stroke_path(self, path: Path) -> None:
        self._call("stroke", self._path_var(path))

    def fill_and_stroke_path(self, path: Path) -> None:
        handle = self._path_var(path)
        self._call("fill", handle)
        self._call("stroke", handle)

    def draw_line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self._call("beginPath")
        self._call("moveTo", float(x0), float(y0))
        self._call("lineTo", float(x1), float(y1))
        self._call("stroke")

    # --- text and images ---

    def fill_text(self, x: float, y: float, text: str) -> None:
        self._call("fillText", text, float(x), float(y))

    def stroke_text(self, x: float, y: float, text: str) -> None:
        self._call("strokeText", text, float(x), float(y))

    def draw_image(self, x: float, y: float, url: str) -> None:
        self._session.call_canvas_image_func(url, "", "drawImage", float(x), float(y))

    def draw_image_in_rect(self, x: float, y: float, width: float, height: float, url: str) -> None:
        self._session.call_canvas_image_func(url, "", "drawImage", float(x), float(y), float(width), float(height))

    def draw_image_fragment(self, src_x: float, src_y: float, src_width: float, src_height: float,
                            dst_x: float, dst_y: float, dst_width: float, dst_height: float, url: str) -> None:
        self._session.call_canvas_image_func(url, "", "drawImage",
                                             float(src_x), float(src_y), float(src_width), float(src_height),
                                             float(dst_x), float(dst_y), float(dst_width), float(dst_height))


DrawFunction = Callable[[Canvas], None]


class CanvasView(View):
    """A ``<canvas>`` drawn by the ``draw-function`` property, a callable ``(Canvas)``."""

    tag_name = "CanvasView"

    def html_tag(self) -> str:
        return "canvas"

    def get(self, tag: str) -> Any:
        if self.normalize_tag(tag) == "draw-function":
            return self.get_raw("draw-function")
        return super().get(tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag == "draw-function":
            if value is None:
                return self.remove_value(tag)
            if not callable(value):
                invalid_property_value(tag, value)
                return None
            return self._store_raw(tag, value)
        return super().set_value(tag, value)

    def changed(self, tag: str) -> None:
        if tag == "draw-function":
            self.redraw()
        else:
            super().changed(tag)

    def redraw(self) -> None:
        """Clear the canvas and call the draw function; the drawing goes out as one script."""
        if not self.created or self.session.ignore_view_updates():
            return
        canvas = Canvas(self)
        self.session.canvas_start(self.html_id)
        try:
            frame = self.frame()
            canvas.clear_rect(0, 0, frame.width, frame.height)
            draw = self.get_raw("draw-function")
            if draw is not None:
                draw(canvas)
        finally:
            self.session.canvas_finish()

    def load_image(self, url: str) -> None:
        """Have the browser load ``url`` for the image drawing calls; the canvas redraws once it arrives."""
        self.session.call_func("loadImage", self.html_id, url)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "imageLoaded":
            self.redraw()
            return True
        if command == "imageError":
            logger.error("CanvasView: unable to load %s", data.property_value("url") or "")
            return True
        return super().handle_command(command, data)

    def on_resize(self, frame: Frame) -> None:
        super().on_resize(frame)
        self.redraw()
