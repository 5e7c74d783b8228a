# rui/__init__.py

"""
rui: server-driven UI

The view tree lives in Python, one tree per client session. Property
changes become small scripts which a browser runtime (a WebSocket page or a
QWebEngine window) applies to the DOM; user input comes back as data-text
messages dispatched to the views.
"""

# --- Application and Sessions ---
from .core import Application
from .config import Config, get_config, setup_logging
from .session import Session, ALT_KEY, CTRL_KEY, META_KEY, SHIFT_KEY
from .theme import Theme
from .errors import RUIError, BridgeClosedError, BindingError, DataParseError

# --- Values ---
from .data import DataObject, DataNode, NodeType, parse_data_text, write_data_text
from .units import (
    SizeUnit, SizeType, SizeFunction, AUTO,
    px, em, ex, percent, pt, pc, inch, mm, cm, fr, size_function, to_size,
    AngleUnit, AngleType, rad, deg, grad, turn, to_angle,
)
from .color import Color, to_color
from .bounds import Bounds, Range
from .decorations import BorderProperty, BoxRadius, FilterProperty, ShadowProperty, ViewBorder
from .gradient import LinearGradient, RadialGradient, ConicGradient, GradientPoint, BackgroundImage
from .properties import Properties, REMOVE
from .events import Frame, KeyEvent, MouseEvent, PointerEvent, Touch, TouchEvent, FileInfo

# --- Animation ---
from .animation import Animation, AnimatedProperty, cubic_bezier_timing, steps_timing

# --- Views ---
from .view import View, create_view, to_view
from .containers import (
    ViewsContainer, ListLayout, GridLayout, ColumnLayout, DetailsView, Button, Checkbox, view_by_id,
)
from .widgets import TextView, EditView, DropDownList, ImageView, ProgressBar
from .pickers import NumberPicker, ColorPicker, DatePicker, TimePicker, FilePicker
from .table import TableView, TableAdapter, SimpleTableAdapter, TextTableAdapter, CellIndex
from .canvas import CanvasView, Canvas, Path, FontParams
