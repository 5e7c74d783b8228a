# rui/table.py
"""
Table view.

A :class:`TableView` shows the cells of a :class:`TableAdapter`. Rows, cells
and column groups are written as HTML in one piece: the whole inner HTML is
rebuilt whenever the content or a table-wide style changes, with view
updates of cell views suppressed while it is being built.

The current row (``selection-mode = row``) or cell (``selection-mode =
cell``) is kept in the ``current`` property and moved by the browser with
the keyboard or the mouse.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .color import Color, color_name
from .css import CSSBuilder, properties_css
from .data import DataObject
from .properties import ENUM_PROPERTIES, FAMILY_OF, Properties, invalid_property_value, to_int
from .units import format_number
from .view import EVENTS, View, escape

logger = logging.getLogger(__name__)

# selection-mode indexes
NONE_SELECTION = 0
CELL_SELECTION = 1
ROW_SELECTION = 2


@dataclass(frozen=True)
class CellIndex:
    """Coordinates of the current cell; -1 means none."""
    row: int = -1
    column: int = -1

    @classmethod
    def parse(cls, value: Any) -> "CellIndex":
        """Accept a CellIndex, a ``(row, column)`` pair, a row number or ``"row,column"`` text."""
        if isinstance(value, CellIndex):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(to_int(value[0]), to_int(value[1]))
        if isinstance(value, str) and "," in value:
            row, column = value.split(",", 1)
            return cls(to_int(row), to_int(column))
        return cls(to_int(value), -1)


class TableAdapter:
    """
    Source of table cells.

    A cell may be a text, a number, a bool (shown as a check box), a
    :class:`rui.color.Color`, a :class:`rui.view.View` or any object with a
    useful ``str()``. Adapters may also define ``cell_style(row, column)``,
    ``row_style(row)``, ``column_style(column)`` returning property dicts
    (``row-span`` and ``column-span`` join cells), and the selection
    predicates ``allow_cell_selection(row, column)`` and
    ``allow_row_selection(row)``.
    """

    def row_count(self) -> int:
        raise NotImplementedError

    def column_count(self) -> int:
        raise NotImplementedError

    def cell(self, row: int, column: int) -> Any:
        raise NotImplementedError


class HorizontalTableJoin:
    """Placeholder cell of a :class:`SimpleTableAdapter` merged with the cell on its left."""


class VerticalTableJoin:
    """Placeholder cell of a :class:`SimpleTableAdapter` merged with the cell above."""


class SimpleTableAdapter(TableAdapter):
    """Adapter over a list of rows; join placeholders span the cell before them."""

    def __init__(self, content: Sequence[Sequence[Any]]):
        self.content = [list(row) for row in content]
        self._columns = max((len(row) for row in self.content), default=0)

    def row_count(self) -> int:
        return len(self.content)

    def column_count(self) -> int:
        return self._columns

    def cell(self, row: int, column: int) -> Any:
        if 0 <= row < len(self.content) and 0 <= column < len(self.content[row]):
            return self.content[row][column]
        return None

    def cell_style(self, row: int, column: int) -> Optional[Dict[str, Any]]:
        column_span = 1
        while isinstance(self.cell(row, column + column_span), HorizontalTableJoin):
            column_span += 1
        row_span = 1
        while isinstance(self.cell(row + row_span, column), VerticalTableJoin):
            row_span += 1
        params: Dict[str, Any] = {}
        if row_span > 1:
            params["row-span"] = row_span
        if column_span > 1:
            params["column-span"] = column_span
        return params or None


class TextTableAdapter(TableAdapter):
    """Adapter over a list of rows of texts."""

    def __init__(self, content: Sequence[Sequence[str]]):
        self.content = [[str(cell) for cell in row] for row in content]
        self._columns = max((len(row) for row in self.content), default=0)

    def row_count(self) -> int:
        return len(self.content)

    def column_count(self) -> int:
        return self._columns

    def cell(self, row: int, column: int) -> Any:
        if 0 <= row < len(self.content) and 0 <= column < len(self.content[row]):
            return self.content[row][column]
        return None


def to_table_adapter(value: Any) -> TableAdapter:
    """Accept an adapter or a list of rows (rows of texts become a :class:`TextTableAdapter`)."""
    if isinstance(value, TableAdapter):
        return value
    if hasattr(value, "row_count") and hasattr(value, "column_count") and hasattr(value, "cell"):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(row, (list, tuple)) for row in value):
        if all(isinstance(cell, str) for row in value for cell in row):
            return TextTableAdapter(value)
        return SimpleTableAdapter(value)
    raise ValueError(f"{type(value).__name__} is not a table adapter")


def params_css(params: Dict[str, Any]) -> str:
    """Inline CSS of a property dict, e.g. a row or cell style returned by an adapter."""
    props = Properties()
    props.set_params(params)
    return properties_css(props)


# tags whose change rebuilds the table
_CONTENT_TAGS = frozenset({
    "content", "table-vertical-align", "row-style", "column-style", "cell-style", "cell-padding",
    "cell-padding-top", "cell-padding-right", "cell-padding-bottom", "cell-padding-left",
    "head-rows", "foot-rows", "head-style", "foot-style", "allow-selection",
    "current-style", "current-inactive-style",
})

_STYLE_TAGS = frozenset({"current-style", "current-inactive-style", "head-style", "foot-style"})
_OBJECT_TAGS = frozenset({"row-style", "column-style", "cell-style", "allow-selection"})
# handlers of a table with a cursor; they forward to the generic events
_CURSOR_ATTRIBUTES = frozenset({"onfocus", "onblur", "onkeydown"})


class TableView(View):
    """
    A ``<table>`` of adapter cells.

    Events: ``table-row-selected(row)``, ``table-cell-selected(row, column)``,
    ``table-row-clicked(row)`` and ``table-cell-clicked(row, column)``.
    """

    tag_name = "TableView"
    value_events = {
        "table-row-selected": 1,
        "table-cell-selected": 2,
        "table-row-clicked": 1,
        "table-cell-clicked": 2,
    }

    _ALIASES = {"head-height": "head-rows", "foot-height": "foot-rows"}

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def adapter(self) -> Optional[TableAdapter]:
        return self.get_raw("content")

    def selection_mode(self) -> int:
        return self.get("selection-mode")

    def current(self) -> CellIndex:
        return self.get_raw("current") or CellIndex()

    def focusable(self) -> bool:
        value = self._lookup("focusable")
        if value is None:
            return self.selection_mode() != NONE_SELECTION
        return bool(value)

    def get(self, tag: str) -> Any:
        tag = self.normalize_tag(tag)
        if tag == "current":
            return self.current()
        if tag in _OBJECT_TAGS or tag == "content":
            return self.get_raw(tag)
        return super().get(tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if value is None and (tag in _OBJECT_TAGS or tag in _STYLE_TAGS or tag in ("content", "current")):
            return self.remove_value(tag)
        try:
            if tag == "content":
                return self._store_raw(tag, to_table_adapter(value))
            if tag == "current":
                return self.store(tag, CellIndex.parse(value))
        except ValueError as e:
            invalid_property_value(tag, value, e)
            return None
        if tag in _STYLE_TAGS:
            if not isinstance(value, (str, dict, DataObject)):
                invalid_property_value(tag, value)
                return None
            if isinstance(value, DataObject):
                value = value.to_params()
            return self._store_raw(tag, value)
        if tag in _OBJECT_TAGS:
            return self._store_raw(tag, value)
        return super().set_value(tag, value)

    # --- ids ---

    def row_id(self, row: int) -> str:
        return f"{self.html_id}-{row}"

    def cell_id(self, row: int, column: int) -> str:
        return f"{self.html_id}-{row}-{column}"

    def _style_text(self, tag: str, default: str) -> str:
        value = self.get_raw(tag)
        if isinstance(value, str):
            resolved = self.session.resolve_string(value)
            if resolved:
                return resolved
        return default

    def current_style(self) -> str:
        return self._style_text("current-style", "ruiCurrentTableCellFocused")

    def current_inactive_style(self) -> str:
        return self._style_text("current-inactive-style", "ruiCurrentTableCell")

    # --- HTML ---

    def html_tag(self) -> str:
        return "table"

    def css_style(self, builder: CSSBuilder) -> None:
        builder.add("border-collapse", "collapse")
        super().css_style(builder)

    def html_properties(self, buffer: List[str]) -> None:
        adapter = self.adapter()
        if adapter is not None:
            buffer.append(f' data-rows="{adapter.row_count()}" data-columns="{adapter.column_count()}"')
        mode = self.selection_mode()
        if mode != NONE_SELECTION:
            buffer.append(' onfocus="tableViewFocusEvent(this, event)" onblur="tableViewBlurEvent(this, event)"')
            buffer.append(f' data-focusitemstyle="{escape(self.current_style())}"')
            buffer.append(f' data-bluritemstyle="{escape(self.current_inactive_style())}"')
            current = self.current()
            if mode == ROW_SELECTION:
                buffer.append(' data-selection="row" onkeydown="tableViewRowKeyDownEvent(this, event)"')
                if current.row >= 0:
                    buffer.append(f' data-current="{self.row_id(current.row)}"')
            else:
                buffer.append(' data-selection="cell" onkeydown="tableViewCellKeyDownEvent(this, event)"')
                if current.row >= 0 and current.column >= 0:
                    buffer.append(f' data-current="{self.cell_id(current.row, current.column)}"')
        super().html_properties(buffer)

    def own_attributes(self) -> FrozenSet[str]:
        if self.selection_mode() == NONE_SELECTION:
            return frozenset()
        return _CURSOR_ATTRIBUTES

    def html_subviews(self, buffer: List[str]) -> None:
        adapter = self.adapter()
        if adapter is None:
            return
        rows = adapter.row_count()
        columns = adapter.column_count()
        if rows == 0 or columns == 0:
            return

        with self.session.view_updates_ignored():
            self._column_group(adapter, columns, buffer)
            head = max(0, min(self.get("head-rows") or 0, rows))
            foot = max(0, min(self.get("foot-rows") or 0, rows - head))
            skip: Set[Tuple[int, int]] = set()
            if head:
                self._section("thead", "head-style", "th", 0, head, adapter, skip, buffer)
            self._section("tbody", None, "td", head, rows - foot, adapter, skip, buffer)
            if foot:
                self._section("tfoot", "foot-style", "td", rows - foot, rows, adapter, skip, buffer)

    def _column_group(self, adapter: TableAdapter, columns: int, buffer: List[str]) -> None:
        column_style = self.get_raw("column-style") or getattr(adapter, "column_style", None)
        if column_style is None:
            return
        style_of = column_style.column_style if hasattr(column_style, "column_style") else column_style
        buffer.append("<colgroup>")
        for column in range(columns):
            style = params_css(style_of(column) or {})
            buffer.append(f'<col style="{escape(style)}">' if style else "<col>")
        buffer.append("</colgroup>")

    def _section_start(self, tag: str, style_tag: Optional[str], buffer: List[str]) -> None:
        align = ENUM_PROPERTIES["table-vertical-align"].css(self.get("table-vertical-align"))
        value = self.get_raw(style_tag) if style_tag else None
        if isinstance(value, str):
            name = self.session.resolve_string(value)
            buffer.append(f'<{tag} class="{escape(name)}" style="vertical-align: {align};">')
        elif isinstance(value, dict):
            style = params_css(value)
            buffer.append(f'<{tag} style="vertical-align: {align}; {escape(style)}">')
        else:
            buffer.append(f'<{tag} style="vertical-align: {align};">')

    def _cell_padding_css(self) -> str:
        family = FAMILY_OF["cell-padding"]
        cells = family.effective_cells(self.family_values(family))
        padding = family.compose("cell-padding", cells)
        return f"padding: {padding.css()};" if padding is not None and not padding.is_empty else ""

    def _section(self, tag: str, style_tag: Optional[str], cell_tag: str, start: int, end: int,
                 adapter: TableAdapter, skip: Set[Tuple[int, int]], buffer: List[str]) -> None:
        if start >= end:
            return
        self._section_start(tag, style_tag, buffer)

        mode = self.selection_mode()
        current = self.current()
        focused = self.has_focus()
        row_style = self.get_raw("row-style") or getattr(adapter, "row_style", None)
        cell_style = self.get_raw("cell-style") or getattr(adapter, "cell_style", None)
        allow = self.get_raw("allow-selection") or adapter
        allow_cell = getattr(allow, "allow_cell_selection", None)
        allow_row = getattr(allow, "allow_row_selection", None)
        padding = self._cell_padding_css()
        current_class = self.current_style() if focused else self.current_inactive_style()

        for row in range(start, end):
            buffer.append(f'<tr id="{self.row_id(row)}"')
            if mode == ROW_SELECTION:
                if row == current.row:
                    buffer.append(f' class="{escape(current_class)}"')
                buffer.append(' onclick="tableRowClickEvent(this, event)"')
                if allow_row is not None and not allow_row(row):
                    buffer.append(' data-disabled="1"')
            if row_style is not None:
                style_of = row_style.row_style if hasattr(row_style, "row_style") else row_style
                style = params_css(style_of(row) or {})
                if style:
                    buffer.append(f' style="{escape(style)}"')
            buffer.append(">")

            for column in range(adapter.column_count()):
                if (row, column) in skip:
                    continue
                params = {}
                if cell_style is not None:
                    style_of = cell_style.cell_style if hasattr(cell_style, "cell_style") else cell_style
                    params = dict(style_of(row, column) or {})
                row_span = to_int(params.pop("row-span", 1))
                column_span = to_int(params.pop("column-span", 1))

                buffer.append(f'<{cell_tag} id="{self.cell_id(row, column)}" class="ruiView')
                if mode == CELL_SELECTION and row == current.row and column == current.column:
                    buffer.append(f" {escape(current_class)}")
                buffer.append('"')
                if mode == CELL_SELECTION:
                    buffer.append(' onclick="tableCellClickEvent(this, event)"')
                    if allow_cell is not None and not allow_cell(row, column):
                        buffer.append(' data-disabled="1"')
                if column_span > 1:
                    buffer.append(f' colspan="{column_span}"')
                if row_span > 1:
                    buffer.append(f' rowspan="{row_span}"')
                for r in range(row, row + max(row_span, 1)):
                    for c in range(column, column + max(column_span, 1)):
                        if (r, c) != (row, column):
                            skip.add((r, c))
                style = " ".join(part for part in (padding, params_css(params)) if part)
                if style:
                    buffer.append(f' style="{escape(style)}"')
                buffer.append(">")
                self._cell_html(adapter.cell(row, column), buffer)
                buffer.append(f"</{cell_tag}>")
            buffer.append("</tr>")
        buffer.append(f"</{tag}>")

    def _cell_html(self, value: Any, buffer: List[str]) -> None:
        if value is None or isinstance(value, (HorizontalTableJoin, VerticalTableJoin)):
            return
        if isinstance(value, View):
            value.parent_id = self.html_id
            value.view_html(buffer)
        elif isinstance(value, bool):
            buffer.append("&#x2611;" if value else "&#x2610;")
        elif isinstance(value, Color):
            buffer.append('<div style="display: inline; height: 1em; background-color: '
                          f'{value.css()}">&nbsp;&nbsp;&nbsp;&nbsp;</div> {value}')
            name = color_name(value)
            if name:
                buffer.append(f" ({name})")
        elif isinstance(value, float):
            buffer.append(format_number(value))
        else:
            buffer.append(escape(str(value)))

    def reload(self) -> None:
        """Rebuild the table after the adapter data changed."""
        if self.created:
            self._update_content()

    def reload_cell(self, row: int, column: int) -> None:
        """Rewrite one cell after its adapter data changed."""
        adapter = self.adapter()
        if self.created and adapter is not None:
            buffer: List[str] = []
            with self.session.view_updates_ignored():
                self._cell_html(adapter.cell(row, column), buffer)
            self.session.update_inner_html(self.cell_id(row, column), "".join(buffer))

    def _update_content(self) -> None:
        adapter = self.adapter()
        with self.update_script():
            if adapter is not None:
                self.session.update_property(self.html_id, "data-rows", str(adapter.row_count()))
                self.session.update_property(self.html_id, "data-columns", str(adapter.column_count()))
            else:
                self.session.remove_property(self.html_id, "data-rows")
                self.session.remove_property(self.html_id, "data-columns")
        self.update_inner_html()

    # --- changes ---

    def property_changed(self, tag: str) -> None:
        super().property_changed(tag)
        if tag == "current":
            current = self.current()
            mode = self.selection_mode()
            if mode == CELL_SELECTION:
                self.fire_event("table-cell-selected", current.row, current.column)
            elif mode == ROW_SELECTION:
                self.fire_event("table-row-selected", current.row)

    def changed(self, tag: str) -> None:
        session = self.session
        html_id = self.html_id
        if tag in _CONTENT_TAGS:
            self._update_content()
        elif tag == "current":
            current = self.current()
            mode = self.selection_mode()
            if mode == CELL_SELECTION:
                session.call_func("setTableCellCursorByID", html_id, current.row, current.column)
            elif mode == ROW_SELECTION:
                session.call_func("setTableRowCursorByID", html_id, current.row)
        elif tag == "selection-mode":
            self._update_selection_mode()
        else:
            super().changed(tag)

    def _update_selection_mode(self) -> None:
        session = self.session
        html_id = self.html_id
        mode = self.selection_mode()
        with self.update_script():
            self._update_tab_index()
            if mode == NONE_SELECTION:
                for name in ("data-current", "onfocus", "onblur", "onkeydown", "data-selection"):
                    session.remove_property(html_id, name)
                for tag, info in EVENTS.items():
                    if info.attribute in _CURSOR_ATTRIBUTES and self.get_raw(tag):
                        session.update_property(html_id, info.attribute, f"{info.handler}(this, event)")
            else:
                current = self.current()
                session.update_property(html_id, "onfocus", "tableViewFocusEvent(this, event)")
                session.update_property(html_id, "onblur", "tableViewBlurEvent(this, event)")
                session.update_property(html_id, "data-focusitemstyle", self.current_style())
                session.update_property(html_id, "data-bluritemstyle", self.current_inactive_style())
                if mode == CELL_SELECTION:
                    session.update_property(html_id, "data-selection", "cell")
                    session.update_property(html_id, "onkeydown", "tableViewCellKeyDownEvent(this, event)")
                    if current.row >= 0 and current.column >= 0:
                        session.update_property(html_id, "data-current", self.cell_id(current.row, current.column))
                    else:
                        session.remove_property(html_id, "data-current")
                else:
                    session.update_property(html_id, "data-selection", "row")
                    session.update_property(html_id, "onkeydown", "tableViewRowKeyDownEvent(this, event)")
                    if current.row >= 0:
                        session.update_property(html_id, "data-current", self.row_id(current.row))
                    else:
                        session.remove_property(html_id, "data-current")
        self.update_inner_html()

    # --- commands from the browser ---

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "currentRow":
            row = data.property_int("row")
            current = self.current()
            if row is not None and row != current.row:
                self.set_raw("current", CellIndex(row, current.column))
                self.run_change_listener("current")
                self.fire_event("table-row-selected", row)
        elif command == "currentCell":
            row = data.property_int("row")
            column = data.property_int("column")
            if row is not None and column is not None:
                current = CellIndex(row, column)
                if current != self.current():
                    self.set_raw("current", current)
                    self.run_change_listener("current")
                    self.fire_event("table-cell-selected", row, column)
        elif command == "rowClick":
            row = data.property_int("row")
            if row is not None:
                self.fire_event("table-row-clicked", row)
        elif command == "cellClick":
            row = data.property_int("row")
            column = data.property_int("column")
            if row is not None and column is not None:
                self.fire_event("table-cell-clicked", row, column)
        else:
            return super().handle_command(command, data)
        return True
