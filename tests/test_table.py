import unittest

from rui.data import parse_data_text
from rui.table import (
    CellIndex, HorizontalTableJoin, SimpleTableAdapter, TableView, TextTableAdapter, VerticalTableJoin,
    to_table_adapter,
)

from tests.fakes import make_session

GRID = [["a", "b", "c"], ["d", "e", "f"], ["g", "h", "i"]]


def message(command, view, fields):
    return parse_data_text(f"{command}{{id={view.html_id}, {fields}}}")


class TestAdapters(unittest.TestCase):

    def test_to_table_adapter(self):
        self.assertIsInstance(to_table_adapter(GRID), TextTableAdapter)
        self.assertIsInstance(to_table_adapter([["a", 1]]), SimpleTableAdapter)
        adapter = TextTableAdapter(GRID)
        self.assertIs(to_table_adapter(adapter), adapter)
        with self.assertRaises(ValueError):
            to_table_adapter(42)

    def test_joins(self):
        adapter = SimpleTableAdapter([
            ["wide", HorizontalTableJoin(), "x"],
            ["tall", "y", "z"],
            [VerticalTableJoin(), "u", "v"],
        ])
        self.assertEqual(adapter.cell_style(0, 0), {"column-span": 2})
        self.assertEqual(adapter.cell_style(1, 0), {"row-span": 2})
        self.assertIsNone(adapter.cell_style(1, 1))

    def test_cell_index(self):
        self.assertEqual(CellIndex.parse("1,2"), CellIndex(1, 2))
        self.assertEqual(CellIndex.parse((3, 4)), CellIndex(3, 4))
        self.assertEqual(CellIndex.parse(5), CellIndex(5, -1))


class TestCellSelection(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.selected = []
        self.table = TableView(self.session, {"selection-mode": "cell", "content": GRID})
        self.table.set("table-cell-selected", lambda view, row, column: self.selected.append((view, row, column)))

    def test_current_cell_from_browser(self):
        self.table.handle_command("currentCell", message("currentCell", self.table, "row=1, column=2"))
        self.assertEqual(self.table.current(), CellIndex(1, 2))
        self.assertEqual(self.selected, [(self.table, 1, 2)])

        self.table.handle_command("currentCell", message("currentCell", self.table, "row=1, column=2"))
        self.assertEqual(self.selected, [(self.table, 1, 2)])

    def test_html(self):
        self.table.set("current", "1,2")
        html = self.table.html()
        self.assertTrue(html.startswith(f'<table id="{self.table.html_id}"'))
        self.assertIn(' data-rows="3" data-columns="3"', html)
        self.assertIn(' data-selection="cell"', html)
        self.assertIn(f' data-current="{self.table.html_id}-1-2"', html)
        self.assertIn(f'<td id="{self.table.html_id}-1-2" class="ruiView ruiCurrentTableCell"'
                      ' onclick="tableCellClickEvent(this, event)">f</td>', html)
        self.assertIn("<tbody ", html)
        self.assertNotIn("<thead", html)

    def test_focus_listeners_share_cursor_handlers(self):
        focused = []
        self.table.set("focus-event", lambda: focused.append(True))
        self.table.set("key-down-event", lambda event: None)
        html = self.table.html()
        self.assertEqual(html.count(" onfocus="), 1)
        self.assertEqual(html.count(" onkeydown="), 1)
        self.assertIn(' onfocus="tableViewFocusEvent(this, event)"', html)
        self.assertNotIn(' onfocus="focusEvent(this, event)"', html)

        self.table.set("lost-focus-event", lambda: None)
        self.assertEqual(self.session.bridge.scripts, [])
        self.table.handle_command("focus-event", message("focus-event", self.table, "x=0"))
        self.assertEqual(focused, [True])

        self.table.set("selection-mode", "none")
        script = "".join(self.session.bridge.scripts)
        self.assertIn("element.setAttribute('onfocus', 'focusEvent(this, event)');", script)
        self.assertIn("element.setAttribute('onblur', 'blurEvent(this, event)');", script)

    def test_program_current(self):
        self.table.html()
        self.assertTrue(self.table.set("current", (2, 0)))
        self.assertEqual(self.selected, [(self.table, 2, 0)])
        self.assertEqual(self.session.bridge.scripts[-1],
                         f"setTableCellCursorByID('{self.table.html_id}', 2, 0);")

    def test_cell_click(self):
        clicks = []
        self.table.set("table-cell-clicked", lambda view, row, column: clicks.append((row, column)))
        self.table.handle_command("cellClick", message("cellClick", self.table, "row=0, column=1"))
        self.assertEqual(clicks, [(0, 1)])


class TestRowSelection(unittest.TestCase):

    def setUp(self):
        self.session = make_session()
        self.table = TableView(self.session, {"selection-mode": "row", "content": GRID, "head-rows": 1})

    def test_current_row(self):
        rows = []
        self.table.set("table-row-selected", lambda view, row: rows.append(row))
        self.table.handle_command("currentRow", message("currentRow", self.table, "row=2"))
        self.assertEqual(self.table.current().row, 2)
        self.assertEqual(rows, [2])

    def test_row_click(self):
        clicks = []
        self.table.set("table-row-clicked", lambda view, row: clicks.append(row))
        self.table.handle_command("rowClick", message("rowClick", self.table, "row=1"))
        self.assertEqual(clicks, [1])

    def test_html(self):
        html = self.table.html()
        self.assertIn("<thead ", html)
        self.assertIn(f'<th id="{self.table.html_id}-0-0" class="ruiView">a</th>', html)
        self.assertIn(f'<tr id="{self.table.html_id}-1" onclick="tableRowClickEvent(this, event)">', html)


class TestJoinedCells(unittest.TestCase):

    def test_colspan(self):
        session = make_session()
        table = TableView(session, {"content": [["wide", HorizontalTableJoin()], ["x", "y"]]})
        html = table.html()
        self.assertIn(f'<td id="{table.html_id}-0-0" class="ruiView" colspan="2">wide</td>', html)
        self.assertNotIn(f'id="{table.html_id}-0-1"', html)
        self.assertIn(f'<td id="{table.html_id}-1-1" class="ruiView">y</td>', html)

    def test_content_change_rebuilds(self):
        session = make_session()
        table = TableView(session, {"content": GRID})
        table.html()
        table.set("content", [["z"]])
        self.assertTrue(any(f"updateInnerHTML('{table.html_id}'" in script for script in session.bridge.scripts))


if __name__ == "__main__":
    unittest.main()
