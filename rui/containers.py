# rui/containers.py
"""
Views that hold other views.

A :class:`ViewsContainer` owns an ordered child list. Once rendered, an
append becomes one ``appendToInnerHTML``, an insert or a content change one
``updateInnerHTML`` and a removal one ``removeView`` call. Writing
``disabled`` on a container writes it on every child, and so on down the tree.
"""
import logging
from typing import Any, FrozenSet, List, Optional, Sequence

from .css import CSSBuilder
from .data import DataObject
from .properties import ENUM_PROPERTIES, invalid_property_value
from .units import SizeUnit, to_size
from .view import View, escape, to_view

logger = logging.getLogger(__name__)


def _content_views(session, value: Any) -> Optional[List[View]]:
    if isinstance(value, (list, tuple)):
        items: Sequence[Any] = value
    else:
        items = [value]
    views = []
    for item in items:
        view = to_view(session, item)
        if view is None:
            return None
        views.append(view)
    return views


class ViewsContainer(View):
    """
    A plain ``div`` holding a list of views.

    The ``content`` property accepts a view, a text (shown by a
    :class:`rui.widgets.TextView`), a data object describing a view, or a
    list of those.
    """

    tag_name = "ViewsContainer"

    def __init__(self, session, params=None):
        self._views: List[View] = []
        super().__init__(session, params)

    def views(self) -> List[View]:
        return list(self._views)

    def subviews(self) -> List[View]:
        return list(self._views)

    def views_count(self) -> int:
        return len(self._views)

    def index_of(self, view: View) -> int:
        for i, child in enumerate(self._views):
            if child is view:
                return i
        return -1

    def _adopt(self, view: View) -> None:
        view.parent_id = self.html_id
        if self.is_disabled():
            view.set("disabled", True)

    def append(self, view: View) -> None:
        """Add ``view`` after the last child."""
        self._adopt(view)
        self._views.append(view)
        if self.created and not self.session.ignore_view_updates():
            self.session.append_to_inner_html(self.html_id, view.html())
        self.run_change_listener("content")

    def insert(self, view: View, index: int) -> None:
        """
        Insert ``view`` before the child at ``index``.

        :param index: Clamped to ``0..len(views)``; a larger index appends.
        """
        index = max(0, min(index, len(self._views)))
        self._adopt(view)
        self._views.insert(index, view)
        if self.created and not self.session.ignore_view_updates():
            self.update_inner_html()
        self.run_change_listener("content")

    def remove(self, index) -> Optional[View]:
        """
        Remove the child at ``index``.

        A text index is taken as a property tag, so ``remove("width")`` still
        removes a property.

        :return: The removed view with no parent, or None if ``index`` is out of range.
        """
        if isinstance(index, str):
            super().remove(index)
            return None
        if not 0 <= index < len(self._views):
            return None
        view = self._views.pop(index)
        view.parent_id = ""
        if self.created and not self.session.ignore_view_updates():
            self.session.call_func("removeView", view.html_id)
        self.run_change_listener("content")
        return view

    def remove_view(self, view: View) -> Optional[View]:
        index = self.index_of(view)
        return self.remove(index) if index >= 0 else None

    def remove_by_id(self, view_id: str) -> Optional[View]:
        """Remove the child whose ``id`` property is ``view_id``."""
        for i, child in enumerate(self._views):
            if child.id == view_id:
                return self.remove(i)
        return None

    def get(self, tag: str) -> Any:
        if self.normalize_tag(tag) == "content":
            return self.views()
        return super().get(tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag == "content":
            return self._set_content(value)
        if tag == "disabled":
            was_disabled = self.is_disabled()
            changed = super().set_value(tag, value)
            if changed and self.is_disabled() != was_disabled:
                for child in self._views:
                    if value is None:
                        child.remove("disabled")
                    else:
                        child.set("disabled", self.is_disabled())
            return changed
        return super().set_value(tag, value)

    def _set_content(self, value: Any) -> Optional[List[str]]:
        if value is None:
            views: List[View] = []
        else:
            views = _content_views(self.session, value)
            if views is None:
                invalid_property_value("content", value)
                return None
        for child in self._views:
            child.parent_id = ""
        self._views = []
        for view in views:
            self._adopt(view)
            self._views.append(view)
        return ["content"]

    def changed(self, tag: str) -> None:
        if tag == "content":
            self.update_inner_html()
        else:
            super().changed(tag)

    def html_subviews(self, buffer: List[str]) -> None:
        for view in self._views:
            view.view_html(buffer)


def cell_sizes_css(value: Any) -> str:
    """
    ``grid-template-*`` text of the cell sizes.

    One size repeats to fill the grid, equal sizes repeat ``n`` times and
    other lists are written as they are. Only ``auto`` sizes write nothing.
    """
    if value is None:
        return ""
    sizes = [value] if isinstance(value, SizeUnit) else list(value)
    if not sizes or all(size.is_auto for size in sizes):
        return ""
    if len(sizes) == 1:
        return f"repeat(auto-fill, {sizes[0].css()})"
    if all(size == sizes[0] for size in sizes):
        return f"repeat({len(sizes)}, {sizes[0].css()})"
    return " ".join(size.css() for size in sizes)


class GridLayout(ViewsContainer):
    """
    A CSS grid. Children choose their cell with the ``row`` and ``column``
    properties, a :class:`rui.bounds.Range` spanning several cells.
    """

    tag_name = "GridLayout"

    _ALIASES = {
        "gap": "grid-column-gap",
        "column-gap": "grid-column-gap",
        "row-gap": "grid-row-gap",
    }

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag in ("cell-width", "cell-height") and isinstance(value, str) and "," in value:
            try:
                value = tuple(to_size(part.strip()) for part in value.split(","))
            except ValueError as e:
                invalid_property_value(tag, value, e)
                return None
        return super().set_value(tag, value)

    def tag_css(self, tag: str):
        if tag == "cell-width":
            return [("grid-template-columns", cell_sizes_css(self._lookup(tag)))]
        if tag == "cell-height":
            return [("grid-template-rows", cell_sizes_css(self._lookup(tag)))]
        return super().tag_css(tag)

    def css_style(self, builder: CSSBuilder) -> None:
        builder.add("display", "grid")
        super().css_style(builder)


class ListLayout(ViewsContainer):
    """A flex box laid out along ``orientation``, optionally wrapping (``list-wrap``)."""

    tag_name = "ListLayout"

    _ALIASES = {
        "gap": "list-column-gap",
        "row-gap": "list-row-gap",
        "column-gap": "list-column-gap",
        "wrap": "list-wrap",
    }

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def css_style(self, builder: CSSBuilder) -> None:
        builder.add("display", "flex")
        builder.add("flex-direction", ENUM_PROPERTIES["orientation"].css(self.get("orientation")))
        super().css_style(builder)


class DetailsView(ViewsContainer):
    """
    A ``<details>`` element. ``summary`` is always visible, the content only
    while ``expanded``.
    """

    tag_name = "DetailsView"

    def html_tag(self) -> str:
        return "details"

    def summary_view(self) -> Optional[View]:
        summary = self.get_raw("summary")
        return summary if isinstance(summary, View) else None

    def subviews(self) -> List[View]:
        summary = self.summary_view()
        return ([summary] if summary is not None else []) + self.views()

    def set_value(self, tag: str, value: Any) -> Optional[List[str]]:
        if tag == "summary":
            if value is None:
                return self.remove_value(tag)
            if isinstance(value, DataObject):
                value = to_view(self.session, value)
            if isinstance(value, View):
                value.parent_id = self.html_id
                return self._store_raw(tag, value)
            if isinstance(value, str):
                return self.store(tag, value) if value else self.remove_value(tag)
            invalid_property_value(tag, value)
            return None
        return super().set_value(tag, value)

    def get(self, tag: str) -> Any:
        if self.normalize_tag(tag) == "summary":
            return self.get_raw("summary")
        return super().get(tag)

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        buffer.append(' ontoggle="detailsEvent(this)"')
        if self.get("expanded"):
            buffer.append(" open")

    def html_subviews(self, buffer: List[str]) -> None:
        summary = self.get_raw("summary")
        if isinstance(summary, View):
            buffer.append('<summary><div style="display: inline-block;">')
            summary.view_html(buffer)
            buffer.append("</div></summary>")
        elif summary:
            buffer.append(f"<summary>{escape(summary)}</summary>")
        else:
            buffer.append("<summary></summary>")
        super().html_subviews(buffer)

    def changed(self, tag: str) -> None:
        if tag == "summary":
            self.update_inner_html()
        elif tag == "expanded":
            if self.get("expanded"):
                self.session.update_property(self.html_id, "open", "")
            else:
                self.session.remove_property(self.html_id, "open")
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "details-open":
            opened = data.property_int("open")
            if opened is not None:
                self.set_raw("expanded", opened != 0)
                self.run_change_listener("expanded")
            return True
        return super().handle_command(command, data)


class ColumnLayout(ViewsContainer):
    """
    Flows its children through newspaper-like columns. ``column-count`` 0
    lets the browser choose from ``column-width``; ``column-separator`` draws
    a rule between the columns.
    """

    tag_name = "ColumnLayout"

    _ALIASES = {"gap": "column-gap", "count": "column-count"}

    def normalize_tag(self, tag: str) -> str:
        tag = super().normalize_tag(tag)
        return self._ALIASES.get(tag, tag)

    def tag_css(self, tag: str):
        if tag == "column-count":
            count = self._lookup(tag)
            if count is None:
                return [("column-count", "")]
            return [("column-count", str(count) if count > 0 else "auto")]
        return super().tag_css(tag)


class Button(ListLayout):
    """
    A focusable row of views styled as a push button (the ``ruiButton`` and
    ``ruiDisabledButton`` theme styles). Clicks arrive as ``click-event``.
    """

    tag_name = "Button"
    default_focusable = True

    def __init__(self, session, params=None):
        defaults = {"style": "ruiButton", "style-disabled": "ruiDisabledButton", "orientation": "start-to-end"}
        super().__init__(session, {**defaults, **(params or {})})

    def css_style(self, builder: CSSBuilder) -> None:
        super().css_style(builder)
        builder.add("justify-content", "center")
        builder.add("align-items", "center")


_CHECKBOX_BOX = '<rect x="0.5" y="0.5" width="15" height="15" rx="3" fill="none" stroke="currentColor"/>'
CHECKBOX_OFF_IMAGE = f'<svg width="16" height="16" viewBox="0 0 16 16">{_CHECKBOX_BOX}</svg>'
CHECKBOX_ON_IMAGE = (f'<svg width="16" height="16" viewBox="0 0 16 16">{_CHECKBOX_BOX}'
                     '<path d="M4 8l3 3 5-6" fill="none" stroke="currentColor" stroke-width="2"/></svg>')

# keys that toggle a focused checkbox
_TOGGLE_CODES = ("Enter", "Space")


class Checkbox(ViewsContainer):
    """
    A check mark followed by its content views.

    A click, or Enter or Space while focused, toggles ``checked``; every
    change of ``checked`` fires ``checkbox-event`` with the new state.
    ``checkbox-horizontal-align`` puts the mark left or right of the content.
    """

    tag_name = "Checkbox"
    system_class = "ruiCheckbox"
    default_focusable = True
    value_events = {"checkbox-event": 1}
    value_tags = {"checked": "checkbox-event"}

    def is_checked(self) -> bool:
        return bool(self.get("checked"))

    def own_attributes(self) -> FrozenSet[str]:
        return frozenset({"onclick", "onkeydown"})

    def _mark_right(self) -> bool:
        return self.get("checkbox-horizontal-align") == 1

    def css_style(self, builder: CSSBuilder) -> None:
        builder.add("display", "grid")
        builder.add("grid-template-columns", "1fr auto" if self._mark_right() else "auto 1fr")
        gap = self.session.constant("ruiCheckboxGap")
        if gap:
            builder.add("column-gap", gap)
        builder.add("align-items", "stretch")
        builder.add("justify-items", "stretch")
        super().css_style(builder)

    def html_properties(self, buffer: List[str]) -> None:
        super().html_properties(buffer)
        buffer.append(' onclick="clickEvent(this, event)" onkeydown="keyDownEvent(this, event)"')

    def mark_html(self) -> str:
        return CHECKBOX_ON_IMAGE if self.is_checked() else CHECKBOX_OFF_IMAGE

    def html_subviews(self, buffer: List[str]) -> None:
        mark_column, content_column = (2, 1) if self._mark_right() else (1, 2)
        buffer.append(f'<div id="{self.html_id}checkbox" style="display: grid; align-items: center;'
                      f' grid-column: {mark_column}; grid-row: 1;">')
        buffer.append(self.mark_html())
        buffer.append(f'</div><div id="{self.html_id}content" style="display: grid;'
                      f' grid-column: {content_column}; grid-row: 1;">')
        super().html_subviews(buffer)
        buffer.append("</div>")

    def append(self, view: View) -> None:
        self._adopt(view)
        self._views.append(view)
        if self.created and not self.session.ignore_view_updates():
            self.session.append_to_inner_html(self.html_id + "content", view.html())
        self.run_change_listener("content")

    def changed(self, tag: str) -> None:
        if tag == "checked":
            self.session.update_inner_html(self.html_id + "checkbox", self.mark_html())
        elif tag == "checkbox-horizontal-align":
            self.session.update_property(self.html_id, "style", self.inline_style())
            self.update_inner_html()
        else:
            super().changed(tag)

    def handle_command(self, command: str, data: DataObject) -> bool:
        if command == "click-event" and not self.is_disabled():
            self.set("checked", not self.is_checked())
        elif command == "key-down-event" and not self.is_disabled() \
                and data.property_value("code") in _TOGGLE_CODES:
            self.set("checked", not self.is_checked())
        return super().handle_command(command, data)


def view_by_id(root: Optional[View], view_id: str) -> Optional[View]:
    """
    Find the view whose ``id`` property is ``view_id`` in the tree of ``root``.

    ``view_id`` may be a path ``"a/b/c"``: each part is searched below the
    view found for the previous one.
    """
    if root is None:
        return None
    view = root
    for part in view_id.split("/"):
        if not part:
            continue
        view = _find(view, part)
        if view is None:
            logger.debug("View %r not found", view_id)
            return None
    return view


def _find(view: View, view_id: str) -> Optional[View]:
    if view.id == view_id:
        return view
    for child in view.subviews():
        found = _find(child, view_id)
        if found is not None:
            return found
    return None
