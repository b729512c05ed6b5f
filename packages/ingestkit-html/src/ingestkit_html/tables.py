"""HTMLTableConsumer -- reads plain HTML tables into a worksheet.

Tag meanings:

- ``table``: a block of rows, followed by one blank separator row.
- ``tr``: one worksheet row; the column is reset at its start.  Text in a
  row that sits outside its cells is dropped.
- ``td`` / ``th``: one cell; the column advances by ``colspan`` (capped at
  1000, as browsers do) at its end.
- ``br``: a line break inside the pending cell text.
- ``p``, ``div``, ``h1``-``h6``, ``li``, ``caption``, ``body``: outside a
  table cell, their text becomes its own row in the first column.
- ``head``, ``script``, ``style``, ``title``, ``noscript``, ``template``:
  skipped with their content.

Tables nested inside a cell are flattened into that cell's text.

Only the outermost block walks its own subtree.  Nested blocks and
everything inside a cell are walked by the engine's iterative loop, and
the end of a nested block is detected when text from a different block
arrives.  Handler recursion therefore stays a few levels deep however deep
the markup is nested.

All state lives in the :class:`TraversalState`, so one consumer may be
shared by concurrent loads.
"""

from __future__ import annotations

import itertools
import re
from typing import TYPE_CHECKING

from openpyxl import Workbook

from ingestkit_html.handlers import (
    Continuation,
    ElementHandler,
    HandlerRegistry,
    skip_element,
    traverse_children,
)
from ingestkit_html.sink import WorksheetSink

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from ingestkit_html.nodes import TextNode
    from ingestkit_html.state import TraversalState

_WHITESPACE_RE = re.compile(r"\s+")

_SKIPPED_TAGS = ("head", "script", "style", "title", "noscript", "template")
_BLOCK_TAGS = (
    "body", "p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "caption",
)
_CELL_TAGS = ("td", "th")

_MAX_COLSPAN = 1000

# context key: element owning the text currently in the buffer
_OWNER_KEY = "html_table.text_owner"


class HTMLTableConsumer:
    """Consumer mapping HTML tables onto worksheet rows and columns.

    Parameters
    ----------
    sheet_title:
        Rename the target sheet to this title.  The workbook's active
        sheet is used (created if the workbook has none).
    log_cell_values:
        Log cell contents at DEBUG level.
    """

    def __init__(
        self,
        sheet_title: str | None = None,
        log_cell_values: bool = False,
    ) -> None:
        self.sheet_title = sheet_title
        self.log_cell_values = log_cell_values

        handlers: dict[str, ElementHandler] = {
            "table": self.table,
            "tr": self.row,
            "br": self.line_break,
        }
        handlers.update({tag: self.cell for tag in _CELL_TAGS})
        handlers.update({tag: self.block for tag in _BLOCK_TAGS})
        handlers.update({tag: skip_element for tag in _SKIPPED_TAGS})
        self._registry = HandlerRegistry(
            handlers, default=traverse_children, text=self.text
        )

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    def prepare(self, workbook: Workbook) -> WorksheetSink:
        worksheet = workbook.active
        if worksheet is None:
            worksheet = workbook.create_sheet()
        if self.sheet_title:
            worksheet.title = self.sheet_title
        return WorksheetSink(worksheet, log_values=self.log_cell_values)

    # ------------------------------------------------------------------
    # Element handlers
    # ------------------------------------------------------------------

    def table(self, element: HtmlElement, state: TraversalState) -> Continuation:
        if _in_cell(element):
            return self._inline(element, state, "\n")

        if state.flush():
            state.advance_row()
        state.reset_column()
        state.descend(element)
        if state.flush():
            state.advance_row()
        state.reset_column()
        state.advance_row()
        return Continuation.STOP

    def row(self, element: HtmlElement, state: TraversalState) -> Continuation:
        if _in_cell(element):
            return self._inline(element, state, "\n")

        if state.flush():
            state.advance_row()
        state.reset_column()
        state.descend(element)
        # text after the last cell
        state.take_buffer()
        state.advance_row()
        return Continuation.STOP

    def cell(self, element: HtmlElement, state: TraversalState) -> Continuation:
        if _in_cell(element):
            return self._inline(element, state, " ")

        # text between the row start and this cell
        state.take_buffer()
        state.descend(element)
        state.flush()
        state.advance_column(_colspan(element))
        return Continuation.STOP

    def block(self, element: HtmlElement, state: TraversalState) -> Continuation:
        if _in_cell(element):
            return self._inline(element, state, "\n")

        if state.flush():
            state.advance_row()
        if _in_block(element):
            return Continuation.TRAVERSE_CHILDREN

        state.descend(element)
        if state.flush():
            state.advance_row()
        return Continuation.STOP

    def line_break(self, element: HtmlElement, state: TraversalState) -> Continuation:
        state.append("\n")
        return Continuation.STOP

    # ------------------------------------------------------------------
    # Text handler
    # ------------------------------------------------------------------

    def text(self, node: TextNode, state: TraversalState) -> None:
        owner = _text_owner(node.parent)
        if state.buffer and state.context.get(_OWNER_KEY) is not owner:
            # a nested block ended since the buffered text was read
            if state.flush():
                state.advance_row()
        state.context[_OWNER_KEY] = owner

        collapsed = _WHITESPACE_RE.sub(" ", node.text)
        if not state.buffer or state.buffer.endswith(("\n", " ")):
            collapsed = collapsed.lstrip(" ")
        if collapsed:
            state.append(collapsed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _inline(
        self, element: HtmlElement, state: TraversalState, separator: str
    ) -> Continuation:
        """Fold *element* into the enclosing cell's text."""
        if state.buffer and not state.buffer.endswith(("\n", " ")):
            state.append(separator)
        return Continuation.TRAVERSE_CHILDREN


def _in_cell(element: HtmlElement) -> bool:
    return next(element.iterancestors(*_CELL_TAGS), None) is not None


def _in_block(element: HtmlElement) -> bool:
    return next(element.iterancestors(*_BLOCK_TAGS), None) is not None


def _text_owner(element: HtmlElement) -> HtmlElement | None:
    """Return the outermost cell holding *element*, else its nearest block."""
    cell = None
    block = None
    for candidate in itertools.chain((element,), element.iterancestors()):
        if candidate.tag in _CELL_TAGS:
            cell = candidate
        elif block is None and candidate.tag in _BLOCK_TAGS:
            block = candidate
    return cell if cell is not None else block


def _colspan(element: HtmlElement) -> int:
    try:
        span = int(element.get("colspan", "1"))
    except ValueError:
        return 1
    return min(_MAX_COLSPAN, max(1, span))
