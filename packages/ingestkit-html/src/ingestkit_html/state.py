"""Mutable traversal state shared by every handler during one load."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from openpyxl.utils.cell import column_index_from_string, get_column_letter

from ingestkit_html.errors import SinkWriteError

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from ingestkit_html.sink import CellSink
    from ingestkit_html.traversal import TraversalEngine

# XFD, the last column a worksheet can address
MAX_COLUMN_INDEX = 18278


class TraversalState:
    """Current row, current column, and pending cell buffer for one load.

    A fresh instance is created per load and passed to every handler call.
    It is not thread-safe and must never be shared between loads.

    Parameters
    ----------
    sink:
        Destination for flushed cells.
    row:
        Starting row (1-based).
    column:
        Starting column label; also the column :meth:`reset_column`
        returns to.
    """

    def __init__(
        self,
        sink: CellSink,
        row: int = 1,
        column: str = "A",
        buffer: str = "",
    ) -> None:
        if row < 1:
            raise ValueError(f"row must be >= 1, got {row}")
        self.sink = sink
        self.row = row
        self.column = column.upper()
        self.buffer = buffer
        self.first_column = self.column
        self.cells_written = 0
        # element nesting depth of the node currently being dispatched
        self.depth = 0
        # per-load values a consumer carries between handler calls
        self.context: dict[str, Any] = {}
        self._engine: TraversalEngine | None = None

    def __repr__(self) -> str:
        return (
            f"TraversalState(row={self.row}, column={self.column!r}, "
            f"buffer={self.buffer!r})"
        )

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def coordinate(self) -> str:
        return f"{self.column}{self.row}"

    def advance_row(self, step: int = 1) -> int:
        self.row = max(1, self.row + step)
        return self.row

    def advance_column(self, step: int = 1) -> str:
        """Move *step* columns right (left when negative), never before A.

        Raises ``SinkWriteError`` when the move would pass column XFD; the
        position is left unchanged.
        """
        index = max(1, column_index_from_string(self.column) + step)
        if index > MAX_COLUMN_INDEX:
            raise SinkWriteError(
                f"Column index {index} is past the last worksheet column (XFD)",
                cell=self.coordinate,
            )
        self.column = get_column_letter(index)
        return self.column

    def reset_column(self) -> str:
        self.column = self.first_column
        return self.column

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def append(self, text: str) -> None:
        self.buffer += text

    def take_buffer(self) -> str:
        """Return the pending buffer and clear it."""
        content, self.buffer = self.buffer, ""
        return content

    def flush(self) -> bool:
        """Commit the buffer at the current position if it holds content.

        Surrounding whitespace is stripped before the commit.  Returns
        True when a cell was written.  A ``SinkWriteError`` from the sink
        propagates and leaves the buffer untouched.
        """
        content = self.buffer.strip()
        if not content:
            self.buffer = ""
            return False
        self.sink.commit(self.column, self.row, content)
        self.buffer = ""
        self.cells_written += 1
        return True

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def bind(self, engine: TraversalEngine) -> None:
        self._engine = engine

    def descend(self, element: HtmlElement) -> None:
        """Walk *element*'s children with this state.

        For handlers that consume their own subtree (and then return
        ``Continuation.STOP`` so the engine does not walk it twice).
        """
        if self._engine is None:
            raise RuntimeError("TraversalState is not bound to a TraversalEngine")
        self._engine.traverse(element, self)
