"""Cell sink contract and the openpyxl worksheet implementation.

Handlers commit finished cells through a :class:`CellSink`; the traversal
engine itself never writes cells.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from openpyxl.utils.cell import column_index_from_string
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from ingestkit_html.errors import SinkWriteError

logger = logging.getLogger("ingestkit_html")


@runtime_checkable
class CellSink(Protocol):
    """Destination for finished cell content."""

    def commit(self, column: str, row: int, content: str) -> None:
        """Write *content* at ``(column, row)``.

        Raises ``SinkWriteError`` if the destination rejects the value.
        """
        ...


class WorksheetSink:
    """Write cells into an openpyxl worksheet.

    Parameters
    ----------
    worksheet:
        Target worksheet.
    log_values:
        Include cell contents in DEBUG logs.  Off by default so document
        text never reaches the logs.
    """

    def __init__(self, worksheet: Worksheet, log_values: bool = False) -> None:
        self.worksheet = worksheet
        self.log_values = log_values
        self.cells_written = 0

    def commit(self, column: str, row: int, content: str) -> None:
        coordinate = f"{column}{row}"
        try:
            col_idx = column_index_from_string(column)
            if row < 1:
                raise ValueError("Row numbers must be at least 1")
            self.worksheet.cell(row=row, column=col_idx, value=content)
        except (ValueError, TypeError, IllegalCharacterError) as exc:
            raise SinkWriteError(
                f"Cannot write cell {coordinate} on sheet "
                f"'{self.worksheet.title}': {exc}",
                cell=coordinate,
            ) from exc

        self.cells_written += 1
        if self.log_values:
            logger.debug("ingestkit_html | cell=%s | value=%r", coordinate, content)
        else:
            logger.debug("ingestkit_html | cell=%s | chars=%d", coordinate, len(content))
