"""Consumer protocol for the ingestkit-html reader.

A consumer is the pluggable part of a load: it owns the handler registry
that gives tags their meaning and a pre-traversal hook that prepares the
workbook and hands back the sink cells are written to.  Consumers should
hold no per-load state so one instance can serve concurrent loads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ingestkit_html.sink import CellSink

if TYPE_CHECKING:
    from openpyxl import Workbook

    from ingestkit_html.handlers import HandlerRegistry

__all__ = [
    "CellSink",
    "TableConsumer",
]


@runtime_checkable
class TableConsumer(Protocol):
    """Interface every HTML-to-workbook consumer implements."""

    @property
    def registry(self) -> HandlerRegistry:
        """Handlers keyed by canonical tag name, plus default and text handlers."""
        ...

    def prepare(self, workbook: Workbook) -> CellSink:
        """Set up *workbook* before traversal and return the target sink."""
        ...
