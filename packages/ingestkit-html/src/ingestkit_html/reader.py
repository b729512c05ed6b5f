"""HTMLReader -- loads an HTML file into an openpyxl workbook.

Load sequence:

1. Open the file, sniff the first ``sniff_bytes`` for markup, close it.
2. Re-read the file through :meth:`HTMLSecurityScanner.sanitize`.
3. Parse with lxml (:func:`parse_html`).
4. Let the consumer prepare the workbook and supply the cell sink.
5. Walk the document with a fresh :class:`TraversalState`.

Any failure aborts the load and propagates as an
:class:`HTMLIngestException` subclass; no partial workbook is returned.
"""

from __future__ import annotations

import logging
import os
import time

from openpyxl import Workbook

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import FormatError
from ingestkit_html.nodes import Document
from ingestkit_html.parser import parse_html
from ingestkit_html.protocols import TableConsumer
from ingestkit_html.security import HTMLSecurityScanner, looks_like_markup
from ingestkit_html.state import TraversalState
from ingestkit_html.traversal import TraversalEngine

logger = logging.getLogger("ingestkit_html")


class HTMLReader:
    """Read HTML files into workbooks using a pluggable consumer.

    Parameters
    ----------
    consumer:
        Supplies the handler registry and the pre-traversal hook.
    config:
        Reader configuration.  Uses defaults when *None*.
    """

    def __init__(
        self,
        consumer: TableConsumer,
        config: HTMLProcessorConfig | None = None,
    ) -> None:
        self._config = config or HTMLProcessorConfig()
        self._consumer = consumer
        self._security_scanner = HTMLSecurityScanner(self._config)
        self._engine = TraversalEngine(
            consumer.registry,
            skip_blank_text=self._config.skip_blank_text,
            max_depth=self._config.max_depth,
        )

    @property
    def config(self) -> HTMLProcessorConfig:
        return self._config

    def can_read(self, file_path: str) -> bool:
        """Return True if the start of *file_path* looks like markup."""
        try:
            return self._sniff(file_path)
        except OSError:
            return False

    def load(self, file_path: str) -> Workbook:
        """Load *file_path* into a new workbook."""
        return self.load_into_existing(file_path, Workbook())

    def load_into_existing(self, file_path: str, workbook: Workbook) -> Workbook:
        """Load *file_path* into *workbook* and return it.

        Raises
        ------
        FormatError
            The file does not look like HTML.
        SecurityError
            The file is too large or declares entities.
        ParseError
            lxml could not build a document.
        SinkWriteError
            A handler's cell was rejected by the worksheet.
        OSError
            The file cannot be opened.
        """
        start = time.monotonic()
        filename = os.path.basename(file_path)

        if not self._sniff(file_path):
            raise FormatError(f"{file_path} is an invalid HTML file.")

        raw = self._security_scanner.sanitize(file_path)
        root = parse_html(raw, self._config)

        sink = self._consumer.prepare(workbook)
        state = TraversalState(
            sink,
            row=self._config.first_row,
            column=self._config.first_column,
        )
        self._engine.traverse(Document(root), state)

        logger.info(
            "ingestkit_html | file=%s | cells=%d | last_row=%d | time=%.3fs",
            filename,
            state.cells_written,
            state.row,
            time.monotonic() - start,
        )
        return workbook

    def _sniff(self, file_path: str) -> bool:
        with open(file_path, "rb") as fh:
            data = fh.read(self._config.sniff_bytes)
        return looks_like_markup(data)
