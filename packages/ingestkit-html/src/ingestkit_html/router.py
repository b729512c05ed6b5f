"""HTMLRouter -- orchestrator and public API for the ingestkit-html pipeline.

Routes HTML files through the full pipeline:

1. Security scan via :class:`HTMLSecurityScanner`.
2. Compute deterministic :class:`IngestKey` for deduplication.
3. Load into a workbook via :class:`HTMLReader`.
4. Summarise every worksheet.
5. Optionally save the workbook as ``.xlsx``.
6. Assemble and return :class:`ProcessingResult`.

The router enforces **fail-closed** semantics: any fatal error returns a
result with error codes and no sheets.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
import uuid

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import ErrorCode, HTMLIngestException, IngestError
from ingestkit_html.idempotency import compute_ingest_key
from ingestkit_html.models import ProcessingResult, SheetSummary
from ingestkit_html.protocols import TableConsumer
from ingestkit_html.reader import HTMLReader
from ingestkit_html.security import HTMLSecurityScanner
from ingestkit_html.tables import HTMLTableConsumer

logger = logging.getLogger("ingestkit_html")


class HTMLRouter:
    """Top-level orchestrator for the ingestkit-html pipeline.

    Parameters
    ----------
    consumer:
        Tag semantics for the load.  Defaults to :class:`HTMLTableConsumer`.
    config:
        Pipeline configuration.  Uses defaults when *None*.
    """

    def __init__(
        self,
        consumer: TableConsumer | None = None,
        config: HTMLProcessorConfig | None = None,
    ) -> None:
        self._config = config or HTMLProcessorConfig()
        self._consumer = consumer or HTMLTableConsumer(
            sheet_title=self._config.sheet_title,
            log_cell_values=self._config.log_cell_values,
        )
        self._reader = HTMLReader(self._consumer, self._config)
        self._security_scanner = HTMLSecurityScanner(self._config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def can_handle(self, file_path: str) -> bool:
        """Return True if *file_path* ends with ``.html`` or ``.htm``."""
        return file_path.lower().endswith((".html", ".htm"))

    def process(
        self,
        file_path: str,
        source_uri: str | None = None,
        output_path: str | None = None,
    ) -> ProcessingResult:
        """Load a single HTML file into a workbook and summarise it.

        Parameters
        ----------
        file_path:
            Filesystem path to the HTML file.
        source_uri:
            Optional override for the source URI stored in the ingest key.
        output_path:
            When given, the workbook is saved there as ``.xlsx``.
        """
        overall_start = time.monotonic()
        config = self._config
        filename = os.path.basename(file_path)
        ingest_run_id = str(uuid.uuid4())

        def _fail(
            ingest_key: str,
            details: list[IngestError],
            warnings: list[str],
        ) -> ProcessingResult:
            logger.error(
                "ingestkit_html | file=%s | code=%s | detail=%s",
                filename,
                details[0].code,
                details[0].message,
            )
            return ProcessingResult(
                file_path=file_path,
                ingest_key=ingest_key,
                ingest_run_id=ingest_run_id,
                tenant_id=config.tenant_id,
                errors=[d.code for d in details if d.code.startswith("E_")],
                warnings=warnings,
                error_details=details,
                processing_time_seconds=time.monotonic() - overall_start,
            )

        # ==============================================================
        # Step 1: Security Scan
        # ==============================================================
        security_errors = self._security_scanner.scan(file_path)
        fatal_errors = [e for e in security_errors if e.code.startswith("E_")]
        warning_errors = [e for e in security_errors if not e.code.startswith("E_")]
        warnings = [e.code for e in warning_errors]

        if fatal_errors:
            return _fail("", security_errors, warnings)

        # ==============================================================
        # Step 2: Compute Ingest Key
        # ==============================================================
        ingest_key = compute_ingest_key(
            file_path=file_path,
            parser_version=config.parser_version,
            tenant_id=config.tenant_id,
            source_uri=source_uri,
        ).key

        # ==============================================================
        # Step 3: Load
        # ==============================================================
        try:
            workbook = self._reader.load(file_path)
        except HTMLIngestException as exc:
            return _fail(ingest_key, [exc.error, *warning_errors], warnings)
        except RecursionError:
            # consumers that descend once per nesting level
            err = IngestError(
                code=ErrorCode.E_SECURITY_DEPTH_BOMB,
                message="HTML nesting exceeds the handler recursion limit",
                stage="traverse",
            )
            return _fail(ingest_key, [err, *warning_errors], warnings)
        except OSError as exc:
            err = IngestError(
                code=ErrorCode.E_PARSE_CORRUPT,
                message=f"Cannot read file: {exc}",
                stage="load",
            )
            return _fail(ingest_key, [err, *warning_errors], warnings)

        # ==============================================================
        # Step 4: Summarise
        # ==============================================================
        sheets = [SheetSummary.from_worksheet(ws) for ws in workbook.worksheets]
        cells_written = sum(s.cell_count for s in sheets)
        details = list(warning_errors)
        if cells_written == 0:
            details.append(
                IngestError(
                    code=ErrorCode.W_EMPTY_OUTPUT,
                    message="No cells were written",
                    stage="load",
                    recoverable=True,
                )
            )
            warnings.append(ErrorCode.W_EMPTY_OUTPUT.value)

        # ==============================================================
        # Step 5: Save
        # ==============================================================
        if output_path is not None:
            try:
                workbook.save(output_path)
            except OSError as exc:
                err = IngestError(
                    code=ErrorCode.E_OUTPUT_WRITE,
                    message=f"Cannot save workbook to {output_path}: {exc}",
                    stage="output",
                )
                return _fail(ingest_key, [err, *details], warnings)

        # ==============================================================
        # Step 6: Assemble Result
        # ==============================================================
        elapsed = time.monotonic() - overall_start
        logger.info(
            "ingestkit_html | file=%s | ingest_key=%s | sheets=%d | cells=%d | time=%.1fs",
            filename,
            ingest_key[:8],
            len(sheets),
            cells_written,
            elapsed,
        )

        return ProcessingResult(
            file_path=file_path,
            ingest_key=ingest_key,
            ingest_run_id=ingest_run_id,
            tenant_id=config.tenant_id,
            sheets=sheets,
            cells_written=cells_written,
            output_path=output_path,
            warnings=warnings,
            error_details=details,
            processing_time_seconds=elapsed,
        )

    async def aprocess(
        self,
        file_path: str,
        source_uri: str | None = None,
        output_path: str | None = None,
    ) -> ProcessingResult:
        """Async wrapper around :meth:`process`.

        Offloads the synchronous ``process()`` call to a thread via
        ``asyncio.to_thread()``.
        """
        return await asyncio.to_thread(self.process, file_path, source_uri, output_path)
