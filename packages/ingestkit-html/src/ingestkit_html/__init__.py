"""ingestkit-html -- HTML to spreadsheet reader with per-tag dispatch.

Public API re-exports for convenient access.
"""

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import (
    ErrorCode,
    FormatError,
    HTMLIngestException,
    IngestError,
    ParseError,
    SecurityError,
    SinkWriteError,
)
from ingestkit_html.handlers import (
    Continuation,
    HandlerRegistry,
    skip_element,
    traverse_children,
)
from ingestkit_html.idempotency import IngestKey, compute_ingest_key
from ingestkit_html.models import ProcessingResult, SheetSummary
from ingestkit_html.nodes import Document, TextNode
from ingestkit_html.parser import parse_html
from ingestkit_html.protocols import CellSink, TableConsumer
from ingestkit_html.reader import HTMLReader
from ingestkit_html.router import HTMLRouter
from ingestkit_html.security import HTMLSecurityScanner, looks_like_markup
from ingestkit_html.sink import WorksheetSink
from ingestkit_html.state import TraversalState
from ingestkit_html.tables import HTMLTableConsumer
from ingestkit_html.tags import normalize_tag_name
from ingestkit_html.traversal import TraversalEngine

__all__ = [
    "HTMLRouter",
    "HTMLReader",
    "HTMLProcessorConfig",
    "HTMLTableConsumer",
    "TableConsumer",
    "CellSink",
    "WorksheetSink",
    "TraversalEngine",
    "TraversalState",
    "HandlerRegistry",
    "Continuation",
    "traverse_children",
    "skip_element",
    "Document",
    "TextNode",
    "normalize_tag_name",
    "parse_html",
    "looks_like_markup",
    "HTMLSecurityScanner",
    "ErrorCode",
    "IngestError",
    "HTMLIngestException",
    "FormatError",
    "ParseError",
    "SecurityError",
    "SinkWriteError",
    "IngestKey",
    "compute_ingest_key",
    "ProcessingResult",
    "SheetSummary",
]
