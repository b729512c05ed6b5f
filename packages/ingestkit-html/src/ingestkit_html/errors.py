"""Error codes, structured error models, and exceptions for ingestkit-html.

``ErrorCode`` contains all error/warning codes relevant to HTML ingestion.
``IngestError`` is the Pydantic data model carried by results;
``HTMLIngestException`` and its subclasses are the raisable counterparts
used for control flow inside a load.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for HTML ingestion.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    # Format / parse
    E_FORMAT_INVALID = "E_FORMAT_INVALID"
    E_PARSE_EMPTY = "E_PARSE_EMPTY"
    E_PARSE_CORRUPT = "E_PARSE_CORRUPT"

    # Security
    E_SECURITY_BAD_EXTENSION = "E_SECURITY_BAD_EXTENSION"
    E_SECURITY_TOO_LARGE = "E_SECURITY_TOO_LARGE"
    E_SECURITY_ENTITY_DECLARATION = "E_SECURITY_ENTITY_DECLARATION"
    E_SECURITY_DEPTH_BOMB = "E_SECURITY_DEPTH_BOMB"

    # Output
    E_SINK_WRITE = "E_SINK_WRITE"
    E_OUTPUT_WRITE = "E_OUTPUT_WRITE"

    # Warnings (non-fatal)
    W_LARGE_FILE = "W_LARGE_FILE"
    W_EMPTY_OUTPUT = "W_EMPTY_OUTPUT"


class BaseIngestError(BaseModel):
    """Base structured error with code, message, and context.

    The ``code`` field is typed as ``str`` so it accepts any ``ErrorCode``
    member as well as plain strings.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False


class IngestError(BaseIngestError):
    """Structured error with HTML/worksheet location context.

    ``cell`` is the worksheet coordinate (e.g. ``"B3"``) for sink failures;
    ``element_path`` is a tag path (e.g. ``"html/body/table/tr"``) for
    failures raised while walking the document.
    """

    cell: str | None = None
    element_path: str | None = None


class HTMLIngestException(Exception):
    """Raisable exception wrapping an :class:`IngestError` data model.

    Carries the structured error as the ``.error`` attribute for
    inspection and serialization.  Convenience properties delegate to the
    underlying model.
    """

    default_code: ErrorCode = ErrorCode.E_PARSE_CORRUPT
    default_stage: str | None = None

    def __init__(self, message: str, **kwargs: object) -> None:
        kwargs.setdefault("code", self.default_code)
        kwargs.setdefault("stage", self.default_stage)
        self.error = IngestError(message=message, **kwargs)  # type: ignore[arg-type]
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def stage(self) -> str | None:
        return self.error.stage

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable


class FormatError(HTMLIngestException):
    """The source does not look like markup."""

    default_code = ErrorCode.E_FORMAT_INVALID
    default_stage = "sniff"


class ParseError(HTMLIngestException):
    """The HTML parser could not build a document tree."""

    default_code = ErrorCode.E_PARSE_CORRUPT
    default_stage = "parse"


class SecurityError(HTMLIngestException):
    """The source was rejected by the pre-parse security scan."""

    default_code = ErrorCode.E_SECURITY_ENTITY_DECLARATION
    default_stage = "security"


class SinkWriteError(HTMLIngestException):
    """The destination worksheet rejected a cell value or coordinate."""

    default_code = ErrorCode.E_SINK_WRITE
    default_stage = "traverse"
