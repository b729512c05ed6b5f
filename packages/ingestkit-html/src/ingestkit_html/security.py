"""Pre-flight checks for HTML files: format sniffing and security scanning.

- :func:`looks_like_markup` -- cheap sniff run on the first bytes of a file.
- :class:`HTMLSecurityScanner` -- ``scan()`` collects errors/warnings for
  the router; ``sanitize()`` re-reads a file for parsing and raises on
  entity declarations (XXE / entity-expansion prevention).
"""

from __future__ import annotations

import logging
import os
import re

from ingestkit_html.config import HTMLProcessorConfig
from ingestkit_html.errors import ErrorCode, IngestError, SecurityError

logger = logging.getLogger("ingestkit_html")

_ALLOWED_EXTENSIONS = {".html", ".htm"}
_LARGE_FILE_THRESHOLD_MB = 10

# A tag opener is '<' not followed by whitespace; an unterminated tag runs
# to the end of the data.
_TAG_RE = re.compile(rb"<(?!\s)[^>]*>?")

# '<!ENTITY' with optional NUL bytes between characters, which also
# catches UTF-16 encoded declarations.
_ENTITY_RE = re.compile(
    b"\\x00?" + b"\\x00?".join(re.escape(bytes([c])) for c in b"<!ENTITY") + b"\\x00?",
    re.IGNORECASE,
)


def strip_tags(data: bytes) -> bytes:
    """Remove everything that looks like a tag from *data*."""
    return _TAG_RE.sub(b"", data)


def looks_like_markup(data: bytes) -> bool:
    """Return True if *data* contains ``<`` and at least one strippable tag."""
    return b"<" in data and len(strip_tags(data)) != len(data)


def contains_entity_declaration(data: bytes) -> bool:
    return _ENTITY_RE.search(data) is not None


class HTMLSecurityScanner:
    """Run pre-flight security checks on an HTML file."""

    def __init__(self, config: HTMLProcessorConfig) -> None:
        self.config = config

    def scan(self, file_path: str) -> list[IngestError]:
        """Run all pre-flight checks.

        Returns
        -------
        list[IngestError]
            A list of errors/warnings.  Fatal errors have codes starting
            with ``E_``.
        """
        errors: list[IngestError] = []
        ext = os.path.splitext(file_path)[1].lower()

        # --- 1. Extension check ---
        if ext not in _ALLOWED_EXTENSIONS:
            errors.append(
                IngestError(
                    code=ErrorCode.E_SECURITY_BAD_EXTENSION,
                    message=(
                        f"Unsupported file extension '{ext}'. "
                        f"Allowed: {sorted(_ALLOWED_EXTENSIONS)}"
                    ),
                    stage="security",
                )
            )
            return errors

        # --- 2. File existence ---
        if not os.path.isfile(file_path):
            errors.append(
                IngestError(
                    code=ErrorCode.E_PARSE_CORRUPT,
                    message=f"File not found or not readable: {file_path}",
                    stage="security",
                )
            )
            return errors

        # --- 3. Empty file ---
        file_size = os.path.getsize(file_path)
        if file_size == 0:
            errors.append(
                IngestError(
                    code=ErrorCode.E_PARSE_EMPTY,
                    message=f"File is empty (0 bytes): {file_path}",
                    stage="security",
                )
            )
            return errors

        # --- 4. File size limit ---
        size_error = self._check_size(file_size)
        if size_error is not None:
            errors.append(size_error)
            return errors

        # --- 5. Large file warning ---
        large_threshold = _LARGE_FILE_THRESHOLD_MB * 1024 * 1024
        if file_size > large_threshold:
            errors.append(
                IngestError(
                    code=ErrorCode.W_LARGE_FILE,
                    message=(
                        f"File is {file_size / (1024 * 1024):.1f} MB "
                        f"(> {_LARGE_FILE_THRESHOLD_MB} MB)"
                    ),
                    stage="security",
                    recoverable=True,
                )
            )

        # --- 6. Entity declaration scan ---
        try:
            with open(file_path, "rb") as fh:
                raw = fh.read()
        except OSError as exc:
            errors.append(
                IngestError(
                    code=ErrorCode.E_PARSE_CORRUPT,
                    message=f"Cannot read file: {exc}",
                    stage="security",
                )
            )
            return errors

        if contains_entity_declaration(raw):
            errors.append(
                IngestError(
                    code=ErrorCode.E_SECURITY_ENTITY_DECLARATION,
                    message="File contains <!ENTITY declaration (potential XXE / entity expansion attack)",
                    stage="security",
                )
            )

        return errors

    def sanitize(self, file_path: str) -> bytes:
        """Read *file_path* for parsing, rejecting unsafe content.

        Raises
        ------
        SecurityError
            If the file is over the size limit or declares entities.
        OSError
            If the file cannot be read.
        """
        size_error = self._check_size(os.path.getsize(file_path))
        if size_error is not None:
            raise SecurityError(size_error.message, code=size_error.code)

        with open(file_path, "rb") as fh:
            raw = fh.read()

        if contains_entity_declaration(raw):
            logger.warning(
                "ingestkit_html | file=%s | code=%s | detail=%s",
                os.path.basename(file_path),
                ErrorCode.E_SECURITY_ENTITY_DECLARATION.value,
                "entity declaration rejected",
            )
            raise SecurityError(
                "Detected use of <!ENTITY in HTML; load aborted to prevent "
                "XXE / entity expansion attacks"
            )
        return raw

    def _check_size(self, file_size: int) -> IngestError | None:
        max_bytes = self.config.max_file_size_mb * 1024 * 1024
        if file_size <= max_bytes:
            return None
        return IngestError(
            code=ErrorCode.E_SECURITY_TOO_LARGE,
            message=(
                f"File size {file_size} bytes exceeds limit of "
                f"{max_bytes} bytes ({self.config.max_file_size_mb} MB)"
            ),
            stage="security",
        )
