"""Deterministic ingest-key computation for deduplication.

:func:`compute_ingest_key` produces an :class:`IngestKey` from a file on
disk.  Identical file content, source URI, parser version, and tenant ID
always yield the same :pyattr:`IngestKey.key` digest.  The package
provides the key; deduplication policy belongs to the caller.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from pydantic import BaseModel

_READ_CHUNK_BYTES = 1024 * 1024


class IngestKey(BaseModel):
    """Composite key for deduplication."""

    content_hash: str
    source_uri: str
    parser_version: str
    tenant_id: str | None = None

    @property
    def key(self) -> str:
        """64-char hex digest over all key parts."""
        parts = [self.content_hash, self.source_uri, self.parser_version]
        if self.tenant_id:
            parts.append(self.tenant_id)
        return hashlib.sha256("|".join(parts).encode()).hexdigest()


def compute_ingest_key(
    file_path: str,
    parser_version: str,
    tenant_id: str | None = None,
    source_uri: str | None = None,
) -> IngestKey:
    """Compute a deterministic ingest key for *file_path*.

    The file is hashed in chunks.  When *source_uri* is None the
    canonical absolute POSIX path of *file_path* is used.

    Raises
    ------
    FileNotFoundError
        If *file_path* does not exist.
    """
    digest = hashlib.sha256()
    with open(file_path, "rb") as fh:
        for block in iter(lambda: fh.read(_READ_CHUNK_BYTES), b""):
            digest.update(block)

    if source_uri is None:
        source_uri = Path(file_path).resolve().as_posix()

    return IngestKey(
        content_hash=digest.hexdigest(),
        source_uri=source_uri,
        parser_version=parser_version,
        tenant_id=tenant_id,
    )
