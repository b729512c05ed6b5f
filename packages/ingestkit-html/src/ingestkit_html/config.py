"""Configuration model for the ingestkit-html pipeline.

Provides ``HTMLProcessorConfig`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from openpyxl.utils.cell import column_index_from_string
from pydantic import BaseModel, field_validator


class HTMLProcessorConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``HTMLProcessorConfig.from_file(path)``.
    """

    # --- Identity ---
    parser_version: str = "ingestkit_html:1.0.0"
    tenant_id: str | None = None

    # --- Security / sniffing ---
    max_file_size_mb: int = 100
    sniff_bytes: int = 2048
    max_depth: int | None = 1000

    # --- Parsing ---
    encoding: str | None = None
    skip_blank_text: bool = True
    remove_comments: bool = True

    # --- Output position ---
    first_row: int = 1
    first_column: str = "A"
    sheet_title: str | None = None

    # --- Logging / PII safety ---
    log_cell_values: bool = False

    @field_validator("first_row")
    @classmethod
    def _check_first_row(cls, value: int) -> int:
        if value < 1:
            raise ValueError("first_row must be >= 1")
        return value

    @field_validator("first_column")
    @classmethod
    def _check_first_column(cls, value: str) -> str:
        value = value.upper()
        # raises ValueError for labels openpyxl cannot address
        column_index_from_string(value)
        return value

    @field_validator("sniff_bytes")
    @classmethod
    def _check_sniff_bytes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("sniff_bytes must be positive")
        return value

    @classmethod
    def from_file(cls, path: str) -> HTMLProcessorConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
            ImportError: If a YAML file is provided but ``pyyaml`` is not
                installed.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install ingestkit-html[yaml]"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
