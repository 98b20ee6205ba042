"""JSON Lines output for scraped records, validated per row."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO

import jsonschema

from core.models import ScrapedData
from storage.files import RotatingFileWriter


SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"
SCRAPED_DATA_SCHEMA = json.loads(
    (SCHEMAS_DIR / "scraped_data.schema.json").read_text(encoding="utf-8")
)


class JSONLWriter(RotatingFileWriter):
    """
    Write one JSON object per line.

    Each row is validated against scraped_data.schema.json before it is
    written; the first invalid row raises ValueError.
    """

    def _write_record(self, handle: IO[str], record: ScrapedData) -> None:
        payload = record.model_dump(mode="json")
        try:
            jsonschema.validate(payload, SCRAPED_DATA_SCHEMA)
        except jsonschema.ValidationError as exc:
            raise ValueError(f"Output validation failed for {record.url!r}: {exc.message}") from exc
        handle.write(json.dumps(payload, ensure_ascii=False) + "\n")
