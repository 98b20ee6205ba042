"""CSV output for scraped records."""

from __future__ import annotations

import csv
from typing import IO

from core.models import CSV_COLUMNS, ScrapedData
from storage.files import RotatingFileWriter


class CSVWriter(RotatingFileWriter):
    """Write ScrapedData rows with a header line at the top of every file."""

    def _write_preamble(self, handle: IO[str]) -> None:
        csv.writer(handle, lineterminator="\n").writerow(CSV_COLUMNS)

    def _write_record(self, handle: IO[str], record: ScrapedData) -> None:
        row = record.model_dump()
        csv.writer(handle, lineterminator="\n").writerow(
            ["" if row[column] is None else row[column] for column in CSV_COLUMNS]
        )
