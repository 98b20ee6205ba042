"""Unified output writer over the CSV and JSONL formats."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable

from core.models import ScrapedData
from storage.csv_writer import CSVWriter
from storage.files import RotatingFileWriter
from storage.jsonl_writer import JSONLWriter


class OutputFormat(str, Enum):
    """Supported output file formats."""
    CSV = "csv"
    JSONL = "jsonl"


_WRITERS: dict[OutputFormat, type[RotatingFileWriter]] = {
    OutputFormat.CSV: CSVWriter,
    OutputFormat.JSONL: JSONLWriter,
}


class OutputWriter:
    """Write scraped records through whichever format writer was configured."""

    def __init__(self, writer: RotatingFileWriter) -> None:
        self.writer = writer

    @classmethod
    def open(
        cls,
        output_path: str | Path,
        output_format: OutputFormat | str = OutputFormat.JSONL,
        append: bool = False,
        **writer_options: object,
    ) -> OutputWriter:
        """Open a writer for `output_format` (csv or jsonl) at `output_path`."""
        writer_cls = _WRITERS[OutputFormat(output_format)]
        return cls(writer_cls(output_path, append=append, **writer_options))

    def write_data(self, data: ScrapedData | Iterable[ScrapedData]) -> int:
        """Write one record or an iterable of records; returns the count written."""
        if isinstance(data, ScrapedData):
            return self.writer.write_many([data])
        return self.writer.write_many(data)

    def close(self) -> None:
        self.writer.close()

    def __enter__(self) -> OutputWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
