"""Storage module."""

from storage.csv_writer import CSVWriter
from storage.jsonl_writer import JSONLWriter
from storage.output import OutputFormat, OutputWriter

__all__ = ["CSVWriter", "JSONLWriter", "OutputFormat", "OutputWriter"]
