"""Size-rotated output files shared by the CSV and JSONL writers."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterable

from core.config import ComplianceConfig
from core.models import ScrapedData
from core.structured_logging import EventHook, default_event_hook


class RotatingFileWriter:
    """
    Append-or-truncate text file that rolls over to `<stem>_<n><suffix>`.

    Rotation is checked before each write: once the current file is larger
    than `max_bytes`, a new numbered file is started. In append mode existing
    numbered files are never truncated. Subclasses format rows
    and may emit a preamble (header) at the top of every new file.
    """

    def __init__(
        self,
        output_path: str | Path,
        append: bool = False,
        max_bytes: int = ComplianceConfig.MAX_OUTPUT_FILE_BYTES,
        event_hook: EventHook | None = None,
    ) -> None:
        """Open the output file, creating parent directories as needed."""
        if max_bytes <= 0:
            raise ValueError("max_bytes must be > 0")
        self.output_path = Path(output_path)
        self.append = append
        self.max_bytes = max_bytes
        self._emit = event_hook or default_event_hook
        self._file_counter = 0
        self._preamble_written = False

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.current_path = self.output_path
        if append and self.output_path.exists():
            self._handle: IO[str] = self.output_path.open("a", encoding="utf-8", newline="")
            self._preamble_written = self.output_path.stat().st_size > 0
        else:
            self._handle = self.output_path.open("w", encoding="utf-8", newline="")

    @property
    def file_count(self) -> int:
        """Number of files written so far, rotations included."""
        return self._file_counter + 1

    def write(self, data: ScrapedData) -> None:
        """Write one record."""
        self.write_many([data])

    def write_many(self, records: Iterable[ScrapedData]) -> int:
        """Write records and flush; returns the number written."""
        rows = list(records)
        if not rows:
            return 0
        if self._should_rotate():
            self._rotate()
        if not self._preamble_written:
            self._write_preamble(self._handle)
            self._preamble_written = True
        for record in rows:
            self._write_record(self._handle, record)
        self._handle.flush()
        return len(rows)

    def close(self) -> None:
        """Close the current file."""
        if not self._handle.closed:
            self._handle.close()

    def __enter__(self) -> RotatingFileWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _write_preamble(self, handle: IO[str]) -> None:
        """Hook for per-file headers."""

    def _write_record(self, handle: IO[str], record: ScrapedData) -> None:
        raise NotImplementedError

    def _should_rotate(self) -> bool:
        self._handle.flush()
        return self.current_path.exists() and self.current_path.stat().st_size > self.max_bytes

    def _numbered_path(self, counter: int) -> Path:
        return self.output_path.with_name(
            f"{self.output_path.stem}_{counter}{self.output_path.suffix}"
        )

    def _rotate(self) -> None:
        previous = self.current_path
        self._handle.close()

        # In append mode earlier runs' rotated files are kept: full ones are
        # skipped, a partly filled one is resumed.
        self._file_counter += 1
        candidate = self._numbered_path(self._file_counter)
        while self.append and candidate.exists() and candidate.stat().st_size > self.max_bytes:
            self._file_counter += 1
            candidate = self._numbered_path(self._file_counter)

        self.current_path = candidate
        if self.append and candidate.exists():
            self._handle = candidate.open("a", encoding="utf-8", newline="")
            self._preamble_written = candidate.stat().st_size > 0
        else:
            self._handle = candidate.open("w", encoding="utf-8", newline="")
            self._preamble_written = False
        self._emit(
            "output_rotated",
            {
                "previous_path": str(previous),
                "current_path": str(self.current_path),
                "file_count": self.file_count,
            },
        )
