from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from coda_inspector.errors import InspectionError


@dataclass(frozen=True)
class InspectionRecord:
    """
    Metadata extracted from one NeXus file.

    instrument: NXinstrument name, always present (extraction fails otherwise).
    start_time: acquisition start with the UTC offset stored in the file, or None
      when the field is absent or malformed (older / partial files).
    modification_time: filesystem mtime in local time, best-effort.
    file_size: size in bytes, best-effort.
    """
    source_path: Path
    instrument: str
    start_time: Optional[datetime] = None
    modification_time: Optional[datetime] = None
    file_size: Optional[int] = None


@dataclass(frozen=True)
class InspectionOutcome:
    """Result of inspecting one path: exactly one of ``record`` / ``error`` is set."""
    path: Path
    record: Optional[InspectionRecord] = None
    error: Optional[InspectionError] = None

    def __post_init__(self) -> None:
        if (self.record is None) == (self.error is None):
            raise ValueError("InspectionOutcome needs exactly one of record or error.")

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class InspectionReport:
    """
    Output of one pipeline run.

    outcomes: reported paths in order (matching records and failures).
    attempted: every path handed to the inspector, including filtered-out ones.
    mode: "directory" when a folder was scanned, "files" for an explicit list.
    """
    outcomes: Tuple[InspectionOutcome, ...]
    attempted: Tuple[Path, ...]
    mode: str

    @property
    def matches(self) -> Tuple[InspectionOutcome, ...]:
        return tuple(o for o in self.outcomes if o.ok)

    @property
    def failures(self) -> Tuple[InspectionOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)
