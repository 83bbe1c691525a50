from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from coda_inspector.models.records import InspectionOutcome

SUMMARY_COLUMNS = ["path", "instrument", "start_time", "modification_time", "file_size", "error"]


def format_timestamp(value: Optional[datetime]) -> str:
    """RFC 3339 in local time, seconds precision; '?' when absent."""
    if value is None:
        return "?"
    return value.astimezone().isoformat(timespec="seconds")


def format_size(value: Optional[int]) -> str:
    if value is None:
        return "?"
    if value < 1024:
        return f"{value} B"
    n = float(value)
    for unit in ("KiB", "MiB", "GiB"):
        n /= 1024.0
        if n < 1024.0:
            return f"{n:.1f} {unit}"
    return f"{n / 1024.0:.1f} TiB"


def format_outcome(outcome: InspectionOutcome, verbose: bool = False) -> List[str]:
    """
    Lines for one reported path.

    The first line is the path; detail lines are indented by two spaces. A
    failed inspection has a single 'Failed:' detail line.
    """
    lines = [f"{outcome.path}:"]
    rec = outcome.record
    if rec is None:
        lines.append(f"  Failed: {outcome.error}")
        return lines
    lines.append(f"  Instrument: {rec.instrument}")
    if verbose:
        lines.append(f"  Start time: {format_timestamp(rec.start_time)}")
        lines.append(f"  Modified:   {format_timestamp(rec.modification_time)}")
        lines.append(f"  Size:       {format_size(rec.file_size)}")
    return lines


def outcomes_to_frame(outcomes: Iterable[InspectionOutcome]) -> pd.DataFrame:
    """
    One row per outcome, timestamps normalized to UTC.

    Failed paths keep their row with an 'error' message and empty metadata.
    """
    rows = []
    for o in outcomes:
        rec = o.record
        rows.append(
            {
                "path": str(o.path),
                "instrument": rec.instrument if rec is not None else None,
                "start_time": rec.start_time if rec is not None else None,
                "modification_time": rec.modification_time if rec is not None else None,
                "file_size": rec.file_size if rec is not None else None,
                "error": None if o.error is None else f"{type(o.error).__name__}: {o.error}",
            }
        )
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df["start_time"] = pd.to_datetime(df["start_time"], utc=True)
    df["modification_time"] = pd.to_datetime(df["modification_time"], utc=True)
    df["file_size"] = df["file_size"].astype("Int64")
    return df
