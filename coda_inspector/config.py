"""
Defaults for locating and inspecting CODA data.

Everything here is read-only configuration; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Facility storage: <root>/<year>/<proposal>/raw/*.hdf
DEFAULT_DATA_ROOT = Path("/ess/data/coda")
RAW_SUBDIR = "raw"

DEFAULT_RESULT_LIMIT = 10
DEFAULT_MAX_FILES_SCANNED = 100


@dataclass(frozen=True)
class InspectorConfig:
    """
    Layout of the fields read from each NeXus file.

    entry_group: top-level NXentry group name.
    instrument_group: NXinstrument group inside the entry.
    name_field / start_time_field: datasets holding the instrument name and
      the acquisition start (ISO 8601 / RFC 3339 string).
    locking: HDF5 file locking; off so files still being written by the
      file writer on shared storage can be opened.
    """
    entry_group: str = "entry"
    instrument_group: str = "instrument"
    name_field: str = "name"
    start_time_field: str = "start_time"
    locking: bool = False
