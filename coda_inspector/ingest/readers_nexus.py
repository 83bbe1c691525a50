from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import h5py
import numpy as np
import pandas as pd

from coda_inspector.config import InspectorConfig
from coda_inspector.errors import (
    DecodeError,
    InspectionError,
    OpenError,
    PathNotFound,
    SchemaError,
    TimestampParseError,
)
from coda_inspector.models.records import InspectionOutcome, InspectionRecord

logger = logging.getLogger(__name__)

FieldPath = Union[str, Sequence[str]]

# RFC 3339 date-time: offset is mandatory, fraction up to nanoseconds.
_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}:\d{2}(?:\.\d{1,9})?)"
    r"(?P<offset>[Zz]|[+-](?:[01]\d|2[0-3]):[0-5]\d)$"
)


def _split_path(path: FieldPath) -> Tuple[str, ...]:
    if isinstance(path, str):
        return tuple(p for p in path.split("/") if p)
    return tuple(path)


def _decode_text(dataset: h5py.Dataset, where: str) -> str:
    """
    Read a string dataset.

    UTF-8 is tried first whatever charset the dataset declares (h5py tags plain
    bytes as ASCII), then the bytes are read as plain ASCII. Scalars and
    single-element arrays are accepted; anything else raises DecodeError.
    """
    info = h5py.check_string_dtype(dataset.dtype)
    if info is None:
        raise DecodeError(f"'{where}' is not a string dataset (dtype={dataset.dtype}).")

    try:
        raw = dataset[()]
    except (OSError, TypeError, ValueError) as e:
        raise DecodeError(f"'{where}' could not be read: {e}") from e

    if isinstance(raw, h5py.Empty):
        raise DecodeError(f"'{where}' has no data.")
    if isinstance(raw, np.ndarray):
        if raw.size != 1:
            raise DecodeError(f"'{where}' is not a scalar string (shape={raw.shape}).")
        raw = raw.reshape(-1)[0]

    if isinstance(raw, str):
        return raw
    raw = bytes(raw)

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError as e:
        raise DecodeError(f"'{where}' is neither valid UTF-8 nor ASCII text.") from e


def read_field(container: h5py.Group, path: FieldPath) -> str:
    """
    Descend ``path`` one name at a time and decode the terminal dataset as text.

    Every name but the last must be a group, the last a dataset. The error names
    the part of the path that was resolved before the failure.
    """
    names = _split_path(path)
    if not names:
        raise PathNotFound("Empty field path.")

    node = container
    for depth, name in enumerate(names[:-1]):
        child = node.get(name)
        if not isinstance(child, h5py.Group):
            reached = "/".join(names[:depth]) or "/"
            raise PathNotFound(f"No group '{name}' under '{reached}'.")
        node = child

    leaf = node.get(names[-1])
    if not isinstance(leaf, h5py.Dataset):
        reached = "/".join(names[:-1]) or "/"
        raise PathNotFound(f"No dataset '{names[-1]}' under '{reached}'.")
    return _decode_text(leaf, "/".join(names))


def parse_rfc3339(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp; the result keeps the fixed offset of the input.

    Only NUL padding (fixed-length HDF5 strings) is removed; other surrounding
    characters make the text non-conforming. Sub-microsecond digits are dropped.
    """
    m = _RFC3339.fullmatch(text.rstrip("\x00"))
    if not m:
        raise TimestampParseError(f"Not an RFC 3339 timestamp: {text!r}")
    offset = m.group("offset")
    iso = f"{m.group('date')}T{m.group('time')}{'+00:00' if offset in ('Z', 'z') else offset}"
    try:
        ts = pd.Timestamp(iso)
    except (ValueError, OverflowError) as e:
        raise TimestampParseError(f"Not an RFC 3339 timestamp: {text!r} ({e})") from e
    return ts.floor("us").to_pydatetime()


def read_timestamp(container: h5py.Group, path: FieldPath) -> datetime:
    return parse_rfc3339(read_field(container, path))


def _file_stats(path: Path) -> Tuple[Optional[datetime], Optional[int]]:
    try:
        st = os.stat(path)
    except OSError:
        return None, None
    mtime = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).astimezone()
    return mtime, int(st.st_size)


@dataclass
class NexusInspector:
    """
    Reads instrument identity and timing from a NeXus (HDF5) file.

    Hard failures (raise from ``inspect``):
      - file cannot be opened as HDF5            -> OpenError
      - entry or instrument group missing        -> SchemaError
      - instrument name missing / not text       -> PathNotFound / DecodeError
    Soft failures:
      - filesystem stat                          -> mtime/size None
      - start_time missing or malformed          -> start_time None
    """
    config: InspectorConfig = field(default_factory=InspectorConfig)

    def inspect(self, path: str | Path) -> InspectionRecord:
        fp = Path(path)
        cfg = self.config
        mtime, size = _file_stats(fp)

        try:
            h5 = h5py.File(fp, "r", locking=cfg.locking)
        except OSError as e:
            raise OpenError(f"Cannot open '{fp}' as HDF5: {e}") from e

        with h5:
            entry = h5.get(cfg.entry_group)
            if not isinstance(entry, h5py.Group):
                raise SchemaError(f"'{fp}' has no '/{cfg.entry_group}' group.")

            try:
                start_time = read_timestamp(entry, [cfg.start_time_field])
            except InspectionError as e:
                logger.debug("%s: no usable start time (%s)", fp, e)
                start_time = None

            instrument = entry.get(cfg.instrument_group)
            if not isinstance(instrument, h5py.Group):
                raise SchemaError(f"'{fp}' has no '/{cfg.entry_group}/{cfg.instrument_group}' group.")
            name = read_field(instrument, [cfg.name_field])

        return InspectionRecord(
            source_path=fp,
            instrument=name,
            start_time=start_time,
            modification_time=mtime,
            file_size=size,
        )

    def try_inspect(self, path: str | Path) -> InspectionOutcome:
        fp = Path(path)
        try:
            return InspectionOutcome(path=fp, record=self.inspect(fp))
        except InspectionError as e:
            return InspectionOutcome(path=fp, error=e)
