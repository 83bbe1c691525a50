from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from coda_inspector.config import DEFAULT_DATA_ROOT, RAW_SUBDIR
from coda_inspector.errors import NotFoundError, ReadDirError

logger = logging.getLogger(__name__)

ScanOrder = Literal["name", "mtime"]


def _iter_regular_files(directory: Path) -> List[Path]:
    """
    List regular files directly inside ``directory``.

    Entries that fail individually are skipped with a warning. Symlinks are
    followed, so a link to a regular file counts and a link to a directory does not.
    """
    try:
        it = os.scandir(directory)
    except OSError as e:
        raise ReadDirError(e.errno, f"Failed to read directory: {directory} ({e.strerror})") from e

    files: List[Path] = []
    with it:
        while True:
            try:
                entry = next(it)
            except StopIteration:
                break
            except OSError as e:
                logger.warning("Failed to read directory entry in %s: %s", directory, e)
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError as e:
                logger.warning("Failed to stat directory entry %s: %s", entry.path, e)
                continue
            files.append(Path(entry.path))
    return files


def _mtime_key(path: Path) -> Tuple[float, str]:
    try:
        return (os.stat(path).st_mtime, str(path))
    except OSError:
        return (float("-inf"), str(path))


def list_bounded_files(directory: str | Path, max_files: int, order: ScanOrder = "name") -> List[Path]:
    """
    Return at most ``max_files`` regular files of ``directory``.

    order="name": sorted ascending by full path, keeping the lexicographically
      last entries. File names at the facility embed the acquisition time, so
      this keeps the most recent files.
    order="mtime": sorted ascending by modification time (path breaks ties),
      keeping the newest entries.

    An unreadable directory is logged and yields an empty list.
    """
    if max_files < 0:
        raise ValueError(f"max_files must be >= 0, got {max_files}")
    if order not in ("name", "mtime"):
        raise ValueError(f"Unknown scan order: {order!r}")

    folder = Path(directory)
    try:
        files = _iter_regular_files(folder)
    except ReadDirError as e:
        logger.error("%s", e.strerror)
        return []

    if order == "name":
        files.sort(key=str)
    else:
        files.sort(key=_mtime_key)

    if max_files == 0:
        return []
    return files[-max_files:]


@dataclass(frozen=True)
class ProposalLocator:
    """
    Finds proposal directories under ``<data_root>/<year>``.

    The active proposal is the one whose ``raw`` directory was modified last.
    Every call lists the filesystem again; nothing is remembered.
    """
    data_root: Path = DEFAULT_DATA_ROOT

    def base_dir(self, year: Optional[int] = None) -> Path:
        y = datetime.now().year if year is None else int(year)
        return Path(self.data_root) / str(y)

    def raw_dir(self, proposal: str, year: Optional[int] = None) -> Path:
        return self.base_dir(year) / proposal / RAW_SUBDIR

    def find_active_proposal(self, year: Optional[int] = None) -> str:
        root = self.base_dir(year)
        try:
            entries = list(os.scandir(root))
        except OSError as e:
            raise NotFoundError(f"Cannot list proposal root {root}: {e.strerror or e}") from e

        best: Optional[str] = None
        best_mtime = float("-inf")
        for entry in entries:
            try:
                if not entry.is_dir():
                    continue
                raw_mtime = os.stat(os.path.join(entry.path, RAW_SUBDIR)).st_mtime
            except OSError:
                continue
            if raw_mtime > best_mtime:
                best, best_mtime = entry.name, raw_mtime

        if best is None:
            raise NotFoundError(f"No proposal directory with a '{RAW_SUBDIR}' folder under {root}")
        logger.debug("Active proposal under %s: %s", root, best)
        return best
