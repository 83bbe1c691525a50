import logging
import os
import unittest
import tempfile
from unittest import mock
from datetime import datetime
from pathlib import Path

import pytest

from coda_inspector.errors import NotFoundError
from coda_inspector.ingest.discovery import ProposalLocator, list_bounded_files


def _touch(path: Path, mtime: float = None) -> Path:
    path.write_bytes(b"\x00")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


class TestListBoundedFiles(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_all_files_when_under_bound(self):
        for name in ("c.hdf", "a.hdf", "b.hdf"):
            _touch(self.root / name)
        files = list_bounded_files(self.root, 3)
        self.assertEqual([f.name for f in files], ["a.hdf", "b.hdf", "c.hdf"])
        files = list_bounded_files(self.root, 10)
        self.assertEqual([f.name for f in files], ["a.hdf", "b.hdf", "c.hdf"])

    def test_trailing_window_when_over_bound(self):
        names = [f"run_{i:04d}.hdf" for i in (3, 1, 5, 2, 4)]
        for name in names:
            _touch(self.root / name)
        files = list_bounded_files(self.root, 2)
        self.assertEqual([f.name for f in files], ["run_0004.hdf", "run_0005.hdf"])

    def test_only_regular_files(self):
        _touch(self.root / "a.hdf")
        (self.root / "subdir").mkdir()
        _touch(self.root / "subdir" / "z.hdf")
        files = list_bounded_files(self.root, 10)
        self.assertEqual([f.name for f in files], ["a.hdf"])

    @unittest.skipIf(not hasattr(os, "symlink") or os.name == "nt", "symlinks not available")
    def test_symlinks(self):
        target_dir = self.root / "real_dir"
        target_dir.mkdir()
        _touch(self.root / "real.hdf")
        os.symlink(target_dir, self.root / "zz_dir_link")
        os.symlink(self.root / "real.hdf", self.root / "zz_file_link")
        os.symlink(self.root / "missing", self.root / "zz_broken_link")
        files = list_bounded_files(self.root, 10)
        self.assertEqual([f.name for f in files], ["real.hdf", "zz_file_link"])

    def test_zero_and_negative_bound(self):
        _touch(self.root / "a.hdf")
        self.assertEqual(list_bounded_files(self.root, 0), [])
        with self.assertRaises(ValueError):
            list_bounded_files(self.root, -1)

    def test_mtime_order(self):
        _touch(self.root / "a.hdf", mtime=3_000_000)
        _touch(self.root / "b.hdf", mtime=1_000_000)
        _touch(self.root / "c.hdf", mtime=2_000_000)
        files = list_bounded_files(self.root, 2, order="mtime")
        self.assertEqual([f.name for f in files], ["c.hdf", "a.hdf"])


def test_unreadable_directory_yields_empty(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="coda_inspector.ingest.discovery"):
        files = list_bounded_files(tmp_path / "does_not_exist", 5)
    assert files == []
    assert "Failed to read directory" in caplog.text


def test_file_given_as_directory_yields_empty(tmp_path):
    f = _touch(tmp_path / "a.hdf")
    assert list_bounded_files(f, 5) == []


class TestProposalLocator(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_root = Path(self._tmp.name)
        self.year_dir = self.data_root / "2025"
        self.year_dir.mkdir()
        self.locator = ProposalLocator(data_root=self.data_root)

    def tearDown(self):
        self._tmp.cleanup()

    def _proposal(self, name: str, raw_mtime: float = None) -> Path:
        d = self.year_dir / name
        d.mkdir()
        if raw_mtime is not None:
            raw = d / "raw"
            raw.mkdir()
            os.utime(raw, (raw_mtime, raw_mtime))
        return d

    def test_latest_raw_wins_regardless_of_listing_order(self):
        # names sort opposite to mtime order
        self._proposal("100", raw_mtime=3_000_000)
        self._proposal("200", raw_mtime=1_000_000)
        self._proposal("300", raw_mtime=2_000_000)
        self.assertEqual(self.locator.find_active_proposal(2025), "100")

    def test_tie_keeps_first_listed(self):
        self._proposal("a", raw_mtime=1_000)
        self._proposal("b", raw_mtime=1_000)
        real_scandir = os.scandir

        def listed_b_first(path):
            return sorted(real_scandir(path), key=lambda e: e.name, reverse=True)

        with mock.patch("coda_inspector.ingest.discovery.os.scandir", side_effect=listed_b_first):
            self.assertEqual(self.locator.find_active_proposal(2025), "b")

        def listed_a_first(path):
            return sorted(real_scandir(path), key=lambda e: e.name)

        with mock.patch("coda_inspector.ingest.discovery.os.scandir", side_effect=listed_a_first):
            self.assertEqual(self.locator.find_active_proposal(2025), "a")

    def test_skips_candidates_without_raw(self):
        self._proposal("100", raw_mtime=1_000_000)
        self._proposal("999")
        _touch(self.year_dir / "stray_file")
        self.assertEqual(self.locator.find_active_proposal(2025), "100")

    def test_not_found(self):
        with self.assertRaises(NotFoundError):
            self.locator.find_active_proposal(2025)
        self._proposal("100")
        with self.assertRaises(NotFoundError):
            self.locator.find_active_proposal(2025)
        with self.assertRaises(NotFoundError):
            self.locator.find_active_proposal(1999)

    def test_paths(self):
        self.assertEqual(self.locator.base_dir(2025), self.data_root / "2025")
        self.assertEqual(self.locator.raw_dir("123", 2025), self.data_root / "2025" / "123" / "raw")
        self.assertEqual(self.locator.base_dir(), self.data_root / str(datetime.now().year))


if __name__ == "__main__":
    unittest.main()
