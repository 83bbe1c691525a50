"""CODA Inspector -- find and inspect NeXus files written to ESS CODA storage.

This package provides tools for:
- Locating the currently active proposal (most recently written raw folder)
- Selecting a bounded, deterministic window of files from a folder
- Reading instrument name, start time, modification time and size from each file
- Filtering by instrument, with short facility aliases

Key principles:
- Read-only: data files and folders are never modified
- No caching: every lookup is recomputed from the filesystem
- One bad file never aborts a run

Main subpackages:
- ingest: Folder discovery and NeXus metadata readers
- analysis: Instrument filter, inspection pipeline, report formatting
- models: Inspection records and outcomes
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
