"""Ingest package - folder discovery and NeXus metadata readers.

This package handles:
- Locating the active proposal under <data_root>/<year>
- Listing a bounded window of regular files from a folder
- Reading instrument and timing fields from NeXus (HDF5) files

Key classes:
- ProposalLocator: Finds the proposal whose raw folder changed last
- NexusInspector: Builds an InspectionRecord from one file

Design principle:
- Per-file failures are raised as InspectionError subclasses and
  converted to InspectionOutcome by NexusInspector.try_inspect
"""

from .discovery import ProposalLocator, list_bounded_files
from .readers_nexus import NexusInspector, parse_rfc3339, read_field, read_timestamp

__all__ = [
    "ProposalLocator",
    "list_bounded_files",
    "NexusInspector",
    "parse_rfc3339",
    "read_field",
    "read_timestamp",
]
