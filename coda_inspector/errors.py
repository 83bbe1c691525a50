"""Exception taxonomy.

Per-file failures derive from :class:`InspectionError` and are caught at the
inspector boundary. Directory and proposal resolution failures have their own
types because they are handled once, by the caller that asked for the listing.
"""
from __future__ import annotations


class InspectionError(Exception):
    """Base class for failures scoped to a single file."""


class OpenError(InspectionError):
    """The file could not be opened as an HDF5 container."""


class SchemaError(InspectionError):
    """An expected group is missing: not a recognized experiment file."""


class PathNotFound(InspectionError):
    """A group or dataset along a field path does not exist."""


class DecodeError(InspectionError):
    """A dataset exists but cannot be read as text."""


class TimestampParseError(InspectionError):
    """A field was read but is not an RFC 3339 timestamp with offset."""


class ReadDirError(OSError):
    """A directory could not be listed."""


class NotFoundError(LookupError):
    """No active proposal directory could be located."""
