"""Exceptions raised by slicemeta."""

from __future__ import annotations


class SlicemetaError(Exception):
    """Base class for extraction failures."""


class ArchiveError(SlicemetaError):
    """The input archive could not be used."""


class ArchiveEntryNotFound(ArchiveError):
    """The archive holds no embedded gcode entry."""


class ArchiveCorrupt(ArchiveError):
    """The archive (or its gcode entry) could not be decompressed."""
