"""
exceptions.py — Error types raised while reading boundary archives.

Archive and decode failures abort the whole load. A district record with
no usable name is not an error and never reaches this module.
"""

from __future__ import annotations


class BoundaryArchiveError(Exception):
    """Base class for every failure raised while loading boundary data."""


class MissingMember(BoundaryArchiveError):
    """The archive has no member with a required extension (.shp, .shx, .dbf)."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"required .{extension} file not found in archive")


class AmbiguousMember(BoundaryArchiveError):
    """The archive has more than one member with a required extension."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"too many .{extension} files in archive")


class ExtractionFailed(BoundaryArchiveError):
    """Opening the archive or decompressing one of its members failed."""


class DecodeFailed(BoundaryArchiveError):
    """The shapefile decoder rejected the extracted member bytes."""
