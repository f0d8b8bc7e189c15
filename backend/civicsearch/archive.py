"""
archive.py — Locate and extract shapefile members from a boundary .zip.

TIGER/Line boundary files ship as a zip archive, for example
``tl_2019_25_sldl.zip``::

    tl_2019_25_sldl.cpg
    tl_2019_25_sldl.dbf
    tl_2019_25_sldl.prj
    tl_2019_25_sldl.shp
    tl_2019_25_sldl.shx
    tl_2019_25_sldl.shp.ea.iso.xml
    tl_2019_25_sldl.shp.iso.xml

Only three members are needed:
    - .shp — feature geometry
    - .shx — index of the feature geometry
    - .dbf — tabular attributes

The shapefile reader seeks around in each file, while zip members can
only be read front to back, so every member is copied into an in-memory
buffer first.
"""

from __future__ import annotations

import io
import logging
import shutil
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Union

from civicsearch.exceptions import AmbiguousMember, ExtractionFailed, MissingMember

logger = logging.getLogger(__name__)

SHP_EXTENSION = "shp"
SHX_EXTENSION = "shx"
DBF_EXTENSION = "dbf"

# Failures that ZipFile.open / read can raise for a damaged archive.
# NotImplementedError: unsupported compression method (e.g. deflate64).
# RuntimeError: encrypted member with no password.
_EXTRACTION_ERRORS = (
    KeyError,
    zipfile.BadZipFile,
    OSError,
    EOFError,
    zlib.error,
    NotImplementedError,
    RuntimeError,
)


# ── Extension resolver ───────────────────────────────────────────────────────

def _member_extension(member_name: str) -> str:
    """Return the extension of the final path segment, without the dot."""
    return PurePosixPath(member_name).suffix[1:]


def resolve_member(member_names: Iterable[str], extension: str) -> str:
    """
    Find the single archive member whose extension equals ``extension``.

    Matching is case-sensitive and only looks at the last path segment,
    so ``tl_2019_25_sldl.shp.iso.xml`` is an ``xml`` member, not ``shp``.

    Args:
        member_names: Names as listed by ``ZipFile.namelist()``.
        extension:    Extension without the leading dot, e.g. ``"shp"``.

    Returns:
        The matching member name.

    Raises:
        MissingMember:   If no member has the extension.
        AmbiguousMember: If more than one member has the extension.
    """
    matches = [name for name in member_names if _member_extension(name) == extension]

    if not matches:
        raise MissingMember(extension)
    if len(matches) > 1:
        logger.debug("Candidates for .%s: %s", extension, matches)
        raise AmbiguousMember(extension)

    return matches[0]


@dataclass(frozen=True)
class ArchiveManifest:
    """Names of the three shapefile members inside one archive."""
    shp: str
    shx: str
    dbf: str


def read_manifest(member_names: Iterable[str]) -> ArchiveManifest:
    """
    Resolve the .shp, .dbf and .shx members of an archive listing.

    The first resolution failure is raised as-is.
    """
    names = list(member_names)
    shp = resolve_member(names, SHP_EXTENSION)
    dbf = resolve_member(names, DBF_EXTENSION)
    shx = resolve_member(names, SHX_EXTENSION)
    return ArchiveManifest(shp=shp, shx=shx, dbf=dbf)


# ── Materializer ─────────────────────────────────────────────────────────────

def materialize_member(archive: zipfile.ZipFile, member_name: str) -> io.BytesIO:
    """
    Copy one archive member into a seekable in-memory buffer.

    The returned buffer is positioned at offset 0.

    Raises:
        ExtractionFailed: If the member is absent, corrupt, truncated,
            encrypted, or compressed with an unsupported method.
    """
    buffer = io.BytesIO()
    try:
        with archive.open(member_name) as stream:
            shutil.copyfileobj(stream, buffer)
    except _EXTRACTION_ERRORS as exc:
        buffer.close()
        raise ExtractionFailed(f"could not extract {member_name!r}: {exc}") from exc

    buffer.seek(0)
    logger.debug("Extracted %s (%d bytes)", member_name, buffer.getbuffer().nbytes)
    return buffer


@dataclass
class BoundarySources:
    """
    The three extracted shapefile members, ready for the decoder.

    Use as a context manager so the buffers are released once the
    decoder is done with them.
    """
    shp: io.BytesIO
    dbf: io.BytesIO
    shx: io.BytesIO

    def close(self) -> None:
        for buffer in (self.shp, self.dbf, self.shx):
            buffer.close()

    def __enter__(self) -> "BoundarySources":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def extract_boundary_sources(archive: zipfile.ZipFile) -> BoundarySources:
    """
    Resolve and extract the geometry, attribute and index members.

    Stops at the first failure; no partial bundle is returned.
    """
    logger.info("Checking for files in archive")
    manifest = read_manifest(archive.namelist())

    buffers = []
    try:
        for member_name in (manifest.shp, manifest.dbf, manifest.shx):
            buffers.append(materialize_member(archive, member_name))
    except ExtractionFailed:
        for buffer in buffers:
            buffer.close()
        raise

    shp, dbf, shx = buffers
    return BoundarySources(shp=shp, dbf=dbf, shx=shx)


def open_boundary_archive(path: Union[str, Path]) -> BoundarySources:
    """
    Open the zip file at ``path`` and extract its shapefile members.

    The archive itself is closed before returning; only the buffers live on.

    Raises:
        MissingMember, AmbiguousMember: If the archive has the wrong shape.
        ExtractionFailed: If the file cannot be opened or read as a zip.
    """
    try:
        archive = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ExtractionFailed(f"could not open archive {str(path)!r}: {exc}") from exc

    with archive:
        return extract_boundary_sources(archive)
