"""
loader.py — Data loading utilities for the district lookup service.

Responsible for:
    - Handing the extracted .shp/.shx/.dbf buffers to the shapefile reader.
    - Converting each polygon shape into a Region once, at load time.
    - Exposing a DataStore dataclass used throughout the application.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

import shapefile

from civicsearch import config
from civicsearch.archive import BoundarySources, open_boundary_archive
from civicsearch.exceptions import DecodeFailed
from civicsearch.models import District, Region

logger = logging.getLogger(__name__)

_POLYGON_TYPES = (shapefile.POLYGON, shapefile.POLYGONZ, shapefile.POLYGONM)

# Anything the reader raises on malformed input
_DECODE_ERRORS = (
    shapefile.ShapefileException,
    struct.error,
    ValueError,
    IndexError,
    UnicodeDecodeError,
    OSError,
    EOFError,
)


# ── DataStore ────────────────────────────────────────────────────────────────
@dataclass
class DataStore:
    """
    Holds the decoded districts used for lookups.

    Attributes:
        districts: (Region, attributes) pairs in shapefile record order.
        source:    Archive the districts were loaded from, if any.
    """
    districts: list[District] = field(default_factory=list)
    source:    Optional[Path] = None


# ── Decoding ─────────────────────────────────────────────────────────────────

def _iter_districts(reader: shapefile.Reader) -> Iterator[District]:
    for index, shape_record in enumerate(reader.iterShapeRecords()):
        shape = shape_record.shape
        if shape.shapeType not in _POLYGON_TYPES:
            logger.debug("Skipping record %d: shape type %s is not a polygon",
                         index, shape.shapeType)
            continue
        region = Region.from_geometry(shape.__geo_interface__)
        yield region, shape_record.record.as_dict()


def read_regions(
    sources: BoundarySources,
    encoding: str = config.DBF_ENCODING,
) -> list[District]:
    """
    Decode the extracted shapefile members into (Region, attributes) pairs.

    Args:
        sources:  Buffers for the .shp, .dbf and .shx members.
        encoding: Text encoding of the .dbf attribute table.

    Returns:
        One pair per polygon record, in file order.

    Raises:
        DecodeFailed: If the reader rejects any of the sources.
    """
    logger.debug("Creating shapefile reader")
    try:
        with shapefile.Reader(
            shp=sources.shp,
            shx=sources.shx,
            dbf=sources.dbf,
            encoding=encoding,
        ) as reader:
            districts = list(_iter_districts(reader))
    except _DECODE_ERRORS as exc:
        raise DecodeFailed(f"error processing shapefile: {exc}") from exc

    logger.info("Decoded %d district polygons", len(districts))
    return districts


def load_boundary_archive(
    path: Union[str, Path],
    encoding: str = config.DBF_ENCODING,
) -> list[District]:
    """
    Extract and decode a boundary .zip archive.

    Raises:
        BoundaryArchiveError: Any extraction or decode failure.
    """
    with open_boundary_archive(path) as sources:
        return read_regions(sources, encoding=encoding)


def load_all_data() -> DataStore:
    """
    Load the configured boundary archive and return a populated DataStore.

    This should be called exactly once at application startup. Failures
    propagate: a malformed boundary archive has no usable partial result.
    """
    path = config.BOUNDARY_ARCHIVE_PATH
    logger.info("Loading boundary archive %s", path)
    return DataStore(districts=load_boundary_archive(path), source=path)
