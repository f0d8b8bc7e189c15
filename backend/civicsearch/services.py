"""
services.py — Business logic for the district lookup service.

Responsibilities:
    - Reading the district display name from a shapefile record.
    - Scanning every district region for each query point (delegated
      to raycast.py) and collecting the names of those that contain it.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from civicsearch import config
from civicsearch.loader import DataStore
from civicsearch.models import District, MatchResult, QueryPoint
from civicsearch.raycast import contains

logger = logging.getLogger(__name__)


def extract_district_name(
    attributes: Mapping[str, Any],
    field: str = config.NAME_FIELD,
) -> Optional[str]:
    """
    Return the district name stored in a shapefile record.

    TIGER/Line files keep the display name (e.g. "State House District 1")
    in the NAMELSAD column. A missing field, a non-text value or a blank
    string all mean the name is unavailable.

    Args:
        attributes: Field name → value mapping for one record.
        field:      Column holding the display name.

    Returns:
        The name, or None if unavailable.
    """
    value = attributes.get(field)
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def match_point(
    point: QueryPoint,
    districts: Sequence[District],
    field: str = config.NAME_FIELD,
) -> MatchResult:
    """
    Collect the names of every district whose region contains ``point``.

    Every district is tested, in the order given. Districts without a
    usable name are skipped even when they contain the point.
    """
    names = []
    for region, attributes in districts:
        if not contains(region, point):
            continue
        name = extract_district_name(attributes, field)
        if name is None:
            logger.debug("District containing (%.6f, %.6f) has no %s value",
                         point.lon, point.lat, field)
            continue
        names.append(name)

    return MatchResult(point=point, districts=names)


def match_all(
    points: Sequence[QueryPoint],
    districts: Sequence[District],
    field: str = config.NAME_FIELD,
) -> list[MatchResult]:
    """
    Match a batch of query points against all districts.

    Returns:
        One MatchResult per point, in input order.
    """
    results = [match_point(point, districts, field) for point in points]
    logger.debug("Matched %d points against %d districts", len(points), len(districts))
    return results


def find_districts(lat: float, lon: float, store: DataStore) -> MatchResult:
    """Single-point lookup against a loaded DataStore."""
    return match_point(QueryPoint(lon=lon, lat=lat), store.districts)


def district_names(store: DataStore) -> list[str]:
    """Sorted names of every named district in the store."""
    names = (extract_district_name(attributes) for _, attributes in store.districts)
    return sorted(name for name in names if name is not None)
