"""
raycast.py — Point-in-polygon algorithm for district boundary testing.

Uses the ray-casting method: cast a horizontal ray from the test point
eastward to infinity, counting boundary crossings. An odd count means the
point is inside the ring.

Points lying exactly on an edge or vertex count as inside. Adjacent
districts share edges, so a point on a shared edge belongs to both.
Coordinates are compared as given, with no tolerance.

Reference:
    W. Randolph Franklin, "PNPOLY – Point Inclusion in Polygon Test"
    https://wrfranklin.org/Research/Short_Notes/pnpoly.html
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence

from civicsearch.models import PolygonPart, QueryPoint, Region


class RingPosition(Enum):
    OUTSIDE  = 0
    BOUNDARY = 1
    INSIDE   = 2


def _on_segment(lon: float, lat: float,
                xi: float, yi: float, xj: float, yj: float) -> bool:
    """True if (lon, lat) lies on the closed segment (xi, yi)–(xj, yj)."""
    cross = (xj - xi) * (lat - yi) - (yj - yi) * (lon - xi)
    if cross != 0:
        return False
    return min(xi, xj) <= lon <= max(xi, xj) and min(yi, yj) <= lat <= max(yi, yj)


def ring_position(lon: float, lat: float, ring: Sequence[Sequence[float]]) -> RingPosition:
    """
    Classify a point against a single ring.

    The ring may be closed (first point repeated last) or open; the
    closing edge is implied either way.

    Args:
        lon:  Longitude (x-axis) of the test point.
        lat:  Latitude  (y-axis) of the test point.
        ring: Sequence of (lon, lat) coordinate pairs.

    Returns:
        RingPosition.BOUNDARY if the point is on an edge, otherwise
        INSIDE or OUTSIDE by the even-odd rule.
    """
    inside = False
    n = len(ring)

    # Iterate over each edge (ring[i], ring[j])
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        if _on_segment(lon, lat, xi, yi, xj, yj):
            return RingPosition.BOUNDARY

        # Check whether the ray crosses this edge
        if ((yi > lat) != (yj > lat)) and (lon < (xj - xi) * (lat - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return RingPosition.INSIDE if inside else RingPosition.OUTSIDE


def point_in_ring(lon: float, lat: float, ring: Sequence[Sequence[float]]) -> bool:
    """Boundary-inclusive ring test."""
    return ring_position(lon, lat, ring) is not RingPosition.OUTSIDE


def _part_contains(part: PolygonPart, lon: float, lat: float) -> bool:
    """
    Inside (or on) the exterior and not strictly inside any hole.

    A point on a hole's edge sits on the region boundary, so it is kept.
    """
    if ring_position(lon, lat, part.exterior) is RingPosition.OUTSIDE:
        return False

    for hole in part.holes:
        if ring_position(lon, lat, hole) is RingPosition.INSIDE:
            return False

    return True


def contains(region: Region, point: QueryPoint) -> bool:
    """
    Test whether a district region covers a query point.

    A multi-part region covers the point if any of its parts does.
    """
    return any(_part_contains(part, point.lon, point.lat) for part in region.parts)


def point_in_polygon(lon: float, lat: float, geometry: Mapping[str, Any]) -> bool:
    """
    Test whether a point falls inside a GeoJSON Polygon or MultiPolygon.

    Raises:
        ValueError: If the geometry type is unsupported.
    """
    return contains(Region.from_geometry(geometry), QueryPoint(lon=lon, lat=lat))
