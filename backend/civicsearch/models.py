"""
models.py — Value types shared by the loader, ray caster and matcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

Coordinate = tuple[float, float]
Ring = tuple[Coordinate, ...]


@dataclass(frozen=True)
class QueryPoint:
    """A (longitude, latitude) pair in the boundary data's CRS."""
    lon: float
    lat: float


@dataclass(frozen=True)
class PolygonPart:
    """One outer ring and the holes cut out of it."""
    exterior: Ring
    holes: tuple[Ring, ...] = ()


def _to_ring(coordinates: Sequence[Sequence[float]]) -> Ring:
    return tuple((float(c[0]), float(c[1])) for c in coordinates)


def _to_part(rings: Sequence[Sequence[Sequence[float]]]) -> PolygonPart:
    return PolygonPart(
        exterior=_to_ring(rings[0]),
        holes=tuple(_to_ring(hole) for hole in rings[1:]),
    )


@dataclass(frozen=True)
class Region:
    """
    A district's covered area: the union of every part's exterior minus
    that part's holes.
    """
    parts: tuple[PolygonPart, ...]

    @classmethod
    def from_geometry(cls, geometry: Mapping[str, Any]) -> "Region":
        """
        Build a Region from a GeoJSON-style Polygon or MultiPolygon mapping.

        This is the shape the shapefile reader exposes through
        ``__geo_interface__``. Empty polygons become a Region with no parts.

        Raises:
            ValueError: If the geometry type is unsupported.
        """
        geo_type    = geometry.get("type")
        coordinates = geometry.get("coordinates", [])

        if geo_type == "Polygon":
            polygons = [coordinates] if coordinates else []
        elif geo_type == "MultiPolygon":
            polygons = [polygon for polygon in coordinates if polygon]
        else:
            raise ValueError(f"Unsupported geometry type: {geo_type!r}")

        return cls(parts=tuple(_to_part(polygon) for polygon in polygons))


District = tuple[Region, Mapping[str, Any]]


class MatchStatus(str, Enum):
    NONE     = "none"
    SINGLE   = "single"
    MULTIPLE = "multiple"


@dataclass
class MatchResult:
    """District names containing one query point, in scan order."""
    point: QueryPoint
    districts: list[str] = field(default_factory=list)

    @property
    def status(self) -> MatchStatus:
        if not self.districts:
            return MatchStatus.NONE
        if len(self.districts) == 1:
            return MatchStatus.SINGLE
        return MatchStatus.MULTIPLE
