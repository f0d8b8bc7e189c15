"""
conftest.py — Shared pytest fixtures for the civicsearch test suite.

Provides:
    - GeoJSON geometries and Region instances for ray-casting tests.
    - Helpers that write real shapefiles with pyshp and zip them up.
    - A minimal fake DataStore so API tests never touch the filesystem.
"""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
import shapefile

from civicsearch.loader import DataStore
from civicsearch.models import Region


# ── GeoJSON geometry fixtures ──────────────────────────────────────────────────

@pytest.fixture
def quad_region() -> Region:
    """Convex quadrilateral around the origin, slightly skewed."""
    return Region.from_geometry({
        "type": "Polygon",
        "coordinates": [[
            [-1.1, -1.01],
            [-1.2,  1.02],
            [ 1.3,  1.03],
            [ 1.4, -1.04],
        ]],
    })


@pytest.fixture
def square_polygon_geometry() -> dict:
    """
    A simple square GeoJSON Polygon around Boston (approx).
    Interior point: (-71.06, 42.36).
    Exterior point: (0.0, 0.0).
    """
    return {
        "type": "Polygon",
        "coordinates": [
            [
                [-71.20, 42.30],
                [-71.20, 42.45],
                [-70.95, 42.45],
                [-70.95, 42.30],
                [-71.20, 42.30],   # closed ring
            ]
        ],
    }


@pytest.fixture
def polygon_with_hole_geometry() -> dict:
    """
    GeoJSON Polygon with a hole: a large square with a smaller square cut out.
    Points tested:
        - Inside outer ring, outside hole  → True
        - Inside hole                      → False
    """
    outer = [
        [0.0, 0.0], [0.0, 10.0],
        [10.0, 10.0], [10.0, 0.0],
        [0.0, 0.0],
    ]
    hole = [
        [4.0, 4.0], [6.0, 4.0],
        [6.0, 6.0], [4.0, 6.0],
        [4.0, 4.0],
    ]
    return {"type": "Polygon", "coordinates": [outer, hole]}


@pytest.fixture
def multi_polygon_geometry() -> dict:
    """
    GeoJSON MultiPolygon with two non-overlapping squares.
    """
    square_a = [[[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0], [0.0, 0.0]]]
    square_b = [[[2.0, 0.0], [2.0, 1.0], [3.0, 1.0], [3.0, 0.0], [2.0, 0.0]]]
    return {"type": "MultiPolygon", "coordinates": [square_a, square_b]}


def square_region(x0: float, y0: float, x1: float, y1: float) -> Region:
    """Axis-aligned rectangle as a Region."""
    return Region.from_geometry({
        "type": "Polygon",
        "coordinates": [[[x0, y0], [x0, y1], [x1, y1], [x1, y0], [x0, y0]]],
    })


# ── Shapefile / archive helpers ───────────────────────────────────────────────

def write_shapefile(base: Path, districts: list[tuple[list, str | None]]) -> dict[str, Path]:
    """
    Write a polygon shapefile with a NAMELSAD column.

    Each district is (rings, name); rings are lists of [x, y] pairs with
    exteriors clockwise and holes counter-clockwise, as shapefiles require.
    A name of None leaves the NAMELSAD value blank.

    Returns:
        Extension → path of the written .shp, .shx and .dbf files.
    """
    with shapefile.Writer(str(base), shapeType=shapefile.POLYGON) as writer:
        writer.field("NAMELSAD", "C", size=60)
        writer.field("DISTRICT", "N", size=4)
        for number, (rings, name) in enumerate(districts, start=1):
            writer.poly(rings)
            writer.record(name or "", number)
    return {ext: base.with_suffix(f".{ext}") for ext in ("shp", "shx", "dbf")}


def zip_members(archive_path: Path, members: dict[str, bytes],
                compression: int = zipfile.ZIP_DEFLATED) -> Path:
    """Write ``members`` (name → content) into a new zip file."""
    with zipfile.ZipFile(archive_path, "w", compression=compression) as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return archive_path


# Clockwise exteriors (shapefile convention)
DISTRICT_ONE_RINGS = [[[0.0, 0.0], [0.0, 10.0], [10.0, 10.0], [10.0, 0.0], [0.0, 0.0]]]
DISTRICT_TWO_RINGS = [[[10.0, 0.0], [10.0, 10.0], [20.0, 10.0], [20.0, 0.0], [10.0, 0.0]]]
DONUT_RINGS = [
    [[30.0, 0.0], [30.0, 10.0], [40.0, 10.0], [40.0, 0.0], [30.0, 0.0]],
    [[34.0, 4.0], [36.0, 4.0], [36.0, 6.0], [34.0, 6.0], [34.0, 4.0]],
]


@pytest.fixture
def tiger_archive(tmp_path) -> Path:
    """
    A TIGER-style zip: three districts plus the usual extra members.

    District 1 and 2 share the edge x = 10. District 3 has a hole.
    """
    files = write_shapefile(tmp_path / "tl_2019_25_sldl", [
        (DISTRICT_ONE_RINGS, "State House District 1"),
        (DISTRICT_TWO_RINGS, "State House District 2"),
        (DONUT_RINGS,        "State House District 3"),
    ])
    members = {f"tl_2019_25_sldl.{ext}": path.read_bytes() for ext, path in files.items()}
    members["tl_2019_25_sldl.cpg"] = b"UTF-8"
    members["tl_2019_25_sldl.prj"] = b'GEOGCS["GCS_North_American_1983"]'
    members["tl_2019_25_sldl.shp.iso.xml"] = b"<metadata/>"
    members["tl_2019_25_sldl.shp.ea.iso.xml"] = b"<metadata/>"
    return zip_members(tmp_path / "tl_2019_25_sldl.zip", members)


# ── DataStore fixture ─────────────────────────────────────────────────────────

@pytest.fixture
def fake_store() -> DataStore:
    """
    Minimal DataStore with two adjacent districts and one unnamed district.

    "1st District" covers x 0–10, "2nd District" covers x 10–20, both with
    y 40–45. The unnamed district overlaps the first.
    """
    return DataStore(districts=[
        (square_region(0.0, 40.0, 10.0, 45.0), {"NAMELSAD": "1st District"}),
        (square_region(10.0, 40.0, 20.0, 45.0), {"NAMELSAD": "2nd District"}),
        (square_region(0.0, 40.0, 5.0, 45.0), {"NAMELSAD": ""}),
    ])
