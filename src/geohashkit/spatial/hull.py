"""
Convex hull reconstruction from a cell set.

The hull turns a coverage result back into an editable polygon: every cell
rectangle contributes its four corners and Andrew's monotone chain wraps them.
"""

import logging
from typing import Iterable, List, Optional

import numpy as np
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

from geohashkit import grid
from geohashkit.constants import MAX_EDGE_LONGITUDE_SPAN
from geohashkit.errors import GeometryError
from geohashkit.models import Point
from geohashkit.spatial.predicates import cross

logger = logging.getLogger(__name__)


def unique_corners(cells: Iterable[str]) -> List[Point]:
    """
    Distinct rectangle corners of all cells, sorted by longitude then latitude.
    """
    corners = [corner for cell in cells for corner in grid.bounds(cell).corners()]
    if not corners:
        return []
    # unique over rows also sorts them lexicographically
    points = np.unique(np.array(corners, dtype=float), axis=0)
    return [(float(lon), float(lat)) for lon, lat in points]


def _half_hull(points: Iterable[Point]) -> List[Point]:
    chain = []
    for p in points:
        while len(chain) >= 2 and cross(chain[-2], chain[-1], p) <= 0:
            chain.pop()
        chain.append(p)
    return chain


def cells_to_convex_hull(cells: Iterable[str]) -> List[Point]:
    """
    Compute a convex polygon enclosing every cell in the set.

    Args:
        cells: Geohash cell identifiers

    Returns:
        Hull vertices as (lon, lat) pairs in counter-clockwise order without a
        closing vertex. Empty input gives an empty list; fewer than 3 unique
        corners are returned as-is.

    Raises:
        GeometryError: If the cells straddle the antimeridian. Split the cell
                       set at ±180° and compute a hull for each side.
    """
    points = unique_corners(cells)
    if len(points) < 3:
        return points

    lons = [lon for lon, _ in points]
    if max(lons) - min(lons) > MAX_EDGE_LONGITUDE_SPAN:
        raise GeometryError(
            "Cells straddle the antimeridian (±180° longitude). "
            "Split into separate sets and compute hulls independently."
        )

    lower = _half_hull(points)
    upper = _half_hull(reversed(points))

    # Each chain ends where the other begins
    hull = lower[:-1] + upper[:-1]
    logger.debug(f"Hull of {len(points)} corners has {len(hull)} vertices")
    return hull


def cells_to_hull_polygon(cells: Iterable[str]) -> Optional[Polygon]:
    """
    The convex hull of a cell set as a counter-clockwise shapely Polygon, or
    None when the hull has fewer than 3 vertices.
    """
    hull = cells_to_convex_hull(cells)
    if len(hull) < 3:
        return None
    return orient(Polygon(hull), sign=1.0)
