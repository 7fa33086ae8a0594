"""
Planar geometry predicates for rings and cell rectangles.

Coordinates are (lon, lat) pairs treated as planar x/y. Rings are open: the
edge from the last vertex back to the first is implied.

Tie-breaks are fixed rules rather than floating-point accidents:
    - a point lying exactly on a ring edge is inside the ring
    - segments that touch (an endpoint on the other segment, or collinear
      overlap) intersect

Every predicate is O(ring length). Callers reject with `bounds_disjoint`
against `ring_bounds(ring)` before calling them.
"""

from typing import Iterator, Sequence

from geohashkit.models import Bounds, Point, Segment


def cross(o: Point, a: Point, b: Point) -> float:
    """
    Z component of (a - o) x (b - o).

    Positive for a counter-clockwise turn o -> a -> b, negative for clockwise,
    zero when collinear.
    """
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def on_segment(a: Point, b: Point, p: Point) -> bool:
    """True if p lies in the axis-aligned box spanned by segment a-b."""
    return (
        min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
        and min(a[1], b[1]) <= p[1] <= max(a[1], b[1])
    )


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Test whether segments a1-a2 and b1-b2 share at least one point."""
    d1 = cross(b1, b2, a1)
    d2 = cross(b1, b2, a2)
    d3 = cross(a1, a2, b1)
    d4 = cross(a1, a2, b2)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and (
        (d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)
    ):
        return True

    # Collinear or touching
    if d1 == 0 and on_segment(b1, b2, a1):
        return True
    if d2 == 0 and on_segment(b1, b2, a2):
        return True
    if d3 == 0 and on_segment(a1, a2, b1):
        return True
    if d4 == 0 and on_segment(a1, a2, b2):
        return True

    return False


def ring_edges(ring: Sequence[Point]) -> Iterator[Segment]:
    """Edges of an open ring, closing edge included."""
    for i in range(len(ring)):
        yield ring[i - 1], ring[i]


def point_on_ring_boundary(point: Point, ring: Sequence[Point]) -> bool:
    return any(
        cross(a, b, point) == 0 and on_segment(a, b, point)
        for a, b in ring_edges(ring)
    )


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """
    Ray-casting parity test. Points on the ring boundary count as inside.
    """
    if point_on_ring_boundary(point, ring):
        return True

    px, py = point
    inside = False
    for (xj, yj), (xi, yi) in ring_edges(ring):
        if (yi > py) != (yj > py) and px < (xj - xi) * (py - yi) / (yj - yi) + xi:
            inside = not inside
    return inside


def _edges_cross_ring(bounds: Bounds, ring: Sequence[Point]) -> bool:
    rect_edges = bounds.edges()
    for a, b in ring_edges(ring):
        for c, d in rect_edges:
            if segments_intersect(c, d, a, b):
                return True
    return False


def bounds_fully_inside_polygon(bounds: Bounds, ring: Sequence[Point]) -> bool:
    """
    True if the rectangle lies entirely inside the ring.

    All four corners must be inside, and no ring edge may touch a rectangle
    edge: a concave ring can enclose every corner while its boundary still
    cuts through the rectangle.
    """
    if not all(point_in_polygon(c, ring) for c in bounds.corners()):
        return False
    return not _edges_cross_ring(bounds, ring)


def bounds_overlaps_polygon(bounds: Bounds, ring: Sequence[Point]) -> bool:
    """
    True if the rectangle and the ring share any area or boundary point.

    Checks, cheapest first: a rectangle corner inside the ring, a ring vertex
    inside the rectangle, an edge crossing.
    """
    if any(point_in_polygon(c, ring) for c in bounds.corners()):
        return True
    if any(bounds.contains_point(v) for v in ring):
        return True
    return _edges_cross_ring(bounds, ring)


def ring_bounds(ring: Sequence[Point]) -> Bounds:
    """Axis-aligned bounding box of a ring."""
    lons = [lon for lon, _ in ring]
    lats = [lat for _, lat in ring]
    return Bounds(min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons))


def bounds_disjoint(a: Bounds, b: Bounds) -> bool:
    """True if the two rectangles share no point."""
    return (
        a.max_lon < b.min_lon
        or a.min_lon > b.max_lon
        or a.max_lat < b.min_lat
        or a.min_lat > b.max_lat
    )
