"""
Planar spatial helpers for geohash coverage.

- **predicates**: point-in-polygon, segment intersection and rectangle/ring
  containment tests used by the coverage engine
- **normalise**: validates polygon input and reduces it to outer/hole rings
- **hull**: rebuilds a convex polygon from a cell set

For direct access, import from the specific module:
    from geohashkit.spatial.predicates import point_in_polygon
    from geohashkit.spatial.hull import cells_to_convex_hull
"""

__all__ = []
