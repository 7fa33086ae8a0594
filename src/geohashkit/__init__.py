__version__ = "v1.0.0"


__all__ = [
    "__version__",
    "bounds_fully_inside_polygon",
    "bounds_overlaps_polygon",
    "cells_to_convex_hull",
    "cells_to_geojson",
    "cells_to_hull_polygon",
    "compact_cells",
    "CoverageOptions",
    "grid",
    "point_in_polygon",
    "polygon_to_cells",
]

from . import grid
from .compaction import compact_cells
from .coverage import polygon_to_cells
from .geojson import cells_to_geojson
from .models import CoverageOptions
from .spatial.hull import cells_to_convex_hull, cells_to_hull_polygon
from .spatial.predicates import (
    bounds_fully_inside_polygon,
    bounds_overlaps_polygon,
    point_in_polygon,
)
