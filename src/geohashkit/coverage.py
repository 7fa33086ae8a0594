"""
Polygon to geohash coverage.

The engine tiles a polygon's effective area (outer ring minus holes) with a
multi-precision cell set:

- Boundary cells are subdivided down to max_precision for a tight edge.
- Interior cells stop at the coarsest precision allowed by the coverage
  threshold (see `interior_min_precision`).
- Only cells fully inside the effective area are committed below
  max_precision, so coarse blocks never extend past the boundary before the
  final sibling merge.

Subdivision uses an explicit work stack of pending cells, never recursion,
and a whole pass is abandoned once the committed set grows past the bailout
limit.

`polygon_to_cells` wraps the engine in the budget search: it steps
max_precision down until the compacted result fits max_cells, then makes a
last coarse attempt before giving up with a SizingError.
"""

import dataclasses
import logging
import math
from typing import Any, List, Optional, Sequence

from funcy import lcat

from geohashkit import constants, grid
from geohashkit.compaction import compact
from geohashkit.errors import SizingError
from geohashkit.models import Bounds, CoverageOptions, NormalisedPolygon, round_half_up
from geohashkit.spatial.normalise import normalise_input
from geohashkit.spatial.predicates import (
    bounds_disjoint,
    bounds_fully_inside_polygon,
    bounds_overlaps_polygon,
    ring_bounds,
)

logger = logging.getLogger(__name__)


def interior_min_precision(
    min_precision: int, max_precision: int, coverage_threshold: float
) -> int:
    """
    Minimum length a fully-inside cell must reach before it is committed.

    At threshold 1.0 this is max_precision (uniform fine tiling); at 0.0
    interior cells may stop as coarse as min_precision.
    """
    return math.ceil(min_precision + (max_precision - min_precision) * coverage_threshold)


def sibling_merge_count(coverage_threshold: float) -> int:
    """
    Number of present children (out of 32) that collapse a group to its parent.

    At threshold 1.0 only complete groups merge; lower thresholds accept a
    small boundary overshoot for fewer cells.
    """
    return round_half_up(
        constants.SIBLING_MERGE_BASE + coverage_threshold * constants.SIBLING_MERGE_SPAN
    )


@dataclasses.dataclass(frozen=True)
class EffectiveArea:
    """Containment tests against an outer ring minus its holes."""

    polygon: NormalisedPolygon
    outer_bounds: Bounds
    hole_bounds: Sequence[Bounds]

    @classmethod
    def of(cls, polygon: NormalisedPolygon) -> "EffectiveArea":
        return cls(
            polygon=polygon,
            outer_bounds=ring_bounds(polygon.outer),
            hole_bounds=tuple(ring_bounds(h) for h in polygon.holes),
        )

    def outside_bbox(self, bounds: Bounds) -> bool:
        return bounds_disjoint(bounds, self.outer_bounds)

    def _holes_near(self, bounds: Bounds):
        for hole, hole_bounds in zip(self.polygon.holes, self.hole_bounds):
            if not bounds_disjoint(bounds, hole_bounds):
                yield hole

    def fully_contains(self, bounds: Bounds) -> bool:
        """Fully inside the outer ring and touching no hole."""
        if not bounds_fully_inside_polygon(bounds, self.polygon.outer):
            return False
        return not any(
            bounds_overlaps_polygon(bounds, hole) for hole in self._holes_near(bounds)
        )

    def overlaps(self, bounds: Bounds) -> bool:
        """Overlapping the outer ring and not swallowed by any hole."""
        if not bounds_overlaps_polygon(bounds, self.polygon.outer):
            return False
        return not any(
            bounds_fully_inside_polygon(bounds, hole) for hole in self._holes_near(bounds)
        )


def compute_cells(
    polygon: NormalisedPolygon,
    min_precision: int,
    max_precision: int,
    coverage_threshold: float,
    bailout: Optional[int] = None,
) -> Optional[List[str]]:
    """
    Cover one polygon part at a fixed precision range.

    Args:
        polygon: A validated polygon part
        min_precision: Coarsest precision an interior cell may stop at
        max_precision: Finest precision; boundary cells stop here
        coverage_threshold: 0.0 (coarse interior) to 1.0 (uniform fine cells)
        bailout: Abort once more than this many cells have been committed

    Returns:
        The sorted, compacted cell list, or None if the pass was aborted by
        the bailout. An empty list means the polygon covers no cell.
    """
    area = EffectiveArea.of(polygon)
    interior = interior_min_precision(min_precision, max_precision, coverage_threshold)
    committed = []

    stack = [
        cell
        for cell in grid.children("")
        if not area.outside_bbox(grid.bounds(cell)) and area.overlaps(grid.bounds(cell))
    ]

    while stack:
        cell = stack.pop()
        cell_bounds = grid.bounds(cell)

        if area.fully_contains(cell_bounds):
            if len(cell) >= interior:
                committed.append(cell)
            else:
                stack.extend(grid.children(cell))
        elif len(cell) >= max_precision:
            # Finest allowed boundary cell
            if area.overlaps(cell_bounds):
                committed.append(cell)
        else:
            for child in grid.children(cell):
                child_bounds = grid.bounds(child)
                if area.outside_bbox(child_bounds):
                    continue
                if area.fully_contains(child_bounds):
                    if len(child) >= interior:
                        committed.append(child)
                    else:
                        stack.append(child)
                elif area.overlaps(child_bounds):
                    stack.append(child)

        if bailout is not None and len(committed) > bailout:
            logger.debug(
                f"Bailout at max_precision {max_precision}: "
                f"more than {bailout} cells committed"
            )
            return None

    return compact(committed, sibling_merge_count(coverage_threshold), min_precision)


def _cover_parts(
    parts: Sequence[NormalisedPolygon],
    min_precision: int,
    max_precision: int,
    coverage_threshold: float,
    bailout: Optional[int] = None,
) -> Optional[List[str]]:
    """
    Cover every part at the same precision and merge across parts.

    All parts share one bailout: each part only gets what the earlier parts
    left of it, and the pass is abandoned once their total goes past it.
    """
    results = []
    committed = 0
    for part in parts:
        remaining = None if bailout is None else bailout - committed
        cells = compute_cells(part, min_precision, max_precision, coverage_threshold, remaining)
        if cells is None:
            return None
        committed += len(cells)
        if bailout is not None and committed > bailout:
            logger.debug(f"Bailout at max_precision {max_precision}: parts exceed {bailout} cells")
            return None
        results.append(cells)

    if len(results) == 1:
        return results[0]
    return compact(lcat(results), constants.EXACT_MIN_SIBLINGS, min_precision)


def polygon_to_cells(
    polygon_input: Any,
    options: Optional[CoverageOptions] = None,
    **overrides,
) -> List[str]:
    """
    Convert a polygon to a compact, sorted multi-precision geohash list.

    Edges always subdivide to max_precision. Interior cells use the coarsest
    precision allowed by merge_threshold. If the result exceeds max_cells,
    max_precision is stepped down (jointly for all parts of a multi-part
    input) until it fits; failing that, one last pass at min_precision with
    the coarsest interior cells is tried.

    Args:
        polygon_input: A coordinate ring, GeoJSON Polygon/MultiPolygon/Feature
                       mapping, list of Polygon mappings, or shapely geometry
        options: Coverage options; defaults to CoverageOptions()
        **overrides: Individual CoverageOptions fields taking precedence

    Returns:
        Sorted cell identifiers; no cell is an ancestor of another and the
        list never has more than max_cells entries.

    Raises:
        InputError: Invalid polygon or options (raised before any subdivision)
        SizingError: max_cells cannot be met even at min_precision

    Antimeridian-crossing polygons are not supported: split at ±180° and
    cover each half separately.
    """
    options = dataclasses.replace(options or CoverageOptions(), **overrides).resolved()
    parts = normalise_input(polygon_input)
    if not parts:
        return []

    bailout = options.max_cells * constants.BAILOUT_MULTIPLIER
    for max_precision in range(options.max_precision, options.min_precision - 1, -1):
        cells = _cover_parts(
            parts,
            options.min_precision,
            max_precision,
            options.merge_threshold,
            bailout,
        )
        if cells is None:
            continue
        if len(cells) <= options.max_cells:
            logger.info(
                f"Covered {len(parts)} polygon part(s) with {len(cells)} cells "
                f"at max_precision {max_precision}"
            )
            return cells
        logger.debug(
            f"{len(cells)} cells at max_precision {max_precision} "
            f"exceeds max_cells {options.max_cells}"
        )

    logger.warning(
        f"No precision between {options.min_precision} and {options.max_precision} "
        f"fits {options.max_cells} cells, trying coarsest coverage"
    )
    fallback = _cover_parts(parts, options.min_precision, options.min_precision, 0.0, bailout)
    if fallback is None:
        raise SizingError(bailout + 1, options.min_precision, options.max_cells, exceeded=True)
    if len(fallback) <= options.max_cells:
        return fallback

    raise SizingError(len(fallback), options.min_precision, options.max_cells)
