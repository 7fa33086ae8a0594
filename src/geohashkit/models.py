"""
Data models for the geohashkit package.

This module contains the immutable value types passed between the grid,
the geometry predicates and the coverage engine.
"""

import dataclasses
import math
from typing import List, Tuple

from geohashkit import constants
from geohashkit.errors import RangeError

Point = Tuple[float, float]  # (lon, lat)
Ring = List[Point]
Segment = Tuple[Point, Point]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounding towards +infinity."""
    return math.floor(value + 0.5)


@dataclasses.dataclass(frozen=True)
class Bounds:
    """Rectangle covered by a cell, in degrees."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def corners(self) -> List[Point]:
        """Corners as (lon, lat) pairs: SW, SE, NE, NW."""
        return [
            (self.min_lon, self.min_lat),
            (self.max_lon, self.min_lat),
            (self.max_lon, self.max_lat),
            (self.min_lon, self.max_lat),
        ]

    def edges(self) -> List[Segment]:
        sw, se, ne, nw = self.corners()
        return [(sw, se), (se, ne), (ne, nw), (nw, sw)]

    def contains_point(self, point: Point) -> bool:
        lon, lat = point
        return (
            self.min_lon <= lon <= self.max_lon
            and self.min_lat <= lat <= self.max_lat
        )

    def center(self) -> Point:
        return (
            (self.min_lon + self.max_lon) / 2,
            (self.min_lat + self.max_lat) / 2,
        )


@dataclasses.dataclass(frozen=True)
class NormalisedPolygon:
    """
    One polygon part: an outer ring plus zero or more hole rings.

    Rings are open (no duplicated closing vertex) and have already been
    validated by the normaliser.
    """

    outer: Tuple[Point, ...]
    holes: Tuple[Tuple[Point, ...], ...] = ()


@dataclasses.dataclass(frozen=True)
class CoverageOptions:
    """
    Knobs for polygon coverage.

    min_precision / max_precision bound the cell lengths that may appear in
    the result, max_cells caps the result size and merge_threshold trades
    boundary accuracy (1.0) for fewer, coarser cells (0.0).
    """

    min_precision: int = constants.DEFAULT_MIN_PRECISION
    max_precision: int = constants.DEFAULT_MAX_PRECISION
    max_cells: int = constants.DEFAULT_MAX_CELLS
    merge_threshold: float = constants.DEFAULT_MERGE_THRESHOLD

    def resolved(self) -> "CoverageOptions":
        """
        Validate the raw option values and return a clamped copy.

        Raises:
            RangeError: If any option is non-finite, or max_cells is below 1
        """
        for name in ("min_precision", "max_precision", "max_cells", "merge_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RangeError(f"Invalid {name}: {value!r}")
            if not math.isfinite(value):
                raise RangeError(f"Invalid {name}: {value}")
        if self.max_cells < 1:
            raise RangeError(f"Invalid max_cells: {self.max_cells}")

        min_precision = max(
            constants.MIN_PRECISION,
            min(constants.MAX_PRECISION, round_half_up(self.min_precision)),
        )
        max_precision = max(
            min_precision,
            min(constants.MAX_PRECISION, round_half_up(self.max_precision)),
        )
        return CoverageOptions(
            min_precision=min_precision,
            max_precision=max_precision,
            max_cells=int(self.max_cells),
            merge_threshold=max(0.0, min(1.0, float(self.merge_threshold))),
        )
