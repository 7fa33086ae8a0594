"""
Polygon input normalisation.

Coverage accepts several input shapes:
    - a coordinate ring: a sequence of (lon, lat) pairs
    - a GeoJSON Polygon or MultiPolygon mapping, optionally wrapped in a Feature
    - a list of Polygon mappings (multi-part input)
    - any geometry exposing __geo_interface__, e.g. shapely Polygon/MultiPolygon

All of them are reduced to a tuple of NormalisedPolygon parts. Every ring of
every part is validated here, so an invalid part fails the whole call before
any subdivision work begins.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple

from shapely.geometry import mapping

from geohashkit.constants import MAX_EDGE_LONGITUDE_SPAN
from geohashkit.errors import (
    AntimeridianError,
    DegenerateInputError,
    InputError,
    RangeError,
)
from geohashkit.models import NormalisedPolygon, Point

logger = logging.getLogger(__name__)


def strip_closing_vertex(ring: Sequence[Point]) -> List[Point]:
    """Drop the last vertex if it repeats the first."""
    ring = list(ring)
    if len(ring) > 1 and ring[0] == ring[-1]:
        return ring[:-1]
    return ring


def _to_point(vertex: Any) -> Point:
    try:
        return (float(vertex[0]), float(vertex[1]))
    except (TypeError, ValueError, IndexError):
        raise InputError(f"Invalid vertex: {vertex!r}") from None


def _to_ring(coords: Any) -> List[Point]:
    if coords is None:
        return []
    return strip_closing_vertex([_to_point(v) for v in coords])


def has_antimeridian_crossing(ring: Sequence[Point]) -> bool:
    """True if any edge, closing edge included, spans more than 180 degrees."""
    return any(
        abs(ring[i][0] - ring[i - 1][0]) > MAX_EDGE_LONGITUDE_SPAN
        for i in range(len(ring))
    )


def validate_ring(ring: Sequence[Point], label: str = "polygon") -> None:
    """
    Check a single open ring.

    Raises:
        DegenerateInputError: fewer than 3 vertices
        AntimeridianError: an edge spans more than 180 degrees of longitude
        RangeError: a non-finite or out-of-range coordinate
    """
    if len(ring) < 3:
        raise DegenerateInputError(
            f"Polygon must have at least 3 vertices, {label} has {len(ring)}"
        )
    if has_antimeridian_crossing(ring):
        raise AntimeridianError(
            "Polygons crossing the antimeridian (±180° longitude) are not supported"
        )
    for lon, lat in ring:
        if not math.isfinite(lat) or lat < -90 or lat > 90:
            raise RangeError(f"Invalid latitude in {label}: {lat}")
        if not math.isfinite(lon) or lon < -180 or lon > 180:
            raise RangeError(f"Invalid longitude in {label}: {lon}")


def _polygon_from_rings(rings: Any) -> NormalisedPolygon:
    if not rings or rings[0] is None or len(rings[0]) == 0:
        raise DegenerateInputError("GeoJSON Polygon has no outer ring")

    outer = _to_ring(rings[0])
    holes = []
    for hole_coords in rings[1:]:
        hole = _to_ring(hole_coords)
        if len(hole) >= 3:
            holes.append(tuple(hole))
        else:
            logger.debug(f"Discarding degenerate hole ring with {len(hole)} vertices")
    return NormalisedPolygon(outer=tuple(outer), holes=tuple(holes))


def _parts_from_mapping(geometry: Mapping) -> List[NormalisedPolygon]:
    geometry_type = geometry.get("type")
    if geometry_type == "Feature":
        inner = geometry.get("geometry")
        if inner is None:
            raise InputError("GeoJSON Feature has no geometry")
        return _parts_from_mapping(inner)
    if geometry_type == "Polygon":
        return [_polygon_from_rings(geometry.get("coordinates"))]
    if geometry_type == "MultiPolygon":
        return [_polygon_from_rings(rings) for rings in geometry.get("coordinates") or []]
    raise InputError(f"Unsupported input type: {geometry_type}")


def _is_geometry(value: Any) -> bool:
    return isinstance(value, Mapping) or hasattr(value, "__geo_interface__")


def _as_mapping(value: Any) -> Mapping:
    if isinstance(value, Mapping):
        return value
    return mapping(value)


def normalise_input(polygon_input: Any) -> Tuple[NormalisedPolygon, ...]:
    """
    Reduce any supported polygon input to validated NormalisedPolygon parts.

    An empty MultiPolygon (or empty list of parts) yields an empty tuple.

    Raises:
        InputError: Unsupported or malformed input, or any invalid ring
    """
    if _is_geometry(polygon_input):
        parts = _parts_from_mapping(_as_mapping(polygon_input))
    elif isinstance(polygon_input, (str, bytes)) or not isinstance(polygon_input, Sequence):
        raise InputError(f"Unsupported input: {type(polygon_input).__name__}")
    elif len(polygon_input) > 0 and _is_geometry(polygon_input[0]):
        parts = []
        for part in polygon_input:
            if not _is_geometry(part):
                raise InputError("Multi-part input must contain only polygon objects")
            parts.extend(_parts_from_mapping(_as_mapping(part)))
    else:
        parts = [NormalisedPolygon(outer=tuple(_to_ring(polygon_input)))]

    for index, part in enumerate(parts):
        label = "polygon" if len(parts) == 1 else f"polygon part {index}"
        validate_ring(part.outer, label)
        for hole in part.holes:
            validate_ring(hole, f"hole of {label}")

    return tuple(parts)
