"""
GeoJSON rendering of cell sets, for drawing coverage on a map.
"""

from typing import Dict, Iterable

from shapely.geometry import box, mapping

from geohashkit import grid


def cell_feature(cell: str) -> Dict:
    """A GeoJSON Polygon Feature for one cell's rectangle."""
    b = grid.bounds(cell)
    geometry = mapping(box(b.min_lon, b.min_lat, b.max_lon, b.max_lat))
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[list(c) for c in ring] for ring in geometry["coordinates"]],
        },
        "properties": {"geohash": cell, "precision": len(cell)},
    }


def cells_to_geojson(cells: Iterable[str]) -> Dict:
    """A FeatureCollection with one rectangle per cell."""
    return {
        "type": "FeatureCollection",
        "features": [cell_feature(cell) for cell in cells],
    }
