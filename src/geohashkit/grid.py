"""
Geohash grid addressing.

Cells are strings over a 32 character alphabet. Each character adds five
bits, alternating longitude and latitude bisections starting with longitude,
so every cell has exactly 32 children one character longer.
"""

from typing import List, NamedTuple

from geohashkit.constants import BASE32
from geohashkit.errors import InvalidCellError
from geohashkit.models import Bounds

_BASE32_DECODE = {ch: i for i, ch in enumerate(BASE32)}


class DecodedCell(NamedTuple):
    lat: float
    lon: float
    lat_error: float
    lon_error: float


def is_valid_cell(cell: str) -> bool:
    return isinstance(cell, str) and all(ch in _BASE32_DECODE for ch in cell)


def validate_cell(cell: str) -> str:
    """
    Return the cell unchanged, or raise InvalidCellError if it contains
    characters outside the geohash alphabet.
    """
    if not isinstance(cell, str):
        raise InvalidCellError(f"Cell identifiers must be strings, got {cell!r}")
    for ch in cell:
        if ch not in _BASE32_DECODE:
            raise InvalidCellError(f"Invalid geohash character: '{ch}' in \"{cell}\"")
    return cell


def encode(lat: float, lon: float, precision: int = 5) -> str:
    """
    Encode a latitude/longitude to a geohash of the given length.

    Example:
        >>> encode(51.5074, -0.1278, 7)
        'gcpvj0d'
    """
    lat_interval = [-90.0, 90.0]
    lon_interval = [-180.0, 180.0]
    chars = []
    ch = 0
    bit = 0
    is_lon = True

    while len(chars) < precision:
        if is_lon:
            mid = (lon_interval[0] + lon_interval[1]) / 2
            if lon >= mid:
                ch |= 1 << (4 - bit)
                lon_interval[0] = mid
            else:
                lon_interval[1] = mid
        else:
            mid = (lat_interval[0] + lat_interval[1]) / 2
            if lat >= mid:
                ch |= 1 << (4 - bit)
                lat_interval[0] = mid
            else:
                lat_interval[1] = mid
        is_lon = not is_lon
        bit += 1
        if bit == 5:
            chars.append(BASE32[ch])
            bit = 0
            ch = 0
    return "".join(chars)


def bounds(cell: str) -> Bounds:
    """Rectangle covered by a cell. The empty string covers the whole world."""
    min_lat, max_lat = -90.0, 90.0
    min_lon, max_lon = -180.0, 180.0
    is_lon = True

    for ch in cell:
        try:
            bits = _BASE32_DECODE[ch]
        except KeyError:
            raise InvalidCellError(
                f"Invalid geohash character: '{ch}' in \"{cell}\""
            ) from None
        for shift in range(4, -1, -1):
            if is_lon:
                mid = (min_lon + max_lon) / 2
                if (bits >> shift) & 1:
                    min_lon = mid
                else:
                    max_lon = mid
            else:
                mid = (min_lat + max_lat) / 2
                if (bits >> shift) & 1:
                    min_lat = mid
                else:
                    max_lat = mid
            is_lon = not is_lon

    return Bounds(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)


def decode(cell: str) -> DecodedCell:
    """Centre of a cell with half-width error margins."""
    b = bounds(cell)
    return DecodedCell(
        lat=(b.min_lat + b.max_lat) / 2,
        lon=(b.min_lon + b.max_lon) / 2,
        lat_error=(b.max_lat - b.min_lat) / 2,
        lon_error=(b.max_lon - b.min_lon) / 2,
    )


def children(cell: str) -> List[str]:
    """The 32 cells one character longer than `cell`."""
    return [cell + ch for ch in BASE32]


def parent(cell: str) -> str:
    return cell[:-1]
