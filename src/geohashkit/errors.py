"""
Exceptions raised by geohashkit.

Input problems are reported before any subdivision work starts. Budget and
geometry problems are terminal for the call: no partial cell list is returned.
"""


class GeohashKitError(Exception):
    """Base error for geohashkit operations."""


class InputError(GeohashKitError, ValueError):
    """Polygon input or coverage options are invalid."""


class DegenerateInputError(InputError):
    """A ring has fewer than 3 distinct vertices."""


class AntimeridianError(InputError):
    """A ring edge spans more than 180 degrees of longitude."""


class RangeError(InputError):
    """A coordinate or numeric option is non-finite or out of range."""


class InvalidCellError(InputError):
    """A cell identifier contains characters outside the geohash alphabet."""


class SizingError(GeohashKitError):
    """
    The requested max_cells cannot be met, even at the minimum precision with
    the coarsest interior cells.

    Attributes:
        required_cells: Smallest cell count achievable at `precision`, or a
                        lower bound on it when `exceeded` is set
        precision: The minimum precision that was attempted
        max_cells: The budget that was requested
        exceeded: The attempt was abandoned at the bailout limit, so the
                  real count is unknown
    """

    def __init__(
        self, required_cells: int, precision: int, max_cells: int, exceeded: bool = False
    ) -> None:
        self.required_cells = required_cells
        self.precision = precision
        self.max_cells = max_cells
        self.exceeded = exceeded
        count = f"more than {required_cells - 1}" if exceeded else f"at least {required_cells}"
        super().__init__(
            f"Polygon requires {count} cells at precision "
            f"{precision}, but max_cells is {max_cells}. "
            "Increase max_cells or reduce the polygon area."
        )


class GeometryError(GeohashKitError):
    """Raised when a cell set cannot be turned into a planar geometry."""
