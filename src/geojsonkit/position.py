# src/geojsonkit/position.py

"""
This module defines the Position, the smallest unit of GeoJSON coordinates,
and the validation of nested coordinate arrays.

A Position is 2 or 3 finite ordinates (x, y and an optional z). Arrays of
positions are nested to a fixed depth per geometry kind:
    depth 0: Position                      (Point)
    depth 1: sequence of Positions         (MultiPoint, LineString)
    depth 2: sequence of sequences         (MultiLineString, Polygon)
    depth 3: sequence of depth-2 sequences (MultiPolygon)
"""

import math
import logging
from typing import Any, Iterable, Optional, Tuple, Union

from .errors import CoordinateShapeError
from .jsonvalue import is_number, json_type_name

log = logging.getLogger(__name__)

__all__ = [
    "MIN_POSITION_DIMENSION",
    "MAX_POSITION_DIMENSION",
    "Position",
    "coerce_positions"
]

MIN_POSITION_DIMENSION = 2
MAX_POSITION_DIMENSION = 3

class Position(tuple):
    """
    An immutable coordinate tuple of 2 or 3 floats.

    Compares equal to any tuple holding the same numbers, so
    Position([1, 2]) == (1.0, 2.0).
    """
    __slots__ = ()

    def __new__(cls, ordinates: Iterable[Any] = (), kind: Optional[str] = None) -> "Position":
        if isinstance(ordinates, Position):
            return ordinates
        if isinstance(ordinates, (str, bytes)) or not _is_sequence(ordinates):
            raise CoordinateShapeError(
                kind, f"a position must be an array of numbers, got {json_type_name(ordinates)}"
            )
        values = tuple(ordinates)
        if not MIN_POSITION_DIMENSION <= len(values) <= MAX_POSITION_DIMENSION:
            raise CoordinateShapeError(
                kind,
                f"a position must contain {MIN_POSITION_DIMENSION} or {MAX_POSITION_DIMENSION} "
                f"elements, but got {len(values)}"
            )
        floats = []
        for v in values:
            if not is_number(v) and not _is_numpy_number(v):
                raise CoordinateShapeError(
                    kind, f"ordinates must be numbers, got {json_type_name(v)}"
                )
            f = float(v)
            if not math.isfinite(f):
                raise CoordinateShapeError(kind, f"ordinates must be finite, got {f}")
            floats.append(f)
        return super().__new__(cls, floats)

    @property
    def x(self) -> float:
        return self[0]

    @property
    def y(self) -> float:
        return self[1]

    @property
    def z(self) -> Optional[float]:
        return self[2] if len(self) == 3 else None

    @property
    def has_z(self) -> bool:
        return len(self) == 3

    def to_json_value(self) -> list:
        return list(self)

    def __repr__(self) -> str:
        return f"Position({list(self)!r})"

def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple)) or (
        hasattr(value, "__len__") and hasattr(value, "__getitem__") and hasattr(value, "dtype")
    )

def _is_numpy_number(value: Any) -> bool:
    # numpy scalars come back from shapely coordinate arrays
    return hasattr(value, "dtype") and getattr(value.dtype, "kind", None) in ("i", "u", "f")

Nested = Union[Position, Tuple[Any, ...]]

def coerce_positions(value: Any, depth: int, kind: Optional[str] = None) -> Nested:
    """
    Validate a nested coordinate array and normalize it to tuples of Positions.

    Args:
        value: JSON array (or any list/tuple/ndarray) holding the coordinates.
        depth: Nesting level expected for the geometry kind (0-3).
        kind: Geometry kind name, reported in error messages.

    Returns:
        A Position for depth 0, otherwise nested tuples ending in Positions.

    Raises:
        CoordinateShapeError: On wrong nesting or invalid positions.
    """
    if depth == 0:
        return Position(value, kind=kind)

    if isinstance(value, (str, bytes)) or not _is_sequence(value):
        raise CoordinateShapeError(
            kind, f"expected an array nested {depth + 1} levels deep, got {json_type_name(value)}"
        )

    items = []
    for item in value:
        if depth == 1 and not _is_sequence(item):
            raise CoordinateShapeError(
                kind, f"expected an array of positions, found {json_type_name(item)} element"
            )
        items.append(coerce_positions(item, depth - 1, kind))
    return tuple(items)
