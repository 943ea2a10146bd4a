from typing import List, Sequence

from ._errors import GeometryError
from .geojson import Position

__all__ = (
    "group_lengths",
    "point_coords",
    "line_coords",
    "polygon_coords",
    "multipolygon_coords",
)


def group_lengths(lengths: Sequence[int]) -> List[List[int]]:
    """Split a flat ``lengths`` array into groups.

    Each group is encoded as a count followed by that many values. Decoding
    stops early (returning the groups read so far) if a count runs past the
    end of the input.

    Examples
    --------
    >>> group_lengths([1, 6, 1, 8, 3, 16, 3, 14, 1, 18, 2, 11, 1, 1, 12, 1, 16])
    [[6], [8], [16, 3, 14], [18], [11, 1], [12], [16]]
    """
    groups = []
    index = 0
    end = len(lengths)
    while index < end:
        count = lengths[index]
        index += 1
        if index + count > end:
            break
        groups.append(list(lengths[index : index + count]))
        index += count
    return groups


# Powers of ten past this overflow a float
_MAX_PRECISION = 308


def _scale(precision):
    if precision > _MAX_PRECISION:
        raise GeometryError(
            f"Precision must be at most {_MAX_PRECISION}, got {precision}"
        )
    return 10**precision


def _check_dimensions(dimensions):
    if dimensions < 2:
        raise GeometryError(
            f"Coordinates must have at least 2 dimensions, got {dimensions}"
        )


class _CoordinateReader:
    """Reads rings of delta-encoded positions off a flat coordinate array"""

    def __init__(self, coords, dimensions, precision):
        _check_dimensions(dimensions)
        self.coords = coords
        self.dimensions = dimensions
        self.scale = _scale(precision)
        self.index = 0

    def read(self, count: int, closed: bool = False) -> List[Position]:
        coords = self.coords
        if self.index + count * self.dimensions > len(coords):
            raise GeometryError(
                f"Expected {count} positions at offset {self.index}, but only "
                f"{len(coords)} coordinate values are available"
            )
        ring = []
        x = y = 0
        for _ in range(count):
            # Positions are deltas from the previous position in the ring
            x += coords[self.index]
            y += coords[self.index + 1]
            ring.append([x / self.scale, y / self.scale])
            self.index += self.dimensions
        if closed and ring:
            ring.append(list(ring[0]))
        return ring


def point_coords(coords, dimensions: int, precision: int) -> Position:
    """Decode the coordinates of a ``Point``"""
    _check_dimensions(dimensions)
    if len(coords) < 2:
        raise GeometryError("Point geometry has no coordinates")
    scale = _scale(precision)
    return [coords[0] / scale, coords[1] / scale]


def line_coords(coords, dimensions: int, precision: int) -> List[Position]:
    """Decode the coordinates of a ``MultiPoint`` or ``LineString``"""
    reader = _CoordinateReader(coords, dimensions, precision)
    return reader.read(len(coords) // dimensions)


def _check_total(total, groups):
    if total != len(groups):
        raise GeometryError(
            f"Geometry declares {total} parts, but its lengths describe "
            f"{len(groups)}"
        )


def polygon_coords(
    coords, lengths, dimensions: int, precision: int, closed: bool
) -> List[List[Position]]:
    """Decode the coordinates of a ``Polygon`` (``closed=True``) or a
    ``MultiLineString`` (``closed=False``).

    An empty ``lengths`` means the geometry is a single ring or line.
    """
    reader = _CoordinateReader(coords, dimensions, precision)
    if not lengths:
        flat = [1, 1, len(coords) // dimensions]
    else:
        # Expand to the multipolygon layout, one ring per group:
        # [4, 4] -> [2, 1, 4, 1, 4]
        flat = [len(lengths)]
        for length in lengths:
            flat.extend((1, length))
    groups = group_lengths(flat[1:])
    _check_total(flat[0], groups)
    return [reader.read(count, closed) for group in groups for count in group]


def multipolygon_coords(
    coords, lengths, dimensions: int, precision: int
) -> List[List[List[Position]]]:
    """Decode the coordinates of a ``MultiPolygon``.

    ``lengths`` holds the number of polygons, followed by the number of rings
    and the size of each ring for every polygon. An empty ``lengths`` means
    the geometry is a single polygon with a single ring.
    """
    reader = _CoordinateReader(coords, dimensions, precision)
    if not lengths:
        lengths = [1, 1, len(coords) // dimensions]
    groups = group_lengths(lengths[1:])
    _check_total(lengths[0], groups)
    return [[reader.read(count, closed=True) for count in group] for group in groups]
