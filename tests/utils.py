from geobuf_decoder.schema import Data, GeometryType


class JSON(str):
    """A string stored as a ``json_value`` rather than a ``string_value``"""


def set_value(value, obj):
    if isinstance(obj, JSON):
        value.json_value = obj
    elif isinstance(obj, str):
        value.string_value = obj
    elif isinstance(obj, bool):
        value.bool_value = obj
    elif isinstance(obj, int):
        if obj >= 0:
            value.pos_int_value = obj
        else:
            value.neg_int_value = -obj
    elif isinstance(obj, float):
        value.double_value = obj
    else:
        raise TypeError(f"Unsupported value {obj!r}")


def add_properties(message, target, props, field="properties"):
    """Store ``props`` in ``target``'s value table, referencing them from the
    index pairs in ``field``"""
    indexes = getattr(target, field)
    for key, obj in props.items():
        keys = list(message.keys)
        if key in keys:
            key_index = keys.index(key)
        else:
            key_index = len(keys)
            message.keys.append(key)
        indexes.extend([key_index, len(target.values)])
        set_value(target.values.add(), obj)


def set_geometry(geometry, type, coords=(), lengths=()):
    geometry.type = int(type)
    geometry.coords.extend(coords)
    geometry.lengths.extend(lengths)
    return geometry


def geometry_message(type, coords=(), lengths=(), dimensions=None, precision=None):
    message = Data()
    if dimensions is not None:
        message.dimensions = dimensions
    if precision is not None:
        message.precision = precision
    set_geometry(message.geometry, type, coords, lengths)
    return message


def square_coords(size=1_000_000):
    """The delta-encoded open ring (0 0, s 0, s s, 0 s)"""
    return [0, 0, size, 0, 0, size, -size, 0]


POINT = GeometryType.POINT
MULTIPOINT = GeometryType.MULTIPOINT
LINESTRING = GeometryType.LINESTRING
MULTILINESTRING = GeometryType.MULTILINESTRING
POLYGON = GeometryType.POLYGON
MULTIPOLYGON = GeometryType.MULTIPOLYGON
GEOMETRYCOLLECTION = GeometryType.GEOMETRYCOLLECTION
