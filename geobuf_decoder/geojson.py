"""GeoJSON document types and their JSON serialization.

Each type may carry ``custom_properties``, extra members merged into the
top level of its JSON object. A custom property never replaces one of the
type's own members (for example ``type`` or ``coordinates``).
"""
from typing import Any, Dict, List, Optional, Union

import msgspec

__all__ = (
    "Position",
    "Value",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "Geometry",
    "Feature",
    "FeatureCollection",
    "GeoJSON",
    "empty",
    "to_builtins",
    "from_builtins",
    "encode",
    "format",
    "decode",
)


def __dir__():
    return __all__


Position = List[float]

# A property value. JSON `null` is never decoded as a value.
Value = Union[str, int, float, bool, Dict[str, Any], List[Any]]


class _Object(msgspec.Struct, kw_only=True):
    custom_properties: Dict[str, Value] = msgspec.field(default_factory=dict)


# All types set `tag=True`, so the GeoJSON `type` member is the class name.
class Point(_Object, tag=True):
    coordinates: Position


class MultiPoint(_Object, tag=True):
    coordinates: List[Position]


class LineString(_Object, tag=True):
    coordinates: List[Position]


class MultiLineString(_Object, tag=True):
    coordinates: List[List[Position]]


class Polygon(_Object, tag=True):
    coordinates: List[List[Position]]


class MultiPolygon(_Object, tag=True):
    coordinates: List[List[List[Position]]]


Geometry = Union[Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon]

_GEOMETRY_TYPES = (
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
)


class Feature(_Object, tag=True):
    geometry: Optional[Geometry] = None
    properties: Optional[Dict[str, Value]] = None
    id: Union[str, int, None] = None


class FeatureCollection(_Object, tag=True):
    features: List[Feature] = msgspec.field(default_factory=list)


GeoJSON = Union[Geometry, Feature, FeatureCollection]


def empty() -> Point:
    """A Point with no coordinates, standing in for a missing document."""
    return Point([])


def _reserved_keys(cls):
    keys = {
        field.encode_name
        for field in msgspec.structs.fields(cls)
        if field.name != "custom_properties"
    }
    keys.add(cls.__struct_config__.tag_field)
    return frozenset(keys)


_RESERVED_KEYS = {
    cls: _reserved_keys(cls) for cls in _GEOMETRY_TYPES + (Feature, FeatureCollection)
}


def to_builtins(obj: GeoJSON) -> Dict[str, Any]:
    """Convert a GeoJSON object to a tree of builtin types.

    The object's own members are emitted first, followed by any custom
    properties that don't collide with them.

    Parameters
    ----------
    obj : GeoJSON
        The object to convert.

    Returns
    -------
    out : dict
    """
    if isinstance(obj, FeatureCollection):
        out = {
            "type": "FeatureCollection",
            "features": [to_builtins(f) for f in obj.features],
        }
    elif isinstance(obj, Feature):
        out = {}
        if obj.id is not None:
            out["id"] = obj.id
        out["type"] = "Feature"
        out["geometry"] = None if obj.geometry is None else to_builtins(obj.geometry)
        out["properties"] = obj.properties
    elif isinstance(obj, _GEOMETRY_TYPES):
        out = {"type": type(obj).__name__, "coordinates": obj.coordinates}
    else:
        raise TypeError(f"Expected a GeoJSON object, got {type(obj).__name__}")

    reserved = _RESERVED_KEYS[type(obj)]
    for key, value in obj.custom_properties.items():
        if key not in reserved:
            out[key] = value
    return out


def encode(obj: GeoJSON) -> bytes:
    """Serialize a GeoJSON object as compact JSON.

    Parameters
    ----------
    obj : GeoJSON
        The object to serialize.

    Returns
    -------
    data : bytes
        The serialized object.

    See Also
    --------
    format
    """
    return msgspec.json.encode(to_builtins(obj))


def format(obj: GeoJSON, *, indent: int = 2) -> str:
    """Serialize a GeoJSON object as pretty-printed JSON.

    Meant for logging and debugging; use `encode` when performance matters.

    Parameters
    ----------
    obj : GeoJSON
        The object to serialize.
    indent : int, optional
        The number of spaces to indent nested members.

    Returns
    -------
    text : str
    """
    return msgspec.json.format(encode(obj), indent=indent).decode("utf-8")


def decode(buf: Union[bytes, str]) -> GeoJSON:
    """Deserialize a GeoJSON object from JSON.

    Top-level members not belonging to the object's type are collected into
    its ``custom_properties``.

    Parameters
    ----------
    buf : bytes-like or str
        The message to decode.

    Returns
    -------
    obj : GeoJSON

    Raises
    ------
    msgspec.DecodeError
        If ``buf`` isn't valid JSON.
    msgspec.ValidationError
        If the JSON isn't a supported GeoJSON object. ``GeometryCollection``
        is not supported.
    """
    return from_builtins(msgspec.json.decode(buf))


def _split(obj, cls):
    reserved = _RESERVED_KEYS[cls]
    custom = {k: v for k, v in obj.items() if k not in reserved}
    return {k: v for k, v in obj.items() if k in reserved}, custom


def from_builtins(obj: Any) -> GeoJSON:
    """Convert a tree of builtin types to a GeoJSON object.

    The inverse of `to_builtins`.
    """
    if not isinstance(obj, dict):
        raise msgspec.ValidationError(
            f"Expected a GeoJSON object, got `{type(obj).__name__}`"
        )
    kind = obj.get("type")
    if kind == "FeatureCollection":
        fields, custom = _split(obj, FeatureCollection)
        features = fields.get("features") or []
        if not isinstance(features, list):
            raise msgspec.ValidationError("Expected `array` for `$.features`")
        out = []
        for feature in features:
            feature = from_builtins(feature)
            if not isinstance(feature, Feature):
                raise msgspec.ValidationError(
                    f"Expected a Feature in `$.features`, got {type(feature).__name__}"
                )
            out.append(feature)
        return FeatureCollection(out, custom_properties=custom)
    elif kind == "Feature":
        fields, custom = _split(obj, Feature)
        geometry = fields.get("geometry")
        if geometry is not None:
            geometry = from_builtins(geometry)
            if not isinstance(geometry, _GEOMETRY_TYPES):
                raise msgspec.ValidationError(
                    "Expected a geometry for `$.geometry`, "
                    f"got {type(geometry).__name__}"
                )
        return Feature(
            geometry,
            msgspec.convert(fields.get("properties"), Optional[Dict[str, Value]]),
            msgspec.convert(fields.get("id"), Union[str, int, None]),
            custom_properties=custom,
        )
    elif kind == "GeometryCollection":
        raise msgspec.ValidationError("GeometryCollection is not supported")
    fields, custom = _split(obj, Point)
    geometry = msgspec.convert(fields, Geometry)
    geometry.custom_properties = custom
    return geometry
