"""The Geobuf message schema.

The message classes are built at import time from a descriptor equivalent
to Mapbox's ``geobuf.proto``, so no generated ``_pb2`` module is needed.
"""
import enum

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError as _ProtoDecodeError

from ._errors import DecodeError

__all__ = ("Data", "GeometryType", "parse")


def __dir__():
    return __all__


class GeometryType(enum.IntEnum):
    """Values of the ``Data.Geometry.Type`` enum."""

    POINT = 0
    MULTIPOINT = 1
    LINESTRING = 2
    MULTILINESTRING = 3
    POLYGON = 4
    MULTIPOLYGON = 5
    GEOMETRYCOLLECTION = 6


_F = descriptor_pb2.FieldDescriptorProto


def _add_field(
    msg,
    name,
    number,
    type,
    *,
    label=_F.LABEL_OPTIONAL,
    type_name=None,
    default=None,
    packed=False,
    oneof=None,
):
    field = msg.field.add(name=name, number=number, type=type, label=label)
    if type_name is not None:
        field.type_name = type_name
    if default is not None:
        field.default_value = default
    if packed:
        field.options.packed = True
    if oneof is not None:
        field.oneof_index = oneof
    return field


def _build_file():
    file = descriptor_pb2.FileDescriptorProto(
        name="geobuf_decoder/geobuf.proto", package="geobuf", syntax="proto2"
    )
    data = file.message_type.add(name="Data")
    data.oneof_decl.add(name="data_type")
    _add_field(data, "keys", 1, _F.TYPE_STRING, label=_F.LABEL_REPEATED)
    _add_field(data, "dimensions", 2, _F.TYPE_UINT32, default="2")
    _add_field(data, "precision", 3, _F.TYPE_UINT32, default="6")
    for name, number, type_name in [
        ("feature_collection", 4, "FeatureCollection"),
        ("feature", 5, "Feature"),
        ("geometry", 6, "Geometry"),
    ]:
        _add_field(
            data,
            name,
            number,
            _F.TYPE_MESSAGE,
            type_name=f".geobuf.Data.{type_name}",
            oneof=0,
        )

    feature = data.nested_type.add(name="Feature")
    feature.oneof_decl.add(name="id_type")
    _add_field(
        feature,
        "geometry",
        1,
        _F.TYPE_MESSAGE,
        label=_F.LABEL_REQUIRED,
        type_name=".geobuf.Data.Geometry",
    )
    _add_field(feature, "id", 11, _F.TYPE_STRING, oneof=0)
    _add_field(feature, "int_id", 12, _F.TYPE_SINT64, oneof=0)
    _add_properties(feature, "properties", 14)

    geometry = data.nested_type.add(name="Geometry")
    _add_field(
        geometry,
        "type",
        1,
        _F.TYPE_ENUM,
        label=_F.LABEL_REQUIRED,
        type_name=".geobuf.Data.Geometry.Type",
    )
    _add_field(
        geometry, "lengths", 2, _F.TYPE_UINT32, label=_F.LABEL_REPEATED, packed=True
    )
    _add_field(
        geometry, "coords", 3, _F.TYPE_SINT64, label=_F.LABEL_REPEATED, packed=True
    )
    _add_field(
        geometry,
        "geometries",
        4,
        _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED,
        type_name=".geobuf.Data.Geometry",
    )
    _add_properties(geometry)
    geometry_type = geometry.enum_type.add(name="Type")
    for member in GeometryType:
        geometry_type.value.add(name=member.name, number=member.value)

    collection = data.nested_type.add(name="FeatureCollection")
    _add_field(
        collection,
        "features",
        1,
        _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED,
        type_name=".geobuf.Data.Feature",
    )
    _add_properties(collection)

    value = data.nested_type.add(name="Value")
    value.oneof_decl.add(name="value_type")
    for name, number, type in [
        ("string_value", 1, _F.TYPE_STRING),
        ("double_value", 2, _F.TYPE_DOUBLE),
        ("pos_int_value", 3, _F.TYPE_UINT64),
        ("neg_int_value", 4, _F.TYPE_UINT64),
        ("bool_value", 5, _F.TYPE_BOOL),
        ("json_value", 6, _F.TYPE_STRING),
    ]:
        _add_field(value, name, number, type, oneof=0)

    return file


def _add_properties(msg, name=None, number=None):
    """Add the ``values`` table and the index-pair fields shared by features,
    geometries and collections"""
    _add_field(
        msg,
        "values",
        13,
        _F.TYPE_MESSAGE,
        label=_F.LABEL_REPEATED,
        type_name=".geobuf.Data.Value",
    )
    if name is not None:
        _add_field(
            msg, name, number, _F.TYPE_UINT32, label=_F.LABEL_REPEATED, packed=True
        )
    _add_field(
        msg,
        "custom_properties",
        15,
        _F.TYPE_UINT32,
        label=_F.LABEL_REPEATED,
        packed=True,
    )


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

Data = message_factory.GetMessageClass(_pool.FindMessageTypeByName("geobuf.Data"))


def parse(buf, *, partial: bool = False):
    """Parse a Geobuf message from bytes.

    Parameters
    ----------
    buf : bytes-like
        The serialized message.
    partial : bool, optional
        If ``False`` (the default), the parsed message is checked for missing
        required fields and rejected if any are absent. Some encoders omit
        the ``type`` of ``POINT`` geometries (the enum's zero value), in which
        case ``partial=True`` is needed.

    Returns
    -------
    message : Data
        The parsed message.

    Raises
    ------
    DecodeError
        If the bytes are not a valid message, or required fields are missing
        and ``partial`` is ``False``.
    """
    if not isinstance(buf, bytes):
        buf = bytes(memoryview(buf))
    message = Data()
    try:
        message.ParseFromString(buf)
    except _ProtoDecodeError as exc:
        raise DecodeError(f"Invalid Geobuf message: {exc}") from exc
    if not partial and not message.IsInitialized():
        missing = ", ".join(message.FindInitializationErrors())
        raise DecodeError(
            f"Geobuf message is missing required fields ({missing}). "
            "Consider decoding with `partial=True`."
        )
    return message
