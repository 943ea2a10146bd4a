import pytest

from geobuf_decoder import DecodeError, GeobufError, schema
from geobuf_decoder.schema import Data, GeometryType

from utils import POINT, POLYGON, geometry_message, set_geometry


def test_module_dir():
    assert set(dir(schema)) == {"Data", "GeometryType", "parse"}


def test_defaults():
    message = Data()
    assert message.dimensions == 2
    assert message.precision == 6
    assert message.WhichOneof("data_type") is None


def test_geometry_type_matches_descriptor():
    geometry = Data.DESCRIPTOR.nested_types_by_name["Geometry"]
    enum = geometry.enum_types_by_name["Type"]
    assert {v.name: v.number for v in enum.values} == {
        t.name: t.value for t in GeometryType
    }


def test_parse_roundtrip():
    message = geometry_message(POLYGON, [0, 0, 5, 0, 0, 5], [3], precision=2)
    message.keys.extend(["a", "b"])
    out = schema.parse(message.SerializeToString())
    assert out == message
    assert out.precision == 2
    assert list(out.geometry.coords) == [0, 0, 5, 0, 0, 5]
    assert list(out.geometry.lengths) == [3]


def test_parse_accepts_bytes_like():
    buf = geometry_message(POINT, [1, 2]).SerializeToString()
    assert schema.parse(bytearray(buf)) == schema.parse(memoryview(buf))


def test_parse_invalid():
    with pytest.raises(DecodeError, match="Invalid Geobuf message") as rec:
        schema.parse(b"\x0a\x05ab")
    assert isinstance(rec.value, GeobufError)
    assert isinstance(rec.value, ValueError)
    assert rec.value.__cause__ is not None


def test_parse_missing_required_fields():
    message = Data()
    feature = message.feature
    set_geometry(feature.geometry, POINT, [1, 2])
    feature.geometry.ClearField("type")
    buf = message.SerializePartialToString()

    with pytest.raises(DecodeError, match="partial=True"):
        schema.parse(buf)

    out = schema.parse(buf, partial=True)
    assert not out.feature.geometry.HasField("type")
    assert out.feature.geometry.type == GeometryType.POINT
