from ._errors import DecodeError, GeobufError, GeometryError
from ._core import Decoder, decode, decode_message
from . import geojson, schema
from ._version import __version__
