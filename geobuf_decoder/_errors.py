__all__ = ("GeobufError", "DecodeError", "GeometryError")


class GeobufError(Exception):
    """The base class for errors raised by geobuf_decoder"""


class DecodeError(GeobufError, ValueError):
    """An error raised when a Geobuf message can't be decoded"""


class GeometryError(DecodeError):
    """An error raised when a geometry's coordinates don't match its
    ``lengths`` structure.

    By default the decoder recovers from this error by emitting the geometry
    with empty coordinates. Pass ``strict=True`` to the decoder to have it
    raised instead.
    """
