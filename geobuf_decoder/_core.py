import logging
import os
from typing import Union

import msgspec

from . import geojson, schema
from ._coords import line_coords, multipolygon_coords, point_coords, polygon_coords
from ._errors import GeometryError
from ._properties import build_properties
from .schema import GeometryType

__all__ = ("Decoder", "decode", "decode_message")

logger = logging.getLogger(__name__)


class Decoder(msgspec.Struct, frozen=True, kw_only=True):
    """A Geobuf decoder.

    Parameters
    ----------
    parse_string_as_type : bool, optional
        If ``True``, string property values are converted to ``bool``,
        ``int`` or ``float`` when they parse as one (``"42"`` is decoded as
        ``42``, ``"true"`` as ``True``). Defaults to ``False``.
    trim_string_values : bool, optional
        If ``True``, leading and trailing whitespace and ``"`` characters are
        stripped from string property values (``'"value"'`` is decoded as
        ``'value'``). Defaults to ``False``.
    verbose : bool, optional
        If ``True``, traces of the decode are logged at ``DEBUG`` level to the
        ``geobuf_decoder`` loggers. Has no effect on the output.
    strict : bool, optional
        If ``True``, a geometry whose coordinates don't match its ``lengths``
        raises a `GeometryError`. By default such a geometry is logged and
        decoded with empty coordinates.
    """

    parse_string_as_type: bool = False
    trim_string_values: bool = False
    verbose: bool = False
    strict: bool = False

    def decode(self, buf, *, partial: bool = False) -> geojson.GeoJSON:
        """Decode a serialized Geobuf message to GeoJSON.

        Parameters
        ----------
        buf : bytes-like
            The serialized message.
        partial : bool, optional
            If ``False`` (the default), a message missing required fields is
            rejected. See `geobuf_decoder.schema.parse`.

        Returns
        -------
        obj : GeoJSON

        Raises
        ------
        DecodeError
            If ``buf`` isn't a valid Geobuf message.
        """
        return self.decode_message(schema.parse(buf, partial=partial))

    def decode_file(
        self, path: Union[str, os.PathLike], *, partial: bool = False
    ) -> geojson.GeoJSON:
        """Read and decode a Geobuf file"""
        with open(path, "rb") as f:
            return self.decode(f.read(), partial=partial)

    def decode_message(self, message) -> geojson.GeoJSON:
        """Decode an already parsed ``schema.Data`` message to GeoJSON.

        A message without a payload decodes to `geojson.empty`.
        """
        if self.verbose:
            logger.debug(
                "Decoding Geobuf message: dimensions=%d precision=%d keys=%s",
                message.dimensions,
                message.precision,
                list(message.keys),
            )
            logger.debug("Geobuf message:\n%s", message)

        kind = message.WhichOneof("data_type")
        if kind == "feature_collection":
            collection = message.feature_collection
            return geojson.FeatureCollection(
                [self._build_feature(f, message) for f in collection.features],
                custom_properties=self._build_properties(
                    collection.custom_properties, collection.values, message
                ),
            )
        elif kind == "feature":
            return self._build_feature(message.feature, message)
        elif kind == "geometry":
            return self._build_geometry(message.geometry, message)
        return geojson.empty()

    def _build_properties(self, indexes, values, message):
        return build_properties(
            indexes,
            message.keys,
            values,
            parse_string_as_type=self.parse_string_as_type,
            trim_string_values=self.trim_string_values,
            verbose=self.verbose,
        )

    def _build_feature(self, feature, message):
        id_type = feature.WhichOneof("id_type")
        if id_type == "int_id":
            feature_id = feature.int_id
        else:
            feature_id = feature.id or None
        if self.verbose:
            logger.debug(
                "Feature %r: properties=%s custom_properties=%s",
                feature_id,
                list(feature.properties),
                list(feature.custom_properties),
            )
        if feature.HasField("geometry"):
            geometry = self._build_geometry(feature.geometry, message)
        else:
            geometry = None
        return geojson.Feature(
            geometry,
            self._build_properties(feature.properties, feature.values, message),
            feature_id,
            custom_properties=self._build_properties(
                feature.custom_properties, feature.values, message
            ),
        )

    def _build_geometry(self, geometry, message):
        out = self._build_shape(geometry, message.dimensions, message.precision)
        out.custom_properties = self._build_properties(
            geometry.custom_properties, geometry.values, message
        )
        return out

    def _build_shape(self, geometry, dimensions, precision):
        kind = GeometryType(geometry.type)
        if kind == GeometryType.GEOMETRYCOLLECTION:
            logger.warning(
                "GeometryCollection is not supported, decoding as an empty Point"
            )
            return geojson.empty()

        coords = list(geometry.coords)
        lengths = list(geometry.lengths)
        try:
            if kind == GeometryType.POINT:
                return geojson.Point(point_coords(coords, dimensions, precision))
            elif kind == GeometryType.MULTIPOINT:
                return geojson.MultiPoint(line_coords(coords, dimensions, precision))
            elif kind == GeometryType.LINESTRING:
                return geojson.LineString(line_coords(coords, dimensions, precision))
            elif kind == GeometryType.MULTILINESTRING:
                return geojson.MultiLineString(
                    polygon_coords(coords, lengths, dimensions, precision, closed=False)
                )
            elif kind == GeometryType.POLYGON:
                return geojson.Polygon(
                    polygon_coords(coords, lengths, dimensions, precision, closed=True)
                )
            else:
                return geojson.MultiPolygon(
                    multipolygon_coords(coords, lengths, dimensions, precision)
                )
        except GeometryError as exc:
            if self.strict:
                raise
            logger.warning(
                "Malformed %s geometry, decoding with empty coordinates: %s",
                kind.name,
                exc,
            )
            return _EMPTY[kind]([])


_EMPTY = {
    GeometryType.POINT: geojson.Point,
    GeometryType.MULTIPOINT: geojson.MultiPoint,
    GeometryType.LINESTRING: geojson.LineString,
    GeometryType.MULTILINESTRING: geojson.MultiLineString,
    GeometryType.POLYGON: geojson.Polygon,
    GeometryType.MULTIPOLYGON: geojson.MultiPolygon,
}


def decode(buf, *, partial: bool = False, **options) -> geojson.GeoJSON:
    """Decode a serialized Geobuf message to GeoJSON.

    Parameters
    ----------
    buf : bytes-like
        The serialized message.
    partial : bool, optional
        If ``False`` (the default), a message missing required fields is
        rejected.
    **options
        Options forwarded to `Decoder`.

    Returns
    -------
    obj : GeoJSON

    See Also
    --------
    Decoder.decode
    """
    return Decoder(**options).decode(buf, partial=partial)


def decode_message(message, **options) -> geojson.GeoJSON:
    """Decode an already parsed ``schema.Data`` message to GeoJSON"""
    return Decoder(**options).decode_message(message)
