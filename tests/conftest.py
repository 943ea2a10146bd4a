import pytest

from geobuf_decoder.schema import Data

from utils import MULTIPOLYGON, POINT, POLYGON, add_properties, set_geometry


@pytest.fixture
def collection_message():
    """A FeatureCollection holding a point, a polygon and a multipolygon"""
    message = Data()
    collection = message.feature_collection

    point = collection.features.add()
    point.id = "point"
    set_geometry(point.geometry, POINT, [1_500_000, -2_250_000])
    add_properties(message, point, {"name": "A point", "rank": 1})

    polygon = collection.features.add()
    polygon.int_id = 7
    set_geometry(
        polygon.geometry, POLYGON, [0, 0, 10, 0, 0, 10, 2, 2, 1, 0, 0, 1], [3, 3]
    )
    add_properties(message, polygon, {"name": "A polygon", "area": 50.0})

    multipolygon = collection.features.add()
    set_geometry(
        multipolygon.geometry,
        MULTIPOLYGON,
        [0, 0, 1, 0, 0, 1, 5, 5, 1, 0, 0, 1],
        [2, 1, 3, 1, 3],
    )

    add_properties(
        message, collection, {"source": "test", "count": 3}, field="custom_properties"
    )
    return message
