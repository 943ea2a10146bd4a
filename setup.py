import os
import re

from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "geobuf_decoder", "_version.py")) as f:
    version = re.search(r'__version__ = "(.+)"', f.read()).group(1)

setup(
    name="geobuf-decoder",
    version=version,
    description="Decode Geobuf messages to GeoJSON.",
    license="BSD",
    packages=["geobuf_decoder"],
    package_data={"geobuf_decoder": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=["msgspec>=0.18", "protobuf>=4.24"],
    extras_require={"test": ["pytest"]},
)
