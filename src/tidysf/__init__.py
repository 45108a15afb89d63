# tidysf/__init__.py
from .models.feature_collection import FeatureCollection, GroupedFeatureCollection
from .models.geometry import GeometryKind, make_geometry
from .models.crs import resolve_crs
from .io.feature_io import FeatureIO
from .datasets import load_example

__all__ = [
    "FeatureCollection",
    "GroupedFeatureCollection",
    "GeometryKind",
    "make_geometry",
    "resolve_crs",
    "FeatureIO",
    "load_example",
    "read",
]

__version__ = "0.1.0"


def read(uri: str, **kwargs) -> FeatureCollection:
    """Atalho para ``FeatureIO().read(uri, **kwargs)``."""
    return FeatureIO().read(uri, **kwargs)
