from .crs import crs_equal, describe_crs, epsg_code, resolve_crs
from .feature_collection import FeatureCollection, GroupedFeatureCollection
from .geometry import GeometryKind, check_dimension, coordinates_of, kind_of, make_geometry

__all__ = [
    "FeatureCollection",
    "GroupedFeatureCollection",
    "GeometryKind",
    "make_geometry",
    "coordinates_of",
    "check_dimension",
    "kind_of",
    "resolve_crs",
    "crs_equal",
    "describe_crs",
    "epsg_code",
]
