"""
Valores de geometria (Simple Features).

Uma geometria é um dos sete tipos fechados do padrão, expresso como
sequência ordenada de tuplas de coordenadas (aninhadas para polígonos com
buracos e tipos multi-parte). Todas as tuplas de uma mesma geometria têm a
mesma dimensão (2D ou 3D).

>>> from tidysf.models.geometry import GeometryKind, make_geometry
>>> g = make_geometry(GeometryKind.POLYGON, [[(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]])
>>> g.area
16.0
"""

from __future__ import annotations

from enum import Enum

import shapely
from shapely.errors import GEOSException
from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    mapping,
)
from shapely.geometry.base import BaseGeometry

from tidysf.errors import GeometryError


class GeometryKind(Enum):
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTIPOINT = "MultiPoint"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"
    GEOMETRYCOLLECTION = "GeometryCollection"

    @classmethod
    def parse(cls, value) -> "GeometryKind":
        """
        Aceita o enum, o nome WKT em qualquer caixa ou o nome do membro.

        >>> GeometryKind.parse("multipolygon")
        <GeometryKind.MULTIPOLYGON: 'MultiPolygon'>
        """
        if isinstance(value, cls):
            return value
        key = str(value).replace("_", "").replace(" ", "").upper()
        for kind in cls:
            if kind.name == key:
                return kind
        raise GeometryError(f"Tipo de geometria desconhecido: {value!r}")

    @property
    def is_multi(self) -> bool:
        return self.name.startswith("MULTI") or self is GeometryKind.GEOMETRYCOLLECTION


# profundidade de aninhamento das coordenadas de cada tipo
_DEPTH = {
    GeometryKind.POINT: 0,
    GeometryKind.LINESTRING: 1,
    GeometryKind.MULTIPOINT: 1,
    GeometryKind.POLYGON: 2,
    GeometryKind.MULTILINESTRING: 2,
    GeometryKind.MULTIPOLYGON: 3,
}


def _collect_dims(coords, depth, dims):
    if depth == 0:
        try:
            n = len(coords)
        except TypeError:
            raise GeometryError(f"Tupla de coordenadas inválida: {coords!r}") from None
        if n:
            dims.add(n)
        return
    for item in coords:
        _collect_dims(item, depth - 1, dims)


def _check_coordinates(kind: GeometryKind, coordinates) -> int:
    dims: set[int] = set()
    _collect_dims(coordinates, _DEPTH[kind], dims)

    if len(dims) > 1:
        raise GeometryError(
            f"Coordenadas com dimensões mistas em {kind.value}: {sorted(dims)}"
        )
    if dims and not dims <= {2, 3}:
        raise GeometryError(
            f"Coordenadas devem ser 2D ou 3D, recebido {sorted(dims)[0]}D"
        )
    return dims.pop() if dims else 2


def make_geometry(kind, coordinates) -> BaseGeometry:
    """
    Constrói uma geometria shapely a partir de coordenadas aninhadas.

    Polígonos recebem ``[exterior, *buracos]``; coleções recebem uma lista
    de pares ``(tipo, coordenadas)`` ou geometrias shapely.

    >>> make_geometry("point", (1.0, 2.0)).wkt
    'POINT (1 2)'
    >>> make_geometry("linestring", [(0, 0), (1, 1, 1)])
    Traceback (most recent call last):
    ...
    tidysf.errors.GeometryError: Coordenadas com dimensões mistas em LineString: [2, 3]
    """
    kind = GeometryKind.parse(kind)

    if kind is GeometryKind.GEOMETRYCOLLECTION:
        parts = []
        for part in coordinates:
            if isinstance(part, BaseGeometry):
                parts.append(part)
            else:
                parts.append(make_geometry(*part))
        collection = GeometryCollection(parts)
        check_dimension(collection)
        return collection

    _check_coordinates(kind, coordinates)

    try:
        if kind is GeometryKind.POINT:
            return Point(*coordinates) if len(coordinates) else Point()
        if kind is GeometryKind.LINESTRING:
            return LineString(coordinates)
        if kind is GeometryKind.POLYGON:
            if not coordinates:
                return Polygon()
            return Polygon(coordinates[0], coordinates[1:])
        if kind is GeometryKind.MULTIPOINT:
            return MultiPoint(coordinates)
        if kind is GeometryKind.MULTILINESTRING:
            return MultiLineString(coordinates)
        return MultiPolygon([(p[0], p[1:]) for p in coordinates])
    except (ValueError, TypeError, GEOSException) as exc:
        raise GeometryError(f"Coordenadas inválidas para {kind.value}: {exc}") from exc


def kind_of(geometry: BaseGeometry) -> GeometryKind:
    """
    >>> kind_of(Point(0, 0))
    <GeometryKind.POINT: 'Point'>
    """
    # LinearRing é tratado como LineString no modelo
    name = "LineString" if geometry.geom_type == "LinearRing" else geometry.geom_type
    return GeometryKind(name)


def coordinate_dimension(geometry: BaseGeometry) -> int:
    """
    >>> coordinate_dimension(Point(0, 0, 5))
    3
    """
    return 3 if geometry.has_z else 2


def _leaf_dims(geometry: BaseGeometry, dims: set) -> None:
    if geometry is None or geometry.is_empty:
        return
    if hasattr(geometry, "geoms"):
        for part in geometry.geoms:
            _leaf_dims(part, dims)
        return
    dims.add(coordinate_dimension(geometry))


def check_dimension(geometry: BaseGeometry) -> int:
    """
    Confere que todas as partes de uma geometria têm a mesma dimensão.

    >>> check_dimension(GeometryCollection([Point(0, 0), Point(1, 1)]))
    2
    >>> check_dimension(GeometryCollection([Point(0, 0), Point(1, 1, 1)]))
    Traceback (most recent call last):
    ...
    tidysf.errors.GeometryError: Geometria com partes 2D e 3D misturadas: GeometryCollection
    """
    dims: set[int] = set()
    _leaf_dims(geometry, dims)
    if len(dims) > 1:
        raise GeometryError(
            f"Geometria com partes 2D e 3D misturadas: {geometry.geom_type}"
        )
    return dims.pop() if dims else 2


def coordinates_of(geometry: BaseGeometry):
    """
    Coordenadas aninhadas da geometria, na ordem GeoJSON.

    Inverso de :func:`make_geometry` para os tipos simples.

    >>> coordinates_of(make_geometry("linestring", [(0, 0), (1, 2)]))
    ((0.0, 0.0), (1.0, 2.0))
    """
    if geometry.geom_type == "GeometryCollection":
        return tuple(
            (kind_of(g), coordinates_of(g)) for g in geometry.geoms
        )
    return mapping(geometry)["coordinates"]


def from_wkt(text: str) -> BaseGeometry:
    """
    >>> from_wkt("POINT (1 2)").x
    1.0
    """
    try:
        return shapely.from_wkt(text)
    except GEOSException as exc:
        raise GeometryError(f"WKT inválido: {text!r}") from exc


def to_wkt(geometry: BaseGeometry, precision: int | None = None) -> str:
    if precision is None:
        return shapely.to_wkt(geometry, trim=True, rounding_precision=-1)
    return shapely.to_wkt(geometry, trim=True, rounding_precision=precision)


def from_wkb(data) -> BaseGeometry:
    """Lê WKB, EWKB ou WKB em hexadecimal."""
    try:
        return shapely.from_wkb(data)
    except GEOSException as exc:
        raise GeometryError("WKB inválido.") from exc


def to_wkb(geometry: BaseGeometry, srid: int | None = None) -> bytes:
    """
    Serializa em WKB; com ``srid`` gera EWKB com o SRID embutido.

    >>> g = from_wkb(to_wkb(Point(1, 2), srid=4326))
    >>> shapely.get_srid(g)
    4326
    """
    if srid is None:
        return shapely.to_wkb(geometry)
    geometry = shapely.set_srid(geometry, srid)
    return shapely.to_wkb(geometry, include_srid=True)
