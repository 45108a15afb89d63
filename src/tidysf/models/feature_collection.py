"""
Coleção de feições (Simple Features).

Uma :class:`FeatureCollection` é uma tabela em que cada registro tem zero ou
mais atributos e exatamente uma geometria. Internamente é um
:class:`geopandas.GeoDataFrame`; toda operação devolve uma coleção nova.

>>> import pandas as pd
>>> from tidysf import FeatureCollection
>>> df = pd.DataFrame({"nome": ["a", "b"], "x": [0.0, 10.0], "y": [0.0, 0.0]})
>>> fc = FeatureCollection.from_table(df, coords=("x", "y"), crs=3857)
>>> len(fc), fc.geometry_name, fc.columns
(2, 'geometry', ['nome', 'geometry'])
>>> fc.buffer(1).area().round(1).tolist()
[3.1, 3.1]
"""

from __future__ import annotations

import logging

import geopandas as gpd
import numpy as np
import pandas as pd
import shapely
from shapely.errors import GEOSException
from shapely.geometry import (
    GeometryCollection,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
)
from shapely.geometry.base import BaseGeometry

from tidysf import verbs
from tidysf.config import DEFAULT_COORDS, DEFAULT_CRS, JOIN_SUFFIXES
from tidysf.errors import CRSError, GeometryError, MissingColumnError
from tidysf.models.crs import crs_equal, describe_crs, is_geographic, resolve_crs
from tidysf.models.geometry import check_dimension
from tidysf.verbs._common import check_columns, flatten
from tidysf.verbs.columns import resolve_selection
from tidysf.verbs.grouped import Grouped

logger = logging.getLogger(__name__)

PREDICATES = (
    "intersects",
    "within",
    "contains",
    "touches",
    "crosses",
    "overlaps",
    "covers",
    "covered_by",
    "disjoint",
)


def _active_geometry_name(frame) -> str | None:
    if not isinstance(frame, gpd.GeoDataFrame):
        return None
    try:
        return frame.geometry.name
    except AttributeError:
        # GeoDataFrame sem geometria ativa
        return None


def _combine(geoms, union: bool = True) -> BaseGeometry:
    """Reduz várias geometrias a uma só, por união ou por agregação multi-parte."""
    geoms = [g for g in geoms if g is not None]
    if not geoms:
        return GeometryCollection()
    if union:
        return shapely.union_all(np.asarray(geoms, dtype=object))

    parts = []
    for g in geoms:
        if g.geom_type.startswith("Multi"):
            parts.extend(g.geoms)
        else:
            parts.append(g)

    kinds = {p.geom_type for p in parts}
    if kinds == {"Point"}:
        return MultiPoint(parts)
    if kinds == {"LineString"}:
        return MultiLineString(parts)
    if kinds == {"Polygon"}:
        return MultiPolygon(parts)
    return GeometryCollection(geoms)


class FeatureCollection:
    """
    Tabela de registros com uma coluna de geometria distinguida.

    Parameters
    ----------
    frame : pandas.DataFrame | geopandas.GeoDataFrame | FeatureCollection
        Dados de origem. É sempre copiado.
    geometry : str, optional
        Nome da coluna de geometria. Obrigatório quando ``frame`` não é um
        GeoDataFrame com geometria ativa; o padrão é ``"geometry"``.
    crs : int | str | pyproj.CRS, optional
        CRS da coleção. Se o frame já tem outro CRS, gera :class:`CRSError`.
    """

    def __init__(self, frame, geometry: str | None = None, crs=None):
        if isinstance(frame, FeatureCollection):
            frame = frame._gdf

        active = _active_geometry_name(frame)
        if geometry is None and active is not None:
            gdf = frame.copy()
        else:
            geometry = geometry or active or "geometry"
            if geometry not in frame.columns:
                raise MissingColumnError(
                    f"Coluna de geometria '{geometry}' não encontrada. "
                    f"Colunas: {list(frame.columns)}"
                )
            try:
                gdf = gpd.GeoDataFrame(pd.DataFrame(frame).copy(), geometry=geometry)
            except (TypeError, ValueError) as exc:
                raise GeometryError(
                    f"Coluna '{geometry}' não contém geometrias válidas: {exc}"
                ) from exc

        crs = resolve_crs(crs)
        if crs is not None:
            if gdf.crs is None:
                gdf = gdf.set_crs(crs)
            elif not crs_equal(gdf.crs, crs):
                raise CRSError(
                    f"CRS informado ({describe_crs(crs)}) difere do CRS dos dados "
                    f"({describe_crs(gdf.crs)}). Use to_crs() para reprojetar."
                )

        self._gdf = gdf
        self.validate()

    # ------------------------------------------------------------------
    # Construção
    # ------------------------------------------------------------------

    @classmethod
    def from_table(
        cls,
        table: pd.DataFrame,
        coords=DEFAULT_COORDS,
        crs=DEFAULT_CRS,
        remove: bool = True,
    ) -> "FeatureCollection":
        """
        Converte uma tabela em coleção de pontos, pareando colunas de
        coordenadas (``x, y`` ou ``x, y, z``).

        >>> import pandas as pd
        >>> df = pd.DataFrame({"lon": [-46.6], "lat": [-23.5], "pop": [12]})
        >>> fc = FeatureCollection.from_table(df, coords=("lon", "lat"))
        >>> fc.geometry.iloc[0].wkt
        'POINT (-46.6 -23.5)'
        """
        coords = list(coords)
        if len(coords) not in (2, 3):
            raise ValueError("coords deve ter 2 ou 3 nomes de coluna.")
        check_columns(table, coords)

        missing = table[coords].isna().to_numpy().any(axis=1)
        if missing.any():
            rows = list(table.index[missing][:5])
            raise GeometryError(
                f"Coordenadas ausentes em {int(missing.sum())} linha(s), ex.: {rows}"
            )

        values = [pd.to_numeric(table[c]).to_numpy(dtype="float64") for c in coords]
        points = gpd.points_from_xy(*values)

        frame = table.drop(columns=coords) if remove else table.copy()
        gdf = gpd.GeoDataFrame(frame, geometry=points, crs=resolve_crs(crs))
        return cls(gdf)

    @classmethod
    def from_wkt(
        cls,
        table: pd.DataFrame,
        column: str = "wkt",
        crs=None,
        remove: bool = True,
    ) -> "FeatureCollection":
        """
        Converte uma coluna de texto WKT em geometria.

        >>> import pandas as pd
        >>> df = pd.DataFrame({"wkt": ["LINESTRING (0 0, 3 4)"]})
        >>> FeatureCollection.from_wkt(df).length().tolist()
        [5.0]
        """
        check_columns(table, [column])
        try:
            geoms = gpd.GeoSeries.from_wkt(table[column].to_numpy(), index=table.index)
        except GEOSException as exc:
            raise GeometryError(f"WKT inválido na coluna '{column}': {exc}") from exc

        frame = table.drop(columns=[column]) if remove else table.copy()
        gdf = gpd.GeoDataFrame(frame, geometry=geoms, crs=resolve_crs(crs))
        return cls(gdf)

    @classmethod
    def from_records(cls, records, geometry: str = "geometry", crs=None) -> "FeatureCollection":
        """Cria a coleção a partir de dicionários com uma chave de geometria."""
        records = list(records)
        if not records:
            empty = gpd.GeoDataFrame({geometry: gpd.GeoSeries([])}, geometry=geometry)
            return cls(empty, crs=crs)
        return cls(pd.DataFrame(records), geometry=geometry, crs=crs)

    # ------------------------------------------------------------------
    # Acesso
    # ------------------------------------------------------------------

    def validate(self) -> "FeatureCollection":
        """
        Confere que a coluna de geometria está alinhada aos registros e que
        nenhuma geometria mistura partes 2D e 3D.
        """
        name = self.geometry_name
        if len(self._gdf[name]) != len(self._gdf):
            raise GeometryError("Coluna de geometria desalinhada dos registros.")
        if list(self._gdf.columns).count(name) != 1:
            raise GeometryError(f"Coluna de geometria '{name}' duplicada.")

        geoms = self._gdf.geometry
        # só partes de geometrias multi-parte podem divergir em dimensão
        multi = geoms.geom_type.isin(
            ["MultiPoint", "MultiLineString", "MultiPolygon", "GeometryCollection"]
        ).to_numpy()
        for position, geom in zip(np.flatnonzero(multi), geoms.to_numpy()[multi]):
            try:
                check_dimension(geom)
            except GeometryError as exc:
                raise GeometryError(f"Registro na posição {position}: {exc}") from exc
        return self

    @property
    def frame(self) -> gpd.GeoDataFrame:
        return self._gdf.copy()

    @property
    def geometry(self) -> gpd.GeoSeries:
        return self._gdf.geometry.copy()

    @property
    def geometry_name(self) -> str:
        return self._gdf.geometry.name

    @property
    def crs(self):
        return self._gdf.crs

    @property
    def columns(self) -> list:
        return list(self._gdf.columns)

    @property
    def attributes(self) -> pd.DataFrame:
        """Atributos sem a geometria."""
        return pd.DataFrame(self._gdf.drop(columns=[self.geometry_name]))

    @property
    def geometry_types(self) -> pd.Series:
        """Tipo de geometria de cada registro (``None`` quando ausente)."""
        return self._gdf.geom_type

    @property
    def bounds(self) -> pd.DataFrame:
        return self._gdf.bounds

    @property
    def total_bounds(self) -> tuple:
        return tuple(float(v) for v in self._gdf.total_bounds)

    @property
    def is_empty(self) -> bool:
        return len(self._gdf) == 0

    def __len__(self):
        return len(self._gdf)

    def __iter__(self):
        for record in self._gdf.to_dict("records"):
            yield record

    def __getitem__(self, key):
        if isinstance(key, str):
            check_columns(self._gdf, [key])
            return self._gdf[key].copy()
        if isinstance(key, list):
            return self.select(*key)
        return self.filter(key)

    def __repr__(self):
        return (
            f"FeatureCollection({len(self)} registros, "
            f"geometria='{self.geometry_name}', crs={describe_crs(self.crs)})"
        )

    def head(self, n: int = 5) -> "FeatureCollection":
        return self.slice_rows(0, n)

    def drop_geometry(self) -> pd.DataFrame:
        return self.attributes

    def to_table(self, coords=DEFAULT_COORDS, keep_attributes: bool = True) -> pd.DataFrame:
        """
        Inverso de :meth:`from_table`: devolve os atributos mais colunas de
        coordenadas. Só vale para coleções de pontos.

        >>> import pandas as pd
        >>> df = pd.DataFrame({"id": [1], "x": [1.5], "y": [2.5]})
        >>> FeatureCollection.from_table(df).to_table().to_dict("records")
        [{'id': 1, 'x': 1.5, 'y': 2.5}]
        """
        coords = list(coords)
        if len(coords) not in (2, 3):
            raise ValueError("coords deve ter 2 ou 3 nomes de coluna.")

        geoms = self._gdf.geometry
        kinds = set(geoms.geom_type.dropna())
        if geoms.isna().any() or kinds - {"Point"}:
            raise GeometryError(
                f"to_table exige apenas pontos; encontrado {sorted(kinds)}"
            )

        out = self.attributes if keep_attributes else pd.DataFrame(index=self._gdf.index)
        out[coords[0]] = geoms.x.to_numpy()
        out[coords[1]] = geoms.y.to_numpy()
        if len(coords) == 3:
            out[coords[2]] = geoms.z.to_numpy()
        return out

    def to_wkt_table(self, column: str = "wkt") -> pd.DataFrame:
        out = self.attributes
        out[column] = self._gdf.geometry.to_wkt().to_numpy()
        return out

    # ------------------------------------------------------------------
    # CRS
    # ------------------------------------------------------------------

    def set_crs(self, crs, allow_override: bool = False) -> "FeatureCollection":
        """Atribui um CRS sem transformar coordenadas."""
        target = resolve_crs(crs)
        if target is None:
            raise CRSError("set_crs precisa de um CRS.")
        if self.crs is not None and not crs_equal(self.crs, target) and not allow_override:
            raise CRSError(
                f"Coleção já tem CRS {describe_crs(self.crs)}; "
                "use allow_override=True ou to_crs()."
            )
        return FeatureCollection(self._gdf.set_crs(target, allow_override=True))

    def to_crs(self, crs) -> "FeatureCollection":
        """
        Reprojeta as coordenadas. Reprojetar para o próprio CRS devolve uma
        cópia com as mesmas coordenadas.
        """
        if self.crs is None:
            raise CRSError("Coleção sem CRS; use set_crs() antes de reprojetar.")
        target = resolve_crs(crs)
        if target is None:
            raise CRSError("to_crs precisa de um CRS de destino.")
        if crs_equal(self.crs, target):
            return FeatureCollection(self._gdf)
        logger.debug("Reprojetando %s -> %s", describe_crs(self.crs), describe_crs(target))
        return FeatureCollection(self._gdf.to_crs(target))

    def estimate_utm_crs(self):
        if self.crs is None:
            raise CRSError("Coleção sem CRS; não é possível estimar a zona UTM.")
        return self._gdf.estimate_utm_crs()

    def _require_same_crs(self, other: "FeatureCollection") -> None:
        if not crs_equal(self.crs, other.crs):
            raise CRSError(
                f"CRS diferentes: {describe_crs(self.crs)} e {describe_crs(other.crs)}"
            )

    # ------------------------------------------------------------------
    # Verbos de atributos
    # ------------------------------------------------------------------

    def _wrap(self, frame) -> "FeatureCollection":
        name = self.geometry_name
        active = _active_geometry_name(frame)
        if active is not None and active != name and name not in frame.columns:
            frame = frame.rename_geometry(name)
        elif active is None:
            frame = gpd.GeoDataFrame(frame, geometry=name)
        return FeatureCollection(frame, crs=self.crs)

    def _without_geometry(self, names) -> list:
        return [n for n in flatten(names) if n.lstrip("-") != self.geometry_name]

    def select(self, *columns) -> "FeatureCollection":
        """
        Seleciona atributos. A geometria sempre acompanha a seleção.

        >>> import pandas as pd
        >>> df = pd.DataFrame({"a": [1], "b": [2], "x": [0], "y": [0]})
        >>> FeatureCollection.from_table(df).select("b").columns
        ['b', 'geometry']
        """
        names = resolve_selection(
            self.attributes, *self._without_geometry(columns)
        )
        return self._wrap(self._gdf.loc[:, names + [self.geometry_name]])

    def rename(self, mapping=None, **names) -> "FeatureCollection":
        renamed = dict(mapping or {})
        renamed.update({old: new for new, old in names.items()})
        if self.geometry_name in renamed:
            raise ValueError("Use rename_geometry() para renomear a geometria.")
        return self._wrap(verbs.rename(self._gdf, renamed))

    def rename_geometry(self, name: str) -> "FeatureCollection":
        return FeatureCollection(self._gdf.rename_geometry(name))

    def filter(self, *conditions) -> "FeatureCollection":
        return self._wrap(verbs.filter_rows(self._gdf, *conditions))

    def arrange(self, *columns) -> "FeatureCollection":
        return self._wrap(verbs.arrange(self._gdf, *columns))

    def mutate(self, **columns) -> "FeatureCollection":
        return self._wrap(verbs.mutate(self._gdf, **columns))

    def distinct(self, *columns) -> "FeatureCollection":
        columns = self._without_geometry(columns)
        if not columns:
            return self._wrap(self._gdf.drop_duplicates())
        out = verbs.distinct(self._gdf, *columns, keep_all=True)
        return self._wrap(out.loc[:, columns + [self.geometry_name]])

    def slice_rows(self, start: int = 0, stop: int | None = None) -> "FeatureCollection":
        return self._wrap(verbs.slice_rows(self._gdf, start, stop))

    def drop_na(self, *columns) -> "FeatureCollection":
        return self._wrap(verbs.drop_na(self._gdf, *columns))

    def group_by(self, *keys) -> "GroupedFeatureCollection":
        keys = self._without_geometry(keys)
        verbs.group_by(self._gdf, *keys)
        return GroupedFeatureCollection(self, keys)

    def summarise(self, union: bool = True, **aggs) -> "FeatureCollection":
        """
        Reduz a coleção a um registro; a geometria resultante é a união
        (ou, com ``union=False``, a combinação multi-parte) de todas.
        """
        attrs = verbs.summarise(self._gdf, **aggs)
        return self._from_summary(attrs, [_combine(self._gdf.geometry, union)])

    def count(self, *keys, name: str = "n") -> "FeatureCollection":
        if keys:
            return self.group_by(*keys).count(name=name)
        return self.summarise(**{name: len})

    def _from_summary(self, attrs: pd.DataFrame, geoms: list) -> "FeatureCollection":
        gdf = gpd.GeoDataFrame(attrs, geometry=geoms, crs=self.crs)
        if self.geometry_name != "geometry":
            gdf = gdf.rename_geometry(self.geometry_name)
        return FeatureCollection(gdf)

    # joins de atributos com tabelas comuns

    def _attribute_join(self, join, other, by, **kwargs) -> "FeatureCollection":
        if isinstance(other, (FeatureCollection, gpd.GeoDataFrame)):
            raise TypeError(
                "Join de atributos exige uma tabela sem geometria; "
                "use spatial_join() ou drop_geometry()."
            )
        return self._wrap(join(self._gdf, other, by=by, **kwargs))

    def left_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.left_join, other, by)

    def inner_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.inner_join, other, by)

    def right_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.right_join, other, by)

    def full_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.full_join, other, by)

    def semi_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.semi_join, other, by)

    def anti_join(self, other: pd.DataFrame, by=None) -> "FeatureCollection":
        return self._attribute_join(verbs.anti_join, other, by)

    # reorganização

    def pivot_longer(self, cols, names_to: str = "name", values_to: str = "value") -> "FeatureCollection":
        """Empilha colunas; cada nova linha repete a geometria do registro."""
        cols = self._without_geometry([cols])
        return self._wrap(
            verbs.pivot_longer(self._gdf, cols, names_to=names_to, values_to=values_to)
        )

    def separate(self, col: str, into, **kwargs) -> "FeatureCollection":
        return self._wrap(verbs.separate(self._gdf, col, into, **kwargs))

    def unite(self, col: str, cols, **kwargs) -> "FeatureCollection":
        return self._wrap(verbs.unite(self._gdf, col, self._without_geometry([cols]), **kwargs))

    # ------------------------------------------------------------------
    # Operações geométricas
    # ------------------------------------------------------------------

    def _with_geometry(self, geoms) -> "FeatureCollection":
        gdf = self._gdf.copy()
        gdf[self.geometry_name] = geoms
        return FeatureCollection(gdf)

    def buffer(self, distance: float, resolution: int = 16) -> "FeatureCollection":
        """Área de influência de cada geometria, na unidade do CRS."""
        if is_geographic(self.crs):
            logger.warning(
                "buffer em CRS geográfico (%s): distância interpretada em graus; "
                "reprojete para um CRS métrico.",
                describe_crs(self.crs),
            )
        return self._with_geometry(self._gdf.geometry.buffer(distance, resolution=resolution))

    def centroid(self) -> "FeatureCollection":
        if is_geographic(self.crs):
            logger.warning("centroid em CRS geográfico (%s).", describe_crs(self.crs))
        return self._with_geometry(self._gdf.geometry.centroid)

    def boundary(self) -> "FeatureCollection":
        return self._with_geometry(self._gdf.geometry.boundary)

    def convex_hull(self) -> "FeatureCollection":
        return self._with_geometry(self._gdf.geometry.convex_hull)

    def envelope(self) -> "FeatureCollection":
        return self._with_geometry(self._gdf.geometry.envelope)

    def simplify(self, tolerance: float, preserve_topology: bool = True) -> "FeatureCollection":
        return self._with_geometry(
            self._gdf.geometry.simplify(tolerance, preserve_topology=preserve_topology)
        )

    def make_valid(self) -> "FeatureCollection":
        return self._with_geometry(self._gdf.geometry.make_valid())

    def area(self) -> pd.Series:
        return self._gdf.geometry.area

    def length(self) -> pd.Series:
        return self._gdf.geometry.length

    def distance(self, other):
        """
        Distância até uma geometria (uma Series) ou até cada registro de
        outra coleção (matriz ``len(self) x len(other)`` como DataFrame).
        """
        if isinstance(other, BaseGeometry):
            return self._gdf.geometry.distance(other)

        self._require_same_crs(other)
        a = np.asarray(self._gdf.geometry.values, dtype=object)
        b = np.asarray(other._gdf.geometry.values, dtype=object)
        matrix = shapely.distance(a[:, None], b[None, :])
        return pd.DataFrame(matrix, index=self._gdf.index, columns=other._gdf.index)

    def _predicate(self, name: str, other):
        if name not in PREDICATES:
            raise ValueError(f"Predicado desconhecido: {name!r}")

        if isinstance(other, BaseGeometry):
            return getattr(self._gdf.geometry, name)(other)

        self._require_same_crs(other)
        n = len(self)
        if name == "disjoint":
            hits = self._predicate("intersects", other)
            everything = set(range(len(other)))
            return [sorted(everything - set(row)) for row in hits]

        pairs = other._gdf.sindex.query(self._gdf.geometry, predicate=name)
        result = [[] for _ in range(n)]
        for i, j in zip(*pairs):
            result[int(i)].append(int(j))
        return [sorted(row) for row in result]

    def intersects(self, other):
        """
        Predicado elemento a elemento contra uma geometria (Series booleana)
        ou, contra outra coleção, lista esparsa com as posições que satisfazem
        o predicado para cada registro.
        """
        return self._predicate("intersects", other)

    def within(self, other):
        return self._predicate("within", other)

    def contains(self, other):
        return self._predicate("contains", other)

    def touches(self, other):
        return self._predicate("touches", other)

    def crosses(self, other):
        return self._predicate("crosses", other)

    def overlaps(self, other):
        return self._predicate("overlaps", other)

    def covers(self, other):
        return self._predicate("covers", other)

    def disjoint(self, other):
        return self._predicate("disjoint", other)

    def _overlay(self, other, how: str, elementwise: str) -> "FeatureCollection":
        if isinstance(other, BaseGeometry):
            geoms = getattr(self._gdf.geometry, elementwise)(other)
            return self._with_geometry(geoms)

        self._require_same_crs(other)
        out = gpd.overlay(self._gdf, other._gdf, how=how, keep_geom_type=False)
        return self._wrap(out)

    def intersection(self, other) -> "FeatureCollection":
        return self._overlay(other, "intersection", "intersection")

    def union(self, other) -> "FeatureCollection":
        return self._overlay(other, "union", "union")

    def difference(self, other) -> "FeatureCollection":
        return self._overlay(other, "difference", "difference")

    def sym_difference(self, other) -> "FeatureCollection":
        return self._overlay(other, "symmetric_difference", "symmetric_difference")

    def union_all(self) -> BaseGeometry:
        return _combine(self._gdf.geometry, union=True)

    def spatial_join(
        self,
        other: "FeatureCollection",
        predicate: str = "intersects",
        how: str = "inner",
    ) -> "FeatureCollection":
        """
        Junta atributos de ``other`` aos registros cuja geometria satisfaz o
        predicado. A geometria do resultado é sempre a desta coleção.
        """
        if how not in ("inner", "left"):
            raise ValueError("how deve ser 'inner' ou 'left'.")
        if predicate not in PREDICATES or predicate == "disjoint":
            raise ValueError(f"Predicado não suportado em spatial_join: {predicate!r}")
        self._require_same_crs(other)

        out = gpd.sjoin(self._gdf, other._gdf, how=how, predicate=predicate)
        out = out.drop(columns=[c for c in out.columns if c == "index_right"])

        # colunas repetidas seguem os sufixos dos joins de atributos
        left_suffix, right_suffix = JOIN_SUFFIXES
        clashes = set(self.attributes.columns) & set(other.attributes.columns)
        renamed = {}
        for col in clashes:
            renamed[f"{col}_left"] = f"{col}{left_suffix}"
            renamed[f"{col}_right"] = f"{col}{right_suffix}"
        out = out.rename(columns=renamed)

        # um registro pode casar com vários de ``other``; rótulos não se repetem
        return self._wrap(out.reset_index(drop=True))

    def spatial_filter(self, other, predicate: str = "intersects") -> "FeatureCollection":
        """Mantém registros que satisfazem o predicado com algum elemento de ``other``."""
        hits = self._predicate(predicate, other)
        if isinstance(hits, pd.Series):
            return self._wrap(self._gdf.loc[hits.to_numpy(dtype=bool)])
        mask = np.array([bool(row) for row in hits], dtype=bool)
        return self._wrap(self._gdf.loc[mask])

    # ------------------------------------------------------------------
    # Persistência
    # ------------------------------------------------------------------

    def write(self, uri: str, overwrite: bool = False, layer: str | None = None) -> str:
        from tidysf.io import FeatureIO

        return FeatureIO().write(self, uri, overwrite=overwrite, layer=layer)


class GroupedFeatureCollection:
    """
    Coleção agrupada por atributos. Produzida por
    :meth:`FeatureCollection.group_by`.
    """

    def __init__(self, collection: FeatureCollection, keys: list):
        self.collection = collection
        self.keys = list(keys)

    def _grouped(self) -> Grouped:
        return Grouped(self.collection._gdf, self.keys)

    def __len__(self):
        return len(self._grouped())

    def __repr__(self):
        return f"GroupedFeatureCollection(keys={self.keys}, grupos={len(self)})"

    def summarise(self, union: bool = True, **aggs) -> FeatureCollection:
        """
        Uma linha por grupo. A geometria de cada grupo é unida (ou combinada,
        com ``union=False``).

        >>> import pandas as pd
        >>> df = pd.DataFrame({"g": ["a", "a", "b"], "x": [0, 1, 5], "y": [0, 0, 0]})
        >>> fc = FeatureCollection.from_table(df, crs=3857)
        >>> out = fc.group_by("g").summarise(n=len)
        >>> out.attributes.to_dict("list")
        {'g': ['a', 'b'], 'n': [2, 1]}
        >>> out.geometry_types.tolist()
        ['MultiPoint', 'Point']
        """
        grouped = self._grouped()
        attrs = verbs.summarise(grouped, **aggs)
        name = self.collection.geometry_name
        geoms = [_combine(sub[name], union) for _, sub in grouped.groups()]
        return self.collection._from_summary(attrs, geoms)

    def count(self, name: str = "n") -> FeatureCollection:
        return self.summarise(**{name: len})

    def mutate(self, **columns) -> "GroupedFeatureCollection":
        frame = self._grouped().mutate(**columns).frame
        return GroupedFeatureCollection(self.collection._wrap(frame), self.keys)

    def filter(self, *conditions) -> "GroupedFeatureCollection":
        frame = self._grouped().filter(*conditions).frame
        return GroupedFeatureCollection(self.collection._wrap(frame), self.keys)

    def ungroup(self) -> FeatureCollection:
        return self.collection
