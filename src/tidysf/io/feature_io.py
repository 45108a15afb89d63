# feature_io.py
"""
feature_io – leitura e escrita de coleções de feições.

Este módulo define a classe FeatureIO, responsável por resolver URIs e
converter arquivos, objetos em storage S3-compatível e tabelas de banco de
dados em :class:`tidysf.FeatureCollection` (e vice-versa). O formato em disco
é inferido pelo sufixo do caminho.

Exemplo de uso:

    from tidysf import FeatureIO

    fio = FeatureIO()
    municipios = fio.read("dados/municipios.gpkg", layer="sp")
    pontos = fio.read_csv("dados/escolas.csv", coords=("lon", "lat"), crs=4326)

    fio.write(pontos.to_crs(31983), "temp://escolas.gpkg", overwrite=True)
"""

from __future__ import annotations

import logging
import re
import shutil
import sqlite3
import tempfile
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

import geopandas as gpd
import pandas as pd
import s3fs
import shapely

from tidysf import config
from tidysf.errors import CRSError, DatasetExistsError, MissingColumnError
from tidysf.models.crs import epsg_code
from tidysf.models.feature_collection import FeatureCollection
from tidysf.models.geometry import from_wkb, from_wkt, to_wkb

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_HEX = re.compile(r"(?:[0-9A-Fa-f]{2})+")


def _quote_identifier(name: str) -> str:
    # sem esquema: tabelas qualificadas (esquema.tabela) só via `query`
    if not _IDENTIFIER.fullmatch(name):
        raise ValueError(
            f"Nome de tabela inválido: {name!r}. Para esquema.tabela use `query`."
        )
    return f'"{name}"'


def _decode_geometry(value):
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return from_wkb(bytes(value))
    if isinstance(value, str):
        if _HEX.fullmatch(value):
            return from_wkb(value)
        return from_wkt(value)
    raise TypeError(f"Valor de geometria não reconhecido: {type(value).__name__}")


class FeatureIO:
    """
    Operações de leitura e escrita de coleções de feições.

    Caminhos locais, ``file://`` e ``temp://`` (diretório temporário do
    projeto) são lidos diretamente; URIs ``s3://`` passam por s3fs,
    baixando o conjunto de dados para um diretório temporário.

    Parâmetros
    ----------
    key_id : Optional[str]
        ID da chave de acesso S3 (padrão: ``TIDYSF_S3_KEY_ID``).
    secret : Optional[str]
        Chave secreta S3 (padrão: ``TIDYSF_S3_SECRET``).
    endpoint_url : Optional[str]
        Endpoint S3-compatível (padrão: ``TIDYSF_S3_ENDPOINT_URL``).

    Atributos
    ---------
    fs : Optional[s3fs.S3FileSystem]
        Sistema de arquivos S3 configurado, ou ``None`` sem credenciais.
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        secret: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        self.key_id = key_id or config.S3_KEY_ID
        self.secret = secret or config.S3_SECRET
        self.endpoint_url = endpoint_url or config.S3_ENDPOINT_URL
        self.fs: Optional[s3fs.S3FileSystem] = None

        if self.key_id and self.secret:
            client_kwargs = {"endpoint_url": self.endpoint_url} if self.endpoint_url else {}
            self.fs = s3fs.S3FileSystem(
                key=self.key_id,
                secret=self.secret,
                client_kwargs=client_kwargs,
            )

    # ------------------------------------------------------------------
    # Resolução de caminhos
    # ------------------------------------------------------------------

    def _get_fs_and_path(self, uri: str) -> Tuple[Optional[s3fs.S3FileSystem], str]:
        """
        Determina o sistema de arquivos e o caminho interno a partir de um URI.
        """
        uri = str(uri)
        if uri.startswith("s3://"):
            if not self.fs:
                raise RuntimeError(
                    "Credenciais S3 não configuradas. Defina TIDYSF_S3_KEY_ID e TIDYSF_S3_SECRET."
                )
            return self.fs, uri[5:]
        return None, uri

    def resolve_path(self, uri) -> Path:
        """
        Converte um URI local em :class:`pathlib.Path`.

        >>> FeatureIO().resolve_path("file:///tmp/a.gpkg").as_posix()
        '/tmp/a.gpkg'
        """
        if isinstance(uri, Path):
            return uri

        parsed = urlparse(str(uri))

        # ex.: "temp://bairros.gpkg" -> netloc = "bairros.gpkg"
        if parsed.scheme == "temp":
            rel_path = (parsed.netloc + parsed.path).lstrip("/")
            config.PROJECT_TEMP_DIR.mkdir(parents=True, exist_ok=True)
            return Path(config.PROJECT_TEMP_DIR) / rel_path

        if parsed.scheme == "file":
            return Path(parsed.path)

        return Path(uri).expanduser()

    @staticmethod
    def _dataset_files(path: Path) -> list:
        """Arquivos que compõem o conjunto de dados (sidecars de shapefile)."""
        if path.suffix.lower() == ".shp":
            return [
                path.with_suffix(ext)
                for ext in config.SHAPEFILE_SIDECARS
                if path.with_suffix(ext).exists()
            ]
        return [path] if path.exists() else []

    def exists(self, uri) -> bool:
        fs, path = self._get_fs_and_path(uri)
        if fs is not None:
            return fs.exists(path)
        return bool(self._dataset_files(self.resolve_path(uri)))

    def _remove(self, path: Path) -> None:
        if path.is_dir():
            shutil.rmtree(path)
            return
        for f in self._dataset_files(path):
            f.unlink()

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    def read(self, uri, layer: str | None = None, crs=None, **kwargs) -> FeatureCollection:
        """
        Lê um conjunto de dados espaciais.

        Parâmetros
        ----------
        uri : str
            Caminho local, ``file://``, ``temp://`` ou ``s3://``.
        layer : str, opcional
            Camada, para formatos com várias camadas (GeoPackage).
        crs : opcional
            CRS assumido quando o arquivo não declara um. Arquivos
            delimitados usam ``config.DEFAULT_CRS`` quando omitido.

        Retorna
        -------
        FeatureCollection
        """
        fs, path = self._get_fs_and_path(uri)
        if fs is None:
            return self._read_local(self.resolve_path(uri), layer, crs, **kwargs)

        with tempfile.TemporaryDirectory() as tmp:
            local = self._download(fs, path, Path(tmp))
            return self._read_local(local, layer, crs, **kwargs)

    def _download(self, fs, path: str, dest: Path) -> Path:
        remote = Path(path)
        if remote.suffix.lower() == ".shp":
            for ext in config.SHAPEFILE_SIDECARS:
                sidecar = remote.with_suffix(ext).as_posix()
                if fs.exists(sidecar):
                    fs.get(sidecar, (dest / (remote.stem + ext)).as_posix())
        else:
            fs.get(path, (dest / remote.name).as_posix())
        logger.debug("Baixado s3://%s para %s", path, dest)
        return dest / remote.name

    def _read_local(self, path: Path, layer, crs, **kwargs) -> FeatureCollection:
        if not path.exists():
            raise FileNotFoundError(f"Arquivo não encontrado: {path}")

        suffix = path.suffix.lower()
        if suffix in config.TEXT_SUFFIXES:
            return self.read_csv(path, crs=crs if crs is not None else config.DEFAULT_CRS, **kwargs)

        if suffix in config.PARQUET_SUFFIXES:
            gdf = gpd.read_parquet(path, **kwargs)
        else:
            gdf = gpd.read_file(path, layer=layer, **kwargs)

        logger.info("Lido %s: %d registros", path, len(gdf))
        return FeatureCollection(gdf, crs=crs)

    def read_csv(
        self,
        uri,
        coords=config.DEFAULT_COORDS,
        crs=config.DEFAULT_CRS,
        wkt: str | None = None,
        sep: str | None = None,
        **pandas_kwargs,
    ) -> FeatureCollection:
        """
        Lê texto delimitado e converte em coleção, pareando colunas de
        coordenadas ou interpretando uma coluna WKT.
        """
        fs, path = self._get_fs_and_path(uri)
        if sep is None:
            sep = "\t" if str(path).lower().endswith(".tsv") else ","

        if fs is not None:
            with fs.open(path, "rb") as fh:
                table = pd.read_csv(fh, sep=sep, **pandas_kwargs)
        else:
            table = pd.read_csv(self.resolve_path(uri), sep=sep, **pandas_kwargs)

        logger.info("Lido %s: %d linhas", uri, len(table))
        if wkt is not None:
            return FeatureCollection.from_wkt(table, column=wkt, crs=crs)
        return FeatureCollection.from_table(table, coords=coords, crs=crs)

    def list_layers(self, uri) -> pd.DataFrame:
        """Camadas (nome e tipo de geometria) de um arquivo local."""
        fs, _ = self._get_fs_and_path(uri)
        if fs is not None:
            raise NotImplementedError("list_layers só aceita caminhos locais.")
        return gpd.list_layers(self.resolve_path(uri))

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    def write(
        self,
        collection: FeatureCollection,
        uri,
        overwrite: bool = False,
        layer: str | None = None,
    ) -> str:
        """
        Grava a coleção; o formato vem do sufixo do caminho.

        Com ``overwrite=False``, um conjunto de dados existente gera
        :class:`DatasetExistsError`. Com ``overwrite=True`` ele é removido
        (incluindo os sidecars de shapefile) antes da escrita.

        Retorna o caminho final gravado.
        """
        fs, path = self._get_fs_and_path(uri)
        if fs is None:
            return self._write_local(collection, self.resolve_path(uri), overwrite, layer)

        if fs.exists(path) and not overwrite:
            raise DatasetExistsError(f"Destino já existe: {uri}")

        with tempfile.TemporaryDirectory() as tmp:
            local = Path(tmp) / Path(path).name
            self._write_local(collection, local, True, layer)
            parent = path.rsplit("/", 1)[0]
            for f in sorted(Path(tmp).iterdir()):
                fs.put(f.as_posix(), f"{parent}/{f.name}")

        logger.info("Gravado %s: %d registros", uri, len(collection))
        return str(uri)

    def _write_local(self, collection, path: Path, overwrite: bool, layer) -> str:
        suffix = path.suffix.lower()
        driver = config.DRIVERS.get(suffix)
        if (
            driver is None
            and suffix not in config.PARQUET_SUFFIXES
            and suffix not in config.TEXT_SUFFIXES
        ):
            raise ValueError(f"Formato não suportado para escrita: '{suffix}'")

        if path.parent:
            path.parent.mkdir(parents=True, exist_ok=True)

        if path.is_dir() or self._dataset_files(path):
            if not overwrite:
                raise DatasetExistsError(
                    f"Destino já existe: {path}. Use overwrite=True para substituir."
                )
            logger.info("Removendo conjunto existente %s", path)
            self._remove(path)

        if suffix in config.PARQUET_SUFFIXES:
            collection.frame.to_parquet(path)
        elif suffix in config.TEXT_SUFFIXES:
            sep = "\t" if suffix == ".tsv" else ","
            self._to_text_table(collection).to_csv(path, sep=sep, index=False)
        else:
            collection.frame.to_file(path, driver=driver, layer=layer)

        logger.info("Gravado %s: %d registros", path, len(collection))
        return path.as_posix()

    @staticmethod
    def _to_text_table(collection: FeatureCollection) -> pd.DataFrame:
        geoms = collection.geometry
        only_points = not geoms.isna().any() and set(geoms.geom_type) <= {"Point"}
        if only_points and len(geoms):
            coords = ("x", "y", "z") if geoms.has_z.any() else ("x", "y")
            return collection.to_table(coords=coords)
        return collection.to_wkt_table(column="wkt")

    # ------------------------------------------------------------------
    # Banco de dados
    # ------------------------------------------------------------------

    def read_db(
        self,
        con,
        table: str | None = None,
        query: str | None = None,
        geometry_column: str = "geom",
        crs=None,
    ) -> FeatureCollection:
        """
        Lê uma tabela ou consulta SQL de um banco.

        A geometria pode vir como WKB, WKB hexadecimal, EWKB ou WKT. Sem
        ``crs`` explícito, o CRS é o SRID embutido nas geometrias EWKB.
        """
        if (table is None) == (query is None):
            raise ValueError("Informe exatamente um entre `table` e `query`.")

        sql = query if query is not None else f"SELECT * FROM {_quote_identifier(table)}"
        frame = pd.read_sql_query(sql, con)

        if geometry_column not in frame.columns:
            raise MissingColumnError(
                f"Coluna de geometria '{geometry_column}' ausente no resultado: "
                f"{list(frame.columns)}"
            )

        geoms = [_decode_geometry(v) for v in frame[geometry_column]]

        if crs is None:
            srids = {shapely.get_srid(g) for g in geoms if g is not None} - {0}
            if len(srids) > 1:
                raise CRSError(f"Geometrias com SRIDs diferentes: {sorted(srids)}")
            crs = srids.pop() if srids else None

        # SRID fica na coleção, não em cada geometria
        frame[geometry_column] = [
            shapely.set_srid(g, 0) if g is not None else None for g in geoms
        ]
        logger.info("Lido do banco: %d registros", len(frame))
        return FeatureCollection(frame, geometry=geometry_column, crs=crs)

    def write_db(
        self,
        collection: FeatureCollection,
        con,
        table: str,
        overwrite: bool = False,
        geometry_column: str = "geom",
    ) -> int:
        """
        Grava a coleção como tabela, com a geometria em EWKB (SRID do CRS).
        Retorna o número de registros gravados.
        """
        _quote_identifier(table)
        srid = epsg_code(collection.crs)

        frame = collection.attributes
        frame[geometry_column] = [
            to_wkb(g, srid=srid) if g is not None else None
            for g in collection.geometry
        ]

        try:
            frame.to_sql(
                table,
                con,
                if_exists="replace" if overwrite else "fail",
                index=False,
            )
        except ValueError as exc:
            if "already exists" in str(exc):
                raise DatasetExistsError(f"Tabela '{table}' já existe.") from exc
            raise

        if isinstance(con, sqlite3.Connection):
            con.commit()

        logger.info("Gravado no banco %s: %d registros", table, len(frame))
        return len(frame)
