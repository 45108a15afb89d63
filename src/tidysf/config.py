"""
Constantes de configuração do tidysf.

Valores padrão podem ser sobrescritos por variáveis de ambiente com o
prefixo ``TIDYSF_``.
"""

import os
from pathlib import Path


def _env_crs(name: str, default: int):
    """
    CRS de uma variável de ambiente: código numérico vira ``int``; qualquer
    outro especificador (``"EPSG:31983"``, PROJ, WKT) segue como texto.
    """
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    value = value.strip()
    return int(value) if value.isdigit() else value


# CRS padrão ao converter tabelas em coleções (WGS 84)
DEFAULT_CRS = _env_crs("TIDYSF_DEFAULT_CRS", 4326)

DEFAULT_COORDS = ("x", "y")

# tolerância para comparação de coordenadas
COORD_TOLERANCE = 1e-9

# sufixos no estilo dplyr para colunas repetidas em joins
JOIN_SUFFIXES = (".x", ".y")

PROJECT_TEMP_DIR = Path(
    os.environ.get("TIDYSF_TEMP_DIR", Path.cwd() / "tidysf_tmp")
)

S3_ENDPOINT_URL = os.environ.get("TIDYSF_S3_ENDPOINT_URL")
S3_KEY_ID = os.environ.get("TIDYSF_S3_KEY_ID")
S3_SECRET = os.environ.get("TIDYSF_S3_SECRET")

LOG_LEVEL = os.environ.get("TIDYSF_LOG_LEVEL", "WARNING")

# sufixo -> driver OGR (pyogrio)
DRIVERS = {
    ".gpkg": "GPKG",
    ".shp": "ESRI Shapefile",
    ".geojson": "GeoJSON",
    ".json": "GeoJSON",
    ".fgb": "FlatGeobuf",
}

PARQUET_SUFFIXES = (".parquet", ".geoparquet")
TEXT_SUFFIXES = (".csv", ".tsv", ".txt")

# arquivos auxiliares de um shapefile
SHAPEFILE_SIDECARS = (".shp", ".shx", ".dbf", ".prj", ".cpg", ".qix", ".sbn", ".sbx")
