"""
Conjuntos de dados de exemplo embarcados no pacote.

>>> from tidysf import load_example
>>> cidades = load_example("cities")
>>> len(cidades), cidades.crs.to_epsg()
(8, 4326)
"""

from importlib.resources import files

from tidysf.models.crs import crs_equal
from tidysf.models.feature_collection import FeatureCollection

EXAMPLES = {
    "cities": "cities.csv",
    "regions": "regions.geojson",
}


def available_examples() -> list[str]:
    return sorted(EXAMPLES)


def example_path(name: str):
    if name not in EXAMPLES:
        raise ValueError(
            f"Exemplo '{name}' não existe. Disponíveis: {available_examples()}"
        )
    return files("tidysf.data") / EXAMPLES[name]


def load_example(name: str) -> FeatureCollection:
    """
    Carrega um exemplo como :class:`FeatureCollection`.

    ``cities`` são pontos (lon/lat, EPSG:4326) lidos de CSV; ``regions`` são
    polígonos em GeoJSON.
    """
    from tidysf.io import FeatureIO

    path = example_path(name)
    if name == "cities":
        return FeatureIO().read_csv(path, coords=("lon", "lat"), crs=4326)

    fc = FeatureIO().read(path)
    # GeoJSON pode vir como OGC:CRS84; normaliza para EPSG:4326
    if fc.crs is None:
        fc = fc.set_crs(4326)
    elif not crs_equal(fc.crs, 4326):
        fc = fc.to_crs(4326)
    return fc
