import logging

import pandas as pd
import pytest
from shapely.geometry import Polygon

from tidysf import FeatureCollection, config


@pytest.fixture
def points_table():
    return pd.DataFrame(
        {
            "id": [1, 2, 3, 4],
            "name": ["a", "b", "c", "d"],
            "kind": ["escola", "posto", "escola", "escola"],
            "value": [10.0, 20.0, 30.0, 40.0],
            "x": [0.5, 1.5, 5.5, 20.0],
            "y": [0.5, 0.5, 5.5, 20.0],
        }
    )


@pytest.fixture
def points(points_table):
    return FeatureCollection.from_table(points_table, coords=("x", "y"), crs=3857)


@pytest.fixture
def squares():
    # dois quadrados 2x2: um na origem, outro em (5, 5)
    frame = pd.DataFrame(
        {
            "zone": ["norte", "sul"],
            "geometry": [
                Polygon([(0, 0), (2, 0), (2, 2), (0, 2)]),
                Polygon([(5, 5), (7, 5), (7, 7), (5, 7)]),
            ],
        }
    )
    return FeatureCollection(frame, crs=3857)


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PROJECT_TEMP_DIR", tmp_path / "tidysf_tmp")
    return tmp_path


@pytest.fixture(autouse=True)
def package_logger():
    # a CLI (-v) configura o logger do pacote; cada teste começa do zero
    logger = logging.getLogger("tidysf")
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
