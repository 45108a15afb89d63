"""
Joins no estilo dplyr sobre DataFrames.

``by`` aceita uma coluna, uma lista de colunas, um dicionário
``{coluna_esquerda: coluna_direita}`` ou ``None`` (join natural sobre as
colunas em comum). Colunas repetidas recebem os sufixos ``.x`` / ``.y``.

>>> import pandas as pd
>>> left = pd.DataFrame({"id": [1, 2, 3], "a": ["p", "q", "r"]})
>>> right = pd.DataFrame({"id": [1, 1, 4], "b": [10, 11, 12]})
>>> len(left_join(left, right, by="id"))
4
>>> semi_join(left, right, by="id")["id"].tolist()
[1]
>>> anti_join(left, right, by="id")["id"].tolist()
[2, 3]
"""

from __future__ import annotations

import logging

import pandas as pd

from tidysf.config import JOIN_SUFFIXES
from tidysf.errors import MissingColumnError

from ._common import check_columns

logger = logging.getLogger(__name__)


def resolve_by(left: pd.DataFrame, right: pd.DataFrame, by=None):
    """Normaliza ``by`` em ``(colunas_esquerda, colunas_direita)``."""
    if by is None:
        common = [c for c in left.columns if c in right.columns]
        if not common:
            raise MissingColumnError(
                "Nenhuma coluna em comum para o join; informe `by`."
            )
        logger.info("Join natural por %s", common)
        return common, common

    if isinstance(by, str):
        left_on = right_on = [by]
    elif isinstance(by, dict):
        left_on, right_on = list(by.keys()), list(by.values())
    else:
        left_on = right_on = list(by)

    check_columns(left, left_on)
    check_columns(right, right_on)
    return left_on, right_on


def _mutating_join(left, right, by, how, suffixes):
    left_on, right_on = resolve_by(left, right, by)

    if left_on != right_on:
        # mantém só o nome da esquerda, como o dplyr
        right = right.rename(columns=dict(zip(right_on, left_on)))

    return pd.merge(left, right, how=how, on=left_on, suffixes=suffixes)


def left_join(left, right, by=None, suffixes=JOIN_SUFFIXES) -> pd.DataFrame:
    """Todas as linhas da esquerda, com as colunas da direita quando há par."""
    return _mutating_join(left, right, by, "left", suffixes)


def inner_join(left, right, by=None, suffixes=JOIN_SUFFIXES) -> pd.DataFrame:
    return _mutating_join(left, right, by, "inner", suffixes)


def right_join(left, right, by=None, suffixes=JOIN_SUFFIXES) -> pd.DataFrame:
    return _mutating_join(left, right, by, "right", suffixes)


def full_join(left, right, by=None, suffixes=JOIN_SUFFIXES) -> pd.DataFrame:
    return _mutating_join(left, right, by, "outer", suffixes)


def _key_mask(left, right, by):
    left_on, right_on = resolve_by(left, right, by)
    left_keys = pd.MultiIndex.from_frame(left[left_on])
    right_keys = pd.MultiIndex.from_frame(right[right_on])
    return left_keys.isin(right_keys)


def semi_join(left, right, by=None) -> pd.DataFrame:
    """
    Linhas da esquerda que têm par na direita.

    Nunca duplica linhas, mesmo com vários pares, e não adiciona colunas.
    """
    return left.loc[_key_mask(left, right, by)].copy()


def anti_join(left, right, by=None) -> pd.DataFrame:
    """Linhas da esquerda sem par na direita."""
    return left.loc[~_key_mask(left, right, by)].copy()
