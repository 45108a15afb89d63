"""
Verbos de linhas: ``filter_rows``, ``arrange``, ``distinct``, ``slice_rows``
e ``drop_na``.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from ._common import check_columns, flatten


def _condition_mask(frame: pd.DataFrame, condition) -> np.ndarray:
    if isinstance(condition, str):
        # expressão no estilo DataFrame.query
        mask = frame.eval(condition)
    elif callable(condition):
        mask = condition(frame)
    else:
        mask = condition

    mask = np.asarray(mask)
    if mask.dtype != bool:
        # NA em condições conta como falso, como no dplyr
        mask = pd.array(mask, dtype="boolean").fillna(False).to_numpy(dtype=bool)
    if mask.shape != (len(frame),):
        raise ValueError(
            f"Condição gerou {mask.shape[0] if mask.ndim else 1} valores "
            f"para {len(frame)} linhas."
        )
    return mask


def filter_rows(frame: pd.DataFrame, *conditions) -> pd.DataFrame:
    """
    Mantém as linhas em que todas as condições são verdadeiras.

    Condições podem ser strings (``DataFrame.eval``), funções
    ``frame -> máscara`` ou máscaras booleanas.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1, 2, 3], "b": ["x", "y", "x"]})
    >>> filter_rows(df, "a > 1", lambda d: d["b"] == "x")["a"].tolist()
    [3]
    """
    mask = np.ones(len(frame), dtype=bool)
    for condition in conditions:
        mask &= _condition_mask(frame, condition)
    return frame.loc[mask].copy()


def arrange(frame: pd.DataFrame, *columns) -> pd.DataFrame:
    """
    Ordena de forma estável; ``"-col"`` ordena em ordem decrescente.
    Valores ausentes ficam sempre no fim.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"g": ["a", "b", "a"], "v": [1, 2, 3]})
    >>> arrange(df, "g", "-v")["v"].tolist()
    [3, 1, 2]
    """
    names, ascending = [], []
    for col in flatten(columns):
        if col.startswith("-"):
            names.append(col[1:])
            ascending.append(False)
        else:
            names.append(col)
            ascending.append(True)

    check_columns(frame, names)
    if not names:
        return frame.copy()

    return frame.sort_values(
        names, ascending=ascending, kind="stable", na_position="last"
    )


def distinct(frame: pd.DataFrame, *columns, keep_all: bool = False) -> pd.DataFrame:
    """
    Remove linhas repetidas, considerando apenas ``columns`` se dadas.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1, 1, 2], "b": [1, 2, 3]})
    >>> distinct(df, "a").to_dict("list")
    {'a': [1, 2]}
    """
    columns = flatten(columns)
    check_columns(frame, columns)
    if not columns:
        return frame.drop_duplicates()

    out = frame.drop_duplicates(subset=columns)
    if keep_all:
        return out
    return out.loc[:, columns]


def slice_rows(frame: pd.DataFrame, start: int = 0, stop: int | None = None) -> pd.DataFrame:
    """Fatia posicional das linhas."""
    return frame.iloc[start:stop].copy()


def drop_na(frame: pd.DataFrame, *columns) -> pd.DataFrame:
    columns = flatten(columns)
    check_columns(frame, columns)
    return frame.dropna(subset=columns or None)
