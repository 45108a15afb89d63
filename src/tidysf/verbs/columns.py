"""
Verbos de colunas: ``select``, ``rename``, ``mutate`` e ``relocate``.

Todos devolvem um novo DataFrame.

>>> import pandas as pd
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4], "c": [5, 6]})
>>> list(select(df, "c", "a").columns)
['c', 'a']
>>> list(select(df, "-b").columns)
['a', 'c']
"""

from __future__ import annotations

import pandas as pd

from ._common import check_columns, flatten


def _split_selection(columns):
    keep, drop = [], []
    for name in flatten(columns):
        if isinstance(name, str) and name.startswith("-"):
            drop.append(name[1:])
        else:
            keep.append(name)
    return keep, drop


def resolve_selection(frame: pd.DataFrame, *columns) -> list:
    """
    Resolve nomes de colunas, com ``"-nome"`` para exclusão.

    Sem nenhuma coluna positiva, parte de todas as colunas do frame.
    """
    keep, drop = _split_selection(columns)
    check_columns(frame, keep + drop)

    if not keep:
        keep = list(frame.columns)

    seen = []
    for name in keep:
        if name not in drop and name not in seen:
            seen.append(name)
    return seen


def select(frame: pd.DataFrame, *columns) -> pd.DataFrame:
    return frame.loc[:, resolve_selection(frame, *columns)].copy()


def rename(frame: pd.DataFrame, mapping=None, **names) -> pd.DataFrame:
    """
    Renomeia colunas com ``novo=antigo``, como no dplyr.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1]})
    >>> list(rename(df, total="a").columns)
    ['total']
    """
    # mapping explícito segue a convenção do pandas (antigo -> novo)
    old_to_new = dict(mapping or {})
    old_to_new.update({old: new for new, old in names.items()})
    check_columns(frame, old_to_new.keys())
    return frame.rename(columns=old_to_new)


def mutate(frame: pd.DataFrame, **columns) -> pd.DataFrame:
    """
    Cria ou substitui colunas.

    Cada valor pode ser uma função ``frame -> valores``, um escalar ou uma
    sequência. As colunas são avaliadas em ordem, então uma coluna pode usar
    as anteriores.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1, 2]})
    >>> mutate(df, b=lambda d: d["a"] * 10, c=lambda d: d["b"] + 1)["c"].tolist()
    [11, 21]
    """
    out = frame.copy()
    for name, value in columns.items():
        if callable(value):
            value = value(out)
        out[name] = value
    return out


def relocate(frame: pd.DataFrame, *columns, after: str | None = None) -> pd.DataFrame:
    """
    Move colunas para o início (ou para depois de ``after``).

    >>> import pandas as pd
    >>> df = pd.DataFrame({"a": [1], "b": [2], "c": [3]})
    >>> list(relocate(df, "c").columns)
    ['c', 'a', 'b']
    >>> list(relocate(df, "a", after="c").columns)
    ['b', 'c', 'a']
    """
    moved = flatten(columns)
    check_columns(frame, moved + ([after] if after else []))

    rest = [c for c in frame.columns if c not in moved]
    if after is None:
        order = moved + rest
    else:
        pos = rest.index(after) + 1
        order = rest[:pos] + moved + rest[pos:]
    return frame.loc[:, order]
