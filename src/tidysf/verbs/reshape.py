"""
Reorganização de tabelas (tidy data): ``pivot_longer``, ``pivot_wider``,
``separate`` e ``unite``.

>>> import pandas as pd
>>> wide = pd.DataFrame({"pais": ["A", "B"], "1999": [1, 2], "2000": [3, 4]})
>>> long = pivot_longer(wide, ["1999", "2000"], names_to="ano", values_to="casos")
>>> long.to_dict("list")
{'pais': ['A', 'A', 'B', 'B'], 'ano': ['1999', '2000', '1999', '2000'], 'casos': [1, 3, 2, 4]}
>>> pivot_wider(long, names_from="ano", values_from="casos").to_dict("list")
{'pais': ['A', 'B'], '1999': [1, 2], '2000': [3, 4]}
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from ._common import check_columns, flatten
from .columns import resolve_selection


def pivot_longer(
    frame: pd.DataFrame,
    cols,
    names_to: str = "name",
    values_to: str = "value",
    drop_na: bool = False,
) -> pd.DataFrame:
    """
    Empilha ``cols`` em pares nome/valor, uma linha por observação.

    As linhas de saída seguem a ordem das linhas de entrada.
    """
    cols = resolve_selection(frame, *flatten([cols]))
    ids = [c for c in frame.columns if c not in cols]

    # posição original para ordenar por linha, depois por coluna
    indexed = frame.assign(__row=np.arange(len(frame)))
    out = indexed.melt(
        id_vars=ids + ["__row"],
        value_vars=cols,
        var_name=names_to,
        value_name=values_to,
    )
    out["__col"] = out[names_to].map({c: i for i, c in enumerate(cols)})
    out = (
        out.sort_values(["__row", "__col"], kind="stable")
        .drop(columns=["__row", "__col"])
        .reset_index(drop=True)
    )
    if drop_na:
        out = out.dropna(subset=[values_to]).reset_index(drop=True)
    return out


def pivot_wider(
    frame: pd.DataFrame,
    names_from: str,
    values_from: str,
    id_cols=None,
    values_fill=None,
) -> pd.DataFrame:
    """
    Espalha pares nome/valor em colunas. Inverso de :func:`pivot_longer`.

    Combinações repetidas de identificador e nome geram ``ValueError``.
    """
    check_columns(frame, [names_from, values_from])
    if id_cols is None:
        id_cols = [c for c in frame.columns if c not in (names_from, values_from)]
    else:
        id_cols = flatten([id_cols])
        check_columns(frame, id_cols)

    if frame.duplicated(subset=id_cols + [names_from]).any():
        raise ValueError(
            f"Valores de '{values_from}' não são únicos por {id_cols + [names_from]}."
        )

    names = list(pd.unique(frame[names_from]))
    ids = frame.loc[:, id_cols].drop_duplicates()

    if id_cols:
        out = frame.pivot(index=id_cols, columns=names_from, values=values_from)
        out = out.reindex(columns=names)
        out.columns.name = None
        out = out.reset_index()
        # mantém a ordem de primeira aparição dos identificadores
        out = ids.merge(out, on=id_cols, how="left")
    else:
        row = frame.set_index(names_from)[values_from]
        out = pd.DataFrame([row.reindex(names).tolist()], columns=names)

    if values_fill is not None:
        out[names] = out[names].fillna(values_fill)
    return out.reset_index(drop=True)


def separate(
    frame: pd.DataFrame,
    col: str,
    into,
    sep: str = r"[^0-9A-Za-z]+",
    remove: bool = True,
    regex: bool = True,
) -> pd.DataFrame:
    """
    Divide uma coluna de texto em várias.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"taxa": ["745/19987071", "2666/20595360"]})
    >>> separate(df, "taxa", ["casos", "pop"], sep="/")["casos"].tolist()
    ['745', '2666']
    """
    check_columns(frame, [col])
    into = flatten([into])

    parts = frame[col].astype("string").str.split(
        sep, n=len(into) - 1, expand=True, regex=regex if len(sep) > 1 else False
    )
    parts = parts.reindex(columns=range(len(into)))
    parts.columns = into

    out = frame.copy()
    position = list(out.columns).index(col)
    if remove:
        out = out.drop(columns=[col])
    else:
        position += 1

    for offset, name in enumerate(into):
        values = parts[name].astype(object).where(parts[name].notna(), None)
        if name in out.columns:
            out[name] = values
        else:
            out.insert(position + offset, name, values)
    return out


def unite(
    frame: pd.DataFrame,
    col: str,
    cols,
    sep: str = "_",
    remove: bool = True,
) -> pd.DataFrame:
    """
    Junta várias colunas em uma coluna de texto.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"seculo": ["19", "20"], "ano": ["99", "00"]})
    >>> unite(df, "ano_completo", ["seculo", "ano"], sep="")["ano_completo"].tolist()
    ['1999', '2000']
    """
    cols = flatten([cols])
    check_columns(frame, cols)

    joined = frame[cols].astype(str).agg(sep.join, axis=1)

    out = frame.copy()
    position = min(list(out.columns).index(c) for c in cols)
    if remove:
        out = out.drop(columns=cols)
    out.insert(position, col, joined)
    return out
