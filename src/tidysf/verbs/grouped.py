"""
Agrupamento e agregação: ``group_by``, ``summarise``, ``count``.

Um :class:`Grouped` é apenas o frame mais a lista de chaves; os verbos
agrupados operam grupo a grupo e devolvem DataFrames comuns.

>>> import pandas as pd
>>> df = pd.DataFrame({"g": ["a", "b", "a"], "v": [1, 2, 3]})
>>> summarise(group_by(df, "g"), total=("v", "sum")).to_dict("list")
{'g': ['a', 'b'], 'total': [4, 2]}
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from ._common import check_columns, flatten
from .rows import _condition_mask


@dataclass
class Grouped:
    frame: pd.DataFrame
    keys: list = field(default_factory=list)

    def __len__(self):
        return self.frame.groupby(self.keys, dropna=False).ngroups

    def groups(self):
        """Itera ``(chave, subframe)``, com a chave sempre como tupla."""
        for key, sub in self.frame.groupby(self.keys, sort=True, dropna=False):
            yield (key if isinstance(key, tuple) else (key,)), sub

    def positions(self):
        """Posições (não rótulos) das linhas de cada grupo, na ordem de ``groups``."""
        codes = self.frame.groupby(self.keys, sort=True, dropna=False).ngroup().to_numpy()
        for code in range(int(codes.max()) + 1 if len(codes) else 0):
            yield np.flatnonzero(codes == code)

    def summarise(self, **aggs) -> pd.DataFrame:
        return summarise(self, **aggs)

    def count(self, name: str = "n", sort: bool = False) -> pd.DataFrame:
        return count(self, name=name, sort=sort)

    def mutate(self, **columns) -> "Grouped":
        out = self.frame.copy()
        for name, value in columns.items():
            if not callable(value):
                out[name] = value
                continue
            parts = [
                _broadcast(value(out.iloc[pos]), pos)
                for pos in Grouped(out, self.keys).positions()
            ]
            if not parts:
                out[name] = value(out)
                continue
            # índice posicional: rótulos repetidos não se misturam entre grupos
            out[name] = pd.concat(parts).sort_index().to_numpy()
        return Grouped(out, list(self.keys))

    def filter(self, *conditions) -> "Grouped":
        kept = []
        for pos in self.positions():
            sub = self.frame.iloc[pos]
            mask = np.ones(len(sub), dtype=bool)
            for condition in conditions:
                if isinstance(condition, str):
                    mask &= _condition_mask(sub, condition)
                    continue
                result = condition(sub) if callable(condition) else condition
                if np.ndim(result) == 0:
                    mask &= bool(result)
                else:
                    mask &= _condition_mask(sub, result)
            kept.append(pos[mask])
        # mantém a ordem original das linhas
        rows = np.sort(np.concatenate(kept)) if kept else np.array([], dtype=int)
        return Grouped(self.frame.iloc[rows], list(self.keys))

    def ungroup(self) -> pd.DataFrame:
        return self.frame.copy()


def _broadcast(result, index) -> pd.Series:
    if np.ndim(result) == 0:
        return pd.Series(result, index=index)
    return pd.Series(np.asarray(result), index=index)


def group_by(frame: pd.DataFrame, *keys) -> Grouped:
    keys = flatten(keys)
    if not keys:
        raise ValueError("group_by precisa de ao menos uma coluna.")
    check_columns(frame, keys)
    return Grouped(frame, keys)


def ungroup(data) -> pd.DataFrame:
    if isinstance(data, Grouped):
        return data.ungroup()
    return data


def _aggregate(frame: pd.DataFrame, aggs: dict) -> dict:
    row = {}
    for name, agg in aggs.items():
        if callable(agg):
            row[name] = agg(frame)
        elif isinstance(agg, tuple) and len(agg) == 2:
            column, func = agg
            check_columns(frame, [column])
            row[name] = frame[column].agg(func)
        else:
            raise TypeError(
                f"Agregação '{name}' deve ser (coluna, função) ou função do frame."
            )
    return row


def summarise(data, **aggs) -> pd.DataFrame:
    """
    Reduz cada grupo (ou o frame inteiro) a uma linha.

    Cada agregação é ``(coluna, função)`` no estilo pandas ou uma função
    que recebe o subframe e devolve um escalar.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"v": [1, 2, 3]})
    >>> summarise(df, n=len, media=("v", "mean")).to_dict("records")
    [{'n': 3, 'media': 2.0}]
    """
    if isinstance(data, Grouped):
        rows = []
        for key, sub in data.groups():
            row = dict(zip(data.keys, key))
            row.update(_aggregate(sub, aggs))
            rows.append(row)
        return pd.DataFrame(rows, columns=list(data.keys) + list(aggs))

    return pd.DataFrame([_aggregate(data, aggs)], columns=list(aggs))


def count(data, *keys, name: str = "n", sort: bool = False) -> pd.DataFrame:
    """
    Conta linhas por combinação de chaves.

    >>> import pandas as pd
    >>> df = pd.DataFrame({"g": ["a", "b", "a"]})
    >>> count(df, "g", sort=True).to_dict("list")
    {'g': ['a', 'b'], 'n': [2, 1]}
    """
    if isinstance(data, Grouped):
        frame, keys = data.frame, list(data.keys) + flatten(keys)
    else:
        frame, keys = data, flatten(keys)

    if not keys:
        return pd.DataFrame({name: [len(frame)]})

    check_columns(frame, keys)
    out = (
        frame.groupby(keys, sort=True, dropna=False)
        .size()
        .reset_index(name=name)
    )
    if sort:
        out = out.sort_values(name, ascending=False, kind="stable").reset_index(drop=True)
    return out
