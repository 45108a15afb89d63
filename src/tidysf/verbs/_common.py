from __future__ import annotations

from typing import Iterable

import pandas as pd

from tidysf.errors import MissingColumnError


def flatten(names) -> list:
    """Achata argumentos que podem vir como strings soltas ou listas."""
    out = []
    for name in names:
        if isinstance(name, (list, tuple)):
            out.extend(flatten(name))
        else:
            out.append(name)
    return out


def check_columns(frame: pd.DataFrame, names: Iterable[str]) -> None:
    missing = [n for n in names if n not in frame.columns]
    if missing:
        raise MissingColumnError(
            f"Colunas ausentes: {missing}. Disponíveis: {list(frame.columns)}"
        )
