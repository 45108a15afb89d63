"""
Verbos de manipulação de tabelas (tidy data) sobre ``pandas.DataFrame``.

Cada verbo é uma função pura: recebe um frame e devolve um novo frame.
Não conhecem geometria; :class:`tidysf.FeatureCollection` os reutiliza
mantendo a coluna de geometria.
"""

from .columns import mutate, relocate, rename, select
from .grouped import Grouped, count, group_by, summarise, ungroup
from .joins import anti_join, full_join, inner_join, left_join, right_join, semi_join
from .reshape import pivot_longer, pivot_wider, separate, unite
from .rows import arrange, distinct, drop_na, filter_rows, slice_rows

__all__ = [
    "select",
    "rename",
    "mutate",
    "relocate",
    "filter_rows",
    "arrange",
    "distinct",
    "slice_rows",
    "drop_na",
    "Grouped",
    "group_by",
    "summarise",
    "count",
    "ungroup",
    "left_join",
    "inner_join",
    "right_join",
    "full_join",
    "semi_join",
    "anti_join",
    "pivot_longer",
    "pivot_wider",
    "separate",
    "unite",
]
