"""
Resolução de sistemas de referência de coordenadas (CRS).

Todo CRS recebido pelo pacote passa por :func:`resolve_crs`, que aceita as
formas usuais de especificação e devolve um :class:`pyproj.CRS`.
"""

from __future__ import annotations

import pyproj
from pyproj.exceptions import CRSError as PyprojCRSError

from tidysf.errors import CRSError


def resolve_crs(value) -> pyproj.CRS | None:
    """
    Converte um especificador de CRS em :class:`pyproj.CRS`.

    Aceita ``None``, código EPSG inteiro, string numérica, ``"AUTH:CODE"``,
    string PROJ, WKT ou um ``pyproj.CRS`` já resolvido.

    >>> resolve_crs(4326).to_epsg()
    4326
    >>> resolve_crs("3857").to_epsg()
    3857
    >>> resolve_crs(None) is None
    True
    """
    if value is None:
        return None

    if isinstance(value, pyproj.CRS):
        return value

    if isinstance(value, bool):
        raise CRSError(f"Especificador de CRS inválido: {value!r}")

    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())

    try:
        return pyproj.CRS.from_user_input(value)
    except PyprojCRSError as exc:
        raise CRSError(f"CRS não reconhecido: {value!r}") from exc


def crs_equal(a, b) -> bool:
    """
    Compara dois CRS após resolução.

    >>> crs_equal(4326, "EPSG:4326")
    True
    >>> crs_equal(None, None)
    True
    >>> crs_equal(4326, None)
    False
    """
    a = resolve_crs(a)
    b = resolve_crs(b)
    if a is None or b is None:
        return a is b
    return a == b


def epsg_code(crs) -> int | None:
    """Código EPSG do CRS, ou ``None`` quando não há correspondência."""
    crs = resolve_crs(crs)
    if crs is None:
        return None
    return crs.to_epsg()


def describe_crs(crs) -> str:
    """
    Rótulo curto para exibição.

    >>> describe_crs(4326)
    'EPSG:4326 (WGS 84)'
    >>> describe_crs(None)
    '<sem CRS>'
    """
    crs = resolve_crs(crs)
    if crs is None:
        return "<sem CRS>"

    code = crs.to_authority()
    if code:
        return f"{code[0]}:{code[1]} ({crs.name})"
    return crs.name


def is_geographic(crs) -> bool:
    crs = resolve_crs(crs)
    return bool(crs is not None and crs.is_geographic)
