"""
Camada de I/O do tidysf.

Este módulo centraliza:
- resolução de URIs (local, ``file://``, ``temp://``, S3)
- leitura e escrita de formatos espaciais e texto delimitado
- leitura e escrita de tabelas em bancos de dados

Ele **não** contém lógica de manipulação de dados.
Apenas resolve **onde estão os dados** e em que formato.
"""

from .feature_io import FeatureIO

__all__ = [
    "FeatureIO",
]
