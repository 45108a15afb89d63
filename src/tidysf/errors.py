"""
Exceções do tidysf.

Cada erro também herda da exceção nativa equivalente, de modo que
``except ValueError`` continua funcionando para quem não conhece o pacote.
"""


class TidySFError(Exception):
    """Raiz de todas as exceções do tidysf."""


class CRSError(TidySFError, ValueError):
    """CRS inválido, ausente ou incompatível entre duas coleções."""


class GeometryError(TidySFError, ValueError):
    """Geometria malformada ou incompatível com a operação."""


class MissingColumnError(TidySFError, KeyError):
    """Coluna referenciada não existe na tabela."""

    def __str__(self):
        # KeyError coloca a mensagem entre aspas
        return str(self.args[0]) if self.args else ""


class DatasetExistsError(TidySFError, FileExistsError):
    """Destino de escrita já existe e ``overwrite`` não foi pedido."""
