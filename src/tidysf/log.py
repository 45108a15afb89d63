"""
Configuração de logging.

O pacote apenas cria loggers por módulo (``logging.getLogger(__name__)``);
handlers só são instalados por quem chama :func:`configure_logging`,
normalmente a CLI.
"""

import logging
import sys

from tidysf.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(
    level: str | int | None = None, name: str = "tidysf"
) -> logging.Logger:
    """
    Instala um handler em stderr no logger ``name`` (por padrão, a raiz do
    pacote). Chamadas repetidas não duplicam o handler.

    >>> import logging
    >>> logger = configure_logging("DEBUG", name="tidysf_exemplo")
    >>> logger.level == logging.DEBUG, len(logger.handlers)
    (True, 1)
    >>> len(configure_logging("INFO", name="tidysf_exemplo").handlers)
    1
    """
    level = level or LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(getattr(h, "_tidysf", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tidysf = True
        logger.addHandler(handler)

    return logger
