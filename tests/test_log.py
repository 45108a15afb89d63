import logging

from tidysf.log import configure_logging


def test_configure_logging_targets_named_logger():
    package = logging.getLogger("tidysf")
    before = (package.level, list(package.handlers))

    logger = configure_logging("DEBUG", name="tidysf_teste_log")
    try:
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        configure_logging("WARNING", name="tidysf_teste_log")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

        assert (package.level, list(package.handlers)) == before
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
