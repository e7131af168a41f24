import logging

from adrender.logging_setup import configure_logging


def test_configure_logging_installs_a_single_handler():
    logger = configure_logging()
    handlers = list(logger.handlers)
    assert logger.name == "adrender"
    assert logger.level == logging.INFO

    again = configure_logging(verbose=True)
    assert again is logger
    assert again.handlers == handlers
    assert again.level == logging.DEBUG
