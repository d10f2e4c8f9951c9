"""Tests for lunus/common/log_config.py"""

import logging

import pytest

from lunus.common.log_config import setup_logging


@pytest.fixture(autouse=True)
def reset_lunus_logger():
    yield
    logger = logging.getLogger("lunus")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_default_level_info(self):
        setup_logging()
        assert logging.getLogger("lunus").level == logging.INFO

    def test_verbose(self):
        setup_logging(verbose=True)
        assert logging.getLogger("lunus").level == logging.DEBUG

    def test_quiet(self):
        setup_logging(quiet=True)
        assert logging.getLogger("lunus").level == logging.WARNING

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("lunus").handlers) == 1
