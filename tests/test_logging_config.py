"""Tests for logger setup and naming."""

import logging

import pytest
from rich.logging import RichHandler

from layerlint.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], force=True)
    logging.getLogger("layerlint").setLevel(logging.NOTSET)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbosity,level",
        [("quiet", logging.ERROR), ("normal", logging.WARNING), ("verbose", logging.DEBUG)],
    )
    def test_console_level(self, verbosity, level):
        logger = setup_logging(verbosity)
        assert logger.name == "layerlint"
        assert logger.level == level
        (handler,) = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        assert handler.level == level

    def test_log_file_records_info_when_quiet(self, tmp_path):
        log = tmp_path / "run.log"
        setup_logging("quiet", log_file=log)
        get_logger("layerlint.core.pipeline").info("Stage 'index' complete")
        get_logger("layerlint.core.pipeline").debug("not recorded")
        text = log.read_text()
        assert "INFO - Stage 'index' complete" in text
        assert "not recorded" not in text


class TestGetLogger:
    def test_module_names_pass_through(self):
        assert get_logger("layerlint.scanning.index").name == "layerlint.scanning.index"

    def test_bare_names_are_namespaced(self):
        assert get_logger("scanning").name == "layerlint.scanning"
        assert get_logger("layerlintx").name == "layerlint.layerlintx"

    def test_root(self):
        assert get_logger().name == "layerlint"
        assert get_logger("layerlint").name == "layerlint"
