"""Tests for catalog_sync/common/log_config.py"""

import logging
import sys

from catalog_sync.common.log_config import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        """Reset loggers between tests."""
        logger = logging.getLogger("catalog_sync")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.handlers.clear()
        sql_logger.setLevel(logging.NOTSET)
        logging.getLogger("urllib3").setLevel(logging.NOTSET)

    def test_default_level_is_info(self):
        logger = setup_logging()
        assert logger.name == "catalog_sync"
        assert logger.level == logging.INFO

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger("catalog_sync").level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.DEBUG

    def test_quiet_sets_warning(self):
        setup_logging(quiet=True)
        assert logging.getLogger("catalog_sync").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_handler_outputs_to_stderr(self):
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr

    def test_repeated_calls_do_not_stack_handlers(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger("catalog_sync").handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "sync.log"
        logger = setup_logging(log_file=str(log_file))

        logging.getLogger("catalog_sync.suppliers.scraper").info("Scraped %d products", 3)
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "Scraped 3 products" in log_file.read_text(encoding="utf-8")

    def test_sql_echo(self):
        setup_logging()
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

        setup_logging(sql_echo=True)
        sql_logger = logging.getLogger("sqlalchemy.engine")
        assert sql_logger.level == logging.INFO
        assert len(sql_logger.handlers) == 1
