"""Tests for logging configuration"""
import tempfile
import os
import logging
from pathlib import Path
from unittest.mock import patch

from config import Config
from logging_config import (
    setup_structured_logging,
    get_logger,
    log_publish_cycle,
    log_server_startup,
    log_error
)


class TestLoggingConfig:
    """Test logging configuration and structured logging"""

    def test_setup_structured_logging(self):
        """Test structured logging setup with a log file"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "subdir" / "test.log"
            config = Config(log_file=log_file, log_level="DEBUG")

            setup_structured_logging(config)

            assert log_file.parent.exists()
            logger = logging.getLogger("test")
            assert logger.isEnabledFor(logging.DEBUG)
            logging.getLogger().handlers.clear()

    def test_setup_console_only(self):
        """Test logging setup without a log file"""
        config = Config()

        setup_structured_logging(config)

        handlers = logging.getLogger().handlers
        assert not any(isinstance(h, logging.FileHandler) for h in handlers)

    def test_get_logger(self):
        """Test getting structured logger"""
        logger = get_logger("test_logger")

        assert logger is not None
        assert hasattr(logger, 'info')
        assert hasattr(logger, 'error')
        assert hasattr(logger, 'debug')
        assert hasattr(logger, 'warning')

    def test_log_publish_cycle(self):
        """Test structured publish cycle logging"""
        logger = get_logger("test")

        # This should not raise an exception
        log_publish_cycle(logger, meters_sent=10, batches_sent=1, publish_time=0.5, outcome="success")
        log_publish_cycle(logger, meters_sent=0, batches_sent=0, publish_time=1.2, outcome="transport_failure")

    def test_log_server_startup(self):
        """Test structured server startup logging"""
        logger = get_logger("test")

        log_server_startup(logger, Config())

    def test_log_error(self):
        """Test structured error logging"""
        logger = get_logger("test")
        error = ValueError("Test error")

        log_error(logger, error, {"component": "test"})
        log_error(logger, error)

    def test_development_vs_production_logging(self):
        """Test different logging configurations for development vs production"""
        config = Config()

        with patch.dict(os.environ, {"ENVIRONMENT": "development"}):
            setup_structured_logging(config)
            get_logger("test").info("Test development log")

        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            setup_structured_logging(config)
            get_logger("test").info("Test production log")

    def test_logger_context_binding(self):
        """Test logger context binding"""
        logger = get_logger("test")

        bound_logger = logger.bind(host="http://localhost:9200")
        bound_logger.info("Test message with context")
