"""
Tests for the shared helpers and the logging setup.
"""
import logging

import pytest

from fdsinspect import setup_logging
from fdsinspect.utils import kelvin_to_celsius, kilowatts_to_watts, match_recognised, watts_to_kilowatts


class TestConversions:
    """Test unit conversions"""

    def test_kelvin_to_celsius(self):
        assert kelvin_to_celsius(293.15) == pytest.approx(20.0)

    def test_power(self):
        assert watts_to_kilowatts(1055000.0) == pytest.approx(1055.0)
        assert kilowatts_to_watts(1.5) == pytest.approx(1500.0)


class TestMatchRecognised:
    """Test tolerant membership"""

    def test_match(self):
        assert match_recognised(0.1 + 1e-17, {0.07, 0.1}) == 0.1
        assert match_recognised(0.07, [0.07]) == 0.07

    def test_no_match(self):
        assert match_recognised(0.09, {0.07, 0.1}) is None
        assert match_recognised(0.1, []) is None


class TestSetupLogging:
    """Test the package logger configuration"""

    def test_handlers_are_replaced(self, tmp_path):
        log_file = tmp_path / "fdsinspect.log"
        setup_logging(logging.DEBUG, str(log_file))
        setup_logging(logging.DEBUG, str(log_file))
        logger = logging.getLogger("fdsinspect")
        try:
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 2
            logging.getLogger("fdsinspect.model").debug("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
