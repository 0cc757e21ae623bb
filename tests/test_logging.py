import logging

import pytest

from wealthmap.utils.logging import get_logger, log_timing


def test_service_loggers_share_the_wealthmap_namespace():
    logger = get_logger("services.report")
    assert logger.name == "wealthmap.services.report"
    assert get_logger().handlers


def test_log_timing_records_fields_and_elapsed(caplog):
    logger = logging.getLogger("timing-test")
    with caplog.at_level(logging.INFO, logger="timing-test"):
        with log_timing(logger, "export", rows=3) as event:
            event["bytes"] = 10
    assert "export rows=3 bytes=10 ok=True elapsed_ms=" in caplog.text


def test_log_timing_reraises_and_marks_failure(caplog):
    logger = logging.getLogger("timing-test")
    with caplog.at_level(logging.INFO, logger="timing-test"):
        with pytest.raises(RuntimeError):
            with log_timing(logger, "export"):
                raise RuntimeError("boom")
    assert caplog.records[-1].levelno == logging.WARNING
    assert "ok=False" in caplog.text
