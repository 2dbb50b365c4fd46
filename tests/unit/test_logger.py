import logging

import pytest

from app.logging.logger import Log


class TestLog:
    def test_appends_context_as_key_value_pairs(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="resume_extractor"):
            Log.info("Fetched document", bytes=12, extension="pdf")
        assert "Fetched document [bytes=12, extension=pdf]" in caplog.text

    def test_message_without_context_is_unchanged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="resume_extractor"):
            Log.warning("plain message")
        assert caplog.records[-1].getMessage() == "plain message"

    def test_configure_sets_level_and_single_handler(self) -> None:
        Log.configure("debug")
        Log.configure("warning")
        logger = logging.getLogger("resume_extractor")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
