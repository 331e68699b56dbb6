"""Unit tests for utility modules."""

import logging

import pytest
from docgen.utils.id_generator import content_hash, generate_uuid, truncate_string, utc_now
from docgen.utils.logger import LogContext, get_logger, log_json, setup_logging


class TestIdGenerator:
    """Tests for id and hash helpers."""

    def test_uuid_unique(self):
        assert generate_uuid() != generate_uuid()

    def test_utc_now_iso(self):
        assert utc_now().endswith("+00:00")

    def test_content_hash(self):
        assert content_hash("a  b\n") == content_hash("a b")
        assert content_hash("a b") != content_hash("a c")
        assert len(content_hash("x")) == 12
        assert len(content_hash("x", length=20)) == 20

    def test_truncate(self):
        assert truncate_string("short", 10) == "short"
        assert truncate_string("a" * 20, 10) == "aaaaaaa..."


class TestLogger:
    """Tests for logging helpers."""

    def test_namespaced(self):
        assert get_logger("tests").name == "docgen.tests"
        assert get_logger("docgen.generator").name == "docgen.generator"

    def test_log_context_success(self, caplog):
        logger = get_logger("tests.context")
        with caplog.at_level(logging.INFO, logger="docgen"):
            with LogContext(logger, "Generating document", project_id="p1"):
                pass
        assert "Starting: Generating document (project_id=p1)" in caplog.text
        assert "Completed: Generating document" in caplog.text

    def test_log_context_failure(self, caplog):
        logger = get_logger("tests.context")
        with caplog.at_level(logging.INFO, logger="docgen"):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "Generating wireframe"):
                    raise RuntimeError("boom")
        assert "Failed: Generating wireframe" in caplog.text
        assert "RuntimeError: boom" in caplog.text

    def test_log_json(self, caplog):
        logger = get_logger("tests.json")
        with caplog.at_level(logging.DEBUG, logger="docgen"):
            log_json(logger, "Payload", {"écran": "Login"})
        assert '"écran": "Login"' in caplog.text

    def test_setup_logging_file(self, tmp_path):
        log_file = tmp_path / "logs" / "docgen.log"
        setup_logging(level="DEBUG", log_file=log_file, console=False)
        get_logger("tests.file").debug("written")
        for handler in logging.getLogger("docgen").handlers:
            handler.flush()
        assert "written" in log_file.read_text(encoding="utf-8")
        setup_logging()
