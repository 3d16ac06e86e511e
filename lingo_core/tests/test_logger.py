import json
import logging

from lingo_core.infrastructure.logging.logger import setup_logger


def _records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_json_lines_with_structured_extra(tmp_path):
    log = setup_logger("lingo_core.test_plain", log_dir=str(tmp_path), redact=False)
    log.info("Chat call started", extra={"extra": {"trace_id": "tr-1", "engine": "openai"}})
    for h in log.handlers:
        h.flush()

    (record,) = _records(tmp_path / "lingo.log")
    assert record["level"] == "INFO"
    assert record["msg"] == "Chat call started"
    assert record["trace_id"] == "tr-1"
    assert record["engine"] == "openai"


def test_redaction_truncates_message_and_content_fields(tmp_path):
    log = setup_logger("lingo_core.test_redact", log_dir=str(tmp_path), redact=True)
    log.log(logging.WARNING, "x" * 100, extra={"extra": {"preview": "y" * 100, "engine": "gemini"}})
    for h in log.handlers:
        h.flush()

    (record,) = _records(tmp_path / "lingo.log")
    assert record["msg"] == "x" * 64
    assert record["preview"] == "y" * 64
    assert record["engine"] == "gemini"
