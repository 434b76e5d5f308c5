import json
import logging
import sys

from pagegen.log import JSONFormatter, LLMCallLogger, log_attempt, log_generation, setup_logging


def _reset(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_writes_json_lines(tmp_path):
    logger = setup_logging(tmp_path, "debug")
    try:
        assert logger.level == logging.DEBUG
        log_attempt(
            attempt=2,
            strategy="layout_locked",
            outcome="validation_error",
            elapsed_ms=12,
            intent="comparison",
            detail="Section 1 (hero): headline is required",
        )
        log_generation(
            success=True,
            intent="comparison",
            page_type="comparison",
            retry_count=1,
            generation_time_ms=40,
            strategy="layout_locked",
        )
        with LLMCallLogger("anthropic", "claude-test", "reply") as call_log:
            call_log.success({"input_tokens": 10, "output_tokens": 3}, 42, "end_turn")
    finally:
        _reset(logger)

    lines = [json.loads(line) for line in (tmp_path / "pagegen.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [line["msg"] for line in lines] == ["generation_attempt", "generation_complete", "llm_call"]
    assert lines[0]["level"] == "WARNING"
    assert lines[0]["data"]["attempt"] == 2
    assert lines[1]["data"]["retry_count"] == 1
    assert lines[2]["data"]["input_tokens"] == 10
    assert lines[2]["data"]["purpose"] == "reply"


def test_unknown_level_name_defaults_to_info():
    logger = setup_logging(None, "chatty")
    try:
        assert logger.level == logging.INFO
    finally:
        _reset(logger)


def test_formatter_includes_exception_text():
    try:
        raise ValueError("broken page")
    except ValueError:
        record = logging.getLogger("pagegen.test").makeRecord(
            "pagegen.test", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
        )
    payload = json.loads(JSONFormatter().format(record))
    assert payload["msg"] == "failed"
    assert payload["error"] == "broken page"
