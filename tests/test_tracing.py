import io
import json
import logging
import re

import pytest

from core.tracing import LOGGER_NAME, TraceLogger, configure_logging, new_trace_id


@pytest.fixture
def process_logger(settings):
    """configure_logging() against tmp files; the logger is restored afterwards."""
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    stream = io.StringIO()
    yield configure_logging(settings, stream=stream), stream
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_trace_ids_are_unique_and_well_formed():
    ids = {new_trace_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"\d+-[0-9a-f]{9}", trace_id) for trace_id in ids)


def test_file_log_lines_are_json_with_trace_id(process_logger, settings):
    logger, _ = process_logger
    log = TraceLogger(logger, "trace-42")
    log.info("Ideas generated", meta={"count": 3})
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in settings.log_file.read_text(encoding="utf-8").splitlines()]
    assert entries[-1]["message"] == "Ideas generated"
    assert entries[-1]["traceId"] == "trace-42"
    assert entries[-1]["count"] == 3
    assert entries[-1]["level"] == "info"


def test_errors_also_go_to_the_error_file(process_logger, settings):
    logger, _ = process_logger
    TraceLogger(logger, "trace-err").response("run_ab_test", '{"error": "boom"}', is_error=True)
    TraceLogger(logger, "trace-ok").info("fine")
    for handler in logger.handlers:
        handler.flush()

    error_file = settings.log_file.with_name("content-creator-error.log")
    lines = error_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["message"] == 'run_ab_test response: {"error":"boom"}'


def test_console_output_is_plain_when_writing_to_a_stream(process_logger):
    logger, stream = process_logger
    TraceLogger(logger, "trace-c").request("optimize_seo", {"title": "x"})

    line = stream.getvalue().strip()
    assert "\033[" not in line
    assert "trace-c optimize_seo called" in line
    assert '{"arguments":{"title":"x"}}' in line


def test_reconfiguring_does_not_stack_handlers(process_logger, settings):
    logger, _ = process_logger
    configure_logging(settings, stream=io.StringIO())
    assert len(logger.handlers) == 3
