import logging

import pytest

from datasetlog import DataSetHandler, DataSetLogger, Severity
from datasetlog.handler import severity_for_level
from tests.fakes import FakeSession, success


@pytest.fixture
def session() -> FakeSession:
    return FakeSession(success())


@pytest.fixture
def app_logger(session):
    handler = DataSetHandler(api_key="k", session=session, flush_interval=60.0, retry_delay=0)
    log = logging.getLogger("tests.handler.app")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    log.addHandler(handler)
    yield log, handler
    log.removeHandler(handler)
    if not handler.dataset_logger.closed:
        handler.close()


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, Severity.INFO),
        (logging.INFO, Severity.INFO),
        (logging.WARNING, Severity.WARN),
        (logging.ERROR, Severity.ERROR),
        (logging.CRITICAL, Severity.DANGER),
    ],
)
def test_severity_for_level(level, expected) -> None:
    assert severity_for_level(level) is expected


def test_records_become_events(app_logger, session) -> None:
    log, handler = app_logger

    log.warning("disk %s%% full", 91, extra={"mount": "/var"})
    handler.close()

    event = session.payloads()[0]["events"][0]
    assert event["sev"] == 4
    assert event["thread"] == "MainThread"
    attrs = event["attrs"]
    assert attrs["message"] == "disk 91% full"
    assert attrs["level"] == "WARNING"
    assert attrs["logger"] == "tests.handler.app"
    assert attrs["function"] == "test_records_become_events"
    assert attrs["mount"] == "/var"


def test_exception_text_included(app_logger, session) -> None:
    log, handler = app_logger

    try:
        raise ValueError("bad value")
    except ValueError:
        log.exception("failed")
    handler.close()

    attrs = session.payloads()[0]["events"][0]["attrs"]
    assert "ValueError: bad value" in attrs["exception"]


def test_unserializable_extra_is_stringified(app_logger, session) -> None:
    log, handler = app_logger

    log.info("with object", extra={"thing": object()})
    handler.close()

    assert session.payloads()[0]["events"][0]["attrs"]["thing"].startswith("<object object")


def test_own_diagnostics_are_ignored(session) -> None:
    handler = DataSetHandler(api_key="k", session=session, flush_interval=60.0)
    record = logging.LogRecord("datasetlog.sender", logging.DEBUG, __file__, 1, "retrying", None, None)

    handler.emit(record)

    assert handler.dataset_logger.pending_count() == 0
    handler.close()


def test_wraps_existing_logger(session) -> None:
    dataset_logger = DataSetLogger(api_key="k", session=session, flush_interval=60.0)
    handler = DataSetHandler(dataset_logger)

    assert handler.dataset_logger is dataset_logger
    handler.close()
    assert dataset_logger.closed


def test_existing_logger_and_options_conflict(session) -> None:
    dataset_logger = DataSetLogger(api_key="k", session=session, flush_interval=60.0)
    with pytest.raises(TypeError):
        DataSetHandler(dataset_logger, api_key="other")
    dataset_logger.close()


def test_close_after_logger_closed_is_safe(session) -> None:
    handler = DataSetHandler(api_key="k", session=session, flush_interval=60.0)
    handler.dataset_logger.close()
    handler.close()
