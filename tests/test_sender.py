import json

import pytest
import requests

from datasetlog.errors import RequestError
from datasetlog.sender import LogSender, ResponseKind, classify_response
from tests.fakes import FakeResponse, FakeSession, bad_param, server_error, success

URL = "https://api.example.com/api/addEvents"


def make_sender(session: FakeSession, **kwargs) -> LogSender:
    kwargs.setdefault("retry_delay", 0)
    return LogSender(url=URL, session=session, **kwargs)


@pytest.mark.parametrize(
    "status_code, body, expected",
    [
        (200, {"status": "success"}, ResponseKind.SUCCESS),
        (400, {"status": "error/client/badParam"}, ResponseKind.CLIENT_ERROR),
        (200, {"status": "error/client/badParam"}, ResponseKind.CLIENT_ERROR),
        (500, {"status": "success"}, ResponseKind.RETRY),
        (500, {"status": "error/server"}, ResponseKind.RETRY),
        (200, {"status": "error/server/backoff"}, ResponseKind.RETRY),
        (200, {}, ResponseKind.RETRY),
        (200, None, ResponseKind.RETRY),
        (None, None, ResponseKind.RETRY),
    ],
)
def test_classify_response(status_code, body, expected) -> None:
    assert classify_response(status_code, body) is expected


def test_success_on_first_attempt() -> None:
    session = FakeSession(success())
    result = make_sender(session).send('{"events": []}')

    assert result.success
    assert result.attempts == 1
    assert result.status == "success"
    assert result.error is None
    assert session.calls[0]["url"] == URL
    assert session.calls[0]["data"] == b'{"events": []}'


def test_client_error_is_not_retried() -> None:
    session = FakeSession(bad_param("bad token"))
    result = make_sender(session).send("{}")

    assert not result.success
    assert result.attempts == 1
    assert len(session.calls) == 1
    assert isinstance(result.error, RequestError)
    assert result.error.attempts == 1
    assert result.error.status == "error/client/badParam"
    assert str(result.error) == "bad token"


def test_ambiguous_status_retried_up_to_limit() -> None:
    session = FakeSession(FakeResponse({"status": "error/server/busy"}))
    result = make_sender(session, max_retries=3).send("{}")

    assert not result.success
    assert result.attempts == 4
    assert len(session.calls) == 4
    assert result.error.attempts == 4
    assert "error/server/busy" in str(result.error)


def test_retry_then_success() -> None:
    session = FakeSession(server_error(), FakeResponse(None, 502, "Bad Gateway"), success())
    result = make_sender(session).send("{}")

    assert result.success
    assert result.attempts == 3


def test_transport_errors_are_retried_and_chained() -> None:
    exc = requests.exceptions.ConnectionError("connection refused")
    session = FakeSession(exc)
    result = make_sender(session, max_retries=2).send("{}")

    assert not result.success
    assert result.attempts == 3
    assert result.status_code is None
    assert str(result.error) == "connection refused"
    assert result.error.__cause__ is exc


def test_injected_session_is_not_replaced_or_closed() -> None:
    session = FakeSession(requests.exceptions.Timeout("slow"), success())
    sender = make_sender(session)
    assert sender.send("{}").success
    sender.close()

    assert sender._session is session
    assert not session.closed


def test_headers_sent_per_request() -> None:
    session = FakeSession()
    sender = make_sender(session, headers={"Authorization": "Bearer k"})
    sender.send("x")

    assert session.calls[0]["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer k",
    }
    assert session.headers == {}


def test_path_payload_is_streamed_on_every_attempt(tmp_path) -> None:
    log_file = tmp_path / "app.log"
    log_file.write_text("line 1\nline 2\n")
    session = FakeSession(server_error(), success())

    result = make_sender(session).send(log_file)

    assert result.success
    assert [call["data"] for call in session.calls] == [b"line 1\nline 2\n"] * 2


def test_message_prefers_response_body() -> None:
    session = FakeSession(FakeResponse({"status": "error/x", "message": "try later"}, 503))
    result = make_sender(session, max_retries=0).send("{}")

    assert result.error.message == "try later"
    assert result.error.status_code == 503
    assert json.dumps(result.error.body) == '{"status": "error/x", "message": "try later"}'


def test_caller_header_overrides_content_type() -> None:
    session = FakeSession()
    make_sender(session, headers={"Content-Type": "text/plain"}).send("x")

    assert session.calls[0]["headers"] == {"Content-Type": "text/plain"}
    assert session.headers == {}


def test_owned_session_replaced_after_transport_error(monkeypatch) -> None:
    created = []

    def new_session() -> FakeSession:
        if created:
            session = FakeSession(success())
        else:
            session = FakeSession(requests.exceptions.ConnectionError("reset"))
        created.append(session)
        return session

    monkeypatch.setattr("datasetlog.sender.requests.Session", new_session)
    sender = LogSender(url=URL, retry_delay=0)

    result = sender.send("{}")
    sender.close()

    assert result.success
    assert result.attempts == 2
    assert len(created) == 2
    assert created[0].closed
    assert created[-1].closed
