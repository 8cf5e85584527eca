import pytest
import requests

from bracketview.scraping import api
from bracketview.scraping.api import FetchError, StartGGClient, post_query


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.bad_json:
            raise ValueError("not json")
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sleeps(monkeypatch):
    waits = []
    monkeypatch.setattr(api.time, "sleep", waits.append)
    return waits


def test_post_query_sends_bearer_token(sleeps):
    session = FakeSession([FakeResponse({"data": {"ok": True}})])
    result = post_query("query {}", {"a": 1}, session=session, token="tok")

    assert result == {"data": {"ok": True}}
    call = session.calls[0]
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["json"] == {"query": "query {}", "variables": {"a": 1}}
    assert sleeps == []


def test_post_query_retries_with_backoff(sleeps):
    session = FakeSession(
        [
            requests.ConnectionError("down"),
            FakeResponse(status_code=502),
            FakeResponse({"data": {}}),
        ]
    )
    result = post_query(
        "q", {}, session=session, token="t", max_retries=3, backoff_factor=2.0
    )
    assert result == {"data": {}}
    assert sleeps == [1.0, 2.0]


def test_post_query_raises_after_last_attempt(sleeps):
    session = FakeSession([FakeResponse(bad_json=True), FakeResponse(bad_json=True)])
    with pytest.raises(FetchError, match="after 2 attempts"):
        post_query("q", {}, session=session, token="t", max_retries=2)
    assert len(sleeps) == 1


def test_client_without_token_raises(monkeypatch):
    monkeypatch.delenv("STARTGG_TOKEN", raising=False)
    client = StartGGClient(session=FakeSession([]))
    with pytest.raises(FetchError, match="STARTGG_TOKEN"):
        client.fetch_phase(1)


def test_client_reads_token_from_env(monkeypatch, sleeps):
    monkeypatch.setenv("STARTGG_TOKEN", " envtoken \n")
    session = FakeSession([FakeResponse({"data": {"phase": None}})])
    client = StartGGClient(session=session)

    client.fetch_phase(42, per_page=10)

    call = session.calls[0]
    assert call["headers"]["Authorization"] == "Bearer envtoken"
    assert call["json"]["variables"] == {"phaseId": 42, "page": 1, "perPage": 10}
    assert "phaseGroups" in call["json"]["query"]


def test_client_query_variables(sleeps):
    session = FakeSession(
        [FakeResponse({}), FakeResponse({}), FakeResponse({})]
    )
    client = StartGGClient(token="t", session=session)
    client.fetch_stream_queue("my-event")
    client.fetch_set("123")
    client.fetch_tournament("my-event")

    assert [c["json"]["variables"] for c in session.calls] == [
        {"tourneySlug": "my-event"},
        {"setId": "123"},
        {"slug": "my-event"},
    ]
