from __future__ import annotations

import logging

import pytest
import requests
from requests.auth import HTTPBasicAuth, HTTPDigestAuth

from conftest import BASE_URL, DummyResponse, fixture_response
from termconnector.client import CancellationToken, SegmentSequence, TerminologyClient
from termconnector.errors import LookupCancelled, MalformedResponse, ProviderMisconfigured, RepositoryUnavailable
from termconnector.models import Credentials, LocaleId, QuerySegment, SessionContext


@pytest.fixture
def context(credentials: Credentials) -> SessionContext:
    return SessionContext(credentials=credentials)


@pytest.fixture
def query() -> QuerySegment:
    return QuerySegment(LocaleId.parse("en-US"), LocaleId.parse("de-DE"), "terms of use")


def test_fetch_languages_parses_ids_and_skips_invalid(client, session, context) -> None:
    session.queue(fixture_response("lang.xml"))

    languages = client.fetch_languages(context)

    assert set(languages) == {LocaleId("en-US"), LocaleId("de-DE"), LocaleId("fr")}
    call = session.calls[0]
    assert call["url"] == f"{BASE_URL}/api/lang.xml"
    assert call["params"] is None
    assert call["timeout"] == 3.0


def test_fetch_languages_without_ids_is_empty(client, session, context) -> None:
    session.queue(DummyResponse(b"<response><languages/></response>"))

    assert len(client.fetch_languages(context)) == 0


def test_fetch_translation_builds_query(client, session, context, query) -> None:
    session.queue(fixture_response("segments.xml"))

    client.fetch_translation(context, query)

    call = session.calls[0]
    assert call["url"] == f"{BASE_URL}/api/segment.xml"
    assert list(call["params"].items()) == [
        ("source_lang", "en-US"),
        ("target_lang", "de-DE"),
        ("q", "terms of use"),
        ("fuzzy", "false"),
    ]
    assert call["headers"]["User-Agent"].startswith("termconnector/")


def test_query_text_is_form_encoded() -> None:
    prepared = requests.Request(
        "GET", f"{BASE_URL}/api/segment.xml", params={"q": "terms of use & more"}
    ).prepare()

    assert prepared.url.endswith("?q=terms+of+use+%26+more")


def test_fetch_translation_returns_candidates(client, session, context, query) -> None:
    response = fixture_response("segments.xml")
    session.queue(response)

    segments = client.fetch_translation(context, query)

    assert isinstance(segments, SegmentSequence)
    assert response.closed
    candidates = list(segments)
    assert [(c.source, c.target) for c in candidates] == [("Hello", "Hallo"), ("hello", "hallo"), ("Hi", "Hi")]
    first = candidates[0].metadata
    assert first.provider == "Acme"
    assert first.owner is None
    assert first.industry == "Software"
    assert first.content_type is None
    assert first.product == "Widget"
    # The sequence can be walked again without another request.
    assert [c.source for c in segments] == ["Hello", "hello", "Hi"]
    assert len(session.calls) == 1


def test_fetch_suggestions_uses_the_segment_endpoint(client, session, context, query) -> None:
    session.queue(fixture_response("segments.xml"))

    segments = client.fetch_suggestions(context, query)

    assert len(segments) == 3
    assert session.calls[0]["url"] == f"{BASE_URL}/api/segment.xml"


def test_segment_without_children_yields_empty_text(client, session, context, query) -> None:
    session.queue(DummyResponse(b"<response><segment><source>Only</source></segment></response>"))

    (candidate,) = list(client.fetch_translation(context, query))

    assert candidate.source == "Only"
    assert candidate.target == ""


def test_basic_credentials_attached(client, session, context) -> None:
    session.queue(fixture_response("lang.xml"))

    client.fetch_languages(context)

    auth = session.calls[0]["auth"]
    assert isinstance(auth, HTTPBasicAuth)
    assert (auth.username, auth.password) == ("jane", "s3cret")


def test_digest_credentials_attached(client, session) -> None:
    context = SessionContext(credentials=Credentials(BASE_URL, "jane", "s3cret", scheme="Digest"))
    session.queue(fixture_response("lang.xml"))

    client.fetch_languages(context)

    assert isinstance(session.calls[0]["auth"], HTTPDigestAuth)


def test_request_outside_credential_scope_is_refused(client, session) -> None:
    context = SessionContext(credentials=Credentials("https://other.example.org", "jane", "s3cret"))
    session.queue(fixture_response("lang.xml"))

    with pytest.raises(ProviderMisconfigured, match="do not cover"):
        client.fetch_languages(context)

    assert session.calls == []


def test_debug_records_reach_configured_handlers(client, session, context, query, caplog) -> None:
    caplog.set_level(logging.DEBUG)
    session.queue(fixture_response("lang.xml"))
    session.queue(fixture_response("segments.xml"))

    client.fetch_languages(context)
    client.fetch_translation(context, query)

    messages = [record.getMessage() for record in caplog.records if record.name == "termconnector.client"]
    assert f"GET {BASE_URL}/api/lang.xml" in messages
    assert any(message.startswith("Repository returned 3 segments") for message in messages)


def test_http_error_status_is_repository_unavailable(client, session, context) -> None:
    response = DummyResponse(b"denied", status_code=401)
    session.queue(response)

    with pytest.raises(RepositoryUnavailable) as excinfo:
        client.fetch_languages(context)

    assert excinfo.value.status_code == 401
    assert response.closed


def test_transport_error_is_repository_unavailable(client, session, context) -> None:
    session.queue(requests.ConnectionError("connection refused"))

    with pytest.raises(RepositoryUnavailable) as excinfo:
        client.fetch_languages(context)

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_timeout_is_repository_unavailable(client, session, context, query) -> None:
    session.queue(requests.Timeout("read timed out"))

    with pytest.raises(RepositoryUnavailable, match="Timed out"):
        client.fetch_translation(context, query)


def test_malformed_xml_is_reported(client, session, context, query) -> None:
    session.queue(DummyResponse(b"<response><segment></response>"))

    with pytest.raises(MalformedResponse):
        client.fetch_translation(context, query)


def test_empty_body_is_malformed(client, session, context) -> None:
    session.queue(DummyResponse(b""))

    with pytest.raises(MalformedResponse):
        client.fetch_languages(context)


def test_cancelled_token_stops_before_request(client, session, context, query) -> None:
    token = CancellationToken()
    token.cancel()

    with pytest.raises(LookupCancelled):
        client.fetch_translation(context, query, cancel=token)

    assert session.calls == []


def test_close_closes_session(client, session) -> None:
    client.close()

    assert session.closed


def test_base_url_trailing_slash_is_ignored(session, context) -> None:
    client = TerminologyClient(BASE_URL + "/", session=session)
    session.queue(fixture_response("lang.xml"))

    client.fetch_languages(context)

    assert session.calls[0]["url"] == f"{BASE_URL}/api/lang.xml"
