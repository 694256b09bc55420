from __future__ import annotations

import logging
import threading
from typing import Iterator, Sequence
from xml.etree import ElementTree as ET

import requests
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth

from .assembler import extract_metadata
from .errors import LookupCancelled, MalformedResponse, ProviderMisconfigured, RepositoryUnavailable
from .models import CandidateSegment, InvalidLocale, LanguageSet, LocaleId, QuerySegment, SessionContext
from .settings import DEFAULT_BASE_URL, Settings

logger = logging.getLogger(__name__)

LANGUAGES_PATH = "/api/lang.xml"
SEGMENT_PATH = "/api/segment.xml"
USER_AGENT = "termconnector/1.0"


class CancellationToken:
    """Cooperative cancellation flag checked before and after each request."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise LookupCancelled("Lookup was cancelled by the caller")


def _child_text(element: ET.Element, name: str) -> str:
    child = element.find(name)
    if child is None:
        return ""
    return child.text or ""


def _candidate(segment: ET.Element) -> CandidateSegment:
    return CandidateSegment(
        source=_child_text(segment, "source"),
        target=_child_text(segment, "target"),
        metadata=extract_metadata(segment),
    )


class SegmentSequence:
    """
    Re-iterable view over the ``<segment>`` elements of a parsed response.

    The HTTP response is already closed; each iteration builds fresh
    CandidateSegment values from the in-memory document.
    """

    def __init__(self, elements: Sequence[ET.Element]) -> None:
        self._elements = tuple(elements)

    def __iter__(self) -> Iterator[CandidateSegment]:
        for element in self._elements:
            yield _candidate(element)

    def __len__(self) -> int:
        return len(self._elements)


def parse_languages(root: ET.Element) -> LanguageSet:
    locales: set[LocaleId] = set()
    for element in root.iter("id"):
        try:
            locales.add(LocaleId.parse(element.text or ""))
        except InvalidLocale:
            logger.debug(f"Ignoring unknown locale {element.text!r}")
    return LanguageSet.from_locales(locales)


def parse_segments(root: ET.Element) -> SegmentSequence:
    return SegmentSequence(list(root.iter("segment")))


def _auth_for(context: SessionContext, url: str) -> AuthBase:
    credentials = context.credentials
    if not credentials.applies_to(url):
        raise ProviderMisconfigured(f"Credentials for {credentials.scope_url} do not cover {url}")
    if credentials.scheme == "Basic":
        return HTTPBasicAuth(credentials.username, credentials.secret)
    if credentials.scheme == "Digest":
        return HTTPDigestAuth(credentials.username, credentials.secret)
    raise ProviderMisconfigured(f"Unsupported authentication scheme: {credentials.scheme!r}")


class TerminologyClient:
    """Read-only HTTPS client for the repository's language and segment endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TerminologyClient":
        return cls(settings.base_url, timeout=settings.request_timeout)

    def close(self) -> None:
        self.session.close()

    def fetch_languages(self, context: SessionContext, *, cancel: CancellationToken | None = None) -> LanguageSet:
        root = self._get_xml(context, self.base_url + LANGUAGES_PATH, cancel=cancel)
        languages = parse_languages(root)
        logger.info(f"Repository supports {len(languages)} languages")
        return languages

    def fetch_translation(
        self,
        context: SessionContext,
        query: QuerySegment,
        *,
        cancel: CancellationToken | None = None,
    ) -> SegmentSequence:
        params = {
            "source_lang": str(query.source_locale),
            "target_lang": str(query.target_locale),
            "q": query.text,
            "fuzzy": "false",
        }
        root = self._get_xml(context, self.base_url + SEGMENT_PATH, params=params, cancel=cancel)
        segments = parse_segments(root)
        logger.debug(f"Repository returned {len(segments)} segments ({query.source_locale} -> {query.target_locale})")
        return segments

    def fetch_suggestions(
        self,
        context: SessionContext,
        query: QuerySegment,
        *,
        cancel: CancellationToken | None = None,
    ) -> SegmentSequence:
        # Same endpoint and query; only the consumer differs.
        return self.fetch_translation(context, query, cancel=cancel)

    def _get_xml(
        self,
        context: SessionContext,
        url: str,
        *,
        params: dict[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> ET.Element:
        if cancel is not None:
            cancel.raise_if_cancelled()

        auth = _auth_for(context, url)
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(
                url,
                params=params,
                auth=auth,
                headers={"User-Agent": USER_AGENT, "Accept": "application/xml"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise RepositoryUnavailable(f"Timed out after {self.timeout}s waiting for {url}") from exc
        except requests.exceptions.RequestException as exc:
            raise RepositoryUnavailable(f"Could not reach {url}: {exc}") from exc

        try:
            response.raise_for_status()
            body = response.content
        except requests.exceptions.HTTPError as exc:
            raise RepositoryUnavailable(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise RepositoryUnavailable(f"Failed reading response from {url}: {exc}") from exc
        finally:
            response.close()

        if cancel is not None:
            cancel.raise_if_cancelled()

        try:
            return ET.fromstring(body)
        except ET.ParseError as exc:
            raise MalformedResponse(f"Response from {url} is not well-formed XML: {exc}") from exc
