from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator
from urllib.parse import urlsplit

from .errors import ProviderMisconfigured

if TYPE_CHECKING:
    from .resources import StringCatalog

# language[-script][-region][-variant...]
_LOCALE_RE = re.compile(
    r"^(?P<language>[A-Za-z]{2,3})"
    r"(?:-(?P<script>[A-Za-z]{4}))?"
    r"(?:-(?P<region>[A-Za-z]{2}|[0-9]{3}))?"
    r"(?P<variants>(?:-(?:[A-Za-z0-9]{5,8}|[0-9][A-Za-z0-9]{3}))*)$"
)


class InvalidLocale(ValueError):
    pass


@dataclass(slots=True, frozen=True)
class LocaleId:
    """A canonicalized BCP-47 style locale tag such as ``en-US``."""

    tag: str

    @classmethod
    def parse(cls, value: str) -> "LocaleId":
        raw = (value or "").strip().replace("_", "-")
        match = _LOCALE_RE.match(raw)
        if match is None:
            raise InvalidLocale(f"Not a valid locale tag: {value!r}")
        parts = [match.group("language").lower()]
        if match.group("script"):
            parts.append(match.group("script").title())
        if match.group("region"):
            parts.append(match.group("region").upper())
        variants = match.group("variants")
        if variants:
            parts.extend(v.lower() for v in variants.strip("-").split("-"))
        return cls("-".join(parts))

    @property
    def language(self) -> str:
        return self.tag.split("-", 1)[0]

    def __str__(self) -> str:
        return self.tag


@dataclass(slots=True, frozen=True)
class LanguageSet:
    """Locales supported by the repository, fetched once per session."""

    locales: frozenset[LocaleId] = frozenset()

    @classmethod
    def from_locales(cls, locales: Iterable[LocaleId]) -> "LanguageSet":
        return cls(frozenset(locales))

    def __contains__(self, locale: object) -> bool:
        return locale in self.locales

    def __iter__(self) -> Iterator[LocaleId]:
        return iter(self.locales)

    def __len__(self) -> int:
        return len(self.locales)

    def copy(self) -> set[LocaleId]:
        return set(self.locales)


@dataclass(slots=True, frozen=True)
class Credentials:
    """Username/secret pair scoped to one endpoint URL and auth scheme."""

    scope_url: str
    username: str
    secret: str = field(repr=False)
    scheme: str = "Basic"

    def applies_to(self, url: str) -> bool:
        scope = urlsplit(self.scope_url)
        target = urlsplit(url)
        if (scope.scheme.lower(), scope.netloc.lower()) != (target.scheme.lower(), target.netloc.lower()):
            return False
        prefix = scope.path.rstrip("/")
        return target.path == prefix or target.path.startswith(prefix + "/")


@dataclass(slots=True, frozen=True)
class ProjectInfo:
    name: str
    version: str = ""


@dataclass(slots=True, frozen=True)
class QuerySegment:
    source_locale: LocaleId
    target_locale: LocaleId
    text: str


# (attribute, element name, resource key prefix)
METADATA_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("provider", "provider", "PropertyProvider"),
    ("owner", "owner", "PropertyOwner"),
    ("industry", "industry", "PropertyIndustry"),
    ("content_type", "content_type", "PropertyContentType"),
    ("product", "product", "PropertyProduct"),
)


@dataclass(slots=True, frozen=True)
class MetadataProperty:
    name: str
    description: str
    value: str


@dataclass(slots=True, frozen=True)
class SegmentMetadata:
    provider: str | None = None
    owner: str | None = None
    industry: str | None = None
    content_type: str | None = None
    product: str | None = None

    def as_properties(self, strings: "StringCatalog") -> dict[str, str]:
        """Present fields keyed by their localized display name."""
        properties: dict[str, str] = {}
        for attr, _, prefix in METADATA_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                properties[strings.get(prefix + "DisplayName")] = value
        return properties

    def as_property_descriptors(self, strings: "StringCatalog") -> list[MetadataProperty]:
        """Present fields with their localized display name and description, in field order."""
        return [
            MetadataProperty(
                name=strings.get(prefix + "DisplayName"),
                description=strings.get(prefix + "Description"),
                value=getattr(self, attr),
            )
            for attr, _, prefix in METADATA_FIELDS
            if getattr(self, attr) is not None
        ]


@dataclass(slots=True, frozen=True)
class CandidateSegment:
    source: str
    target: str
    metadata: SegmentMetadata = field(default_factory=SegmentMetadata)


class TranslationState(str, Enum):
    TRANSLATED = "translated"
    NEEDS_REVIEW = "needs-review"
    NO_MATCH = "no-match"


class MatchType(str, Enum):
    TRANSLATION_MEMORY = "translation-memory"


@dataclass(slots=True, frozen=True)
class ScoredResult:
    source: str
    target: str
    confidence: float
    state: TranslationState
    provider_name: str = ""
    match_type: MatchType = MatchType.TRANSLATION_MEMORY
    metadata: SegmentMetadata = field(default_factory=SegmentMetadata)
    state_detail: str | None = None
    request_id: str | None = None

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["state"] = self.state.value
        payload["match_type"] = self.match_type.value
        return payload


@dataclass(slots=True, frozen=True)
class SessionContext:
    """Everything a lookup needs, passed explicitly to every client call."""

    credentials: Credentials
    languages: LanguageSet | None = None
    source_locale: LocaleId | None = None
    target_locale: LocaleId | None = None
    project: ProjectInfo | None = None

    def require_languages(self) -> LanguageSet:
        if self.languages is None:
            raise ProviderMisconfigured("supported languages have not been initialized")
        return self.languages

    def require_pair(self) -> tuple[LocaleId, LocaleId]:
        if self.source_locale is None:
            raise ProviderMisconfigured("source locale has not been initialized")
        if self.target_locale is None:
            raise ProviderMisconfigured("target locale has not been initialized")
        return self.source_locale, self.target_locale
