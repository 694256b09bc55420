"""Connector for querying a multilingual terminology repository over HTTPS."""

from .assembler import best_match, compare_by_confidence, extract_metadata, rank_key, rank_suggestions, sort_by_confidence  # noqa: F401
from .client import CancellationToken, SegmentSequence, TerminologyClient  # noqa: F401
from .credentials import CredentialStore, EnvCredentialStore, StaticCredentialStore  # noqa: F401
from .errors import (  # noqa: F401
    InvalidArgument,
    LookupCancelled,
    MalformedResponse,
    ProviderError,
    ProviderMisconfigured,
    RepositoryUnavailable,
    UnsupportedLogoStyle,
)
from .models import (  # noqa: F401
    CandidateSegment,
    Credentials,
    LanguageSet,
    LocaleId,
    MatchType,
    MetadataProperty,
    ProjectInfo,
    QuerySegment,
    ScoredResult,
    SegmentMetadata,
    SessionContext,
    TranslationState,
)
from .provider import TerminologyProvider  # noqa: F401
from .resources import LogoStyle  # noqa: F401
from .scoring import score  # noqa: F401
from .settings import AccountDescriptor, Settings, get_settings  # noqa: F401

__all__ = [
    "AccountDescriptor",
    "CancellationToken",
    "CandidateSegment",
    "CredentialStore",
    "Credentials",
    "EnvCredentialStore",
    "InvalidArgument",
    "LanguageSet",
    "LocaleId",
    "LogoStyle",
    "LookupCancelled",
    "MalformedResponse",
    "MatchType",
    "MetadataProperty",
    "ProjectInfo",
    "ProviderError",
    "ProviderMisconfigured",
    "QuerySegment",
    "RepositoryUnavailable",
    "ScoredResult",
    "SegmentMetadata",
    "SegmentSequence",
    "SessionContext",
    "Settings",
    "StaticCredentialStore",
    "TerminologyClient",
    "TerminologyProvider",
    "TranslationState",
    "UnsupportedLogoStyle",
    "best_match",
    "compare_by_confidence",
    "extract_metadata",
    "get_settings",
    "rank_key",
    "rank_suggestions",
    "score",
    "sort_by_confidence",
]
