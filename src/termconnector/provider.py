from __future__ import annotations

import logging
from dataclasses import replace

from .assembler import best_match, rank_suggestions
from .client import LANGUAGES_PATH, CancellationToken, TerminologyClient
from .credentials import CredentialStore, EnvCredentialStore
from .errors import InvalidArgument, ProviderError, ProviderMisconfigured
from .models import InvalidLocale, LocaleId, ProjectInfo, QuerySegment, ScoredResult, SessionContext
from .resources import ImageProvider, LogoStyle, PackageImages, StringCatalog, coerce_logo_style
from .settings import AccountDescriptor, Settings, get_settings

logger = logging.getLogger(__name__)


def _locale(value: LocaleId | str | None, name: str) -> LocaleId:
    if value is None:
        raise InvalidArgument(f"{name} is required")
    if isinstance(value, LocaleId):
        return value
    try:
        return LocaleId.parse(value)
    except InvalidLocale as exc:
        raise InvalidArgument(f"{name}: {exc}") from exc


def _query_text(text: str | None, name: str) -> str:
    if text is None or not text.strip():
        raise InvalidArgument(f"{name} must not be blank")
    return text


class TerminologyProvider:
    """
    Host-facing facade over the repository client and result assembler.

    Construction looks up the account credentials and fetches the supported
    language set once. ``initialize`` then fixes the locale pair used by
    ``translate`` and ``suggest``. All session state lives in an immutable
    SessionContext that is replaced, never mutated.

    Example:
        ```python
        account = AccountDescriptor.from_xml("account.xml")
        with TerminologyProvider(account, EnvCredentialStore()) as provider:
            provider.initialize("en-US", "de-DE")
            best = provider.translate("Hello")
            ranked = provider.suggest("Hello", max_results=5)
        ```
    """

    def __init__(
        self,
        account: AccountDescriptor,
        credential_store: CredentialStore,
        *,
        settings: Settings | None = None,
        client: TerminologyClient | None = None,
        strings: StringCatalog | None = None,
        images: ImageProvider | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.strings = strings or StringCatalog(self.settings.ui_locale)
        self.images = images or PackageImages()

        stored = credential_store.lookup(account.url)
        if stored is None:
            raise ProviderMisconfigured(self.strings.get("ProviderCredentialError"))
        credentials = replace(stored, scope_url=account.url, scheme=account.auth_scheme)

        self._owns_client = client is None
        self.client = client or TerminologyClient.from_settings(self.settings)
        if not credentials.applies_to(self.client.base_url + LANGUAGES_PATH):
            self.close()
            raise ProviderMisconfigured(
                f"Repository {self.client.base_url} is outside the credential scope {account.url}"
            )
        bootstrap = SessionContext(credentials=credentials)
        try:
            languages = self.client.fetch_languages(bootstrap)
        except ProviderError:
            self.close()
            raise
        self._context = replace(bootstrap, languages=languages)
        logger.info(f"Provider ready for {account.url} ({len(languages)} languages)")

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        credential_store: CredentialStore | None = None,
    ) -> "TerminologyProvider":
        settings = settings or get_settings()
        account = AccountDescriptor.from_xml(settings.account_file)
        return cls(account, credential_store or EnvCredentialStore(), settings=settings)

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def display_name(self) -> str:
        return self.strings.get("ProviderDisplayName")

    @property
    def description(self) -> str:
        return self.strings.get("ProviderDescription")

    def initialize(
        self,
        source_locale: LocaleId | str | None,
        target_locale: LocaleId | str | None,
        project_info: ProjectInfo | None = None,
    ) -> SessionContext:
        """Fix the locale pair for subsequent translate/suggest calls."""
        source = _locale(source_locale, "source_locale")
        target = _locale(target_locale, "target_locale")
        self._context = replace(self._context, source_locale=source, target_locale=target, project=project_info)
        return self._context

    def get_targets(self, source_locale: LocaleId | str | None) -> set[LocaleId]:
        source = _locale(source_locale, "source_locale")
        languages = self._context.require_languages()
        if source not in languages:
            return set()
        # The repository supports lookups in every direction between its languages.
        return languages.copy()

    def is_supported(self, source_locale: LocaleId | str | None, target_locale: LocaleId | str | None) -> bool:
        source = _locale(source_locale, "source_locale")
        target = _locale(target_locale, "target_locale")
        languages = self._context.require_languages()
        return source in languages and target in languages

    def _query(self, text: str | None, name: str) -> QuerySegment:
        text = _query_text(text, name)
        source, target = self._context.require_pair()
        self._context.require_languages()
        return QuerySegment(source_locale=source, target_locale=target, text=text)

    def translate(
        self,
        text: str | None,
        *,
        request_id: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> ScoredResult:
        query = self._query(text, "translate text")
        segments = self.client.fetch_translation(self._context, query, cancel=cancel)
        result = best_match(query.text, segments, provider_name=self.display_name, request_id=request_id)
        logger.info(f"Translate: {len(segments)} segments, best confidence {result.confidence:g} ({result.state.value})")
        return result

    def suggest(
        self,
        text: str | None,
        max_results: int,
        *,
        cancel: CancellationToken | None = None,
    ) -> list[ScoredResult]:
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            raise InvalidArgument(f"max_results must be a positive integer, got {max_results!r}")
        query = self._query(text, "suggest text")
        segments = self.client.fetch_suggestions(self._context, query, cancel=cancel)
        results = rank_suggestions(query.text, segments, max_results, provider_name=self.display_name)
        logger.info(f"Suggest: {len(segments)} segments, returning {len(results)}")
        return results

    def get_logo(self, style: LogoStyle | str) -> bytes:
        return self.images.load(coerce_logo_style(style))

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "TerminologyProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
