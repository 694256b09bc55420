"""Localized display strings and logo images exposed to the host."""

from __future__ import annotations

import logging
from enum import Enum
from importlib.resources import files
from typing import Mapping, Protocol

from .errors import UnsupportedLogoStyle

logger = logging.getLogger(__name__)

STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "ProviderDisplayName": "TAUS Data",
        "ProviderDescription": "Term and phrase lookups from the TAUS Data repository.",
        "ProviderCredentialError": "No credentials are stored for the TAUS Data account.",
        "PropertyProviderDisplayName": "Provider",
        "PropertyProviderDescription": "Organization that contributed the segment.",
        "PropertyOwnerDisplayName": "Owner",
        "PropertyOwnerDescription": "Owner of the segment's data set.",
        "PropertyIndustryDisplayName": "Industry",
        "PropertyIndustryDescription": "Industry the segment was collected from.",
        "PropertyContentTypeDisplayName": "Content type",
        "PropertyContentTypeDescription": "Kind of content the segment came from.",
        "PropertyProductDisplayName": "Product",
        "PropertyProductDescription": "Product the segment was translated for.",
    },
    "de": {
        "ProviderDescription": "Begriffs- und Phrasensuche im TAUS Data Repository.",
        "ProviderCredentialError": "Für das TAUS Data Konto sind keine Anmeldedaten gespeichert.",
        "PropertyProviderDisplayName": "Anbieter",
        "PropertyProviderDescription": "Organisation, die das Segment beigetragen hat.",
        "PropertyOwnerDisplayName": "Besitzer",
        "PropertyIndustryDisplayName": "Branche",
        "PropertyContentTypeDisplayName": "Inhaltstyp",
        "PropertyProductDisplayName": "Produkt",
    },
    "fr": {
        "ProviderDescription": "Recherche de termes et d'expressions dans le référentiel TAUS Data.",
        "ProviderCredentialError": "Aucun identifiant n'est enregistré pour le compte TAUS Data.",
        "PropertyProviderDisplayName": "Fournisseur",
        "PropertyProviderDescription": "Organisation qui a fourni le segment.",
        "PropertyOwnerDisplayName": "Propriétaire",
        "PropertyIndustryDisplayName": "Secteur",
        "PropertyContentTypeDisplayName": "Type de contenu",
        "PropertyProductDisplayName": "Produit",
    },
}

FALLBACK_LOCALE = "en"


class StringCatalog:
    """Looks up display strings for a UI locale, falling back to its language, then English."""

    def __init__(self, locale: str = FALLBACK_LOCALE, tables: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self.locale = locale
        self._tables = tables if tables is not None else STRINGS

    def _candidates(self) -> list[str]:
        normalized = self.locale.replace("_", "-")
        chain = [normalized, normalized.split("-", 1)[0], FALLBACK_LOCALE]
        return list(dict.fromkeys(chain))

    def get(self, key: str) -> str:
        for locale in self._candidates():
            table = self._tables.get(locale)
            if table and key in table:
                return table[key]
        logger.debug(f"Missing display string {key!r}")
        return key


class LogoStyle(str, Enum):
    TRANSLATE_STANDARD = "translate-standard"
    SUGGEST_STANDARD = "suggest-standard"


class ImageProvider(Protocol):
    def load(self, style: LogoStyle) -> bytes:
        ...


class PackageImages:
    """Logo images shipped inside the package."""

    FILES = {
        LogoStyle.TRANSLATE_STANDARD: "translate_logo.png",
        LogoStyle.SUGGEST_STANDARD: "suggest_logo.png",
    }

    def load(self, style: LogoStyle) -> bytes:
        filename = self.FILES.get(style)
        if filename is None:
            raise UnsupportedLogoStyle(str(style))
        return (files(__package__) / "images" / filename).read_bytes()


def coerce_logo_style(style: LogoStyle | str) -> LogoStyle:
    try:
        return LogoStyle(style)
    except ValueError as exc:
        raise UnsupportedLogoStyle(f"Unsupported logo style: {style!r}") from exc
