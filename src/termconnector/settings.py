from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from xml.etree import ElementTree as ET

from dotenv import load_dotenv

from .errors import ProviderMisconfigured

load_dotenv()

DEFAULT_BASE_URL = "https://www.tausdata.org"
SUPPORTED_AUTH_SCHEMES = ("Basic", "Digest")


@dataclass(slots=True)
class Settings:
    base_url: str
    account_file: Path
    request_timeout: float
    ui_locale: str
    log_level: str


@dataclass(slots=True, frozen=True)
class AccountDescriptor:
    """Which credential entry to use and how to present it to the repository."""

    url: str
    auth_scheme: str

    @classmethod
    def from_xml(cls, path: str | Path) -> "AccountDescriptor":
        """
        Load ``<Account><User Url="..." Type="Basic"/></Account>``.

        Raises:
            ProviderMisconfigured: If the file is missing, unparsable or incomplete.
        """
        path = Path(path)
        try:
            root = ET.parse(path).getroot()
        except FileNotFoundError as exc:
            raise ProviderMisconfigured(f"Account descriptor not found: {path}") from exc
        except ET.ParseError as exc:
            raise ProviderMisconfigured(f"Account descriptor is not valid XML: {path}") from exc

        user = root.find("User") if root.tag == "Account" else None
        if user is None:
            raise ProviderMisconfigured(f"Account descriptor must contain <Account><User/></Account>: {path}")
        url = (user.get("Url") or "").strip()
        scheme = (user.get("Type") or "").strip()
        if not url or not scheme:
            raise ProviderMisconfigured(f"Account descriptor requires Url and Type attributes: {path}")
        return cls(url=url, auth_scheme=normalize_scheme(scheme))


def normalize_scheme(scheme: str) -> str:
    for known in SUPPORTED_AUTH_SCHEMES:
        if scheme.strip().lower() == known.lower():
            return known
    raise ProviderMisconfigured(f"Unsupported authentication scheme: {scheme!r}")


def _parse_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        base_url=os.getenv("TERMCONNECTOR_BASE_URL", DEFAULT_BASE_URL).strip().rstrip("/"),
        account_file=Path(os.getenv("TERMCONNECTOR_ACCOUNT_FILE", "account.xml")).expanduser(),
        request_timeout=_parse_float(os.getenv("TERMCONNECTOR_TIMEOUT"), 10.0),
        ui_locale=os.getenv("TERMCONNECTOR_UI_LOCALE", "en"),
        log_level=os.getenv("TERMCONNECTOR_LOG_LEVEL", "INFO").upper(),
    )
