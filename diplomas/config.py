"""
Configuration for the portal scraper.

All upstream URLs and all localized label strings live here, so a change in
the portal's markup (or a test against a recorded page) only needs a new
Labels / Settings instance instead of edits all over the code.

Credentials are NOT part of Settings. They are read from the environment
(CAS_USERNAME / CAS_PASSWORD, optionally from a .env file) at request time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from diplomas.errors import ConfigError


# ---------------------------------------------------------------------------
# Defaults (FINKI thesis portal)
# ---------------------------------------------------------------------------

CAS_LOGIN_URL = "https://cas.finki.ukim.mk/cas/login"
SERVICE_URL = "http://diplomski.finki.ukim.mk/Account/LoginCAS"
LIST_URL = "https://diplomski.finki.ukim.mk/DiplomaList"


@dataclass(frozen=True)
class Labels:
    """Label texts and selectors of the diploma list page."""

    # Only shown on the logged-in page
    submission_date: str = "Датум на пријавување"
    # Only shown on the public page
    defense_date: str = "Датум на одбрана"

    student: str = "Студент"
    mentor: str = "Ментор"
    member1: str = "Член 1"
    member2: str = "Член 2"
    status: str = "Статус"
    description: str = "Краток опис"
    file: str = "Датотека"

    # href used by the portal for disabled downloads
    inert_link: str = "javascript:void(0)"

    panel_selector: str = "div.panel"
    heading_selector: str = ".panel-heading"
    # html.parser does not invent <tbody>, so match rows with or without it
    row_selector: str = "table tr"


@dataclass(frozen=True)
class Settings:
    """Upstream endpoints and HTTP behaviour."""

    cas_login_url: str = CAS_LOGIN_URL
    service_url: str = SERVICE_URL
    list_url: str = LIST_URL

    # Seconds per single HTTP request
    timeout: float = 30.0

    # Upper bound for the manual redirect loop after the login POST
    max_redirects: int = 20

    labels: Labels = field(default_factory=Labels)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings, letting DIPLOMAS_* environment variables override the defaults.
        """
        load_dotenv()

        timeout_raw = os.getenv("DIPLOMAS_TIMEOUT", "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else cls.timeout
        except ValueError as exc:
            raise ConfigError(f"Invalid DIPLOMAS_TIMEOUT: {timeout_raw!r}") from exc

        return cls(
            cas_login_url=os.getenv("DIPLOMAS_CAS_LOGIN_URL") or CAS_LOGIN_URL,
            service_url=os.getenv("DIPLOMAS_SERVICE_URL") or SERVICE_URL,
            list_url=os.getenv("DIPLOMAS_LIST_URL") or LIST_URL,
            timeout=timeout,
        )


def load_credentials() -> tuple[str, str]:
    """
    Return (username, password) from CAS_USERNAME / CAS_PASSWORD.

    Raises ConfigError if either one is missing or empty.
    """
    load_dotenv()

    username = (os.getenv("CAS_USERNAME") or "").strip()
    password = os.getenv("CAS_PASSWORD") or ""

    if not username or not password:
        raise ConfigError("CAS_USERNAME and CAS_PASSWORD environment variables must be set")

    return username, password
