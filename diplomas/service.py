"""
Login + fetch + parse in one call. Used by the HTTP API and the CLI.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from diplomas.auth import fetch_protected_html
from diplomas.config import Settings
from diplomas.errors import AuthenticationError
from diplomas.model import Diploma
from diplomas.parse import is_authenticated, parse_diplomas


logger = logging.getLogger(__name__)


def fetch_diplomas(username: str, password: str, settings: Optional[Settings] = None) -> List[Diploma]:
    """
    Return all diplomas visible to the given account.

    Raises AuthenticationError if the portal served the public page,
    FetchError if any HTTP step failed.
    """
    settings = settings or Settings()

    html = fetch_protected_html(username, password, settings)
    if not is_authenticated(html, settings.labels):
        raise AuthenticationError("Portal returned the public diploma list")

    diplomas = parse_diplomas(html, settings.labels)
    logger.info("Parsed %d diplomas", len(diplomas))
    return diplomas
