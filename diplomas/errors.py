"""
Exceptions raised by the diplomas package.

The HTTP layer and the CLI map these to status codes / exit codes:
- AuthenticationError -> 401 / exit 2
- everything else     -> 500 / exit 1
"""

from __future__ import annotations


class DiplomasError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(DiplomasError):
    """Required configuration (credentials) is missing."""


class FetchError(DiplomasError):
    """An HTTP step of the login / scrape flow failed."""


class AuthenticationError(DiplomasError):
    """The portal served the public page instead of the logged-in one."""
