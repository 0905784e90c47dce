"""
CAS login + fetch of the protected diploma list.

Flow (one call = one independent login):

    GET  <cas>/login?service=<service>      -> hidden form fields + cookies
    POST <cas>/login?service=<service>      -> credentials, redirect to service
    GET  Location, GET Location, ...        -> followed by hand, cookies merged per hop
    GET  <list url>                         -> protected HTML (redirects followed by hand too)

All redirects are followed manually (allow_redirects=False) so the
Set-Cookie headers of every intermediate hop end up in our cookie list.
Cookies are kept as plain "name=value" strings: no jar, no domain/path logic,
nothing survives the call.

Whether the login actually worked is NOT decided here. The portal answers
200 either way; see diplomas.parse.is_authenticated().
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple
from urllib.parse import urlencode, urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from diplomas.config import Settings
from diplomas.errors import FetchError


logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
SUBMIT_VALUE = "LOGIN"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_login_url(settings: Settings) -> str:
    """
    CAS login URL with the service URL as (encoded) 'service' parameter.
    """
    return f"{settings.cas_login_url}?{urlencode({'service': settings.service_url})}"


def _set_cookie_headers(response: requests.Response) -> List[str]:
    # response.headers joins repeated Set-Cookie headers with ", ", which
    # breaks on cookie expiry dates. The raw urllib3 headers keep them apart.
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return list(raw_headers.getlist("Set-Cookie"))

    value = response.headers.get("Set-Cookie")
    return [value] if value else []


def collect_cookies(response: requests.Response, cookies: List[str]) -> List[str]:
    """
    Return a new list: existing cookies + every 'name=value' set by the response.

    Cookie attributes (Path, Domain, Expires, ...) are dropped.
    Duplicates are not merged; later entries simply come later.
    """
    out = list(cookies)
    for header in _set_cookie_headers(response):
        pair = header.split(";", 1)[0].strip()
        if pair:
            out.append(pair)
    return out


def cookie_header(cookies: List[str]) -> str:
    return "; ".join(cookies)


def parse_hidden_inputs(html: str) -> List[Tuple[str, str]]:
    """
    Extract (name, value) of every hidden <input> in document order.

    CAS puts a one-time 'execution' token in there, so the login form
    has to be replayed instead of being built by hand.
    """
    soup = BeautifulSoup(html, "html.parser")

    fields: List[Tuple[str, str]] = []
    for el in soup.select('input[type="hidden"]'):
        name = el.get("name")
        if not name:
            continue
        fields.append((name, el.get("value") or ""))

    return fields


def _without_query(url: str) -> str:
    # Service tickets travel in the query string; keep them out of the logs.
    return urlsplit(url)._replace(query="", fragment="").geturl()


def _request(
    method: str,
    url: str,
    cookies: List[str],
    settings: Settings,
    data: Optional[List[Tuple[str, str]]] = None,
) -> requests.Response:
    headers = {}
    if cookies:
        headers["Cookie"] = cookie_header(cookies)
    if data is not None:
        headers["Content-Type"] = FORM_CONTENT_TYPE

    try:
        if method == "POST":
            return requests.post(
                url,
                data=data,
                headers=headers,
                allow_redirects=False,
                timeout=settings.timeout,
            )
        return requests.get(url, headers=headers, allow_redirects=False, timeout=settings.timeout)
    except requests.RequestException as exc:
        raise FetchError(f"{method} {_without_query(url)} failed: {exc}") from exc


def _ensure_ok(response: requests.Response, url: str) -> None:
    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise FetchError(f"Unexpected status {response.status_code} from {_without_query(url)}") from exc


def follow_redirects(
    response: requests.Response,
    start_url: str,
    cookies: List[str],
    settings: Settings,
) -> Tuple[requests.Response, List[str], str]:
    """
    Follow Location headers one by one, merging cookies after every hop.

    Relative locations are resolved against the URL of the previous request.
    Returns (final response, cookies, last_url). Stops at the first response
    without Location.
    """
    last_url = start_url
    hops = 0

    location = response.headers.get("Location")
    while location:
        if hops >= settings.max_redirects:
            raise FetchError(f"Too many redirects (>{settings.max_redirects}) from {_without_query(start_url)}")

        url = urljoin(last_url, location)
        logger.info("Redirect %d -> %s", hops + 1, _without_query(url))

        response = _request("GET", url, cookies, settings)
        cookies = collect_cookies(response, cookies)

        last_url = url
        location = response.headers.get("Location")
        hops += 1

    return response, cookies, last_url


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def fetch_protected_html(username: str, password: str, settings: Optional[Settings] = None) -> str:
    """
    Log in through CAS and return the HTML of the protected list page.

    Raises FetchError on transport errors, on an error status of the login
    page or the list page, and on an endless redirect chain.
    """
    settings = settings or Settings()
    login_url = build_login_url(settings)
    cookies: List[str] = []

    # Step 1: login page (cookies + hidden fields)
    login_page = _request("GET", login_url, cookies, settings)
    _ensure_ok(login_page, login_url)
    cookies = collect_cookies(login_page, cookies)
    logger.info("Fetched CAS login page (%d cookies)", len(cookies))

    # Step 2: post credentials
    form = parse_hidden_inputs(login_page.text)
    form.append(("username", username))
    form.append(("password", password))
    form.append(("submit", SUBMIT_VALUE))

    # Not status-checked: CAS answers 401 for wrong credentials and the
    # authentication check on the final page handles that case.
    post_response = _request("POST", login_url, cookies, settings, data=form)
    cookies = collect_cookies(post_response, cookies)
    logger.info("Posted credentials (status %d)", post_response.status_code)

    # Step 3: redirect chain back to the service
    _, cookies, _ = follow_redirects(post_response, login_url, cookies, settings)
    logger.debug("Session cookies: %s", [c.split("=", 1)[0] for c in cookies])

    # Step 4: protected page. Redirects of the list page go through the same
    # loop so every hop still carries the session cookies.
    list_response = _request("GET", settings.list_url, cookies, settings)
    list_response, cookies, list_url = follow_redirects(list_response, settings.list_url, cookies, settings)
    _ensure_ok(list_response, list_url)
    logger.info("Fetched diploma list (%d bytes)", len(list_response.content or b""))

    return list_response.text
