"""
Shared HTML snippets and fake HTTP responses for the tests.
"""

from __future__ import annotations

from typing import Iterable, Optional

import requests


def panel(
    title: str = "Thesis A",
    rows: Iterable[tuple[str, str]] = (),
    file_href: Optional[str] = None,
) -> str:
    """
    Build one portal panel. rows are (label, value); file_href adds a file row.
    """
    body = "".join(f"<tr><td>{label}:</td><td><strong>{value}</strong></td></tr>" for label, value in rows)
    if file_href is not None:
        body += f'<tr><td>Датотека</td><td><strong><a href="{file_href}">Преземи</a></strong></td></tr>'

    return (
        '<div class="panel panel-default">'
        f'<div class="panel-heading">\n  {title}\n</div>'
        f'<div class="panel-body"><table class="table"><tbody>{body}</tbody></table></div>'
        "</div>"
    )


def page(*panels: str) -> str:
    return "<html><body><div class='container'>" + "".join(panels) + "</div></body></html>"


FULL_ROWS = [
    ("Студент", "Ана Петровска"),
    ("Ментор", "Проф. Марковски"),
    ("Член 1", "Проф. Илиевска"),
    ("Член 2", "Доц. Стојанов"),
    ("Датум на пријавување", "12.03.2025"),
    ("Статус", "Одобрение од продекан"),
    ("Краток опис", "Систем за препорака"),
]


LOGIN_PAGE = """
<html><body>
<form id="fm1" method="post">
  <input type="text" name="username" />
  <input type="password" name="password" />
  <input type="hidden" name="execution" value="e1s1-token" />
  <input type="hidden" name="_eventId" value="submit" />
  <input type="hidden" value="nameless" />
  <input type="hidden" name="geolocation" />
</form>
</body></html>
"""


class _RawHeaders:
    """Mimics urllib3's header dict: keeps repeated Set-Cookie headers apart."""

    def __init__(self, set_cookies: Iterable[str]) -> None:
        self._set_cookies = list(set_cookies)

    def getlist(self, name: str) -> list[str]:
        return list(self._set_cookies) if name.lower() == "set-cookie" else []


class _Raw:
    def __init__(self, set_cookies: Iterable[str]) -> None:
        self.headers = _RawHeaders(set_cookies)


def make_response(
    status: int = 200,
    text: str = "",
    location: Optional[str] = None,
    set_cookies: Iterable[str] = (),
    url: str = "https://example.test/",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = text.encode("utf-8")
    resp.encoding = "utf-8"
    resp.url = url
    if location is not None:
        resp.headers["Location"] = location
    resp.raw = _Raw(set_cookies)
    return resp
