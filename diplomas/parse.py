"""
Parsing (HTML -> structured records).

- Decides whether a fetched list page is the logged-in variant
- Extracts one Diploma per panel on the page

Important rules:
- Parsing never raises on odd markup; missing rows give "" (or None for fileUrl)
- Fields are found by LABEL TEXT, not by position: the table rows have no ids
  or classes, the label in the first cell is the only stable anchor
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from diplomas.config import Labels
from diplomas.model import Diploma


# ---------------------------------------------------------------------------
# Authentication check
# ---------------------------------------------------------------------------


def is_authenticated(html: str, labels: Optional[Labels] = None) -> bool:
    """
    Heuristic: the portal returns 200 for both variants of the page.

    Logged in  -> rows carry the submission date label
    Public     -> rows carry the defense date label instead

    A page with neither label (no rows at all) counts as authenticated.
    """
    labels = labels or Labels()
    return labels.submission_date in html or labels.defense_date not in html


# ---------------------------------------------------------------------------
# Row scanner (label -> value)
# ---------------------------------------------------------------------------


def _cells(row: Tag) -> List[Tag]:
    return row.find_all("td", recursive=False)


def _find_row(rows: Sequence[Tag], label: str) -> Optional[Tag]:
    """
    First row whose first cell CONTAINS the label (substring match).
    """
    for row in rows:
        cells = _cells(row)
        if cells and label in cells[0].get_text():
            return row
    return None


def find_row_value(rows: Sequence[Tag], label: str) -> str:
    """
    Text of the <strong> in the second cell of the matching row, or "".
    """
    row = _find_row(rows, label)
    if row is None:
        return ""

    cells = _cells(row)
    if len(cells) < 2:
        return ""

    strong = cells[1].select_one("strong")
    return strong.get_text().strip() if strong else ""


def find_row_link(rows: Sequence[Tag], label: str, placeholder: str) -> Optional[str]:
    """
    href of the link in the second cell of the matching row.

    None if there is no link, the href is empty, or it is the placeholder
    the portal uses for disabled downloads.
    """
    row = _find_row(rows, label)
    if row is None:
        return None

    cells = _cells(row)
    if len(cells) < 2:
        return None

    anchor = cells[1].select_one("strong a")
    href = anchor.get("href") if anchor else None
    if not href or href == placeholder:
        return None
    return href


# ---------------------------------------------------------------------------
# Panel parsing
# ---------------------------------------------------------------------------


def parse_panel(panel: Tag, labels: Labels) -> Diploma:
    heading = panel.select_one(labels.heading_selector)
    title = heading.get_text().strip() if heading else ""

    rows = panel.select(labels.row_selector)

    return Diploma(
        title=title,
        student=find_row_value(rows, labels.student),
        mentor=find_row_value(rows, labels.mentor),
        member1=find_row_value(rows, labels.member1),
        member2=find_row_value(rows, labels.member2),
        date_of_submission=find_row_value(rows, labels.submission_date),
        status=find_row_value(rows, labels.status),
        description=find_row_value(rows, labels.description),
        file_url=find_row_link(rows, labels.file, labels.inert_link),
    )


def parse_diplomas(html: str, labels: Optional[Labels] = None) -> List[Diploma]:
    """
    One Diploma per panel, in document order. No panels -> [].
    """
    labels = labels or Labels()
    soup = BeautifulSoup(html, "html.parser")
    return [parse_panel(panel, labels) for panel in soup.select(labels.panel_selector)]


def parse_file(path: str | Path, labels: Optional[Labels] = None) -> List[Diploma]:
    """
    Parse a list page saved to disk (e.g. from the browser's "Save page as").
    """
    html = Path(path).read_text(encoding="utf-8")
    return parse_diplomas(html, labels)
