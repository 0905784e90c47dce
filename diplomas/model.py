"""
Central data model definitions used across the project.

Diploma is the unit the scraper produces and the API returns.
The JSON wire format uses camelCase keys (dateOfSubmission, fileUrl) because
that is what the dashboard consumes; the Python attributes stay snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Diploma:
    """
    One thesis entry (one panel on the portal's list page).

    There is no identifier: a record only exists positionally in one fetch.
    """

    title: str = ""
    student: str = ""
    mentor: str = ""
    member1: str = ""
    member2: str = ""
    date_of_submission: str = ""
    status: str = ""
    description: str = ""
    file_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "student": self.student,
            "mentor": self.mentor,
            "member1": self.member1,
            "member2": self.member2,
            "dateOfSubmission": self.date_of_submission,
            "status": self.status,
            "description": self.description,
            "fileUrl": self.file_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Diploma":
        """
        Inverse of to_dict(). Missing or null string fields become "".
        """

        def _s(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        file_url = data.get("fileUrl")
        return cls(
            title=_s("title"),
            student=_s("student"),
            mentor=_s("mentor"),
            member1=_s("member1"),
            member2=_s("member2"),
            date_of_submission=_s("dateOfSubmission"),
            status=_s("status"),
            description=_s("description"),
            file_url=str(file_url) if file_url else None,
        )
@dataclass
class MentorSummary:
    """
    All diplomas supervised by one mentor. Derived, never stored.

    filtered_diplomas is set by a search: the subset that matched.
    None means "no search", i.e. every diploma is shown.
    """

    mentor: str
    diplomas: List[Diploma] = field(default_factory=list)
    filtered_diplomas: Optional[List[Diploma]] = None

    @property
    def total_diplomas(self) -> int:
        return len(self.diplomas)

    @property
    def shown_diplomas(self) -> List[Diploma]:
        return self.diplomas if self.filtered_diplomas is None else self.filtered_diplomas

    @property
    def is_filtered(self) -> bool:
        return len(self.shown_diplomas) != self.total_diplomas

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mentor": self.mentor,
            "totalDiplomas": self.total_diplomas,
            "filteredDiplomas": len(self.shown_diplomas),
            "diplomas": [d.to_dict() for d in self.shown_diplomas],
        }


@dataclass
class MentorStats:
    """
    Overview numbers of the mentor page.
    """

    total_mentors: int
    total_diplomas: int
    average: float
    median: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMentors": self.total_mentors,
            "totalDiplomas": self.total_diplomas,
            "averagePerMentor": self.average,
            "medianPerMentor": self.median,
        }
