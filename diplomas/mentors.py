"""
Mentor summaries (grouping, filtering, sorting).

Given a list of diplomas, build one MentorSummary per supervising mentor:
- diplomas without a mentor are skipped
- mentors are ordered by number of diplomas, most first
"""

from __future__ import annotations

from statistics import median
from typing import Dict, List

from diplomas.model import Diploma, MentorStats, MentorSummary


# Workflow stages of the portal, in order. Matched as lowercase substrings
# of the free-text status; the first keyword in this list that matches wins.
STATUS_STAGES: List[tuple[str, int]] = [
    ("пријава", 1),
    ("прифаќање", 2),
    ("валидирање од службата", 3),
    ("одобрение од продекан", 4),
    ("одобрение за оценка", 5),
    ("забелешки", 6),
    ("валидирање на услови", 7),
    ("одбран", 8),
    ("архив", 9),
]

MAX_STAGE = 9
SORT_FIELDS = ("total", "mentor")


def status_stage(status: str) -> int:
    """
    Stage number 1..9 of a status text, 0 if unknown.
    """
    lower = (status or "").lower()
    for keyword, stage in STATUS_STAGES:
        if keyword in lower:
            return stage
    return 0


def status_weight(status: str) -> float:
    """
    Progress in [0.3, 1.0]; unknown statuses get the minimum 0.3.
    """
    return 0.3 + (status_stage(status) / MAX_STAGE) * 0.7


def average_progress(diplomas: List[Diploma]) -> float:
    """
    Mean status_weight of the given diplomas, 0.0 for none.
    """
    if not diplomas:
        return 0.0
    return sum(status_weight(d.status) for d in diplomas) / len(diplomas)


def aggregate_by_mentor(diplomas: List[Diploma]) -> List[MentorSummary]:
    by_mentor: Dict[str, MentorSummary] = {}

    for d in diplomas:
        mentor = d.mentor.strip()
        if not mentor:
            continue
        if mentor not in by_mentor:
            by_mentor[mentor] = MentorSummary(mentor=mentor)
        by_mentor[mentor].diplomas.append(d)

    # sorted() is stable: equal counts keep first-seen order
    return sorted(by_mentor.values(), key=lambda s: s.total_diplomas, reverse=True)


def mentor_stats(diplomas: List[Diploma]) -> MentorStats:
    """
    Number of mentors and diplomas, average and median diplomas per mentor.

    total_diplomas counts every diploma, including those without a mentor.
    Average and median are 0 when there are no mentors.
    """
    counts = [s.total_diplomas for s in aggregate_by_mentor(diplomas)]
    if not counts:
        return MentorStats(total_mentors=0, total_diplomas=len(diplomas), average=0.0, median=0.0)

    return MentorStats(
        total_mentors=len(counts),
        total_diplomas=len(diplomas),
        average=len(diplomas) / len(counts),
        median=float(median(counts)),
    )


def filter_summaries(summaries: List[MentorSummary], query: str) -> List[MentorSummary]:
    """
    Case-insensitive search over mentor name, student and title.

    A matching mentor shows all diplomas; otherwise only matching diplomas
    are shown. Mentors left with nothing are dropped. The full diploma list
    stays on every summary, so totals survive the search.
    """
    q = (query or "").strip().lower()
    if not q:
        return list(summaries)

    out: List[MentorSummary] = []
    for s in summaries:
        if q in s.mentor.lower():
            out.append(MentorSummary(mentor=s.mentor, diplomas=s.diplomas, filtered_diplomas=list(s.diplomas)))
            continue

        matching = [d for d in s.diplomas if q in d.student.lower() or q in d.title.lower()]
        if matching:
            out.append(MentorSummary(mentor=s.mentor, diplomas=s.diplomas, filtered_diplomas=matching))

    return out


def sort_summaries(
    summaries: List[MentorSummary],
    field: str = "total",
    descending: bool = True,
) -> List[MentorSummary]:
    """
    Sort by mentor name or by number of shown (i.e. matching) diplomas.
    """
    if field not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field!r} (expected one of {SORT_FIELDS})")

    if field == "mentor":
        return sorted(summaries, key=lambda s: s.mentor.lower(), reverse=descending)
    return sorted(summaries, key=lambda s: len(s.shown_diplomas), reverse=descending)
