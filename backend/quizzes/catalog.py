"""Series catalog rules: title categories, ordering and per-viewer partitioning.

Everything here is pure. Callers hand in model instances (or any object
exposing ``title``, ``grade``, ``created_at`` and friends) and get plain
values back, so the rules can be tested without a database.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

SERIES_CHOICES = ("IOE", "CEE", "LIVE")
CATEGORY_FILTERS = ("all", "set", "capsule")

# Ordered by priority. The first family that matches decides the category.
_TITLE_FAMILIES = (
    (
        "set",
        "Set",
        (
            re.compile(r"set\s*[-_]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"(\d+)\s*set", re.IGNORECASE),
            re.compile(r"\bs\s*[-_]?\s*(\d+)", re.IGNORECASE),
        ),
    ),
    (
        "capsule",
        "Capsule",
        (
            re.compile(r"capsule\s*[-_]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"\bcap\s*[-_]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"(\d+)\s*capsule", re.IGNORECASE),
            re.compile(r"(\d+)\s*cap", re.IGNORECASE),
            re.compile(r"\bc\s*[-_]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"daily\s*capsule\s*[-_]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"daily\s*dose\s*[-_]?\s*(\d+)", re.IGNORECASE),
        ),
    ),
)
_BARE_NUMBER = re.compile(r"(\d+)")
_EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


@dataclass(frozen=True)
class TitleInfo:
    display_title: str
    category: str
    number: int


def parse_title(title) -> TitleInfo:
    """Classify a free-text quiz title.

    ``"set-7"``, ``"7 set"`` and ``"s-7"`` all become ``Set-7``; capsule and
    daily-dose shapes become ``Capsule-N``. Titles matching neither keep
    their text, are categorised ``other`` and sort by the first bare integer
    they contain (0 when there is none).
    """
    text = title or ""
    for category, label, patterns in _TITLE_FAMILIES:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                number = int(match.group(1))
                return TitleInfo(f"{label}-{number}", category, number)

    match = _BARE_NUMBER.search(text)
    number = int(match.group(1)) if match else 0
    return TitleInfo(text, "other", number)


def _created_key(quiz):
    created_at = getattr(quiz, "created_at", None)
    if created_at is None:
        return _EPOCH
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=dt_timezone.utc)
    return created_at


def sort_quizzes(quizzes):
    """Ascending by title number, oldest first when numbers tie.

    Untitled or unnumbered quizzes share key 0 and therefore interleave by
    creation time with anything else that parsed to 0.
    """
    return sorted(quizzes, key=lambda quiz: (parse_title(quiz.title).number, _created_key(quiz)))


def filter_by_category(quizzes, category):
    if category in (None, "", "all"):
        return list(quizzes)
    filtered = [quiz for quiz in quizzes if parse_title(quiz.title).category == category]
    return sort_quizzes(filtered)


def count_by_category(quizzes):
    counts = {"set": 0, "capsule": 0, "other": 0}
    for quiz in quizzes:
        counts[parse_title(quiz.title).category] += 1
    return counts


def _matches_exam_type(quiz, exam_type):
    quiz_exam_type = getattr(quiz, "exam_type", "") or getattr(quiz, "subject", "") or quiz.grade or ""
    quiz_grade = quiz.grade or ""
    if quiz_exam_type == exam_type or quiz_grade == exam_type:
        return True
    return exam_type in quiz_exam_type.upper() or exam_type in quiz_grade.upper()


def partition_series(quizzes, series, exam_type=None):
    """Return the quizzes belonging to ``series`` for a viewer, sorted.

    IOE and CEE select by exact grade. LIVE keeps every live quiz unless the
    viewer declared an IOE/CEE preference, in which case only quizzes whose
    exam type, subject or grade names that preference survive.
    """
    series = (series or "").upper()
    if series == "LIVE":
        selected = [quiz for quiz in quizzes if getattr(quiz, "is_live", False)]
        preference = (exam_type or "").upper()
        if preference in {"IOE", "CEE"}:
            selected = [quiz for quiz in selected if _matches_exam_type(quiz, preference)]
    else:
        selected = [
            quiz for quiz in quizzes if quiz.grade == series and not getattr(quiz, "is_live", False)
        ]
    return sort_quizzes(selected)


def series_price(series, prices):
    return int(prices.get((series or "").upper(), 0))
