from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_datetime

STATUS_INVALID = "invalid"
STATUS_UPCOMING = "upcoming"
STATUS_ACTIVE = "active"
STATUS_ENDED = "ended"

STATUS_LABELS = {
    STATUS_ACTIVE: "LIVE",
    STATUS_UPCOMING: "UPCOMING",
    STATUS_ENDED: "ENDED",
    STATUS_INVALID: "INVALID",
}

START_BUTTON_LABELS = {
    STATUS_ACTIVE: "Start Live Quiz",
    STATUS_UPCOMING: "Quiz Not Started",
    STATUS_ENDED: "Quiz Ended",
    STATUS_INVALID: "Quiz Unavailable",
}


def coerce_datetime(value):
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value).strip())
        if parsed is None:
            return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())
    return parsed


def quiz_time_status(start_time, end_time, now=None) -> str:
    start = coerce_datetime(start_time)
    end = coerce_datetime(end_time)
    if start is None or end is None:
        return STATUS_INVALID

    now = now or timezone.now()
    if now < start:
        return STATUS_UPCOMING
    if now <= end:
        return STATUS_ACTIVE
    return STATUS_ENDED


def _total_seconds(value) -> int:
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    else:
        seconds = float(value or 0)
    # Floor to the whole second; negative spans count as elapsed.
    return max(0, int(seconds // 1))


def format_countdown(remaining) -> str:
    total_seconds = _total_seconds(remaining)
    if total_seconds <= 0:
        return "00:00:00"
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def time_remaining_label(target_time, now=None) -> str:
    target = coerce_datetime(target_time)
    if target is None:
        return ""
    now = now or timezone.now()
    total_seconds = _total_seconds(target - now)
    if total_seconds <= 0:
        return ""

    days, rest = divmod(total_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_window_time(value) -> str:
    moment = coerce_datetime(value)
    if moment is None:
        return "Not specified"
    local = timezone.localtime(moment)
    return local.strftime("%b %d, %Y, %I:%M %p")


def describe_window(quiz, now=None) -> dict:
    """Live-window state for a listing row, measured against server time."""
    now = now or timezone.now()
    status = quiz_time_status(quiz.start_time, quiz.end_time, now)
    starts_in = ends_in = 0
    if status == STATUS_UPCOMING:
        starts_in = _total_seconds(coerce_datetime(quiz.start_time) - now)
    elif status == STATUS_ACTIVE:
        ends_in = _total_seconds(coerce_datetime(quiz.end_time) - now)

    return {
        "status": status,
        "label": STATUS_LABELS[status],
        "button_label": START_BUTTON_LABELS[status],
        "can_start": status == STATUS_ACTIVE,
        "starts_in_seconds": starts_in,
        "ends_in_seconds": ends_in,
        "starts_in": format_countdown(starts_in),
        "ends_in": format_countdown(ends_in),
        "starts_in_label": time_remaining_label(quiz.start_time, now) if status == STATUS_UPCOMING else "",
        "ends_in_label": time_remaining_label(quiz.end_time, now) if status == STATUS_ACTIVE else "",
        "start_time_display": format_window_time(quiz.start_time),
        "end_time_display": format_window_time(quiz.end_time),
    }


def start_block_message(quiz, now=None):
    """User-facing reason a live quiz cannot start right now, or None."""
    status = quiz_time_status(quiz.start_time, quiz.end_time, now)
    if status == STATUS_UPCOMING:
        return f"This live quiz hasn't started yet. It will begin at {format_window_time(quiz.start_time)}"
    if status == STATUS_ENDED:
        return f"This live quiz has ended. It was available until {format_window_time(quiz.end_time)}"
    if status == STATUS_INVALID:
        return "This live quiz has invalid timing configuration."
    return None


def submit_block_message(quiz, now=None):
    """Like :func:`start_block_message`, except that an attempt begun before the
    window closed may still be handed in within the quiz time limit."""
    now = now or timezone.now()
    if quiz_time_status(quiz.start_time, quiz.end_time, now) == STATUS_ENDED:
        deadline = coerce_datetime(quiz.end_time) + timedelta(minutes=quiz.time_limit or 0)
        if now <= deadline:
            return None
    return start_block_message(quiz, now)
