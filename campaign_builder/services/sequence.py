from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from campaign_builder.config import settings
from campaign_builder.schemas import (
    MAX_GAP_DAYS,
    MAX_SEQUENCE_STEPS,
    MIN_GAP_DAYS,
    MIN_SEQUENCE_STEPS,
    SequenceSettings,
    TimelineStep,
)
from campaign_builder.vocabulary import SEND_DAYS, assert_token

logger = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def clamp_step_count(value: int) -> int:
    return max(MIN_SEQUENCE_STEPS, min(MAX_SEQUENCE_STEPS, int(value)))


def clamp_gap_days(value: int) -> int:
    return max(MIN_GAP_DAYS, min(MAX_GAP_DAYS, int(value)))


def resize_gap_days(gap_days: list[int], step_count: int, *, default_gap: int | None = None) -> list[int]:
    """Return ``gap_days`` reshaped to hold exactly ``step_count - 1`` entries.

    Existing entries keep their values; shrinking drops from the tail and
    growing appends ``default_gap`` (``SEQUENCE_DEFAULT_GAP_DAYS`` when unset).
    """
    target = max(step_count - 1, 0)
    fill = settings.SEQUENCE_DEFAULT_GAP_DAYS if default_gap is None else default_gap
    if target <= len(gap_days):
        return list(gap_days[:target])
    return list(gap_days) + [fill] * (target - len(gap_days))


def step_offsets(gap_days: list[int]) -> list[int]:
    offsets = [0]
    for gap in gap_days:
        offsets.append(offsets[-1] + gap)
    return offsets


def total_duration_days(sequence: SequenceSettings) -> int:
    return sum(sequence.gap_days)


def build_timeline(sequence: SequenceSettings, *, approved_at: datetime | None = None) -> list[TimelineStep]:
    """Derive the per-step send timeline.

    Offsets are in days from ``scheduled_start_at`` or, when that is unset,
    from ``approved_at``. With neither anchor, ``send_at`` stays ``None`` and
    only the relative offsets are meaningful.
    """
    anchor = sequence.scheduled_start_at or approved_at
    offsets = step_offsets(sequence.gap_days[: max(sequence.step_count - 1, 0)])
    return [
        TimelineStep(
            step_number=index + 1,
            offset_days=offset,
            send_at=anchor + timedelta(days=offset) if anchor is not None else None,
        )
        for index, offset in enumerate(offsets)
    ]


def parse_clock(value: str) -> tuple[int, int]:
    match = _CLOCK_RE.fullmatch((value or "").strip())
    if not match:
        raise ValueError(f"Send window time '{value}' must use HH:MM (24h)")
    return int(match.group(1)), int(match.group(2))


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo((name or "").strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown send timezone '{name}'") from exc


def send_window_problems(sequence: SequenceSettings) -> list[str]:
    problems: list[str] = []
    try:
        start = parse_clock(sequence.send_window_start)
        end = parse_clock(sequence.send_window_end)
    except ValueError as exc:
        problems.append(str(exc))
    else:
        if start >= end:
            problems.append("Send window start must be earlier than its end")
    try:
        resolve_timezone(sequence.send_timezone)
    except ValueError as exc:
        problems.append(str(exc))
    if not sequence.send_days:
        problems.append("At least one send day is required")
    elif any(day not in SEND_DAYS for day in sequence.send_days):
        problems.append(f"Send days must be drawn from {', '.join(SEND_DAYS)}")
    return problems


def sequence_problems(sequence: SequenceSettings) -> list[str]:
    problems: list[str] = []
    if not MIN_SEQUENCE_STEPS <= sequence.step_count <= MAX_SEQUENCE_STEPS:
        problems.append(f"Step count must be between {MIN_SEQUENCE_STEPS} and {MAX_SEQUENCE_STEPS}")
    if len(sequence.gap_days) != sequence.step_count - 1:
        problems.append("Each step after the first needs exactly one gap")
    if any(gap < MIN_GAP_DAYS or gap > MAX_GAP_DAYS for gap in sequence.gap_days):
        problems.append(f"Gaps must be between {MIN_GAP_DAYS} and {MAX_GAP_DAYS} days")
    problems.extend(send_window_problems(sequence))
    return problems


def is_within_send_window(sequence: SequenceSettings, at: datetime) -> bool:
    """Whether ``at`` falls on a send day, inside the inclusive HH:MM window.

    ``at`` must be timezone-aware; it is converted into the campaign timezone
    before the weekday and clock checks.
    """
    if at.tzinfo is None:
        raise ValueError("Send window checks need a timezone-aware datetime")
    local = at.astimezone(resolve_timezone(sequence.send_timezone))
    weekday = SEND_DAYS[local.weekday()]
    if weekday not in sequence.send_days:
        return False
    start_hour, start_minute = parse_clock(sequence.send_window_start)
    end_hour, end_minute = parse_clock(sequence.send_window_end)
    current = local.hour * 60 + local.minute
    return start_hour * 60 + start_minute <= current <= end_hour * 60 + end_minute


class SequenceEditor:
    """Editing boundary for ``SequenceSettings``.

    Every mutation keeps ``len(gap_days) == step_count - 1`` and clamps
    numeric input into range rather than rejecting it.
    """

    def __init__(self, sequence: SequenceSettings, *, on_change: Callable[[], None] | None = None) -> None:
        self._sequence = sequence
        self._on_change = on_change

    @property
    def sequence(self) -> SequenceSettings:
        return self._sequence

    def set_step_count(self, step_count: int) -> None:
        new_count = clamp_step_count(step_count)
        if new_count != step_count:
            logger.info("Clamped step count %s to %s", step_count, new_count)
        self._sequence.gap_days = resize_gap_days(self._sequence.gap_days, new_count)
        self._sequence.step_count = new_count
        self._changed()

    def set_gap_days(self, index: int, days: int) -> None:
        if index < 0 or index >= len(self._sequence.gap_days):
            raise IndexError(f"No gap at position {index} for a {self._sequence.step_count}-step sequence")
        self._sequence.gap_days[index] = clamp_gap_days(days)
        self._changed()

    def set_scheduled_start(self, start_at: datetime | None) -> None:
        if start_at is not None and start_at.tzinfo is None:
            start_at = start_at.replace(tzinfo=resolve_timezone(self._sequence.send_timezone))
        self._sequence.scheduled_start_at = start_at
        self._changed()

    def set_send_window(self, *, start: str, end: str) -> None:
        start_clock = parse_clock(start)
        end_clock = parse_clock(end)
        if start_clock >= end_clock:
            raise ValueError("Send window start must be earlier than its end")
        self._sequence.send_window_start = f"{start_clock[0]:02d}:{start_clock[1]:02d}"
        self._sequence.send_window_end = f"{end_clock[0]:02d}:{end_clock[1]:02d}"
        self._changed()

    def set_send_timezone(self, timezone_name: str) -> None:
        resolve_timezone(timezone_name)
        self._sequence.send_timezone = timezone_name.strip()
        self._changed()

    def toggle_send_day(self, day: str) -> None:
        token = assert_token("send_day", day.lower())
        days = self._sequence.send_days
        if token in days:
            days.remove(token)
        else:
            days.append(token)
            days.sort(key=SEND_DAYS.index)
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
