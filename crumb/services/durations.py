# crumb/services/durations.py
"""
Time expressions found in recipe text.

Instruction text is read with a small grammar:

    phrase    := QUANTITY UNIT
    connector := [","] ["and" | "&" | "+"]
    duration  := HOUR_PHRASE connector MINUTE_PHRASE | phrase

Phrases are tokenized left to right and an hour phrase absorbs the minute
phrase right after it when only a connector separates them, so
"1 hour and 15 minutes" is one value, not two.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .models import Duration

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

REASON_EMPTY = "empty"
REASON_ZERO = "zero"
REASON_INVALID = "invalid"

_PHRASE_RE = re.compile(
    r"(?<![\w.])(?P<qty>\d+(?:\.\d+)?)\s*(?P<unit>hours?|hrs?|minutes?|mins?)\b",
    re.IGNORECASE | re.ASCII,
)
_CONNECTOR_RE = re.compile(r"\s*,?\s*(?:(?:and|&|\+)\s*)?", re.IGNORECASE)

_EDIT_MINUTES_RE = re.compile(r"\d+", re.ASCII)
_EDIT_HOURS_MINUTES_RE = re.compile(r"(\d+):([0-5]\d)", re.ASCII)

_ISO8601_RE = re.compile(
    r"P(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True)
class _Phrase:
    seconds: float
    is_hours: bool
    start: int
    end: int


@dataclass(frozen=True)
class EditableDurationResult:
    ok: bool
    seconds: Optional[int] = None
    reason: Optional[str] = None


def _tokenize(text: str) -> list[_Phrase]:
    phrases: list[_Phrase] = []
    for match in _PHRASE_RE.finditer(text):
        quantity = float(match.group("qty"))
        is_hours = match.group("unit").lower().startswith("h")
        unit_seconds = SECONDS_PER_HOUR if is_hours else SECONDS_PER_MINUTE
        phrases.append(
            _Phrase(
                seconds=quantity * unit_seconds,
                is_hours=is_hours,
                start=match.start(),
                end=match.end(),
            )
        )
    return phrases


def _joins(text: str, left: _Phrase, right: _Phrase) -> bool:
    if not left.is_hours or right.is_hours:
        return False
    return _CONNECTOR_RE.fullmatch(text, left.end, right.start) is not None


def extract_durations_from_instruction(text: str) -> list[Duration]:
    """Return every duration written in ``text``, in reading order."""
    if not text:
        return []

    phrases = _tokenize(text)
    durations: list[Duration] = []
    index = 0
    while index < len(phrases):
        current = phrases[index]
        seconds = current.seconds
        end = current.end

        if index + 1 < len(phrases) and _joins(text, current, phrases[index + 1]):
            following = phrases[index + 1]
            seconds += following.seconds
            end = following.end
            index += 1
        index += 1

        whole = int(seconds + 0.5)
        if whole < 1:
            continue
        durations.append(
            Duration(seconds=whole, text=text[current.start:end], start=current.start, end=end)
        )
    return durations


def parse_editable_duration_to_seconds(value: Optional[str]) -> EditableDurationResult:
    """
    Parse a timer value typed by the user.

    A bare integer is minutes ("200" -> 12000s); "H:MM" is hours and minutes
    ("2:30" -> 9000s). Zero is rejected because a timer cannot be empty.
    """
    text = (value or "").strip()
    if not text:
        return EditableDurationResult(ok=False, reason=REASON_EMPTY)

    if _EDIT_MINUTES_RE.fullmatch(text):
        seconds = int(text) * SECONDS_PER_MINUTE
    else:
        match = _EDIT_HOURS_MINUTES_RE.fullmatch(text)
        if not match:
            return EditableDurationResult(ok=False, reason=REASON_INVALID)
        hours, minutes = int(match.group(1)), int(match.group(2))
        seconds = hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE

    if seconds == 0:
        return EditableDurationResult(ok=False, reason=REASON_ZERO)
    return EditableDurationResult(ok=True, seconds=seconds)


def format_editable_duration(seconds: int) -> str:
    """Render seconds the way the timer editor expects them back."""
    if seconds < 1:
        raise ValueError(f"Duration must be positive, got {seconds}")
    minutes = max(1, (seconds + SECONDS_PER_MINUTE // 2) // SECONDS_PER_MINUTE)
    if minutes < 60:
        return str(minutes)
    return f"{minutes // 60}:{minutes % 60:02d}"


def parse_iso8601_duration(value: object) -> Optional[int]:
    if not isinstance(value, str):
        return None
    match = _ISO8601_RE.fullmatch(value.strip())
    if not match:
        return None

    def part(name: str) -> float:
        raw = match.group(name)
        return float(raw) if raw else 0.0

    total = (
        part("days") * SECONDS_PER_DAY
        + part("hours") * SECONDS_PER_HOUR
        + part("minutes") * SECONDS_PER_MINUTE
        + part("seconds")
    )
    whole = int(total + 0.5)
    return whole or None


def parse_duration_text(text: Optional[str]) -> Optional[int]:
    """Total of the durations in a metadata field such as "1 hr 20 mins"."""
    if not text:
        return None
    total = sum(d.seconds for d in extract_durations_from_instruction(text))
    return total or None
