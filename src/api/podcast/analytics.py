"""
Episode analytics - duration formatting, publishing cadence and aggregate
statistics derived from upstream episode records.

Every function here is pure and total: malformed input degrades to defaults
(unparseable timestamps are skipped, missing durations ignored) and nothing
is raised back to the caller.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from api.podcast.models import EpisodeAnalytics, NormalizedEpisode, RawEpisode, coerce_number

SECONDS_PER_DAY = 24 * 60 * 60

# Publishing frequency labels
DAILY = "daily"
MULTIPLE_PER_WEEK = "multiple times per week"
TWO_TO_THREE_PER_WEEK = "2-3 times per week"
WEEKLY = "weekly"
BIWEEKLY = "biweekly"
MONTHLY = "monthly"
IRREGULAR = "irregular"
UNKNOWN = "unknown"

# Inclusive upper bounds in days. None marks the several-per-week bucket,
# whose wording is chosen by the caller.
CADENCE_BUCKETS: tuple[tuple[float, str | None], ...] = (
    (1.5, DAILY),
    (4.0, None),
    (9.0, WEEKLY),
    (18.0, BIWEEKLY),
    (35.0, MONTHLY),
)

DETAIL_LOOKBACK = 10
CATALOG_LOOKBACK = 20

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%B %d, %Y",
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


# ---------------------------
# Durations
# ---------------------------


def format_duration(ms: Any) -> str:
    """
    Format a millisecond duration as H:MM:SS, or M:SS under an hour.

    Missing, non-numeric and non-positive durations format as "0:00".

    >>> format_duration(65000)
    '1:05'
    >>> format_duration(3725000)
    '1:02:05'
    """
    total_ms = coerce_number(ms)
    if total_ms is None or total_ms <= 0:
        return "0:00"

    total_seconds = math.floor(total_ms / 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


# ---------------------------
# Timestamps
# ---------------------------


def _parse_timestamp_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an upstream release timestamp into an aware UTC datetime.

    Accepts ISO-8601 (including a trailing Z), RFC 2822 and a few common
    date-only formats. Naive values are taken as UTC. Returns None for
    anything unparseable.
    """
    if isinstance(value, datetime):
        parsed: datetime | None = value
    elif isinstance(value, str) and value.strip():
        parsed = _parse_timestamp_text(value.strip())
    else:
        return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except (OverflowError, ValueError):
        return None


def format_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-01-15T08:00:00.000Z."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sorted_timestamps(values: Iterable[Any]) -> list[datetime]:
    """Parse timestamps, drop the invalid ones and order newest first."""
    moments = [moment for moment in (parse_timestamp(v) for v in values) if moment is not None]
    moments.sort(reverse=True)
    return moments


# ---------------------------
# Publishing frequency
# ---------------------------


@dataclass(frozen=True)
class FrequencyEstimate:
    average_days_between: float | None
    label: str


def classify_frequency(
    average_days: float | None, several_per_week_label: str = MULTIPLE_PER_WEEK
) -> str:
    """Map an average gap in days onto a coarse publishing-cadence label."""
    if not average_days:
        return UNKNOWN
    for upper_bound, label in CADENCE_BUCKETS:
        if average_days <= upper_bound:
            return label or several_per_week_label
    return IRREGULAR


def average_interval_days(moments: Sequence[datetime], lookback: int) -> float | None:
    """
    Average gap in days between consecutive moments (newest first), using at
    most `lookback` pairs so the figure reflects recent cadence.
    """
    if len(moments) < 2:
        return None
    pairs = min(len(moments) - 1, max(lookback, 1))
    gaps = [
        (moments[i] - moments[i + 1]).total_seconds() / SECONDS_PER_DAY for i in range(pairs)
    ]
    return sum(gaps) / len(gaps)


def estimate_frequency(
    timestamps: Iterable[Any],
    lookback: int = CATALOG_LOOKBACK,
    several_per_week_label: str = MULTIPLE_PER_WEEK,
) -> FrequencyEstimate:
    """
    Estimate publishing cadence from release timestamps.

    Args:
        timestamps: Release timestamps in any order; unparseable entries are skipped
        lookback: Maximum number of consecutive pairs to average
        several_per_week_label: Wording for the 1.5-4 day bucket

    Returns:
        FrequencyEstimate with the average gap (None under two valid dates) and label
    """
    if isinstance(timestamps, (str, bytes)) or not isinstance(timestamps, Iterable):
        timestamps = []
    average = average_interval_days(sorted_timestamps(timestamps), lookback)
    return FrequencyEstimate(
        average_days_between=average,
        label=classify_frequency(average, several_per_week_label),
    )


# ---------------------------
# Episode collections
# ---------------------------


@dataclass(frozen=True)
class AnalysisProfile:
    """How a call site wants its episode analytics computed."""

    lookback: int
    several_per_week_label: str
    include_minutes: bool = False


# Podcast detail pages look at recent cadence only
DETAIL_ANALYSIS = AnalysisProfile(
    lookback=DETAIL_LOOKBACK,
    several_per_week_label=TWO_TO_THREE_PER_WEEK,
    include_minutes=True,
)
# Full episode listings
CATALOG_ANALYSIS = AnalysisProfile(
    lookback=CATALOG_LOOKBACK,
    several_per_week_label=MULTIPLE_PER_WEEK,
)


def _duration_and_release(episode: Any) -> tuple[int | float | None, str | None]:
    if isinstance(episode, NormalizedEpisode):
        return coerce_number(episode.duration_ms), episode.release_date
    raw = RawEpisode.from_upstream(episode)
    return raw.track_time_millis, raw.release_date


def analyze_episodes(
    episodes: Iterable[Any] | None, profile: AnalysisProfile = CATALOG_ANALYSIS
) -> EpisodeAnalytics | None:
    """
    Summarize an episode collection.

    Accepts raw upstream records (mappings or RawEpisode) and NormalizedEpisode
    instances. Returns None for an empty collection.
    """
    if episodes is None or isinstance(episodes, (str, bytes, Mapping)):
        return None
    if not isinstance(episodes, Iterable):
        return None

    fields = [_duration_and_release(episode) for episode in episodes]
    if not fields:
        return None

    durations = [ms / 1000 for ms, _ in fields if ms is not None and ms > 0]
    # Divide before summing so huge durations cannot overflow the total
    average_seconds = sum(d / len(durations) for d in durations) if durations else 0.0

    moments = sorted_timestamps(release for _, release in fields)
    average_days = average_interval_days(moments, profile.lookback)

    return EpisodeAnalytics(
        total_episodes=len(fields),
        average_duration_seconds=round_half_up(average_seconds),
        average_duration_minutes=(
            round_half_up(average_seconds / 60) if profile.include_minutes else None
        ),
        average_duration_formatted=format_duration(average_seconds * 1000),
        first_episode_date=format_timestamp(moments[-1]) if moments else None,
        latest_episode_date=format_timestamp(moments[0]) if moments else None,
        average_days_between_episodes=round_half_up(average_days) if average_days else None,
        publishing_frequency=classify_frequency(average_days, profile.several_per_week_label),
    )
