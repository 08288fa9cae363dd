"""
Popularity heuristics.

Two strategies guess audience size from a podcast's primary genre and
episode count: one for search results, one for podcast detail pages.
Neither is a measured metric.
"""

import math
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

from api.podcast.models import ListenerEstimate, PopularityEstimate, coerce_number

DEFAULT_GENRE = "default"

# Absolute listener bases per genre, used on search results
SEARCH_GENRE_BASES: Mapping[str, int] = MappingProxyType(
    {
        "True Crime": 15000,
        "News": 12000,
        "Comedy": 10000,
        "Business": 8000,
        "Technology": 7000,
        "Sports": 9000,
        "Health & Fitness": 6000,
        "Education": 5000,
        "Society & Culture": 5500,
        DEFAULT_GENRE: 4000,
    }
)

# Relative scale factors per genre, used on podcast detail pages
DETAIL_GENRE_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "True Crime": 2.5,
        "News": 2.0,
        "Comedy": 1.8,
        "Business": 1.6,
        "Technology": 1.5,
        "Sports": 1.7,
        "Health & Fitness": 1.4,
        DEFAULT_GENRE: 1.0,
    }
)


class PopularityContext(str, Enum):
    SEARCH = "search"
    DETAIL = "detail"


class PopularityEstimator(Protocol):
    def estimate(self, genre: Any, episode_count: Any) -> ListenerEstimate | PopularityEstimate: ...


def genre_coefficient(table: Mapping[str, Any], genre: Any) -> Any:
    """Exact-match lookup; anything unmapped falls back to the default entry."""
    if isinstance(genre, str) and genre in table:
        return table[genre]
    return table[DEFAULT_GENRE]


def safe_episode_count(value: Any) -> int:
    """Episode counts from upstream may be missing or junk; treat those as 0."""
    count = coerce_number(value)
    if count is None or count < 0:
        return 0
    return int(count)


class SearchListenerEstimator:
    """
    Search-time guess: genre base scaled linearly by catalogue depth,
    capped at six times the base (500+ episodes).
    """

    def __init__(
        self,
        bases: Mapping[str, int] = SEARCH_GENRE_BASES,
        max_episode_factor: float = 5.0,
    ):
        self.bases = bases
        self.max_episode_factor = max_episode_factor

    def estimate(self, genre: Any, episode_count: Any) -> ListenerEstimate:
        base = genre_coefficient(self.bases, genre)
        episode_factor = min(safe_episode_count(episode_count) / 100, self.max_episode_factor)
        return ListenerEstimate(estimated_listeners=math.floor(base * (1 + episode_factor)))


class DetailMetricsEstimator:
    """Detail-time guess: weekly listeners grow with log10 of the catalogue size."""

    BASE_WEEKLY_LISTENERS = 5000
    DOWNLOADS_PER_LISTENER = 0.7
    NOTE = "Estimates based on genre, episode count, and industry averages"

    def __init__(self, multipliers: Mapping[str, float] = DETAIL_GENRE_MULTIPLIERS):
        self.multipliers = multipliers

    def estimate(self, genre: Any, episode_count: Any) -> PopularityEstimate:
        multiplier = genre_coefficient(self.multipliers, genre)
        episode_factor = math.log10(safe_episode_count(episode_count) + 1)

        weekly_listeners = math.floor(self.BASE_WEEKLY_LISTENERS * multiplier * episode_factor)
        downloads_per_episode = math.floor(weekly_listeners * self.DOWNLOADS_PER_LISTENER)

        return PopularityEstimate(
            estimated_weekly_listeners=weekly_listeners,
            estimated_downloads_per_episode=downloads_per_episode,
            confidence="low",
            note=self.NOTE,
        )


ESTIMATORS: Mapping[PopularityContext, PopularityEstimator] = MappingProxyType(
    {
        PopularityContext.SEARCH: SearchListenerEstimator(),
        PopularityContext.DETAIL: DetailMetricsEstimator(),
    }
)


def estimate_popularity(
    genre: Any,
    episode_count: Any,
    context: PopularityContext | str = PopularityContext.DETAIL,
) -> ListenerEstimate | PopularityEstimate:
    """
    Estimate audience size with the strategy registered for `context`.

    Raises:
        ValueError: If context is not a known PopularityContext
    """
    return ESTIMATORS[PopularityContext(context)].estimate(genre, episode_count)
