"""
Podcast Insights Package - iTunes directory search with derived analytics.

This package provides:
- PodcastSearchService: Directory search and lookup operations
- Normalizers and analytics: Pure functions reshaping upstream records
- Models: Pydantic models for type-safe data structures
- Wrappers: Firebase Functions compatible async wrappers
- Handlers: Firebase HTTP request handlers
"""

from api.podcast.analytics import analyze_episodes, estimate_frequency, format_duration
from api.podcast.handlers import PodcastHandler, podcast_handler
from api.podcast.models import (
    EpisodeAnalytics,
    EpisodeListResponse,
    EpisodeSearchResponse,
    NormalizedEpisode,
    NormalizedPodcast,
    PodcastDetailResponse,
    PodcastSearchResponse,
    PodcastSearchResult,
)
from api.podcast.normalize import EpisodeProfile, normalize_episode, normalize_podcast
from api.podcast.popularity import PopularityContext, estimate_popularity
from api.podcast.search import PodcastSearchService
from api.podcast.wrappers import PodcastWrapper, podcast_wrapper

__all__ = [
    # Handlers
    "PodcastHandler",
    "podcast_handler",
    # Service
    "PodcastSearchService",
    # Core functions
    "analyze_episodes",
    "estimate_frequency",
    "estimate_popularity",
    "format_duration",
    "normalize_episode",
    "normalize_podcast",
    "EpisodeProfile",
    "PopularityContext",
    # Models
    "EpisodeAnalytics",
    "NormalizedEpisode",
    "NormalizedPodcast",
    "PodcastSearchResult",
    "PodcastSearchResponse",
    "EpisodeSearchResponse",
    "PodcastDetailResponse",
    "EpisodeListResponse",
    # Wrappers
    "PodcastWrapper",
    "podcast_wrapper",
]
