"""
Podcast Normalizers - map raw directory records onto the API's stable schema.
Normalization never raises: missing upstream fields become None or defaults.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any

from api.podcast.analytics import DETAIL_ANALYSIS, analyze_episodes, format_duration
from api.podcast.models import (
    Artwork,
    NormalizedEpisode,
    NormalizedPodcast,
    PodcastArtwork,
    PodcastCategories,
    PodcastMetadata,
    PodcastSearchResult,
    PodcastStats,
    RawEpisode,
    RawPodcast,
    coerce_int,
)
from api.podcast.popularity import PopularityContext, estimate_popularity, safe_episode_count

COMPACT_DESCRIPTION_LENGTH = 200
RECENT_EPISODE_LIMIT = 10
SEARCH_PREVIEW_EPISODES = 5
PARTIAL_DATA_ERROR = "Partial data available"


class EpisodeProfile(str, Enum):
    """Which fields a normalized episode carries."""

    # Cross-podcast episode search: podcast context, artwork triple, genres
    SEARCH = "search"
    # Full episode listing: single preferred artwork URL
    CATALOG = "catalog"
    # Preview embedded in podcast records
    SUMMARY = "summary"


def as_records(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def truncate_description(text: str | None, limit: int | None) -> str | None:
    if limit is None:
        return text
    return (text or "")[:limit]


def normalize_episode(
    raw: Any,
    profile: EpisodeProfile | str = EpisodeProfile.CATALOG,
    description_limit: int | None = None,
) -> NormalizedEpisode:
    """
    Map one upstream episode record onto NormalizedEpisode.

    Args:
        raw: Upstream episode mapping or RawEpisode
        profile: Field selection, see EpisodeProfile
        description_limit: Truncate descriptions to this many characters;
            a missing description then becomes ""

    Returns:
        NormalizedEpisode carrying only the profile's fields
    """
    episode = RawEpisode.from_upstream(raw)
    profile = EpisodeProfile(profile)

    fields: dict[str, Any] = {
        "id": episode.track_id,
        "title": episode.track_name,
        "description": truncate_description(episode.description, description_limit),
        "release_date": episode.release_date,
        "duration_ms": episode.track_time_millis,
        "duration_formatted": format_duration(episode.track_time_millis),
        "url": episode.track_view_url,
    }

    if profile is EpisodeProfile.SEARCH:
        fields.update(
            podcast_id=episode.collection_id,
            podcast_name=episode.collection_name,
            podcast_publisher=episode.artist_name,
            audio_url=episode.episode_url or episode.preview_url,
            artwork=Artwork(
                small=episode.artwork_url_60,
                medium=episode.artwork_url_160,
                large=episode.artwork_url_600,
            ),
            content_rating=episode.content_advisory_rating,
            country=episode.country,
            genres=list(episode.genres),
            primary_genre=episode.primary_genre_name,
        )
    elif profile is EpisodeProfile.CATALOG:
        fields.update(
            audio_url=episode.episode_url or episode.preview_url,
            artwork=episode.artwork_url_600 or episode.artwork_url_160,
        )

    return NormalizedEpisode(**fields)


def normalize_podcast(
    collection: Any,
    episodes: Sequence[Any] | None,
    recent_limit: int = RECENT_EPISODE_LIMIT,
) -> NormalizedPodcast:
    """
    Build the podcast detail record from a lookup's collection entry and its
    episodes (newest first, as the directory returns them).
    """
    podcast = RawPodcast.from_upstream(collection)
    raw_episodes = [RawEpisode.from_upstream(episode) for episode in as_records(episodes)]

    return NormalizedPodcast(
        id=podcast.collection_id,
        name=podcast.collection_name,
        publisher=podcast.artist_name,
        description=podcast.collection_censored_name,
        artwork=PodcastArtwork(
            url_60=podcast.artwork_url_60,
            url_100=podcast.artwork_url_100,
            url_600=podcast.artwork_url_600,
        ),
        metadata=PodcastMetadata(
            feed_url=podcast.feed_url,
            itunes_url=podcast.collection_view_url,
            itunes_id=coerce_int(podcast.collection_id),
            copyright=None,
            author=podcast.artist_name,
        ),
        categories=PodcastCategories(
            genres=list(podcast.genres),
            primary_genre=podcast.primary_genre_name,
        ),
        stats=PodcastStats(
            episode_count=safe_episode_count(podcast.track_count) or len(raw_episodes),
            release_date=podcast.release_date,
            latest_episode_date=raw_episodes[0].release_date if raw_episodes else None,
            country=podcast.country,
            language=podcast.language,
            explicit=podcast.explicit,
        ),
        episode_insights=analyze_episodes(raw_episodes, DETAIL_ANALYSIS),
        recent_episodes=[
            normalize_episode(
                episode,
                EpisodeProfile.SUMMARY,
                description_limit=COMPACT_DESCRIPTION_LENGTH,
            )
            for episode in raw_episodes[: max(recent_limit, 0)]
        ],
        estimated_metrics=estimate_popularity(
            podcast.primary_genre_name, len(raw_episodes), PopularityContext.DETAIL
        ),
    )


def search_hit_genres(raw: RawPodcast) -> list[str]:
    """Genre names paired with the hit's genreIds; a hit without ids has no genres."""
    return [raw.genres[i] for i in range(len(raw.genre_ids)) if i < len(raw.genres)]


def normalize_search_result(
    podcast: Any,
    lookup_results: Sequence[Any] | None,
    preview_limit: int = SEARCH_PREVIEW_EPISODES,
) -> PodcastSearchResult:
    """
    Build a podcast search hit enriched with a handful of recent episodes.

    Args:
        podcast: Upstream search result for the podcast
        lookup_results: Raw lookup results; entry 0 is the podcast itself
        preview_limit: Number of recent episodes to attach
    """
    raw = RawPodcast.from_upstream(podcast)
    recent = as_records(lookup_results)[1 : 1 + max(preview_limit, 0)]
    episode_count = safe_episode_count(raw.track_count)

    return PodcastSearchResult(
        id=raw.collection_id,
        name=raw.collection_name,
        publisher=raw.artist_name,
        description=raw.collection_censored_name,
        artwork=Artwork(
            small=raw.artwork_url_60,
            medium=raw.artwork_url_100,
            large=raw.artwork_url_600,
        ),
        feed_url=raw.feed_url,
        itunes_url=raw.collection_view_url,
        genres=search_hit_genres(raw),
        primary_genre=raw.primary_genre_name,
        episode_count=episode_count,
        country=raw.country,
        language=raw.language,
        release_date=raw.release_date,
        content_rating=raw.content_advisory_rating or "clean",
        estimated_listeners=estimate_popularity(
            raw.primary_genre_name, episode_count, PopularityContext.SEARCH
        ).estimated_listeners,
        recent_episodes=[normalize_episode(episode, EpisodeProfile.SUMMARY) for episode in recent],
    )


def degraded_search_result(podcast: Any) -> PodcastSearchResult:
    """Minimal search hit used when a podcast's enrichment lookup failed."""
    raw = RawPodcast.from_upstream(podcast)
    return PodcastSearchResult(
        id=raw.collection_id,
        name=raw.collection_name,
        publisher=raw.artist_name,
        error=PARTIAL_DATA_ERROR,
    )
