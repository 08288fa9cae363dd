"""
Podcast Search Service - search and lookup operations against the directory.
Extends core service with podcast search, episode search, podcast details and
episode listings.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from api.podcast.analytics import CATALOG_ANALYSIS, analyze_episodes, parse_timestamp
from api.podcast.core import PodcastService
from api.podcast.itunes import ITunesClient
from api.podcast.models import (
    EpisodeListResponse,
    EpisodeSearchResponse,
    NormalizedEpisode,
    PodcastDetailResponse,
    PodcastSearchResponse,
    PodcastSearchResult,
    RawEpisode,
    RawPodcast,
)
from api.podcast.normalize import (
    EpisodeProfile,
    degraded_search_result,
    normalize_episode,
    normalize_podcast,
    normalize_search_result,
)
from utils.get_logger import get_logger

logger = get_logger(__name__)

# Episodes fetched per search hit to build its preview
SEARCH_ENRICHMENT_LOOKUP_LIMIT = 10
# Directory maximum for podcastEpisode lookups
EPISODE_LOOKUP_LIMIT = 200


def matches_query(episode: NormalizedEpisode, query: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = query.lower()
    return needle in (episode.title or "").lower() or needle in (episode.description or "").lower()


def newest_first(episodes: list[NormalizedEpisode]) -> list[NormalizedEpisode]:
    """Order by release date, newest first; undated episodes keep their order at the end."""
    dated: list[tuple[Any, NormalizedEpisode]] = []
    undated: list[NormalizedEpisode] = []
    for episode in episodes:
        released = parse_timestamp(episode.release_date)
        if released is None:
            undated.append(episode)
        else:
            dated.append((released, episode))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [episode for _, episode in dated] + undated


class PodcastSearchService(PodcastService):
    """
    Handles all directory operations.
    Each operation performs one lookup (plus one per hit for podcast search)
    and hands the raw payloads to the normalizers.
    """

    async def _enrich_search_result(
        self, client: ITunesClient, podcast: Mapping[str, Any]
    ) -> PodcastSearchResult:
        """Attach recent episodes and estimates to a single search hit."""
        raw = RawPodcast.from_upstream(podcast)
        if not raw.collection_id:
            raise ValueError("Search result has no collectionId")
        lookup_results = await client.lookup(
            raw.collection_id, limit=SEARCH_ENRICHMENT_LOOKUP_LIMIT
        )
        return normalize_search_result(raw, lookup_results)

    async def search_podcasts(
        self,
        query: str,
        limit: int = 50,
        country: str | None = None,
        entity: str = "podcast",
    ) -> PodcastSearchResponse:
        """
        Search for podcasts by term and enrich every hit.

        Args:
            query: Search query
            limit: Maximum number of results to return (default=50)
            country: Storefront country code (default from settings)
            entity: Directory entity to search (default='podcast')

        Returns:
            PodcastSearchResponse; hits whose enrichment failed are degraded,
            never dropped
        """
        country = country or self.settings.default_country
        try:
            async with await self.get_client() as client:
                podcasts = await client.search(
                    term=query, entity=entity, limit=limit, country=country
                )

                # Enrich in parallel; a failed lookup only degrades its own hit
                enriched = await asyncio.gather(
                    *(self._enrich_search_result(client, podcast) for podcast in podcasts),
                    return_exceptions=True,
                )

            results: list[PodcastSearchResult] = []
            for podcast, outcome in zip(podcasts, enriched, strict=True):
                if isinstance(outcome, PodcastSearchResult):
                    results.append(outcome)
                    continue
                logger.warning(
                    f"Error enriching podcast {podcast.get('collectionId')}: {outcome}"
                )
                results.append(degraded_search_result(podcast))

            logger.info(f"Successfully searched podcasts for '{query}': {len(results)} results")
            return PodcastSearchResponse(
                results=results,
                result_count=len(results),
                query=query,
            )

        except Exception as e:
            logger.error(f"Error searching podcasts for '{query}': {e}")
            return PodcastSearchResponse(query=query, error=str(e), status_code=500)

    async def search_episodes(
        self, query: str, limit: int = 50, podcast_id: str | None = None
    ) -> EpisodeSearchResponse:
        """
        Search episodes across the directory, or within one podcast.

        Args:
            query: Search query
            limit: Maximum number of results for directory-wide search (default=50)
            podcast_id: Restrict the search to this podcast's episodes

        Returns:
            EpisodeSearchResponse with episodes newest first
        """
        try:
            async with await self.get_client() as client:
                if podcast_id:
                    items = await client.lookup(podcast_id, limit=EPISODE_LOOKUP_LIMIT)
                else:
                    items = await client.search(
                        term=query, entity="podcastEpisode", limit=limit
                    )

            raw_episodes = [RawEpisode.from_upstream(item) for item in items]
            episodes = [
                normalize_episode(raw, EpisodeProfile.SEARCH)
                for raw in raw_episodes
                if raw.is_episode
            ]

            if podcast_id and query:
                episodes = [episode for episode in episodes if matches_query(episode, query)]

            episodes = newest_first(episodes)

            logger.info(
                f"Successfully searched episodes for '{query}'"
                f"{f' in podcast {podcast_id}' if podcast_id else ''}: {len(episodes)} results"
            )
            return EpisodeSearchResponse(
                results=episodes,
                result_count=len(episodes),
                query=query,
                podcast_id=podcast_id,
            )

        except Exception as e:
            logger.error(f"Error searching episodes for '{query}': {e}")
            return EpisodeSearchResponse(
                query=query, podcast_id=podcast_id, error=str(e), status_code=500
            )

    async def get_podcast_details(self, podcast_id: str) -> PodcastDetailResponse:
        """
        Get a podcast's detail record with episode insights and estimates.

        Args:
            podcast_id: Directory collection ID

        Returns:
            PodcastDetailResponse (status_code 404 when the directory has no match)
        """
        try:
            async with await self.get_client() as client:
                items = await client.lookup(podcast_id, limit=EPISODE_LOOKUP_LIMIT)

            if not items:
                return PodcastDetailResponse(
                    podcast_id=podcast_id, error="Podcast not found", status_code=404
                )

            podcast = normalize_podcast(items[0], items[1:])
            logger.info(f"Successfully fetched podcast {podcast_id}: {podcast.name}")
            return PodcastDetailResponse(podcast_id=podcast_id, podcast=podcast)

        except Exception as e:
            logger.error(f"Error fetching podcast {podcast_id}: {e}")
            return PodcastDetailResponse(podcast_id=podcast_id, error=str(e), status_code=500)

    async def get_podcast_episodes(
        self, podcast_id: str, limit: int = 100, offset: int = 0
    ) -> EpisodeListResponse:
        """
        Get a page of a podcast's episodes plus analytics over all fetched episodes.

        Args:
            podcast_id: Directory collection ID
            limit: Page size (default=100)
            offset: Page start (default=0)

        Returns:
            EpisodeListResponse (status_code 404 when the directory has no match)
        """
        try:
            async with await self.get_client() as client:
                items = await client.lookup(podcast_id, limit=EPISODE_LOOKUP_LIMIT)

            if not items:
                return EpisodeListResponse(
                    podcast_id=podcast_id,
                    offset=offset,
                    limit=limit,
                    error="Podcast not found",
                    status_code=404,
                )

            episodes = [normalize_episode(item, EpisodeProfile.CATALOG) for item in items[1:]]
            page = episodes[offset : offset + limit]

            logger.info(
                f"Successfully fetched {len(page)}/{len(episodes)} episodes for podcast {podcast_id}"
            )
            return EpisodeListResponse(
                podcast_id=podcast_id,
                total_episodes=len(episodes),
                offset=offset,
                limit=limit,
                episodes=page,
                analytics=analyze_episodes(episodes, CATALOG_ANALYSIS),
            )

        except Exception as e:
            logger.error(f"Error fetching episodes for podcast {podcast_id}: {e}")
            return EpisodeListResponse(
                podcast_id=podcast_id,
                offset=offset,
                limit=limit,
                error=str(e),
                status_code=500,
            )


podcast_search_service = PodcastSearchService()
