"""
Podcast Async Wrappers - Firebase Functions compatible async wrapper functions.
Provides async wrappers for Firebase Functions integration using ApiWrapperResponse pattern.
"""

from typing import cast

from api.podcast.models import (
    EpisodeListResponse,
    EpisodeSearchResponse,
    PodcastDetailResponse,
    PodcastSearchResponse,
)
from api.podcast.search import PodcastSearchService
from utils.get_logger import get_logger

logger = get_logger(__name__)


class PodcastWrapper:
    def __init__(self, service: PodcastSearchService | None = None):
        self.service = service or PodcastSearchService()

    async def search_podcasts(
        self,
        query: str,
        limit: int = 50,
        country: str | None = None,
        entity: str = "podcast",
    ) -> PodcastSearchResponse:
        """
        Async wrapper function to search podcasts.

        Args:
            query: Search query string
            limit: Maximum number of results to return (default=50)
            country: Storefront country code
            entity: Directory entity (default='podcast')

        Returns:
            PodcastSearchResponse: MCSearchResponse derivative containing search results or error information
        """
        try:
            response = await self.service.search_podcasts(
                query=query, limit=limit, country=country, entity=entity
            )

            if response is None or response.error:
                return PodcastSearchResponse(
                    results=[],
                    result_count=0,
                    query=query,
                    error=response.error if response else "Failed to search podcasts",
                    status_code=response.status_code if response else 500,
                )

            return cast(PodcastSearchResponse, response)

        except Exception as e:
            logger.error(f"Error in search_podcasts: {e}")
            return PodcastSearchResponse(query=query, error=str(e), status_code=500)

    async def search_episodes(
        self, query: str, limit: int = 50, podcast_id: str | None = None
    ) -> EpisodeSearchResponse:
        """
        Async wrapper function to search episodes.

        Args:
            query: Search query string
            limit: Maximum number of results to return (default=50)
            podcast_id: Optional podcast to restrict the search to

        Returns:
            EpisodeSearchResponse: MCSearchResponse derivative containing episodes or error information
        """
        try:
            response = await self.service.search_episodes(
                query=query, limit=limit, podcast_id=podcast_id
            )

            if response is None or response.error:
                return EpisodeSearchResponse(
                    results=[],
                    result_count=0,
                    query=query,
                    podcast_id=podcast_id,
                    error=response.error if response else "Failed to search episodes",
                    status_code=response.status_code if response else 500,
                )

            return cast(EpisodeSearchResponse, response)

        except Exception as e:
            logger.error(f"Error in search_episodes: {e}")
            return EpisodeSearchResponse(
                query=query, podcast_id=podcast_id, error=str(e), status_code=500
            )

    async def get_podcast_details(self, podcast_id: str) -> PodcastDetailResponse:
        """
        Async wrapper function to get a podcast's detail record.

        Args:
            podcast_id: Directory collection ID

        Returns:
            PodcastDetailResponse: podcast detail or error information (404 when not found)
        """
        try:
            response = await self.service.get_podcast_details(podcast_id=podcast_id)

            if response is None:
                return PodcastDetailResponse(
                    podcast_id=podcast_id, error="Podcast not found", status_code=404
                )

            return cast(PodcastDetailResponse, response)

        except Exception as e:
            logger.error(f"Error in get_podcast_details: {e}")
            return PodcastDetailResponse(podcast_id=podcast_id, error=str(e), status_code=500)

    async def get_podcast_episodes(
        self, podcast_id: str, limit: int = 100, offset: int = 0
    ) -> EpisodeListResponse:
        """
        Async wrapper function to get a page of podcast episodes with analytics.

        Args:
            podcast_id: Directory collection ID
            limit: Page size (default=100)
            offset: Page start (default=0)

        Returns:
            EpisodeListResponse: episodes and analytics or error information
        """
        try:
            response = await self.service.get_podcast_episodes(
                podcast_id=podcast_id, limit=limit, offset=offset
            )

            if response is None:
                return EpisodeListResponse(
                    podcast_id=podcast_id,
                    offset=offset,
                    limit=limit,
                    error="Podcast not found",
                    status_code=404,
                )

            return cast(EpisodeListResponse, response)

        except Exception as e:
            logger.error(f"Error in get_podcast_episodes: {e}")
            return EpisodeListResponse(
                podcast_id=podcast_id,
                offset=offset,
                limit=limit,
                error=str(e),
                status_code=500,
            )


podcast_wrapper = PodcastWrapper()
