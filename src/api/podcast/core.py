"""
Podcast Core Service - Base service with configuration and client creation.
Provides foundation for search and lookup operations.
"""

from dataclasses import dataclass

from api.podcast.itunes import ITunesClient
from utils.config import env_float, env_str, load_env
from utils.get_logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PodcastSettings:
    base_url: str = ITunesClient.BASE_URL
    timeout_seconds: float = 10.0
    user_agent: str = "podcast-insights/1.0"
    default_country: str = "us"

    @classmethod
    def from_env(cls) -> "PodcastSettings":
        """Read settings from the environment (after loading the dotenv file)."""
        load_env()
        return cls(
            base_url=env_str("ITUNES_BASE_URL", cls.base_url),
            timeout_seconds=env_float("ITUNES_TIMEOUT_SECONDS", cls.timeout_seconds),
            user_agent=env_str("ITUNES_USER_AGENT", cls.user_agent),
            default_country=env_str("DEFAULT_COUNTRY", cls.default_country),
        )


class PodcastService:
    """
    Base podcast service with core utilities.
    Provides foundation for search and lookup operations.
    """

    def __init__(self, settings: PodcastSettings | None = None):
        self.settings = settings or PodcastSettings.from_env()
        self.base_url = self.settings.base_url

    async def get_client(self) -> ITunesClient:
        """
        Get a directory client instance.

        Returns:
            ITunesClient configured from settings
        """
        logger.debug(f"Creating iTunes client for {self.base_url}")
        return ITunesClient(
            base_url=self.settings.base_url,
            user_agent=self.settings.user_agent,
            timeout_seconds=self.settings.timeout_seconds,
        )
