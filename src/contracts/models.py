from enum import Enum
from typing import Any

from pydantic import Field

from utils.pydantic_tools import BaseModelWithMethods

"""
These are the known types and are a contract for expressing payloads with the frontend.
"""


class MCSources(str, Enum):
    ITUNES = "itunes"


class MCType(str, Enum):
    """
    Content type enum.
    Defines all possible content types that can be returned by the backend.
    """

    PODCAST = "podcast"
    PODCAST_EPISODE = "podcast_episode"


class MCSearchResponse(BaseModelWithMethods):
    """Base class for all API responses returned by wrappers."""

    results: list[Any] = Field(default_factory=list)
    query: str | None = None
    data_source: str | None = None
    data_type: MCType | None = None
    source: MCSources = MCSources.ITUNES
    error: str | None = None
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.status_code == 200 and not self.error


ApiWrapperResponse = MCSearchResponse
