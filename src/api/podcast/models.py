"""
Podcast Models - Pydantic models for iTunes directory payloads and the
normalized shapes served by the API.
Follows Pydantic 2.0 patterns with full type safety.

Upstream records are loosely typed: any field may be missing, null or of the
wrong type. The Raw* models absorb that at the deserialization boundary so
everything downstream works with already-defaulted values.
"""

import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)

from contracts.models import MCSearchResponse, MCType
from utils.get_logger import get_logger
from utils.pydantic_tools import FrozenModel

logger = get_logger(__name__)


# ---------------------------
# Lenient coercion helpers
# ---------------------------


def coerce_number(value: Any) -> int | float | None:
    """Return a finite number for numeric-looking input, otherwise None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        # Arbitrarily long JSON integers cannot take part in float arithmetic
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def coerce_int(value: Any) -> int | None:
    number = coerce_number(value)
    return int(number) if number is not None else None


def coerce_str(value: Any) -> str | None:
    """Strings pass through, numeric ids are stringified, anything else is None."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def coerce_str_list(value: Any) -> list[str]:
    """
    Coerce a list of names. Episode genres arrive as {"name": ..., "id": ...}
    objects, podcast genres as plain strings.
    """
    if not isinstance(value, (list, tuple)):
        return []
    names: list[str] = []
    for item in value:
        name = coerce_str(item.get("name")) if isinstance(item, Mapping) else coerce_str(item)
        if name is not None:
            names.append(name)
    return names


OptionalStr = Annotated[str | None, BeforeValidator(coerce_str)]
OptionalInt = Annotated[int | None, BeforeValidator(coerce_int)]
OptionalNumber = Annotated[int | float | None, BeforeValidator(coerce_number)]
StrList = Annotated[list[str], BeforeValidator(coerce_str_list)]


# ============================================================================
# Upstream Models
# These models describe iTunes search/lookup result records
# ============================================================================


class UpstreamRecord(BaseModel):
    """Base for raw directory records. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @classmethod
    def from_upstream(cls, data: Any) -> Self:
        """Build a record from an arbitrary upstream value without raising."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            return cls()
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            logger.warning(f"Discarding malformed {cls.__name__} payload: {e}")
            return cls()


class RawEpisode(UpstreamRecord):
    """An episode record as returned by the directory service."""

    track_id: OptionalStr = Field(None, alias="trackId")
    collection_id: OptionalStr = Field(None, alias="collectionId")
    collection_name: OptionalStr = Field(None, alias="collectionName")
    artist_name: OptionalStr = Field(None, alias="artistName")
    track_name: OptionalStr = Field(None, alias="trackName")
    description: OptionalStr = None
    release_date: OptionalStr = Field(None, alias="releaseDate")
    track_time_millis: OptionalNumber = Field(None, alias="trackTimeMillis")
    track_view_url: OptionalStr = Field(None, alias="trackViewUrl")
    episode_url: OptionalStr = Field(None, alias="episodeUrl")
    preview_url: OptionalStr = Field(None, alias="previewUrl")
    artwork_url_60: OptionalStr = Field(None, alias="artworkUrl60")
    artwork_url_160: OptionalStr = Field(None, alias="artworkUrl160")
    artwork_url_600: OptionalStr = Field(None, alias="artworkUrl600")
    content_advisory_rating: OptionalStr = Field(None, alias="contentAdvisoryRating")
    country: OptionalStr = None
    genres: StrList = Field(default_factory=list)
    primary_genre_name: OptionalStr = Field(None, alias="primaryGenreName")
    kind: OptionalStr = None
    wrapper_type: OptionalStr = Field(None, alias="wrapperType")

    @property
    def is_episode(self) -> bool:
        return self.kind == "podcast-episode" or self.wrapper_type == "podcastEpisode"


class RawPodcast(UpstreamRecord):
    """A podcast (collection) record as returned by the directory service."""

    collection_id: OptionalStr = Field(None, alias="collectionId")
    collection_name: OptionalStr = Field(None, alias="collectionName")
    collection_censored_name: OptionalStr = Field(None, alias="collectionCensoredName")
    artist_name: OptionalStr = Field(None, alias="artistName")
    artwork_url_60: OptionalStr = Field(None, alias="artworkUrl60")
    artwork_url_100: OptionalStr = Field(None, alias="artworkUrl100")
    artwork_url_600: OptionalStr = Field(None, alias="artworkUrl600")
    feed_url: OptionalStr = Field(None, alias="feedUrl")
    collection_view_url: OptionalStr = Field(None, alias="collectionViewUrl")
    genre_ids: StrList = Field(default_factory=list, alias="genreIds")
    genres: StrList = Field(default_factory=list)
    primary_genre_name: OptionalStr = Field(None, alias="primaryGenreName")
    track_count: OptionalInt = Field(None, alias="trackCount")
    country: OptionalStr = None
    language_codes: StrList = Field(default_factory=list, alias="languageCodesISO2A")
    release_date: OptionalStr = Field(None, alias="releaseDate")
    content_advisory_rating: OptionalStr = Field(None, alias="contentAdvisoryRating")

    @property
    def explicit(self) -> bool:
        return self.content_advisory_rating == "Explicit"

    @property
    def language(self) -> str:
        return self.language_codes[0] if self.language_codes else "en"


# ============================================================================
# Normalized Models
# ============================================================================


class SelectedFieldsModel(FrozenModel):
    """
    Serializes only the fields that were explicitly set at construction.
    Normalization profiles pick which fields a record carries.
    """

    @model_serializer(mode="wrap")
    def _serialize_selected_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if key in self.model_fields_set}


class Artwork(FrozenModel):
    """Small/medium/large artwork URLs."""

    small: str | None = None
    medium: str | None = None
    large: str | None = None


class NormalizedEpisode(SelectedFieldsModel):
    """
    A single episode in the API's stable schema.
    duration_formatted is always a valid H:MM:SS or M:SS string.
    """

    id: str | None = Field(None, description="Directory track ID")
    podcast_id: str | None = Field(None, description="Parent collection ID")
    podcast_name: str | None = None
    podcast_publisher: str | None = None

    title: str | None = None
    description: str | None = None

    release_date: str | None = Field(None, description="Release timestamp as sent upstream")
    duration_ms: int | float | None = None
    duration_formatted: str = "0:00"

    url: str | None = Field(None, description="Directory page for the episode")
    audio_url: str | None = Field(None, description="Playable audio URL")
    artwork: Artwork | str | None = None

    content_rating: str | None = None
    country: str | None = None
    genres: list[str] = Field(default_factory=list)
    primary_genre: str | None = None


class EpisodeAnalytics(FrozenModel):
    """Aggregate statistics over an episode collection."""

    total_episodes: int = 0
    average_duration_seconds: int = 0
    average_duration_minutes: int | None = None
    average_duration_formatted: str = "0:00"
    first_episode_date: str | None = None
    latest_episode_date: str | None = None
    average_days_between_episodes: int | None = None
    publishing_frequency: str = "unknown"

    @model_serializer(mode="wrap")
    def _omit_missing_minutes(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if data.get("average_duration_minutes") is None:
            data.pop("average_duration_minutes", None)
        return data


class ListenerEstimate(FrozenModel):
    """Single-figure audience guess used in search results."""

    estimated_listeners: int = 0


class PopularityEstimate(FrozenModel):
    """Structured audience guess used on podcast detail pages."""

    estimated_weekly_listeners: int = 0
    estimated_downloads_per_episode: int = 0
    confidence: Literal["low"] = "low"
    note: str = ""


class PodcastArtwork(FrozenModel):
    url_60: str | None = None
    url_100: str | None = None
    url_600: str | None = None


class PodcastMetadata(FrozenModel):
    feed_url: str | None = None
    itunes_url: str | None = None
    itunes_id: int | None = None
    copyright: str | None = None
    author: str | None = None


class PodcastCategories(FrozenModel):
    genres: list[str] = Field(default_factory=list)
    primary_genre: str | None = None


class PodcastStats(FrozenModel):
    episode_count: int = 0
    release_date: str | None = None
    latest_episode_date: str | None = None
    country: str | None = None
    language: str = "en"
    explicit: bool = False


class NormalizedPodcast(FrozenModel):
    """
    Full podcast detail record.
    episode_insights is None exactly when no episodes were supplied.
    """

    id: str | None = None
    name: str | None = None
    publisher: str | None = None
    description: str | None = None

    artwork: PodcastArtwork = Field(default_factory=PodcastArtwork)
    metadata: PodcastMetadata = Field(default_factory=PodcastMetadata)
    categories: PodcastCategories = Field(default_factory=PodcastCategories)
    stats: PodcastStats = Field(default_factory=PodcastStats)

    episode_insights: EpisodeAnalytics | None = None
    recent_episodes: list[NormalizedEpisode] = Field(default_factory=list)
    estimated_metrics: PopularityEstimate = Field(default_factory=PopularityEstimate)


class PodcastSearchResult(SelectedFieldsModel):
    """
    A podcast search hit. Degraded hits only carry id, name, publisher and error.
    """

    id: str | None = None
    name: str | None = None
    publisher: str | None = None
    description: str | None = None
    artwork: Artwork | None = None
    feed_url: str | None = None
    itunes_url: str | None = None
    genres: list[str] = Field(default_factory=list)
    primary_genre: str | None = None
    episode_count: int = 0
    country: str | None = None
    language: str | None = None
    release_date: str | None = None
    content_rating: str | None = None
    estimated_listeners: int | None = None
    recent_episodes: list[NormalizedEpisode] = Field(default_factory=list)
    error: str | None = None


# ============================================================================
# Response Models
# These models represent responses from directory operations
# ============================================================================


class PodcastSearchResponse(MCSearchResponse):
    """Model for podcast search response."""

    results: list[PodcastSearchResult] = Field(default_factory=list)  # type: ignore[assignment]
    result_count: int = 0
    query: str
    data_source: str = "iTunes Search"
    data_type: MCType = MCType.PODCAST


class EpisodeSearchResponse(MCSearchResponse):
    """Model for episode search response."""

    results: list[NormalizedEpisode] = Field(default_factory=list)  # type: ignore[assignment]
    result_count: int = 0
    query: str
    podcast_id: str | None = Field(None, description="Podcast the search was scoped to")
    data_source: str = "iTunes Episode Search"
    data_type: MCType = MCType.PODCAST_EPISODE


class PodcastDetailResponse(MCSearchResponse):
    """Model for a single podcast lookup."""

    podcast: NormalizedPodcast | None = None
    podcast_id: str = Field(..., description="Requested collection ID")
    data_source: str = "iTunes Lookup"
    data_type: MCType = MCType.PODCAST


class EpisodeListResponse(MCSearchResponse):
    """Model for a paginated episode listing with analytics over the whole catalogue."""

    podcast_id: str = Field(..., description="Requested collection ID")
    total_episodes: int = 0
    offset: int = 0
    limit: int = 100
    episodes: list[NormalizedEpisode] = Field(default_factory=list)
    analytics: EpisodeAnalytics | None = None
    data_source: str = "iTunes Lookup"
    data_type: MCType = MCType.PODCAST_EPISODE
