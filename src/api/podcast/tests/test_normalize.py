"""
Tests for the episode and podcast normalizers.
"""

import pytest

from api.podcast.models import Artwork, NormalizedPodcast, PodcastSearchResult, RawEpisode
from api.podcast.normalize import (
    COMPACT_DESCRIPTION_LENGTH,
    PARTIAL_DATA_ERROR,
    EpisodeProfile,
    degraded_search_result,
    normalize_episode,
    normalize_podcast,
    normalize_search_result,
)

pytestmark = pytest.mark.unit

BASE_FIELDS = {"id", "title", "description", "release_date", "duration_ms", "duration_formatted", "url"}


class TestNormalizeEpisode:
    """Tests for normalize_episode profiles."""

    def test_search_profile(self, search_episodes_results):
        episode = normalize_episode(search_episodes_results[0], EpisodeProfile.SEARCH)

        assert episode.id == "1000650000003"
        assert episode.podcast_id == "1200361736"
        assert episode.podcast_name == "Case Files Weekly"
        assert episode.podcast_publisher == "Crime Desk Media"
        assert episode.duration_formatted == "1:02:05"
        assert episode.audio_url == "https://audio.example.com/casefiles/episode-3.mp3"
        assert episode.artwork == Artwork(
            small="https://is1-ssl.mzstatic.com/image/thumb/casefiles/ep3/60x60bb.jpg",
            medium="https://is1-ssl.mzstatic.com/image/thumb/casefiles/ep3/160x160bb.jpg",
            large="https://is1-ssl.mzstatic.com/image/thumb/casefiles/ep3/600x600bb.jpg",
        )
        assert episode.content_rating == "Explicit"
        assert episode.country == "USA"
        assert episode.genres == ["True Crime"]

    def test_search_profile_falls_back_to_preview_audio(self, search_episodes_results):
        episode = normalize_episode(search_episodes_results[1], EpisodeProfile.SEARCH)

        assert episode.audio_url == "https://audio.example.com/comedyhour/alibis-preview.mp3"
        assert episode.duration_formatted == "1:05"
        assert episode.artwork.small is None

    def test_catalog_profile_is_slim(self, raw_episodes):
        episode = normalize_episode(raw_episodes[0], EpisodeProfile.CATALOG)
        data = episode.model_dump()

        assert set(data) == BASE_FIELDS | {"audio_url", "artwork"}
        assert data["artwork"] == "https://is1-ssl.mzstatic.com/image/thumb/casefiles/ep12/600x600bb.jpg"
        assert data["audio_url"] == "https://audio.example.com/casefiles/episode-12.mp3"
        assert data["duration_formatted"] == "1:00:00"

    def test_catalog_artwork_prefers_600_then_160(self):
        episode = normalize_episode({"artworkUrl160": "medium.jpg"}, EpisodeProfile.CATALOG)
        assert episode.artwork == "medium.jpg"

    def test_summary_profile(self, raw_episodes):
        data = normalize_episode(raw_episodes[1], EpisodeProfile.SUMMARY).model_dump()

        assert set(data) == BASE_FIELDS
        assert data["title"] == "Episode 11: Missing on Route 9"
        assert data["duration_formatted"] == "40:00"

    def test_profile_by_value(self, raw_episodes):
        assert normalize_episode(raw_episodes[0], "summary") == normalize_episode(
            raw_episodes[0], EpisodeProfile.SUMMARY
        )

    def test_description_limit(self, raw_episodes):
        episode = normalize_episode(
            raw_episodes[0], EpisodeProfile.SUMMARY, description_limit=COMPACT_DESCRIPTION_LENGTH
        )

        assert len(episode.description) == 200
        assert raw_episodes[0]["description"].startswith(episode.description)

    def test_missing_description_with_limit_is_empty(self):
        episode = normalize_episode({}, EpisodeProfile.SUMMARY, description_limit=200)
        assert episode.description == ""

    @pytest.mark.parametrize("raw", [None, "episode", 12, {}, {"trackTimeMillis": -100}])
    def test_never_raises(self, raw):
        episode = normalize_episode(raw, EpisodeProfile.SEARCH)

        assert episode.id is None
        assert episode.duration_formatted == "0:00"
        assert episode.genres == []

    def test_oversized_duration_is_dropped(self):
        episode = normalize_episode({"trackId": 1, "trackTimeMillis": 10**400}, EpisodeProfile.SEARCH)

        assert episode.duration_ms is None
        assert episode.duration_formatted == "0:00"

    def test_accepts_raw_episode(self, raw_episodes):
        raw = RawEpisode.from_upstream(raw_episodes[0])
        assert normalize_episode(raw) == normalize_episode(raw_episodes[0])


class TestNormalizePodcast:
    """Tests for normalize_podcast."""

    def test_fixture_podcast(self, collection, raw_episodes):
        podcast = normalize_podcast(collection, raw_episodes)

        assert isinstance(podcast, NormalizedPodcast)
        assert podcast.id == "1200361736"
        assert podcast.name == "Case Files Weekly"
        assert podcast.publisher == "Crime Desk Media"
        assert podcast.artwork.url_600.endswith("600x600bb.jpg")
        assert podcast.metadata.feed_url == "https://feeds.example.com/casefiles"
        assert podcast.metadata.itunes_id == 1200361736
        assert podcast.metadata.author == "Crime Desk Media"
        assert podcast.metadata.copyright is None
        assert podcast.categories.genres == ["True Crime", "Podcasts"]
        assert podcast.categories.primary_genre == "True Crime"
        assert podcast.stats.episode_count == 100
        assert podcast.stats.latest_episode_date == "2024-03-25T08:00:00Z"
        assert podcast.stats.explicit is True
        assert podcast.stats.language == "en"

    def test_episode_insights_use_detail_profile(self, collection, raw_episodes):
        insights = normalize_podcast(collection, raw_episodes).episode_insights

        assert insights.total_episodes == 12
        assert insights.average_duration_minutes == 50
        assert insights.average_days_between_episodes == 7
        assert insights.publishing_frequency == "weekly"

    def test_recent_episodes_are_compact(self, collection, raw_episodes):
        podcast = normalize_podcast(collection, raw_episodes)

        assert len(podcast.recent_episodes) == 10
        assert podcast.recent_episodes[0].id == "1000650000012"
        assert len(podcast.recent_episodes[0].description) == 200
        assert set(podcast.recent_episodes[0].model_dump()) == BASE_FIELDS

    def test_estimated_metrics_use_fetched_episode_count(self, collection, raw_episodes):
        metrics = normalize_podcast(collection, raw_episodes).estimated_metrics

        # 5000 * 2.5 * log10(13)
        assert metrics.estimated_weekly_listeners == 13924
        assert metrics.estimated_downloads_per_episode == 9746
        assert metrics.confidence == "low"

    def test_no_episodes(self, collection):
        podcast = normalize_podcast({**collection, "trackCount": None}, [])

        assert podcast.episode_insights is None
        assert podcast.recent_episodes == []
        assert podcast.stats.episode_count == 0
        assert podcast.stats.latest_episode_date is None
        assert podcast.estimated_metrics.estimated_weekly_listeners == 0

    def test_episode_count_falls_back_to_fetched(self, collection, raw_episodes):
        podcast = normalize_podcast({**collection, "trackCount": "many"}, raw_episodes[:3])
        assert podcast.stats.episode_count == 3

    def test_recent_limit(self, collection, raw_episodes):
        assert len(normalize_podcast(collection, raw_episodes, recent_limit=2).recent_episodes) == 2

    def test_junk_input(self):
        podcast = normalize_podcast(None, None)

        assert podcast.id is None
        assert podcast.episode_insights is None
        assert podcast.stats.language == "en"
        assert podcast.estimated_metrics.note


class TestNormalizeSearchResult:
    """Tests for normalize_search_result and degraded_search_result."""

    def test_enriched_result(self, search_podcasts_results, lookup_results):
        result = normalize_search_result(search_podcasts_results[0], lookup_results)

        assert isinstance(result, PodcastSearchResult)
        assert result.id == "1200361736"
        assert result.artwork.medium.endswith("100x100bb.jpg")
        assert result.itunes_url.startswith("https://podcasts.apple.com/")
        assert result.episode_count == 100
        assert result.content_rating == "Explicit"
        assert result.estimated_listeners == 30000
        assert [e.id for e in result.recent_episodes] == [
            "1000650000012",
            "1000650000011",
            "1000650000010",
            "1000650000009",
            "1000650000008",
        ]
        assert "error" not in result.model_dump()

    def test_sparse_result_defaults(self, search_podcasts_results):
        result = normalize_search_result(search_podcasts_results[2], [])

        assert result.content_rating == "clean"
        assert result.episode_count == 0
        assert result.estimated_listeners == 4000
        assert result.language == "en"
        assert result.recent_episodes == []

    def test_oversized_track_count(self):
        result = normalize_search_result({"collectionId": 1, "trackCount": 10**400}, [])

        assert result.episode_count == 0
        assert result.estimated_listeners == 4000

    def test_genres_follow_genre_ids(self, search_podcasts_results):
        result = normalize_search_result(search_podcasts_results[0], [])
        assert result.genres == ["True Crime", "Podcasts"]

    @pytest.mark.parametrize(
        "podcast,expected",
        [
            ({"collectionId": 1, "genres": ["Comedy", "Podcasts"]}, []),
            ({"collectionId": 1, "genreIds": ["1303"], "genres": ["Comedy", "Podcasts"]}, ["Comedy"]),
            ({"collectionId": 1, "genreIds": ["1303", "26"], "genres": ["Comedy"]}, ["Comedy"]),
        ],
    )
    def test_genres_without_matching_ids(self, podcast, expected):
        assert normalize_search_result(podcast, []).genres == expected

    def test_lookup_without_episodes(self, search_podcasts_results, collection):
        result = normalize_search_result(search_podcasts_results[1], [collection])

        assert result.recent_episodes == []
        assert result.estimated_listeners == 60000

    def test_degraded_result(self, search_podcasts_results):
        result = degraded_search_result(search_podcasts_results[1])

        assert result.model_dump() == {
            "id": "1470001234",
            "name": "Crime Scene Comedy Hour",
            "publisher": "Laugh Track Studios",
            "error": PARTIAL_DATA_ERROR,
        }
