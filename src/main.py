"""
Firebase Functions entry points for the podcast insights API.
Each function delegates to the shared PodcastHandler instance.
"""

from firebase_functions import https_fn, options

from api.podcast.handlers import podcast_handler
from utils.config import env_int

options.set_global_options(max_instances=env_int("MAX_INSTANCES", 10))


@https_fn.on_request()
def search_podcasts(req: https_fn.Request) -> https_fn.Response:
    """GET/POST /search_podcasts?query=...&limit=50&country=us&entity=podcast"""
    return podcast_handler.search_podcasts(req)


@https_fn.on_request()
def search_episodes(req: https_fn.Request) -> https_fn.Response:
    """GET /search_episodes?query=...&limit=50&podcast_id=..."""
    return podcast_handler.search_episodes(req)


@https_fn.on_request()
def get_podcast_details(req: https_fn.Request) -> https_fn.Response:
    """GET /get_podcast_details?id=..."""
    return podcast_handler.get_podcast_details(req)


@https_fn.on_request()
def get_podcast_episodes(req: https_fn.Request) -> https_fn.Response:
    """GET /get_podcast_episodes?podcast_id=...&limit=100&offset=0"""
    return podcast_handler.get_podcast_episodes(req)
