"""
Podcast-focused Firebase Functions handlers.
Handles podcast search, episode search, podcast details and episode listings.
Handlers exclusively call wrapper methods - no business logic here.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from firebase_functions import https_fn

from api.podcast.wrappers import PodcastWrapper, podcast_wrapper
from contracts.models import MCSearchResponse
from utils.async_runner import run_async
from utils.get_logger import get_logger
from utils.json_encoder import EnhancedJSONEncoder

logger = get_logger(__name__)

NOT_FOUND_ERROR = "Podcast not found"


class ParameterError(ValueError):
    """Raised when a request parameter is missing or malformed."""


def cors_headers(methods: Iterable[str]) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": "Content-Type",
    }


def request_params(req: https_fn.Request) -> dict[str, Any]:
    """Query string arguments, overlaid with a JSON object body on POST."""
    params: dict[str, Any] = dict(req.args.items())
    if req.method == "POST":
        body = req.get_json(silent=True)
        if isinstance(body, Mapping):
            params.update({k: v for k, v in body.items() if v is not None})
    return params


def required_param(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or not str(value).strip():
        raise ParameterError(f"{name} parameter is required")
    return str(value).strip()


def int_param(params: Mapping[str, Any], name: str, default: int, minimum: int = 0) -> int:
    value = params.get(name)
    if value is None or value == "":
        return default
    if isinstance(value, (bool, float)):
        raise ParameterError(f"{name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ParameterError(f"{name} must be an integer") from e
    if number < minimum:
        raise ParameterError(f"{name} must be at least {minimum}")
    return number


class PodcastHandler:
    """Class containing all podcast-focused Firebase Functions."""

    SEARCH_METHODS = ("GET", "POST", "OPTIONS")
    READ_METHODS = ("GET", "OPTIONS")

    def __init__(self, wrapper: PodcastWrapper | None = None):
        """Initialize Podcast handler. All upstream access handled by wrapper."""
        self.wrapper = wrapper or podcast_wrapper
        logger.info("PodcastHandler initialized")

    # ---------- Response helpers ----------

    def _json_response(
        self, payload: Any, status: int, methods: Iterable[str]
    ) -> https_fn.Response:
        headers = {"Content-Type": "application/json", **cors_headers(methods)}
        return https_fn.Response(
            json.dumps(payload, cls=EnhancedJSONEncoder), status=status, headers=headers
        )

    def _preflight(
        self, req: https_fn.Request, methods: tuple[str, ...]
    ) -> https_fn.Response | None:
        """Answer OPTIONS and disallowed methods; None means the request may proceed."""
        if req.method == "OPTIONS":
            return https_fn.Response("", status=200, headers=cors_headers(methods))
        if req.method not in methods:
            return self._json_response(
                {"error": f"Method {req.method} not allowed"}, 405, methods
            )
        return None

    def _error_response(
        self, response: MCSearchResponse, failure: str, methods: Iterable[str]
    ) -> https_fn.Response:
        if response.status_code == 404:
            return self._json_response({"error": NOT_FOUND_ERROR}, 404, methods)
        return self._json_response(
            {"error": failure, "message": response.error or "Unknown error"},
            response.status_code if response.status_code >= 400 else 500,
            methods,
        )

    # ---------- Endpoints ----------

    def search_podcasts(self, req: https_fn.Request) -> https_fn.Response:
        """
        Search podcasts in the directory, each hit enriched with recent episodes.

        Usage:
        GET /search_podcasts?query=true%20crime&limit=20&country=us
        POST /search_podcasts {"query": "true crime", "limit": 20}
        """
        methods = self.SEARCH_METHODS
        early = self._preflight(req, methods)
        if early is not None:
            return early

        try:
            params = request_params(req)
            query = required_param(params, "query")
            limit = int_param(params, "limit", 50, minimum=1)
            country = str(params.get("country") or "us")
            entity = str(params.get("entity") or "podcast")

            response = run_async(
                self.wrapper.search_podcasts(
                    query=query, limit=limit, country=country, entity=entity
                )
            )
            if not response.ok:
                logger.error(f"Error searching podcasts for '{query}': {response.error}")
                return self._error_response(response, "Failed to search podcasts", methods)

            logger.info(
                f"Successfully searched podcasts for '{query}': {response.result_count} results"
            )
            return self._json_response(
                {
                    "results": response.results,
                    "result_count": response.result_count,
                    "query": response.query,
                },
                200,
                methods,
            )

        except ParameterError as pe:
            return self._json_response({"error": str(pe)}, 400, methods)
        except Exception as e:
            logger.error(f"Error in search_podcasts function: {e}", exc_info=True)
            return self._json_response(
                {"error": "Failed to search podcasts", "message": str(e)}, 500, methods
            )

    def search_episodes(self, req: https_fn.Request) -> https_fn.Response:
        """
        Search episodes across the directory, or inside one podcast.

        Usage:
        GET /search_episodes?query=interview&limit=25
        GET /search_episodes?query=interview&podcast_id=1200361736
        """
        methods = self.READ_METHODS
        early = self._preflight(req, methods)
        if early is not None:
            return early

        try:
            params = request_params(req)
            query = required_param(params, "query")
            limit = int_param(params, "limit", 50, minimum=1)
            podcast_id = params.get("podcast_id") or None

            response = run_async(
                self.wrapper.search_episodes(query=query, limit=limit, podcast_id=podcast_id)
            )
            if not response.ok:
                logger.error(f"Error searching episodes for '{query}': {response.error}")
                return self._error_response(response, "Failed to search episodes", methods)

            return self._json_response(
                {
                    "results": response.results,
                    "result_count": response.result_count,
                    "query": response.query,
                    "podcast_id": response.podcast_id,
                },
                200,
                methods,
            )

        except ParameterError as pe:
            return self._json_response({"error": str(pe)}, 400, methods)
        except Exception as e:
            logger.error(f"Error in search_episodes function: {e}", exc_info=True)
            return self._json_response(
                {"error": "Failed to search episodes", "message": str(e)}, 500, methods
            )

    def get_podcast_details(self, req: https_fn.Request) -> https_fn.Response:
        """
        Get a podcast's detail record with episode insights and estimates.

        Usage:
        GET /get_podcast_details?id=1200361736
        GET /get_podcast_details/1200361736
        """
        methods = self.READ_METHODS
        early = self._preflight(req, methods)
        if early is not None:
            return early

        try:
            params = request_params(req)
            if not params.get("id"):
                # Fall back to a trailing numeric path segment
                segment = (req.path or "").rstrip("/").rsplit("/", 1)[-1]
                if segment.isdigit():
                    params["id"] = segment
            podcast_id = required_param(params, "id")

            response = run_async(self.wrapper.get_podcast_details(podcast_id=podcast_id))
            if not response.ok or response.podcast is None:
                if response.ok:
                    return self._json_response({"error": NOT_FOUND_ERROR}, 404, methods)
                logger.error(f"Error fetching podcast {podcast_id}: {response.error}")
                return self._error_response(response, "Failed to fetch podcast details", methods)

            return self._json_response(response.podcast, 200, methods)

        except ParameterError as pe:
            return self._json_response({"error": str(pe)}, 400, methods)
        except Exception as e:
            logger.error(f"Error in get_podcast_details function: {e}", exc_info=True)
            return self._json_response(
                {"error": "Failed to fetch podcast details", "message": str(e)}, 500, methods
            )

    def get_podcast_episodes(self, req: https_fn.Request) -> https_fn.Response:
        """
        Get a page of a podcast's episodes plus publishing analytics.

        Usage:
        GET /get_podcast_episodes?podcast_id=1200361736&limit=20&offset=40
        """
        methods = self.READ_METHODS
        early = self._preflight(req, methods)
        if early is not None:
            return early

        try:
            params = request_params(req)
            podcast_id = required_param(params, "podcast_id")
            limit = int_param(params, "limit", 100, minimum=1)
            offset = int_param(params, "offset", 0, minimum=0)

            response = run_async(
                self.wrapper.get_podcast_episodes(
                    podcast_id=podcast_id, limit=limit, offset=offset
                )
            )
            if not response.ok:
                logger.error(f"Error fetching episodes for podcast {podcast_id}: {response.error}")
                return self._error_response(response, "Failed to fetch podcast episodes", methods)

            return self._json_response(
                {
                    "podcast_id": response.podcast_id,
                    "total_episodes": response.total_episodes,
                    "offset": response.offset,
                    "limit": response.limit,
                    "episodes": response.episodes,
                    "analytics": response.analytics,
                },
                200,
                methods,
            )

        except ParameterError as pe:
            return self._json_response({"error": str(pe)}, 400, methods)
        except Exception as e:
            logger.error(f"Error in get_podcast_episodes function: {e}", exc_info=True)
            return self._json_response(
                {"error": "Failed to fetch podcast episodes", "message": str(e)}, 500, methods
            )


podcast_handler = PodcastHandler()

search_podcasts = podcast_handler.search_podcasts
search_episodes = podcast_handler.search_episodes
get_podcast_details = podcast_handler.get_podcast_details
get_podcast_episodes = podcast_handler.get_podcast_episodes
