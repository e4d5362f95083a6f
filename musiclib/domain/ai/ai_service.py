"""Thin client for the external AI recommendation service.

Every failure, whatever its cause, leaves this module as an ``AppError`` so
routes only ever deal with one error shape.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from musiclib.domain.errors import AppError, ErrorKind, UpstreamError
from musiclib.observability import record_ai_request

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


def _error_message(response: requests.Response) -> str:
    default = f"AI API returned error status {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return response.text or default
    if isinstance(data, dict):
        return data.get('error') or data.get('message') or default
    return default


class AIService:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = session or requests.Session()

    def _post(self, endpoint: str, body: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self._session.post(url, json=body, timeout=self.timeout)
        except requests.Timeout as exc:
            raise UpstreamError(
                'AI API request timeout. The service took too long to respond.',
                kind=ErrorKind.GATEWAY_TIMEOUT,
            ) from exc
        except requests.ConnectionError as exc:
            raise UpstreamError(
                f"AI API service unavailable. Could not connect to {self.base_url}",
                kind=ErrorKind.SERVICE_UNAVAILABLE,
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError(
                f"Failed to connect to AI API: {exc or 'Unknown error'}",
                kind=ErrorKind.SERVICE_UNAVAILABLE,
            ) from exc

        status = response.status_code
        if not 200 <= status < 300:
            message = f"AI API error: {_error_message(response)}"
            if 400 <= status < 500:
                raise UpstreamError(message, kind=ErrorKind.UPSTREAM_CLIENT, status_code=status)
            raise UpstreamError(message, kind=ErrorKind.BAD_GATEWAY)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"AI API returned invalid JSON response: {exc}",
                kind=ErrorKind.BAD_GATEWAY,
            ) from exc

    def _call(self, operation: str, action: str, endpoint: str, body: Dict[str, Any]) -> Any:
        started = time.perf_counter()
        try:
            result = self._post(endpoint, body)
        except AppError as exc:
            record_ai_request(operation, exc.kind.value, time.perf_counter() - started)
            logger.warning("AI %s failed (%s): %s", operation, exc.kind.value, exc.message)
            raise
        except Exception as exc:
            record_ai_request(operation, ErrorKind.INTERNAL.value, time.perf_counter() - started)
            logger.exception("AI %s failed unexpectedly", operation)
            raise AppError(f"Failed to {action}: {exc or 'Unknown error'}") from exc

        record_ai_request(operation, 'success', time.perf_counter() - started)
        return result

    def describe_playlist(self, songs: List[dict]) -> Any:
        return self._call(
            'describe_playlist', 'describe playlist', '/describe-playlist', {'songs': songs}
        )

    def recommend_songs(self, current_songs: List[dict], number_of_recommendations: int) -> Any:
        return self._call(
            'recommend_songs',
            'get song recommendations',
            '/recommend-songs',
            {
                'current_songs': current_songs,
                'number_of_recommendations': number_of_recommendations,
            },
        )

    def generate_playlist_name(self, songs: List[dict], style: str) -> Any:
        return self._call(
            'generate_playlist_name',
            'generate playlist name',
            '/generate-name',
            {'songs': songs, 'style': style},
        )

    def analyze_mood(self, songs: List[dict]) -> Any:
        return self._call('analyze_mood', 'analyze mood', '/analyze-mood', {'songs': songs})

    def semantic_search(self, query: str, limit: int) -> Any:
        return self._call(
            'semantic_search',
            'perform semantic search',
            '/semantic-search',
            {'query': query, 'limit': limit},
        )
