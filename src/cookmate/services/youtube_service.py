"""YouTube Data API client that fetches recipe video candidates with their statistics."""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from cookmate.models.video import CandidateVideo
from cookmate.utils.duration import parse_duration
from cookmate.utils.retry import (
    APIRateLimitError,
    MalformedResponseError,
    NetworkError,
    TemporaryServiceError,
)

logger = logging.getLogger(__name__)

DETAIL_PARTS = "statistics,snippet,contentDetails"


def parse_published_at(value: str) -> datetime:
    """Parse a YouTube RFC 3339 timestamp into an aware datetime."""
    published = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


def _translate_http_error(error: HttpError, context: str) -> Exception:
    status = getattr(error.resp, "status", None)
    if status == 429:
        return APIRateLimitError(f"{context}: rate limited ({status})")
    if status == 403 and "quota" in str(error).lower():
        return APIRateLimitError(f"{context}: quota exceeded")
    if status is not None and int(status) >= 500:
        return TemporaryServiceError(f"{context}: YouTube unavailable ({status})")
    return NetworkError(f"{context}: HTTP {status}: {error}")


class YouTubeService:
    """Search the YouTube Data API v3 and resolve per-video details.

    The API key travels as the ``key`` query parameter on every request.
    Clients are kept per thread because the underlying HTTP transport is
    not thread-safe and suggestions are enriched concurrently.
    """

    def __init__(
        self,
        api_key: Optional[str],
        max_results: int = 10,
        http_timeout: float = 10.0,
        client_factory: Optional[Callable[[], object]] = None,
    ):
        self.api_key = api_key
        self.max_results = max_results
        self.http_timeout = http_timeout
        self._client_factory = client_factory or self._build_client
        self._local = threading.local()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_client(self):
        return build(
            "youtube",
            "v3",
            developerKey=self.api_key,
            http=httplib2.Http(timeout=self.http_timeout),
            cache_discovery=False,
        )

    @property
    def client(self):
        client = getattr(self._local, "client", None)
        if client is None:
            client = self._client_factory()
            self._local.client = client
        return client

    def fetch_candidates(
        self,
        search_text: str,
        locale: str,
        max_results: Optional[int] = None,
        deadline: Optional[float] = None,
    ) -> List[CandidateVideo]:
        """Search one locale and return candidates that have full details.

        Hits whose detail lookup fails or comes back empty are dropped.
        Detail lookups stop early once ``deadline`` (monotonic seconds) passes.

        Raises:
            NetworkError, TemporaryServiceError, APIRateLimitError: the search
                request itself failed.
            MalformedResponseError: the search response had an unexpected shape.
        """
        limit = max_results or self.max_results
        logger.debug(f"Searching YouTube [{locale}] for: '{search_text}'")

        try:
            response = self.client.search().list(
                part="snippet",
                q=search_text,
                type="video",
                order="relevance",
                relevanceLanguage=locale,
                maxResults=limit,
            ).execute()
        except HttpError as e:
            raise _translate_http_error(e, f"YouTube search [{locale}]") from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise NetworkError(f"YouTube search [{locale}] failed: {e}") from e

        if not isinstance(response, dict):
            raise MalformedResponseError(f"YouTube search [{locale}] returned {type(response).__name__}")
        items = response.get("items") or []
        if not isinstance(items, list):
            raise MalformedResponseError(f"YouTube search [{locale}] items is not a list")

        candidates = []
        for item in items[:limit]:
            if deadline is not None and time.monotonic() >= deadline:
                logger.info(f"Deadline reached while fetching details [{locale}], keeping {len(candidates)} candidates")
                break

            video_id = None
            if isinstance(item, dict) and isinstance(item.get("id"), dict):
                video_id = item["id"].get("videoId")
            if not video_id:
                logger.debug(f"Skipping search hit without a video id: {item!r}")
                continue

            details = self.fetch_video_details(video_id)
            if details is None:
                continue

            candidate = self._parse_candidate(video_id, item, details, locale)
            if candidate is not None:
                candidates.append(candidate)

        logger.debug(f"YouTube [{locale}] produced {len(candidates)} candidates for '{search_text}'")
        return candidates

    def fetch_video_details(self, video_id: str) -> Optional[Dict]:
        """Fetch statistics, snippet and content details for one video, or None."""
        try:
            response = self.client.videos().list(part=DETAIL_PARTS, id=video_id).execute()
        except (HttpError, OSError, httplib2.HttpLib2Error) as e:
            logger.warning(f"Error getting video details for {video_id}: {e}")
            return None

        items = response.get("items") if isinstance(response, dict) else None
        if not isinstance(items, list) or not items or not isinstance(items[0], dict):
            logger.debug(f"No usable details returned for video {video_id}")
            return None
        return items[0]

    def _parse_candidate(self, video_id: str, item: Dict, details: Dict, locale: str) -> Optional[CandidateVideo]:
        """Merge a search hit and its detail record into a CandidateVideo."""
        try:
            snippet = details.get("snippet") or item.get("snippet") or {}
            statistics = details.get("statistics") or {}
            content = details.get("contentDetails") or {}
            thumbnails = snippet.get("thumbnails") or {}
            thumbnail = thumbnails.get("medium") or thumbnails.get("default") or {}

            return CandidateVideo(
                video_id=video_id,
                title=snippet.get("title", "Unknown Title"),
                channel_title=snippet.get("channelTitle", ""),
                published_at=parse_published_at(snippet["publishedAt"]),
                thumbnail_url=thumbnail.get("url"),
                description=snippet.get("description", ""),
                duration_seconds=parse_duration(content.get("duration")),
                view_count=max(0, int(statistics.get("viewCount", 0) or 0)),
                like_count=max(0, int(statistics.get("likeCount", 0) or 0)),
                locale=locale,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Dropping malformed video record {video_id}: {e}")
            return None
