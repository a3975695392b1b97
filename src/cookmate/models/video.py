"""Video-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from urllib.parse import quote_plus

SEARCH_SUFFIX = " recipe cooking"


@dataclass(frozen=True)
class SearchQuery:
    """A video search term paired with the user's preferred language."""

    term: str
    preferred_language: str = "English"

    @property
    def search_text(self) -> str:
        """Query text actually sent to the video index."""
        return f"{self.term}{SEARCH_SUFFIX}"


@dataclass
class CandidateVideo:
    """A YouTube search hit enriched with its statistics and content details."""

    video_id: str
    title: str
    channel_title: str
    published_at: datetime
    thumbnail_url: Optional[str]
    description: str
    duration_seconds: int
    view_count: int
    like_count: int
    locale: str

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"


@dataclass
class ScoredCandidate:
    """A candidate video with its composite relevance score."""

    video: CandidateVideo
    score: float


@dataclass
class DirectVideo:
    """Selection outcome pointing at one concrete video."""

    candidate: ScoredCandidate

    def to_dict(self) -> dict:
        video = self.candidate.video
        return {
            'type': 'direct_video',
            'video_id': video.video_id,
            'url': video.url,
            'title': video.title,
            'channel_title': video.channel_title,
            'published_at': video.published_at.isoformat(),
            'thumbnail': video.thumbnail_url,
            'description': video.description,
            'language': video.locale,
            'duration_seconds': video.duration_seconds,
            'statistics': {
                'view_count': video.view_count,
                'like_count': video.like_count,
            },
            'score': self.candidate.score,
        }


@dataclass
class SearchLinkFallback:
    """Selection outcome linking to a YouTube results page instead of a video."""

    url: str
    title: str
    reason: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def for_query(cls, query: SearchQuery, reason: Optional[str] = None,
                  error: Optional[str] = None) -> 'SearchLinkFallback':
        return cls(
            url=f"https://www.youtube.com/results?search_query={quote_plus(query.search_text)}",
            title=f"Search: {query.term} recipe",
            reason=reason,
            error=error,
        )

    def to_dict(self) -> dict:
        data = {'type': 'search_link', 'url': self.url, 'title': self.title}
        if self.reason:
            data['reason'] = self.reason
        if self.error:
            data['error'] = self.error
        return data


SelectionResult = Union[DirectVideo, SearchLinkFallback]
