from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Union

import pytest

from cookmate.models.video import CandidateVideo

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_candidate(
    video_id: str = "vid001",
    *,
    like_count: int = 1000,
    view_count: int = 10000,
    age_days: float = 0,
    duration_seconds: int = 600,
    locale: str = "en",
) -> CandidateVideo:
    return CandidateVideo(
        video_id=video_id,
        title=f"Recipe {video_id}",
        channel_title="Test Kitchen",
        published_at=NOW - timedelta(days=age_days),
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg",
        description="A tasty test recipe.",
        duration_seconds=duration_seconds,
        view_count=view_count,
        like_count=like_count,
        locale=locale,
    )


class FakeYouTubeService:
    """Stands in for YouTubeService; returns canned candidates per locale."""

    def __init__(
        self,
        by_locale: Optional[Dict[str, Union[List[CandidateVideo], Exception]]] = None,
        configured: bool = True,
    ):
        self.by_locale = by_locale or {}
        self.configured = configured
        self.calls: List[tuple] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def fetch_candidates(self, search_text, locale, max_results=None, deadline=None):
        self.calls.append((search_text, locale))
        result = self.by_locale.get(locale, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture(autouse=True)
def _no_retry_sleep(monkeypatch):
    monkeypatch.setattr("cookmate.utils.retry.time.sleep", lambda _seconds: None)
