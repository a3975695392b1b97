"""Ranking and selection of the best recipe video for a suggestion."""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from cookmate.models.video import (
    CandidateVideo,
    DirectVideo,
    ScoredCandidate,
    SearchLinkFallback,
    SearchQuery,
    SelectionResult,
)
from cookmate.services.youtube_service import YouTubeService
from cookmate.utils.languages import resolve_language_codes
from cookmate.utils.retry import MalformedResponseError, RetryableError

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

REASON_CONFIGURATION_ABSENT = "configuration absent"
REASON_NO_VIDEOS = "no suitable videos found"
REASON_DEADLINE = "deadline exceeded"


def duration_bonus(duration_seconds: int) -> float:
    """Bonus for typical recipe video lengths: 5-20 min ideal, 3-30 min acceptable."""
    if 300 <= duration_seconds <= 1200:
        return 5.0
    if 180 <= duration_seconds <= 1800:
        return 2.0
    return 0.0


def recency_score(published_at: datetime, now: datetime) -> float:
    """Score from 100 for brand-new videos, decaying linearly to 0 at about five years."""
    days_since = (now - published_at).total_seconds() / SECONDS_PER_DAY
    return max(0.0, 100 - (days_since / 365) * 20)


def score_video(
    candidate: CandidateVideo,
    preferred_codes: Sequence[str],
    candidate_locale: str,
    now: datetime,
) -> float:
    """Composite relevance score, dominated by likes.

    Likes and views are log-scaled so huge channels do not swamp the
    recency, language and duration signals entirely.
    """
    score = 0.0

    if candidate.like_count > 0:
        score += math.log10(candidate.like_count) * 10

    if candidate.view_count > 0:
        score += math.log10(candidate.view_count) * 0.5

    score += recency_score(candidate.published_at, now) * 0.1

    if preferred_codes and candidate_locale == preferred_codes[0]:
        score += 5

    score += duration_bonus(candidate.duration_seconds)

    return score


class VideoSelector:
    """Pick the single best video for a query across all of a language's locales.

    Every locale is searched even after a good match is found, so a
    better-liked video in the fallback locale can still win. On exact
    score ties the earlier locale keeps the slot.
    """

    def __init__(
        self,
        youtube_service: YouTubeService,
        max_results: int = 10,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.youtube_service = youtube_service
        self.max_results = max_results
        self.clock = clock

    def select(self, query: SearchQuery, deadline: Optional[float] = None) -> SelectionResult:
        """Return a DirectVideo for the best candidate or a SearchLinkFallback. Never raises."""
        try:
            return self._select(query, deadline)
        except Exception as e:
            logger.error(f"Video selection failed for '{query.term}': {e}")
            return SearchLinkFallback.for_query(query, error=str(e))

    def _select(self, query: SearchQuery, deadline: Optional[float]) -> SelectionResult:
        if not self.youtube_service.is_configured:
            logger.warning("YouTube API key not found, falling back to search link")
            return SearchLinkFallback.for_query(query, reason=REASON_CONFIGURATION_ABSENT)

        locale_codes = resolve_language_codes(query.preferred_language)
        now = self.clock()

        best: Optional[ScoredCandidate] = None
        best_score = -math.inf
        timed_out = False

        for locale in locale_codes:
            if self._expired(deadline):
                timed_out = True
                break

            candidates = self._fetch_locale(query, locale, deadline)
            for candidate in candidates:
                score = score_video(candidate, locale_codes, candidate.locale, now)
                if score > best_score:
                    best_score = score
                    best = ScoredCandidate(video=candidate, score=score)

        if best is not None:
            logger.info(
                f"Selected video {best.video.video_id} [{best.video.locale}] "
                f"for '{query.term}' with score {best.score:.2f}"
            )
            return DirectVideo(best)

        reason = REASON_DEADLINE if timed_out else REASON_NO_VIDEOS
        logger.info(f"No video selected for '{query.term}': {reason}")
        return SearchLinkFallback.for_query(query, reason=reason)

    def _fetch_locale(self, query: SearchQuery, locale: str, deadline: Optional[float]) -> List[CandidateVideo]:
        """Candidates for one locale; a failing locale counts as empty."""
        try:
            return self.youtube_service.fetch_candidates(
                query.search_text, locale, max_results=self.max_results, deadline=deadline
            )
        except (RetryableError, MalformedResponseError) as e:
            logger.warning(f"Error searching YouTube in language {locale}: {e}")
            return []
        except Exception as e:
            logger.warning(f"Unexpected error searching YouTube in language {locale}: {e}", exc_info=True)
            return []

    @staticmethod
    def _expired(deadline: Optional[float]) -> bool:
        return deadline is not None and time.monotonic() >= deadline
