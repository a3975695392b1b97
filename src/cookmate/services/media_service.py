"""Attach video and image links to generated meal suggestions."""

import asyncio
import logging
import re
from typing import Dict, List, Optional
from urllib.parse import quote

from cookmate.models.video import SearchLinkFallback, SearchQuery
from cookmate.services.video_selector import VideoSelector

logger = logging.getLogger(__name__)


def _slug(text: str) -> str:
    return quote(re.sub(r'\s+', '-', text).lower(), safe='')


def generate_image_link(search_term: str) -> str:
    """Unsplash source URL for a food image search term."""
    return f"https://source.unsplash.com/800x600/?{_slug(search_term)},food"


def generate_fallback_image(dish_name: str) -> str:
    """Placeholder image URL labelled with the dish name."""
    return f"https://via.placeholder.com/800x600/FF6B6B/FFFFFF?text={_slug(dish_name)}"


class SuggestionEnricher:
    """Adds ``media`` and ``meal_type`` to suggestions parsed from the AI response."""

    def __init__(self, selector: VideoSelector):
        self.selector = selector

    def enrich(
        self,
        suggestion: Dict,
        preferred_language: str,
        meal_type: str,
        deadline: Optional[float] = None,
    ) -> Dict:
        """Return a copy of ``suggestion`` with media links attached.

        The suggestion is always returned; if enrichment blows up it carries
        a search-link video and an ``enrichment_error`` instead.
        """
        name = str(suggestion.get('name') or 'recipe')
        search_terms = suggestion.get('searchTerms')
        if not isinstance(search_terms, dict):
            search_terms = {}
        video_term = search_terms.get('youtube') or name
        image_term = search_terms.get('image') or name
        query = SearchQuery(term=video_term, preferred_language=preferred_language)

        enriched = dict(suggestion)
        enriched['meal_type'] = meal_type

        try:
            video = self.selector.select(query, deadline=deadline)
            enriched['media'] = {
                'youtube_video': video.to_dict(),
                'image_url': generate_image_link(image_term),
                'fallback_image': generate_fallback_image(name),
            }
        except Exception as e:
            logger.error(f"Enrichment failed for '{name}': {e}")
            enriched['media'] = {
                'youtube_video': SearchLinkFallback.for_query(query, error=str(e)).to_dict(),
                'image_url': None,
                'fallback_image': generate_fallback_image(name),
            }
            enriched['enrichment_error'] = 'enrichment failed'

        return enriched

    async def enrich_all(
        self,
        suggestions: List[Dict],
        preferred_language: str,
        meal_type: str,
        deadline: Optional[float] = None,
    ) -> List[Dict]:
        """Enrich suggestions concurrently, preserving their order.

        ``deadline`` (monotonic seconds) bounds the whole batch; selectors
        stop searching and return what they have once it passes.
        """
        loop = asyncio.get_running_loop()
        tasks = [
            loop.run_in_executor(None, self.enrich, suggestion, preferred_language, meal_type, deadline)
            for suggestion in suggestions
        ]
        return list(await asyncio.gather(*tasks))
