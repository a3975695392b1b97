"""Central orchestrator turning user preferences into enriched meal suggestions."""

import asyncio
import logging
import time
from datetime import datetime, timezone
from functools import partial
from typing import Dict, List, Optional

from cookmate.models.preferences import UserPreferences
from cookmate.services.ai_service import AIService, parse_suggestions
from cookmate.services.media_service import SuggestionEnricher
from cookmate.services.video_selector import VideoSelector
from cookmate.services.youtube_service import YouTubeService
from cookmate.utils.config import load_config, validate_config
from cookmate.utils.retry import DeadlineExceededError

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MealSuggestionProcessor:
    """Generates suggestions per meal type and enriches them with media."""

    def __init__(
        self,
        config: Optional[Dict] = None,
        ai_service: Optional[AIService] = None,
        youtube_service: Optional[YouTubeService] = None,
    ):
        """Initialize the processor with configuration.

        Services can be injected; otherwise they are built from ``config``.
        """
        self.config = config or load_config()

        if ai_service is None:
            config_errors = validate_config(self.config)
            if config_errors:
                error_msg = "Configuration errors: " + "; ".join(config_errors)
                logger.error(error_msg)
                raise ValueError(error_msg)

            model_names = [self.config.get("gemini_model", "gemini-2.0-flash-001")]
            model_names += [
                name for name in self.config.get("gemini_fallback_models", []) if name not in model_names
            ]
            ai_service = AIService(self.config.get("gemini_api_key"), model_names)
        self.ai_service = ai_service

        max_results = self.config.get("youtube_max_results", 10)
        if youtube_service is None:
            youtube_service = YouTubeService(
                self.config.get("youtube_api_key"),
                max_results=max_results,
                http_timeout=self.config.get("youtube_http_timeout_seconds", 10.0),
            )
        if not youtube_service.is_configured:
            logger.warning("YOUTUBE_API_KEY not set, suggestions will carry search links only")
        self.youtube_service = youtube_service

        self.selector = VideoSelector(youtube_service, max_results=max_results)
        self.enricher = SuggestionEnricher(self.selector)
        self.request_timeout = self.config.get("request_timeout_seconds", 60.0)

        logger.info("Meal suggestion processor initialized")

    async def generate_meal_suggestions(
        self,
        preferences: UserPreferences,
        selected_meals: Optional[List[str]] = None,
    ) -> Dict:
        """Generate enriched suggestions for each selected meal type.

        Never raises for generation failures; those come back as
        ``{"success": False, "error": ...}``.
        """
        start_time = time.time()
        deadline = time.monotonic() + self.request_timeout if self.request_timeout else None
        meals = selected_meals if selected_meals is not None else preferences.selected_meals()

        try:
            suggestions = {}
            for meal_type in meals:
                if not getattr(preferences, meal_type, False):
                    logger.warning(f"{meal_type} not selected by user, skipping...")
                    continue
                suggestions[meal_type] = await self._generate_for_meal(preferences, meal_type, deadline)

            logger.info(
                f"Generated suggestions for {len(suggestions)} meals in {time.time() - start_time:.1f}s"
            )
            return {
                "success": True,
                "data": suggestions,
                "user_info": {
                    "name": preferences.name,
                    "cook_name": preferences.cook_name,
                    "preferred_language": preferences.preferred_language,
                },
            }

        except Exception as e:
            logger.error(f"Error generating meal suggestions: {e}")
            return {
                "success": False,
                "error": str(e) or "Failed to generate meal suggestions",
                "data": None,
            }

    async def _generate_for_meal(
        self, preferences: UserPreferences, meal_type: str, deadline: Optional[float]
    ) -> Dict:
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(
                None, partial(self.ai_service.generate_meal_text, preferences, meal_type, deadline=deadline)
            )
        except DeadlineExceededError as e:
            logger.warning(f"Skipping {meal_type}: {e}")
            return {
                "suggestions": [],
                "error": "Request deadline exceeded",
            }

        try:
            parsed = parse_suggestions(text)
        except ValueError as e:
            logger.error(f"Error parsing Gemini response for {meal_type}: {e}")
            return {
                "suggestions": [],
                "error": "Failed to parse AI response",
                "raw_response": text,
            }

        enriched = await self.enricher.enrich_all(
            parsed, preferences.preferred_language, meal_type, deadline=deadline
        )
        return {
            "suggestions": enriched,
            "total_count": len(enriched),
            "generated_at": _utc_now_iso(),
        }
