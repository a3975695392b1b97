"""AI service for meal suggestion generation using Google GenAI."""

import json
import logging
import re
import threading
import time
from typing import Dict, List, Optional

from google.genai import Client
from google.genai import errors
from google.genai import types

from cookmate.models.preferences import UserPreferences
from cookmate.utils.retry import (
    APIRateLimitError,
    DeadlineExceededError,
    TemporaryServiceError,
    classify_api_error,
    retry_api_call,
)

logger = logging.getLogger(__name__)

SUGGESTIONS_PER_MEAL = 3


class GenerationError(Exception):
    """Raised when no model could produce suggestions."""
    pass


class ModelUnavailableError(Exception):
    """The requested model does not exist or is not served to this key."""


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fences from AI response text."""
    text = text.strip()
    if text.startswith('```json'):
        text = text[7:]
    elif text.startswith('```'):
        text = text[3:]
    if text.endswith('```'):
        text = text[:-3]
    return text.strip()


def parse_suggestions(response_text: str) -> List[Dict]:
    """Extract the ``suggestions`` list from a Gemini response.

    Gemini sometimes wraps the JSON in prose or code fences, so the
    outermost ``{...}`` block is used.

    Raises:
        ValueError: no JSON object found, or it has no suggestions list.
    """
    text = strip_markdown_code_blocks(response_text or '')
    match = re.search(r'\{[\s\S]*\}', text)
    if not match:
        raise ValueError("No valid JSON found in response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in response: {e}") from e

    suggestions = parsed.get('suggestions') if isinstance(parsed, dict) else None
    if not isinstance(suggestions, list):
        raise ValueError("Response JSON has no suggestions list")

    return [suggestion for suggestion in suggestions if isinstance(suggestion, dict)]


def build_prompt(preferences: UserPreferences, meal_type: str) -> str:
    """Build the chef-assistant prompt for one meal type."""
    language = preferences.preferred_language
    diet = preferences.dietary_preference
    cuisines = ', '.join(preferences.cuisine_preferences) or 'any'
    dislikes = ', '.join(preferences.ingredient_dislikes) or 'none'

    return f"""You are a professional chef assistant.

GOAL
Suggest exactly {SUGGESTIONS_PER_MEAL} different {meal_type} dishes for this person.

USER PROFILE
- Age: {preferences.age}
- Gender: {preferences.gender}
- Dietary preference: {diet}
- Spiciness level: {preferences.spiciness_level}/10
- Cuisine preferences: {cuisines}
- Ingredient dislikes: {dislikes}
- Preferred language: {language}

RULES
• Every dish must suit a {diet} diet.
• Respect the spiciness level of {preferences.spiciness_level}/10.
• Never use: {dislikes}.
• Focus on {cuisines} cuisine.
• Keep portions and nutrition appropriate for the user's age.
• Write names, descriptions and steps in {language}.

OUTPUT
Return one JSON object and nothing else, shaped exactly like this:
{{
  "suggestions": [
    {{
      "name": "Dish name in {language}",
      "description": "Short description in {language}",
      "recipe": {{
        "prepTime": "X minutes",
        "cookTime": "X minutes",
        "servings": 2,
        "instructions": ["Step 1 in {language}", "Step 2 in {language}"]
      }},
      "ingredients": [
        {{"item": "ingredient name", "quantity": "amount", "unit": "measurement unit"}}
      ],
      "nutrition": {{
        "calories": "approximate calories",
        "protein": "protein content",
        "carbs": "carb content"
      }},
      "searchTerms": {{
        "youtube": "authentic <dish name> recipe tutorial in {language} for {diet}",
        "image": "specific search term for a photo of the dish"
      }}
    }}
  ]
}}"""


class AIService:
    """Generates meal suggestions with Gemini, falling back across models.

    The active model is shared by all requests. When it turns out to be
    unavailable, the first call to notice moves everyone to the next model
    in the list; the switch is guarded so concurrent calls never skip one.
    """

    def __init__(self, api_key: str, model_names: Optional[List[str]] = None, client: Optional[Client] = None):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key
            model_names: Models to try, in order of preference
            client: Pre-built client (mainly for tests)
        """
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.model_names = list(model_names or ["gemini-2.0-flash-001"])
        self._model_index = 0
        self._model_lock = threading.Lock()
        self.client = client or Client(api_key=api_key)

        logger.info(f"Initialized AI service with model: {self.model_name}")

    @property
    def model_name(self) -> str:
        with self._model_lock:
            return self.model_names[self._model_index]

    def _retire_model(self, model: str) -> bool:
        """Stop using ``model``; False when no fallback model is left to try."""
        with self._model_lock:
            current = self.model_names[self._model_index]
            if current != model:
                # another call already moved past it
                return True
            if self._model_index + 1 >= len(self.model_names):
                return False
            self._model_index += 1
            logger.info(f"Switching to fallback model: {self.model_names[self._model_index]}")
            return True

    def generate_text(self, prompt: str, deadline: Optional[float] = None) -> str:
        """Run the prompt against the active model and return the raw text.

        Raises:
            DeadlineExceededError: ``deadline`` (monotonic seconds) already passed.
            GenerationError: every model is unavailable, or the answer was empty.
        """
        while True:
            if deadline is not None and time.monotonic() >= deadline:
                raise DeadlineExceededError("Request deadline passed before generation")
            model = self.model_name
            try:
                return self._generate_with(model, prompt, deadline=deadline)
            except ModelUnavailableError as e:
                logger.warning(f"Model {model} unavailable: {e}")
                if not self._retire_model(model):
                    raise GenerationError(f"No generation model available: {e}") from e

    @retry_api_call(max_retries=3, base_delay=2.0)
    def _generate_with(self, model: str, prompt: str, deadline: Optional[float] = None) -> str:
        try:
            response = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=0.7,
                )
            )
        except errors.ClientError as e:
            if e.code == 404 or 'not found' in str(e).lower():
                raise ModelUnavailableError(str(e)) from e
            if e.code == 429:
                raise APIRateLimitError(f"Rate limit hit: {e}") from e
            raise
        except errors.ServerError as e:
            raise TemporaryServiceError(f"Gemini unavailable: {e}") from e
        except Exception as e:
            mapped = classify_api_error(e)
            if mapped is e:
                raise
            raise mapped from e

        if not response.text:
            raise GenerationError("AI response is empty")
        return response.text

    def generate_meal_text(self, preferences: UserPreferences, meal_type: str, deadline: Optional[float] = None) -> str:
        """Generate the raw suggestion text for one meal type."""
        logger.info(f"Generating {meal_type} suggestions for {preferences.name}")
        return self.generate_text(build_prompt(preferences, meal_type), deadline=deadline)
