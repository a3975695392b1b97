"""HTTP routes for preference submission and meal suggestion generation."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from cookmate import __version__
from cookmate.meal_processor import MealSuggestionProcessor
from cookmate.models.preferences import UserPreferences, split_list_field
from cookmate.utils.config import load_config
from cookmate.utils.database import init_database, save_preferences

logger = logging.getLogger(__name__)


class PreferencesPayload(BaseModel):
    """Preferences as sent by the web and bot clients (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    user_id: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    dietary_preference: Optional[str] = None
    spiciness_level: Optional[int] = None
    cuisine_preferences: Union[str, List[str], None] = None
    ingredient_dislikes: Union[str, List[str], None] = None
    cook_name: Optional[str] = None
    cook_whatsapp: Optional[str] = Field(default=None, alias="cookWhatsApp")
    preferred_language: Optional[str] = None
    user_whatsapp: Optional[str] = Field(default=None, alias="userWhatsApp")
    meals_per_day: Optional[int] = None
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False

    def to_preferences(self) -> UserPreferences:
        return UserPreferences(
            user_id=self.user_id,
            name=self.name,
            age=self.age,
            gender=self.gender,
            dietary_preference=self.dietary_preference,
            spiciness_level=self.spiciness_level,
            cuisine_preferences=split_list_field(self.cuisine_preferences),
            ingredient_dislikes=split_list_field(self.ingredient_dislikes),
            cook_name=self.cook_name,
            cook_whatsapp=self.cook_whatsapp,
            preferred_language=self.preferred_language or "",
            user_whatsapp=self.user_whatsapp,
            meals_per_day=self.meals_per_day,
            breakfast=self.breakfast,
            lunch=self.lunch,
            dinner=self.dinner,
        )


class ValidateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_data: Optional[Dict[str, Any]] = Field(default=None, alias="userData")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, code: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if code:
        content["code"] = code
    return JSONResponse(status_code=status_code, content=content)


def get_processor(request: Request) -> MealSuggestionProcessor:
    """Build the processor on first use so the app starts without a Gemini key."""
    processor = getattr(request.app.state, "processor", None)
    if processor is None:
        processor = MealSuggestionProcessor(request.app.state.config)
        request.app.state.processor = processor
    return processor


router = APIRouter(prefix="/generate")


@router.post("/suggestions")
async def generate_suggestions(payload: PreferencesPayload, request: Request):
    preferences = payload.to_preferences()

    errors = preferences.validate()
    if errors:
        return _error(400, "; ".join(errors), "VALIDATION_ERROR")

    selected_meals = preferences.selected_meals()
    if not selected_meals:
        return _error(400, "At least one meal type must be selected", "NO_MEALS_SELECTED")

    try:
        processor = get_processor(request)
    except ValueError as e:
        logger.error(f"Meal suggestion service unavailable: {e}")
        return _error(500, str(e), "CONFIGURATION_ERROR")

    result = await processor.generate_meal_suggestions(preferences, selected_meals)
    if not result["success"]:
        return _error(500, result["error"], "GENERATION_ERROR")

    return {
        **result,
        "message": "Meal suggestions generated successfully",
        "timestamp": _timestamp(),
    }


@router.get("/health")
async def health():
    return {
        "success": True,
        "message": "Meal suggestion service is running",
        "timestamp": _timestamp(),
        "version": __version__,
    }


@router.post("/validate-user")
async def validate_user(body: ValidateUserRequest):
    if not body.user_data:
        return _error(400, "User data is required")

    try:
        preferences = PreferencesPayload.model_validate(body.user_data).to_preferences()
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in e.errors())
        return _error(400, f"Invalid user data: {fields}", "VALIDATION_ERROR")

    errors = preferences.validate()
    if errors:
        return _error(400, "; ".join(errors), "VALIDATION_ERROR")

    return {
        "success": True,
        "message": "User data is valid",
        "data": {
            "valid_fields": list(body.user_data),
            "selected_meals": preferences.selected_meals(),
        },
    }


def create_app(config: Optional[Dict] = None, processor: Optional[MealSuggestionProcessor] = None) -> FastAPI:
    app_config = config or load_config()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        init_database(app_config["database_path"])
        yield

    app = FastAPI(title="CookMate API", version=__version__, lifespan=lifespan)
    app.state.config = app_config
    app.state.processor = processor

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "This is the backend of CookMate App"

    @app.post("/submit-preferences")
    async def submit_preferences(payload: PreferencesPayload):
        preferences = payload.to_preferences()
        errors = preferences.validate()
        if errors:
            return _error(400, "; ".join(errors), "VALIDATION_ERROR")

        preference_id = save_preferences(preferences, app_config["database_path"])
        logger.info(f"Preferences saved, id {preference_id}")
        return {"message": "User Preferences Registered", "id": preference_id}

    app.include_router(router)
    return app
