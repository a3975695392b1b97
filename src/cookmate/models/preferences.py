"""User preference models for CookMate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
import json

MEAL_TYPES = ('breakfast', 'lunch', 'dinner')

REQUIRED_FIELDS = (
    'name', 'age', 'gender', 'dietary_preference',
    'spiciness_level', 'cuisine_preferences', 'preferred_language',
)


def split_list_field(value) -> List[str]:
    """Normalize a comma-separated string or list into a clean list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = value
    return [str(item).strip() for item in items if str(item).strip()]


@dataclass
class UserPreferences:
    """Dietary preferences a user submits to get meal suggestions."""

    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    dietary_preference: Optional[str] = None
    spiciness_level: Optional[int] = None
    cuisine_preferences: List[str] = field(default_factory=list)
    ingredient_dislikes: List[str] = field(default_factory=list)
    cook_name: Optional[str] = None
    cook_whatsapp: Optional[str] = None
    preferred_language: str = 'English'
    user_whatsapp: Optional[str] = None
    meals_per_day: Optional[int] = None
    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False
    user_id: Optional[str] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    def selected_meals(self) -> List[str]:
        """Meal types the user asked for, in breakfast/lunch/dinner order."""
        return [meal for meal in MEAL_TYPES if getattr(self, meal)]

    def validate(self) -> List[str]:
        """Return a list of validation errors, empty when the preferences are usable."""
        errors = []

        missing = [name for name in REQUIRED_FIELDS if getattr(self, name) in (None, '', [])]
        if missing:
            errors.append(f"Missing required fields: {', '.join(missing)}")

        if self.spiciness_level is not None and not 0 <= self.spiciness_level <= 10:
            errors.append("Spiciness level must be between 0 and 10")

        return errors

    def to_dict(self) -> dict:
        """Convert preferences to dictionary for database storage."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'age': self.age,
            'gender': self.gender,
            'dietary_preference': self.dietary_preference,
            'spiciness_level': self.spiciness_level,
            'cuisine_preferences': json.dumps(self.cuisine_preferences),
            'ingredient_dislikes': json.dumps(self.ingredient_dislikes),
            'cook_name': self.cook_name,
            'cook_whatsapp': self.cook_whatsapp,
            'preferred_language': self.preferred_language,
            'user_whatsapp': self.user_whatsapp,
            'meals_per_day': self.meals_per_day,
            'breakfast': int(self.breakfast),
            'lunch': int(self.lunch),
            'dinner': int(self.dinner),
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'UserPreferences':
        """Create preferences from a dictionary loaded from the database."""
        return cls(
            id=data.get('id'),
            user_id=data.get('user_id'),
            name=data.get('name'),
            age=data.get('age'),
            gender=data.get('gender'),
            dietary_preference=data.get('dietary_preference'),
            spiciness_level=data.get('spiciness_level'),
            cuisine_preferences=json.loads(data['cuisine_preferences']) if data.get('cuisine_preferences') else [],
            ingredient_dislikes=json.loads(data['ingredient_dislikes']) if data.get('ingredient_dislikes') else [],
            cook_name=data.get('cook_name'),
            cook_whatsapp=data.get('cook_whatsapp'),
            preferred_language=data.get('preferred_language') or 'English',
            user_whatsapp=data.get('user_whatsapp'),
            meals_per_day=data.get('meals_per_day'),
            breakfast=bool(data.get('breakfast')),
            lunch=bool(data.get('lunch')),
            dinner=bool(data.get('dinner')),
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else datetime.now(),
        )
