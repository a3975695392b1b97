from cookmate.models.preferences import UserPreferences
from cookmate.utils.database import (
    init_database,
    load_preferences,
    load_preferences_for_user,
    save_preferences,
)


def _preferences(**overrides):
    values = dict(
        name="Meera", age=41, gender="Female", dietary_preference="Vegan",
        spiciness_level=3, cuisine_preferences=["Gujarati"], ingredient_dislikes=["onion", "garlic"],
        cook_name="Suresh", preferred_language="Gujarati", meals_per_day=2, lunch=True, dinner=True,
    )
    values.update(overrides)
    return UserPreferences(**values)


def test_preferences_survive_a_round_trip(tmp_path):
    db_path = str(tmp_path / "data" / "cookmate.db")
    init_database(db_path)

    preference_id = save_preferences(_preferences(), db_path)
    loaded = load_preferences(preference_id, db_path)

    assert loaded.id == preference_id
    assert loaded.name == "Meera"
    assert loaded.ingredient_dislikes == ["onion", "garlic"]
    assert loaded.selected_meals() == ["lunch", "dinner"]
    assert loaded.breakfast is False


def test_resubmission_for_same_user_replaces_row(tmp_path):
    db_path = str(tmp_path / "cookmate.db")
    init_database(db_path)

    first_id = save_preferences(_preferences(user_id="u-1"), db_path)
    second_id = save_preferences(_preferences(user_id="u-1", spiciness_level=8), db_path)

    assert load_preferences(first_id, db_path) is None
    assert load_preferences(second_id, db_path).spiciness_level == 8
    assert load_preferences_for_user("u-1", db_path).id == second_id


def test_unknown_ids_load_nothing(tmp_path):
    db_path = str(tmp_path / "cookmate.db")
    init_database(db_path)

    assert load_preferences(999, db_path) is None
    assert load_preferences_for_user("nobody", db_path) is None
