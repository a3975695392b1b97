from cookmate.utils.languages import LANGUAGE_CODES, resolve_language_codes


def test_known_language_appends_english_fallback():
    assert resolve_language_codes("Kannada") == ["kn", "kn-IN", "en"]


def test_english_is_not_duplicated():
    assert resolve_language_codes("English") == ["en", "en-US"]


def test_unknown_language_falls_back_to_english():
    assert resolve_language_codes("Klingon") == ["en", "en-US"]


def test_every_language_resolves_with_english():
    for language in LANGUAGE_CODES:
        codes = resolve_language_codes(language)
        assert codes
        assert "en" in codes


def test_lookup_table_is_not_mutated():
    resolve_language_codes("Hindi")
    resolve_language_codes("Hindi")
    assert LANGUAGE_CODES["Hindi"] == ("hi", "hi-IN")
    assert resolve_language_codes("Hindi") == ["hi", "hi-IN", "en"]
