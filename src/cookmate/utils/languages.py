"""Mapping from human-readable language names to YouTube relevance locales."""

from typing import Dict, List, Tuple

DEFAULT_LANGUAGE_CODE = 'en'
DEFAULT_LOCALE_CODES: Tuple[str, ...] = ('en', 'en-US')

LANGUAGE_CODES: Dict[str, Tuple[str, ...]] = {
    'English': ('en', 'en-US'),
    'Hindi': ('hi', 'hi-IN'),
    'Spanish': ('es', 'es-ES'),
    'French': ('fr', 'fr-FR'),
    'German': ('de', 'de-DE'),
    'Italian': ('it', 'it-IT'),
    'Portuguese': ('pt', 'pt-BR'),
    'Japanese': ('ja', 'ja-JP'),
    'Korean': ('ko', 'ko-KR'),
    'Chinese': ('zh', 'zh-CN'),
    'Arabic': ('ar', 'ar-SA'),
    'Russian': ('ru', 'ru-RU'),
    'Tamil': ('ta', 'ta-IN'),
    'Telugu': ('te', 'te-IN'),
    'Bengali': ('bn', 'bn-IN'),
    'Marathi': ('mr', 'mr-IN'),
    'Gujarati': ('gu', 'gu-IN'),
    'Kannada': ('kn', 'kn-IN'),
    'Malayalam': ('ml', 'ml-IN'),
    'Punjabi': ('pa', 'pa-IN'),
}


def resolve_language_codes(language: str) -> List[str]:
    """Return the locale codes to search for a language, most specific first.

    Unknown languages resolve to English. English is always appended as
    the last fallback when the mapping does not already contain it.
    """
    codes = list(LANGUAGE_CODES.get(language, DEFAULT_LOCALE_CODES))
    if DEFAULT_LANGUAGE_CODE not in codes:
        codes.append(DEFAULT_LANGUAGE_CODE)
    return codes
