"""Language name -> ISO 639-1 code lookup for library items."""

from typing import Dict, Optional

DEFAULT_LANGUAGE = "English"
DEFAULT_LANGUAGE_CODE = "en"

LANGUAGE_CODES: Dict[str, str] = {
    "arabic": "ar",
    "chinese": "zh",
    "czech": "cs",
    "danish": "da",
    "dutch": "nl",
    "english": "en",
    "finnish": "fi",
    "french": "fr",
    "german": "de",
    "greek": "el",
    "hebrew": "he",
    "hindi": "hi",
    "hungarian": "hu",
    "indonesian": "id",
    "italian": "it",
    "japanese": "ja",
    "korean": "ko",
    "norwegian": "no",
    "persian": "fa",
    "polish": "pl",
    "portuguese": "pt",
    "romanian": "ro",
    "russian": "ru",
    "spanish": "es",
    "swedish": "sv",
    "thai": "th",
    "turkish": "tr",
    "ukrainian": "uk",
    "urdu": "ur",
    "vietnamese": "vi",
}


def language_to_code(language: Optional[str]) -> str:
    """Map a language name ("English", "french") to its code, defaulting to "en"."""
    if not language:
        language = DEFAULT_LANGUAGE
    key = language.strip().lower()
    # Already a code
    if key in LANGUAGE_CODES.values():
        return key
    return LANGUAGE_CODES.get(key, DEFAULT_LANGUAGE_CODE)
