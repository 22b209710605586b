"""Localized value resolution for survey labels."""

from typing import Dict, Optional

DEFAULT_LANGUAGE = "default"


def get_localized_value(label: Optional[Dict[str, str]], language: str) -> str:
    """
    Pick the string for a language out of a label map.

    Falls back to the "default" entry when the language is missing or
    empty, and to "" when neither is present.

    Example:
        get_localized_value({"default": "Yes", "de": "Ja"}, "de") -> "Ja"
        get_localized_value({"default": "Yes", "de": "Ja"}, "fr") -> "Yes"
    """
    if not isinstance(label, dict):
        return ""
    value = label.get(language)
    if value:
        return value
    return label.get(DEFAULT_LANGUAGE) or ""
