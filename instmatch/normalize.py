from typing import Optional

from .config import DEFAULT_CONFIG, MatchConfig


def strip_whitespace(text: Optional[str]) -> str:
    if not text:
        return ""
    return "".join(text.split())


def abbreviate_admin_units(text: str, config: MatchConfig = DEFAULT_CONFIG) -> str:
    # One pass per pair; substituted output is never re-scanned.
    for long_form, short_form in config.abbreviations:
        text = text.replace(long_form, short_form)
    return text


def strip_institution_suffix(text: str, config: MatchConfig = DEFAULT_CONFIG) -> str:
    """Remove at most one trailing suffix, the first listed one that matches."""
    for suffix in config.institution_suffixes:
        if text.endswith(suffix):
            return text[: -len(suffix)]
    return text


def remove_punctuation(text: str, config: MatchConfig = DEFAULT_CONFIG) -> str:
    return "".join(ch for ch in text if ch not in config.punctuation)


def normalize_admin_text(text: Optional[str], config: MatchConfig = DEFAULT_CONFIG) -> str:
    """
    Canonical comparison form of an institution name.

    Abbreviates administrative units, strips one institutional suffix,
    then drops whitespace and punctuation. Only used for equality and
    similarity checks, never shown to users.
    """
    if not text:
        return ""
    result = abbreviate_admin_units(text, config)
    result = strip_institution_suffix(result, config)
    result = strip_whitespace(result)
    return remove_punctuation(result, config)
