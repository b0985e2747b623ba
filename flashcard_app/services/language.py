import re

from flashcard_app.schemas.vocabulary import Language

# Hiragana, Katakana and the CJK Unified Ideographs block used for kanji
_JAPANESE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_ENGLISH = re.compile(r"[a-zA-Z]{3,}")
_ENGLISH_SHORT = re.compile(r"[a-zA-Z]{2,}")


def _classify(text: str, english: re.Pattern) -> Language:
    has_japanese = _JAPANESE.search(text) is not None
    has_english = english.search(text) is not None
    if has_japanese and has_english:
        return Language.MIXED
    if has_japanese:
        return Language.JA
    if has_english:
        return Language.EN
    return Language.UNKNOWN


def detect_language(text: str) -> Language:
    """Classify a document as en / ja / mixed / unknown by character ranges."""
    return _classify(text, _ENGLISH)


def detect_language_fast(text: str) -> Language:
    """Same heuristic tuned for short cells: two Latin letters count as English."""
    return _classify(text, _ENGLISH_SHORT)
