"""Term identity shared by dedup, store duplicate checks and commit.

Two vocabulary items are the same term when their English strings match
case-insensitively or their kanji strings match exactly.
"""

import logging

from flashcard_app.services.formatter import split_back

logger = logging.getLogger(__name__)

BACK_SEPARATOR = " ("


def english_key(english: str | None) -> str:
    return (english or "").lower()


def kanji_key(kanji: str | None) -> str:
    return kanji or ""


def batch_key(english: str | None, kanji: str | None) -> str:
    return f"{english_key(english)}|{kanji_key(kanji)}"


def kanji_from_back(back: str) -> str:
    """Kanji portion of a stored ``"<kanji> (<hiragana>)"`` back field."""
    if BACK_SEPARATOR not in back:
        logger.warning("Flashcard back %r has no reading; using it whole as kanji", back)
        return back
    return split_back(back)[0]


def clarification_key(original_term: str | None, english: str | None) -> str:
    return english_key(original_term or english)
