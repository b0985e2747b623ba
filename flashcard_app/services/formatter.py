import time

from flashcard_app.schemas.vocabulary import (
    DEFAULT_CATEGORY,
    ClarificationRequest,
    FormattedFlashcard,
    Language,
    TranslatedVocabulary,
)


def compose_back(kanji: str, hiragana: str) -> str:
    return f"{kanji} ({hiragana})"


def split_back(back: str) -> tuple[str, str]:
    """Split a ``"<kanji> (<hiragana>)"`` back field into kanji and reading.

    The reading is the text inside the trailing parenthesis pair. A back
    without a reading comes back as ``(back, "")``.
    """
    back = back.strip()
    if back.endswith(")") and "(" in back:
        open_idx = back.rfind("(")
        kanji = back[:open_idx]
        if kanji.endswith(" "):
            kanji = kanji[:-1]
        return kanji, back[open_idx + 1 : -1]
    open_idx = back.find("(")
    close_idx = back.find(")", open_idx + 1)
    if open_idx == -1 or close_idx == -1:
        return back, ""
    return back[:open_idx].strip(), back[open_idx + 1 : close_idx]


def format_to_flashcards(vocabulary: list[TranslatedVocabulary]) -> list[FormattedFlashcard]:
    return [
        FormattedFlashcard(
            front=v.english,
            back=compose_back(v.japanese_kanji, v.hiragana),
            category=v.category or DEFAULT_CATEGORY,
        )
        for v in vocabulary
        if v.english and v.japanese_kanji and not v.needs_clarification
    ]


def extract_clarifications(vocabulary: list[TranslatedVocabulary]) -> list[ClarificationRequest]:
    stamp = int(time.time() * 1000)
    return [
        ClarificationRequest(
            id=f"clarify-{index}-{stamp}",
            term=v.original_term or v.english or v.japanese_kanji,
            original_language=v.original_language or Language.UNKNOWN,
            options=v.clarification_options or [],
        )
        for index, v in enumerate(x for x in vocabulary if x.needs_clarification)
    ]
