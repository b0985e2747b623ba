import logging

from flashcard_app.schemas.vocabulary import DuplicateInfo, ExistingFlashcard, TranslatedVocabulary
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.identity import english_key, kanji_from_back, kanji_key

logger = logging.getLogger(__name__)


async def check_duplicates(
    new_vocabulary: list[TranslatedVocabulary],
    store: FlashcardStore,
) -> list[DuplicateInfo]:
    """Match new vocabulary against every stored flashcard.

    English (case-insensitive ``front``) is tried first, then the kanji part
    of ``back``. Each new record yields at most one match.
    """
    if not new_vocabulary:
        return []

    # One full read per call; the store is small enough to scan.
    existing_cards = await store.list_all()
    if not existing_cards:
        return []

    by_english: dict[str, ExistingFlashcard] = {}
    by_japanese: dict[str, ExistingFlashcard] = {}
    for card in existing_cards:
        existing = ExistingFlashcard(
            id=card.id, front=card.front, back=card.back, category=card.category or None
        )
        # list() is newest first, so the first card seen for a key wins
        by_english.setdefault(english_key(card.front), existing)
        by_japanese.setdefault(kanji_from_back(card.back), existing)

    duplicates = []
    for vocab in new_vocabulary:
        match = None
        if vocab.english:
            match = by_english.get(english_key(vocab.english))
        if match is None and vocab.japanese_kanji:
            match = by_japanese.get(kanji_key(vocab.japanese_kanji))
        if match is not None:
            duplicates.append(DuplicateInfo(new_term=vocab, existing_term=match))

    logger.debug("Found %d duplicates among %d new terms", len(duplicates), len(new_vocabulary))
    return duplicates
