import logging

from flashcard_app.schemas.vocabulary import (
    CommitSummary,
    DuplicateAction,
    FormattedFlashcard,
    TranslatedVocabulary,
    TranslationOption,
)
from flashcard_app.services.errors import CommitError, UnresolvedClarificationError
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.formatter import format_to_flashcards
from flashcard_app.services.identity import clarification_key, english_key
from flashcard_app.services.translator import resolve_clarification

logger = logging.getLogger(__name__)


def apply_clarification_resolutions(
    vocabulary: list[TranslatedVocabulary],
    resolutions: dict[str, TranslationOption] | None,
) -> tuple[list[TranslatedVocabulary], int]:
    """Resolve ambiguous records and drop the ones nobody resolved.

    Returns the usable records and the number of records dropped.
    """
    by_term = {english_key(term): option for term, option in (resolutions or {}).items()}
    resolved = []
    unresolved = 0
    for vocab in vocabulary:
        if vocab.needs_clarification:
            option = by_term.get(clarification_key(vocab.original_term, vocab.english))
            if option is None:
                unresolved += 1
                continue
            vocab = resolve_clarification(vocab, option)
        resolved.append(vocab)
    return resolved, unresolved


async def save_vocabulary(
    flashcards: list[FormattedFlashcard],
    store: FlashcardStore,
    duplicate_actions: dict[str, str] | None = None,
) -> CommitSummary:
    actions = {english_key(term): action for term, action in (duplicate_actions or {}).items()}
    summary = CommitSummary()

    for flashcard in flashcards:
        action = actions.get(english_key(flashcard.front))

        if action == DuplicateAction.SKIP.value:
            summary.skipped += 1
            continue

        if action == DuplicateAction.REPLACE.value:
            existing = await store.find_by_front(flashcard.front)
            if existing is not None:
                await store.update(
                    existing.id,
                    front=flashcard.front,
                    back=flashcard.back,
                    category=flashcard.category,
                )
                summary.replaced += 1
                continue
            logger.info("No stored card to replace for %r; creating it", flashcard.front)

        await store.create(flashcard)
        summary.saved += 1

    return summary


async def confirm_vocabulary(
    vocabulary: list[TranslatedVocabulary],
    store: FlashcardStore,
    clarification_resolutions: dict[str, TranslationOption] | None = None,
    duplicate_actions: dict[str, str] | None = None,
) -> CommitSummary:
    """Persist reviewed vocabulary.

    Records still awaiting clarification are never written. Store writes are
    not transactional: cards saved before a failure stay saved.
    """
    resolved, unresolved = apply_clarification_resolutions(vocabulary, clarification_resolutions)
    flashcards = format_to_flashcards(resolved)
    if not flashcards:
        if unresolved:
            raise UnresolvedClarificationError(
                f"{unresolved} term(s) still need clarification; nothing to save"
            )
        raise CommitError("No valid flashcards to save")

    summary = await save_vocabulary(flashcards, store, duplicate_actions)
    summary.unresolved = unresolved
    return summary
