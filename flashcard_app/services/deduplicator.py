from flashcard_app.schemas.vocabulary import TranslatedVocabulary
from flashcard_app.services.identity import batch_key


def deduplicate_vocabulary(vocabulary: list[TranslatedVocabulary]) -> list[TranslatedVocabulary]:
    """Collapse records sharing english (case-insensitive) and kanji.

    The higher-confidence record wins; on a tie the first one seen is kept.
    Output order follows the first appearance of each key.
    """
    seen: dict[str, TranslatedVocabulary] = {}
    for vocab in vocabulary:
        key = batch_key(vocab.english, vocab.japanese_kanji)
        existing = seen.get(key)
        if existing is None or vocab.confidence > existing.confidence:
            seen[key] = vocab
    return list(seen.values())
