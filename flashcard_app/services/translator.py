import json
import logging

from pydantic import Field

from flashcard_app.config import settings
from flashcard_app.schemas.vocabulary import (
    DEFAULT_CATEGORY,
    VOCABULARY_CATEGORIES,
    CamelModel,
    ExtractedTerm,
    Language,
    TranslatedVocabulary,
    TranslationOption,
)
from flashcard_app.services.errors import TranslationError, VocabularyError
from flashcard_app.services.llm_service import (
    LanguageService,
    parse_json_response,
    validate_payload,
)
from flashcard_app.services.prompts import (
    CATEGORIZE_SYSTEM_PROMPT,
    CATEGORIZE_USER_PROMPT,
    HIRAGANA_SYSTEM_PROMPT,
    TRANSLATION_SYSTEM_PROMPT,
    TRANSLATION_USER_PROMPT,
)

logger = logging.getLogger(__name__)


class _TranslationItem(CamelModel):
    english: str | None = None
    japanese_kanji: str | None = None
    hiragana: str | None = None
    category: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    needs_clarification: bool | None = None
    clarification_options: list[TranslationOption] | None = None
    original_term: str | None = None
    original_language: Language | None = None


class _TranslationPayload(CamelModel):
    translations: list[_TranslationItem]


class _HiraganaPayload(CamelModel):
    hiragana: str | None = None


class _CategorizationPayload(CamelModel):
    categorizations: dict[str, str]


def _normalize_category(category: str | None) -> str:
    if not category:
        return DEFAULT_CATEGORY
    if category not in VOCABULARY_CATEGORIES:
        logger.warning("Unknown category %r from language service; using %r", category, DEFAULT_CATEGORY)
        return DEFAULT_CATEGORY
    return category


def _to_vocabulary(item: _TranslationItem, source: ExtractedTerm | None) -> TranslatedVocabulary:
    options = item.clarification_options or []
    kanji = item.japanese_kanji or ""
    hiragana = item.hiragana or ""
    # A record is ambiguous only when there is something to choose from.
    needs_clarification = bool(options) and (bool(item.needs_clarification) or not kanji)
    if needs_clarification:
        kanji = hiragana = ""
    return TranslatedVocabulary(
        english=item.english or "",
        japanese_kanji=kanji,
        hiragana=hiragana,
        category=_normalize_category(item.category),
        confidence=item.confidence if item.confidence is not None else 0.8,
        needs_clarification=needs_clarification,
        clarification_options=options if needs_clarification else None,
        original_term=item.original_term or (source.term if source else None),
        original_language=item.original_language or (source.language if source else None),
    )


async def translate_batch(terms: list[ExtractedTerm], llm: LanguageService) -> list[TranslatedVocabulary]:
    terms_json = json.dumps(
        [{"term": t.term, "language": t.language.value, "context": t.context} for t in terms],
        ensure_ascii=False,
    )
    try:
        response = await llm.complete(
            TRANSLATION_USER_PROMPT.format(terms_json=terms_json),
            system=TRANSLATION_SYSTEM_PROMPT,
            model=settings.llm_model_advanced,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            json_mode=True,
        )
        payload = validate_payload(parse_json_response(response), _TranslationPayload)
    except VocabularyError as e:
        raise TranslationError(f"Failed to translate: {e}") from e

    # Positional pairing with the request is only trusted when counts line up.
    aligned = len(payload.translations) == len(terms)
    return [
        _to_vocabulary(item, terms[i] if aligned else None)
        for i, item in enumerate(payload.translations)
    ]


async def translate_vocabulary(
    terms: list[ExtractedTerm],
    llm: LanguageService,
    batch_size: int | None = None,
) -> list[TranslatedVocabulary]:
    """Translate terms in fixed-size batches, one request at a time.

    A failing batch aborts the whole run rather than dropping its terms.
    """
    batch_size = batch_size or settings.translation_batch_size
    results: list[TranslatedVocabulary] = []
    for start in range(0, len(terms), batch_size):
        batch = terms[start : start + batch_size]
        results.extend(await translate_batch(batch, llm))
        logger.debug("Translated %d/%d terms", min(start + batch_size, len(terms)), len(terms))
    return results


def resolve_clarification(
    vocab: TranslatedVocabulary, selected_option: TranslationOption
) -> TranslatedVocabulary:
    return vocab.model_copy(
        update={
            "japanese_kanji": selected_option.japanese_kanji,
            "hiragana": selected_option.hiragana,
            "needs_clarification": False,
            "clarification_options": None,
            "confidence": 1.0,  # confirmed by the user
        }
    )


async def generate_hiragana(kanji_text: str, llm: LanguageService) -> str:
    response = await llm.complete(
        kanji_text,
        system=HIRAGANA_SYSTEM_PROMPT,
        model=settings.llm_model_fast,
        temperature=0,
        max_tokens=100,
        json_mode=True,
    )
    payload = validate_payload(parse_json_response(response), _HiraganaPayload)
    return (payload.hiragana or "").strip()


async def categorize_terms(terms: list[dict[str, str]], llm: LanguageService) -> dict[str, str]:
    """Map each English term to one of the vocabulary categories.

    ``terms`` items look like ``{"english": ..., "japanese": ...}``.
    """
    if not terms:
        return {}
    response = await llm.complete(
        CATEGORIZE_USER_PROMPT.format(terms_json=json.dumps(terms, ensure_ascii=False)),
        system=CATEGORIZE_SYSTEM_PROMPT,
        model=settings.llm_model_fast,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        json_mode=True,
    )
    payload = validate_payload(parse_json_response(response), _CategorizationPayload)
    return {
        english: _normalize_category(category)
        for english, category in payload.categorizations.items()
    }
