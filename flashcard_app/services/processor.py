import json
import logging

from flashcard_app.schemas.vocabulary import (
    DEFAULT_CATEGORY,
    ExtractedTerm,
    FileType,
    Language,
    ProcessingResult,
    ProcessingStats,
    ProcessingStatus,
    TranslatedVocabulary,
    UploadOptions,
)
from flashcard_app.services.deduplicator import deduplicate_vocabulary
from flashcard_app.services.duplicate_service import check_duplicates
from flashcard_app.services.errors import LanguageServiceError
from flashcard_app.services.extractor import (
    extract_from_image,
    extract_from_text,
    parse_csv_content,
    terms_from_csv_rows,
    vocabulary_from_json,
)
from flashcard_app.services.flashcard_store import FlashcardStore
from flashcard_app.services.formatter import extract_clarifications
from flashcard_app.services.identity import english_key
from flashcard_app.services.language import detect_language
from flashcard_app.services.llm_service import LanguageService
from flashcard_app.services.translator import (
    categorize_terms,
    generate_hiragana,
    translate_vocabulary,
)

logger = logging.getLogger(__name__)

NO_TERMS_MESSAGE = "No vocabulary terms could be extracted from the content"


def error_result(*messages: str) -> ProcessingResult:
    return ProcessingResult(
        status=ProcessingStatus.ERROR,
        errors=list(messages),
        stats=ProcessingStats(errors=1),
    )


def untranslated_vocabulary(terms: list[ExtractedTerm]) -> list[TranslatedVocabulary]:
    """Shape extracted terms as vocabulary without asking for translations."""
    return [
        TranslatedVocabulary(
            english=t.term if t.language == Language.EN else "",
            japanese_kanji=t.term if t.language == Language.JA else "",
            confidence=t.confidence,
            needs_clarification=t.language not in (Language.EN, Language.JA),
            original_term=t.term,
            original_language=t.language,
        )
        for t in terms
    ]


async def create_processing_result(
    vocabulary: list[TranslatedVocabulary],
    store: FlashcardStore,
    detect_duplicates: bool = True,
) -> ProcessingResult:
    clarifications = extract_clarifications(vocabulary)
    duplicates = []
    if detect_duplicates:
        duplicates = await check_duplicates(
            [v for v in vocabulary if not v.needs_clarification], store
        )

    # Store matches are reported under duplicates, not as new vocabulary.
    duplicate_english = {english_key(d.new_term.english) for d in duplicates if d.new_term.english}
    unique_vocabulary = [
        v
        for v in vocabulary
        if v.needs_clarification or english_key(v.english) not in duplicate_english
    ]

    if any(v.needs_clarification for v in vocabulary):
        status = ProcessingStatus.NEEDS_CLARIFICATION
    else:
        status = ProcessingStatus.SUCCESS

    return ProcessingResult(
        status=status,
        vocabulary=unique_vocabulary,
        clarifications_needed=clarifications,
        duplicates=duplicates,
        errors=[],
        stats=ProcessingStats(
            total_extracted=len(vocabulary),
            translated=sum(1 for v in vocabulary if v.english and v.japanese_kanji),
            duplicates_found=len(duplicates),
            clarifications_needed=len(clarifications),
            errors=0,
        ),
    )


async def _enrich_structured(
    vocabulary: list[TranslatedVocabulary], options: UploadOptions, llm: LanguageService
) -> list[TranslatedVocabulary]:
    """Fill readings and categories missing from uploaded JSON records.

    Failures here are logged and skipped; the records are usable without them.
    """
    if options.generate_hiragana:
        filled = []
        for vocab in vocabulary:
            if vocab.japanese_kanji and not vocab.hiragana:
                try:
                    reading = await generate_hiragana(vocab.japanese_kanji, llm)
                except LanguageServiceError:
                    logger.exception("Hiragana generation failed for %r", vocab.japanese_kanji)
                    reading = ""
                if reading:
                    vocab = vocab.model_copy(update={"hiragana": reading})
            filled.append(vocab)
        vocabulary = filled

    if options.auto_categorize:
        uncategorized = [v for v in vocabulary if v.category == DEFAULT_CATEGORY and v.english]
        if uncategorized:
            try:
                categories = await categorize_terms(
                    [{"english": v.english, "japanese": v.japanese_kanji} for v in uncategorized],
                    llm,
                )
            except LanguageServiceError:
                logger.exception("Categorization failed")
                categories = {}
            by_english = {english_key(k): c for k, c in categories.items()}
            vocabulary = [
                v.model_copy(update={"category": by_english[english_key(v.english)]})
                if v.category == DEFAULT_CATEGORY and english_key(v.english) in by_english
                else v
                for v in vocabulary
            ]
    return vocabulary


async def _process_json(
    content: str,
    options: UploadOptions,
    llm: LanguageService,
    store: FlashcardStore,
) -> ProcessingResult:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        return error_result(f"Invalid JSON input: {e}")

    vocabulary, pending = vocabulary_from_json(data)
    if not vocabulary and not pending:
        return error_result(NO_TERMS_MESSAGE)

    vocabulary = await _enrich_structured(vocabulary, options, llm)
    if pending:
        if options.auto_translate:
            vocabulary.extend(await translate_vocabulary(pending, llm))
        else:
            vocabulary.extend(
                v.model_copy(update={"needs_clarification": True, "confidence": 0.7})
                for v in untranslated_vocabulary(pending)
            )

    return await create_processing_result(
        deduplicate_vocabulary(vocabulary), store, options.detect_duplicates
    )


async def process_vocabulary_upload(
    content: str | bytes,
    file_type: FileType,
    llm: LanguageService,
    store: FlashcardStore,
    media_type: str | None = None,
    options: UploadOptions | None = None,
) -> ProcessingResult:
    """Run one upload through extraction, translation and reconciliation.

    Nothing is persisted here; the result is meant for review before
    ``commit_service.confirm_vocabulary`` writes anything.
    """
    options = options or UploadOptions()
    try:
        if file_type == FileType.IMAGE:
            if isinstance(content, str):
                content = content.encode("utf-8")
            terms = await extract_from_image(content, media_type or "image/png", llm)
        else:
            if isinstance(content, bytes):
                content = content.decode("utf-8", errors="replace")
            if file_type == FileType.JSON:
                return await _process_json(content, options, llm, store)
            detected_language = detect_language(content)
            if file_type == FileType.CSV:
                terms = terms_from_csv_rows(parse_csv_content(content), detected_language)
            else:
                terms = await extract_from_text(content, file_type, llm, detected_language)

        if not terms:
            return error_result(NO_TERMS_MESSAGE)

        if options.auto_translate:
            vocabulary = await translate_vocabulary(terms, llm)
        else:
            vocabulary = untranslated_vocabulary(terms)

        vocabulary = deduplicate_vocabulary(vocabulary)
        return await create_processing_result(vocabulary, store, options.detect_duplicates)
    except Exception as e:
        logger.exception("Vocabulary processing failed")
        return error_result(str(e) or "Unknown processing error")
