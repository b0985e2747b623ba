class VocabularyError(Exception):
    """Base class for failures inside the vocabulary pipeline."""


class LanguageServiceError(VocabularyError):
    """The language model call failed or could not be reached."""


class ResponseSchemaError(LanguageServiceError):
    """The language model answered, but not with the JSON shape we asked for."""


class ExtractionError(VocabularyError):
    pass


class TranslationError(VocabularyError):
    pass


class CommitError(VocabularyError):
    """Nothing in a confirm request could be turned into a flashcard."""


class UnresolvedClarificationError(CommitError):
    pass


class SeedImportError(VocabularyError):
    def __init__(self, message: str, existing_count: int = 0):
        super().__init__(message)
        self.existing_count = existing_count
