from flashcard_app.schemas.vocabulary import TranslatedVocabulary
from flashcard_app.services.duplicate_service import check_duplicates
from tests.conftest import create_flashcard


def vocab(english, kanji, hiragana=""):
    return TranslatedVocabulary(english=english, japanese_kanji=kanji, hiragana=hiragana, confidence=0.9)


class TestDuplicateCheck:
    async def test_given_case_differing_english_when_check_then_english_path_matches(self, store):
        existing = await create_flashcard(store, "dog", "犬 (いぬ)")

        [duplicate] = await check_duplicates([vocab("Dog", "猫")], store)

        assert duplicate.existing_term.id == existing.id
        assert duplicate.existing_term.front == "dog"
        assert duplicate.new_term.japanese_kanji == "猫"

    async def test_given_same_kanji_when_check_then_japanese_path_matches(self, store):
        existing = await create_flashcard(store, "hound", "犬 (いぬ)", "general")

        [duplicate] = await check_duplicates([vocab("dog", "犬")], store)

        assert duplicate.existing_term.id == existing.id
        assert duplicate.existing_term.back == "犬 (いぬ)"
        assert duplicate.existing_term.category == "general"

    async def test_english_match_takes_precedence_over_kanji(self, store):
        by_english = await create_flashcard(store, "dog", "狗 (いぬ)")
        await create_flashcard(store, "canine", "犬 (いぬ)")

        duplicates = await check_duplicates([vocab("DOG", "犬")], store)

        assert len(duplicates) == 1
        assert duplicates[0].existing_term.id == by_english.id

    async def test_given_unrelated_card_when_check_then_no_duplicate(self, store):
        await create_flashcard(store, "cat", "猫 (ねこ)")
        assert await check_duplicates([vocab("dog", "犬")], store) == []

    async def test_given_empty_store_when_check_then_no_duplicate(self, store):
        assert await check_duplicates([vocab("dog", "犬")], store) == []

    async def test_kanji_prefix_is_not_a_match(self, store):
        await create_flashcard(store, "dog", "犬 (いぬ)")
        assert await check_duplicates([vocab("puppy", "子犬")], store) == []

    async def test_malformed_back_compared_whole(self, store):
        await create_flashcard(store, "dog", "犬")
        [duplicate] = await check_duplicates([vocab("hound", "犬")], store)
        assert duplicate.existing_term.front == "dog"

    async def test_kanji_with_parenthesis_matches_stored_back(self, store):
        await create_flashcard(store, "function", "関数 (数学) (かんすう)")
        [duplicate] = await check_duplicates([vocab("mapping", "関数 (数学)")], store)
        assert duplicate.existing_term.front == "function"

    async def test_one_result_per_new_term(self, store):
        await create_flashcard(store, "dog", "犬 (いぬ)")
        await create_flashcard(store, "cat", "猫 (ねこ)")

        duplicates = await check_duplicates(
            [vocab("dog", "猫"), vocab("bird", "鳥"), vocab("kitty", "猫")], store
        )

        assert [d.new_term.english for d in duplicates] == ["dog", "kitty"]
        assert [d.existing_term.front for d in duplicates] == ["dog", "cat"]
