import pytest

from flashcard_app.schemas.vocabulary import Language, TranslatedVocabulary, TranslationOption
from flashcard_app.services.deduplicator import deduplicate_vocabulary
from flashcard_app.services.formatter import (
    compose_back,
    extract_clarifications,
    format_to_flashcards,
    split_back,
)
from flashcard_app.services.identity import kanji_from_back


def vocab(english, kanji="", hiragana="", confidence=0.9, **kwargs):
    return TranslatedVocabulary(
        english=english, japanese_kanji=kanji, hiragana=hiragana, confidence=confidence, **kwargs
    )


class TestDeduplicate:
    def test_case_insensitive_english_same_kanji_collapse(self):
        result = deduplicate_vocabulary([vocab("Dog", "犬", confidence=0.7), vocab("dog", "犬", confidence=0.9)])
        assert len(result) == 1
        assert result[0].confidence == 0.9
        assert result[0].english == "dog"

    def test_tie_keeps_first_seen(self):
        first = vocab("Dog", "犬", "いぬ", confidence=0.8)
        second = vocab("dog", "犬", "けん", confidence=0.8)
        assert deduplicate_vocabulary([first, second]) == [first]

    def test_different_kanji_kept_apart(self):
        result = deduplicate_vocabulary([vocab("spring", "春"), vocab("spring", "ばね")])
        assert len(result) == 2

    def test_order_follows_first_appearance(self):
        result = deduplicate_vocabulary(
            [vocab("a1", "一"), vocab("b2", "二"), vocab("A1", "一", confidence=0.99)]
        )
        assert [v.english for v in result] == ["A1", "b2"]

    def test_idempotent(self):
        items = [
            vocab("Dog", "犬", confidence=0.7),
            vocab("dog", "犬", confidence=0.9),
            vocab("cat", "猫"),
            vocab("Cat", "猫", confidence=0.95),
            vocab("bird", "鳥"),
        ]
        once = deduplicate_vocabulary(items)
        twice = deduplicate_vocabulary(deduplicate_vocabulary(items))
        assert once == twice
        doubled = deduplicate_vocabulary(items + items)
        key = lambda v: (v.english, v.japanese_kanji, v.confidence)
        assert sorted(map(key, doubled)) == sorted(map(key, once))


class TestFormatting:
    def test_format_to_flashcards(self):
        cards = format_to_flashcards(
            [
                vocab("variable", "変数", "へんすう", category="programming_fundamentals"),
                vocab("bank", needs_clarification=True),
                vocab("", "猫", "ねこ"),
                vocab("cat", ""),
            ]
        )
        assert len(cards) == 1
        assert cards[0].front == "variable"
        assert cards[0].back == "変数 (へんすう)"
        assert cards[0].category == "programming_fundamentals"

    @pytest.mark.parametrize(
        "kanji, hiragana",
        [
            ("犬", "いぬ"),
            ("変数", "へんすう"),
            ("API", "えーぴーあい"),
            ("犬", ""),
            ("関数 (数学)", "かんすう"),
            ("犬", "いぬ)"),
        ],
    )
    def test_reading_survives_back_round_trip(self, kanji, hiragana):
        [card] = format_to_flashcards([vocab("term", kanji, hiragana)])
        assert split_back(card.back) == (kanji, hiragana)

    def test_split_back_without_reading(self):
        assert split_back("犬") == ("犬", "")

    def test_kanji_from_back(self):
        assert kanji_from_back(compose_back("犬", "いぬ")) == "犬"

    @pytest.mark.parametrize("kanji", ["関数 (数学)", "A (x)", "犬"])
    def test_kanji_from_back_agrees_with_split_back(self, kanji):
        back = compose_back(kanji, "よみ")
        assert kanji_from_back(back) == split_back(back)[0] == kanji

    def test_kanji_from_malformed_back_uses_whole_string(self, caplog):
        assert kanji_from_back("犬(いぬ)") == "犬(いぬ)"
        assert "no reading" in caplog.text


class TestClarifications:
    def test_one_request_per_flagged_record(self):
        options = [
            TranslationOption(japanese_kanji="銀行", hiragana="ぎんこう", meaning="money"),
            TranslationOption(japanese_kanji="土手", hiragana="どて", meaning="river"),
        ]
        requests = extract_clarifications(
            [
                vocab("dog", "犬", "いぬ"),
                vocab(
                    "bank",
                    needs_clarification=True,
                    clarification_options=options,
                    original_term="Bank",
                    original_language=Language.EN,
                ),
                vocab("", needs_clarification=True, original_term="かみ"),
            ]
        )
        assert [r.term for r in requests] == ["Bank", "かみ"]
        assert requests[0].options == options
        assert requests[1].original_language == Language.UNKNOWN
        assert len({r.id for r in requests}) == 2
