"""
Unit tests for the three-tier match cascade.
"""
from conftest import RecordingLogger, StubSearch, simple_entry

from answerlens.domain.common.errors import ValidationError
from answerlens.domain.logic.match_cascade import MatchCascade, extract_keywords
from answerlens.domain.logic.text_normalizer import normalize
from answerlens.domain.models.knowledge import MatchTier, SearchCandidate
from answerlens.domain.models.match_settings import MatchSettings


def make_cascade(search=None, settings=None):
    return MatchCascade(search or StubSearch(), RecordingLogger(), settings)


class TestExtractKeywords:

    def test_maximal_cjk_runs(self):
        assert extract_keywords("abc天龙def八部的g") == ["天龙", "八部的"]

    def test_single_characters_are_not_keywords(self):
        assert extract_keywords("天a龙b") == []

    def test_no_cjk(self):
        assert extract_keywords("hello world") == []


class TestExactTier:

    def test_scenario_recognized_question(self):
        """Raw OCR text with padding resolves to the stored answer."""
        corpus = [simple_entry("天龙八部的创始人是谁", "段正明")]

        result = make_cascade().resolve(normalize("  天龙八部的创始人是谁 "), corpus)

        assert result.tier == MatchTier.EXACT
        assert result.entry.answer.text == "段正明"

    def test_query_inside_question(self):
        corpus = [simple_entry("天龙八部的创始人是谁", "段正明")]

        result = make_cascade().resolve("创始人", corpus)

        assert result.entry.question == "天龙八部的创始人是谁"

    def test_question_inside_query(self):
        """OCR often picks up extra text around the question."""
        corpus = [simple_entry("创始人是谁", "段正明")]

        result = make_cascade().resolve("第3题:天龙八部的创始人是谁?(单选)", corpus)

        assert result.tier == MatchTier.EXACT

    def test_question_is_normalized_before_comparison(self):
        corpus = [simple_entry("天龙 八部 “创始人”", "段正明")]

        result = make_cascade().resolve('天龙八部"创始人"', corpus)

        assert result is not None
        assert result.tier == MatchTier.EXACT

    def test_first_entry_in_corpus_order_wins(self):
        corpus = [
            simple_entry("天龙八部", "first"),
            simple_entry("天龙八部的创始人", "second"),
        ]

        result = make_cascade().resolve("天龙八部的创始人", corpus)

        assert result.entry.answer.text == "first"

    def test_exact_hit_skips_fuzzy_search(self):
        """An exact hit wins even when a very close fuzzy candidate exists."""
        target = simple_entry("天龙八部的创始人是谁", "段正明")
        other = simple_entry("天龙八部的掌门是谁", "other")
        search = StubSearch([SearchCandidate(other, 0.1)])

        result = make_cascade(search).resolve("天龙八部的创始人是谁", [other, target])

        assert result.entry is target
        assert result.tier == MatchTier.EXACT
        assert search.calls == []


class TestFuzzyTier:

    def test_accepts_best_candidate_below_threshold(self):
        entry = simple_entry("what is the capital", "Paris")
        search = StubSearch([SearchCandidate(entry, 0.3)])

        result = make_cascade(search).resolve("whatis capitol", [entry])

        assert result.tier == MatchTier.FUZZY
        assert result.score == 0.3
        assert search.calls == [{
            "key": "question", "query": "whatis capitol",
            "index_threshold": 0.4, "min_match_length": 3,
        }]

    def test_only_top_candidate_is_considered(self):
        first = simple_entry("alpha question", "A")
        second = simple_entry("beta question", "B")
        search = StubSearch([SearchCandidate(first, 0.2), SearchCandidate(second, 0.1)])

        result = make_cascade(search).resolve("gamma", [first, second])

        assert result.entry is first

    def test_rejects_candidate_at_accept_threshold(self):
        entry = simple_entry("what is the capital", "Paris")
        search = StubSearch([SearchCandidate(entry, 0.5)])

        assert make_cascade(search).resolve("unrelated", [entry]) is None

    def test_accept_threshold_is_configurable(self):
        entry = simple_entry("what is the capital", "Paris")
        search = StubSearch([SearchCandidate(entry, 0.3)])
        settings = MatchSettings(fuzzy_accept_threshold=0.2, fuzzy_index_threshold=0.25)

        assert make_cascade(search, settings).resolve("unrelated", [entry]) is None
        assert search.calls[0]["index_threshold"] == 0.25

    def test_search_failure_falls_through_to_keyword_tier(self):
        entry = simple_entry("天龙和八部", "answer")
        search = StubSearch(error=ValidationError("bad threshold"))

        result = make_cascade(search).resolve("天龙x八部", [entry])

        assert result.tier == MatchTier.KEYWORD


class TestKeywordTier:

    def test_single_keyword_never_matches(self):
        corpus = [simple_entry("天龙八部是一部小说", "yes")]

        assert make_cascade().resolve("天龙xyz", corpus) is None

    def test_half_of_four_keywords_is_enough(self):
        corpus = [simple_entry("天龙和八部", "hit")]

        result = make_cascade().resolve("天龙a八部b创始c是谁", corpus)

        assert result.tier == MatchTier.KEYWORD
        assert result.score == 2.0

    def test_one_of_four_keywords_misses(self):
        corpus = [simple_entry("天龙山", "miss")]

        assert make_cascade().resolve("天龙a八部b创始c是谁", corpus) is None

    def test_first_entry_reaching_threshold_wins(self):
        corpus = [
            simple_entry("只有天龙", "one keyword"),
            simple_entry("天龙与八部", "first hit"),
            simple_entry("天龙八部创始是谁", "better but later"),
        ]

        result = make_cascade().resolve("天龙a八部b创始c是谁", corpus)

        assert result.entry.answer.text == "first hit"

    def test_single_keyword_misses_under_permissive_settings(self):
        corpus = [simple_entry("天龙八部是一部小说", "yes")]
        logger = RecordingLogger()
        settings = MatchSettings(keyword_min_count=1, keyword_overlap_ratio=0.0)

        cascade = MatchCascade(StubSearch(), logger, settings)

        assert cascade.resolve("天龙xyz", corpus) is None
        assert cascade.keyword_min_count == 2
        assert cascade.keyword_overlap_ratio == 0.5
        assert logger.messages("warning")

    def test_entry_without_any_keyword_never_matches(self):
        corpus = [simple_entry("完全无关的问题", "no")]
        settings = MatchSettings(keyword_overlap_ratio=0.01)

        assert make_cascade(settings=settings).resolve("天龙a八部b创始c是谁", corpus) is None


class TestResolveEdgeCases:

    def test_empty_query(self):
        search = StubSearch()

        assert make_cascade(search).resolve("", [simple_entry("q", "a")]) is None
        assert search.calls == []

    def test_empty_corpus(self):
        search = StubSearch()

        assert make_cascade(search).resolve("天龙八部", []) is None
        assert search.calls == []

    def test_no_tier_matches(self):
        corpus = [simple_entry("完全不同的问题", "a")]

        assert make_cascade().resolve("hello", corpus) is None
