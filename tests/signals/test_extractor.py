# tests/signals/test_extractor.py
# 文本信号提取器测试 / Text signal extractor tests

"""文本信号提取器测试。 / Text signal extractor tests."""
import pytest

from surveylens.signals.extractor import (
    SubstringMatcher,
    WordBoundaryMatcher,
    any_keyword,
    count_keyword_hits,
    hit_percentages,
    normalize_text,
    rank_top,
)

LEXICON = {
    "speed": ["fast", "quick"],
    "trust": ["secure", "trust"],
    "value": ["cheap"],
}


class TestCountKeywordHits:
    def test_presence_per_text_per_category(self):
        """同一文本在同一类别内最多计 1 次。 / At most one hit per text per category."""
        counts = count_keyword_hits(["fast and quick", "Fast, secure"], LEXICON)
        assert counts == {"speed": 2, "trust": 1, "value": 0}

    def test_all_categories_in_lexicon_order(self):
        counts = count_keyword_hits([], LEXICON)
        assert list(counts) == ["speed", "trust", "value"]
        assert set(counts.values()) == {0}

    def test_empty_and_missing_texts_contribute_nothing(self):
        assert count_keyword_hits(["", None], LEXICON) == {"speed": 0, "trust": 0, "value": 0}

    def test_case_insensitive(self):
        assert count_keyword_hits(["TRUSTED"], LEXICON)["trust"] == 1

    def test_word_boundary_matcher(self):
        texts = ["breakfast is served", "fast"]
        assert count_keyword_hits(texts, LEXICON)["speed"] == 2
        assert count_keyword_hits(texts, LEXICON, WordBoundaryMatcher())["speed"] == 1


class TestRankTop:
    def test_descending_with_stable_ties(self):
        counts = {"a": 1, "b": 3, "c": 1, "d": 3}
        assert rank_top(counts, 3) == ["b", "d", "a"]

    def test_zero_counts_skipped(self):
        assert rank_top({"a": 0, "b": 2}, 3) == ["b"]

    def test_non_positive_limit(self):
        assert rank_top({"a": 1}, 0) == []


class TestHitPercentages:
    def test_only_matched_phrases(self):
        result = hit_percentages(["quick results", "quick results now", "nothing"], ["quick results", "instant access"])
        assert result == {"quick results": pytest.approx(200 / 3)}

    def test_no_texts(self):
        assert hit_percentages([], ["x"]) == {}


class TestMatchers:
    def test_substring(self):
        matcher = SubstringMatcher()
        assert matcher.matches("breakfast", "fast")
        assert not matcher.matches("breakfast", "")

    def test_word_boundary_handles_hyphenated_keywords(self):
        matcher = WordBoundaryMatcher()
        assert matcher.matches("a user-friendly app", "user-friendly")
        assert not matcher.matches("breakfast", "fast")

    def test_any_keyword(self):
        assert any_keyword("Secure Login", ["secure"])
        assert not any_keyword(None, ["secure"])
        assert not any_keyword("anything", [])


class TestNormalizeText:
    def test_lower_cases(self):
        assert normalize_text("Fast SSO") == "fast sso"

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_text_is_empty(self, value):
        assert normalize_text(value) == ""
