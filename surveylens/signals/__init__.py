# signals/
# 文本信号提取：关键词命中统计与排序。 / Text signals: keyword hit counting and ranking.

from surveylens.signals.extractor import (
    DEFAULT_MATCHER,
    KeywordMatcher,
    SubstringMatcher,
    WordBoundaryMatcher,
    any_keyword,
    count_keyword_hits,
    hit_percentages,
    normalize_text,
    rank_top,
)

__all__ = [
    "DEFAULT_MATCHER",
    "KeywordMatcher",
    "SubstringMatcher",
    "WordBoundaryMatcher",
    "any_keyword",
    "count_keyword_hits",
    "hit_percentages",
    "normalize_text",
    "rank_top",
]
