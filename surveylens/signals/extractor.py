"""文本信号提取器。 / Text signal extractor.

三个分析器共用的关键词命中统计：对每段文本按“文档 × 类别”计数，
同一文本在同一类别内最多计 1 次，可同时计入多个类别。
/ Keyword-hit counting shared by all three analyzers: presence per document
per category. A text counts at most once per category, but may count toward
several categories.

匹配策略通过 KeywordMatcher 注入（默认子串包含），分析器控制流不感知具体策略。
/ The matching strategy is injected through KeywordMatcher (substring
containment by default); analyzers never see which strategy is in use.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence


class KeywordMatcher(Protocol):
    """text 与 keyword 均已转为小写。 / Both text and keyword arrive lower-cased."""

    def matches(self, text: str, keyword: str) -> bool:
        ...


class SubstringMatcher:
    """子串包含匹配（默认）。 / Plain substring containment (default)."""

    def matches(self, text: str, keyword: str) -> bool:
        return bool(keyword) and keyword in text


class WordBoundaryMatcher:
    """整词匹配：关键词两侧必须是词边界。 / Whole-word matching on regex word boundaries."""

    def matches(self, text: str, keyword: str) -> bool:
        return bool(keyword) and _word_pattern(keyword).search(text) is not None


@lru_cache(maxsize=1024)
def _word_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)")


DEFAULT_MATCHER: KeywordMatcher = SubstringMatcher()


def normalize_text(text: Optional[str]) -> str:
    """小写化；None / 空值返回空串。 / Lower-cased text; None and empty become ""."""
    if not text:
        return ""
    return str(text).lower()


def any_keyword(
    text: Optional[str],
    keywords: Sequence[str],
    matcher: Optional[KeywordMatcher] = None,
) -> bool:
    """文本是否包含任一关键词（OR 语义）。 / True if the text contains any keyword."""
    matcher = matcher or DEFAULT_MATCHER
    lowered = normalize_text(text)
    if not lowered:
        return False
    return any(matcher.matches(lowered, kw.lower()) for kw in keywords)


def count_keyword_hits(
    texts: Iterable[Optional[str]],
    lexicon: Mapping[str, Sequence[str]],
    matcher: Optional[KeywordMatcher] = None,
) -> Dict[str, int]:
    """统计每个类别被多少段文本命中。 / Count how many texts hit each category.

    返回值包含词表中的全部类别（未命中为 0），顺序与词表一致。
    空文本或 None 贡献 0。不抛异常，结果确定。
    / Every lexicon category is present (0 when unmatched), in lexicon order.
    Empty or missing texts contribute nothing. Never raises; deterministic.
    """
    matcher = matcher or DEFAULT_MATCHER
    counts: Dict[str, int] = {category: 0 for category in lexicon}
    for text in texts:
        lowered = normalize_text(text)
        if not lowered:
            continue
        for category, keywords in lexicon.items():
            if any(matcher.matches(lowered, kw.lower()) for kw in keywords):
                counts[category] += 1
    return counts


def rank_top(counts: Mapping[str, int], limit: int) -> List[str]:
    """按命中数降序取前 limit 个类别，零命中不入榜，并列按原表顺序。
    / Top `limit` categories by count, descending. Zero-count categories are
    skipped; ties keep the original table order (stable sort).
    """
    if limit <= 0:
        return []
    ranked = sorted(
        (category for category, count in counts.items() if count > 0),
        key=lambda category: -counts[category],
    )
    return ranked[:limit]


def hit_percentages(
    texts: Sequence[Optional[str]],
    phrases: Sequence[str],
    matcher: Optional[KeywordMatcher] = None,
) -> Dict[str, float]:
    """每个短语命中文本的百分比（仅保留命中过的短语）。
    / Percentage of texts containing each phrase; unmatched phrases are omitted.

    分母为 texts 的条数（含空文本）；texts 为空时返回 {}。
    / The denominator is len(texts), empty texts included; {} when no texts.
    """
    total = len(texts)
    if total == 0:
        return {}
    counts = count_keyword_hits(texts, {phrase: [phrase] for phrase in phrases}, matcher)
    return {
        phrase: count / total * 100
        for phrase, count in counts.items()
        if count > 0
    }
