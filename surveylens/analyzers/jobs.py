"""Jobs-to-be-Done 提取器。 / Jobs-to-be-Done extractor.

从推理文本推断受访者“雇用”所选方案去完成的潜在动机（job）：
/ Infers the latent motivation ("job") respondents hire their chosen option
to do, purely from reasoning text:

1. 分类: 回答的推理文本（主推理 + 摘要）包含某类别任一关键词即计入该类别，
   可同时计入多个类别。 / A response counts toward every job whose keyword
   list it hits (OR of substrings, non-exclusive).
2. 采纳率: 命中数 / 回答总数 * 100，低于下限（5%）的类别丢弃，
   余下按采纳率降序取前 3（主 / 次 / 第三）。 / Adoption below the floor is
   dropped; the rest are ranked and the top 3 kept.
3. 兜底: 没有任何类别过线时返回固定的三个默认 job，保证输出非空。
   / When nothing clears the floor, a fixed three-job fallback keeps the
   output non-empty.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from surveylens import templates
from surveylens.config import SynthesisConfig
from surveylens.lexicon.tables import DEFAULT_LEXICON, Lexicon
from surveylens.primitives.insight_models import CanvasData, Job, JobsAnalysis, RankedPhrase
from surveylens.primitives.models import Response, SurveyResult
from surveylens.signals.extractor import (
    KeywordMatcher,
    any_keyword,
    count_keyword_hits,
    hit_percentages,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SynthesisConfig()

# 兜底 job 及其默认采纳率 / Fallback jobs with their default adoption
FALLBACK_JOBS: Tuple[Tuple[str, float], ...] = (
    ("save_time", 45.0),
    ("achieve_goals", 35.0),
    ("reduce_stress", 20.0),
)
# 语料中出现速度/质量信号时上调 / Raised when speed / quality signals appear in the corpus
FALLBACK_NUDGES = {
    "speed": ("save_time", 60.0),
    "quality": ("achieve_goals", 50.0),
}


def extract_ranked_phrases(
    texts: Sequence[str],
    phrases: Sequence[str],
    limit: int,
    matcher: Optional[KeywordMatcher] = None,
) -> List[RankedPhrase]:
    """按命中百分比降序取前 limit 个短语。 / Top `limit` phrases by hit percentage."""
    percentages = hit_percentages(texts, phrases, matcher)
    ranked = sorted(percentages.items(), key=lambda item: -item[1])
    return [RankedPhrase(text=text, percentage=pct) for text, pct in ranked[:limit]]


def extract_desired_outcomes(
    job_id: str,
    texts: Sequence[str],
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> List[RankedPhrase]:
    config = config or _DEFAULT_CONFIG
    phrases = (lexicon or DEFAULT_LEXICON).job_outcomes.get(job_id, ())
    return extract_ranked_phrases(texts, phrases, config.max_ranked_phrases, matcher)


def extract_frustrations(
    job_id: str,
    texts: Sequence[str],
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> List[RankedPhrase]:
    config = config or _DEFAULT_CONFIG
    phrases = (lexicon or DEFAULT_LEXICON).job_frustrations.get(job_id, ())
    return extract_ranked_phrases(texts, phrases, config.max_ranked_phrases, matcher)


def design_implications(job_id: str) -> List[str]:
    """静态模板查表，不从文本推导。 / Static template lookup, not derived from text."""
    return list(templates.JOB_DESIGN_IMPLICATIONS.get(job_id, templates.DEFAULT_DESIGN_IMPLICATIONS))


def _example_reasoning(
    job_id: str,
    responses: Sequence[Response],
    lexicon: Lexicon,
    matcher: Optional[KeywordMatcher],
) -> Optional[str]:
    keywords = lexicon.jobs.get(job_id, ())
    for response in responses:
        if any_keyword(response.reasoning, keywords, matcher):
            return response.reasoning
    return None


def _build_job(
    job_id: str,
    adoption: float,
    texts: Sequence[str],
    example: Optional[str],
    config: SynthesisConfig,
    lexicon: Lexicon,
    matcher: Optional[KeywordMatcher],
) -> Job:
    return Job(
        id=job_id,
        title=templates.JOB_TITLES.get(job_id, templates.DEFAULT_JOB_TITLE),
        description=templates.JOB_DESCRIPTIONS.get(job_id, templates.DEFAULT_JOB_DESCRIPTION),
        adoption_pct=adoption,
        desired_outcomes=extract_desired_outcomes(job_id, texts, config, lexicon, matcher),
        frustrations=extract_frustrations(job_id, texts, config, lexicon, matcher),
        design_implications=design_implications(job_id),
        example_reasoning=example,
    )


def rank_jobs(
    texts: Sequence[str],
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> List[Tuple[str, float]]:
    """过线的 (job_id, 采纳率) 列表，降序，最多 max_jobs 个。
    / (job_id, adoption) pairs clearing the floor, descending, at most max_jobs.
    """
    config = config or _DEFAULT_CONFIG
    lexicon = lexicon or DEFAULT_LEXICON
    total = len(texts)
    if total == 0:
        return []
    counts = count_keyword_hits(texts, lexicon.jobs, matcher)
    logger.debug("job 命中: %s", counts)
    adopted = [
        (job_id, count / total * 100)
        for job_id, count in counts.items()
        if count > 0 and count / total * 100 >= config.job_adoption_floor
    ]
    adopted.sort(key=lambda item: -item[1])
    return adopted[: config.max_jobs]


def fallback_jobs(
    texts: Sequence[str],
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> List[Tuple[str, float]]:
    """固定兜底顺序，按语料中的速度/质量信号上调。 / Fixed fallback, nudged by corpus signals."""
    lexicon = lexicon or DEFAULT_LEXICON
    adoption = dict(FALLBACK_JOBS)
    corpus = " ".join(texts)
    for signal, (job_id, raised) in FALLBACK_NUDGES.items():
        if any_keyword(corpus, lexicon.fallback_nudges.get(signal, ()), matcher):
            adoption[job_id] = raised
    return [(job_id, adoption[job_id]) for job_id, _ in FALLBACK_JOBS]


def compute_jobs(
    survey: SurveyResult,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> JobsAnalysis:
    """计算 Jobs-to-be-Done 分析（纯函数，输出至少包含一个 job）。
    / Compute the Jobs-to-be-Done analysis (pure; always at least one job).
    """
    config = config or _DEFAULT_CONFIG
    lexicon = lexicon or DEFAULT_LEXICON
    responses = survey.all_responses()
    texts = [r.combined_text for r in responses]

    ranked = rank_jobs(texts, config, lexicon, matcher)
    used_fallback = not ranked
    if used_fallback:
        ranked = fallback_jobs(texts, lexicon, matcher)[: max(1, config.max_jobs)]
        logger.info("没有 job 达到 %.1f%% 采纳下限，使用兜底 job", config.job_adoption_floor)
        first_reasoning = responses[0].reasoning if responses else None
        jobs = [
            _build_job(job_id, adoption, texts, first_reasoning, config, lexicon, matcher)
            for job_id, adoption in ranked
        ]
    else:
        jobs = [
            _build_job(
                job_id, adoption, texts,
                _example_reasoning(job_id, responses, lexicon, matcher),
                config, lexicon, matcher,
            )
            for job_id, adoption in ranked
        ]

    primary = jobs[0]
    canvas = CanvasData(
        situation=templates.CANVAS_SITUATION,
        job=primary.title,
        outcome=(
            primary.desired_outcomes[0].text
            if primary.desired_outcomes
            else templates.CANVAS_DEFAULT_OUTCOME
        ),
    )
    logger.info(
        "JTBD 完成: %d 条回答, jobs=%s%s",
        len(responses), [j.id for j in jobs], " (fallback)" if used_fallback else "",
    )
    return JobsAnalysis(
        jobs=jobs,
        situation=templates.JOBS_SITUATION if responses else templates.JOBS_SITUATION_NO_RESPONSES,
        canvas_data=canvas,
        used_fallback=used_fallback,
    )
