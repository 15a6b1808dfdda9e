# roadmap.py
# =============================================================================
# 实施路线图计算器 / Implementation roadmap calculator
#
# 把一组平铺的候选选项变成按 ROI 排序、分阶段的构建计划：
#   1. 工作量估算: 三档关键词分类 + 文本长度（High -> Medium -> Low -> 默认 Medium）
#   2. ROI = 偏好% * 100 / 工作量天数（工作量为 0 时 ROI = 0）
#   3. 依赖 / 阻塞: 从风险描述的文本共现中提取
#   4. 阶段划分: 严格优先级，首个命中即生效：AVOID -> NOW -> Q2 -> BACKLOG
# / Turns a flat option list into an ROI-ordered, phased build plan.
#
# 已知规则交互：ROI > 10 即可进入 NOW，与难度无关（高难度选项也可能进入 NOW）。
# 该规则按原样保留，测试中显式覆盖。
# / Known rule interaction: ROI > 10 reaches NOW regardless of difficulty
#   (a High-difficulty option can land in NOW). Kept literally and pinned by tests.
# =============================================================================

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from surveylens import templates
from surveylens.config import SynthesisConfig
from surveylens.lexicon.tables import DEFAULT_LEXICON, Lexicon
from surveylens.primitives.insight_models import (
    Difficulty,
    EffortEstimate,
    OptionPlan,
    Phase,
    Roadmap,
    RoadmapPhase,
)
from surveylens.primitives.models import DecisionFactor, Risk, SurveyResult
from surveylens.signals.extractor import KeywordMatcher, any_keyword, normalize_text
from surveylens.utils.options import index_to_letter

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SynthesisConfig()

# 阶段输出顺序 / Phase emission order
PHASE_ORDER = (Phase.NOW, Phase.Q2, Phase.BACKLOG, Phase.AVOID)


# =============================================================================
# 工作量与 ROI / Effort and ROI
# =============================================================================


def estimate_effort(
    option_text: str,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> EffortEstimate:
    """三档工作量估算。 / Three-tier effort estimate.

    依次检查 High、Medium、Low，首个命中生效；都不命中时默认 Medium。
    / Checks High, then Medium, then Low; first match wins; otherwise Medium.
    """
    config = config or _DEFAULT_CONFIG
    effort = (lexicon or DEFAULT_LEXICON).effort
    text = option_text or ""
    length = len(text)

    if any_keyword(text, effort.get("High", ()), matcher) or length > config.high_length_cutoff:
        return EffortEstimate(config.high_effort_days, Difficulty.HIGH)
    if any_keyword(text, effort.get("Medium", ()), matcher) or (
        config.medium_length_cutoff < length <= config.high_length_cutoff
    ):
        return EffortEstimate(config.medium_effort_days, Difficulty.MEDIUM)
    if any_keyword(text, effort.get("Low", ()), matcher) or length <= config.low_length_cutoff:
        return EffortEstimate(config.low_effort_days, Difficulty.LOW)
    return EffortEstimate(config.medium_effort_days, Difficulty.MEDIUM)


def calculate_roi(preference_pct: float, effort_days: int) -> float:
    """ROI = 偏好% * 100 / 天数；天数为 0 时返回 0。 / Zero effort yields ROI 0."""
    if effort_days <= 0:
        return 0.0
    return max(0.0, preference_pct) * 100 / effort_days


# =============================================================================
# 依赖与阻塞 / Dependencies and blockers
# =============================================================================


def extract_dependencies(option: str, risks: List[Risk], all_options: List[str]) -> List[str]:
    """同一风险描述中同时提到本选项与其他选项时，其他选项记为依赖。
    / Another option is a dependency when one risk description mentions both.
    """
    needle = normalize_text(option)
    if not needle.strip():
        return []
    dependencies: List[str] = []
    for risk in risks:
        description = normalize_text(risk.description)
        if needle not in description:
            continue
        for other in all_options:
            other_needle = normalize_text(other)
            if other == option or not other_needle.strip():
                continue
            if other_needle in description and other not in dependencies:
                dependencies.append(other)
    return dependencies


def extract_blockers(option: str, risks: List[Risk]) -> List[str]:
    """提到本选项的 High 级风险即为阻塞。 / High-severity risks that mention the option."""
    needle = normalize_text(option)
    if not needle.strip():
        return []
    return [
        risk.description
        for risk in risks
        if risk.severity == "High" and needle in normalize_text(risk.description)
    ]


def _rationale_for(
    option: str,
    preference_pct: float,
    blockers: List[str],
    decision_factors: List[DecisionFactor],
) -> str:
    needle = normalize_text(option)
    relevant = []
    if needle.strip():
        relevant = [
            f.factor
            for f in decision_factors
            if needle in normalize_text(f.factor)
            or any(needle in normalize_text(p) for p in f.platforms_influenced)
        ]
    if relevant:
        return ". ".join(relevant)
    if preference_pct == 0:
        return templates.RATIONALE_NO_PREFERENCE
    if blockers:
        return templates.RATIONALE_BLOCKERS.format(count=len(blockers))
    return templates.RATIONALE_PREFERENCE.format(pct=preference_pct)


# =============================================================================
# 阶段划分 / Phase assignment
# =============================================================================


def assign_phase(plan: OptionPlan, config: Optional[SynthesisConfig] = None) -> Phase:
    """严格优先级，自上而下首个命中生效。 / Strict precedence, first match wins."""
    config = config or _DEFAULT_CONFIG
    if plan.preference_pct < config.avoid_preference_floor or plan.blockers:
        return Phase.AVOID
    if plan.roi_score > config.now_roi_threshold or (
        plan.preference_pct > config.high_preference_threshold
        and plan.difficulty == Difficulty.LOW
    ):
        return Phase.NOW
    if plan.preference_pct > config.high_preference_threshold:
        return Phase.Q2
    return Phase.BACKLOG


def plan_option(
    survey: SurveyResult,
    index: int,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> OptionPlan:
    option = survey.options[index]
    preference = survey.preference_for(index_to_letter(index))
    effort = estimate_effort(option, config, lexicon, matcher)
    roi = calculate_roi(preference, effort.days)
    blockers = extract_blockers(option, survey.risks)
    return OptionPlan(
        option_text=option,
        preference_pct=preference,
        effort_days=effort.days,
        difficulty=effort.difficulty,
        roi_score=roi,
        dependencies=extract_dependencies(option, survey.risks, survey.options),
        blockers=blockers,
        rationale=_rationale_for(option, preference, blockers, survey.decision_factors),
    )


def _phase_rationale(phase: Phase, plans: List[OptionPlan], avg: float, floor: float) -> str:
    if phase != Phase.AVOID:
        return templates.PHASE_RATIONALES[phase.value].format(avg=avg)
    blocked = [p for p in plans if p.blockers]
    if len(blocked) == len(plans):
        return templates.AVOID_ALL_BLOCKED.format(count=len(plans))
    if avg < floor:
        return templates.AVOID_LOW_PREFERENCE.format(avg=avg)
    return templates.AVOID_MIXED.format(avg=avg)


def _build_phase(phase: Phase, plans: List[OptionPlan], config: SynthesisConfig) -> RoadmapPhase:
    avg = sum(p.preference_pct for p in plans) / len(plans)
    skip_reasons: List[str] = []
    if phase == Phase.AVOID:
        skip_reasons = [
            f"{p.option_text}: {'; '.join(p.blockers)}" for p in plans if p.blockers
        ]
    return RoadmapPhase(
        phase=phase,
        timeline=phase.timeline,
        options=plans,
        aggregate_effort_days=sum(p.effort_days for p in plans),
        aggregate_preference_pct=avg,
        rationale=_phase_rationale(phase, plans, avg, config.avoid_preference_floor),
        skip_reasons=skip_reasons,
        label=phase.label,
    )


def _total_timeline(phases: List[RoadmapPhase]) -> str:
    active = [p for p in phases if p.phase != Phase.AVOID]
    if len(active) == 1:
        return active[0].timeline
    if active:
        return f"{active[0].timeline} - {active[-1].timeline}"
    if phases:
        return templates.ONLY_AVOID_TIMELINE
    return templates.NO_TIMELINE


# =============================================================================
# 入口 / Entry point
# =============================================================================


def compute_roadmap(
    survey: SurveyResult,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> Roadmap:
    """计算实施路线图（纯函数）。 / Compute the implementation roadmap (pure function).

    每个选项恰好出现在一个阶段中；空阶段不输出。
    / Every option lands in exactly one phase; empty phases are not emitted.
    """
    config = config or _DEFAULT_CONFIG
    plans = [
        plan_option(survey, i, config, lexicon, matcher)
        for i in range(len(survey.options))
    ]
    # ROI 降序，稳定排序保留发现顺序 / ROI descending; stable sort keeps discovery order
    plans.sort(key=lambda p: -p.roi_score)

    buckets: Dict[Phase, List[OptionPlan]] = {phase: [] for phase in PHASE_ORDER}
    for plan in plans:
        phase = assign_phase(plan, config)
        buckets[phase].append(plan)
        logger.debug(
            "选项 %r: pref=%.1f%%, effort=%dd/%s, roi=%.1f -> %s",
            plan.option_text, plan.preference_pct, plan.effort_days,
            plan.difficulty.value, plan.roi_score, phase.value,
        )

    phases = [
        _build_phase(phase, buckets[phase], config)
        for phase in PHASE_ORDER
        if buckets[phase]
    ]
    avoid = buckets[Phase.AVOID]
    skip_reasons = [
        f"{p.option_text}: {'; '.join(p.blockers)}" for p in avoid if p.blockers
    ]

    roadmap = Roadmap(
        phases=phases,
        estimated_total_timeline=_total_timeline(phases),
        total_effort_days=sum(p.aggregate_effort_days for p in phases),
        skip_reasons=skip_reasons,
    )
    logger.info(
        "路线图完成: %d 个选项, %d 个阶段, 时间线=%s",
        len(plans), len(phases), roadmap.estimated_total_timeline,
    )
    return roadmap
