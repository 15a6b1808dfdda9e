# campaign.py
# =============================================================================
# 投放文案生成器 / Campaign messaging generator
#
# 对回答集中的每个平台：
#   1. 情绪驱动: 与信号提取器相同的“文档 × 类别”计数，取前 3
#   2. 选项有效度: 该平台选择此选项的回答占比
#   3. 文案 / 广告语: 按平台族（专业 / 短视频 / 长视频 / 通用）分支的固定模板
# 全局：
#   4. 主平台: platform_consensus 最高者（并列取先出现）
#   5. 排期策略: 节奏（Sprint/Days vs Marathon/Weeks）× 置信区间（Scale /
#      Validation / Balanced）的决策表，三阶段预算之和恒为 100
#   6. 主要收益: 从获胜选项推理中按连接词截取短语，兜底为收益关键词桶
# 无任何分组回答时输出占位条目，保证下游至少有一个平台。
# / Per-platform drivers, effectiveness and templated copy; a global winning
#   platform, decision-table timeline and extracted benefit. Placeholder
#   entries are emitted when no platform has responses.
# =============================================================================

from __future__ import annotations

import dataclasses
import logging
import re
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from surveylens import templates
from surveylens.config import SynthesisConfig
from surveylens.lexicon.tables import DEFAULT_LEXICON, Lexicon
from surveylens.primitives.insight_models import (
    CampaignMessaging,
    CampaignPhase,
    CampaignTimeline,
    MessageEffectiveness,
    PlatformMessaging,
    ToneSet,
    ToneType,
    ToneVariation,
)
from surveylens.primitives.models import PlatformGroup, Response, SurveyResult, clamp
from surveylens.signals.extractor import (
    KeywordMatcher,
    count_keyword_hits,
    normalize_text,
    rank_top,
)
from surveylens.utils.options import index_to_letter, option_for_letter

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SynthesisConfig()

GENERIC_FAMILY = "generic"
DEFAULT_BENEFIT = "improves"


class Tempo(str, Enum):
    SPRINT = "Sprint"
    MARATHON = "Marathon"

    @property
    def unit(self) -> str:
        return "Days" if self is Tempo.SPRINT else "Weeks"


class StrategyType(str, Enum):
    SCALE = "Scale"
    VALIDATION = "Validation"
    BALANCED = "Balanced"


# =============================================================================
# 平台分类 / Platform classification
# =============================================================================


def platform_family(platform: str, lexicon: Optional[Lexicon] = None) -> str:
    """平台名包含族关键词即归入该族，按表序首个命中；否则 generic。
    / First family whose keyword appears in the platform name, else generic.
    """
    name = normalize_text(platform)
    for family, keywords in (lexicon or DEFAULT_LEXICON).platform_families.items():
        if any(kw and kw.lower() in name for kw in keywords):
            return family
    return GENERIC_FAMILY


def platform_tempo(platform: str, lexicon: Optional[Lexicon] = None) -> Tempo:
    name = normalize_text(platform)
    fast = (lexicon or DEFAULT_LEXICON).fast_tempo_platforms
    if any(p and p.lower() in name for p in fast):
        return Tempo.SPRINT
    return Tempo.MARATHON


def select_strategy(confidence: float, config: Optional[SynthesisConfig] = None) -> StrategyType:
    """> high 为 Scale，< low 为 Validation，边界值落入 Balanced。
    / Above high -> Scale, below low -> Validation; boundaries are Balanced.
    """
    config = config or _DEFAULT_CONFIG
    if confidence > config.high_confidence:
        return StrategyType.SCALE
    if confidence < config.low_confidence:
        return StrategyType.VALIDATION
    return StrategyType.BALANCED


# =============================================================================
# 情绪驱动与有效度 / Drivers and effectiveness
# =============================================================================


def extract_emotional_drivers(
    responses: Sequence[Response],
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> Dict[str, int]:
    """仅统计主推理文本，只返回非零类别。 / Counts over primary reasoning; non-zero entries only."""
    counts = count_keyword_hits(
        [r.reasoning for r in responses],
        (lexicon or DEFAULT_LEXICON).emotional_drivers,
        matcher,
    )
    return {driver: count for driver, count in counts.items() if count > 0}


def top_drivers(drivers: Dict[str, int], limit: int = 3) -> List[str]:
    return [driver.upper() for driver in rank_top(drivers, limit)]


def message_effectiveness(responses: Sequence[Response], letter: str) -> float:
    if not responses:
        return 0.0
    matching = sum(1 for r in responses if r.choice == letter)
    return matching / len(responses) * 100


def _lead_driver(drivers: Sequence[str]) -> str:
    return drivers[0].lower() if drivers else templates.DEFAULT_DRIVER


def _family_templates(table, platform: str, lexicon: Optional[Lexicon]):
    """词表新增的平台族没有专属模板时使用 generic 模板。
    / Families added through the lexicon without their own templates use the generic ones.
    """
    family = platform_family(platform, lexicon)
    return table.get(family, table[GENERIC_FAMILY])


def recommended_message(
    platform: str,
    option: str,
    drivers: Sequence[str],
    percentage: float,
    lexicon: Optional[Lexicon] = None,
) -> str:
    template = _family_templates(templates.RECOMMENDED_MESSAGES, platform, lexicon)
    return template.format(
        option=option, driver=_lead_driver(drivers), platform=platform, pct=percentage,
    )


def ad_copy_ideas(
    platform: str,
    option: str,
    drivers: Sequence[str],
    percentage: float,
    lexicon: Optional[Lexicon] = None,
) -> List[str]:
    family_templates = _family_templates(templates.AD_COPY_IDEAS, platform, lexicon)
    ideas = [
        template.format(
            option=option, driver=_lead_driver(drivers), platform=platform, pct=percentage,
        )
        for template in family_templates
    ]
    return ideas[: templates.MAX_AD_COPY_IDEAS]


def tone_set(option: str, drivers: Sequence[str]) -> ToneSet:
    driver = _lead_driver(drivers)
    return ToneSet(**{
        tone: template.format(option=option, driver=driver)
        for tone, template in templates.PLATFORM_TONES.items()
    })


# =============================================================================
# 平台分组 / Platform grouping
# =============================================================================


def _merge_groups(first: PlatformGroup, second: PlatformGroup) -> PlatformGroup:
    """合并同名分组：回答拼接，共识度按回答数加权。
    / Merge two groups of one platform; consensus is weighted by response count.
    """
    weight_a, weight_b = len(first.responses), len(second.responses)
    if weight_a + weight_b:
        consensus = (
            first.platform_consensus * weight_a + second.platform_consensus * weight_b
        ) / (weight_a + weight_b)
    else:
        consensus = max(first.platform_consensus, second.platform_consensus)
    return dataclasses.replace(
        first,
        responses=list(first.responses) + list(second.responses),
        platform_consensus=consensus,
        total_agents=first.total_agents + second.total_agents,
        platform_insights=first.platform_insights or second.platform_insights,
    )


def collect_platform_groups(survey: SurveyResult) -> List[PlatformGroup]:
    """同名分组（忽略大小写）先合并，保留首次出现的名称；
    分组回答为空时，用平铺列表中同平台的回答补齐；
    没有任何分组时，按平台首次出现顺序对平铺回答分组。
    / Groups sharing a platform name (case-insensitive) are merged under the
    first-seen name. Empty groups are filled from flat responses of the same
    platform; without groups, flat responses are grouped by platform in
    first-seen order.
    """
    if survey.platform_groups:
        merged: Dict[str, PlatformGroup] = {}
        for group in survey.platform_groups:
            key = normalize_text(group.platform)
            if key in merged:
                logger.debug("合并同名平台分组: %s", group.platform)
                merged[key] = _merge_groups(merged[key], group)
            else:
                merged[key] = group
        groups = []
        for key, group in merged.items():
            if not group.responses and survey.responses:
                filled = [r for r in survey.responses if normalize_text(r.platform) == key]
                group = dataclasses.replace(group, responses=filled)
            groups.append(group)
        return groups

    by_platform: Dict[str, List[Response]] = {}
    for response in survey.responses:
        by_platform.setdefault(response.platform, []).append(response)
    return [
        PlatformGroup(platform=platform, responses=responses, total_agents=len(responses))
        for platform, responses in by_platform.items()
    ]


def find_winning_platform(groups: Sequence[PlatformGroup]) -> Optional[PlatformGroup]:
    """platform_consensus 最高的分组，并列取先出现者。 / Highest consensus; ties keep the first."""
    winner: Optional[PlatformGroup] = None
    for group in groups:
        if winner is None or group.platform_consensus > winner.platform_consensus:
            winner = group
    return winner


def build_platform_messaging(
    group: PlatformGroup,
    options: Sequence[str],
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> PlatformMessaging:
    config = config or _DEFAULT_CONFIG
    platform = group.platform
    responses = group.responses
    drivers = extract_emotional_drivers(responses, lexicon, matcher)
    platform_drivers = top_drivers(drivers, config.top_driver_limit)

    effectiveness: Dict[str, MessageEffectiveness] = {}
    for index, option in enumerate(options):
        letter = index_to_letter(index)
        percentage = message_effectiveness(responses, letter)
        chosen = [r for r in responses if r.choice == letter]
        option_drivers = top_drivers(
            extract_emotional_drivers(chosen, lexicon, matcher), config.top_driver_limit,
        )
        effectiveness[letter] = MessageEffectiveness(
            percentage=percentage,
            top_drivers=option_drivers,
            message=recommended_message(platform, option, option_drivers, percentage, lexicon),
            ad_copy_ideas=ad_copy_ideas(platform, option, option_drivers, percentage, lexicon),
        )

    winning_letter: Optional[str] = None
    for letter, entry in effectiveness.items():
        if winning_letter is None or entry.percentage > effectiveness[winning_letter].percentage:
            winning_letter = letter

    if winning_letter is None:
        message = templates.NO_OPTION_MESSAGE.format(platform=platform)
        winning_option = ""
    else:
        winning_option = option_for_letter(list(options), winning_letter)
        message = recommended_message(
            platform, winning_option, platform_drivers,
            effectiveness[winning_letter].percentage, lexicon,
        )

    return PlatformMessaging(
        platform=platform,
        effectiveness=effectiveness,
        emotional_drivers=drivers,
        recommended_message=message,
        tone_variations=tone_set(winning_option, platform_drivers),
    )


def placeholder_messaging(survey: SurveyResult, platform: str) -> PlatformMessaging:
    effectiveness = {}
    for index, option in enumerate(survey.options):
        letter = index_to_letter(index)
        percentage = survey.preference_for(letter)
        effectiveness[letter] = MessageEffectiveness(
            percentage=percentage,
            top_drivers=[templates.PLACEHOLDER_DRIVER],
            message=templates.PLACEHOLDER_MESSAGE.format(pct=percentage, option=option),
            ad_copy_ideas=[t.format(option=option) for t in templates.PLACEHOLDER_AD_COPY],
        )
    return PlatformMessaging(
        platform=platform,
        effectiveness=effectiveness,
        emotional_drivers={},
        recommended_message=templates.NO_OPTION_MESSAGE.format(platform=platform),
        tone_variations=ToneSet(**{
            tone: template.format(platform=platform)
            for tone, template in templates.PLACEHOLDER_TONES.items()
        }),
        placeholder=True,
    )


def placeholder_platforms(survey: SurveyResult, groups: Sequence[PlatformGroup]) -> List[str]:
    if survey.platforms_surveyed:
        return list(survey.platforms_surveyed)
    if groups:
        return [g.platform for g in groups]
    return [templates.PLACEHOLDER_PLATFORM]


# =============================================================================
# 置信度与主要收益 / Confidence and primary benefit
# =============================================================================


def resolve_confidence(survey: SurveyResult) -> float:
    """confidence_in_recommendation -> average_confidence -> 获胜百分比 / 100，截断到 [0, 1]。
    / Fallback chain, clamped to [0, 1].
    """
    if survey.confidence_in_recommendation is not None:
        value = survey.confidence_in_recommendation
    elif survey.overall_metrics is not None and survey.overall_metrics.average_confidence is not None:
        value = survey.overall_metrics.average_confidence
    else:
        value = survey.winning_percentage() / 100
    return clamp(value, 0.0, 1.0)


@lru_cache(maxsize=32)
def _connective_pattern(connectives: Tuple[str, ...]) -> "re.Pattern[str]":
    alternation = "|".join(
        re.escape(c.lower()) for c in sorted(connectives, key=len, reverse=True) if c
    )
    return re.compile(r"\b(?:" + alternation + r")\b([^.!?]{0,60})")


def extract_primary_benefit(
    responses: Sequence[Response],
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> str:
    """连接词之后的短语（最多 60 字符）；找不到时取最常见的收益关键词桶。
    / The clause after the first connective (up to 60 chars), else the most
    frequent benefit bucket, else "improves". Never empty.
    """
    lexicon = lexicon or DEFAULT_LEXICON
    corpus = " ".join(normalize_text(r.reasoning) for r in responses)
    connectives = tuple(lexicon.benefit_connectives)
    if corpus and connectives:
        match = _connective_pattern(connectives).search(corpus)
        if match and match.group(1).strip():
            return match.group(1).strip()

    counts = count_keyword_hits([r.reasoning for r in responses], lexicon.benefits, matcher)
    ranked = rank_top(counts, 1)
    return ranked[0] if ranked else DEFAULT_BENEFIT


def _winning_responses(
    survey: SurveyResult, groups: Sequence[PlatformGroup], winner: Optional[str],
) -> List[Response]:
    if not winner:
        return []
    grouped = [r for g in groups for r in g.responses if r.choice == winner]
    if grouped:
        return grouped
    return [r for r in survey.responses if r.choice == winner]


def message_variations(stat: str, benefit: str, option: str) -> List[ToneVariation]:
    return [
        ToneVariation(
            type=tone,
            best_for=list(templates.TONE_BEST_FOR[tone.value]),
            template=templates.MESSAGE_VARIATIONS[tone.value].format(
                stat=stat, benefit=benefit, option=option,
            ),
        )
        for tone in ToneType
    ]


# =============================================================================
# 投放排期 / Campaign timeline
# =============================================================================


def generate_campaign_timeline(
    primary_platform: str,
    confidence: float,
    option: str = "",
    benefit: str = DEFAULT_BENEFIT,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
) -> CampaignTimeline:
    """节奏 × 策略决策表，输出恰好 3 个阶段。 / Tempo x strategy decision table; exactly 3 phases."""
    confidence = clamp(confidence, 0.0, 1.0)
    tempo = platform_tempo(primary_platform, lexicon)
    strategy = select_strategy(confidence, config)
    phases = [
        CampaignPhase(
            time_label=time_label.format(unit=tempo.unit),
            title=title,
            action=action.format(platform=primary_platform, option=option, benefit=benefit),
            budget_allocation_pct=pct,
        )
        for time_label, title, action, pct in templates.TIMELINE_TEMPLATES[strategy.value]
    ]
    logger.debug(
        "排期策略: platform=%s, confidence=%.2f -> %s %s",
        primary_platform, confidence, tempo.value, strategy.value,
    )
    return CampaignTimeline(
        strategy_type=f"{tempo.value} {strategy.value}",
        phases=phases,
        primary_platform=primary_platform,
        confidence=confidence,
    )


# =============================================================================
# 入口 / Entry point
# =============================================================================


def compute_campaign_messaging(
    survey: SurveyResult,
    config: Optional[SynthesisConfig] = None,
    lexicon: Optional[Lexicon] = None,
    matcher: Optional[KeywordMatcher] = None,
) -> CampaignMessaging:
    """计算各平台投放文案与排期（纯函数，至少一个平台条目）。
    / Compute per-platform messaging and the campaign timeline (pure; at least
    one platform entry).
    """
    config = config or _DEFAULT_CONFIG
    lexicon = lexicon or DEFAULT_LEXICON
    groups = collect_platform_groups(survey)

    platform_messaging: Dict[str, PlatformMessaging] = {}
    for group in groups:
        if not group.responses:
            continue
        platform_messaging[group.platform] = build_platform_messaging(
            group, survey.options, config, lexicon, matcher,
        )

    if not platform_messaging:
        platforms = placeholder_platforms(survey, groups)
        logger.info("没有可用的分组回答，输出占位平台: %s", platforms)
        for platform in platforms:
            platform_messaging[platform] = placeholder_messaging(survey, platform)

    winner_group = find_winning_platform(groups)
    if winner_group is not None:
        primary_platform = winner_group.platform
    else:
        primary_platform = next(iter(platform_messaging))

    winning_letter = survey.winning_choice()
    winning_option = option_for_letter(survey.options, winning_letter or "", winning_letter or "")
    benefit = extract_primary_benefit(
        _winning_responses(survey, groups, winning_letter), lexicon, matcher,
    )
    confidence = resolve_confidence(survey)
    stat = templates.WINNING_STAT.format(pct=survey.winning_percentage())

    messaging = CampaignMessaging(
        platform_messaging=platform_messaging,
        message_variations=message_variations(stat, benefit, winning_option),
        campaign_timeline=generate_campaign_timeline(
            primary_platform, confidence, winning_option, benefit, config, lexicon,
        ),
        primary_benefit=benefit,
    )
    logger.info(
        "投放文案完成: %d 个平台, 主平台=%s, 策略=%s",
        len(platform_messaging), primary_platform, messaging.campaign_timeline.strategy_type,
    )
    return messaging
