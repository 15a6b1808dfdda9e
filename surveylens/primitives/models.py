# models.py
# =============================================================================
# 调查结果输入数据模型。 / Survey result input data models.
#
# 包含：SurveyResult、Response、PlatformGroup、ChoiceStats、
#       ChoiceDistribution、Risk、DecisionFactor、OverallMetrics。
# 全部为不可变值对象；from_dict() 负责把上游 JSON 宽松地解析为模型，
# 数值在解析时做防御性截断，缺失字段取零值/空值。
# / All immutable value objects. from_dict() leniently parses upstream JSON;
#   numbers are clamped at parse time, missing fields default to zero/empty.
# =============================================================================

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from surveylens.primitives.validation import (
    OPTIONS_UNSUPPORTED,
    SURVEY_SCHEMA_INVALID,
    SurveyValidationError,
)
from surveylens.utils.options import MAX_OPTIONS, letter_to_index, UnsupportedOptionIndexError

logger = logging.getLogger(__name__)

SEVERITIES = ("Low", "Medium", "High")


# =============================================================================
# 数值工具 / Numeric helpers
# =============================================================================


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if result != result:  # NaN
        return default
    return result


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _normalize_severity(value: Any) -> str:
    text = _as_str(value).strip().lower()
    for severity in SEVERITIES:
        if text == severity.lower():
            return severity
    return "Low" if not text else text.capitalize()


# =============================================================================
# 单条回答 / Individual answers
# =============================================================================


@dataclass(frozen=True)
class Response:
    """单个模拟受访者的回答。 / A single simulated respondent's answer.

    confidence 在解析时截断到 [0, 1]。 / confidence is clamped to [0, 1] at parse time.
    """

    agent_id: str
    platform: str
    choice: str  # 选项字母 / option letter
    confidence: float
    reasoning: str
    reasoning_summary: str = ""

    @property
    def combined_text(self) -> str:
        """主推理 + 摘要。 / Primary reasoning plus the optional summary."""
        return f"{self.reasoning} {self.reasoning_summary}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], platform: str = "") -> Response:
        return cls(
            agent_id=_as_str(data.get("agent_id") or data.get("user_id")),
            platform=_as_str(data.get("platform") or platform),
            choice=_as_str(data.get("choice")).strip().upper(),
            confidence=clamp(_as_float(data.get("confidence"), 0.5), 0.0, 1.0),
            reasoning=_as_str(data.get("reasoning")),
            reasoning_summary=_as_str(data.get("reasoning_summary")),
        )


@dataclass(frozen=True)
class PlatformGroup:
    """按平台分组的回答及其预计算共识度。 / Responses grouped by platform with a pre-computed consensus."""

    platform: str
    responses: List[Response] = field(default_factory=list)
    platform_consensus: float = 0.0
    total_agents: int = 0
    platform_insights: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], platform: str = "") -> PlatformGroup:
        name = _as_str(data.get("platform") or platform)
        responses = [
            Response.from_dict(r, platform=name)
            for r in (data.get("responses") or [])
            if isinstance(r, Mapping)
        ]
        return cls(
            platform=name,
            responses=responses,
            platform_consensus=max(0.0, _as_float(data.get("platform_consensus"))),
            total_agents=max(0, _as_int(data.get("total_agents"), len(responses))),
            platform_insights=_as_str(data.get("platform_insights")),
        )


# =============================================================================
# 选项分布 / Choice distribution
# =============================================================================


@dataclass(frozen=True)
class ChoiceStats:
    option: str = ""
    count: int = 0
    percentage: float = 0.0
    confidence_avg: float = 0.0
    confidence_median: float = 0.0
    primary_reasoning: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChoiceStats:
        return cls(
            option=_as_str(data.get("option")),
            count=max(0, _as_int(data.get("count"))),
            percentage=clamp(_as_float(data.get("percentage")), 0.0, 100.0),
            confidence_avg=clamp(_as_float(data.get("confidence_avg")), 0.0, 1.0),
            confidence_median=clamp(_as_float(data.get("confidence_median")), 0.0, 1.0),
            primary_reasoning=_as_str(data.get("primary_reasoning")),
        )


@dataclass(frozen=True)
class ChoiceDistribution:
    """选项字母 -> 统计。 / Option letter -> stats."""

    choices: Dict[str, ChoiceStats] = field(default_factory=dict)
    winning_choice: Optional[str] = None
    winning_percentage: Optional[float] = None
    runner_up: Optional[str] = None
    runner_up_percentage: Optional[float] = None
    clear_winner: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChoiceDistribution:
        # 兼容两种形态：{"choices": {...}, ...} 或直接 {letter: stats}
        # / Accept both {"choices": {...}, ...} and a bare {letter: stats} mapping
        raw_choices = data.get("choices")
        if not isinstance(raw_choices, Mapping):
            raw_choices = {k: v for k, v in data.items() if isinstance(v, Mapping)}
        choices = {
            _as_str(letter).strip().upper(): ChoiceStats.from_dict(stats)
            for letter, stats in raw_choices.items()
            if isinstance(stats, Mapping)
        }

        winning_pct = data.get("winning_percentage")
        runner_up_pct = data.get("runner_up_percentage")
        return cls(
            choices=choices,
            winning_choice=_as_str(data.get("winning_choice")).strip().upper() or None,
            winning_percentage=(
                clamp(_as_float(winning_pct), 0.0, 100.0) if winning_pct is not None else None
            ),
            runner_up=_as_str(data.get("runner_up")).strip().upper() or None,
            runner_up_percentage=(
                clamp(_as_float(runner_up_pct), 0.0, 100.0) if runner_up_pct is not None else None
            ),
            clear_winner=bool(data.get("clear_winner", False)),
        )


# =============================================================================
# 风险与决策因素 / Risks and decision factors
# =============================================================================


@dataclass(frozen=True)
class Risk:
    description: str
    severity: str = "Low"  # Low / Medium / High
    mitigation: str = ""
    risk_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Risk:
        return cls(
            description=_as_str(data.get("description")),
            severity=_normalize_severity(data.get("severity")),
            mitigation=_as_str(data.get("mitigation")),
            risk_type=_as_str(data.get("risk_type")),
        )


@dataclass(frozen=True)
class DecisionFactor:
    factor: str
    impact_score: float = 0.0
    agent_mentions: int = 0
    platforms_influenced: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DecisionFactor:
        return cls(
            factor=_as_str(data.get("factor")),
            impact_score=_as_float(data.get("impact_score")),
            agent_mentions=max(0, _as_int(data.get("agent_mentions"))),
            platforms_influenced=[
                _as_str(p) for p in (data.get("platforms_influenced") or [])
            ],
        )


@dataclass(frozen=True)
class OverallMetrics:
    average_confidence: Optional[float] = None
    consistency_score: Optional[float] = None
    response_agreement: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OverallMetrics:
        def _opt(key: str) -> Optional[float]:
            value = data.get(key)
            return None if value is None else _as_float(value)

        return cls(
            average_confidence=_opt("average_confidence"),
            consistency_score=_opt("consistency_score"),
            response_agreement=_opt("response_agreement"),
        )


# =============================================================================
# 调查结果 / Survey result
# =============================================================================


@dataclass(frozen=True)
class SurveyResult:
    """已完成的多 Agent 调查结果（外部输入，不可变）。
    / A completed multi-agent survey result (external input, immutable).

    responses 为平铺列表；platform_groups 为按平台分组的列表，二者可任选其一或并存。
    / `responses` is the flat list; `platform_groups` holds per-platform groups.
    Either or both may be present.
    """

    question: str
    options: List[str]
    choice_distribution: ChoiceDistribution = field(default_factory=ChoiceDistribution)
    responses: List[Response] = field(default_factory=list)
    platform_groups: List[PlatformGroup] = field(default_factory=list)
    risks: List[Risk] = field(default_factory=list)
    decision_factors: List[DecisionFactor] = field(default_factory=list)
    platforms_surveyed: List[str] = field(default_factory=list)
    confidence_in_recommendation: Optional[float] = None
    overall_metrics: Optional[OverallMetrics] = None
    recommended_direction: str = ""
    key_findings: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.options) > MAX_OPTIONS:
            raise SurveyValidationError(
                OPTIONS_UNSUPPORTED,
                f"{len(self.options)} options supplied; at most {MAX_OPTIONS} (A-Z) are supported",
            )

    # -------------------------------------------------------------------------
    # 访问器 / Accessors
    # -------------------------------------------------------------------------

    def all_responses(self) -> List[Response]:
        """平铺回答；平铺列表为空时展开分组回答。
        / The flat list, or the grouped responses flattened when it is empty.
        """
        if self.responses:
            return list(self.responses)
        return [r for group in self.platform_groups for r in group.responses]

    def preference_for(self, letter: str) -> float:
        """缺失的分布条目默认 0%。 / Missing distribution entries default to 0%."""
        stats = self.choice_distribution.choices.get(letter)
        if stats is None:
            return 0.0
        return clamp(stats.percentage, 0.0, 100.0)

    def winning_choice(self) -> Optional[str]:
        """上游给出的获胜选项；缺失时取百分比最高者（并列取靠前）。
        / The upstream winner, else the highest percentage (ties -> earliest).
        """
        declared = self.choice_distribution.winning_choice
        if declared:
            try:
                if letter_to_index(declared) < len(self.options):
                    return declared
            except UnsupportedOptionIndexError:
                pass
        best: Optional[str] = None
        best_pct = -1.0
        for letter in sorted(self.choice_distribution.choices):
            pct = self.preference_for(letter)
            if pct > best_pct:
                best, best_pct = letter, pct
        return best

    def winning_percentage(self) -> float:
        declared = self.choice_distribution.winning_percentage
        if declared is not None:
            return clamp(declared, 0.0, 100.0)
        winner = self.winning_choice()
        return self.preference_for(winner) if winner else 0.0

    def fingerprint(self) -> str:
        """结构化哈希（SHA256），用于缓存。 / Structural SHA256 hash, used as a cache key."""
        canonical = json.dumps(
            dataclasses.asdict(self), sort_keys=True, ensure_ascii=False, default=str,
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    # -------------------------------------------------------------------------
    # 解析 / Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SurveyResult:
        """从上游 JSON 构建。 / Build from the upstream JSON payload.

        字段别名 / Field aliases:
        - responses: "responses" | "agent_responses_list"
        - platform_groups: "platform_groups" | "agent_responses_grouped"
          （映射 platform -> group 或列表） / (mapping platform -> group, or a list)
        - risks: "risks" | "risks_and_blindspots" | "risk_annotations"

        Raises:
            SurveyValidationError: 输入不是映射，或选项超过 26 个。
                / Payload is not a mapping, or has more than 26 options.
        """
        if not isinstance(data, Mapping):
            raise SurveyValidationError(
                SURVEY_SCHEMA_INVALID,
                f"Survey payload must be a JSON object, got {type(data).__name__}",
            )

        options = [_as_str(o) for o in (data.get("options") or [])]

        raw_distribution = data.get("choice_distribution") or {}
        distribution = (
            ChoiceDistribution.from_dict(raw_distribution)
            if isinstance(raw_distribution, Mapping)
            else ChoiceDistribution()
        )

        raw_flat = data.get("responses")
        if raw_flat is None:
            raw_flat = data.get("agent_responses_list")
        responses = [
            Response.from_dict(r) for r in (raw_flat or []) if isinstance(r, Mapping)
        ]

        raw_groups = data.get("platform_groups")
        if raw_groups is None:
            raw_groups = data.get("agent_responses_grouped")
        groups: List[PlatformGroup] = []
        if isinstance(raw_groups, Mapping):
            groups = [
                PlatformGroup.from_dict(g, platform=_as_str(name))
                for name, g in raw_groups.items()
                if isinstance(g, Mapping)
            ]
        elif isinstance(raw_groups, list):
            groups = [PlatformGroup.from_dict(g) for g in raw_groups if isinstance(g, Mapping)]

        raw_risks = _first_present(data, ("risks", "risks_and_blindspots", "risk_annotations"))
        raw_metrics = data.get("overall_metrics")
        raw_confidence = data.get("confidence_in_recommendation")

        survey = cls(
            question=_as_str(data.get("question")),
            options=options,
            choice_distribution=distribution,
            responses=responses,
            platform_groups=groups,
            risks=[Risk.from_dict(r) for r in raw_risks if isinstance(r, Mapping)],
            decision_factors=[
                DecisionFactor.from_dict(f)
                for f in (data.get("decision_factors") or [])
                if isinstance(f, Mapping)
            ],
            platforms_surveyed=[_as_str(p) for p in (data.get("platforms_surveyed") or [])],
            confidence_in_recommendation=(
                None if raw_confidence is None else _as_float(raw_confidence)
            ),
            overall_metrics=(
                OverallMetrics.from_dict(raw_metrics) if isinstance(raw_metrics, Mapping) else None
            ),
            recommended_direction=_as_str(data.get("recommended_direction")),
            key_findings=[_as_str(k) for k in (data.get("key_findings") or [])],
        )
        logger.debug(
            "SurveyResult 解析完成: options=%d, responses=%d, groups=%d, risks=%d",
            len(survey.options), len(survey.responses),
            len(survey.platform_groups), len(survey.risks),
        )
        return survey


def _first_present(data: Mapping[str, Any], keys: Iterable[str]) -> List[Any]:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return list(value) if isinstance(value, (list, tuple)) else []
    return []
