# surveylens/primitives/insight_models.py
"""洞察输出数据模型。 / Derived insight data models.

三个分析器的输出契约：实施路线图、Jobs-to-be-Done 分析、投放文案。
全部为值对象：无身份、可重复计算、可按输入指纹缓存。
/ Output contracts of the three analyzers: implementation roadmap,
Jobs-to-be-Done analysis and campaign messaging. All value objects:
no identity, safe to recompute, safe to cache by input fingerprint.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


def _plain(obj: Any) -> Any:
    """递归转为 JSON 兼容结构（Enum -> value）。 / Recursively convert to JSON-compatible data."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return _plain(dataclasses.asdict(self))


# =============================================================================
# 实施路线图 / Implementation roadmap
# =============================================================================


class Difficulty(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Phase(str, Enum):
    NOW = "NOW"
    Q2 = "Q2"
    BACKLOG = "BACKLOG"
    AVOID = "AVOID"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

    @property
    def timeline(self) -> str:
        return _PHASE_TIMELINES[self]


_PHASE_LABELS = {
    Phase.NOW: "PHASE 1: NOW",
    Phase.Q2: "PHASE 2: Q2",
    Phase.BACKLOG: "PHASE 3: BACKLOG",
    Phase.AVOID: "AVOID",
}

_PHASE_TIMELINES = {
    Phase.NOW: "0-2 weeks",
    Phase.Q2: "6-12 weeks",
    Phase.BACKLOG: "3+ months",
    Phase.AVOID: "Not recommended",
}


@dataclass(frozen=True)
class EffortEstimate:
    days: int
    difficulty: Difficulty


@dataclass(frozen=True)
class OptionPlan(_Serializable):
    option_text: str
    preference_pct: float
    effort_days: int
    difficulty: Difficulty
    roi_score: float
    dependencies: List[str] = field(default_factory=list)
    blockers: List[str] = field(default_factory=list)
    rationale: str = ""


@dataclass(frozen=True)
class RoadmapPhase(_Serializable):
    phase: Phase
    timeline: str
    options: List[OptionPlan]
    aggregate_effort_days: int
    aggregate_preference_pct: float  # 阶段内平均偏好 / mean preference within the phase
    rationale: str = ""
    skip_reasons: List[str] = field(default_factory=list)  # 仅 AVOID / AVOID only
    label: str = ""  # 展示标签，如 "PHASE 1: NOW" / display label


@dataclass(frozen=True)
class Roadmap(_Serializable):
    phases: List[RoadmapPhase]
    estimated_total_timeline: str
    total_effort_days: int
    skip_reasons: List[str] = field(default_factory=list)

    def get_phase(self, phase: Phase) -> Optional[RoadmapPhase]:
        for p in self.phases:
            if p.phase == phase:
                return p
        return None


# =============================================================================
# Jobs-to-be-Done
# =============================================================================


@dataclass(frozen=True)
class RankedPhrase(_Serializable):
    text: str
    percentage: float


@dataclass(frozen=True)
class Job(_Serializable):
    id: str
    title: str
    description: str
    adoption_pct: float
    desired_outcomes: List[RankedPhrase] = field(default_factory=list)
    frustrations: List[RankedPhrase] = field(default_factory=list)
    design_implications: List[str] = field(default_factory=list)
    example_reasoning: Optional[str] = None


@dataclass(frozen=True)
class CanvasData(_Serializable):
    situation: str
    job: str
    outcome: str


@dataclass(frozen=True)
class JobsAnalysis(_Serializable):
    jobs: List[Job]
    situation: str
    canvas_data: Optional[CanvasData] = None
    used_fallback: bool = False


# =============================================================================
# 投放文案 / Campaign messaging
# =============================================================================


class ToneType(str, Enum):
    FORMAL = "FORMAL"
    CASUAL = "CASUAL"
    URGENT = "URGENT"


@dataclass(frozen=True)
class MessageEffectiveness(_Serializable):
    percentage: float
    top_drivers: List[str]
    message: str
    ad_copy_ideas: List[str]


@dataclass(frozen=True)
class ToneSet(_Serializable):
    formal: str
    casual: str
    urgent: str


@dataclass(frozen=True)
class PlatformMessaging(_Serializable):
    platform: str
    effectiveness: Dict[str, MessageEffectiveness]
    emotional_drivers: Dict[str, int]
    recommended_message: str
    tone_variations: ToneSet
    placeholder: bool = False


@dataclass(frozen=True)
class ToneVariation(_Serializable):
    type: ToneType
    best_for: List[str]
    template: str


@dataclass(frozen=True)
class CampaignPhase(_Serializable):
    time_label: str
    title: str
    action: str
    budget_allocation_pct: int


@dataclass(frozen=True)
class CampaignTimeline(_Serializable):
    strategy_type: str
    phases: List[CampaignPhase]
    primary_platform: str = ""
    confidence: float = 0.0

    @property
    def total_budget_pct(self) -> int:
        return sum(p.budget_allocation_pct for p in self.phases)


@dataclass(frozen=True)
class CampaignMessaging(_Serializable):
    platform_messaging: Dict[str, PlatformMessaging]
    message_variations: List[ToneVariation]
    campaign_timeline: CampaignTimeline
    primary_benefit: str = ""


# =============================================================================
# 行动项 / Action items
# =============================================================================


@dataclass(frozen=True)
class ActionItem(_Serializable):
    title: str
    priority: str  # P0 / P1 / P2
    due_date: Optional[str] = None
    completed: bool = False


@dataclass(frozen=True)
class TalkTrack(_Serializable):
    what_won: str
    why_it_won: List[str]
    next_step: str


@dataclass(frozen=True)
class ActionItemsData(_Serializable):
    items: List[ActionItem]
    talk_track: TalkTrack
