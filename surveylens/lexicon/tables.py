# tables.py
# =============================================================================
# 词表: 三个分析器共享的只读关键词映射。
# / Lexicon tables: read-only keyword maps shared by the three analyzers.
#
# 所有表都是数据而非代码：模块级只读常量（MappingProxyType + tuple），
# 通过 Lexicon 值对象整体注入，测试与配置文件可以替换任意一张表。
# / Every table is data, not code: module-level read-only constants
#   (MappingProxyType + tuple), injected as a whole through the Lexicon value
#   object so tests and config files can substitute any table.
#
# 表内类别的先后顺序有意义：rank_top() 以此顺序打破并列。
# / Category order matters: rank_top() breaks ties by table order.
# =============================================================================

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

KeywordTable = Mapping[str, Sequence[str]]


def freeze_table(table: Mapping[str, Sequence[str]]) -> KeywordTable:
    """冻结为只读映射，保持插入顺序。 / Freeze into a read-only, order-preserving mapping."""
    return MappingProxyType({str(k): tuple(str(kw) for kw in v) for k, v in table.items()})


# =============================================================================
# 开发工作量 / Development effort
# =============================================================================

EFFORT_KEYWORDS = freeze_table({
    "High": [
        "integration", "ai", "artificial intelligence", "machine learning", "system", "platform",
        "automated", "analytics", "dashboard", "api", "database", "infrastructure", "architecture",
        "blockchain", "cryptocurrency", "enterprise", "scalable", "distributed", "real-time",
        "synchronization", "migration", "transformation", "algorithm", "optimization",
    ],
    "Medium": [
        "feature", "update", "content", "report", "add", "edit", "delete", "manage",
        "settings", "preferences", "notification", "filter", "search", "export", "import",
    ],
    "Low": [
        "toggle", "switch", "button", "link", "text", "label", "color", "theme",
        "icon", "badge", "tooltip", "popup", "modal", "dialog",
    ],
})


# =============================================================================
# Jobs-to-be-Done
# =============================================================================

JOB_KEYWORDS = freeze_table({
    "reduce_stress": [
        "stress", "overwhelm", "anxious", "calm", "peace", "relief", "pressure", "burden",
        "simple", "easy", "straightforward", "clear", "understand",
    ],
    "feel_professional": [
        "professional", "credible", "capable", "confident", "respect", "competent", "expert",
        "polished", "quality", "reliable", "trust", "reputation",
    ],
    "save_time": [
        "fast", "quick", "efficient", "speed", "time-saving", "instant", "rapid", "swift",
        "immediate", "faster", "quicker", "saves time", "time", "minutes", "hours",
    ],
    "impress_others": [
        "impress", "show", "boss", "team", "colleagues", "respect", "recognition", "approval",
        "demonstrate", "prove", "stand out",
    ],
    "learn_grow": [
        "learn", "improve", "skill", "knowledge", "growth", "develop", "master", "expertise",
        "education", "better", "enhance", "upgrade",
    ],
    "belong_community": [
        "community", "belong", "social", "friends", "tribe", "similar", "connect", "network",
        "people", "others", "group", "together",
    ],
    "achieve_goals": [
        "achieve", "goal", "success", "accomplish", "complete", "finish", "win", "victory",
        "succeed", "results", "outcome", "objective",
    ],
    "avoid_risk": [
        "safe", "secure", "risk", "avoid", "prevent", "protect", "shield", "defensive",
        "reliable", "trustworthy", "dependable",
    ],
})

JOB_OUTCOME_KEYWORDS = freeze_table({
    "reduce_stress": ["faster decisions", "reduce context switching", "keep things simple", "less cognitive load"],
    "feel_professional": ["polished appearance", "credible output", "expert level", "high quality"],
    "save_time": ["quick results", "instant access", "rapid completion", "time efficient"],
    "impress_others": ["show expertise", "demonstrate value", "gain recognition", "stand out"],
    "learn_grow": ["gain knowledge", "develop skills", "improve capabilities", "expand expertise"],
    "belong_community": ["connect with peers", "find similar people", "join community", "build network"],
    "achieve_goals": ["reach objectives", "complete tasks", "succeed faster", "accomplish more"],
    "avoid_risk": ["minimize errors", "prevent problems", "stay safe", "reduce uncertainty"],
})

JOB_FRUSTRATION_KEYWORDS = freeze_table({
    "reduce_stress": ["too many options", "hard to compare", "takes too long", "overwhelming", "confusing"],
    "feel_professional": ["unprofessional", "low quality", "amateur", "unpolished", "basic"],
    "save_time": ["slow", "inefficient", "waste time", "delayed", "time consuming"],
    "impress_others": ["unimpressive", "basic", "common", "nothing special", "standard"],
    "learn_grow": ["no learning", "stagnant", "no growth", "limited", "restricted"],
    "belong_community": ["isolated", "alone", "no community", "disconnected", "separate"],
    "achieve_goals": ["blocked", "stuck", "can't progress", "hindered", "delayed"],
    "avoid_risk": ["risky", "uncertain", "unreliable", "dangerous", "unsafe"],
})

# 无任何类别过线时的兜底信号 / Corpus-wide signals that nudge the fallback jobs
FALLBACK_NUDGE_KEYWORDS = freeze_table({
    "speed": ["fast", "quick", "speed"],
    "quality": ["better", "improve", "quality"],
})


# =============================================================================
# 投放文案 / Campaign messaging
# =============================================================================

EMOTIONAL_DRIVER_KEYWORDS = freeze_table({
    "roi": ["roi", "return", "investment", "profit", "revenue", "efficiency", "productivity"],
    "trust": ["trust", "reliable", "secure", "safe", "proven", "established", "credible"],
    "speed": ["speed", "fast", "quick", "instant", "immediate", "rapid", "swift"],
    "convenience": ["convenient", "easy", "simple", "effortless", "accessible", "user-friendly"],
    "trendy": ["trendy", "trending", "popular", "viral", "hot", "current", "modern"],
    "fun": ["fun", "entertaining", "enjoyable", "engaging", "exciting", "playful"],
    "professional": ["professional", "business", "enterprise", "corporate", "serious", "formal"],
    "authentic": ["authentic", "genuine", "real", "honest", "transparent", "sincere"],
    "quality": ["quality", "premium", "high-end", "excellent", "superior", "best"],
    "value": ["value", "affordable", "cheap", "budget", "cost-effective", "economical"],
})

BENEFIT_KEYWORDS = freeze_table({
    "automates": ["automate", "automatic", "automation", "saves time", "time-saving"],
    "simplifies": ["simple", "easy", "simplify", "streamline", "effortless"],
    "improves": ["improve", "better", "enhance", "optimize", "upgrade"],
    "increases": ["increase", "boost", "raise", "grow", "expand"],
    "reduces": ["reduce", "decrease", "lower", "minimize", "cut"],
})

# 引出收益从句的连接词，按匹配优先级排列 / Connectives that introduce a benefit clause
BENEFIT_CONNECTIVES = (
    "because", "since", "as", "due to", "thanks to", "enables", "allows",
    "helps", "provides", "offers", "delivers", "gives",
)

# 平台族（文案模板分支） / Platform families (message template branches)
PLATFORM_FAMILY_KEYWORDS = freeze_table({
    "professional": ["linkedin", "reddit"],
    "short_form": ["tiktok", "instagram"],
    "video": ["youtube"],
})

# 快节奏平台（排期以“天”为单位） / Fast-tempo platforms (timeline measured in days)
FAST_TEMPO_PLATFORMS = ("tiktok", "twitter", "instagram")


# =============================================================================
# Lexicon: 注入单元 / Injection unit
# =============================================================================


@dataclass(frozen=True)
class Lexicon:
    """分析器使用的全部词表。 / Every table the analyzers read.

    默认值即内置常量；LexiconLoader 或测试可按表替换。
    / Defaults are the built-in constants; LexiconLoader or tests swap tables.
    """

    effort: KeywordTable = field(default_factory=lambda: EFFORT_KEYWORDS)
    jobs: KeywordTable = field(default_factory=lambda: JOB_KEYWORDS)
    job_outcomes: KeywordTable = field(default_factory=lambda: JOB_OUTCOME_KEYWORDS)
    job_frustrations: KeywordTable = field(default_factory=lambda: JOB_FRUSTRATION_KEYWORDS)
    fallback_nudges: KeywordTable = field(default_factory=lambda: FALLBACK_NUDGE_KEYWORDS)
    emotional_drivers: KeywordTable = field(default_factory=lambda: EMOTIONAL_DRIVER_KEYWORDS)
    benefits: KeywordTable = field(default_factory=lambda: BENEFIT_KEYWORDS)
    platform_families: KeywordTable = field(default_factory=lambda: PLATFORM_FAMILY_KEYWORDS)
    fast_tempo_platforms: Sequence[str] = FAST_TEMPO_PLATFORMS
    benefit_connectives: Sequence[str] = BENEFIT_CONNECTIVES

    def fingerprint(self) -> str:
        """词表内容哈希，用于缓存键。 / Content hash of every table, used in cache keys."""
        payload = {
            name: {k: list(v) for k, v in getattr(self, name).items()} for name in TABLE_NAMES
        }
        payload.update({name: list(getattr(self, name)) for name in LIST_NAMES})
        # 不排序键：类别顺序影响并列 / keys unsorted, category order breaks ties
        canonical = json.dumps(payload, ensure_ascii=False)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


DEFAULT_LEXICON = Lexicon()

# 可按名称覆盖的表（LexiconLoader 使用） / Tables that can be overridden by name
TABLE_NAMES = (
    "effort",
    "jobs",
    "job_outcomes",
    "job_frustrations",
    "fallback_nudges",
    "emotional_drivers",
    "benefits",
    "platform_families",
)
LIST_NAMES = ("fast_tempo_platforms", "benefit_connectives")
