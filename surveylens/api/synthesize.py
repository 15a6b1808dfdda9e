# synthesize.py
# =============================================================================
# 公共 API: SurveyLens 洞察合成入口。
#
# 提供 synthesize() 一键合成函数：解析调查结果、加载配置与词表，
# 并发运行所请求的分析器（asyncio.to_thread + gather），
# 结果为可直接 JSON 序列化的字典。可选 InsightCache 按输入指纹缓存。
# =============================================================================

"""公共 API: SurveyLens 洞察合成入口。"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections import OrderedDict
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from surveylens.analyzers.action_items import compute_action_items
from surveylens.analyzers.campaign import compute_campaign_messaging
from surveylens.analyzers.jobs import compute_jobs
from surveylens.analyzers.roadmap import compute_roadmap
from surveylens.config import ConfigLoader, SynthesisConfig
from surveylens.lexicon.loader import LexiconLoader
from surveylens.lexicon.tables import Lexicon
from surveylens.primitives.models import SurveyResult

logger = logging.getLogger(__name__)

ROADMAP_SECTION = "implementation_roadmap"
JOBS_SECTION = "jobs_to_be_done"
CAMPAIGN_SECTION = "campaign_messaging"
ACTION_ITEMS_SECTION = "action_items"

SECTIONS: Tuple[str, ...] = (
    ROADMAP_SECTION,
    JOBS_SECTION,
    CAMPAIGN_SECTION,
    ACTION_ITEMS_SECTION,
)

_ANALYZERS = {
    ROADMAP_SECTION: compute_roadmap,
    JOBS_SECTION: compute_jobs,
    CAMPAIGN_SECTION: compute_campaign_messaging,
}

CacheKey = Tuple[str, Tuple[str, ...], SynthesisConfig, str]


class InsightCache:
    """按 (输入指纹, 段落, 配置, 词表指纹) 缓存合成结果，超出容量时淘汰最早写入的条目。
    / Memoizes synthesis results; evicts the oldest entry when full.

    所有分析器都是纯函数，相同键的结果可以直接复用。
    """

    def __init__(self, max_entries: int = 32):
        if max_entries < 1:
            raise ValueError(f"max_entries 必须 >= 1，收到 {max_entries}")
        self.max_entries = max_entries
        self._entries: "OrderedDict[CacheKey, Dict[str, Any]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        # 返回副本，调用方修改结果不影响缓存
        return copy.deepcopy(entry)

    def put(self, key: CacheKey, result: Dict[str, Any]) -> None:
        self._entries[key] = copy.deepcopy(result)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("缓存淘汰: fingerprint=%s", evicted[0][:12])

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def _resolve_sections(sections: Optional[Sequence[str]]) -> Tuple[str, ...]:
    if sections is None:
        return SECTIONS
    if isinstance(sections, str):
        sections = [sections]
    unknown = [s for s in sections if s not in SECTIONS]
    if unknown:
        raise ValueError(f"未知的段落: {unknown}（可用: {list(SECTIONS)}）")
    # 去重并保持固定输出顺序
    return tuple(s for s in SECTIONS if s in sections)


def _resolve_config(
    config: Union[SynthesisConfig, Mapping[str, Any], None], config_file: Optional[str],
) -> SynthesisConfig:
    if isinstance(config, SynthesisConfig):
        return config
    return ConfigLoader(config=dict(config or {}), config_file=config_file).resolve()


def _resolve_lexicon(
    lexicon: Union[Lexicon, Mapping[str, Any], None], config_file: Optional[str],
) -> Lexicon:
    if isinstance(lexicon, Lexicon):
        return lexicon
    return LexiconLoader(overrides=dict(lexicon or {}), config_file=config_file).resolve()


async def synthesize(
    survey: Union[SurveyResult, Mapping[str, Any]],
    sections: Optional[Sequence[str]] = None,
    config: Union[SynthesisConfig, Mapping[str, Any], None] = None,
    config_file: Optional[str] = None,
    lexicon: Union[Lexicon, Mapping[str, Any], None] = None,
    cache: Optional[InsightCache] = None,
) -> Dict[str, Any]:
    """一键合成调查洞察。

    参数：
        survey: SurveyResult，或上游 JSON 解析得到的字典
        sections: 要计算的段落（默认全部）。可选值：
            implementation_roadmap / jobs_to_be_done /
            campaign_messaging / action_items
        config: 阈值配置（最高优先级）。SynthesisConfig 实例或字典，
            例如 {"now_roi_threshold": 12}
        config_file: 配置文件路径（可选，不传则自动搜索 surveylens.yaml）
        lexicon: 词表。Lexicon 实例，或按表覆盖的字典，
            例如 {"jobs": {"save_time": ["fast", "quick"]}}
        cache: InsightCache（可选）。命中时直接返回缓存结果。

    返回：
        包含 survey_fingerprint 与所请求段落的字典，值均为 JSON 兼容结构。

    Raises:
        ValueError: sections 中包含未知段落。
        SurveyValidationError: survey 字典结构不可用。
        ConfigurationError: 配置值非法。
    """
    wanted = _resolve_sections(sections)
    if not isinstance(survey, SurveyResult):
        survey = SurveyResult.from_dict(survey)
    resolved_config = _resolve_config(config, config_file)
    resolved_lexicon = _resolve_lexicon(lexicon, config_file)

    fingerprint = survey.fingerprint()
    key: CacheKey = (fingerprint, wanted, resolved_config, resolved_lexicon.fingerprint())
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            logger.info(f"缓存命中: fingerprint={fingerprint[:12]}, sections={list(wanted)}")
            return cached

    logger.info(
        f"开始合成: fingerprint={fingerprint[:12]}, options={len(survey.options)}, "
        f"responses={len(survey.all_responses())}, sections={list(wanted)}"
    )

    # 1. 三个分析器互不依赖，并发运行
    names = [s for s in wanted if s in _ANALYZERS]
    if ACTION_ITEMS_SECTION in wanted and ROADMAP_SECTION not in names:
        # 行动项的 P0 取自路线图 NOW 阶段
        names.insert(0, ROADMAP_SECTION)
    outputs = await asyncio.gather(*[
        asyncio.to_thread(_ANALYZERS[name], survey, resolved_config, resolved_lexicon)
        for name in names
    ])
    computed = dict(zip(names, outputs))

    # 2. 行动项依赖路线图，串行
    if ACTION_ITEMS_SECTION in wanted:
        computed[ACTION_ITEMS_SECTION] = await asyncio.to_thread(
            compute_action_items, survey, computed[ROADMAP_SECTION],
        )

    result: Dict[str, Any] = {"survey_fingerprint": fingerprint}
    for name in wanted:
        result[name] = computed[name].to_dict()

    if cache is not None:
        cache.put(key, result)

    logger.info(f"合成完成: fingerprint={fingerprint[:12]}")
    return result
