# config.py
# =============================================================================
# 分析配置加载与合并模块 / Synthesis config loading & merging module
#
# 职责 / Responsibilities:
#   - 定义分析器使用的全部数值阈值（SynthesisConfig）
#     / Define every numeric threshold the analyzers use (SynthesisConfig)
#   - 实现三层优先级配置加载：代码传入 > 配置文件 > 内置默认值
#     / Three-tier priority loading: code > config file > built-in defaults
#   - 配置文件中的 ${VAR} / ${VAR:-default} 从环境变量展开
#     / ${VAR} / ${VAR:-default} in the config file expand from the environment
#   - 无法转换为字段类型的值抛出 ConfigurationError
#     / Values that cannot be coerced to the field type raise ConfigurationError
# =============================================================================

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """配置值缺失或非法时抛出的异常。 / Raised for invalid configuration values."""
    pass


# =============================================================================
# 数据结构 / Data Structures
# =============================================================================


@dataclass(frozen=True)
class SynthesisConfig:
    """分析器阈值。 / Analyzer thresholds.

    默认值与路线图 / JTBD / 投放三套规则一一对应，修改会改变输出。
    / Defaults encode the roadmap / JTBD / campaign rules; changing them changes output.
    """

    # --- 路线图 / Roadmap ---
    avoid_preference_floor: float = 5.0  # 偏好 < 此值 -> AVOID / preference below -> AVOID
    now_roi_threshold: float = 10.0  # ROI > 此值 -> NOW
    high_preference_threshold: float = 40.0  # 偏好 > 此值 -> NOW(低难度) / Q2
    high_effort_days: int = 45
    medium_effort_days: int = 14
    low_effort_days: int = 5
    high_length_cutoff: int = 60  # 长度 > 60 -> High
    medium_length_cutoff: int = 30  # 长度 in (30, 60] -> Medium
    low_length_cutoff: int = 20  # 长度 <= 20 -> Low

    # --- Jobs-to-be-Done ---
    job_adoption_floor: float = 5.0
    max_jobs: int = 3
    max_ranked_phrases: int = 4

    # --- 投放 / Campaign ---
    top_driver_limit: int = 3
    high_confidence: float = 0.8  # > 此值 -> Scale
    low_confidence: float = 0.5  # < 此值 -> Validation

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SynthesisConfig:
        """从字典构建，未知键记录日志后忽略。 / Build from a dict; unknown keys are logged and ignored."""
        known = {f.name: f for f in dataclasses.fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("忽略未知配置项 / ignoring unknown config key: %s", key)
                continue
            if value is None:
                continue
            kwargs[key] = _coerce(key, value, known[key].type)
        return cls(**kwargs)


def _coerce(key: str, value: Any, type_name: Any) -> Any:
    # 使用了 from __future__ import annotations，字段类型为字符串
    # / With postponed annotations, field types are strings
    target = {"int": int, "float": float}.get(str(type_name))
    if target is None:
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"配置项 '{key}' 需要数值，收到布尔值 / expected a number, got {value!r}")
    try:
        if target is int and isinstance(value, float) and not value.is_integer():
            raise ValueError(value)
        coerced = target(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"配置项 '{key}' 无法转换为 {target.__name__}: {value!r}"
        ) from None
    # 整数字段均为天数、长度或条数 / Int fields are day counts, lengths or item counts
    if target is int and coerced < 0:
        raise ConfigurationError(f"配置项 '{key}' 不能为负数: {value!r}")
    return coerced


# =============================================================================
# 配置文件读取 / Config file reading
# =============================================================================

# 配置文件搜索路径（按优先级） / Config file search paths (by priority)
CONFIG_SEARCH_PATHS = [
    "surveylens.yaml",
    "surveylens.yml",
    "config/surveylens.yaml",
    "config/surveylens.yml",
]

# 非阈值的顶层段落 / Top-level sections that are not thresholds
_META_KEYS = {"lexicon"}


def find_config_file(config_file: Optional[str] = None) -> Optional[Path]:
    """返回显式路径或自动搜索到的第一个配置文件。 / Explicit path, else the first auto-discovered file."""
    if config_file:
        path = Path(config_file)
        if path.exists():
            return path
        logger.warning("指定的配置文件不存在: %s", path)
        return None

    for search_path in CONFIG_SEARCH_PATHS:
        path = Path(search_path)
        if path.exists():
            logger.info("自动发现配置文件: %s", path)
            return path

    logger.debug("未发现配置文件，使用内置默认值")
    return None


def read_yaml_config(path: Path) -> Dict[str, Any]:
    """读取 YAML 文件并展开环境变量引用。 / Read YAML and expand env var refs."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"配置文件顶层必须是映射 / config root must be a mapping: {path}")
    return _expand_env_vars(raw)


# =============================================================================
# 配置加载器 / Config Loader
# =============================================================================


class ConfigLoader:
    """阈值配置加载器: 三层优先级合并。 / Threshold config loader: three-tier merge.

    优先级（高→低） / Priority (high→low):
    1. 代码传入（config 字典参数） / Code-level dict
    2. 配置文件（YAML） / Config file (YAML)
    3. SynthesisConfig 内置默认值 / SynthesisConfig defaults

    配置文件格式 / File format:
        now_roi_threshold: 12
        high_confidence: ${SURVEYLENS_HIGH_CONFIDENCE:-0.8}
        lexicon:            # 由 LexiconLoader 读取 / read by LexiconLoader
          jobs:
            save_time: [fast, quick]
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
    ):
        self._code_config = dict(config or {})
        self._file_config: Dict[str, Any] = {}

        path = find_config_file(config_file)
        if path is not None:
            self._file_config = read_yaml_config(path)
            logger.info("配置文件已加载: %s", path)

    @property
    def file_config(self) -> Dict[str, Any]:
        return dict(self._file_config)

    def resolve(self) -> SynthesisConfig:
        """合并为最终配置。 / Merge into the effective config.

        Raises:
            ConfigurationError: 某个值无法转换为字段类型。 / A value cannot be coerced.
        """
        merged: Dict[str, Any] = {}
        merged.update(
            {k: v for k, v in self._file_config.items() if k not in _META_KEYS and v is not None}
        )
        merged.update(
            {k: v for k, v in self._code_config.items() if k not in _META_KEYS and v is not None}
        )
        config = SynthesisConfig.from_dict(merged)
        if config.low_confidence > config.high_confidence:
            raise ConfigurationError(
                f"low_confidence ({config.low_confidence}) 不能大于 "
                f"high_confidence ({config.high_confidence})"
            )
        return config

    def summary(self) -> Dict[str, str]:
        """输出生效配置摘要，用于日志/调试。 / Effective config summary for logging/debug."""
        resolved = dataclasses.asdict(self.resolve())
        return {k: str(v) for k, v in resolved.items()}


# =============================================================================
# 工具函数 / Utility Functions
# =============================================================================


def _expand_env_vars(obj: Any) -> Any:
    """递归展开字典/列表中的 ${ENV_VAR} 引用。 / Recursively expand ${ENV_VAR} refs in dicts/lists.

    支持格式 / Supported formats:
    - ${VAR_NAME}          → os.environ["VAR_NAME"]
    - ${VAR_NAME:-default} → os.environ.get("VAR_NAME", "default")
    """
    if isinstance(obj, str):

        def _replace(match):
            var_expr = match.group(1)
            if ":-" in var_expr:
                var_name, default = var_expr.split(":-", 1)
                return os.environ.get(var_name.strip(), default.strip())
            return os.environ.get(var_expr.strip(), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", _replace, obj)

    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj
