# loader.py
# =============================================================================
# 词表覆盖加载 / Lexicon override loading
#
# 优先级（高→低） / Priority (high→low):
#   1. 代码传入的 overrides 字典 / Code-level overrides dict
#   2. 配置文件 lexicon: 段 / The `lexicon:` section of the config file
#   3. 内置词表常量 / Built-in table constants
#
# 覆盖粒度为“表内类别”：只替换出现的类别，其余类别保持内置值；
# 新类别追加在表尾（影响并列排序）。
# / Overrides replace individual categories; untouched categories keep the
#   built-in keywords, new categories append at the end (tie order).
# =============================================================================

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Mapping, Optional

from surveylens.config import ConfigurationError, find_config_file, read_yaml_config
from surveylens.lexicon.tables import (
    DEFAULT_LEXICON,
    LIST_NAMES,
    TABLE_NAMES,
    Lexicon,
    freeze_table,
)

logger = logging.getLogger(__name__)


class LexiconLoader:
    """按表合并词表覆盖。 / Merges lexicon overrides table by table."""

    def __init__(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        base: Lexicon = DEFAULT_LEXICON,
    ):
        self._base = base
        self._code_overrides = dict(overrides or {})
        self._file_overrides: Dict[str, Any] = {}

        path = find_config_file(config_file)
        if path is not None:
            section = read_yaml_config(path).get("lexicon") or {}
            if not isinstance(section, dict):
                raise ConfigurationError(f"lexicon 段必须是映射 / lexicon section must be a mapping: {path}")
            self._file_overrides = section

    def resolve(self) -> Lexicon:
        replacements: Dict[str, Any] = {}
        for layer in (self._file_overrides, self._code_overrides):
            for name, value in layer.items():
                if name in TABLE_NAMES:
                    current = replacements.get(name, getattr(self._base, name))
                    replacements[name] = _merge_table(name, current, value)
                elif name in LIST_NAMES:
                    replacements[name] = _as_keyword_tuple(name, value)
                else:
                    logger.warning("忽略未知词表 / ignoring unknown lexicon table: %s", name)

        if replacements:
            logger.info("词表覆盖已应用 / lexicon overrides applied: %s", sorted(replacements))
        return dataclasses.replace(self._base, **replacements)


def _merge_table(name: str, current: Mapping[str, Any], override: Any):
    if not isinstance(override, Mapping):
        raise ConfigurationError(f"词表 '{name}' 必须是 类别 -> 关键词列表 的映射")
    merged = {k: list(v) for k, v in current.items()}
    for category, keywords in override.items():
        merged[str(category)] = list(_as_keyword_tuple(f"{name}.{category}", keywords))
    return freeze_table(merged)


def _as_keyword_tuple(name: str, value: Any):
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"'{name}' 必须是关键词列表 / must be a list of keywords")
    return tuple(str(v).lower() for v in value)
