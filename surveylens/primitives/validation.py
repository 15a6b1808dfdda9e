# validation.py
# =============================================================================
# 调查结果校验错误定义。 / Survey payload validation errors.
#
# 分析器本身对缺失数据一律降级为零值/空值，不抛错；
# 只有结构上无法使用的输入在构建 SurveyResult 时被拒绝。
# / Analyzers degrade missing data to zero/empty and never raise;
#   only structurally unusable payloads are rejected when building a SurveyResult.
# =============================================================================

from __future__ import annotations


# -----------------------------------------------------------------------------
# 错误码 / Error codes
# -----------------------------------------------------------------------------
SURVEY_SCHEMA_INVALID = "SURVEY_SCHEMA_INVALID"
OPTIONS_UNSUPPORTED = "OPTIONS_UNSUPPORTED"


class SurveyValidationError(Exception):
    """调查结果校验错误: 携带错误码与诊断信息。 / Carries an error code and a diagnostic."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")
