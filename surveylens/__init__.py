# surveylens/__init__.py
# =============================================================================
# SurveyLens: 多 Agent 调查洞察合成引擎。 / Multi-agent survey insight synthesis engine.
# =============================================================================

"""SurveyLens: 多 Agent 调查洞察合成引擎。 / Multi-agent survey insight synthesis engine."""

__version__ = "0.1.0"

from surveylens.analyzers import (  # noqa: E402
    compute_action_items,
    compute_campaign_messaging,
    compute_jobs,
    compute_roadmap,
)
from surveylens.api.synthesize import InsightCache, synthesize  # noqa: E402
from surveylens.primitives.models import SurveyResult  # noqa: E402

__all__ = [
    "InsightCache",
    "SurveyResult",
    "compute_action_items",
    "compute_campaign_messaging",
    "compute_jobs",
    "compute_roadmap",
    "synthesize",
    "__version__",
]
