"""三个洞察分析器及行动项。 / The three insight analyzers plus action items."""

from surveylens.analyzers.action_items import compute_action_items
from surveylens.analyzers.campaign import compute_campaign_messaging, generate_campaign_timeline
from surveylens.analyzers.jobs import compute_jobs
from surveylens.analyzers.roadmap import compute_roadmap

__all__ = [
    "compute_action_items",
    "compute_campaign_messaging",
    "compute_jobs",
    "compute_roadmap",
    "generate_campaign_timeline",
]
