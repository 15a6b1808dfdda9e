"""行动项与汇报话术。 / Action items and stakeholder talk track."""

from __future__ import annotations

import logging
from typing import List, Optional

from surveylens import templates
from surveylens.primitives.insight_models import (
    ActionItem,
    ActionItemsData,
    Phase,
    Roadmap,
    TalkTrack,
)
from surveylens.primitives.models import SurveyResult
from surveylens.utils.options import option_for_letter

logger = logging.getLogger(__name__)

MAX_TALK_TRACK_REASONS = 3


def _winning_label(survey: SurveyResult) -> str:
    winner = survey.winning_choice()
    if winner:
        return option_for_letter(survey.options, winner, f"Option {winner}")
    direction = survey.recommended_direction.split(":")[0].strip()
    return direction or "Winning option"


def generate_action_items(survey: SurveyResult, roadmap: Optional[Roadmap] = None) -> List[ActionItem]:
    items: List[ActionItem] = []

    if roadmap is not None:
        now = roadmap.get_phase(Phase.NOW)
        if now is not None and now.options:
            items.append(ActionItem(
                title=templates.ACTION_START_DEVELOPMENT.format(option=now.options[0].option_text),
                priority="P0",
                due_date="Next week",
            ))
    else:
        items.append(ActionItem(
            title=templates.ACTION_START_DEVELOPMENT.format(option=_winning_label(survey)),
            priority="P0",
            due_date="Next week",
        ))

    runner_up = survey.choice_distribution.runner_up
    if runner_up:
        items.append(ActionItem(
            title=templates.ACTION_INTERVIEW_RUNNER_UP.format(runner_up=runner_up),
            priority="P1",
            due_date="Within 2 weeks",
        ))

    items.append(ActionItem(title=templates.ACTION_TEST_REAL_USERS, priority="P1", due_date="Next week"))

    if survey.key_findings:
        items.append(ActionItem(
            title=templates.ACTION_VALIDATE_FINDING.format(finding=survey.key_findings[0]),
            priority="P2",
        ))

    if roadmap is not None and len(roadmap.phases) > 1:
        items.append(ActionItem(
            title=templates.ACTION_PLAN_PHASES, priority="P2", due_date="Within 1 month",
        ))
    return items


def generate_talk_track(survey: SurveyResult) -> TalkTrack:
    return TalkTrack(
        what_won=survey.recommended_direction or templates.TALK_TRACK_DEFAULT_WINNER,
        why_it_won=(
            list(survey.key_findings[:MAX_TALK_TRACK_REASONS])
            or [templates.TALK_TRACK_DEFAULT_REASON]
        ),
        next_step=templates.TALK_TRACK_NEXT_STEP,
    )


def compute_action_items(survey: SurveyResult, roadmap: Optional[Roadmap] = None) -> ActionItemsData:
    """由调查结果（及可选路线图）生成行动清单。
    / Build the action checklist from the survey result and an optional roadmap.

    提供路线图时，P0 取 NOW 阶段的第一个选项；否则取获胜选项。
    / With a roadmap, P0 targets the first NOW option; otherwise the winner.
    """
    data = ActionItemsData(items=generate_action_items(survey, roadmap), talk_track=generate_talk_track(survey))
    logger.debug("行动项: %d 条", len(data.items))
    return data
