# tests/primitives/test_survey_models.py
# 调查结果输入模型测试 / Survey result input model tests

"""调查结果输入模型测试。 / Survey result input model tests."""
import math

import pytest

from surveylens.primitives.models import Response, SurveyResult
from surveylens.primitives.validation import (
    OPTIONS_UNSUPPORTED,
    SURVEY_SCHEMA_INVALID,
    SurveyValidationError,
)


def _payload(**extra):
    payload = {
        "question": "Pick one",
        "options": ["Alpha", "Beta", "Gamma"],
        "choice_distribution": {
            "choices": {
                "A": {"option": "Alpha", "count": 6, "percentage": 60},
                "B": {"option": "Beta", "count": 3, "percentage": 30},
                "C": {"option": "Gamma", "count": 1, "percentage": 10},
            },
            "winning_choice": "A",
            "winning_percentage": 60,
            "runner_up": "B",
        },
    }
    payload.update(extra)
    return payload


class TestResponse:
    def test_confidence_clamped(self):
        assert Response.from_dict({"confidence": 1.8}).confidence == 1.0
        assert Response.from_dict({"confidence": -0.3}).confidence == 0.0

    def test_missing_or_invalid_confidence_defaults(self):
        assert Response.from_dict({}).confidence == 0.5
        assert Response.from_dict({"confidence": "high"}).confidence == 0.5
        assert Response.from_dict({"confidence": math.nan}).confidence == 0.5

    def test_choice_normalized(self):
        assert Response.from_dict({"choice": " b "}).choice == "B"

    def test_combined_text(self):
        r = Response.from_dict({"reasoning": "fast", "reasoning_summary": "cheap"})
        assert r.combined_text == "fast cheap"


class TestSurveyResultParsing:
    def test_aliases(self):
        survey = SurveyResult.from_dict(_payload(
            agent_responses_list=[{"agent_id": "a1", "platform": "linkedin", "choice": "A", "reasoning": "x"}],
            agent_responses_grouped={
                "tiktok": {
                    "platform_consensus": 0.7,
                    "responses": [{"agent_id": "t1", "choice": "B", "reasoning": "y"}],
                },
            },
            risks_and_blindspots=[{"description": "Alpha is costly", "severity": "HIGH"}],
        ))
        assert [r.agent_id for r in survey.responses] == ["a1"]
        group = survey.platform_groups[0]
        assert (group.platform, group.platform_consensus, group.total_agents) == ("tiktok", 0.7, 1)
        assert group.responses[0].platform == "tiktok"
        assert survey.risks[0].severity == "High"

    def test_group_list_form(self):
        survey = SurveyResult.from_dict(_payload(
            platform_groups=[{"platform": "youtube", "responses": []}],
        ))
        assert survey.platform_groups[0].platform == "youtube"

    def test_bare_choice_mapping(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["Alpha", "Beta"],
            "choice_distribution": {"A": {"percentage": 20}, "B": {"percentage": 80}},
        })
        assert survey.preference_for("B") == 80.0
        assert survey.winning_choice() == "B"

    def test_percentages_clamped(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["Alpha"],
            "choice_distribution": {"choices": {"A": {"percentage": 140, "count": -2}}},
        })
        assert survey.preference_for("A") == 100.0
        assert survey.choice_distribution.choices["A"].count == 0

    def test_missing_fields_default_to_empty(self):
        survey = SurveyResult.from_dict({})
        assert survey.options == []
        assert survey.all_responses() == []
        assert survey.preference_for("A") == 0.0
        assert survey.winning_choice() is None
        assert survey.winning_percentage() == 0.0

    def test_not_a_mapping(self):
        with pytest.raises(SurveyValidationError) as exc_info:
            SurveyResult.from_dict(["not", "a", "survey"])
        assert exc_info.value.code == SURVEY_SCHEMA_INVALID

    def test_more_than_26_options_rejected(self):
        with pytest.raises(SurveyValidationError) as exc_info:
            SurveyResult.from_dict({"question": "q", "options": [f"opt {i}" for i in range(27)]})
        assert exc_info.value.code == OPTIONS_UNSUPPORTED
        assert "[OPTIONS_UNSUPPORTED]" in str(exc_info.value)

    def test_exactly_26_options_accepted(self):
        survey = SurveyResult.from_dict({"question": "q", "options": [f"opt {i}" for i in range(26)]})
        assert len(survey.options) == 26


class TestSurveyResultAccessors:
    def test_all_responses_prefers_flat_list(self):
        survey = SurveyResult.from_dict(_payload(
            agent_responses_list=[{"agent_id": "a1", "choice": "A"}],
            agent_responses_grouped={"x": {"responses": [{"agent_id": "g1", "choice": "B"}]}},
        ))
        assert [r.agent_id for r in survey.all_responses()] == ["a1"]

    def test_all_responses_flattens_groups(self):
        survey = SurveyResult.from_dict(_payload(
            agent_responses_grouped={
                "x": {"responses": [{"agent_id": "g1"}]},
                "y": {"responses": [{"agent_id": "g2"}]},
            },
        ))
        assert [r.agent_id for r in survey.all_responses()] == ["g1", "g2"]

    def test_invalid_declared_winner_falls_back_to_max(self):
        payload = _payload()
        payload["choice_distribution"]["winning_choice"] = "Z"
        assert SurveyResult.from_dict(payload).winning_choice() == "A"

    def test_fingerprint(self):
        a = SurveyResult.from_dict(_payload())
        b = SurveyResult.from_dict(_payload())
        c = SurveyResult.from_dict(_payload(question="Another"))
        assert a.fingerprint() == b.fingerprint()
        assert a.fingerprint() != c.fingerprint()
        assert len(a.fingerprint()) == 64
