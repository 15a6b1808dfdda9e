# tests/analyzers/test_campaign.py
# 投放文案生成器测试 / Campaign messaging generator tests

"""投放文案生成器测试。 / Campaign messaging generator tests."""
import pytest

from surveylens.analyzers.campaign import (
    StrategyType,
    Tempo,
    collect_platform_groups,
    compute_campaign_messaging,
    extract_emotional_drivers,
    extract_primary_benefit,
    find_winning_platform,
    generate_campaign_timeline,
    platform_family,
    platform_tempo,
    resolve_confidence,
    select_strategy,
    top_drivers,
)
from surveylens.lexicon.loader import LexiconLoader
from surveylens.primitives.insight_models import ToneType
from surveylens.primitives.models import PlatformGroup, Response, SurveyResult
from surveylens.templates import TIMELINE_TEMPLATES


def _response(choice, reasoning, platform="linkedin", agent_id="a"):
    return {
        "agent_id": agent_id,
        "platform": platform,
        "choice": choice,
        "confidence": 0.8,
        "reasoning": reasoning,
    }


def _grouped_payload(**extra):
    payload = {
        "question": "Which feature should we launch?",
        "options": ["Dark mode toggle", "Enterprise SSO integration"],
        "choice_distribution": {
            "choices": {"A": {"percentage": 75}, "B": {"percentage": 25}},
            "winning_choice": "A",
            "winning_percentage": 75,
        },
        "agent_responses_grouped": {
            "linkedin": {
                "platform_consensus": 0.8,
                "responses": [
                    _response("A", "Fast and easy to set up", agent_id="l1"),
                    _response("A", "Fast workflow", agent_id="l2"),
                    _response("B", "Secure and trusted by enterprise", agent_id="l3"),
                ],
            },
            "tiktok": {
                "platform_consensus": 0.8,
                "responses": [_response("A", "Fun and trendy", platform="tiktok", agent_id="t1")],
            },
        },
        "confidence_in_recommendation": 0.9,
    }
    payload.update(extra)
    return payload


class TestStrategyDecisionTable:
    """节奏 × 置信区间的每个分支。 / Every tempo x confidence branch."""

    @pytest.mark.parametrize("platform,confidence,strategy,budgets,first_label", [
        ("tiktok", 0.9, "Sprint Scale", [60, 30, 10], "First 3 Days"),
        ("linkedin", 0.9, "Marathon Scale", [60, 30, 10], "First 3 Weeks"),
        ("instagram", 0.3, "Sprint Validation", [20, 30, 50], "First 3 Days"),
        ("youtube", 0.3, "Marathon Validation", [20, 30, 50], "First 3 Weeks"),
        ("twitter", 0.6, "Sprint Balanced", [30, 40, 30], "First 2 Days"),
        ("reddit", 0.6, "Marathon Balanced", [30, 40, 30], "First 2 Weeks"),
    ])
    def test_branches(self, platform, confidence, strategy, budgets, first_label):
        timeline = generate_campaign_timeline(platform, confidence, "Dark mode toggle", "saves hours")
        assert timeline.strategy_type == strategy
        assert [p.budget_allocation_pct for p in timeline.phases] == budgets
        assert timeline.total_budget_pct == 100
        assert len(timeline.phases) == 3
        assert timeline.phases[0].time_label == first_label

    def test_every_template_budget_sums_to_100(self):
        for strategy in StrategyType:
            phases = TIMELINE_TEMPLATES[strategy.value]
            assert len(phases) == 3
            assert sum(pct for *_, pct in phases) == 100

    @pytest.mark.parametrize("confidence", [0.8, 0.5])
    def test_band_boundaries_are_balanced(self, confidence):
        assert select_strategy(confidence) == StrategyType.BALANCED

    def test_strict_inequalities(self):
        assert select_strategy(0.8000001) == StrategyType.SCALE
        assert select_strategy(0.4999999) == StrategyType.VALIDATION

    def test_confidence_is_clamped(self):
        timeline = generate_campaign_timeline("linkedin", 7.5)
        assert timeline.confidence == 1.0
        assert timeline.strategy_type == "Marathon Scale"

    def test_interpolates_platform_option_and_benefit(self):
        scale = generate_campaign_timeline("LinkedIn", 0.95, "Dark mode toggle", "saves hours")
        assert scale.phases[0].action == (
            "Skip testing. Allocate 60% of budget immediately to LinkedIn and lead with Dark mode toggle."
        )
        assert "saves hours" in scale.phases[2].action
        assert scale.phases[2].time_label == "Weeks 6+"


class TestPlatformClassification:
    @pytest.mark.parametrize("platform,family", [
        ("LinkedIn", "professional"),
        ("reddit", "professional"),
        ("TikTok", "short_form"),
        ("instagram_reels", "short_form"),
        ("YouTube", "video"),
        ("twitter", "generic"),
        ("", "generic"),
    ])
    def test_family(self, platform, family):
        assert platform_family(platform) == family

    def test_tempo(self):
        assert platform_tempo("Twitter") == Tempo.SPRINT
        assert platform_tempo("youtube") == Tempo.MARATHON
        assert Tempo.SPRINT.unit == "Days"

    def test_missing_platform_name_is_generic(self):
        assert platform_family(None) == "generic"
        assert platform_tempo(None) == Tempo.MARATHON

    def test_lexicon_family_without_templates_uses_generic_copy(self):
        lexicon = LexiconLoader(overrides={"platform_families": {"audio": ["spotify"]}}).resolve()
        assert platform_family("Spotify", lexicon) == "audio"
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["Dark mode toggle"],
            "agent_responses_list": [_response("A", "Fast workflow", platform="spotify")],
        })
        entry = compute_campaign_messaging(survey, lexicon=lexicon).platform_messaging["spotify"]
        assert entry.recommended_message == "100% of spotify users prefer Dark mode toggle for speed"
        assert entry.effectiveness["A"].ad_copy_ideas[0] == "100% of spotify users prefer Dark mode toggle"


class TestDrivers:
    def test_presence_per_response_per_category(self):
        responses = [Response("a", "x", "A", 0.5, "fast, quick and instant")]
        assert extract_emotional_drivers(responses) == {"speed": 1}

    def test_top_drivers_upper_case_with_stable_ties(self):
        assert top_drivers({"trust": 1, "speed": 2, "convenience": 1, "professional": 1}) == [
            "SPEED", "TRUST", "CONVENIENCE",
        ]


class TestWinningPlatformAndConfidence:
    def test_ties_keep_first(self):
        groups = [PlatformGroup("linkedin", platform_consensus=0.8), PlatformGroup("tiktok", platform_consensus=0.8)]
        assert find_winning_platform(groups).platform == "linkedin"

    def test_highest_consensus(self):
        groups = [PlatformGroup("linkedin", platform_consensus=0.2), PlatformGroup("tiktok", platform_consensus=0.6)]
        assert find_winning_platform(groups).platform == "tiktok"

    def test_no_groups(self):
        assert find_winning_platform([]) is None

    def test_confidence_fallback_chain(self):
        base = {"question": "q", "options": ["A"], "choice_distribution": {"winning_percentage": 62}}
        assert resolve_confidence(SurveyResult.from_dict(base)) == pytest.approx(0.62)
        with_metrics = dict(base, overall_metrics={"average_confidence": 0.4})
        assert resolve_confidence(SurveyResult.from_dict(with_metrics)) == pytest.approx(0.4)
        explicit = dict(with_metrics, confidence_in_recommendation=1.7)
        assert resolve_confidence(SurveyResult.from_dict(explicit)) == 1.0


class TestPrimaryBenefit:
    def _responses(self, *texts):
        return [Response(f"a{i}", "linkedin", "A", 0.5, t) for i, t in enumerate(texts)]

    def test_clause_after_connective(self):
        benefit = extract_primary_benefit(self._responses("I picked it because it cuts onboarding time. Great."))
        assert benefit == "it cuts onboarding time"

    def test_connective_needs_word_boundary(self):
        """"easy" 中的 "as" 不是连接词，回退到收益关键词桶。"""
        assert extract_primary_benefit(self._responses("Simple and easy to use")) == "simplifies"

    def test_default_when_nothing_matches(self):
        assert extract_primary_benefit([]) == "improves"
        assert extract_primary_benefit(self._responses("Blue")) == "improves"

    def test_missing_reasoning_is_tolerated(self):
        responses = [Response("a0", "linkedin", "A", 0.5, None)]
        assert extract_primary_benefit(responses) == "improves"


class TestPlatformGroups:
    def test_empty_group_filled_from_flat_list(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["A", "B"],
            "agent_responses_grouped": {"LinkedIn": {"platform_consensus": 0.5, "responses": []}},
            "agent_responses_list": [
                _response("A", "fast", platform="linkedin"),
                _response("B", "fun", platform="tiktok"),
            ],
        })
        groups = collect_platform_groups(survey)
        assert [g.platform for g in groups] == ["LinkedIn"]
        assert [r.choice for r in groups[0].responses] == ["A"]

    def test_flat_list_grouped_in_first_seen_order(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["A", "B"],
            "agent_responses_list": [
                _response("A", "fast", platform="youtube"),
                _response("B", "fun", platform="tiktok"),
                _response("B", "fun", platform="youtube"),
            ],
        })
        groups = collect_platform_groups(survey)
        assert [(g.platform, len(g.responses)) for g in groups] == [("youtube", 2), ("tiktok", 1)]

    def test_groups_sharing_a_platform_are_merged(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["Dark mode toggle", "Enterprise SSO integration"],
            "agent_responses_grouped": [
                {"platform": "linkedin", "platform_consensus": 0.6, "responses": [_response("A", "fast")]},
                {"platform": "LinkedIn", "platform_consensus": 0.2, "responses": [_response("B", "secure")]},
            ],
        })
        groups = collect_platform_groups(survey)
        assert [g.platform for g in groups] == ["linkedin"]
        assert [r.choice for r in groups[0].responses] == ["A", "B"]
        assert groups[0].platform_consensus == pytest.approx(0.4)
        assert groups[0].total_agents == 2

        entry = compute_campaign_messaging(survey).platform_messaging["linkedin"]
        assert entry.effectiveness["A"].percentage == pytest.approx(50.0)
        assert entry.effectiveness["B"].percentage == pytest.approx(50.0)


class TestComputeCampaignMessaging:
    def test_platform_entries(self):
        messaging = compute_campaign_messaging(SurveyResult.from_dict(_grouped_payload()))
        assert list(messaging.platform_messaging) == ["linkedin", "tiktok"]

        linkedin = messaging.platform_messaging["linkedin"]
        assert linkedin.emotional_drivers == {"trust": 1, "speed": 2, "convenience": 1, "professional": 1}
        assert linkedin.effectiveness["A"].percentage == pytest.approx(66.667, rel=1e-3)
        assert linkedin.effectiveness["B"].percentage == pytest.approx(33.333, rel=1e-3)
        assert linkedin.effectiveness["A"].top_drivers == ["SPEED", "CONVENIENCE"]
        assert linkedin.effectiveness["A"].ad_copy_ideas[0] == "67% of professionals prefer Dark mode toggle"
        assert linkedin.recommended_message == (
            "Maximize speed with Dark mode toggle for professional audiences"
        )
        assert linkedin.tone_variations.formal.startswith("Backed by enterprise data and proven speed")
        assert linkedin.placeholder is False

        tiktok = messaging.platform_messaging["tiktok"]
        assert tiktok.recommended_message == "Join the trendy movement with Dark mode toggle"

    def test_timeline_and_variations(self):
        messaging = compute_campaign_messaging(SurveyResult.from_dict(_grouped_payload()))
        timeline = messaging.campaign_timeline
        assert timeline.primary_platform == "linkedin"
        assert timeline.strategy_type == "Marathon Scale"
        assert messaging.primary_benefit == "simplifies"

        assert [v.type for v in messaging.message_variations] == [
            ToneType.FORMAL, ToneType.CASUAL, ToneType.URGENT,
        ]
        assert messaging.message_variations[0].template == (
            "Backed by 75% of users and proven simplifies, Dark mode toggle delivers measurable results."
        )
        assert "linkedin" in messaging.message_variations[0].best_for

    def test_placeholders_from_platforms_surveyed(self):
        survey = SurveyResult.from_dict({
            "question": "q",
            "options": ["Dark mode toggle"],
            "choice_distribution": {"choices": {"A": {"percentage": 100}}},
            "platforms_surveyed": ["linkedin", "tiktok"],
        })
        messaging = compute_campaign_messaging(survey)
        assert list(messaging.platform_messaging) == ["linkedin", "tiktok"]
        entry = messaging.platform_messaging["tiktok"]
        assert entry.placeholder is True
        assert entry.effectiveness["A"].message == "100% prefer Dark mode toggle"
        assert entry.tone_variations.urgent == "Urgent messaging for tiktok"
        assert messaging.campaign_timeline.primary_platform == "linkedin"

    def test_zero_responses_single_generic_placeholder(self):
        survey = SurveyResult.from_dict({"question": "q", "options": ["A", "B"]})
        messaging = compute_campaign_messaging(survey)
        assert list(messaging.platform_messaging) == ["linkedin"]
        assert messaging.campaign_timeline.total_budget_pct == 100
        assert messaging.primary_benefit == "improves"

    def test_deterministic(self):
        survey = SurveyResult.from_dict(_grouped_payload())
        assert compute_campaign_messaging(survey).to_dict() == compute_campaign_messaging(survey).to_dict()
