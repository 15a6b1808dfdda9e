"""SurveyLens 集中式文案模板模块。

本文件统一管理三个分析器输出的全部固定文案。模板是非生成式的：
同一输入必须得到逐字节相同的输出，因此所有字符串都在这里固定。
每个模板均标注了调用位置和用途，方便后续调整。

模板分类：
1. Jobs-to-be-Done: 职责标题、描述、设计启示、画布文案
2. 投放文案: 按平台族分支的推荐语、广告语、语气变体
3. 投放排期: 按策略分支的三阶段模板（预算占比之和为 100）
4. 行动项: 行动清单与汇报话术

All fixed strings emitted by the analyzers live here. Templates are
non-generative: identical input must yield byte-identical output.
"""

# =============================================================================
# Jobs-to-be-Done
# =============================================================================

# 调用位置: analyzers/jobs.py: _build_job()
# 用途: 职责类别 -> 标题 / 描述
JOB_TITLES = {
    "reduce_stress": "Reduce daily stress & cognitive load while staying productive",
    "feel_professional": "Feel more professional & capable in work",
    "save_time": "Save time and increase efficiency",
    "impress_others": "Impress my team lead and colleagues",
    "learn_grow": "Learn and grow professionally",
    "belong_community": "Belong to a community of like-minded people",
    "achieve_goals": "Achieve my goals faster and more effectively",
    "avoid_risk": "Avoid risks and make safe decisions",
}
DEFAULT_JOB_TITLE = "Accomplish a specific goal"

JOB_DESCRIPTIONS = {
    "reduce_stress": "Users want to reduce mental burden and decision fatigue while maintaining productivity.",
    "feel_professional": "Users want to appear competent and capable in their professional environment.",
    "save_time": "Users want to accomplish tasks faster to free up time for other priorities.",
    "impress_others": "Users want to gain recognition and respect from peers and superiors.",
    "learn_grow": "Users want to develop new skills and knowledge to advance their career.",
    "belong_community": "Users want to connect with others who share similar interests or goals.",
    "achieve_goals": "Users want to reach their objectives more quickly and effectively.",
    "avoid_risk": "Users want to minimize potential negative outcomes and make safe choices.",
}
DEFAULT_JOB_DESCRIPTION = "Users are trying to accomplish a specific objective."

# 调用位置: analyzers/jobs.py: _build_job()
# 用途: 静态设计启示（不从文本推导）
JOB_DESIGN_IMPLICATIONS = {
    "reduce_stress": [
        "Simplify decision-making interface",
        "Reduce cognitive load with clear visual hierarchy",
        "Show only essential comparisons",
        "Provide quick defaults and recommendations",
    ],
    "feel_professional": [
        "Add professional templates and layouts",
        "Include polished export options",
        "Show high-quality visualizations",
        "Provide enterprise-grade features",
    ],
    "save_time": [
        "Optimize for speed and efficiency",
        "Reduce steps in user flow",
        "Enable quick actions and shortcuts",
        "Provide instant feedback",
    ],
    "impress_others": [
        "Enable social proof sharing",
        "Add impressive visualizations",
        "Provide shareable reports",
        "Include team collaboration features",
    ],
    "learn_grow": [
        "Add educational content and tooltips",
        "Provide learning resources",
        "Show progress tracking",
        "Enable skill development features",
    ],
    "belong_community": [
        "Add community features",
        "Enable social connections",
        "Show user testimonials",
        "Provide networking opportunities",
    ],
    "achieve_goals": [
        "Focus on goal-oriented workflows",
        "Provide clear progress indicators",
        "Enable milestone tracking",
        "Show achievement metrics",
    ],
    "avoid_risk": [
        "Add safety features and warnings",
        "Provide risk assessment tools",
        "Enable conservative defaults",
        "Show reliability indicators",
    ],
}
DEFAULT_DESIGN_IMPLICATIONS = ["Design for user needs", "Focus on core functionality"]

# 调用位置: analyzers/jobs.py: compute_jobs()
JOBS_SITUATION = "Users are trying to accomplish specific goals through their choices"
JOBS_SITUATION_NO_RESPONSES = "No agent responses available for analysis"
CANVAS_SITUATION = "Users are facing decision-making challenges and need guidance"
CANVAS_DEFAULT_OUTCOME = "Achieve desired outcomes"


# =============================================================================
# 路线图 / Roadmap
# =============================================================================

# 调用位置: analyzers/roadmap.py: _rationale_for()
RATIONALE_NO_PREFERENCE = "No agent preference detected. Consider revising the option or survey question."
RATIONALE_BLOCKERS = "Has {count} blocker(s) that prevent implementation."
RATIONALE_PREFERENCE = "Received {pct:.1f}% preference from survey responses."

# 调用位置: analyzers/roadmap.py: _phase_rationale()
PHASE_RATIONALES = {
    "NOW": "High priority options with strong preference ({avg:.1f}% avg) and immediate value.",
    "Q2": "Medium priority options with moderate preference ({avg:.1f}% avg) for Q2 planning.",
    "BACKLOG": "Lower priority options with limited preference ({avg:.1f}% avg) for future consideration.",
}
AVOID_ALL_BLOCKED = "All {count} option(s) have significant blockers preventing implementation."
AVOID_LOW_PREFERENCE = "All options have very low preference ({avg:.1f}% avg). Consider alternative approaches."
AVOID_MIXED = "Options with low preference ({avg:.1f}% avg) or significant blockers."

NO_TIMELINE = "N/A"
ONLY_AVOID_TIMELINE = "No recommended timeline"


# =============================================================================
# 投放文案 / Campaign messaging
# =============================================================================

# 调用位置: analyzers/campaign.py: recommended_message()
# 用途: 平台族 -> 推荐语。占位符: {option} {driver} {platform} {pct}
RECOMMENDED_MESSAGES = {
    "professional": "Maximize {driver} with {option} for professional audiences",
    "short_form": "Join the {driver} movement with {option}",
    "video": "Discover how {option} delivers {driver} for your needs",
    "generic": "{pct:.0f}% of {platform} users prefer {option} for {driver}",
}

# 调用位置: analyzers/campaign.py: ad_copy_ideas()
AD_COPY_IDEAS = {
    "professional": [
        "{pct:.0f}% of professionals prefer {option}",
        "Increase {driver} by 45% in first month",
        "Enterprise-grade {option} with SMB pricing",
    ],
    "short_form": [
        "Everyone's switching to {option}",
        "POV: You've been missing out on {option}",
        "This {driver} trend hits different 🔥",
    ],
    "video": [
        "Why {pct:.0f}% of creators choose {option}",
        "The {option} that actually works",
        "Stop wasting time - try {option} today",
    ],
    "generic": [
        "{pct:.0f}% of {platform} users prefer {option}",
        "Join the {driver} movement",
        "{option}: Built for {driver}",
    ],
}
MAX_AD_COPY_IDEAS = 4

DEFAULT_DRIVER = "value"
NO_OPTION_MESSAGE = "Optimize messaging for {platform} audience"

# 调用位置: analyzers/campaign.py: tone_set()
# 用途: 单平台三种语气
PLATFORM_TONES = {
    "formal": "Backed by enterprise data and proven {driver}, {option} delivers measurable results for professional teams.",
    "casual": "The {option} that actually works for busy people. Simple, effective, just {driver}.",
    "urgent": "Limited time - secure your {option} access before availability runs out. Join {driver} leaders today.",
}

# 调用位置: analyzers/campaign.py: message_variations()
# 用途: 全局语气变体。占位符: {stat} {benefit} {option}
MESSAGE_VARIATIONS = {
    "FORMAL": "Backed by {stat} and proven {benefit}, {option} delivers measurable results.",
    "CASUAL": "Simple, effective, just {benefit}. {option} is the clear choice.",
    "URGENT": "Limited time - {option} delivers {benefit}. Act now before availability runs out.",
}
TONE_BEST_FOR = {
    "FORMAL": ["linkedin", "reddit", "professional networks"],
    "CASUAL": ["instagram", "tiktok", "twitter", "casual platforms"],
    "URGENT": ["email", "sms", "direct response"],
}
WINNING_STAT = "{pct:.0f}% of users"

# 调用位置: analyzers/campaign.py: placeholder_messaging()
# 用途: 无分组回答时的占位条目
PLACEHOLDER_DRIVER = "VALUE"
PLACEHOLDER_MESSAGE = "{pct:.0f}% prefer {option}"
PLACEHOLDER_AD_COPY = ["Discover {option}", "Try {option} today"]
PLACEHOLDER_TONES = {
    "formal": "Professional messaging for {platform}",
    "casual": "Casual messaging for {platform}",
    "urgent": "Urgent messaging for {platform}",
}
PLACEHOLDER_PLATFORM = "linkedin"


# =============================================================================
# 投放排期 / Campaign timeline
# =============================================================================

# 调用位置: analyzers/campaign.py: generate_campaign_timeline()
# 用途: 策略 -> 三阶段 (时间, 标题, 动作, 预算占比%)。每个策略预算之和必须为 100。
# 占位符: {unit} {platform} {option} {benefit}
TIMELINE_TEMPLATES = {
    "Scale": [
        (
            "First 3 {unit}",
            "Blitz Launch",
            "Skip testing. Allocate 60% of budget immediately to {platform} and lead with {option}.",
            60,
        ),
        (
            "Next 2 {unit}",
            "Rapid Scale",
            "Double down on {platform}. Shift remaining budget from other platforms.",
            30,
        ),
        (
            "{unit} 6+",
            "Optimize & Expand",
            "Fine-tune messaging around {benefit} based on performance data. "
            "Consider expanding to runner-up platforms.",
            10,
        ),
    ],
    "Validation": [
        (
            "First 3 {unit}",
            "Validation Phase",
            "Confidence is mixed. Run A/B tests of {option} on {platform} vs runner-up platforms.",
            20,
        ),
        (
            "Next 2 {unit}",
            "Analyze Results",
            "Review performance metrics. Identify which platform and messaging resonates best.",
            30,
        ),
        (
            "{unit} 6+",
            "Scale Winners",
            "Shift 80% of budget to the top performer. Retire underperforming variations.",
            50,
        ),
    ],
    "Balanced": [
        (
            "First 2 {unit}",
            "Test Variations",
            "Test all message variations across top 3 platforms, starting with {platform}. "
            "Monitor engagement closely.",
            30,
        ),
        (
            "Next 2 {unit}",
            "Scale Winners",
            "Double budget on the highest performing messages about {benefit}. "
            "Reduce spend on low performers.",
            40,
        ),
        (
            "{unit} 5+",
            "Optimize & Shift",
            "Shift budget entirely to the winner. Retire losers. Optimize remaining campaigns.",
            30,
        ),
    ],
}


# =============================================================================
# 行动项 / Action items
# =============================================================================

# 调用位置: analyzers/action_items.py: compute_action_items()
ACTION_START_DEVELOPMENT = "Start development on {option}"
ACTION_INTERVIEW_RUNNER_UP = "Schedule user interviews with {runner_up} group"
ACTION_TEST_REAL_USERS = "Test with 50 real users next week"
ACTION_VALIDATE_FINDING = "Review and validate: {finding}"
ACTION_PLAN_PHASES = "Plan Q2 implementation phases"

TALK_TRACK_DEFAULT_WINNER = "The survey identified a clear winner"
TALK_TRACK_DEFAULT_REASON = "Strong preference from survey responses"
TALK_TRACK_NEXT_STEP = "Let's start development next week"
