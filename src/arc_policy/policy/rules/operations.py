"""Operational rules: labelling and runner images."""

from arc_policy.policy.models import (
    ActionType,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    RuleCategory,
    RuleScope,
    Severity,
)


SUPPORTED_RUNNER_IMAGES = r"^(ghcr\.io/actions/actions-runner|sumologic/github-actions-runner)"


RUNNER_LABELS = ArcPolicyRule(
    id="arc-ops-001",
    name="Require Runner Labels",
    description="ARC runners must have standard labels for observability",
    severity=Severity.LOW,
    category=RuleCategory.OPERATIONS,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field='metadata.labels["actions.github.com/scale-set-name"]',
            operator="exists",
            value=True,
            description="scale-set-name label is required",
        ),
        PolicyCondition(
            field="metadata.labels.app",
            operator="exists",
            value=True,
            description="app label is required",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="Missing required labels for proper ARC runner management and observability.",
        ),
    ],
)

RUNNER_IMAGE = ArcPolicyRule(
    id="arc-ops-002",
    name="Valid Runner Image",
    description="ARC runners should use supported runner images",
    severity=Severity.MEDIUM,
    category=RuleCategory.OPERATIONS,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.template.spec.containers[0].image",
            operator="regex_match",
            value=SUPPORTED_RUNNER_IMAGES,
            description="Runner image should be from supported registries",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="ARC runner should use supported official runner images for best compatibility.",
        ),
    ],
)


OPERATIONS_RULES = [
    RUNNER_LABELS,
    RUNNER_IMAGE,
]
