"""Compliance rules: repository scoping and runner groups."""

from arc_policy.policy.models import (
    ActionType,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    RuleCategory,
    RuleScope,
    Severity,
)


REPOSITORY_SCOPE = ArcPolicyRule(
    id="arc-comp-001",
    name="GitHub Repository Scope",
    description="ARC runners should be scoped to specific repositories for security",
    severity=Severity.HIGH,
    category=RuleCategory.COMPLIANCE,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.githubConfigUrl",
            operator="contains",
            value="/repos/",
            description="GitHub config URL should be repository-specific, not organization-wide",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message=(
                "Consider scoping ARC runners to specific repositories rather than "
                "organization-wide for better security."
            ),
        ),
    ],
)

RUNNER_GROUP = ArcPolicyRule(
    id="arc-comp-002",
    name="Required Runner Group",
    description="ARC runners should specify a runner group for organization",
    severity=Severity.MEDIUM,
    category=RuleCategory.COMPLIANCE,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.runnerGroup",
            operator="exists",
            value=True,
            description="Runner group should be specified for organization",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="Specify a runner group for better organization and access control.",
        ),
    ],
)


COMPLIANCE_RULES = [
    REPOSITORY_SCOPE,
    RUNNER_GROUP,
]
