"""Scaling rules: replica bounds of a runner scale set."""

from arc_policy.policy.models import (
    ActionType,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    RuleCategory,
    RuleScope,
    Severity,
)


MAX_REPLICAS_CEILING = 50


MAX_REPLICAS = ArcPolicyRule(
    id="arc-scale-001",
    name="Reasonable Max Replicas",
    description="ARC runner scale sets should have reasonable maximum replicas",
    severity=Severity.MEDIUM,
    category=RuleCategory.COST,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.maxReplicas",
            operator="less_than",
            value=MAX_REPLICAS_CEILING,
            description="Maximum replicas should be reasonable to control costs",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message=(
                "High maximum replicas setting detected. "
                "This could lead to high costs during scaling events."
            ),
        ),
    ],
)

# greater_than -1 is satisfied by any defined value >= 0; a missing field
# parses to 0 as well, so only negative values fail.
MIN_REPLICAS = ArcPolicyRule(
    id="arc-scale-002",
    name="Minimum Replicas Configuration",
    description="ARC runner scale sets should have minimum replicas set appropriately",
    severity=Severity.LOW,
    category=RuleCategory.PERFORMANCE,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.minReplicas",
            operator="greater_than",
            value=-1,
            description="Minimum replicas should be defined (0 or more)",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="Consider setting minimum replicas for better availability and response times.",
        ),
    ],
)


SCALING_RULES = [
    MAX_REPLICAS,
    MIN_REPLICAS,
]
