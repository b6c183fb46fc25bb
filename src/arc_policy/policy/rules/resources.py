"""Resource management rules: container limits and their size."""

from arc_policy.policy.models import (
    ActionType,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    RuleCategory,
    RuleScope,
    Severity,
)


# 4 cores, expressed in millicores
MAX_RUNNER_CPU = "4000m"


# NOTE: each [*] path resolves to True or False, and exists passes on False,
# so this rule does not fire for containers without limits.
RUNNER_RESOURCE_LIMITS = ArcPolicyRule(
    id="arc-res-001",
    name="Require Runner Resource Limits",
    description="ARC runners must have CPU and memory limits",
    severity=Severity.MEDIUM,
    category=RuleCategory.PERFORMANCE,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.template.spec.containers[*].resources.limits.cpu",
            operator="exists",
            value=True,
            description="CPU limits must be defined for runners",
        ),
        PolicyCondition(
            field="spec.template.spec.containers[*].resources.limits.memory",
            operator="exists",
            value=True,
            description="Memory limits must be defined for runners",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="ARC runner is missing resource limits. This can lead to resource contention.",
            auto_fix=True,
            fix_action="add_runner_resource_limits",
        ),
    ],
)

# containers[0] is the runner container in ARC scale-set templates. A [*]
# path would collapse to a boolean and never compare the actual limit.
RUNNER_CPU_CEILING = ArcPolicyRule(
    id="arc-res-002",
    name="Reasonable Runner CPU Limits",
    description="ARC runner CPU limits should be reasonable (not more than 4 cores typically)",
    severity=Severity.MEDIUM,
    category=RuleCategory.COST,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.template.spec.containers[0].resources.limits.cpu",
            operator="less_than",
            value=MAX_RUNNER_CPU,
            description="Runner CPU limits should typically be under 4 cores",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message=(
                "High CPU limits detected for ARC runner. "
                "Consider if this is necessary for cost optimization."
            ),
        ),
    ],
)


RESOURCE_RULES = [
    RUNNER_RESOURCE_LIMITS,
    RUNNER_CPU_CEILING,
]
