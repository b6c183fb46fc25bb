"""Security rules for ARC runner scale sets.

Pod/container security context and GitHub credential checks.
"""

from arc_policy.policy.models import (
    ActionType,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    RuleCategory,
    RuleScope,
    Severity,
)


RUNNER_SECURITY_CONTEXT = ArcPolicyRule(
    id="arc-sec-001",
    name="Require Runner Security Context",
    description="ARC runner pods must have security context defined",
    severity=Severity.HIGH,
    category=RuleCategory.SECURITY,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.template.spec.securityContext",
            operator="exists",
            value=True,
            description="Security context must be defined for runner pods",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.WARN,
            message="ARC runner is missing security context. This is a security risk.",
            auto_fix=True,
            fix_action="add_runner_security_context",
        ),
    ],
)

# NOTE: the [*] path resolves to "some container sets privileged", so an
# explicit privileged: false also fails this rule.
NO_PRIVILEGED_RUNNERS = ArcPolicyRule(
    id="arc-sec-002",
    name="Prohibit Privileged Runners",
    description="ARC runners must not run in privileged mode",
    severity=Severity.CRITICAL,
    category=RuleCategory.SECURITY,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.template.spec.containers[*].securityContext.privileged",
            operator="not_equals",
            value=True,
            description="Privileged ARC runners are not allowed",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.DENY,
            message="Privileged ARC runners are prohibited for security reasons.",
            auto_fix=True,
            fix_action="remove_privileged_flag",
        ),
    ],
)

GITHUB_TOKEN_SECRET = ArcPolicyRule(
    id="arc-sec-003",
    name="Require GitHub Token Secret",
    description="ARC controllers must reference a valid GitHub token secret",
    severity=Severity.CRITICAL,
    category=RuleCategory.SECURITY,
    scope=RuleScope.RUNNER_SCALE_SET,
    conditions=[
        PolicyCondition(
            field="spec.githubConfigSecret.name",
            operator="exists",
            value=True,
            description="GitHub token secret must be defined",
        ),
    ],
    actions=[
        PolicyAction(
            type=ActionType.DENY,
            message="ARC runner must reference a valid GitHub token secret.",
            auto_fix=False,
        ),
    ],
)


SECURITY_RULES = [
    RUNNER_SECURITY_CONTEXT,
    NO_PRIVILEGED_RUNNERS,
    GITHUB_TOKEN_SECRET,
]
