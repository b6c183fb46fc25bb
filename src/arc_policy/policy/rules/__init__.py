"""Built-in ARC policy rules."""

from typing import List

from arc_policy.policy.models import ArcPolicyRule
from arc_policy.policy.rules.security import SECURITY_RULES
from arc_policy.policy.rules.resources import RESOURCE_RULES
from arc_policy.policy.rules.operations import OPERATIONS_RULES
from arc_policy.policy.rules.scaling import SCALING_RULES
from arc_policy.policy.rules.compliance import COMPLIANCE_RULES


DEFAULT_RULES: List[ArcPolicyRule] = [
    *SECURITY_RULES,
    *RESOURCE_RULES,
    *OPERATIONS_RULES,
    *SCALING_RULES,
    *COMPLIANCE_RULES,
]


def default_rules() -> List[ArcPolicyRule]:
    """Fresh copies of the built-in rules, safe to mutate."""
    return [rule.model_copy(deep=True) for rule in DEFAULT_RULES]


__all__ = [
    "DEFAULT_RULES",
    "default_rules",
    "SECURITY_RULES",
    "RESOURCE_RULES",
    "OPERATIONS_RULES",
    "SCALING_RULES",
    "COMPLIANCE_RULES",
]
