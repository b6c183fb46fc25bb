"""ARC policy evaluation: rules, registry, evaluator and compliance reports."""

from arc_policy.policy.models import (
    ArcComplianceReport,
    ArcPolicyRule,
    PolicyAction,
    PolicyCondition,
    PolicyEvaluationResult,
    PolicyViolation,
)
from arc_policy.policy.conditions import RuleConfigurationError, parse_quantity, resolve_field
from arc_policy.policy.configuration import ArcPolicyConfiguration, validate_configuration
from arc_policy.policy.registry import RuleRegistry, build_registry
from arc_policy.policy.engine import ArcPolicyEngine, PolicyEngineError

__all__ = [
    "ArcComplianceReport",
    "ArcPolicyRule",
    "PolicyAction",
    "PolicyCondition",
    "PolicyEvaluationResult",
    "PolicyViolation",
    "RuleConfigurationError",
    "parse_quantity",
    "resolve_field",
    "ArcPolicyConfiguration",
    "validate_configuration",
    "RuleRegistry",
    "build_registry",
    "ArcPolicyEngine",
    "PolicyEngineError",
]
