"""Rule and resource evaluation.

Pure functions over a resource tree and a rule registry: no I/O and no
registry mutation, so they can be called concurrently against one
registry.
"""

import logging
from collections import Counter
from datetime import datetime, UTC
from typing import Any, Dict, Iterable, List, Optional

from arc_policy.policy.conditions import evaluate_condition
from arc_policy.policy.models import (
    ArcPolicyRule,
    EvaluationSummary,
    PolicyEvaluationResult,
    PolicyViolation,
    ResourceRef,
)
from arc_policy.policy.registry import RuleRegistry


logger = logging.getLogger(__name__)


DEFAULT_RESOURCE_KIND = "RunnerScaleSet"
UNKNOWN_RESOURCE_NAME = "Unknown"


def resource_ref(resource: Any) -> ResourceRef:
    """Identify a resource, falling back to defaults for missing metadata."""
    resource = resource if isinstance(resource, dict) else {}
    metadata = resource.get("metadata")
    metadata = metadata if isinstance(metadata, dict) else {}
    return ResourceRef(
        kind=resource.get("kind") or DEFAULT_RESOURCE_KIND,
        name=metadata.get("name") or UNKNOWN_RESOURCE_NAME,
        namespace=metadata.get("namespace"),
    )


def evaluate_rule(
    rule: ArcPolicyRule,
    resource: Any,
    registry: Optional[RuleRegistry] = None,
) -> List[PolicyViolation]:
    """
    Evaluate every condition of a rule against a resource.

    Args:
        rule: Rule to evaluate
        resource: JSON-like resource tree
        registry: Registry holding pre-compiled regex patterns (optional)

    Returns:
        One PolicyViolation per failing condition
    """
    violations: List[PolicyViolation] = []
    ref = resource_ref(resource)

    for index, condition in enumerate(rule.conditions):
        pattern = registry.pattern_for(rule.id, index) if registry else None
        result = evaluate_condition(condition, resource, pattern=pattern)
        if result.passed:
            continue

        violations.append(
            PolicyViolation(
                rule_id=rule.id,
                rule_name=rule.name,
                severity=rule.severity.value,
                category=rule.category.value,
                resource=ref,
                message=rule.violation_message,
                field=condition.field,
                current_value=result.current_value,
                suggested_value=result.suggested_value,
                can_auto_fix=rule.can_auto_fix,
                timestamp=datetime.now(UTC),
                metadata=rule.metadata,
            )
        )

    return violations


def group_count(violations: Iterable[PolicyViolation], attribute: str) -> Dict[str, int]:
    """Count violations by an attribute value, 'unknown' when empty."""
    counts = Counter(getattr(v, attribute, None) or "unknown" for v in violations)
    return dict(counts)


def evaluate_resource(
    registry: RuleRegistry,
    resource: Any,
    resource_type: str,
) -> PolicyEvaluationResult:
    """
    Evaluate all enabled rules of a scope against one resource.

    Rules with a deny action put their records in violations; all other
    failing rules put theirs in warnings.

    Args:
        registry: Rules to select from
        resource: JSON-like resource tree
        resource_type: Rule scope to select (exact match, e.g. "runnerscaleset")

    Returns:
        PolicyEvaluationResult with summary counts
    """
    violations: List[PolicyViolation] = []
    warnings: List[PolicyViolation] = []
    applicable = [
        rule for rule in registry.all()
        if rule.enabled and rule.scope == resource_type
    ]

    for rule in applicable:
        rule_violations = evaluate_rule(rule, resource, registry)
        if not rule_violations:
            continue

        logger.warning(
            f"Rule '{rule.id}' failed on {rule_violations[0].resource.name}: "
            f"{len(rule_violations)} condition(s)"
        )
        if rule.is_blocking:
            violations.extend(rule_violations)
        else:
            warnings.extend(rule_violations)

    findings = [*violations, *warnings]
    total_rules = len(applicable)
    failed_rules = len({v.rule_id for v in findings})

    return PolicyEvaluationResult(
        passed=not violations,
        violations=violations,
        warnings=warnings,
        summary=EvaluationSummary(
            total_rules=total_rules,
            passed_rules=total_rules - failed_rules,
            failed_rules=failed_rules,
            violations_by_severity=group_count(findings, "severity"),
            violations_by_category=group_count(findings, "category"),
        ),
    )
