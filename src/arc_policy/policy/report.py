"""Compliance aggregation and reporting across many evaluated resources."""

import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from arc_policy.policy.models import (
    ArcComplianceReport,
    EvaluationSummary,
    PolicyEvaluationResult,
    RuleCategory,
)


# One recommendation per category present, in this order
CATEGORY_RECOMMENDATIONS = [
    (
        RuleCategory.SECURITY,
        "🔒 Security: Review ARC runner security contexts, avoid privileged runners, "
        "and ensure GitHub token secrets are properly configured.",
    ),
    (
        RuleCategory.PERFORMANCE,
        "📊 Resources: Define appropriate resource limits for ARC runners to prevent "
        "resource contention and ensure stable performance.",
    ),
    (
        RuleCategory.OPERATIONS,
        "⚙️ Operations: Add proper labeling and use supported runner images for improved "
        "ARC runner observability and reliability.",
    ),
    (
        RuleCategory.COST,
        "💰 Cost: Review ARC scaling settings and resource limits to optimize costs "
        "while maintaining performance.",
    ),
    (
        RuleCategory.COMPLIANCE,
        "📋 Compliance: Scope ARC runners to specific repositories and configure runner "
        "groups for better access control and governance.",
    ),
]


def merge_groups(groups: Iterable[Dict[str, int]]) -> Dict[str, int]:
    """Sum count maps key by key."""
    merged: Counter = Counter()
    for group in groups:
        merged.update(group)
    return dict(merged)


def aggregate_results(results: Sequence[PolicyEvaluationResult]) -> PolicyEvaluationResult:
    """
    Merge per-resource results into one.

    Counts are summed, not de-duplicated: a rule failing on two resources
    counts twice. Violation order follows the input order.
    """
    return PolicyEvaluationResult(
        passed=all(result.passed for result in results),
        violations=[v for result in results for v in result.violations],
        warnings=[w for result in results for w in result.warnings],
        summary=EvaluationSummary(
            total_rules=sum(result.summary.total_rules for result in results),
            passed_rules=sum(result.summary.passed_rules for result in results),
            failed_rules=sum(result.summary.failed_rules for result in results),
            violations_by_severity=merge_groups(r.summary.violations_by_severity for r in results),
            violations_by_category=merge_groups(r.summary.violations_by_category for r in results),
        ),
    )


def overall_compliance(summary: EvaluationSummary) -> float:
    """Percentage of passed rules, 100 when no rule applied.

    Rounded to two decimals with halves rounded up (3.125 -> 3.13).
    """
    if summary.total_rules == 0:
        return 100.0
    percentage = summary.passed_rules / summary.total_rules * 100
    return math.floor(percentage * 100 + 0.5) / 100


def generate_recommendations(result: PolicyEvaluationResult) -> List[str]:
    """Category-level recommendations plus an auto-fix hint."""
    findings = result.findings
    present = {finding.category for finding in findings}

    recommendations = [
        message for category, message in CATEGORY_RECOMMENDATIONS
        if category.value in present
    ]

    auto_fixable = sum(1 for finding in findings if finding.can_auto_fix)
    if auto_fixable:
        recommendations.append(
            f"🔧 Auto-fix: {auto_fixable} ARC policy violations can be automatically fixed. "
            "Consider using the auto-remediation feature."
        )

    return recommendations


def build_compliance_report(
    results: Sequence[PolicyEvaluationResult],
    cluster: str,
    namespace: Optional[str] = None,
) -> ArcComplianceReport:
    """Aggregate per-resource results into an ArcComplianceReport."""
    aggregated = aggregate_results(results)
    return ArcComplianceReport(
        cluster=cluster,
        namespace=namespace,
        overall_compliance=overall_compliance(aggregated.summary),
        results=aggregated,
        recommendations=generate_recommendations(aggregated),
    )
