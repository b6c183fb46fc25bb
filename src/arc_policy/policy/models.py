"""Policy data models.

Rules, the violations they produce and the evaluation/compliance results.
Field names are snake_case in Python; JSON uses camelCase aliases so rule
files and reports stay compatible with existing ARC tooling.
"""

from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArcModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Severity(str, Enum):
    """Rule severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RuleCategory(str, Enum):
    """Categories of ARC policy rules."""

    SECURITY = "security"
    COMPLIANCE = "compliance"
    PERFORMANCE = "performance"
    COST = "cost"
    OPERATIONS = "operations"


class RuleScope(str, Enum):
    """Resource level a rule applies to."""

    CLUSTER = "cluster"
    NAMESPACE = "namespace"
    RUNNER_SCALE_SET = "runnerscaleset"
    RUNNER = "runner"
    RESOURCE = "resource"


class ConditionOperator(str, Enum):
    """Operators understood by the condition evaluator."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    REGEX_MATCH = "regex_match"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class ActionType(str, Enum):
    """What happens when a rule fails."""

    DENY = "deny"        # Blocking: records go to violations
    WARN = "warn"
    MODIFY = "modify"
    AUDIT = "audit"
    NOTIFY = "notify"


class PolicyCondition(ArcModel):
    """A single check against a resource field."""

    field: str = Field(description="Path expression into the resource tree")
    # Kept as a plain string: unknown operators must load and then fail closed
    operator: str = Field(description="Condition operator")
    value: Any = Field(default=None, description="Value compared against")
    description: Optional[str] = Field(default=None)


class PolicyAction(ArcModel):
    """Action attached to a rule."""

    type: ActionType
    message: str
    auto_fix: Optional[bool] = Field(default=None)
    fix_action: Optional[str] = Field(default=None)
    notification_channels: Optional[List[str]] = Field(default=None)


class ArcPolicyRule(ArcModel):
    """A named, scoped compliance check."""

    id: str = Field(description="Unique rule identifier (registry key)")
    name: str
    description: str
    severity: Severity
    category: RuleCategory
    enabled: bool = True
    scope: RuleScope
    conditions: List[PolicyCondition] = Field(default_factory=list)
    actions: List[PolicyAction] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = Field(default=None)

    @property
    def is_blocking(self) -> bool:
        """True when any action denies; decides violation vs warning."""
        return any(action.type == ActionType.DENY for action in self.actions)

    @property
    def can_auto_fix(self) -> bool:
        """True when any action is marked auto-fixable."""
        return any(action.auto_fix is True for action in self.actions)

    @property
    def violation_message(self) -> str:
        """Message used for violation records."""
        if self.actions and self.actions[0].message:
            return self.actions[0].message
        return self.description


class ResourceRef(ArcModel):
    """Identifies the evaluated resource."""

    kind: str
    name: str
    namespace: Optional[str] = None


class PolicyViolation(ArcModel):
    """One failing condition of one rule on one resource."""

    rule_id: str
    rule_name: str
    severity: str
    category: str
    resource: ResourceRef
    message: str
    field: Optional[str] = None
    current_value: Any = None
    suggested_value: Any = None
    can_auto_fix: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: Optional[Dict[str, Any]] = None


class EvaluationSummary(ArcModel):
    """Rule counts and violation breakdowns."""

    total_rules: int = 0
    passed_rules: int = 0
    failed_rules: int = 0
    violations_by_severity: Dict[str, int] = Field(default_factory=dict)
    violations_by_category: Dict[str, int] = Field(default_factory=dict)


class PolicyEvaluationResult(ArcModel):
    """Result of evaluating one resource (or an aggregate of many)."""

    passed: bool
    violations: List[PolicyViolation] = Field(default_factory=list)
    warnings: List[PolicyViolation] = Field(default_factory=list)
    summary: EvaluationSummary = Field(default_factory=EvaluationSummary)

    @property
    def findings(self) -> List[PolicyViolation]:
        """Violations followed by warnings."""
        return [*self.violations, *self.warnings]


class ArcComplianceReport(ArcModel):
    """Compliance report for a cluster or namespace scan."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    cluster: str
    namespace: Optional[str] = None
    overall_compliance: float = Field(ge=0.0, le=100.0, description="Percentage of passed rules")
    results: PolicyEvaluationResult
    recommendations: List[str] = Field(default_factory=list)
