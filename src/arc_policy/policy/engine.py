"""ARC Policy Engine.

Governance and compliance checks for GitHub Actions Runner Controller
(ARC) runner scale sets. The engine owns a rule registry built once from
the built-in rules and an optional organisation configuration; each
evaluation is stateless.
"""

import logging
from typing import Any, List, Optional

from arc_policy.config import PolicySettings, settings as default_settings
from arc_policy.kube import ResourceFetchError, RunnerScaleSetClient
from arc_policy.policy.configuration import (
    ArcPolicyConfiguration,
    ConfigValidationResult,
    load_policy_configuration,
    validate_configuration,
)
from arc_policy.policy.evaluator import evaluate_resource
from arc_policy.policy.models import (
    ArcComplianceReport,
    ArcPolicyRule,
    PolicyEvaluationResult,
    RuleScope,
)
from arc_policy.policy.registry import RuleRegistry, build_registry
from arc_policy.policy.report import build_compliance_report


logger = logging.getLogger(__name__)


class PolicyEngineError(Exception):
    """An engine operation failed; the original cause is chained."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ArcPolicyEngine:
    """
    Policy engine for ARC runner scale sets.

    Evaluates resources against enabled rules of the requested scope:
    - rules with a deny action produce violations (resource fails)
    - all other failing rules produce warnings

    The registry is only mutated while the engine is constructed, so one
    engine can serve concurrent evaluations.
    """

    def __init__(
        self,
        configuration: Optional[ArcPolicyConfiguration] = None,
        client: Optional[RunnerScaleSetClient] = None,
        cluster_name: Optional[str] = None,
    ):
        """
        Initialize the engine.

        Args:
            configuration: Organisation policy configuration (defaults only if None)
            client: Kubernetes client used by the fetching operations
            cluster_name: Cluster name for reports (default: the client's)

        Raises:
            RuleConfigurationError: If a custom rule has an invalid regex pattern
        """
        self.configuration = configuration
        self.client = client
        self.cluster_name = cluster_name or (client.cluster_name if client else "Unknown")
        self.registry: RuleRegistry = build_registry(configuration)

        logger.info(f"ARC Policy Engine initialized with {len(self.registry)} rules")

    @classmethod
    def from_settings(cls, settings: Optional[PolicySettings] = None) -> "ArcPolicyEngine":
        """Build an engine from environment settings (config file + Kubernetes client)."""
        settings = settings or default_settings
        configuration = None
        if settings.config_path:
            configuration = load_policy_configuration(settings.config_path)
        return cls(
            configuration=configuration,
            client=RunnerScaleSetClient.from_settings(settings),
            cluster_name=settings.cluster_name,
        )

    def get_rules(self) -> List[ArcPolicyRule]:
        """Get all policy rules."""
        return self.registry.all()

    def get_rules_by_category(self, category: str) -> List[ArcPolicyRule]:
        """Get policy rules of one category."""
        return self.registry.by_category(category)

    @staticmethod
    def validate_configuration(config: Any) -> ConfigValidationResult:
        """Structurally validate a raw policy configuration (never raises)."""
        return validate_configuration(config)

    def evaluate_resource(self, resource: Any, resource_type: str) -> PolicyEvaluationResult:
        """
        Evaluate policies against a Kubernetes resource.

        Args:
            resource: JSON-decoded resource (kind, metadata, spec, ...)
            resource_type: Rule scope to apply, e.g. "runnerscaleset"

        Returns:
            PolicyEvaluationResult
        """
        return evaluate_resource(self.registry, resource, resource_type)

    def _require_client(self) -> RunnerScaleSetClient:
        if self.client is None:
            raise PolicyEngineError("No Kubernetes client configured for this engine")
        return self.client

    def evaluate_runner_scale_set(self, namespace: str, name: str) -> PolicyEvaluationResult:
        """
        Fetch one RunnerScaleSet and evaluate it.

        Raises:
            PolicyEngineError: If the resource cannot be fetched
        """
        client = self._require_client()
        try:
            resource = client.get_runner_scale_set(namespace, name)
        except ResourceFetchError as e:
            raise PolicyEngineError(
                f"Failed to evaluate RunnerScaleSet {namespace}/{name}: {e}",
                status_code=e.status_code,
            ) from e

        result = self.evaluate_resource(resource, RuleScope.RUNNER_SCALE_SET.value)
        logger.info(
            f"Evaluated RunnerScaleSet {namespace}/{name}: "
            f"{len(result.violations)} violation(s), {len(result.warnings)} warning(s)"
        )
        return result

    def generate_compliance_report(self, namespace: Optional[str] = None) -> ArcComplianceReport:
        """
        Evaluate every RunnerScaleSet in a namespace (or the cluster) and report.

        Resources are evaluated in the order the API returns them.

        Raises:
            PolicyEngineError: If the resources cannot be listed
        """
        client = self._require_client()
        try:
            resources = client.list_runner_scale_sets(namespace)
        except ResourceFetchError as e:
            raise PolicyEngineError(
                f"Failed to generate ARC compliance report: {e}",
                status_code=e.status_code,
            ) from e

        results = [
            self.evaluate_resource(resource, RuleScope.RUNNER_SCALE_SET.value)
            for resource in resources
        ]
        report = build_compliance_report(results, cluster=self.cluster_name, namespace=namespace)

        logger.info(
            f"Compliance report for {namespace or 'cluster'}: "
            f"{report.overall_compliance}% across {len(results)} resource(s)"
        )
        return report
