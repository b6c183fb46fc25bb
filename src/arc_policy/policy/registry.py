"""Rule Registry.

Holds the rules an engine evaluates, keyed by rule id. Configuration is
applied as an explicit pipeline: defaults, then overrides, then custom
rules.
"""

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from arc_policy.policy.conditions import compile_pattern
from arc_policy.policy.configuration import ArcPolicyConfiguration, RuleOverride
from arc_policy.policy.models import ArcPolicyRule, ConditionOperator
from arc_policy.policy.rules import default_rules


logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    In-memory registry of ARC policy rules.

    Registering an id that already exists replaces the rule entirely and
    keeps its position. regex_match patterns are compiled at registration
    so a bad pattern is reported once, before any evaluation.
    """

    def __init__(self, rules: Optional[Iterable[ArcPolicyRule]] = None):
        self._rules: Dict[str, ArcPolicyRule] = {}
        # (rule id, condition index) -> compiled regex_match pattern
        self._patterns: Dict[Tuple[str, int], re.Pattern] = {}
        for rule in rules or []:
            self.register(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def register(self, rule: ArcPolicyRule) -> None:
        """
        Insert or replace a rule.

        Raises:
            RuleConfigurationError: If a regex_match condition has an invalid pattern
        """
        patterns = {}
        for index, condition in enumerate(rule.conditions):
            if condition.operator == ConditionOperator.REGEX_MATCH:
                patterns[(rule.id, index)] = compile_pattern(condition, rule_id=rule.id)

        for key in [key for key in self._patterns if key[0] == rule.id]:
            del self._patterns[key]
        self._patterns.update(patterns)
        self._rules[rule.id] = rule

    def get(self, rule_id: str) -> Optional[ArcPolicyRule]:
        return self._rules.get(rule_id)

    def all(self) -> List[ArcPolicyRule]:
        """All rules in registration order."""
        return list(self._rules.values())

    def by_category(self, category: str) -> List[ArcPolicyRule]:
        return [rule for rule in self._rules.values() if rule.category == category]

    def pattern_for(self, rule_id: str, condition_index: int) -> Optional[re.Pattern]:
        """Pre-compiled pattern of a regex_match condition, if any."""
        return self._patterns.get((rule_id, condition_index))

    def apply_overrides(self, overrides: Mapping[str, RuleOverride]) -> None:
        """
        Apply enabled/severity overrides to registered rules.

        Unknown rule ids are ignored: configuration may name rules that
        this version does not ship.
        """
        for rule_id, override in overrides.items():
            rule = self._rules.get(rule_id)
            if rule is None:
                logger.debug(f"Ignoring override for unknown rule: {rule_id}")
                continue

            update = {}
            if override.enabled is not None:
                update["enabled"] = override.enabled
            if override.severity:
                update["severity"] = override.severity
            if update:
                self._rules[rule_id] = rule.model_copy(update=update)

    def apply_custom_rules(self, rules: Iterable[ArcPolicyRule]) -> None:
        """Register custom rules, superseding built-in rules with the same id."""
        for rule in rules:
            if rule.id in self._rules:
                logger.info(f"Custom rule replaces registered rule: {rule.id}")
            self.register(rule)


def build_registry(configuration: Optional[ArcPolicyConfiguration] = None) -> RuleRegistry:
    """
    Build a registry: load defaults, apply overrides, apply custom rules.

    Overrides run before custom rules, so an override never affects a
    custom rule that shares its id.
    """
    registry = RuleRegistry(default_rules())

    if configuration is None:
        return registry

    registry.apply_overrides(configuration.rule_overrides)
    registry.apply_custom_rules(configuration.custom_rules)

    logger.info(
        f"Applied ARC configuration for {configuration.organization.name} "
        f"({configuration.organization.environment.value})"
    )
    return registry
