"""Tests for field resolution, quantity parsing and condition operators."""

import math

import pytest

from arc_policy.policy.conditions import (
    RuleConfigurationError,
    evaluate_condition,
    parse_quantity,
    resolve_field,
    split_path,
)
from arc_policy.policy.models import PolicyCondition


class TestParseQuantity:
    """Kubernetes quantity parsing."""

    def test_millicores_are_not_scaled(self):
        """'250m' is 250, not 0.25."""
        assert parse_quantity("250m") == 250
        assert parse_quantity("4000m") == 4000

    def test_binary_memory_suffixes(self):
        """Ki/Mi/Gi scale by powers of 1024."""
        assert parse_quantity("4Ki") == 4096
        assert parse_quantity("512Mi") == 512 * 1024 * 1024
        assert parse_quantity("1Gi") == 1073741824

    def test_plain_numbers(self):
        """Unsuffixed strings parse as floats."""
        assert parse_quantity("2") == 2
        assert parse_quantity("0.5") == 0.5

    def test_numbers_pass_through(self):
        """Numeric values are returned unchanged."""
        assert parse_quantity(50) == 50
        assert parse_quantity(1.5) == 1.5
        assert parse_quantity(-1) == -1

    def test_unparseable_defaults_to_zero(self):
        """Garbage, None and booleans are 0."""
        assert parse_quantity("bogus") == 0
        assert parse_quantity(None) == 0
        assert parse_quantity(True) == 0
        assert parse_quantity({"cpu": 1}) == 0

    def test_bad_prefix_before_suffix_is_nan(self):
        """A non-numeric prefix before 'm' cannot be compared."""
        assert math.isnan(parse_quantity("lotsm"))


class TestResolveField:
    """Field path resolution."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resource = {
            "metadata": {
                "name": "runners",
                "labels": {"actions.github.com/scale-set-name": "runners", "app": "arc"},
            },
            "spec": {
                "maxReplicas": 5,
                "template": {
                    "spec": {
                        "containers": [
                            {"name": "runner", "securityContext": {"privileged": False}},
                            {"name": "dind", "resources": {"limits": {"cpu": "1"}}},
                        ]
                    }
                },
            },
        }

    def test_split_path_segments(self):
        """Names, indexes and quoted keys are separate segments."""
        assert split_path('a.b[0].c["x.y/z"]') == ["a", "b", 0, "c", "x.y/z"]

    def test_dot_path(self):
        """Plain dot paths descend through mappings."""
        assert resolve_field(self.resource, "spec.maxReplicas") == 5
        assert resolve_field(self.resource, "metadata.labels.app") == "arc"

    def test_missing_segment(self):
        """A missing segment resolves to None."""
        assert resolve_field(self.resource, "spec.minReplicas") is None
        assert resolve_field(self.resource, "spec.runnerGroup.name") is None

    def test_non_container_stops_descent(self):
        """Descending into a scalar resolves to None."""
        assert resolve_field(self.resource, "spec.maxReplicas.value") is None

    def test_index_segment(self):
        """[n] selects a list element."""
        assert resolve_field(self.resource, "spec.template.spec.containers[1].name") == "dind"
        assert resolve_field(self.resource, "spec.template.spec.containers[5].name") is None

    def test_dotted_index_segment(self):
        """A digit segment after a dot indexes into a list."""
        assert resolve_field(self.resource, "spec.template.spec.containers.1.name") == "dind"
        assert resolve_field(self.resource, "spec.template.spec.containers.7.name") is None

    def test_second_wildcard_ends_the_path(self):
        """Only the path between the first and second [*] is checked."""
        resource = {"a": [{"b": [{"c": None}]}]}
        assert resolve_field(resource, "a[*].b[*].c") is True
        assert resolve_field({"a": [{"d": 1}]}, "a[*].b[*].c") is False

    def test_quoted_key_segment(self):
        """Quoted keys may contain dots and slashes."""
        path = 'metadata.labels["actions.github.com/scale-set-name"]'
        assert resolve_field(self.resource, path) == "runners"

    def test_wildcard_collapses_to_true(self):
        """[*] is True when some element has the sub-field."""
        path = "spec.template.spec.containers[*].resources.limits.cpu"
        assert resolve_field(self.resource, path) is True

    def test_wildcard_detects_presence_not_value(self):
        """A present False value still counts as defined."""
        path = "spec.template.spec.containers[*].securityContext.privileged"
        assert resolve_field(self.resource, path) is True

    def test_wildcard_no_element_matches(self):
        """[*] is False when no element has the sub-field."""
        path = "spec.template.spec.containers[*].resources.limits.memory"
        assert resolve_field(self.resource, path) is False

    def test_wildcard_on_non_list(self):
        """[*] over a missing or non-list value is False."""
        assert resolve_field(self.resource, "spec.volumes[*].name") is False
        assert resolve_field(self.resource, "spec.template[*].spec") is False

    def test_wildcard_without_remaining_path(self):
        """A trailing [*] checks the elements themselves."""
        assert resolve_field(self.resource, "spec.template.spec.containers[*]") is True
        assert resolve_field({"items": [None]}, "items[*]") is False


class TestEvaluateCondition:
    """Condition operators."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resource = {
            "spec": {
                "githubConfigUrl": "https://github.com/acme",
                "runnerGroup": "default",
                "maxReplicas": 100,
                "enabled": True,
                "image": "ghcr.io/actions/actions-runner:latest",
                "limits": {"cpu": "8000m", "memory": "2Gi"},
            }
        }

    def check(self, field, operator, value=None):
        return evaluate_condition(
            PolicyCondition(field=field, operator=operator, value=value),
            self.resource,
        )

    def test_equals(self):
        """equals reports the expected value as suggestion."""
        result = self.check("spec.runnerGroup", "equals", "default")
        assert result.passed
        result = self.check("spec.runnerGroup", "equals", "ops")
        assert not result.passed
        assert result.current_value == "default"
        assert result.suggested_value == "ops"

    def test_equals_is_strict_about_booleans(self):
        """True does not equal 1."""
        assert self.check("spec.enabled", "equals", True).passed
        assert not self.check("spec.enabled", "equals", 1).passed

    def test_not_equals(self):
        """not_equals has no suggested value."""
        result = self.check("spec.runnerGroup", "not_equals", "default")
        assert not result.passed
        assert result.suggested_value is None
        assert self.check("spec.runnerGroup", "not_equals", "ops").passed

    def test_contains_and_not_contains(self):
        """Substring checks on the stringified value."""
        assert self.check("spec.githubConfigUrl", "contains", "github.com").passed
        assert not self.check("spec.githubConfigUrl", "contains", "/repos/").passed
        assert self.check("spec.githubConfigUrl", "not_contains", "/repos/").passed

    def test_contains_on_missing_field(self):
        """A missing field contains nothing."""
        assert not self.check("spec.missing", "contains", "x").passed
        assert self.check("spec.missing", "not_contains", "x").passed

    def test_greater_and_less_than_use_quantities(self):
        """Quantity comparisons."""
        result = self.check("spec.limits.cpu", "less_than", "4000m")
        assert not result.passed
        assert result.current_value == "8000m"
        assert result.suggested_value == "4000m"
        assert self.check("spec.limits.memory", "greater_than", "1Gi").passed
        assert self.check("spec.maxReplicas", "greater_than", 50).passed
        assert not self.check("spec.maxReplicas", "less_than", 50).passed

    def test_regex_match_searches(self):
        """regex_match finds the pattern anywhere unless anchored."""
        assert self.check("spec.image", "regex_match", r"^ghcr\.io/actions/").passed
        assert self.check("spec.image", "regex_match", "actions-runner").passed
        assert not self.check("spec.image", "regex_match", "^docker.io").passed

    def test_exists_and_not_exists(self):
        """Presence checks."""
        assert self.check("spec.runnerGroup", "exists", True).passed
        assert not self.check("spec.missing", "exists", True).passed
        assert self.check("spec.missing", "not_exists").passed
        assert not self.check("spec.runnerGroup", "not_exists").passed

    def test_unknown_operator_fails_closed(self):
        """A mistyped operator fails instead of passing."""
        result = self.check("spec.runnerGroup", "equal", "default")
        assert not result.passed
        assert result.current_value == "default"

    def test_invalid_regex_raises_configuration_error(self):
        """An invalid pattern is a configuration error, not a raw re.error."""
        with pytest.raises(RuleConfigurationError) as exc_info:
            self.check("spec.image", "regex_match", "([unclosed")
        assert exc_info.value.field == "spec.image"

    def test_non_string_pattern_raises_configuration_error(self):
        """A regex_match without a string pattern is rejected."""
        with pytest.raises(RuleConfigurationError) as exc_info:
            self.check("spec.image", "regex_match", None)
        assert exc_info.value.field == "spec.image"

    def test_wildcard_not_equals_checks_presence_only(self):
        """Against a [*] path, not_equals True fails even for privileged: false."""
        resource = {"containers": [{"securityContext": {"privileged": False}}]}
        condition = PolicyCondition(
            field="containers[*].securityContext.privileged",
            operator="not_equals",
            value=True,
        )
        result = evaluate_condition(condition, resource)
        assert not result.passed
        assert result.current_value is True
