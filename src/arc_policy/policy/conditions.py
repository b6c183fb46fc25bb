"""Condition evaluation.

Resolves field paths against a JSON-like resource tree and applies a
condition operator to the resolved value. Kubernetes quantities
("250m", "512Mi", "1Gi") are parsed for the numeric comparisons.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from arc_policy.policy.models import ConditionOperator, PolicyCondition


WILDCARD = "[*]"

# name | [0] | ["quoted.key"] | ['quoted.key']
_SEGMENT_PATTERN = re.compile(r"""\[(\d+)\]|\["([^"]*)"\]|\['([^']*)'\]|([^.\[\]]+)""")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

BINARY_SUFFIXES = (
    ("Ki", 1024),
    ("Mi", 1024 ** 2),
    ("Gi", 1024 ** 3),
)


class RuleConfigurationError(Exception):
    """A rule cannot be used as written (e.g. an invalid regex)."""

    def __init__(self, message: str, rule_id: Optional[str] = None, field: Optional[str] = None):
        self.message = message
        self.rule_id = rule_id
        self.field = field
        super().__init__(self.message)


@dataclass(frozen=True)
class ConditionResult:
    """Outcome of a single condition check."""

    passed: bool
    current_value: Any = None
    suggested_value: Any = None


def split_path(path: str) -> List[Union[str, int]]:
    """Split a path expression into mapping keys and list indexes."""
    segments: List[Union[str, int]] = []
    for match in _SEGMENT_PATTERN.finditer(path):
        index, double_quoted, single_quoted, name = match.groups()
        if index is not None:
            segments.append(int(index))
        elif double_quoted is not None:
            segments.append(double_quoted)
        elif single_quoted is not None:
            segments.append(single_quoted)
        else:
            segments.append(name)
    return segments


def get_nested_value(obj: Any, path: str) -> Any:
    """
    Walk a plain (wildcard-free) path.

    Returns None as soon as a segment is missing or the current value
    cannot be descended into.
    """
    current = obj
    for segment in split_path(path):
        if isinstance(current, list) and isinstance(segment, str) and segment.isdigit():
            # "containers.0.image" indexes like "containers[0].image"
            segment = int(segment)
        if isinstance(segment, int):
            if not isinstance(current, list) or segment >= len(current):
                return None
            current = current[segment]
        else:
            if not isinstance(current, dict) or segment not in current:
                return None
            current = current[segment]
        if current is None:
            return None
    return current


def resolve_field(resource: Any, path: str) -> Any:
    """
    Resolve a field path against a resource.

    Paths containing ``[*]`` collapse to a boolean: True when any element
    of the list before the first marker has a non-null value at the path
    between the first and second marker. Anything after a second marker is
    ignored. A non-list before the marker resolves to False.
    """
    if WILDCARD not in path:
        return get_nested_value(resource, path)

    parts = path.split(WILDCARD)
    array_path, remaining_path = parts[0], parts[1]
    if remaining_path.startswith("."):
        remaining_path = remaining_path[1:]

    array_value = get_nested_value(resource, array_path)
    if not isinstance(array_value, list):
        return False

    for item in array_value:
        item_value = get_nested_value(item, remaining_path) if remaining_path else item
        if item_value is not None:
            return True
    return False


def _parse_int_prefix(text: str) -> float:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else math.nan


def _parse_float_prefix(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return math.nan
    value = float(match.group(1))
    return int(value) if value.is_integer() else value


def parse_quantity(value: Any) -> Union[int, float]:
    """
    Parse a Kubernetes-style resource quantity into a number.

    - numbers are returned as-is
    - ``"250m"`` -> 250 (millicores, not scaled down)
    - ``"1Ki"``/``"1Mi"``/``"1Gi"`` -> bytes
    - anything else is parsed as a float, 0 when that fails
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return 0

    if value.endswith("m"):
        return _parse_int_prefix(value[:-1])

    for suffix, multiplier in BINARY_SUFFIXES:
        if value.endswith(suffix):
            return _parse_int_prefix(value[: -len(suffix)]) * multiplier

    parsed = _parse_float_prefix(value)
    if math.isnan(parsed):
        return 0
    return parsed


def stringify(value: Any) -> str:
    """Render a resolved value as text for contains/regex checks."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that does not treat booleans as numbers."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def compile_pattern(condition: PolicyCondition, rule_id: Optional[str] = None) -> re.Pattern:
    """Compile a regex_match condition value, raising RuleConfigurationError if invalid."""
    if not isinstance(condition.value, str):
        raise RuleConfigurationError(
            f"regex_match pattern on field '{condition.field}' must be a string "
            f"(got {condition.value!r})",
            rule_id=rule_id,
            field=condition.field,
        )
    try:
        return re.compile(condition.value)
    except re.error as e:
        raise RuleConfigurationError(
            f"Invalid regex_match pattern {condition.value!r} on field "
            f"'{condition.field}': {e}",
            rule_id=rule_id,
            field=condition.field,
        ) from e


def evaluate_condition(
    condition: PolicyCondition,
    resource: Any,
    pattern: Optional[re.Pattern] = None,
) -> ConditionResult:
    """
    Evaluate one condition against a resource.

    Args:
        condition: Condition to check
        resource: JSON-like resource tree
        pattern: Pre-compiled pattern for regex_match (compiled on demand if omitted)

    Returns:
        ConditionResult; unknown operators always fail
    """
    field_value = resolve_field(resource, condition.field)
    expected = condition.value
    operator = condition.operator

    if operator == ConditionOperator.EQUALS:
        return ConditionResult(strict_equals(field_value, expected), field_value, expected)

    if operator == ConditionOperator.NOT_EQUALS:
        return ConditionResult(not strict_equals(field_value, expected), field_value)

    if operator == ConditionOperator.CONTAINS:
        return ConditionResult(stringify(expected) in stringify(field_value), field_value)

    if operator == ConditionOperator.NOT_CONTAINS:
        return ConditionResult(stringify(expected) not in stringify(field_value), field_value)

    if operator == ConditionOperator.GREATER_THAN:
        passed = parse_quantity(field_value) > parse_quantity(expected)
        return ConditionResult(passed, field_value, expected)

    if operator == ConditionOperator.LESS_THAN:
        passed = parse_quantity(field_value) < parse_quantity(expected)
        return ConditionResult(passed, field_value, expected)

    if operator == ConditionOperator.REGEX_MATCH:
        regex = pattern or compile_pattern(condition)
        return ConditionResult(regex.search(stringify(field_value)) is not None, field_value)

    if operator == ConditionOperator.EXISTS:
        return ConditionResult(field_value is not None, field_value)

    if operator == ConditionOperator.NOT_EXISTS:
        return ConditionResult(field_value is None, field_value)

    return ConditionResult(False, field_value)
