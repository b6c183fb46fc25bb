"""
Policy Configuration

Organisation-level policy configuration: enforcement modes, per-category
toggles, custom rules and rule overrides. Loaded once at engine start-up.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, ValidationError as PydanticValidationError

from arc_policy.policy.models import ArcModel, ArcPolicyRule, RuleCategory, Severity


logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Deployment environment of the organisation."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Enforcement(str, Enum):
    """Enforcement mode."""

    STRICT = "strict"
    ADVISORY = "advisory"
    DISABLED = "disabled"


ENFORCEMENT_MODES = [mode.value for mode in Enforcement]
KNOWN_CATEGORIES = [category.value for category in RuleCategory]


class OrganizationSettings(ArcModel):
    name: str
    environment: Environment
    compliance: Optional[List[str]] = None


class GlobalSettings(ArcModel):
    enforcement: Enforcement
    auto_fix: bool = False
    excluded_namespaces: Optional[List[str]] = None


class CategorySettings(ArcModel):
    enabled: bool = True
    enforcement: Enforcement = Enforcement.ADVISORY
    auto_fix: bool = False


class RuleOverride(ArcModel):
    """Per-rule override. Only enabled and severity are applied to rules."""

    enabled: Optional[bool] = None
    severity: Optional[Severity] = None
    enforcement: Optional[Enforcement] = None


class SlackNotification(ArcModel):
    webhook_url: str
    channel: str
    severity_levels: List[str] = Field(default_factory=list)


class EmailNotification(ArcModel):
    recipients: List[str]
    severity_levels: List[str] = Field(default_factory=list)


class NotificationSettings(ArcModel):
    slack: Optional[SlackNotification] = None
    email: Optional[EmailNotification] = None


class ArcPolicyConfiguration(ArcModel):
    """Complete policy configuration for an organisation."""

    organization: OrganizationSettings
    global_settings: GlobalSettings = Field(alias="global")
    categories: Dict[str, CategorySettings] = Field(default_factory=dict)
    custom_rules: List[ArcPolicyRule] = Field(default_factory=list)
    rule_overrides: Dict[str, RuleOverride] = Field(default_factory=dict)
    notifications: Optional[NotificationSettings] = None


class ConfigValidationResult(ArcModel):
    """Outcome of a structural configuration check."""

    is_valid: bool
    errors: Optional[List[str]] = None
    warnings: Optional[List[str]] = None


def validate_configuration(config: Any) -> ConfigValidationResult:
    """
    Structurally validate a raw (JSON-decoded) policy configuration.

    Never raises and never mutates its input. Unknown category names are
    warnings; invalid enforcement values and missing required sections
    are errors.

    Args:
        config: Raw configuration, typically a dict decoded from JSON

    Returns:
        ConfigValidationResult (errors/warnings are None when empty)
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(config, dict):
        return ConfigValidationResult(
            is_valid=False,
            errors=["Configuration root must be an object"],
        )

    organization = config.get("organization")
    if not isinstance(organization, dict):
        organization = {}
    if not organization.get("name"):
        errors.append("organization.name is required")
    if not organization.get("environment"):
        errors.append("organization.environment is required")

    global_section = config.get("global")
    if not global_section:
        errors.append("global section is required")
    else:
        enforcement = global_section.get("enforcement") if isinstance(global_section, dict) else None
        if enforcement not in ENFORCEMENT_MODES:
            errors.append(
                f"global.enforcement must be one of strict|advisory|disabled (got {enforcement})"
            )

    categories = config.get("categories")
    if isinstance(categories, dict):
        for name, category_settings in categories.items():
            if name not in KNOWN_CATEGORIES:
                warnings.append(f"Unknown category '{name}' will be ignored")
            if isinstance(category_settings, dict):
                enforcement = category_settings.get("enforcement")
                if enforcement and enforcement not in ENFORCEMENT_MODES:
                    errors.append(f"categories.{name}.enforcement invalid ({enforcement})")

    return ConfigValidationResult(
        is_valid=not errors,
        errors=errors or None,
        warnings=warnings or None,
    )


def load_policy_configuration(path: Union[str, Path]) -> Optional[ArcPolicyConfiguration]:
    """
    Load a policy configuration from a JSON file.

    Failures are logged and reported as None so the engine can fall back
    to the built-in rules.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Parsed ArcPolicyConfiguration, or None if it could not be loaded
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"ARC policy configuration file not found: {config_path}")
        return None

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        configuration = ArcPolicyConfiguration.model_validate(data)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading ARC policy configuration from {config_path}: {e}")
        return None
    except PydanticValidationError as e:
        logger.error(f"Invalid ARC policy configuration in {config_path}: {e.error_count()} error(s): {e}")
        return None

    logger.info(f"Loaded ARC policy configuration from: {config_path}")
    return configuration
