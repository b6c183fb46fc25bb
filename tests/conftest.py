"""Shared fixtures for ARC policy tests."""

import pytest

from helpers import make_runner_scale_set


@pytest.fixture
def compliant_resource():
    """A RunnerScaleSet that passes every built-in rule."""
    return make_runner_scale_set()
