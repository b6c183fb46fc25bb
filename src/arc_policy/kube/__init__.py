"""Kubernetes access for fetching ARC resources."""

from arc_policy.kube.client import RunnerScaleSetClient, ResourceFetchError

__all__ = ["RunnerScaleSetClient", "ResourceFetchError"]
