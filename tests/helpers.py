"""Builders and fakes shared by the ARC policy tests."""

import copy

from arc_policy.kube import ResourceFetchError


COMPLIANT_RUNNER_SCALE_SET = {
    "apiVersion": "actions.sumologic.com/v1alpha1",
    "kind": "RunnerScaleSet",
    "metadata": {
        "name": "build-runners",
        "namespace": "arc-runners",
        "labels": {
            "actions.github.com/scale-set-name": "build-runners",
            "app": "arc-runner",
        },
    },
    "spec": {
        "githubConfigUrl": "https://github.com/repos/acme/widgets",
        "githubConfigSecret": {"name": "github-token"},
        "runnerGroup": "default",
        "minReplicas": 1,
        "maxReplicas": 10,
        "template": {
            "spec": {
                "securityContext": {"runAsNonRoot": True, "runAsUser": 1000},
                "containers": [
                    {
                        "name": "runner",
                        "image": "ghcr.io/actions/actions-runner:2.311.0",
                        "resources": {
                            "limits": {"cpu": "2000m", "memory": "4Gi"},
                            "requests": {"cpu": "500m", "memory": "1Gi"},
                        },
                    }
                ],
            }
        },
    },
}

# Number of built-in rules scoped to runnerscaleset
DEFAULT_RUNNER_SCALE_SET_RULES = 11


def make_runner_scale_set(name: str = "build-runners", namespace: str = "arc-runners") -> dict:
    """Deep copy of a fully compliant RunnerScaleSet."""
    resource = copy.deepcopy(COMPLIANT_RUNNER_SCALE_SET)
    resource["metadata"]["name"] = name
    resource["metadata"]["namespace"] = namespace
    return resource


class FakeRunnerScaleSetClient:
    """In-memory stand-in for RunnerScaleSetClient."""

    def __init__(self, resources=None, cluster_name="test-cluster", error=None):
        self.resources = resources or []
        self.cluster_name = cluster_name
        self.error = error
        self.list_calls = []

    def get_runner_scale_set(self, namespace, name):
        if self.error:
            raise self.error
        for resource in self.resources:
            metadata = resource.get("metadata", {})
            if metadata.get("namespace") == namespace and metadata.get("name") == name:
                return resource
        raise ResourceFetchError(f"runnerscalesets {name} not found", status_code=404)

    def list_runner_scale_sets(self, namespace=None):
        self.list_calls.append(namespace)
        if self.error:
            raise self.error
        if namespace is None:
            return list(self.resources)
        return [r for r in self.resources if r.get("metadata", {}).get("namespace") == namespace]


