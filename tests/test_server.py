"""Tests for the ARC Policy REST API."""

import pytest
from fastapi.testclient import TestClient

from arc_policy.kube import ResourceFetchError
from arc_policy.policy import ArcPolicyEngine
from arc_policy.server import app, get_engine

from helpers import FakeRunnerScaleSetClient, make_runner_scale_set


@pytest.fixture
def fake_client():
    privileged = make_runner_scale_set("privileged", "team-a")
    privileged["spec"]["template"]["spec"]["containers"][0]["securityContext"] = {"privileged": True}
    return FakeRunnerScaleSetClient(
        resources=[make_runner_scale_set("alpha", "team-a"), privileged],
        cluster_name="prod-us",
    )


@pytest.fixture
def client(fake_client):
    app.dependency_overrides[get_engine] = lambda: ArcPolicyEngine(client=fake_client)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestPolicyServiceEndpoints:
    """Read-only endpoints."""

    def test_health_check(self, client):
        """Test root health check endpoint."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["service"] == "ARC Policy Service"
        assert data["status"] == "running"
        assert data["rules"] == 11

    def test_list_rules(self, client):
        """Rules are listed with camelCase keys."""
        response = client.get("/rules")
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 11
        assert data[0]["id"] == "arc-sec-001"
        assert data[0]["actions"][0]["autoFix"] is True
        assert data[0]["actions"][0]["fixAction"] == "add_runner_security_context"

    def test_list_rules_by_category(self, client):
        """Category filter."""
        response = client.get("/rules", params={"category": "compliance"})
        assert [rule["id"] for rule in response.json()] == ["arc-comp-001", "arc-comp-002"]

    def test_validate_configuration(self, client):
        """Validation results are returned, never raised."""
        response = client.post("/configuration/validate", json={"global": {"enforcement": "strict"}})
        assert response.status_code == 200

        data = response.json()
        assert data["isValid"] is False
        assert "organization.name is required" in data["errors"]

    def test_validate_non_object(self, client):
        """A JSON array is reported as an invalid root."""
        response = client.post("/configuration/validate", json=["x"])
        assert response.json()["errors"] == ["Configuration root must be an object"]


class TestEvaluationEndpoints:
    """Evaluation endpoints."""

    def test_evaluate_posted_resource(self, client):
        """Posted resources are evaluated with the runnerscaleset scope by default."""
        resource = make_runner_scale_set()
        resource["spec"]["maxReplicas"] = 100

        response = client.post("/evaluate", json=resource)
        assert response.status_code == 200

        data = response.json()
        assert data["passed"] is True
        assert data["summary"]["totalRules"] == 11
        assert data["summary"]["failedRules"] == 1
        warning = data["warnings"][0]
        assert warning["ruleId"] == "arc-scale-001"
        assert warning["currentValue"] == 100
        assert warning["suggestedValue"] == 50
        assert warning["resource"] == {
            "kind": "RunnerScaleSet",
            "name": "build-runners",
            "namespace": "arc-runners",
        }

    def test_evaluate_other_scope(self, client):
        """resource_type selects the rule scope."""
        response = client.post("/evaluate", params={"resource_type": "cluster"}, json={})
        assert response.json()["summary"]["totalRules"] == 0

    def test_evaluate_runner_scale_set(self, client):
        """Live evaluation of a RunnerScaleSet."""
        response = client.get("/runnerscalesets/team-a/privileged/evaluation")
        assert response.status_code == 200

        data = response.json()
        assert data["passed"] is False
        assert data["violations"][0]["ruleId"] == "arc-sec-002"

    def test_evaluate_missing_runner_scale_set(self, client):
        """Missing resources map to 404."""
        response = client.get("/runnerscalesets/team-a/missing/evaluation")
        assert response.status_code == 404

    def test_compliance_report(self, client):
        """Namespace compliance report."""
        response = client.get("/compliance", params={"namespace": "team-a"})
        assert response.status_code == 200

        data = response.json()
        assert data["cluster"] == "prod-us"
        assert data["namespace"] == "team-a"
        assert data["overallCompliance"] == 95.45
        assert data["recommendations"][0].startswith("🔒 Security:")

    def test_compliance_report_upstream_failure(self):
        """API server failures map to 502."""
        broken = FakeRunnerScaleSetClient(error=ResourceFetchError("connection refused"))
        app.dependency_overrides[get_engine] = lambda: ArcPolicyEngine(client=broken)
        try:
            response = TestClient(app).get("/compliance")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502
        assert "connection refused" in response.json()["detail"]
