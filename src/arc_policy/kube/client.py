"""
Kubernetes Client

HTTP client for reading ARC RunnerScaleSet custom resources from the
Kubernetes API server. Resources are returned as plain JSON-decoded dicts
for the policy engine to evaluate.
"""

import logging
import ssl
from typing import Any, Dict, List, Optional

import httpx

from arc_policy.config import PolicySettings, settings as default_settings


logger = logging.getLogger(__name__)


ARC_GROUP = "actions.sumologic.com"
ARC_VERSION = "v1alpha1"
ARC_PLURAL = "runnerscalesets"


class ResourceFetchError(Exception):
    """A resource could not be fetched from the API server."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RunnerScaleSetClient:
    """
    Client for RunnerScaleSet custom resources.

    Uses the API server's REST paths directly:
    /apis/{group}/{version}[/namespaces/{ns}]/runnerscalesets[/{name}]
    """

    def __init__(
        self,
        api_server: str,
        token: Optional[str] = None,
        verify: Any = True,
        timeout: float = 10.0,
        cluster_name: str = "Unknown",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_server: Base URL of the Kubernetes API server
            token: Bearer token (service account or user token)
            verify: TLS verification flag or SSL context
            timeout: Per-request timeout in seconds
            cluster_name: Name reported in compliance reports
            transport: Custom httpx transport (e.g. httpx.MockTransport)
        """
        self.api_server = api_server.rstrip("/")
        self.cluster_name = cluster_name
        self.timeout = timeout

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=self.api_server,
            headers=headers,
            verify=verify,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Optional[PolicySettings] = None) -> "RunnerScaleSetClient":
        """Build a client from PolicySettings."""
        settings = settings or default_settings
        return cls(
            api_server=settings.kube_api_server,
            token=settings.kube_token,
            verify=(
                ssl.create_default_context(cafile=settings.kube_ca_cert)
                if settings.kube_ca_cert
                else settings.kube_verify_tls
            ),
            timeout=settings.request_timeout,
            cluster_name=settings.cluster_name,
        )

    def close(self) -> None:
        self._client.close()

    def _collection_path(self, namespace: Optional[str] = None) -> str:
        if namespace:
            return f"/apis/{ARC_GROUP}/{ARC_VERSION}/namespaces/{namespace}/{ARC_PLURAL}"
        return f"/apis/{ARC_GROUP}/{ARC_VERSION}/{ARC_PLURAL}"

    def _get_json(self, path: str) -> Dict[str, Any]:
        try:
            response = self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to fetch {path}: {e}")
            raise ResourceFetchError(
                f"Kubernetes API error {e.response.status_code} for {path}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {path}: {e}")
            raise ResourceFetchError(f"Kubernetes API request failed for {path}: {e}") from e

    def get_runner_scale_set(self, namespace: str, name: str) -> Dict[str, Any]:
        """
        Fetch one RunnerScaleSet.

        Raises:
            ResourceFetchError: If the resource cannot be fetched (404 included)
        """
        resource = self._get_json(f"{self._collection_path(namespace)}/{name}")
        logger.info(f"Fetched RunnerScaleSet: {namespace}/{name}")
        return resource

    def list_runner_scale_sets(self, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List RunnerScaleSets in a namespace, or cluster-wide when namespace is None.

        Raises:
            ResourceFetchError: If the list request fails
        """
        body = self._get_json(self._collection_path(namespace))
        items = body.get("items") or []
        logger.info(f"Listed {len(items)} RunnerScaleSet(s) in {namespace or 'all namespaces'}")
        return items
