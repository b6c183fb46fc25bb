"""Policy service configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class PolicySettings(BaseSettings):
    """Settings for the ARC policy engine and its HTTP service."""

    model_config = SettingsConfigDict(
        env_prefix="ARC_POLICY_",
        env_file=".env",
        extra="ignore",  # Ignore extra fields from .env
    )

    # Service settings
    host: str = "127.0.0.1"
    port: int = 8002

    # Policy configuration (JSON); defaults only when unset
    config_path: Optional[str] = None

    # Kubernetes API access
    kube_api_server: str = "https://kubernetes.default.svc"
    kube_token: Optional[str] = None
    kube_ca_cert: Optional[str] = None
    kube_verify_tls: bool = True
    cluster_name: str = "Unknown"
    request_timeout: float = 10.0


settings = PolicySettings()
