"""
Configuration settings for the deployment canceller.
"""
import os
from string import Template
from typing import Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


TRUTHY = {"true", "yes", "1", "on"}


class Settings(BaseSettings):
    """Action settings from environment variables (prefix ``OPENSHIFT_``)."""

    # Action
    API_URL: str = Field(default="", description="Cluster API endpoint; blank uses the current oc context")
    DEP_CFG: str = Field(default="frontend", description="Deployment config name")
    NAMESPACE: str = Field(default="", description="Project / namespace")
    AUTH_TOKEN: str = Field(default="", description="Bearer token")
    VERBOSE: str = Field(default="false", description="Print progress lines: true|false")

    # Transport
    TRANSPORT: str = Field(default="auto", description="Client transport: auto|rest|cli")
    OC_BINARY: str = Field(default="oc", description="oc executable used by the cli transport")
    VERIFY_TLS: bool = Field(default=True, description="Verify the API server certificate")
    CA_CERT: Optional[str] = Field(default=None, description="CA bundle for the API server")
    REQUEST_TIMEOUT_SECS: int = Field(default=30, description="Request timeout")

    # Service
    LOG_LEVEL: str = Field(default="info", description="Log level: info|debug|warning")

    model_config = SettingsConfigDict(
        env_prefix="OPENSHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def verbose(self) -> bool:
        return parse_bool(self.VERBOSE)


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """Build a fresh Settings instance; explicit overrides win over the environment."""
    values = {key: value for key, value in overrides.items() if value is not None}
    if env_file is not None:
        return Settings(_env_file=env_file, **values)
    return Settings(**values)


def parse_bool(value) -> bool:
    """Lenient boolean parsing; anything unrecognised is False."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


def expand_env(value: Optional[str], env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Expand ``$VAR`` and ``${VAR}`` references against a build environment.

    Unknown variables are left untouched.
    """
    if not value or "$" not in value:
        return value
    env = os.environ if env is None else env
    return Template(value).safe_substitute(env)
