"""Configuration loader for the URL unshortener."""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SERVICE_ENDPOINTS = [
    "http://therealurl.appspot.com?format=json&url=",
    "http://api.longurl.org/v2/expand?format=json&url=",
    "http://untiny.me/api/1.0/extract/?format=json&url=",
    "http://www.longurlplease.com/api/v1.1?q=",
    "http://json-longurl.appspot.com/?url=",
    "http://api.unshort.me/?t=json&r=",
]


class ProbeConfig(BaseModel):
    """Settings for single-hop HTTP probes."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default="unshortener/0.1 (+https://pypi.org/project/unshortener/)")
    max_hops: int = Field(default=20, ge=1)


class VerificationConfig(BaseModel):
    """Third-party services queried for a second opinion."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True)
    service_endpoints: list[str] = Field(default_factory=lambda: list(DEFAULT_SERVICE_ENDPOINTS))
    sample_size: int = Field(default=2, ge=2)
    timeout_seconds: float = Field(default=10.0, gt=0)


class RetryPolicy(BaseModel):
    """Retry configuration for transient failures of the first probe."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=2, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)


class Config(BaseModel):
    """Full unshortener configuration."""

    model_config = ConfigDict(frozen=True)

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    deadline_seconds: Optional[float] = Field(default=None, gt=0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load config from dictionary."""
        return cls(**data)

    def with_verification(self, enabled: bool) -> "Config":
        """Copy of this config with external verification switched on or off."""
        verification = self.verification.model_copy(update={"enabled": enabled})
        return self.model_copy(update={"verification": verification})


def load_config(path: str | Path) -> Config:
    """Load configuration from file (YAML or JSON)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        content = f.read()

    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(content) or {}
    else:
        data = json.loads(content)

    return Config.from_dict(data)
