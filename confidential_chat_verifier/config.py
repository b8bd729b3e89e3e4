import os
from typing import Optional, Dict, Any
import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict

NEARAI_API_BASE = "https://cloud-api.near.ai/v1"
NRAS_URL = "https://nras.attestation.nvidia.com/v3/attest/gpu"

# Environment variable -> config field
ENV_KEYS = {
    "NEARAI_CLOUD_API_KEY": "api_key",
    "NEARAI_CLOUD_API_BASE": "api_base",
    "NVIDIA_NRAS_URL": "nras_url",
    "VERIFIER_TIMEOUT": "timeout",
    "VERIFIER_DEFAULT_MODEL": "default_model",
}


class VerifierConfig(BaseModel):
    """Settings handed to the HTTP collaborators.

    The verification core never reads the environment itself; outer layers
    build one of these (usually through ``from_env``) and pass it in.
    """

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    api_base: str = NEARAI_API_BASE
    nras_url: str = NRAS_URL
    timeout: float = 30.0
    signing_algo: str = "ecdsa"
    default_model: str = "gpt-oss-120b"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "VerifierConfig":
        """Build a config from a ``.env`` file overlaid by the process environment."""
        values: Dict[str, Any] = {}
        for source in (dotenv_values(env_file), os.environ):
            for env_key, field in ENV_KEYS.items():
                value = source.get(env_key)
                if value:
                    values[field] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: str) -> "VerifierConfig":
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls(**data)
