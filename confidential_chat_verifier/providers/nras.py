import logging
from typing import Any, Optional
import requests
from ..config import VerifierConfig
from ..errors import TransportError

logger = logging.getLogger(__name__)


class NrasClient:
    """Client for the NVIDIA Remote Attestation Service GPU endpoint."""

    def __init__(self, config: Optional[VerifierConfig] = None):
        self.config = config or VerifierConfig()

    def fetch_gpu_attestation(self, payload: str) -> Any:
        url = self.config.nras_url
        logger.info(f"Submitting GPU evidence to {url}")
        try:
            response = requests.post(
                url,
                data=payload.encode("utf-8"),
                headers={
                    "accept": "application/json",
                    "content-type": "application/json",
                },
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"NRAS request failed: {e}", url=url) from e

        if not response.ok:
            raise TransportError(
                f"GPU attestation verification failed: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"NRAS returned invalid JSON: {e}", url=url) from e
