import asyncio
import json
import logging
from typing import Any, Dict, Optional
import jwt
from ..errors import InvalidFormatError, TransportError
from ..providers.nras import NrasClient
from ..types import DecodedClaimSet, GpuAttestationResult
from .base import Verifier

logger = logging.getLogger(__name__)

PLATFORM_TOKEN_KEY = "JWT"
OVERALL_RESULT_CLAIM = "x-nvidia-overall-att-result"


def _decode_jwt(token: str) -> Dict[str, Any]:
    # NRAS tokens arrive over TLS from the attestation service itself;
    # only the claims are read here.
    return jwt.decode(
        token,
        options={"verify_signature": False},
        algorithms=["ES384", "ES256", "RS256", "PS256"],
    )


def decode_nvidia_attestation(response: Any) -> DecodedClaimSet:
    """Decode the claim tokens of an NRAS response.

    NRAS answers with a list mixing ``["JWT", "<token>"]`` pairs and
    ``{"GPU-0": "<token>", ...}`` mappings. Each token is decoded on its own;
    a token that fails to decode is recorded as ``{"error": <message>}``
    under its key and the remaining tokens are still decoded.
    """
    if not isinstance(response, list):
        raise InvalidFormatError(
            "Expected array response from NVIDIA attestation service"
        )

    claims: DecodedClaimSet = {}

    def decode_token(key: str, token: Any):
        if not isinstance(token, str) or "." not in token:
            return
        try:
            claims[key] = _decode_jwt(token)
        except Exception as e:
            logger.warning(f"Failed to decode {key} token: {e}")
            claims[key] = {"error": str(e)}

    for item in response:
        if isinstance(item, list):
            if len(item) == 2:
                decode_token(item[0], item[1])
        elif isinstance(item, dict):
            for key, token in item.items():
                decode_token(key, token)

    return claims


class NvidiaGpuVerifier(Verifier):
    def __init__(self, client: Optional[NrasClient] = None):
        self.client = client or NrasClient()

    async def verify(
        self,
        payload: Any,
        request_nonce: Optional[str] = None,
        signing_address: Optional[str] = None,
        raw_payload: Optional[str] = None,
    ) -> GpuAttestationResult:
        """Submit one GPU evidence payload to NRAS and read back its verdict.

        When the payload arrived as a JSON string, pass that string as
        ``raw_payload`` so NRAS receives the evidence byte for byte.
        """
        if isinstance(payload, dict) and "error" in payload and "raw" in payload:
            return GpuAttestationResult(
                signing_address=signing_address,
                valid=False,
                error=f"Unparseable nvidia_payload: {payload['error']}",
                error_kind="DecodeError",
            )

        nonce_match = None
        gpu_nonce = payload.get("nonce") if isinstance(payload, dict) else None
        if request_nonce and isinstance(gpu_nonce, str):
            nonce_match = request_nonce.lower() == gpu_nonce.lower()

        try:
            if raw_payload:
                body = raw_payload
            elif isinstance(payload, str):
                body = payload
            else:
                body = json.dumps(payload)
            response = await asyncio.to_thread(self.client.fetch_gpu_attestation, body)
        except TransportError as e:
            logger.error(f"NRAS request failed for {signing_address}: {e}")
            return GpuAttestationResult(
                signing_address=signing_address,
                valid=False,
                nonce_match=nonce_match,
                error=str(e),
                error_kind="TransportError",
            )

        try:
            claims = decode_nvidia_attestation(response)
        except InvalidFormatError as e:
            return GpuAttestationResult(
                signing_address=signing_address,
                valid=False,
                nonce_match=nonce_match,
                error=str(e),
                error_kind="DecodeError",
            )

        overall_result = claims.get(PLATFORM_TOKEN_KEY, {}).get(OVERALL_RESULT_CLAIM)
        if not isinstance(overall_result, bool):
            overall_result = None
        errors = []
        if overall_result is not True:
            errors.append("Nvidia attestation result is not true")
        if nonce_match is False:
            errors.append(
                f"GPU nonce mismatch: expected {request_nonce}, got {gpu_nonce}"
            )

        return GpuAttestationResult(
            signing_address=signing_address,
            valid=not errors,
            overall_result=overall_result,
            nonce_match=nonce_match,
            claims=claims,
            error="; ".join(errors) if errors else None,
        )
