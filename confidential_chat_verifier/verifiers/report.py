import json
import logging
from typing import Any, Dict, Mapping
from ..errors import InvalidFormatError
from ..types import DecodedAttestationReport
from .quote import decode_intel_quote

logger = logging.getLogger(__name__)


def _decode_nvidia_payload(payload: Any, label: str) -> Any:
    if not payload:
        return None
    if not isinstance(payload, str):
        return payload
    try:
        return json.loads(payload)
    except ValueError as e:
        logger.warning(f"Failed to parse nvidia_payload for {label}: {e}")
        return {"error": str(e), "raw": payload}


def _decode_single(attestation: Mapping[str, Any], label: str) -> Dict[str, Any]:
    field_errors = {}
    signing_address = attestation.get("signing_address")
    if signing_address is not None and not isinstance(signing_address, str):
        error = f"Expected a string, got {type(signing_address).__name__}"
        logger.warning(f"Invalid signing_address for {label}: {error}")
        field_errors["signing_address"] = error
        signing_address = None

    raw_payload = attestation.get("nvidia_payload")
    if not isinstance(raw_payload, str) or not raw_payload:
        raw_payload = None
    return {
        "signing_address": signing_address,
        "intel_quote": decode_intel_quote(attestation.get("intel_quote")),
        "nvidia_payload": _decode_nvidia_payload(
            attestation.get("nvidia_payload"), label
        ),
        "nvidia_payload_raw": raw_payload,
        "field_errors": field_errors,
    }


def decode_attestation_report(
    attestation_report: Mapping[str, Any],
) -> DecodedAttestationReport:
    """Decode a raw attestation report and its ``all_attestations`` siblings.

    Siblings are decoded one level deep. Should a sibling carry its own
    ``all_attestations`` list, that list is kept as-is in
    ``nested_attestations``.
    """
    if not isinstance(attestation_report, Mapping):
        raise InvalidFormatError("Attestation report must be a JSON object")

    siblings = []
    for index, attestation in enumerate(
        attestation_report.get("all_attestations") or []
    ):
        if not isinstance(attestation, Mapping):
            logger.warning(f"Skipping attestation {index}: not a JSON object")
            continue
        nested = attestation.get("all_attestations") or []
        if not isinstance(nested, list):
            nested = [nested]
        siblings.append(
            DecodedAttestationReport(
                **_decode_single(attestation, f"attestation {index}"),
                nested_attestations=nested,
            )
        )

    return DecodedAttestationReport(
        **_decode_single(attestation_report, "report"),
        all_attestations=siblings,
    )
