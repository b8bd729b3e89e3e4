from .types import (
    DecodedQuote,
    QuoteDecodeError,
    DecodedAttestationReport,
    HashReconciliation,
    SignatureVerdict,
    GpuCheck,
    VerificationStage,
    VerificationResult,
)
from .errors import VerifierError, TransportError, InvalidFormatError, VerificationError
from .config import VerifierConfig
from .sdk import ChatVerifier, build_chat_request_body
from .providers import NearaiCloudClient, NrasClient
from .verifiers import (
    NvidiaGpuVerifier,
    decode_intel_quote,
    decode_nvidia_attestation,
    decode_attestation_report,
    sha256sum,
    compare_hashes,
    verify_signature,
)

__all__ = [
    "DecodedQuote",
    "QuoteDecodeError",
    "DecodedAttestationReport",
    "HashReconciliation",
    "SignatureVerdict",
    "GpuCheck",
    "VerificationStage",
    "VerificationResult",
    "VerifierError",
    "TransportError",
    "InvalidFormatError",
    "VerificationError",
    "VerifierConfig",
    "ChatVerifier",
    "build_chat_request_body",
    "NearaiCloudClient",
    "NrasClient",
    "NvidiaGpuVerifier",
    "decode_intel_quote",
    "decode_nvidia_attestation",
    "decode_attestation_report",
    "sha256sum",
    "compare_hashes",
    "verify_signature",
]
