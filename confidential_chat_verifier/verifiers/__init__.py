from .base import Verifier
from .quote import decode_intel_quote
from .nvidia import NvidiaGpuVerifier, decode_nvidia_attestation
from .report import decode_attestation_report
from .hashing import sha256sum, hash_exchange, compare_hashes
from .signature import recover_signer, verify_signature

# Evidence decoders (pure, never raise on bad evidence)
# - decode_intel_quote: hex Intel quote -> header + report body fields
# - decode_nvidia_attestation: NRAS token list -> claim set per key
# - decode_attestation_report: raw report -> quote, GPU payload, siblings

# Integrity checks
# - compare_hashes: signed "request:response" text vs locally computed hashes
# - verify_signature: recovered signer vs trusted signing addresses
# - NvidiaGpuVerifier: GPU payload -> NRAS verdict

__all__ = [
    "Verifier",
    "NvidiaGpuVerifier",
    "decode_intel_quote",
    "decode_nvidia_attestation",
    "decode_attestation_report",
    "sha256sum",
    "hash_exchange",
    "compare_hashes",
    "recover_signer",
    "verify_signature",
]
