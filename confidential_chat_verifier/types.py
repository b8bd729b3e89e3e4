from enum import Enum
from typing import Optional, Dict, Any, List, Union
from pydantic import BaseModel, ConfigDict, Field

DecodedClaimSet = Dict[str, Dict[str, Any]]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())


class QuoteErrorKind(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    TOO_SHORT = "TooShort"
    DECODE_FAILED = "DecodeFailed"


class ReportBody(_Frozen):
    cpu_svn: str
    misc_select: str
    attributes: str
    mr_enclave: str
    mr_signer: str
    config_id: str
    isv_prod_id: int
    isv_svn: int
    config_svn: int
    isv_family_id: str
    report_data: str


class DecodedQuote(_Frozen):
    version: int
    sign_type: int
    epid_group_id: str
    qe_svn: int
    pce_svn: int
    xeid: str
    basename: str
    raw_hex: str
    size_bytes: int
    report_body: Optional[ReportBody] = None


class QuoteDecodeError(_Frozen):
    kind: QuoteErrorKind
    error: str
    raw_hex: Optional[str] = None


class DecodedAttestationReport(_Frozen):
    signing_address: Optional[str] = None
    intel_quote: Union[DecodedQuote, QuoteDecodeError]
    nvidia_payload: Optional[Any] = None
    # The payload string exactly as received, forwarded verbatim to NRAS.
    nvidia_payload_raw: Optional[str] = None
    all_attestations: List["DecodedAttestationReport"] = Field(default_factory=list)
    # A sibling's own nested list, kept as received.
    nested_attestations: List[Any] = Field(default_factory=list)
    # Fields that were present but unusable, with the reason.
    field_errors: Dict[str, str] = Field(default_factory=dict)

    def signing_addresses(self) -> List[str]:
        """Signing addresses of this report and its siblings, without duplicates."""
        addresses = []
        seen = set()
        for report in [self, *self.all_attestations]:
            address = report.signing_address
            if not address or address.lower() in seen:
                continue
            seen.add(address.lower())
            addresses.append(address)
        return addresses

    def nvidia_payloads(self) -> List[Dict[str, Any]]:
        """Every distinct GPU payload in the report, paired with its signing address."""
        payloads = []
        seen = []
        for report in [self, *self.all_attestations]:
            payload = report.nvidia_payload
            if not payload or payload in seen:
                continue
            seen.append(payload)
            payloads.append(
                {
                    "signing_address": report.signing_address,
                    "payload": payload,
                    "raw": report.nvidia_payload_raw,
                }
            )
        return payloads


class ContentHashPair(_Frozen):
    request_hash: str
    response_hash: str


class HashReconciliation(_Frozen):
    valid: bool
    request_match: Optional[bool] = None
    response_match: Optional[bool] = None
    signed_request_hash: Optional[str] = None
    signed_response_hash: Optional[str] = None
    expected_request_hash: Optional[str] = None
    expected_response_hash: Optional[str] = None
    signature_text: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class SignatureVerdict(_Frozen):
    valid: bool
    recovered_address: Optional[str] = None
    matched_address: Optional[str] = None
    expected_addresses: List[str]
    message: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class CheckStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class GpuAttestationResult(_Frozen):
    signing_address: Optional[str] = None
    valid: bool
    overall_result: Optional[bool] = None
    nonce_match: Optional[bool] = None
    claims: DecodedClaimSet = Field(default_factory=dict)
    error: Optional[str] = None
    error_kind: Optional[str] = None


class GpuCheck(_Frozen):
    status: CheckStatus
    results: List[GpuAttestationResult] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status != CheckStatus.FAILED


class ChatCompletion(_Frozen):
    raw_stream_text: str
    chat_id: Optional[str] = None


class SignaturePayload(_Frozen):
    model_config = ConfigDict(frozen=True, extra="ignore")

    text: str
    signature: str
    signing_address: Optional[str] = None
    signing_algo: Optional[str] = None


class VerificationStage(str, Enum):
    INIT = "Init"
    REPORT_FETCHED = "ReportFetched"
    REPORT_DECODED = "ReportDecoded"
    COPROCESSOR_VERIFIED = "CoprocessorVerified"
    COPROCESSOR_SKIPPED = "CoprocessorSkipped"
    CHAT_SENT = "ChatSent"
    HASHES_COMPUTED = "HashesComputed"
    SIGNATURE_FETCHED = "SignatureFetched"
    HASHES_RECONCILED = "HashesReconciled"
    SIGNATURE_VERIFIED = "SignatureVerified"
    DONE = "Done"


class VerificationResult(_Frozen):
    model_id: str
    chat_id: Optional[str] = None
    request_nonce: Optional[str] = None
    request_body: str
    hashes: ContentHashPair
    gpu: GpuCheck
    hash_validation: HashReconciliation
    signature_validation: SignatureVerdict
    signature_payload: SignaturePayload
    stages: List[VerificationStage]
    notes: List[str] = Field(default_factory=list)
    valid: bool
    timestamp: float
