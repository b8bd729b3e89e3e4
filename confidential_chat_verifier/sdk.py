import asyncio
import json
import logging
import secrets
import time
from typing import List, Optional
from .config import VerifierConfig
from .errors import VerificationError
from .providers import NearaiCloudClient, NrasClient, ServiceProvider
from .types import (
    CheckStatus,
    DecodedAttestationReport,
    GpuCheck,
    VerificationResult,
    VerificationStage,
)
from .verifiers import (
    NvidiaGpuVerifier,
    compare_hashes,
    decode_attestation_report,
    hash_exchange,
    verify_signature,
)

logger = logging.getLogger(__name__)

NO_GPU_PAYLOAD_NOTE = "No NVIDIA payload found in attestation report"


def build_chat_request_body(content: str, model_id: str) -> str:
    """Serialize a single-message streaming chat request.

    The returned string is both what gets sent and what gets hashed.
    """
    body = {
        "messages": [{"content": content, "role": "user"}],
        "stream": True,
        "model": model_id,
    }
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


class ChatVerifier:
    """Proves a chat completion came, unaltered, from an attested TEE.

    Each call to ``verify_chat`` is independent; the verifier holds only its
    collaborators and no per-request state.
    """

    def __init__(
        self,
        client: Optional[ServiceProvider] = None,
        nvidia_verifier: Optional[NvidiaGpuVerifier] = None,
        config: Optional[VerifierConfig] = None,
    ):
        self.config = config or VerifierConfig()
        self.client = client or NearaiCloudClient(self.config)
        self.nvidia_verifier = nvidia_verifier or NvidiaGpuVerifier(
            NrasClient(self.config)
        )

    async def fetch_report(
        self, model_id: str, nonce: Optional[str] = None
    ) -> DecodedAttestationReport:
        raw = await asyncio.to_thread(
            self.client.fetch_attestation_report, model_id, nonce
        )
        return decode_attestation_report(raw)

    async def verify_gpu(
        self,
        report: DecodedAttestationReport,
        request_nonce: Optional[str] = None,
    ) -> GpuCheck:
        """Verify every GPU payload in the report concurrently; all must pass."""
        payloads = report.nvidia_payloads()
        if not payloads:
            return GpuCheck(status=CheckStatus.SKIPPED)

        results = await asyncio.gather(
            *[
                self.nvidia_verifier.verify(
                    entry["payload"],
                    request_nonce=request_nonce,
                    signing_address=entry["signing_address"],
                    raw_payload=entry.get("raw"),
                )
                for entry in payloads
            ]
        )
        for result in results:
            if not result.valid:
                logger.warning(
                    f"GPU attestation failed for {result.signing_address}: {result.error}"
                )

        status = (
            CheckStatus.PASSED
            if all(r.valid for r in results)
            else CheckStatus.FAILED
        )
        return GpuCheck(status=status, results=list(results))

    async def verify_chat(
        self, content: str, model_id: Optional[str] = None
    ) -> VerificationResult:
        model_id = model_id or self.config.default_model
        stages: List[VerificationStage] = [VerificationStage.INIT]
        notes: List[str] = []

        def advance(stage: VerificationStage):
            stages.append(stage)
            logger.info(f"[{model_id}] {stage.value}")

        # 1. Attestation report
        request_nonce = secrets.token_hex(32)
        raw_report = await asyncio.to_thread(
            self.client.fetch_attestation_report, model_id, request_nonce
        )
        advance(VerificationStage.REPORT_FETCHED)

        report = decode_attestation_report(raw_report)
        advance(VerificationStage.REPORT_DECODED)
        signing_addresses = report.signing_addresses()

        # 2. GPU attestation
        gpu = await self.verify_gpu(report, request_nonce)
        if gpu.status == CheckStatus.SKIPPED:
            logger.warning(NO_GPU_PAYLOAD_NOTE)
            notes.append(NO_GPU_PAYLOAD_NOTE)
            advance(VerificationStage.COPROCESSOR_SKIPPED)
        else:
            advance(VerificationStage.COPROCESSOR_VERIFIED)

        # 3. Chat exchange
        request_body = build_chat_request_body(content, model_id)
        completion = await asyncio.to_thread(
            self.client.fetch_chat_completion, request_body
        )
        advance(VerificationStage.CHAT_SENT)
        if not completion.chat_id:
            raise VerificationError("Chat completion stream did not include an id")

        hashes = hash_exchange(request_body, completion.raw_stream_text)
        advance(VerificationStage.HASHES_COMPUTED)

        # 4. Signature over "request_hash:response_hash"
        signature_payload = await asyncio.to_thread(
            self.client.fetch_signature, completion.chat_id, model_id
        )
        advance(VerificationStage.SIGNATURE_FETCHED)

        hash_validation = compare_hashes(
            signature_payload.text, hashes.request_hash, hashes.response_hash
        )
        advance(VerificationStage.HASHES_RECONCILED)

        signature_validation = verify_signature(
            signature_payload.text, signature_payload.signature, signing_addresses
        )
        advance(VerificationStage.SIGNATURE_VERIFIED)

        if (
            signature_payload.signing_address
            and signature_validation.valid
            and signature_payload.signing_address.lower()
            != signature_validation.recovered_address.lower()
        ):
            notes.append(
                f"Signature response names {signature_payload.signing_address} "
                f"but was signed by {signature_validation.recovered_address}"
            )

        valid = gpu.passed and hash_validation.valid and signature_validation.valid
        advance(VerificationStage.DONE)

        return VerificationResult(
            model_id=model_id,
            chat_id=completion.chat_id,
            request_nonce=request_nonce,
            request_body=request_body,
            hashes=hashes,
            gpu=gpu,
            hash_validation=hash_validation,
            signature_validation=signature_validation,
            signature_payload=signature_payload,
            stages=stages,
            notes=notes,
            valid=valid,
            timestamp=time.time(),
        )

    async def list_models(self) -> List[str]:
        return await asyncio.to_thread(self.client.list_models)
