from typing import Any, Dict, List, Optional
from ..types import ChatCompletion, SignaturePayload


class ServiceProvider:
    """Confidential-cloud endpoints the chat verifier depends on."""

    def fetch_attestation_report(
        self, model_id: str, nonce: Optional[str] = None
    ) -> Dict[str, Any]:
        raise NotImplementedError

    def fetch_chat_completion(self, request_body: str) -> ChatCompletion:
        raise NotImplementedError

    def fetch_signature(self, chat_id: str, model_id: str) -> SignaturePayload:
        raise NotImplementedError

    def list_models(self) -> List[str]:
        raise NotImplementedError
