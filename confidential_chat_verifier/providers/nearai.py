import json
import logging
from typing import Any, Dict, List, Optional
import requests
from pydantic import ValidationError
from .base import ServiceProvider
from ..config import VerifierConfig
from ..errors import TransportError
from ..types import ChatCompletion, SignaturePayload

logger = logging.getLogger(__name__)


def extract_chat_completion_id(response_text: str) -> Optional[str]:
    """Return the ``id`` of the first ``data: {`` event in an SSE stream."""
    first_data_line = next(
        (line for line in response_text.split("\n") if line.startswith("data: {")),
        None,
    )
    if first_data_line is None:
        return None
    try:
        chat_id = json.loads(first_data_line[len("data: ") :]).get("id")
    except (ValueError, AttributeError):
        return None
    return chat_id if isinstance(chat_id, str) and chat_id else None


class NearaiCloudClient(ServiceProvider):
    def __init__(self, config: Optional[VerifierConfig] = None):
        self.config = config or VerifierConfig()
        self.api_base = self.config.api_base.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        if not response.ok:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON from {response.url}: {e}", url=response.url
            ) from e

    def fetch_attestation_report(
        self, model_id: str, nonce: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {"model": model_id, "signing_algo": self.config.signing_algo}
        if nonce:
            params["nonce"] = nonce
            logger.info(
                f"[Near] Fetching report for {model_id} with nonce {nonce[:8]}..."
            )
        else:
            logger.info(f"[Near] Fetching report for {model_id}")

        url = f"{self.api_base}/attestation/report"
        response = self._request("GET", url, params=params, headers=self._headers())
        data = self._json(response)
        if not isinstance(data, dict):
            raise TransportError("Attestation report is not a JSON object", url=url)
        return data

    def fetch_chat_completion(self, request_body: str) -> ChatCompletion:
        url = f"{self.api_base}/chat/completions"
        logger.info(f"[Near] Sending chat completion request to {url}")
        headers = {**self._headers(), "Content-Type": "application/json"}
        # The body is hashed by the caller, so send exactly these bytes.
        response = self._request(
            "POST", url, data=request_body.encode("utf-8"), headers=headers
        )
        response_text = response.content.decode("utf-8")
        return ChatCompletion(
            raw_stream_text=response_text,
            chat_id=extract_chat_completion_id(response_text),
        )

    def fetch_signature(self, chat_id: str, model_id: str) -> SignaturePayload:
        url = f"{self.api_base}/signature/{chat_id}"
        params = {"model": model_id, "signing_algo": self.config.signing_algo}
        logger.info(f"[Near] Fetching signature for chat {chat_id}")
        response = self._request("GET", url, params=params, headers=self._headers())
        data = self._json(response)
        try:
            return SignaturePayload.model_validate(data)
        except ValidationError as e:
            raise TransportError(f"Malformed signature response: {e}", url=url) from e

    def list_models(self) -> List[str]:
        url = f"{self.api_base}/model/list"
        logger.info(f"[Near] Fetching models from {url}")
        data = self._json(self._request("GET", url, headers=self._headers()))

        models = data if isinstance(data, list) else data.get("models", [])
        return [m if isinstance(m, str) else m.get("modelId") for m in models]
