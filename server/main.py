import logging
from typing import Any, Dict, List, Optional, Union
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from confidential_chat_verifier.config import VerifierConfig
from confidential_chat_verifier.errors import TransportError, VerificationError
from confidential_chat_verifier.sdk import ChatVerifier
from confidential_chat_verifier.verifiers import (
    compare_hashes,
    decode_attestation_report,
    decode_intel_quote,
    verify_signature,
)

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Confidential Chat Verifier API")
verifier = ChatVerifier(config=VerifierConfig.from_env())


class ChatRequest(BaseModel):
    content: str
    model_id: Optional[str] = None


class SignatureRequest(BaseModel):
    message: str
    signature: str
    expected_addresses: Union[str, List[str]]


class HashRequest(BaseModel):
    signature_text: str
    expected_request_hash: str
    expected_response_hash: str


class QuoteRequest(BaseModel):
    hex: str


@app.get("/models")
async def list_models():
    try:
        return await verifier.list_models()
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/report")
async def fetch_report(model_id: str, nonce: Optional[str] = None):
    try:
        return await verifier.fetch_report(model_id, nonce)
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/decode-report")
def decode_report(report: Dict[str, Any]):
    return decode_attestation_report(report)


@app.post("/decode-quote")
def decode_quote(request: QuoteRequest):
    return decode_intel_quote(request.hex)


@app.post("/verify-chat")
async def verify_chat(request: ChatRequest):
    try:
        return await verifier.verify_chat(request.content, request.model_id)
    except (TransportError, VerificationError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/verify-signature")
def check_signature(request: SignatureRequest):
    return verify_signature(
        request.message, request.signature, request.expected_addresses
    )


@app.post("/compare-hashes")
def check_hashes(request: HashRequest):
    return compare_hashes(
        request.signature_text,
        request.expected_request_hash,
        request.expected_response_hash,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
