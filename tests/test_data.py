"""Shared evidence builders and collaborator stubs for the test-suite."""

import json
import struct
import jwt
from eth_account import Account
from eth_account.messages import encode_defunct
from confidential_chat_verifier.errors import TransportError
from confidential_chat_verifier.providers import ServiceProvider
from confidential_chat_verifier.providers.nearai import extract_chat_completion_id
from confidential_chat_verifier.types import ChatCompletion, SignaturePayload
from confidential_chat_verifier.verifiers import sha256sum

SIGNING_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SIGNING_ADDRESS = Account.from_key(SIGNING_KEY).address
OTHER_ADDRESS = "0x" + "12" * 20
THIRD_ADDRESS = "0x" + "ab" * 20

JWT_SECRET = "nras-test-secret-0123456789abcdef"

CHAT_ID = "chatcmpl-4f2a9c"
STREAM_TEXT = (
    'data: {"id":"chatcmpl-4f2a9c","object":"chat.completion.chunk",'
    '"choices":[{"index":0,"delta":{"content":"Hello"}}]}\n\n'
    'data: {"id":"chatcmpl-4f2a9c","object":"chat.completion.chunk",'
    '"choices":[{"index":0,"delta":{"content":" there"}}]}\n\n'
    "data: [DONE]\n\n"
)


def build_quote(size: int = 432) -> bytes:
    """A quote with recognisable values in every decoded field."""
    quote = bytearray(size)
    struct.pack_into("<HH", quote, 0, 3, 2)
    quote[4:8] = bytes.fromhex("aabbccdd")
    struct.pack_into("<HH", quote, 8, 7, 9)
    quote[12:28] = bytes(range(16))
    quote[28:60] = b"\x11" * 32
    if size >= 432:
        body = 48
        quote[body : body + 16] = b"\x01" * 16
        quote[body + 16 : body + 20] = b"\x02\x00\x00\x00"
        quote[body + 32 : body + 48] = b"\x03" * 16
        quote[body + 64 : body + 96] = b"\x04" * 32
        quote[body + 128 : body + 160] = b"\x05" * 32
        quote[body + 160 : body + 224] = b"\x06" * 64
        struct.pack_into("<HHH", quote, body + 256, 1, 2, 3)
        quote[body + 304 : body + 320] = b"\x07" * 16
        quote[body + 320 : body + 384] = b"\x08" * 64
    return bytes(quote)


INTEL_QUOTE_HEX = build_quote().hex()


def make_token(claims: dict) -> str:
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def nras_response(overall_result: bool = True) -> list:
    return [
        ["JWT", make_token({"x-nvidia-overall-att-result": overall_result})],
        {"GPU-0": make_token({"measres": "success", "hwmodel": "GH100"})},
    ]


def sign_text(text: str, key: str = SIGNING_KEY) -> str:
    signed = Account.sign_message(encode_defunct(text=text), private_key=key)
    return "0x" + bytes(signed.signature).hex()


class FakeNrasClient:
    """Answers like NRAS; payloads whose ``label`` contains "down" fail in transport."""

    def __init__(self, overall_result: bool = True):
        self.overall_result = overall_result
        self.payloads = []

    def fetch_gpu_attestation(self, payload: str):
        self.payloads.append(payload)
        if "down" in json.loads(payload).get("label", ""):
            raise TransportError("GPU attestation verification failed: 503", 503)
        return nras_response(self.overall_result)


class FakeCloud(ServiceProvider):
    """In-memory confidential cloud that signs the exchange it served."""

    def __init__(
        self,
        gpu_labels=("gpu",),
        signing_address=SIGNING_ADDRESS,
        siblings=None,
        stream_text=STREAM_TEXT,
        signed_response_text=None,
        report_error=None,
    ):
        self.gpu_labels = gpu_labels
        self.signing_address = signing_address
        self.siblings = siblings or []
        self.stream_text = stream_text
        self.signed_response_text = signed_response_text
        self.report_error = report_error
        self.request_body = None

    def fetch_attestation_report(self, model_id, nonce=None):
        if self.report_error:
            raise self.report_error
        report = {
            "signing_address": self.signing_address,
            "intel_quote": INTEL_QUOTE_HEX,
            "all_attestations": self.siblings,
        }
        for label in self.gpu_labels:
            payload = json.dumps(
                {"nonce": nonce, "label": label, "evidence_list": []},
                separators=(",", ":"),
            )
            if "nvidia_payload" not in report:
                report["nvidia_payload"] = payload
            else:
                report["all_attestations"] = report["all_attestations"] + [
                    {
                        "signing_address": self.signing_address,
                        "intel_quote": INTEL_QUOTE_HEX,
                        "nvidia_payload": payload,
                    }
                ]
        return report

    def fetch_chat_completion(self, request_body):
        self.request_body = request_body
        return ChatCompletion(
            raw_stream_text=self.stream_text,
            chat_id=extract_chat_completion_id(self.stream_text),
        )

    def fetch_signature(self, chat_id, model_id):
        response_text = self.signed_response_text or self.stream_text
        text = f"{sha256sum(self.request_body)}:{sha256sum(response_text)}"
        return SignaturePayload(
            text=text,
            signature=sign_text(text),
            signing_address=SIGNING_ADDRESS,
            signing_algo="ecdsa",
        )

    def list_models(self):
        return ["gpt-oss-120b", "llama-3.3-70b-instruct"]
