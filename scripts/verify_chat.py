import argparse
import asyncio
import logging
import sys
from confidential_chat_verifier.config import VerifierConfig
from confidential_chat_verifier.errors import VerifierError
from confidential_chat_verifier.sdk import ChatVerifier
from confidential_chat_verifier.types import CheckStatus, VerificationResult


def mark(ok: bool) -> str:
    return "✅" if ok else "❌"


def render(result: VerificationResult):
    print("\n1) Attestation report")
    print("--------------------------------")
    print(f"   AI Model:              {result.model_id}")
    print(f"   Request nonce:         {result.request_nonce}")
    for address in result.signature_validation.expected_addresses:
        print(f"   TEE signing address:   {address}")

    print("\n2) NVIDIA GPU attestation")
    print("--------------------------------")
    if result.gpu.status == CheckStatus.SKIPPED:
        print("   ⚠️  No NVIDIA payload found in attestation report")
    for gpu in result.gpu.results:
        print(f"   {gpu.signing_address}: {mark(gpu.valid)} overall={gpu.overall_result}")
        if gpu.error:
            print(f"      {gpu.error}")

    print("\n3) Chat message")
    print("--------------------------------")
    print(f"   Returned Chat ID: {result.chat_id}")

    hashes = result.hash_validation
    print("\n   🔎 Checking if hash values match:")
    if hashes.error:
        print(f"     {mark(False)} {hashes.error}")
    else:
        print(f"     → REQUEST HASH {mark(hashes.request_match)}")
        print(f"       Signed:   {hashes.signed_request_hash}")
        print(f"       Computed: {hashes.expected_request_hash}")
        print(f"     ← RESPONSE HASH {mark(hashes.response_match)}")
        print(f"       Signed:   {hashes.signed_response_hash}")
        print(f"       Computed: {hashes.expected_response_hash}")
    print(f"       RESULT: {mark(hashes.valid)}")

    signature = result.signature_validation
    print("\n   🔑 Verifying signature:")
    print(f"       Recovered TEE Address: {signature.recovered_address}")
    if signature.error:
        print(f"       Error: {signature.error}")
    print(f"       RESULT: {mark(signature.valid)}")

    for note in result.notes:
        print(f"\n⚠️  {note}")
    print(f"\nOverall: {mark(result.valid)}")


def main():
    parser = argparse.ArgumentParser(
        description="Verify a chat completion against its TEE attestation"
    )
    parser.add_argument("--model", default=None)
    parser.add_argument("--content", default="Respond with only two words")
    parser.add_argument("--env-file", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    config = VerifierConfig.from_env(args.env_file)
    if not config.api_key:
        print("Error: NEARAI_CLOUD_API_KEY is required (environment or .env file)")
        sys.exit(2)

    verifier = ChatVerifier(config=config)
    try:
        result = asyncio.run(verifier.verify_chat(args.content, args.model))
    except VerifierError as e:
        print(f"\n❌ {type(e).__name__}: {e}")
        sys.exit(1)

    render(result)
    sys.exit(0 if result.valid else 1)


if __name__ == "__main__":
    main()
