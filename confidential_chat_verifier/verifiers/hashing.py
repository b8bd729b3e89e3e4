import hashlib
from typing import Any, Union
from ..types import ContentHashPair, HashReconciliation


def sha256sum(data: Union[str, bytes]) -> str:
    """Lowercase hex SHA-256 of ``data``; text is hashed as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hash_exchange(
    request_body: Union[str, bytes], response_body: Union[str, bytes]
) -> ContentHashPair:
    return ContentHashPair(
        request_hash=sha256sum(request_body),
        response_hash=sha256sum(response_body),
    )


def compare_hashes(
    signature_text: Any,
    expected_request_hash: str,
    expected_response_hash: str,
) -> HashReconciliation:
    """Check the ``request_hash:response_hash`` text signed by the TEE.

    Hashes are compared exactly. Both sides come out of ``sha256sum`` as
    lowercase hex, so unlike signing addresses no case folding is applied.
    """
    if not isinstance(signature_text, str):
        return HashReconciliation(
            valid=False,
            error=f"Signature text must be a string, got {type(signature_text).__name__}",
            error_kind="MalformedClaimText",
            signature_text=signature_text,
            expected_request_hash=expected_request_hash,
            expected_response_hash=expected_response_hash,
        )

    hash_parts = signature_text.split(":")
    if len(hash_parts) != 2:
        return HashReconciliation(
            valid=False,
            error=f"Expected 2 hash parts separated by ':', got {len(hash_parts)}",
            error_kind="MalformedClaimText",
            signature_text=signature_text,
            expected_request_hash=expected_request_hash,
            expected_response_hash=expected_response_hash,
        )

    signed_request_hash, signed_response_hash = hash_parts
    request_match = signed_request_hash == expected_request_hash
    response_match = signed_response_hash == expected_response_hash

    return HashReconciliation(
        valid=request_match and response_match,
        request_match=request_match,
        response_match=response_match,
        signed_request_hash=signed_request_hash,
        signed_response_hash=signed_response_hash,
        expected_request_hash=expected_request_hash,
        expected_response_hash=expected_response_hash,
        signature_text=signature_text,
    )
