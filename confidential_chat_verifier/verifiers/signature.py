import logging
from typing import Any, Sequence, Union
from eth_account import Account
from eth_account.messages import encode_defunct
from ..types import SignatureVerdict

logger = logging.getLogger(__name__)


def recover_signer(text: str, signature: Any) -> str:
    """Recover the Ethereum address that signed ``text`` as a personal message."""
    message = encode_defunct(text=text)
    return Account.recover_message(message, signature=signature)


def verify_signature(
    message: str,
    signature: Any,
    expected_addresses: Union[str, Sequence[str]],
) -> SignatureVerdict:
    """Check that ``signature`` over ``message`` was made by a trusted address.

    ``expected_addresses`` may be one address or several (a report naming
    more than one TEE). The signature is accepted when the recovered address
    equals any of them, ignoring case.
    """
    if isinstance(expected_addresses, str):
        candidates = [expected_addresses]
    else:
        candidates = [a for a in expected_addresses if a]

    try:
        recovered = recover_signer(message, signature)
    except Exception as e:
        logger.warning(f"Failed to recover signer: {e}")
        return SignatureVerdict(
            valid=False,
            recovered_address=None,
            expected_addresses=candidates,
            message=message,
            error=str(e),
            error_kind="SignatureRecoveryError",
        )

    if not candidates:
        return SignatureVerdict(
            valid=False,
            recovered_address=recovered,
            expected_addresses=candidates,
            message=message,
            error="No expected signing address to compare against",
            error_kind="NoExpectedAddress",
        )

    matched = next((a for a in candidates if a.lower() == recovered.lower()), None)
    return SignatureVerdict(
        valid=matched is not None,
        recovered_address=recovered,
        matched_address=matched,
        expected_addresses=candidates,
        message=message,
    )
