import logging
import re
import struct
from typing import Any, Union
from ..types import DecodedQuote, QuoteDecodeError, QuoteErrorKind, ReportBody

logger = logging.getLogger(__name__)

HEADER_SIZE = 48
REPORT_BODY_END = 432
HEX_RE = re.compile(r"[0-9a-fA-F]*")


def _u16(data: bytes, offset: int) -> int:
    return struct.unpack_from("<H", data, offset)[0]


def _parse_report_body(body: bytes) -> ReportBody:
    """Extract the SGX report body fields. Offsets are relative to the body start."""
    return ReportBody(
        cpu_svn=body[0:16].hex(),
        misc_select=body[16:20].hex(),
        attributes=body[32:48].hex(),
        mr_enclave=body[64:96].hex(),
        mr_signer=body[128:160].hex(),
        config_id=body[160:224].hex(),
        isv_prod_id=_u16(body, 256),
        isv_svn=_u16(body, 258),
        config_svn=_u16(body, 260),
        isv_family_id=body[304:320].hex(),
        report_data=body[320:384].hex(),
    )


def decode_intel_quote(hex_quote: Any) -> Union[DecodedQuote, QuoteDecodeError]:
    """Decode a hex-encoded Intel quote into its header and report body fields.

    This only parses the evidence; it does not check the quote signature or
    collateral. Problems come back as a ``QuoteDecodeError`` value instead of
    an exception so one bad quote does not abort decoding of a whole report.
    """
    if (
        not isinstance(hex_quote, str)
        or not hex_quote
        or len(hex_quote) % 2
        or not HEX_RE.fullmatch(hex_quote)
    ):
        return QuoteDecodeError(
            kind=QuoteErrorKind.INVALID_FORMAT,
            error="Invalid hex quote format",
            raw_hex=hex_quote if isinstance(hex_quote, str) else None,
        )

    try:
        quote_bytes = bytes.fromhex(hex_quote)
        if len(quote_bytes) < HEADER_SIZE:
            return QuoteDecodeError(
                kind=QuoteErrorKind.TOO_SHORT,
                error="Quote too short to be valid",
                raw_hex=hex_quote,
            )

        report_body = None
        if len(quote_bytes) >= REPORT_BODY_END:
            report_body = _parse_report_body(quote_bytes[HEADER_SIZE:REPORT_BODY_END])

        return DecodedQuote(
            version=_u16(quote_bytes, 0),
            sign_type=_u16(quote_bytes, 2),
            epid_group_id=quote_bytes[4:8].hex(),
            qe_svn=_u16(quote_bytes, 8),
            pce_svn=_u16(quote_bytes, 10),
            xeid=quote_bytes[12:28].hex(),
            basename=quote_bytes[28:60].hex(),
            raw_hex=hex_quote,
            size_bytes=len(quote_bytes),
            report_body=report_body,
        )
    except Exception as e:
        logger.warning(f"Failed to decode Intel quote: {e}")
        return QuoteDecodeError(
            kind=QuoteErrorKind.DECODE_FAILED,
            error=f"Failed to decode Intel quote: {e}",
            raw_hex=hex_quote,
        )
