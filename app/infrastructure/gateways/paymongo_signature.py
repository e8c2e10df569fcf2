"""
Codec for the ``Paymongo-Signature`` header.

The header is a comma separated list of ``key=value`` pairs::

    t=1496734173,te=<hex hmac>,li=<hex hmac>

``t`` is the unix timestamp of the delivery, ``te`` the signature computed
in test mode and ``li`` the one computed in live mode. Only one of them is
filled for a given delivery. The signed message is ``"{t}.{raw_body}"`` and
the digest is HMAC-SHA256 keyed with the webhook secret.
"""

import hashlib
import hmac
from dataclasses import dataclass

from app.domain.errors import InvalidSignatureError


@dataclass(frozen=True)
class SignatureHeader:
    timestamp: str
    test_signature: str | None = None
    live_signature: str | None = None

    @property
    def signature(self) -> str | None:
        """Live signature wins over test signature when both are present."""
        return self.live_signature or self.test_signature


def parse_signature_header(header: str) -> SignatureHeader:
    parts: dict[str, str] = {}
    for chunk in header.split(","):
        key, sep, value = chunk.strip().partition("=")
        if sep and key:
            parts[key] = value.strip()

    timestamp = parts.get("t")
    if not timestamp:
        raise InvalidSignatureError()
    return SignatureHeader(
        timestamp=timestamp,
        test_signature=parts.get("te") or None,
        live_signature=parts.get("li") or None,
    )


def compute_signature(timestamp: str, payload: bytes, secret: str) -> str:
    message = timestamp.encode() + b"." + payload
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def build_signature_header(
    payload: bytes,
    secret: str,
    timestamp: int | str,
    livemode: bool = False,
) -> str:
    """Builds a header the way PayMongo does; used by local tooling and tests."""
    digest = compute_signature(str(timestamp), payload, secret)
    if livemode:
        return f"t={timestamp},te=,li={digest}"
    return f"t={timestamp},te={digest},li="


def verify_signature(payload: bytes, header: str, secret: str) -> None:
    parsed = parse_signature_header(header)
    received = parsed.signature
    if not received:
        raise InvalidSignatureError()

    expected = compute_signature(parsed.timestamp, payload, secret)
    # Header values may carry non-ASCII text; compare as bytes.
    if not hmac.compare_digest(expected.encode(), received.encode()):
        raise InvalidSignatureError()
