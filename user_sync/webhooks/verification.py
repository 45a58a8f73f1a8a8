"""Webhook signature verification for Clerk (Svix signing scheme).

Security contract:
- Signature is computed over the exact raw body bytes, never a re-serialization
- All three svix-* headers are required; any missing -> reject before verifying
- Verification failure of any kind -> reject, details logged server-side only
- Timestamp tolerance (5 min, replay protection) is enforced by the svix library
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from svix.webhooks import Webhook

logger = logging.getLogger(__name__)

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"

REQUIRED_HEADERS = (SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER)


@dataclass(frozen=True)
class SvixHeaders:
    """The three signing headers of a single delivery."""

    message_id: str
    timestamp: str
    signature: str

    def as_dict(self) -> dict[str, str]:
        return {
            SVIX_ID_HEADER: self.message_id,
            SVIX_TIMESTAMP_HEADER: self.timestamp,
            SVIX_SIGNATURE_HEADER: self.signature,
        }


def extract_svix_headers(headers: Mapping[str, str]) -> SvixHeaders | None:
    """Pull the signing headers out of a request header mapping.

    Args:
        headers: Request headers (any key case)

    Returns:
        SvixHeaders, or None if any of the three is absent or empty
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    values = [lowered.get(name) for name in REQUIRED_HEADERS]
    if not all(values):
        return None
    return SvixHeaders(*values)


class SignatureVerifier:
    """Verifies Svix-signed payloads with a secret injected at construction."""

    def __init__(self, signing_secret: str):
        # Raises on an empty or undecodable secret; callers validate at startup.
        self._webhook = Webhook(signing_secret)

    def verify(self, body: bytes, headers: SvixHeaders) -> bool:
        """Check a delivery's signature and timestamp.

        Only authenticates; decoding the body is the caller's job.

        Args:
            body: Raw request body bytes
            headers: The delivery's signing headers

        Returns:
            True if the signature is valid, False on any failure
            (bad signature, expired timestamp, malformed header)
        """
        try:
            self._webhook.verify(body, headers.as_dict())
        except Exception as exc:
            logger.warning(
                "Webhook verification failed for message %s: %s",
                headers.message_id,
                type(exc).__name__,
            )
            return False
        return True
