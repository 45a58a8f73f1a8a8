"""Webhook HTTP handler: FastAPI route for inbound Clerk user webhooks.

The handler:
1. Reads raw body (needed for signature verification)
2. Requires the three svix-* signing headers
3. Verifies the signature
4. Parses the event envelope into a tagged variant
5. Applies it to the user table via UserSyncService
6. Returns the outcome as a short plain-text response

Security contract:
- Never return verification details to the webhook caller
- 400 for missing headers and bad signatures
- No datastore call happens before verification succeeds
- Log all webhook activity for audit trail

Malformed payloads (400 "Invalid webhook payload") are only reported once the
signature checks out: a body that is not UTF-8 JSON, a JSON value other than an
object, an envelope without a string `type`, or a user.created, user.updated
or user.deleted event whose `data.id` is missing. The last case includes
user.deleted, which is rejected here instead of reaching the store.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Mapping

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from user_sync.webhooks.events import InvalidEventError, parse_event
from user_sync.webhooks.sync import SyncOutcome, UserSyncService
from user_sync.webhooks.verification import SignatureVerifier, extract_svix_headers

logger = logging.getLogger(__name__)

MISSING_HEADERS = SyncOutcome(400, "Missing Svix headers")
INVALID_SIGNATURE = SyncOutcome(400, "Invalid webhook signature")
INVALID_PAYLOAD = SyncOutcome(400, "Invalid webhook payload")


def _log_webhook(event_type: str, message_id: str, clerk_id: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info(
        "WEBHOOK_AUDIT event=%s id=%s clerk_id=%s status=%s",
        event_type,
        message_id,
        clerk_id,
        status,
    )


def _respond(outcome: SyncOutcome) -> PlainTextResponse:
    return PlainTextResponse(outcome.message, status_code=outcome.status_code)


class ClerkWebhookHandler:
    """Verifies, parses and applies one Clerk webhook delivery per call."""

    def __init__(self, verifier: SignatureVerifier, sync_service: UserSyncService):
        self.verifier = verifier
        self.sync_service = sync_service

    async def handle(self, body: bytes, headers: Mapping[str, str]) -> SyncOutcome:
        """Run the full pipeline for one delivery and return its outcome."""
        svix_headers = extract_svix_headers(headers)
        if svix_headers is None:
            _log_webhook("unknown", "unknown", "unknown", "missing_headers")
            return MISSING_HEADERS

        if not self.verifier.verify(body, svix_headers):
            _log_webhook("unknown", svix_headers.message_id, "unknown", "signature_failed")
            return INVALID_SIGNATURE

        try:
            payload = json.loads(body)
            event = parse_event(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, InvalidEventError) as exc:
            logger.warning("Rejected webhook %s: %s", svix_headers.message_id, exc)
            _log_webhook("unknown", svix_headers.message_id, "unknown", "invalid_payload")
            return INVALID_PAYLOAD

        event_type = payload["type"]
        clerk_id = getattr(event, "clerk_id", None) or "unknown"
        logger.info("Webhook received: %s for Clerk ID: %s", event_type, clerk_id)

        # Store calls are blocking psycopg I/O.
        outcome = await run_in_threadpool(self.sync_service.apply, event)
        _log_webhook(event_type, svix_headers.message_id, clerk_id, str(outcome.status_code))
        return outcome


def register_webhook_routes(
    app: FastAPI,
    handler: ClerkWebhookHandler,
    path: str = "/api/webhooks/clerk",
) -> None:
    """Register the Clerk webhook endpoint on the FastAPI app."""

    @app.post(path)
    async def clerk_webhook(request: Request):
        """Receive Clerk user webhooks (signature-verified)."""
        start = time.time()
        body = await request.body()
        outcome = await handler.handle(body, request.headers)
        elapsed_ms = (time.time() - start) * 1000
        logger.debug("Webhook processed in %.1fms: status=%d", elapsed_ms, outcome.status_code)
        return _respond(outcome)

    logger.info("Webhook route registered: POST %s", path)
