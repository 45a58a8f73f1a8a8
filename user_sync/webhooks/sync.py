"""Applies Clerk user events to the local user table.

Each event variant maps to a single UserStore call. Every branch returns a
SyncOutcome instead of raising, so the route handler only translates
outcomes to HTTP responses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from user_sync.users.models import User
from user_sync.users.store import UserStore
from user_sync.webhooks.events import (
    ClerkEvent,
    UnhandledEvent,
    UserCreated,
    UserDeleted,
    UserUpdated,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncOutcome:
    """HTTP-facing result of processing one event."""

    status_code: int
    message: str


PROCESSED = SyncOutcome(200, "Webhook processed successfully")
MISSING_USERNAME = SyncOutcome(400, "Missing username")
USER_NOT_FOUND = SyncOutcome(404, "User not found")
DELETE_SKIPPED = SyncOutcome(200, "User not found")


class UserSyncService:
    """Dispatches ClerkEvent variants to UserStore operations."""

    def __init__(self, store: UserStore):
        self.store = store

    def apply(self, event: ClerkEvent) -> SyncOutcome:
        """Apply one event. Unhandled event types are accepted without a store call."""
        if isinstance(event, UserCreated):
            return self.create_user(event)
        if isinstance(event, UserUpdated):
            return self.update_user(event)
        if isinstance(event, UserDeleted):
            return self.delete_user(event)
        if isinstance(event, UnhandledEvent):
            logger.info("Ignoring unhandled webhook event type: %s", event.event_type)
            return PROCESSED
        raise TypeError(f"Unknown event variant: {type(event).__name__}")

    def create_user(self, event: UserCreated) -> SyncOutcome:
        if not event.username:
            return MISSING_USERNAME

        try:
            user = self.store.create_user(
                User(
                    clerk_id=event.clerk_id,
                    username=event.username,
                    display_name=event.username,
                    avatar_url=event.image_url,
                )
            )
        except Exception:
            logger.exception("Error creating user %s", event.clerk_id)
            return SyncOutcome(500, "Error creating user")

        logger.info("User created in DB: %s (username=%s)", user.clerk_id, user.username)
        return PROCESSED

    def update_user(self, event: UserUpdated) -> SyncOutcome:
        # Partial updates without a username are rejected, same as create.
        if not event.username:
            return MISSING_USERNAME

        try:
            user = self.store.update_user(
                event.clerk_id,
                username=event.username,
                avatar_url=event.image_url,
            )
        except Exception:
            logger.exception("Error updating user %s", event.clerk_id)
            return SyncOutcome(500, "Error updating user")

        if user is None:
            logger.warning("User not found for update: %s", event.clerk_id)
            return USER_NOT_FOUND

        logger.info("User updated: %s (username=%s)", user.clerk_id, user.username)
        return PROCESSED

    def delete_user(self, event: UserDeleted) -> SyncOutcome:
        try:
            deleted = self.store.delete_user(event.clerk_id)
        except Exception:
            logger.exception("Error deleting user %s", event.clerk_id)
            return SyncOutcome(500, "Error deleting user")

        if not deleted:
            logger.warning("User not found, skipping delete: %s", event.clerk_id)
            return DELETE_SKIPPED

        logger.info("User deleted from DB: %s", event.clerk_id)
        return PROCESSED
