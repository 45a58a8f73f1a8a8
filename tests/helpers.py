"""Test helpers: Svix signing, Clerk envelopes and an in-memory UserStore."""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any

from svix.webhooks import Webhook

from user_sync.users.models import User
from user_sync.users.store import UserStore

TEST_SECRET = "whsec_" + base64.b64encode(b"user-sync-test-signing-secret-32").decode()
OTHER_SECRET = "whsec_" + base64.b64encode(b"some-other-signing-secret-000000").decode()


def sign_headers(
    body: str,
    *,
    secret: str = TEST_SECRET,
    msg_id: str = "msg_test_1",
    timestamp: datetime | None = None,
) -> dict[str, str]:
    """Compute valid svix-* headers for a body."""
    ts = timestamp or datetime.now(timezone.utc)
    signature = Webhook(secret).sign(msg_id=msg_id, timestamp=ts, data=body)
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(int(ts.timestamp())),
        "svix-signature": signature,
    }


def clerk_event(event_type: str, **data: Any) -> str:
    """Serialize a Clerk webhook envelope."""
    return json.dumps({"object": "event", "type": event_type, "data": data})


class InMemoryUserStore(UserStore):
    """Dict-backed UserStore that records every call."""

    def __init__(self, users: list[User] | None = None):
        self.users: dict[str, User] = {u.clerk_id: u for u in users or []}
        self.calls: list[tuple[str, str]] = []

    def create_user(self, user: User) -> User:
        self.calls.append(("create_user", user.clerk_id))
        if user.clerk_id in self.users:
            raise ValueError(f"duplicate key {user.clerk_id}")
        self.users[user.clerk_id] = user
        return user

    def update_user(self, clerk_id: str, *, username: str, avatar_url: str | None) -> User | None:
        self.calls.append(("update_user", clerk_id))
        user = self.users.get(clerk_id)
        if user is None:
            return None
        user.username = username
        user.avatar_url = avatar_url
        return user

    def delete_user(self, clerk_id: str) -> bool:
        self.calls.append(("delete_user", clerk_id))
        return self.users.pop(clerk_id, None) is not None


