"""Clerk webhook events: envelope parsing into tagged variants.

A verified envelope `{type, data}` becomes exactly one of UserCreated,
UserUpdated, UserDeleted or UnhandledEvent, each carrying only the fields its
branch needs. username is optional on the created/updated variants so the
sync service can reject its absence with a 400. image_url is passed through
as sent, empty string included; only a missing or non-string value is None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"


class InvalidEventError(ValueError):
    """Verified payload does not have the shape of a Clerk event envelope."""


@dataclass(frozen=True)
class UserCreated:
    clerk_id: str
    username: str | None
    image_url: str | None


@dataclass(frozen=True)
class UserUpdated:
    clerk_id: str
    username: str | None
    image_url: str | None


@dataclass(frozen=True)
class UserDeleted:
    clerk_id: str


@dataclass(frozen=True)
class UnhandledEvent:
    event_type: str
    clerk_id: str | None = None


ClerkEvent = Union[UserCreated, UserUpdated, UserDeleted, UnhandledEvent]


def _optional_str(value: Any) -> str | None:
    """Empty strings and non-strings count as absent."""
    if isinstance(value, str) and value:
        return value
    return None


def parse_event(payload: Any) -> ClerkEvent:
    """Parse a verified webhook payload into a ClerkEvent.

    Args:
        payload: Decoded JSON body of a verified delivery

    Returns:
        The event variant for payload["type"]

    Raises:
        InvalidEventError: envelope is not an object, has no string `type`, or a
            handled event's `data` lacks a string `id`
    """
    if not isinstance(payload, dict):
        raise InvalidEventError("event envelope must be a JSON object")

    event_type = payload.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise InvalidEventError("event envelope has no type")

    data = payload.get("data")
    if not isinstance(data, dict):
        data = None

    clerk_id = _optional_str(data.get("id")) if data else None

    if event_type not in (USER_CREATED, USER_UPDATED, USER_DELETED):
        return UnhandledEvent(event_type=event_type, clerk_id=clerk_id)

    if clerk_id is None:
        raise InvalidEventError(f"{event_type} event has no data.id")

    if event_type == USER_DELETED:
        return UserDeleted(clerk_id=clerk_id)

    username = _optional_str(data.get("username"))
    image_url = data.get("image_url")
    if not isinstance(image_url, str):
        image_url = None
    if event_type == USER_CREATED:
        return UserCreated(clerk_id=clerk_id, username=username, image_url=image_url)
    return UserUpdated(clerk_id=clerk_id, username=username, image_url=image_url)
