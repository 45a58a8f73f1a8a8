"""Local user record mirrored from the identity provider."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class User:
    """A user row keyed by the provider-issued external id.

    display_name is written once at creation and never revised by later events.
    """

    clerk_id: str
    username: str
    display_name: str
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def from_row(row: dict[str, Any]) -> User:
        return User(**{k: v for k, v in row.items() if k in User.__dataclass_fields__})
