"""FastAPI application factory for the user sync webhook service.

Run with:
    uvicorn user_sync.app:create_app --factory --port 8080
or:
    python -m user_sync.app --port 8080
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from user_sync.config import Settings, load_settings, validate_settings
from user_sync.users.store import PostgresUserStore, UserStore
from user_sync.webhooks.handlers import ClerkWebhookHandler, register_webhook_routes
from user_sync.webhooks.sync import UserSyncService
from user_sync.webhooks.verification import SignatureVerifier

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, store: UserStore | None = None) -> FastAPI:
    """Build the app. Raises ConfigurationError if the signing secret is unusable.

    Args:
        settings: Explicit settings; loaded from the environment when omitted
        store: UserStore override; defaults to Postgres at settings.database_url
    """
    settings = validate_settings(settings) if settings is not None else load_settings()
    configure_logging(settings.log_level)

    if store is None:
        store = PostgresUserStore(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.init_schema and isinstance(store, PostgresUserStore):
            store.init_user_table()
        yield

    app = FastAPI(title="User Sync Webhook", version="1.0.0", lifespan=lifespan)

    handler = ClerkWebhookHandler(
        verifier=SignatureVerifier(settings.webhook_secret),
        sync_service=UserSyncService(store),
    )
    register_webhook_routes(app, handler, path=settings.webhook_path)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    import sys

    import uvicorn

    port = 8080
    for i, arg in enumerate(sys.argv):
        if arg == "--port" and i + 1 < len(sys.argv):
            port = int(sys.argv[i + 1])
    uvicorn.run("user_sync.app:create_app", factory=True, host="0.0.0.0", port=port)
