"""Telegram webhook route."""

from typing import Any

from fastapi import APIRouter, Header, HTTPException

from ...app import IApplication


def create_telegram_router(app: IApplication) -> APIRouter:
    """Create Telegram webhook router."""
    router = APIRouter(prefix="/telegram", tags=["telegram"])

    @router.post("/webhook")
    async def receive_update(
        update: dict[str, Any],
        x_telegram_bot_api_secret_token: str | None = Header(None),
    ) -> dict:
        """Accept one update pushed by Telegram."""
        secret = app.webhook_secret
        if secret and x_telegram_bot_api_secret_token != secret:
            raise HTTPException(status_code=403, detail="Invalid secret token")
        try:
            handled = await app.handle_update(update)
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))
        # Always 200 so Telegram does not redeliver
        return {"ok": True, "handled": handled}

    return router
