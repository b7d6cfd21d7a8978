"""
PPOB API - Digiflazz Webhook Router
Digiflazz retries until it gets a 200, so only a processed (or
deliberately ignored) callback answers 200.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ppob_api.database import get_db
from ppob_api.exceptions import AppError, ValidationError
from ppob_api.services.webhook_service import reconcile_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


async def handle_digiflazz_webhook(request: Request, db: Session = Depends(get_db)):
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    try:
        if payload is None:
            raise ValidationError("Invalid payload")
        trx, applied = reconcile_webhook(db, payload)
    except AppError as e:
        logger.error(f"Webhook error: {e.message}")
        return JSONResponse(status_code=e.status_code, content={"success": False, "message": e.message})

    return {"success": True, "refId": trx.ref_id, "status": trx.status, "applied": applied}


router.add_api_route("/api/digiflazz/webhook", handle_digiflazz_webhook, methods=["POST"])
router.add_api_route("/digiflazz/webhook", handle_digiflazz_webhook, methods=["POST"])
router.add_api_route("/transactions/callback/digiflazz", handle_digiflazz_webhook, methods=["POST"])
