"""
PPOB API - Digiflazz Webhook Reconciliation
Applies asynchronous provider callbacks to the matching transaction.
"""
import json
import logging
from datetime import datetime
from typing import Dict, Tuple

from sqlalchemy.orm import Session

from ppob_api.exceptions import NotFoundError, ValidationError
from ppob_api.models.transaction import Transaction, TransactionStatus

logger = logging.getLogger(__name__)


def unwrap_payload(payload: Dict) -> Dict:
    """Digiflazz wraps callbacks in {"data": {...}}; older callers post the fields flat"""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload")
    inner = payload.get("data")
    if isinstance(inner, dict) and "ref_id" not in payload:
        return inner
    return payload


def reconcile_webhook(db: Session, payload: Dict) -> Tuple[Transaction, bool]:
    """
    Update the transaction named by ``ref_id`` from a provider callback.

    Returns the transaction and whether the update was applied. A callback
    that would move a settled transaction back to a non-terminal status is
    acknowledged but not applied. Replaying a callback converges to the
    same state. Never creates rows.
    """
    data = unwrap_payload(payload)

    ref_id = data.get("ref_id")
    if not ref_id:
        raise ValidationError("Invalid payload: missing ref_id")

    trx = db.query(Transaction).filter(Transaction.ref_id == ref_id).first()
    if not trx:
        raise NotFoundError("Transaction not found")

    raw_status = data.get("status")
    status = str(raw_status).upper() if raw_status else TransactionStatus.UNKNOWN

    if trx.is_terminal and status not in TransactionStatus.TERMINAL:
        logger.warning(f"Ignoring stale webhook for {ref_id}: {trx.status} -> {status}")
        return trx, False

    trx.status = status
    trx.sn = data.get("sn") or trx.sn
    trx.raw_response = json.dumps(payload)
    trx.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(trx)

    logger.info(f"Webhook applied for {ref_id}: status={status}")
    return trx, True
