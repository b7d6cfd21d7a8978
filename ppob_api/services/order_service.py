"""
PPOB API - Order Service
Places an order with Digiflazz and keeps the local transaction in step.

The flow is three separate writes around one outbound call:
  1. insert the transaction as PENDING
  2. call Digiflazz
  3. store the provider's status and raw reply
If step 2 fails the row is marked FAILED (raw_response untouched) and the
error surfaces as ProviderError. A later webhook can still settle it.
"""
import json
import logging
import secrets
import time
from datetime import datetime
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from ppob_api.exceptions import NotFoundError, ProviderError, ValidationError
from ppob_api.models.product import Product
from ppob_api.models.transaction import Transaction, TransactionStatus
from ppob_api.services.digiflazz import DigiflazzClient

logger = logging.getLogger(__name__)


def generate_ref_id() -> str:
    """trx_<epoch millis>_<random hex>; the suffix keeps same-tick orders apart"""
    return f"trx_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


class OrderService:
    def __init__(self, db: Session, client: DigiflazzClient):
        self.db = db
        self.client = client

    def resolve_product(self, product_id: Optional[int] = None, buyer_sku_code: Optional[str] = None) -> Product:
        product = None
        if product_id is not None:
            product = self.db.get(Product, product_id)
        elif buyer_sku_code:
            product = self.db.query(Product).filter(Product.id_provider == buyer_sku_code).first()
        else:
            raise ValidationError("productId or buyerSkuCode is required")

        if not product:
            raise NotFoundError("Product not found")
        return product

    async def place_order(
        self,
        user_id: int,
        customer_no: str,
        product_id: Optional[int] = None,
        buyer_sku_code: Optional[str] = None,
    ) -> Tuple[Transaction, Dict]:
        if not customer_no:
            raise ValidationError("customerNo is required")

        ref_id = generate_ref_id()
        product = self.resolve_product(product_id, buyer_sku_code)

        trx = Transaction(
            ref_id=ref_id,
            user_id=user_id,
            product_id=product.id,
            buyer_sku_code=product.id_provider,
            customer_no=customer_no,
            status=TransactionStatus.PENDING,
            raw_response=None,
        )
        self.db.add(trx)
        self.db.commit()
        self.db.refresh(trx)

        try:
            response = await self.client.place_order(product.id_provider, customer_no, ref_id)
        except Exception as e:
            logger.error(f"Digiflazz order {ref_id} failed: {e}")
            trx.status = TransactionStatus.FAILED
            trx.updated_at = datetime.utcnow()
            self.db.commit()
            raise ProviderError("Failed to order product") from e

        data = response.get("data") if isinstance(response, dict) else None
        data = data if isinstance(data, dict) else {}

        status = data.get("status")
        trx.status = str(status).upper() if status else TransactionStatus.PENDING
        if data.get("sn"):
            trx.sn = data["sn"]
        trx.raw_response = json.dumps(response)
        trx.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(trx)

        logger.info(f"Order {ref_id} for user {user_id} -> {trx.status}")
        return trx, response
