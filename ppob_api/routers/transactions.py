"""
PPOB API - Transactions Router
Handles: listing, manual records, Digiflazz orders, status overrides
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session, joinedload

from ppob_api.database import get_db
from ppob_api.dependencies import get_order_service
from ppob_api.middleware.auth import AuthContext, authenticate, require_admin
from ppob_api.models.product import Product
from ppob_api.models.transaction import Transaction, TransactionStatus
from ppob_api.models.user import User
from ppob_api.services.order_service import OrderService, generate_ref_id

logger = logging.getLogger(__name__)

router = APIRouter()


class TransactionCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    product_id: int = Field(alias="productId")
    customer_no: Optional[str] = Field(default=None, alias="customerNo")


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_no: str = Field(alias="customerNo", min_length=1)
    product_id: Optional[int] = Field(default=None, alias="productId")
    buyer_sku_code: Optional[str] = Field(default=None, alias="buyerSkuCode")


class StatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1)


def _get_transaction(db: Session, transaction_id: int) -> Transaction:
    trx = db.get(Transaction, transaction_id)
    if not trx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return trx


@router.get("/")
async def list_transactions(
    status: Optional[str] = None,
    auth: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Admins see every transaction, other users only their own"""
    query = db.query(Transaction).options(
        joinedload(Transaction.user), joinedload(Transaction.product)
    )
    if not auth.is_admin:
        query = query.filter(Transaction.user_id == auth.user_id)
    if status:
        query = query.filter(Transaction.status == status.upper())

    return [t.to_dict(include_relations=True) for t in query.order_by(Transaction.id.desc()).all()]


@router.post("/", status_code=201)
async def create_transaction(
    data: TransactionCreateRequest,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Record a transaction without contacting Digiflazz"""
    if not db.get(User, data.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    product = db.get(Product, data.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    trx = Transaction(
        ref_id=generate_ref_id(),
        user_id=data.user_id,
        product_id=product.id,
        buyer_sku_code=product.id_provider,
        customer_no=data.customer_no,
        status=TransactionStatus.PENDING,
    )
    db.add(trx)
    db.commit()
    db.refresh(trx)
    return trx.to_dict()


@router.post("/order")
async def order_product(
    data: OrderRequest,
    auth: AuthContext = Depends(authenticate),
    orders: OrderService = Depends(get_order_service),
):
    """Place a Digiflazz order for the authenticated user"""
    trx, digiflazz_response = await orders.place_order(
        user_id=auth.user_id,
        customer_no=data.customer_no,
        product_id=data.product_id,
        buyer_sku_code=data.buyer_sku_code,
    )
    return {
        "message": "Order processed",
        "transaction": trx.to_dict(),
        "digiflazzResponse": digiflazz_response,
    }


@router.put("/{transaction_id}/status")
async def update_transaction_status(
    transaction_id: int,
    data: StatusUpdateRequest,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Manual status override, e.g. after reconciling with Digiflazz by hand"""
    trx = _get_transaction(db, transaction_id)
    trx.status = data.status.upper()
    db.commit()
    db.refresh(trx)

    logger.info(f"Admin {admin.user_id} set transaction {trx.ref_id} to {trx.status}")
    return trx.to_dict()


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    trx = _get_transaction(db, transaction_id)
    db.delete(trx)
    db.commit()

    logger.info(f"Admin {admin.user_id} deleted transaction {trx.ref_id}")
    return {"message": "Transaction deleted successfully"}
