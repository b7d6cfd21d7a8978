"""
PPOB API - Products Router
PPOB catalog backed by Digiflazz SKUs
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from ppob_api.database import get_db
from ppob_api.exceptions import ConflictError
from ppob_api.middleware.auth import AuthContext, require_admin
from ppob_api.models.product import Product

router = APIRouter()


class ProductCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_provider: str = Field(alias="idProvider", min_length=1)
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    base_price: float = Field(gt=0)
    selling_price: float = Field(gt=0)


class ProductUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_provider: Optional[str] = Field(default=None, alias="idProvider")
    name: Optional[str] = None
    category: Optional[str] = None
    base_price: Optional[float] = None
    selling_price: Optional[float] = None


def _get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _ensure_unique_sku(db: Session, sku: str, exclude_id: Optional[int] = None):
    query = db.query(Product).filter(Product.id_provider == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise ConflictError(f"Product with idProvider {sku} already exists")


@router.get("/")
async def list_products(db: Session = Depends(get_db)):
    return [p.to_dict() for p in db.query(Product).order_by(Product.id).all()]


@router.get("/{product_id}")
async def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product(db, product_id).to_dict()


@router.post("/", status_code=201)
async def create_product(
    data: ProductCreateRequest,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a product; profit is selling_price - base_price"""
    _ensure_unique_sku(db, data.id_provider)

    product = Product(
        id_provider=data.id_provider,
        name=data.name,
        category=data.category,
        base_price=data.base_price,
        selling_price=data.selling_price,
        profit=data.selling_price - data.base_price,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product.to_dict()


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    data: ProductUpdateRequest,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Partial update. Profit is only recomputed when both prices are sent;
    editing one price leaves the stored profit as it was.
    """
    fields = data.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(status_code=400, detail="At least one field must be provided")

    product = _get_product(db, product_id)
    if "id_provider" in fields:
        _ensure_unique_sku(db, fields["id_provider"], exclude_id=product.id)

    for key, value in fields.items():
        setattr(product, key, value)
    if data.base_price is not None and data.selling_price is not None:
        product.profit = data.selling_price - data.base_price

    db.commit()
    db.refresh(product)
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = _get_product(db, product_id)
    db.delete(product)
    db.commit()
    return {"message": "Product deleted successfully"}
