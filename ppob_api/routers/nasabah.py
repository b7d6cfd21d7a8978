"""
PPOB API - Nasabah Router
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from ppob_api.database import get_db
from ppob_api.models.branch import Branch, Nasabah

router = APIRouter()


class NasabahCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    branch_id: int = Field(alias="branchId")
    balance: Optional[float] = None
    phone: Optional[str] = None


class NasabahUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    branch_id: Optional[int] = Field(default=None, alias="branchId")
    balance: Optional[float] = None
    phone: Optional[str] = None


def _get_nasabah(db: Session, nasabah_id: int) -> Nasabah:
    nasabah = db.get(Nasabah, nasabah_id)
    if not nasabah:
        raise HTTPException(status_code=404, detail="Nasabah tidak ditemukan")
    return nasabah


def _ensure_branch(db: Session, branch_id: int):
    if not db.get(Branch, branch_id):
        raise HTTPException(status_code=404, detail="Cabang tidak ditemukan")


@router.get("/")
async def list_nasabah(db: Session = Depends(get_db)):
    return [n.to_dict(include_branch=True) for n in db.query(Nasabah).order_by(Nasabah.id).all()]


@router.get("/{nasabah_id}")
async def get_nasabah(nasabah_id: int, db: Session = Depends(get_db)):
    return _get_nasabah(db, nasabah_id).to_dict(include_branch=True)


@router.post("/", status_code=201)
async def create_nasabah(data: NasabahCreateRequest, db: Session = Depends(get_db)):
    _ensure_branch(db, data.branch_id)

    nasabah = Nasabah(
        name=data.name,
        balance=data.balance if data.balance is not None else 0.0,
        branch_id=data.branch_id,
        phone=data.phone,
    )
    db.add(nasabah)
    db.commit()
    db.refresh(nasabah)
    return nasabah.to_dict()


@router.put("/{nasabah_id}")
async def update_nasabah(nasabah_id: int, data: NasabahUpdateRequest, db: Session = Depends(get_db)):
    nasabah = _get_nasabah(db, nasabah_id)
    if data.branch_id is not None:
        _ensure_branch(db, data.branch_id)

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(nasabah, key, value)
    db.commit()
    db.refresh(nasabah)
    return nasabah.to_dict()


@router.delete("/{nasabah_id}")
async def delete_nasabah(nasabah_id: int, db: Session = Depends(get_db)):
    nasabah = _get_nasabah(db, nasabah_id)
    db.delete(nasabah)
    db.commit()
    return {"message": "Nasabah berhasil dihapus"}
