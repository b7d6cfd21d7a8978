"""
PPOB API - Branch Router
Cooperative branches and their nasabah
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ppob_api.database import get_db
from ppob_api.models.branch import Branch

router = APIRouter()


class BranchCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    address: Optional[str] = None


class BranchUpdateRequest(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None


def _get_branch(db: Session, branch_id: int) -> Branch:
    branch = db.get(Branch, branch_id)
    if not branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    return branch


@router.get("/")
async def list_branches(db: Session = Depends(get_db)):
    return [b.to_dict(include_nasabah=True) for b in db.query(Branch).order_by(Branch.id).all()]


@router.get("/{branch_id}")
async def get_branch(branch_id: int, db: Session = Depends(get_db)):
    return _get_branch(db, branch_id).to_dict(include_nasabah=True)


@router.post("/", status_code=201)
async def create_branch(data: BranchCreateRequest, db: Session = Depends(get_db)):
    branch = Branch(name=data.name, address=data.address)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch.to_dict()


@router.put("/{branch_id}")
async def update_branch(branch_id: int, data: BranchUpdateRequest, db: Session = Depends(get_db)):
    branch = _get_branch(db, branch_id)
    for key, value in data.model_dump(exclude_none=True).items():
        setattr(branch, key, value)
    db.commit()
    db.refresh(branch)
    return branch.to_dict()


@router.delete("/{branch_id}")
async def delete_branch(branch_id: int, db: Session = Depends(get_db)):
    branch = _get_branch(db, branch_id)
    db.delete(branch)
    db.commit()
    return {"message": "Branch deleted successfully"}


@router.get("/{branch_id}/nasabah")
async def list_branch_nasabah(branch_id: int, db: Session = Depends(get_db)):
    branch = db.get(Branch, branch_id)
    if not branch:
        raise HTTPException(status_code=404, detail="Cabang tidak ditemukan")

    return {
        "branch": branch.name,
        "totalNasabah": len(branch.nasabah),
        "nasabah": [n.to_dict() for n in branch.nasabah],
    }
