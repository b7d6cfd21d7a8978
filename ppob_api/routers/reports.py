"""
PPOB API - Reports Router
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ppob_api.database import get_db
from ppob_api.middleware.auth import AuthContext, require_admin
from ppob_api.services import report_service

router = APIRouter()


@router.get("/top-products")
async def top_products(
    limit: int = Query(5, ge=1, le=100),
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.top_selling_products(db, limit=limit)


@router.get("/revenue")
async def revenue(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="startDate must be before endDate")
    return report_service.revenue_report(db, start_date, end_date)


@router.get("/dashboard")
async def dashboard(
    days: int = Query(7, ge=1, le=366),
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return report_service.dashboard_report(db, days=days)
