"""
PPOB API - Reports
Read-only aggregation over successful transactions.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func, desc
from sqlalchemy.orm import Session, joinedload

from ppob_api.models.product import Product
from ppob_api.models.transaction import Transaction, TransactionStatus

UNKNOWN_PRODUCT = "Produk tidak diketahui"


def _successful(db: Session):
    return db.query(Transaction).filter(Transaction.status.in_(TransactionStatus.SUCCESSFUL))


def _totals(transactions: List[Transaction]) -> Dict:
    priced = [t for t in transactions if t.product]
    return {
        "totalRevenue": sum(t.product.selling_price for t in priced),
        "totalProfit": sum(t.product.selling_price - t.product.base_price for t in priced),
        "totalTransactions": len(transactions),
    }


def top_selling_products(db: Session, limit: int = 5) -> List[Dict]:
    sold = func.count(Transaction.id).label("total_sold")
    rows = (
        db.query(Transaction.product_id, sold)
        .filter(Transaction.status.in_(TransactionStatus.SUCCESSFUL))
        .filter(Transaction.product_id.isnot(None))
        .group_by(Transaction.product_id)
        .order_by(desc(sold))
        .limit(limit)
        .all()
    )

    result = []
    for product_id, total_sold in rows:
        product = db.get(Product, product_id)
        result.append({
            "productId": product_id,
            "name": product.name if product else UNKNOWN_PRODUCT,
            "totalSold": total_sold,
        })
    return result


def revenue_report(db: Session, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None) -> Dict:
    """Totals over a period; both bounds are needed, otherwise all time"""
    query = _successful(db).options(joinedload(Transaction.product))
    if start_date and end_date:
        query = query.filter(Transaction.created_at >= start_date, Transaction.created_at <= end_date)
        period = f"{start_date.date().isoformat()} → {end_date.date().isoformat()}"
    else:
        period = "Semua periode (All Time)"

    report = _totals(query.all())
    report["period"] = period
    return report


def dashboard_report(db: Session, days: int = 7, now: Optional[datetime] = None) -> Dict:
    end_date = now or datetime.utcnow()
    start_date = end_date - timedelta(days=days)

    transactions = (
        _successful(db)
        .options(joinedload(Transaction.product))
        .filter(Transaction.created_at >= start_date, Transaction.created_at <= end_date)
        .all()
    )

    summary = _totals(transactions)
    summary["period"] = f"{start_date.date().isoformat()} → {end_date.date().isoformat()}"

    product_sales = defaultdict(int)
    daily = defaultdict(float)
    for trx in transactions:
        if not trx.product:
            continue
        product_sales[trx.product.name] += 1
        created_at = trx.created_at or end_date
        daily[created_at.date().isoformat()] += trx.product.selling_price

    top_products = sorted(
        ({"name": name, "totalSold": count} for name, count in product_sales.items()),
        key=lambda p: p["totalSold"],
        reverse=True,
    )[:5]

    daily_revenue = [{"date": d, "totalRevenue": daily[d]} for d in sorted(daily)]

    return {
        "summary": summary,
        "topProducts": top_products,
        "dailyRevenue": daily_revenue,
    }
