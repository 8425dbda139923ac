"""
POS API Endpoints
Counter sales for admins and salesmen

Author: DP Team
Date: 2025-06-08
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.api.bill_settings import get_or_create_bill_settings
from app.api.common import get_or_404, pagination
from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.catalog import Product as ProductOut
from app.domain.content import BillSettings as BillSettingsOut
from app.domain.order import ReturnRequest
from app.domain.pos import POSSale as POSSaleOut, POSSaleCreate
from app.models import POSSale
from app.repositories.product_repository import ProductRepository
from app.services.errors import ServiceError
from app.services.pos_service import POSService

logger = logging.getLogger(__name__)

router = APIRouter()


def _sale_query(db: Session):
    return db.query(POSSale).options(
        selectinload(POSSale.items),
        selectinload(POSSale.salesman),
        selectinload(POSSale.shop),
    )


# ============================================================================
# Products
# ============================================================================

@router.get("/products")
async def pos_products(
    search: Optional[str] = Query(None),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Active products for the POS screen"""
    try:
        products, total = ProductRepository(db).find_all(search=search, sort="name", limit=1000)
        return {
            "status": "success",
            "total": total,
            "data": [ProductOut.model_validate(p).to_dict() for p in products],
        }

    except Exception as e:
        logger.exception(f"Error fetching POS products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/products/barcode/{code}")
async def product_by_barcode(code: str, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    """Look up a scanned barcode (SKU also matches)"""
    product = ProductRepository(db).find_by_code(code.strip())
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"status": "success", "data": ProductOut.model_validate(product).to_dict()}


# ============================================================================
# Sales
# ============================================================================

@router.get("/sales")
async def list_sales(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Admin sees all sales, a salesman only their own"""
    try:
        query = _sale_query(db)
        if not user.is_admin:
            query = query.filter(POSSale.salesman_id == user.id)

        total = query.count()
        sales = (
            query.order_by(POSSale.created_at.desc(), POSSale.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return {
            "status": "success",
            "data": [POSSaleOut.model_validate(s).to_dict() for s in sales],
            "pagination": pagination(page, limit, total),
        }

    except Exception as e:
        logger.exception(f"Failed to fetch POS sales: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch sales")


@router.post("/sales", status_code=201)
async def create_sale(payload: POSSaleCreate, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        sale = POSService(db).create_sale(user.id, payload)
        return {"status": "success", "data": POSSaleOut.model_validate(sale).to_dict()}

    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to create POS sale: {e}")
        raise HTTPException(status_code=500, detail="Failed to create sale")


@router.delete("/sales/clear-all")
async def clear_all_sales(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        count = POSService(db).clear_all()
        return {"status": "success", "message": f"Deleted {count} sales", "data": {"deleted": count}}

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to clear POS sales: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear sales")


def _visible_sale(db: Session, sale_id: int, user: TokenUser) -> POSSale:
    sale = _sale_query(db).filter(POSSale.id == sale_id).first()
    if sale is None:
        raise HTTPException(status_code=404, detail="Sale not found")
    if not user.is_admin and sale.salesman_id != user.id:
        raise HTTPException(status_code=403, detail="You can only view your own sales")
    return sale


@router.get("/sales/{sale_id}")
async def get_sale(sale_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    sale = _visible_sale(db, sale_id, user)
    return {"status": "success", "data": POSSaleOut.model_validate(sale).to_dict()}


@router.get("/sales/{sale_id}/receipt")
async def get_receipt(sale_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    """The sale together with the bill layout it prints with"""
    sale = _visible_sale(db, sale_id, user)
    try:
        bill = get_or_create_bill_settings(db)
        return {
            "status": "success",
            "data": {
                "sale": POSSaleOut.model_validate(sale).to_dict(),
                "bill": BillSettingsOut.model_validate(bill).to_dict(),
            },
        }

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to build receipt for POS sale {sale_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to build receipt")


@router.delete("/sales/{sale_id}")
async def delete_sale(sale_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete a sale and put its stock and shop credit back"""
    try:
        sale = get_or_404(db, POSSale, sale_id, "Sale")
        POSService(db).delete_sale(sale)
        return {"status": "success", "message": "Sale deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to delete POS sale {sale_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete sale")


@router.post("/sales/{sale_id}/return")
async def return_sale(
    sale_id: int,
    payload: ReturnRequest,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        sale = get_or_404(db, POSSale, sale_id, "Sale")
        sale = POSService(db).return_sale(sale, payload.return_reason, user.email or user.name or "Unknown")
        return {
            "status": "success",
            "message": "Sale returned successfully",
            "data": POSSaleOut.model_validate(sale).to_dict(),
        }

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to return POS sale {sale_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process return")
