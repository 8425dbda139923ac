"""
Admin Products API Endpoints
Product management for admins and staff

Author: DP Team
Date: 2025-06-03
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import get_or_404
from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.catalog import BarcodeGenerateRequest, Product as ProductOut, ProductCreate, ProductUpdate
from app.models import Category, Product
from app.repositories.product_repository import ProductRepository
from app.services.catalog_service import assign_missing_barcodes, delete_product, generate_barcode
from app.services.stock_service import matrix_total

logger = logging.getLogger(__name__)

router = APIRouter()


def _apply_fields(db: Session, product: Product, fields: dict) -> None:
    """Validate uniqueness and copy fields onto the product"""
    repo = ProductRepository(db)

    if fields.get("slug") and repo.slug_exists(fields["slug"], exclude_id=product.id):
        raise HTTPException(status_code=400, detail="A product with this slug already exists")
    if fields.get("barcode") and repo.barcode_exists(fields["barcode"], exclude_id=product.id):
        raise HTTPException(status_code=400, detail="A product with this barcode already exists")
    if fields.get("category_id") is not None and db.get(Category, fields["category_id"]) is None:
        raise HTTPException(status_code=400, detail=f"Category not found: {fields['category_id']}")

    for field, value in fields.items():
        setattr(product, field, value)

    # A color-size matrix owns the aggregate stock
    if product.color_size_stock:
        product.stock = matrix_total(product.color_size_stock)


@router.get("")
async def list_products(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="Category slug"),
    is_active: Optional[bool] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """All products, including inactive ones"""
    try:
        products, total = ProductRepository(db).find_all(
            category_slug=category,
            search=search,
            is_active=is_active,
            limit=limit,
            offset=offset,
        )
        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "data": [ProductOut.model_validate(p).to_dict() for p in products],
        }

    except Exception as e:
        logger.exception(f"Error fetching admin products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.post("/generate-barcodes")
async def generate_barcodes(
    payload: BarcodeGenerateRequest,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Assign barcodes to products that do not have one"""
    try:
        updated = assign_missing_barcodes(db, payload.product_ids)
        db.commit()

        return {
            "status": "success",
            "message": f"Generated barcodes for {len(updated)} products",
            "data": [{"id": p.id, "name": p.name, "barcode": p.barcode} for p in updated],
        }

    except Exception as e:
        logger.exception(f"Error generating barcodes: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate barcodes")


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    product = get_or_404(db, Product, product_id, "Product")
    return {"status": "success", "data": ProductOut.model_validate(product).to_dict()}


@router.post("", status_code=201)
async def create_product(
    payload: ProductCreate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """
    Create a product

    The slug must be unique. A missing barcode is generated; a given one
    must be unused.
    """
    try:
        fields = payload.model_dump()
        product = Product()
        _apply_fields(db, product, fields)
        if not product.barcode:
            product.barcode = generate_barcode(db)

        db.add(product)
        db.commit()
        db.refresh(product)

        logger.info(f"Created product {product.id} ({product.slug}) by {user.email}")
        return {"status": "success", "data": ProductOut.model_validate(product).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating product: {e}")
        raise HTTPException(status_code=500, detail="Failed to create product")


@router.patch("/{product_id}")
async def patch_product(
    product_id: int,
    payload: ProductUpdate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Partial update: only the fields present in the body change"""
    try:
        product = get_or_404(db, Product, product_id, "Product")

        fields = payload.model_dump(exclude_unset=True)
        for required in ("name", "slug", "price", "cost_price", "stock"):
            if required in fields and fields[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")

        _apply_fields(db, product, fields)
        db.commit()
        db.refresh(product)

        return {"status": "success", "data": ProductOut.model_validate(product).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update product")


@router.put("/{product_id}")
async def replace_product(
    product_id: int,
    payload: ProductCreate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Full update: every field is replaced (a blank barcode keeps the current one)"""
    try:
        product = get_or_404(db, Product, product_id, "Product")

        fields = payload.model_dump()
        if not fields.get("barcode"):
            fields.pop("barcode")

        _apply_fields(db, product, fields)
        db.commit()
        db.refresh(product)

        return {"status": "success", "data": ProductOut.model_validate(product).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error replacing product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update product")


@router.delete("/{product_id}")
async def remove_product(
    product_id: int,
    force: bool = Query(False, description="Also delete order and POS lines"),
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        product = get_or_404(db, Product, product_id, "Product")

        if not delete_product(db, product, force=force):
            raise HTTPException(
                status_code=400,
                detail="This product has order history. Deactivate it instead, or delete with force=true.",
            )

        db.commit()
        return {"status": "success", "message": "Product deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete product")
