"""
Catalog API Endpoints
Public product listing, product detail and search suggestions

Author: DP Team
Date: 2025-06-03
"""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.domain.catalog import Category, Product, ProductSummary
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

products_router = APIRouter()
search_router = APIRouter()

MIN_SEARCH_LENGTH = 2


@products_router.get("")
async def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    search: Optional[str] = Query(None, description="Search in name and description"),
    featured: Optional[bool] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    sort: str = Query("newest", description="newest, oldest, price_asc, price_desc or name"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Active products with optional filters"""
    try:
        repo = ProductRepository(db)
        products, total = repo.find_all(
            category_slug=category,
            search=search,
            featured=featured,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            limit=limit,
            offset=offset,
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [Product.model_validate(p).to_dict() for p in products],
        }

    except Exception as e:
        logger.exception(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@products_router.get("/{slug}")
async def get_product(slug: str, db: Session = Depends(get_db)):
    try:
        product = ProductRepository(db).find_by_slug(slug)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product {slug} not found")

        return {"status": "success", "data": Product.model_validate(product).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error fetching product {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")


@search_router.get("")
async def search_suggestions(q: str = Query("", description="Search term"), db: Session = Depends(get_db)):
    """
    Search-as-you-type suggestions

    Returns at most 6 products and 4 categories; terms shorter than two
    characters return nothing.
    """
    term = (q or "").strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return {"status": "success", "data": {"products": [], "categories": []}}

    try:
        found = ProductRepository(db).suggestions(term)
        return {
            "status": "success",
            "data": {
                "products": [ProductSummary.model_validate(p).to_dict() for p in found["products"]],
                "categories": [Category.model_validate(c).to_dict() for c in found["categories"]],
            },
        }

    except Exception as e:
        logger.exception(f"Error searching for '{term}': {e}")
        raise HTTPException(status_code=500, detail="Failed to search")
