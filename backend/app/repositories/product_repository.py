"""
Product Repository - Data Access Layer for Products

Handles catalog queries over the SQLAlchemy session.

Author: DP Team
Date: 2025-06-03
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.models import Category, Product

SORT_OPTIONS = {
    "newest": Product.created_at.desc(),
    "oldest": Product.created_at.asc(),
    "price_asc": Product.price.asc(),
    "price_desc": Product.price.desc(),
    "name": Product.name.asc(),
}


class ProductRepository:
    """
    Repository for Product data access

    All catalog queries are centralized here. Returns ORM rows; routes
    serialize them with the domain models.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def find_by_slug(self, slug: str, active_only: bool = True) -> Optional[Product]:
        query = self.db.query(Product).options(joinedload(Product.category)).filter(Product.slug == slug)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.first()

    def find_by_code(self, code: str) -> Optional[Product]:
        """
        Find an active product by barcode or SKU

        Args:
            code: Scanned barcode or typed SKU

        Returns:
            Product or None if not found
        """
        return (
            self.db.query(Product)
            .filter(Product.is_active.is_(True))
            .filter(or_(Product.barcode == code, Product.sku == code))
            .first()
        )

    def find_all(
        self,
        category_slug: Optional[str] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        is_active: Optional[bool] = True,
        sort: str = "newest",
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category_slug: Only products in this category
            search: Case-insensitive match on name or description
            featured: Filter by featured flag
            min_price / max_price: Price range (list price)
            is_active: Filter by active status (None for all)
            sort: newest, oldest, price_asc, price_desc or name
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (products, total_count)
        """
        query = self.db.query(Product).options(joinedload(Product.category))

        if is_active is not None:
            query = query.filter(Product.is_active.is_(is_active))
        if category_slug:
            query = query.join(Category, Product.category_id == Category.id).filter(Category.slug == category_slug)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Product.name).like(pattern),
                func.lower(Product.description).like(pattern),
            ))
        if featured is not None:
            query = query.filter(Product.featured.is_(featured))
        if min_price is not None:
            query = query.filter(Product.price >= min_price)
        if max_price is not None:
            query = query.filter(Product.price <= max_price)

        total = query.count()
        products = (
            query.order_by(SORT_OPTIONS.get(sort, SORT_OPTIONS["newest"]), Product.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return products, total

    def suggestions(self, term: str, product_limit: int = 6, category_limit: int = 4) -> dict:
        """Search-as-you-type matches on product and category names"""
        pattern = f"%{term.lower()}%"
        products = (
            self.db.query(Product)
            .filter(Product.is_active.is_(True), func.lower(Product.name).like(pattern))
            .order_by(Product.featured.desc(), Product.name.asc())
            .limit(product_limit)
            .all()
        )
        categories = (
            self.db.query(Category)
            .filter(func.lower(Category.name).like(pattern))
            .order_by(Category.name.asc())
            .limit(category_limit)
            .all()
        )
        return {"products": products, "categories": categories}

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Product.id).filter(Product.slug == slug)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def barcode_exists(self, barcode: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Product.id).filter(Product.barcode == barcode)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None
