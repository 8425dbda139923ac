"""
Catalog Service
Slugs, barcodes and safe product deletion
"""
import logging
import random
import re
import string
import time
from typing import Callable, List

from sqlalchemy.orm import Session

from app.models import CartItem, DealItem, OrderItem, POSSaleItem, Product, WishlistItem

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def random_code(length: int = 4) -> str:
    return "".join(random.choices(_BASE36, k=length))


def time_code() -> str:
    """Current time in milliseconds, base36"""
    return to_base36(int(time.time() * 1000))


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "item"


def unique_slug(base: str, exists: Callable[[str], bool]) -> str:
    """`base`, or `base-2`, `base-3`... whichever is free first"""
    slug = base
    suffix = 2
    while exists(slug):
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug


def generate_barcode(db: Session) -> str:
    """DP<base36 time><4 random>, retried until unused"""
    while True:
        code = f"DP{time_code()}{random_code()}"
        if not db.query(Product.id).filter(Product.barcode == code).first():
            return code


def assign_missing_barcodes(db: Session, product_ids: List[int] = None) -> List[Product]:
    """Give a generated barcode to every selected product that has none"""
    query = db.query(Product).filter((Product.barcode.is_(None)) | (Product.barcode == ""))
    if product_ids:
        query = query.filter(Product.id.in_(product_ids))

    updated = []
    for product in query.all():
        product.barcode = generate_barcode(db)
        # Flush so the next generated code sees this one as taken
        db.flush()
        updated.append(product)

    logger.info(f"Generated barcodes for {len(updated)} products")
    return updated


def has_order_history(db: Session, product_id: int) -> bool:
    in_orders = db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
    in_pos = db.query(POSSaleItem.id).filter(POSSaleItem.product_id == product_id).first()
    return bool(in_orders or in_pos)


def delete_product(db: Session, product: Product, force: bool = False) -> bool:
    """
    Delete a product

    Cart, wishlist and deal references always go. With order or POS history
    the delete is refused unless `force`, which removes those lines too.

    Returns:
        False when refused because of order history
    """
    if has_order_history(db, product.id):
        if not force:
            return False
        db.query(OrderItem).filter(OrderItem.product_id == product.id).delete(synchronize_session=False)
        db.query(POSSaleItem).filter(POSSaleItem.product_id == product.id).delete(synchronize_session=False)

    db.query(CartItem).filter(CartItem.product_id == product.id).delete(synchronize_session=False)
    db.query(WishlistItem).filter(WishlistItem.product_id == product.id).delete(synchronize_session=False)
    db.query(DealItem).filter(DealItem.product_id == product.id).delete(synchronize_session=False)
    db.delete(product)

    logger.info(f"Deleted product {product.id} (force={force})")
    return True
