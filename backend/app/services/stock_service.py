"""
Stock Service
Adjusts product stock, either per color/size cell or on the aggregate

A product with a color-size matrix keeps `stock` equal to the sum of all
cells after every change made here.

Author: DP Team
Date: 2025-06-03
"""
import copy
import logging
from typing import Optional

from app.models import Product

logger = logging.getLogger(__name__)


def matrix_total(matrix: Optional[dict]) -> int:
    """Sum every cell of a color -> size -> quantity matrix"""
    if not matrix:
        return 0
    return sum(
        int(qty or 0)
        for sizes in matrix.values()
        if isinstance(sizes, dict)
        for qty in sizes.values()
    )


def _has_cell(product: Product, size: Optional[str], color: Optional[str]) -> bool:
    matrix = product.color_size_stock
    if not matrix or not size or not color:
        return False
    sizes = matrix.get(color)
    return isinstance(sizes, dict) and size in sizes


def available_stock(product: Product, size: Optional[str] = None, color: Optional[str] = None) -> int:
    """
    Stock available for a product variant

    Returns the matrix cell when the product tracks that color and size,
    otherwise the aggregate stock.
    """
    if _has_cell(product, size, color):
        return int(product.color_size_stock[color][size] or 0)
    return int(product.stock or 0)


def adjust_stock(
    product: Product,
    delta: int,
    size: Optional[str] = None,
    color: Optional[str] = None
) -> int:
    """
    Change stock by `delta` (negative for sales, positive for returns)

    Args:
        product: Product row (mutated in place, not committed)
        delta: Quantity to add
        size: Variant size, if any
        color: Variant color, if any

    Returns:
        New aggregate stock
    """
    if _has_cell(product, size, color):
        # Fresh dict so SQLAlchemy sees the JSON column change
        matrix = copy.deepcopy(product.color_size_stock)
        matrix[color][size] = max(0, int(matrix[color][size] or 0) + delta)
        product.color_size_stock = matrix
        product.stock = matrix_total(matrix)
    else:
        product.stock = max(0, int(product.stock or 0) + delta)

    logger.debug(
        f"Stock for product {product.id} adjusted by {delta} "
        f"(size={size}, color={color}) -> {product.stock}"
    )
    return product.stock
