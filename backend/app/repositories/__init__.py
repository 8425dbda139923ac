"""
Repository Layer - Data Access

Repositories centralize catalog and order queries over the SQLAlchemy session.

Author: DP Team
Date: 2025-06-03
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.order_repository import OrderRepository

__all__ = ['ProductRepository', 'OrderRepository']
