"""
Domain Layer - Request and response models

Pydantic models validating request bodies and serializing ORM rows.

Author: DP Team
Date: 2025-06-02
"""
from app.domain.base import DomainModel, to_jsonable
from app.domain.user import User, Salesman
from app.domain.catalog import Category, Product, ProductSummary
from app.domain.order import Order, OrderItem
from app.domain.pos import POSSale, POSSaleItem
from app.domain.credit import Shop, UdharTransaction, UdharPayment
from app.domain.marketing import GlobalDiscount, Deal, DealItem, HeroBanner, PromoBanner
from app.domain.content import Page, SiteSettings, Testimonial, BillSettings, TeamMember
from app.domain.engagement import Notification, ContactMessage, Subscriber
from app.domain.expense import Expense
from app.domain.cart import CartItem, WishlistItem

__all__ = [
    'DomainModel', 'to_jsonable',
    'User', 'Salesman',
    'Category', 'Product', 'ProductSummary',
    'Order', 'OrderItem',
    'POSSale', 'POSSaleItem',
    'Shop', 'UdharTransaction', 'UdharPayment',
    'GlobalDiscount', 'Deal', 'DealItem', 'HeroBanner', 'PromoBanner',
    'Page', 'SiteSettings', 'Testimonial', 'BillSettings', 'TeamMember',
    'Notification', 'ContactMessage', 'Subscriber',
    'Expense',
    'CartItem', 'WishlistItem',
]
