"""
Database models
"""
from .user import User
from .catalog import Category, Product, CartItem, WishlistItem
from .order import Order, OrderItem
from .pos import POSSale, POSSaleItem
from .credit import Shop, UdharTransaction, UdharPayment
from .marketing import GlobalDiscount, Deal, DealItem, HeroBanner, PromoBanner
from .content import Page, SiteSettings, Testimonial, BillSettings, TeamMember
from .engagement import Notification, ContactMessage, Subscriber
from .expense import Expense

__all__ = [
    "User",
    "Category",
    "Product",
    "CartItem",
    "WishlistItem",
    "Order",
    "OrderItem",
    "POSSale",
    "POSSaleItem",
    "Shop",
    "UdharTransaction",
    "UdharPayment",
    "GlobalDiscount",
    "Deal",
    "DealItem",
    "HeroBanner",
    "PromoBanner",
    "Page",
    "SiteSettings",
    "Testimonial",
    "BillSettings",
    "TeamMember",
    "Notification",
    "ContactMessage",
    "Subscriber",
    "Expense",
]
