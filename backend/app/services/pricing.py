"""
Pricing Service
Effective unit prices, global discount window, deal proration and shipping

Author: DP Team
Date: 2025-06-06
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models import Deal, GlobalDiscount, Product, SiteSettings
from app.models.common import CENTS, to_money, utcnow
from app.models.content import SITE_SETTINGS_ID
from app.models.marketing import GLOBAL_DISCOUNT_ID

DEFAULT_FREE_SHIPPING_MINIMUM = Decimal("5000")
DEFAULT_SHIPPING_FEE = Decimal("500")


def is_discount_live(discount: Optional[GlobalDiscount], now: Optional[datetime] = None) -> bool:
    """True when the discount is switched on and `now` is inside its date window"""
    if discount is None or not discount.is_active:
        return False

    now = now or utcnow()
    if discount.start_date and now < discount.start_date:
        return False
    if discount.end_date and now > discount.end_date:
        return False
    return True


def active_discount_percentage(db: Session, now: Optional[datetime] = None) -> float:
    """Percentage of the live global discount, 0 when none applies"""
    discount = db.get(GlobalDiscount, GLOBAL_DISCOUNT_ID)
    if not is_discount_live(discount, now):
        return 0.0
    return float(discount.percentage or 0)


def effective_price(product: Product, discount_pct: float = 0.0) -> Decimal:
    """
    Unit price a customer pays for a product

    The global discount applies to the list price and overrides sale_price.
    Without it the sale price wins when set.
    """
    if discount_pct > 0:
        factor = (Decimal("100") - Decimal(str(discount_pct))) / Decimal("100")
        return to_money(Decimal(product.price) * factor)

    if product.sale_price is not None:
        return to_money(product.sale_price)
    return to_money(product.price)


def deal_original_price(deal_items: List[tuple], discount_pct: float = 0.0) -> Decimal:
    """Sum of effective price x quantity over (product, quantity) pairs"""
    total = Decimal("0")
    for product, quantity in deal_items:
        total += effective_price(product, discount_pct) * quantity
    return to_money(total)


def prorate_deal(deal: Deal) -> dict:
    """
    Spread the deal price over its items

    Each product gets a unit price proportional to its list price; rounding
    leftovers go to the last item so the lines add up to deal_price exactly.

    Returns:
        {product_id: unit_price}
    """
    items = list(deal.items)
    deal_price = to_money(deal.deal_price)
    base_total = sum(Decimal(item.product.price) * item.quantity for item in items)

    unit_prices = {}
    allocated = Decimal("0")

    for index, item in enumerate(items):
        if index == len(items) - 1:
            line_total = deal_price - allocated
        elif base_total > 0:
            share = Decimal(item.product.price) * item.quantity / base_total
            line_total = to_money(deal_price * share)
        else:
            line_total = to_money(deal_price / len(items))

        allocated += line_total
        unit_prices[item.product_id] = (line_total / item.quantity).quantize(CENTS)

    return unit_prices


def get_shipping_rules(db: Session) -> tuple:
    """(free_shipping_minimum, shipping_fee) from site settings or defaults"""
    site = db.get(SiteSettings, SITE_SETTINGS_ID)
    if site is None:
        return DEFAULT_FREE_SHIPPING_MINIMUM, DEFAULT_SHIPPING_FEE
    return to_money(site.free_shipping_minimum), to_money(site.shipping_fee)


def shipping_fee_for(subtotal: Decimal, free_minimum: Decimal, fee: Decimal) -> Decimal:
    if subtotal >= free_minimum:
        return Decimal("0.00")
    return to_money(fee)


def is_deal_live(deal: Deal, now: Optional[datetime] = None) -> bool:
    """Active and inside its optional start/end window"""
    if not deal.is_active:
        return False
    now = now or utcnow()
    if deal.start_date and now < deal.start_date:
        return False
    if deal.end_date and now > deal.end_date:
        return False
    return True
