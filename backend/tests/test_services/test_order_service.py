"""
Tests for OrderService: checkout pricing, stock checks, transitions and returns
"""
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.domain.order import CheckoutItem, CheckoutRequest, ShippingAddress
from app.models import CartItem, Deal, DealItem, GlobalDiscount, Notification, SiteSettings
from app.models.common import utcnow
from app.services.errors import CheckoutError, StatusTransitionError
from app.services.order_service import OrderService, check_full_bundle, generate_order_number, validate_transition


def _request(items=None):
    return CheckoutRequest(
        items=items,
        shipping_address=ShippingAddress(name="Dr. Khan", phone="0300", address="12 Clinic Road", city="Lahore"),
    )


class TestTransitions:
    """Test the order status graph"""

    def test_forward_transition_allowed(self):
        order = SimpleNamespace(is_returned=False, status="PENDING")
        validate_transition(order, "CONFIRMED")

    def test_skipping_to_shipped_from_pending_rejected(self):
        order = SimpleNamespace(is_returned=False, status="PENDING")
        with pytest.raises(StatusTransitionError):
            validate_transition(order, "SHIPPED")

    def test_terminal_statuses(self):
        for status in ("DELIVERED", "CANCELLED"):
            order = SimpleNamespace(is_returned=False, status=status)
            with pytest.raises(StatusTransitionError):
                validate_transition(order, "PROCESSING")

    def test_returned_order_is_frozen(self):
        order = SimpleNamespace(is_returned=True, status="PENDING")
        with pytest.raises(StatusTransitionError, match="Returned"):
            validate_transition(order, "CONFIRMED")

    def test_order_number_format(self):
        number = generate_order_number()
        assert number.startswith("DP-")
        assert len(number.split("-")) == 3


class TestCheckout:
    """Test OrderService.checkout against the database"""

    def test_checkout_prices_server_side_and_decrements_stock(self, db, customer, make_product):
        # Arrange
        product = make_product(price="1000", sale_price="800", stock=5)

        # Act
        order = OrderService(db).checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=2)]))

        # Assert
        db.refresh(product)
        assert order.subtotal == Decimal("1600.00")
        assert order.shipping_fee == Decimal("500.00")
        assert order.total == Decimal("2100.00")
        assert order.status == "PENDING"
        assert order.items[0].price == Decimal("800.00")
        assert product.stock == 3

    def test_checkout_free_shipping_above_minimum(self, db, customer, make_product):
        db.add(SiteSettings(id="main", free_shipping_minimum=Decimal("1000"), shipping_fee=Decimal("250")))
        db.commit()
        product = make_product(price="1200", stock=5)

        order = OrderService(db).checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=1)]))

        assert order.shipping_fee == Decimal("0.00")
        assert order.total == Decimal("1200.00")

    def test_global_discount_recorded_on_order(self, db, customer, make_product):
        db.add(GlobalDiscount(id="main", is_active=True, percentage=10))
        db.commit()
        product = make_product(price="1000", sale_price="700", stock=5)

        order = OrderService(db).checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=1)]))

        assert order.items[0].price == Decimal("900.00")
        assert order.discount == Decimal("100.00")

    def test_insufficient_stock_rejected(self, db, customer, make_product):
        product = make_product(stock=1)

        with pytest.raises(CheckoutError, match="Insufficient stock"):
            OrderService(db).checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=2)]))

    def test_matrix_cell_stock_checked(self, db, customer, make_product):
        product = make_product(stock=3, color_size_stock={"Navy": {"M": 1, "L": 2}})
        line = CheckoutItem(product_id=product.id, quantity=2, size="M", color="Navy")

        with pytest.raises(CheckoutError):
            OrderService(db).checkout(customer, _request([line]))

    def test_incomplete_profile_rejected(self, db, make_user, make_product):
        user = make_user(complete_profile=False)
        product = make_product()

        with pytest.raises(CheckoutError, match="profile"):
            OrderService(db).checkout(user, _request([CheckoutItem(product_id=product.id, quantity=1)]))

    def test_checkout_from_cart_clears_cart(self, db, customer, make_product):
        product = make_product(stock=5)
        db.add(CartItem(user_id=customer.id, product_id=product.id, quantity=2))
        db.commit()

        order = OrderService(db).checkout(customer, _request())

        assert len(order.items) == 1
        assert db.query(CartItem).filter(CartItem.user_id == customer.id).count() == 0

    def test_empty_cart_rejected(self, db, customer):
        with pytest.raises(CheckoutError, match="empty"):
            OrderService(db).checkout(customer, _request())

    def test_notifications_raised(self, db, customer, make_product):
        """An order notification, plus a low-stock alert when stock drops to the threshold"""
        product = make_product(stock=6)

        OrderService(db).checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=2)]))

        types = {n.type for n in db.query(Notification).all()}
        assert types == {"ORDER_PLACED", "LOW_STOCK"}


@pytest.fixture
def kit(db, make_product):
    """Lab coat (1000) and scrub suit (3000) sold together for 2000"""
    coat = make_product(name="Lab Coat", price="1000", stock=20)
    scrubs = make_product(name="Scrub Suit", price="3000", stock=20)
    deal = Deal(name="Kit", slug="kit", deal_price=Decimal("2000"), original_price=Decimal("4000"))
    deal.items = [DealItem(product_id=coat.id, quantity=1), DealItem(product_id=scrubs.id, quantity=1)]
    db.add(deal)
    db.commit()
    db.refresh(deal)
    return SimpleNamespace(deal=deal, coat=coat, scrubs=scrubs)


def _kit_lines(kit, coats=1, scrubs=1):
    lines = []
    if coats:
        lines.append(CheckoutItem(product_id=kit.coat.id, quantity=coats, deal_id=kit.deal.id))
    if scrubs:
        lines.append(CheckoutItem(product_id=kit.scrubs.id, quantity=scrubs, deal_id=kit.deal.id))
    return lines


class TestBundleCount:
    def _deal(self, **per_bundle):
        return SimpleNamespace(
            name="Kit",
            items=[SimpleNamespace(product_id=int(pid[1:]), quantity=qty) for pid, qty in per_bundle.items()],
        )

    def test_counts_whole_bundles(self):
        assert check_full_bundle(self._deal(p1=2, p2=1), {1: 4, 2: 2}) == 2

    def test_missing_product_rejected(self):
        with pytest.raises(CheckoutError, match="complete bundle"):
            check_full_bundle(self._deal(p1=1, p2=1), {2: 10})

    def test_uneven_counts_rejected(self):
        with pytest.raises(CheckoutError):
            check_full_bundle(self._deal(p1=1, p2=1), {1: 1, 2: 2})

    def test_fraction_of_a_bundle_rejected(self):
        with pytest.raises(CheckoutError):
            check_full_bundle(self._deal(p1=2, p2=1), {1: 1, 2: 1})


class TestDealCheckout:
    """Checkout of deal lines"""

    def test_full_bundle_is_priced_at_deal_price(self, db, customer, kit):
        # Act
        order = OrderService(db).checkout(customer, _request(_kit_lines(kit)))

        # Assert
        prices = {item.product_id: item.price for item in order.items}
        assert prices == {kit.coat.id: Decimal("500.00"), kit.scrubs.id: Decimal("1500.00")}
        assert order.subtotal == Decimal("2000.00")
        assert order.total == Decimal("2500.00")
        assert all(item.deal_id == kit.deal.id for item in order.items)

        db.refresh(kit.coat)
        assert kit.coat.stock == 19

    def test_several_bundles(self, db, customer, kit):
        order = OrderService(db).checkout(customer, _request(_kit_lines(kit, coats=3, scrubs=3)))

        assert order.subtotal == Decimal("6000.00")

    def test_partial_bundle_rejected(self, db, customer, kit):
        with pytest.raises(CheckoutError, match="complete bundle"):
            OrderService(db).checkout(customer, _request(_kit_lines(kit, coats=0, scrubs=10)))

        db.refresh(kit.scrubs)
        assert kit.scrubs.stock == 20

    def test_mismatched_bundle_counts_rejected(self, db, customer, kit):
        with pytest.raises(CheckoutError):
            OrderService(db).checkout(customer, _request(_kit_lines(kit, coats=1, scrubs=4)))

    def test_expired_deal_rejected(self, db, customer, kit):
        kit.deal.end_date = utcnow() - timedelta(days=1)
        db.commit()

        with pytest.raises(CheckoutError, match="no longer available"):
            OrderService(db).checkout(customer, _request(_kit_lines(kit)))

    def test_inactive_deal_rejected(self, db, customer, kit):
        kit.deal.is_active = False
        db.commit()

        with pytest.raises(CheckoutError, match="no longer available"):
            OrderService(db).checkout(customer, _request(_kit_lines(kit)))

    def test_deal_lines_from_cart(self, db, customer, kit, make_product):
        extra = make_product(price="700", stock=5)
        db.add_all([
            CartItem(user_id=customer.id, product_id=kit.coat.id, quantity=2, deal_id=kit.deal.id),
            CartItem(user_id=customer.id, product_id=kit.scrubs.id, quantity=2, deal_id=kit.deal.id),
            CartItem(user_id=customer.id, product_id=extra.id, quantity=1),
        ])
        db.commit()

        order = OrderService(db).checkout(customer, _request())

        assert order.subtotal == Decimal("4700.00")
        assert len(order.items) == 3
        assert db.query(CartItem).filter(CartItem.user_id == customer.id).count() == 0


class TestReturns:
    """Test OrderService.return_order"""

    def test_return_restores_stock_once(self, db, customer, make_product):
        # Arrange
        product = make_product(stock=5)
        service = OrderService(db)
        order = service.checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=3)]))

        # Act
        service.return_order(order, "Wrong size", "admin@example.com")

        # Assert
        db.refresh(product)
        assert product.stock == 5
        assert order.is_returned is True
        assert order.status == "CANCELLED"

        with pytest.raises(StatusTransitionError, match="already returned"):
            service.return_order(order, "Again", "admin@example.com")

        db.refresh(product)
        assert product.stock == 5

    def test_return_requires_reason(self, db, customer, make_product):
        product = make_product(stock=5)
        service = OrderService(db)
        order = service.checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=1)]))

        with pytest.raises(StatusTransitionError, match="reason"):
            service.return_order(order, "   ", "admin@example.com")

    def test_update_status_reports_change(self, db, customer, make_product):
        product = make_product(stock=5)
        service = OrderService(db)
        order = service.checkout(customer, _request([CheckoutItem(product_id=product.id, quantity=1)]))

        assert service.update_status(order, "CONFIRMED") is True
        assert service.update_status(order, "CONFIRMED", payment_status="PAID") is False
        assert order.payment_status == "PAID"
