"""
Integration tests for expenses, salesman management, the revenue dashboard,
image upload and the health endpoint

Author: DP Team
Date: 2025-06-10
"""
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch

from app.models import Order, POSSale, User
from app.models.common import utcnow


class TestExpensesApi:
    """Test /api/v1/expenses"""

    def _create(self, client, headers, amount=1500, **extra):
        body = {"amount": amount, "description": "Courier charges"}
        body.update(extra)
        return client.post("/api/v1/expenses", json=body, headers=headers)

    def test_salesman_sees_only_own(self, client, make_user, headers_for, admin_headers):
        # Arrange
        first, second = make_user("SALESMAN"), make_user("SALESMAN")
        self._create(client, headers_for(first), amount=1000)
        self._create(client, headers_for(second), amount=250)

        # Act
        own = client.get("/api/v1/expenses", headers=headers_for(first)).json()
        everything = client.get("/api/v1/expenses", headers=admin_headers).json()
        filtered = client.get("/api/v1/expenses", params={"user_id": second.id}, headers=admin_headers).json()

        # Assert
        assert own["total"] == 1
        assert own["total_amount"] == 1000.0
        assert everything["total_amount"] == 1250.0
        assert filtered["total"] == 1

    def test_date_range_includes_whole_last_day(self, client, salesman_headers):
        self._create(client, salesman_headers, expense_date="2025-06-01T18:30:00")
        self._create(client, salesman_headers, expense_date="2025-06-03T09:00:00")

        response = client.get("/api/v1/expenses", params={"from": "2025-06-01", "to": "2025-06-01"},
                              headers=salesman_headers)

        assert response.json()["total"] == 1

    def test_blank_description_is_400(self, client, salesman_headers):
        assert self._create(client, salesman_headers, description="  ").status_code == 400

    def test_other_salesman_cannot_touch(self, client, make_user, headers_for, admin_headers):
        owner, other = make_user("SALESMAN"), make_user("SALESMAN")
        expense_id = self._create(client, headers_for(owner)).json()["data"]["id"]

        assert client.get(f"/api/v1/expenses/{expense_id}", headers=headers_for(other)).status_code == 403
        assert client.put(
            f"/api/v1/expenses/{expense_id}", json={"amount": 1}, headers=headers_for(other)
        ).status_code == 403
        assert client.delete(f"/api/v1/expenses/{expense_id}", headers=admin_headers).status_code == 200

    def test_owner_updates_amount(self, client, salesman_headers):
        expense_id = self._create(client, salesman_headers).json()["data"]["id"]

        response = client.put(f"/api/v1/expenses/{expense_id}", json={"amount": 99.995}, headers=salesman_headers)

        assert response.json()["data"]["amount"] == 100.0

    def test_customers_are_forbidden(self, client, customer_headers):
        assert self._create(client, customer_headers).status_code == 403


@patch("app.api.salesmen.send_salesman_welcome", new_callable=AsyncMock)
class TestSalesmenApi:
    """Test /api/v1/admin/salesmen"""

    def _create(self, client, headers, **extra):
        body = {"email": "Ali@DoctorPlanet.com", "password": "counter123", "name": "Ali"}
        body.update(extra)
        return client.post("/api/v1/admin/salesmen", json=body, headers=headers)

    def test_create_sends_welcome(self, mock_welcome, client, db, admin_headers):
        response = self._create(client, admin_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "ali@doctorplanet.com"
        assert data["role"] == "SALESMAN"
        mock_welcome.assert_called_once()

    def test_short_password_is_400(self, mock_welcome, client, admin_headers):
        assert self._create(client, admin_headers, password="short").status_code == 400
        mock_welcome.assert_not_called()

    def test_duplicate_email_is_400(self, mock_welcome, client, admin_headers, customer):
        assert self._create(client, admin_headers, email=customer.email).status_code == 400

    def test_list_reports_sales_totals(self, mock_welcome, client, admin_headers, salesman_headers, salesman,
                                       make_product):
        product = make_product(price="700")
        client.post("/api/v1/pos/sales", json={"items": [{"product_id": product.id, "quantity": 2}]},
                    headers=salesman_headers)

        data = client.get("/api/v1/admin/salesmen", headers=admin_headers).json()["data"]

        row = next(s for s in data if s["id"] == salesman.id)
        assert row["total_sales"] == 1
        assert row["total_revenue"] == 1400.0

    def test_delete_with_sales_deactivates(self, mock_welcome, client, db, admin_headers, salesman_headers,
                                           salesman, make_product):
        product = make_product()
        client.post("/api/v1/pos/sales", json={"items": [{"product_id": product.id, "quantity": 1}]},
                    headers=salesman_headers)

        response = client.delete(f"/api/v1/admin/salesmen/{salesman.id}", headers=admin_headers)

        assert "deactivated" in response.json()["message"]
        db.expire_all()
        assert db.get(User, salesman.id).is_active is False

    def test_delete_without_sales_removes(self, mock_welcome, client, db, admin_headers, salesman):
        client.delete(f"/api/v1/admin/salesmen/{salesman.id}", headers=admin_headers)

        db.expire_all()
        assert db.get(User, salesman.id) is None

    def test_customer_id_is_not_a_salesman(self, mock_welcome, client, admin_headers, customer):
        assert client.get(f"/api/v1/admin/salesmen/{customer.id}", headers=admin_headers).status_code == 404


class TestRevenueApi:
    """Test /api/v1/admin/revenue"""

    def _order(self, db, user, total, status, created_at=None):
        order = Order(
            order_number=f"DP-TEST-{status}-{total}",
            user_id=user.id,
            subtotal=Decimal(total),
            shipping_fee=Decimal("0"),
            discount=Decimal("0"),
            total=Decimal(total),
            status=status,
            payment_status="PENDING",
            payment_method="COD",
            shipping_address={"city": "Lahore"},
        )
        if created_at is not None:
            order.created_at = created_at
        db.add(order)
        db.commit()
        return order

    def _pos(self, db, salesman, total, is_returned=False, receipt="POS-20250601-0001"):
        sale = POSSale(
            receipt_number=receipt,
            salesman_id=salesman.id,
            subtotal=Decimal(total),
            discount=Decimal("0"),
            total=Decimal(total),
            payment_method="CASH",
            is_returned=is_returned,
        )
        db.add(sale)
        db.commit()
        return sale

    def test_combines_web_and_pos(self, client, db, admin_headers, customer, salesman):
        # Arrange
        self._order(db, customer, "3000", "DELIVERED")
        self._order(db, customer, "2000", "SHIPPED")
        self._order(db, customer, "9000", "CANCELLED")
        self._pos(db, salesman, "1500")
        self._pos(db, salesman, "800", is_returned=True, receipt="POS-20250601-0002")

        # Act
        data = client.get("/api/v1/admin/revenue", headers=admin_headers).json()["data"]

        # Assert
        assert data["web_orders"]["revenue"] == 5000.0
        assert data["web_orders"]["count"] == 2
        assert data["web_orders"]["delivered"] == {"revenue": 3000.0, "count": 1}
        assert data["web_orders"]["pending"] == 1
        assert data["pos_sales"] == {"revenue": 1500.0, "count": 1}
        assert data["combined"] == {"revenue": 6500.0, "transactions": 3}

    def test_period_excludes_older_orders(self, client, db, admin_headers, customer):
        self._order(db, customer, "1000", "PENDING")
        self._order(db, customer, "4000", "PENDING", created_at=utcnow() - timedelta(days=30))

        data = client.get("/api/v1/admin/revenue", params={"period": "week"}, headers=admin_headers).json()["data"]

        assert data["web_orders"]["revenue"] == 1000.0
        assert data["today"]["web_orders"]["count"] == 1

    def test_invalid_period_is_400(self, client, admin_headers):
        response = client.get("/api/v1/admin/revenue", params={"period": "decade"}, headers=admin_headers)

        assert response.status_code == 400

    def test_salesman_is_forbidden(self, client, salesman_headers):
        assert client.get("/api/v1/admin/revenue", headers=salesman_headers).status_code == 403


class TestUploadApi:
    """Test /api/v1/upload"""

    @patch("app.api.upload.upload_image", return_value="https://cdn.example.com/products/a.png")
    def test_upload_returns_url(self, mock_upload, client, salesman_headers):
        response = client.post(
            "/api/v1/upload",
            files={"file": ("a.png", b"\x89PNG data", "image/png")},
            data={"folder": "products"},
            headers=salesman_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["url"] == "https://cdn.example.com/products/a.png"
        mock_upload.assert_called_once_with(b"\x89PNG data", "image/png", "products")

    def test_rejects_non_images(self, client, salesman_headers):
        response = client.post(
            "/api/v1/upload", files={"file": ("a.pdf", b"%PDF", "application/pdf")}, headers=salesman_headers
        )

        assert response.status_code == 400

    def test_rejects_empty_file(self, client, salesman_headers):
        response = client.post("/api/v1/upload", files={"file": ("a.png", b"", "image/png")}, headers=salesman_headers)

        assert response.status_code == 400

    def test_unconfigured_storage_is_503(self, client, salesman_headers):
        response = client.post(
            "/api/v1/upload", files={"file": ("a.png", b"\x89PNG", "image/png")}, headers=salesman_headers
        )

        assert response.status_code == 503

    def test_customers_are_forbidden(self, client, customer_headers):
        response = client.post(
            "/api/v1/upload", files={"file": ("a.png", b"\x89PNG", "image/png")}, headers=customer_headers
        )

        assert response.status_code == 403


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "online"

    def test_health_reports_database(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["database"]["status"] == "connected"
