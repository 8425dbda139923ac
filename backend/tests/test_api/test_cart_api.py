"""
Integration tests for cart, wishlist, deals and the global discount

Author: DP Team
Date: 2025-06-10
"""
import pytest


@pytest.fixture
def bundle(client, admin_headers, make_product):
    """A live two-product deal: 1000 + 3000 sold for 3000"""
    coat = make_product(name="Lab Coat", price="1000")
    scrubs = make_product(name="Scrub Suit", price="3000")
    response = client.post("/api/v1/admin/deals", json={
        "name": "Starter Kit",
        "deal_price": 3000,
        "items": [{"product_id": coat.id}, {"product_id": scrubs.id}],
    }, headers=admin_headers)
    return response.json()["data"]


class TestCartApi:
    """Test /api/v1/cart"""

    def test_identical_lines_merge(self, client, customer_headers, make_product):
        product = make_product(price="1200")

        client.post("/api/v1/cart", json={"product_id": product.id, "size": "M"}, headers=customer_headers)
        response = client.post(
            "/api/v1/cart", json={"product_id": product.id, "size": "M", "quantity": 2}, headers=customer_headers
        )

        data = response.json()["data"]
        assert len(data["items"]) == 1
        assert data["item_count"] == 3
        assert data["total"] == 3600.0

    def test_different_size_is_new_line(self, client, customer_headers, make_product):
        product = make_product()

        client.post("/api/v1/cart", json={"product_id": product.id, "size": "M"}, headers=customer_headers)
        response = client.post("/api/v1/cart", json={"product_id": product.id, "size": "L"}, headers=customer_headers)

        assert len(response.json()["data"]["items"]) == 2

    def test_inactive_product_is_404(self, client, customer_headers, make_product):
        product = make_product(is_active=False)

        response = client.post("/api/v1/cart", json={"product_id": product.id}, headers=customer_headers)

        assert response.status_code == 404

    def test_zero_quantity_removes_line(self, client, customer_headers, make_product):
        product = make_product()
        item_id = client.post(
            "/api/v1/cart", json={"product_id": product.id}, headers=customer_headers
        ).json()["data"]["items"][0]["id"]

        response = client.put(f"/api/v1/cart/{item_id}", json={"quantity": 0}, headers=customer_headers)

        assert response.json()["data"]["items"] == []

    def test_other_users_line_is_404(self, client, make_user, headers_for, make_product):
        owner, other = make_user(), make_user()
        product = make_product()
        item_id = client.post(
            "/api/v1/cart", json={"product_id": product.id}, headers=headers_for(owner)
        ).json()["data"]["items"][0]["id"]

        response = client.delete(f"/api/v1/cart/{item_id}", headers=headers_for(other))

        assert response.status_code == 404

    def test_sale_price_is_used(self, client, customer_headers, make_product):
        product = make_product(price="2000", sale_price="1500")

        response = client.post("/api/v1/cart", json={"product_id": product.id}, headers=customer_headers)

        assert response.json()["data"]["items"][0]["unit_price"] == 1500.0

    def test_global_discount_overrides_sale_price(self, client, admin_headers, customer_headers, make_product):
        product = make_product(price="2000", sale_price="1500")
        client.put("/api/v1/admin/global-discount", json={"is_active": True, "percentage": 10}, headers=admin_headers)

        response = client.post("/api/v1/cart", json={"product_id": product.id}, headers=customer_headers)

        assert response.json()["data"]["items"][0]["unit_price"] == 1800.0

    def test_requires_login(self, client):
        assert client.get("/api/v1/cart").status_code == 401


class TestCartDeals:
    def test_deal_lines_add_up_to_deal_price(self, client, customer_headers, bundle):
        response = client.post("/api/v1/cart/deal", json={"deal_id": bundle["id"]}, headers=customer_headers)

        data = response.json()["data"]
        assert len(data["items"]) == 2
        assert all(item["deal_id"] == bundle["id"] for item in data["items"])
        assert data["total"] == 3000.0

    def test_changing_one_line_rescales_the_deal(self, client, customer_headers, bundle):
        items = client.post(
            "/api/v1/cart/deal", json={"deal_id": bundle["id"]}, headers=customer_headers
        ).json()["data"]["items"]

        response = client.put(f"/api/v1/cart/{items[0]['id']}", json={"quantity": 2}, headers=customer_headers)

        data = response.json()["data"]
        assert [item["quantity"] for item in data["items"]] == [2, 2]
        assert data["total"] == 6000.0

    def test_removing_one_line_removes_the_deal(self, client, customer_headers, bundle):
        items = client.post(
            "/api/v1/cart/deal", json={"deal_id": bundle["id"]}, headers=customer_headers
        ).json()["data"]["items"]

        response = client.delete(f"/api/v1/cart/{items[1]['id']}", headers=customer_headers)

        assert response.json()["data"]["items"] == []

    def test_inactive_deal_is_404(self, client, admin_headers, customer_headers, bundle):
        client.put(f"/api/v1/admin/deals/{bundle['id']}", json={"is_active": False}, headers=admin_headers)

        response = client.post("/api/v1/cart/deal", json={"deal_id": bundle["id"]}, headers=customer_headers)

        assert response.status_code == 404


class TestDealsApi:
    """Test deal administration and the public listing"""

    def test_created_deal_reports_savings(self, bundle):
        assert bundle["slug"] == "starter-kit"
        assert bundle["original_price"] == 4000.0
        assert bundle["savings"] == 1000.0

    def test_needs_two_products(self, client, admin_headers, make_product):
        product = make_product()

        response = client.post("/api/v1/admin/deals", json={
            "name": "Solo", "deal_price": 500, "items": [{"product_id": product.id}],
        }, headers=admin_headers)

        assert response.status_code == 400

    def test_repeated_product_is_rejected(self, client, admin_headers, make_product):
        a, b = make_product(), make_product()

        response = client.post("/api/v1/admin/deals", json={
            "name": "Double Up",
            "deal_price": 1500,
            "items": [{"product_id": a.id}, {"product_id": b.id}, {"product_id": a.id, "quantity": 2}],
        }, headers=admin_headers)

        assert response.status_code == 400
        assert "only once" in response.json()["detail"]

    def test_duplicate_name_gets_suffixed_slug(self, client, admin_headers, make_product, bundle):
        a, b = make_product(), make_product()

        response = client.post("/api/v1/admin/deals", json={
            "name": "Starter Kit", "deal_price": 900, "items": [{"product_id": a.id}, {"product_id": b.id}],
        }, headers=admin_headers)

        assert response.json()["data"]["slug"] != bundle["slug"]

    def test_public_listing_hides_inactive(self, client, admin_headers, bundle):
        assert len(client.get("/api/v1/deals").json()["data"]) == 1

        client.put(f"/api/v1/admin/deals/{bundle['id']}", json={"is_active": False}, headers=admin_headers)

        assert client.get("/api/v1/deals").json()["data"] == []
        assert client.get("/api/v1/deals", params={"slug": bundle["slug"]}).status_code == 404

    def test_delete_clears_cart_lines(self, client, admin_headers, customer_headers, bundle):
        client.post("/api/v1/cart/deal", json={"deal_id": bundle["id"]}, headers=customer_headers)

        assert client.delete(f"/api/v1/admin/deals/{bundle['id']}", headers=admin_headers).status_code == 200
        assert client.get("/api/v1/cart", headers=customer_headers).json()["data"]["items"] == []


class TestGlobalDiscountApi:
    def test_inactive_by_default(self, client):
        data = client.get("/api/v1/global-discount").json()["data"]

        assert data == {"is_active": False, "percentage": 0}

    def test_rejects_out_of_range_percentage(self, client, admin_headers):
        response = client.put(
            "/api/v1/admin/global-discount", json={"is_active": True, "percentage": 120}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_rejects_end_before_start(self, client, admin_headers):
        response = client.put("/api/v1/admin/global-discount", json={
            "is_active": True,
            "percentage": 10,
            "start_date": "2025-07-10T00:00:00",
            "end_date": "2025-07-01T00:00:00",
        }, headers=admin_headers)

        assert response.status_code == 400

    def test_expired_window_is_not_live(self, client, admin_headers):
        client.put("/api/v1/admin/global-discount", json={
            "is_active": True, "percentage": 15, "end_date": "2020-01-01T00:00:00",
        }, headers=admin_headers)

        assert client.get("/api/v1/global-discount").json()["data"]["is_active"] is False

    def test_salesman_can_read_but_not_change(self, client, salesman_headers):
        assert client.get("/api/v1/admin/global-discount", headers=salesman_headers).status_code == 200
        response = client.put(
            "/api/v1/admin/global-discount", json={"is_active": True, "percentage": 5}, headers=salesman_headers
        )
        assert response.status_code == 403


class TestWishlistApi:
    def test_toggle_adds_then_removes(self, client, customer_headers, make_product):
        product = make_product()

        first = client.post("/api/v1/wishlist/toggle", json={"product_id": product.id}, headers=customer_headers)
        second = client.post("/api/v1/wishlist/toggle", json={"product_id": product.id}, headers=customer_headers)

        assert first.json()["data"]["in_wishlist"] is True
        assert second.json()["data"]["in_wishlist"] is False

    def test_add_is_idempotent(self, client, customer_headers, make_product):
        product = make_product()

        client.post("/api/v1/wishlist", json={"product_id": product.id}, headers=customer_headers)
        client.post("/api/v1/wishlist", json={"product_id": product.id}, headers=customer_headers)

        assert len(client.get("/api/v1/wishlist", headers=customer_headers).json()["data"]) == 1

    def test_unknown_product_is_404(self, client, customer_headers):
        response = client.post("/api/v1/wishlist", json={"product_id": 999}, headers=customer_headers)

        assert response.status_code == 404

    def test_cannot_remove_someone_elses_item(self, client, make_user, headers_for, make_product):
        owner, other = make_user(), make_user()
        product = make_product()
        item_id = client.post(
            "/api/v1/wishlist", json={"product_id": product.id}, headers=headers_for(owner)
        ).json()["data"]["id"]

        assert client.delete(f"/api/v1/wishlist/{item_id}", headers=headers_for(other)).status_code == 403
        assert client.delete(f"/api/v1/wishlist/{item_id}", headers=headers_for(owner)).status_code == 200
