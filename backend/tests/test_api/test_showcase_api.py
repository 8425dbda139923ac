"""
Integration tests for home page banners, the team page, receipt layout and
the salesman's own profile
"""
from datetime import timedelta

from app.models import HeroBanner
from app.models.common import utcnow


class TestHeroBannersApi:
    def test_new_banners_go_to_the_end(self, client, admin_headers):
        first = client.post("/api/v1/admin/hero-banners", json={
            "title": "Summer Scrubs", "images": {"mobile": "m.jpg", "desktop": "d.jpg"},
        }, headers=admin_headers)
        second = client.post("/api/v1/admin/hero-banners", json={"title": "  "}, headers=admin_headers)

        assert first.status_code == 201
        assert first.json()["data"]["sort_order"] == 0
        assert first.json()["data"]["cta_link"] == "/products"
        assert second.json()["data"]["sort_order"] == 1
        assert second.json()["data"]["title"] == "Banner"

    def test_public_list_shows_live_banners_only(self, client, db, admin_headers):
        client.post("/api/v1/admin/hero-banners", json={"title": "Live"}, headers=admin_headers)
        client.post("/api/v1/admin/hero-banners", json={"title": "Hidden", "is_active": False}, headers=admin_headers)
        db.add(HeroBanner(title="Ended", end_date=utcnow() - timedelta(days=1), sort_order=5))
        db.commit()

        titles = [b["title"] for b in client.get("/api/v1/hero-banners").json()["data"]]

        assert titles == ["Live"]
        assert len(client.get("/api/v1/admin/hero-banners", headers=admin_headers).json()["data"]) == 3

    def test_update_and_delete(self, client, admin_headers):
        banner = client.post("/api/v1/admin/hero-banners", json={"title": "Old"}, headers=admin_headers).json()["data"]

        updated = client.put(
            f"/api/v1/admin/hero-banners/{banner['id']}", json={"title": "New", "sort_order": 4}, headers=admin_headers
        )
        assert updated.json()["data"]["title"] == "New"
        assert updated.json()["data"]["sort_order"] == 4

        assert client.delete(f"/api/v1/admin/hero-banners/{banner['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/v1/admin/hero-banners/{banner['id']}", headers=admin_headers).status_code == 404

    def test_hide_default_is_idempotent(self, client, db, admin_headers):
        client.post("/api/v1/admin/hero-banners/hide-default", json={"id": "default-1"}, headers=admin_headers)
        response = client.post(
            "/api/v1/admin/hero-banners/hide-default", json={"id": "default-1"}, headers=admin_headers
        )

        assert response.json()["data"]["hidden"] == ["default-1"]
        assert client.get("/api/v1/settings").json()["data"]["hidden_default_hero_banner_ids"] == ["default-1"]

    def test_hide_default_needs_id(self, client, admin_headers):
        response = client.post("/api/v1/admin/hero-banners/hide-default", json={"id": " "}, headers=admin_headers)

        assert response.status_code == 400

    def test_salesman_cannot_manage(self, client, salesman_headers):
        response = client.post("/api/v1/admin/hero-banners", json={"title": "Nope"}, headers=salesman_headers)

        assert response.status_code == 403


class TestPromoBannersApi:
    def test_image_url_required(self, client, admin_headers):
        response = client.post("/api/v1/admin/promo-banners", json={"image_url": "  "}, headers=admin_headers)

        assert response.status_code == 400

    def test_blank_link_and_alt_get_defaults(self, client, admin_headers):
        response = client.post("/api/v1/admin/promo-banners", json={
            "image_url": "promo.jpg", "link_url": " ", "alt": "",
        }, headers=admin_headers)

        data = response.json()["data"]
        assert data["link_url"] == "/"
        assert data["alt"] == "Promo"

    def test_public_list_hides_inactive(self, client, admin_headers):
        banner = client.post(
            "/api/v1/admin/promo-banners", json={"image_url": "a.jpg"}, headers=admin_headers
        ).json()["data"]
        client.post("/api/v1/admin/promo-banners", json={"image_url": "b.jpg"}, headers=admin_headers)

        client.put(f"/api/v1/admin/promo-banners/{banner['id']}", json={"is_active": False}, headers=admin_headers)

        assert [b["image_url"] for b in client.get("/api/v1/promo-banners").json()["data"]] == ["b.jpg"]

    def test_update_missing_is_404(self, client, admin_headers):
        response = client.put("/api/v1/admin/promo-banners/999", json={"alt": "x"}, headers=admin_headers)

        assert response.status_code == 404


class TestTeamApi:
    def test_public_lists_founders_first(self, client, admin_headers):
        client.post("/api/v1/admin/team", json={"name": "Sara", "role": "Designer"}, headers=admin_headers)
        client.post("/api/v1/admin/team", json={
            "name": "Dr. Ali", "role": "Founder", "is_founder": True,
        }, headers=admin_headers)
        client.post("/api/v1/admin/team", json={
            "name": "Omar", "role": "Sales", "is_active": False,
        }, headers=admin_headers)

        names = [m["name"] for m in client.get("/api/v1/team").json()["data"]]

        assert names == ["Dr. Ali", "Sara"]

    def test_name_and_role_required(self, client, admin_headers):
        response = client.post("/api/v1/admin/team", json={"name": "Sara"}, headers=admin_headers)

        assert response.status_code == 422

    def test_update_and_delete(self, client, admin_headers):
        member = client.post(
            "/api/v1/admin/team", json={"name": "Sara", "role": "Designer"}, headers=admin_headers
        ).json()["data"]

        updated = client.put(f"/api/v1/admin/team/{member['id']}", json={"role": "Lead"}, headers=admin_headers)
        assert updated.json()["data"]["role"] == "Lead"

        assert client.delete(f"/api/v1/admin/team/{member['id']}", headers=admin_headers).status_code == 200
        assert client.get("/api/v1/team").json()["data"] == []

    def test_customer_cannot_manage(self, client, customer_headers):
        response = client.post("/api/v1/admin/team", json={"name": "X", "role": "Y"}, headers=customer_headers)

        assert response.status_code == 403


class TestBillSettingsApi:
    def test_staff_reads_defaults(self, client, salesman_headers):
        response = client.get("/api/v1/admin/bill-settings", headers=salesman_headers)

        data = response.json()["data"]
        assert data["store_name"] == "Doctor Planet"
        assert data["paper_width"] == "80mm"
        assert data["show_barcode"] is False

    def test_only_admin_updates(self, client, salesman_headers, admin_headers):
        denied = client.put("/api/v1/admin/bill-settings", json={"store_name": "DP"}, headers=salesman_headers)
        assert denied.status_code == 403

        response = client.put("/api/v1/admin/bill-settings", json={
            "store_name": "DP Lahore", "paper_width": "58mm", "show_barcode": True,
        }, headers=admin_headers)

        data = response.json()["data"]
        assert data["store_name"] == "DP Lahore"
        assert data["paper_width"] == "58mm"
        assert data["footer_text"] == "Thank you for shopping with us!"

    def test_unknown_paper_width_is_422(self, client, admin_headers):
        response = client.put("/api/v1/admin/bill-settings", json={"paper_width": "A3"}, headers=admin_headers)

        assert response.status_code == 422

    def test_customer_is_403(self, client, customer_headers):
        assert client.get("/api/v1/admin/bill-settings", headers=customer_headers).status_code == 403

    def test_receipt_carries_bill_layout(self, client, admin_headers, salesman_headers, make_product):
        client.put("/api/v1/admin/bill-settings", json={"store_name": "DP Karachi"}, headers=admin_headers)
        product = make_product(price="1200")
        sale = client.post("/api/v1/pos/sales", json={
            "items": [{"product_id": product.id, "quantity": 1}],
        }, headers=salesman_headers).json()["data"]

        response = client.get(f"/api/v1/pos/sales/{sale['id']}/receipt", headers=salesman_headers)

        data = response.json()["data"]
        assert data["sale"]["receipt_number"] == sale["receipt_number"]
        assert data["bill"]["store_name"] == "DP Karachi"

    def test_receipt_of_someone_elses_sale_is_403(self, client, make_user, headers_for, make_product):
        seller, other = make_user("SALESMAN"), make_user("SALESMAN")
        product = make_product()
        sale = client.post("/api/v1/pos/sales", json={
            "items": [{"product_id": product.id, "quantity": 1}],
        }, headers=headers_for(seller)).json()["data"]

        response = client.get(f"/api/v1/pos/sales/{sale['id']}/receipt", headers=headers_for(other))

        assert response.status_code == 403


class TestSalesmanProfileApi:
    def test_reads_own_profile(self, client, salesman, salesman_headers):
        response = client.get("/api/v1/salesman/profile", headers=salesman_headers)

        data = response.json()["data"]
        assert data["email"] == salesman.email
        assert "cnic" in data
        assert "password_hash" not in data

    def test_updates_picture_only(self, client, db, salesman, salesman_headers):
        response = client.put("/api/v1/salesman/profile", json={
            "image": "https://cdn.example.com/me.jpg", "name": "Renamed",
        }, headers=salesman_headers)

        assert response.status_code == 200
        db.refresh(salesman)
        assert salesman.image == "https://cdn.example.com/me.jpg"
        assert salesman.name != "Renamed"

    def test_missing_picture_is_400(self, client, salesman_headers):
        response = client.put("/api/v1/salesman/profile", json={"name": "Renamed"}, headers=salesman_headers)

        assert response.status_code == 400

    def test_other_roles_are_403(self, client, admin_headers, customer_headers):
        assert client.get("/api/v1/salesman/profile", headers=admin_headers).status_code == 403
        assert client.get("/api/v1/salesman/profile", headers=customer_headers).status_code == 403

    def test_requires_login(self, client):
        assert client.get("/api/v1/salesman/profile").status_code == 401
