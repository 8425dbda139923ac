"""
Integration tests for pages, site settings, testimonials, contact messages,
newsletter and admin notifications
"""


class TestPagesApi:
    def test_upsert_normalizes_slug(self, client, admin_headers):
        response = client.post("/api/v1/admin/pages", json={
            "slug": "Privacy Policy", "title": "Privacy", "content": "<p>We keep it safe</p>",
        }, headers=admin_headers)

        assert response.json()["data"]["slug"] == "privacy-policy"
        assert client.get("/api/v1/pages/privacy-policy").json()["data"]["title"] == "Privacy"

    def test_upsert_overwrites_existing(self, client, admin_headers):
        client.post("/api/v1/admin/pages", json={"slug": "about", "title": "About"}, headers=admin_headers)
        client.post("/api/v1/admin/pages", json={"slug": "about", "title": "About Us"}, headers=admin_headers)

        pages = client.get("/api/v1/admin/pages", headers=admin_headers).json()["data"]
        assert [p["title"] for p in pages] == ["About Us"]

    def test_unpublished_page_is_hidden(self, client, admin_headers):
        client.post("/api/v1/admin/pages", json={
            "slug": "draft", "title": "Draft", "is_published": False,
        }, headers=admin_headers)

        assert client.get("/api/v1/pages/draft").status_code == 404

    def test_update_and_delete(self, client, admin_headers):
        client.post("/api/v1/admin/pages", json={"slug": "terms", "title": "Terms"}, headers=admin_headers)

        updated = client.put("/api/v1/admin/pages/terms", json={"content": "Be nice"}, headers=admin_headers)
        deleted = client.delete("/api/v1/admin/pages/terms", headers=admin_headers)

        assert updated.json()["data"]["content"] == "Be nice"
        assert deleted.status_code == 200
        assert client.delete("/api/v1/admin/pages/terms", headers=admin_headers).status_code == 404

    def test_salesman_cannot_edit(self, client, salesman_headers):
        response = client.post("/api/v1/admin/pages", json={"slug": "x", "title": "X"}, headers=salesman_headers)

        assert response.status_code == 403


class TestSiteSettingsApi:
    def test_defaults_without_row(self, client):
        data = client.get("/api/v1/settings").json()["data"]

        assert data["site_name"] == "Doctor Planet"
        assert data["free_shipping_minimum"] == 5000.0
        assert data["shipping_fee"] == 500.0

    def test_partial_update(self, client, admin_headers):
        response = client.put("/api/v1/admin/settings", json={
            "shipping_fee": 250, "announcement_bar": "Eid sale", "announcement_active": True,
        }, headers=admin_headers)

        assert response.json()["message"] == "Settings updated"
        data = client.get("/api/v1/settings").json()["data"]
        assert data["shipping_fee"] == 250.0
        assert data["announcement_active"] is True
        assert data["site_name"] == "Doctor Planet"

    def test_null_site_name_keeps_value(self, client, admin_headers):
        client.put("/api/v1/admin/settings", json={"site_name": None}, headers=admin_headers)

        assert client.get("/api/v1/settings").json()["data"]["site_name"] == "Doctor Planet"


class TestTestimonialsApi:
    def test_public_lists_active_in_order(self, client, admin_headers):
        for name, order, active in (("Dr. B", 2, True), ("Dr. A", 1, True), ("Dr. C", 0, False)):
            client.post("/api/v1/admin/testimonials", json={
                "name": name, "content": "Great fabric", "sort_order": order, "is_active": active,
            }, headers=admin_headers)

        data = client.get("/api/v1/testimonials").json()["data"]

        assert [t["name"] for t in data] == ["Dr. A", "Dr. B"]

    def test_rating_is_bounded(self, client, admin_headers):
        response = client.post("/api/v1/admin/testimonials", json={
            "name": "Dr. X", "content": "Nice", "rating": 9,
        }, headers=admin_headers)

        assert response.status_code == 422

    def test_update_missing_is_404(self, client, admin_headers):
        response = client.put("/api/v1/admin/testimonials/999", json={"rating": 4}, headers=admin_headers)

        assert response.status_code == 404


class TestContactMessagesApi:
    def _send(self, client, **overrides):
        body = {
            "name": "Dr. Sana",
            "email": "Sana@Example.com",
            "subject": "Bulk order",
            "message": "Do you ship to Karachi?",
        }
        body.update(overrides)
        return client.post("/api/v1/contact", json=body)

    def test_message_notifies_admin(self, client, admin_headers):
        # Act
        response = self._send(client)

        # Assert
        assert response.status_code == 201
        messages = client.get("/api/v1/admin/messages", headers=admin_headers).json()
        assert messages["unread_count"] == 1
        assert messages["data"][0]["email"] == "sana@example.com"

        notifications = client.get("/api/v1/admin/notifications", headers=admin_headers).json()
        assert notifications["data"][0]["type"] == "CONTACT_MESSAGE"

    def test_blank_fields_are_rejected(self, client):
        assert self._send(client, subject="   ").status_code == 400

    def test_invalid_email_is_rejected(self, client):
        assert self._send(client, email="not-an-email").status_code == 422

    def test_mark_read(self, client, admin_headers):
        message_id = self._send(client).json()["data"]["id"]

        client.patch(f"/api/v1/admin/messages/{message_id}", json={"is_read": True}, headers=admin_headers)

        assert client.get("/api/v1/admin/messages", headers=admin_headers).json()["unread_count"] == 0


class TestNewsletterApi:
    def test_subscribe_twice(self, client):
        first = client.post("/api/v1/newsletter/subscribe", json={"email": "doc@example.com"})
        second = client.post("/api/v1/newsletter/subscribe", json={"email": "DOC@example.com"})

        assert first.json()["message"] == "Subscribed successfully"
        assert second.json()["message"] == "Already subscribed"

    def test_admin_lists_and_deletes(self, client, admin_headers):
        client.post("/api/v1/newsletter/subscribe", json={"email": "doc@example.com"})

        listing = client.get("/api/v1/admin/subscribers", headers=admin_headers).json()
        subscriber_id = listing["data"][0]["id"]

        assert listing["total"] == 1
        assert client.delete(f"/api/v1/admin/subscribers/{subscriber_id}", headers=admin_headers).status_code == 200


class TestNotificationsApi:
    def test_mark_read_needs_ids_or_all(self, client, admin_headers):
        response = client.put("/api/v1/admin/notifications/mark-read", json={}, headers=admin_headers)

        assert response.status_code == 400

    def test_mark_all_then_delete_read(self, client, admin_headers):
        client.post("/api/v1/contact", json={
            "name": "A", "email": "a@example.com", "subject": "Hi", "message": "Hello",
        })

        marked = client.put("/api/v1/admin/notifications/mark-read", json={"mark_all": True}, headers=admin_headers)
        client.delete("/api/v1/admin/notifications/read", headers=admin_headers)

        assert marked.json()["unread_count"] == 0
        assert client.get("/api/v1/admin/notifications", headers=admin_headers).json()["data"] == []

    def test_customers_are_forbidden(self, client, customer_headers):
        assert client.get("/api/v1/admin/notifications", headers=customer_headers).status_code == 403
