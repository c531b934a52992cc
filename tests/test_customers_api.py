"""Tests for back office customer accounts and roles"""

from decimal import Decimal

from conftest import ADDRESS, money

from bookstore.database import customer_db
from bookstore.security.session import Role


def place_order(client, headers, product_id, quantity=1):
    client.post("/api/cart/items", json={"product_id": product_id, "quantity": quantity}, headers=headers)
    response = client.post(
        "/api/checkout",
        json={"payment_method": "CASH_ON_DELIVERY", "shipping_address": ADDRESS},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["order"]


def set_role(client, headers, user_id, role):
    return client.put(f"/api/admin/customers/{user_id}/role", json={"role": role}, headers=headers)


class TestListing:
    def test_customers_with_order_totals(self, client, user_headers, other_user_headers, admin_headers):
        place_order(client, user_headers, "book-004", quantity=2)
        cancelled = place_order(client, user_headers, "book-001")
        client.post(f"/api/orders/{cancelled['order_id']}/cancel", headers=user_headers)
        client.get("/api/cart", headers=other_user_headers)

        response = client.get("/api/admin/customers", params={"role": "USER"}, headers=admin_headers)

        assert response.status_code == 200
        summaries = {s["customer"]["user_id"]: s for s in response.json()}
        assert set(summaries) == {"reader-1", "reader-2"}

        reader = summaries["reader-1"]
        assert reader["customer"]["email"] == "reader-1@example.com"
        assert reader["order_count"] == 2
        assert money(reader["total_spent"]) == Decimal("598.00")
        assert reader["review_count"] == 0
        assert summaries["reader-2"]["order_count"] == 0

    def test_filter_by_role(self, client, user_headers, admin_headers):
        client.get("/api/cart", headers=user_headers)

        admins = client.get("/api/admin/customers", params={"role": "ADMIN"}, headers=admin_headers).json()

        assert [s["customer"]["user_id"] for s in admins] == ["admin-1"]

    def test_requires_admin(self, client, user_headers):
        assert client.get("/api/admin/customers", headers=user_headers).status_code == 403
        assert client.get("/api/admin/customers").status_code == 401


class TestRoles:
    def test_promote_and_demote(self, client, user_headers, admin_headers):
        assert client.get("/api/admin/orders", headers=user_headers).status_code == 403

        response = set_role(client, admin_headers, "reader-1", "ADMIN")
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"

        # The same token now reaches the back office
        assert client.get("/api/admin/orders", headers=user_headers).status_code == 200

        set_role(client, admin_headers, "reader-1", "USER")
        assert client.get("/api/admin/orders", headers=user_headers).status_code == 403
        assert customer_db.get_customer("reader-1").role == Role.USER

    def test_cannot_change_own_role(self, client, admin_headers):
        response = set_role(client, admin_headers, "admin-1", "USER")

        assert response.status_code == 400
        assert response.json()["detail"] == "You cannot change your own role"
        assert customer_db.get_customer("admin-1").role == Role.ADMIN

    def test_unknown_customer(self, client, admin_headers):
        assert set_role(client, admin_headers, "nobody", "ADMIN").status_code == 404

    def test_customers_cannot_change_roles(self, client, user_headers):
        assert set_role(client, user_headers, "reader-1", "ADMIN").status_code == 403
        assert customer_db.get_customer("reader-1").role == Role.USER
