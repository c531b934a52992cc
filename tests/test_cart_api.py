"""Tests for the cart API"""

from decimal import Decimal

from conftest import money


def add(client, headers, product_id, quantity=1, is_ebook=False):
    return client.post(
        "/api/cart/items",
        json={"product_id": product_id, "quantity": quantity, "is_ebook": is_ebook},
        headers=headers,
    )


def test_cart_requires_session(client):
    assert client.get("/api/cart").status_code == 401


def test_bad_token_is_rejected(client):
    response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_new_cart_is_empty(client, user_headers):
    response = client.get("/api/cart", headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["cart"]["items"] == []
    assert money(data["summary"]["subtotal"]) == Decimal("0")
    assert money(data["summary"]["total"]) == Decimal("0")


def test_ebook_line_uses_ebook_sale_price(client, user_headers):
    response = add(client, user_headers, "book-002", quantity=2, is_ebook=True)

    assert response.status_code == 200
    summary = response.json()["summary"]
    (line,) = summary["lines"]
    assert line["is_ebook"] is True
    assert money(line["unit_price"]) == Decimal("199.00")
    assert money(summary["subtotal"]) == Decimal("398.00")


def test_same_edition_lines_merge(client, user_headers):
    add(client, user_headers, "book-001", quantity=1)
    add(client, user_headers, "book-001", quantity=2)
    response = add(client, user_headers, "book-001", quantity=1, is_ebook=True)

    items = response.json()["cart"]["items"]
    assert len(items) == 2
    printed = next(i for i in items if not i["is_ebook"])
    assert printed["quantity"] == 3
    # 3 x 399 + 249
    assert money(response.json()["summary"]["subtotal"]) == Decimal("1446.00")


def test_cannot_add_more_copies_than_stock(client, user_headers):
    add(client, user_headers, "book-006", quantity=2)
    response = add(client, user_headers, "book-006", quantity=1)

    assert response.status_code == 400
    assert response.json()["error"] == "InsufficientStock"


def test_out_of_stock_book_can_still_be_bought_as_ebook(client, user_headers):
    assert add(client, user_headers, "book-008", quantity=1).status_code == 400

    response = add(client, user_headers, "book-008", quantity=1, is_ebook=True)
    assert response.status_code == 200
    assert money(response.json()["summary"]["total"]) == Decimal("149.00")


def test_ebook_requires_an_ebook_edition(client, user_headers):
    response = add(client, user_headers, "book-004", is_ebook=True)
    assert response.status_code == 400


def test_unknown_product(client, user_headers):
    assert add(client, user_headers, "book-999").status_code == 404


def test_zero_quantity_is_rejected(client, user_headers):
    assert add(client, user_headers, "book-001", quantity=0).status_code == 422


def test_update_and_remove_items(client, user_headers):
    item_id = add(client, user_headers, "book-004").json()["cart"]["items"][0]["item_id"]

    response = client.put(f"/api/cart/items/{item_id}", json={"quantity": 3}, headers=user_headers)
    assert response.status_code == 200
    assert money(response.json()["summary"]["subtotal"]) == Decimal("897.00")

    response = client.put(f"/api/cart/items/{item_id}", json={"quantity": 81}, headers=user_headers)
    assert response.status_code == 400

    response = client.delete(f"/api/cart/items/{item_id}", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["cart"]["items"] == []

    assert client.delete(f"/api/cart/items/{item_id}", headers=user_headers).status_code == 404


def test_clear_cart(client, user_headers):
    add(client, user_headers, "book-001")
    add(client, user_headers, "book-002", is_ebook=True)

    response = client.delete("/api/cart", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["cart"]["items"] == []


def test_carts_are_per_user(client, user_headers, other_user_headers):
    add(client, user_headers, "book-001")

    response = client.get("/api/cart", headers=other_user_headers)
    assert response.json()["cart"]["items"] == []


def test_quote_applies_coupon(client, user_headers, make_coupon):
    make_coupon()
    add(client, user_headers, "book-005", quantity=2)

    response = client.post("/api/cart/quote", json={"coupon_code": "save10"}, headers=user_headers)

    assert response.status_code == 200
    summary = response.json()
    assert money(summary["subtotal"]) == Decimal("1098.00")
    assert money(summary["discount"]) == Decimal("50.00")
    assert money(summary["total"]) == Decimal("1048.00")
    assert summary["applied_coupon_code"] == "SAVE10"
    assert summary["coupon_error"] is None


def test_quote_reports_coupon_error_without_failing(client, user_headers, make_coupon):
    make_coupon()
    add(client, user_headers, "book-004")

    response = client.post("/api/cart/quote", json={"coupon_code": "SAVE10"}, headers=user_headers)

    assert response.status_code == 200
    summary = response.json()
    assert summary["coupon_error"]["kind"] == "MinimumOrderNotMet"
    assert money(summary["discount"]) == Decimal("0")
    assert money(summary["total"]) == Decimal("299.00")


def test_quote_does_not_use_up_coupon(client, user_headers, make_coupon):
    coupon = make_coupon(usage_limit=1)
    add(client, user_headers, "book-005")

    for _ in range(3):
        response = client.post("/api/cart/quote", json={"coupon_code": "SAVE10"}, headers=user_headers)
        assert response.json()["coupon_error"] is None

    assert coupon.used_count == 0
