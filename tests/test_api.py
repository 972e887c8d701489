"""HTTP layer: auth, permissions, status codes and response shapes."""

from stockroom.models.inventory import Product


def _product_payload(category, supplier, **overrides):
    payload = {
        "name": "Wireless Mouse",
        "sku": "ELEC-001",
        "price": "29.99",
        "cost": "15.00",
        "stock": 50,
        "min_stock": 10,
        "category_id": category.id,
        "supplier_id": supplier.id,
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class TestAuth:
    def test_login_returns_bearer_token(self, client, admin_user):
        response = client.post(
            "/api/v1/auth/login", data={"username": "admin@test.com", "password": "password123"}
        )
        assert response.status_code == 200
        token = response.json()
        assert token["token_type"] == "bearer"

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "admin@test.com"
        assert me.json()["role_name"] == "Admin"

    def test_wrong_password(self, client, admin_user):
        response = client.post(
            "/api/v1/auth/login", data={"username": "admin@test.com", "password": "wrong-password"}
        )
        assert response.status_code == 401

    def test_missing_token(self, client):
        assert client.get("/api/v1/products").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/v1/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_staff_permissions(self, client, staff_headers):
        response = client.get("/api/v1/auth/permissions", headers=staff_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "Staff"
        assert body["permissions"]["sales"] == ["view", "create"]
        assert body["permissions"]["users"] == []

    def test_admin_creates_staff_user(self, client, admin_headers, roles):
        response = client.post(
            "/api/v1/auth/users",
            json={"email": "cashier@test.com", "password": "cashier-pass", "full_name": "Cashier"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["role_name"] == "Staff"

        duplicate = client.post(
            "/api/v1/auth/users",
            json={"email": "cashier@test.com", "password": "cashier-pass"},
            headers=admin_headers,
        )
        assert duplicate.status_code == 409

    def test_staff_cannot_create_users(self, client, staff_headers):
        response = client.post(
            "/api/v1/auth/users",
            json={"email": "someone@test.com", "password": "password123"},
            headers=staff_headers,
        )
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class TestCatalogEndpoints:
    def test_create_and_fetch_product(self, client, admin_headers, category, supplier):
        response = client.post(
            "/api/v1/products", json=_product_payload(category, supplier), headers=admin_headers
        )
        assert response.status_code == 201
        product = response.json()
        assert product["price"] == 29.99
        assert product["is_low_stock"] is False
        assert product["category"]["name"] == "Electronics"

        detail = client.get(f"/api/v1/products/{product['id']}", headers=admin_headers)
        assert detail.status_code == 200
        logs = detail.json()["stock_logs"]
        assert len(logs) == 1
        assert logs[0]["change_type"] == "RESTOCK"

    def test_duplicate_sku_is_409(self, client, admin_headers, category, supplier, mouse):
        response = client.post(
            "/api/v1/products", json=_product_payload(category, supplier), headers=admin_headers
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_staff_cannot_create_products(self, client, staff_headers, category, supplier):
        response = client.post(
            "/api/v1/products", json=_product_payload(category, supplier), headers=staff_headers
        )
        assert response.status_code == 403

    def test_staff_can_browse_catalog(self, client, staff_headers, mouse):
        response = client.get("/api/v1/products", params={"search": "ELEC"}, headers=staff_headers)
        assert response.status_code == 200
        assert [p["sku"] for p in response.json()] == ["ELEC-001"]

    def test_stock_field_rejected_on_update(self, client, admin_headers, mouse):
        response = client.put(f"/api/v1/products/{mouse.id}", json={"stock": 999}, headers=admin_headers)
        assert response.status_code == 422

    def test_unknown_product_is_404(self, client, admin_headers):
        response = client.get("/api/v1/products/does-not-exist", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_delete_category_in_use_is_409(self, client, admin_headers, category, mouse):
        response = client.delete(f"/api/v1/categories/{category.id}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["product_count"] == 1

    def test_category_listing_counts_products(self, client, staff_headers, mouse):
        response = client.get("/api/v1/categories", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()[0]["product_count"] == 1

    def test_delete_product_is_soft(self, client, admin_headers, db, mouse):
        response = client.delete(f"/api/v1/products/{mouse.id}", headers=admin_headers)
        assert response.status_code == 200

        db.expire_all()
        assert db.get(Product, mouse.id).is_active is False
        assert client.get("/api/v1/products", headers=admin_headers).json() == []


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------
class TestStockEndpoints:
    def test_adjust_stock(self, client, admin_headers, mouse):
        response = client.post(
            f"/api/v1/products/{mouse.id}/adjust-stock",
            json={"quantity": -42, "change_type": "ADJUSTMENT", "notes": "Stock count"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["stock"] == 8
        assert response.json()["is_low_stock"] is True

        logs = client.get(f"/api/v1/products/{mouse.id}/stock-logs", headers=admin_headers).json()
        assert logs[0]["quantity"] == -42
        assert (logs[0]["before"], logs[0]["after"]) == (50, 8)

        low = client.get("/api/v1/products/low-stock", headers=admin_headers).json()
        assert low[0]["id"] == mouse.id
        assert low[0]["stock_deficit"] == 2

    def test_negative_stock_is_400(self, client, admin_headers, mouse):
        response = client.post(
            f"/api/v1/products/{mouse.id}/adjust-stock",
            json={"quantity": -100, "change_type": "DAMAGE"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_operation"

    def test_staff_cannot_adjust(self, client, staff_headers, mouse):
        response = client.post(
            f"/api/v1/products/{mouse.id}/adjust-stock",
            json={"quantity": 5, "change_type": "RESTOCK"},
            headers=staff_headers,
        )
        assert response.status_code == 403


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
class TestSalesEndpoints:
    def test_staff_records_sale(self, client, staff_headers, mouse):
        response = client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": mouse.id, "quantity": 2}]},
            headers=staff_headers,
        )
        assert response.status_code == 201
        sale = response.json()
        assert sale["total"] == 59.98
        assert sale["profit"] == 29.98
        assert sale["items"][0]["product"]["supplier"]["name"] == "Tech Distributors Inc."

        fetched = client.get(f"/api/v1/sales/{sale['id']}", headers=staff_headers)
        assert fetched.status_code == 200

    def test_insufficient_stock_is_400(self, client, staff_headers, mouse):
        response = client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": mouse.id, "quantity": 60}]},
            headers=staff_headers,
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "insufficient_stock"
        assert body["available"] == 50
        assert body["requested"] == 60
        assert body["product_name"] == "Wireless Mouse"

    def test_unknown_product_is_404(self, client, staff_headers):
        response = client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": "missing", "quantity": 1}]},
            headers=staff_headers,
        )
        assert response.status_code == 404

    def test_zero_quantity_rejected_by_schema(self, client, staff_headers, mouse):
        response = client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": mouse.id, "quantity": 0}]},
            headers=staff_headers,
        )
        assert response.status_code == 422

    def test_empty_sale_rejected_by_schema(self, client, staff_headers):
        response = client.post("/api/v1/sales", json={"items": []}, headers=staff_headers)
        assert response.status_code == 422

    def test_bad_date_filter_is_422(self, client, staff_headers):
        response = client.get(
            "/api/v1/sales", params={"start_date": "last-week"}, headers=staff_headers
        )
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "start_date"

    def test_only_admin_deletes_sales(self, client, staff_headers, admin_headers, mouse):
        sale = client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": mouse.id, "quantity": 2}]},
            headers=staff_headers,
        ).json()

        assert client.delete(f"/api/v1/sales/{sale['id']}", headers=staff_headers).status_code == 403
        assert client.delete(f"/api/v1/sales/{sale['id']}", headers=admin_headers).status_code == 200

        product = client.get(f"/api/v1/products/{mouse.id}", headers=admin_headers).json()
        assert product["stock"] == 50
        assert product["stock_logs"][0]["change_type"] == "RETURN"


# ---------------------------------------------------------------------------
# Reports and health
# ---------------------------------------------------------------------------
class TestReportEndpoints:
    def test_dashboard(self, client, staff_headers, mouse):
        client.post(
            "/api/v1/sales",
            json={"items": [{"product_id": mouse.id, "quantity": 2}]},
            headers=staff_headers,
        )
        response = client.get("/api/v1/reports/dashboard", headers=staff_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["daily"]["revenue"] == 59.98
        assert body["best_selling"][0]["product"]["id"] == mouse.id
        assert len(body["recent_sales"]) == 1

    def test_profit_report_has_twelve_months(self, client, staff_headers):
        response = client.get("/api/v1/reports/profit", headers=staff_headers)
        assert response.status_code == 200
        assert len(response.json()["monthly_data"]) == 12

    def test_inventory_report(self, client, staff_headers, mouse):
        body = client.get("/api/v1/reports/inventory", headers=staff_headers).json()
        assert body["products"][0]["stock_value"] == 750.0
        assert body["summary"]["potential_profit"] == 749.5

    def test_sales_report_rejects_inverted_range(self, client, staff_headers):
        response = client.get(
            "/api/v1/reports/sales",
            params={"start_date": "2026-05-01", "end_date": "2026-04-01"},
            headers=staff_headers,
        )
        assert response.status_code == 422

    def test_sales_report_empty(self, client, staff_headers):
        body = client.get("/api/v1/reports/sales", headers=staff_headers).json()
        assert body["summary"]["average_order_value"] == 0


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert "X-Request-ID" in response.headers
