"""HTTP API tests."""
from urllib.parse import quote

SCENARIO = {
    "product_id": "rigel-cob-p1.5",
    "width_mm": 1200,
    "height_mm": 337.5,
    "buyer_tier": "endUser",
    "controller": "TB2",
}

QUOTATION = {
    **SCENARIO,
    "sales_person": "Priya Sharma",
    "customer": {"name": "Acme Events", "email": "ops@acme.example"},
}


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_quote(client):
    response = client.post("/quote", json=SCENARIO)
    assert response.status_code == 200
    data = response.json()
    assert data["grand_total"] == 193251
    assert data["section_b"]["total"] == 41300
    assert data["degraded"] is False
    assert data["discount"] is None
    assert any(step["step"] == "Grand Total" for step in data["trace"])


def test_quote_with_discount(client):
    response = client.post("/quote", json={**SCENARIO, "discount_type": "total", "discount_percent": 10})
    assert response.json()["discount"]["grand_total"] == 173925.90


def test_quote_degraded_controller(client):
    data = client.post("/quote", json={**SCENARIO, "controller": "Foo9000"}).json()
    assert data["degraded"] is True
    assert data["unresolved_fields"] == ["controller"]


def test_quote_unknown_product(client):
    response = client.post("/quote", json={**SCENARIO, "product_id": "nope"})
    assert response.status_code == 404


def test_quote_missing_dimension(client):
    response = client.post("/quote", json={**SCENARIO, "width_mm": None})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "width_mm"


def test_quote_rental_needs_grid(client):
    payload = {"product_id": "rental-indoor-p2.6", "width_mm": 1000, "height_mm": 500, "buyer_tier": "reseller"}
    assert client.post("/quote", json=payload).status_code == 422

    payload.update(cabinet_columns=2, cabinet_rows=1)
    assert client.post("/quote", json=payload).json()["grand_total"] == 73030


def test_catalog(client):
    data = client.get("/catalog", params={"search": "jumbo"}).json()
    assert len(data["products"]) == 4
    assert all(p["jumbo"] for p in data["products"])
    assert "TB2" in data["controllers"]


def test_catalog_validation(client):
    assert client.get("/catalog/validation").json()["status"] == "success"


def test_system_status(client):
    data = client.get("/system/status").json()
    assert data["product_count"] == 24
    assert data["quotation_count"] == 0


def test_quotation_lifecycle(client):
    created = client.post("/api/quotations", json=QUOTATION)
    assert created.status_code == 201
    record = created.json()
    quotation_id = record["quotation_id"]
    assert quotation_id.startswith("ORION/")
    assert quotation_id.endswith("/PRIYA/001")
    assert record["breakdown"]["grand_total"] == 193251

    fetched = client.get(f"/api/quotations/{quote(quotation_id, safe='/')}")
    assert fetched.status_code == 200
    assert fetched.json()["breakdown"] == record["breakdown"]

    updated = client.patch(f"/api/quotations/{quotation_id}/status", json={"status": "contacted"})
    assert updated.json()["status"] == "contacted"

    bad_status = client.patch(f"/api/quotations/{quotation_id}/status", json={"status": "won"})
    assert bad_status.status_code == 400

    listing = client.get("/api/quotations", params={"status": "contacted"}).json()
    assert [r["quotation_id"] for r in listing] == [quotation_id]

    assert client.delete(f"/api/quotations/{quotation_id}").status_code == 200
    assert client.get(f"/api/quotations/{quotation_id}").status_code == 404


def test_quotation_with_discount(client):
    response = client.post("/api/quotations", json={**QUOTATION, "discount_type": "total", "discount_percent": 10})
    assert response.status_code == 201
    record = response.json()
    assert record["breakdown"]["grand_total"] == 193251
    assert record["discount"]["grand_total"] == 173925.90
    assert record["discount"]["discount_amount"] == 19325.10


def test_quotation_with_invalid_discount(client):
    response = client.post("/api/quotations", json={**QUOTATION, "discount_type": "led", "discount_percent": 150})
    assert response.status_code == 422
    assert client.get("/api/quotations").json() == []


def test_degraded_quotation_is_refused(client):
    response = client.post("/api/quotations", json={**QUOTATION, "controller": "Foo9000"})
    assert response.status_code == 409
    assert response.json()["detail"]["unresolved_fields"] == ["controller"]

    accepted = client.post("/api/quotations", json={**QUOTATION, "controller": "Foo9000", "allow_degraded": True})
    assert accepted.status_code == 201


def test_dashboard_and_verify(client):
    client.post("/api/quotations", json=QUOTATION)
    client.post("/api/quotations", json={**QUOTATION, "sales_person": "Rahul"})

    dashboard = client.get("/api/quotations/dashboard").json()
    assert dashboard["quotation_count"] == 2
    assert dashboard["total_value"] == 2 * 193251

    verify = client.get("/api/quotations/verify").json()
    assert verify["checked"] == 2
    assert verify["mismatches"] == []


def test_recalculate(client):
    quotation_id = client.post("/api/quotations", json=QUOTATION).json()["quotation_id"]
    response = client.post(f"/api/quotations/{quotation_id}/recalculate")
    assert response.status_code == 200
    assert response.json()["breakdown"]["grand_total"] == 193251
    assert response.json()["updated_at"] is not None


def test_unknown_quotation(client):
    assert client.get("/api/quotations/ORION/2026/01/01/NOBODY/001").status_code == 404
