"""
HTTP API tests — JSON in, engine results out, QuoteError → 422.
"""


def _sample_payload(**overrides):
    payload = {"layers": 2, "length_cm": 10, "width_cm": 10, "quantity": 20}
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_price_endpoint(client):
    response = client.post("/api/quotes/price", json=_sample_payload())
    assert response.status_code == 200
    data = response.json()
    assert data["total_price"] == 24.5
    assert data["lead_time_days"] == 3
    assert "base_fee" in data["breakdown"]


def test_unknown_option_returns_422_with_field(client):
    response = client.post("/api/quotes/price", json=_sample_payload(surface_finish="gold"))
    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "UnknownOptionValue"
    assert data["field"] == "surface_finish"
    assert data["value"] == "gold"


def test_shipping_endpoint(client):
    response = client.post("/api/quotes/shipping", json={
        "spec": _sample_payload(), "country": "de", "carrier": "dhl",
        "service": "standard", "order_date": "2025-06-10",
    })
    assert response.status_code == 200
    assert response.json()["final_cost"] == 70.21


def test_unsupported_destination_returns_422(client):
    response = client.post("/api/quotes/shipping", json={
        "spec": _sample_payload(), "country": "zz",
    })
    assert response.status_code == 422
    assert response.json()["error"] == "UnsupportedDestination"


def test_delivery_endpoint(client):
    response = client.post("/api/quotes/delivery", json={
        "production_days": 3, "start": "2024-09-30T10:00:00", "is_urgent": False,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["delivery_date"] == "2024-10-10"
    assert data["skipped_days"][0] == "2024-10-01 (National Day)"


def test_delivery_rejects_zero_days(client):
    response = client.post("/api/quotes/delivery", json={
        "production_days": 0, "start": "2025-06-09T10:00:00",
    })
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidProductionDays"


def test_stencil_endpoint(client):
    response = client.post("/api/quotes/stencil/price", json={
        "border_type": "non_framework", "size": "370x470", "quantity": 2,
        "electropolishing": True,
    })
    assert response.status_code == 200
    assert response.json()["total_price"] == 47.0


def test_full_quote_endpoint(client):
    response = client.post("/api/quotes/full", json={
        "spec": _sample_payload(), "country": "de",
        "order_time": "2025-06-09T10:00:00",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["grand_total"] == 94.71
    assert data["delivery"]["delivery_date"] == "2025-06-12"


def test_stencil_shipping_endpoint(client):
    response = client.post("/api/quotes/stencil/shipping", json={
        "spec": {"border_type": "non_framework", "size": "370x470", "quantity": 2},
        "country": "de", "carrier": "dhl", "service": "standard",
        "order_date": "2025-06-10",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["chargeable_weight"] == 2.0
    assert body["final_cost"] == 81.42
