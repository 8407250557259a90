import logging

import pytest

from storefront.core.config import settings
from storefront.core.rate_limit import limiter


@pytest.mark.asyncio
async def test_root_endpoint_basic_response(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body.get("message") == "Storefront Catalog API"
    assert body.get("status") == "operational"


@pytest.mark.asyncio
async def test_listing_response_shape(client, seeded, make_product):
    for i in range(3):
        await make_product(name=f"Sneaker {i}", old_price=100.0 + i, discount=0)

    resp = await client.get("/api/products", params={"page": 2, "pageSize": 2, "sortBy": "price-desc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 3
    assert body["last_page"] == 2
    assert body["num_of_results_on_cur_page"] == 1
    assert body["page"] == 2 and body["page_size"] == 2
    assert [p["name"] for p in body["products"]] == ["Sneaker 0"]
    assert body["products"][0]["brand_ids"] == [3, 7]
    assert body["products"][0]["occasions"] == ["sports", "casual"]


@pytest.mark.asyncio
async def test_listing_page_past_end_is_empty(client, seeded, make_product):
    await make_product()

    resp = await client.get("/api/products", params={"page": 5})

    assert resp.status_code == 200
    assert resp.json()["products"] == []
    assert resp.json()["last_page"] == 1


@pytest.mark.asyncio
async def test_listing_filters_from_query_string(client, seeded, make_product):
    await make_product(name="Match", brands="[3,7]", discount=8, gender="girl", occasion="party")
    await make_product(name="Wrong brand", brands="[37]", discount=8, gender="girl", occasion="party")
    await make_product(name="Wrong discount", brands="[3]", discount=12, gender="girl", occasion="party")

    resp = await client.get(
        "/api/products",
        params={"brand": "3", "discount": "6-10", "gender": "girl", "occasion": "party", "category": "1"},
    )

    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()["products"]] == ["Match"]


@pytest.mark.asyncio
async def test_invalid_filter_returns_400(client, seeded):
    resp = await client.get("/api/products", params={"discount": "ten-twenty"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "INVALID_FILTER"
    assert body["details"]["parameter"] == "discount"


@pytest.mark.asyncio
async def test_page_size_above_maximum_is_rejected(client, seeded):
    resp = await client.get("/api/products", params={"pageSize": 1000})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_missing_product_returns_404(client, seeded):
    resp = await client.get("/api/products/999")

    assert resp.status_code == 404
    assert resp.json()["error"] == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
async def test_create_get_update_delete(client, seeded, sample_product_data):
    resp = await client.post("/api/products", json={**sample_product_data, "brands": [7, 3]})
    assert resp.status_code == 201
    created = resp.json()
    assert created["price"] == pytest.approx(180.0)
    assert created["brands"] == "[7,3]"

    product_id = created["id"]
    resp = await client.get(f"/api/products/{product_id}/categories")
    assert [c["name"] for c in resp.json()] == ["Accessories", "Shoes"]

    update = {**sample_product_data, "id": product_id, "discount": 50, "categories": [2]}
    resp = await client.put(f"/api/products/{product_id}", json=update)
    assert resp.status_code == 200
    assert resp.json()["price"] == pytest.approx(100.0)

    resp = await client.post("/api/products/categories", json={"product_ids": [product_id]})
    assert resp.json()["categories"] == {str(product_id): ["Shirts"]}

    resp = await client.delete(f"/api/products/{product_id}")
    assert resp.status_code == 204

    resp = await client.get(f"/api/products/{product_id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_id_mismatch_is_rejected(client, seeded, make_product, sample_product_data):
    product = await make_product()

    resp = await client.put(f"/api/products/{product.id}", json={**sample_product_data, "id": product.id + 1})

    assert resp.status_code == 422
    assert resp.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_rejects_out_of_range_discount(client, seeded, sample_product_data):
    resp = await client.post("/api/products", json={**sample_product_data, "discount": 150})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_rejects_malformed_brands(client, seeded, sample_product_data):
    resp = await client.post("/api/products", json={**sample_product_data, "brands": "3,7"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_delete_missing_product_returns_404(client, seeded):
    resp = await client.delete("/api/products/4242")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_brand_and_category_lookups(client, seeded):
    brands = (await client.get("/api/brands")).json()
    assert [b["name"] for b in brands] == ["Adidas", "Nike", "Puma", "Reebok"]

    categories = (await client.get("/api/categories")).json()
    assert [c["name"] for c in categories] == ["Accessories", "Shirts", "Shoes"]

    names = (await client.get("/api/brands/names", params={"ids": "[7,3,99]"})).json()["names"]
    assert names == {"7": "Adidas", "3": "Puma", "99": None}

    resp = await client.get("/api/brands/names", params={"ids": "7,x"})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"brands": 5},
        {"brands": ["3", "7"]},
        {"brands": [True]},
        {"occasion": [1, 2]},
        {"occasion": 7},
    ],
)
async def test_create_rejects_wrongly_typed_membership_fields(client, seeded, sample_product_data, overrides):
    resp = await client.post("/api/products", json={**sample_product_data, **overrides})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_rejects_oversized_encoded_columns(client, seeded, sample_product_data):
    too_many_brands = list(range(1000, 1100))
    resp = await client.post("/api/products", json={**sample_product_data, "brands": too_many_brands})
    assert resp.status_code == 422

    too_many_tags = [f"occasion-{i}" for i in range(40)]
    resp = await client.post("/api/products", json={**sample_product_data, "occasion": too_many_tags})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_occasion_filter_is_case_insensitive(client, seeded, make_product):
    product = await make_product(occasion="party")

    resp = await client.get("/api/products", params={"occasion": "PARTY"})

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["products"]] == [product.id]
    assert resp.json()["products"][0]["occasions"] == ["party"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"priceRangeTo": "nan"}, {"discount": "nan-nan"}])
async def test_non_finite_numbers_are_rejected(client, seeded, params):
    resp = await client.get("/api/products", params=params)
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_FILTER"


@pytest.mark.asyncio
async def test_audit_entry_uses_forwarded_client(client, seeded, sample_product_data, caplog):
    with caplog.at_level(logging.INFO, logger="audit"):
        resp = await client.post(
            "/api/products",
            json=sample_product_data,
            headers={"X-Forwarded-For": "198.51.100.7, 10.0.0.1"},
        )

    assert resp.status_code == 201
    entries = [r.audit for r in caplog.records if hasattr(r, "audit")]
    assert entries[-1]["action"] == "product.create"
    assert entries[-1]["ip_address"] == "198.51.100.7"


@pytest.mark.asyncio
async def test_default_rate_limit_applies_to_reads(client, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)
    allowed = int(settings.RATE_LIMIT_DEFAULT.split("/")[0])
    headers = {"X-Forwarded-For": "203.0.113.50"}

    try:
        statuses = [(await client.get("/", headers=headers)).status_code for _ in range(allowed + 1)]
        blocked = await client.get("/", headers=headers)
        other_client = await client.get("/", headers={"X-Forwarded-For": "203.0.113.51"})
    finally:
        limiter.reset()

    assert statuses[:allowed] == [200] * allowed
    assert statuses[allowed] == 429
    assert blocked.json()["error"] == "rate_limit_exceeded"
    assert other_client.status_code == 200
