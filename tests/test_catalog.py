import pytest


def test_categories_are_sorted_by_name(client, make_category):
    make_category("Raw Coconuts", "raw-coconuts")
    make_category("Coir Products", "coir-products")

    resp = client.get("/catalog/categories")

    assert [c["slug"] for c in resp.json()] == ["coir-products", "raw-coconuts"]


def test_listing_hides_inactive_products(client, make_product):
    make_product("Visible")
    make_product("Hidden", is_active=False)

    names = [p["name"] for p in client.get("/catalog/products").json()]

    assert names == ["Visible"]


def test_listing_filters_by_category_slug(client, make_category, make_product):
    oil = make_category("Coconut Oil", "coconut-oil")
    coir = make_category("Coir Products", "coir-products")
    make_product("Virgin Oil", category=oil)
    make_product("Door Mat", category=coir)

    resp = client.get("/catalog/products", params={"category": "coir-products"})

    assert [p["name"] for p in resp.json()] == ["Door Mat"]
    assert resp.json()[0]["category"] == {"name": "Coir Products", "slug": "coir-products"}


def test_listing_matches_category_name_loosely(client, make_category, make_product):
    # legacy slug that differs from the stored one
    raw = make_category("Fresh Raw Coconuts", "fresh")
    make_product("Tender Coconut", category=raw)

    resp = client.get("/catalog/products", params={"category": "raw-coconuts"})

    assert [p["name"] for p in resp.json()] == ["Tender Coconut"]


def test_listing_search_is_case_insensitive(client, make_product):
    make_product("Virgin Coconut Oil")
    make_product("Coir Rope")

    resp = client.get("/catalog/products", params={"search": "ROPE"})

    assert [p["name"] for p in resp.json()] == ["Coir Rope"]


def test_featured_products_are_limited(client, make_product):
    for i in range(4):
        make_product(f"Featured {i}", is_featured=True)
    make_product("Plain")

    resp = client.get("/catalog/featured", params={"limit": 3})

    assert len(resp.json()) == 3
    assert all(p["is_featured"] for p in resp.json())


def test_product_details(client, make_product):
    product = make_product("Coir Door Mat", price="250.00")

    resp = client.get(f"/catalog/products/{product.id}")

    assert resp.status_code == 200
    assert resp.json()["name"] == "Coir Door Mat"


def test_inactive_or_missing_product_is_404(client, make_product):
    hidden = make_product("Hidden", is_active=False)

    assert client.get(f"/catalog/products/{hidden.id}").status_code == 404
    assert client.get("/catalog/products/9999").status_code == 404


@pytest.mark.parametrize("term", ["_", "%", "Oil%"])
def test_search_treats_wildcards_literally(client, make_product, term):
    make_product("Coconut Oil")
    make_product("Coir Mat")

    resp = client.get("/catalog/products", params={"search": term})

    assert resp.json() == []


def test_search_matches_literal_underscore(client, make_product):
    make_product("Coir_Rope 10m")
    make_product("Coir Rope 5m")

    resp = client.get("/catalog/products", params={"search": "r_r"})

    assert [p["name"] for p in resp.json()] == ["Coir_Rope 10m"]
