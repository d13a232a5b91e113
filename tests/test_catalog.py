"""
Category and menu item routes.
"""

from tests.conftest import address_payload, auth


# =============================================================================
# CATEGORIES
# =============================================================================

async def test_category_crud(client, admin_token):
    created = await client.post(
        "/api/categories", json={"description": "  Drinks "}, headers=auth(admin_token)
    )
    assert created.status_code == 201
    category = created.json()
    assert category["description"] == "Drinks"

    listing = await client.get("/api/categories")
    assert [c["description"] for c in listing.json()] == ["Drinks"]

    renamed = await client.put(
        f"/api/categories/{category['id']}",
        json={"description": "Beverages"},
        headers=auth(admin_token),
    )
    assert renamed.status_code == 200
    assert renamed.json()["description"] == "Beverages"

    deleted = await client.delete(f"/api/categories/{category['id']}", headers=auth(admin_token))
    assert deleted.status_code == 204
    assert (await client.get(f"/api/categories/{category['id']}")).status_code == 404


async def test_categories_listed_alphabetically(client, admin_token):
    for description in ["Sobremesas", "Bebidas", "Pizzas"]:
        await client.post(
            "/api/categories", json={"description": description}, headers=auth(admin_token)
        )

    listing = await client.get("/api/categories")

    assert [c["description"] for c in listing.json()] == ["Bebidas", "Pizzas", "Sobremesas"]


async def test_duplicate_category_conflicts(client, admin_token, menu):
    response = await client.post(
        "/api/categories", json={"description": "Pizzas"}, headers=auth(admin_token)
    )

    assert response.status_code == 409


async def test_rename_to_existing_category_conflicts(client, admin_token, menu):
    other = await client.post(
        "/api/categories", json={"description": "Drinks"}, headers=auth(admin_token)
    )

    response = await client.put(
        f"/api/categories/{other.json()['id']}",
        json={"description": "Pizzas"},
        headers=auth(admin_token),
    )

    assert response.status_code == 409


async def test_rename_category_to_its_own_name(client, admin_token, menu):
    response = await client.put(
        f"/api/categories/{menu['category_id']}",
        json={"description": "Pizzas"},
        headers=auth(admin_token),
    )

    assert response.status_code == 200


async def test_delete_category_with_items_conflicts(client, admin_token, menu):
    response = await client.delete(
        f"/api/categories/{menu['category_id']}", headers=auth(admin_token)
    )

    assert response.status_code == 409
    still_there = await client.get(f"/api/categories/{menu['category_id']}")
    assert still_there.status_code == 200


async def test_unknown_category(client, admin_token):
    assert (await client.get("/api/categories/404")).status_code == 404
    response = await client.delete("/api/categories/404", headers=auth(admin_token))
    assert response.status_code == 404


# =============================================================================
# ITEMS
# =============================================================================

async def test_create_item_returns_category(client, admin_token, menu):
    response = await client.post(
        "/api/items",
        json={"description": "Pizza Portuguesa", "unit_price": "45.00", "category_id": menu["category_id"]},
        headers=auth(admin_token),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["unit_price"] == "45.00"
    assert body["category"]["description"] == "Pizzas"


async def test_create_item_with_unknown_category(client, admin_token):
    response = await client.post(
        "/api/items",
        json={"description": "Pizza Portuguesa", "unit_price": "45.00", "category_id": 999},
        headers=auth(admin_token),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Category not found."}


async def test_create_item_rejects_non_positive_price(client, admin_token, menu):
    response = await client.post(
        "/api/items",
        json={"description": "Free Pizza", "unit_price": "0", "category_id": menu["category_id"]},
        headers=auth(admin_token),
    )

    assert response.status_code == 400


async def test_list_and_get_items(client, menu):
    listing = await client.get("/api/items")

    assert listing.status_code == 200
    items = listing.json()
    assert [i["description"] for i in items] == ["Pizza Calabresa", "Pizza Margherita"]
    assert items[0]["category"] == {"description": "Pizzas"}

    single = await client.get(f"/api/items/{menu['margherita_id']}")
    assert single.status_code == 200
    assert single.json()["unit_price"] == "39.90"
    assert single.json()["category"]["id"] == menu["category_id"]


async def test_update_item_partial(client, admin_token, menu):
    response = await client.put(
        f"/api/items/{menu['margherita_id']}",
        json={"unit_price": "41.00"},
        headers=auth(admin_token),
    )

    assert response.status_code == 200
    assert response.json()["unit_price"] == "41.00"
    assert response.json()["description"] == "Pizza Margherita"


async def test_update_unknown_item(client, admin_token, menu):
    response = await client.put(
        "/api/items/999", json={"unit_price": "41.00"}, headers=auth(admin_token)
    )

    assert response.status_code == 404


async def test_delete_item(client, admin_token, menu):
    response = await client.delete(f"/api/items/{menu['calabresa_id']}", headers=auth(admin_token))

    assert response.status_code == 204
    assert (await client.get(f"/api/items/{menu['calabresa_id']}")).status_code == 404


async def test_delete_ordered_item_conflicts(client, admin_token, client_token, menu):
    address = await client.post("/api/addresses", json=address_payload(), headers=auth(client_token))
    await client.post(
        "/api/orders",
        json={
            "payment_method": "PIX",
            "address_id": address.json()["id"],
            "items": [{"item_id": menu["margherita_id"], "quantity": 1}],
        },
        headers=auth(client_token),
    )

    response = await client.delete(f"/api/items/{menu['margherita_id']}", headers=auth(admin_token))

    assert response.status_code == 409
    assert (await client.get(f"/api/items/{menu['margherita_id']}")).status_code == 200


async def test_item_writes_require_admin(client, client_token, menu):
    response = await client.delete(
        f"/api/items/{menu['margherita_id']}", headers=auth(client_token)
    )

    assert response.status_code == 403
