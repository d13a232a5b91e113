"""
Root, health and error body shape.
"""


async def test_root(client, settings):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["version"] == settings.app_version


async def test_health_reports_database(client, settings):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "operational"
    assert body["database"] == "healthy"
    assert body["environment"] == settings.env_mode.value


async def test_unknown_route_uses_message_body(client):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


async def test_malformed_json_is_a_validation_error(client):
    response = await client.post(
        "/api/users/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"
