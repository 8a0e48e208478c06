from uuid import UUID
from models.attractions import TouristAttraction
from utils.ids import uuid7

ATTRACTION = {
    "name": "Tegallalang Rice Terrace",
    "description": "Terraced rice paddies along the Ubud ridge",
    "address": "Jl. Raya Tegallalang, Tegallalang",
    "city": "Gianyar",
    "province": "Bali",
    "longitude": 115.2791,
    "latitude": -8.4312,
    "photo_url": "https://cdn.example.com/tegallalang.jpg",
    "price": 25000,
    "discount_percentage": 10,
    "tour_guide_price": 150000,
    "tour_guide_count": 4
}


async def create_attraction(client, headers, **overrides) -> dict:
    response = await client.post("/tourist-attractions", json={**ATTRACTION, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()["payload"]


async def test_create_attraction(client, auth_headers, session):
    response = await client.post("/tourist-attractions", json=ATTRACTION, headers=auth_headers)

    assert response.status_code == 201
    payload = response.json()["payload"]
    assert payload["name"] == ATTRACTION["name"]
    assert payload["longitude"] == ATTRACTION["longitude"]
    assert payload["tour_guide_discount_percentage"] == 0

    stored = session.get(TouristAttraction, UUID(payload["id"]))
    assert stored.price == 25000


async def test_attractions_require_authentication(client):
    response = await client.get("/tourist-attractions")

    assert response.status_code == 401


async def test_create_attraction_validation(client, auth_headers):
    response = await client.post("/tourist-attractions", json={
        **ATTRACTION,
        "tour_guide_count": 0,
        "discount_percentage": 150,
        "latitude": -120
    }, headers=auth_headers)

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert {"tour_guide_count", "discount_percentage", "latitude"} <= set(errors)


async def test_list_attractions_by_city(client, auth_headers):
    await create_attraction(client, auth_headers, name="Tegallalang Rice Terrace", city="Gianyar")
    await create_attraction(client, auth_headers, name="Uluwatu Temple", city="Badung")

    everything = await client.get("/tourist-attractions", headers=auth_headers)
    badung = await client.get("/tourist-attractions", params={"city": "badung"}, headers=auth_headers)

    assert [item["name"] for item in everything.json()["payload"]] == ["Uluwatu Temple", "Tegallalang Rice Terrace"]
    assert [item["name"] for item in badung.json()["payload"]] == ["Uluwatu Temple"]


async def test_get_attraction(client, auth_headers):
    created = await create_attraction(client, auth_headers)

    response = await client.get(f"/tourist-attractions/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "get specific tourist attraction successful"
    assert response.json()["payload"]["id"] == created["id"]


async def test_get_missing_attraction(client, auth_headers):
    response = await client.get(f"/tourist-attractions/{uuid7()}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "attraction_not_found"


async def test_update_attraction(client, auth_headers):
    created = await create_attraction(client, auth_headers)

    response = await client.put(f"/tourist-attractions/{created['id']}", json={
        "price": 30000,
        "tour_guide_discount_percentage": 5
    }, headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()["payload"]
    assert payload["price"] == 30000
    assert payload["tour_guide_discount_percentage"] == 5
    assert payload["tour_guide_price"] == ATTRACTION["tour_guide_price"]


async def test_update_attraction_rejects_invalid_values(client, auth_headers):
    created = await create_attraction(client, auth_headers)

    response = await client.put(f"/tourist-attractions/{created['id']}", json={"price": -1},
                                headers=auth_headers)

    assert response.status_code == 400


async def test_delete_attraction(client, auth_headers, session):
    created = await create_attraction(client, auth_headers)

    response = await client.delete(f"/tourist-attractions/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    session.expire_all()
    assert session.get(TouristAttraction, UUID(created["id"])) is None

    again = await client.delete(f"/tourist-attractions/{created['id']}", headers=auth_headers)
    assert again.status_code == 404
