import httpx
import pytest

from restaurant_backoffice.db.session import get_async_session
from restaurant_backoffice.main import app


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_order_flow(client, alice, bob, soup, salad):
    response = await client.post(
        "/orders/", json={"user_id": alice.id, "dish_ids": [soup.id, soup.id, salad.id]}
    )
    assert response.status_code == 201
    order = response.json()
    assert float(order["full_price"]) == 130.0
    assert order["status"] == "PENDING"

    response = await client.put(
        f"/orders/{order['id']}/my",
        json={"dish_ids": [salad.id]},
        headers={"X-User-Email": bob.email},
    )
    assert response.status_code == 403
    assert response.json()["detail"]["kind"] == "forbidden"

    response = await client.put(f"/orders/{order['id']}/status", json={"status": "READY"})
    assert response.status_code == 200
    assert response.json()["status"] == "READY"

    response = await client.put(f"/orders/{order['id']}/status", json={"status": "PENDING"})
    assert response.status_code == 409

    response = await client.get("/orders/my", headers={"X-User-Email": alice.email})
    assert [o["id"] for o in response.json()] == [order["id"]]


async def test_order_errors(client, alice, soup):
    response = await client.post("/orders/", json={"user_id": alice.id, "dish_ids": []})
    assert response.status_code == 400

    response = await client.post("/orders/", json={"user_id": alice.id, "dish_ids": [soup.id, 999]})
    assert response.status_code == 422
    assert response.json()["detail"]["identifier"] == 999

    response = await client.get("/orders/12345")
    assert response.status_code == 404

    response = await client.delete("/orders/12345")
    assert response.status_code == 404


async def test_table_reservation_flow(client, alice, bob):
    response = await client.post("/tables/", json={"table_number": 5, "seats": 4})
    assert response.status_code == 201
    table = response.json()

    response = await client.post("/tables/", json={"table_number": 6, "seats": 31})
    assert response.status_code == 400

    response = await client.post(f"/tables/{table['id']}/reserve", headers={"X-User-Email": alice.email})
    assert response.status_code == 200
    assert response.json()["reserved_by_user_id"] == alice.id

    response = await client.post(f"/tables/{table['id']}/reserve", headers={"X-User-Email": bob.email})
    assert response.status_code == 409

    assert (await client.get("/tables/available")).json() == []

    response = await client.delete(f"/users/{alice.id}")
    assert response.status_code == 204

    available = (await client.get("/tables/available")).json()
    assert [t["id"] for t in available] == [table["id"]]


async def test_dish_routes(client, alice):
    response = await client.post("/dishes/", json={"name": "Borscht", "price": "50.00", "category": "soups"})
    assert response.status_code == 201
    soup = response.json()

    response = await client.post("/dishes/", json={"name": "Tea", "price": "10.00", "category": "drinks"})
    tea = response.json()

    response = await client.post("/dishes/", json={"name": "Refund", "price": "-1"})
    assert response.status_code == 422

    response = await client.get("/dishes/", params={"sort_by": "price", "order": "asc"})
    assert [d["id"] for d in response.json()] == [tea["id"], soup["id"]]

    response = await client.get("/dishes/", params={"category": "soups"})
    assert [d["id"] for d in response.json()] == [soup["id"]]

    response = await client.get("/dishes/", params={"page": 1, "size": 1})
    assert [d["id"] for d in response.json()] == [tea["id"]]

    response = await client.get("/dishes/", params={"sort_by": "calories"})
    assert response.status_code == 400

    response = await client.put(f"/dishes/{soup['id']}", json={"is_available": False})
    assert response.status_code == 200
    assert response.json()["is_available"] is False
    assert float(response.json()["price"]) == 50.0

    await client.post("/orders/", json={"user_id": alice.id, "dish_ids": [soup["id"]]})
    response = await client.delete(f"/dishes/{soup['id']}")
    assert response.status_code == 409

    response = await client.delete(f"/dishes/{tea['id']}")
    assert response.status_code == 204
    response = await client.get(f"/dishes/{tea['id']}")
    assert response.status_code == 404


async def test_review_routes(client, alice, bob, soup):
    response = await client.post(
        "/reviews/",
        json={"dish_id": soup.id, "rating": 4, "comment": "tasty"},
        headers={"X-User-Email": alice.email},
    )
    assert response.status_code == 201
    review = response.json()
    assert review["user_id"] == alice.id

    response = await client.post(
        "/reviews/", json={"dish_id": soup.id, "rating": 2}, headers={"X-User-Email": bob.email}
    )
    assert response.status_code == 201

    response = await client.put(
        f"/reviews/{review['id']}", json={"rating": 1}, headers={"X-User-Email": bob.email}
    )
    assert response.status_code == 403

    response = await client.put(
        f"/reviews/{review['id']}", json={"rating": 5, "comment": "even better"}, headers={"X-User-Email": alice.email}
    )
    assert response.status_code == 200
    assert response.json()["rating"] == 5

    response = await client.get("/reviews/", params={"sort_by": "rating", "order": "desc"})
    assert [r["rating"] for r in response.json()] == [5, 2]

    assert len((await client.get(f"/reviews/dish/{soup.id}")).json()) == 2
    assert [r["id"] for r in (await client.get(f"/reviews/user/{alice.id}")).json()] == [review["id"]]

    response = await client.delete(f"/reviews/{review['id']}")
    assert response.status_code == 204
    response = await client.get(f"/reviews/{review['id']}")
    assert response.status_code == 404


async def test_user_routes(client):
    response = await client.post("/users/", json={"name": "Carol", "email": "carol@example.com"})
    assert response.status_code == 201
    carol = response.json()
    assert carol["role"] == "user"

    response = await client.post("/users/", json={"name": "Carol Again", "email": "carol@example.com"})
    assert response.status_code == 409

    response = await client.put(f"/users/{carol['id']}", json={"name": "Carol Smith"})
    assert response.status_code == 200
    assert response.json()["name"] == "Carol Smith"
    assert response.json()["email"] == "carol@example.com"

    response = await client.put("/users/404", json={"name": "Nobody"})
    assert response.status_code == 404
