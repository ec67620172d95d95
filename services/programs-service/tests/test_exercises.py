from fastapi.testclient import TestClient


def test_exercise_catalog_endpoints(client: TestClient):
    r_squat = client.post(
        "/api/v1/exercises/",
        json={"name": "Back Squat", "muscle_group": "quadriceps", "equipment": "barbell", "location": "gym"},
    )
    assert r_squat.status_code == 201, r_squat.text
    squat = r_squat.json()
    assert squat["is_favorite"] is False
    assert squat["category"] == "strength"

    client.post("/api/v1/exercises/", json={"name": "Sun Salutation", "category": "yoga"})

    r_dup = client.post("/api/v1/exercises/", json={"name": "back squat"})
    assert r_dup.status_code == 409

    names = [e["name"] for e in client.get("/api/v1/exercises/").json()]
    assert names == ["Back Squat", "Sun Salutation"]
    assert [e["name"] for e in client.get("/api/v1/exercises/", params={"category": "yoga"}).json()] == [
        "Sun Salutation"
    ]
    assert [e["name"] for e in client.get("/api/v1/exercises/", params={"search": "SQUAT"}).json()] == ["Back Squat"]

    r_fav = client.post(f"/api/v1/exercises/{squat['id']}/favorite")
    assert r_fav.json()["is_favorite"] is True
    favorites = client.get("/api/v1/exercises/", params={"favorites_only": True}).json()
    assert [e["id"] for e in favorites] == [squat["id"]]

    assert client.get(f"/api/v1/exercises/{squat['id']}").json()["muscle_group"] == "quadriceps"
    assert client.get("/api/v1/exercises/9999").status_code == 404
