# tests/helpers.py

from fastapi.testclient import TestClient


def register(client: TestClient, email="a@x.com", password="secret1", name="Alice") -> dict:
    res = client.post(
        "/api/auth/register", json={"email": email, "password": password, "name": name}
    )
    assert res.status_code == 201, res.text
    return res.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_todo(client: TestClient, token: str, **fields) -> dict:
    payload = {"title": "Test Task", **fields}
    res = client.post("/api/todos", json=payload, headers=auth_headers(token))
    assert res.status_code == 201, res.text
    return res.json()
