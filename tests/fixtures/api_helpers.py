"""Shortcuts for setting up state through the API in route tests."""
from typing import Any, Dict

from fastapi import status
from fastapi.testclient import TestClient

from tests.fixtures.auth import auth_headers

SHIPPING_ADDRESS = {
    "street": "1 Infinite Loop",
    "city": "Cupertino",
    "state": "CA",
    "zip_code": "95014",
    "country": "US",
}


def create_profile(client: TestClient, token: str) -> Dict[str, Any]:
    response = client.post("/v1/auth/create-profile", headers=auth_headers(token))
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


def create_design(client: TestClient, token: str, publish: bool = False, **fields: Any) -> Dict[str, Any]:
    body = {"name": "Sunset Surfer", "elements": [{"type": "text", "value": "Surf's up"}], **fields}
    response = client.post("/v1/designs", json=body, headers=auth_headers(token))
    assert response.status_code == status.HTTP_201_CREATED
    design = response.json()["data"]
    if publish:
        response = client.put(
            f"/v1/designs/{design['id']}", json={"status": "published"}, headers=auth_headers(token)
        )
        assert response.status_code == status.HTTP_200_OK
        design = response.json()["data"]
    return design


def get_profile(client: TestClient, token: str) -> Dict[str, Any]:
    response = client.get("/v1/users/profile", headers=auth_headers(token))
    assert response.status_code == status.HTTP_200_OK
    return response.json()["data"]
