"""Integration tests for transaction endpoints"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


@pytest.fixture
def account_id(client: TestClient, headers: dict) -> str:
    response = client.post("/v1/accounts", json={"name": "Everyday", "type": "checking"}, headers=headers)
    return response.json()["id"]


def post_transaction(client: TestClient, headers: dict, account_id: str, **overrides):
    body = {
        "account_id": account_id,
        "date": "2024-03-10",
        "description": "Groceries",
        "amount": -54.2,
        "category": "Food",
    }
    body.update(overrides)
    return client.post("/v1/transactions", json=body, headers=headers)


def test_create_transaction(client: TestClient, headers: dict, account_id: str):
    response = post_transaction(client, headers, account_id)

    assert response.status_code == 201
    data = response.json()
    assert data["created"] is True
    assert data["transaction"]["amount"] == -54.2
    assert data["transaction"]["currency"] == "USD"


def test_duplicate_external_id_is_idempotent(client: TestClient, headers: dict, account_id: str):
    first = post_transaction(client, headers, account_id, external_transaction_id="ext_tx_1")
    second = post_transaction(client, headers, account_id, external_transaction_id="ext_tx_1", amount=-99)

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["created"] is False
    assert second.json()["transaction"]["id"] == first.json()["transaction"]["id"]
    assert second.json()["transaction"]["amount"] == -54.2
    assert len(client.get("/v1/transactions", headers=headers).json()["transactions"]) == 1


def test_transactions_without_external_id_are_not_deduplicated(client: TestClient, headers: dict, account_id: str):
    post_transaction(client, headers, account_id)
    post_transaction(client, headers, account_id)

    assert len(client.get("/v1/transactions", headers=headers).json()["transactions"]) == 2


def test_unknown_account(client: TestClient, headers: dict):
    assert post_transaction(client, headers, "missing").status_code == 404


def test_list_transactions_newest_first_with_filters(client: TestClient, headers: dict, account_id: str):
    other = client.post("/v1/accounts", json={"name": "Card", "type": "credit"}, headers=headers).json()["id"]
    post_transaction(client, headers, account_id, date="2024-03-01", description="Older")
    post_transaction(client, headers, account_id, date="2024-03-12", description="Newer")
    post_transaction(client, headers, other, date="2024-03-14", description="On card")

    everything = client.get("/v1/transactions", headers=headers).json()["transactions"]
    assert [t["description"] for t in everything] == ["On card", "Newer", "Older"]

    checking = client.get(f"/v1/transactions?account_id={account_id}", headers=headers).json()["transactions"]
    assert [t["description"] for t in checking] == ["Newer", "Older"]

    latest = client.get("/v1/transactions?limit=1", headers=headers).json()["transactions"]
    assert [t["description"] for t in latest] == ["On card"]


def test_deleting_account_removes_its_transactions(client: TestClient, headers: dict, account_id: str):
    post_transaction(client, headers, account_id)

    client.delete(f"/v1/accounts/{account_id}", headers=headers)

    assert client.get("/v1/transactions", headers=headers).json()["transactions"] == []
