"""
Tests for chart of accounts API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business logic is tested in
test_account_service.py.
"""

from decimal import Decimal


def create(client, code, name, account_type, parent_id=None):
    return client.post("/accounts", json={
        "code": code,
        "name": name,
        "account_type": account_type,
        "parent_id": parent_id,
    })


class TestCreateAccount:

    def test_create_account_returns_201(self, client):
        response = create(client, "1000", "Cash", "asset")
        assert response.status_code == 201

    def test_create_account_returns_data(self, client):
        data = create(client, "1000", "Cash", "Asset").json()

        assert data["code"] == "1000"
        assert data["name"] == "Cash"
        assert data["account_type"] == "asset"
        assert data["parent_id"] is None
        assert Decimal(data["balance"]) == 0

    def test_duplicate_code_returns_409(self, client):
        create(client, "1000", "Cash", "asset")
        response = create(client, "1000", "Petty Cash", "asset")

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

        accounts = client.get("/accounts").json()
        assert [a["name"] for a in accounts] == ["Cash"]

    def test_invalid_type_returns_400(self, client):
        response = create(client, "9000", "Mystery", "goodwill")

        assert response.status_code == 400
        assert "Invalid account type" in response.json()["detail"]

    def test_unknown_parent_returns_404(self, client):
        response = create(client, "1010", "Till", "asset", parent_id=999)
        assert response.status_code == 404

    def test_child_account(self, client):
        parent = create(client, "1000", "Cash", "asset").json()
        child = create(client, "1010", "Till", "asset", parent_id=parent["id"]).json()
        assert child["parent_id"] == parent["id"]

    def test_blank_code_returns_422(self, client):
        response = create(client, "   ", "Cash", "asset")
        assert response.status_code == 422


class TestReadAccounts:

    def test_list_in_registration_order(self, client):
        create(client, "4000", "Revenue", "revenue")
        create(client, "1000", "Cash", "asset")

        codes = [a["code"] for a in client.get("/accounts").json()]
        assert codes == ["4000", "1000"]

    def test_list_filtered_by_type(self, client):
        create(client, "4000", "Revenue", "revenue")
        create(client, "1000", "Cash", "asset")

        response = client.get("/accounts", params={"account_type": "asset"})
        assert [a["code"] for a in response.json()] == ["1000"]

    def test_list_with_unknown_type_returns_400(self, client):
        response = client.get("/accounts", params={"account_type": "goodwill"})
        assert response.status_code == 400

    def test_get_account(self, client):
        account_id = create(client, "1000", "Cash", "asset").json()["id"]

        response = client.get(f"/accounts/{account_id}")
        assert response.status_code == 200
        assert response.json()["code"] == "1000"

    def test_get_unknown_returns_404(self, client):
        response = client.get("/accounts/999")
        assert response.status_code == 404


class TestRenameAccount:

    def test_rename(self, client):
        account_id = create(client, "1000", "Cash", "asset").json()["id"]

        response = client.patch(f"/accounts/{account_id}", json={"name": "Cash at Bank"})
        assert response.status_code == 200
        assert response.json()["name"] == "Cash at Bank"
        assert response.json()["code"] == "1000"

    def test_rename_unknown_returns_404(self, client):
        response = client.patch("/accounts/999", json={"name": "Nobody"})
        assert response.status_code == 404


class TestDeleteAccount:

    def test_delete_unused_returns_204(self, client):
        account_id = create(client, "1000", "Cash", "asset").json()["id"]

        response = client.delete(f"/accounts/{account_id}")
        assert response.status_code == 204
        assert client.get(f"/accounts/{account_id}").status_code == 404

    def test_delete_with_postings_returns_409(self, client):
        cash = create(client, "1000", "Cash", "asset").json()
        revenue = create(client, "4000", "Revenue", "revenue").json()
        client.post("/transactions", json={
            "description": "Sale",
            "transaction_date": "2024-01-15",
            "journal_entries": [
                {"account_id": cash["id"], "debit_amount": "10.00"},
                {"account_id": revenue["id"], "credit_amount": "10.00"},
            ],
        })

        response = client.delete(f"/accounts/{cash['id']}")
        assert response.status_code == 409
        assert "posted entries" in response.json()["detail"]

    def test_delete_parent_returns_409(self, client):
        parent = create(client, "1000", "Cash", "asset").json()
        create(client, "1010", "Till", "asset", parent_id=parent["id"])

        response = client.delete(f"/accounts/{parent['id']}")
        assert response.status_code == 409


class TestAccountEntries:

    def test_entries_newest_first(self, client):
        cash = create(client, "1000", "Cash", "asset").json()
        revenue = create(client, "4000", "Revenue", "revenue").json()
        for day, amount in [("2024-01-10", "10.00"), ("2024-02-10", "25.00")]:
            client.post("/transactions", json={
                "description": "Sale",
                "transaction_date": day,
                "journal_entries": [
                    {"account_id": cash["id"], "debit_amount": amount},
                    {"account_id": revenue["id"], "credit_amount": amount},
                ],
            })

        response = client.get(f"/accounts/{cash['id']}/entries")
        assert response.status_code == 200
        entries = response.json()
        assert [Decimal(e["debit_amount"]) for e in entries] == [
            Decimal("25.00"), Decimal("10.00"),
        ]
        assert all(e["entry_type"] == "debit" for e in entries)

    def test_unknown_account_returns_404(self, client):
        response = client.get("/accounts/999/entries")
        assert response.status_code == 404
