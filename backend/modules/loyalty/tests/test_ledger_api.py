# backend/modules/loyalty/tests/test_ledger_api.py

"""
HTTP contract tests for the rewards API.
"""

import pytest
from fastapi.testclient import TestClient

from tests.factories import LoyaltyAccountFactory


def earn(client: TestClient, customer_id="c1", amount=10, method="cash", **extra):
    payload = {
        "customer_id": customer_id,
        "order_amount": amount,
        "payment_method": method,
        **extra,
    }
    return client.post("/api/v1/rewards/earn", json=payload)


class TestEarnEndpoint:

    def test_earn_success(self, client: TestClient, audit_sink):
        response = earn(client, order_id="ord_1", customer_name="Alice")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["tokens_earned"] == 20
        assert data["new_balance"] == 20
        assert data["tier"] == "Bronze"
        assert data["breakdown"] == {
            "base_tokens": 20,
            "bonus_tokens": 0,
            "reason": "Standard rate: 2 tokens per dollar for $10.00 order",
        }
        assert data["transaction"]["type"] == "earned"
        assert data["transaction"]["order_id"] == "ord_1"
        assert len(audit_sink.events) == 1

    def test_payment_method_is_normalized(self, client: TestClient):
        response = earn(client, method="USDC")

        assert response.status_code == 200
        assert response.json()["tokens_earned"] == 40

    @pytest.mark.parametrize(
        "payload",
        [
            {"customer_id": "c1", "order_amount": -5},
            {"customer_id": "c1", "order_amount": 0},
            {"customer_id": "", "order_amount": 10},
            {"customer_id": "  ", "order_amount": 10},
            {"order_amount": 10},
            {"customer_id": "c1"},
            {"customer_id": "c1", "order_amount": "lots"},
            {"customer_id": "c1", "order_amount": 1e19},
            {"customer_id": "c1", "order_amount": 1000000.01},
        ],
    )
    def test_invalid_earn_request(self, client: TestClient, payload):
        response = client.post("/api/v1/rewards/earn", json=payload)

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "invalid_request"
        assert data["path"] == "/api/v1/rewards/earn"
        assert data["details"]["validation_errors"]


class TestRedeemEndpoint:

    def test_redeem_success(self, client: TestClient):
        earn(client, amount=10)
        earn(client, amount=10, method="usdc")

        response = client.post(
            "/api/v1/rewards/redeem",
            json={"customer_id": "c1", "reward_id": "free-drink", "cost": 50},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tokens_redeemed"] == 50
        assert data["new_balance"] == 10
        assert data["dollar_value"] == "0.50"
        assert data["transaction"]["type"] == "redeemed"
        assert data["transaction"]["reward_id"] == "free-drink"

    def test_insufficient_balance(self, client: TestClient):
        earn(client, amount=5)

        response = client.post(
            "/api/v1/rewards/redeem",
            json={"customer_id": "c1", "reward_id": "x", "cost": 100},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "insufficient_balance"
        assert data["details"]["current_balance"] == 10
        assert client.get("/api/v1/rewards/balance/c1").json()["balance"] == 10

    def test_unknown_customer(self, client: TestClient):
        response = client.post(
            "/api/v1/rewards/redeem",
            json={"customer_id": "ghost", "reward_id": "x", "cost": 1},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found"

    @pytest.mark.parametrize("cost", [0, -10, 1.5, "50", None])
    def test_invalid_cost(self, client: TestClient, cost):
        earn(client, amount=100)

        response = client.post(
            "/api/v1/rewards/redeem",
            json={"customer_id": "c1", "reward_id": "x", "cost": cost},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_request"


class TestQueryEndpoints:

    def test_balance(self, client: TestClient):
        earn(client, amount=300)

        response = client.get("/api/v1/rewards/balance/c1")

        assert response.status_code == 200
        data = response.json()
        assert data["customer_id"] == "c1"
        assert data["balance"] == 600
        assert data["total_earned"] == 600
        assert data["total_redeemed"] == 0
        assert data["tier"] == "Silver"
        assert data["total_spent"] == 300.0

    def test_balance_unknown_customer(self, client: TestClient):
        response = client.get("/api/v1/rewards/balance/ghost")

        assert response.status_code == 404
        assert response.json()["details"]["identifier"] == "ghost"

    def test_transactions(self, client: TestClient):
        earn(client, amount=1, order_id="a")
        earn(client, amount=1, order_id="b")

        response = client.get("/api/v1/rewards/transactions/c1", params={"limit": 1})

        assert response.status_code == 200
        transactions = response.json()["transactions"]
        assert len(transactions) == 1
        assert transactions[0]["order_id"] == "b"

    def test_transactions_limit_is_bounded(self, client: TestClient):
        earn(client, amount=1)

        response = client.get("/api/v1/rewards/transactions/c1", params={"limit": 51})

        assert response.status_code == 400

    def test_leaderboard(self, client: TestClient):
        LoyaltyAccountFactory(customer_id="a", total_earned=1600)
        LoyaltyAccountFactory(customer_id="b", total_earned=5200, total_redeemed=5000)
        LoyaltyAccountFactory(customer_id="c", total_earned=20)

        response = client.get("/api/v1/rewards/leaderboard", params={"top_n": 2})

        assert response.status_code == 200
        assert response.json()["leaderboard"] == [
            {"customer_id": "b", "total_earned": 5200, "tier": "Platinum"},
            {"customer_id": "a", "total_earned": 1600, "tier": "Gold"},
        ]


class TestAdminEndpoints:

    def test_customer_profile(self, client: TestClient):
        earn(client, amount=800, customer_name="Alice", customer_email="a@example.com")

        response = client.get("/api/v1/rewards/customers/c1")

        assert response.status_code == 200
        data = response.json()
        assert data["customer_name"] == "Alice"
        assert data["tier"] == "Gold"
        assert data["tier_benefits"] == {"special_offers": ["10% birthday discount"]}
        assert len(data["recent_transactions"]) == 1

    def test_customer_profile_unknown(self, client: TestClient):
        assert client.get("/api/v1/rewards/customers/ghost").status_code == 404

    def test_customer_list(self, client: TestClient):
        earn(client, "c1", amount=10)
        earn(client, "c2", amount=30)

        response = client.get("/api/v1/rewards/customers")

        assert response.status_code == 200
        data = response.json()
        assert [c["customer_id"] for c in data["customers"]] == ["c2", "c1"]
        assert data["stats"]["total_customers"] == 2
        assert data["stats"]["total_tokens_issued"] == 80

    def test_program_stats(self, client: TestClient):
        earn(client, "c1", amount=10)

        response = client.get("/api/v1/rewards/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total_customers"] == 1
        assert data["active_customers"] == 1
        assert data["recent_activity"] == {"tokens_earned": 20, "tokens_redeemed": 0}
        assert data["top_customers"][0]["customer_id"] == "c1"
