"""Unit tests for the pool HTTP API."""

import pytest
from fastapi.testclient import TestClient

from dex.api.endpoints import get_exchange
from dex.api.main import app
from dex.constants import MAX_ALLOWANCE
from dex.exchange import Exchange, create_exchange
from tests.helpers import ALICE, OWNER


@pytest.fixture
def exchange() -> Exchange:
    """Fresh exchange per test so pool state never leaks between tests."""
    return create_exchange()


@pytest.fixture
def client(exchange: Exchange):
    """Test client wired to the per-test exchange."""
    app.dependency_overrides[get_exchange] = lambda: exchange
    yield TestClient(app)
    app.dependency_overrides.clear()


def _fund(client: TestClient, exchange: Exchange, account: str, amount: int) -> None:
    for symbol in ("TKA", "TKB"):
        response = client.post(
            f"/tokens/{symbol}/mint", json={"to": account, "amount": str(amount)}
        )
        assert response.status_code == 200
        response = client.post(
            f"/tokens/{symbol}/approve",
            json={"owner": account, "spender": exchange.pool.address, "amount": str(MAX_ALLOWANCE)},
        )
        assert response.status_code == 200


@pytest.fixture
def seeded_client(client: TestClient, exchange: Exchange) -> TestClient:
    """Client whose pool OWNER seeded with 100 A / 400 B; ALICE is funded too."""
    _fund(client, exchange, OWNER, 10_000)
    _fund(client, exchange, ALICE, 10_000)
    response = client.post(
        "/pool/liquidity/add",
        json={"provider": OWNER, "amountA": "100", "amountB": "400"},
    )
    assert response.status_code == 200
    return client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestPoolQueries:
    """Tests for read-only pool endpoints."""

    def test_empty_pool_summary(self, client, exchange):
        response = client.get("/pool")

        assert response.status_code == 200
        data = response.json()
        assert data["address"] == exchange.pool.address
        assert data["reserveA"] == "0"
        assert data["reserveB"] == "0"
        assert data["totalLiquidity"] == "0"
        assert data["price"] is None

    def test_price_on_empty_pool_is_conflict(self, client):
        response = client.get("/pool/price")

        assert response.status_code == 409
        assert response.json() == {"detail": "Zero reserves", "error": "ZeroReservesError"}

    def test_price_after_seeding(self, seeded_client):
        response = seeded_client.get("/pool/price")

        assert response.status_code == 200
        assert response.json() == {"price": str(4 * 10**18), "priceScale": str(10**18)}

    def test_reserves(self, seeded_client):
        response = seeded_client.get("/pool/reserves")

        assert response.json() == {"reserveA": "100", "reserveB": "400"}

    def test_quote(self, client):
        response = client.get(
            "/pool/quote", params={"amountIn": 10, "reserveIn": 100, "reserveOut": 200}
        )

        assert response.status_code == 200
        assert response.json() == {"amountOut": "18"}

    def test_quote_rejects_negative(self, client):
        response = client.get(
            "/pool/quote", params={"amountIn": -1, "reserveIn": 100, "reserveOut": 200}
        )

        assert response.status_code == 422

    def test_liquidity_of_owner(self, seeded_client):
        response = seeded_client.get(f"/pool/liquidity/{OWNER}")

        assert response.json() == {"owner": OWNER, "shares": "200", "totalLiquidity": "200"}

    def test_liquidity_invalid_address(self, client):
        response = client.get("/pool/liquidity/not-an-address")

        assert response.status_code == 422


class TestPoolOperations:
    """Tests for mutating pool endpoints."""

    def test_add_liquidity_mints_sqrt_shares(self, seeded_client, exchange):
        assert exchange.pool.liquidity_of(OWNER) == 200

    def test_add_liquidity_zero_amounts(self, seeded_client):
        response = seeded_client.post(
            "/pool/liquidity/add",
            json={"provider": ALICE, "amountA": "0", "amountB": "10"},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Zero amounts", "error": "ZeroAmountsError"}

    def test_add_liquidity_without_allowance(self, client, exchange):
        client.post("/tokens/TKA/mint", json={"to": ALICE, "amount": "100"})
        client.post("/tokens/TKB/mint", json={"to": ALICE, "amount": "100"})

        response = client.post(
            "/pool/liquidity/add",
            json={"provider": ALICE, "amountA": "100", "amountB": "100"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientAllowanceError"
        assert exchange.pool.get_reserves() == (0, 0)

    def test_add_liquidity_malformed_amount(self, client):
        response = client.post(
            "/pool/liquidity/add",
            json={"provider": ALICE, "amountA": "ten", "amountB": "10"},
        )

        assert response.status_code == 422

    def test_remove_liquidity(self, seeded_client):
        response = seeded_client.post(
            "/pool/liquidity/remove",
            json={"provider": OWNER, "shares": "50"},
        )

        assert response.status_code == 200
        assert response.json() == {"amountA": "25", "amountB": "100"}

    def test_remove_more_than_owned(self, seeded_client):
        response = seeded_client.post(
            "/pool/liquidity/remove",
            json={"provider": OWNER, "shares": "201"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid amount"

    def test_swap(self, seeded_client, exchange):
        expected = exchange.pool.get_amount_out(10, 100, 400)

        response = seeded_client.post(
            "/pool/swap",
            json={"trader": ALICE, "direction": "a_to_b", "amountIn": "10"},
        )

        assert response.status_code == 200
        assert response.json() == {"amountOut": str(expected)}
        assert exchange.pool.get_reserves() == (110, 400 - expected)

    def test_swap_zero_amount(self, seeded_client):
        response = seeded_client.post(
            "/pool/swap",
            json={"trader": ALICE, "direction": "b_to_a", "amountIn": "0"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Zero amount"

    def test_swap_unknown_direction(self, seeded_client):
        response = seeded_client.post(
            "/pool/swap",
            json={"trader": ALICE, "direction": "sideways", "amountIn": "10"},
        )

        assert response.status_code == 422

    def test_swap_on_empty_pool(self, client):
        response = client.post(
            "/pool/swap",
            json={"trader": ALICE, "direction": "a_to_b", "amountIn": "10"},
        )

        assert response.status_code == 409

    def test_events(self, seeded_client):
        seeded_client.post(
            "/pool/swap",
            json={"trader": ALICE, "direction": "a_to_b", "amountIn": "10"},
        )

        response = seeded_client.get("/pool/events")

        assert response.status_code == 200
        kinds = [event["kind"] for event in response.json()]
        assert kinds == ["liquidity_added", "swap"]
        assert response.json()[1]["direction"] == "a_to_b"


class TestTokenEndpoints:
    """Tests for token ledger endpoints."""

    def test_mint_and_balance(self, client, exchange):
        client.post("/tokens/TKA/mint", json={"to": ALICE, "amount": "42"})

        response = client.get(f"/tokens/tka/balances/{ALICE}")

        assert response.status_code == 200
        assert response.json() == {
            "token": exchange.token_a.address,
            "owner": ALICE,
            "balance": "42",
        }

    def test_unknown_token(self, client):
        response = client.post("/tokens/XYZ/mint", json={"to": ALICE, "amount": "1"})

        assert response.status_code == 404

    def test_mint_overflow(self, client):
        client.post("/tokens/TKA/mint", json={"to": ALICE, "amount": str(MAX_ALLOWANCE)})

        response = client.post("/tokens/TKA/mint", json={"to": ALICE, "amount": "1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Uint256Overflow"

    def test_approve_returns_allowance(self, client, exchange):
        response = client.post(
            "/tokens/TKB/approve",
            json={"owner": ALICE, "spender": exchange.pool.address, "amount": "7"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "token": exchange.token_b.address,
            "owner": ALICE,
            "spender": exchange.pool.address,
            "allowance": "7",
        }
        assert exchange.token_b.allowance(ALICE, exchange.pool.address) == 7
