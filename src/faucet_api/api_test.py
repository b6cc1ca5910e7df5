import pytest
from fastapi.testclient import TestClient

from faucet_api.api import app, get_ledger
from faucet_api.ledger import FaucetLedger
from token_printer.algorithm.proof_of_work import solve, verify

MIN_DIFFICULTY = 8
TRANSFER_AMOUNT = 100 * 10**24


@pytest.fixture
def ledger():
    return FaucetLedger(TRANSFER_AMOUNT, MIN_DIFFICULTY, accounts=["alice", "test.alice"])


@pytest.fixture
def client(ledger):
    """Test client backed by a fresh ledger."""
    app.dependency_overrides[get_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestFaucetInfo:
    """Tests for GET /api/faucet"""

    def test_info(self, client):
        response = client.get("/api/faucet")
        assert response.status_code == 200
        assert response.json() == {
            "transfer_amount": str(TRANSFER_AMOUNT),
            "min_difficulty": MIN_DIFFICULTY,
            "num_transfers": 0,
        }


class TestAccounts:
    """Tests for GET /api/accounts/{account_id}"""

    def test_known_account(self, client):
        response = client.get("/api/accounts/test.alice")
        assert response.status_code == 200
        assert response.json() == {"account_id": "test.alice", "exists": True}

    def test_unknown_account(self, client):
        response = client.get("/api/accounts/nobody")
        assert response.status_code == 404
        assert "does not exist" in response.json()["detail"]


class TestTransfers:
    """Tests for POST /api/transfers"""

    def test_valid_proof(self, client):
        salt = solve("alice", MIN_DIFFICULTY, 0)
        response = client.post("/api/transfers", json={"account_id": "alice", "salt": salt})
        assert response.status_code == 200
        data = response.json()
        assert data["account_id"] == "alice"
        assert data["salt"] == salt
        assert data["amount"] == str(TRANSFER_AMOUNT)
        assert data["hash_hex"].startswith("00")
        assert data["num_transfers"] == 1
        assert client.get("/api/faucet").json()["num_transfers"] == 1

    def test_weak_proof(self, client):
        weak = next(s for s in range(100) if not verify("alice", s, MIN_DIFFICULTY))
        response = client.post("/api/transfers", json={"account_id": "alice", "salt": weak})
        assert response.status_code == 400
        assert response.json()["detail"] == "The proof of work is too weak"

    def test_reused_hash(self, client):
        salt = solve("alice", MIN_DIFFICULTY, 0)
        assert client.post("/api/transfers", json={"account_id": "alice", "salt": salt}).status_code == 200
        response = client.post("/api/transfers", json={"account_id": "alice", "salt": salt})
        assert response.status_code == 409
        assert response.json()["detail"] == "The given hash is already used for transfer"
        assert client.get("/api/faucet").json()["num_transfers"] == 1

    def test_same_account_new_salt(self, client):
        """One account may be funded several times with different proofs"""
        first = solve("alice", MIN_DIFFICULTY, 0)
        second = solve("alice", MIN_DIFFICULTY, first + 1)
        for salt in (first, second):
            assert client.post("/api/transfers", json={"account_id": "alice", "salt": salt}).status_code == 200
        assert client.get("/api/faucet").json()["num_transfers"] == 2

    @pytest.mark.parametrize(
        "payload",
        [
            {"account_id": "Alice", "salt": 1},
            {"account_id": "a", "salt": 1},
            {"account_id": "alice..bob", "salt": 1},
            {"account_id": "alice", "salt": -1},
            {"account_id": "alice", "salt": 2**64},
            {"account_id": "alice"},
        ],
    )
    def test_malformed_request(self, client, payload):
        response = client.post("/api/transfers", json=payload)
        assert response.status_code == 422
