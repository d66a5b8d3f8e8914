"""
Integration tests for the API routes.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from main import app
from splitease.apis.dependencies import get_store
from splitease.services.session_store import SessionStore


class ApiTestCase:
    """Fresh store per test, wired in through the dependency override."""

    def setup_method(self):
        """Set up test client."""
        self.store = SessionStore()
        app.dependency_overrides[get_store] = lambda: self.store
        self.client = TestClient(app)

    def teardown_method(self):
        app.dependency_overrides.clear()

    def create_session(self, title="Goa Trip"):
        response = self.client.post("/api/sessions/", json={"title": title})
        assert response.status_code == 201
        return response.json()["data"]

    def add_member(self, session_id, name):
        response = self.client.post(f"/api/sessions/{session_id}/members/", json={"name": name})
        assert response.status_code == 201
        return response.json()["data"]["id"]


class TestSessionRoutes(ApiTestCase):
    """Test session API routes."""

    def test_healthz(self):
        response = self.client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_create_and_join(self):
        session = self.create_session()

        response = self.client.post("/api/sessions/join", json={"pin": session["pin"]})

        assert response.status_code == 200
        data = response.json()
        assert data["data"]["id"] == session["id"]
        assert data["data"]["title"] == "Goa Trip"

    def test_join_unknown_pin(self):
        response = self.client.post("/api/sessions/join", json={"pin": "999999"})
        assert response.status_code == 404

    def test_unknown_session(self):
        response = self.client.get("/api/sessions/nope")
        assert response.status_code == 404

    def test_update_and_delete(self):
        session = self.create_session()

        response = self.client.patch(f"/api/sessions/{session['id']}", json={"currency": "USD"})
        assert response.status_code == 200
        assert response.json()["data"]["currency"] == "USD"

        response = self.client.delete(f"/api/sessions/{session['id']}")
        assert response.status_code == 204
        assert self.client.get(f"/api/sessions/{session['id']}").status_code == 404

    def test_activities(self):
        session = self.create_session()
        self.add_member(session["id"], "Asha")

        response = self.client.get(f"/api/sessions/{session['id']}/activities")

        assert response.status_code == 200
        types = [a["type"] for a in response.json()["data"]]
        assert types == ["member_added", "session_created"]

    def test_analytics(self):
        session = self.create_session()
        asha = self.add_member(session["id"], "Asha")
        self.client.post(
            f"/api/sessions/{session['id']}/expenses/",
            json={"title": "Pizza", "amount": "24.00", "paid_by": asha, "participants": [asha], "category": "food"},
        )

        response = self.client.get(f"/api/sessions/{session['id']}/analytics")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_spent"] == "24.00"
        assert data["by_category"][0]["category"] == "food"
        assert data["by_member"] == [{"member_id": asha, "name": "Asha", "amount": "24.00"}]
        assert len(data["timeline"]) == 1

    @patch("splitease.apis.routes.session_routes.CSVExporter.to_csv")
    def test_export_failure_is_500(self, mock_to_csv):
        """Test unexpected errors are reported as 500."""
        mock_to_csv.side_effect = RuntimeError("disk full")
        session = self.create_session()

        response = self.client.get(f"/api/sessions/{session['id']}/export/expenses.csv")

        assert response.status_code == 500
        assert "disk full" in response.json()["detail"]


class TestExpenseRoutes(ApiTestCase):
    """Test expense API routes."""

    def setup_method(self):
        super().setup_method()
        self.session = self.create_session()
        self.a = self.add_member(self.session["id"], "A")
        self.b = self.add_member(self.session["id"], "B")

    def test_add_expense(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Lunch", "amount": "40", "paid_by": self.a, "participants": [self.a, self.b]},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["amount"] == "40.00"
        assert data["split"] == "equal"

    def test_percentages_must_add_up(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={
                "title": "Hotel",
                "amount": "200",
                "paid_by": self.a,
                "participants": [self.a, self.b],
                "split": "percentage",
                "custom_splits": {self.a: 50, self.b: 40},
            },
        )
        assert response.status_code == 422

    def test_empty_participants_rejected(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Lunch", "amount": "40", "paid_by": self.a, "participants": []},
        )
        assert response.status_code == 422

    def test_unknown_payer_is_bad_request(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Lunch", "amount": "40", "paid_by": "ghost", "participants": [self.a]},
        )
        assert response.status_code == 400

    def test_member_in_use_cannot_be_removed(self):
        self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Lunch", "amount": "40", "paid_by": self.a, "participants": [self.a, self.b]},
        )

        response = self.client.delete(f"/api/sessions/{self.session['id']}/members/{self.b}")

        assert response.status_code == 400
        assert "involved in expenses" in response.json()["detail"]

    def _add_percentage_expense(self):
        return self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={
                "title": "Hotel",
                "amount": "100.00",
                "paid_by": self.a,
                "participants": [self.a, self.b],
                "split": "percentage",
                "custom_splits": {self.a: 50, self.b: 50},
            },
        ).json()["data"]

    def test_partial_updates_are_checked_against_stored_expense(self):
        expense = self._add_percentage_expense()
        url = f"/api/sessions/{self.session['id']}/expenses/{expense['id']}"

        assert self.client.put(url, json={"custom_splits": {self.b: 1}}).status_code == 422
        assert self.client.put(url, json={"amount": "300.00", "split": "amount"}).status_code == 422
        assert self.client.put(url, json={"participants": [self.a]}).status_code == 422

        balances = self.client.get(f"/api/sessions/{self.session['id']}/balances").json()["data"]["balances"]
        assert {row["name"]: row["balance"] for row in balances} == {"A": "50.00", "B": "-50.00"}

    def test_valid_partial_update(self):
        expense = self._add_percentage_expense()
        url = f"/api/sessions/{self.session['id']}/expenses/{expense['id']}"

        response = self.client.put(url, json={"custom_splits": {self.a: 25, self.b: 75}})

        assert response.status_code == 200
        assert response.json()["data"]["custom_splits"] == {self.a: "25", self.b: "75"}

    def test_update_and_remove_expense(self):
        created = self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Lunch", "amount": "40", "paid_by": self.a, "participants": [self.a, self.b]},
        ).json()["data"]

        response = self.client.put(
            f"/api/sessions/{self.session['id']}/expenses/{created['id']}",
            json={"title": "Late lunch", "amount": "50"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Late lunch"
        assert response.json()["data"]["amount"] == "50.00"

        response = self.client.delete(f"/api/sessions/{self.session['id']}/expenses/{created['id']}")
        assert response.status_code == 204
        assert self.client.get(f"/api/sessions/{self.session['id']}/expenses/").json()["data"] == []


class TestSettlementRoutes(ApiTestCase):
    """Test balance and settlement API routes."""

    def setup_method(self):
        super().setup_method()
        self.session = self.create_session()
        self.a = self.add_member(self.session["id"], "A")
        self.b = self.add_member(self.session["id"], "B")
        self.c = self.add_member(self.session["id"], "C")
        self.client.post(
            f"/api/sessions/{self.session['id']}/expenses/",
            json={"title": "Dinner", "amount": "90.00", "paid_by": self.a, "participants": [self.a, self.b, self.c]},
        )

    def test_balances(self):
        response = self.client.get(f"/api/sessions/{self.session['id']}/balances")

        assert response.status_code == 200
        data = response.json()["data"]
        balances = {row["name"]: row["balance"] for row in data["balances"]}
        assert balances == {"A": "60.00", "B": "-30.00", "C": "-30.00"}
        assert data["total_outstanding"] == "60.00"

    def test_settlement_plan(self):
        response = self.client.get(f"/api/sessions/{self.session['id']}/settlements")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["settlements"] == [
            {"from": self.b, "to": self.a, "amount": "30.00"},
            {"from": self.c, "to": self.a, "amount": "30.00"},
        ]
        assert data["total_amount"] == "60.00"

    def test_complete_settlement(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/settlements/complete",
            json={"from": self.b, "to": self.a, "amount": 30},
        )
        assert response.status_code == 201
        assert response.json()["data"] == {"from": self.b, "to": self.a, "amount": "30.00"}

        plan = self.client.get(f"/api/sessions/{self.session['id']}/settlements").json()["data"]
        assert plan["settlements"] == [{"from": self.c, "to": self.a, "amount": "30.00"}]

        completed = self.client.get(f"/api/sessions/{self.session['id']}/settlements/completed").json()["data"]
        assert completed == [{"from": self.b, "to": self.a, "amount": "30.00"}]

    def test_complete_settlement_validation(self):
        response = self.client.post(
            f"/api/sessions/{self.session['id']}/settlements/complete",
            json={"from": self.b, "to": self.a, "amount": 0},
        )
        assert response.status_code == 422

        response = self.client.post(
            f"/api/sessions/{self.session['id']}/settlements/complete",
            json={"from": self.b, "to": self.b, "amount": 10},
        )
        assert response.status_code == 400

        response = self.client.post(
            f"/api/sessions/{self.session['id']}/settlements/complete",
            json={"from": self.b, "to": "ghost", "amount": 10},
        )
        assert response.status_code == 400

    def test_export_settlements_csv(self):
        response = self.client.get(f"/api/sessions/{self.session['id']}/export/settlements.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines() == ["from,to,amount", "B,A,30.00", "C,A,30.00"]

    def test_unknown_export_kind(self):
        response = self.client.get(f"/api/sessions/{self.session['id']}/export/receipts.csv")
        assert response.status_code == 404


if __name__ == "__main__":
    pytest.main([__file__])
