"""HTTP surface tests against the in-memory store."""

from __future__ import annotations

from types import SimpleNamespace

from fastapi.testclient import TestClient

from kharcha.routers.assistant import get_assistant_client

VIEWER = SimpleNamespace(id="u-viewer", email="view@example.com")
ADMIN = SimpleNamespace(id="u-admin", email="admin@example.com")


def test_requests_without_token_are_rejected(client: TestClient) -> None:
    """Every ledger route requires a bearer token."""
    response = client.get("/dashboard")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_permissions_for_current_user(api) -> None:
    """The editor flag comes from the user's profile."""
    payload = api.get("/users/me").json()
    assert payload == {"role": "viewer", "is_admin": False, "can_edit": True}

    api.session.user = SimpleNamespace(id="u-unknown", email="Main@Main.com")
    payload = api.get("/users/me").json()
    assert payload["is_admin"] is True
    assert payload["can_edit"] is True


def test_viewer_can_read_but_not_write(api) -> None:
    """Viewers see the ledger and get 403 on any mutation."""
    api.session.user = VIEWER

    assert api.get("/ledger/expenses").status_code == 200
    response = api.post("/ledger/expenses", json={"title": "Tea", "amount": 40})
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
    assert api.db.tables.get("expenses", []) == []


def test_expense_lifecycle_updates_dashboard(api) -> None:
    """Create, refresh, patch and delete an expense through the API."""
    created = api.post(
        "/ledger/expenses", json={"title": "Tea", "amount": 40, "category": "Meal"}
    )
    assert created.status_code == 200
    record = created.json()["record"]
    assert record["title"] == "Tea"
    assert record["amount"] == 40.0
    assert record["category"] == "Meal"

    api.post("/ledger/cash", json={"amount": 100})
    snapshot = api.post("/dashboard/refresh").json()["state"]["snapshot"]
    assert snapshot["total_spent"] == 40.0
    assert snapshot["food_total"] == 40.0
    assert snapshot["remaining"] == 60.0

    patched = api.patch(f"/ledger/expenses/{record['id']}", json={"amount": 75})
    assert patched.json()["record"]["amount"] == 75.0

    assert api.delete(f"/ledger/expenses/{record['id']}").json() == {"deleted": True}
    missing = api.delete(f"/ledger/expenses/{record['id']}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"

    listing = api.get("/ledger/expenses").json()
    assert listing["total"] == 0


def test_dashboard_reports_budgets_and_per_person(api) -> None:
    """Budgets and the per-head split are part of the dashboard state."""
    api.post("/ledger/budgets", json={"name": "rice", "amount": 1000})
    api.post("/ledger/expenses", json={"title": "Rice bag", "amount": 400, "category": "Market"})
    api.post("/ledger/market", json={"item_name": "Brown Rice", "cost": 200, "note": "5kg"})
    api.post("/ledger/friends", json={"name": "Ali", "amount": 500})
    api.post("/ledger/friends", json={"name": " ali", "amount": 300})

    state = api.post("/dashboard/refresh").json()["state"]

    budget = state["budgets"][0]
    assert budget["spent"] == 600.0
    assert budget["percent"] == 60.0
    assert budget["severity"] == "normal"
    assert state["per_person"] == {"cost_per_person": 400.0, "friend_count": 1}
    assert state["snapshot"]["friend_contribution"] == 800.0
    assert state["stale"] is False


def test_dashboard_includes_market_notes(api) -> None:
    """Purchases with a note or item limit are previewed."""
    api.post("/ledger/market", json={"item_name": "Oil", "cost": 600, "budget_limit": 500})
    api.post("/dashboard/refresh")

    notes = api.get("/dashboard").json()["market_notes"]
    assert notes["total"] == 1
    assert notes["has_more"] is False
    assert notes["items"][0]["over_budget"] is True


def test_store_outage_marks_dashboard_stale(api) -> None:
    """A failed refresh keeps serving the last totals with an error flag."""
    api.post("/ledger/cash", json={"amount": 100})
    api.post("/dashboard/refresh")

    api.db.error = RuntimeError("store down")
    state = api.post("/dashboard/refresh").json()["state"]
    api.db.error = None

    assert state["stale"] is True
    assert state["error"]
    assert state["snapshot"]["total_available"] == 100.0


def test_meal_create_reports_split(api) -> None:
    """Meals return per-person cost derived from the eater list."""
    response = api.post(
        "/ledger/meals",
        json={
            "meal_type": "Lunch",
            "cooked_by": "Ali",
            "eaten_by_names": ["Ali", "Sara"],
            "cost": 300,
        },
    )
    record = response.json()["record"]
    assert record["people"] == 2
    assert record["cost_per_person"] == 150.0


def test_invalid_payload_is_normalized(api) -> None:
    """Validation failures use the shared error envelope."""
    response = api.post("/ledger/expenses", json={"title": "Tea", "amount": -1})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_INPUT"


def test_unknown_collection_is_404(api) -> None:
    assert api.get("/ledger/groceries").status_code == 404


def test_menu_listing_and_update(api) -> None:
    """Menu days come back Monday first and editors can change one."""
    api.db.tables["meal_menu"] = [
        {"id": "2", "day": "Tuesday", "lunch": "Daal"},
        {"id": "1", "day": "Monday", "lunch": "Rice"},
    ]

    days = api.get("/menu").json()["days"]
    assert [d["day"] for d in days] == ["Monday", "Tuesday"]

    updated = api.put("/menu/tuesday", json={"lunch": "Karahi"}).json()["day"]
    assert updated["lunch"] == "Karahi"


def test_export_csv(api) -> None:
    """The export is a CSV attachment with one row per record."""
    api.post("/ledger/expenses", json={"title": "Tea", "amount": 40, "category": "Meal"})

    response = api.get("/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "kharcha_export_" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Type,Details,Amount,Date,Category/Person"
    assert lines[1].startswith("Expense,Tea,40.00,")


def test_admin_manages_edit_access(api) -> None:
    """Only admins list users and toggle edit rights."""
    assert api.get("/users").status_code == 403

    api.session.user = ADMIN
    users = api.get("/users").json()["users"]
    assert {u["id"] for u in users} == {"u-admin", "u-editor", "u-viewer"}

    response = api.patch("/users/u-viewer/edit-access", json={"allow_edit": True})
    assert response.json()["user"]["allow_edit"] is True

    api.session.user = VIEWER
    assert api.post("/ledger/cash", json={"amount": 10}).status_code == 200


def test_assistant_context_and_chat(api) -> None:
    """The assistant sees the cached snapshot as plain text."""
    api.post("/ledger/cash", json={"amount": 100})
    api.post("/dashboard/refresh")

    context = api.get("/assistant/context")
    assert context.status_code == 200
    assert "FINANCIAL SNAPSHOT:" in context.text
    assert "PKR 100.00" in context.text

    calls = []

    class StubAssistant:
        def reply(self, context: str, history: list, message: str) -> str:
            calls.append((context, history, message))
            return "You have PKR 100.00 left."

    api.app.dependency_overrides[get_assistant_client] = StubAssistant
    response = api.post(
        "/assistant/chat",
        json={"message": "How much is left?", "history": [{"role": "user", "content": "hi"}]},
    )

    assert response.json() == {"reply": "You have PKR 100.00 left."}
    assert calls[0][1] == [{"role": "user", "content": "hi"}]
    assert calls[0][2] == "How much is left?"


def test_unknown_fields_are_rejected(api) -> None:
    """Request bodies with keys the ledger does not know get a 422."""
    created = api.post("/ledger/friends", json={"name": "Ali", "amount": 100}).json()["record"]

    response = api.patch(f"/ledger/friends/{created['id']}", json={"kind": "borrowed"})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_INPUT"

    patched = api.patch(f"/ledger/friends/{created['id']}", json={"type": "borrowed"})
    assert patched.json()["record"]["type"] == "borrowed"

    extra = api.post("/ledger/expenses", json={"title": "Tea", "amount": 5, "colour": "red"})
    assert extra.status_code == 422
