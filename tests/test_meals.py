"""
Tests for the meal ledger and diet metrics.

Meal flow
======================================

1. CREATE MEAL (session cookie required)
   POST /meals
   {"name": "Dinner", "description": "Delicious meal for dinner",
    "hour": "19:30", "date": "2024-05-02", "isDiet": true}
   Response: 201 Created, empty body

2. LIST MEALS
   GET /meals  ->  200 {"meals": [...]}

3. SHOW / UPDATE / DELETE ONE MEAL
   GET /meals/{meal_id}     ->  200 {"meal": {...}} | 404
   PATCH /meals/{meal_id}   ->  200 | 404
   DELETE /meals/{meal_id}  ->  204 | 404

4. METRICS
   GET /meals/metrics
   -> 200 {"totalMeals": 2, "dietMeals": 1, "nonDietMeals": 1, "bestDietStreak": 1}

A meal that belongs to someone else is answered exactly like a missing one.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from domain.models import User
from repositories import MealRepository, UserRepository
from test_fixtures import DINNER, LUNCH, PIZZA, register_user, use_session


def _create(client, **overrides):
    payload = {**DINNER, **overrides}
    response = client.post("/meals", json=payload)
    assert response.status_code == 201, response.text
    return response


def _only_meal(client) -> dict:
    meals = client.get("/meals").json()["meals"]
    assert len(meals) == 1
    return meals[0]


# =============================================================================
# CREATE / LIST / SHOW
# =============================================================================


def test_create_meal(client):
    register_user(client)

    response = client.post("/meals", json=DINNER)

    assert response.status_code == 201
    assert response.content == b""


def test_list_returns_all_meals_of_the_user(client):
    register_user(client)
    _create(client, **DINNER)
    _create(client, **LUNCH)

    response = client.get("/meals")

    assert response.status_code == 200
    meals = response.json()["meals"]
    assert len(meals) == 2
    assert {m["name"] for m in meals} == {"Dinner", "Lunch"}


def test_list_is_oldest_first(client):
    register_user(client)
    _create(client, **PIZZA)
    _create(client, **DINNER)
    _create(client, **LUNCH)

    names = [m["name"] for m in client.get("/meals").json()["meals"]]

    assert names == ["Lunch", "Dinner", "Pizza night"]


def test_show_single_meal(client):
    register_user(client)
    _create(client, **DINNER)
    meal_id = _only_meal(client)["id"]

    response = client.get(f"/meals/{meal_id}")

    assert response.status_code == 200
    meal = response.json()["meal"]
    assert meal["name"] == "Dinner"
    assert meal["description"] == "Delicious meal for dinner"
    assert meal["is_diet"] is True
    assert "password_hash" not in meal


def test_date_and_hour_round_trip(client):
    register_user(client)
    _create(client, date="2024-05-02", hour="19:30")

    meal = _only_meal(client)

    assert meal["date_time"].startswith("2024-05-02T19:30:00")


def test_meal_owner_comes_from_session_not_body(client):
    register_user(client)
    foreign_id = str(uuid.uuid4())

    _create(client, userId=foreign_id, user_id=foreign_id)

    meal = _only_meal(client)
    assert meal["user_id"] != foreign_id


def test_show_unknown_meal_is_404(client):
    register_user(client)

    response = client.get(f"/meals/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_malformed_meal_id_is_400(client):
    register_user(client)

    response = client.get("/meals/not-a-uuid")

    assert response.status_code == 400


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"description": ""},
        {"date": "02/05/2024"},
        {"date": "2024-13-40"},
        {"hour": "7pm"},
        {"hour": "25:00"},
        {"hour": "7:5"},
        {"hour": "07:30:00"},
        {"date": "2024-5-2"},
        {"isDiet": "yes"},
    ],
)
def test_create_meal_validation(client, overrides):
    register_user(client)

    response = client.post("/meals", json={**DINNER, **overrides})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert len(error["details"]) == 1
    assert client.get("/meals").json()["meals"] == []


def test_create_meal_missing_fields_are_itemized(client):
    register_user(client)

    response = client.post("/meals", json={"name": "Dinner"})

    assert response.status_code == 400
    assert len(response.json()["error"]["details"]) == 4


# =============================================================================
# UPDATE / DELETE
# =============================================================================


def test_update_replaces_only_provided_fields(client):
    register_user(client)
    _create(client, **DINNER)
    before = _only_meal(client)

    response = client.patch(f"/meals/{before['id']}", json={"name": "Late dinner"})

    assert response.status_code == 200
    assert response.content == b""
    after = client.get(f"/meals/{before['id']}").json()["meal"]
    assert after["name"] == "Late dinner"
    assert after["description"] == before["description"]
    assert after["is_diet"] == before["is_diet"]
    assert after["date_time"] == before["date_time"]


def test_update_date_and_hour_together(client):
    register_user(client)
    _create(client, **DINNER)
    meal_id = _only_meal(client)["id"]

    response = client.patch(
        f"/meals/{meal_id}",
        json={"date": "2024-06-10", "hour": "08:15", "isDiet": False},
    )

    assert response.status_code == 200
    meal = client.get(f"/meals/{meal_id}").json()["meal"]
    assert meal["date_time"].startswith("2024-06-10T08:15:00")
    assert meal["is_diet"] is False


@pytest.mark.parametrize("partial", [{"date": "2024-06-10"}, {"hour": "08:15"}])
def test_update_with_only_date_or_hour_is_rejected(client, partial):
    register_user(client)
    _create(client, **DINNER)
    before = _only_meal(client)

    response = client.patch(f"/meals/{before['id']}", json=partial)

    assert response.status_code == 400
    assert any("together" in d for d in response.json()["error"]["details"])
    assert _only_meal(client)["date_time"] == before["date_time"]


def test_update_refreshes_updated_at(client):
    register_user(client)
    _create(client, **DINNER)
    before = _only_meal(client)

    client.patch(f"/meals/{before['id']}", json={})

    after = _only_meal(client)
    assert after["updated_at"] != before["updated_at"]
    assert after["created_at"] == before["created_at"]


def test_update_unknown_meal_is_404(client):
    register_user(client)

    response = client.patch(f"/meals/{uuid.uuid4()}", json={"name": "Ghost"})

    assert response.status_code == 404


def test_delete_meal(client):
    register_user(client)
    _create(client, **DINNER)
    meal_id = _only_meal(client)["id"]

    response = client.delete(f"/meals/{meal_id}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/meals/{meal_id}").status_code == 404
    assert client.delete(f"/meals/{meal_id}").status_code == 404


# =============================================================================
# OWNERSHIP ISOLATION
# =============================================================================


def test_meals_of_other_users_are_invisible(client):
    alice = register_user(client, name="Alice")
    _create(client, **DINNER)
    _create(client, **LUNCH)
    alice_meal_id = client.get("/meals").json()["meals"][0]["id"]

    register_user(client, name="Bob")
    _create(client, **PIZZA)

    bob_meals = client.get("/meals").json()["meals"]
    assert [m["name"] for m in bob_meals] == ["Pizza night"]

    missing = client.get(f"/meals/{uuid.uuid4()}")
    foreign = client.get(f"/meals/{alice_meal_id}")
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["error"]["code"] == missing.json()["error"]["code"]

    assert client.patch(f"/meals/{alice_meal_id}", json={"name": "Hacked"}).status_code == 404
    assert client.delete(f"/meals/{alice_meal_id}").status_code == 404

    use_session(client, alice)
    meal = client.get(f"/meals/{alice_meal_id}").json()["meal"]
    assert meal["name"] != "Hacked"
    assert len(client.get("/meals").json()["meals"]) == 2


def test_metrics_are_scoped_to_the_caller(client):
    register_user(client, name="Alice")
    _create(client, **DINNER)
    _create(client, **LUNCH)

    register_user(client, name="Bob")
    _create(client, **PIZZA)

    metrics = client.get("/meals/metrics").json()
    assert metrics["totalMeals"] == 1
    assert metrics["bestDietStreak"] == 0


# =============================================================================
# SESSION GATE
# =============================================================================


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/meals"),
        ("get", "/meals"),
        ("get", "/meals/metrics"),
        ("get", f"/meals/{uuid.uuid4()}"),
        ("patch", f"/meals/{uuid.uuid4()}"),
        ("delete", f"/meals/{uuid.uuid4()}"),
    ],
)
def test_meal_routes_require_a_session(client, monkeypatch, method, path):
    touched = []

    def record(name):
        def _fail(*args, **kwargs):
            touched.append(name)
            raise AssertionError(f"{name} called without a session")

        return _fail

    monkeypatch.setattr(UserRepository, "get_by_session_token", record("user lookup"))
    for attr in ("create_meal", "list_by_user", "get_owned", "diet_flags_in_order"):
        monkeypatch.setattr(MealRepository, attr, record(attr))

    client.cookies.clear()
    kwargs = {"json": DINNER} if method in ("post", "patch") else {}
    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
    assert touched == []


def test_unknown_session_token_is_rejected(client):
    register_user(client)
    _create(client, **DINNER)

    use_session(client, "forged-token")
    response = client.get("/meals")

    assert response.status_code == 401


# =============================================================================
# METRICS
# =============================================================================


def test_metrics_for_empty_history(client):
    register_user(client)

    response = client.get("/meals/metrics")

    assert response.status_code == 200
    assert response.json() == {
        "totalMeals": 0,
        "dietMeals": 0,
        "nonDietMeals": 0,
        "bestDietStreak": 0,
    }


def test_end_to_end_register_create_list_metrics(client):
    response = client.post(
        "/register", json={"name": "Yuri", "email": "y@x.com", "password": "123"}
    )
    assert response.status_code == 201
    assert "sessionId" in response.headers["set-cookie"]

    _create(client, **DINNER)
    _create(client, **PIZZA)

    assert len(client.get("/meals").json()["meals"]) == 2
    assert client.get("/meals/metrics").json() == {
        "totalMeals": 2,
        "dietMeals": 1,
        "nonDietMeals": 1,
        "bestDietStreak": 1,
    }


def test_metrics_streak_follows_meal_time_not_insertion_order(client):
    register_user(client)
    # inserted out of order; chronologically: D D X D D D
    schedule = [
        ("2024-05-03", "12:00", True),
        ("2024-05-01", "08:00", True),
        ("2024-05-02", "20:00", True),
        ("2024-05-01", "19:00", True),
        ("2024-05-02", "12:00", False),
        ("2024-05-03", "08:00", True),
    ]
    for date, hour, is_diet in schedule:
        _create(client, date=date, hour=hour, isDiet=is_diet)

    metrics = client.get("/meals/metrics").json()

    assert metrics == {
        "totalMeals": 6,
        "dietMeals": 5,
        "nonDietMeals": 1,
        "bestDietStreak": 3,
    }


def test_metrics_recompute_after_update_and_delete(client):
    register_user(client)
    _create(client, date="2024-05-01", hour="08:00", isDiet=True)
    _create(client, date="2024-05-01", hour="12:00", isDiet=False)
    _create(client, date="2024-05-01", hour="19:00", isDiet=True)
    assert client.get("/meals/metrics").json()["bestDietStreak"] == 1

    meals = client.get("/meals").json()["meals"]
    client.patch(f"/meals/{meals[1]['id']}", json={"isDiet": True})
    assert client.get("/meals/metrics").json()["bestDietStreak"] == 3

    client.delete(f"/meals/{meals[0]['id']}")
    metrics = client.get("/meals/metrics").json()
    assert metrics["totalMeals"] == 2
    assert metrics["bestDietStreak"] == 2
    assert client.get("/meals/metrics").json() == metrics


# =============================================================================
# CONFIGURED MEAL TIMEZONE
# =============================================================================


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_date_and_hour_are_read_in_configured_zone(make_client):
    local = make_client(meal_timezone="America/Sao_Paulo")
    register_user(local)
    _create(local, date="2024-05-02", hour="19:30")

    stored = _parse_timestamp(_only_meal(local)["date_time"])

    sao_paulo = timezone(timedelta(hours=-3))
    assert stored == datetime(2024, 5, 2, 19, 30, tzinfo=sao_paulo)
    assert stored.astimezone(sao_paulo).strftime("%Y-%m-%d %H:%M") == "2024-05-02 19:30"


def test_update_reads_date_and_hour_in_configured_zone(make_client):
    local = make_client(meal_timezone="Asia/Tokyo")
    register_user(local)
    _create(local)
    meal_id = _only_meal(local)["id"]

    local.patch(f"/meals/{meal_id}", json={"date": "2024-06-10", "hour": "08:15"})

    stored = _parse_timestamp(local.get(f"/meals/{meal_id}").json()["meal"]["date_time"])
    assert stored == datetime(2024, 6, 9, 23, 15, tzinfo=timezone.utc)


# =============================================================================
# REQUEST LOGGING
# =============================================================================


def test_request_log_names_the_resolved_user(client, caplog):
    token = register_user(client)
    with client.app.state.session_factory() as db:
        user_id = db.query(User).filter(User.session_id == token).one().id

    with caplog.at_level(logging.INFO, logger="dailydiet.middleware"):
        client.get("/meals")
        client.cookies.clear()
        client.get("/meals")

    completed = [r.getMessage() for r in caplog.records if "request_completed" in r.getMessage()]
    assert any(f"user_id={user_id}" in line and "status=200" in line for line in completed)
    assert any("user_id=-" in line and "status=401" in line for line in completed)
