"""
HTTP tests through the FastAPI application.

Requests go through the real stack: bearer token -> session context ->
policy-bound database session -> services. Only the start-up hooks are
skipped; the ``client`` fixture points the app at a fresh database.
"""

import uuid
from decimal import Decimal

import pytest

from test_fixtures import auth_headers, unique_email
from app.config import Environment, settings
from services.tag_service import TagService


def _new_recipe(client, headers, **overrides):
    payload = {
        "title": "Spaghetti Pomodoro",
        "description": "Classic tomato pasta",
        "instructions": ["Boil water", "Cook pasta", "Toss with sauce"],
        "prep_time_minutes": 10,
        "cook_time_minutes": 15,
        "servings": 4,
        "ingredients": [
            {"name": "Spaghetti", "amount": 400, "unit": "g"},
            {"name": "Tomato", "amount": 300, "unit": "g"},
        ],
    }
    payload.update(overrides)
    r = client.post("/recipes", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# =============================================================================
# HEALTH & AUTH
# =============================================================================


def test_health_check(client):
    r = client.get("/health-check")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "AngiDay"


def test_signup_and_sign_in(client):
    """
    Verifies:
    - Signup returns the new account id
    - Sign-in issues a bearer session for that account
    - /me returns the identity together with its profile
    """
    email = unique_email("emma.johnson")
    r = client.post("/auth/signup", json={"email": email, "full_name": "Emma Johnson"})
    assert r.status_code == 201
    user_id = r.json()["user_id"]

    r = client.post("/auth/sessions", json={"email": email})
    assert r.status_code == 201
    session = r.json()
    assert session["token_type"] == "bearer"
    assert session["user_id"] == user_id

    r = client.get("/me", headers={"Authorization": f"Bearer {session['access_token']}"})
    assert r.status_code == 200
    assert r.json()["user_id"] == user_id
    assert r.json()["profile"]["full_name"] == "Emma Johnson"


def test_signup_duplicate_email(client):
    email = unique_email("dup")
    client.post("/auth/signup", json={"email": email})

    r = client.post("/auth/signup", json={"email": email})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "EMAIL_TAKEN"


def test_sign_in_unknown_email(client):
    r = client.post("/auth/sessions", json={"email": unique_email("ghost")})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_email_sign_in_disabled_in_production(client, monkeypatch):
    """
    Verifies:
    - Outside development and testing, email-only sign-in is refused
    - The explicit opt-in setting turns it back on
    """
    email = unique_email("emma.johnson")
    client.post("/auth/signup", json={"email": email})
    monkeypatch.setattr(settings, "environment", Environment.PRODUCTION)

    r = client.post("/auth/sessions", json={"email": email})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "SIGN_IN_DISABLED"

    monkeypatch.setattr(settings, "allow_passwordless_sign_in", True)
    r = client.post("/auth/sessions", json={"email": email})
    assert r.status_code == 201


@pytest.mark.parametrize(
    "path", ["/me", "/profiles/me", "/recipes", "/tags", "/meal-plans", "/shopping-lists"]
)
def test_requests_without_token_are_rejected(client, path):
    r = client.get(path)
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_AUTHENTICATED"


def test_sign_out_invalidates_token(client):
    headers = auth_headers(client, "sarah")

    r = client.delete("/auth/sessions", headers=headers)
    assert r.status_code == 204

    r = client.get("/me", headers=headers)
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "INVALID_SESSION"


# =============================================================================
# PROFILES
# =============================================================================


def test_update_my_profile(client):
    headers = auth_headers(client, "sarah")

    r = client.patch(
        "/profiles/me",
        json={"username": "sarah_cooks", "dietary_preferences": ["vegan", "vegan", "keto"]},
        headers=headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["username"] == "sarah_cooks"
    assert body["full_name"] == "Sarah Martinez"
    assert body["dietary_preferences"] == ["vegan", "keto"]


def test_update_profile_rejects_unknown_preference(client):
    headers = auth_headers(client, "sarah")

    r = client.patch("/profiles/me", json={"dietary_preferences": ["carnivore"]}, headers=headers)
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_username_taken_conflicts(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    assert client.patch("/profiles/me", json={"username": "chef"}, headers=sarah).status_code == 200

    r = client.patch("/profiles/me", json={"username": "chef"}, headers=michael)
    assert r.status_code == 409


# =============================================================================
# RECIPES
# =============================================================================


def test_create_list_and_get_recipe(client):
    headers = auth_headers(client, "sarah")
    created = _new_recipe(client, headers)

    assert created["total_time_minutes"] == 25
    assert sorted(i["name"] for i in created["ingredients"]) == ["Spaghetti", "Tomato"]

    r = client.get("/recipes", headers=headers)
    assert r.status_code == 200
    assert [rec["id"] for rec in r.json()] == [created["id"]]

    r = client.get(f"/recipes/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["title"] == "Spaghetti Pomodoro"


def test_private_recipe_not_found_for_others(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    recipe = _new_recipe(client, sarah)

    r = client.get(f"/recipes/{recipe['id']}", headers=michael)
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"
    assert client.get("/recipes", headers=michael).json() == []


def test_public_recipe_listing_and_search(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    _new_recipe(client, sarah, title="Greek Salad", is_public=True, ingredients=[])
    _new_recipe(client, sarah, title="Secret Stew")

    r = client.get("/recipes", params={"visibility": "public"}, headers=michael)
    assert [rec["title"] for rec in r.json()] == ["Greek Salad"]

    r = client.get("/recipes", params={"search": "salad"}, headers=sarah)
    assert [rec["title"] for rec in r.json()] == ["Greek Salad"]

    r = client.get("/recipes", params={"visibility": "mine"}, headers=michael)
    assert r.json() == []


def test_create_recipe_for_someone_else_denied(client):
    headers = auth_headers(client, "sarah")

    r = client.post(
        "/recipes",
        json={"title": "Impostor Pie", "user_id": str(uuid.uuid4())},
        headers=headers,
    )
    assert r.status_code == 403
    error = r.json()["error"]
    assert error["code"] == "POLICY_DENIED"
    assert error["details"] == {"table": "recipes", "command": "INSERT"}


def test_update_recipe_partial(client):
    headers = auth_headers(client, "sarah")
    recipe = _new_recipe(client, headers)

    r = client.patch(f"/recipes/{recipe['id']}", json={"servings": 2}, headers=headers)
    assert r.status_code == 200
    assert r.json()["servings"] == 2
    assert r.json()["title"] == "Spaghetti Pomodoro"


def test_update_foreign_public_recipe_denied(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    recipe = _new_recipe(client, sarah, is_public=True)

    r = client.patch(f"/recipes/{recipe['id']}", json={"title": "Mine now"}, headers=michael)
    assert r.status_code == 403
    assert client.get(f"/recipes/{recipe['id']}", headers=sarah).json()["title"] == "Spaghetti Pomodoro"


def test_delete_recipe_is_denied_to_callers(client):
    headers = auth_headers(client, "sarah")
    recipe = _new_recipe(client, headers)

    r = client.delete(f"/recipes/{recipe['id']}", headers=headers)
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "POLICY_DENIED"
    assert client.get(f"/recipes/{recipe['id']}", headers=headers).status_code == 200


def test_ingredient_endpoints(client):
    headers = auth_headers(client, "sarah")
    recipe = _new_recipe(client, headers, ingredients=[])
    base = f"/recipes/{recipe['id']}/ingredients"

    r = client.post(base, json={"name": "Basil", "amount": 5, "unit": "g"}, headers=headers)
    assert r.status_code == 201
    ingredient_id = r.json()["id"]

    r = client.patch(f"{base}/{ingredient_id}", json={"amount": 10}, headers=headers)
    assert r.status_code == 200
    assert Decimal(str(r.json()["amount"])) == Decimal("10")
    assert r.json()["unit"] == "g"

    assert client.delete(f"{base}/{ingredient_id}", headers=headers).status_code == 204
    assert client.get(base, headers=headers).json() == []


def test_add_ingredient_to_foreign_public_recipe_denied(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    recipe = _new_recipe(client, sarah, is_public=True)

    r = client.post(
        f"/recipes/{recipe['id']}/ingredients", json={"name": "Anchovies"}, headers=michael
    )
    assert r.status_code == 403
    assert r.json()["error"]["details"]["table"] == "recipe_ingredients"

    names = [i["name"] for i in client.get(f"/recipes/{recipe['id']}/ingredients", headers=michael).json()]
    assert "Anchovies" not in names


# =============================================================================
# TAGS
# =============================================================================


def test_tags_listing_and_recipe_tags(client, service_db):
    TagService.seed_catalog(service_db)
    headers = auth_headers(client, "sarah")

    r = client.get("/tags", params={"type": "cuisine"}, headers=headers)
    assert r.status_code == 200
    cuisines = r.json()
    assert cuisines
    assert {t["type"] for t in cuisines} == {"cuisine"}

    recipe = _new_recipe(client, headers)
    tag_id = cuisines[0]["id"]

    r = client.post(f"/recipes/{recipe['id']}/tags/{tag_id}", headers=headers)
    assert r.status_code == 200
    assert [t["id"] for t in r.json()["tags"]] == [tag_id]

    r = client.put(f"/recipes/{recipe['id']}/tags", json={"tag_ids": []}, headers=headers)
    assert r.status_code == 200
    assert r.json()["tags"] == []


# =============================================================================
# MEAL PLANS & SHOPPING LISTS
# =============================================================================


def test_meal_plan_endpoints(client):
    headers = auth_headers(client, "sarah")
    recipe = _new_recipe(client, headers)

    r = client.post(
        "/meal-plans",
        json={"title": "Week 23", "start_date": "2025-06-02", "end_date": "2025-06-08"},
        headers=headers,
    )
    assert r.status_code == 201
    plan_id = r.json()["id"]

    r = client.post(
        f"/meal-plans/{plan_id}/items",
        json={"recipe_id": recipe["id"], "date": "2025-06-03", "meal_type": "dinner", "servings": 2},
        headers=headers,
    )
    assert r.status_code == 201
    item_id = r.json()["id"]

    r = client.patch(f"/meal-plans/{plan_id}/items/{item_id}", json={"meal_type": "lunch"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["meal_type"] == "lunch"
    assert r.json()["servings"] == 2

    r = client.get(f"/meal-plans/{plan_id}", headers=headers)
    assert [i["id"] for i in r.json()["items"]] == [item_id]

    r = client.patch(f"/meal-plans/{plan_id}", json={"title": "Week 23 (light)"}, headers=headers)
    assert r.json()["title"] == "Week 23 (light)"


def test_meal_plan_invalid_meal_type(client):
    headers = auth_headers(client, "sarah")
    plan = client.post(
        "/meal-plans",
        json={"title": "Week 24", "start_date": "2025-06-09", "end_date": "2025-06-15"},
        headers=headers,
    ).json()

    r = client.post(
        f"/meal-plans/{plan['id']}/items",
        json={"date": "2025-06-10", "meal_type": "brunch"},
        headers=headers,
    )
    assert r.status_code == 422


def test_meal_plans_are_private(client):
    sarah = auth_headers(client, "sarah")
    michael = auth_headers(client, "michael")
    plan = client.post(
        "/meal-plans",
        json={"title": "Week 23", "start_date": "2025-06-02", "end_date": "2025-06-08"},
        headers=sarah,
    ).json()

    assert client.get(f"/meal-plans/{plan['id']}", headers=michael).status_code == 404
    assert client.get("/meal-plans", headers=michael).json() == []


def test_shopping_list_from_meal_plan(client):
    """
    Verifies:
    - The generated list scales recipe amounts by planned servings
    - The list belongs to the caller and is linked to the plan
    """
    headers = auth_headers(client, "sarah")
    recipe = _new_recipe(client, headers)
    plan = client.post(
        "/meal-plans",
        json={"title": "Week 23", "start_date": "2025-06-02", "end_date": "2025-06-08"},
        headers=headers,
    ).json()
    client.post(
        f"/meal-plans/{plan['id']}/items",
        json={"recipe_id": recipe["id"], "date": "2025-06-03", "meal_type": "dinner", "servings": 2},
        headers=headers,
    )

    r = client.post(f"/shopping-lists/from-meal-plan/{plan['id']}", headers=headers)
    assert r.status_code == 201
    shopping = r.json()
    assert shopping["title"] == "Shopping for Week 23"
    assert shopping["meal_plan_id"] == plan["id"]
    amounts = {i["ingredient_name"]: Decimal(str(i["amount"])) for i in shopping["items"]}
    assert amounts == {"Spaghetti": Decimal("200"), "Tomato": Decimal("150")}


def test_shopping_list_item_flow(client):
    headers = auth_headers(client, "sarah")
    r = client.post("/shopping-lists", json={"title": "Saturday market"}, headers=headers)
    assert r.status_code == 201
    list_id = r.json()["id"]

    r = client.post(
        f"/shopping-lists/{list_id}/items",
        json={"ingredient_name": "Apples", "amount": 1, "unit": "kg", "estimated_cost": 3.5},
        headers=headers,
    )
    assert r.status_code == 201
    item_id = r.json()["id"]

    r = client.post(f"/shopping-lists/{list_id}/items/{item_id}/check", json={}, headers=headers)
    assert r.status_code == 200
    assert r.json()["is_checked"] is True

    r = client.post(f"/shopping-lists/{list_id}/total", headers=headers)
    assert Decimal(str(r.json()["total_cost"])) == Decimal("3.50")

    r = client.post(f"/shopping-lists/{list_id}/complete", headers=headers)
    assert r.json()["is_completed"] is True

    assert client.delete(f"/shopping-lists/{list_id}", headers=headers).status_code == 204
    assert client.get(f"/shopping-lists/{list_id}", headers=headers).status_code == 404


# =============================================================================
# ERROR FORMAT
# =============================================================================


def test_unexpected_error_returns_500(client, monkeypatch):
    from fastapi.testclient import TestClient
    from main import app

    headers = auth_headers(client, "sarah")

    def boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(TagService, "list_tags", staticmethod(boom))
    safe_client = TestClient(app, raise_server_exceptions=False)

    r = safe_client.get("/tags", headers=headers)
    assert r.status_code == 500
    error = r.json()["error"]
    assert error["code"] == "INTERNAL_SERVER_ERROR"
    assert "exploded" not in error["message"]


def test_malformed_uuid_is_validation_error(client):
    headers = auth_headers(client, "sarah")
    r = client.get("/recipes/not-a-uuid", headers=headers)
    assert r.status_code == 422
    assert r.json()["success"] is False
