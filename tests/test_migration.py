"""
Tests for the native PostgreSQL row level security statements.
"""

import uuid

import pytest

from app.config import settings
from domain.security.context import SessionContext, native_binding_statements
from domain.security.migration import apply_policies, render_create_policy, render_policy_sql
from domain.security.policies import Command, Policy, PolicyRegistry, registry
from domain.models import Recipe
from scripts import init_db


def equates(sql, left, right):
    """The compiler may emit either operand first."""
    return f"{left} = {right}" in sql or f"{right} = {left}" in sql


def test_drops_come_before_creates():
    """
    Verifies:
    - Every policy is dropped by name before any policy is created, so the
      statements can be re-applied on an existing database
    """
    statements = render_policy_sql()
    drops = [i for i, s in enumerate(statements) if s.startswith("DROP POLICY IF EXISTS")]
    creates = [i for i, s in enumerate(statements) if s.startswith("CREATE POLICY")]

    assert len(drops) == len(creates) == len(registry.policies())
    assert max(drops) < min(creates)


def test_row_level_security_enabled_on_every_protected_table():
    statements = render_policy_sql()
    enabled = {
        s.split()[2] for s in statements if s.endswith("ENABLE ROW LEVEL SECURITY")
    }

    assert enabled == {t.name for t in registry.tables()}
    assert "auth_users" in enabled


def test_insert_policy_has_only_with_check():
    policy = next(p for p in registry.policies("recipes") if p.command == Command.INSERT)
    sql = render_create_policy(policy)

    assert sql.startswith('CREATE POLICY "Users can create recipes" ON recipes FOR INSERT TO authenticated')
    assert "USING" not in sql
    assert "WITH CHECK (" in sql
    assert equates(sql, "auth.uid()", "recipes.user_id")


def test_child_policy_renders_ancestor_exists():
    policy = next(
        p for p in registry.policies("recipe_ingredients") if p.command == Command.ALL
    )
    sql = render_create_policy(policy)

    assert "FOR ALL" in sql
    assert "EXISTS (SELECT" in sql
    assert "recipe_ingredients.recipe_id" in sql
    assert equates(sql[sql.index("EXISTS"):], "auth.uid()", "recipes_1.user_id")


def test_identity_expression_is_configurable():
    statements = render_policy_sql(identity_sql="current_setting('app.user_id')::uuid")
    creates = [s for s in statements if s.startswith("CREATE POLICY")]

    assert all("auth.uid()" not in s for s in creates)
    assert any(equates(s, "current_setting('app.user_id')::uuid", "profiles.id") for s in creates)


def test_policy_names_are_quoted():
    reg = PolicyRegistry()
    reg.protect(Recipe.__table__)
    reg.add(Policy('Chef\'s "special" view', "recipes", Command.SELECT, using=lambda row, uid: uid == row.user_id))

    statements = render_policy_sql(reg)
    assert statements[0] == 'DROP POLICY IF EXISTS "Chef\'s ""special"" view" ON recipes'


def test_registry_rejects_policy_on_unprotected_table():
    reg = PolicyRegistry()
    with pytest.raises(ValueError):
        reg.add(Policy("Orphan", "recipes", Command.SELECT, using=lambda row, uid: uid == row.user_id))


def test_apply_policies_requires_postgresql(engine):
    with engine.connect() as conn:
        with pytest.raises(RuntimeError):
            apply_policies(conn)


# =============================================================================
# CALLER BINDING
# =============================================================================


def test_authenticated_transaction_publishes_caller():
    user_id = uuid.uuid4()
    statements = native_binding_statements(
        SessionContext.authenticated(user_id), "authenticated", "app.user_id"
    )

    assert statements == [
        ("SET LOCAL ROLE authenticated", {}),
        ("SELECT set_config(:name, :value, true)", {"name": "app.user_id", "value": str(user_id)}),
    ]


def test_anonymous_transaction_publishes_no_caller():
    statements = native_binding_statements(SessionContext.anonymous(), "authenticated", "app.user_id")
    assert statements[1][1]["value"] == ""


def test_service_transaction_keeps_connecting_role():
    assert native_binding_statements(SessionContext.service(), "authenticated", "app.user_id") == []


def test_default_identity_reads_published_caller():
    """
    Verifies:
    - The configured policy expression reads the setting each transaction publishes
    - An unset caller compares as NULL, so no policy matches
    """
    assert f"current_setting('{settings.policy_identity_setting}', true)" in settings.policy_identity_sql
    assert settings.policy_identity_sql.startswith("nullif(")

    creates = [
        s
        for s in render_policy_sql(identity_sql=settings.policy_identity_sql)
        if s.startswith("CREATE POLICY")
    ]
    assert any(settings.policy_identity_sql in s for s in creates)
    assert all("auth.uid()" not in s for s in creates)


def test_init_script_passes_identity_expression(monkeypatch):
    calls = []
    monkeypatch.setattr("domain.models.init_database", lambda **kwargs: calls.append(kwargs))

    assert init_db.main(["--identity-sql", "auth.uid()"]) == 0
    assert calls == [{"identity_sql": "auth.uid()"}]
