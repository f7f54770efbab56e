"""
Native PostgreSQL row level security for the registered policies.

The statements are re-appliable: row level security is (re-)enabled on every
protected table and each policy is dropped by name before it is created.
"""

import logging
from typing import List, Optional

from sqlalchemy import literal_column
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Connection

from domain.security.policies import Command, Policy, PolicyRegistry, RowRef, registry as default_registry

logger = logging.getLogger("angiday.policies.migration")

DEFAULT_ROLE = "authenticated"


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _compile(expression) -> str:
    return str(
        expression.compile(
            dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}
        )
    )


def render_create_policy(
    policy: Policy,
    registry: Optional[PolicyRegistry] = None,
    identity_sql: str = "auth.uid()",
    role: str = DEFAULT_ROLE,
) -> str:
    registry = registry or default_registry
    table = next(t for t in registry.tables() if t.name == policy.table)
    row = RowRef.rendered(table)
    uid = literal_column(identity_sql)

    sql = (
        f"CREATE POLICY {_quote(policy.name)} ON {policy.table} "
        f"FOR {policy.command.value} TO {role}"
    )
    # INSERT policies only take WITH CHECK
    if policy.using is not None and policy.command != Command.INSERT:
        sql += f" USING ({_compile(policy.using(row, uid))})"
    if policy.with_check is not None:
        sql += f" WITH CHECK ({_compile(policy.with_check(row, uid))})"
    return sql


def render_policy_sql(
    registry: Optional[PolicyRegistry] = None,
    identity_sql: str = "auth.uid()",
    role: str = DEFAULT_ROLE,
) -> List[str]:
    """Ordered DDL statements installing every registered policy."""
    registry = registry or default_registry
    statements = []
    for policy in registry.policies():
        statements.append(f"DROP POLICY IF EXISTS {_quote(policy.name)} ON {policy.table}")
    for table in registry.tables():
        statements.append(f"ALTER TABLE {table.name} ENABLE ROW LEVEL SECURITY")
    for policy in registry.policies():
        statements.append(render_create_policy(policy, registry, identity_sql, role))
    return statements


def apply_policies(
    connection: Connection,
    registry: Optional[PolicyRegistry] = None,
    identity_sql: str = "auth.uid()",
    role: str = DEFAULT_ROLE,
) -> int:
    """Execute the policy DDL on a PostgreSQL connection; returns the statement count."""
    if connection.dialect.name != "postgresql":
        raise RuntimeError(
            f"Native row level security requires PostgreSQL, not {connection.dialect.name}"
        )
    statements = render_policy_sql(registry, identity_sql, role)
    for statement in statements:
        connection.exec_driver_sql(statement)
    logger.info(f"Applied {len(statements)} row level security statements")
    return len(statements)
