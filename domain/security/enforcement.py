"""
Session hooks that enforce the row policies.

Reads: every ORM SELECT issued by a non-service session gets the SELECT
predicate of each protected entity attached as loader criteria, so rows the
caller may not see are omitted from results, lazy loads and ``Session.get``.
Expired attributes and refreshes go through the same filter.

Writes: mapper ``before_insert`` / ``before_update`` / ``before_delete`` hooks
evaluate the applicable predicates on the flush connection, inside the same
transaction and before the statement for that row is emitted. A failed check
raises ``PermissionDeniedError`` and the flush is rolled back.

On PostgreSQL with native policies installed, each transaction additionally
switches to the policy role and publishes the caller id, so the installed
policies apply to the same caller.

Database-level cascades (``ON DELETE CASCADE`` with ``passive_deletes``) are
executed by the store itself and are not re-checked, as with native row level
security.
"""

import logging
from typing import Any, Dict

from sqlalchemy import event, false, inspect, select, text
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from app.config import settings
from app.exceptions import PermissionDeniedError
from domain.models.database import Base
from domain.security.context import SessionContext, context_of, native_binding_statements
from domain.security.policies import Command, RowRef, registry

logger = logging.getLogger("angiday.policies.enforcement")


def read_criteria(table, ctx: SessionContext):
    """WHERE criteria restricting ``table`` to the rows ``ctx`` may SELECT."""
    if not ctx.is_authenticated:
        return false()
    criteria = registry.predicate(
        table, Command.SELECT, RowRef.stored(table), ctx.identity_expr()
    )
    return criteria if criteria is not None else false()


def _protected_mappers():
    return [
        mapper
        for mapper in Base.registry.mappers
        if registry.is_protected(mapper.local_table.name)
    ]


def _deny(ctx: SessionContext, table_name: str, command: Command, reason: str):
    logger.warning(
        f"policy_denied table={table_name} command={command.value} caller={ctx} reason={reason}"
    )
    raise PermissionDeniedError(
        f"{command.value} on {table_name} is not permitted for this session",
        code="POLICY_DENIED",
        table=table_name,
        command=command.value,
    )


@event.listens_for(Session, "do_orm_execute")
def _apply_read_policies(execute_state: ORMExecuteState):
    ctx = context_of(execute_state.session)
    if ctx.bypasses_policies:
        return

    if execute_state.is_select:
        # refreshes are filtered too: a row that left the caller's view
        # reloads as deleted
        options = [
            with_loader_criteria(
                mapper.class_,
                read_criteria(mapper.local_table, ctx),
                include_aliases=True,
            )
            for mapper in _protected_mappers()
        ]
        execute_state.statement = execute_state.statement.options(*options)
        return

    if execute_state.is_insert or execute_state.is_update or execute_state.is_delete:
        mapper = execute_state.bind_mapper
        if mapper is not None and registry.is_protected(mapper.local_table.name):
            command = (
                Command.INSERT
                if execute_state.is_insert
                else Command.UPDATE if execute_state.is_update else Command.DELETE
            )
            _deny(ctx, mapper.local_table.name, command, "bulk statement")


def _column_values(mapper, target) -> Dict[str, Any]:
    state = inspect(target)
    values = {}
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        if column.table is mapper.local_table and prop.key in state.dict:
            values[column.name] = state.dict[prop.key]
    return values


def _changed_values(mapper, target) -> Dict[str, Any]:
    state = inspect(target)
    changes = {}
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        if column.table is mapper.local_table and prop.key in state.committed_state:
            changes[column.name] = state.dict.get(prop.key)
    return changes


def _primary_key_clause(mapper, target):
    identity = inspect(target).identity
    return [column == value for column, value in zip(mapper.primary_key, identity)]


def _authorize(mapper, connection, target, command: Command) -> None:
    session = inspect(target).session
    ctx = context_of(session) if session is not None else SessionContext.anonymous()
    if ctx.bypasses_policies:
        return

    table = mapper.local_table
    if not registry.is_protected(table.name):
        return
    if not ctx.is_authenticated:
        _deny(ctx, table.name, command, "unauthenticated")

    uid = ctx.identity_expr()

    if command == Command.INSERT:
        check = registry.predicate(
            table, command, RowRef.values(table, _column_values(mapper, target)), uid
        )
        if check is None:
            _deny(ctx, table.name, command, "no policy")
        allowed = connection.execute(select(check)).scalar()
    else:
        changes = _changed_values(mapper, target) if command == Command.UPDATE else {}
        if command == Command.UPDATE and not changes:
            return
        using = registry.predicate(table, command, RowRef.stored(table), uid)
        if using is None:
            _deny(ctx, table.name, command, "no policy")
        row_match = select(table).where(*_primary_key_clause(mapper, target)).where(using)
        if command == Command.UPDATE:
            row_match = row_match.where(
                registry.predicate(
                    table, command, RowRef.overlay(table, changes), uid, new_row=True
                )
            )
        allowed = connection.execute(select(row_match.exists())).scalar()

    if not allowed:
        _deny(ctx, table.name, command, "predicate failed")


@event.listens_for(Base, "before_insert", propagate=True)
def _check_insert(mapper, connection, target):
    _authorize(mapper, connection, target, Command.INSERT)


@event.listens_for(Base, "before_update", propagate=True)
def _check_update(mapper, connection, target):
    _authorize(mapper, connection, target, Command.UPDATE)


@event.listens_for(Base, "before_delete", propagate=True)
def _check_delete(mapper, connection, target):
    _authorize(mapper, connection, target, Command.DELETE)


@event.listens_for(Session, "after_begin")
def _bind_native_identity(session, transaction, connection):
    if connection.dialect.name != "postgresql" or not settings.install_native_policies:
        return
    statements = native_binding_statements(
        context_of(session), settings.policy_db_role, settings.policy_identity_setting
    )
    for statement, params in statements:
        connection.execute(text(statement), params)


def log_policy_gaps() -> None:
    """Log every protected table/command pair that is denied for lack of a policy."""
    for table, command in registry.missing_policies():
        logger.warning(f"policy_gap table={table} command={command.value} (default deny)")
