"""
Row level access policies.

A policy is a named predicate over one table row and the caller identity.
Policies for the same table and command are permissive (any of them may allow
the operation). A protected table/command pair with no applicable policy is
denied; ``PolicyRegistry.missing_policies`` lists those pairs so the gaps are
visible at start-up instead of silently allowing anything.

Predicates are built from SQLAlchemy expressions so the same definition is
evaluated in-process (against stored rows or bind values) and rendered into
native PostgreSQL ``CREATE POLICY`` statements.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import Table, literal, literal_column, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from domain.models import (
    AuthUser,
    MealPlan,
    MealPlanItem,
    Profile,
    Recipe,
    RecipeIngredient,
    RecipeTag,
    ShoppingList,
    ShoppingListItem,
    Tag,
)

logger = logging.getLogger("angiday.policies")


class Command(str, enum.Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ALL = "ALL"


CONCRETE_COMMANDS = (Command.SELECT, Command.INSERT, Command.UPDATE, Command.DELETE)


class RowRef:
    """Attribute access to the columns of the row a predicate is evaluated on.

    ``row.user_id`` resolves to a table column (stored rows), a bind value
    (rows about to be written) or a qualified column name (DDL rendering).
    """

    def __init__(self, table: Table, resolve: Callable[[str], ColumnElement]):
        self._table = table
        self._resolve = resolve

    def __getattr__(self, name: str) -> ColumnElement:
        if name.startswith("_") or name not in self._table.c:
            raise AttributeError(f"{self._table.name} has no column {name!r}")
        return self._resolve(name)

    @classmethod
    def stored(cls, table: Table) -> "RowRef":
        return cls(table, lambda name: table.c[name])

    @classmethod
    def values(cls, table: Table, values: Mapping[str, object]) -> "RowRef":
        return cls(
            table, lambda name: literal(values.get(name), table.c[name].type)
        )

    @classmethod
    def overlay(cls, table: Table, changes: Mapping[str, object]) -> "RowRef":
        """The stored row with ``changes`` applied, as an UPDATE would leave it."""

        def resolve(name):
            if name in changes:
                return literal(changes[name], table.c[name].type)
            return table.c[name]

        return cls(table, resolve)

    @classmethod
    def rendered(cls, table: Table) -> "RowRef":
        return cls(table, lambda name: literal_column(f"{table.name}.{name}"))


Predicate = Callable[[RowRef, ColumnElement], ColumnElement]


@dataclass(frozen=True)
class Policy:
    """A permissive row policy for authenticated callers.

    ``using`` filters existing rows (SELECT, UPDATE, DELETE); ``with_check``
    validates rows being written (INSERT, new row of UPDATE) and falls back to
    ``using`` when absent.
    """

    name: str
    table: str
    command: Command
    using: Optional[Predicate] = None
    with_check: Optional[Predicate] = None

    def applies_to(self, command: Command) -> bool:
        return self.command == Command.ALL or self.command == command

    def predicate_for(self, command: Command, new_row: bool = False) -> Optional[Predicate]:
        if command == Command.INSERT or new_row:
            return self.with_check or self.using
        return self.using


class PolicyRegistry:
    """Named policies per protected table"""

    def __init__(self):
        self._tables: Dict[str, Table] = {}
        self._policies: Dict[Tuple[str, str], Policy] = {}

    def protect(self, table: Table) -> None:
        """Enable row level security on ``table`` (default deny)."""
        self._tables[table.name] = table

    def add(self, policy: Policy) -> Policy:
        """Register ``policy``, replacing any policy of the same name on its table."""
        if policy.table not in self._tables:
            raise ValueError(f"Table {policy.table} is not protected")
        key = (policy.table, policy.name)
        if key in self._policies:
            logger.debug(f"Replacing policy {policy.name!r} on {policy.table}")
            del self._policies[key]
        self._policies[key] = policy
        return policy

    def is_protected(self, table_name: str) -> bool:
        return table_name in self._tables

    def tables(self) -> List[Table]:
        return list(self._tables.values())

    def policies(self, table: Optional[str] = None) -> List[Policy]:
        return [p for p in self._policies.values() if table is None or p.table == table]

    def applicable(self, table: str, command: Command) -> List[Policy]:
        return [p for p in self.policies(table) if p.applies_to(command)]

    def predicate(
        self,
        table: Table,
        command: Command,
        row: RowRef,
        identity: ColumnElement,
        new_row: bool = False,
    ) -> Optional[ColumnElement]:
        """OR of all applicable predicates, or None when no policy applies."""
        clauses = []
        for policy in self.applicable(table.name, command):
            build = policy.predicate_for(command, new_row)
            if build is not None:
                clauses.append(build(row, identity))
        if not clauses:
            return None
        return or_(*clauses) if len(clauses) > 1 else clauses[0]

    def missing_policies(self) -> List[Tuple[str, Command]]:
        """Protected table/command pairs that no policy allows."""
        return [
            (name, command)
            for name in self._tables
            for command in CONCRETE_COMMANDS
            if not self.applicable(name, command)
        ]


def _owned_by_caller(row: RowRef, uid: ColumnElement) -> ColumnElement:
    return uid == row.user_id


def _parent_exists(parent: Table, fk: str, condition: Predicate) -> Predicate:
    """Existence check against the nearest owned ancestor row."""

    def predicate(row: RowRef, uid: ColumnElement) -> ColumnElement:
        ancestor = parent.alias()
        return (
            select(ancestor.c.id)
            .where(ancestor.c.id == getattr(row, fk))
            .where(condition(RowRef.stored(ancestor), uid))
            .exists()
        )

    return predicate


def _public_or_owned(row: RowRef, uid: ColumnElement) -> ColumnElement:
    return or_(row.is_public == true(), uid == row.user_id)


def build_registry() -> PolicyRegistry:
    registry = PolicyRegistry()
    for model in (
        AuthUser,
        Profile,
        Tag,
        Recipe,
        RecipeIngredient,
        RecipeTag,
        MealPlan,
        MealPlanItem,
        ShoppingList,
        ShoppingListItem,
    ):
        registry.protect(model.__table__)

    recipes = Recipe.__table__
    recipe_owned = _parent_exists(recipes, "recipe_id", _owned_by_caller)

    # Profiles
    registry.add(Policy(
        "Users can view their own profile", "profiles", Command.SELECT,
        using=lambda row, uid: uid == row.id,
    ))
    registry.add(Policy(
        "Users can update their own profile", "profiles", Command.UPDATE,
        using=lambda row, uid: uid == row.id,
    ))

    # Recipes
    registry.add(Policy(
        "Anyone can view public recipes", "recipes", Command.SELECT,
        using=_public_or_owned,
    ))
    registry.add(Policy(
        "Users can create recipes", "recipes", Command.INSERT,
        with_check=_owned_by_caller,
    ))
    registry.add(Policy(
        "Users can update their own recipes", "recipes", Command.UPDATE,
        using=_owned_by_caller,
    ))

    # Recipe ingredients
    registry.add(Policy(
        "Users can view recipe ingredients", "recipe_ingredients", Command.SELECT,
        using=_parent_exists(recipes, "recipe_id", _public_or_owned),
    ))
    registry.add(Policy(
        "Users can manage their recipe ingredients", "recipe_ingredients", Command.ALL,
        using=recipe_owned,
    ))

    # Tags
    registry.add(Policy(
        "Anyone can view tags", "tags", Command.SELECT,
        using=lambda row, uid: true(),
    ))

    # Recipe tags
    registry.add(Policy(
        "Anyone can view recipe tags", "recipe_tags", Command.SELECT,
        using=lambda row, uid: true(),
    ))
    registry.add(Policy(
        "Users can manage their recipe tags", "recipe_tags", Command.ALL,
        using=recipe_owned,
    ))

    # Meal plans
    registry.add(Policy(
        "Users can manage their meal plans", "meal_plans", Command.ALL,
        using=_owned_by_caller,
    ))
    registry.add(Policy(
        "Users can manage their meal plan items", "meal_plan_items", Command.ALL,
        using=_parent_exists(MealPlan.__table__, "meal_plan_id", _owned_by_caller),
    ))

    # Shopping lists
    registry.add(Policy(
        "Users can manage their shopping lists", "shopping_lists", Command.ALL,
        using=_owned_by_caller,
    ))
    registry.add(Policy(
        "Users can manage their shopping list items", "shopping_list_items", Command.ALL,
        using=_parent_exists(
            ShoppingList.__table__, "shopping_list_id", _owned_by_caller
        ),
    ))
    return registry


registry = build_registry()
