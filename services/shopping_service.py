"""Shopping list service"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import ShoppingList, ShoppingListItem
from domain.schemas.shopping_schemas import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
    ShoppingListUpdate,
)
from domain.security.context import SessionContext
from repositories import ShoppingListItemRepository, ShoppingListRepository
from services.planner_service import PlannerService

logger = logging.getLogger("angiday.shopping")

CENTS = Decimal("0.01")


class ShoppingService:
    """Business logic for shopping lists."""

    @staticmethod
    def list_lists(db: Session, ctx: SessionContext, limit: int = 20) -> List[ShoppingList]:
        lists = ShoppingListRepository(db).list_lists(limit=limit)
        logger.info(f"shopping_lists_listed caller={ctx} count={len(lists)}")
        return lists

    @staticmethod
    def get_list(db: Session, ctx: SessionContext, list_id: UUID) -> ShoppingList:
        shopping_list = ShoppingListRepository(db).get_with_items(list_id)
        if not shopping_list:
            logger.warning(f"shopping_list_not_found list_id={list_id} caller={ctx}")
            raise NotFoundError(f"Shopping list {list_id} not found")
        return shopping_list

    @staticmethod
    def create_list(db: Session, ctx: SessionContext, data: ShoppingListCreate) -> ShoppingList:
        shopping_list = ShoppingListRepository(db).create(
            ShoppingList(user_id=ctx.user_id, **data.model_dump())
        )
        logger.info(f"shopping_list_created list_id={shopping_list.id} user_id={ctx.user_id}")
        return shopping_list

    @staticmethod
    def update_list(
        db: Session, ctx: SessionContext, list_id: UUID, data: ShoppingListUpdate
    ) -> ShoppingList:
        shopping_list = ShoppingService.get_list(db, ctx, list_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return shopping_list
        shopping_list = ShoppingListRepository(db).update(shopping_list, **fields)
        logger.info(f"shopping_list_updated list_id={list_id} fields={sorted(fields)}")
        return shopping_list

    @staticmethod
    def delete_list(db: Session, ctx: SessionContext, list_id: UUID) -> None:
        repo = ShoppingListRepository(db)
        shopping_list = repo.get_by_id(list_id)
        if not shopping_list:
            raise NotFoundError(f"Shopping list {list_id} not found")
        repo.delete(shopping_list)
        logger.info(f"shopping_list_deleted list_id={list_id} caller={ctx}")

    @staticmethod
    def complete_list(db: Session, ctx: SessionContext, list_id: UUID) -> ShoppingList:
        shopping_list = ShoppingService.get_list(db, ctx, list_id)
        shopping_list = ShoppingListRepository(db).update(shopping_list, is_completed=True)
        logger.info(f"shopping_list_completed list_id={list_id}")
        return shopping_list

    @staticmethod
    def recalculate_total(db: Session, ctx: SessionContext, list_id: UUID) -> ShoppingList:
        """Store the sum of item costs, using the actual cost where known and the estimate otherwise"""
        shopping_list = ShoppingService.get_list(db, ctx, list_id)
        total = Decimal("0")
        for item in shopping_list.items:
            cost = item.actual_cost if item.actual_cost is not None else item.estimated_cost
            if cost is not None:
                total += Decimal(cost)
        shopping_list = ShoppingListRepository(db).update(
            shopping_list, total_cost=total.quantize(CENTS)
        )
        logger.info(f"shopping_list_total list_id={list_id} total_cost={shopping_list.total_cost}")
        return shopping_list

    # ---- items ----

    @staticmethod
    def list_items(db: Session, ctx: SessionContext, list_id: UUID) -> List[ShoppingListItem]:
        ShoppingService.get_list(db, ctx, list_id)
        return ShoppingListItemRepository(db).get_by_list_id(list_id)

    @staticmethod
    def add_item(
        db: Session, ctx: SessionContext, list_id: UUID, data: ShoppingListItemCreate
    ) -> ShoppingListItem:
        ShoppingService.get_list(db, ctx, list_id)
        item = ShoppingListItemRepository(db).create(
            ShoppingListItem(shopping_list_id=list_id, **data.model_dump())
        )
        logger.info(f"shopping_item_added list_id={list_id} item_id={item.id}")
        return item

    @staticmethod
    def _get_item(db: Session, list_id: UUID, item_id: UUID) -> ShoppingListItem:
        item = ShoppingListItemRepository(db).get_by_id(item_id)
        if not item or item.shopping_list_id != list_id:
            raise NotFoundError(f"Item {item_id} not found in shopping list {list_id}")
        return item

    @staticmethod
    def update_item(
        db: Session,
        ctx: SessionContext,
        list_id: UUID,
        item_id: UUID,
        data: ShoppingListItemUpdate,
    ) -> ShoppingListItem:
        """Partial update. Only the columns that change are written, so
        concurrent edits to different fields of one item do not overwrite
        each other."""
        item = ShoppingService._get_item(db, list_id, item_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return item
        item = ShoppingListItemRepository(db).update(item, **fields)
        logger.info(f"shopping_item_updated item_id={item_id} fields={sorted(fields)}")
        return item

    @staticmethod
    def check_item(
        db: Session, ctx: SessionContext, list_id: UUID, item_id: UUID, checked: bool = True
    ) -> ShoppingListItem:
        item = ShoppingService._get_item(db, list_id, item_id)
        return ShoppingListItemRepository(db).update(item, is_checked=checked)

    @staticmethod
    def remove_item(db: Session, ctx: SessionContext, list_id: UUID, item_id: UUID) -> None:
        item = ShoppingService._get_item(db, list_id, item_id)
        ShoppingListItemRepository(db).delete(item)
        logger.info(f"shopping_item_removed list_id={list_id} item_id={item_id}")

    # ---- generation ----

    @staticmethod
    def build_from_meal_plan(
        db: Session, ctx: SessionContext, plan_id: UUID, title: Optional[str] = None
    ) -> ShoppingList:
        """
        Create a shopping list holding every ingredient the plan needs.

        Algorithm:
        1. Load the plan items and their recipes
        2. Scale each recipe's ingredients by item servings / recipe servings
        3. Merge lines with the same name and unit
        4. Store the list, linked to the plan, with one item per merged line

        Recipes the caller can no longer see are skipped.
        """
        plan = PlannerService.get_plan(db, ctx, plan_id)

        aggregated: Dict[Tuple[str, str], dict] = {}
        for entry in plan.items:
            recipe = entry.recipe
            if recipe is None:
                if entry.recipe_id is not None:
                    logger.warning(f"plan_recipe_unavailable plan_id={plan_id} recipe_id={entry.recipe_id}")
                continue

            factor = Decimal(entry.servings or 1) / Decimal(recipe.servings or 1)
            for ingredient in recipe.ingredients:
                key = (ingredient.name.strip().lower(), (ingredient.unit or "").strip().lower())
                line = aggregated.setdefault(
                    key, {"name": ingredient.name.strip(), "unit": ingredient.unit, "amount": None}
                )
                if ingredient.amount is not None:
                    scaled = Decimal(ingredient.amount) * factor
                    line["amount"] = scaled if line["amount"] is None else line["amount"] + scaled

        shopping_list = ShoppingList(
            user_id=ctx.user_id,
            title=title or f"Shopping for {plan.title}",
            meal_plan_id=plan_id,
        )
        shopping_list.items = [
            ShoppingListItem(
                ingredient_name=line["name"],
                unit=line["unit"],
                amount=line["amount"].quantize(CENTS) if line["amount"] is not None else None,
            )
            for line in aggregated.values()
        ]
        shopping_list = ShoppingListRepository(db).create(shopping_list)
        logger.info(
            f"shopping_list_built list_id={shopping_list.id} plan_id={plan_id} "
            f"entries={len(plan.items)} items={len(aggregated)}"
        )
        return shopping_list
