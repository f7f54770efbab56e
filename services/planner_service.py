from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import MealPlan, MealPlanItem
from domain.schemas.plan_schemas import (
    MealPlanCreate,
    MealPlanItemCreate,
    MealPlanItemUpdate,
    MealPlanUpdate,
)
from domain.security.context import SessionContext
from repositories import MealPlanItemRepository, MealPlanRepository

logger = logging.getLogger("angiday.planner")


class PlannerService:
    """
    Meal plans and their scheduled items.

    - a plan belongs to the caller that creates it
    - items are reachable only through a plan the caller owns
    - deleting a plan removes its items in the same transaction
    - ``end_date`` is stored as given, it is not validated against ``start_date``
    """

    @staticmethod
    def list_plans(db: Session, ctx: SessionContext, limit: int = 50) -> List[MealPlan]:
        plans = MealPlanRepository(db).list_plans(limit=limit)
        logger.info(f"meal_plans_listed caller={ctx} count={len(plans)}")
        return plans

    @staticmethod
    def get_plan(db: Session, ctx: SessionContext, plan_id: UUID) -> MealPlan:
        plan = MealPlanRepository(db).get_with_items(plan_id)
        if not plan:
            logger.warning(f"meal_plan_not_found plan_id={plan_id} caller={ctx}")
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    @staticmethod
    def create_plan(db: Session, ctx: SessionContext, data: MealPlanCreate) -> MealPlan:
        plan = MealPlanRepository(db).create(MealPlan(user_id=ctx.user_id, **data.model_dump()))
        logger.info(
            f"meal_plan_created plan_id={plan.id} user_id={ctx.user_id} "
            f"range={plan.start_date}..{plan.end_date}"
        )
        return plan

    @staticmethod
    def update_plan(db: Session, ctx: SessionContext, plan_id: UUID, data: MealPlanUpdate) -> MealPlan:
        plan = PlannerService.get_plan(db, ctx, plan_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return plan
        plan = MealPlanRepository(db).update(plan, **fields)
        logger.info(f"meal_plan_updated plan_id={plan_id} fields={sorted(fields)}")
        return plan

    @staticmethod
    def delete_plan(db: Session, ctx: SessionContext, plan_id: UUID) -> None:
        """Delete a plan and all of its items.

        Shopping lists generated from the plan are kept and lose the link.
        """
        repo = MealPlanRepository(db)
        plan = repo.get_by_id(plan_id)
        if not plan:
            raise NotFoundError(f"Meal plan {plan_id} not found")
        repo.delete(plan)
        logger.info(f"meal_plan_deleted plan_id={plan_id} caller={ctx}")

    # ---- items ----

    @staticmethod
    def list_items(db: Session, ctx: SessionContext, plan_id: UUID) -> List[MealPlanItem]:
        PlannerService.get_plan(db, ctx, plan_id)
        return MealPlanItemRepository(db).get_by_plan_id(plan_id)

    @staticmethod
    def add_item(
        db: Session, ctx: SessionContext, plan_id: UUID, data: MealPlanItemCreate
    ) -> MealPlanItem:
        PlannerService.get_plan(db, ctx, plan_id)
        item = MealPlanItemRepository(db).create(MealPlanItem(meal_plan_id=plan_id, **data.model_dump()))
        logger.info(
            f"meal_plan_item_added plan_id={plan_id} item_id={item.id} "
            f"date={item.date} meal_type={item.meal_type.value}"
        )
        return item

    @staticmethod
    def _get_item(db: Session, plan_id: UUID, item_id: UUID) -> MealPlanItem:
        item = MealPlanItemRepository(db).get_by_id(item_id)
        if not item or item.meal_plan_id != plan_id:
            raise NotFoundError(f"Item {item_id} not found in meal plan {plan_id}")
        return item

    @staticmethod
    def update_item(
        db: Session,
        ctx: SessionContext,
        plan_id: UUID,
        item_id: UUID,
        data: MealPlanItemUpdate,
    ) -> MealPlanItem:
        item = PlannerService._get_item(db, plan_id, item_id)
        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return item
        item = MealPlanItemRepository(db).update(item, **fields)
        logger.info(f"meal_plan_item_updated item_id={item_id} fields={sorted(fields)}")
        return item

    @staticmethod
    def remove_item(db: Session, ctx: SessionContext, plan_id: UUID, item_id: UUID) -> None:
        item = PlannerService._get_item(db, plan_id, item_id)
        MealPlanItemRepository(db).delete(item)
        logger.info(f"meal_plan_item_removed plan_id={plan_id} item_id={item_id}")
