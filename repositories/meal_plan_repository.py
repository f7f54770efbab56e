"""
Meal Plan Repository - Data access layer for meal plan operations
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import MealPlan, MealPlanItem


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_with_items(self, plan_id: UUID) -> Optional[MealPlan]:
        stmt = (
            select(MealPlan)
            .where(MealPlan.id == plan_id)
            .options(selectinload(MealPlan.items))
        )
        return self.db.scalars(stmt).first()

    def list_plans(self, limit: int = 50) -> List[MealPlan]:
        """All meal plans visible to the session, latest start date first"""
        stmt = (
            select(MealPlan)
            .options(selectinload(MealPlan.items))
            .order_by(MealPlan.start_date.desc(), MealPlan.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))


class MealPlanItemRepository(BaseRepository[MealPlanItem]):
    """Repository for meal plan item data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlanItem)

    def get_by_plan_id(self, plan_id: UUID) -> List[MealPlanItem]:
        """Get all items for a plan ordered by day"""
        stmt = (
            select(MealPlanItem)
            .where(MealPlanItem.meal_plan_id == plan_id)
            .order_by(MealPlanItem.date, MealPlanItem.created_at)
        )
        return list(self.db.scalars(stmt))
