"""
Shopping List Repository - Data access layer for shopping list operations
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import ShoppingList, ShoppingListItem


class ShoppingListRepository(BaseRepository[ShoppingList]):
    """Repository for shopping list data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingList)

    def get_with_items(self, list_id: UUID) -> Optional[ShoppingList]:
        stmt = (
            select(ShoppingList)
            .where(ShoppingList.id == list_id)
            .options(selectinload(ShoppingList.items))
        )
        return self.db.scalars(stmt).first()

    def list_lists(self, limit: int = 20) -> List[ShoppingList]:
        """All shopping lists visible to the session, newest first"""
        stmt = (
            select(ShoppingList)
            .options(selectinload(ShoppingList.items))
            .order_by(ShoppingList.created_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))


class ShoppingListItemRepository(BaseRepository[ShoppingListItem]):
    """Repository for shopping list item data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingListItem)

    def get_by_list_id(self, list_id: UUID) -> List[ShoppingListItem]:
        stmt = (
            select(ShoppingListItem)
            .where(ShoppingListItem.shopping_list_id == list_id)
            .order_by(ShoppingListItem.created_at)
        )
        return list(self.db.scalars(stmt))
