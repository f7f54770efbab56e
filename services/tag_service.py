"""Tag catalog service"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.exceptions import ConflictError
from domain.enums import TagType
from domain.models import Tag
from domain.schemas.recipe_schemas import TagCreate
from domain.security.context import SessionContext
from repositories import TagRepository

logger = logging.getLogger("angiday.tags")


DEFAULT_TAG_CATALOG = {
    TagType.CUISINE: ["Italian", "Mexican", "Indian", "Chinese", "Japanese", "Mediterranean", "French", "Thai"],
    TagType.COURSE: ["Breakfast", "Appetizer", "Main", "Side", "Dessert", "Snack"],
    TagType.DIETARY: ["Vegetarian", "Vegan", "Gluten Free", "Dairy Free", "Keto", "Paleo"],
    TagType.INGREDIENT: ["Chicken", "Beef", "Fish", "Tofu", "Pasta", "Rice"],
    TagType.METHOD: ["Baked", "Grilled", "Fried", "Slow Cooked", "No Cook"],
    TagType.DIFFICULTY: ["Easy", "Medium", "Hard"],
}


class TagService:
    """Shared tag catalog.

    Every authenticated caller can read the catalog; writes have no caller
    policy and go through a service session.
    """

    @staticmethod
    def list_tags(db: Session, ctx: SessionContext, tag_type: Optional[TagType] = None) -> List[Tag]:
        tags = TagRepository(db).list_tags(tag_type)
        logger.info(f"tags_listed caller={ctx} type={tag_type.value if tag_type else None} count={len(tags)}")
        return tags

    @staticmethod
    def create_tag(db: Session, data: TagCreate) -> Tag:
        """Add a catalog entry; names are unique per tag type"""
        repo = TagRepository(db)
        if repo.get_by_name(data.name, data.type):
            raise ConflictError(f"Tag '{data.name}' of type {data.type.value} already exists")
        tag = repo.create(Tag(name=data.name, type=data.type))
        logger.info(f"tag_created tag_id={tag.id} name={tag.name} type={tag.type.value}")
        return tag

    @staticmethod
    def seed_catalog(db: Session, catalog=None) -> int:
        """Insert the missing entries of the default catalog. Returns how many were added."""
        catalog = catalog or DEFAULT_TAG_CATALOG
        repo = TagRepository(db)
        added = 0
        for tag_type, names in catalog.items():
            for name in names:
                if repo.get_by_name(name, tag_type):
                    continue
                db.add(Tag(name=name, type=tag_type))
                added += 1
        repo.commit()
        logger.info(f"tag_catalog_seeded added={added}")
        return added
