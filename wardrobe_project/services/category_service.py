# wardrobe_project/services/category_service.py
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update

from fastapi import HTTPException, status

from ..models.clothing_models import CategoryCreate
from ..db import orm_models as models

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Top", "icon": "shirt-outline", "color": "#FF6B6B"},
    {"name": "Pants", "icon": "hardware-chip-outline", "color": "#4ECDC4"},
    {"name": "Skirt", "icon": "triangle-outline", "color": "#45B7D1"},
    {"name": "Outerwear", "icon": "jacket-outline", "color": "#96CEB4"},
    {"name": "Shoes", "icon": "footsteps-outline", "color": "#FFEAA7"},
    {"name": "Accessory", "icon": "diamond-outline", "color": "#DDA0DD"},
    {"name": "Bag", "icon": "bag-outline", "color": "#F39C12"},
    {"name": "Underwear", "icon": "heart-outline", "color": "#FFB6C1"},
]


async def get_category_by_id(db: AsyncSession, category_id: int) -> Optional[models.Category]:
    result = await db.execute(select(models.Category).filter(models.Category.id == category_id))
    return result.scalars().first()

async def get_category_by_name(db: AsyncSession, name: str) -> Optional[models.Category]:
    result = await db.execute(select(models.Category).filter(models.Category.name == name))
    return result.scalars().first()

async def get_all_categories(db: AsyncSession) -> List[models.Category]:
    result = await db.execute(select(models.Category).order_by(models.Category.id.asc()))
    return result.scalars().all()

async def create_category(db: AsyncSession, category_in: CategoryCreate) -> models.Category:
    if await get_category_by_name(db, category_in.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Category '{category_in.name}' already exists."
        )
    db_category = models.Category(**category_in.model_dump())
    db.add(db_category)
    await db.commit()
    await db.refresh(db_category)
    return db_category

async def delete_category(db: AsyncSession, category_id: int) -> bool:
    """Deletes a category. Items keep their category display name but lose the reference."""
    db_category = await get_category_by_id(db, category_id)
    if not db_category:
        return False

    # SQLite ignores ON DELETE SET NULL unless foreign keys are switched on
    await db.execute(
        update(models.ClothingItem)
        .where(models.ClothingItem.category_id == category_id)
        .values(category_id=None)
    )
    await db.delete(db_category)
    await db.commit()
    return True

async def seed_default_categories(db: AsyncSession) -> int:
    """Inserts the built-in categories that are not present yet. Returns how many were added."""
    existing = {c.name for c in await get_all_categories(db)}
    missing = [models.Category(**c) for c in DEFAULT_CATEGORIES if c["name"] not in existing]
    if missing:
        db.add_all(missing)
        await db.commit()
    return len(missing)
