# wardrobe_project/services/shopping_service.py
import uuid
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..models.shopping_models import ShoppingItemCreate, ShoppingItemUpdate
from ..db import orm_models as models


async def add_shopping_item(db: AsyncSession, item_in: ShoppingItemCreate) -> models.ShoppingItem:
    db_item = models.ShoppingItem(id=uuid.uuid4(), **item_in.model_dump())
    db.add(db_item)
    await db.commit()
    await db.refresh(db_item)
    return db_item

async def get_shopping_item_by_id(db: AsyncSession, item_id: uuid.UUID) -> Optional[models.ShoppingItem]:
    result = await db.execute(select(models.ShoppingItem).filter(models.ShoppingItem.id == item_id))
    return result.scalars().first()

async def get_shopping_items(db: AsyncSession, is_completed: Optional[bool] = None) -> List[models.ShoppingItem]:
    """Lists the shopping list, most recently touched first."""
    stmt = select(models.ShoppingItem)
    if is_completed is not None:
        stmt = stmt.where(models.ShoppingItem.is_completed.is_(is_completed))
    result = await db.execute(stmt.order_by(models.ShoppingItem.updated_at.desc()))
    return result.scalars().all()

async def update_shopping_item(
    db: AsyncSession, item_id: uuid.UUID, item_in: ShoppingItemUpdate
) -> Optional[models.ShoppingItem]:
    db_item = await get_shopping_item_by_id(db, item_id)
    if not db_item:
        return None

    for field, value in item_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(db_item, field, value)

    await db.commit()
    await db.refresh(db_item)
    return db_item

async def toggle_shopping_item(db: AsyncSession, item_id: uuid.UUID) -> Optional[models.ShoppingItem]:
    db_item = await get_shopping_item_by_id(db, item_id)
    if not db_item:
        return None
    db_item.is_completed = not db_item.is_completed
    await db.commit()
    await db.refresh(db_item)
    return db_item

async def delete_shopping_item(db: AsyncSession, item_id: uuid.UUID) -> bool:
    db_item = await get_shopping_item_by_id(db, item_id)
    if not db_item:
        return False
    await db.delete(db_item)
    await db.commit()
    return True
