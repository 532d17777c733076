# wardrobe_project/services/wardrobe_service.py
import uuid
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_, func

from fastapi import HTTPException, status

from ..models.clothing_models import ClothingItemCreate, ClothingItemUpdate, ClothingSort
from ..db import orm_models as models
from . import category_service, media_service, clothing_analysis_service

logger = logging.getLogger(__name__)

_SORT_ORDER = {
    "activity_desc": (models.ClothingItem.activity_score.desc(), models.ClothingItem.created_at.desc()),
    "activity_asc": (models.ClothingItem.activity_score.asc(), models.ClothingItem.created_at.desc()),
    "created_desc": (models.ClothingItem.created_at.desc(),),
    "created_asc": (models.ClothingItem.created_at.asc(),),
    "name_asc": (func.lower(models.ClothingItem.name).asc(),),
    "name_desc": (func.lower(models.ClothingItem.name).desc(),),
}
_NOT_NULL_FIELDS = {"name", "category", "season", "tags", "is_visible", "wear_count", "activity_score"}


async def _resolve_category(db: AsyncSession, category: Optional[str], category_id: Optional[int]):
    """Returns (display name, category id) for the given inputs, keeping both in sync."""
    if category_id is not None:
        db_category = await category_service.get_category_by_id(db, category_id)
        if not db_category:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Category with id {category_id} not found.")
        return db_category.name, db_category.id
    if category:
        db_category = await category_service.get_category_by_name(db, category)
        return category, db_category.id if db_category else None
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Either category or category_id is required.")


async def _reload(db: AsyncSession, item_id: uuid.UUID) -> models.ClothingItem:
    # populate_existing refreshes the selectin-loaded category after a change of category_id
    result = await db.execute(
        select(models.ClothingItem)
        .filter(models.ClothingItem.id == item_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def add_clothing_item(db: AsyncSession, item_in: ClothingItemCreate) -> models.ClothingItem:
    data = item_in.model_dump()
    data["category"], data["category_id"] = await _resolve_category(db, item_in.category, item_in.category_id)
    data["season"] = item_in.season.value

    db_item = models.ClothingItem(id=uuid.uuid4(), **data)
    db.add(db_item)
    await db.commit()
    logger.info(f"Added clothing item {db_item.id} ({db_item.name}) in {db_item.category}")
    return await _reload(db, db_item.id)

async def get_clothing_item_by_id(db: AsyncSession, item_id: uuid.UUID) -> Optional[models.ClothingItem]:
    result = await db.execute(select(models.ClothingItem).filter(models.ClothingItem.id == item_id))
    return result.scalars().first()

async def get_clothing_items_by_ids(db: AsyncSession, item_ids: List[uuid.UUID]) -> List[models.ClothingItem]:
    """Fetches items in the order of item_ids, skipping ids that no longer exist."""
    if not item_ids:
        return []
    result = await db.execute(select(models.ClothingItem).where(models.ClothingItem.id.in_(item_ids)))
    items_map = {item.id: item for item in result.scalars().all()}
    return [items_map[item_id] for item_id in item_ids if item_id in items_map]

async def get_clothing_items(
    db: AsyncSession,
    category: Optional[str] = None,
    q: Optional[str] = None,
    visible_only: bool = False,
    sort: ClothingSort = "activity_desc",
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[models.ClothingItem]:
    """Lists clothing items with optional category filter, text search and ordering."""
    stmt = select(models.ClothingItem)
    if category:
        stmt = stmt.outerjoin(models.Category, models.ClothingItem.category_id == models.Category.id).where(
            or_(models.ClothingItem.category == category, models.Category.name == category)
        )
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(models.ClothingItem.name).like(pattern),
                func.lower(models.ClothingItem.brand).like(pattern),
                func.lower(models.ClothingItem.color).like(pattern),
            )
        )
    if visible_only:
        stmt = stmt.where(models.ClothingItem.is_visible.is_(True))

    stmt = stmt.order_by(*_SORT_ORDER.get(sort, _SORT_ORDER["activity_desc"])).offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()

async def update_clothing_item(
    db: AsyncSession, item_id: uuid.UUID, item_in: ClothingItemUpdate
) -> Optional[models.ClothingItem]:
    db_item = await get_clothing_item_by_id(db, item_id)
    if not db_item:
        return None

    update_data = item_in.model_dump(exclude_unset=True)
    if "category" in update_data or "category_id" in update_data:
        update_data["category"], update_data["category_id"] = await _resolve_category(
            db, update_data.get("category") or db_item.category, update_data.get("category_id")
        )

    if update_data.get("season") is not None:
        update_data["season"] = update_data["season"].value

    for field, value in update_data.items():
        if value is None and field in _NOT_NULL_FIELDS:
            continue
        setattr(db_item, field, value)

    await db.commit()
    return await _reload(db, item_id)

async def delete_clothing_item(db: AsyncSession, item_id: uuid.UUID) -> bool:
    db_item = await get_clothing_item_by_id(db, item_id)
    if not db_item:
        return False
    await db.delete(db_item)
    await db.commit()
    return True

async def set_clothing_photo(db: AsyncSession, item_id: uuid.UUID, image_bytes: bytes) -> models.ClothingItem:
    db_item = await get_clothing_item_by_id(db, item_id)
    if not db_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Clothing item with id {item_id} not found.")
    db_item.image_uri = await media_service.save_image(image_bytes, "clothing")
    await db.commit()
    return await _reload(db, item_id)

async def analyze_clothing_item(db: AsyncSession, item_id: uuid.UUID) -> models.ClothingItem:
    """
    Runs AI tag analysis on the item's photo and stores the tags on the item.
    When the analysis fails the default tags are stored instead.
    """
    db_item = await get_clothing_item_by_id(db, item_id)
    if not db_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Clothing item with id {item_id} not found.")
    if not db_item.image_uri:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Clothing item has no photo to analyze.")

    try:
        image_base64 = await media_service.load_image_base64(db_item.image_uri)
    except Exception as e:
        logger.warning(f"Could not load photo of item {item_id}: {e}")
        image_base64 = None

    tags = None
    if image_base64:
        result = await clothing_analysis_service.analyze_clothing_image(
            image_base64, category=db_item.category_name or db_item.category, name=db_item.name
        )
        if result.success:
            tags = result.analysis
        else:
            logger.warning(f"Analysis of item {item_id} failed, storing default tags: {result.error}")
    if tags is None:
        tags = clothing_analysis_service.default_tags()

    db_item.analysis = tags.model_dump(by_alias=True)
    await db.commit()
    return await _reload(db, item_id)
