# wardrobe_project/services/outfit_service.py

import uuid
import logging
from datetime import timedelta
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_, func

from fastapi import HTTPException, status

from ..db import orm_models as models
from ..models.outfit_models import OutfitCreate, OutfitUpdate, OutfitFilter, OutfitDetail, WearRequest
from ..models.clothing_models import ClothingItem
from . import user_service, wardrobe_service

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


async def _validate_references(db: AsyncSession, user_id: Optional[uuid.UUID], clothing_ids: Optional[List[uuid.UUID]]):
    if user_id is not None:
        await user_service.get_user_or_404(db, user_id)
    if clothing_ids:
        found = await wardrobe_service.get_clothing_items_by_ids(db, clothing_ids)
        missing = set(clothing_ids) - {item.id for item in found}
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown clothing item ids: {', '.join(sorted(str(i) for i in missing))}"
            )

async def _reload(db: AsyncSession, outfit_id: uuid.UUID) -> models.Outfit:
    result = await db.execute(
        select(models.Outfit)
        .filter(models.Outfit.id == outfit_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().one()


async def create_outfit(db: AsyncSession, outfit_in: OutfitCreate) -> models.Outfit:
    await _validate_references(db, outfit_in.user_id, outfit_in.clothing_ids)

    data = outfit_in.model_dump()
    data["clothing_ids"] = [str(item_id) for item_id in outfit_in.clothing_ids]
    if data["date"] is None:
        data["date"] = models.utcnow()

    db_outfit = models.Outfit(id=uuid.uuid4(), **data)
    db.add(db_outfit)
    await db.commit()
    logger.info(f"Created outfit {db_outfit.id} ({db_outfit.name}) with {len(db_outfit.clothing_ids)} items")
    return await _reload(db, db_outfit.id)

async def get_outfit_by_id(db: AsyncSession, outfit_id: uuid.UUID) -> Optional[models.Outfit]:
    result = await db.execute(select(models.Outfit).filter(models.Outfit.id == outfit_id))
    return result.scalars().first()

async def get_outfit_or_404(db: AsyncSession, outfit_id: uuid.UUID) -> models.Outfit:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Outfit with id {outfit_id} not found.")
    return db_outfit

async def get_outfit_items(db: AsyncSession, db_outfit: models.Outfit) -> List[models.ClothingItem]:
    """Resolves the outfit's clothing ids, in outfit order. Deleted items are skipped."""
    item_ids = [uuid.UUID(id_str) for id_str in db_outfit.clothing_ids or []]
    return await wardrobe_service.get_clothing_items_by_ids(db, item_ids)

async def get_outfit_detail(db: AsyncSession, outfit_id: uuid.UUID) -> Optional[OutfitDetail]:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return None
    items = await get_outfit_items(db, db_outfit)
    detail = OutfitDetail.model_validate(db_outfit)
    detail.items = [ClothingItem.model_validate(item) for item in items]
    return detail

async def get_outfits(
    db: AsyncSession,
    user_id: Optional[uuid.UUID] = None,
    filter_type: OutfitFilter = "all",
    q: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[models.Outfit]:
    stmt = select(models.Outfit)
    if user_id is not None:
        stmt = stmt.where(models.Outfit.user_id == user_id)
    if filter_type == "favorite":
        stmt = stmt.where(models.Outfit.is_favorite.is_(True))
    elif filter_type == "recent":
        stmt = stmt.where(models.Outfit.created_at >= models.utcnow() - timedelta(days=RECENT_DAYS))
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(models.Outfit.name).like(pattern),
                func.lower(models.Outfit.occasion).like(pattern),
                func.lower(models.Outfit.notes).like(pattern),
            )
        )
    stmt = stmt.order_by(models.Outfit.updated_at.desc()).offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()

async def update_outfit(db: AsyncSession, outfit_id: uuid.UUID, outfit_in: OutfitUpdate) -> Optional[models.Outfit]:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return None

    update_data = outfit_in.model_dump(exclude_unset=True)
    await _validate_references(db, update_data.get("user_id"), update_data.get("clothing_ids"))
    if update_data.get("clothing_ids") is not None:
        update_data["clothing_ids"] = [str(item_id) for item_id in update_data["clothing_ids"]]

    for field, value in update_data.items():
        if value is None and field in ("name", "clothing_ids", "is_favorite", "is_visible"):
            continue
        setattr(db_outfit, field, value)

    await db.commit()
    return await _reload(db, outfit_id)

async def delete_outfit(db: AsyncSession, outfit_id: uuid.UUID) -> bool:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return False
    await db.delete(db_outfit)
    await db.commit()
    return True

async def set_outfit_image(db: AsyncSession, outfit_id: uuid.UUID, image_uri: str) -> models.Outfit:
    db_outfit = await get_outfit_or_404(db, outfit_id)
    db_outfit.image_uri = image_uri
    await db.commit()
    return await _reload(db, outfit_id)


# --- Wear history ---
async def mark_outfit_as_worn(db: AsyncSession, outfit_id: uuid.UUID, wear_in: WearRequest) -> models.WearRecord:
    """
    Records that an outfit was worn. Every item in it gets its wear count and
    activity score bumped and its last_worn date set, which feeds back into
    future recommendations.
    """
    db_outfit = await get_outfit_or_404(db, outfit_id)
    user_id = wear_in.user_id or db_outfit.user_id
    if wear_in.user_id is not None:
        await user_service.get_user_or_404(db, wear_in.user_id)

    now = models.utcnow()
    for item in await get_outfit_items(db, db_outfit):
        item.wear_count = (item.wear_count or 0) + 1
        item.activity_score = (item.activity_score or 0) + wear_in.activity_delta
        item.last_worn = now

    record = models.WearRecord(
        id=uuid.uuid4(),
        outfit_id=db_outfit.id,
        user_id=user_id,
        worn_at=now,
        weather=wear_in.weather or db_outfit.weather,
        notes=wear_in.notes,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info(f"Outfit {outfit_id} marked as worn")
    return record

async def get_wear_history(
    db: AsyncSession, user_id: Optional[uuid.UUID] = None, skip: int = 0, limit: int = 100
) -> List[models.WearRecord]:
    """Wear records, most recent first."""
    stmt = select(models.WearRecord)
    if user_id is not None:
        stmt = stmt.where(models.WearRecord.user_id == user_id)
    stmt = stmt.order_by(models.WearRecord.worn_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return result.scalars().all()
