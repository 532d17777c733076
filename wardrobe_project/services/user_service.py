# wardrobe_project/services/user_service.py
import uuid
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update, func

from fastapi import HTTPException, status

from ..models.user_models import UserCreate, UserUpdate
from ..db import orm_models as models

logger = logging.getLogger(__name__)

# --- CRUD SERVICES ---
async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> Optional[models.User]:
    """Retrieves a user by their ID from the database."""
    result = await db.execute(select(models.User).filter(models.User.id == user_id))
    return result.scalars().first()

async def get_user_or_404(db: AsyncSession, user_id: uuid.UUID) -> models.User:
    user = await get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with id {user_id} not found.")
    return user

async def get_default_user(db: AsyncSession) -> Optional[models.User]:
    result = await db.execute(select(models.User).filter(models.User.is_default.is_(True)))
    return result.scalars().first()

async def _clear_default_flag(db: AsyncSession, keep_id: Optional[uuid.UUID] = None) -> None:
    stmt = update(models.User).where(models.User.is_default.is_(True))
    if keep_id is not None:
        stmt = stmt.where(models.User.id != keep_id)
    await db.execute(stmt.values(is_default=False))

async def create_user_in_db(db: AsyncSession, user_in: UserCreate) -> models.User:
    """Creates a new user. The first user in the household becomes the default one."""
    user_count = (await db.execute(select(func.count(models.User.id)))).scalar_one()
    is_default = user_in.is_default or user_count == 0

    db_user = models.User(
        id=uuid.uuid4(),
        name=user_in.name,
        photo_uri=user_in.photo_uri,
        is_default=is_default,
    )
    if is_default:
        await _clear_default_flag(db)
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    logger.info(f"Created user {db_user.id} ({db_user.name}), default={db_user.is_default}")
    return db_user

async def update_user_in_db(db: AsyncSession, user_id: uuid.UUID, user_in: UserUpdate) -> Optional[models.User]:
    """Updates an existing user in the database."""
    db_user = await get_user_by_id(db, user_id)
    if not db_user:
        return None

    update_data = user_in.model_dump(exclude_unset=True)

    if update_data.get("is_default"):
        await _clear_default_flag(db, keep_id=user_id)

    for field, value in update_data.items():
        if value is not None:
            setattr(db_user, field, value)

    await db.commit()
    await db.refresh(db_user)
    return db_user

async def delete_user_in_db(db: AsyncSession, user_id: uuid.UUID) -> bool:
    """Deletes a user. Their outfits and wear records are kept but lose the owner reference."""
    db_user = await get_user_by_id(db, user_id)
    if not db_user:
        return False
    was_default = db_user.is_default

    # SQLite ignores ON DELETE SET NULL unless foreign keys are switched on
    await db.execute(
        update(models.Outfit).where(models.Outfit.user_id == user_id).values(user_id=None)
    )
    await db.execute(
        update(models.WearRecord).where(models.WearRecord.user_id == user_id).values(user_id=None)
    )
    await db.delete(db_user)
    await db.commit()

    if was_default:
        # Promote the oldest remaining user so the household keeps a default profile
        result = await db.execute(select(models.User).order_by(models.User.created_at.asc()).limit(1))
        successor = result.scalars().first()
        if successor:
            successor.is_default = True
            await db.commit()
    return True

async def get_all_users_in_db(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[models.User]:
    """Retrieves all users, newest first, with pagination."""
    result = await db.execute(
        select(models.User).order_by(models.User.created_at.desc()).offset(skip).limit(limit)
    )
    return result.scalars().all()
