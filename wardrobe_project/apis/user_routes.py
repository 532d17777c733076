# wardrobe_project/apis/user_routes.py
from fastapi import APIRouter, Depends, HTTPException, status, Response, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from ..db.database import get_db
from ..models.user_models import User, UserCreate, UserUpdate
from ..services import user_service, media_service

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)

@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a household member. The first one becomes the default user."""
    return await user_service.create_user_in_db(db=db, user_in=user_in)

@router.get("/", response_model=List[User])
async def list_users(skip: int = 0, limit: int = 100, db: AsyncSession = Depends(get_db)):
    return await user_service.get_all_users_in_db(db=db, skip=skip, limit=limit)

@router.get("/{user_id}", response_model=User)
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user_or_404(db, user_id)

@router.put("/{user_id}", response_model=User)
async def update_user(user_id: uuid.UUID, user_in: UserUpdate, db: AsyncSession = Depends(get_db)):
    updated = await user_service.update_user_in_db(db=db, user_id=user_id, user_in=user_in)
    if not updated:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Update failed: User not found.")
    return updated

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    deleted = await user_service.delete_user_in_db(db=db, user_id=user_id)
    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Delete failed: User not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{user_id}/photo", response_model=User)
async def upload_user_photo(user_id: uuid.UUID, file: UploadFile = File(...), db: AsyncSession = Depends(get_db)):
    """Upload the full-body photo used as the base image for virtual try-on."""
    await user_service.get_user_or_404(db, user_id)
    photo_uri = await media_service.save_image(await file.read(), "users")
    return await user_service.update_user_in_db(db=db, user_id=user_id, user_in=UserUpdate(photo_uri=photo_uri))
