# wardrobe_project/apis/outfit_routes.py
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from ..db.database import get_db
from ..models.outfit_models import (
    Outfit, OutfitCreate, OutfitUpdate, OutfitDetail, OutfitFilter,
    WearRequest, WearRecord, TryOnRequest, TryOnResult
)
from ..services import outfit_service, tryon_service

router = APIRouter(
    tags=["Outfits"]
)

@router.get("/outfits/", response_model=List[Outfit])
async def list_outfits(
    user_id: Optional[uuid.UUID] = None,
    filter_type: OutfitFilter = "all",
    q: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(get_db)
):
    """List outfits, most recently updated first. 'recent' means created in the last 7 days."""
    return await outfit_service.get_outfits(db, user_id=user_id, filter_type=filter_type, q=q, skip=skip, limit=limit)

@router.post("/outfits/", response_model=Outfit, status_code=status.HTTP_201_CREATED)
async def create_outfit(outfit_in: OutfitCreate, db: AsyncSession = Depends(get_db)):
    return await outfit_service.create_outfit(db, outfit_in)

@router.get("/outfits/{outfit_id}", response_model=OutfitDetail)
async def get_outfit(outfit_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Get an outfit with its clothing items resolved in order."""
    detail = await outfit_service.get_outfit_detail(db, outfit_id)
    if not detail:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Outfit not found.")
    return detail

@router.put("/outfits/{outfit_id}", response_model=Outfit)
async def update_outfit(outfit_id: uuid.UUID, outfit_in: OutfitUpdate, db: AsyncSession = Depends(get_db)):
    updated = await outfit_service.update_outfit(db, outfit_id, outfit_in)
    if not updated:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Update failed: Outfit not found.")
    return updated

@router.delete("/outfits/{outfit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_outfit(outfit_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await outfit_service.delete_outfit(db, outfit_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Delete failed: Outfit not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/outfits/{outfit_id}/wear", response_model=WearRecord, status_code=status.HTTP_201_CREATED)
async def mark_outfit_worn(outfit_id: uuid.UUID, wear_in: WearRequest, db: AsyncSession = Depends(get_db)):
    """
    Confirms that an outfit was worn. This bumps wear count, activity score and
    last_worn of every item (improving future recommendations) and logs the wear.
    """
    return await outfit_service.mark_outfit_as_worn(db, outfit_id, wear_in)

@router.post("/outfits/{outfit_id}/try-on", response_model=TryOnResult)
async def try_on_outfit(outfit_id: uuid.UUID, request: TryOnRequest, db: AsyncSession = Depends(get_db)):
    """
    Generate a virtual try-on picture of the user wearing the outfit.
    When the AI service is unavailable a placeholder image is returned with fallback=true.
    """
    return await tryon_service.generate_try_on(db, outfit_id, request.user_id, save=request.save)

@router.get("/history", response_model=List[WearRecord], tags=["Outfit History"])
async def get_history(
    user_id: Optional[uuid.UUID] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db)
):
    """Chronological log of worn outfits, most recent first."""
    return await outfit_service.get_wear_history(db, user_id=user_id, skip=skip, limit=limit)
