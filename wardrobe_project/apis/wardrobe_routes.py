# wardrobe_project/apis/wardrobe_routes.py
from fastapi import APIRouter, Depends, HTTPException, status, Response, UploadFile, File, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from ..db.database import get_db
from ..models.clothing_models import ClothingItem, ClothingItemCreate, ClothingItemUpdate, ClothingSort
from ..services import wardrobe_service

router = APIRouter(
    prefix="/wardrobe",
    tags=["Wardrobe Management"]
)

@router.get("/", response_model=List[ClothingItem])
async def list_clothing_items(
    category: Optional[str] = None,
    q: Optional[str] = Query(None, description="Case-insensitive search in name, brand and color."),
    visible_only: bool = False,
    sort: ClothingSort = "activity_desc",
    skip: int = 0,
    limit: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """List the wardrobe, most active items first unless another sort is requested."""
    return await wardrobe_service.get_clothing_items(
        db, category=category, q=q, visible_only=visible_only, sort=sort, skip=skip, limit=limit
    )

@router.post("/", response_model=ClothingItem, status_code=status.HTTP_201_CREATED)
async def add_clothing_item(item_in: ClothingItemCreate, db: AsyncSession = Depends(get_db)):
    return await wardrobe_service.add_clothing_item(db, item_in)

@router.get("/{item_id}", response_model=ClothingItem)
async def get_clothing_item(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    item = await wardrobe_service.get_clothing_item_by_id(db, item_id)
    if not item:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Clothing item not found.")
    return item

@router.put("/{item_id}", response_model=ClothingItem)
async def update_clothing_item(item_id: uuid.UUID, item_in: ClothingItemUpdate, db: AsyncSession = Depends(get_db)):
    updated = await wardrobe_service.update_clothing_item(db, item_id, item_in)
    if not updated:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Update failed: Item not found.")
    return updated

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_clothing_item(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await wardrobe_service.delete_clothing_item(db, item_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Delete failed: Item not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{item_id}/photo", response_model=ClothingItem)
async def upload_clothing_photo(item_id: uuid.UUID, file: UploadFile = File(...), db: AsyncSession = Depends(get_db)):
    return await wardrobe_service.set_clothing_photo(db, item_id, await file.read())

@router.post("/{item_id}/analyze", response_model=ClothingItem)
async def analyze_clothing_item(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """
    Analyze the item's photo with AI and store the resulting tags on the item.
    If the analysis fails, default tags (marked as not AI-analyzed) are stored.
    """
    return await wardrobe_service.analyze_clothing_item(db, item_id)
