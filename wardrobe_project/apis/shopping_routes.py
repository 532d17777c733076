# wardrobe_project/apis/shopping_routes.py
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from ..db.database import get_db
from ..models.shopping_models import ShoppingItem, ShoppingItemCreate, ShoppingItemUpdate
from ..services import shopping_service

router = APIRouter(
    prefix="/shopping",
    tags=["Shopping List"]
)

@router.get("/", response_model=List[ShoppingItem])
async def list_shopping_items(is_completed: Optional[bool] = None, db: AsyncSession = Depends(get_db)):
    return await shopping_service.get_shopping_items(db, is_completed=is_completed)

@router.post("/", response_model=ShoppingItem, status_code=status.HTTP_201_CREATED)
async def add_shopping_item(item_in: ShoppingItemCreate, db: AsyncSession = Depends(get_db)):
    return await shopping_service.add_shopping_item(db, item_in)

@router.put("/{item_id}", response_model=ShoppingItem)
async def update_shopping_item(item_id: uuid.UUID, item_in: ShoppingItemUpdate, db: AsyncSession = Depends(get_db)):
    updated = await shopping_service.update_shopping_item(db, item_id, item_in)
    if not updated:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Update failed: Shopping item not found.")
    return updated

@router.post("/{item_id}/toggle", response_model=ShoppingItem)
async def toggle_shopping_item(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Flip the item between open and bought."""
    toggled = await shopping_service.toggle_shopping_item(db, item_id)
    if not toggled:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Shopping item not found.")
    return toggled

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shopping_item(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    if not await shopping_service.delete_shopping_item(db, item_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Delete failed: Shopping item not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
