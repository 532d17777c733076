# wardrobe_project/apis/category_routes.py
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ..db.database import get_db
from ..models.clothing_models import Category, CategoryCreate
from ..services import category_service

router = APIRouter(
    prefix="/categories",
    tags=["Categories"]
)

@router.get("/", response_model=List[Category])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await category_service.get_all_categories(db)

@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(category_in: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await category_service.create_category(db, category_in)

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a category. Clothing items in it keep their category name."""
    if not await category_service.delete_category(db, category_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Delete failed: Category not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
