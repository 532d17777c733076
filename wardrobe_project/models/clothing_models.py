# wardrobe_project/models/clothing_models.py

from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Dict, Any
from enum import Enum
import uuid
from datetime import datetime


ClothingSort = Literal["activity_desc", "activity_asc", "created_desc", "created_asc", "name_asc", "name_desc"]

class Season(str, Enum):
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"
    ALL = "All"

# --- Category Models ---
class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, example="Top")
    icon: Optional[str] = Field(None, example="shirt-outline")
    color: Optional[str] = Field(None, example="#FF6B6B")

class CategoryCreate(CategoryBase):
    pass

class Category(CategoryBase):
    id: int

    class Config:
        from_attributes = True

# --- Clothing Item Models ---
class ClothingItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, example="Blue Denim Jacket")
    category: Optional[str] = Field(None, max_length=50, example="Outerwear")
    category_id: Optional[int] = Field(None, example=4)
    color: Optional[str] = Field(None, max_length=50, example="Blue")
    brand: Optional[str] = Field(None, max_length=50, example="Levi's")
    price: Optional[float] = Field(None, ge=0, example=59.9)
    purchase_date: Optional[datetime] = None
    purchase_link: Optional[str] = None
    image_uri: Optional[str] = Field(None, example="media/clothing/jacket.jpg")
    tags: List[str] = Field(default_factory=list, example=["casual", "denim"])
    season: Season = Season.ALL
    material: Optional[str] = Field(None, max_length=50, example="Denim")
    size: Optional[str] = Field(None, max_length=20, example="M")
    location: Optional[str] = Field(None, example="Bedroom closet, left")
    is_visible: bool = True
    notes: Optional[str] = Field(None, example="Goes well with white t-shirt.")
    rating: Optional[int] = Field(None, ge=1, le=5)

class ClothingItemCreate(ClothingItemBase):
    pass

class ClothingItemUpdate(ClothingItemBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=50)
    category_id: Optional[int] = None
    color: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, ge=0)
    purchase_date: Optional[datetime] = None
    purchase_link: Optional[str] = None
    image_uri: Optional[str] = None
    tags: Optional[List[str]] = None
    season: Optional[Season] = None
    material: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = None
    is_visible: Optional[bool] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    last_worn: Optional[datetime] = None
    wear_count: Optional[int] = Field(None, ge=0)
    activity_score: Optional[int] = None

class ClothingItem(ClothingItemBase):
    id: uuid.UUID
    category: str
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    last_worn: Optional[datetime] = None
    wear_count: int = 0
    activity_score: int = 0
    analysis: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
