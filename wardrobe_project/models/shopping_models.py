# wardrobe_project/models/shopping_models.py
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from datetime import datetime
import uuid

class ShoppingPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ShoppingItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, example="White sneakers")
    category: str = Field(..., min_length=1, max_length=50, example="Shoes")
    priority: ShoppingPriority = ShoppingPriority.MEDIUM
    estimated_price: Optional[float] = Field(None, ge=0, example=79.0)
    notes: Optional[str] = Field(None, example="Minimal design, no big logos.")

class ShoppingItemCreate(ShoppingItemBase):
    is_completed: bool = False

class ShoppingItemUpdate(ShoppingItemBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    priority: Optional[ShoppingPriority] = None
    estimated_price: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    is_completed: Optional[bool] = None

class ShoppingItem(ShoppingItemBase):
    id: uuid.UUID
    is_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
