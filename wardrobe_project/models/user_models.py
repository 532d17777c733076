# wardrobe_project/models/user_models.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

# --- User Models ---
# A user is a household member whose outfits are tracked; the photo is used for virtual try-on.
class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, example="Me")
    photo_uri: Optional[str] = Field(None, example="media/users/me.jpg")

class UserCreate(UserBase):
    is_default: bool = False

class UserUpdate(UserBase):
    # For updates, all fields are optional
    name: Optional[str] = Field(None, min_length=1, max_length=50, example="Partner")
    photo_uri: Optional[str] = None
    is_default: Optional[bool] = None

class User(UserBase):
    id: uuid.UUID
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
