# wardrobe_project/models/outfit_models.py

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
import uuid
from datetime import datetime

from .clothing_models import ClothingItem
from .weather_models import WeatherInfo


OutfitFilter = Literal["all", "favorite", "recent"]

# --- Outfit Models ---
class OutfitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, example="Friday office look")
    user_id: Optional[uuid.UUID] = None
    clothing_ids: List[uuid.UUID] = Field(default_factory=list)
    date: Optional[datetime] = None
    occasion: Optional[str] = Field(None, example="Work")
    weather: Optional[str] = Field(None, example="22°C Sunny")
    image_uri: Optional[str] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    is_favorite: bool = False
    is_visible: bool = True

class OutfitCreate(OutfitBase):
    pass

class OutfitUpdate(OutfitBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    user_id: Optional[uuid.UUID] = None
    clothing_ids: Optional[List[uuid.UUID]] = None
    date: Optional[datetime] = None
    occasion: Optional[str] = None
    weather: Optional[str] = None
    image_uri: Optional[str] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    is_favorite: Optional[bool] = None
    is_visible: Optional[bool] = None

class Outfit(OutfitBase):
    id: uuid.UUID
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OutfitDetail(Outfit):
    """An outfit with its clothing items resolved, in outfit order."""
    items: List[ClothingItem] = Field(default_factory=list)

# --- Wear History Models ---
class WearRequest(BaseModel):
    user_id: Optional[uuid.UUID] = Field(None, description="Who wore it; defaults to the outfit's owner.")
    weather: Optional[str] = Field(None, example="18°C Cloudy")
    notes: Optional[str] = None
    activity_delta: int = Field(1, ge=1, le=10, description="How much each item's activity score grows.")

class WearRecord(BaseModel):
    id: uuid.UUID
    outfit_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    worn_at: datetime
    weather: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

# --- Recommendation Models ---
class RecommendationRequest(BaseModel):
    user_id: uuid.UUID
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    weather: Optional[WeatherInfo] = Field(None, description="Supply weather directly instead of looking it up.")

class Recommendation(BaseModel):
    outfit: List[ClothingItem]
    reason: str
    weather: Optional[WeatherInfo] = None

class SaveRecommendationRequest(BaseModel):
    user_id: uuid.UUID
    clothing_ids: List[uuid.UUID] = Field(..., min_length=1)
    reason: str = ""
    weather: Optional[WeatherInfo] = None

# --- Virtual Try-On (app side) ---
class TryOnRequest(BaseModel):
    user_id: uuid.UUID
    save: bool = Field(False, description="Store the generated image on the outfit.")

class TryOnResult(BaseModel):
    success: bool
    image_url: str = ""
    fallback: bool = False
    error: Optional[str] = None
