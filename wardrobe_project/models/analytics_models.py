# wardrobe_project/models/analytics_models.py

from pydantic import BaseModel, Field
from typing import List, Optional
import uuid

class CategoryStat(BaseModel):
    """Represents the count of items in a specific category."""
    name: str
    color: Optional[str] = None
    count: int
    percentage: str = Field(..., description="Share of the wardrobe with one decimal, '0' for an empty wardrobe.", example="33.3")

class ActivityStats(BaseModel):
    active: int = Field(..., description="Items with an activity score above zero.")
    inactive: int

class ItemUsage(BaseModel):
    """Usage statistics for a single clothing item."""
    id: uuid.UUID
    name: str
    category: str
    wear_count: int
    activity_score: int

    class Config:
        from_attributes = True

class WardrobeStatistics(BaseModel):
    total_clothes: int
    total_outfits: int
    category_stats: List[CategoryStat]
    activity_stats: ActivityStats
    recent_additions: int = Field(..., description="Items added since the first day of the current month.")
    most_worn: List[ItemUsage] = Field(default_factory=list)
