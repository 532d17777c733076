# wardrobe_project/core/recommender.py
import uuid
import random
import logging
from datetime import date
from typing import List, Optional, Dict, Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from ..db import orm_models
from ..models.clothing_models import ClothingItem
from ..models.outfit_models import Recommendation, OutfitCreate
from ..models.weather_models import WeatherInfo
from ..services import user_service, wardrobe_service, outfit_service

logger = logging.getLogger(__name__)

CATEGORY_PRIORITY = ["Top", "Pants", "Skirt", "Shoes", "Outerwear", "Accessory"]
EXCLUSIVE_BOTTOMS = {"Pants", "Skirt"}
MAX_OUTFIT_ITEMS = 5
RANDOM_WEIGHT_SPAN = 50

SUMMER_EXCLUDED = ("down", "sweater", "thick")
WINTER_EXCLUDED = ("short sleeve", "shorts")
WARM_KEYWORDS = ("thick", "down", "sweater")
RAIN_KEYWORDS = ("rain", "drizzle", "thunderstorm", "shower")


def _name(item: Any) -> str:
    return (item.name or "").lower()

def category_key(item: Any) -> str:
    return getattr(item, "category_name", None) or item.category or "Other"


# ---- Pipeline steps. Each one works on ORM rows or pydantic ClothingItems alike. ----
def current_season(today: Optional[date] = None) -> str:
    month = (today or date.today()).month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"

def filter_by_season(items: Sequence[Any], season: str) -> List[Any]:
    if season == "summer":
        return [i for i in items if not any(k in _name(i) for k in SUMMER_EXCLUDED)]
    if season == "winter":
        return [i for i in items if not any(k in _name(i) for k in WINTER_EXCLUDED)]
    return list(items)

def filter_by_weather(items: Sequence[Any], weather: Optional[WeatherInfo]) -> List[Any]:
    if weather is None:
        return list(items)
    if weather.temperature < 10:
        return [
            i for i in items
            if any(k in _name(i) for k in WARM_KEYWORDS) or category_key(i) == "Outerwear"
        ]
    if weather.temperature > 25:
        return [
            i for i in items
            if "short" in _name(i) or "thin" in _name(i)
            or ("thick" not in _name(i) and "long sleeve" not in _name(i))
        ]
    return list(items)

def group_by_category(items: Sequence[Any]) -> Dict[str, List[Any]]:
    grouped: Dict[str, List[Any]] = {}
    for item in items:
        grouped.setdefault(category_key(item), []).append(item)
    return grouped

def pick_outfit(grouped: Dict[str, List[Any]], rng: Optional[random.Random] = None) -> List[Any]:
    """
    Picks at most one item per priority category. Items are weighted by their
    activity score plus a random bonus, so frequently worn pieces are favoured
    without the suggestion being the same every time. Pants and skirts exclude
    each other.
    """
    rng = rng or random.Random()
    outfit: List[Any] = []
    picked_categories = set()

    for category in CATEGORY_PRIORITY:
        candidates = grouped.get(category)
        if not candidates:
            continue
        if category in EXCLUSIVE_BOTTOMS and picked_categories & EXCLUSIVE_BOTTOMS:
            continue
        weighted = [((item.activity_score or 0) + rng.random() * RANDOM_WEIGHT_SPAN, item) for item in candidates]
        outfit.append(max(weighted, key=lambda pair: pair[0])[1])
        picked_categories.add(category)

    return outfit[:MAX_OUTFIT_ITEMS]

def is_rainy(condition: str) -> bool:
    condition = (condition or "").lower()
    return any(k in condition for k in RAIN_KEYWORDS)

def build_reason(weather: Optional[WeatherInfo]) -> str:
    reasons = []
    if weather is not None:
        if weather.temperature < 15:
            reasons.append("It's chilly today, so warm layers are recommended")
        elif weather.temperature > 25:
            reasons.append("It's hot today, so a light and breezy look is recommended")
        else:
            reasons.append("The weather is pleasant today, great for a comfortable look")
        if is_rainy(weather.condition):
            reasons.append("rain is expected, so remember your umbrella")
    reasons.append("based on your wearing habits and item activity")
    return ", ".join(reasons)

def recommend_from_items(
    items: Sequence[Any],
    weather: Optional[WeatherInfo],
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> List[Any]:
    """Runs the full pipeline: season filter, weather filter, grouping, weighted pick."""
    seasonal = filter_by_season(items, current_season(today))
    suitable = filter_by_weather(seasonal, weather)
    return pick_outfit(group_by_category(suitable), rng=rng)


# ---- Service entry points ----
async def recommend(
    db: AsyncSession,
    user_id: uuid.UUID,
    weather: Optional[WeatherInfo] = None,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Recommendation:
    user = await user_service.get_user_by_id(db, user_id)
    wardrobe = await wardrobe_service.get_clothing_items(db, visible_only=True)
    if not user or not wardrobe:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please add a user and clothing items first."
        )

    outfit = recommend_from_items(wardrobe, weather, today=today, rng=rng)
    if not outfit:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No suitable outfit found. Try adding more clothing items."
        )

    logger.info(f"Recommended {len(outfit)} items for user {user_id}")
    return Recommendation(
        outfit=[ClothingItem.model_validate(item) for item in outfit],
        reason=build_reason(weather),
        weather=weather,
    )

async def save_recommendation(
    db: AsyncSession,
    user_id: uuid.UUID,
    clothing_ids: List[uuid.UUID],
    reason: str,
    weather: Optional[WeatherInfo] = None,
    today: Optional[date] = None,
) -> orm_models.Outfit:
    """Stores a recommendation as a regular outfit owned by the user."""
    today = today or date.today()
    outfit_in = OutfitCreate(
        name=f"{today.isoformat()} recommended outfit",
        user_id=user_id,
        clothing_ids=clothing_ids,
        occasion="Daily",
        weather=weather.display() if weather else "",
        notes=reason,
        is_visible=True,
    )
    return await outfit_service.create_outfit(db, outfit_in)
