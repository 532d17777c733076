# wardrobe_project/apis/recommendation_routes.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from ..db.database import get_db
from ..core import recommender
from ..models.outfit_models import Recommendation, RecommendationRequest, SaveRecommendationRequest, Outfit
from ..models.weather_models import WeatherInfo
from ..services import weather_service

router = APIRouter(
    tags=["Recommendations"]
)

@router.post("/recommendations/", response_model=Recommendation)
async def generate_recommendation(request: RecommendationRequest, db: AsyncSession = Depends(get_db)):
    """
    Suggest an outfit from the wardrobe for today's season and weather.
    Weather is taken from the request, or looked up from the coordinates.
    """
    weather = request.weather
    if weather is None:
        weather = await weather_service.get_weather_info(request.latitude, request.longitude)
    return await recommender.recommend(db, request.user_id, weather)

@router.post("/recommendations/save", response_model=Outfit, status_code=status.HTTP_201_CREATED)
async def save_recommendation(request: SaveRecommendationRequest, db: AsyncSession = Depends(get_db)):
    """Store a recommendation as one of the user's outfits."""
    return await recommender.save_recommendation(
        db, request.user_id, request.clothing_ids, request.reason, request.weather
    )

@router.get("/weather", response_model=WeatherInfo)
async def get_weather(
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
):
    return await weather_service.get_weather_info(latitude, longitude)
