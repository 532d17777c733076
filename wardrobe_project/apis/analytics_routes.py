# wardrobe_project/apis/analytics_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..services import analytics_service
from ..models import analytics_models as schemas

router = APIRouter(
    prefix="/statistics",
    tags=["Statistics"]
)

@router.get("/", response_model=schemas.WardrobeStatistics)
async def get_statistics(db: AsyncSession = Depends(get_db)):
    """Wardrobe totals, category breakdown, active vs idle items and this month's additions."""
    return await analytics_service.get_wardrobe_statistics(db)
