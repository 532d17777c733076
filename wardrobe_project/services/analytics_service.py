# wardrobe_project/services/analytics_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from datetime import datetime
from typing import Optional

from ..db import orm_models as models
from ..models import analytics_models as schemas
from . import category_service


def _percentage(count: int, total: int) -> str:
    return f"{count / total * 100:.1f}" if total > 0 else "0"


async def get_wardrobe_statistics(
    db: AsyncSession, now: Optional[datetime] = None, most_worn_limit: int = 5
) -> schemas.WardrobeStatistics:
    """Calculates wardrobe totals, the category breakdown, activity split and monthly additions."""
    now = now or models.utcnow()

    total_clothes = (await db.execute(select(func.count(models.ClothingItem.id)))).scalar_one()
    total_outfits = (await db.execute(select(func.count(models.Outfit.id)))).scalar_one()

    # Category breakdown: every known category, plus any free-text category in use
    cat_stmt = select(models.ClothingItem.category, func.count(models.ClothingItem.id)).group_by(
        models.ClothingItem.category
    )
    counts = {name: count for name, count in (await db.execute(cat_stmt)).all()}
    category_stats = []
    for category in await category_service.get_all_categories(db):
        count = counts.pop(category.name, 0)
        category_stats.append(schemas.CategoryStat(
            name=category.name, color=category.color, count=count,
            percentage=_percentage(count, total_clothes)
        ))
    for name, count in counts.items():
        category_stats.append(schemas.CategoryStat(
            name=name, count=count, percentage=_percentage(count, total_clothes)
        ))
    category_stats.sort(key=lambda stat: stat.count, reverse=True)

    active_stmt = select(func.count(models.ClothingItem.id)).where(models.ClothingItem.activity_score > 0)
    active = (await db.execute(active_stmt)).scalar_one()

    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    recent_stmt = select(func.count(models.ClothingItem.id)).where(models.ClothingItem.created_at >= month_start)
    recent_additions = (await db.execute(recent_stmt)).scalar_one()

    most_worn_stmt = (
        select(models.ClothingItem)
        .where(models.ClothingItem.wear_count > 0)
        .order_by(models.ClothingItem.wear_count.desc(), models.ClothingItem.activity_score.desc())
        .limit(most_worn_limit)
    )
    most_worn = (await db.execute(most_worn_stmt)).scalars().all()

    return schemas.WardrobeStatistics(
        total_clothes=total_clothes,
        total_outfits=total_outfits,
        category_stats=category_stats,
        activity_stats=schemas.ActivityStats(active=active, inactive=total_clothes - active),
        recent_additions=recent_additions,
        most_worn=[schemas.ItemUsage.model_validate(item) for item in most_worn],
    )
