"""GET /api/stats: catalog aggregates for the dashboard."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reprint.database import get_db_session
from reprint.schemas.book import StatsResponse
from reprint.services.catalog_service import catalog_service

router = APIRouter(prefix="/api", tags=["Stats"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Catalog statistics",
    description="Total books, counts per genre (largest first), and quantity sums.",
)
async def get_stats(db: AsyncSession = Depends(get_db_session)) -> StatsResponse:
    return await catalog_service.get_stats(db=db)
