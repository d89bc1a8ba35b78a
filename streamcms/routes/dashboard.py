"""Admin dashboard totals."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.auth import require_admin
from streamcms.database import get_db
from streamcms.models.user import User
from streamcms.schemas.dashboard import DashboardStats
from streamcms.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardStats)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await dashboard_service.get_dashboard_stats(db)
