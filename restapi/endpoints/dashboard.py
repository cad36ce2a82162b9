"""Dashboard endpoint for the API."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Envelope
from components.dashboard import schemas
from components.dashboard.repository import DashboardRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


@router.get("", response_model=Envelope[schemas.DashboardSummary])
async def get_dashboard(
    as_of_date: Optional[date] = Query(None, description="Month to report on (defaults to today)"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get dashboard totals.

    Returns:
    - Total number of clientes
    - Clientes with at least one prestamo
    - Clientes registered this month
    - ACTIVO prestamos
    - Pagos received this month
    - The five most recent prestamos with cliente name
    """
    repo = DashboardRepository(db)
    return {"data": await repo.get_summary(as_of_date)}
