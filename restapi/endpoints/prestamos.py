"""Prestamo endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Envelope
from components.prestamo import schemas
from components.prestamo.models import EstadoPrestamo
from components.prestamo.repository import PrestamoRepository
from components.solicitud.repository import SolicitudRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/prestamos",
    tags=["prestamos"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Envelope[List[schemas.PrestamoWithSolicitud]])
async def read_prestamos(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Number of records to return"),
    estado: Optional[EstadoPrestamo] = Query(None, description="Filter by estado"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get list of prestamos with solicitud and cliente, latest first."""
    repo = PrestamoRepository(db)
    return {"data": await repo.get_all(skip=skip, limit=limit, estado=estado)}


@router.post("", response_model=Envelope[schemas.Prestamo], status_code=status.HTTP_201_CREATED)
async def create_prestamo(
    prestamo: schemas.PrestamoCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a prestamo from an approved solicitud.

    - 404 if the solicitud does not exist
    - 400 if the solicitud is not APROBADO or already has a prestamo

    The new prestamo starts ACTIVO with saldo_actual equal to monto_aprobado.
    """
    repo = SolicitudRepository(db)
    return {"data": await repo.promote_to_prestamo(prestamo)}


@router.get("/{prestamo_id}", response_model=Envelope[schemas.PrestamoDetail])
async def read_prestamo(
    prestamo_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a prestamo with its solicitud, cliente and pagos."""
    repo = PrestamoRepository(db)
    return {"data": await repo.get_or_404(prestamo_id)}


@router.put("/{prestamo_id}", response_model=Envelope[schemas.PrestamoDetail])
async def update_prestamo(
    prestamo_id: int,
    prestamo: schemas.PrestamoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update interest rate, term or estado (ACTIVO/MOROSO) of a prestamo."""
    repo = PrestamoRepository(db)
    return {"data": await repo.update(prestamo_id, prestamo)}


@router.delete("/{prestamo_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_prestamo(
    prestamo_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a prestamo without pagos."""
    repo = PrestamoRepository(db)
    await repo.delete(prestamo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
