"""Solicitud endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Envelope
from components.solicitud import schemas
from components.solicitud.models import EstadoSolicitud
from components.solicitud.repository import SolicitudRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/solicitudes",
    tags=["solicitudes"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Envelope[List[schemas.SolicitudWithCliente]])
async def read_solicitudes(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Number of records to return"),
    estado: Optional[EstadoSolicitud] = Query(None, description="Filter by estado"),
    cliente_id: Optional[int] = Query(None, description="Filter by cliente"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get list of solicitudes with their clientes, newest first."""
    repo = SolicitudRepository(db)
    solicitudes = await repo.get_all(skip=skip, limit=limit, estado=estado, cliente_id=cliente_id)
    return {"data": solicitudes}


@router.post("", response_model=Envelope[schemas.Solicitud], status_code=status.HTTP_201_CREATED)
async def create_solicitud(
    solicitud: schemas.SolicitudCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Register a new solicitud. It always starts EN PROCESO."""
    repo = SolicitudRepository(db)
    return {"data": await repo.create(solicitud, usuario=current_user.name)}


@router.get("/{solicitud_id}", response_model=Envelope[schemas.SolicitudWithCliente])
async def read_solicitud(
    solicitud_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific solicitud by ID."""
    repo = SolicitudRepository(db)
    return {"data": await repo.get_or_404(solicitud_id)}


@router.put("/{solicitud_id}", response_model=Envelope[schemas.SolicitudWithCliente])
async def update_solicitud(
    solicitud_id: int,
    solicitud: schemas.SolicitudUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a solicitud, e.g. to approve or reject it."""
    repo = SolicitudRepository(db)
    return {"data": await repo.update(solicitud_id, solicitud, usuario=current_user.name)}


@router.delete("/{solicitud_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_solicitud(
    solicitud_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a solicitud that has no prestamo."""
    repo = SolicitudRepository(db)
    await repo.delete(solicitud_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
