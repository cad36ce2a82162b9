"""Cliente endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.cliente import schemas
from components.cliente.repository import ClienteRepository
from components.core.init_db import get_db
from components.core.schemas import Envelope
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/clientes",
    tags=["clientes"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Envelope[List[schemas.Cliente]])
async def read_clientes(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Number of records to return"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get list of clientes, newest first."""
    repo = ClienteRepository(db)
    return {"data": await repo.get_all(skip=skip, limit=limit)}


@router.post("", response_model=Envelope[schemas.Cliente], status_code=status.HTTP_201_CREATED)
async def create_cliente(
    cliente: schemas.ClienteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Register a new cliente. DPI and NIT must be unique."""
    repo = ClienteRepository(db)
    return {"data": await repo.create(cliente, usuario=current_user.name)}


@router.get("/{cliente_id}", response_model=Envelope[schemas.Cliente])
async def read_cliente(
    cliente_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific cliente by ID."""
    repo = ClienteRepository(db)
    return {"data": await repo.get_or_404(cliente_id)}


@router.put("/{cliente_id}", response_model=Envelope[schemas.Cliente])
async def update_cliente(
    cliente_id: int,
    cliente: schemas.ClienteUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the supplied fields of a cliente."""
    repo = ClienteRepository(db)
    return {"data": await repo.update(cliente_id, cliente, usuario=current_user.name)}


@router.delete("/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_cliente(
    cliente_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a cliente without solicitudes."""
    repo = ClienteRepository(db)
    await repo.delete(cliente_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
