"""Pago endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Envelope
from components.pago import schemas
from components.pago.repository import PagoRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/pagos",
    tags=["pagos"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Envelope[List[schemas.Pago]])
async def read_pagos(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Number of records to return"),
    prestamo_id: Optional[int] = Query(None, description="Filter by prestamo"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get list of pagos, latest first."""
    repo = PagoRepository(db)
    return {"data": await repo.get_all(skip=skip, limit=limit, prestamo_id=prestamo_id)}


@router.post("", response_model=Envelope[schemas.Pago], status_code=status.HTTP_201_CREATED)
async def create_pago(
    pago: schemas.PagoCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Record a payment and debit the prestamo balance.

    - 404 if the prestamo does not exist
    - 400 if the amount exceeds saldo_actual

    The prestamo becomes PAGADO when its balance reaches zero.
    """
    repo = PagoRepository(db)
    return {"data": await repo.record_payment(pago)}


@router.get("/{pago_id}", response_model=Envelope[schemas.Pago])
async def read_pago(
    pago_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific pago by ID."""
    repo = PagoRepository(db)
    return {"data": await repo.get_or_404(pago_id)}


@router.delete("/{pago_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_pago(
    pago_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a pago, restore its amount to the prestamo and set it ACTIVO."""
    repo = PagoRepository(db)
    await repo.reverse_payment(pago_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
