"""Pydantic schemas for pago data validation."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from components.pago.models import MetodoPago


class PagoCreate(BaseModel):
    """Schema for recording a payment."""
    prestamo_id: int
    monto_pagado: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    metodo_pago: MetodoPago
    observaciones: Optional[str] = Field(None, max_length=255)


class Pago(BaseModel):
    """Schema for pago response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    prestamo_id: int
    fecha_pago: datetime
    monto_pagado: Decimal
    metodo_pago: MetodoPago
    observaciones: Optional[str] = None
    created_at: datetime
