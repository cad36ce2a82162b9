"""Pydantic schemas for solicitud data validation."""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from components.cliente.schemas import Cliente
from components.core.schemas import PartialUpdate
from components.solicitud.models import EstadoSolicitud


class SolicitudCreate(BaseModel):
    """Schema for solicitud creation."""
    cliente_id: int
    monto_solicitado: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    plazo_meses: int = Field(..., ge=1)
    tasa_interes: Decimal = Field(..., ge=0, max_digits=5, decimal_places=2)
    observaciones: Optional[str] = Field(None, max_length=255)


class SolicitudUpdate(PartialUpdate):
    """Schema for solicitud partial update, including the decision."""
    not_nullable: ClassVar[Tuple[str, ...]] = (
        "monto_solicitado", "plazo_meses", "tasa_interes", "estado",
    )

    monto_solicitado: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    plazo_meses: Optional[int] = Field(None, ge=1)
    tasa_interes: Optional[Decimal] = Field(None, ge=0, max_digits=5, decimal_places=2)
    estado: Optional[EstadoSolicitud] = None
    observaciones: Optional[str] = Field(None, max_length=255)


class Solicitud(BaseModel):
    """Schema for solicitud response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    cliente_id: int
    monto_solicitado: Decimal
    plazo_meses: int
    tasa_interes: Decimal
    estado: EstadoSolicitud
    observaciones: Optional[str] = None
    fecha_solicitud: datetime
    usuario_crea: Optional[str] = None
    fecha_crea: Optional[datetime] = None
    usuario_actualiza: Optional[str] = None
    fecha_actualiza: Optional[datetime] = None


class SolicitudWithCliente(Solicitud):
    """Solicitud with its owning cliente."""
    cliente: Cliente
