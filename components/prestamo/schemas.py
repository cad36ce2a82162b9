"""Pydantic schemas for prestamo data validation."""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from components.core.schemas import PartialUpdate
from components.pago.schemas import Pago
from components.prestamo.models import EstadoPrestamo
from components.solicitud.schemas import SolicitudWithCliente


class PrestamoCreate(BaseModel):
    """Schema for promoting an approved solicitud to a prestamo."""
    solicitud_id: int
    monto_aprobado: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    tasa_interes: Decimal = Field(..., ge=0, max_digits=5, decimal_places=2)
    plazo_meses: int = Field(..., ge=1)


class PrestamoUpdate(PartialUpdate):
    """
    Schema for prestamo partial update.

    The balance is not updatable here and PAGADO is left to the payment ledger.
    """
    not_nullable: ClassVar[Tuple[str, ...]] = ("tasa_interes", "plazo_meses", "estado")

    tasa_interes: Optional[Decimal] = Field(None, ge=0, max_digits=5, decimal_places=2)
    plazo_meses: Optional[int] = Field(None, ge=1)
    estado: Optional[EstadoPrestamo] = None

    @field_validator("estado")
    @classmethod
    def estado_manual(cls, value: Optional[EstadoPrestamo]) -> Optional[EstadoPrestamo]:
        if value == EstadoPrestamo.PAGADO:
            raise ValueError("El estado PAGADO solo se asigna al liquidar el saldo")
        return value


class Prestamo(BaseModel):
    """Schema for prestamo response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    solicitud_id: int
    monto_aprobado: Decimal
    fecha_aprobacion: datetime
    tasa_interes: Decimal
    plazo_meses: int
    saldo_actual: Decimal
    estado: EstadoPrestamo
    created_at: datetime
    updated_at: datetime


class PrestamoWithSolicitud(Prestamo):
    """Prestamo with its solicitud and cliente."""
    solicitud: SolicitudWithCliente


class PrestamoDetail(PrestamoWithSolicitud):
    """Prestamo with solicitud, cliente and payment history."""
    pagos: List[Pago] = []
