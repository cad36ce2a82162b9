"""Pydantic schemas for dashboard aggregates."""

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from components.prestamo.models import EstadoPrestamo


class PrestamoReciente(BaseModel):
    """Recent prestamo annotated with the cliente display name."""
    id: int
    monto_aprobado: Decimal
    cliente_nombre: str
    estado: EstadoPrestamo
    fecha_aprobacion: datetime


class DashboardSummary(BaseModel):
    """Schema for dashboard totals."""
    clientes: int
    clientes_con_prestamo: int
    clientes_nuevos_mes: int
    prestamos_activos: int
    ingresos_mensuales: Decimal
    prestamos_recientes: List[PrestamoReciente]
