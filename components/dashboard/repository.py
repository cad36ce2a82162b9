"""Repository for dashboard aggregates."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from components.cliente.models import Cliente
from components.dashboard import schemas
from components.pago.models import Pago
from components.prestamo.models import EstadoPrestamo, Prestamo
from components.solicitud.models import Solicitud

RECENT_LIMIT = 5


def month_bounds(as_of_date: date) -> Tuple[datetime, datetime]:
    """Return [start, end) of the calendar month containing as_of_date."""
    start = datetime(as_of_date.year, as_of_date.month, 1)
    if as_of_date.month == 12:
        end = datetime(as_of_date.year + 1, 1, 1)
    else:
        end = datetime(as_of_date.year, as_of_date.month + 1, 1)
    return start, end


class DashboardRepository:
    """Read-only projections recomputed on every request."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_summary(self, as_of_date: Optional[date] = None) -> schemas.DashboardSummary:
        """
        Get dashboard totals for the month of as_of_date (defaults to today).

        Returns:
            - total clientes
            - clientes with at least one promoted solicitud
            - clientes created this month
            - ACTIVO prestamos
            - sum of pagos received this month
            - the five most recently created prestamos
        """
        month_start, month_end = month_bounds(as_of_date or date.today())

        clientes = await self._scalar(select(func.count(Cliente.id)))

        clientes_con_prestamo = await self._scalar(
            select(func.count(func.distinct(Solicitud.cliente_id)))
            .join(Prestamo, Prestamo.solicitud_id == Solicitud.id)
        )

        clientes_nuevos_mes = await self._scalar(
            select(func.count(Cliente.id)).where(
                Cliente.created_at >= month_start,
                Cliente.created_at < month_end,
            )
        )

        prestamos_activos = await self._scalar(
            select(func.count(Prestamo.id)).where(Prestamo.estado == EstadoPrestamo.ACTIVO.value)
        )

        ingresos = await self._scalar(
            select(func.sum(Pago.monto_pagado)).where(
                Pago.fecha_pago >= month_start,
                Pago.fecha_pago < month_end,
            )
        )

        return schemas.DashboardSummary(
            clientes=clientes or 0,
            clientes_con_prestamo=clientes_con_prestamo or 0,
            clientes_nuevos_mes=clientes_nuevos_mes or 0,
            prestamos_activos=prestamos_activos or 0,
            ingresos_mensuales=Decimal(ingresos or 0).quantize(Decimal("0.01")),
            prestamos_recientes=await self._recent_prestamos(),
        )

    async def _recent_prestamos(self) -> List[schemas.PrestamoReciente]:
        result = await self.session.execute(
            select(Prestamo)
            .options(selectinload(Prestamo.solicitud).selectinload(Solicitud.cliente))
            .order_by(Prestamo.created_at.desc(), Prestamo.id.desc())
            .limit(RECENT_LIMIT)
        )

        recientes = []
        for prestamo in result.scalars().all():
            cliente = prestamo.solicitud.cliente if prestamo.solicitud else None
            recientes.append(schemas.PrestamoReciente(
                id=prestamo.id,
                monto_aprobado=prestamo.monto_aprobado,
                cliente_nombre=cliente.nombre_completo if cliente else "N/A",
                estado=prestamo.estado,
                fecha_aprobacion=prestamo.fecha_aprobacion,
            ))
        return recientes

    async def _scalar(self, query):
        result = await self.session.execute(query)
        return result.scalar()
