"""Repository for prestamo operations."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from components.core.exceptions import InvalidStateError, NotFoundError
from components.pago.models import Pago
from components.prestamo.models import EstadoPrestamo, Prestamo
from components.prestamo.schemas import PrestamoUpdate
from components.solicitud.models import Solicitud

logger = logging.getLogger(__name__)


class PrestamoRepository:
    """Repository for prestamo operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, prestamo_id: int) -> Optional[Prestamo]:
        """Get prestamo by ID with solicitud, cliente and pagos loaded."""
        result = await self.session.execute(
            select(Prestamo)
            .options(
                selectinload(Prestamo.solicitud).selectinload(Solicitud.cliente),
                selectinload(Prestamo.pagos),
            )
            .where(Prestamo.id == prestamo_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, prestamo_id: int) -> Prestamo:
        prestamo = await self.get_by_id(prestamo_id)
        if prestamo is None:
            raise NotFoundError("Préstamo no encontrado")
        return prestamo

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        estado: Optional[EstadoPrestamo] = None,
    ) -> List[Prestamo]:
        """Get prestamos, latest first."""
        query = select(Prestamo).options(
            selectinload(Prestamo.solicitud).selectinload(Solicitud.cliente)
        )
        if estado:
            query = query.where(Prestamo.estado == estado.value)

        query = query.order_by(Prestamo.created_at.desc(), Prestamo.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, prestamo_id: int, prestamo: PrestamoUpdate) -> Prestamo:
        """Update terms or mark a prestamo MOROSO/ACTIVO."""
        db_prestamo = await self.get_or_404(prestamo_id)
        changes = prestamo.changes()

        if "estado" in changes:
            if db_prestamo.saldo_actual <= 0:
                raise InvalidStateError("El préstamo está pagado; su estado no puede modificarse.")
            changes["estado"] = changes["estado"].value

        for field, value in changes.items():
            setattr(db_prestamo, field, value)

        await self.session.commit()
        logger.info("Préstamo %s actualizado: %s", prestamo_id, sorted(changes))
        return await self.get_or_404(prestamo_id)

    async def delete(self, prestamo_id: int) -> None:
        """Delete a prestamo without payments."""
        db_prestamo = await self.get_or_404(prestamo_id)

        result = await self.session.execute(
            select(Pago.id).where(Pago.prestamo_id == prestamo_id).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            logger.warning("Préstamo %s tiene pagos, no se elimina", prestamo_id)
            raise InvalidStateError("El préstamo tiene pagos registrados y no puede eliminarse.")

        await self.session.delete(db_prestamo)
        await self.session.commit()
        logger.info("Préstamo %s eliminado", prestamo_id)
