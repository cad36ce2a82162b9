"""Repository for solicitud operations and the application lifecycle."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from components.cliente.models import Cliente
from components.core.exceptions import InvalidStateError, NotFoundError
from components.prestamo.models import EstadoPrestamo, Prestamo
from components.prestamo.schemas import PrestamoCreate
from components.solicitud.models import EstadoSolicitud, Solicitud
from components.solicitud.schemas import SolicitudCreate, SolicitudUpdate

logger = logging.getLogger(__name__)


class SolicitudRepository:
    """
    Repository for solicitud operations.

    A solicitud starts EN PROCESO and is decided through update(). Only an
    APROBADO solicitud can be promoted, and at most once.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, solicitud: SolicitudCreate, usuario: str) -> Solicitud:
        """Register a new solicitud for an existing cliente."""
        result = await self.session.execute(
            select(Cliente.id).where(Cliente.id == solicitud.cliente_id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Cliente no encontrado")

        db_solicitud = Solicitud(
            **solicitud.model_dump(),
            estado=EstadoSolicitud.EN_PROCESO.value,
            usuario_crea=usuario,
            fecha_crea=datetime.now(),
        )
        self.session.add(db_solicitud)
        await self.session.commit()
        await self.session.refresh(db_solicitud)
        logger.info(
            "Solicitud %s creada para cliente %s por %s",
            db_solicitud.id, solicitud.cliente_id, usuario,
        )
        return db_solicitud

    async def get_by_id(self, solicitud_id: int) -> Optional[Solicitud]:
        """Get solicitud by ID with its cliente loaded."""
        result = await self.session.execute(
            select(Solicitud)
            .options(selectinload(Solicitud.cliente))
            .where(Solicitud.id == solicitud_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, solicitud_id: int) -> Solicitud:
        solicitud = await self.get_by_id(solicitud_id)
        if solicitud is None:
            raise NotFoundError("Solicitud no encontrada")
        return solicitud

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        estado: Optional[EstadoSolicitud] = None,
        cliente_id: Optional[int] = None,
    ) -> List[Solicitud]:
        """Get solicitudes, newest first, with optional filtering."""
        query = select(Solicitud).options(selectinload(Solicitud.cliente))

        if estado:
            query = query.where(Solicitud.estado == estado.value)
        if cliente_id:
            query = query.where(Solicitud.cliente_id == cliente_id)

        query = query.order_by(Solicitud.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, solicitud_id: int, solicitud: SolicitudUpdate, usuario: str) -> Solicitud:
        """
        Apply the supplied fields to a solicitud.

        Any of the three estados may be set from any other; only membership
        is validated.
        """
        db_solicitud = await self.get_or_404(solicitud_id)

        changes = solicitud.changes()
        if "estado" in changes:
            changes["estado"] = changes["estado"].value
        for field, value in changes.items():
            setattr(db_solicitud, field, value)
        db_solicitud.usuario_actualiza = usuario
        db_solicitud.fecha_actualiza = datetime.now()

        await self.session.commit()
        logger.info("Solicitud %s actualizada por %s (%s)", solicitud_id, usuario, db_solicitud.estado)
        return await self.get_or_404(solicitud_id)

    async def delete(self, solicitud_id: int) -> None:
        """Delete a solicitud that was never promoted."""
        db_solicitud = await self.get_or_404(solicitud_id)

        if await self._prestamo_id(solicitud_id) is not None:
            logger.warning("Solicitud %s ya tiene préstamo, no se elimina", solicitud_id)
            raise InvalidStateError("La solicitud ya tiene un préstamo asociado y no puede eliminarse.")

        await self.session.delete(db_solicitud)
        await self.session.commit()
        logger.info("Solicitud %s eliminada", solicitud_id)

    async def promote_to_prestamo(self, prestamo: PrestamoCreate) -> Prestamo:
        """Create the prestamo for an APROBADO solicitud."""
        db_solicitud = await self.get_or_404(prestamo.solicitud_id)

        if db_solicitud.estado != EstadoSolicitud.APROBADO.value:
            logger.warning(
                "Solicitud %s en estado %s, no se genera préstamo",
                db_solicitud.id, db_solicitud.estado,
            )
            raise InvalidStateError("La solicitud debe estar en estado APROBADO para generar un préstamo.")

        if await self._prestamo_id(db_solicitud.id) is not None:
            raise InvalidStateError("La solicitud ya tiene un préstamo asociado.")

        db_prestamo = Prestamo(
            solicitud_id=db_solicitud.id,
            monto_aprobado=prestamo.monto_aprobado,
            fecha_aprobacion=datetime.now(),
            tasa_interes=prestamo.tasa_interes,
            plazo_meses=prestamo.plazo_meses,
            saldo_actual=prestamo.monto_aprobado,
            estado=EstadoPrestamo.ACTIVO.value,
        )
        self.session.add(db_prestamo)
        try:
            await self.session.commit()
        except IntegrityError:
            # lost a race against another promotion of the same solicitud
            await self.session.rollback()
            raise InvalidStateError("La solicitud ya tiene un préstamo asociado.")

        await self.session.refresh(db_prestamo)
        logger.info("Préstamo %s generado desde solicitud %s", db_prestamo.id, db_solicitud.id)
        return db_prestamo

    async def _prestamo_id(self, solicitud_id: int) -> Optional[int]:
        result = await self.session.execute(
            select(Prestamo.id).where(Prestamo.solicitud_id == solicitud_id)
        )
        return result.scalar_one_or_none()
