"""Repository for cliente operations."""

import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from components.cliente.models import Cliente
from components.cliente.schemas import ClienteCreate, ClienteUpdate
from components.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from components.solicitud.models import Solicitud

logger = logging.getLogger(__name__)


class ClienteRepository:
    """Repository for cliente operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, cliente: ClienteCreate, usuario: str) -> Cliente:
        """Create a new cliente stamped with the acting user."""
        await self._check_unique(cliente.dpi, cliente.nit)

        db_cliente = Cliente(**cliente.model_dump(), usuario_crea=usuario)
        self.session.add(db_cliente)
        await self._commit_unique(cliente.dpi, cliente.nit)
        await self.session.refresh(db_cliente)
        logger.info("Cliente %s creado por %s", db_cliente.id, usuario)
        return db_cliente

    async def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        """Get cliente by ID."""
        result = await self.session.execute(
            select(Cliente).where(Cliente.id == cliente_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, cliente_id: int) -> Cliente:
        cliente = await self.get_by_id(cliente_id)
        if cliente is None:
            raise NotFoundError("Cliente no encontrado")
        return cliente

    async def get_all(self, skip: int = 0, limit: int = 100) -> List[Cliente]:
        """Get clientes, newest first."""
        result = await self.session.execute(
            select(Cliente).order_by(Cliente.id.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, cliente_id: int, cliente: ClienteUpdate, usuario: str) -> Cliente:
        """Apply the supplied fields to a cliente."""
        db_cliente = await self.get_or_404(cliente_id)
        changes = cliente.changes()

        await self._check_unique(changes.get("dpi"), changes.get("nit"), exclude_id=cliente_id)

        for field, value in changes.items():
            setattr(db_cliente, field, value)
        db_cliente.usuario_actualiza = usuario

        await self._commit_unique(changes.get("dpi"), changes.get("nit"), exclude_id=cliente_id)
        await self.session.refresh(db_cliente)
        logger.info("Cliente %s actualizado por %s", cliente_id, usuario)
        return db_cliente

    async def delete(self, cliente_id: int) -> None:
        """Delete a cliente that has no solicitudes."""
        db_cliente = await self.get_or_404(cliente_id)

        result = await self.session.execute(
            select(Solicitud.id).where(Solicitud.cliente_id == cliente_id).limit(1)
        )
        if result.scalar_one_or_none() is not None:
            logger.warning("Cliente %s tiene solicitudes, no se elimina", cliente_id)
            raise InvalidStateError("El cliente tiene solicitudes registradas y no puede eliminarse.")

        await self.session.delete(db_cliente)
        await self.session.commit()
        logger.info("Cliente %s eliminado", cliente_id)

    async def _check_unique(
        self,
        dpi: Optional[str],
        nit: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        """Reject a DPI or NIT already used by another cliente."""
        errors = await self._duplicate_errors(dpi, nit, exclude_id)
        if errors:
            raise ValidationError("Error de validación", errors=errors)

    async def _commit_unique(
        self,
        dpi: Optional[str],
        nit: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            # a concurrent request took the DPI or NIT after the check
            await self.session.rollback()
            logger.warning("Documento duplicado al guardar cliente (DPI %s, NIT %s)", dpi, nit)
            errors = await self._duplicate_errors(dpi, nit, exclude_id)
            raise ValidationError("Error de validación", errors=errors or None)

    async def _duplicate_errors(
        self,
        dpi: Optional[str],
        nit: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> List[dict]:
        conditions = []
        if dpi is not None:
            conditions.append(Cliente.dpi == dpi)
        if nit is not None:
            conditions.append(Cliente.nit == nit)
        if not conditions:
            return []

        query = select(Cliente.dpi, Cliente.nit).where(or_(*conditions))
        if exclude_id is not None:
            query = query.where(Cliente.id != exclude_id)
        rows = (await self.session.execute(query)).all()

        errors = []
        if dpi is not None and any(row.dpi == dpi for row in rows):
            errors.append({"field": "dpi", "message": "El DPI ya está registrado"})
        if nit is not None and any(row.nit == nit for row in rows):
            errors.append({"field": "nit", "message": "El NIT ya está registrado"})
        return errors
