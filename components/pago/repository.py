"""
Repository for pago operations.

Payments are the only way a prestamo balance moves. Recording a payment
debits saldo_actual and closes the loan once the balance reaches zero;
deleting one credits the amount back and reopens the loan. Each of these
runs as a single transaction with the prestamo row locked.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import (
    BalanceConflictError,
    InvalidAmountError,
    NotFoundError,
    OverpaymentError,
)
from components.pago.models import Pago
from components.pago.schemas import PagoCreate
from components.prestamo.models import EstadoPrestamo, Prestamo

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
PAYMENT_ATTEMPTS = 3


class PagoRepository:
    """Repository for pago operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, pago_id: int) -> Optional[Pago]:
        """Get pago by ID."""
        result = await self.session.execute(
            select(Pago).where(Pago.id == pago_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, pago_id: int) -> Pago:
        pago = await self.get_by_id(pago_id)
        if pago is None:
            raise NotFoundError("Pago no encontrado")
        return pago

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        prestamo_id: Optional[int] = None,
    ) -> List[Pago]:
        """Get pagos, latest first."""
        query = select(Pago)
        if prestamo_id:
            query = query.where(Pago.prestamo_id == prestamo_id)

        query = query.order_by(Pago.fecha_pago.desc(), Pago.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def record_payment(self, pago: PagoCreate) -> Pago:
        """
        Apply a payment to a prestamo.

        A payment that loses the compare-and-set to a concurrent one is
        re-checked against the fresh balance and retried, up to
        PAYMENT_ATTEMPTS times.

        Raises:
            InvalidAmountError: the amount is zero or negative
            NotFoundError: the prestamo does not exist
            OverpaymentError: the amount is greater than saldo_actual
            BalanceConflictError: the balance kept moving on every attempt
        """
        monto = Decimal(pago.monto_pagado).quantize(CENT)
        if monto <= 0:
            raise InvalidAmountError("El monto pagado debe ser mayor que cero.")

        attempt = 0
        while True:
            attempt += 1
            try:
                prestamo = await self._lock_prestamo(pago.prestamo_id)
                if prestamo is None:
                    raise NotFoundError("Préstamo no encontrado")

                saldo_leido = Decimal(prestamo.saldo_actual)
                if monto > saldo_leido:
                    logger.warning(
                        "Pago de %s rechazado: excede saldo %s del préstamo %s",
                        monto, saldo_leido, prestamo.id,
                    )
                    raise OverpaymentError(
                        "El monto pagado no puede exceder el saldo actual del préstamo."
                    )

                db_pago = Pago(
                    prestamo_id=prestamo.id,
                    fecha_pago=datetime.now(),
                    monto_pagado=monto,
                    metodo_pago=pago.metodo_pago.value,
                    observaciones=pago.observaciones,
                )
                self.session.add(db_pago)
                await self.session.flush()

                nuevo_saldo = saldo_leido - monto
                nuevo_estado = EstadoPrestamo.PAGADO.value if nuevo_saldo <= 0 else prestamo.estado

                # Compare-and-set on the balance read above
                result = await self.session.execute(
                    update(Prestamo)
                    .where(Prestamo.id == prestamo.id, Prestamo.saldo_actual == saldo_leido)
                    .values(saldo_actual=nuevo_saldo, estado=nuevo_estado, updated_at=datetime.now())
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    raise BalanceConflictError(
                        "El saldo del préstamo cambió durante el registro del pago; intente de nuevo."
                    )

                await self.session.commit()
                break
            except BalanceConflictError:
                await self.session.rollback()
                if attempt >= PAYMENT_ATTEMPTS:
                    logger.error(
                        "Pago de %s al préstamo %s abandonado tras %s conflictos de saldo",
                        monto, pago.prestamo_id, attempt,
                    )
                    raise
                logger.warning(
                    "Conflicto de saldo en préstamo %s, reintento %s de %s",
                    pago.prestamo_id, attempt + 1, PAYMENT_ATTEMPTS,
                )
            except Exception:
                await self.session.rollback()
                raise

        await self.session.refresh(db_pago)
        logger.info(
            "Pago %s de %s aplicado a préstamo %s (saldo %s, estado %s)",
            db_pago.id, monto, pago.prestamo_id, nuevo_saldo, nuevo_estado,
        )
        return db_pago

    async def reverse_payment(self, pago_id: int) -> None:
        """
        Delete a payment and credit its amount back to the prestamo.

        The pago row is deleted under the prestamo lock before the credit is
        applied, so only the request that actually removes it moves the
        balance. The prestamo is always set back to ACTIVO, even when the
        restored balance is still zero or below.
        """
        try:
            result = await self.session.execute(
                select(Pago.prestamo_id, Pago.monto_pagado).where(Pago.id == pago_id)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("Pago no encontrado")

            prestamo_id, monto = row.prestamo_id, row.monto_pagado
            await self._lock_prestamo(prestamo_id)

            deleted = await self.session.execute(
                delete(Pago)
                .where(Pago.id == pago_id)
                .execution_options(synchronize_session=False)
            )
            if deleted.rowcount != 1:
                # already reversed by a concurrent request
                raise NotFoundError("Pago no encontrado")

            await self.session.execute(
                update(Prestamo)
                .where(Prestamo.id == prestamo_id)
                .values(
                    saldo_actual=Prestamo.saldo_actual + monto,
                    estado=EstadoPrestamo.ACTIVO.value,
                    updated_at=datetime.now(),
                )
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Pago %s revertido, %s devuelto a préstamo %s", pago_id, monto, prestamo_id)

    async def _lock_prestamo(self, prestamo_id: int) -> Optional[Prestamo]:
        """Read the prestamo row with a write lock held until commit."""
        result = await self.session.execute(
            select(Prestamo)
            .where(Prestamo.id == prestamo_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
