"""Tests for the payment ledger: balance and estado of prestamos."""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm.attributes import set_committed_value

from components.core.exceptions import (
    BalanceConflictError,
    InvalidAmountError,
    InvalidStateError,
    NotFoundError,
    OverpaymentError,
)
from components.pago.models import MetodoPago, Pago
from components.pago.repository import PAYMENT_ATTEMPTS, PagoRepository
from components.pago.schemas import PagoCreate
from components.prestamo.models import EstadoPrestamo
from components.prestamo.repository import PrestamoRepository
from components.prestamo.schemas import PrestamoUpdate


def pago_de(prestamo_id: int, monto: str, metodo: MetodoPago = MetodoPago.EFECTIVO) -> PagoCreate:
    return PagoCreate(prestamo_id=prestamo_id, monto_pagado=Decimal(monto), metodo_pago=metodo)


async def estado_de(session, prestamo_id: int):
    prestamo = await PrestamoRepository(session).get_or_404(prestamo_id)
    return prestamo.saldo_actual, prestamo.estado


async def pagos_de(session, prestamo_id: int) -> int:
    result = await session.execute(
        select(func.count(Pago.id)).where(Pago.prestamo_id == prestamo_id)
    )
    return result.scalar()


class TestRecordPayment:
    """Recording payments against a prestamo."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("inicial, monto, saldo_esperado, estado_esperado", [
        ("1000.00", "250.00", "750.00", EstadoPrestamo.ACTIVO),
        ("1000.00", "999.99", "0.01", EstadoPrestamo.ACTIVO),
        ("1000.00", "1000.00", "0.00", EstadoPrestamo.PAGADO),
        ("0.30", "0.10", "0.20", EstadoPrestamo.ACTIVO),
    ])
    async def test_payment_debits_balance(
        self, session, crear_prestamo, inicial, monto, saldo_esperado, estado_esperado
    ):
        prestamo = await crear_prestamo(monto=inicial)

        pago = await PagoRepository(session).record_payment(pago_de(prestamo.id, monto))

        assert pago.id is not None
        assert pago.monto_pagado == Decimal(monto)
        assert pago.fecha_pago is not None
        saldo, estado = await estado_de(session, prestamo.id)
        assert saldo == Decimal(saldo_esperado)
        assert estado == estado_esperado.value

    @pytest.mark.asyncio
    async def test_successive_payments_close_the_loan(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")
        repo = PagoRepository(session)

        await repo.record_payment(pago_de(prestamo.id, "60.00"))
        assert await estado_de(session, prestamo.id) == (Decimal("40.00"), "ACTIVO")

        await repo.record_payment(pago_de(prestamo.id, "40.00", MetodoPago.TRANSFERENCIA))
        assert await estado_de(session, prestamo.id) == (Decimal("0.00"), "PAGADO")

    @pytest.mark.asyncio
    async def test_overpayment_is_rejected_without_side_effects(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="500.00")

        with pytest.raises(OverpaymentError):
            await PagoRepository(session).record_payment(pago_de(prestamo.id, "500.01"))

        assert await estado_de(session, prestamo.id) == (Decimal("500.00"), "ACTIVO")
        assert await pagos_de(session, prestamo.id) == 0

    @pytest.mark.asyncio
    async def test_payment_on_paid_loan_is_rejected(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="10.00")
        repo = PagoRepository(session)
        await repo.record_payment(pago_de(prestamo.id, "10.00"))

        with pytest.raises(OverpaymentError):
            await repo.record_payment(pago_de(prestamo.id, "0.01"))

    @pytest.mark.asyncio
    async def test_unknown_prestamo(self, session):
        with pytest.raises(NotFoundError):
            await PagoRepository(session).record_payment(pago_de(9999, "10.00"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("monto", ["0", "-5.00"])
    async def test_non_positive_amount(self, session, crear_prestamo, monto):
        prestamo = await crear_prestamo()
        pago = PagoCreate.model_construct(
            prestamo_id=prestamo.id,
            monto_pagado=Decimal(monto),
            metodo_pago=MetodoPago.EFECTIVO,
            observaciones=None,
        )

        with pytest.raises(InvalidAmountError):
            await PagoRepository(session).record_payment(pago)

        assert await pagos_de(session, prestamo.id) == 0

    @pytest.mark.asyncio
    async def test_moroso_loan_keeps_estado_on_partial_payment(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="300.00")
        await PrestamoRepository(session).update(prestamo.id, PrestamoUpdate(estado=EstadoPrestamo.MOROSO))

        await PagoRepository(session).record_payment(pago_de(prestamo.id, "100.00"))

        assert await estado_de(session, prestamo.id) == (Decimal("200.00"), "MOROSO")


class TestReversePayment:
    """Deleting payments restores the balance."""

    @pytest.mark.asyncio
    async def test_full_payoff_then_reversal(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="1000.00")
        repo = PagoRepository(session)

        pago = await repo.record_payment(pago_de(prestamo.id, "1000.00"))
        assert await estado_de(session, prestamo.id) == (Decimal("0.00"), "PAGADO")

        await repo.reverse_payment(pago.id)

        assert await estado_de(session, prestamo.id) == (Decimal("1000.00"), "ACTIVO")
        assert await repo.get_by_id(pago.id) is None

    @pytest.mark.asyncio
    async def test_reversing_one_of_several_payments(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")
        repo = PagoRepository(session)
        primero = await repo.record_payment(pago_de(prestamo.id, "60.00"))
        await repo.record_payment(pago_de(prestamo.id, "40.00"))

        await repo.reverse_payment(primero.id)

        assert await estado_de(session, prestamo.id) == (Decimal("60.00"), "ACTIVO")
        assert await pagos_de(session, prestamo.id) == 1

    @pytest.mark.asyncio
    async def test_reversal_always_sets_activo(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="300.00")
        await PrestamoRepository(session).update(prestamo.id, PrestamoUpdate(estado=EstadoPrestamo.MOROSO))
        repo = PagoRepository(session)
        pago = await repo.record_payment(pago_de(prestamo.id, "100.00"))

        await repo.reverse_payment(pago.id)

        assert await estado_de(session, prestamo.id) == (Decimal("300.00"), "ACTIVO")

    @pytest.mark.asyncio
    async def test_unknown_pago(self, session):
        with pytest.raises(NotFoundError):
            await PagoRepository(session).reverse_payment(9999)

    @pytest.mark.asyncio
    async def test_second_reversal_is_rejected(self, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")
        repo = PagoRepository(session)
        pago = await repo.record_payment(pago_de(prestamo.id, "30.00"))
        await repo.reverse_payment(pago.id)

        with pytest.raises(NotFoundError):
            await repo.reverse_payment(pago.id)

        assert await estado_de(session, prestamo.id) == (Decimal("100.00"), "ACTIVO")


class TestConcurrentPayments:
    """Concurrent payments against the same prestamo."""

    @pytest.mark.asyncio
    async def test_only_one_of_two_overdrawing_payments_succeeds(self, db_manager, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")

        async def pagar():
            async with db_manager.get_db() as own_session:
                return await PagoRepository(own_session).record_payment(pago_de(prestamo.id, "60.00"))

        results = await asyncio.gather(pagar(), pagar(), return_exceptions=True)

        exitos = [r for r in results if isinstance(r, Pago)]
        fallos = [r for r in results if isinstance(r, Exception)]
        assert len(exitos) == 1
        assert len(fallos) == 1
        assert isinstance(fallos[0], InvalidStateError)

        async with db_manager.get_db() as check:
            assert await estado_de(check, prestamo.id) == (Decimal("40.00"), "ACTIVO")
            assert await pagos_de(check, prestamo.id) == 1

    @pytest.mark.asyncio
    async def test_two_payments_that_fit_both_succeed(self, db_manager, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")

        async def pagar():
            async with db_manager.get_db() as own_session:
                return await PagoRepository(own_session).record_payment(pago_de(prestamo.id, "30.00"))

        results = await asyncio.gather(pagar(), pagar(), return_exceptions=True)

        assert all(isinstance(r, Pago) for r in results), results
        async with db_manager.get_db() as check:
            assert await estado_de(check, prestamo.id) == (Decimal("40.00"), "ACTIVO")
            assert await pagos_de(check, prestamo.id) == 2

    @pytest.mark.asyncio
    async def test_payment_gives_up_after_repeated_conflicts(self, session, crear_prestamo, monkeypatch):
        prestamo = await crear_prestamo(monto="100.00")
        lecturas = []
        lock_prestamo = PagoRepository._lock_prestamo

        async def saldo_desfasado(repo, prestamo_id):
            # every read sees a balance some other writer already replaced
            locked = await lock_prestamo(repo, prestamo_id)
            lecturas.append(prestamo_id)
            set_committed_value(locked, "saldo_actual", Decimal("999.00"))
            return locked

        monkeypatch.setattr(PagoRepository, "_lock_prestamo", saldo_desfasado)

        with pytest.raises(BalanceConflictError) as exc_info:
            await PagoRepository(session).record_payment(pago_de(prestamo.id, "10.00"))

        assert exc_info.value.status_code == 409
        assert len(lecturas) == PAYMENT_ATTEMPTS
        monkeypatch.undo()
        assert await estado_de(session, prestamo.id) == (Decimal("100.00"), "ACTIVO")
        assert await pagos_de(session, prestamo.id) == 0


class TestConcurrentReversals:
    """Concurrent deletes of the same pago."""

    @pytest.mark.asyncio
    async def test_pago_is_credited_back_once(self, db_manager, session, crear_prestamo):
        prestamo = await crear_prestamo(monto="100.00")
        pago = await PagoRepository(session).record_payment(pago_de(prestamo.id, "30.00"))

        async def revertir():
            async with db_manager.get_db() as own_session:
                return await PagoRepository(own_session).reverse_payment(pago.id)

        results = await asyncio.gather(revertir(), revertir(), return_exceptions=True)

        assert results.count(None) == 1
        fallos = [r for r in results if isinstance(r, Exception)]
        assert len(fallos) == 1
        assert isinstance(fallos[0], NotFoundError)

        async with db_manager.get_db() as check:
            assert await estado_de(check, prestamo.id) == (Decimal("100.00"), "ACTIVO")
            assert await pagos_de(check, prestamo.id) == 0
