"""Script to seed demo data into the database."""

from datetime import date
from decimal import Decimal
import asyncio

from sqlalchemy import delete

from components.cliente.models import Cliente
from components.cliente.repository import ClienteRepository
from components.cliente.schemas import ClienteCreate
from components.core.database import DatabaseManager
import components.core.init_db  # noqa: F401  registers all models
from components.core.logging import setup_logging
from components.pago.models import MetodoPago, Pago
from components.pago.repository import PagoRepository
from components.pago.schemas import PagoCreate
from components.prestamo.models import Prestamo
from components.prestamo.schemas import PrestamoCreate
from components.solicitud.models import EstadoSolicitud, Solicitud
from components.solicitud.repository import SolicitudRepository
from components.solicitud.schemas import SolicitudCreate, SolicitudUpdate
from components.user.models import User
from components.user.repository import UserRepository
from components.user.schemas import UserCreate

SEED_USER = "seed"

CLIENTES = [
    ("Luis", "Hernández", "1234567890101", "1234567-8", date(1990, 5, 20)),
    ("Ana", "López", "2234567890101", "2234567-8", date(1985, 11, 2)),
    ("Carlos", "Pérez", "3234567890101", "3234567-8", date(1978, 3, 14)),
]


async def seed_data():
    """Seed demo data: one operator, three clientes and their loans."""
    db_manager = DatabaseManager()
    await db_manager.create_tables()

    async with db_manager.get_db() as db:
        # Clear existing data
        for model in (Pago, Prestamo, Solicitud, Cliente, User):
            await db.execute(delete(model))
        await db.commit()

        await UserRepository(db).create(UserCreate(
            name="admin",
            email="admin@example.com",
            password="secret123",
            password_confirmation="secret123",
        ))

        clientes = ClienteRepository(db)
        solicitudes = SolicitudRepository(db)
        pagos = PagoRepository(db)

        for i, (nombre, apellido, dpi, nit, nacimiento) in enumerate(CLIENTES):
            cliente = await clientes.create(ClienteCreate(
                primer_nombre=nombre,
                primer_apellido=apellido,
                dpi=dpi,
                nit=nit,
                fecha_nacimiento=nacimiento,
            ), usuario=SEED_USER)

            monto = Decimal(5000 * (i + 1))
            solicitud = await solicitudes.create(SolicitudCreate(
                cliente_id=cliente.id,
                monto_solicitado=monto,
                plazo_meses=12,
                tasa_interes=Decimal("12.50"),
            ), usuario=SEED_USER)

            # Leave the last solicitud pending
            if i == len(CLIENTES) - 1:
                continue

            await solicitudes.update(
                solicitud.id,
                SolicitudUpdate(estado=EstadoSolicitud.APROBADO),
                usuario=SEED_USER,
            )
            prestamo = await solicitudes.promote_to_prestamo(PrestamoCreate(
                solicitud_id=solicitud.id,
                monto_aprobado=monto,
                tasa_interes=Decimal("12.50"),
                plazo_meses=12,
            ))
            for _ in range(2):
                await pagos.record_payment(PagoCreate(
                    prestamo_id=prestamo.id,
                    monto_pagado=Decimal("500.00"),
                    metodo_pago=MetodoPago.EFECTIVO,
                ))

    await db_manager.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed_data())
