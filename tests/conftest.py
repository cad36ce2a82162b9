"""Pytest configuration and fixtures."""

import itertools
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from components.cliente.repository import ClienteRepository
from components.cliente.schemas import ClienteCreate
from components.core.database import DatabaseManager
from components.prestamo.schemas import PrestamoCreate
from components.solicitud.models import EstadoSolicitud
from components.solicitud.repository import SolicitudRepository
from components.solicitud.schemas import SolicitudCreate, SolicitudUpdate
from restapi.router import create_app

TEST_USER = "tester"

_document_numbers = itertools.count(1000)


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    """DatabaseManager bound to a throwaway SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    manager = DatabaseManager(engine=engine)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def session(db_manager):
    async with db_manager.get_db() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_manager):
    app = create_app(db_manager)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_client(client):
    """Client carrying a bearer token for a freshly registered operator."""
    response = await client.post("/api/register", json={
        "name": "operador1",
        "email": "operador1@example.com",
        "password": "secret123",
        "password_confirmation": "secret123",
    })
    assert response.status_code == 201
    client.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
    return client


@pytest.fixture
def cliente_data():
    """Unique cliente payload."""
    def build(**overrides):
        number = next(_document_numbers)
        data = {
            "primer_nombre": "Luis",
            "primer_apellido": "Hernández",
            "dpi": f"DPI{number}",
            "nit": f"NIT{number}",
            "fecha_nacimiento": date(1990, 5, 20),
        }
        data.update(overrides)
        return data
    return build


@pytest_asyncio.fixture
async def crear_cliente(db_manager, cliente_data):
    """Factories commit through their own session so test rollbacks never expire their rows."""
    async def create(**overrides):
        async with db_manager.get_db() as session:
            return await ClienteRepository(session).create(
                ClienteCreate(**cliente_data(**overrides)), usuario=TEST_USER
            )
    return create


@pytest_asyncio.fixture
async def crear_solicitud(db_manager, crear_cliente):
    async def create(monto="1000.00", estado=None):
        cliente = await crear_cliente()
        async with db_manager.get_db() as session:
            repo = SolicitudRepository(session)
            solicitud = await repo.create(SolicitudCreate(
                cliente_id=cliente.id,
                monto_solicitado=Decimal(monto),
                plazo_meses=12,
                tasa_interes=Decimal("12.50"),
            ), usuario=TEST_USER)
            if estado is not None:
                solicitud = await repo.update(solicitud.id, SolicitudUpdate(estado=estado), usuario=TEST_USER)
            return solicitud
    return create


@pytest_asyncio.fixture
async def crear_prestamo(db_manager, crear_solicitud):
    """Prestamo promoted from an APROBADO solicitud with saldo_actual = monto."""
    async def create(monto="1000.00"):
        solicitud = await crear_solicitud(monto=monto, estado=EstadoSolicitud.APROBADO)
        async with db_manager.get_db() as session:
            return await SolicitudRepository(session).promote_to_prestamo(PrestamoCreate(
                solicitud_id=solicitud.id,
                monto_aprobado=Decimal(monto),
                tasa_interes=Decimal("12.50"),
                plazo_meses=12,
            ))
    return create
