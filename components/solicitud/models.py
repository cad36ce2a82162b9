"""Solicitud model for the database."""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class EstadoSolicitud(str, enum.Enum):
    EN_PROCESO = "EN PROCESO"
    APROBADO = "APROBADO"
    RECHAZADO = "RECHAZADO"


class Solicitud(Base):
    """Loan application awaiting a decision."""
    __tablename__ = "solicitudes"

    id = Column(Integer, primary_key=True, index=True)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False, index=True)
    monto_solicitado = Column(Numeric(12, 2), nullable=False)
    plazo_meses = Column(Integer, nullable=False)
    tasa_interes = Column(Numeric(5, 2), nullable=False)
    estado = Column(String(20), nullable=False, default=EstadoSolicitud.EN_PROCESO.value)
    observaciones = Column(String(255), nullable=True)
    fecha_solicitud = Column(DateTime, nullable=False, default=datetime.now)
    usuario_crea = Column(String(100), nullable=True)
    fecha_crea = Column(DateTime, nullable=True)
    usuario_actualiza = Column(String(100), nullable=True)
    fecha_actualiza = Column(DateTime, nullable=True)

    # Relationships
    cliente = relationship("Cliente", back_populates="solicitudes")
    prestamo = relationship("Prestamo", back_populates="solicitud", uselist=False)
