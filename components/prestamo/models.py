"""Prestamo model for the database."""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class EstadoPrestamo(str, enum.Enum):
    ACTIVO = "ACTIVO"
    PAGADO = "PAGADO"
    MOROSO = "MOROSO"  # only ever set by an operator


class Prestamo(Base):
    """Approved loan with a running balance."""
    __tablename__ = "prestamos"

    id = Column(Integer, primary_key=True, index=True)
    # One loan per application
    solicitud_id = Column(Integer, ForeignKey("solicitudes.id"), nullable=False, unique=True)
    monto_aprobado = Column(Numeric(12, 2), nullable=False)
    fecha_aprobacion = Column(DateTime, nullable=False, default=datetime.now)
    tasa_interes = Column(Numeric(5, 2), nullable=False)
    plazo_meses = Column(Integer, nullable=False)
    saldo_actual = Column(Numeric(12, 2), nullable=False)
    estado = Column(String(20), nullable=False, default=EstadoPrestamo.ACTIVO.value)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # Relationships
    solicitud = relationship("Solicitud", back_populates="prestamo")
    pagos = relationship("Pago", back_populates="prestamo", order_by="Pago.fecha_pago")
