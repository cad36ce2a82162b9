"""Pago model for the database."""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base


class MetodoPago(str, enum.Enum):
    EFECTIVO = "EFECTIVO"
    TARJETA = "TARJETA"
    TRANSFERENCIA = "TRANSFERENCIA"


class Pago(Base):
    """Payment applied against a loan balance."""
    __tablename__ = "pagos"

    id = Column(Integer, primary_key=True, index=True)
    prestamo_id = Column(Integer, ForeignKey("prestamos.id"), nullable=False, index=True)
    fecha_pago = Column(DateTime, nullable=False, default=datetime.now)
    monto_pagado = Column(Numeric(12, 2), nullable=False)
    metodo_pago = Column(String(20), nullable=False, default=MetodoPago.EFECTIVO.value)
    observaciones = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # Relationships
    prestamo = relationship("Prestamo", back_populates="pagos")
