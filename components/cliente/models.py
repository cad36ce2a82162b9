"""Cliente model for the database."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship

from components.core.database import Base


class Cliente(Base):
    """Borrower identity record."""
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    primer_nombre = Column(String(100), nullable=False)
    segundo_nombre = Column(String(100), nullable=True)
    primer_apellido = Column(String(100), nullable=False)
    segundo_apellido = Column(String(100), nullable=True)
    dpi = Column(String(20), unique=True, nullable=False)
    nit = Column(String(20), unique=True, nullable=False)
    fecha_nacimiento = Column(Date, nullable=False)
    direccion = Column(String(255), nullable=True)
    correo = Column(String(100), nullable=True)
    telefono = Column(String(20), nullable=True)
    usuario_crea = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    usuario_actualiza = Column(String(100), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    # Relationships
    solicitudes = relationship("Solicitud", back_populates="cliente")

    @property
    def nombre_completo(self) -> str:
        """Display name used in listings."""
        return f"{self.primer_nombre} {self.primer_apellido}"
