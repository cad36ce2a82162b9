"""Pydantic schemas for cliente data validation."""

from datetime import date, datetime
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from components.core.schemas import PartialUpdate


class ClienteBase(BaseModel):
    """Base cliente schema."""
    primer_nombre: str = Field(..., min_length=1, max_length=100)
    segundo_nombre: Optional[str] = Field(None, max_length=100)
    primer_apellido: str = Field(..., min_length=1, max_length=100)
    segundo_apellido: Optional[str] = Field(None, max_length=100)
    dpi: str = Field(..., min_length=1, max_length=20)
    nit: str = Field(..., min_length=1, max_length=20)
    fecha_nacimiento: date
    direccion: Optional[str] = Field(None, max_length=255)
    correo: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)


class ClienteCreate(ClienteBase):
    """Schema for cliente creation."""
    pass


class ClienteUpdate(PartialUpdate):
    """Schema for cliente partial update."""
    not_nullable: ClassVar[Tuple[str, ...]] = ("primer_nombre", "primer_apellido", "dpi", "nit", "fecha_nacimiento")

    primer_nombre: Optional[str] = Field(None, min_length=1, max_length=100)
    segundo_nombre: Optional[str] = Field(None, max_length=100)
    primer_apellido: Optional[str] = Field(None, min_length=1, max_length=100)
    segundo_apellido: Optional[str] = Field(None, max_length=100)
    dpi: Optional[str] = Field(None, min_length=1, max_length=20)
    nit: Optional[str] = Field(None, min_length=1, max_length=20)
    fecha_nacimiento: Optional[date] = None
    direccion: Optional[str] = Field(None, max_length=255)
    correo: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)


class Cliente(ClienteBase):
    """Schema for cliente response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    correo: Optional[str] = None
    usuario_crea: Optional[str] = None
    usuario_actualiza: Optional[str] = None
    created_at: datetime
    updated_at: datetime
