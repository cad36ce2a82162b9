"""Pydantic schemas for user data validation."""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for operator registration."""
    password: str = Field(..., min_length=6)
    password_confirmation: str

    @model_validator(mode="after")
    def passwords_match(self) -> "UserCreate":
        if self.password != self.password_confirmation:
            raise ValueError("La confirmación de la contraseña no coincide")
        return self


class User(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    registration_date: date


class UserWithToken(User):
    access_token: str
    token_type: str = "bearer"
