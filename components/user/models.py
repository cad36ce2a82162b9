"""User model for the database."""

from sqlalchemy import Column, Integer, String, Date

from components.core.database import Base


class User(Base):
    """Back office operator allowed to use the API."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # Hashed password
    registration_date = Column(Date, nullable=False)
