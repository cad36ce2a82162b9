"""Core schemas for the application."""

from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class PartialUpdate(BaseModel):
    """Base for PUT payloads where only the supplied fields are written."""

    # Fields that may be omitted but never explicitly set to null
    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required(self):
        nulls = [
            name for name in self.not_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Los campos {', '.join(nulls)} no pueden ser nulos")
        return self

    def changes(self) -> Dict[str, Any]:
        """Return only the fields present in the request."""
        return self.model_dump(exclude_unset=True)


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class Envelope(BaseModel, Generic[T]):
    """Success envelope wrapping every response payload."""
    status: str = "success"
    data: T


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""
    status: str = "error"
    message: str
    errors: Optional[List[Any]] = None
