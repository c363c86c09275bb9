"""Response envelope shared by every endpoint."""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorData(BaseModel):
    error_code: str
    errors: Optional[Any] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    data: ErrorData
