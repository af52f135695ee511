from decimal import Decimal
from pydantic import BaseModel, Field, PlainSerializer
from typing import Annotated, Generic, Optional, Any, TypeVar

T = TypeVar("T")

# Decimal internally, JSON number on the wire. A float holds 15 significant
# digits exactly, which is what Amount admits on input.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Non-negative input amount: up to 13 integer digits and 2 decimals
Amount = Annotated[Decimal, Field(ge=0, max_digits=15, decimal_places=2)]


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class ApiResponse(BaseModel, Generic[T]):
    """
    Standard success envelope.
    """
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
