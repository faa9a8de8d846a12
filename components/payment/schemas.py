"""Pydantic schemas for payment data validation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

CENT = Decimal("0.01")

# Columns that reject NULL; only description may be cleared
REQUIRED_FIELDS = ("payment_date", "amount", "payment_method", "location")


class PaymentBase(BaseModel):
    """Base payment schema."""
    payment_date: date
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    payment_method: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Decimal) -> Decimal:
        return value.quantize(CENT)


class PaymentCreate(PaymentBase):
    """Schema for payment creation. Owner defaults to the caller."""
    user_id: Optional[int] = None


class PaymentUpdate(BaseModel):
    """Schema for partial payment update. Ownership and active flag are not editable."""
    payment_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    payment_method: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return value.quantize(CENT) if value is not None else value

    @model_validator(mode="after")
    def reject_null_required(self) -> "PaymentUpdate":
        for name in REQUIRED_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields explicitly sent by the client."""
        return self.model_dump(exclude_unset=True)


class Payment(PaymentBase):
    """Schema for payment response."""
    id: int
    user_id: int
    active: bool
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeletedPayment(BaseModel):
    """Schema for a deactivation audit record."""
    id: int
    payment_id: int
    deleted_by: int
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
