"""
app/schemas/vehicle.py

Purpose: Vehicle payloads

- Six independently optional compliance dates
- Loan / EMI metadata
- Zero or more document references
"""

import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

from app.schemas.response import Amount, Money


class VehicleBase(BaseModel):
    model: Optional[str] = None
    tyre_count: Optional[int] = Field(None, ge=0)
    diesel_qty: Optional[Decimal] = Field(None, ge=0, max_digits=15)
    owner: Optional[str] = None
    is_due: Optional[bool] = None
    due_date: Optional[dt.date] = None
    pollution_date: Optional[dt.date] = None
    tax_date: Optional[dt.date] = None
    insurance_date: Optional[dt.date] = None
    fc_date: Optional[dt.date] = Field(None, description="Fitness certificate expiry")
    permit_date: Optional[dt.date] = None
    emi_amount: Optional[Amount] = None
    loan_provider: Optional[str] = None


class VehicleCreate(VehicleBase):
    vehicle_no: str = Field(..., description="Registration number, stored upper-case")
    documents: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "vehicle_no": "KA01AB1234",
                "model": "Tata Signa 4825",
                "tyre_count": 10,
                "insurance_date": "2026-10-21",
                "emi_amount": 45000,
                "loan_provider": "HDFC"
            }
        }


class VehicleUpdate(VehicleBase):
    vehicle_no: Optional[str] = None
    documents: Optional[List[str]] = None


class VehicleOut(BaseModel):
    id: str
    vehicle_no: str
    model: Optional[str] = None
    tyre_count: Optional[int] = None
    diesel_qty: Optional[Money] = None
    owner: Optional[str] = None
    is_due: Optional[bool] = None
    due_date: Optional[str] = None
    pollution_date: Optional[str] = None
    tax_date: Optional[str] = None
    insurance_date: Optional[str] = None
    fc_date: Optional[str] = None
    permit_date: Optional[str] = None
    emi_amount: Optional[Money] = None
    loan_provider: Optional[str] = None
    documents: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
