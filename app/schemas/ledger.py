"""
app/schemas/ledger.py

Purpose: Income and expense payloads

Amounts are validated as non-negative decimals at the boundary.
"""

import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from app.schemas.response import Amount, Money


class IncomeCreate(BaseModel):
    vehicle: str = Field(..., description="Registration number of the vehicle")
    amount: Amount
    payment_status: Literal["paid", "unpaid"] = "unpaid"
    payer_company: Optional[str] = None
    payer_mobile: Optional[str] = None
    notes: Optional[str] = None
    documents: List[str] = Field(default_factory=list)
    date: Optional[dt.date] = Field(None, description="Defaults to the time of entry")


class ExpenseCreate(BaseModel):
    vehicle: str = Field(..., description="Registration number of the vehicle")
    amount: Amount
    category: Optional[str] = None
    description: Optional[str] = None
    details: Optional[str] = None
    documents: List[str] = Field(default_factory=list, description="At least one reference")
    date: Optional[dt.date] = Field(None, description="Defaults to the time of entry")


class IncomeOut(BaseModel):
    id: str
    vehicle: str
    amount: Money
    payment_status: str
    payer_company: Optional[str] = None
    payer_mobile: Optional[str] = None
    notes: Optional[str] = None
    documents: List[str] = Field(default_factory=list)
    date: str
    created_at: Optional[str] = None


class ExpenseOut(BaseModel):
    id: str
    vehicle: str
    amount: Money
    category: Optional[str] = None
    description: Optional[str] = None
    details: Optional[str] = None
    documents: List[str] = Field(default_factory=list)
    date: str
    created_at: Optional[str] = None
