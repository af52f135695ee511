"""
app/schemas/dashboard.py

Purpose: Dashboard, alert and notification payloads
"""

from pydantic import BaseModel
from typing import Optional

from app.schemas.response import Money


class StatsOut(BaseModel):
    total_income: Money
    total_expense: Money
    net_profit: Money
    income_count: int
    expense_count: int


class MonthBucket(BaseModel):
    label: str
    year: int
    month: int
    income: Money
    expense: Money


class AlertOut(BaseModel):
    vehicle_no: str
    type: str
    date: str
    days_left: int
    critical: bool
    overdue: bool = False


class NotifyRequest(BaseModel):
    mobile: Optional[str] = None
    message: Optional[str] = None
