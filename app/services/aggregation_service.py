"""
app/services/aggregation_service.py

Purpose: Dashboard financial aggregation

- Totals, net profit and record counts per user (optionally per vehicle)
- Six calendar-month income/expense series, oldest month first

The pure functions take already-loaded records so they can be reasoned
about without a store. Malformed amounts count as zero and undated records
are left out of the series; aggregation never raises on stored data.
Results are recomputed on every call.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from app.core.logging import get_logger, LogContext
from app.db.store import LedgerStore, INCOMES, EXPENSES
from utils.constants import MONTH_LABEL_FORMAT, SERIES_MONTHS
from utils.time_utils import Clock, parse_timestamp, shift_month
from utils.validation_utils import normalize_vehicle_filter, to_decimal

logger = get_logger(__name__)


def filter_by_vehicle(records: Iterable[Dict[str, Any]], vehicle_filter: Optional[str]) -> List[Dict[str, Any]]:
    """
    Keeps records for one registration number; "all" or None keeps everything.
    """
    vehicle_no = normalize_vehicle_filter(vehicle_filter)
    if vehicle_no is None:
        return list(records)
    return [record for record in records if record.get("vehicle") == vehicle_no]


def sum_amounts(records: Iterable[Dict[str, Any]]) -> Decimal:
    return sum((to_decimal(record.get("amount")) for record in records), Decimal("0"))


def compute_stats(
    incomes: Iterable[Dict[str, Any]],
    expenses: Iterable[Dict[str, Any]],
    vehicle_filter: Optional[str] = None
) -> Dict[str, Any]:
    """
    Totals for the dashboard header.

    Returns:
        {
            "total_income": Decimal,
            "total_expense": Decimal,
            "net_profit": Decimal,   # total_income - total_expense
            "income_count": int,
            "expense_count": int
        }
    """
    incomes = filter_by_vehicle(incomes, vehicle_filter)
    expenses = filter_by_vehicle(expenses, vehicle_filter)

    total_income = sum_amounts(incomes)
    total_expense = sum_amounts(expenses)

    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "net_profit": total_income - total_expense,
        "income_count": len(incomes),
        "expense_count": len(expenses),
    }


def compute_monthly_series(
    incomes: Iterable[Dict[str, Any]],
    expenses: Iterable[Dict[str, Any]],
    now: datetime,
    vehicle_filter: Optional[str] = None,
    months: int = SERIES_MONTHS
) -> List[Dict[str, Any]]:
    """
    Income and expense summed per calendar month.

    Buckets cover the month of ``now`` and the ``months - 1`` before it,
    oldest first. Month boundaries follow ``now``'s timezone.
    """
    buckets = []
    index = {}
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -offset)
        bucket = {
            "label": datetime(year, month, 1).strftime(MONTH_LABEL_FORMAT),
            "year": year,
            "month": month,
            "income": Decimal("0"),
            "expense": Decimal("0"),
        }
        index[(year, month)] = bucket
        buckets.append(bucket)

    for key, records in (("income", incomes), ("expense", expenses)):
        for record in filter_by_vehicle(records, vehicle_filter):
            dated = parse_timestamp(record.get("date"), now.tzinfo)
            if dated is None:
                continue
            bucket = index.get((dated.year, dated.month))
            if bucket is not None:
                bucket[key] += to_decimal(record.get("amount"))

    return buckets


class DashboardService:
    """Store-backed entry points for the aggregation functions."""

    def __init__(self, store: LedgerStore, clock: Clock):
        self.store = store
        self.clock = clock

    async def _load(self, user_id: str):
        incomes = await self.store.find_by_owner(INCOMES, user_id)
        expenses = await self.store.find_by_owner(EXPENSES, user_id)
        return incomes, expenses

    async def get_stats(self, user_id: str, vehicle_filter: Optional[str] = None) -> Dict[str, Any]:
        incomes, expenses = await self._load(user_id)
        stats = compute_stats(incomes, expenses, vehicle_filter)
        with LogContext(user_id=user_id):
            logger.debug(
                f"Stats computed over {stats['income_count']} incomes / {stats['expense_count']} expenses"
            )
        return stats

    async def get_monthly_series(self, user_id: str, vehicle_filter: Optional[str] = None) -> List[Dict[str, Any]]:
        incomes, expenses = await self._load(user_id)
        return compute_monthly_series(incomes, expenses, self.clock.now(), vehicle_filter)
