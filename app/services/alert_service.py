"""
app/services/alert_service.py

Purpose: Compliance alerts for vehicle documents

- Checks the six compliance dates of every vehicle independently
- Reports dates inside [today, today + horizon] (both ends inclusive)
- Flags alerts with few days left as critical
- Optionally also reports overdue dates
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.db.store import LedgerStore, VEHICLES
from utils.constants import COMPLIANCE_FIELDS
from utils.time_utils import Clock, calendar_days_until, days_until

logger = get_logger(__name__)


def scan_due_alerts(
    vehicles: Iterable[Dict[str, Any]],
    now: datetime,
    horizon_days: int = 7,
    critical_days: int = 3,
    include_overdue: bool = False
) -> List[Dict[str, Any]]:
    """
    One alert per (vehicle, compliance field) falling due within the horizon.

    Args:
        vehicles: Vehicle documents
        now: Current time in the canonical timezone
        horizon_days: Forward window in whole days
        critical_days: days_left at or below this is critical
        include_overdue: Also report dates before today (negative days_left)

    Returns:
        Alerts in vehicle order, then field order
    """
    if horizon_days < 0:
        raise ValidationError("horizon_days must not be negative")

    alerts = []
    for vehicle in vehicles:
        for field, label in COMPLIANCE_FIELDS:
            raw = vehicle.get(field)
            if not raw:
                continue

            day_offset = calendar_days_until(raw, now)
            if day_offset is None:
                logger.debug(f"Skipping unparseable {field}", extra={"vehicle_no": vehicle.get("vehicle_no")})
                continue

            # Window membership is by calendar date; days_left may round a
            # partial day up
            overdue = day_offset < 0
            if day_offset > horizon_days or (overdue and not include_overdue):
                continue

            days_left = days_until(raw, now)

            alerts.append({
                "vehicle_no": vehicle.get("vehicle_no"),
                "type": label,
                "date": str(raw),
                "days_left": days_left,
                "critical": days_left <= critical_days,
                "overdue": overdue,
            })

    return alerts


class AlertService:
    """Store-backed compliance scanner."""

    def __init__(self, store: LedgerStore, clock: Clock):
        self.store = store
        self.clock = clock

    async def get_alerts(
        self,
        user_id: str,
        horizon_days: int = None,
        include_overdue: bool = False
    ) -> List[Dict[str, Any]]:
        horizon = settings.ALERT_HORIZON_DAYS if horizon_days is None else horizon_days
        vehicles = await self.store.find_by_owner(VEHICLES, user_id)
        alerts = scan_due_alerts(
            vehicles,
            self.clock.now(),
            horizon_days=horizon,
            critical_days=settings.ALERT_CRITICAL_DAYS,
            include_overdue=include_overdue
        )
        with LogContext(user_id=user_id):
            logger.info(
                f"{len(alerts)} compliance alerts across {len(vehicles)} vehicles",
                extra={"horizon_days": horizon}
            )
        return alerts
