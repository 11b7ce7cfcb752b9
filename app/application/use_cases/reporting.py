from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable
from zoneinfo import ZoneInfo

from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.utils.time_slots import weekday_index
from app.domain.entities.appointment import Appointment, AppointmentStatus
from app.domain.entities.dashboard_stats import CustomerSummary, DashboardStats


def compute_daily_count(appointments: Iterable[Appointment], today: date | str) -> int:
    today_iso = today if isinstance(today, str) else today.isoformat()
    return sum(1 for a in appointments if a.date == today_iso)


def compute_pending_count(appointments: Iterable[Appointment]) -> int:
    return sum(1 for a in appointments if a.status == AppointmentStatus.pending)


def compute_revenue(appointments: Iterable[Appointment], window_start: date, window_end: date) -> Decimal:
    """Realized revenue: completed appointments with window_start <= date < window_end."""
    start, end = window_start.isoformat(), window_end.isoformat()
    total = Decimal("0")
    for a in appointments:
        if a.status == AppointmentStatus.completed and start <= a.date < end:
            total += a.service_price
    return total


def compute_completion_rate(appointments: Iterable[Appointment]) -> float:
    items = list(appointments)
    if not items:
        return 100.0
    completed = sum(1 for a in items if a.status == AppointmentStatus.completed)
    return completed / len(items) * 100


def compute_unique_customer_count(appointments: Iterable[Appointment]) -> int:
    # Approximation: two customers sharing a name count once
    return len({a.customer_name for a in appointments})


def week_window(reference: date) -> tuple[date, date]:
    """Sunday-start week containing reference, as [start, end)."""
    start = reference - timedelta(days=weekday_index(reference))
    return start, start + timedelta(days=7)


def month_window(reference: date) -> tuple[date, date]:
    start = reference.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def summarize_customers(appointments: Iterable[Appointment]) -> list[CustomerSummary]:
    """Per-customer visit count, completed spend and last visit, grouped by name."""
    grouped: dict[str, list[Appointment]] = {}
    for a in appointments:
        grouped.setdefault(a.customer_name, []).append(a)

    summaries: list[CustomerSummary] = []
    for name, items in grouped.items():
        items.sort(key=lambda a: (a.date, a.time))
        completed = [a for a in items if a.status == AppointmentStatus.completed]
        summaries.append(
            CustomerSummary(
                customer_name=name,
                customer_phone=items[-1].customer_phone,
                total_appointments=len(items),
                total_spent=sum((a.service_price for a in completed), Decimal("0")),
                last_visit=completed[-1].date if completed else None,
            )
        )
    summaries.sort(key=lambda s: s.customer_name.lower())
    return summaries


def build_dashboard(
    store_id: str,
    appointments: Iterable[Appointment],
    reference_instant: datetime,
    timezone: ZoneInfo | None = None,
) -> DashboardStats:
    items = list(appointments)
    if timezone is not None and reference_instant.tzinfo is not None:
        reference_instant = reference_instant.astimezone(timezone)
    today = reference_instant.date()
    week_start, week_end = week_window(today)
    month_start, month_end = month_window(today)
    return DashboardStats(
        store_id=store_id,
        reference_date=today.isoformat(),
        appointments_today=compute_daily_count(items, today),
        pending_count=compute_pending_count(items),
        completed_count=sum(1 for a in items if a.status == AppointmentStatus.completed),
        total_appointments=len(items),
        total_revenue=compute_revenue(items, date.min, date.max),
        revenue_week=compute_revenue(items, week_start, week_end),
        revenue_month=compute_revenue(items, month_start, month_end),
        completion_rate=round(compute_completion_rate(items), 1),
        unique_customers=compute_unique_customer_count(items),
    )


class ReconciliationReporting:
    """
    Keeps a per-store DashboardStats cache, recomputed eagerly whenever the
    appointment lifecycle reports a change.
    """

    def __init__(
        self,
        appointments: AppointmentRepositoryPort,
        timezone: ZoneInfo,
        clock=None,
    ) -> None:
        self._appointments = appointments
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._cache: dict[str, DashboardStats] = {}
        self._logger = logging.getLogger(__name__)

    def on_appointment_changed(self, appointment: Appointment) -> None:
        self.refresh(appointment.store_id)

    def refresh(self, store_id: str, reference_instant: datetime | None = None) -> DashboardStats:
        stats = build_dashboard(
            store_id,
            self._appointments.list_for_store(store_id),
            reference_instant or self._clock(),
            self._timezone,
        )
        self._cache[store_id] = stats
        self._logger.debug("Dashboard recomputed", extra={"store_id": store_id})
        return stats

    def get_dashboard(self, store_id: str, reference_instant: datetime | None = None) -> DashboardStats:
        cached = self._cache.get(store_id)
        if reference_instant is None and cached is not None:
            today = self._clock().astimezone(self._timezone).date().isoformat()
            if cached.reference_date == today:
                return cached
        return self.refresh(store_id, reference_instant)

    def get_customers(self, store_id: str) -> list[CustomerSummary]:
        return summarize_customers(self._appointments.list_for_store(store_id))
