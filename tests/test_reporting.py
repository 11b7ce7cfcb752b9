"""
Tests for dashboard aggregates.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from app.application.use_cases.appointment_lifecycle import AppointmentLifecycle
from app.application.use_cases.manage_services import ManageServicesUseCase
from app.application.use_cases.reporting import (
    ReconciliationReporting,
    build_dashboard,
    compute_completion_rate,
    compute_daily_count,
    compute_revenue,
    compute_unique_customer_count,
    month_window,
    summarize_customers,
    week_window,
)
from app.domain.entities.appointment import Appointment, AppointmentDraft, AppointmentStatus
from app.infrastructure.store.memory_store import MemoryBookingStore

UTC = timezone.utc


def appointment(
    date_iso: str,
    status: AppointmentStatus,
    price: str = "100",
    name: str = "Ana",
    id: str = "a",
    time: str = "09:00",
) -> Appointment:
    return Appointment(
        id=id,
        store_id="store-1",
        customer_name=name,
        customer_phone="5511999990000",
        service_id="svc-1",
        service_name="Haircut",
        service_duration=30,
        service_price=Decimal(price),
        date=date_iso,
        time=time,
        status=status,
    )


def test_revenue_counts_only_completed():
    appointments = [
        appointment("2025-01-06", AppointmentStatus.completed, "100", id="a"),
        appointment("2025-01-07", AppointmentStatus.pending, "200", id="b"),
    ]
    assert compute_revenue(appointments, date(2025, 1, 1), date(2025, 2, 1)) == Decimal("100")


def test_revenue_window_is_half_open():
    appointments = [
        appointment("2025-01-01", AppointmentStatus.completed, "10", id="a"),
        appointment("2025-01-31", AppointmentStatus.completed, "20", id="b"),
        appointment("2025-02-01", AppointmentStatus.completed, "40", id="c"),
    ]
    assert compute_revenue(appointments, date(2025, 1, 1), date(2025, 2, 1)) == Decimal("30")


def test_confirmed_is_not_revenue():
    appointments = [appointment("2025-01-06", AppointmentStatus.confirmed, "150")]
    assert compute_revenue(appointments, date(2025, 1, 1), date(2025, 2, 1)) == Decimal("0")


def test_daily_count_counts_every_status():
    appointments = [
        appointment("2025-01-06", AppointmentStatus.cancelled, id="a"),
        appointment("2025-01-06", AppointmentStatus.pending, id="b"),
        appointment("2025-01-07", AppointmentStatus.pending, id="c"),
    ]
    assert compute_daily_count(appointments, date(2025, 1, 6)) == 2
    assert compute_daily_count(appointments, "2025-01-07") == 1


def test_completion_rate():
    appointments = [
        appointment("2025-01-06", AppointmentStatus.completed, id="a"),
        appointment("2025-01-06", AppointmentStatus.pending, id="b"),
        appointment("2025-01-06", AppointmentStatus.cancelled, id="c"),
        appointment("2025-01-06", AppointmentStatus.completed, id="d"),
    ]
    assert compute_completion_rate(appointments) == 50.0


def test_completion_rate_without_history_is_100():
    assert compute_completion_rate([]) == 100.0


def test_unique_customers_is_a_name_based_approximation():
    appointments = [
        appointment("2025-01-06", AppointmentStatus.pending, name="Ana", id="a"),
        appointment("2025-01-07", AppointmentStatus.pending, name="Ana", id="b"),
        appointment("2025-01-07", AppointmentStatus.pending, name="Bruno", id="c"),
    ]
    assert compute_unique_customer_count(appointments) == 2

    # Known approximation: different people sharing a name count once
    namesake = appointment("2025-01-08", AppointmentStatus.pending, name="Ana", id="d")
    namesake = Appointment(**{**namesake.__dict__, "customer_phone": "5521000000000"})
    assert compute_unique_customer_count(appointments + [namesake]) == 2


def test_week_and_month_windows():
    assert week_window(date(2025, 1, 8)) == (date(2025, 1, 5), date(2025, 1, 12))
    assert week_window(date(2025, 1, 5)) == (date(2025, 1, 5), date(2025, 1, 12))
    assert month_window(date(2025, 1, 31)) == (date(2025, 1, 1), date(2025, 2, 1))
    assert month_window(date(2025, 12, 15)) == (date(2025, 12, 1), date(2026, 1, 1))


def test_build_dashboard_uses_reference_instant():
    appointments = [
        appointment("2025-01-08", AppointmentStatus.completed, "100", id="a"),
        appointment("2025-01-02", AppointmentStatus.completed, "50", name="Bruno", id="b"),
        appointment("2024-12-30", AppointmentStatus.completed, "25", name="Carla", id="c"),
        appointment("2025-01-08", AppointmentStatus.pending, "80", name="Bruno", id="d", time="10:00"),
    ]

    stats = build_dashboard("store-1", appointments, datetime(2025, 1, 8, 15, 0, tzinfo=UTC))

    assert stats.reference_date == "2025-01-08"
    assert stats.appointments_today == 2
    assert stats.pending_count == 1
    assert stats.completed_count == 3
    assert stats.total_revenue == Decimal("175")
    assert stats.revenue_week == Decimal("100")
    assert stats.revenue_month == Decimal("150")
    assert stats.completion_rate == 75.0
    assert stats.unique_customers == 3


def test_build_dashboard_resolves_today_in_business_timezone():
    appointments = [appointment("2025-01-07", AppointmentStatus.pending)]
    # 01:00 UTC on the 8th is still the 7th in Sao Paulo
    stats = build_dashboard(
        "store-1",
        appointments,
        datetime(2025, 1, 8, 1, 0, tzinfo=UTC),
        ZoneInfo("America/Sao_Paulo"),
    )
    assert stats.reference_date == "2025-01-07"
    assert stats.appointments_today == 1


def test_summarize_customers():
    appointments = [
        appointment("2025-01-02", AppointmentStatus.completed, "50", name="Ana", id="a"),
        appointment("2025-01-09", AppointmentStatus.completed, "70", name="Ana", id="b"),
        appointment("2025-01-20", AppointmentStatus.pending, "70", name="Ana", id="c"),
        appointment("2025-01-03", AppointmentStatus.cancelled, "30", name="bruno", id="d"),
    ]

    summaries = summarize_customers(appointments)

    assert [s.customer_name for s in summaries] == ["Ana", "bruno"]
    ana = summaries[0]
    assert ana.total_appointments == 3
    assert ana.total_spent == Decimal("120")
    assert ana.last_visit == "2025-01-09"
    assert summaries[1].total_spent == Decimal("0")
    assert summaries[1].last_visit is None


def test_reporting_recomputes_eagerly_on_lifecycle_changes():
    store = MemoryBookingStore()
    service = ManageServicesUseCase(catalog=store).create("store-1", name="Haircut", duration=30, price=Decimal("90"))
    lifecycle = AppointmentLifecycle(appointments=store, catalog=store)
    reference = datetime(2025, 1, 6, 12, 0, tzinfo=UTC)
    reporting = ReconciliationReporting(appointments=store, timezone=ZoneInfo("UTC"), clock=lambda: reference)
    lifecycle.subscribe(reporting.on_appointment_changed)

    created = lifecycle.create(AppointmentDraft("store-1", service.id, "Ana", "1", "2025-01-06", "09:00"))
    assert reporting.get_dashboard("store-1").appointments_today == 1
    assert reporting.get_dashboard("store-1").total_revenue == Decimal("0")

    lifecycle.complete(lifecycle.confirm(created))

    stats = reporting.get_dashboard("store-1")
    assert stats.total_revenue == Decimal("90")
    assert stats.completion_rate == 100.0
    assert reporting.get_customers("store-1")[0].total_spent == Decimal("90")


def test_reporting_for_store_without_appointments():
    reporting = ReconciliationReporting(
        appointments=MemoryBookingStore(),
        timezone=ZoneInfo("UTC"),
        clock=lambda: datetime(2025, 1, 6, tzinfo=UTC),
    )
    stats = reporting.get_dashboard("empty")
    assert stats.total_appointments == 0
    assert stats.completion_rate == 100.0
    assert stats.total_revenue == Decimal("0")
