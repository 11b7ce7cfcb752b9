from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DashboardStats:
    store_id: str
    reference_date: str
    appointments_today: int
    pending_count: int
    completed_count: int
    total_appointments: int
    total_revenue: Decimal
    revenue_week: Decimal
    revenue_month: Decimal
    completion_rate: float
    unique_customers: int


@dataclass(frozen=True)
class CustomerSummary:
    # Keyed by customer name; there is no customer identity on every appointment
    customer_name: str
    customer_phone: str
    total_appointments: int
    total_spent: Decimal
    last_visit: str | None
