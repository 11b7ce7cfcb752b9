from fastapi import APIRouter, Depends

from app.api.v1.schemas import CustomerSummarySchema, DashboardSchema
from app.application.use_cases.reporting import ReconciliationReporting
from app.wiring.dependencies import get_reporting

router = APIRouter()


@router.get("/stores/{store_id}/dashboard", response_model=DashboardSchema)
def get_dashboard(store_id: str, reporting: ReconciliationReporting = Depends(get_reporting)):
    return DashboardSchema.from_entity(reporting.get_dashboard(store_id))


@router.get("/stores/{store_id}/customers", response_model=list[CustomerSummarySchema])
def list_customers(store_id: str, reporting: ReconciliationReporting = Depends(get_reporting)):
    return [CustomerSummarySchema.from_entity(c) for c in reporting.get_customers(store_id)]
