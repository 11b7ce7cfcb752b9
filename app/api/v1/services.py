from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import ServiceCreateSchema, ServiceSchema, ServiceUpdateSchema
from app.application.exceptions import NotFoundError
from app.application.use_cases.manage_services import ManageServicesUseCase
from app.wiring.dependencies import get_manage_services_use_case

router = APIRouter()


@router.get("/stores/{store_id}/services", response_model=list[ServiceSchema])
def list_services(
    store_id: str,
    include_inactive: bool = False,
    uc: ManageServicesUseCase = Depends(get_manage_services_use_case),
):
    return [ServiceSchema.from_entity(s) for s in uc.list_for_store(store_id, include_inactive=include_inactive)]


@router.post("/stores/{store_id}/services", response_model=ServiceSchema, status_code=201)
def create_service(
    store_id: str,
    req: ServiceCreateSchema,
    uc: ManageServicesUseCase = Depends(get_manage_services_use_case),
):
    try:
        service = uc.create(
            store_id=store_id,
            name=req.name,
            description=req.description,
            duration=req.duration,
            price=req.price,
            currency=req.currency,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ServiceSchema.from_entity(service)


@router.put("/services/{service_id}", response_model=ServiceSchema)
def update_service(
    service_id: str,
    req: ServiceUpdateSchema,
    uc: ManageServicesUseCase = Depends(get_manage_services_use_case),
):
    try:
        service = uc.update(service_id, req.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ServiceSchema.from_entity(service)
