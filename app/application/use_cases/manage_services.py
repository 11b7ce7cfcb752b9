from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any

from app.application.exceptions import NotFoundError
from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service import Service

UPDATABLE_FIELDS = ("name", "description", "duration", "price", "currency", "is_active")


class ManageServicesUseCase:
    def __init__(self, catalog: ServiceCatalogPort, default_currency: str = "BRL") -> None:
        self._catalog = catalog
        self._default_currency = default_currency
        self._logger = logging.getLogger(__name__)

    def create(
        self,
        store_id: str,
        name: str,
        duration: int,
        price: Decimal,
        description: str = "",
        currency: str | None = None,
    ) -> Service:
        service = Service(
            id=uuid.uuid4().hex,
            store_id=store_id,
            name=(name or "").strip(),
            description=description or "",
            duration=duration,
            price=Decimal(price),
            currency=currency or self._default_currency,
        )
        _validate(service)
        saved = self._catalog.save_service(service)
        self._logger.info("Service created", extra={"store_id": store_id, "service": saved.name})
        return saved

    def update(self, service_id: str, changes: dict[str, Any]) -> Service:
        """Apply only the whitelisted fields; everything else in changes is ignored."""
        service = self.get(service_id)
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS and value is not None}
        if "price" in allowed:
            allowed["price"] = Decimal(allowed["price"])
        if "name" in allowed:
            allowed["name"] = allowed["name"].strip()
        updated = replace(service, **allowed)
        _validate(updated)
        saved = self._catalog.save_service(updated)
        self._logger.info("Service updated", extra={"store_id": saved.store_id, "service": saved.name})
        return saved

    def deactivate(self, service_id: str) -> Service:
        return self.update(service_id, {"is_active": False})

    def get(self, service_id: str) -> Service:
        service = self._catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service {service_id} not found")
        return service

    def list_for_store(self, store_id: str, include_inactive: bool = False) -> list[Service]:
        return self._catalog.list_services(store_id, include_inactive=include_inactive)


def _validate(service: Service) -> None:
    if not service.name:
        raise ValueError("Service name is required")
    if service.duration < 0:
        raise ValueError("Service duration cannot be negative")
    if service.price < 0:
        raise ValueError("Service price cannot be negative")
