from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        """Get service by id."""
        raise NotImplementedError

    @abstractmethod
    def list_services(self, store_id: str, include_inactive: bool = False) -> list[Service]:
        """List services of a store, active ones only unless asked otherwise."""
        raise NotImplementedError

    @abstractmethod
    def save_service(self, service: Service) -> Service:
        """Insert or replace a service by id."""
        raise NotImplementedError
