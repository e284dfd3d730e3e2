from __future__ import annotations

from abc import ABC, abstractmethod

from spinbook.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        """Get service catalog entry by service key."""
        raise NotImplementedError

    @abstractmethod
    def list_services(self) -> list[ServiceCatalogEntry]:
        """All bookable services, in display order."""
        raise NotImplementedError

    def display_names(self, service_keys: list[str] | tuple[str, ...]) -> list[str]:
        names: list[str] = []
        for key in service_keys:
            entry = self.get_service(key)
            names.append(entry.display_name if entry else key)
        return names
