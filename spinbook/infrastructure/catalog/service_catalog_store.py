from __future__ import annotations

from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.domain.entities.service_catalog import ServiceCatalogEntry

STUDIO_SERVICES: dict[str, ServiceCatalogEntry] = {
    "produccion": ServiceCatalogEntry(
        service_key="produccion",
        display_name="Producción Musical",
        description="Music production",
    ),
    "grabacion": ServiceCatalogEntry(
        service_key="grabacion",
        display_name="Grabación de Voces/Instrumentos",
        description="Vocal and instrument recording",
    ),
    "mixmastering": ServiceCatalogEntry(
        service_key="mixmastering",
        display_name="Mix/Mastering",
        description="Mixing and mastering",
    ),
}


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceCatalogEntry] | None = None) -> None:
        self._catalog = catalog or STUDIO_SERVICES

    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        # Keys are matched exactly; the client sends them verbatim.
        return self._catalog.get(service_key)

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self._catalog.values())
