from __future__ import annotations

from app.application.exceptions import ProviderNotFoundError
from app.application.ports.provider_directory import ProviderDirectoryPort
from app.domain.entities.provider import Provider, Specialty

DEFAULT_PROVIDERS: tuple[Provider, ...] = (
    Provider(id="p1", name="Mario Rossi", specialty=Specialty.PLUMBING, is_available=True),
    Provider(id="p2", name="Sasha Volt", specialty=Specialty.ELECTRICAL, is_available=True),
    Provider(id="p3", name="Clean Team 5", specialty=Specialty.CLEANING, is_available=True),
)


class StaticProviderDirectory(ProviderDirectoryPort):
    def __init__(self, providers: list[Provider] | tuple[Provider, ...] | None = None) -> None:
        self._providers: tuple[Provider, ...] = tuple(DEFAULT_PROVIDERS if providers is None else providers)

    def list_providers(self) -> list[Provider]:
        return list(self._providers)

    def get(self, provider_id: str) -> Provider:
        for provider in self._providers:
            if provider.id == provider_id:
                return provider
        raise ProviderNotFoundError(provider_id)

    def find_by_name(self, name: str) -> Provider | None:
        normalized = (name or "").strip().lower()
        if not normalized:
            return None
        return next((p for p in self._providers if p.name.lower() == normalized), None)

    def find_by_specialty(self, specialty: str) -> Provider | None:
        wanted = (specialty or "").lower()
        return next(
            (p for p in self._providers if p.is_available and p.specialty.value.lower() == wanted),
            None,
        )

    def find_any_available(self) -> Provider | None:
        return next((p for p in self._providers if p.is_available), None)

    def first(self) -> Provider | None:
        return self._providers[0] if self._providers else None
