from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.provider import Provider


class ProviderDirectoryPort(ABC):
    @abstractmethod
    def list_providers(self) -> list[Provider]:
        """All providers in fixed directory order."""
        raise NotImplementedError

    @abstractmethod
    def get(self, provider_id: str) -> Provider:
        """Get provider by id. Raises ProviderNotFoundError if unknown."""
        raise NotImplementedError

    @abstractmethod
    def find_by_name(self, name: str) -> Provider | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_specialty(self, specialty: str) -> Provider | None:
        """First available provider whose specialty matches (case-insensitive)."""
        raise NotImplementedError

    @abstractmethod
    def find_any_available(self) -> Provider | None:
        """First available provider in directory order."""
        raise NotImplementedError

    @abstractmethod
    def first(self) -> Provider | None:
        """First provider in directory order, regardless of availability."""
        raise NotImplementedError
