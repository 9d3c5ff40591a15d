from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Specialty(str, Enum):
    CLEANING = "Cleaning"
    PLUMBING = "Plumbing"
    ELECTRICAL = "Electrical"
    CARPENTRY = "Carpentry"
    SECURITY = "Security"


@dataclass(frozen=True)
class Provider:
    id: str
    name: str
    specialty: Specialty
    is_available: bool = True
