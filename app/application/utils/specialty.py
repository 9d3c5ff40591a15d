from __future__ import annotations

from app.domain.entities.provider import Specialty

# Checked in order; first hit wins ("Wood cleaning" resolves to Cleaning).
SPECIALTY_KEYWORDS: tuple[tuple[Specialty, tuple[str, ...]], ...] = (
    (Specialty.CLEANING, ("clean",)),
    (Specialty.PLUMBING, ("leak", "plumb")),
    (Specialty.ELECTRICAL, ("volt", "electric")),
    (Specialty.CARPENTRY, ("wood",)),
    (Specialty.SECURITY, ("safe", "guard", "security")),
)


def resolve_specialty(service_text: str | None) -> str:
    """
    Map free-text service description to a specialty label.
    Unrecognized text is returned unchanged and acts as its own label.
    """
    text = service_text or ""
    lowered = text.lower()
    for specialty, keywords in SPECIALTY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return specialty.value
    return text
