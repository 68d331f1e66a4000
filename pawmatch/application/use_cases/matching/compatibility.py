"""Pure compatibility rules between two pets."""

from __future__ import annotations

from dataclasses import dataclass

from pawmatch.domain.entities import Pet

REASON_MISSING_DATA = "missing data"
REASON_SPECIES_MISMATCH = "species mismatch"
REASON_MISSING_GENDER = "missing gender"
REASON_SAME_GENDER = "same gender"


@dataclass(frozen=True)
class CompatibilityResult:
    compatible: bool
    reason: str | None = None


def check_compatibility(pet_a: Pet | None, pet_b: Pet | None) -> CompatibilityResult:
    """Return whether ``pet_a`` and ``pet_b`` may be matched.

    Only species and gender are considered, and the rules are symmetric so the
    result does not depend on which side is asking.
    """

    if pet_a is None or pet_b is None:
        return CompatibilityResult(compatible=False, reason=REASON_MISSING_DATA)
    if pet_a.species != pet_b.species:
        return CompatibilityResult(compatible=False, reason=REASON_SPECIES_MISMATCH)
    if not pet_a.gender or not pet_b.gender:
        return CompatibilityResult(compatible=False, reason=REASON_MISSING_GENDER)
    if pet_a.gender == pet_b.gender:
        return CompatibilityResult(compatible=False, reason=REASON_SAME_GENDER)
    return CompatibilityResult(compatible=True)


__all__ = [
    "REASON_MISSING_DATA",
    "REASON_MISSING_GENDER",
    "REASON_SAME_GENDER",
    "REASON_SPECIES_MISMATCH",
    "CompatibilityResult",
    "check_compatibility",
]
