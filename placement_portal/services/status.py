"""
Application statuses and the forward transition lattice.

Companies may currently overwrite any status with any other. The lattice
below is only enforced when STRICT_STATUS_TRANSITIONS is switched on.
"""

import os

from placement_portal.exceptions import ValidationError
from placement_portal.models.application import APPLICATION_STATUSES

FORWARD_TRANSITIONS = {
    "applied": frozenset({"shortlisted", "rejected", "hired"}),
    "shortlisted": frozenset({"rejected", "hired"}),
    "rejected": frozenset(),
    "hired": frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, nxt in FORWARD_TRANSITIONS.items() if not nxt)


def strict_transitions_enabled() -> bool:
    return os.getenv("STRICT_STATUS_TRANSITIONS", "false").lower() in ("1", "true", "yes")


def is_forward_transition(old_status: str, new_status: str) -> bool:
    return new_status in FORWARD_TRANSITIONS.get(old_status, frozenset())


def validate_transition(old_status: str, new_status: str, strict: bool = False) -> None:
    """Raise ValidationError if new_status may not be written over old_status."""
    if new_status not in APPLICATION_STATUSES:
        raise ValidationError(
            f"Invalid status '{new_status}'. Allowed: {', '.join(APPLICATION_STATUSES)}"
        )

    if strict and not is_forward_transition(old_status, new_status):
        raise ValidationError(f"Cannot change status from '{old_status}' to '{new_status}'")
