# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Error Types
Absence of a match is never an error. These are reserved for inputs that
would corrupt confidence semantics or the global mapping if accepted.
"""

from __future__ import annotations


class InvalidConfidenceError(ValueError):
    """Raised when a score or confidence falls outside [0, 1]."""

    def __init__(self, value: float, where: str) -> None:
        self.value = value
        self.where = where
        super().__init__(f"{where}: confidence {value!r} outside [0, 1]")


class RosterValidationError(ValueError):
    """Raised when a batch of rosters cannot be reconciled as given."""


class ManualApprovalViolationError(RuntimeError):
    """Raised when an automated pairing would replace a manually approved one."""

    def __init__(self, catalog_a_id: str, approved_b_id: str, proposed_b_id: str) -> None:
        self.catalog_a_id = catalog_a_id
        self.approved_b_id = approved_b_id
        self.proposed_b_id = proposed_b_id
        super().__init__(
            f"{catalog_a_id} is manually approved as {approved_b_id}; "
            f"refusing automated replacement with {proposed_b_id}"
        )


def check_unit_interval(value: float, where: str) -> float:
    """Return value unchanged if it lies in [0, 1], else raise."""
    if not (0.0 <= value <= 1.0):
        raise InvalidConfidenceError(value, where)
    return value
