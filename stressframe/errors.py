# stressframe/errors.py
"""
ERRORS: What can go wrong in an analysis run
============================================

Input-validation errors abort the run immediately and name the model element
that violated an invariant. Per-member data gaps in secondary checks (LTB)
degrade only that member's row and never reach the caller as an exception.

    StressFrameError
    ├── InvalidReferenceError       member/load points at a missing node/member
    ├── DegenerateMemberError       zero-length member
    ├── InvalidPropertyError        non-positive section/material property
    ├── StructuralInstabilityError  free stiffness block cannot be solved
    └── MissingSectionDataError     LTB data gap (caught per member)

    ReleaseCondensationFallback     warning, not fatal
"""

from typing import List, Optional


class StressFrameError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, element: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.element = element

    def __str__(self) -> str:
        if self.element:
            return f"{self.element}: {self.message}"
        return self.message


class InvalidReferenceError(StressFrameError):
    """A member or load references a missing or duplicate node/member."""


class DegenerateMemberError(StressFrameError):
    """A member has (numerically) zero length."""


class InvalidPropertyError(StressFrameError):
    """A section, material or support property is out of range."""


class StructuralInstabilityError(StressFrameError):
    """
    Raised when the free-DOF stiffness block cannot be solved.

    `causes` carries the human-readable findings of the supplementary
    diagnostics (unconnected nodes, isolated members, ...).
    """

    def __init__(self, message: str, causes: Optional[List[str]] = None,
                 element: Optional[str] = None):
        super().__init__(message, element)
        self.causes = list(causes or [])

    def __str__(self) -> str:
        base = super().__str__()
        if not self.causes:
            return base
        return base + "\n  - " + "\n  - ".join(self.causes)


class MissingSectionDataError(StressFrameError):
    """Section data needed for lateral-torsional buckling is unavailable."""


class ReleaseCondensationFallback(UserWarning):
    """Static condensation of released DOFs fell back to approximate zeroing."""
