# stressframe/results.py
"""
RESULTS: Flat, ordered result records
=====================================

One record per node / supported node / member, in the caller's order. Each
record is a plain dataclass so it serializes to JSON (api/main.py) and to a
pandas DataFrame row (AnalysisResult.to_dataframes) without translation.

SIGN CONVENTIONS:
-----------------
MemberForceRecord stores the end forces acting ON the member in local axes
(the raw stiffness-method output). Internal resultants use tension-positive
axial force; see post.internal_forces.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Dict, List, Optional

import numpy as np
import pandas as pd


@dataclass
class DisplacementRecord:
    node: int
    ux: float
    uy: float
    uz: float
    rx: float
    ry: float
    rz: float


@dataclass
class ReactionRecord:
    node: int
    Rx: float
    Ry: float
    Rz: float
    Mx: float
    My: float
    Mz: float


@dataclass
class MemberForceRecord:
    """End forces on the member, local axes: [N Vy Vz T My Mz] at i and j."""
    member: int
    N_i: float
    Vy_i: float
    Vz_i: float
    T_i: float
    My_i: float
    Mz_i: float
    N_j: float
    Vy_j: float
    Vz_j: float
    T_j: float
    My_j: float
    Mz_j: float

    @classmethod
    def from_vector(cls, member: int, f) -> "MemberForceRecord":
        values = [float(v) for v in f]
        return cls(member, *values)

    def as_vector(self) -> np.ndarray:
        return np.array([getattr(self, f.name) for f in fields(self)[1:]], dtype=float)

    @property
    def axial_force_i(self) -> float:
        """Internal axial force at end i (tension +)."""
        return -self.N_i

    @property
    def axial_force_j(self) -> float:
        """Internal axial force at end j (tension +)."""
        return self.N_j

    @property
    def axial_force(self) -> float:
        """Mean internal axial force over the member (tension +)."""
        return 0.5 * (self.axial_force_i + self.axial_force_j)


@dataclass
class EndDisplacementRecord:
    """
    Member-end displacements in local axes, [ux uy uz rx ry rz] at i and j.

    Released components (pin rotations, spring deformations) are the
    back-substituted values, so they can differ from the node displacement.
    """
    member: int
    ux_i: float
    uy_i: float
    uz_i: float
    rx_i: float
    ry_i: float
    rz_i: float
    ux_j: float
    uy_j: float
    uz_j: float
    rx_j: float
    ry_j: float
    rz_j: float

    @classmethod
    def from_vector(cls, member: int, d) -> "EndDisplacementRecord":
        return cls(member, *(float(v) for v in d))


@dataclass
class InternalForces:
    """Internal resultants at evenly spaced stations along one member."""
    member: int
    x: np.ndarray
    N: np.ndarray
    Vy: np.ndarray
    Vz: np.ndarray
    T: np.ndarray
    My: np.ndarray
    Mz: np.ndarray


@dataclass
class SectionCheckRecord:
    member: int
    status: str                 # OK | NG
    ratio: float                # governing ratio
    axial_ratio: float
    bending_ratio_primary: float
    bending_ratio_secondary: float
    combined_ratio_primary: float
    combined_ratio_secondary: float
    shear_ratio: float
    station: float              # x/L of the governing station
    slenderness: float
    ft: float
    fc: float
    fb: float
    fs: float


@dataclass
class BucklingRecord:
    member: int
    status: str                 # danger | caution | safe | no buckling
    axial_force: float          # tension +
    critical_load: float
    safety_factor: float
    k_factor: float
    effective_length: float
    slenderness: float
    critical_stress: float


@dataclass
class LTBRecord:
    member: int
    status: str                 # OK | NG | not applicable | data missing
    unbraced_length: Optional[float] = None
    mcr: Optional[float] = None
    fb_ltb: Optional[float] = None
    bending_stress: Optional[float] = None
    ratio: Optional[float] = None
    message: str = ""


@dataclass
class AnalysisResult:
    planar: bool
    displacements: List[DisplacementRecord]
    reactions: List[ReactionRecord]
    member_forces: List[MemberForceRecord]
    internal_forces: List[InternalForces]
    section_checks: List[SectionCheckRecord]
    buckling: List[BucklingRecord]
    ltb: List[LTBRecord]
    warnings: List[str] = field(default_factory=list)
    excluded_dofs: List[int] = field(default_factory=list)
    end_displacements: List[EndDisplacementRecord] = field(default_factory=list)

    @property
    def max_ratio(self) -> float:
        ratios = [r.ratio for r in self.section_checks]
        return max(ratios) if ratios else 0.0

    @property
    def all_ok(self) -> bool:
        return all(r.status == "OK" for r in self.section_checks)

    def to_dataframes(self) -> Dict[str, pd.DataFrame]:
        """
        Result tables keyed displacements, reactions, member_forces,
        section_checks, buckling, ltb, end_displacements.
        """
        tables = {
            "displacements": (self.displacements, DisplacementRecord),
            "reactions": (self.reactions, ReactionRecord),
            "member_forces": (self.member_forces, MemberForceRecord),
            "section_checks": (self.section_checks, SectionCheckRecord),
            "buckling": (self.buckling, BucklingRecord),
            "ltb": (self.ltb, LTBRecord),
            "end_displacements": (self.end_displacements, EndDisplacementRecord),
        }
        frames = {}
        for key, (records, record_type) in tables.items():
            columns = [f.name for f in fields(record_type)]
            frames[key] = pd.DataFrame([asdict(r) for r in records], columns=columns)
        return frames
