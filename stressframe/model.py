# stressframe/model.py
"""
MODEL: Nodes, members, end connections, loads
=============================================

PURPOSE:
--------
The immutable input description of one analysis run. Everything here is a
frozen dataclass; the engine never mutates the model and never caches it.

Identity is positional: node k is `model.nodes[k]`, member m is
`model.members[m]`. Members and loads reference nodes/members by index.

COORDINATES:
------------
Global Z is vertical (gravity acts along -Z). A model whose nodes share one
y coordinate and whose loads stay in the X-Z plane is analysed as a planar
frame (see kernel/geometry.py).

UNITS:
------
SI throughout (m, N, Pa, kg/m^3). The engineering-unit front end lives in
units.py.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from .errors import (
    DegenerateMemberError,
    InvalidPropertyError,
    InvalidReferenceError,
)
from .materials import StrengthSpec


Vector3 = Tuple[float, float, float]


class SupportKind(Enum):
    """Support condition at a node."""
    FREE = "free"
    PINNED = "pinned"
    FIXED = "fixed"
    ROLLER_X = "roller_x"
    ROLLER_Y = "roller_y"
    ROLLER_Z = "roller_z"

    @classmethod
    def parse(cls, text) -> "SupportKind":
        """
        Normalize a free-text support label.

        Accepts the English and Japanese labels used by the model editor.
        A bare 'roller' is a vertical roller (constrains uz only).
        """
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return _SUPPORT_ALIASES[key]
        except KeyError:
            raise InvalidPropertyError(f"unknown support kind {text!r}") from None


_SUPPORT_ALIASES = {
    "free": SupportKind.FREE, "f": SupportKind.FREE, "自由": SupportKind.FREE,
    "pin": SupportKind.PINNED, "pinned": SupportKind.PINNED, "hinge": SupportKind.PINNED,
    "p": SupportKind.PINNED, "ピン": SupportKind.PINNED,
    "fixed": SupportKind.FIXED, "fix": SupportKind.FIXED, "x": SupportKind.FIXED,
    "固定": SupportKind.FIXED,
    "roller": SupportKind.ROLLER_Z, "r": SupportKind.ROLLER_Z, "ローラー": SupportKind.ROLLER_Z,
}
for _axis in ("x", "y", "z"):
    _kind = SupportKind[f"ROLLER_{_axis.upper()}"]
    for _alias in (f"roller{_axis}", f"roller_{_axis}", f"roller_{_axis}_fixed"):
        _SUPPORT_ALIASES[_alias] = _kind


class ConnectionKind(Enum):
    RIGID = "rigid"
    PINNED = "pinned"
    SPRING = "spring"


@dataclass(frozen=True)
class EndConnection:
    """
    How a member end attaches to its node.

    Spring components: None (or inf) means rigid, 0 means fully released.
        kx : axial spring (N/m)
        ky : transverse spring, both local y and z (N/m)
        kr : bending rotational spring, both local y and z (N*m/rad)
    Torsion is always continuous.
    """
    kind: ConnectionKind = ConnectionKind.RIGID
    kx: Optional[float] = None
    ky: Optional[float] = None
    kr: Optional[float] = None

    @classmethod
    def rigid(cls) -> "EndConnection":
        return cls(ConnectionKind.RIGID)

    @classmethod
    def pinned(cls) -> "EndConnection":
        return cls(ConnectionKind.PINNED)

    @classmethod
    def spring(cls, kx: Optional[float] = None, ky: Optional[float] = None,
               kr: Optional[float] = None) -> "EndConnection":
        return cls(ConnectionKind.SPRING, kx=kx, ky=ky, kr=kr)

    @classmethod
    def parse(cls, text) -> "EndConnection":
        if isinstance(text, cls):
            return text
        key = str(text).strip().lower()
        if key in ("rigid", "r", "剛", "剛接合"):
            return cls.rigid()
        if key in ("pin", "pinned", "p", "hinge", "ピン"):
            return cls.pinned()
        if key in ("spring", "s", "バネ", "ばね"):
            return cls.spring()
        raise InvalidPropertyError(f"unknown end connection {text!r}")

    @property
    def buckling_kind(self) -> str:
        """'rigid' or 'pinned' for effective-length purposes (springs count as pinned)."""
        return "rigid" if self.kind is ConnectionKind.RIGID else "pinned"


@dataclass(frozen=True)
class SectionProperties:
    """
    Cross-section properties in SI units.

    area      A (m^2)
    i_strong  strong-axis second moment (m^4)
    i_weak    weak-axis second moment (m^4)
    j         St. Venant torsion constant (m^4)
    iw        warping constant (m^6), optional
    z_strong  strong-axis elastic section modulus (m^3)
    z_weak    weak-axis elastic section modulus (m^3)
    r_strong, r_weak  radii of gyration (m), derived as sqrt(I/A) if omitted
    """
    area: float
    i_strong: float
    i_weak: float
    j: float
    z_strong: float
    z_weak: float
    iw: Optional[float] = None
    r_strong: Optional[float] = None
    r_weak: Optional[float] = None

    def __post_init__(self):
        if self.area > 0:
            if self.r_strong is None and self.i_strong > 0:
                object.__setattr__(self, "r_strong", math.sqrt(self.i_strong / self.area))
            if self.r_weak is None and self.i_weak > 0:
                object.__setattr__(self, "r_weak", math.sqrt(self.i_weak / self.area))

    def validate(self, element: str) -> None:
        checks = {
            "area": self.area, "i_strong": self.i_strong, "i_weak": self.i_weak,
            "j": self.j, "z_strong": self.z_strong, "z_weak": self.z_weak,
            "r_strong": self.r_strong, "r_weak": self.r_weak,
        }
        for name, value in checks.items():
            if value is None or not math.isfinite(value) or value <= 0:
                raise InvalidPropertyError(f"{name} must be positive, got {value}", element)
        if self.iw is not None and (not math.isfinite(self.iw) or self.iw < 0):
            raise InvalidPropertyError(f"iw must be non-negative, got {self.iw}", element)


@dataclass(frozen=True)
class Node:
    x: float
    y: float
    z: float
    support: SupportKind = SupportKind.FREE
    prescribed: Optional[Vector3] = None            # (dx, dy, dz) m
    prescribed_rotation: Optional[Vector3] = None   # (rx, ry, rz) rad

    @property
    def coords(self) -> Vector3:
        return (self.x, self.y, self.z)

    def prescribed_values(self) -> Tuple[float, ...]:
        """Prescribed values for the 6 node DOFs [ux, uy, uz, rx, ry, rz]."""
        d = tuple(self.prescribed) if self.prescribed is not None else (0.0, 0.0, 0.0)
        r = tuple(self.prescribed_rotation) if self.prescribed_rotation is not None else (0.0, 0.0, 0.0)
        return tuple(float(v) for v in d + r)


@dataclass(frozen=True)
class Member:
    node_i: int
    node_j: int
    E: float
    strength: StrengthSpec
    section: SectionProperties
    axis: str = "strong"                    # active principal axis: strong | weak
    end_i: EndConnection = field(default_factory=EndConnection.rigid)
    end_j: EndConnection = field(default_factory=EndConnection.rigid)
    k_factor: Optional[float] = None        # effective-length override
    density: float = 0.0                    # kg/m^3
    section_name: Optional[str] = None      # descriptor for the section table
    lb_factor: float = 1.0                  # unbraced length / member length
    cb: float = 1.0                         # moment gradient factor

    @property
    def i_active(self) -> float:
        return self.section.i_strong if self.axis == "strong" else self.section.i_weak

    @property
    def i_other(self) -> float:
        return self.section.i_weak if self.axis == "strong" else self.section.i_strong

    @property
    def z_active(self) -> float:
        return self.section.z_strong if self.axis == "strong" else self.section.z_weak

    @property
    def z_other(self) -> float:
        return self.section.z_weak if self.axis == "strong" else self.section.z_strong


@dataclass(frozen=True)
class NodalLoad:
    node: int
    force: Vector3 = (0.0, 0.0, 0.0)        # Fx, Fy, Fz (N)
    moment: Vector3 = (0.0, 0.0, 0.0)       # Mx, My, Mz (N*m)


@dataclass(frozen=True)
class DistributedLoad:
    """Uniform load over the full member length (N/m)."""
    member: int
    w: Vector3 = (0.0, 0.0, 0.0)
    frame: str = "local"                    # local | global


@dataclass(frozen=True)
class FrameModel:
    nodes: Sequence[Node]
    members: Sequence[Member]
    nodal_loads: Sequence[NodalLoad] = ()
    distributed_loads: Sequence[DistributedLoad] = ()
    self_weight: bool = False

    def __post_init__(self):
        for name in ("nodes", "members", "nodal_loads", "distributed_loads"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def validate(self, length_tolerance: float = 1e-9) -> None:
        """
        Check references and properties; raise on the first violation.

        Raises
        ------
        InvalidReferenceError, DegenerateMemberError, InvalidPropertyError
        """
        n_nodes = len(self.nodes)

        for k, node in enumerate(self.nodes):
            if not all(math.isfinite(c) for c in node.coords):
                raise InvalidPropertyError("coordinates must be finite", f"node {k}")
            if not isinstance(node.support, SupportKind):
                raise InvalidPropertyError(f"unknown support {node.support!r}", f"node {k}")
            for values in (node.prescribed, node.prescribed_rotation):
                if values is not None and (len(values) != 3 or not all(math.isfinite(v) for v in values)):
                    raise InvalidPropertyError("prescribed values must be 3 finite numbers", f"node {k}")

        pairs = set()
        for m, member in enumerate(self.members):
            name = f"member {m}"
            for end in (member.node_i, member.node_j):
                if not 0 <= end < n_nodes:
                    raise InvalidReferenceError(f"node {end} does not exist", name)
            if member.node_i == member.node_j:
                raise InvalidReferenceError("node_i and node_j are the same node", name)
            pair = frozenset((member.node_i, member.node_j))
            if pair in pairs:
                raise InvalidReferenceError(
                    f"duplicate member between nodes {member.node_i} and {member.node_j}", name)
            pairs.add(pair)

            p_i = self.nodes[member.node_i].coords
            p_j = self.nodes[member.node_j].coords
            if math.dist(p_i, p_j) <= length_tolerance:
                raise DegenerateMemberError("member has zero length", name)

            if not (math.isfinite(member.E) and member.E > 0):
                raise InvalidPropertyError(f"E must be positive, got {member.E}", name)
            if not isinstance(member.strength, StrengthSpec):
                raise InvalidPropertyError("strength must be a strength specification", name)
            if member.axis not in ("strong", "weak"):
                raise InvalidPropertyError(f"axis must be 'strong' or 'weak', got {member.axis!r}", name)
            member.section.validate(name)
            if member.density < 0:
                raise InvalidPropertyError(f"density must be non-negative, got {member.density}", name)
            if member.k_factor is not None and member.k_factor <= 0:
                raise InvalidPropertyError(f"k_factor must be positive, got {member.k_factor}", name)
            if member.lb_factor <= 0 or member.cb <= 0:
                raise InvalidPropertyError("lb_factor and cb must be positive", name)
            for label, conn in (("end_i", member.end_i), ("end_j", member.end_j)):
                for k in (conn.kx, conn.ky, conn.kr):
                    if k is not None and (math.isnan(k) or k < 0):
                        raise InvalidPropertyError(f"{label} spring stiffness must be non-negative", name)

        for n, load in enumerate(self.nodal_loads):
            if not 0 <= load.node < n_nodes:
                raise InvalidReferenceError(f"node {load.node} does not exist", f"nodal load {n}")
        for n, load in enumerate(self.distributed_loads):
            if not 0 <= load.member < len(self.members):
                raise InvalidReferenceError(f"member {load.member} does not exist", f"distributed load {n}")
            if load.frame not in ("local", "global"):
                raise InvalidPropertyError(f"frame must be 'local' or 'global', got {load.frame!r}",
                                           f"distributed load {n}")
