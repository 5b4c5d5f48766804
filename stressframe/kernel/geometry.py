# stressframe/kernel/geometry.py
"""
GEOMETRY RESOLVER: Member length, local axes, planarity
=======================================================

LOCAL AXES:
-----------
    x = unit vector from node i to node j
    ref = global Z, or global Y when x is (nearly) vertical
    y = normalize(ref × x)
    z = x × y

The rotation matrix R has rows x, y, z, so that v_local = R @ v_global.

    Horizontal member along +X:  y = +Y, z = +Z
    Vertical member along +Z:    y = +X, z = +Y

PLANAR MODELS:
--------------
A model is planar when all nodes share one y coordinate and nothing pushes
it out of the X-Z plane. Planar models bend about the global Y direction;
the out-of-plane DOFs (uy, rx, rz) are fixed at zero.
"""

import math
from dataclasses import dataclass

import numpy as np

from ..errors import DegenerateMemberError


VERTICAL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class MemberGeometry:
    length: float
    rotation: np.ndarray    # 3x3, rows = local x, y, z in global terms

    @property
    def axis(self) -> np.ndarray:
        return self.rotation[0]


def member_geometry(p_i, p_j, tol: float = 1e-9, element: str = None) -> MemberGeometry:
    """
    Length and local triad of the member from p_i to p_j.

    Raises DegenerateMemberError when the length is at or below `tol`.
    """
    d = np.asarray(p_j, dtype=float) - np.asarray(p_i, dtype=float)
    L = float(np.linalg.norm(d))
    if L <= tol:
        raise DegenerateMemberError(f"member has zero length ({L:.3e} m)", element)

    x = d / L
    if math.hypot(x[0], x[1]) < VERTICAL_TOLERANCE:
        ref = np.array([0.0, 1.0, 0.0])
    else:
        ref = np.array([0.0, 0.0, 1.0])

    y = np.cross(ref, x)
    y /= np.linalg.norm(y)
    z = np.cross(x, y)
    z /= np.linalg.norm(z)

    return MemberGeometry(length=L, rotation=np.vstack([x, y, z]))


def inclination_deg(rotation: np.ndarray) -> float:
    """Angle between the member axis and the horizontal plane (0..90 deg)."""
    return math.degrees(math.asin(min(1.0, abs(float(rotation[0][2])))))


def primary_axis(rotation: np.ndarray, planar: bool) -> int:
    """
    Local axis index (1 = y, 2 = z) carrying the member's active inertia.

    Planar models: the local axis most parallel to global Y (the plane
    normal). Spatial models: local y.
    """
    if not planar:
        return 1
    return 1 if abs(rotation[1][1]) >= abs(rotation[2][1]) else 2


def detect_planar(model, tol: float = 1e-9) -> bool:
    """
    True when the model lives in one X-Z plane and is loaded in that plane.

    Out-of-plane terms: Fy, Mx, Mz nodal loads; distributed wy (global
    terms); prescribed dy, rx, rz.
    """
    if not model.nodes:
        return False
    y0 = model.nodes[0].y
    if any(abs(node.y - y0) > tol for node in model.nodes):
        return False

    for node in model.nodes:
        pres = node.prescribed_values()
        if abs(pres[1]) > 0 or abs(pres[3]) > 0 or abs(pres[5]) > 0:
            return False

    for load in model.nodal_loads:
        if abs(load.force[1]) > 0 or abs(load.moment[0]) > 0 or abs(load.moment[2]) > 0:
            return False

    for load in model.distributed_loads:
        w = np.asarray(load.w, dtype=float)
        if load.frame == "local":
            member = model.members[load.member]
            geom = member_geometry(model.nodes[member.node_i].coords,
                                   model.nodes[member.node_j].coords)
            w = geom.rotation.T @ w
        if abs(w[1]) > tol * max(1.0, float(np.abs(w).max())):
            return False

    return True
