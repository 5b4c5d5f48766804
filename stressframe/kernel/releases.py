# stressframe/kernel/releases.py
"""
RELEASE CONDENSER: Pinned and spring member ends
================================================

PURPOSE:
--------
A released member-end component is modelled as an internal element-end DOF
tied to its node DOF by a spring k_r (k_r = 0 for a pin). With node DOFs x
(12) and internal DOFs y (one per released component), the augmented
element stiffness is

    [ K_xx  K_xy ] [x]
    [ K_yx  K_yy ] [y]

    K_xx = k[non-released block] + diag(k_r) at the released positions
    K_xy = k[non-released, released] ; -diag(k_r) at the released rows
    K_yy = k[released, released] + diag(k_r)

and the internal DOFs are condensed out:

    K_c = K_xx - K_xy K_yy^-1 K_yx
    f_c = f_x  - K_xy K_yy^-1 f_y          (fixed-end forces)
    y   = -K_yy^-1 (K_yx x + f_y)          (back-substitution)

Which components release:

    pinned   ry, rz (k = 0)
    spring   u (kx), v and w (ky), ry and rz (kr), for every finite component
    rigid    nothing

Torsion (rx) is never released.

FALLBACK:
---------
When K_yy is singular (or its condition number exceeds the limit), the
released rows/columns are zeroed with a small diagonal stabilizer instead,
`fallback` is set and ReleaseCondensationFallback is emitted.
"""

import logging
import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..errors import ReleaseCondensationFallback
from ..model import ConnectionKind, EndConnection

logger = logging.getLogger(__name__)

U, V, W, RX, RY, RZ = range(6)


def end_releases(connection: EndConnection) -> List[Tuple[int, float]]:
    """Released local components (0..5) of one end with their spring stiffness."""
    if connection.kind is ConnectionKind.PINNED:
        return [(RY, 0.0), (RZ, 0.0)]
    if connection.kind is ConnectionKind.SPRING:
        springs = [(U, connection.kx), (V, connection.ky), (W, connection.ky),
                   (RY, connection.kr), (RZ, connection.kr)]
        return [(comp, float(k)) for comp, k in springs if k is not None and math.isfinite(k)]
    return []


def member_releases(end_i: EndConnection, end_j: EndConnection) -> List[Tuple[int, float]]:
    """Released element DOFs (0..11) of a member with their spring stiffness."""
    return end_releases(end_i) + [(comp + 6, k) for comp, k in end_releases(end_j)]


@dataclass
class CondensedStiffness:
    """Condensed 12x12 element stiffness and the data to undo the condensation."""
    k: np.ndarray
    released: Tuple[int, ...] = ()
    k_rr_inv: Optional[np.ndarray] = None   # K_yy^-1
    k_ra: Optional[np.ndarray] = None       # K_yx (n_r x 12)
    k_ar: Optional[np.ndarray] = None       # K_xy (12 x n_r)
    fallback: bool = False

    @property
    def condensed(self) -> bool:
        return self.k_rr_inv is not None

    def condense_load(self, f: np.ndarray) -> np.ndarray:
        """Condense an element-end fixed-end vector onto the node DOFs."""
        f = np.asarray(f, dtype=float)
        if not self.released:
            return f.copy()
        rel = list(self.released)
        f_x = f.copy()
        f_x[rel] = 0.0
        if not self.condensed:
            return f_x
        return f_x - self.k_ar @ (self.k_rr_inv @ f[rel])

    def released_displacements(self, d_active: np.ndarray, f: Optional[np.ndarray] = None) -> np.ndarray:
        """Displacements of the internal (released) end DOFs."""
        if not self.condensed:
            return np.zeros(len(self.released))
        rhs = self.k_ra @ np.asarray(d_active, dtype=float)
        if f is not None:
            rhs = rhs + np.asarray(f, dtype=float)[list(self.released)]
        return -self.k_rr_inv @ rhs

    def end_displacements(self, d_active: np.ndarray, f: Optional[np.ndarray] = None) -> np.ndarray:
        """Element-end displacement vector: node values with released entries replaced."""
        e = np.array(d_active, dtype=float)
        if self.released:
            e[list(self.released)] = self.released_displacements(d_active, f)
        return e


def condense(
    k_local: np.ndarray,
    releases: List[Tuple[int, float]],
    stabilizer: float = 1e-9,
    cond_limit: float = 1e12,
    element: str = None,
) -> CondensedStiffness:
    """
    Statically condense released end DOFs out of a local stiffness.

    Parameters
    ----------
    k_local : (12, 12) array
    releases : list of (dof, spring stiffness)
    stabilizer : float
        Diagonal term (relative to the largest diagonal of k_local) put on
        released DOFs when the condensation falls back.
    cond_limit : float
        Largest acceptable condition number of K_yy.
    """
    if not releases:
        return CondensedStiffness(k=k_local.copy())

    rel = [dof for dof, _ in releases]
    springs = np.array([k for _, k in releases], dtype=float)
    active = [i for i in range(12) if i not in rel]

    k_yy = k_local[np.ix_(rel, rel)] + np.diag(springs)
    k_xy = np.zeros((12, len(rel)))
    k_xy[active, :] = k_local[np.ix_(active, rel)]
    k_xy[rel, :] = -np.diag(springs)

    k_xx = np.zeros((12, 12))
    k_xx[np.ix_(active, active)] = k_local[np.ix_(active, active)]
    k_xx[rel, rel] = springs

    try:
        cond = np.linalg.cond(k_yy)
        if not np.isfinite(cond) or cond > cond_limit:
            raise np.linalg.LinAlgError(f"condition number {cond:.3e}")
        k_yy_inv = np.linalg.inv(k_yy)
    except np.linalg.LinAlgError as exc:
        return _fallback(k_local, tuple(rel), stabilizer, element, exc)

    k_c = k_xx - k_xy @ k_yy_inv @ k_xy.T
    k_c = 0.5 * (k_c + k_c.T)
    return CondensedStiffness(
        k=k_c,
        released=tuple(rel),
        k_rr_inv=k_yy_inv,
        k_ra=k_xy.T.copy(),
        k_ar=k_xy,
    )


def _fallback(k_local, rel, stabilizer, element, exc) -> CondensedStiffness:
    message = f"release condensation failed ({exc}); released DOFs zeroed"
    if element:
        message = f"{element}: {message}"
    logger.warning(message)
    warnings.warn(message, ReleaseCondensationFallback, stacklevel=3)

    k = k_local.copy()
    eps = stabilizer * float(np.max(np.abs(np.diag(k_local))))
    idx = list(rel)
    k[idx, :] = 0.0
    k[:, idx] = 0.0
    k[idx, idx] = eps
    return CondensedStiffness(k=k, released=rel, fallback=True)
