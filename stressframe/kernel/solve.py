# stressframe/kernel/solve.py
"""
CONSTRAINT SOLVER: Partitioned linear solve with prescribed displacements
=========================================================================

PURPOSE:
--------
Solve K D = F + R with D prescribed on the constrained set s:

    K_ff D_f = F_f - K_fs D_s          (LU with partial pivoting)
    R_s      = K_sf D_f + K_ss D_s - F_s

Excluded DOFs (no stiffness, no load) are held at zero and take no part.

INSTABILITY:
------------
A pivot below `pivot_tolerance x max|pivot|`, or a non-finite result, means
the free block is singular: the structure is a mechanism. The raised
StructuralInstabilityError carries readable causes from
`diagnose_instability` when the model is available.
"""

import logging
import warnings
from typing import List, Optional, Tuple

import numpy as np
import scipy.linalg

from ..errors import StructuralInstabilityError
from .assemble import mode_nodes, rotation_null_space
from .dof import PLANAR_FIXED_DOFS, DOFManager, support_dofs

logger = logging.getLogger(__name__)


def constrained_dofs(model, dof: DOFManager, planar: bool) -> Tuple[List[int], np.ndarray]:
    """
    Constrained DOF indices and the prescribed displacement vector.

    Constrained = support table of each node (planar or spatial)
                  + DOFs carrying a nonzero prescribed value
                  + uy, rx, rz of every node in planar models
    """
    ndof = dof.ndof(len(model.nodes))
    D = np.zeros(ndof, dtype=float)
    constrained = set()

    for k, node in enumerate(model.nodes):
        for local in support_dofs(node.support, planar):
            constrained.add(dof.idx(k, local))
        for local, value in enumerate(node.prescribed_values()):
            if value != 0.0:
                constrained.add(dof.idx(k, local))
                D[dof.idx(k, local)] = value
        if planar:
            for local in PLANAR_FIXED_DOFS:
                constrained.add(dof.idx(k, local))

    return sorted(constrained), D


def solve_linear(
    K: np.ndarray,
    F: np.ndarray,
    constrained: List[int],
    prescribed: Optional[np.ndarray] = None,
    excluded: Optional[List[int]] = None,
    pivot_tolerance: float = 1e-12,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Solve the partitioned system.

    Parameters
    ----------
    K : (ndof, ndof) array
    F : (ndof,) array
    constrained : list of int
        DOFs with known displacement (prescribed value, 0 by default)
    prescribed : (ndof,) array, optional
        Known displacements; only the constrained entries are read
    excluded : list of int, optional
        DOFs held at zero and left out of the solve
    pivot_tolerance : float
        Relative pivot size below which the free block counts as singular

    Returns
    -------
    D : (ndof,) displacements
    R : (ndof,) reactions (nonzero only on constrained DOFs)
    free : array of free DOF indices

    Raises
    ------
    StructuralInstabilityError
    """
    ndof = K.shape[0]
    s = np.array(sorted(set(constrained)), dtype=int)
    skip = set(s.tolist()) | set(excluded or [])
    free = np.array([i for i in range(ndof) if i not in skip], dtype=int)

    D = np.zeros(ndof, dtype=float)
    if prescribed is not None and len(s):
        D[s] = prescribed[s]

    if len(free) == 0:
        R = np.zeros(ndof, dtype=float)
        if len(s):
            R[s] = (K @ D - F)[s]
        return D, R, free

    Kff = K[np.ix_(free, free)]
    rhs = F[free] - K[np.ix_(free, s)] @ D[s] if len(s) else F[free].copy()

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", scipy.linalg.LinAlgWarning)
        lu, piv = scipy.linalg.lu_factor(Kff, check_finite=False)
    pivots = np.abs(np.diag(lu))
    largest = float(pivots.max()) if pivots.size else 0.0
    if largest == 0.0 or float(pivots.min()) < pivot_tolerance * largest:
        raise StructuralInstabilityError(
            f"singular stiffness (smallest pivot {pivots.min():.3e}, largest {largest:.3e})")

    Df = scipy.linalg.lu_solve((lu, piv), rhs, check_finite=False)
    if not np.all(np.isfinite(Df)):
        raise StructuralInstabilityError("non-finite displacements from the solve")
    D[free] = Df

    R = np.zeros(ndof, dtype=float)
    if len(s):
        R[s] = K[np.ix_(s, free)] @ Df + K[np.ix_(s, s)] @ D[s] - F[s]
    return D, R, free


def diagnose_instability(model, K: np.ndarray, free, dof: DOFManager,
                         planar: bool, tol: float = 1e-12,
                         F: Optional[np.ndarray] = None,
                         rotation_dofs: Optional[List[int]] = None) -> List[str]:
    """
    Readable guesses at why the free block is singular.

    Looks for unconnected nodes, isolated members, a model without enough
    supports, free DOFs whose stiffness diagonal is (near) zero and, given the
    load vector F, a moment on rotations (among `rotation_dofs`) that no
    member resists.
    """
    causes = []
    n_nodes = len(model.nodes)
    degree = [0] * n_nodes
    for member in model.members:
        degree[member.node_i] += 1
        degree[member.node_j] += 1

    for k, node in enumerate(model.nodes):
        if degree[k] == 0 and not support_dofs(node.support, planar):
            causes.append(f"node {k} is not connected to any member and has no support")

    for m, member in enumerate(model.members):
        ends = (member.node_i, member.node_j)
        if all(degree[n] == 1 for n in ends) and not any(
                support_dofs(model.nodes[n].support, planar) for n in ends):
            causes.append(f"member {m} is isolated (no other members, no supports)")

    translations = (0, 2) if planar else (0, 1, 2)
    for t in translations:
        if not any(t in support_dofs(node.support, planar) or node.prescribed_values()[t] != 0.0
                   for node in model.nodes):
            causes.append(f"no support restrains translation {'xyz'[t]}: rigid-body motion")

    diag = np.abs(np.diag(K))
    scale = float(diag.max()) if diag.size else 0.0
    weak = [int(i) for i in free if diag[i] <= tol * scale]
    if weak:
        shown = ", ".join(dof.describe(i) for i in weak[:10])
        more = f" (+{len(weak) - 10} more)" if len(weak) > 10 else ""
        causes.append(f"near-zero stiffness on free DOFs: {shown}{more}")

    if F is not None and rotation_dofs:
        _, loaded = rotation_null_space(K, rotation_dofs, F, tol)
        if loaded is not None:
            nodes = ", ".join(str(k) for k in mode_nodes(rotation_dofs, loaded, dof.dof_per_node))
            causes.append(f"moment on a rotation no member resists at nodes {nodes} "
                          "(pinned member ends only)")

    return causes
