# stressframe/kernel/assemble.py
"""
ASSEMBLY: Global Matrix Assembly
================================

PURPOSE:
--------
Scatter-add of element contributions into the global stiffness matrix K
and load vector F. Assembly doesn't care how an element was built (rigid,
pinned, spring-condensed); it needs only

- the total number of DOFs
- for each element: its DOF map and its matrix/vector in global axes

ALGORITHM:
----------
    K = zeros(ndof x ndof)
    for each element:
        K[dof_map, dof_map] += ke

UNUSED DOFS:
------------
A DOF with an all-zero stiffness row and no load (e.g. the rotation of a
node where every member end is pinned) is excluded from the solve and held
at zero; no reaction is reported for it.

A pinned end keeps torsion, so on a skew member the unused rotations of a
node mix into several global rows that are not zero, and a pinned bar can
spin about its own axis together with its end nodes. Those directions are
found from the eigenvectors of the rotation block of the nodes with released
member ends, and held at zero by adding stiffness along them. K is positive
semi-definite, so a null direction of that block is a null vector of K and
takes no part in the rest of the solution.
"""

from typing import Iterable, List, Optional, Tuple

import numpy as np


def assemble_global_K(
    ndof: int,
    contributions: Iterable[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble the global stiffness matrix from element contributions.

    Parameters
    ----------
    ndof : int
        Total number of DOFs (6 x n_nodes)
    contributions : iterable of (dof_map, ke)
        dof_map: 12 global DOF indices of the member
        ke: (12, 12) member stiffness in global axes

    Returns
    -------
    np.ndarray
        Symmetric (ndof, ndof) stiffness matrix
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        n_element_dofs = len(dof_map)
        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"
        idx = np.asarray(dof_map, dtype=int)
        K[np.ix_(idx, idx)] += ke

    return K


def assemble_global_F(
    ndof: int,
    contributions: Iterable[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble the global load vector from element contributions
    (equivalent nodal loads of member loads, in global axes).
    """
    F = np.zeros(ndof, dtype=float)

    for dof_map, fe in contributions:
        n_element_dofs = len(dof_map)
        assert fe.shape == (n_element_dofs,), \
            f"Element fe shape {fe.shape} doesn't match dof_map length {n_element_dofs}"
        np.add.at(F, np.asarray(dof_map, dtype=int), fe)

    return F


def add_nodal_load(
    F: np.ndarray,
    node_id: int,
    load_vector,
    dof_per_node: int = 6
) -> None:
    """
    Add a nodal load [Fx, Fy, Fz, Mx, My, Mz] (or a leading part of it)
    to the global load vector, in place.
    """
    base_dof = dof_per_node * node_id
    for i, val in enumerate(load_vector):
        F[base_dof + i] += val


def active_dof_mask(K: np.ndarray, F: np.ndarray, constrained: Iterable[int],
                    tol: float = 0.0) -> np.ndarray:
    """
    Boolean mask of DOFs that take part in the solve.

    A DOF is excluded when its stiffness row is all (near) zero, it carries
    no load and it is not constrained.
    """
    scale = float(np.max(np.abs(K))) if K.size else 0.0
    empty_row = np.all(np.abs(K) <= tol * scale, axis=1)
    unloaded = F == 0.0
    mask = ~(empty_row & unloaded)
    mask[list(constrained)] = True
    return mask


def rotation_null_space(
    K: np.ndarray,
    dofs: List[int],
    F: np.ndarray,
    tol: float = 1e-12
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Rotations over `dofs` that no member resists.

    Parameters
    ----------
    K : np.ndarray
        Assembled stiffness matrix
    dofs : list of int
        Free rotational DOFs to search (several nodes may share a mode, e.g.
        pinned bars spinning about their own axes together with their nodes)
    F : np.ndarray
        Global load vector
    tol : float
        Eigenvalues below tol x max|diag K| count as zero

    Returns
    -------
    held : (len(dofs), m) array
        Orthonormal directions with no stiffness and no applied moment
    loaded : (len(dofs),) array or None
        Unit direction with no stiffness that does carry a moment
    """
    idx = np.asarray(dofs, dtype=int)
    empty = np.zeros((len(idx), 0))
    if not len(idx):
        return empty, None

    diag = np.abs(np.diag(K))
    scale = float(diag.max()) if diag.size else 0.0
    values, vectors = np.linalg.eigh(K[np.ix_(idx, idx)])
    null = vectors[:, values <= tol * scale]
    if null.shape[1] == 0:
        return empty, None

    load_scale = float(np.max(np.abs(F))) if F.size else 0.0
    p = null.T @ F[idx]
    if np.linalg.norm(p) <= tol * load_scale:
        return null, None

    # split off the one direction the load acts along
    u = p / np.linalg.norm(p)
    _, _, vh = np.linalg.svd(u.reshape(1, -1))
    return null @ vh[1:].T, null @ u


def hold_null_modes(K: np.ndarray, dofs: List[int], basis: np.ndarray,
                    stiffness: float) -> np.ndarray:
    """Copy of K with `stiffness` added along each basis column, so those modes solve to zero."""
    K_held = K.copy()
    idx = np.asarray(dofs, dtype=int)
    K_held[np.ix_(idx, idx)] += stiffness * (basis @ basis.T)
    return K_held


def mode_nodes(dofs: List[int], v: np.ndarray, dof_per_node: int = 6,
               tol: float = 1e-6) -> List[int]:
    """Nodes taking part in a mode given over global DOFs."""
    nodes = {d // dof_per_node for d, c in zip(dofs, v) if abs(c) > tol}
    return sorted(nodes)
