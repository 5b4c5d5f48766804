# stressframe/kernel/dof.py
"""
DOF MANAGER: Degree of Freedom Indexing and Support Tables
==========================================================

PURPOSE:
--------
Maps (node_id, local_dof) to global DOF indices. Every node carries 6 DOFs:

    0 = ux, 1 = uy, 2 = uz, 3 = rx, 4 = ry, 5 = rz

Planar models use the same numbering; their out-of-plane DOFs are simply
fixed (see PLANAR_FIXED_DOFS), so one formulation serves both.

SUPPORT TABLES:
---------------
    kind       spatial (6-DOF)       planar (X-Z plane)
    free       -                     -
    pinned     ux, uy, uz            ux, uz
    fixed      all six               ux, uz, ry
    roller_x   ux                    ux
    roller_y   uy                    -
    roller_z   uz                    uz

USAGE:
------
    dof = DOFManager()
    dof.idx(node_id=2, local_dof=4)     # -> 16 (ry of node 2)
    dof.element_dof_map([0, 3])         # -> 12 indices for a member
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..model import SupportKind


DOF_NAMES = ("ux", "uy", "uz", "rx", "ry", "rz")

UX, UY, UZ, RX, RY, RZ = range(6)

SPATIAL_SUPPORT_DOFS: Dict[SupportKind, Tuple[int, ...]] = {
    SupportKind.FREE: (),
    SupportKind.PINNED: (UX, UY, UZ),
    SupportKind.FIXED: (UX, UY, UZ, RX, RY, RZ),
    SupportKind.ROLLER_X: (UX,),
    SupportKind.ROLLER_Y: (UY,),
    SupportKind.ROLLER_Z: (UZ,),
}

PLANAR_SUPPORT_DOFS: Dict[SupportKind, Tuple[int, ...]] = {
    SupportKind.FREE: (),
    SupportKind.PINNED: (UX, UZ),
    SupportKind.FIXED: (UX, UZ, RY),
    SupportKind.ROLLER_X: (UX,),
    SupportKind.ROLLER_Y: (),
    SupportKind.ROLLER_Z: (UZ,),
}

# Removed from the solve in planar models
PLANAR_FIXED_DOFS = (UY, RX, RZ)


def support_dofs(kind: SupportKind, planar: bool) -> Tuple[int, ...]:
    """Local DOFs constrained by a support kind."""
    table = PLANAR_SUPPORT_DOFS if planar else SPATIAL_SUPPORT_DOFS
    return table[kind]


@dataclass
class DOFManager:
    """
    Degree-of-freedom indexing for a 6-DOF-per-node frame.

    >>> dof = DOFManager()
    >>> dof.idx(1, 0)
    6
    >>> dof.ndof(4)
    24
    """
    dof_per_node: int = 6

    def idx(self, node_id: int, local_dof: int) -> int:
        """Global DOF index for a node's local DOF."""
        return self.dof_per_node * node_id + local_dof

    def ndof(self, n_nodes: int) -> int:
        """Total DOFs for a system with n_nodes."""
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        """All global DOF indices of one node."""
        base = self.dof_per_node * node_id
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Flattened DOF map of an element connecting `node_ids`.

        >>> DOFManager().element_dof_map([0, 2])[:7]
        [0, 1, 2, 3, 4, 5, 12]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result

    def describe(self, global_dof: int) -> str:
        """'node 3 uz' style label for diagnostics."""
        node_id, local = divmod(global_dof, self.dof_per_node)
        return f"node {node_id} {DOF_NAMES[local]}"
