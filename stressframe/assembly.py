# global K and F assembly for a FrameModel

import logging
from typing import List, Tuple

import numpy as np
from joblib import Parallel, delayed

from .config import AnalysisSettings
from .elements import MemberElement, build_member_element
from .kernel.assemble import add_nodal_load, assemble_global_F, assemble_global_K
from .kernel.dof import DOFManager
from .kernel.geometry import member_geometry
from .model import FrameModel

logger = logging.getLogger(__name__)

DOF_PER_NODE = 6  # ux, uy, uz, rx, ry, rz


def user_member_loads(model: FrameModel) -> List[np.ndarray]:
    """Sum of the user's uniform loads per member, in local axes."""
    w = [np.zeros(3) for _ in model.members]
    for load in model.distributed_loads:
        vec = np.asarray(load.w, dtype=float)
        if load.frame == "global":
            member = model.members[load.member]
            geom = member_geometry(model.nodes[member.node_i].coords,
                                   model.nodes[member.node_j].coords)
            vec = geom.rotation @ vec
        w[load.member] = w[load.member] + vec
    return w


def build_elements(model: FrameModel, planar: bool, settings: AnalysisSettings) -> List[MemberElement]:
    """Build every member element; runs on joblib threads when n_jobs != 1."""
    w_user = user_member_loads(model)
    if settings.n_jobs == 1:
        return [build_member_element(m, model, planar, settings, w_user[m])
                for m in range(len(model.members))]
    return Parallel(n_jobs=settings.n_jobs, prefer="threads")(
        delayed(build_member_element)(m, model, planar, settings, w_user[m])
        for m in range(len(model.members))
    )


def assemble_system(model: FrameModel, elements: List[MemberElement],
                    dof: DOFManager = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Global stiffness K and load vector F.

    F collects the nodal loads, the self-weight nodal parts and the
    equivalent nodal loads (-T^T FEF) of every member load.
    """
    dof = dof or DOFManager(DOF_PER_NODE)
    ndof = dof.ndof(len(model.nodes))

    K = assemble_global_K(ndof, ((e.dof_map, e.k_global) for e in elements))
    F = assemble_global_F(ndof, ((e.dof_map, e.global_load()) for e in elements))

    for load in model.nodal_loads:
        add_nodal_load(F, load.node, tuple(load.force) + tuple(load.moment), dof.dof_per_node)
    for e in elements:
        for node_id, force in e.nodal_loads:
            add_nodal_load(F, node_id, force, dof.dof_per_node)

    return K, F
