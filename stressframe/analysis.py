# stressframe/analysis.py
"""
PIPELINE: One static analysis run
=================================

    validate -> detect planar -> build members -> assemble K, F
    -> constraints -> exclude unused DOFs -> hold unused rotations -> solve
    -> end forces -> internal forces -> section / buckling / LTB checks

Everything is computed fresh per call; nothing is cached between runs.

USAGE:
------
    from stressframe import run_analysis
    result = run_analysis(model)
    tables = result.to_dataframes()
"""

import logging
from typing import Optional

import numpy as np
from joblib import Parallel, delayed

from .assembly import DOF_PER_NODE, assemble_system, build_elements
from .checks import check_buckling, check_ltb, check_section
from .config import AnalysisSettings
from .elements import MemberElement
from .errors import StructuralInstabilityError
from .kernel.assemble import active_dof_mask, hold_null_modes, mode_nodes, rotation_null_space
from .kernel.dof import RX, RY, RZ, DOFManager, support_dofs
from .kernel.releases import member_releases
from .kernel.geometry import detect_planar
from .kernel.solve import constrained_dofs, diagnose_instability, solve_linear
from .model import FrameModel
from .post import displacement_records, internal_forces, member_end_forces, reaction_records
from .results import AnalysisResult, EndDisplacementRecord

logger = logging.getLogger(__name__)

ZERO_ROW_TOLERANCE = 1e-14


def _unconnected_free_nodes(model: FrameModel, planar: bool):
    connected = set()
    for member in model.members:
        connected.update((member.node_i, member.node_j))
    return [k for k, node in enumerate(model.nodes)
            if k not in connected and not support_dofs(node.support, planar)]


def _released_rotation_nodes(model: FrameModel):
    """Nodes with at least one member end whose rotation is released."""
    nodes = set()
    for member in model.members:
        for comp, _ in member_releases(member.end_i, member.end_j):
            if comp % 6 >= RX:
                nodes.add(member.node_i if comp < 6 else member.node_j)
    return sorted(nodes)


def _unused_rotation_dofs(model: FrameModel, solved: np.ndarray, dof: DOFManager):
    return [dof.idx(k, r) for k in _released_rotation_nodes(model)
            for r in (RX, RY, RZ) if solved[dof.idx(k, r)]]


def _member_results(element: MemberElement, D: np.ndarray, planar: bool, settings: AnalysisSettings):
    record, d_end = member_end_forces(element, D)
    forces = internal_forces(record, element.w_local, element.length, settings.n_stations)
    return (
        record,
        forces,
        check_section(element, forces, planar, settings),
        check_buckling(element, record),
        check_ltb(element, forces, planar, settings),
        EndDisplacementRecord.from_vector(element.index, d_end),
    )


def run_analysis(model: FrameModel, settings: Optional[AnalysisSettings] = None) -> AnalysisResult:
    """
    Run a linear static analysis and the member checks.

    Parameters
    ----------
    model : FrameModel
    settings : AnalysisSettings, optional
        Defaults to a fresh AnalysisSettings()

    Returns
    -------
    AnalysisResult

    Raises
    ------
    InvalidReferenceError, DegenerateMemberError, InvalidPropertyError
        The model is malformed
    StructuralInstabilityError
        The structure is a mechanism (causes attached)
    """
    settings = settings or AnalysisSettings()
    model.validate(settings.length_tolerance)

    planar = settings.detect_planar and detect_planar(model, settings.planar_tolerance)
    dof = DOFManager(DOF_PER_NODE)

    orphans = _unconnected_free_nodes(model, planar)
    if orphans:
        raise StructuralInstabilityError(
            "unsupported nodes without members",
            causes=[f"node {k} is not connected to any member and has no support" for k in orphans],
        )

    elements = build_elements(model, planar, settings)
    K, F = assemble_system(model, elements, dof)

    constrained, prescribed = constrained_dofs(model, dof, planar)
    mask = active_dof_mask(K, F, constrained, ZERO_ROW_TOLERANCE)
    excluded = [int(i) for i in np.flatnonzero(~mask)]
    if excluded:
        logger.warning("%d DOFs without stiffness or load held at zero: %s%s",
                       len(excluded), ", ".join(dof.describe(i) for i in excluded[:6]),
                       " ..." if len(excluded) > 6 else "")

    solved = mask.copy()
    solved[constrained] = False
    rot_dofs = _unused_rotation_dofs(model, solved, dof)
    held, _ = rotation_null_space(K, rot_dofs, F, settings.pivot_tolerance)
    K_solve = K
    if held.shape[1]:
        logger.warning("%d rotation modes without stiffness or moment held at zero at nodes %s "
                       "(pinned member ends)", held.shape[1],
                       mode_nodes(rot_dofs, np.abs(held).sum(axis=1), DOF_PER_NODE))
        K_solve = hold_null_modes(K, rot_dofs, held, float(np.max(np.abs(np.diag(K)))))

    try:
        D, R, free = solve_linear(K_solve, F, constrained, prescribed, excluded, settings.pivot_tolerance)
    except StructuralInstabilityError as exc:
        free = [i for i in range(len(F)) if i not in set(constrained) | set(excluded)]
        causes = diagnose_instability(model, K, free, dof, planar, F=F, rotation_dofs=rot_dofs)
        raise StructuralInstabilityError(exc.message, causes=causes) from exc

    logger.info("analysis: %d nodes, %d members, planar=%s, %d free DOFs",
                len(model.nodes), len(model.members), planar, len(free))

    def reported_dofs(k):
        node = model.nodes[k]
        local = set(support_dofs(node.support, planar))
        local.update(a for a, v in enumerate(node.prescribed_values()) if v != 0.0)
        return sorted(local)

    if settings.n_jobs == 1:
        per_member = [_member_results(e, D, planar, settings) for e in elements]
    else:
        per_member = Parallel(n_jobs=settings.n_jobs, prefer="threads")(
            delayed(_member_results)(e, D, planar, settings) for e in elements
        )

    warnings_out = [
        f"{e.name}: end-release condensation fell back to zeroing the released DOFs"
        for e in elements if e.condensed.fallback
    ]

    return AnalysisResult(
        planar=planar,
        displacements=displacement_records(len(model.nodes), D, DOF_PER_NODE),
        reactions=reaction_records(model, R, reported_dofs, DOF_PER_NODE),
        member_forces=[r[0] for r in per_member],
        internal_forces=[r[1] for r in per_member],
        section_checks=[r[2] for r in per_member],
        buckling=[r[3] for r in per_member],
        ltb=[r[4] for r in per_member],
        warnings=warnings_out,
        excluded_dofs=excluded,
        end_displacements=[r[5] for r in per_member],
    )
