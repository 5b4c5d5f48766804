# Member element build: geometry, stiffness, end releases, transform, fixed-end forces

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .config import AnalysisSettings
from .kernel.dof import DOFManager
from .kernel.elements import frame_local_stiffness, shear_parameter
from .kernel.geometry import member_geometry, primary_axis
from .kernel.loads import fixed_end_forces_uniform, self_weight_loads
from .kernel.releases import CondensedStiffness, condense, member_releases
from .kernel.transform import frame_transformation, transform_stiffness
from .model import ConnectionKind, FrameModel, Member

logger = logging.getLogger(__name__)


@dataclass
class MemberElement:
    """Everything the assembler, the force recoverer and the checks need for one member."""
    index: int
    member: Member
    length: float
    rotation: np.ndarray            # 3x3, rows local x, y, z
    T: np.ndarray                   # 12x12
    primary: int                    # local axis carrying the active inertia (1 = y, 2 = z)
    k_local: np.ndarray             # uncondensed local stiffness
    condensed: CondensedStiffness
    k_global: np.ndarray
    dof_map: List[int]
    w_local: np.ndarray             # uniform load in local axes (user + self-weight part)
    fef_full: np.ndarray            # fixed-end forces on the element ends (rigid-rigid)
    fef: np.ndarray                 # fixed-end forces on the node DOFs
    nodal_loads: List[Tuple[int, np.ndarray]] = field(default_factory=list)  # (node, global force)

    @property
    def name(self) -> str:
        return f"member {self.index}"

    def global_load(self) -> np.ndarray:
        """Equivalent nodal loads of the member load in global axes."""
        return -self.T.T @ self.fef


def member_stiffness(member: Member, L: float, primary: int, planar: bool,
                     settings: AnalysisSettings) -> np.ndarray:
    """Local 12x12 stiffness with the active inertia on the primary bending axis."""
    sec = member.section
    E = member.E
    G = settings.shear_modulus(E)
    if primary == 1:
        Iy, Iz = member.i_active, member.i_other
    else:
        Iy, Iz = member.i_other, member.i_active

    phi_y = phi_z = 0.0
    if planar:
        if primary == 1:
            phi_y = shear_parameter(E, Iy, G, sec.area, L, settings.shear_factor)
        else:
            phi_z = shear_parameter(E, Iz, G, sec.area, L, settings.shear_factor)
    elif settings.spatial_shear_deformation:
        phi_y = shear_parameter(E, Iy, G, sec.area, L, settings.shear_factor)
        phi_z = shear_parameter(E, Iz, G, sec.area, L, settings.shear_factor)

    return frame_local_stiffness(E, G, sec.area, Iy, Iz, sec.j, L, phi_y, phi_z)


def build_member_element(
    index: int,
    model: FrameModel,
    planar: bool,
    settings: AnalysisSettings,
    w_user_local=None,
    dof_per_node: int = 6,
) -> MemberElement:
    """
    Build one member: geometry, condensed stiffness, merged member load.

    `w_user_local` is the sum of the user's uniform loads on this member,
    already in local axes.
    """
    member = model.members[index]
    name = f"member {index}"
    node_i = model.nodes[member.node_i]
    node_j = model.nodes[member.node_j]

    geom = member_geometry(node_i.coords, node_j.coords, settings.length_tolerance, name)
    L, R = geom.length, geom.rotation
    primary = primary_axis(R, planar)

    k_local = member_stiffness(member, L, primary, planar, settings)
    releases = member_releases(member.end_i, member.end_j)
    condensed = condense(k_local, releases, settings.release_stabilizer,
                         settings.condensation_cond_limit, name)
    T = frame_transformation(R)

    w_local = np.zeros(3) if w_user_local is None else np.asarray(w_user_local, dtype=float).copy()
    nodal = []
    if model.self_weight and member.density > 0:
        q = member.density * member.section.area * settings.gravity
        w_sw, parts = self_weight_loads(geom, q, node_i.z, node_j.z,
                                        settings.inclination_tolerance_deg)
        w_local = w_local + w_sw
        for end, force in parts:
            nodal.append((member.node_i if end == "i" else member.node_j, force))

    fef_full = fixed_end_forces_uniform(L, w_local)
    kinds = (member.end_i.kind, member.end_j.kind)
    if ConnectionKind.SPRING in kinds:
        fef = condensed.condense_load(fef_full)
    elif ConnectionKind.PINNED in kinds:
        fef = fixed_end_forces_uniform(L, w_local, member.end_i.buckling_kind,
                                       member.end_j.buckling_kind)
    else:
        fef = fef_full.copy()

    logger.debug("%s: L=%.4f m, primary=%s, releases=%d, fallback=%s",
                 name, L, "y" if primary == 1 else "z", len(releases), condensed.fallback)

    return MemberElement(
        index=index,
        member=member,
        length=L,
        rotation=R,
        T=T,
        primary=primary,
        k_local=k_local,
        condensed=condensed,
        k_global=transform_stiffness(condensed.k, T),
        dof_map=DOFManager(dof_per_node).element_dof_map([member.node_i, member.node_j]),
        w_local=w_local,
        fef_full=fef_full,
        fef=fef,
        nodal_loads=nodal,
    )
