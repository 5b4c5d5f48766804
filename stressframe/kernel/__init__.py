# stressframe/kernel - Frame analysis core
"""
KERNEL: THE NUMERICAL FOUNDATION
================================

Geometry, element stiffness, end-release condensation, transforms,
assembly and the constrained solve. Everything here works on plain numpy
arrays; the model-level orchestration lives in stressframe.assembly and
stressframe.analysis.
"""

from .dof import DOFManager
from .solve import solve_linear, constrained_dofs, diagnose_instability

__all__ = ['DOFManager', 'solve_linear', 'constrained_dofs', 'diagnose_instability']
