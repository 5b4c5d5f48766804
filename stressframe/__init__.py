# stressframe - Linear frame analysis with allowable-stress checks
"""
STRESSFRAME: Static Frame Analysis and Member Checks
====================================================

This package provides:
- linear-elastic analysis of 3D (and planar) beam-column frames
- pinned and spring member ends by static condensation
- allowable-stress section check, Euler buckling, lateral-torsional buckling

ARCHITECTURE:
-------------
    kernel/         Numerical core (geometry, stiffness, releases, assembly, solve)
    model.py        Nodes, members, end connections, loads
    materials.py    Strength variants and allowable stresses
    sections.py     Section property calculators and descriptor table
    units.py        Engineering units -> SI
    elements.py     Per-member build (stiffness, transform, fixed-end forces)
    assembly.py     Model-level K and F
    post.py         End forces and internal force sampling
    checks/         Section, buckling and LTB checks
    analysis.py     run_analysis pipeline
"""

from .analysis import run_analysis
from .config import AnalysisSettings
from .errors import (
    DegenerateMemberError,
    InvalidPropertyError,
    InvalidReferenceError,
    MissingSectionDataError,
    ReleaseCondensationFallback,
    StressFrameError,
    StructuralInstabilityError,
)
from .materials import (
    AluminumLike,
    LoadDuration,
    StainlessLike,
    SteelLike,
    WoodBaseStrengths,
    WoodLike,
)
from .model import (
    DistributedLoad,
    EndConnection,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    SectionProperties,
    SupportKind,
)
from .results import AnalysisResult

__version__ = "0.1.0"

__all__ = [
    'run_analysis', 'AnalysisSettings', 'AnalysisResult',
    'FrameModel', 'Node', 'Member', 'SectionProperties', 'EndConnection', 'SupportKind',
    'NodalLoad', 'DistributedLoad',
    'SteelLike', 'StainlessLike', 'AluminumLike', 'WoodLike', 'WoodBaseStrengths', 'LoadDuration',
    'StressFrameError', 'InvalidReferenceError', 'DegenerateMemberError', 'InvalidPropertyError',
    'StructuralInstabilityError', 'MissingSectionDataError', 'ReleaseCondensationFallback',
]
