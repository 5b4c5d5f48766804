# stressframe/checks - Member design checks
"""Allowable-stress section check, Euler buckling and lateral-torsional buckling."""

from .section import check_section
from .buckling import check_buckling, member_k_factor, member_slenderness_ratio, classify
from .ltb import check_ltb, elastic_ltb_moment

__all__ = [
    'check_section',
    'check_buckling',
    'member_k_factor',
    'member_slenderness_ratio',
    'classify',
    'check_ltb',
    'elastic_ltb_moment',
]
