# stressframe/config.py
"""
Analysis configuration and defaults.
"""

from dataclasses import dataclass

from .errors import InvalidPropertyError
from .materials import LoadDuration


@dataclass
class AnalysisSettings:
    """Tolerances and physical constants for one analysis run."""

    # Load-duration term used by the allowable-stress checks
    duration: LoadDuration = LoadDuration.LONG

    # Material constants for shear deformation and torsion
    poisson: float = 0.3
    shear_factor: float = 1.5          # kappa, A_s = A / kappa
    gravity: float = 9.80665           # m/s^2

    # Section check sampling
    n_stations: int = 21

    # Geometry
    planar_tolerance: float = 1e-9     # m
    length_tolerance: float = 1e-9     # m
    inclination_tolerance_deg: float = 5.0
    detect_planar: bool = True

    # Solver
    pivot_tolerance: float = 1e-12     # relative to the largest pivot
    release_stabilizer: float = 1e-9
    condensation_cond_limit: float = 1e12

    # Element formulation: spatial members use Euler-Bernoulli unless set
    spatial_shear_deformation: bool = False

    # Per-member work (element builds, checks); the scatter-add stays serial
    n_jobs: int = 1

    def __post_init__(self):
        if isinstance(self.duration, str):
            self.duration = LoadDuration.parse(self.duration)
        if not 0.0 <= self.poisson < 0.5:
            raise InvalidPropertyError(f"poisson must lie in [0, 0.5), got {self.poisson}")
        if self.shear_factor <= 0:
            raise InvalidPropertyError(f"shear_factor must be positive, got {self.shear_factor}")
        if self.gravity <= 0:
            raise InvalidPropertyError(f"gravity must be positive, got {self.gravity}")
        if self.n_stations < 2:
            raise InvalidPropertyError(f"n_stations must be at least 2, got {self.n_stations}")
        if self.n_jobs == 0:
            raise InvalidPropertyError("n_jobs must be non-zero (use -1 for all cores)")

    def shear_modulus(self, E: float) -> float:
        """G = E / (2(1 + nu))."""
        return E / (2.0 * (1.0 + self.poisson))
