# api/main.py
"""
FastAPI backend for StressFrame - exposes the analysis engine as a REST API.
"""

import logging
import math
from dataclasses import asdict
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from stressframe import __version__
from stressframe import units
from stressframe.analysis import run_analysis
from stressframe.config import AnalysisSettings
from stressframe.errors import StressFrameError
from stressframe.materials import (
    AluminumLike,
    StainlessLike,
    SteelLike,
    WoodBaseStrengths,
    WoodLike,
)
from stressframe.model import (
    DistributedLoad,
    EndConnection,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    SectionProperties,
    SupportKind,
)
from stressframe.sections import lookup_section

logger = logging.getLogger(__name__)


app = FastAPI(
    title="StressFrame API",
    description="Linear frame analysis with allowable-stress checks",
    version=__version__,
)

# CORS for the model editor
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class NodeIn(BaseModel):
    """Node position (m) and support."""
    x: float
    y: float = 0.0
    z: float
    support: str = Field("free", description="free, pinned, fixed, roller, roller_x, ...")
    prescribed: Optional[List[float]] = Field(None, min_length=3, max_length=3,
                                              description="dx, dy, dz (m, or mm in engineering units)")
    prescribed_rotation: Optional[List[float]] = Field(None, min_length=3, max_length=3,
                                                       description="rx, ry, rz (rad)")


class SectionIn(BaseModel):
    """Section properties (SI, or cm-based table units in engineering units)."""
    area: float
    i_strong: float
    i_weak: float
    j: float
    z_strong: float
    z_weak: float
    iw: Optional[float] = None
    r_strong: Optional[float] = None
    r_weak: Optional[float] = None


class StrengthIn(BaseModel):
    kind: Literal["steel", "stainless", "aluminum", "wood"] = "steel"
    F: Optional[float] = Field(None, description="Design strength (Pa, or N/mm² in engineering units)")
    preset: Optional[str] = Field(None, description="Wood species preset")
    Fc: Optional[float] = None
    Ft: Optional[float] = None
    Fb: Optional[float] = None
    Fs: Optional[float] = None


class EndIn(BaseModel):
    kind: str = "rigid"
    kx: Optional[float] = None
    ky: Optional[float] = None
    kr: Optional[float] = None


class MemberIn(BaseModel):
    node_i: int
    node_j: int
    E: float = Field(..., description="Young's modulus (Pa, or N/mm² in engineering units)")
    strength: StrengthIn = Field(default_factory=StrengthIn)
    section: Optional[SectionIn] = None
    section_name: Optional[str] = Field(None, description="Descriptor, e.g. H-300x150x6.5x9")
    axis: Literal["strong", "weak"] = "strong"
    end_i: EndIn = Field(default_factory=EndIn)
    end_j: EndIn = Field(default_factory=EndIn)
    k_factor: Optional[float] = None
    density: float = 0.0
    lb_factor: float = 1.0
    cb: float = 1.0


class NodalLoadIn(BaseModel):
    node: int
    force: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0], min_length=3, max_length=3)
    moment: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0], min_length=3, max_length=3)


class DistributedLoadIn(BaseModel):
    member: int
    w: List[float] = Field(..., min_length=3, max_length=3)
    frame: Literal["local", "global"] = "local"


class AnalyzeRequest(BaseModel):
    """Complete model for one analysis run."""
    nodes: List[NodeIn]
    members: List[MemberIn]
    nodal_loads: List[NodalLoadIn] = Field(default_factory=list)
    distributed_loads: List[DistributedLoadIn] = Field(default_factory=list)
    self_weight: bool = False
    duration: Literal["long", "short"] = "long"
    units: Literal["si", "engineering"] = "si"


class AnalyzeResponse(BaseModel):
    planar: bool
    warnings: List[str]
    displacements: List[Dict[str, Any]]
    reactions: List[Dict[str, Any]]
    member_forces: List[Dict[str, Any]]
    section_checks: List[Dict[str, Any]]
    buckling: List[Dict[str, Any]]
    ltb: List[Dict[str, Any]]
    end_displacements: List[Dict[str, Any]]


# =============================================================================
# Request -> Model
# =============================================================================

def _strength(spec: StrengthIn, engineering: bool):
    stress = units.n_per_mm2 if engineering else float
    if spec.kind == "wood":
        if spec.preset:
            return WoodLike(preset=spec.preset)
        base = [spec.Fc, spec.Ft, spec.Fb, spec.Fs]
        if any(v is None for v in base):
            raise StressFrameError("wood strength needs a preset or Fc, Ft, Fb, Fs")
        return WoodLike(custom=WoodBaseStrengths(*(stress(v) for v in base)))
    if spec.F is None:
        raise StressFrameError(f"{spec.kind} strength needs F")
    variant = {"steel": SteelLike, "stainless": StainlessLike, "aluminum": AluminumLike}[spec.kind]
    return variant(stress(spec.F))


def _section(member: MemberIn, engineering: bool, index: int) -> SectionProperties:
    if member.section is None:
        if not member.section_name:
            raise StressFrameError("needs section or section_name", f"member {index}")
        return lookup_section(member.section_name)
    s = member.section
    if engineering:
        return units.section_from_cm(s.area, s.i_strong, s.i_weak, s.j, s.z_strong, s.z_weak,
                                     s.iw, s.r_strong, s.r_weak)
    return SectionProperties(**s.model_dump())


def _end(end: EndIn, engineering: bool) -> EndConnection:
    if end.kind.strip().lower() in ("spring", "s", "バネ", "ばね"):
        if engineering:
            return EndConnection.spring(
                units.optional(units.kn_per_mm, end.kx),
                units.optional(units.kn_per_mm, end.ky),
                units.optional(units.kn_mm_per_rad, end.kr),
            )
        return EndConnection.spring(end.kx, end.ky, end.kr)
    return EndConnection.parse(end.kind)


def build_model(request: AnalyzeRequest) -> FrameModel:
    """Translate the request into an engine FrameModel (SI units)."""
    eng = request.units == "engineering"
    length = (lambda v: v / 1000.0) if eng else float      # prescribed mm -> m
    force = units.kn if eng else float
    moment = units.kn if eng else float                     # kN*m -> N*m
    line = units.kn_per_m if eng else float
    modulus = units.n_per_mm2 if eng else float

    nodes = [
        Node(
            x=n.x, y=n.y, z=n.z,
            support=SupportKind.parse(n.support),
            prescribed=tuple(length(v) for v in n.prescribed) if n.prescribed else None,
            prescribed_rotation=tuple(n.prescribed_rotation) if n.prescribed_rotation else None,
        )
        for n in request.nodes
    ]
    members = [
        Member(
            node_i=m.node_i,
            node_j=m.node_j,
            E=modulus(m.E),
            strength=_strength(m.strength, eng),
            section=_section(m, eng, k),
            axis=m.axis,
            end_i=_end(m.end_i, eng),
            end_j=_end(m.end_j, eng),
            k_factor=m.k_factor,
            density=m.density,
            section_name=m.section_name,
            lb_factor=m.lb_factor,
            cb=m.cb,
        )
        for k, m in enumerate(request.members)
    ]
    nodal_loads = [
        NodalLoad(ld.node, tuple(force(v) for v in ld.force), tuple(moment(v) for v in ld.moment))
        for ld in request.nodal_loads
    ]
    distributed = [
        DistributedLoad(ld.member, tuple(line(v) for v in ld.w), ld.frame)
        for ld in request.distributed_loads
    ]
    return FrameModel(nodes, members, nodal_loads, distributed, request.self_weight)


def _clean(record) -> Dict[str, Any]:
    """Dataclass record -> JSON-safe dict (non-finite floats become None)."""
    out = {}
    for key, value in asdict(record).items():
        if isinstance(value, float) and not math.isfinite(value):
            value = None
        out[key] = value
    return out


# =============================================================================
# API Endpoints
# =============================================================================

@app.exception_handler(StressFrameError)
async def engine_error_handler(request, exc: StressFrameError):
    return JSONResponse(
        status_code=422,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "element": exc.element,
            "causes": getattr(exc, "causes", []),
        },
    )


@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "StressFrame API"}


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest):
    """Run one linear static analysis with the member checks."""
    model = build_model(request)
    result = run_analysis(model, AnalysisSettings(duration=request.duration))
    logger.info("analyzed %d members, max ratio %.3f", len(model.members), result.max_ratio)
    return AnalyzeResponse(
        planar=result.planar,
        warnings=result.warnings,
        displacements=[_clean(r) for r in result.displacements],
        reactions=[_clean(r) for r in result.reactions],
        member_forces=[_clean(r) for r in result.member_forces],
        section_checks=[_clean(r) for r in result.section_checks],
        buckling=[_clean(r) for r in result.buckling],
        ltb=[_clean(r) for r in result.ltb],
        end_displacements=[_clean(r) for r in result.end_displacements],
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
