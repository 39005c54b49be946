"""
Bending reinforcement design for rectangular sections.

Reference: EN 1992-1-1:2004 Section 6.1, 9.2.1.1 (minimum steel),
8.2 (bar spacing). Lever arm and K' follow the UK simplified
rectangular stress block method.

The diameter search couples bar size with effective depth: a larger
tension bar lowers d, so every step re-derives K, z and the required
area. Tension and compression layers are searched with independent
states and a re-validation step when d moves under the compression layer.

Units: mm, N/mm², kN·m
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .catalog import BAR_CATALOG, DiameterCatalog
from .materials import PARAMETERS, MaterialProperties
from .section import DesignOptions, SectionGeometry
from .trace import FailureKind

logger = logging.getLogger(__name__)


class BarSelection(BaseModel):
    """
    A layer of longitudinal bars.

    The provided area is derived from diameter and count; a different
    layout is a new instance.

    Example:
        >>> BarSelection(diameter=16, count=3).area
        603.18...
    """
    model_config = ConfigDict(frozen=True)

    diameter: float = Field(..., gt=0, description="Bar diameter (mm)")
    count: int = Field(..., ge=0, description="Number of bars")

    @property
    def area(self) -> float:
        """Provided area n·π/4·φ² (mm²)."""
        return self.count * np.pi * 0.25 * self.diameter ** 2


@dataclass(frozen=True)
class FlexuralDemand:
    """Required reinforcement for one trial of effective depths."""
    M_Ed: float  # kN·m
    d: float  # mm
    d2: float  # mm
    K: float
    K_lim: float
    z: float  # mm
    As_req: float  # mm²
    Asc_req: float  # mm²
    As_min: float  # mm²
    concrete_failure: bool = False

    @property
    def compression_required(self) -> bool:
        return self.Asc_req > 0


def tension_depth(section: SectionGeometry, link_diameter: float, bar_diameter: float) -> float:
    """Effective depth d = h - c - φ_link - φ/2 (mm)."""
    return section.h - section.cover - link_diameter - bar_diameter / 2


def compression_depth(section: SectionGeometry, link_diameter: float, bar_diameter: float) -> float:
    """Depth to compression steel d2 = c + φ_link + φ2/2 (mm)."""
    return section.cover + link_diameter + bar_diameter / 2


def k_limit(d: float, material: MaterialProperties) -> float:
    """
    K' from the neutral axis limit with redistribution ratio δ.

    x_u = εcu3·d / (εcu3 + εyd), δ = k1 + k2·x_u/d ≤ 1, K' ≤ 0.168.
    """
    k1 = 0.4
    k2 = 0.6 + 0.0014 / (material.eps_cu2 / 1000)
    xu = material.eps_cu3 * d / (material.eps_cu3 + material.fyd / (material.Es / 1000))
    delta = min(k1 + k2 * xu / d, 1.0)
    return min(0.6 * delta - 0.18 * delta ** 2 - 0.21, PARAMETERS['k_lim'])


def minimum_area(b: float, d: float, material: MaterialProperties) -> float:
    """As,min = max(0.26·fctm·b·d/fyk, 0.0013·b·d), 9.2.1.1(1)."""
    return max(0.26 * material.fctm * b * d / material.fyk, 0.0013 * b * d)


def flexural_demand(
    M_Ed: float,
    b: float,
    d: float,
    d2: float,
    material: MaterialProperties
) -> FlexuralDemand:
    """
    Required tension and compression steel for a moment.

    Args:
        M_Ed: Design moment (kN·m, magnitude)
        b: Width (mm)
        d: Effective depth of tension steel (mm)
        d2: Depth to compression steel (mm)
        material: Resolved material properties

    Returns:
        FlexuralDemand; concrete_failure is set (with zero areas) when K
        exceeds the ceiling 1/(3.53·η) and no layout can work.
    """
    fck = material.fck
    fyd = material.fyd
    eta = material.strength_reduction
    M = M_Ed * 1e6  # N·mm

    K = M / (b * d ** 2 * fck)
    As_min = minimum_area(b, d, material)

    if K > 1 / (3.53 * eta):
        return FlexuralDemand(
            M_Ed=M_Ed, d=d, d2=d2, K=K, K_lim=PARAMETERS['k_lim'], z=0.0,
            As_req=0.0, Asc_req=0.0, As_min=As_min, concrete_failure=True
        )

    K_lim = k_limit(d, material)

    if K < K_lim:
        z = min((d / 2) * (1 + np.sqrt(1 - 3.53 * eta * K)), 0.95 * d)
        Asc = 0.0
        As = M / (fyd * z)
    else:
        z = (d / 2) * (1 + np.sqrt(1 - 3.53 * eta * K_lim))
        M_excess = b * d ** 2 * fck * (K - K_lim)
        # compression steel must sit above the tension steel
        Asc = M_excess / (fyd * (d - d2)) if d > d2 else float('inf')
        As = K_lim * fck * b * d ** 2 / (fyd * z) + Asc

    return FlexuralDemand(
        M_Ed=M_Ed, d=d, d2=d2, K=K, K_lim=K_lim, z=float(z),
        As_req=float(max(As, As_min)), Asc_req=float(Asc), As_min=As_min
    )


# ============================================================================
# SPACING FEASIBILITY
# ============================================================================

def governing_bar_spacing(diameter: float, min_spacing: float) -> float:
    """Minimum clear spacing: larger of the fixed minimum and min(φ, 25 mm)."""
    return max(min_spacing, min(25.0, diameter))


def clear_bar_spacing(
    count: int,
    diameter: float,
    cover: float,
    width: float,
    link_diameter: float
) -> float:
    """Clear gap between `count` bars in one layer (mm)."""
    if count < 2:
        raise ValueError("Clear spacing needs at least 2 bars")
    return (width - 2 * cover - 2 * link_diameter) / (count - 1) - diameter


def bars_for_area(
    As_req: float,
    diameter: float,
    min_spacing: float,
    cover: float,
    width: float,
    link_diameter: float
) -> int:
    """
    Smallest bar count (≥ 2) giving As_req in a single layer.

    Returns:
        Bar count, or 0 when clear spacing falls below the minimum before
        the area is reached (the diameter does not fit).
    """
    s_min = governing_bar_spacing(diameter, min_spacing)
    bar_area = np.pi * 0.25 * diameter ** 2
    clear_width = width - 2 * cover - 2 * link_diameter

    # beyond this count the clear spacing is negative
    max_count = max(2, int(clear_width // diameter) + 2)

    for count in range(2, max_count + 1):
        if clear_bar_spacing(count, diameter, cover, width, link_diameter) < s_min:
            return 0
        if count * bar_area >= As_req:
            return count
    return 0


# ============================================================================
# DIAMETER SEARCH
# ============================================================================

@dataclass(frozen=True)
class BarSearchState:
    """Position of one layer in the bar catalog."""
    layer: str  # "tension" or "compression"
    index: int

    def advance(self) -> 'BarSearchState':
        return replace(self, index=self.index + 1)


@dataclass(frozen=True)
class DiameterStep:
    """A diameter change taken during the search, with the demand it produced."""
    layer: str
    bars: BarSelection
    demand: FlexuralDemand


@dataclass(frozen=True)
class BendingDesign:
    """Outcome of the bending search."""
    demand: FlexuralDemand
    tension: Optional[BarSelection]
    compression: Optional[BarSelection]
    steps: Tuple[DiameterStep, ...] = ()
    failure: Optional[FailureKind] = None
    rho: float = 0.0
    revalidations: int = 0

    @property
    def passed(self) -> bool:
        return self.failure is None

    @property
    def rho_exceeded(self) -> bool:
        return self.rho > PARAMETERS['rho_warning']


def design_bending(
    M_Ed: float,
    section: SectionGeometry,
    material: MaterialProperties,
    options: DesignOptions,
    catalog: DiameterCatalog = BAR_CATALOG
) -> BendingDesign:
    """
    Find tension and compression bars for a moment.

    Both layers start at options.min_bar_diameter. Compression steel is
    sized at the current effective depth, then tension steel. If tension
    sizing moves d while compression steel is required, the compression
    search is re-validated from the smallest diameter. Restarts only follow
    a tension diameter step, so the loop is bounded by the catalog size.

    Args:
        M_Ed: Design moment (kN·m, magnitude)
        section: Section geometry
        material: Resolved materials
        options: Detailing options
        catalog: Bar diameter catalog

    Returns:
        BendingDesign with failure set on CONCRETE_CAPACITY_EXCEEDED or
        REINFORCEMENT_LAYOUT_INFEASIBLE
    """
    b = section.b
    link = options.link_diameter
    start = catalog.index(options.min_bar_diameter)

    tension = BarSearchState("tension", start)
    compression = BarSearchState("compression", start)
    steps: List[DiameterStep] = []
    revalidations = 0

    def demand_for(t: BarSearchState, c: BarSearchState) -> FlexuralDemand:
        return flexural_demand(
            M_Ed, b,
            tension_depth(section, link, catalog[t.index]),
            compression_depth(section, link, catalog[c.index]),
            material
        )

    def size(state: BarSearchState, area: float) -> BarSelection:
        diameter = catalog[state.index]
        count = bars_for_area(area, diameter, options.min_bar_spacing, section.cover, b, link)
        return BarSelection(diameter=diameter, count=count)

    def failed(kind: FailureKind, demand: FlexuralDemand) -> BendingDesign:
        logger.debug("Bending search failed: %s (K=%.4f)", kind.value, demand.K)
        return BendingDesign(
            demand=demand, tension=None, compression=None, steps=tuple(steps),
            failure=kind, revalidations=revalidations
        )

    demand = demand_for(tension, compression)
    for _ in range(len(catalog) + 1):
        demand = demand_for(tension, compression)
        if demand.concrete_failure:
            return failed(FailureKind.CONCRETE_CAPACITY_EXCEEDED, demand)

        compression_bars = size(compression, demand.Asc_req)
        while demand.compression_required and compression_bars.area < demand.Asc_req:
            if catalog.is_last(compression.index):
                return failed(FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE, demand)
            compression = compression.advance()
            demand = demand_for(tension, compression)
            compression_bars = size(compression, demand.Asc_req)
            steps.append(DiameterStep("compression", compression_bars, demand))
            logger.debug("Compression bars -> %s", compression_bars)

        sized_depth = demand.d
        tension_bars = size(tension, demand.As_req)
        while tension_bars.area < demand.As_req:
            if catalog.is_last(tension.index):
                return failed(FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE, demand)
            tension = tension.advance()
            demand = demand_for(tension, compression)
            if demand.concrete_failure:
                return failed(FailureKind.CONCRETE_CAPACITY_EXCEEDED, demand)
            tension_bars = size(tension, demand.As_req)
            steps.append(DiameterStep("tension", tension_bars, demand))
            logger.debug("Tension bars -> %s (d=%.1f)", tension_bars, demand.d)

        revalidate = demand.compression_required and demand.d != sized_depth
        if revalidate:
            compression = BarSearchState("compression", start)
            revalidations += 1
            logger.debug("Effective depth moved to %.1f mm; re-validating compression steel", demand.d)
            continue

        compression_final = compression_bars if demand.compression_required else None
        provided = tension_bars.area + (compression_final.area if compression_final else 0.0)
        return BendingDesign(
            demand=demand,
            tension=tension_bars,
            compression=compression_final,
            steps=tuple(steps),
            rho=provided / section.area,
            revalidations=revalidations,
        )

    return failed(FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE, demand)
