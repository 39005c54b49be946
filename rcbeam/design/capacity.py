"""
Shear and torsion capacity of rectangular sections.

Reference: EN 1992-1-1:2004 Section 6.2 (shear), 6.3 (torsion)

The strut angle θ is searched upwards from 22.5° until the combined
crushing check V_Ed/V_Rd,max + T_Ed/T_Rd,max < 1 (6.29) holds, or 45° is
passed. The concrete-only resistances then decide whether additional
longitudinal torsion steel is needed.

Units: mm, N/mm², kN, kN·m
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .materials import PARAMETERS, MaterialProperties
from .section import LoadDemand, SectionGeometry
from .trace import FailureKind

logger = logging.getLogger(__name__)

THETA_MIN = np.pi / 8  # 22.5°
THETA_MAX = np.pi / 4  # 45°


@dataclass(frozen=True)
class TorsionSection:
    """Thin-walled section properties for torsion (6.3.2)."""
    area: float  # A (mm²)
    perimeter: float  # u (mm)
    t_eff: float  # mm
    A_k: float  # area enclosed by the wall centre line (mm²)
    u_k: float  # perimeter of A_k (mm)


def torsion_section(
    section: SectionGeometry,
    link_diameter: float,
    bar_diameter: float
) -> TorsionSection:
    """
    Effective wall of the equivalent hollow section.

    t_eff = max(A/u, 2·(c + φ_link + φ/2))
    """
    A = section.area
    u = section.perimeter
    t_eff = max(A / u, 2 * (section.cover + link_diameter + bar_diameter * 0.5))
    A_k = (section.b - t_eff) * (section.h - t_eff)
    u_k = 2 * (section.b + section.h - 2 * t_eff)
    return TorsionSection(area=A, perimeter=u, t_eff=t_eff, A_k=A_k, u_k=u_k)


def strut_reduction_nu(fck: float) -> float:
    """ν = 0.6·(1 - fck/250), 6.6N."""
    return 0.6 * (1 - fck / 250)


def strut_reduction_nu1(fck: float) -> float:
    """ν1 per UK NA to 6.2.3(3): 0.6, or 0.9 - fck/250 above 60 MPa."""
    if fck > 60:
        return 0.9 - fck / 250
    return 0.6


def max_torsion_resistance(
    A_k: float,
    fcd: float,
    fck: float,
    t_eff: float,
    theta: float
) -> float:
    """T_Rd,max = 2·ν·αcw·fcd·A_k·t_eff·sinθ·cosθ (6.30), kN·m."""
    alpha_cw = PARAMETERS['alpha_cw']
    nu = strut_reduction_nu(fck)
    return 2 * nu * alpha_cw * fcd * A_k * t_eff * np.sin(theta) * np.cos(theta) / 1e6


def max_shear_resistance(
    b: float,
    fcd: float,
    fck: float,
    theta: float,
    z: float
) -> float:
    """V_Rd,max = αcw·b·z·ν1·fcd / (cotθ + tanθ) (6.9), kN."""
    alpha_cw = PARAMETERS['alpha_cw']
    nu1 = strut_reduction_nu1(fck)
    return alpha_cw * b * z * nu1 * fcd / (np.tan(theta) + 1 / np.tan(theta)) / 1000


def concrete_shear_stress(rho_l: float, d: float, fck: float, gamma_c: float) -> float:
    """
    v_Rd,c without shear reinforcement (6.2.a, 6.2.b), N/mm².

    v_Rd,c = max(C_Rd,c·k·(100·ρl·fck)^(1/3), 0.035·k^1.5·fck^0.5)
    """
    C_Rdc = 0.18 / gamma_c
    k = min(1 + np.sqrt(200 / d), 2.0)
    rho_l = min(rho_l, 0.02)
    v_Rdc = C_Rdc * k * (100 * rho_l * fck) ** (1 / 3)
    v_min = 0.035 * k ** 1.5 * np.sqrt(fck)
    return float(max(v_Rdc, v_min))


def concrete_shear_resistance(
    b: float,
    d: float,
    rho_l: float,
    fck: float,
    gamma_c: float
) -> float:
    """V_Rd,c = b·d·v_Rd,c, kN."""
    return b * d * concrete_shear_stress(rho_l, d, fck, gamma_c) / 1000


def concrete_torsion_resistance(A_k: float, fctd: float, t_eff: float) -> float:
    """
    Cracking torque of the hollow section, kN·m.

    2·A_k·fctd·t_eff per wall, summed over the four walls.
    """
    return 4 * (2 * A_k) * fctd * t_eff / 1e6


def additional_torsion_steel(
    T_Ed: float,
    A_k: float,
    theta: float,
    u_k: float,
    fyd: float
) -> float:
    """ΣA_sl = T_Ed·cotθ·u_k / (2·A_k·fyd) (6.28), mm²."""
    return T_Ed * 1e6 * (1 / np.tan(theta)) * u_k / (2 * A_k * fyd)


def combined_ratio(V_Ed: float, V_Rd: float, T_Ed: float, T_Rd: float) -> float:
    """V_Ed/V_Rd + T_Ed/T_Rd; a zero demand contributes nothing."""
    ratio = 0.0
    for demand, resistance in ((V_Ed, V_Rd), (T_Ed, T_Rd)):
        if demand == 0:
            continue
        ratio += demand / resistance if resistance > 0 else float('inf')
    return float(ratio)


def strut_angles() -> np.ndarray:
    """Candidate θ values from 22.5° in fixed steps, ending exactly at 45°."""
    step = PARAMETERS['theta_step']
    thetas = np.arange(THETA_MIN, THETA_MAX, step)
    if thetas[-1] < THETA_MAX:
        thetas = np.append(thetas, THETA_MAX)
    return thetas


@dataclass(frozen=True)
class StrutAngleSearch:
    """Result of the θ search for section crushing capacity."""
    theta: float
    V_Rd_max: float  # kN
    T_Rd_max: float  # kN·m
    ratio: float
    iterations: int

    @property
    def passed(self) -> bool:
        return self.ratio < 1


def search_strut_angle(
    V_Ed: float,
    T_Ed: float,
    b: float,
    z: float,
    torsion: TorsionSection,
    material: MaterialProperties
) -> StrutAngleSearch:
    """
    Smallest θ in [22.5°, 45°] for which the crushing check passes.

    The returned search always carries a θ inside the range; when it did
    not pass, the values are those at 45°.
    """
    result = None
    thetas = strut_angles()
    for i, theta in enumerate(thetas):
        T_Rd_max = max_torsion_resistance(torsion.A_k, material.fcd, material.fck, torsion.t_eff, theta)
        V_Rd_max = max_shear_resistance(b, material.fcd, material.fck, theta, z)
        ratio = combined_ratio(V_Ed, V_Rd_max, T_Ed, T_Rd_max)
        result = StrutAngleSearch(
            theta=float(theta), V_Rd_max=float(V_Rd_max), T_Rd_max=float(T_Rd_max),
            ratio=float(ratio), iterations=i + 1
        )
        if result.passed:
            break
    logger.debug("Strut angle search: theta=%.4f rad, ratio=%.4f", result.theta, result.ratio)
    return result


@dataclass(frozen=True)
class CapacityDesign:
    """Outcome of the shear and torsion capacity checks."""
    torsion: TorsionSection
    strut: StrutAngleSearch
    V_Rd_c: float = 0.0  # kN
    T_Rd_c: float = 0.0  # kN·m
    concrete_ratio: float = 0.0
    A_sl: float = 0.0  # additional longitudinal torsion steel (mm²)
    failure: Optional[FailureKind] = None

    @property
    def passed(self) -> bool:
        return self.failure is None

    @property
    def torsion_steel_required(self) -> bool:
        return self.A_sl > 0


def design_shear_torsion(
    loads: LoadDemand,
    section: SectionGeometry,
    material: MaterialProperties,
    d: float,
    z: float,
    rho_l: float,
    link_diameter: float,
    bar_diameter: float
) -> CapacityDesign:
    """
    Maximum capacity, concrete capacity and additional torsion steel.

    Args:
        loads: Design actions (magnitudes used)
        section: Section geometry
        material: Resolved materials
        d: Effective depth from the bending design (mm)
        z: Lever arm from the bending design (mm)
        rho_l: Longitudinal tension steel ratio As,prov/(b·h)
        link_diameter: Link diameter (mm)
        bar_diameter: Tension bar diameter (mm)

    Returns:
        CapacityDesign; failure is SECTION_CAPACITY_EXCEEDED when no θ
        up to 45° satisfies the crushing check.
    """
    V_Ed = loads.shear
    T_Ed = loads.torsion
    torsion = torsion_section(section, link_diameter, bar_diameter)

    strut = search_strut_angle(V_Ed, T_Ed, section.b, z, torsion, material)
    if not strut.passed:
        logger.debug("Crushing check fails at 45 degrees (ratio %.3f)", strut.ratio)
        return CapacityDesign(
            torsion=torsion, strut=strut, failure=FailureKind.SECTION_CAPACITY_EXCEEDED
        )

    T_Rd_c = concrete_torsion_resistance(torsion.A_k, material.fctd, torsion.t_eff)
    V_Rd_c = concrete_shear_resistance(section.b, d, rho_l, material.fck, material.gamma_c)
    concrete_ratio = combined_ratio(V_Ed, V_Rd_c, T_Ed, T_Rd_c)

    A_sl = 0.0
    if T_Ed > 0 and concrete_ratio > 1:
        A_sl = additional_torsion_steel(T_Ed, torsion.A_k, strut.theta, torsion.u_k, material.fyd)

    return CapacityDesign(
        torsion=torsion,
        strut=strut,
        V_Rd_c=float(V_Rd_c),
        T_Rd_c=float(T_Rd_c),
        concrete_ratio=float(concrete_ratio),
        A_sl=float(A_sl),
    )
