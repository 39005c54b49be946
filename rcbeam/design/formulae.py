"""
Trace text for the beam section design checks.

Solvers return numbers only; this module turns their outcomes into
DesignTraceEntry records with the governing expressions and clause
references, so the arithmetic can be tested without string matching.
"""

import numpy as np

from .bending import BendingDesign, DiameterStep
from .capacity import CapacityDesign
from .links import LinkDesign, LinkFailureReason
from .materials import PARAMETERS, MaterialProperties
from .section import DesignOptions, SectionGeometry
from .trace import CalcStatus, DesignTraceEntry, FailureKind


def _deg(theta: float) -> float:
    return float(np.degrees(theta))


def geometry_entry(section: SectionGeometry) -> DesignTraceEntry:
    return DesignTraceEntry(
        narrative="Geometry",
        expressions=(
            f"A = b·h = {section.b:g}·{section.h:g} = {section.area:.1f} mm²",
            f"u = 2·(b + h) = {section.perimeter:.1f} mm",
        ),
    )


def strength_cap_entry(material: MaterialProperties) -> DesignTraceEntry:
    """Note written when a grade above C50/60 is resolved with C50/60 values."""
    return DesignTraceEntry(
        narrative="Note: The shear strength of concrete is limited to C50/60",
        expressions=(
            f"Selected grade fck = {material.grade:g} N/mm², "
            f"design grade fck = {material.design_grade:g} N/mm²",
        ),
        ref="3.1.2(2)P",
    )


def materials_entry(material: MaterialProperties) -> DesignTraceEntry:
    return DesignTraceEntry(
        narrative="Concrete and reinforcement strength",
        expressions=(
            f"fck = {material.fck:.1f} N/mm²",
            f"fcd = αcc·fck/γc = {material.fcd:.1f} N/mm²",
            f"fctm = {material.fctm:.1f} N/mm²",
            f"fctd = fctk,0.05/γc = {material.fctd:.1f} N/mm²",
            f"fyd = fyk/γs = {material.fyd:.1f} N/mm²",
        ),
        ref="Table 3.1",
    )


def diameter_step_entry(step: DiameterStep) -> DesignTraceEntry:
    """One bar diameter change during the bending search."""
    depth = f"d = {step.demand.d:.1f} mm" if step.layer == "tension" else f"d2 = {step.demand.d2:.1f} mm"
    required = step.demand.As_req if step.layer == "tension" else step.demand.Asc_req
    return DesignTraceEntry(
        narrative=f"Increase {step.layer} bar diameter to {step.bars.diameter:g} mm",
        expressions=(
            depth,
            f"K = {step.demand.K:.4f}",
            f"A_req = {required:.1f} mm²",
            f"n = {step.bars.count}",
        ),
    )


def bending_entry(bending: BendingDesign, options: DesignOptions) -> DesignTraceEntry:
    """Final bending entry: pass with the full trail, or one of the two failures."""
    demand = bending.demand

    if bending.failure == FailureKind.CONCRETE_CAPACITY_EXCEEDED:
        return DesignTraceEntry(
            narrative="Bending Concrete check",
            expressions=(
                f"K = M/(fck·b·d²) = {demand.K:.4f}",
            ),
            ref="6.1",
            conclusion="Fail - Concrete failure in beam",
            status=CalcStatus.FAIL,
        )

    if bending.failure == FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE:
        return DesignTraceEntry(
            narrative="Bending Reinforcement check",
            expressions=(
                f"d = {demand.d:.1f} mm",
                f"A_s,req = {demand.As_req:.1f} mm²",
                f"Largest {bending.steps[-1].layer} bar φ = {bending.steps[-1].bars.diameter:g} mm" if bending.steps
                else f"Bar φ = {options.min_bar_diameter:g} mm",
            ),
            ref="8.2",
            conclusion="Fail - Not able to find suitable reinforcement layout",
            status=CalcStatus.FAIL,
        )

    tension = bending.tension
    expressions = [
        f"d = h - c - φlink - 0.5·φ = {demand.d:.1f} mm",
        f"K = M/(fck·b·d²) = {demand.K:.4f}",
        f"K' = {demand.K_lim:.4f}",
    ]
    if demand.compression_required:
        compression = bending.compression
        expressions += [
            "K > K'",
            f"d2 = c + φlink + 0.5·φ2 = {demand.d2:.1f} mm",
            f"z = (d/2)·(1 + (1 - 3.53·K')^0.5) = {demand.z:.1f} mm",
            "M' = b·d²·fck·(K - K')",
            f"A_sc,req = M'/(fyd·(d - d2)) = {demand.Asc_req:.1f} mm²",
            f"A_sc,prov = {compression.count} x {compression.diameter:g} mm = {compression.area:.1f} mm²",
            f"A_s,min = 0.26·fctm·b·d/fyk ≥ 0.0013·b·d = {demand.As_min:.1f} mm²",
            f"A_s,req = K'·fck·b·d²/(fyd·z) + A_sc,req = {demand.As_req:.1f} mm²",
        ]
    else:
        expressions += [
            "K < K'",
            f"z = (d/2)·(1 + (1 - 3.53·K)^0.5) ≤ 0.95·d = {demand.z:.1f} mm",
            f"A_s,min = 0.26·fctm·b·d/fyk ≥ 0.0013·b·d = {demand.As_min:.1f} mm²",
            f"A_s,req = M/(fyd·z) = {demand.As_req:.1f} mm²",
        ]
    expressions.append(f"A_s,prov = {tension.count} x {tension.diameter:g} mm = {tension.area:.1f} mm²")

    if bending.rho_exceeded:
        expressions.append(f"ρ = {bending.rho:.6f} > {PARAMETERS['rho_warning']:g} Warning!")
    else:
        expressions.append(f"ρ = {bending.rho:.6f}")

    return DesignTraceEntry(
        narrative="Bending Reinforcement check",
        expressions=tuple(expressions),
        ref="6.1",
        conclusion="Pass",
        status=CalcStatus.PASS,
    )


def max_capacity_entry(capacity: CapacityDesign) -> DesignTraceEntry:
    strut = capacity.strut
    torsion = capacity.torsion
    expressions = (
        f"t_eff = max(A/u, 2·(c + φlink + φ/2)) = {torsion.t_eff:.1f} mm",
        f"A_k = (b - t_eff)·(h - t_eff) = {torsion.A_k:.1f} mm²",
        f"θ = {_deg(strut.theta):.4f}°",
        f"T_Rd,max = 2·ν·αcw·fcd·A_k·t_eff·sinθ·cosθ = {strut.T_Rd_max:.2f} kNm",
        f"V_Rd,max = αcw·b·z·ν1·fcd/(cotθ + tanθ) = {strut.V_Rd_max:.2f} kN",
        f"V_Ed/V_Rd,max + T_Ed/T_Rd,max = {strut.ratio:.4f}" + (" < 1" if strut.passed else " > 1"),
    )
    if strut.passed:
        return DesignTraceEntry(
            narrative="Shear and Torsional max capacity",
            expressions=expressions,
            ref="(6.29)",
            conclusion="Pass",
            status=CalcStatus.PASS,
        )
    return DesignTraceEntry(
        narrative="Shear and Torsional max capacity",
        expressions=expressions,
        ref="(6.29)",
        conclusion="Max capacity of section exceeded, Increase section size",
        status=CalcStatus.FAIL,
    )


def concrete_capacity_entry(capacity: CapacityDesign) -> DesignTraceEntry:
    expressions = (
        f"T_Rd,c = 4·(2·A_k·fctd·t_eff) = {capacity.T_Rd_c:.2f} kNm",
        f"V_Rd,c = b·d·C_Rd,c·k·(100·ρl·fck)^(1/3) = {capacity.V_Rd_c:.2f} kN",
        f"V_Ed/V_Rd,c + T_Ed/T_Rd,c = {capacity.concrete_ratio:.3f}"
        + (" > 1" if capacity.concrete_ratio > 1 else " < 1"),
    )
    if capacity.torsion_steel_required:
        return DesignTraceEntry(
            narrative="Shear and Torsional resistance concrete",
            expressions=expressions,
            ref="(6.31)",
            conclusion="Additional torsional reinforcement required",
        )
    return DesignTraceEntry(
        narrative="Shear and Torsional resistance concrete",
        expressions=expressions,
        ref="(6.31)",
        conclusion="No additional torsion reinforcement required",
        status=CalcStatus.PASS,
    )


def additional_steel_entry(capacity: CapacityDesign) -> DesignTraceEntry:
    return DesignTraceEntry(
        narrative="Additional steel requirements",
        expressions=(
            f"ΣA_sl = T_Ed·cotθ·u_k/(2·fyd·A_k) = {capacity.A_sl:.2f} mm²",
            f"u_k = {capacity.torsion.u_k:.1f} mm",
        ),
        ref="(6.28)",
        conclusion="Additional steel to be distributed around section perimeter",
        status=CalcStatus.PASS,
    )


def links_entry(links: LinkDesign) -> DesignTraceEntry:
    """Accepted link arrangement, or the reason none fits."""
    if links.reason == LinkFailureReason.LEGS_DO_NOT_FIT:
        return DesignTraceEntry(
            narrative="Section cannot accommodate shear link, increase section width",
            expressions=(
                f"Legs that fit = {links.max_legs}",
                f"s_t,max = min(0.75·d, {PARAMETERS['link_tangential_cap']:g}) = {links.st_max:.1f} mm",
            ),
            ref="9.2.2(8)",
            conclusion="Fail",
            status=CalcStatus.FAIL,
        )
    if links.reason == LinkFailureReason.SPACING_BELOW_MINIMUM:
        return DesignTraceEntry(
            narrative="Section cannot accommodate shear link, increase section depth",
            expressions=(
                f"s ≤ 0.75·d = {links.spacing:g} mm",
            ),
            ref="9.2.2(6)",
            conclusion="Fail",
            status=CalcStatus.FAIL,
        )

    expressions = (
        f"link diameter = {links.diameter:g} mm",
        f"s = {links.spacing:g} mm",
        f"legs = {links.legs}",
        f"ρw = Asw/(s·b) = {links.rho:.6f} ≥ ρw,min = {links.rho_min:.6f}",
        f"V_Rd,s = (Asw/s)·z·fywd·cotθ = {links.resistance:.2f} kN",
    )
    if links.passed:
        return DesignTraceEntry(
            narrative="Shear link requirements",
            expressions=expressions,
            ref="(6.8)",
            conclusion="Pass",
            status=CalcStatus.PASS,
        )
    return DesignTraceEntry(
        narrative="Shear link cannot accommodate load, try increasing link diameter or section size",
        expressions=expressions,
        ref="(6.8)",
        conclusion="Fail",
        status=CalcStatus.FAIL,
    )
