"""
Eurocode 2 (EN 1992-1-1:2004) beam section design.

Reference: EN 1992-1-1:2004 Eurocode 2: Design of concrete structures
Part 1-1: General rules and rules for buildings, with UK National Annex values

A design run resolves materials, sizes tension and compression bars,
searches the strut angle for shear and torsion, checks the concrete-only
resistance and sizes shear links. It stops at the first terminal failure
and returns the ordered design trace with the numeric outcome.

Units: SI (MPa, mm, kN, kN·m)
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict

from .base import DesignCode
from .bending import BarSelection, BendingDesign, design_bending
from .capacity import CapacityDesign, design_shear_torsion
from .formulae import (
    additional_steel_entry,
    bending_entry,
    concrete_capacity_entry,
    diameter_step_entry,
    geometry_entry,
    links_entry,
    materials_entry,
    max_capacity_entry,
    strength_cap_entry,
)
from .links import LinkDesign, LinkSelection, design_links
from .materials import MaterialLoaderEC2, MaterialProperties
from .section import DesignOptions, LoadDemand, SectionGeometry
from .trace import CalcStatus, DesignTrace, DesignTraceEntry, FailureKind, format_trace, trace_to_dataframe

logger = logging.getLogger(__name__)


# ============================================================================
# DESIGN RESULT
# ============================================================================

class DesignResult(BaseModel):
    """
    Outcome of one beam section design run.

    On a terminal failure the reinforcement selections and strut angle are
    None; the numeric blocks keep whatever the run computed before it stopped.

    Attributes:
        code: Design code identifier
        status: PASS or FAIL
        failure: FailureKind that ended the run, if any
        material: Resolved material properties
        tension, compression: Longitudinal bar layers
        links: Shear link arrangement
        strut_angle: θ (rad)
        additional_torsion_steel: ΣA_sl (mm²), 0 if not required
        bending, capacity, link_design: Numeric outcome of each solver
        trace: Ordered design trace
    """
    model_config = ConfigDict(frozen=True)

    code: str
    status: CalcStatus
    failure: Optional[FailureKind] = None
    section: SectionGeometry
    loads: LoadDemand
    options: DesignOptions
    material: MaterialProperties
    tension: Optional[BarSelection] = None
    compression: Optional[BarSelection] = None
    links: Optional[LinkSelection] = None
    strut_angle: Optional[float] = None
    additional_torsion_steel: float = 0.0
    bending: Optional[BendingDesign] = None
    capacity: Optional[CapacityDesign] = None
    link_design: Optional[LinkDesign] = None
    trace: Tuple[DesignTraceEntry, ...] = ()

    @property
    def passed(self) -> bool:
        return self.status == CalcStatus.PASS

    @property
    def strut_angle_degrees(self) -> Optional[float]:
        if self.strut_angle is None:
            return None
        return float(np.degrees(self.strut_angle))

    def trace_table(self) -> pd.DataFrame:
        """Design trace as a DataFrame, one row per entry."""
        return trace_to_dataframe(self.trace)

    def details(self) -> str:
        """Plain-text calculation narrative."""
        return format_trace(self.trace)

    def summary(self) -> Dict[str, Any]:
        """Flat dictionary of the governing values, for tables and reports."""
        tension = self.tension
        compression = self.compression
        links = self.links
        return {
            "b": self.section.b,
            "h": self.section.h,
            "cover": self.section.cover,
            "Grade": self.material.grade,
            "M_Ed": self.loads.M_Ed,
            "V_Ed": self.loads.V_Ed,
            "T_Ed": self.loads.T_Ed,
            "Status": self.status.value.upper(),
            "Failure": self.failure.value if self.failure else "",
            "Tension": f"{tension.count}Φ{tension.diameter:g}" if tension else "",
            "As_prov": tension.area if tension else 0.0,
            "Compression": f"{compression.count}Φ{compression.diameter:g}" if compression else "",
            "Asc_prov": compression.area if compression else 0.0,
            "Links": f"{links.legs} legs Φ{links.diameter:g} @ {links.spacing:g}" if links else "",
            "V_Rd_s": links.resistance if links else 0.0,
            "Theta_deg": self.strut_angle_degrees,
            "A_sl": self.additional_torsion_steel,
        }


# ============================================================================
# EUROCODE 2 DESIGN CODE
# ============================================================================

class Eurocode2Code(DesignCode):
    """
    Eurocode 2 beam section design.

    Stateless: every call works on its own trace and selections, so one
    instance can serve concurrent runs.
    """

    @property
    def code_name(self) -> str:
        return "Eurocode 2 EN 1992-1-1:2004 (UK NA)"

    @property
    def code_units(self) -> str:
        return "SI"

    def design_beam_section(
        self,
        section: Union[SectionGeometry, Mapping[str, float]],
        grade: Union[str, int, float],
        fyk: float,
        loads: Union[LoadDemand, Mapping[str, float]],
        options: Optional[Union[DesignOptions, Mapping[str, float]]] = None
    ) -> DesignResult:
        """
        Design bending, shear and torsion reinforcement for a section.

        Args:
            section: Section geometry (model or mapping of b, h, cover)
            grade: Concrete grade (e.g. 40, "40", "C40/50")
            fyk: Rebar characteristic yield strength (MPa)
            loads: Design actions (model or mapping of M_Ed, V_Ed, T_Ed)
            options: Detailing options; defaults when omitted

        Returns:
            DesignResult. Design failures are reported on the result, not raised.

        Raises:
            ValueError: Unknown grade or diameter, invalid geometry or fyk

        Example:
            >>> code = Eurocode2Code()
            >>> result = code.design_beam_section(
            ...     SectionGeometry(b=350, h=350, cover=35), 40, 500,
            ...     LoadDemand(M_Ed=10, V_Ed=10)
            ... )
            >>> result.status
            <CalcStatus.PASS: 'pass'>
        """
        # Validation before any solving
        section = SectionGeometry.model_validate(section)
        loads = LoadDemand.model_validate(loads)
        options = DesignOptions.model_validate(options if options is not None else {})
        material = MaterialLoaderEC2.resolve(grade, fyk)

        trace = DesignTrace()
        trace.append(geometry_entry(section))
        if material.capped:
            trace.append(strength_cap_entry(material))
        trace.append(materials_entry(material))

        def finish(failure: Optional[FailureKind] = None, **outcome) -> DesignResult:
            if failure is not None:
                logger.warning(
                    "Section %gx%g: design failed (%s)", section.b, section.h, failure.value
                )
                outcome = {
                    key: value for key, value in outcome.items()
                    if key in ('bending', 'capacity', 'link_design')
                }
            else:
                logger.info("Section %gx%g: design passed", section.b, section.h)
            return DesignResult(
                code=self.code_name,
                status=CalcStatus.FAIL if failure else CalcStatus.PASS,
                failure=failure,
                section=section,
                loads=loads,
                options=options,
                material=material,
                trace=trace.entries,
                **outcome,
            )

        # Bending
        bending = design_bending(loads.moment, section, material, options)
        for step in bending.steps:
            trace.append(diameter_step_entry(step))
        trace.append(bending_entry(bending, options))
        if not bending.passed:
            return finish(bending.failure, bending=bending)

        # Shear and torsion capacity
        d = bending.demand.d
        z = bending.demand.z
        rho_l = bending.tension.area / section.area
        capacity = design_shear_torsion(
            loads, section, material, d, z, rho_l, options.link_diameter, bending.tension.diameter
        )
        trace.append(max_capacity_entry(capacity))
        if not capacity.passed:
            return finish(capacity.failure, bending=bending, capacity=capacity)

        trace.append(concrete_capacity_entry(capacity))
        if capacity.torsion_steel_required:
            trace.append(additional_steel_entry(capacity))

        # Shear links
        link_design = design_links(
            V_Ed=loads.shear,
            fyd=material.fyd,
            theta=capacity.strut.theta,
            d=d,
            b=section.b,
            cover=section.cover,
            link_diameter=options.link_diameter,
            min_link_spacing=options.min_link_spacing,
            fck=material.fck,
            fyk=material.fyk,
            z=z,
        )
        trace.append(links_entry(link_design))
        if not link_design.passed:
            return finish(
                link_design.failure, bending=bending, capacity=capacity, link_design=link_design
            )

        return finish(
            tension=bending.tension,
            compression=bending.compression,
            links=link_design.selection,
            strut_angle=capacity.strut.theta,
            additional_torsion_steel=capacity.A_sl,
            bending=bending,
            capacity=capacity,
            link_design=link_design,
        )


# ============================================================================
# UI AND BATCH HELPERS
# ============================================================================

def run_beam_design_from_ui(
    beam_id: int,
    b: float,
    h: float,
    cover: float,
    grade: Union[str, int, float],
    fyk: float,
    M_Ed: float,
    V_Ed: float,
    T_Ed: float = 0.0,
    min_bar_diameter: float = 16,
    link_diameter: float = 10,
    min_link_spacing: float = 100,
    min_bar_spacing: float = 50
) -> Dict[str, Any]:
    """
    Wrapper function for UI integration.

    Builds the input models from plain values and runs one design.

    Args:
        beam_id: Element ID
        b, h, cover: Section dimensions (mm)
        grade: Concrete grade (e.g. "C40/50")
        fyk: Rebar yield strength (MPa)
        M_Ed, V_Ed, T_Ed: Design actions (kN·m, kN, kN·m)
        min_bar_diameter, link_diameter: Bar and link sizes (mm)
        min_link_spacing, min_bar_spacing: Detailing limits (mm)

    Returns:
        Dictionary with 'beam_id', 'status', 'result' and 'details'

    Example:
        >>> out = run_beam_design_from_ui(
        ...     beam_id=1, b=350, h=350, cover=35, grade=40, fyk=500,
        ...     M_Ed=10, V_Ed=10
        ... )
        >>> print(out['status'])
        PASS
    """
    section = SectionGeometry(b=b, h=h, cover=cover)
    loads = LoadDemand(M_Ed=M_Ed, V_Ed=V_Ed, T_Ed=T_Ed)
    options = DesignOptions(
        min_bar_diameter=min_bar_diameter,
        link_diameter=link_diameter,
        min_link_spacing=min_link_spacing,
        min_bar_spacing=min_bar_spacing,
    )

    result = Eurocode2Code().design_beam_section(section, grade, fyk, loads, options)

    return {
        'beam_id': beam_id,
        'status': result.status.value.upper(),
        'result': result,
        'details': result.details(),
    }


def summarize_designs(
    results: Union[Mapping[Any, DesignResult], Sequence[DesignResult]]
) -> pd.DataFrame:
    """
    Tabulate a batch of design results.

    Args:
        results: Results keyed by beam ID, or a sequence (IDs from 1)

    Returns:
        DataFrame with one row per section
    """
    if isinstance(results, Mapping):
        items = list(results.items())
    else:
        items = list(enumerate(results, start=1))

    rows = [{"ID": beam_id, **result.summary()} for beam_id, result in items]
    columns = ["ID"] + (list(rows[0].keys())[1:] if rows else [])
    return pd.DataFrame(rows, columns=columns)
