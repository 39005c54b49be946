"""
Eurocode 2 Beam Section Design Demonstration
============================================

This script demonstrates:
1. A single section design with its calculation trace
2. A high strength grade capped to C50/60
3. A batch of sections summarized in a table
"""

import logging

from rcbeam.design import get_design_code, summarize_designs
from rcbeam.design.section import DesignOptions, LoadDemand, SectionGeometry


def demo_single_section():
    """Design one section and print the trace."""
    print("\n" + "="*70)
    print("EUROCODE 2 BEAM SECTION DESIGN DEMO")
    print("="*70)

    ec2 = get_design_code("Eurocode 2 EN 1992-1-1:2004 (UK NA)")

    section = SectionGeometry(b=350, h=350, cover=35)
    loads = LoadDemand(M_Ed=60, V_Ed=120, T_Ed=8)
    options = DesignOptions(min_bar_diameter=16, link_diameter=10)

    result = ec2.design_beam_section(section, "C40/50", 500, loads, options)

    print(f"\nSection: {section.b:g}×{section.h:g} mm, cover {section.cover:g} mm")
    print(f"Loads: M_Ed = {loads.M_Ed} kN·m, V_Ed = {loads.V_Ed} kN, T_Ed = {loads.T_Ed} kN·m")
    print(f"Status: {result.status.value.upper()}")
    print()
    print(result.details())


def demo_high_strength():
    """A C70/85 selection is designed with C50/60 shear strength."""
    print("\n" + "="*70)
    print("HIGH STRENGTH CONCRETE")
    print("="*70)

    ec2 = get_design_code("Eurocode 2 EN 1992-1-1:2004 (UK NA)")
    result = ec2.design_beam_section(
        SectionGeometry(b=300, h=500, cover=30), 70, 500, LoadDemand(M_Ed=150, V_Ed=90)
    )
    print(f"Selected grade: C{result.material.grade:g}, design grade: C{result.material.design_grade:g}")
    print(result.trace_table()[["Narrative", "Ref", "Conclusion", "Status"]].to_string(index=False))


def demo_batch():
    """Design several beams and tabulate the outcome."""
    print("\n" + "="*70)
    print("BATCH SUMMARY")
    print("="*70)

    ec2 = get_design_code("Eurocode 2 EN 1992-1-1:2004 (UK NA)")
    beams = {
        "B1": (SectionGeometry(b=300, h=500, cover=30), LoadDemand(M_Ed=180, V_Ed=150)),
        "B2": (SectionGeometry(b=250, h=400, cover=30), LoadDemand(M_Ed=95, V_Ed=60, T_Ed=4)),
        "B3": (SectionGeometry(b=350, h=350, cover=35), LoadDemand(M_Ed=10000, V_Ed=10)),
    }
    results = {
        beam_id: ec2.design_beam_section(section, 35, 500, loads)
        for beam_id, (section, loads) in beams.items()
    }
    print(summarize_designs(results).to_string(index=False))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    demo_single_section()
    demo_high_strength()
    demo_batch()
