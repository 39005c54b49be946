"""
Beam section design modules for pyrcbeam
Supports Eurocode 2 EN 1992-1-1:2004 with UK National Annex values
"""

from .base import DesignCode
from .bending import BarSelection, BendingDesign, FlexuralDemand, design_bending, flexural_demand
from .capacity import CapacityDesign, StrutAngleSearch, design_shear_torsion, search_strut_angle
from .catalog import BAR_CATALOG, LINK_CATALOG, DiameterCatalog
from .eurocode2 import DesignResult, Eurocode2Code, run_beam_design_from_ui, summarize_designs
from .links import LinkDesign, LinkSelection, design_links
from .materials import ConcreteGrade, MaterialLoaderEC2, MaterialProperties
from .section import DesignOptions, LoadDemand, SectionGeometry
from .trace import CalcStatus, DesignTrace, DesignTraceEntry, FailureKind

# ============================================================================
# CODE REGISTRY (Factory Pattern)
# ============================================================================

CODE_REGISTRY = {
    "Eurocode 2 EN 1992-1-1:2004 (UK NA)": Eurocode2Code(),
}


def get_design_code(code_name: str) -> DesignCode:
    """
    Factory method to get a beam section design code.

    Args:
        code_name: Design code identifier (e.g., "Eurocode 2 EN 1992-1-1:2004 (UK NA)")

    Returns:
        DesignCode implementation instance

    Raises:
        ValueError: If code_name not found in registry
    """
    if code_name not in CODE_REGISTRY:
        available = ", ".join(CODE_REGISTRY.keys())
        raise ValueError(f"Unknown code: {code_name}. Available: {available}")
    return CODE_REGISTRY[code_name]


__all__ = [
    'DesignCode',
    'Eurocode2Code',
    'DesignResult',
    'run_beam_design_from_ui',
    'summarize_designs',
    'SectionGeometry',
    'LoadDemand',
    'DesignOptions',
    'ConcreteGrade',
    'MaterialProperties',
    'MaterialLoaderEC2',
    'DiameterCatalog',
    'BAR_CATALOG',
    'LINK_CATALOG',
    'BarSelection',
    'FlexuralDemand',
    'BendingDesign',
    'design_bending',
    'flexural_demand',
    'StrutAngleSearch',
    'CapacityDesign',
    'search_strut_angle',
    'design_shear_torsion',
    'LinkSelection',
    'LinkDesign',
    'design_links',
    'CalcStatus',
    'FailureKind',
    'DesignTrace',
    'DesignTraceEntry',
    'CODE_REGISTRY',
    'get_design_code',
]
