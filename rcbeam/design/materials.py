"""
Eurocode 2 material properties for beam section design.

Reference: EN 1992-1-1:2004 Table 3.1 (concrete), 3.2 (reinforcement)

Concrete grades are identified by the characteristic cylinder strength fck
(MPa). For shear and torsion the concrete strength is limited to C50/60
(3.1.2(2)P), so grades above 50 are resolved with the grade 50 parameters.
The selected grade is kept alongside the substituted one.

Units: SI (MPa, mm)
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# MATERIAL DATA FROM YAML
# ============================================================================

def _load_ec2_materials() -> Dict[str, Any]:
    """Load Eurocode 2 material table from the packaged YAML file."""
    yaml_path = Path(__file__).parent / "data" / "materials_ec2.yaml"
    with open(yaml_path, 'r') as f:
        return yaml.safe_load(f)


_EC2_MATERIALS = _load_ec2_materials()

PARAMETERS: Mapping[str, float] = MappingProxyType(dict(_EC2_MATERIALS['parameters']))
STEEL: Mapping[str, float] = MappingProxyType(dict(_EC2_MATERIALS['steel']))


# ============================================================================
# MATERIAL MODELS
# ============================================================================

class ConcreteGrade(BaseModel):
    """
    One row of EN 1992-1-1 Table 3.1.

    Strains eps_cu2 and eps_cu3 are stored in per mille, as tabulated.
    """
    model_config = ConfigDict(frozen=True)

    fck: float = Field(..., gt=0, description="Characteristic cylinder strength (MPa)")
    fck_cube: float = Field(..., gt=0, description="Characteristic cube strength (MPa)")
    fctm: float = Field(..., gt=0, description="Mean tensile strength (MPa)")
    fctk_005: float = Field(..., gt=0, description="5% fractile tensile strength (MPa)")
    fctk_095: float = Field(..., gt=0, description="95% fractile tensile strength (MPa)")
    Ecm: float = Field(..., gt=0, description="Secant modulus (MPa)")
    eps_cu2: float = Field(..., gt=0, description="Ultimate strain, parabola-rectangle (‰)")
    eps_cu3: float = Field(..., gt=0, description="Ultimate strain, bilinear (‰)")

    @property
    def strength_class(self) -> str:
        """Display label, e.g. 'C40/50'."""
        return f"C{self.fck:g}/{self.fck_cube:g}"


class MaterialProperties(BaseModel):
    """
    Resolved design strengths for one design run.

    Attributes:
        grade: Selected grade (characteristic strength label, MPa)
        design_grade: Grade whose parameters are used for design
        capped: True when design_grade was substituted for grade
        high_strength: True when the selected grade exceeds the cap
        fck: Characteristic strength used in design (MPa)
        fcd: Design compressive strength αcc·fck/γc (MPa)
        fctm, fctk_005: Tensile strengths of design_grade (MPa)
        fctd: Design tensile strength fctk,0.05/γc (αct = 1)
        eps_cu2, eps_cu3: Ultimate strains of design_grade (‰)
        strength_reduction: Stress block reduction used for the lever arm
        fyk, fyd: Rebar characteristic and design yield strength (MPa)
    """
    model_config = ConfigDict(frozen=True)

    grade: float
    design_grade: float
    capped: bool
    high_strength: bool
    fck: float
    fcd: float
    fctm: float
    fctk_005: float
    fctd: float
    eps_cu2: float
    eps_cu3: float
    strength_reduction: float = 1.0
    fyk: float
    fyd: float
    gamma_c: float
    gamma_s: float

    @property
    def Es(self) -> float:
        """Rebar modulus of elasticity (MPa)."""
        return STEEL['Es']


def _grade_key(grade: Union[str, int, float]) -> str:
    """Normalize '40', 40, 40.0 and 'C40/50' to the YAML key '40'."""
    text = str(grade).strip().upper()
    if text.startswith('C'):
        text = text[1:].split('/')[0]
    try:
        value = float(text)
    except ValueError:
        return text
    return f"{value:g}"


CONCRETE_GRADES: Mapping[str, ConcreteGrade] = MappingProxyType({
    key: ConcreteGrade(**props) for key, props in _EC2_MATERIALS['concrete'].items()
})


def stress_block_reduction(fck: float) -> float:
    """
    Lever arm reduction for high strength concrete, 3.1.7(3).

    1.0 up to C50/60; otherwise combines λ and η relative to the
    normal strength stress block.
    """
    if fck <= 50:
        return 1.0
    lambda_ratio = (0.8 - (fck - 50) / 400) / 0.8
    eta = 1.0 - (fck - 50) / 200
    depth_ratio = (1 / (lambda_ratio * 0.5)) / 2.5
    return lambda_ratio * eta * depth_ratio


# ============================================================================
# MATERIAL RESOLVER
# ============================================================================

class MaterialLoaderEC2:
    """Factory for Eurocode 2 material properties from YAML data."""

    @staticmethod
    def get_concrete(grade: Union[str, int, float]) -> ConcreteGrade:
        """
        Get concrete table row by grade.

        Args:
            grade: Characteristic strength (e.g. 40, "40", "C40/50")

        Returns:
            ConcreteGrade instance

        Raises:
            ValueError: If the grade is not in the table
        """
        key = _grade_key(grade)
        if key not in CONCRETE_GRADES:
            available = ", ".join(CONCRETE_GRADES.keys())
            raise ValueError(f"Unknown concrete grade: {grade}. Available: {available}")
        return CONCRETE_GRADES[key]

    @staticmethod
    def resolve(grade: Union[str, int, float], fyk: float) -> MaterialProperties:
        """
        Resolve design strengths for a grade selection and rebar yield.

        Grades above the shear strength cap use the capped grade's
        parameters; `grade` still reports the selection.

        Raises:
            ValueError: Unknown grade or non-positive fyk
        """
        selected = MaterialLoaderEC2.get_concrete(grade)
        MaterialLoaderEC2.validate_fyk(fyk)

        cap = PARAMETERS['shear_strength_cap']
        capped = selected.fck > cap
        concrete = MaterialLoaderEC2.get_concrete(cap) if capped else selected

        gamma_c = PARAMETERS['gamma_c']
        gamma_s = PARAMETERS['gamma_s']
        fck = concrete.fck

        return MaterialProperties(
            grade=selected.fck,
            design_grade=concrete.fck,
            capped=capped,
            high_strength=capped,
            fck=fck,
            fcd=PARAMETERS['alpha_cc'] * fck / gamma_c,
            fctm=concrete.fctm,
            fctk_005=concrete.fctk_005,
            fctd=concrete.fctk_005 / gamma_c,
            eps_cu2=concrete.eps_cu2,
            eps_cu3=concrete.eps_cu3,
            strength_reduction=stress_block_reduction(fck),
            fyk=fyk,
            fyd=fyk / gamma_s,
            gamma_c=gamma_c,
            gamma_s=gamma_s,
        )

    @staticmethod
    def validate_fyk(fyk: float) -> float:
        """Check rebar yield strength is positive."""
        if not fyk > 0:
            raise ValueError(f"fyk = {fyk} MPa must be positive")
        return fyk

    @staticmethod
    def list_concrete_grades() -> List[str]:
        """Get list of available concrete grades."""
        return list(CONCRETE_GRADES.keys())
