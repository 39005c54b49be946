"""
Input models for rectangular beam section design.

Units: mm, kN, kN·m
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .catalog import BAR_CATALOG, LINK_CATALOG


class SectionGeometry(BaseModel):
    """
    Rectangular beam cross-section.

    Attributes:
        b: Width (mm)
        h: Overall depth (mm)
        cover: Nominal cover to the links (mm)

    Example:
        >>> section = SectionGeometry(b=350, h=350, cover=35)
        >>> section.area
        122500.0
    """
    model_config = ConfigDict(frozen=True)

    b: float = Field(..., gt=0, description="Width (mm)")
    h: float = Field(..., gt=0, description="Depth (mm)")
    cover: float = Field(..., gt=0, description="Cover (mm)")

    @model_validator(mode='after')
    def validate_cover_fits(self) -> 'SectionGeometry':
        """Cover must leave a concrete core."""
        if 2 * self.cover >= self.b:
            raise ValueError(f"Cover = {self.cover} mm leaves no core in width b = {self.b} mm")
        if 2 * self.cover >= self.h:
            raise ValueError(f"Cover = {self.cover} mm leaves no core in depth h = {self.h} mm")
        return self

    @property
    def area(self) -> float:
        """Gross area A = b·h (mm²)."""
        return float(self.b * self.h)

    @property
    def perimeter(self) -> float:
        """Outer perimeter u = 2(b + h) (mm)."""
        return float(2 * (self.b + self.h))


class LoadDemand(BaseModel):
    """
    Design actions on the section. Signs are ignored; magnitudes are designed for.

    Attributes:
        M_Ed: Bending moment (kN·m)
        V_Ed: Shear force (kN)
        T_Ed: Torsion moment (kN·m)
    """
    model_config = ConfigDict(frozen=True)

    M_Ed: float = 0.0
    V_Ed: float = 0.0
    T_Ed: float = 0.0

    @property
    def moment(self) -> float:
        return abs(self.M_Ed)

    @property
    def shear(self) -> float:
        return abs(self.V_Ed)

    @property
    def torsion(self) -> float:
        return abs(self.T_Ed)


class DesignOptions(BaseModel):
    """
    Detailing choices for a design run.

    Attributes:
        min_bar_diameter: Smallest longitudinal bar tried (mm, bar catalog)
        link_diameter: Shear link diameter (mm, link catalog, not searched)
        min_link_spacing: Minimum link spacing, longitudinal and between legs (mm)
        min_bar_spacing: Minimum clear spacing between longitudinal bars (mm)
    """
    model_config = ConfigDict(frozen=True)

    min_bar_diameter: float = 16
    link_diameter: float = 10
    min_link_spacing: float = Field(default=100, gt=0)
    min_bar_spacing: float = Field(default=50, gt=0)

    @field_validator('min_bar_diameter')
    @classmethod
    def validate_bar_diameter(cls, v: float) -> float:
        """Bar diameter must be a standard size."""
        BAR_CATALOG.index(v)
        return v

    @field_validator('link_diameter')
    @classmethod
    def validate_link_diameter(cls, v: float) -> float:
        """Link diameter must be a standard size."""
        LINK_CATALOG.index(v)
        return v
