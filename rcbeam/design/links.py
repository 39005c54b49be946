"""
Shear link design.

Reference: EN 1992-1-1:2004 6.2.3 (6.8), 9.2.2 (detailing and minimum ratio)

Link diameter is fixed by the designer. Spacing along the beam starts at
the largest multiple of the spacing step within 0.75·d and the number of
legs starts at two. Whenever more steel is needed the spacing is reduced
one step, and once it reaches the minimum spacing another leg is added
and the spacing is reset.

Units: mm, N/mm², kN
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .materials import PARAMETERS
from .trace import FailureKind

logger = logging.getLogger(__name__)


class LinkSelection(BaseModel):
    """
    Accepted shear link arrangement.

    Attributes:
        diameter: Link bar diameter (mm)
        legs: Number of vertical legs crossing the section
        spacing: Spacing along the beam s (mm)
        resistance: V_Rd,s (kN)
        ratio: ρw = Asw/(s·b)
    """
    model_config = ConfigDict(frozen=True)

    diameter: float = Field(..., gt=0)
    legs: int = Field(..., ge=2)
    spacing: float = Field(..., gt=0)
    resistance: float = Field(..., ge=0)
    ratio: float = Field(..., ge=0)

    @property
    def area(self) -> float:
        """Asw, area of all legs (mm²)."""
        return link_area(self.diameter, self.legs)


class LinkFailureReason(str, Enum):
    """Why no link arrangement could be found."""
    LEGS_DO_NOT_FIT = "legs_do_not_fit"
    SPACING_BELOW_MINIMUM = "spacing_below_minimum"
    DEMAND_NOT_MET = "demand_not_met"


@dataclass(frozen=True)
class LinkDesign:
    """Outcome of the link search. On failure the last tried values are kept."""
    diameter: float
    legs: int
    spacing: float
    resistance: float
    rho: float
    rho_min: float
    st_max: float
    max_legs: int
    failure: Optional[FailureKind] = None
    reason: Optional[LinkFailureReason] = None

    @property
    def passed(self) -> bool:
        return self.failure is None

    @property
    def selection(self) -> Optional[LinkSelection]:
        if not self.passed:
            return None
        return LinkSelection(
            diameter=self.diameter, legs=self.legs, spacing=self.spacing,
            resistance=self.resistance, ratio=self.rho
        )


def link_area(diameter: float, legs: int) -> float:
    return np.pi * diameter ** 2 * 0.25 * legs


def tangential_leg_spacing(b: float, cover: float, diameter: float, legs: int) -> float:
    """Spacing between legs across the width (mm)."""
    return (b - 2 * cover - diameter) / (legs - 1)


def max_link_legs(b: float, cover: float, diameter: float, min_spacing: float) -> int:
    """Most legs that keep the leg spacing at or above min_spacing."""
    available = b - 2 * cover - diameter
    if available <= 0:
        return 0
    return int(available // min_spacing) + 1


def base_link_spacing(d: float, step: float) -> float:
    """Largest multiple of `step` not exceeding 0.75·d, 9.2.2(6)."""
    return float(np.floor(0.75 * d / step) * step)


def minimum_link_ratio(fck: float, fyk: float) -> float:
    """ρw,min = 0.08·√fck / fyk, (9.5N)."""
    return 0.08 * np.sqrt(fck) / fyk


def link_resistance(
    diameter: float,
    legs: int,
    spacing: float,
    z: float,
    fywd: float,
    theta: float
) -> float:
    """V_Rd,s = (Asw/s)·z·fywd·cotθ (6.8), kN."""
    return link_area(diameter, legs) / spacing * z * fywd * (1 / np.tan(theta)) / 1000


def design_links(
    V_Ed: float,
    fyd: float,
    theta: float,
    d: float,
    b: float,
    cover: float,
    link_diameter: float,
    min_link_spacing: float,
    fck: float,
    fyk: float,
    z: float
) -> LinkDesign:
    """
    Choose leg count and spacing for the shear demand.

    Args:
        V_Ed: Shear demand (kN, magnitude)
        fyd: Design yield strength of the links (MPa)
        theta: Strut angle from the capacity search (rad)
        d: Effective depth (mm)
        b: Width (mm)
        cover: Cover (mm)
        link_diameter: Link diameter (mm)
        min_link_spacing: Minimum spacing along the beam and between legs (mm)
        fck: Concrete characteristic strength (MPa)
        fyk: Characteristic yield strength (MPa)
        z: Lever arm (mm)

    Returns:
        LinkDesign; failure is REINFORCEMENT_LAYOUT_INFEASIBLE when the
        section cannot take enough legs.
    """
    step = PARAMETERS['link_spacing_step']
    st_max = min(0.75 * d, PARAMETERS['link_tangential_cap'])
    max_legs = max_link_legs(b, cover, link_diameter, min_link_spacing)
    rho_min = minimum_link_ratio(fck, fyk)
    base_s = base_link_spacing(d, step)

    def outcome(legs: int, s: float, resistance: float = 0.0,
                reason: Optional[LinkFailureReason] = None) -> LinkDesign:
        rho = link_area(link_diameter, legs) / (s * b) if legs > 0 and s > 0 else 0.0
        return LinkDesign(
            diameter=link_diameter, legs=legs, spacing=s, resistance=float(resistance),
            rho=float(rho), rho_min=float(rho_min), st_max=st_max, max_legs=max_legs,
            failure=FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE if reason else None,
            reason=reason,
        )

    # fewer than two legs: fail before any resistance is computed
    if max_legs < 2:
        logger.debug("Width %.0f mm takes %d link legs", b, max_legs)
        return outcome(max_legs, base_s, reason=LinkFailureReason.LEGS_DO_NOT_FIT)

    if base_s < min_link_spacing:
        return outcome(2, base_s, reason=LinkFailureReason.SPACING_BELOW_MINIMUM)

    legs = 2
    while tangential_leg_spacing(b, cover, link_diameter, legs) > st_max:
        if legs >= max_legs:
            return outcome(legs, base_s, reason=LinkFailureReason.LEGS_DO_NOT_FIT)
        legs += 1

    spacing_steps = int((base_s - min_link_spacing) // step) + 1
    max_iterations = (max_legs + 1) * (spacing_steps + 2)

    def tighten(s: float, n: int, reset: float) -> Optional[Tuple[float, int]]:
        if s - step < min_link_spacing:
            if n + 1 > max_legs:
                return None
            return reset, n + 1
        return s - step, n

    # minimum shear reinforcement ratio
    s = base_s
    for _ in range(max_iterations):
        if link_area(link_diameter, legs) / (s * b) >= rho_min:
            break
        tightened = tighten(s, legs, base_s)
        if tightened is None:
            return outcome(legs, s, reason=LinkFailureReason.LEGS_DO_NOT_FIT)
        s, legs = tightened

    base_s = s
    resistance = link_resistance(link_diameter, legs, s, z, fyd, theta)
    for _ in range(max_iterations):
        if resistance >= V_Ed:
            logger.debug("Links: %d legs @ %.0f mm, V_Rd,s = %.1f kN", legs, s, resistance)
            return outcome(legs, s, resistance)
        tightened = tighten(s, legs, base_s)
        if tightened is None:
            break
        s, legs = tightened
        resistance = link_resistance(link_diameter, legs, s, z, fyd, theta)

    return outcome(legs, s, resistance, reason=LinkFailureReason.DEMAND_NOT_MET)
