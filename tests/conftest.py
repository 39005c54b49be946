"""
Shared fixtures: the 350 x 350 mm, C40/50, fyk = 500 MPa reference section.
"""

import pytest

from rcbeam.design.materials import MaterialLoaderEC2
from rcbeam.design.section import DesignOptions, LoadDemand, SectionGeometry


@pytest.fixture
def section():
    return SectionGeometry(b=350, h=350, cover=35)


@pytest.fixture
def material():
    return MaterialLoaderEC2.resolve(40, 500)


@pytest.fixture
def options():
    return DesignOptions()


@pytest.fixture
def light_loads():
    return LoadDemand(M_Ed=10, V_Ed=10, T_Ed=0)
