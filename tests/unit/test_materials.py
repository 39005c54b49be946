"""
Unit tests for Eurocode 2 material resolution.

Values checked against EN 1992-1-1 Table 3.1 and the UK NA partial factors.
"""

import pytest

from rcbeam.design.materials import (
    CONCRETE_GRADES,
    PARAMETERS,
    MaterialLoaderEC2,
    stress_block_reduction,
)


class TestConcreteTable:
    """Test the packaged concrete grade table."""

    def test_grade_identifiers(self):
        """Test all supported grades are present."""
        assert MaterialLoaderEC2.list_concrete_grades() == [
            "30", "35", "40", "45", "50", "60", "70", "80", "90"
        ]

    def test_c40_50_row(self):
        """Test C40/50 properties per Table 3.1."""
        concrete = MaterialLoaderEC2.get_concrete(40)

        assert concrete.fck == 40
        assert concrete.fck_cube == 50
        assert concrete.fctm == 3.5
        assert concrete.fctk_005 == 2.5
        assert concrete.strength_class == "C40/50"

    @pytest.mark.parametrize("grade, eps", [(50, 3.5), (60, 2.9), (70, 2.7), (80, 2.6), (90, 2.6)])
    def test_ultimate_strains(self, grade, eps):
        """Test ε_cu2 and ε_cu3 per Table 3.1."""
        concrete = MaterialLoaderEC2.get_concrete(grade)
        assert concrete.eps_cu2 == eps
        assert concrete.eps_cu3 == eps

    def test_grade_label_formats(self):
        """Test numeric, string and class label lookups agree."""
        assert MaterialLoaderEC2.get_concrete("C40/50") == MaterialLoaderEC2.get_concrete(40)
        assert MaterialLoaderEC2.get_concrete("40") == MaterialLoaderEC2.get_concrete(40.0)

    def test_unknown_grade(self):
        """Test unknown grade raises error."""
        with pytest.raises(ValueError, match="Unknown concrete grade"):
            MaterialLoaderEC2.get_concrete("C25/30")

    def test_table_is_read_only(self):
        """Test the grade table cannot be modified."""
        with pytest.raises(TypeError):
            CONCRETE_GRADES["100"] = CONCRETE_GRADES["90"]
        with pytest.raises(TypeError):
            PARAMETERS["gamma_c"] = 1.0


class TestMaterialResolver:
    """Test design strength resolution."""

    def test_c40_design_strengths(self):
        """Test fcd, fctd and fyd for C40/50 with fyk = 500 MPa."""
        material = MaterialLoaderEC2.resolve(40, 500)

        assert abs(material.fcd - 0.85 * 40 / 1.5) < 1e-9
        assert abs(material.fctd - 2.5 / 1.5) < 1e-9
        assert abs(material.fyd - 500 / 1.15) < 1e-9
        assert material.strength_reduction == 1.0
        assert not material.capped

    def test_design_strength_below_characteristic(self):
        """Test fcd never exceeds fck / γc for any grade."""
        for grade in MaterialLoaderEC2.list_concrete_grades():
            material = MaterialLoaderEC2.resolve(grade, 500)
            assert material.fcd <= material.fck / material.gamma_c

    @pytest.mark.parametrize("grade", [60, 70, 80, 90])
    def test_high_strength_cap(self, grade):
        """Test grades above C50/60 resolve with C50/60 parameters."""
        material = MaterialLoaderEC2.resolve(grade, 500)
        c50 = MaterialLoaderEC2.get_concrete(50)

        assert material.capped
        assert material.high_strength
        assert material.grade == grade
        assert material.design_grade == 50
        assert material.fck == 50
        assert material.fctm == c50.fctm
        assert material.eps_cu2 == c50.eps_cu2
        assert abs(material.fctd - 2.9 / 1.5) < 1e-9

    @pytest.mark.parametrize("grade", [30, 35, 40, 45, 50])
    def test_normal_grades_use_own_parameters(self, grade):
        """Test grades up to C50/60 resolve with their own row."""
        material = MaterialLoaderEC2.resolve(grade, 500)
        concrete = MaterialLoaderEC2.get_concrete(grade)

        assert not material.capped
        assert material.grade == material.design_grade == grade
        assert material.fck == concrete.fck
        assert material.fctm == concrete.fctm
        assert material.fctk_005 == concrete.fctk_005
        assert material.eps_cu2 == concrete.eps_cu2
        assert material.eps_cu3 == concrete.eps_cu3

    def test_low_yield_rebar_accepted(self):
        """Test any positive rebar yield strength resolves."""
        material = MaterialLoaderEC2.resolve(40, 250)
        assert abs(material.fyd - 250 / 1.15) < 1e-9

    def test_non_positive_fyk(self):
        """Test zero or negative rebar yield strength raises error."""
        with pytest.raises(ValueError, match="must be positive"):
            MaterialLoaderEC2.resolve(40, 0)
        with pytest.raises(ValueError, match="must be positive"):
            MaterialLoaderEC2.resolve(40, -500)

    def test_material_is_frozen(self):
        """Test resolved properties cannot be edited."""
        material = MaterialLoaderEC2.resolve(40, 500)
        with pytest.raises(ValueError):
            material.fck = 30


class TestStressBlockReduction:
    """Test lever arm reduction for high strength concrete."""

    def test_normal_strength(self):
        """Test no reduction up to C50/60."""
        assert stress_block_reduction(30) == 1.0
        assert stress_block_reduction(50) == 1.0

    def test_high_strength_reduces(self):
        """Test reduction below 1 above C50/60 and decreasing with fck."""
        assert stress_block_reduction(70) < 1.0
        assert stress_block_reduction(90) < stress_block_reduction(70)
