"""
Integration tests for Eurocode 2 beam section design.

Complete design runs on the 350 x 350 mm, C40/50, fyk = 500 MPa section,
from input models to the returned trace.
"""

import numpy as np
import pytest

from rcbeam.design import CODE_REGISTRY, get_design_code
from rcbeam.design.capacity import THETA_MAX, THETA_MIN
from rcbeam.design.eurocode2 import DesignResult, Eurocode2Code, summarize_designs
from rcbeam.design.section import DesignOptions, LoadDemand, SectionGeometry
from rcbeam.design.trace import CalcStatus, FailureKind


def narratives(result):
    return [entry.narrative for entry in result.trace]


class TestDesignCodeFactory:
    """Test Eurocode 2 integration with design code factory."""

    def test_registry(self):
        """Test the code is registered under its identifier."""
        code = get_design_code("Eurocode 2 EN 1992-1-1:2004 (UK NA)")

        assert isinstance(code, Eurocode2Code)
        assert code.code_units == "SI"
        assert code.code_name in CODE_REGISTRY

    def test_unknown_code(self):
        """Test unknown code raises error."""
        with pytest.raises(ValueError, match="Unknown code"):
            get_design_code("BS 8110")


class TestTypicalSection:
    """Light actions: every check passes."""

    def test_light_loads_pass(self, section, light_loads):
        """Test bending, capacity, concrete and link checks all pass."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, light_loads)

        assert result.status == CalcStatus.PASS
        assert result.failure is None
        assert result.tension.diameter == 16
        assert result.tension.count == 2
        assert result.compression is None
        assert result.links.legs >= 2
        assert result.links.resistance >= light_loads.V_Ed
        assert THETA_MIN <= result.strut_angle <= THETA_MAX
        assert result.additional_torsion_steel == 0

    def test_trace_sequence(self, section, light_loads):
        """Test trace order and statuses."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, light_loads)

        assert narratives(result) == [
            "Geometry",
            "Concrete and reinforcement strength",
            "Bending Reinforcement check",
            "Shear and Torsional max capacity",
            "Shear and Torsional resistance concrete",
            "Shear link requirements",
        ]
        statuses = [entry.status for entry in result.trace]
        assert statuses[2:] == [CalcStatus.PASS] * 4
        assert result.trace[4].conclusion == "No additional torsion reinforcement required"
        assert not any(entry.failed for entry in result.trace)

    def test_idempotent(self, section, light_loads):
        """Test identical inputs give identical results, trace included."""
        code = Eurocode2Code()
        first = code.design_beam_section(section, 40, 500, light_loads)
        second = code.design_beam_section(section, 40, 500, light_loads)

        assert first == second
        assert first.trace == second.trace

    def test_mapping_inputs(self, light_loads):
        """Test plain mappings are accepted for geometry and loads."""
        result = Eurocode2Code().design_beam_section(
            {"b": 350, "h": 350, "cover": 35}, "C40/50", 500, {"M_Ed": 10, "V_Ed": 10}
        )
        assert result.passed

    def test_negative_actions(self, section):
        """Test sagging and hogging moments design the same way."""
        code = Eurocode2Code()
        positive = code.design_beam_section(section, 40, 500, LoadDemand(M_Ed=60, V_Ed=80, T_Ed=5))
        negative = code.design_beam_section(section, 40, 500, LoadDemand(M_Ed=-60, V_Ed=-80, T_Ed=-5))

        assert positive.tension == negative.tension
        assert positive.links == negative.links
        assert [e.expressions for e in positive.trace] == [e.expressions for e in negative.trace]


class TestTerminalFailures:
    """Each terminal failure stops the run with a FAIL entry."""

    def test_concrete_capacity_exceeded(self, section):
        """Test overwhelming moment gives concrete failure and no bars."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, LoadDemand(M_Ed=10000, V_Ed=10))

        assert result.status == CalcStatus.FAIL
        assert result.failure == FailureKind.CONCRETE_CAPACITY_EXCEEDED
        assert result.tension is None
        assert result.compression is None
        assert result.links is None
        assert result.strut_angle is None
        assert result.trace[-1].narrative == "Bending Concrete check"
        assert result.trace[-1].conclusion == "Fail - Concrete failure in beam"
        assert result.trace[-1].failed

    def test_section_capacity_exceeded(self, section):
        """Test overwhelming shear exhausts the strut angle range."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, LoadDemand(M_Ed=10, V_Ed=5000))

        assert result.failure == FailureKind.SECTION_CAPACITY_EXCEEDED
        assert result.tension is None
        assert result.strut_angle is None
        assert result.capacity.strut.theta == THETA_MAX
        assert result.trace[-1].narrative == "Shear and Torsional max capacity"
        assert result.trace[-1].conclusion == "Max capacity of section exceeded, Increase section size"
        # bending passed before the run stopped
        assert result.trace[-2].status == CalcStatus.PASS

    def test_layout_infeasible_narrow_section(self):
        """Test no bar layout fits a 150 mm wide section."""
        narrow = SectionGeometry(b=150, h=350, cover=35)
        result = Eurocode2Code().design_beam_section(narrow, 40, 500, LoadDemand(M_Ed=10, V_Ed=10))

        assert result.failure == FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE
        assert result.trace[-1].conclusion == "Fail - Not able to find suitable reinforcement layout"
        step_entries = [e for e in result.trace if e.narrative.startswith("Increase tension bar")]
        assert len(step_entries) == 4
        assert all(e.status == CalcStatus.NONE for e in step_entries)

    def test_links_cannot_fit(self, section, light_loads):
        """Test link legs that do not fit the width."""
        options = DesignOptions(min_link_spacing=300)
        result = Eurocode2Code().design_beam_section(section, 40, 500, light_loads, options)

        assert result.failure == FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE
        assert result.links is None
        assert result.trace[-1].narrative == "Section cannot accommodate shear link, increase section width"
        assert result.link_design.resistance == 0

    def test_links_cannot_carry_load(self, section):
        """Test shear beyond the densest link arrangement."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, LoadDemand(M_Ed=10, V_Ed=600))

        assert result.failure == FailureKind.REINFORCEMENT_LAYOUT_INFEASIBLE
        assert result.trace[-1].narrative.startswith("Shear link cannot accommodate load")
        assert result.trace[-1].ref == "(6.8)"

    def test_single_fail_entry(self, section):
        """Test a failed run ends at its first FAIL entry."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, LoadDemand(M_Ed=10000))
        fail_positions = [i for i, e in enumerate(result.trace) if e.failed]
        assert fail_positions == [len(result.trace) - 1]


class TestTorsionAndCompression:
    """Runs that need additional steel."""

    def test_additional_torsion_steel(self, section):
        """Test combined shear and torsion above concrete capacity."""
        result = Eurocode2Code().design_beam_section(
            section, 40, 500, LoadDemand(M_Ed=10, V_Ed=50, T_Ed=40)
        )

        assert result.passed
        assert result.additional_torsion_steel > 0
        assert "Additional steel requirements" in narratives(result)
        concrete = result.trace[narratives(result).index("Shear and Torsional resistance concrete")]
        assert concrete.conclusion == "Additional torsional reinforcement required"

    def test_compression_steel(self, section):
        """Test doubly reinforced section."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, LoadDemand(M_Ed=250, V_Ed=50))

        assert result.passed
        assert result.compression is not None
        assert result.tension.area >= result.bending.demand.As_req
        assert result.compression.area >= result.bending.demand.Asc_req


class TestHighStrengthConcrete:
    """Grades above C50/60 are capped for design."""

    def test_cap_note_and_both_grades(self, section, light_loads):
        """Test the cap note follows geometry and both grades are reported."""
        result = Eurocode2Code().design_beam_section(section, 70, 500, light_loads)

        assert result.passed
        assert result.trace[1].ref == "3.1.2(2)P"
        assert result.material.grade == 70
        assert result.material.design_grade == 50
        assert result.summary()["Grade"] == 70

    def test_capped_grade_designs_as_c50(self, section, light_loads):
        """Test C70/85 gives the same reinforcement as C50/60."""
        code = Eurocode2Code()
        capped = code.design_beam_section(section, 70, 500, light_loads)
        c50 = code.design_beam_section(section, 50, 500, light_loads)

        assert capped.tension == c50.tension
        assert capped.links == c50.links


class TestValidation:
    """Invalid inputs are rejected before solving."""

    def test_unknown_grade(self, section, light_loads):
        with pytest.raises(ValueError, match="Unknown concrete grade"):
            Eurocode2Code().design_beam_section(section, 25, 500, light_loads)

    def test_unknown_bar_diameter(self):
        with pytest.raises(ValueError, match="Unknown bar diameter"):
            DesignOptions(min_bar_diameter=14)

    def test_unknown_link_diameter(self):
        with pytest.raises(ValueError, match="Unknown link diameter"):
            DesignOptions(link_diameter=6)

    def test_invalid_geometry(self):
        with pytest.raises(ValueError):
            SectionGeometry(b=60, h=350, cover=35)
        with pytest.raises(ValueError):
            SectionGeometry(b=-350, h=350, cover=35)

    def test_non_positive_fyk(self, section, light_loads):
        with pytest.raises(ValueError, match="must be positive"):
            Eurocode2Code().design_beam_section(section, 40, 0, light_loads)

    def test_low_yield_rebar_designs(self, section, light_loads):
        """Test a 250 MPa rebar is designed, not rejected."""
        result = Eurocode2Code().design_beam_section(section, 40, 250, light_loads)

        assert result.passed
        assert result.material.fyk == 250
        assert result.tension.area >= result.bending.demand.As_req


class TestBatchSummary:
    """Several sections designed independently and tabulated."""

    def test_summary_table(self, section):
        """Test one row per section with status and layout."""
        code = Eurocode2Code()
        results = {
            "B1": code.design_beam_section(section, 40, 500, LoadDemand(M_Ed=10, V_Ed=10)),
            "B2": code.design_beam_section(section, 40, 500, LoadDemand(M_Ed=10000)),
            "B3": code.design_beam_section(section, 40, 500, LoadDemand(M_Ed=120, V_Ed=150, T_Ed=5)),
        }
        df = summarize_designs(results)

        assert list(df["ID"]) == ["B1", "B2", "B3"]
        assert list(df["Status"]) == ["PASS", "FAIL", "PASS"]
        assert df.loc[0, "Tension"] == "2Φ16"
        assert df.loc[1, "Failure"] == "concrete_capacity_exceeded"
        assert df.loc[1, "As_prov"] == 0
        assert np.isnan(df.loc[1, "Theta_deg"])

    def test_sequence_input(self, section, light_loads):
        """Test IDs are numbered from 1 for a plain list."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, light_loads)
        df = summarize_designs([result, result])
        assert list(df["ID"]) == [1, 2]

    def test_trace_table(self, section, light_loads):
        """Test the result trace as a DataFrame."""
        result = Eurocode2Code().design_beam_section(section, 40, 500, light_loads)
        df = result.trace_table()

        assert len(df) == len(result.trace)
        assert df.iloc[0]["Narrative"] == "Geometry"
        assert isinstance(result, DesignResult)
        assert "Shear link requirements  [(6.8)]" in result.details()
