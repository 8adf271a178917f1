"""
Tests for the HRR curves, growth-rate classification and reaction chemistry.
"""
import math

import pytest

from fdsinspect.model.burner import (
    BurnerObst,
    BurnerVent,
    fuel_area,
    get_burners,
    hrr_spec,
    hrrpua,
    total_max_hrr,
)
from fdsinspect.model.combustion import (
    CompositeHrrSpec,
    SimpleHrrSpec,
    StdGrowthRate,
    alpha,
    analyse_hrr_breaches,
    calc_hrr,
    combine_hrr_specs,
    find_matching_growth_rate,
    generate_hrr_curve,
    generate_hrr_rel_diff,
    growth_rate_deviations,
    heat_of_combustion,
    resolved_heat_of_combustion,
    std_hrr_spec,
)
from fdsinspect.model.data_vector import DataVector
from fdsinspect.model.fds import Reaction

from conftest import make_mesh, make_obst, make_vent


class TestCalcHrr:
    """Test the capped t-squared curve"""

    def test_zero_at_and_before_start(self):
        spec = SimpleHrrSpec(tau_q=-100.0, peak=1.0e6)
        assert calc_hrr(spec, 0.0) == 0.0
        assert calc_hrr(spec, -5.0) == 0.0

    def test_quadratic_then_capped(self):
        spec = SimpleHrrSpec(tau_q=-100.0, peak=1.0e6)
        assert calc_hrr(spec, 50.0) == pytest.approx(0.25e6)
        assert calc_hrr(spec, 100.0) == pytest.approx(1.0e6)
        assert calc_hrr(spec, 100.0 + 1e-9) == pytest.approx(1.0e6)
        assert calc_hrr(spec, 500.0) == pytest.approx(1.0e6)

    def test_no_ramp_is_immediate(self):
        assert calc_hrr(SimpleHrrSpec(tau_q=None, peak=2.0e6), 1.0) == 2.0e6
        assert calc_hrr(SimpleHrrSpec(tau_q=0.0, peak=2.0e6), 1.0) == 2.0e6

    def test_generate_curve_in_kilowatts(self):
        curve = generate_hrr_curve(SimpleHrrSpec(tau_q=-100.0, peak=1.0e6), [0.0, 100.0, 200.0])
        assert curve.y_units == "kW"
        assert list(curve.ys) == pytest.approx([0.0, 1000.0, 1000.0])


class TestCombineSpecs:
    """Test reduction of burner specs"""

    def test_equal_ramps_sum(self):
        spec = combine_hrr_specs([SimpleHrrSpec(-150.0, 1.0e6), SimpleHrrSpec(-150.0, 0.5e6)])
        assert spec == SimpleHrrSpec(-150.0, 1.5e6)

    def test_differing_ramps_are_composite(self):
        spec = combine_hrr_specs([SimpleHrrSpec(-150.0, 1.0e6), SimpleHrrSpec(-300.0, 1.0e6)])
        assert isinstance(spec, CompositeHrrSpec)
        assert len(spec.specs) == 2

    def test_nothing_to_combine(self):
        assert combine_hrr_specs([]) is None


class TestGrowthRates:
    """Test classification against the standard growth rates"""

    def test_alpha_values(self):
        assert alpha(StdGrowthRate.NFPA_FAST) == pytest.approx(1055.0 / 150.0 ** 2)
        assert alpha(StdGrowthRate.EUROCODE_SLOW) == pytest.approx(1000.0 / 600.0 ** 2)

    def test_standard_specs_classify_as_themselves(self):
        for growth_rate in StdGrowthRate:
            spec = std_hrr_spec(growth_rate)
            assert growth_rate_deviations(spec)[growth_rate] == pytest.approx(0.0)
            assert find_matching_growth_rate(spec) == growth_rate

    def test_no_match_outside_tolerance(self):
        assert find_matching_growth_rate(SimpleHrrSpec(tau_q=-200.0, peak=1.0e6)) is None

    def test_no_ramp_has_no_alpha(self):
        spec = SimpleHrrSpec(tau_q=None, peak=1.0e6)
        assert spec.alpha is None
        assert find_matching_growth_rate(spec) is None


class TestHeatOfCombustion:
    """Test the stoichiometric heat of combustion"""

    def test_methane(self):
        methane = Reaction(c=1.0, h=4.0)
        expected = 2 * 31.998 * 13100.0 / 16.042 * 1000.0
        assert heat_of_combustion(methane) == pytest.approx(expected)

    def test_yields_reduce_heat(self):
        clean = heat_of_combustion(Reaction(c=1.0, h=1.45, o=0.46, n=0.04))
        sooty = heat_of_combustion(Reaction(c=1.0, h=1.45, o=0.46, n=0.04, soot_yield=0.07, co_yield=0.05))
        assert sooty < clean

    def test_with_soot_and_co_yields(self):
        reaction = Reaction(c=1.0, h=1.45, o=0.46, n=0.04, soot_yield=0.07, co_yield=0.05)
        assert heat_of_combustion(reaction) == pytest.approx(1.932986e7, rel=1e-6)

    def test_soot_hydrogen_fraction_and_epumo2(self):
        reaction = Reaction(c=1.0, h=1.45, o=0.46, n=0.04, soot_yield=0.07, co_yield=0.05,
                            soot_h_fraction=0.2, epumo2=12000.0)
        assert heat_of_combustion(reaction) == pytest.approx(1.765665e7, rel=1e-6)

    def test_empty_formula_raises(self):
        with pytest.raises(ValueError):
            heat_of_combustion(Reaction())

    def test_resolved_prefers_declared_value(self):
        assert resolved_heat_of_combustion(Reaction(c=1.0, h=4.0, heat_of_combustion=2.0e7)) == 2.0e7
        assert resolved_heat_of_combustion(Reaction(c=1.0, h=4.0)) == pytest.approx(
            heat_of_combustion(Reaction(c=1.0, h=4.0)))
        assert resolved_heat_of_combustion(Reaction()) is None


class TestBurners:
    """Test burner discovery and peak HRR"""

    def test_base_model_burner(self, fds_data):
        burners = get_burners(fds_data)
        assert len(burners) == 1
        assert isinstance(burners[0], BurnerVent)
        assert total_max_hrr(fds_data) == pytest.approx(1.055e6)
        assert hrr_spec(fds_data) == SimpleHrrSpec(tau_q=-150.0, peak=1.055e6)

    def test_obstruction_burners_come_first(self, build_model):
        obst = make_obst((1.0, 2.0, 1.0, 3.0, 0.0, 0.5), (1, 2, 1, 3, 0, 1), surfaces={"z_max": "BURNER"})
        vent = make_vent("FIRE", (4.0, 5.0, 4.0, 5.0, 0.0, 0.0), "BURNER", fds_area=1.0)
        fds_data = build_model(meshes=[make_mesh(vents=[vent], obsts=[obst])])
        burners = get_burners(fds_data)
        assert isinstance(burners[0], BurnerObst)
        assert isinstance(burners[1], BurnerVent)
        assert fuel_area(burners[0]) == pytest.approx(2.0)
        assert total_max_hrr(fds_data) == pytest.approx(3 * 1.055e6)

    def test_mlrpua_uses_heat_of_combustion(self, build_model):
        fds_data = build_model(surfaces=[{"id": "BURNER", "mlrpua": 0.02, "tau_q": -150.0}])
        burner = get_burners(fds_data)[0]
        assert hrrpua(fds_data, burner) == pytest.approx(0.02 * 25.0e6)

    def test_mlrpua_without_reaction_releases_nothing(self, build_model):
        fds_data = build_model(surfaces=[{"id": "BURNER", "mlrpua": 0.02}], reacs=[])
        assert hrrpua(fds_data, get_burners(fds_data)[0]) == 0.0

    def test_no_burners(self, build_model):
        fds_data = build_model(surfaces=[])
        assert get_burners(fds_data) == []
        assert hrr_spec(fds_data) is None
        assert total_max_hrr(fds_data) == 0.0


def rel_diff_series(points) -> DataVector:
    xs, ys = zip(*points)
    return DataVector.from_arrays("Time", "HRR Relative Difference", xs, ys)


class TestHrrBreaches:
    """Test detection of the realised HRR leaving its tolerance band"""

    def test_rel_diff_against_prescribed(self):
        spec = SimpleHrrSpec(tau_q=-100.0, peak=1.0e6)
        realised = DataVector.from_arrays("Time", "HRR", [0.0, 50.0, 200.0], [0.0, 275.0, 900.0])
        rel_diff = generate_hrr_rel_diff(spec, realised).ys
        assert math.isnan(rel_diff[0])
        assert rel_diff[1] == pytest.approx(0.1)
        assert rel_diff[2] == pytest.approx(-0.1)

    def test_startup_period_is_ignored(self):
        report = analyse_hrr_breaches(rel_diff_series([(t, 0.5) for t in range(0, 61)]))
        assert not report.occurred

    def test_breach_periods(self):
        points = [(float(t), 0.0) for t in range(61, 200)]
        points = [(t, 0.12 if 100.0 <= t < 115.0 else y) for t, y in points]
        report = analyse_hrr_breaches(rel_diff_series(points))
        assert report.breaches == ((100.0, 115.0),)
        assert report.max_period == pytest.approx(15.0)
        assert report.is_failure

    def test_momentary_breach(self):
        points = [(float(t), 0.15 if 100.0 <= t < 103.0 else 0.02) for t in range(61, 200)]
        report = analyse_hrr_breaches(rel_diff_series(points))
        assert report.occurred
        assert report.max_period == pytest.approx(3.0)
        assert not report.is_failure

    def test_breach_open_at_end_is_closed(self):
        points = [(float(t), 0.5 if t >= 150 else 0.0) for t in range(61, 181)]
        report = analyse_hrr_breaches(rel_diff_series(points))
        assert report.breaches == ((150.0, 180.0),)
        assert report.is_failure

    def test_negative_deviation_counts(self):
        points = [(float(t), -0.2 if 100.0 <= t < 120.0 else 0.0) for t in range(61, 200)]
        assert analyse_hrr_breaches(rel_diff_series(points)).is_failure

    def test_nan_samples_are_within_tolerance(self):
        report = analyse_hrr_breaches(rel_diff_series([(float(t), float("nan")) for t in range(61, 100)]))
        assert not report.occurred
