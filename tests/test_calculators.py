# tests/test_calculators.py
from decimal import Decimal

import pytest

from toolroom.calculators.afk_price import AfkPriceInput, calculate_afk_price
from toolroom.calculators.cost import CostInput, calculate_cost
from toolroom.calculators.cutting import calculate_cutting, spindle_speed
from toolroom.calculators.drilling import breakage_risk, calculate_drilling, calculate_reaming
from toolroom.calculators.grinding import calculate_grinding
from toolroom.calculators.salary import annual_summary, gross_to_net, net_to_gross
from toolroom.calculators.threading import calculate_threading
from toolroom.calculators.tolerance import calculate_tolerance
from toolroom.calculators.tool_life import (
    calculate_tool_life,
    check_taylor_constants,
    compare_tool_types,
    taylor_tool_life,
)
from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import money, round_half_up, round_int, to_decimal, to_float
from toolroom.data.drilling import find_drill_type
from toolroom.data.materials import Material, get_reference_material, get_tool_type


@pytest.fixture
def steel():
    return get_reference_material("steel-low")


@pytest.fixture
def carbide():
    return get_tool_type("carbide")


class TestNumberCoercion:
    @pytest.mark.parametrize("raw", ["", "abc", None, "nan", float("nan"), float("inf")])
    def test_invalid_input_becomes_zero(self, raw):
        assert to_float(raw) == 0.0
        assert to_decimal(raw) == Decimal("0")

    def test_comma_decimal_separator(self):
        assert to_float("12,5") == 12.5

    def test_half_up_rounding(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(0.125, 2) == 0.13

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_rounds_to_zero(self, value):
        assert round_half_up(value, 2) == 0.0
        assert round_int(value) == 0

    def test_huge_values_round_without_error(self):
        assert round_half_up(1e308, 2) == 1e308
        assert money(Decimal("1e30") * Decimal("600")) == Decimal("6E+32")
        assert money(Decimal("Infinity")) == Decimal("0")


class TestCutting:
    def test_spindle_speed_reference_value(self):
        assert round(spindle_speed(180, 20)) == 2865

    def test_zero_diameter_gives_zero_rpm(self):
        assert spindle_speed(180, 0) == 0

    def test_steel_with_carbide(self, steel, carbide):
        result = calculate_cutting(steel, carbide, diameter=20, depth=2)

        assert result.cutting_speed == 125
        assert result.spindle_speed == 1989
        assert result.feed_rate == 0.25
        assert result.table_feed == 497
        assert result.mrr == 11.93
        assert result.power == 397.67

    def test_zero_inputs_do_not_raise(self, steel, carbide):
        result = calculate_cutting(steel, carbide, diameter=0, depth=0)
        assert result.spindle_speed == 0
        assert result.table_feed == 0
        assert result.mrr == 0

    def test_overflowing_depth_gives_zero_mrr(self, steel, carbide):
        result = calculate_cutting(steel, carbide, diameter=1, depth=1e308)
        assert result.mrr == 0
        assert result.power == 0


class TestToolLife:
    def test_taylor_reference_value(self):
        assert taylor_tool_life(300, 0.25, 150) == pytest.approx(16)

    @pytest.mark.parametrize("c,n,v", [(0, 0.25, 150), (300, 0, 150), (300, 0.25, 0)])
    def test_degenerate_inputs_give_zero(self, c, n, v):
        assert taylor_tool_life(c, n, v) == 0

    def test_full_result(self, carbide):
        material = Material("test", "Deneme", "Çelik", "", 100, 150, 0.1, 0.4, 0.25, 300)
        result = calculate_tool_life(material, carbide, cutting_speed=150, workpiece_length=150, parts_per_day=50)

        assert result.tool_life_minutes == 16.0
        assert result.tool_life_hours == 0.27
        assert result.time_per_part == 0.3
        assert result.parts_per_tool == 53
        assert result.tools_per_day == 1
        assert result.tools_per_month == 22
        assert result.economic_speed == 228
        assert result.efficiency == 13

    def test_zero_speed_does_not_raise(self, steel, carbide):
        result = calculate_tool_life(steel, carbide, cutting_speed=0, workpiece_length=100, parts_per_day=50)
        assert result.tool_life_minutes == 0
        assert result.parts_per_tool == 0
        assert result.tools_per_day == 0

    def test_comparison_sorted_by_multiplier(self, steel):
        rows = compare_tool_types(steel, 150)
        multipliers = [r.multiplier for r in rows]
        assert multipliers == sorted(multipliers)
        assert rows[0].tool_key == "hss"
        assert rows[-1].tool_key == "pcd"
        # harder tool material lasts longer at the same speed
        assert rows[-1].tool_life_minutes > rows[0].tool_life_minutes

    def test_taylor_check_flags_out_of_range_override(self):
        rows = {r.material_key: r for r in check_taylor_constants({"steel-low": (900, 0.25)})}
        assert rows["steel-low"].c_status == "above"
        assert rows["steel-low"].n_status == "within"
        assert rows["steel-medium"].c_status == "within"


class TestThreading:
    def test_metric_coarse_m10(self):
        result = calculate_threading("metric-coarse", "M10", "Çelik (Düşük Karbonlu)", "spiral-flute")

        assert result.diameter == 10
        assert result.pitch == 1.5
        assert result.pilot_drill == 8.5
        assert result.cutting_speed == 20.0
        assert result.thread_depth == 0.92
        assert result.coolant_required is True
        assert result.rpm == 637

    def test_unc_converted_to_metric(self):
        result = calculate_threading("unc", "1/4-20", "Alüminyum", "spiral-flute")
        assert result.diameter == 6.35
        assert result.pitch == 1.27
        assert result.pilot_drill == 5.11

    @pytest.mark.parametrize(
        "standard,designation,category,tap",
        [
            ("metric-coarse", "M99", "Alüminyum", "spiral-flute"),
            ("metric-coarse", "M10", "Ahşap", "spiral-flute"),
            ("metric-coarse", "M10", "Alüminyum", "unknown-tap"),
        ],
    )
    def test_unknown_selection_raises(self, standard, designation, category, tap):
        with pytest.raises(NotFoundError):
            calculate_threading(standard, designation, category, tap)


class TestDrilling:
    def test_through_hole(self, steel):
        result = calculate_drilling(steel, find_drill_type("hss"), diameter=10, depth=30)

        assert result.cutting_speed == 87.5
        assert result.rpm == 2785
        assert result.feed_per_rev == 0.15
        assert result.aspect_ratio == 3.0
        assert result.breakage_risk == "Düşük"
        assert result.coolant_required is True

    def test_blind_hole_is_faster_than_through(self, steel):
        drill = find_drill_type("hss")
        through = calculate_drilling(steel, drill, 10, 30, "through")
        blind = calculate_drilling(steel, drill, 10, 30, "blind")
        assert blind.machining_time < through.machining_time

    def test_huge_diameter_does_not_raise(self, steel):
        result = calculate_drilling(steel, find_drill_type("hss"), diameter=1e200, depth=1e200)
        assert result.rpm == 0
        assert result.thrust_force == 0

    def test_cast_iron_runs_dry(self):
        cast_iron = get_reference_material("cast-iron")
        result = calculate_drilling(cast_iron, find_drill_type("hss"), 10, 30)
        assert result.coolant_required is False

    @pytest.mark.parametrize(
        "diameter,depth,risk",
        [(10, 30, "Düşük"), (10, 60, "Orta"), (10, 90, "Yüksek"), (2, 16, "Yüksek")],
    )
    def test_breakage_risk(self, diameter, depth, risk):
        assert breakage_risk(diameter, depth) == risk

    def test_reaming_pre_drill_snaps_to_standard_size(self, steel):
        result = calculate_reaming(steel, 10)
        assert result.pre_drill_size == 9.5
        assert result.stock_removal == 0.25
        assert result.estimated_ra == 1.3


class TestGrinding:
    def test_surface_grinding_soft_steel(self):
        result = calculate_grinding("surface", "aluminum-oxide", "Çelik (Yumuşak)", 300, 25, 50, 60)

        assert result.wheel_surface_speed == 30.0
        assert result.wheel_rpm == 1910
        assert result.coolant_required is True
        assert result.cylindrical is False
        assert result.wheel_speed_exceeded is False
        assert "aluminum-oxide" in result.recommended_wheels

    def test_unknown_material_raises(self):
        with pytest.raises(NotFoundError):
            calculate_grinding("surface", "aluminum-oxide", "Ahşap", 300, 25, 50, 60)


class TestCost:
    def test_full_quote(self):
        data = CostInput(
            labor_rate=Decimal("600"),
            turning_rate=Decimal("10"),
            setup_time=Decimal("60"),
            machining_time=Decimal("5"),
            quantity=10,
            tool_cost=Decimal("100"),
            scrap_rate=Decimal("10"),
            profit_margin=Decimal("20"),
        )
        result = calculate_cost(data)

        assert result.machine_cost == Decimal("500.00")
        assert result.total_machining_minutes == Decimal("110.00")
        assert result.labor_cost == Decimal("1100.00")
        assert result.subtotal == Decimal("1700.00")
        assert result.scrap_cost == Decimal("170.00")
        assert result.profit == Decimal("374.00")
        assert result.grand_total == Decimal("2244.00")
        assert result.cost_per_part == Decimal("224.40")

    def test_zero_quantity_gives_zero_cost_per_part(self):
        result = calculate_cost(CostInput(labor_rate=Decimal("600"), setup_time=Decimal("30"), quantity=0))
        assert result.cost_per_part == Decimal("0.00")
        assert result.labor_cost == Decimal("300.00")


class TestSalary:
    def test_minimum_wage_is_tax_free(self):
        result = gross_to_net(Decimal("22104.67"))
        assert result.income_tax == 0
        assert result.stamp_tax == 0
        assert result.rounded()["net_salary"] == Decimal("18788.97")

    def test_non_positive_gross_gives_zero_result(self):
        result = gross_to_net(Decimal("0"))
        assert result.net_salary == 0
        assert result.total_employer_cost == 0

    @pytest.mark.parametrize("month", range(1, 13))
    @pytest.mark.parametrize("previous_base", [Decimal("0"), Decimal("180000"), Decimal("900000")])
    def test_net_is_monotone_in_gross(self, month, previous_base):
        grosses = [Decimal(g) for g in range(10000, 600001, 2500)]
        nets = [gross_to_net(g, month, previous_base=previous_base).net_salary for g in grosses]
        assert all(a <= b for a, b in zip(nets, nets[1:]))

    def test_late_month_bracket_edge(self):
        # crosses a bracket edge
        low = gross_to_net(Decimal("94250"), month=10).net_salary
        high = gross_to_net(Decimal("94500"), month=10).net_salary
        assert high >= low

    def test_declared_base_raises_the_tax(self):
        fresh = gross_to_net(Decimal("100000"))
        later = gross_to_net(Decimal("100000"), previous_base=Decimal("900000"))
        assert later.income_tax > fresh.income_tax
        assert later.net_salary < fresh.net_salary

    def test_net_to_gross_inverts_gross_to_net(self):
        gross = Decimal("50000")
        net = gross_to_net(gross).net_salary
        result = net_to_gross(net)
        assert abs(result.gross_salary - gross) < Decimal("1")
        assert abs(result.net_salary - net) < Decimal("0.01")

    def test_sgk_incentive_lowers_employer_cost(self):
        normal = gross_to_net(Decimal("50000"))
        incentive = gross_to_net(Decimal("50000"), sgk_incentive=True)
        assert incentive.total_employer_cost < normal.total_employer_cost
        assert incentive.net_salary == normal.net_salary

    def test_unknown_year_raises(self):
        with pytest.raises(NotFoundError):
            gross_to_net(Decimal("50000"), year=1999)

    def test_annual_summary_sums_twelve_months(self):
        summary = annual_summary(Decimal("50000"))
        assert len(summary.months) == 12
        assert summary.months[0][0] == "Ocak"
        assert summary.total_gross == Decimal("600000")
        assert summary.total_net == sum(r.net_salary for _, r in summary.months)

    def test_annual_summary_carries_the_declared_base(self):
        summary = annual_summary(Decimal("150000"))
        taxes = [r.income_tax for _, r in summary.months]
        assert taxes[-1] > taxes[0]
        assert summary.months[-1][1].net_salary < summary.months[0][1].net_salary


class TestTolerance:
    def test_grade_lookup(self):
        result = calculate_tolerance(25, "IT7")
        assert result.size_range == "18-30"
        assert result.tolerance == 21
        assert result.half_band == 10.5
        assert result.tolerance_mm == 0.021
        assert (result.hole_min, result.hole_max) == (25, 25.021)
        assert (result.shaft_min, result.shaft_max) == (24.979, 25)

    @pytest.mark.parametrize(
        "size,expected",
        [(0.5, 10), (3, 10), (3.0001, 12), (30, 21), (500, 63)],
    )
    def test_range_edges_are_inclusive_above(self, size, expected):
        assert calculate_tolerance(size, "IT7").tolerance == expected

    @pytest.mark.parametrize("size", [0, -4, 500.5, float("nan")])
    def test_out_of_table_sizes(self, size):
        assert calculate_tolerance(size) is None

    def test_unknown_grade(self):
        with pytest.raises(NotFoundError):
            calculate_tolerance(25, "IT99")


class TestAfkPrice:
    def _input(self, **overrides):
        data = {
            "gross_weight": Decimal("2.5"),
            "net_weight": Decimal("1.2"),
            "price_per_kg": Decimal("10"),
            "afk_multiplier": Decimal("1.5"),
            "density": Decimal("2.7"),
            "has_holes": True,
            "small_holes": 4,
            "large_holes": 2,
            "profit_margin": Decimal("20"),
            "quantity": 10,
        }
        data.update(overrides)
        return AfkPriceInput(**data)

    def test_full_quote(self):
        result = calculate_afk_price(self._input())
        assert result.chip_weight == Decimal("1.300")
        assert result.chip_volume == Decimal("481.48")
        assert result.effective_price_per_kg == Decimal("15.00")
        assert result.chip_cost == Decimal("19.50")
        assert result.small_hole_cost == Decimal("6.00")
        assert result.large_hole_cost == Decimal("2.00")
        assert result.subtotal == Decimal("27.50")
        assert result.profit == Decimal("5.50")
        assert result.unit_total == Decimal("33.00")
        assert result.grand_total == Decimal("330.00")

    def test_holes_ignored_when_switched_off(self):
        result = calculate_afk_price(self._input(has_holes=False))
        assert result.total_hole_cost == Decimal("0.00")
        assert result.unit_total == Decimal("23.40")

    def test_net_above_gross_gives_no_chip(self):
        result = calculate_afk_price(self._input(net_weight=Decimal("3"), has_holes=False))
        assert result.chip_weight == Decimal("0.000")
        assert result.grand_total == Decimal("0.00")

    def test_quantity_at_least_one(self):
        result = calculate_afk_price(self._input(quantity=0))
        assert result.quantity == 1
        assert result.grand_total == result.unit_total

    def test_zero_density_gives_zero_volume(self):
        assert calculate_afk_price(self._input(density=Decimal("0"))).chip_volume == Decimal("0.00")
