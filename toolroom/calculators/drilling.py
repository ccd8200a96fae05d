# toolroom/calculators/drilling.py
import math
from dataclasses import dataclass

from toolroom.core.numbers import round_half_up, round_int, safe_div, safe_pow
from toolroom.data.drilling import DrillType, closest_standard_drill
from toolroom.data.materials import Material

DRILL_SPEED_FACTOR = 0.7
DRILL_FEED_FACTOR = 0.015  # mm/rev per mm of diameter
POINT_LENGTH_FACTOR = 0.3
REAM_SPEED_FACTOR = 0.6
REAM_FEED_FACTOR = 0.1
REAM_ALLOWANCE = 0.3  # mm on diameter

NO_COOLANT_CATEGORIES = ("Dökme Demir", "Demir")


@dataclass(frozen=True)
class DrillingResult:
    rpm: int
    cutting_speed: float  # m/min
    feed_per_rev: float  # mm/rev
    feed_rate: float  # mm/min
    machining_time: float  # s
    thrust_force: float  # N
    torque: float  # Nm
    aspect_ratio: float
    breakage_risk: str
    coolant_required: bool


@dataclass(frozen=True)
class ReamingResult:
    rpm: int
    cutting_speed: float
    feed_per_rev: float
    feed_rate: float
    pre_drill_size: float
    stock_removal: float  # mm per side
    estimated_ra: float  # um
    coolant_required: bool = True


def breakage_risk(diameter: float, depth: float) -> str:
    aspect = safe_div(depth, diameter)
    risk = "Düşük"
    if aspect > 5:
        risk = "Orta"
    if aspect > 8:
        risk = "Yüksek"
    if diameter < 3 and depth > 15:
        risk = "Yüksek"
    return risk


def calculate_drilling(
    material: Material,
    drill: DrillType,
    diameter: float,
    depth: float,
    hole_type: str = "through",
) -> DrillingResult:
    vc = material.avg_cutting_speed * drill.speed_multiplier * DRILL_SPEED_FACTOR
    rpm = safe_div(vc * 1000, math.pi * diameter)
    feed_per_rev = diameter * DRILL_FEED_FACTOR
    feed_rate = rpm * feed_per_rev

    total_depth = depth if hole_type == "blind" else depth + diameter * POINT_LENGTH_FACTOR
    minutes = safe_div(total_depth, feed_rate)

    thrust = 0.5 * safe_pow(diameter, 1.8) * feed_per_rev * 100 if diameter > 0 else 0.0
    torque = 0.1 * diameter * diameter * feed_per_rev * 10

    return DrillingResult(
        rpm=round_int(rpm),
        cutting_speed=round_half_up(vc, 1),
        feed_per_rev=round_half_up(feed_per_rev, 3),
        feed_rate=round_half_up(feed_rate, 1),
        machining_time=round_half_up(minutes * 60, 1),
        thrust_force=round_half_up(thrust, 0),
        torque=round_half_up(torque, 2),
        aspect_ratio=round_half_up(safe_div(depth, diameter), 1),
        breakage_risk=breakage_risk(diameter, depth),
        coolant_required=material.category not in NO_COOLANT_CATEGORIES,
    )


def calculate_reaming(material: Material, final_diameter: float) -> ReamingResult:
    vc = material.avg_cutting_speed * REAM_SPEED_FACTOR
    rpm = safe_div(vc * 1000, math.pi * final_diameter)
    feed_per_rev = final_diameter * REAM_FEED_FACTOR

    drill = closest_standard_drill(final_diameter - REAM_ALLOWANCE)
    stock = (final_diameter - drill) / 2

    return ReamingResult(
        rpm=round_int(rpm),
        cutting_speed=round_half_up(vc, 1),
        feed_per_rev=round_half_up(feed_per_rev, 3),
        feed_rate=round_half_up(rpm * feed_per_rev, 1),
        pre_drill_size=drill,
        stock_removal=round_half_up(stock, 3),
        estimated_ra=round_half_up(0.8 + stock * 2, 2),
    )
