# toolroom/calculators/cutting.py
import math
from dataclasses import dataclass

from toolroom.core.numbers import round_half_up, round_int, safe_div
from toolroom.data.materials import Material, ToolType


@dataclass(frozen=True)
class CuttingResult:
    cutting_speed: float  # m/min
    spindle_speed: int  # rpm
    feed_rate: float  # mm/rev
    table_feed: int  # mm/min
    mrr: float  # cm3/min
    power: float


def spindle_speed(cutting_speed: float, diameter: float) -> float:
    """n = 1000 * Vc / (pi * D). Zero diameter gives 0 rpm."""
    return safe_div(1000 * cutting_speed, math.pi * diameter)


def cutting_speed_from_rpm(rpm: float, diameter: float) -> float:
    return math.pi * diameter * rpm / 1000


def calculate_cutting(
    material: Material,
    tool: ToolType,
    diameter: float,
    depth: float,
) -> CuttingResult:
    vc = material.avg_cutting_speed * tool.multiplier
    feed = material.avg_feed_rate

    n = round_int(spindle_speed(vc, diameter))
    table_feed = round_int(feed * n)
    mrr = round_half_up((depth * (diameter * 0.6) * table_feed) / 1000, 2)
    power = round_half_up((2000 * mrr) / 60, 2)

    return CuttingResult(
        cutting_speed=round_half_up(vc, 0),
        spindle_speed=n,
        feed_rate=round_half_up(feed, 3),
        table_feed=table_feed,
        mrr=mrr,
        power=power,
    )
