# toolroom/calculators/grinding.py
import math
from dataclasses import dataclass

from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import round_half_up, round_int, safe_div, to_int
from toolroom.data.grinding import find_grinding_operation, find_grinding_params, find_wheel


@dataclass(frozen=True)
class GrindingResult:
    wheel_rpm: int
    wheel_surface_speed: float  # m/s
    work_rpm: int
    work_speed: float  # m/min
    depth_of_cut: float  # mm
    feed_rate: float
    mrr: float  # mm3/min
    estimated_ra: float  # um
    achievable_ra_min: float
    achievable_ra_max: float
    coolant_required: bool
    recommended_wheels: tuple[str, ...]
    cylindrical: bool
    wheel_speed_exceeded: bool


def _mean(pair: tuple[float, float]) -> float:
    return (pair[0] + pair[1]) / 2


def wheel_rpm(wheel_diameter: float, surface_speed: float) -> float:
    """Surface speed in m/s, wheel diameter in mm."""
    return safe_div(surface_speed * 60 * 1000, math.pi * wheel_diameter)


def work_rpm(work_diameter: float, work_speed: float) -> float:
    """Work speed in m/min, work diameter in mm."""
    return safe_div(work_speed * 1000, math.pi * work_diameter)


def estimate_surface_roughness(grain_size: int, depth_of_cut: float, feed_rate: float) -> float:
    base = 0.05 + safe_div(1000, grain_size) * 0.01
    return base * (1 + depth_of_cut * 10) * (1 + feed_rate * 0.2)


def calculate_grinding(
    operation: str,
    wheel: str,
    material_category: str,
    wheel_diameter: float,
    wheel_width: float,
    work_diameter: float,
    grain_size: int | str,
) -> GrindingResult:
    op = find_grinding_operation(operation)
    if op is None:
        raise NotFoundError(f"Taşlama operasyonu bulunamadı: {operation}")
    chosen_wheel = find_wheel(wheel)
    if chosen_wheel is None:
        raise NotFoundError(f"Taşlama taşı bulunamadı: {wheel}")
    params = find_grinding_params(material_category)
    if params is None:
        raise NotFoundError(f"Malzeme grubu bulunamadı: {material_category}")

    vs = _mean(op.wheel_speed) * params.wheel_speed_multiplier
    vw = _mean(op.work_speed)
    depth = _mean(op.depth_of_cut) * params.depth_of_cut_multiplier
    feed = _mean(op.feed_rate)

    return GrindingResult(
        wheel_rpm=round_int(wheel_rpm(wheel_diameter, vs)),
        wheel_surface_speed=round_half_up(vs, 1),
        work_rpm=round_int(work_rpm(work_diameter, vw)),
        work_speed=round_half_up(vw, 1),
        depth_of_cut=round_half_up(depth, 4),
        feed_rate=round_half_up(feed, 2),
        mrr=round_half_up(depth * feed * wheel_width, 3),
        estimated_ra=round_half_up(estimate_surface_roughness(to_int(grain_size), depth, feed), 2),
        achievable_ra_min=params.surface_finish_ra[0],
        achievable_ra_max=params.surface_finish_ra[1],
        coolant_required=params.coolant_required,
        recommended_wheels=params.recommended_wheels,
        cylindrical=op.cylindrical,
        wheel_speed_exceeded=vs > chosen_wheel.max_surface_speed,
    )
