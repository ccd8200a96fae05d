# toolroom/calculators/threading.py
import math
from dataclasses import dataclass

from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import round_half_up, round_int, safe_div
from toolroom.data.threading import InchThread, find_tap_type, find_thread, find_thread_params

INCH_MM = 25.4
THREAD_DEPTH_FACTOR = 0.6134
TAPPING_TORQUE_K = 0.0015


@dataclass(frozen=True)
class ThreadingResult:
    designation: str
    diameter: float  # mm
    pitch: float  # mm
    cutting_speed: float  # m/min
    rpm: int
    feed_rate: float  # mm/rev
    torque: float  # Nm
    thread_depth: float  # mm
    pilot_drill: float  # mm
    recommended_passes: int
    coolant_required: bool
    hole_depth: float
    tapping_time: float  # s, one stroke in and out


def metric_thread_depth(pitch: float) -> float:
    return pitch * THREAD_DEPTH_FACTOR


def threading_rpm(cutting_speed: float, diameter: float) -> float:
    return safe_div(cutting_speed * 1000, math.pi * diameter)


def tapping_torque(diameter: float, pitch: float, material_factor: float = 1.0) -> float:
    """Approximate tapping torque in Nm: T = K * d^2 * P * f."""
    return TAPPING_TORQUE_K * diameter**2 * pitch * material_factor


def calculate_threading(
    standard: str,
    designation: str,
    material_category: str,
    tap_type: str,
    hole_depth: float = 15,
) -> ThreadingResult:
    thread = find_thread(standard, designation)
    if thread is None:
        raise NotFoundError(f"Diş bulunamadı: {standard} {designation}")
    params = find_thread_params(material_category)
    if params is None:
        raise NotFoundError(f"Malzeme grubu bulunamadı: {material_category}")
    tap = find_tap_type(tap_type)
    if tap is None:
        raise NotFoundError(f"Kılavuz tipi bulunamadı: {tap_type}")

    if isinstance(thread, InchThread):
        diameter = thread.nominal_diameter * INCH_MM
        pitch = INCH_MM / thread.tpi
        pilot = thread.pilot_drill_diameter_mm
    else:
        diameter = thread.nominal_diameter
        pitch = thread.pitch
        pilot = thread.pilot_drill_diameter

    vc = (params.cutting_speed_min + params.cutting_speed_max) / 2 * tap.speed_multiplier
    rpm = threading_rpm(vc, diameter)
    feed = pitch * params.feed_multiplier
    # in and out at the same feed
    tapping_time = safe_div(hole_depth * 2, rpm * feed) * 60

    return ThreadingResult(
        designation=thread.designation,
        diameter=round_half_up(diameter, 3),
        pitch=round_half_up(pitch, 4),
        cutting_speed=round_half_up(vc, 1),
        rpm=round_int(rpm),
        feed_rate=round_half_up(feed, 3),
        torque=round_half_up(tapping_torque(diameter, pitch), 2),
        thread_depth=round_half_up(metric_thread_depth(pitch), 3),
        pilot_drill=round_half_up(pilot, 2),
        recommended_passes=params.recommended_passes,
        coolant_required=params.coolant_required,
        hole_depth=hole_depth,
        tapping_time=round_half_up(tapping_time, 1),
    )
