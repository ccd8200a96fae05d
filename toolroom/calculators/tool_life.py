# toolroom/calculators/tool_life.py
"""
Tool life from the Taylor equation V * T^n = C.

C is the cutting speed (m/min) giving one minute of tool life; it is scaled
by the tool material multiplier before use.
"""
import math
from dataclasses import dataclass

from toolroom.core.numbers import ceil_int, floor_int, round_half_up, safe_div, safe_pow
from toolroom.data.materials import MATERIALS, TAYLOR_STANDARDS, TOOL_TYPES, Material, ToolType

WORKING_DAYS_PER_MONTH = 22
# Tool life that counts as 100 % efficiency
REFERENCE_TOOL_LIFE_MIN = 120


@dataclass(frozen=True)
class ToolLifeResult:
    tool_life_minutes: float
    tool_life_hours: float
    time_per_part: float  # min
    parts_per_tool: int
    tools_per_day: int
    tools_per_month: int
    economic_speed: float  # m/min
    efficiency: float  # %


@dataclass(frozen=True)
class TaylorCheck:
    material_key: str
    material_name: str
    taylor_c: float
    taylor_n: float
    standard_c: tuple[float, float] | None
    standard_n: tuple[float, float] | None
    c_status: str  # below | within | above | unknown
    n_status: str
    source: str


def taylor_tool_life(c: float, n: float, v: float) -> float:
    """T = (C / V)^(1/n) in minutes. Non-positive inputs give 0."""
    if c <= 0 or n <= 0 or v <= 0:
        return 0.0
    try:
        return math.pow(c / v, 1 / n)
    except OverflowError:
        return 0.0


def economic_cutting_speed(c: float, n: float) -> float:
    if c <= 0 or not 0 < n < 1:
        return 0.0
    return c * safe_pow(n / (1 - n), n)


def calculate_tool_life(
    material: Material,
    tool: ToolType,
    cutting_speed: float,
    workpiece_length: float,
    parts_per_day: int,
) -> ToolLifeResult:
    c = material.taylor_c * tool.multiplier
    n = material.taylor_n

    life = taylor_tool_life(c, n, cutting_speed)
    time_per_part = safe_div(workpiece_length / 1000, cutting_speed / 60) * 5
    parts_per_tool = floor_int(safe_div(life, time_per_part))
    tools_per_day = ceil_int(safe_div(parts_per_day, parts_per_tool))

    return ToolLifeResult(
        tool_life_minutes=round_half_up(life, 1),
        tool_life_hours=round_half_up(life / 60, 2),
        time_per_part=round_half_up(time_per_part, 3),
        parts_per_tool=parts_per_tool,
        tools_per_day=tools_per_day,
        tools_per_month=tools_per_day * WORKING_DAYS_PER_MONTH,
        economic_speed=round_half_up(economic_cutting_speed(c, n), 0),
        efficiency=round_half_up(life / REFERENCE_TOOL_LIFE_MIN * 100, 0),
    )


def _range_status(value: float, low: float, high: float) -> str:
    if value < low:
        return "below"
    if value > high:
        return "above"
    return "within"


def check_taylor_constants(
    overrides: dict[str, tuple[float, float]] | None = None,
) -> list[TaylorCheck]:
    """Compare each built-in material's (C, n), or an override, with published ranges."""
    overrides = overrides or {}
    rows = []
    for mat in MATERIALS:
        c, n = overrides.get(mat.key, (mat.taylor_c, mat.taylor_n))
        standard = TAYLOR_STANDARDS.get(mat.key)
        if standard is None:
            rows.append(
                TaylorCheck(mat.key, mat.name, c, n, None, None, "unknown", "unknown", "Referans bulunamadı")
            )
            continue
        rows.append(
            TaylorCheck(
                material_key=mat.key,
                material_name=mat.name,
                taylor_c=c,
                taylor_n=n,
                standard_c=(standard.c_min, standard.c_max),
                standard_n=(standard.n_min, standard.n_max),
                c_status=_range_status(c, standard.c_min, standard.c_max),
                n_status=_range_status(n, standard.n_min, standard.n_max),
                source=standard.source,
            )
        )
    return rows


@dataclass(frozen=True)
class ToolComparisonRow:
    tool_key: str
    tool_name: str
    multiplier: float
    taylor_c: float
    tool_life_minutes: float
    economic_speed: float


def compare_tool_types(material: Material, cutting_speed: float) -> list[ToolComparisonRow]:
    """Tool life of every tool type on one material at one cutting speed."""
    rows = []
    for tool in sorted(TOOL_TYPES, key=lambda t: t.multiplier):
        c = material.taylor_c * tool.multiplier
        rows.append(
            ToolComparisonRow(
                tool_key=tool.key,
                tool_name=tool.name,
                multiplier=tool.multiplier,
                taylor_c=round_half_up(c, 1),
                tool_life_minutes=round_half_up(taylor_tool_life(c, material.taylor_n, cutting_speed), 1),
                economic_speed=round_half_up(economic_cutting_speed(c, material.taylor_n), 0),
            )
        )
    return rows
