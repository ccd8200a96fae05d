# toolroom/calculators/tolerance.py
from dataclasses import dataclass

from toolroom.core.errors import NotFoundError
from toolroom.core.numbers import round_half_up
from toolroom.data.tolerance import IT_GRADES, find_size_range


@dataclass(frozen=True)
class ToleranceResult:
    nominal_size: float  # mm
    grade: str
    size_range: str
    tolerance: float  # µm, full band
    half_band: float  # µm
    tolerance_mm: float
    # basic hole H and basic shaft h limits (mm)
    hole_min: float
    hole_max: float
    shaft_min: float
    shaft_max: float


def calculate_tolerance(nominal_size: float, grade: str = "IT7") -> ToleranceResult | None:
    """
    ISO 286 tolerance band for a nominal size. Returns None when the size is
    not positive or lies above the table.
    """
    if grade not in IT_GRADES:
        raise NotFoundError("Tolerans derecesi bulunamadı.")
    row = find_size_range(nominal_size)
    if row is None:
        return None

    band = row.grade(grade)
    band_mm = band / 1000
    return ToleranceResult(
        nominal_size=nominal_size,
        grade=grade,
        size_range=row.label,
        tolerance=band,
        half_band=round_half_up(band / 2, 1),
        tolerance_mm=round_half_up(band_mm, 4),
        hole_min=nominal_size,
        hole_max=round_half_up(nominal_size + band_mm, 4),
        shaft_min=round_half_up(nominal_size - band_mm, 4),
        shaft_max=nominal_size,
    )
