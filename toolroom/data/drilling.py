# toolroom/data/drilling.py
from dataclasses import dataclass

# Standard drill sizes (mm)
STANDARD_DRILL_SIZES: tuple[float, ...] = (
    1.0, 1.5, 2.0, 2.5, 3.0, 3.2, 3.3, 3.5, 4.0, 4.2, 4.5, 5.0, 5.2, 5.5,
    6.0, 6.5, 6.8, 7.0, 7.5, 8.0, 8.5, 9.0, 9.5, 10.0, 10.2, 10.5, 11.0,
    12.0, 13.0, 14.0, 15.0, 16.0, 17.0, 18.0, 19.0, 20.0, 21.0, 22.0,
    24.0, 25.0, 26.0, 28.0, 30.0,
)


@dataclass(frozen=True)
class DrillType:
    key: str
    name: str
    speed_multiplier: float
    life_multiplier: float
    best_for: tuple[str, ...]


DRILL_TYPES: tuple[DrillType, ...] = (
    DrillType("hss", "HSS (Yüksek Hız Çeliği)", 1.0, 1.0, ("Genel amaçlı", "Yumuşak çelik", "Alüminyum")),
    DrillType("hss-co", "HSS-Co (Kobaltlı)", 1.2, 1.5, ("Paslanmaz çelik", "Titanyum", "Sert malzemeler")),
    DrillType("carbide", "Karbür", 2.5, 3.0, ("Sert malzemeler", "Yüksek üretim", "CNC işleme")),
    DrillType("carbide-coated", "Kaplamalı Karbür", 3.0, 4.0, ("Sertleştirilmiş çelik", "Süper alaşımlar")),
)

HOLE_TYPES = {
    "through": "Geçme Delik",
    "blind": "Kör Delik",
}


def find_drill_type(key: str) -> DrillType | None:
    return next((d for d in DRILL_TYPES if d.key == key), None)


def closest_standard_drill(size: float) -> float:
    # ties keep the smaller drill
    return min(STANDARD_DRILL_SIZES, key=lambda d: (abs(d - size), d))
