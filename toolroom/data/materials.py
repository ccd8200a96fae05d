# toolroom/data/materials.py
from dataclasses import dataclass


@dataclass(frozen=True)
class Material:
    key: str
    name: str
    category: str
    hardness: str
    cutting_speed_min: float  # m/min
    cutting_speed_max: float
    feed_rate_min: float  # mm/rev
    feed_rate_max: float
    taylor_n: float
    taylor_c: float
    density: float = 7.85  # g/cm3
    price_per_kg: float | None = None
    custom: bool = False

    @property
    def avg_cutting_speed(self) -> float:
        return (self.cutting_speed_min + self.cutting_speed_max) / 2

    @property
    def avg_feed_rate(self) -> float:
        return (self.feed_rate_min + self.feed_rate_max) / 2


@dataclass(frozen=True)
class ToolType:
    key: str
    name: str
    multiplier: float


@dataclass(frozen=True)
class Operation:
    key: str
    name: str


MATERIALS: tuple[Material, ...] = (
    Material("steel-low", "Düşük Karbonlu Çelik", "Çelik", "120-180 HB", 100, 150, 0.1, 0.4, 0.25, 520),
    Material("steel-medium", "Orta Karbonlu Çelik", "Çelik", "180-250 HB", 100, 150, 0.08, 0.35, 0.22, 400),
    Material("steel-high", "Yüksek Karbonlu Çelik", "Çelik", "250-350 HB", 100, 150, 0.05, 0.25, 0.18, 280),
    Material("stainless", "Paslanmaz Çelik", "Çelik", "150-300 HB", 100, 150, 0.05, 0.2, 0.15, 155, density=7.9),
    Material("aluminum", "Alüminyum Alaşımı", "Hafif Metal", "60-120 HB", 300, 1000, 0.15, 0.6, 0.35, 2800, density=2.7),
    Material("brass", "Pirinç", "Bakır Alaşımı", "80-150 HB", 200, 400, 0.1, 0.5, 0.30, 980, density=8.5),
    Material("bronze", "Bronz", "Bakır Alaşımı", "100-200 HB", 150, 300, 0.08, 0.4, 0.28, 680, density=8.8),
    Material("cast-iron", "Dökme Demir", "Demir", "150-300 HB", 80, 180, 0.1, 0.4, 0.20, 320, density=7.2),
    Material("titanium", "Titanyum Alaşımı", "Özel Metal", "300-400 HB", 30, 80, 0.05, 0.15, 0.12, 86, density=4.43),
    Material("inconel", "Inconel", "Süper Alaşım", "350-450 HB", 15, 40, 0.03, 0.1, 0.10, 42, density=8.44),
)

TOOL_TYPES: tuple[ToolType, ...] = (
    ToolType("hss", "HSS (Yüksek Hız Çeliği)", 0.6),
    ToolType("carbide", "Karbür", 1.0),
    ToolType("coated-carbide", "Kaplamalı Karbür", 1.3),
    ToolType("ceramic", "Seramik", 1.8),
    ToolType("cbn", "CBN", 2.5),
    ToolType("pcd", "PCD (Elmas)", 3.0),
)

OPERATIONS: tuple[Operation, ...] = (
    Operation("turning", "Tornalama"),
    Operation("milling", "Frezeleme"),
    Operation("drilling", "Delme"),
    Operation("boring", "Raybalama"),
)

DEFAULT_TOOL_KEY = "carbide"

_MATERIALS_BY_KEY = {m.key: m for m in MATERIALS}
_TOOLS_BY_KEY = {t.key: t for t in TOOL_TYPES}
_OPERATIONS_BY_KEY = {o.key: o for o in OPERATIONS}


def get_reference_material(key: str) -> Material | None:
    return _MATERIALS_BY_KEY.get(key)


def get_tool_type(key: str) -> ToolType | None:
    return _TOOLS_BY_KEY.get(key)


def get_operation(key: str) -> Operation | None:
    return _OPERATIONS_BY_KEY.get(key)


@dataclass(frozen=True)
class TaylorStandard:
    c_min: float
    c_max: float
    n_min: float
    n_max: float
    source: str


# Published ranges for Taylor constants, per built-in material
TAYLOR_STANDARDS: dict[str, TaylorStandard] = {
    "steel-low": TaylorStandard(400, 600, 0.20, 0.30, "Machinery's Handbook - Low Carbon Steel"),
    "steel-medium": TaylorStandard(300, 450, 0.18, 0.25, "ASM Machining Handbook - Medium Carbon Steel"),
    "steel-high": TaylorStandard(200, 320, 0.15, 0.22, "Sandvik Coromant - High Carbon Steel"),
    "stainless": TaylorStandard(120, 200, 0.12, 0.18, "ASM Machining Handbook - Stainless Steel"),
    "aluminum": TaylorStandard(2000, 3500, 0.30, 0.40, "Machinery's Handbook - Aluminum Alloys"),
    "brass": TaylorStandard(800, 1200, 0.25, 0.35, "ASM Machining Handbook - Brass"),
    "bronze": TaylorStandard(550, 800, 0.24, 0.32, "Machinery's Handbook - Bronze Alloys"),
    "cast-iron": TaylorStandard(250, 400, 0.18, 0.24, "Sandvik Coromant - Cast Iron"),
    "titanium": TaylorStandard(60, 120, 0.10, 0.15, "ASM Machining Handbook - Titanium Alloys"),
    "inconel": TaylorStandard(30, 60, 0.08, 0.12, "Sandvik Coromant - Superalloys"),
}
