# toolroom/data/grinding.py
from dataclasses import dataclass


@dataclass(frozen=True)
class GrindingWheel:
    key: str
    name: str
    abrasive_type: str
    grain_sizes: tuple[str, ...]
    bond_types: tuple[str, ...]
    best_for: tuple[str, ...]
    max_surface_speed: float  # m/s
    temperature_sensitivity: str  # low | medium | high


@dataclass(frozen=True)
class GrindingOperation:
    key: str
    name: str
    description: str
    wheel_speed: tuple[float, float]  # m/s
    work_speed: tuple[float, float]  # m/min
    depth_of_cut: tuple[float, float]  # mm
    feed_rate: tuple[float, float]  # mm/rev or mm/stroke
    cylindrical: bool = False


@dataclass(frozen=True)
class MaterialGrindingParams:
    material_category: str
    recommended_wheels: tuple[str, ...]
    wheel_speed_multiplier: float
    depth_of_cut_multiplier: float
    coolant_required: bool
    surface_finish_ra: tuple[float, float]  # um


@dataclass(frozen=True)
class CoolantType:
    key: str
    name: str
    description: str
    concentration: str


GRINDING_WHEELS: tuple[GrindingWheel, ...] = (
    GrindingWheel(
        "aluminum-oxide",
        "Alüminyum Oksit (Al₂O₃)",
        "Konvansiyonel",
        ("46", "60", "80", "100", "120", "150", "180"),
        ("Vitrified", "Resinoid", "Rubber"),
        ("Çelik", "Dökme demir", "Demir esaslı alaşımlar"),
        35,
        "medium",
    ),
    GrindingWheel(
        "silicon-carbide",
        "Silisyum Karbür (SiC)",
        "Konvansiyonel",
        ("46", "60", "80", "100", "120", "150"),
        ("Vitrified", "Resinoid"),
        ("Demir dışı metaller", "Alüminyum", "Pirinç", "Cam", "Seramik"),
        35,
        "low",
    ),
    GrindingWheel(
        "cbn",
        "Kübik Bor Nitrür (CBN)",
        "Süper Aşındırıcı",
        ("80", "100", "120", "150", "180", "220"),
        ("Vitrified", "Resinoid", "Metal"),
        ("Sertleştirilmiş çelik", "Süper alaşımlar", "Yüksek hız çelikleri"),
        60,
        "low",
    ),
    GrindingWheel(
        "diamond",
        "Elmas",
        "Süper Aşındırıcı",
        ("100", "120", "150", "180", "220", "320"),
        ("Resinoid", "Metal", "Vitrified"),
        ("Karbür", "Seramik", "Cam", "Taş", "Demir dışı metaller"),
        50,
        "high",
    ),
)

GRINDING_OPERATIONS: tuple[GrindingOperation, ...] = (
    GrindingOperation(
        "surface", "Düzlem Taşlama", "Düz yüzeylerin taşlanması",
        (25, 35), (10, 30), (0.005, 0.05), (0.5, 5),
    ),
    GrindingOperation(
        "cylindrical-external", "Silindirik Taşlama (Dış)",
        "Silindirik parçaların dış yüzeylerinin taşlanması",
        (25, 35), (15, 40), (0.005, 0.03), (0.3, 2), cylindrical=True,
    ),
    GrindingOperation(
        "cylindrical-internal", "Silindirik Taşlama (İç)", "Delik ve iç yüzeylerin taşlanması",
        (20, 30), (20, 50), (0.003, 0.02), (0.2, 1), cylindrical=True,
    ),
    GrindingOperation(
        "centerless", "Puntasız Taşlama", "Puntasız silindirik taşlama",
        (25, 35), (15, 60), (0.01, 0.05), (1, 10), cylindrical=True,
    ),
    GrindingOperation(
        "creep-feed", "Yavaş İlerlemeli Taşlama", "Derin kesme ile yavaş ilerleme",
        (20, 30), (0.1, 1), (0.5, 6), (0.1, 0.5),
    ),
)

MATERIAL_GRINDING_PARAMS: tuple[MaterialGrindingParams, ...] = (
    MaterialGrindingParams("Çelik (Yumuşak)", ("aluminum-oxide",), 1.0, 1.0, True, (0.4, 1.6)),
    MaterialGrindingParams("Çelik (Sertleştirilmiş)", ("cbn", "aluminum-oxide"), 0.9, 0.7, True, (0.1, 0.8)),
    MaterialGrindingParams("Paslanmaz Çelik", ("aluminum-oxide", "cbn"), 0.85, 0.8, True, (0.2, 1.2)),
    MaterialGrindingParams("Dökme Demir", ("aluminum-oxide", "silicon-carbide"), 1.1, 1.2, False, (0.8, 3.2)),
    MaterialGrindingParams("Alüminyum", ("silicon-carbide",), 1.2, 1.3, True, (0.4, 1.6)),
    MaterialGrindingParams("Karbür", ("diamond",), 0.8, 0.5, True, (0.05, 0.4)),
    MaterialGrindingParams("Seramik", ("diamond",), 0.7, 0.4, True, (0.05, 0.2)),
    MaterialGrindingParams("Titanyum", ("silicon-carbide", "cbn"), 0.6, 0.5, True, (0.2, 1.0)),
)

COOLANT_TYPES: tuple[CoolantType, ...] = (
    CoolantType("soluble-oil", "Emülsiyon (Suda Çözünür Yağ)", "En yaygın kullanılan soğutucu", "%3-10"),
    CoolantType("synthetic", "Sentetik Soğutucu", "Yağsız, şeffaf çözeltiler", "%2-5"),
    CoolantType("straight-oil", "Saf Yağ", "Yüksek yağlama kapasitesi", "100%"),
)


def find_wheel(key: str) -> GrindingWheel | None:
    return next((w for w in GRINDING_WHEELS if w.key == key), None)


def find_grinding_operation(key: str) -> GrindingOperation | None:
    return next((o for o in GRINDING_OPERATIONS if o.key == key), None)


def find_grinding_params(material_category: str) -> MaterialGrindingParams | None:
    return next((p for p in MATERIAL_GRINDING_PARAMS if p.material_category == material_category), None)
