# toolroom/data/threading.py
"""ISO metric and UNC thread tables, tap types and thread cutting parameters."""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetricThread:
    designation: str
    nominal_diameter: float  # mm
    pitch: float  # mm
    minor_diameter: float  # mm
    pilot_drill_diameter: float  # mm
    thread_depth: float  # mm


@dataclass(frozen=True)
class InchThread:
    designation: str
    nominal_diameter: float  # inch
    tpi: int
    minor_diameter: float  # inch
    pilot_drill_diameter: float  # inch
    pilot_drill_diameter_mm: float


@dataclass(frozen=True)
class ThreadCuttingParams:
    material_category: str
    cutting_speed_min: float  # m/min
    cutting_speed_max: float
    feed_multiplier: float  # x pitch
    recommended_passes: int
    coolant_required: bool


@dataclass(frozen=True)
class TapType:
    key: str
    name: str
    description: str
    speed_multiplier: float
    best_for: tuple[str, ...] = field(default_factory=tuple)


METRIC_COARSE_THREADS: tuple[MetricThread, ...] = (
    MetricThread("M3", 3, 0.5, 2.459, 2.5, 0.307),
    MetricThread("M4", 4, 0.7, 3.242, 3.3, 0.429),
    MetricThread("M5", 5, 0.8, 4.134, 4.2, 0.491),
    MetricThread("M6", 6, 1.0, 4.917, 5.0, 0.613),
    MetricThread("M8", 8, 1.25, 6.647, 6.8, 0.767),
    MetricThread("M10", 10, 1.5, 8.376, 8.5, 0.920),
    MetricThread("M12", 12, 1.75, 10.106, 10.2, 1.074),
    MetricThread("M14", 14, 2.0, 11.835, 12.0, 1.227),
    MetricThread("M16", 16, 2.0, 13.835, 14.0, 1.227),
    MetricThread("M18", 18, 2.5, 15.294, 15.5, 1.534),
    MetricThread("M20", 20, 2.5, 17.294, 17.5, 1.534),
    MetricThread("M22", 22, 2.5, 19.294, 19.5, 1.534),
    MetricThread("M24", 24, 3.0, 20.752, 21.0, 1.840),
    MetricThread("M27", 27, 3.0, 23.752, 24.0, 1.840),
    MetricThread("M30", 30, 3.5, 26.211, 26.5, 2.147),
)

METRIC_FINE_THREADS: tuple[MetricThread, ...] = (
    MetricThread("M6x0.75", 6, 0.75, 5.188, 5.2, 0.460),
    MetricThread("M8x1", 8, 1.0, 6.917, 7.0, 0.613),
    MetricThread("M10x1", 10, 1.0, 8.917, 9.0, 0.613),
    MetricThread("M10x1.25", 10, 1.25, 8.647, 8.8, 0.767),
    MetricThread("M12x1.25", 12, 1.25, 10.647, 10.8, 0.767),
    MetricThread("M12x1.5", 12, 1.5, 10.376, 10.5, 0.920),
    MetricThread("M14x1.5", 14, 1.5, 12.376, 12.5, 0.920),
    MetricThread("M16x1.5", 16, 1.5, 14.376, 14.5, 0.920),
    MetricThread("M18x1.5", 18, 1.5, 16.376, 16.5, 0.920),
    MetricThread("M20x1.5", 20, 1.5, 18.376, 18.5, 0.920),
    MetricThread("M20x2", 20, 2.0, 17.835, 18.0, 1.227),
    MetricThread("M24x2", 24, 2.0, 21.835, 22.0, 1.227),
)

UNC_THREADS: tuple[InchThread, ...] = (
    InchThread("#4-40", 0.112, 40, 0.0813, 0.089, 2.26),
    InchThread("#6-32", 0.138, 32, 0.0997, 0.1065, 2.71),
    InchThread("#8-32", 0.164, 32, 0.1257, 0.1360, 3.45),
    InchThread("#10-24", 0.190, 24, 0.1389, 0.1495, 3.80),
    InchThread("1/4-20", 0.250, 20, 0.1887, 0.201, 5.11),
    InchThread("5/16-18", 0.3125, 18, 0.2443, 0.257, 6.53),
    InchThread("3/8-16", 0.375, 16, 0.2983, 0.3125, 7.94),
    InchThread("7/16-14", 0.4375, 14, 0.3499, 0.368, 9.35),
    InchThread("1/2-13", 0.500, 13, 0.4056, 0.4219, 10.72),
    InchThread("9/16-12", 0.5625, 12, 0.4603, 0.4844, 12.30),
    InchThread("5/8-11", 0.625, 11, 0.5135, 0.5312, 13.49),
    InchThread("3/4-10", 0.750, 10, 0.6273, 0.6562, 16.67),
)

THREAD_STANDARDS = {
    "metric-coarse": METRIC_COARSE_THREADS,
    "metric-fine": METRIC_FINE_THREADS,
    "unc": UNC_THREADS,
}

THREAD_CUTTING_PARAMS: tuple[ThreadCuttingParams, ...] = (
    ThreadCuttingParams("Çelik (Düşük Karbonlu)", 15, 25, 1.0, 4, True),
    ThreadCuttingParams("Çelik (Orta Karbonlu)", 12, 20, 1.0, 5, True),
    ThreadCuttingParams("Çelik (Yüksek Karbonlu)", 8, 15, 1.0, 6, True),
    ThreadCuttingParams("Paslanmaz Çelik", 8, 15, 0.9, 6, True),
    ThreadCuttingParams("Dökme Demir", 15, 25, 1.0, 4, False),
    ThreadCuttingParams("Alüminyum", 40, 80, 1.0, 3, True),
    ThreadCuttingParams("Bronz", 20, 35, 1.0, 4, True),
    ThreadCuttingParams("Pirinç", 25, 45, 1.0, 3, False),
    ThreadCuttingParams("Bakır", 20, 35, 1.0, 4, True),
    ThreadCuttingParams("Titanyum", 5, 12, 0.8, 8, True),
)

TAP_TYPES: tuple[TapType, ...] = (
    TapType(
        "spiral-point",
        "Spiral Point (Uzun Ağızlı)",
        "Talaşları ileri iter, kör delikler için uygun değil",
        1.2,
        ("Geçme delikler", "Seri üretim", "CNC işleme"),
    ),
    TapType(
        "spiral-flute",
        "Spiral Flute (Helis Kanallı)",
        "Talaşları yukarı çıkarır, kör delikler için ideal",
        1.0,
        ("Kör delikler", "Uzun talaş malzemeler", "Alüminyum"),
    ),
    TapType(
        "straight-flute",
        "Straight Flute (Düz Kanallı)",
        "Genel amaçlı, kısa talaş malzemeler için",
        0.9,
        ("Dökme demir", "Bronz", "Pirinç", "Kısa talaş malzemeler"),
    ),
    TapType(
        "form-tap",
        "Form Tap (Talaşsız)",
        "Talaş çıkarmaz, malzemeyi şekillendirir",
        1.5,
        ("Alüminyum", "Bakır", "Düşük karbonlu çelik", "Yüksek mukavemet gereken"),
    ),
)


def find_thread(standard: str, designation: str) -> MetricThread | InchThread | None:
    for thread in THREAD_STANDARDS.get(standard, ()):
        if thread.designation == designation:
            return thread
    return None


def find_thread_params(material_category: str) -> ThreadCuttingParams | None:
    return next((p for p in THREAD_CUTTING_PARAMS if p.material_category == material_category), None)


def find_tap_type(key: str) -> TapType | None:
    return next((t for t in TAP_TYPES if t.key == key), None)
