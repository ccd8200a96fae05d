# toolroom/data/tolerance.py
from dataclasses import dataclass

IT_GRADES: tuple[str, ...] = (
    "IT01", "IT0", "IT1", "IT2", "IT3", "IT4", "IT5", "IT6",
    "IT7", "IT8", "IT9", "IT10", "IT11", "IT12", "IT13",
)


@dataclass(frozen=True)
class SizeRange:
    low: float  # mm, exclusive
    high: float  # mm, inclusive
    values: tuple[float, ...]  # µm, ordered as IT_GRADES

    @property
    def label(self) -> str:
        return f"{self.low:g}-{self.high:g}"

    def grade(self, grade: str) -> float:
        return self.values[IT_GRADES.index(grade)]


# ISO 286-1 standard tolerance grades (µm)
IT_TABLE: tuple[SizeRange, ...] = (
    SizeRange(1, 3, (0.3, 0.5, 0.8, 1.2, 2, 3, 4, 6, 10, 14, 25, 40, 60, 100, 140)),
    SizeRange(3, 6, (0.4, 0.6, 1, 1.5, 2.5, 4, 5, 8, 12, 18, 30, 48, 75, 120, 180)),
    SizeRange(6, 10, (0.4, 0.6, 1, 1.5, 2.5, 4, 6, 9, 15, 22, 36, 58, 90, 150, 220)),
    SizeRange(10, 18, (0.5, 0.8, 1.2, 2, 3, 5, 8, 11, 18, 27, 43, 70, 110, 180, 270)),
    SizeRange(18, 30, (0.6, 1, 1.5, 2.5, 4, 6, 9, 13, 21, 33, 52, 84, 130, 210, 330)),
    SizeRange(30, 50, (0.6, 1, 1.5, 2.5, 4, 7, 11, 16, 25, 39, 62, 100, 160, 250, 390)),
    SizeRange(50, 80, (0.8, 1, 2, 3, 5, 8, 13, 19, 30, 46, 74, 120, 190, 300, 460)),
    SizeRange(80, 120, (1, 1.5, 2.5, 4, 6, 10, 15, 22, 35, 54, 87, 140, 220, 350, 540)),
    SizeRange(120, 180, (1.2, 2, 3.5, 5, 8, 12, 18, 25, 40, 63, 100, 160, 250, 400, 630)),
    SizeRange(180, 250, (2, 3, 4.5, 7, 10, 14, 20, 29, 46, 72, 115, 185, 290, 460, 720)),
    SizeRange(250, 315, (2.5, 4, 6, 8, 12, 16, 23, 32, 52, 81, 130, 210, 320, 520, 810)),
    SizeRange(315, 400, (3, 5, 7, 9, 13, 18, 25, 36, 57, 89, 140, 230, 360, 570, 890)),
    SizeRange(400, 500, (4, 6, 8, 10, 15, 20, 27, 40, 63, 97, 155, 250, 400, 630, 970)),
)

MAX_NOMINAL_SIZE = IT_TABLE[-1].high


@dataclass(frozen=True)
class FitType:
    code: str
    name: str
    kind: str
    description: str


FIT_TYPES: tuple[FitType, ...] = (
    FitType("H7/h6", "Kayar Geçme", "Geçiş", "Mil deliğe elle kayarak girer. Kılavuz pimleri, hassas sürgüler."),
    FitType("H7/k6", "Sabit Geçme", "Geçiş", "Hafif presle montaj. Dişli göbekleri, kavrama parçaları."),
    FitType("H7/n6", "Sıkı Geçme", "Sıkı", "Presle montaj gerekir. Burçlar, yatak yuvaları."),
    FitType("H7/p6", "Pres Geçme", "Sıkı", "Kuvvetli pres veya ısıtma gerekir. Kalıcı montajlar."),
    FitType("H7/s6", "Büzme Geçme", "Sıkı", "Isıtma/soğutma ile montaj. Ağır yük taşıyan bağlantılar."),
    FitType("H7/f7", "Serbest Döner Geçme", "Boşluklu", "Sürtünmeli yataklar, uzun miller, serbest dönüş."),
    FitType("H7/g6", "Hassas Döner Geçme", "Boşluklu", "Hassas kayar bağlantılar, rulman montajı."),
    FitType("H11/c11", "Gevşek Geçme", "Boşluklu", "Geniş boşluk, kaba montajlar, kaynak yapıları."),
    FitType("H9/d9", "Döner Geçme", "Boşluklu", "Yağlama gerektiren döner bağlantılar, pompa milleri."),
    FitType("H7/e8", "Normal Döner", "Boşluklu", "Redüktör, transmisyon milleri, genel mekanik."),
)


@dataclass(frozen=True)
class SurfaceRoughness:
    grade: str
    ra: float  # µm
    process: str
    application: str


SURFACE_ROUGHNESS: tuple[SurfaceRoughness, ...] = (
    SurfaceRoughness("N1", 0.025, "Süper Finish, Honlama", "Ölçü etalonu, optik yüzeyler"),
    SurfaceRoughness("N2", 0.05, "Honlama, Lepleme", "Hassas rulman yuvaları, conta yüzeyleri"),
    SurfaceRoughness("N3", 0.1, "Lepleme, İnce Taşlama", "Hassas mil yatakları, hidrolik silindir"),
    SurfaceRoughness("N4", 0.2, "İnce Taşlama", "Rulman bilezikleri, hassas dişliler"),
    SurfaceRoughness("N5", 0.4, "Taşlama, İnce Tornalama", "Krank mili, kam mili yatakları"),
    SurfaceRoughness("N6", 0.8, "Taşlama, Hassas Tornalama", "Mil yatakları, piston segman yuvaları"),
    SurfaceRoughness("N7", 1.6, "İnce Tornalama/Frezeleme", "Dişli yüzeyleri, sürgü yüzeyleri"),
    SurfaceRoughness("N8", 3.2, "Tornalama, Frezeleme", "Genel makina parçaları, kapak yüzeyleri"),
    SurfaceRoughness("N9", 6.3, "Kaba Tornalama/Frezeleme", "Yapısal parçalar, kaynak hazırlığı"),
    SurfaceRoughness("N10", 12.5, "Kaba İşleme", "İşlenmemiş yüzeyler, döküm yüzeyleri"),
    SurfaceRoughness("N11", 25, "Testere, Planya", "Kaba yapılar, görünmeyen yüzeyler"),
)


@dataclass(frozen=True)
class GeometricTolerance:
    symbol: str
    name: str
    category: str
    description: str
    typical: str


GEOMETRIC_TOLERANCES: tuple[GeometricTolerance, ...] = (
    GeometricTolerance("⏤", "Düzlük", "Biçim", "Yüzeyin ideal düzlemden max sapması", "0.01 - 0.1 mm"),
    GeometricTolerance("⏊", "Diklik", "Yön", "İki yüzey/eksen arası 90° sapması", "0.02 - 0.1 mm"),
    GeometricTolerance("∥", "Paralellik", "Yön", "İki yüzey/eksen arası paralellik sapması", "0.01 - 0.05 mm"),
    GeometricTolerance("○", "Dairesellik", "Biçim", "Kesit dairesinin idealden sapması", "0.005 - 0.05 mm"),
    GeometricTolerance("⌭", "Silindiriklik", "Biçim", "Silindirik yüzeyin idealden sapması", "0.01 - 0.1 mm"),
    GeometricTolerance("⌀", "Konum (Pozisyon)", "Konum", "Delik/özelliğin ideal konumdan sapması", "0.05 - 0.5 mm"),
    GeometricTolerance("◎", "Eş Merkezlilik", "Konum", "İki eksenin çakışma sapması", "0.01 - 0.05 mm"),
    GeometricTolerance("↗", "Açısallık", "Yön", "Yüzey/eksenin belirli açıdan sapması", "0.02 - 0.1 mm"),
    GeometricTolerance("⌓", "Profil (Hat)", "Biçim", "Eğrisel hattın ideal profilden sapması", "0.02 - 0.2 mm"),
    GeometricTolerance("↺", "Dairesel Salınım", "Salınım", "Eksende dönerken radyal sapma", "0.01 - 0.05 mm"),
    GeometricTolerance("↺↺", "Toplam Salınım", "Salınım", "Tüm yüzey boyunca toplam salınım", "0.02 - 0.1 mm"),
)

# achievable grade and roughness per process
PROCESS_CAPABILITY: tuple[dict, ...] = (
    {"process": "Taşlama", "it": "IT5 - IT7", "ra": "0.1 - 0.8 µm"},
    {"process": "Hassas Tornalama", "it": "IT6 - IT8", "ra": "0.4 - 1.6 µm"},
    {"process": "Frezeleme", "it": "IT7 - IT9", "ra": "0.8 - 3.2 µm"},
    {"process": "Tornalama", "it": "IT8 - IT11", "ra": "1.6 - 6.3 µm"},
    {"process": "Delme", "it": "IT9 - IT12", "ra": "3.2 - 12.5 µm"},
    {"process": "Raybalama", "it": "IT6 - IT8", "ra": "0.4 - 1.6 µm"},
    {"process": "Honlama", "it": "IT4 - IT6", "ra": "0.025 - 0.2 µm"},
    {"process": "Lepleme", "it": "IT3 - IT5", "ra": "0.012 - 0.1 µm"},
)

COST_FACTORS: tuple[dict, ...] = (
    {"grades": "IT13-IT11", "cost": "1x", "label": "Kaba işleme"},
    {"grades": "IT10-IT9", "cost": "2x", "label": "Normal işleme"},
    {"grades": "IT8-IT7", "cost": "4x", "label": "Hassas işleme"},
    {"grades": "IT6-IT5", "cost": "10x", "label": "Çok hassas"},
    {"grades": "IT4 ve altı", "cost": "25x+", "label": "Ultra hassas"},
)

COMMON_APPLICATIONS: tuple[dict, ...] = (
    {"part": "Rulman Yuvası (Delik)", "fit": "H7", "ra": "0.8 µm"},
    {"part": "Rulman Mili", "fit": "k6 / m6", "ra": "0.4 µm"},
    {"part": "Piston Silindiri", "fit": "H7", "ra": "0.2 µm"},
    {"part": "Kayar Yatak Mili", "fit": "f7 / g6", "ra": "0.8 µm"},
    {"part": "Kaplin Bağlantısı", "fit": "H7/k6", "ra": "1.6 µm"},
    {"part": "Vida Deliği", "fit": "H11", "ra": "6.3 µm"},
)


def find_size_range(nominal: float) -> SizeRange | None:
    """Sizes up to 3 mm share the first row; above 500 mm there is none."""
    if not nominal > 0:
        return None
    return next((r for r in IT_TABLE if nominal <= r.high), None)
